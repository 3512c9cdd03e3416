"""Game bodies and the links between a body and the bodies following it."""

from __future__ import annotations

from typing import Optional

from colonykit.serialization import Variant, VariantPtr


class GameBody(Variant):
    """A body in the world that can target another body.

    Every body keeps the list of bodies that have it as their target.
    """

    def __init__(
        self,
        object_type: int = 0,
        object_id: int = 0,
        pos: tuple[float, float] = (0.0, 0.0),
        alignment: int = 0,
    ) -> None:
        super().__init__(object_type, object_id)
        self.pos = pos
        self.alignment = alignment
        self.target: Optional[GameBody] = None
        self.followers: list[VariantPtr[GameBody]] = []

    def set_target(self, new_target: Optional["GameBody"], skip_old: bool = False) -> None:
        """Target ``new_target`` (or nothing), keeping follower lists in step.

        Raises ``ValueError`` if a body would target itself.
        """
        if new_target is self or self.target is self:
            raise ValueError("a body can't be its own target")
        if self.target is new_target:
            return

        if self.target is not None:
            self.target.followers = [
                ptr for ptr in self.target.followers if ptr != self
            ]

        if new_target is not None and not any(
            ptr == self for ptr in new_target.followers
        ):
            new_target.followers.append(
                VariantPtr(self, self.object_id, self.object_type)
            )

        self.target = new_target