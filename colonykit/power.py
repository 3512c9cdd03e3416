"""Power networks linking the buildings that produce, use and store power."""

from __future__ import annotations

import bisect
import logging
from enum import IntEnum
from typing import Any, Iterable

from colonykit.serialization import SerializeMap, Variant, VariantPtr

logger = logging.getLogger(__name__)


class PowerUse(IntEnum):
    """The role a building plays in a power network."""

    IN = 0
    OUT = 1
    STATION = 2


_NAMES = {PowerUse.IN: "In", PowerUse.OUT: "Out", PowerUse.STATION: "Store"}
_VALUE_ATTRS = {
    PowerUse.IN: "power_in",
    PowerUse.OUT: "power_out",
    PowerUse.STATION: "power_store",
}


def _ptr_key(ptr: VariantPtr) -> tuple[int, int]:
    return (ptr.object_type, ptr.object_id)


class PowerNetwork(Variant):
    """A set of connected buildings sharing produced and stored power.

    Buildings taking part are expected to carry ``power_in``, ``power_out``,
    ``power_store`` and ``network`` attributes.
    """

    def __init__(self, object_id: int = 0, object_type: int = 0) -> None:
        super().__init__(object_type, object_id)
        self.input: list[VariantPtr] = []
        self.output: list[VariantPtr] = []
        self.station: list[VariantPtr] = []
        self.power_in = 0
        self.power_out = 0
        self.power_store = 0
        self.power_value = 0
        self.store_count = 0

    def to_json(self) -> dict:
        """Return the network's buildings (as references) and power values."""
        return {
            "builds": [
                [p.to_json_ptr(False) for p in group]
                for group in (self.output, self.input, self.station)
            ],
            "vals": [
                self.power_out,
                self.power_in,
                self.power_store,
                self.power_value,
                self.store_count,
            ],
        }

    def from_json(self, j: Any) -> None:
        """Read building references and power values written by ``to_json``.

        Raises ``ValueError`` when the JSON lacks a required field.
        """
        try:
            builds = j["builds"]
            groups = []
            for k in range(3):
                group = []
                for pj in builds[k]:
                    ptr: VariantPtr = VariantPtr()
                    ptr.from_json_ptr(pj)
                    group.append(ptr)
                groups.append(group)
            vals = j["vals"]
            values = [int(vals[k]) for k in range(5)]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Can't deserialize PowerNetwork: %s", e)
            raise ValueError(f"can't deserialize PowerNetwork: {e}") from e
        self.output, self.input, self.station = groups
        (
            self.power_out,
            self.power_in,
            self.power_store,
            self.power_value,
            self.store_count,
        ) = values

    def serialize_publish(self, smap: SerializeMap) -> None:
        """Attach the restored buildings to their references."""
        for group in (self.output, self.input, self.station):
            for ptr in group:
                smap.apply(ptr)

    def to_string(self) -> str:
        """Describe the count and power value of every role."""
        parts = ", ".join(
            f"{_NAMES[use]}: {{ Count: {len(self.builds(use))}, "
            f"Value: {self.value(use)} }}"
            for use in PowerUse
        )
        return f"{{ {parts} }}"

    def __str__(self) -> str:
        return self.to_string()

    def builds(self, use: PowerUse) -> list[VariantPtr]:
        """The buildings taking part in the network in role ``use``."""
        if use == PowerUse.OUT:
            return self.output
        if use == PowerUse.STATION:
            return self.station
        return self.input

    def value(self, use: PowerUse) -> int:
        """The network's total power for role ``use``."""
        return getattr(self, _VALUE_ATTRS.get(use, "power_in"))

    def _change_value(self, use: PowerUse, delta: int) -> None:
        attr = _VALUE_ATTRS.get(use, "power_in")
        setattr(self, attr, getattr(self, attr) + delta)

    def add(self, base: Any, use: PowerUse, change_value: bool = True) -> None:
        """Join ``base`` to the network in role ``use``."""
        base.network = self
        if change_value:
            self._change_value(use, self.resource(base, use))
        group = self.builds(use)
        if any(ptr == base for ptr in group):
            return
        ptr = VariantPtr(
            base,
            getattr(base, "object_id", 0),
            getattr(base, "object_type", 0),
        )
        bisect.insort_right(group, ptr, key=_ptr_key)

    def add_many(self, builds: Iterable[Any], use: PowerUse) -> None:
        """Join every building (or reference) in ``builds`` in role ``use``."""
        for b in list(builds):
            self.add(b.target if isinstance(b, VariantPtr) else b, use)

    def add_all_uses(self, base: Any) -> None:
        """Join ``base`` in every role for which it has a non-zero value."""
        for use in PowerUse:
            if self.resource(base, use):
                self.add(base, use)

    def remove(self, base: Any, use: PowerUse) -> None:
        """Take ``base`` out of role ``use``."""
        base.network = None
        self._change_value(use, -self.resource(base, use))
        group = self.builds(use)
        group[:] = [ptr for ptr in group if ptr != base]

    def remove_all_uses(self, base: Any) -> None:
        """Take ``base`` out of every role for which it has a non-zero value."""
        for use in PowerUse:
            if self.resource(base, use):
                self.remove(base, use)

    def clear(self) -> None:
        """Forget every building, leaving the power values as they are."""
        for use in PowerUse:
            self.builds(use).clear()

    @staticmethod
    def resource(base: Any, use: PowerUse) -> int:
        """The power a building brings to role ``use``."""
        return getattr(base, _VALUE_ATTRS.get(use, "power_in"))

    @staticmethod
    def merge(a: "PowerNetwork", b: "PowerNetwork") -> None:
        """Move every building of ``b`` into ``a`` and empty ``b``."""
        for use in PowerUse:
            a.add_many(b.builds(use), use)
        b.clear()