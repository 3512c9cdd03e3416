"""Serializable game objects and the registry used to rebuild them from JSON."""

from __future__ import annotations

import logging
from typing import Any, Generic, Iterator, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Variant")


def vec_to_json(v: Sequence[Any]) -> list:
    """Encode a 2D vector as a two element JSON array."""
    return [v[0], v[1]]


def vec_from_json(j: Sequence[Any]) -> tuple:
    """Decode a two element JSON array into an ``(x, y)`` tuple."""
    return (j[0], j[1])


class Variant:
    """Base of every object that can be saved and restored by type and id.

    Restoring runs in three stages: ``from_json`` fills the object's own
    fields, ``serialize_publish`` resolves references to other variants, and
    ``serialize_initialize`` does work that needs the other variants ready.
    ``initialized`` records whether either way of setting up has finished.
    """

    def __init__(self, object_type: int = 0, object_id: int = 0) -> None:
        self.object_type = object_type
        self.object_id = object_id
        self.initialized = False

    def variant_initialize(self) -> None:
        """Initialise with defaults when not restoring from JSON."""
        self.initialized = True

    def to_ptr_json(self) -> dict:
        """Return the reference form of this object: its id and type."""
        return {"id": self.object_id, "type": self.object_type}

    def to_json(self) -> Any:
        """Return the object's full JSON form."""
        return None

    def from_json(self, j: Any) -> None:
        """Fill the object's own fields from JSON."""

    def serialize_publish(self, smap: "SerializeMap") -> None:
        """Resolve references to other variants after ``from_json``."""

    def serialize_initialize(self, smap: "SerializeMap") -> None:
        """Finish set-up that depends on other restored variants."""
        self.initialized = True


class VariantPtr(Generic[T]):
    """A reference to a variant that may, while loading, hold only its id."""

    def __init__(
        self,
        target: Optional[T] = None,
        object_id: int = 0,
        object_type: int = 0,
    ) -> None:
        self.target = target
        self.object_id = object_id
        self.object_type = object_type

    def __bool__(self) -> bool:
        return self.target is not None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VariantPtr):
            return self.target is other.target
        return self.target is other

    def __hash__(self) -> int:
        return hash(id(self.target))

    def __repr__(self) -> str:
        return (
            f"VariantPtr(type={self.object_type}, id={self.object_id}, "
            f"target={self.target!r})"
        )

    def is_null(self) -> bool:
        """True when no object is attached."""
        return self.target is None

    def is_valid(self) -> bool:
        """True when the reference names a type."""
        return self.object_type != 0

    def from_json_ptr(self, j: dict) -> None:
        """Read the id and type of the referenced object."""
        self.object_id = int(j["id"])
        self.object_type = int(j["type"])

    def to_json_ptr(self, with_value: bool = True) -> dict:
        """Write the reference, and the referenced object's value if asked."""
        j: dict = {"id": self.object_id, "type": self.object_type}
        if with_value:
            j["value"] = self.target.to_json() if self.target is not None else None
        return j


class SerializeMap:
    """All restored variants, indexed by type and then by id."""

    def __init__(self) -> None:
        self.data: dict[int, dict[int, Variant]] = {}

    def add(self, type_id: int, object_id: int, variant: Variant) -> None:
        """Register ``variant`` under ``type_id`` and ``object_id``."""
        self.data.setdefault(type_id, {})[object_id] = variant

    def has(self, type_id: int, object_id: int) -> bool:
        """True when a variant is registered under the pair."""
        return object_id in self.data.get(type_id, {})

    def has_json(self, j: dict) -> bool:
        """True when the reference in ``j`` names a registered variant."""
        if "type" not in j or "id" not in j:
            return False
        return self.has(int(j["type"]), int(j["id"]))

    def get(self, type_id: int, object_id: int, cls: type = Variant) -> Optional[Variant]:
        """Return the variant under the pair if it is an instance of ``cls``."""
        found = self.data.get(type_id, {}).get(object_id)
        return found if isinstance(found, cls) else None

    def apply(self, ptr: VariantPtr, cls: type = Variant) -> bool:
        """Attach to ``ptr`` the object its id and type name; report success."""
        ptr.target = self.get(ptr.object_type, ptr.object_id, cls)
        return ptr.target is not None

    def __iter__(self) -> Iterator[Variant]:
        for type_id in sorted(self.data):
            by_id = self.data[type_id]
            for object_id in sorted(by_id):
                yield by_id[object_id]

    def __getitem__(self, type_id: int) -> dict[int, Variant]:
        return self.data.setdefault(type_id, {})


class VariantFactory:
    """Creates variants of registered classes by type id and numbers them."""

    def __init__(self) -> None:
        self._classes: dict[int, type] = {}
        self._counters: dict[int, int] = {}

    def register_variant(self, type_id: int, cls: type) -> None:
        """Make ``cls`` the class created for ``type_id``."""
        self._classes[type_id] = cls

    def create(
        self, smap: SerializeMap, type_id: int, object_id: Optional[int] = None
    ) -> Variant:
        """Create and register a variant; without an id the next free one is used.

        Raises ``KeyError`` if no class is registered for ``type_id``.
        """
        if object_id is None:
            counter = self._counters.setdefault(type_id, 0)
            self._counters[type_id] = counter + 1
            object_id = counter

        cls = self._classes.get(type_id)
        if cls is None:
            available = ", ".join(str(t) for t in sorted(self._classes))
            logger.error(
                "Variant of type id %d in VariantFactory was not found. "
                "Available are: %s.",
                type_id,
                available,
            )
            raise KeyError(f"variant type {type_id} is not registered")

        self._counters[type_id] = max(self._counters.get(type_id, 0), object_id)

        variant = cls()
        variant.object_id = object_id
        variant.object_type = type_id
        smap.add(type_id, object_id, variant)
        return variant

    def variant_type_to_id(self, cls: type) -> int:
        """Return the type id registered for ``cls``, or 0 if none."""
        for type_id in sorted(self._classes):
            if self._classes[type_id] is cls:
                return type_id
        return 0

    def list_types(self) -> list[int]:
        """Return the registered type ids in order."""
        return sorted(self._classes)

    def clear_counters(self) -> None:
        """Forget the id counters of every type."""
        self._counters.clear()