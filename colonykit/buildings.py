"""Building upgrade trees and the buildings placed in the world."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from colonykit.serialization import Variant, VariantPtr, vec_from_json, vec_to_json

logger = logging.getLogger(__name__)

IVec = tuple[int, int]

NULL_INT = -1
NULL_FLOAT = -1.0
NULL_IVEC: IVec = (-1, -1)
IDPAIR_NONE: IVec = (0, 0)
JOB_NONE = 0

WORKPLACE = "WORKPLACE"
HOME = "HOME"


def _num_str(x: float) -> str:
    return f"{x:g}" if isinstance(x, float) else str(x)


def _res_str(res: dict) -> str:
    return "{ " + ", ".join(f"{k}: {v}" for k, v in sorted(res.items())) + " }"


def _res_to_json(res: dict) -> dict:
    return {str(k): v for k, v in res.items()}


def _res_from_json(j: dict) -> dict:
    return {int(k): v for k, v in j.items()}


def _ref_json(obj: Any) -> dict:
    if isinstance(obj, VariantPtr):
        return obj.to_json_ptr(False)
    return obj.to_ptr_json()


def _ptr_from_json(j: dict) -> VariantPtr:
    ptr: VariantPtr = VariantPtr()
    ptr.from_json_ptr(j)
    return ptr


def _compose_name(base: str, pattern: str) -> str:
    """Fill the ``%s`` of an upgrade name with the current name."""
    return pattern.replace("%s", base) if "%s" in pattern else pattern


@dataclass
class Properties:
    """Flag properties and numeric properties of a building."""

    bools: set = field(default_factory=set)
    nums: dict = field(default_factory=dict)

    def append(self, other: "Properties") -> None:
        self.bools |= other.bools
        self.nums.update(other.nums)

    def to_json(self) -> dict:
        return {"bools": sorted(self.bools), "nums": dict(self.nums)}

    @classmethod
    def from_json(cls, j: dict) -> "Properties":
        return cls(set(j.get("bools", [])), dict(j.get("nums", {})))


@dataclass(eq=False)
class UpgradeTree:
    """One step of a building's upgrade tree; unset fields hold null values."""

    id: int = -1
    type: IVec = IDPAIR_NONE
    name: str = ""
    size: IVec = NULL_IVEC
    description: str = ""
    hp: int = NULL_INT
    entity_limit: int = NULL_INT
    image: str = ""
    frames_start: IVec = NULL_IVEC
    frames_end: IVec = NULL_IVEC
    delay_action: float = NULL_FLOAT
    delay_cost: float = NULL_FLOAT
    build: dict = field(default_factory=dict)
    input: dict = field(default_factory=dict)
    output: dict = field(default_factory=dict)
    storage_cap: dict = field(default_factory=dict)
    power_in: int = NULL_INT
    power_out: int = NULL_INT
    power_store: int = NULL_INT
    weight_cap: int = NULL_INT
    alignment: int = NULL_INT
    effect_radius: float = NULL_FLOAT
    upgrade_id: int = -1
    upgrade_parent: int = -1
    upgrade_path: int = -1
    job: int = JOB_NONE
    spawn: Any = None
    props: Properties = field(default_factory=Properties)
    sprite_holders: dict = field(default_factory=dict)
    children: list = field(default_factory=list)

    def get_sprite(self, pos: IVec) -> int:
        """The sprite id of tile ``pos``, or -1 if there is none."""
        sprite = self.sprite_holders.get(tuple(pos))
        if sprite is None:
            logger.error(
                "Sprite at index %s wasn't found in tree with id of %d",
                tuple(pos), self.type[1],
            )
            return -1
        return sprite

    def to_string(self, verbose: bool = True) -> str:
        """Describe the fields that are set."""
        parts: list[str] = []
        if self.id != -1 and verbose:
            parts.append(f"ID : {self.id}, ")
        if self.type != IDPAIR_NONE:
            parts.append(f"Type : {{{self.type[0]}, {self.type[1]}}}, ")
        if self.name:
            parts.append(f"Name : {self.name}, ")
        if self.size != NULL_IVEC:
            parts.append(f"Size x: {self.size[0]} - {self.size[1]}, ")
        if self.description:
            parts.append(f'Description : "{self.description}", ')
        if self.hp >= 0:
            parts.append(f"Hit Points : {self.hp}, ")
        if self.entity_limit > 0:
            parts.append(f"Entity Limit : {self.entity_limit}, ")
        if self.image:
            parts.append(f"Image : {self.image}, ")
        if self.frames_start != NULL_IVEC and verbose:
            parts.append(f"Frames Start: {self.frames_start[0]}-{self.frames_start[1]}, ")
        if self.frames_end != NULL_IVEC and verbose:
            parts.append(f"Frames End: {self.frames_end[0]}-{self.frames_end[1]}, ")
        if self.delay_action >= 0.0:
            parts.append(f"Action timer delay: {_num_str(self.delay_action)}, ")
        if self.delay_cost >= 0.0:
            parts.append(f"Resource timer delay: {_num_str(self.delay_cost)}, ")
        if self.build:
            parts.append(f"Build cost: {_res_str(self.build)}, ")
        if self.input:
            parts.append(f"Resource Input: {_res_str(self.input)}, ")
        if self.output:
            parts.append(f"Resource Output: {_res_str(self.output)}, ")
        if self.power_in != NULL_INT:
            parts.append(f"Power In: {self.power_in}, ")
        if self.power_out != NULL_INT:
            parts.append(f"Power Out: {self.power_out}, ")
        if self.power_store != NULL_INT:
            parts.append(f"Power Store: {self.power_store}, ")
        if self.storage_cap:
            parts.append(f"Resource Storage Cap: {_res_str(self.storage_cap)}, ")
        if self.weight_cap != -1:
            parts.append(f"Resource Storage Weight Cap: {self.weight_cap}\n")
        if self.upgrade_id != -1 and verbose:
            parts.append(f"Upgrade ID {self.upgrade_id}, ")
        if self.upgrade_parent != -1 and verbose:
            parts.append(f"Upgrade Parent : {self.upgrade_parent}, ")
        if self.upgrade_path != -1 and verbose:
            parts.append(f"Upgrade Path : {self.upgrade_path}, ")
        if self.job != JOB_NONE:
            parts.append(f"Job : {self.job}, ")
        if self.props.bools:
            parts.append("Uses: " + ", ".join(str(b) for b in sorted(self.props.bools)) + ", ")
        if self.props.nums:
            parts.append(
                "Properties: "
                + ", ".join(f"{k}: {_num_str(v)}" for k, v in self.props.nums.items())
                + ", "
            )
        text = "{ " + "".join(parts)
        if len(text) > 2:
            text = text[:-2]
        return text + " }"

    def __str__(self) -> str:
        return self.to_string()


def available_upgrades(step: Optional[UpgradeTree], upgrades: list) -> list:
    """The steps of the tree not yet applied whose parents all are."""
    if step is None:
        return []
    if step.upgrade_id not in upgrades:
        return [step]
    ret: list = []
    for child in step.children:
        ret.extend(available_upgrades(child, upgrades))
    return ret


class BuildingBase(Variant):
    """A building: its stats, storage, workers and applied upgrades."""

    def __init__(
        self,
        tile_pos: IVec = (0, 0),
        tree: Optional[UpgradeTree] = None,
        build_type: int = 0,
        object_id: int = 0,
        object_type: int = 0,
    ) -> None:
        super().__init__(object_type, object_id)
        self.id = 0
        self.tile_pos = tuple(tile_pos)
        self.tiles_size: IVec = (1, 1)
        self.name = ""
        self.build_type = build_type
        self.job = JOB_NONE
        self.entities_spawned = 0
        self.spawn: Any = None
        self.alignment = 0
        self.effect_radius = 0.0
        self.weight_cap = NULL_INT
        self.entity_limit = 0
        self.active = True
        self.sufficient = True
        self.r_in: dict = {}
        self.r_out: dict = {}
        self.r_store_cap: dict = {}
        self.power_in = 0
        self.power_out = 0
        self.power_store = 0
        self.props = Properties()
        self.sprites: dict = {}
        self.hp = 0
        self.last_hp = 0
        self.operational = True
        self.flag_delete = False
        self.entities: list = []
        self.stored_entities: list = []
        self.cost_delay = 1.0
        self.action_delay = 1.0
        self.anim_frame = 0
        self.r_storage: dict = {}
        self.r_pending: dict = {}
        self.power_value = 0
        self.last_power_out = 0
        self.final_power_out = 0
        self.binded: list = []
        self.network: Any = None
        self.update_info = False
        self.followers: list = []
        self.upgrades: list = []
        self.tree = tree
        if tree is not None:
            self.load_upgrade_step(tree)

    def load_upgrade_step(self, step: Optional[UpgradeTree]) -> None:
        """Apply the set fields of ``step``; a step already applied is ignored."""
        if step is None:
            return
        if step.upgrade_id in self.upgrades:
            logger.warning(
                'Upgrade "%d" name: "%s" has already applied', step.upgrade_id, step.name
            )
            return

        self.id = step.type[1]
        self.upgrades.append(step.upgrade_id)
        if step.size != NULL_IVEC:
            self.tiles_size = tuple(step.size)
        if step.name:
            self.name = _compose_name(self.name, step.name) if self.name else step.name
        if step.hp != NULL_INT:
            self.hp = self.last_hp = step.hp
        if step.alignment != NULL_INT:
            self.alignment = step.alignment
        if step.entity_limit != NULL_INT:
            self.entity_limit = step.entity_limit
        if step.delay_cost != NULL_FLOAT:
            self.cost_delay = step.delay_cost
        if step.delay_action != NULL_FLOAT:
            self.action_delay = step.delay_action
        if step.effect_radius != NULL_FLOAT:
            self.effect_radius = step.effect_radius
        if step.weight_cap != NULL_INT:
            self.weight_cap = step.weight_cap
        if step.job != JOB_NONE:
            self.job = step.job
        for attr in ("power_out", "power_in", "power_store"):
            value = getattr(step, attr)
            if value != NULL_INT:
                setattr(self, attr, value)
        if step.input:
            self.r_in = dict(step.input)
        if step.output:
            self.r_out = dict(step.output)
        if step.storage_cap:
            self.r_store_cap = dict(step.storage_cap)
        if step.spawn is not None:
            self.spawn = step.spawn
        if step.upgrade_id == 0:
            self.sprites.update(step.sprite_holders)
        else:
            logger.warning("Sprites upgrade unimplemented")
        self.props.append(step.props)

    def tree_similar(self, other: Optional["BuildingBase"]) -> bool:
        """True when ``other`` is the same kind of building with the same upgrades."""
        if other is None:
            return False
        if other is self:
            return True
        if self.build_type != other.build_type:
            return False
        if len(self.upgrades) != len(other.upgrades):
            return False
        return all(a in other.upgrades for a in self.upgrades)

    def damage(self, attack: int) -> None:
        self.hp -= attack

    @staticmethod
    def format_name(name: str) -> str:
        """A building name for display: underscores become spaces."""
        return _compose_name("", name).replace("_", " ")

    def get_format_name(self) -> str:
        return self.format_name(self.name)

    def center_pos(self) -> tuple[float, float]:
        """The centre of the building's area, in tiles."""
        return (
            self.tile_pos[0] + self.tiles_size[0] / 2.0,
            self.tile_pos[1] + self.tiles_size[1] / 2.0,
        )

    def get_upgrades(self) -> list:
        """The upgrade steps that can be applied next."""
        return available_upgrades(self.tree, self.upgrades) if self.tree else []

    def is_operational(self) -> bool:
        """A workplace needs a worker inside; any building must be active and supplied."""
        if (
            WORKPLACE in self.props.bools
            and self.entity_limit > 0
            and not self.stored_entities
        ):
            return False
        return self.active and self.sufficient

    def to_json(self) -> dict:
        j = {
            "id": self.id,
            "tilePos": vec_to_json(self.tile_pos),
            "tilesSize": vec_to_json(self.tiles_size),
            "name": self.name,
            "buildType": self.build_type,
            "job": self.job,
            "entitiesSpawned": self.entities_spawned,
            "spawn": self.spawn,
            "alignment": self.alignment,
            "effectRadius": self.effect_radius,
            "weightCap": self.weight_cap,
            "entityLimit": self.entity_limit,
            "active": self.active,
            "sufficient": self.sufficient,
            "rIn": _res_to_json(self.r_in),
            "rOut": _res_to_json(self.r_out),
            "rStoreCap": _res_to_json(self.r_store_cap),
            "powerIn": self.power_in,
            "powerOut": self.power_out,
            "powerStore": self.power_store,
            "props": self.props.to_json(),
            "sprites": [[vec_to_json(k), v] for k, v in self.sprites.items()],
            "hp": self.hp,
            "lastHp": self.last_hp,
            "operational": self.operational,
            "flagDelete": self.flag_delete,
            "entities": [_ref_json(e) for e in self.entities],
            "storedEntities": [_ref_json(e) for e in self.stored_entities],
            "costTimer": {"length": self.cost_delay},
            "actionTimer": {"length": self.action_delay},
            "animFrame": self.anim_frame,
            "rStorage": _res_to_json(self.r_storage),
            "rPending": _res_to_json(self.r_pending),
            "powerValue": self.power_value,
            "lastPowerOut": self.last_power_out,
            "finalPowerOut": self.final_power_out,
            "binded": [_ref_json(b) for b in self.binded],
            "updateInfo": self.update_info,
            "followers": [_ref_json(f) for f in self.followers],
            "upgrades": list(self.upgrades),
        }
        if self.network is not None:
            j["network"] = _ref_json(self.network)
        return j

    def from_json(self, j: Any) -> None:
        """Read the fields written by ``to_json``; references keep only ids.

        Raises ``ValueError`` when a required field is missing or malformed.
        """
        try:
            self.id = j["id"]
            self.tile_pos = vec_from_json(j["tilePos"])
            self.tiles_size = vec_from_json(j["tilesSize"])
            self.name = j["name"]
            self.build_type = j["buildType"]
            self.job = j["job"]
            self.entities_spawned = j["entitiesSpawned"]
            self.spawn = j["spawn"]
            self.alignment = j["alignment"]
            self.effect_radius = j["effectRadius"]
            self.weight_cap = j["weightCap"]
            self.entity_limit = j["entityLimit"]
            self.active = j["active"]
            self.sufficient = j["sufficient"]
            self.r_in = _res_from_json(j["rIn"])
            self.r_out = _res_from_json(j["rOut"])
            self.r_store_cap = _res_from_json(j["rStoreCap"])
            self.power_in = j["powerIn"]
            self.power_out = j["powerOut"]
            self.power_store = j["powerStore"]
            self.props = Properties.from_json(j["props"])
            self.sprites = {vec_from_json(k): v for k, v in j["sprites"]}
            self.hp = j["hp"]
            self.last_hp = j["lastHp"]
            self.operational = j["operational"]
            self.flag_delete = j["flagDelete"]
            self.entities = [_ptr_from_json(e) for e in j["entities"]]
            self.stored_entities = [_ptr_from_json(e) for e in j["storedEntities"]]
            self.cost_delay = j["costTimer"]["length"]
            self.action_delay = j["actionTimer"]["length"]
            self.anim_frame = j["animFrame"]
            self.r_storage = _res_from_json(j["rStorage"])
            self.r_pending = _res_from_json(j["rPending"])
            self.power_value = j["powerValue"]
            self.last_power_out = j["lastPowerOut"]
            self.final_power_out = j["finalPowerOut"]
            if "binded" in j:
                self.binded = [_ptr_from_json(b) for b in j["binded"]]
            if "network" in j:
                self.network = _ptr_from_json(j["network"])
            self.update_info = j["updateInfo"]
            if "followers" in j:
                self.followers = [_ptr_from_json(f) for f in j["followers"]]
            if "upgrades" in j:
                self.upgrades = list(j["upgrades"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Can't deserialize BuildingBase: %s", e)
            raise ValueError(f"can't deserialize BuildingBase: {e}") from e