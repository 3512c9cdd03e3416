import json

import pytest

from colonykit.buildings import (
    WORKPLACE,
    BuildingBase,
    Properties,
    UpgradeTree,
    available_upgrades,
)
from colonykit.serialization import VariantPtr


def make_tree():
    root = UpgradeTree(
        type=(3, 7), name="HOUSE", size=(2, 2), hp=100, entity_limit=4,
        upgrade_id=0, input={0: 2}, power_in=5, sprite_holders={(0, 0): 11},
        props=Properties({"HOME"}, {}),
    )
    a = UpgradeTree(name="BIG_%s", upgrade_id=1, hp=200)
    b = UpgradeTree(name="RED_%s", upgrade_id=2)
    a2 = UpgradeTree(name="HUGE", upgrade_id=3)
    a.children.append(a2)
    root.children.extend([a, b])
    return root, a, b, a2


def test_empty_tree_string():
    assert UpgradeTree().to_string(False) == "{  }"


def test_name_only_string():
    assert UpgradeTree(name="HOME").to_string(False) == "{ Name : HOME }"


def test_verbose_shows_ids():
    tree = UpgradeTree(id=4, upgrade_id=2)
    assert "ID : 4" in tree.to_string(True)
    assert "ID" not in tree.to_string(False)


def test_get_sprite():
    root, *_ = make_tree()
    assert root.get_sprite((0, 0)) == 11
    assert root.get_sprite((1, 1)) == -1


def test_available_upgrades():
    root, a, b, a2 = make_tree()
    assert available_upgrades(root, []) == [root]
    assert available_upgrades(root, [0]) == [a, b]
    assert available_upgrades(root, [0, 1]) == [a2, b]
    assert available_upgrades(None, [0]) == []


def test_load_root_step():
    root, *_ = make_tree()
    b = BuildingBase((1, 2), root)
    assert b.name == root.name
    assert b.hp == root.hp and b.last_hp == root.hp
    assert b.tiles_size == root.size
    assert b.entity_limit == root.entity_limit
    assert b.r_in == root.input
    assert b.power_in == root.power_in
    assert b.sprites == root.sprite_holders
    assert b.id == root.type[1]
    assert "HOME" in b.props.bools
    assert b.upgrades == [0]


def test_upgrade_composes_name_and_ignores_repeat():
    root, a, b_step, _ = make_tree()
    b = BuildingBase((0, 0), root)
    b.load_upgrade_step(a)
    assert b.name == "BIG_HOUSE"
    assert b.hp == a.hp
    b.load_upgrade_step(a)
    assert b.upgrades == [0, 1]
    assert b.name == "BIG_HOUSE"
    assert b.get_format_name() == "BIG HOUSE"


def test_get_upgrades():
    root, a, b_step, a2 = make_tree()
    b = BuildingBase((0, 0), root)
    assert b.get_upgrades() == [a, b_step]
    b.load_upgrade_step(a)
    assert b.get_upgrades() == [a2, b_step]
    assert BuildingBase().get_upgrades() == []


def test_tree_similar():
    root, a, *_ = make_tree()
    x = BuildingBase((0, 0), root, build_type=1)
    y = BuildingBase((5, 5), root, build_type=1)
    z = BuildingBase((5, 5), root, build_type=2)
    assert x.tree_similar(y)
    assert x.tree_similar(x)
    assert not x.tree_similar(z)
    assert not x.tree_similar(None)
    y.load_upgrade_step(a)
    assert not x.tree_similar(y)


def test_damage_and_center():
    root, *_ = make_tree()
    b = BuildingBase((1, 2), root)
    b.damage(30)
    assert b.hp == root.hp - 30
    assert b.center_pos() == (1 + root.size[0] / 2, 2 + root.size[1] / 2)


def test_format_name():
    assert BuildingBase.format_name("MINERS_POST") == "MINERS POST"


def test_is_operational():
    b = BuildingBase()
    assert b.is_operational()
    b.props.bools.add(WORKPLACE)
    b.entity_limit = 2
    assert not b.is_operational()
    b.stored_entities.append(VariantPtr(None, 1, 4))
    assert b.is_operational()
    b.sufficient = False
    assert not b.is_operational()


def test_json_round_trip():
    root, a, *_ = make_tree()
    b = BuildingBase((3, 4), root, build_type=2, object_id=9, object_type=5)
    b.load_upgrade_step(a)
    b.r_storage = {1: 8}
    b.entities.append(VariantPtr(None, 2, 6))
    b.network = VariantPtr(None, 1, 3)
    j = json.loads(json.dumps(b.to_json()))
    c = BuildingBase()
    c.from_json(j)
    assert c.to_json() == b.to_json()
    assert c.tile_pos == (3, 4)
    assert c.r_storage == {1: 8}
    assert c.entities[0].object_id == 2
    assert c.upgrades == b.upgrades


def test_from_json_missing_field():
    j = BuildingBase().to_json()
    del j["hp"]
    with pytest.raises(ValueError):
        BuildingBase().from_json(j)