import pytest

from colonykit.serialization import (
    SerializeMap,
    Variant,
    VariantFactory,
    VariantPtr,
    vec_from_json,
    vec_to_json,
)


class Alpha(Variant):
    def to_json(self):
        return {"kind": "alpha", "id": self.object_id}


class Beta(Variant):
    pass


def test_vec_round_trip():
    assert vec_from_json(vec_to_json((3, -4))) == (3, -4)


def test_vec_to_json_is_list():
    assert vec_to_json((1.5, 2.5)) == [1.5, 2.5]


def test_vec_from_json_too_short():
    with pytest.raises(IndexError):
        vec_from_json([1])


def test_variant_ptr_json():
    v = Variant(7, 3)
    assert v.to_ptr_json() == {"id": 3, "type": 7}


def test_variant_default_json_is_null():
    assert Variant().to_json() is None


def test_variant_ptr_round_trip():
    ptr = VariantPtr()
    ptr.from_json_ptr({"id": 4, "type": 2})
    assert (ptr.object_id, ptr.object_type) == (4, 2)
    assert ptr.to_json_ptr(False) == {"id": 4, "type": 2}


def test_variant_ptr_value_null_without_target():
    ptr = VariantPtr(object_id=1, object_type=1)
    assert ptr.to_json_ptr()["value"] is None
    assert ptr.is_null()
    assert not ptr


def test_variant_ptr_value_from_target():
    a = Alpha(1, 9)
    ptr = VariantPtr(a, 9, 1)
    assert ptr.to_json_ptr(True)["value"] == a.to_json()


def test_variant_ptr_is_valid():
    assert not VariantPtr().is_valid()
    assert VariantPtr(object_type=5).is_valid()


def test_variant_ptr_equality_by_identity():
    a = Alpha()
    b = Alpha()
    assert VariantPtr(a) == a
    assert VariantPtr(a) == VariantPtr(a)
    assert not (VariantPtr(a) == b)
    assert hash(VariantPtr(a)) == hash(VariantPtr(a))


def test_map_add_get_has():
    smap = SerializeMap()
    a = Alpha(1, 0)
    smap.add(1, 0, a)
    assert smap.has(1, 0)
    assert not smap.has(1, 1)
    assert not smap.has(2, 0)
    assert smap.get(1, 0) is a
    assert smap.get(1, 0, Alpha) is a
    assert smap.get(1, 0, Beta) is None
    assert smap.get(3, 0) is None


def test_map_has_json():
    smap = SerializeMap()
    smap.add(2, 5, Beta())
    assert smap.has_json({"type": 2, "id": 5})
    assert not smap.has_json({"type": 5, "id": 2})
    assert not smap.has_json({"id": 5})


def test_map_apply():
    smap = SerializeMap()
    a = Alpha()
    smap.add(1, 3, a)
    ptr = VariantPtr(object_id=3, object_type=1)
    assert smap.apply(ptr)
    assert ptr.target is a
    missing = VariantPtr(object_id=4, object_type=1)
    assert not smap.apply(missing)
    assert missing.is_null()


def test_map_iteration_is_ordered():
    smap = SerializeMap()
    items = {(2, 1): Beta(), (1, 5): Alpha(), (1, 0): Alpha(), (2, 0): Beta()}
    for (t, i), v in items.items():
        smap.add(t, i, v)
    expected = [items[k] for k in sorted(items)]
    assert list(smap) == expected


def test_map_getitem_creates():
    smap = SerializeMap()
    assert smap[4] == {}
    assert 4 in smap.data


def test_factory_creates_sequential_ids():
    factory = VariantFactory()
    factory.register_variant(1, Alpha)
    smap = SerializeMap()
    made = [factory.create(smap, 1) for _ in range(3)]
    assert [m.object_id for m in made] == [0, 1, 2]
    assert all(isinstance(m, Alpha) and m.object_type == 1 for m in made)
    assert [smap.get(1, i) for i in range(3)] == made


def test_factory_explicit_id_registered():
    factory = VariantFactory()
    factory.register_variant(2, Beta)
    smap = SerializeMap()
    b = factory.create(smap, 2, 8)
    assert b.object_id == 8
    assert smap.get(2, 8) is b


def test_factory_unknown_type():
    factory = VariantFactory()
    with pytest.raises(KeyError):
        factory.create(SerializeMap(), 42)


def test_factory_type_lookup_and_list():
    factory = VariantFactory()
    factory.register_variant(3, Beta)
    factory.register_variant(1, Alpha)
    assert factory.variant_type_to_id(Alpha) == 1
    assert factory.variant_type_to_id(Beta) == 3
    assert factory.variant_type_to_id(Variant) == 0
    assert factory.list_types() == [1, 3]


def test_factory_clear_counters():
    factory = VariantFactory()
    factory.register_variant(1, Alpha)
    smap = SerializeMap()
    factory.create(smap, 1)
    factory.create(smap, 1)
    factory.clear_counters()
    assert factory.create(SerializeMap(), 1).object_id == 0