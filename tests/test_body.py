import pytest

from colonykit.body import GameBody


def _bodies():
    return GameBody(3, 1), GameBody(3, 2), GameBody(4, 7)


def test_set_target_adds_follower():
    a, b, _ = _bodies()
    a.set_target(b)
    assert a.target is b
    assert [ptr.target for ptr in b.followers] == [a]
    assert b.followers[0].object_id == a.object_id
    assert b.followers[0].object_type == a.object_type


def test_retarget_moves_follower():
    a, b, c = _bodies()
    a.set_target(b)
    a.set_target(c)
    assert b.followers == []
    assert [ptr.target for ptr in c.followers] == [a]


def test_clear_target():
    a, b, _ = _bodies()
    a.set_target(b)
    a.set_target(None)
    assert a.target is None
    assert b.followers == []


def test_same_target_twice_no_duplicate():
    a, b, _ = _bodies()
    a.set_target(b)
    a.set_target(b)
    assert len(b.followers) == 1


def test_many_followers_keep_others():
    a, b, c = _bodies()
    a.set_target(c)
    b.set_target(c)
    a.set_target(None)
    assert [ptr.target for ptr in c.followers] == [b]


def test_self_target_rejected():
    a, _, _ = _bodies()
    with pytest.raises(ValueError):
        a.set_target(a)
    assert a.target is None