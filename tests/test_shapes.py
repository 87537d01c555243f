import pytest

from savestate.errors import NotFoundError
from savestate.shapes import Map, NamedMapCollection, Scalar, Table, new_shape


def test_scalar_repair_normalizes_none():
    s = Scalar(value=None)
    s.repair()
    assert s.get() == ""
    assert s.is_empty()


def test_map_get_missing_raises_not_found():
    m = Map({"a": "1"})
    assert m.exists("a")
    assert m.get("a") == "1"
    with pytest.raises(NotFoundError) as exc:
        m.get("b")
    assert exc.value.key == "b"


def test_map_remove_missing_is_noop():
    m = Map({"a": "1"})
    m.remove("zzz")
    m.remove("a")
    assert m.keys() == []


def test_table_set_unknown_field_is_ignored():
    t = Table(fields={"hp": "100"}, rows={"goblin": {"hp": "50"}})
    assert t.set("goblin", "mana", "7") is False
    assert t.get_row("goblin") == {"hp": "50"}
    assert t.set("goblin", "hp", "60") is True
    assert t.get("goblin", "hp") == "60"


def test_table_set_on_missing_row_raises():
    t = Table(fields={"hp": "100"}, rows={})
    with pytest.raises(NotFoundError):
        t.set("ogre", "hp", "1")
    with pytest.raises(NotFoundError):
        t.get("ogre", "hp")


def test_table_set_row_uses_defaults_and_ignores_unknown_keys():
    t = Table(fields={"hp": "100", "mana": "0"}, rows={})
    t.set_row("ogre", {"hp": "250", "armor": "3"})
    assert t.get_row("ogre") == {"hp": "250", "mana": "0"}

    # existing row keeps values not passed in
    t.set_row("ogre", {"mana": "5"})
    assert t.get_row("ogre") == {"hp": "250", "mana": "5"}


def test_table_get_row_returns_copy():
    t = Table(fields={"hp": "1"}, rows={"a": {"hp": "1"}})
    row = t.get_row("a")
    row["hp"] = "999"
    assert t.get("a", "hp") == "1"


def test_collection_operations():
    c = NamedMapCollection()
    c.add_map("weapons").set("sword", "1")
    assert c.map_exists("weapons")
    assert c.exists("weapons", "sword")
    assert not c.exists("armor", "helm")
    assert c.keys("weapons") == ["sword"]
    with pytest.raises(NotFoundError):
        c.get("armor", "helm")
    with pytest.raises(NotFoundError):
        c.set("armor", "helm", "1")


def test_collection_repair_fills_missing_maps():
    c = NamedMapCollection(maps={"a": None, "b": Map(entries=None)})
    c.repair()
    assert c.get_map("a") == Map()
    assert c.get_map("b") == Map()


def test_dict_round_trip_preserves_equality():
    shapes = [
        Scalar("hello"),
        Map({"a": "1", "b": ""}),
        Table(fields={"hp": "100"}, rows={"goblin": {"hp": "50"}}),
        NamedMapCollection(maps={"x": Map({"k": "v"}), "empty": Map()}),
    ]
    for shape in shapes:
        assert type(shape).from_dict(shape.to_dict()) == shape


def test_new_shape_unknown_kind():
    assert new_shape("map") == Map()
    with pytest.raises(ValueError):
        new_shape("graph")
