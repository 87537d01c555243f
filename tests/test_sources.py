from pathlib import Path

import pytest

from savestate.errors import SchemaSourceError
from savestate.schema import CollectionSchema, MapSchema, ScalarSchema, TableSchema
from savestate.sources import (
    load_collection_schema,
    load_flag_schema,
    load_map_schema,
    load_scalar_schema,
    load_table_schema,
    load_yaml_schema,
    parse_key_values,
    parse_names,
)


def test_parse_key_values_skips_comments_blanks_and_lines_without_separator():
    text = "# volume settings\r\nvolume : 5\n\n  lang:en  \nnot a pair\nurl: http://example.com\n"
    assert parse_key_values(text) == {
        "volume": "5",
        "lang": "en",
        "url": "http://example.com",
    }


def test_parse_key_values_custom_separator():
    assert parse_key_values("a = 1\nb=x=y", separator="=") == {"a": "1", "b": "x=y"}


def test_parse_key_values_duplicate_key_raises():
    with pytest.raises(SchemaSourceError):
        parse_key_values("a: 1\na: 2")


def test_parse_names():
    assert parse_names("goblin\n# comment\n\n ogre \n") == ["goblin", "ogre"]
    with pytest.raises(SchemaSourceError):
        parse_names("a\na")


def test_file_loaders(tmp_path: Path):
    (tmp_path / "version.txt").write_text("  1.2.0\n")
    (tmp_path / "options.txt").write_text("volume: 5\n")
    (tmp_path / "flags.txt").write_text("castle\nforest\n")
    (tmp_path / "fields.txt").write_text("hp: 100\nmana: 0\n")
    (tmp_path / "rows.txt").write_text("goblin\nogre\n")

    assert load_scalar_schema(tmp_path / "version.txt") == ScalarSchema("1.2.0")
    assert load_map_schema(tmp_path / "options.txt") == MapSchema({"volume": "5"})
    assert load_flag_schema(tmp_path / "flags.txt") == MapSchema({"castle": "false", "forest": "false"})
    assert load_table_schema(tmp_path / "fields.txt", tmp_path / "rows.txt") == TableSchema(
        {"hp": "100", "mana": "0"}, ("goblin", "ogre")
    )


def test_collection_named_after_file_stems(tmp_path: Path):
    (tmp_path / "weapons.txt").write_text("sword: 10\n")
    (tmp_path / "armor.txt").write_text("helm: 3\n")
    schema = load_collection_schema([tmp_path / "weapons.txt", tmp_path / "armor.txt"])
    assert schema == CollectionSchema({"weapons": {"sword": "10"}, "armor": {"helm": "3"}})


def test_missing_source_raises(tmp_path: Path):
    with pytest.raises(SchemaSourceError):
        load_map_schema(tmp_path / "nope.txt")


def test_yaml_table_schema(tmp_path: Path):
    path = tmp_path / "monsters.yaml"
    path.write_text("kind: table\nfields:\n  hp: 100\n  boss: false\nrows: [goblin, ogre]\n")
    schema = load_yaml_schema(path)
    assert schema == TableSchema({"hp": "100", "boss": "false"}, ("goblin", "ogre"))


def test_yaml_other_kinds(tmp_path: Path):
    scalar = tmp_path / "s.yaml"
    scalar.write_text("kind: scalar\ndefault: 3\n")
    assert load_yaml_schema(scalar) == ScalarSchema("3")

    flags = tmp_path / "f.yaml"
    flags.write_text("kind: map\nflags: [a, b]\n")
    assert load_yaml_schema(flags) == MapSchema({"a": "false", "b": "false"})

    coll = tmp_path / "c.yaml"
    coll.write_text("kind: collection\nmaps:\n  weapons: {sword: 10}\n  empty:\n")
    assert load_yaml_schema(coll) == CollectionSchema({"weapons": {"sword": "10"}, "empty": {}})


def test_yaml_errors(tmp_path: Path):
    bad_kind = tmp_path / "k.yaml"
    bad_kind.write_text("kind: graph\n")
    with pytest.raises(SchemaSourceError):
        load_yaml_schema(bad_kind)

    bad_yaml = tmp_path / "y.yaml"
    bad_yaml.write_text("kind: [unclosed\n")
    with pytest.raises(SchemaSourceError):
        load_yaml_schema(bad_yaml)

    nested = tmp_path / "n.yaml"
    nested.write_text("kind: map\ndefaults:\n  a: {b: c}\n")
    with pytest.raises(SchemaSourceError):
        load_yaml_schema(nested)
