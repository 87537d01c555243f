"""Build schemas from schema source files.

Text sources use a line format:
- blank lines and lines starting with ``#`` are skipped
- ``key: value`` lines give a key and its default; the separator is
  configurable, and only the first occurrence splits the line
- list sources hold one name per line (table rows, boolean flags)

A YAML document can describe any schema kind in one file::

    kind: table
    fields: {hp: "100", mana: "0"}
    rows: [goblin, ogre]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Union

import yaml

from .errors import SchemaSourceError
from .schema import CollectionSchema, MapSchema, ScalarSchema, Schema, TableSchema

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_SEPARATOR = ":"
COMMENT_PREFIX = "#"


def _content_lines(text: str) -> Iterator[str]:
    for raw in text.replace("\r", "\n").split("\n"):
        line = raw.strip()
        if line and not line.startswith(COMMENT_PREFIX):
            yield line


def parse_key_values(text: str, separator: str = DEFAULT_SEPARATOR) -> Dict[str, str]:
    """Parse ``key<sep>value`` lines into a dict. Lines without the separator are skipped."""
    if not separator:
        raise ValueError("separator must be a non-empty string")
    values: Dict[str, str] = {}
    for line in _content_lines(text):
        if separator not in line:
            logger.debug("Skipping line without separator %r: %r", separator, line)
            continue
        key, _, value = line.partition(separator)
        key = key.strip()
        if key in values:
            raise SchemaSourceError(f"Duplicate key {key!r}")
        values[key] = value.strip()
    return values


def parse_names(text: str) -> List[str]:
    """Parse one name per line, keeping order; duplicates are an error."""
    names: List[str] = []
    seen = set()
    for line in _content_lines(text):
        if line in seen:
            raise SchemaSourceError(f"Duplicate name {line!r}")
        seen.add(line)
        names.append(line)
    return names


def _read(path: PathLike) -> str:
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SchemaSourceError(f"Schema source not found: {p}") from None


def load_scalar_schema(path: PathLike) -> ScalarSchema:
    return ScalarSchema(_read(path).strip())


def load_map_schema(path: PathLike, separator: str = DEFAULT_SEPARATOR) -> MapSchema:
    try:
        return MapSchema(parse_key_values(_read(path), separator))
    except SchemaSourceError as e:
        raise SchemaSourceError(f"{path}: {e}") from e


def load_flag_schema(path: PathLike, default: str = "false") -> MapSchema:
    try:
        return MapSchema.from_flags(parse_names(_read(path)), default)
    except SchemaSourceError as e:
        raise SchemaSourceError(f"{path}: {e}") from e


def load_table_schema(
    fields_path: PathLike, rows_path: PathLike, separator: str = DEFAULT_SEPARATOR
) -> TableSchema:
    try:
        fields = parse_key_values(_read(fields_path), separator)
        rows = parse_names(_read(rows_path))
    except SchemaSourceError as e:
        raise SchemaSourceError(f"{fields_path} / {rows_path}: {e}") from e
    return TableSchema(fields, tuple(rows))


def load_collection_schema(paths: Iterable[PathLike], separator: str = DEFAULT_SEPARATOR) -> CollectionSchema:
    """One dictionary per file, named after the file stem."""
    maps: Dict[str, MapSchema] = {}
    for path in paths:
        name = Path(path).stem
        if name in maps:
            raise SchemaSourceError(f"Duplicate dictionary name {name!r} ({path})")
        maps[name] = load_map_schema(path, separator)
    return CollectionSchema(maps)


def _string_map(value: Any, where: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SchemaSourceError(f"{where} must be a mapping")
    return {str(k): "" if v is None else _scalar_text(v) for k, v in value.items()}


def _scalar_text(value: Any) -> str:
    # YAML booleans come back as Python bools; store them the way the typed setters write them
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise SchemaSourceError(f"Expected a scalar value, got {type(value).__name__}")
    return str(value)


def schema_from_dict(data: Dict[str, Any]) -> Schema:
    """Build a schema from a parsed YAML/JSON document with a ``kind`` key."""
    if not isinstance(data, dict):
        raise SchemaSourceError("Schema document must be a mapping")
    kind = data.get("kind")
    if kind == ScalarSchema.KIND:
        default = data.get("default")
        return ScalarSchema("" if default is None else _scalar_text(default))
    if kind == MapSchema.KIND:
        if "flags" in data:
            return MapSchema.from_flags([str(n) for n in data.get("flags") or []], str(data.get("default", "false")))
        return MapSchema(_string_map(data.get("defaults"), "defaults"))
    if kind == TableSchema.KIND:
        rows = data.get("rows") or []
        if not isinstance(rows, list):
            raise SchemaSourceError("rows must be a list")
        return TableSchema(_string_map(data.get("fields"), "fields"), tuple(str(r) for r in rows))
    if kind == CollectionSchema.KIND:
        maps = data.get("maps") or {}
        if not isinstance(maps, dict):
            raise SchemaSourceError("maps must be a mapping")
        return CollectionSchema({str(name): MapSchema(_string_map(m, f"maps.{name}")) for name, m in maps.items()})
    raise SchemaSourceError(f"Unknown schema kind: {kind!r}")


def load_yaml_schema(path: PathLike) -> Schema:
    try:
        data = yaml.safe_load(_read(path))
    except yaml.YAMLError as e:
        raise SchemaSourceError(f"Invalid YAML in {path}: {e}") from e
    try:
        schema = schema_from_dict(data)
    except SchemaSourceError as e:
        raise SchemaSourceError(f"{path}: {e}") from e
    logger.debug("Loaded %s schema from %s", schema.KIND, path)
    return schema


__all__ = [
    "parse_key_values",
    "parse_names",
    "load_scalar_schema",
    "load_map_schema",
    "load_flag_schema",
    "load_table_schema",
    "load_collection_schema",
    "schema_from_dict",
    "load_yaml_schema",
]
