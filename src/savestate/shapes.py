"""Data shapes persisted by a Store.

Four shapes are supported:
- Scalar: a single string value
- Map: string keys to string values
- Table: named rows sharing one set of fields with defaults
- NamedMapCollection: named Maps

Each shape knows how to repair itself after loading (normalizing missing
parts), how to convert to and from plain dicts for the codec, and exposes
the query/mutate operations the managers build on. Reconciliation against a
schema lives in :mod:`savestate.reconcile`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Union

from .errors import NotFoundError


@dataclass
class Scalar:
    """A single string value. Missing values normalize to the empty string."""

    KIND: ClassVar[str] = "scalar"

    value: Optional[str] = ""

    def repair(self) -> None:
        if self.value is None:
            self.value = ""

    def get(self) -> str:
        return self.value or ""

    def set(self, value: str) -> None:
        self.value = value

    def is_empty(self) -> bool:
        return not self.value

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.get()}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Scalar":
        return Scalar(value=data.get("value"))


@dataclass
class Map:
    """Mapping of string keys to string values."""

    KIND: ClassVar[str] = "map"

    entries: Optional[Dict[str, str]] = field(default_factory=dict)

    def repair(self) -> None:
        if self.entries is None:
            self.entries = {}

    def exists(self, key: str) -> bool:
        return key in self.entries

    def keys(self) -> List[str]:
        return list(self.entries.keys())

    def get(self, key: str) -> str:
        try:
            return self.entries[key]
        except KeyError:
            raise NotFoundError(f"Key not found: {key!r}", key=key) from None

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value

    def remove(self, key: str) -> None:
        self.entries.pop(key, None)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {"entries": dict(self.entries or {})}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Map":
        entries = data.get("entries")
        return Map(entries=dict(entries) if entries is not None else None)


@dataclass
class Table:
    """Rows keyed by name, each mapping every known field to a value.

    ``fields`` holds the default value of each field. After reconciliation
    every row carries exactly these fields.
    """

    KIND: ClassVar[str] = "table"

    fields: Optional[Dict[str, str]] = field(default_factory=dict)
    rows: Optional[Dict[str, Dict[str, str]]] = field(default_factory=dict)

    def repair(self) -> None:
        if self.fields is None:
            self.fields = {}
        if self.rows is None:
            self.rows = {}
        for name, values in list(self.rows.items()):
            if values is None:
                self.rows[name] = {}

    def field_exists(self, field_name: str) -> bool:
        return field_name in self.fields

    def row_exists(self, row: str) -> bool:
        return row in self.rows

    def get_fields(self) -> List[str]:
        return list(self.fields.keys())

    def get_rows(self) -> List[str]:
        return list(self.rows.keys())

    def get_row(self, row: str) -> Dict[str, str]:
        return dict(self._row(row))

    def set_row(self, row: str, values: Optional[Mapping[str, str]] = None) -> None:
        """Create or overwrite a row.

        Fields not given in ``values`` keep the row's current value, or the
        field default for a new row. Keys in ``values`` that are not fields of
        the row are ignored.
        """
        base = self.rows[row] if row in self.rows else self.fields
        values = values or {}
        self.rows[row] = {name: values.get(name, default) for name, default in base.items()}

    def remove_row(self, row: str) -> None:
        self.rows.pop(row, None)

    def get(self, row: str, field_name: str) -> str:
        values = self._row(row)
        try:
            return values[field_name]
        except KeyError:
            raise NotFoundError(
                f"Field {field_name!r} not found in row {row!r}", key=field_name
            ) from None

    def set(self, row: str, field_name: str, value: str) -> bool:
        """Set a value; returns False when ``field_name`` is not a known field."""
        if field_name not in self.fields:
            return False
        self._row(row)[field_name] = value
        return True

    def _row(self, row: str) -> Dict[str, str]:
        try:
            return self.rows[row]
        except KeyError:
            raise NotFoundError(f"Row not found: {row!r}", key=row) from None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fields": dict(self.fields or {}),
            "rows": {name: dict(values) for name, values in (self.rows or {}).items()},
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Table":
        fields = data.get("fields")
        rows = data.get("rows")
        return Table(
            fields=dict(fields) if fields is not None else None,
            rows={name: dict(values) for name, values in rows.items()} if rows is not None else None,
        )


@dataclass
class NamedMapCollection:
    """A set of named Maps."""

    KIND: ClassVar[str] = "collection"

    maps: Optional[Dict[str, Map]] = field(default_factory=dict)

    def repair(self) -> None:
        if self.maps is None:
            self.maps = {}
        for name, mapping in list(self.maps.items()):
            if mapping is None:
                self.maps[name] = Map()
            else:
                mapping.repair()

    def names(self) -> List[str]:
        return list(self.maps.keys())

    def map_exists(self, name: str) -> bool:
        return name in self.maps

    def exists(self, name: str, key: str) -> bool:
        return name in self.maps and self.maps[name].exists(key)

    def get_map(self, name: str) -> Map:
        try:
            return self.maps[name]
        except KeyError:
            raise NotFoundError(f"Dictionary not found: {name!r}", key=name) from None

    def add_map(self, name: str) -> Map:
        return self.maps.setdefault(name, Map())

    def set_map(self, name: str, values: Mapping[str, str]) -> None:
        self.maps[name] = Map(entries=dict(values))

    def remove_map(self, name: str) -> None:
        self.maps.pop(name, None)

    def keys(self, name: str) -> List[str]:
        return self.get_map(name).keys()

    def get(self, name: str, key: str) -> str:
        return self.get_map(name).get(key)

    def set(self, name: str, key: str, value: str) -> None:
        self.get_map(name).set(key, value)

    def remove(self, name: str, key: str) -> None:
        self.get_map(name).remove(key)

    def to_dict(self) -> Dict[str, Any]:
        return {"maps": {name: dict(m.entries or {}) for name, m in (self.maps or {}).items()}}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "NamedMapCollection":
        maps = data.get("maps")
        if maps is None:
            return NamedMapCollection(maps=None)
        return NamedMapCollection(maps={name: Map(entries=dict(entries)) for name, entries in maps.items()})


Shape = Union[Scalar, Map, Table, NamedMapCollection]

SHAPE_TYPES: Dict[str, type] = {
    Scalar.KIND: Scalar,
    Map.KIND: Map,
    Table.KIND: Table,
    NamedMapCollection.KIND: NamedMapCollection,
}


def new_shape(kind: str) -> Shape:
    """Return a fresh, default-constructed shape of the given kind."""
    try:
        return SHAPE_TYPES[kind]()
    except KeyError:
        raise ValueError(f"Unknown shape kind: {kind!r}") from None


__all__ = [
    "Scalar",
    "Map",
    "Table",
    "NamedMapCollection",
    "Shape",
    "SHAPE_TYPES",
    "new_shape",
]
