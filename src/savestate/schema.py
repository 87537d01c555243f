from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple, Union


def _frozen(values: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class ScalarSchema:
    """Validated default for a Scalar; only used to fill an empty value."""

    default: str = ""

    KIND = "scalar"


@dataclass(frozen=True)
class MapSchema:
    """Allowed keys of a Map with their default values."""

    defaults: Mapping[str, str] = field(default_factory=dict)

    KIND = "map"

    def __post_init__(self) -> None:
        object.__setattr__(self, "defaults", _frozen(self.defaults))

    @staticmethod
    def from_flags(names: Iterable[str], default: str = "false") -> "MapSchema":
        """Build a schema where every key shares one default (boolean flag maps)."""
        return MapSchema({name: default for name in names})


@dataclass(frozen=True)
class TableSchema:
    """Allowed fields (with defaults) and allowed row names of a Table."""

    fields: Mapping[str, str] = field(default_factory=dict)
    rows: Tuple[str, ...] = ()

    KIND = "table"

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _frozen(self.fields))
        # keep first occurrence order, drop duplicates
        object.__setattr__(self, "rows", tuple(dict.fromkeys(self.rows)))


@dataclass(frozen=True)
class CollectionSchema:
    """Per-dictionary Map schemas of a NamedMapCollection."""

    maps: Mapping[str, MapSchema] = field(default_factory=dict)

    KIND = "collection"

    def __post_init__(self) -> None:
        coerced = {
            name: schema if isinstance(schema, MapSchema) else MapSchema(schema)
            for name, schema in dict(self.maps).items()
        }
        object.__setattr__(self, "maps", MappingProxyType(coerced))


Schema = Union[ScalarSchema, MapSchema, TableSchema, CollectionSchema]

__all__ = ["ScalarSchema", "MapSchema", "TableSchema", "CollectionSchema", "Schema"]
