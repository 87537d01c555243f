"""Typed managers: the public API over one Store per data shape.

A manager is built from a name, a schema and a storage root. Construction
creates the Store and initializes it, so the data is loaded, reconciled and
saved before the manager is handed back.

Values are stored as strings. The ``*_as_int`` / ``*_as_bool`` helpers
convert on the way in and out; a typed setter that receives a value it
cannot convert leaves the store unchanged and returns a failed SetResult
instead of raising.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .errors import ValidationError
from .schema import CollectionSchema, MapSchema, ScalarSchema, Schema, TableSchema
from .shapes import Map, NamedMapCollection, Scalar, Table
from .store import Store

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_INT_RE = re.compile(r"[+-]?[0-9]+")

TRUE = "true"
FALSE = "false"


def parse_int(value: Union[str, int]) -> int:
    """Parse an integer the way stored values are written (optional sign, no decimals)."""
    if isinstance(value, bool):
        raise ValidationError(f"Not an integer: {value!r}", value=value)
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not _INT_RE.fullmatch(text):
        raise ValidationError(f"Not an integer: {value!r}", value=value)
    return int(text)


def parse_bool(value: Union[str, bool]) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == TRUE:
        return True
    if text == FALSE:
        return False
    raise ValidationError(f"Not a boolean: {value!r}", value=value)


def format_bool(value: bool) -> str:
    return TRUE if value else FALSE


@dataclass
class SetResult:
    """Outcome of a typed setter."""

    ok: bool
    value: Optional[str] = None
    error: Optional[ValidationError] = None

    def __bool__(self) -> bool:
        return self.ok


class BaseManager:
    """Owns a Store and forwards the lifecycle operations to it."""

    SUFFIX = ""

    def __init__(self, name: str, schema: Schema, root_dir: PathLike, initialize: bool = True) -> None:
        if not name:
            raise ValueError("manager name must be a non-empty string")
        self.name = name
        self.store: Store = Store(name + self.SUFFIX, root_dir, schema)
        if initialize:
            self.store.initialize()

    @property
    def schema(self) -> Schema:
        return self.store.schema

    @property
    def path(self) -> Path:
        return self.store.path

    def initialize(self) -> None:
        self.store.initialize()

    def save(self) -> None:
        self.store.save()

    def reset(self) -> None:
        self.store.reset()

    def save_reset(self) -> None:
        """Reset to schema defaults and save (reset, reconcile, save)."""
        self.store.reset_then_reconcile_then_save()

    def _typed_set(
        self, apply: Callable[[str], Optional[bool]], raw: object, convert: Callable[[object], str], target: str
    ) -> SetResult:
        try:
            text = convert(raw)
        except ValidationError as e:
            logger.warning("Unable to save %s in %r: %s", target, self.store.name, e)
            return SetResult(ok=False, error=e)
        # apply returns False when the value was ignored rather than stored
        if apply(text) is False:
            return SetResult(ok=False, value=text)
        return SetResult(ok=True, value=text)


def _int_text(value: object) -> str:
    return str(parse_int(value))  # type: ignore[arg-type]


def _bool_text(value: object) -> str:
    return format_bool(parse_bool(value))  # type: ignore[arg-type]


class ScalarManager(BaseManager):
    """Single value; the schema default only fills an empty value."""

    SUFFIX = "Variable"

    def __init__(self, name: str, default: str, root_dir: PathLike, initialize: bool = True) -> None:
        super().__init__(name, ScalarSchema(default), root_dir, initialize)

    @property
    def data(self) -> Scalar:
        return self.store.data

    def get(self) -> str:
        return self.data.get()

    def set(self, value: str) -> None:
        self.data.set(value)

    def set_as_int(self, value: Union[str, int]) -> SetResult:
        return self._typed_set(self.set, value, _int_text, "value")

    def get_as_int(self) -> int:
        return parse_int(self.get())

    def set_as_bool(self, value: Union[str, bool]) -> SetResult:
        return self._typed_set(self.set, value, _bool_text, "value")

    def get_as_bool(self) -> bool:
        return parse_bool(self.get())


class MapManager(BaseManager):
    SUFFIX = "Dictionary"

    def __init__(self, name: str, defaults: Mapping[str, str], root_dir: PathLike, initialize: bool = True) -> None:
        super().__init__(name, MapSchema(defaults), root_dir, initialize)

    @property
    def data(self) -> Map:
        return self.store.data

    def keys(self) -> List[str]:
        return self.data.keys()

    def exists(self, key: str) -> bool:
        return self.data.exists(key)

    def get(self, key: str) -> str:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data.set(key, value)

    def as_dict(self) -> Dict[str, str]:
        return self.data.as_dict()

    def set_as_int(self, key: str, value: Union[str, int]) -> SetResult:
        return self._typed_set(lambda v: self.set(key, v), value, _int_text, repr(key))

    def get_as_int(self, key: str) -> int:
        return parse_int(self.get(key))

    def set_as_bool(self, key: str, value: Union[str, bool]) -> SetResult:
        return self._typed_set(lambda v: self.set(key, v), value, _bool_text, repr(key))

    def get_as_bool(self, key: str) -> bool:
        return parse_bool(self.get(key))


class BooleanMapManager(MapManager):
    """Map of named flags, each defaulting to ``"false"``."""

    SUFFIX = "BooleanDictionary"

    def __init__(self, name: str, flags: Iterable[str], root_dir: PathLike, initialize: bool = True) -> None:
        super().__init__(name, {flag: FALSE for flag in flags}, root_dir, initialize)

    def is_set(self, key: str) -> bool:
        return self.get_as_bool(key)

    def set_flag(self, key: str, value: bool = True) -> None:
        self.set(key, format_bool(value))


class TableManager(BaseManager):
    """Rows sharing a set of fields.

    Setting a field that is not in the schema is ignored; typed setters then
    return a failed SetResult with no error attached.
    """

    SUFFIX = "Table"

    def __init__(
        self,
        name: str,
        fields: Mapping[str, str],
        rows: Sequence[str],
        root_dir: PathLike,
        initialize: bool = True,
    ) -> None:
        super().__init__(name, TableSchema(fields, tuple(rows)), root_dir, initialize)

    @property
    def data(self) -> Table:
        return self.store.data

    def fields(self) -> List[str]:
        return self.data.get_fields()

    def rows(self) -> List[str]:
        return self.data.get_rows()

    def field_exists(self, field_name: str) -> bool:
        return self.data.field_exists(field_name)

    def row_exists(self, row: str) -> bool:
        return self.data.row_exists(row)

    def get_row(self, row: str) -> Dict[str, str]:
        return self.data.get_row(row)

    def get(self, row: str, field_name: str) -> str:
        return self.data.get(row, field_name)

    def set(self, row: str, field_name: str, value: str) -> bool:
        """Store ``value``; returns False when ``field_name`` is not a table field."""
        if not self.data.set(row, field_name, value):
            logger.debug("Ignoring unknown field %r in table %r", field_name, self.store.name)
            return False
        return True

    def set_as_int(self, row: str, field_name: str, value: Union[str, int]) -> SetResult:
        return self._typed_set(
            lambda v: self.set(row, field_name, v), value, _int_text, f"{row}.{field_name}"
        )

    def get_as_int(self, row: str, field_name: str) -> int:
        return parse_int(self.get(row, field_name))

    def set_as_bool(self, row: str, field_name: str, value: Union[str, bool]) -> SetResult:
        return self._typed_set(
            lambda v: self.set(row, field_name, v), value, _bool_text, f"{row}.{field_name}"
        )

    def get_as_bool(self, row: str, field_name: str) -> bool:
        return parse_bool(self.get(row, field_name))


class CollectionManager(BaseManager):
    SUFFIX = "DictionaryCollection"

    def __init__(
        self,
        name: str,
        maps: Mapping[str, Union[MapSchema, Mapping[str, str]]],
        root_dir: PathLike,
        initialize: bool = True,
    ) -> None:
        super().__init__(name, CollectionSchema(maps), root_dir, initialize)

    @property
    def data(self) -> NamedMapCollection:
        return self.store.data

    def dictionaries(self) -> List[str]:
        return self.data.names()

    def dictionary_exists(self, dictionary: str) -> bool:
        return self.data.map_exists(dictionary)

    def exists(self, dictionary: str, key: str) -> bool:
        return self.data.exists(dictionary, key)

    def keys(self, dictionary: str) -> List[str]:
        return self.data.keys(dictionary)

    def get_dictionary(self, dictionary: str) -> Dict[str, str]:
        return self.data.get_map(dictionary).as_dict()

    def get(self, dictionary: str, key: str) -> str:
        return self.data.get(dictionary, key)

    def set(self, dictionary: str, key: str, value: str) -> None:
        self.data.set(dictionary, key, value)

    def set_as_int(self, dictionary: str, key: str, value: Union[str, int]) -> SetResult:
        return self._typed_set(
            lambda v: self.set(dictionary, key, v), value, _int_text, f"{dictionary}.{key}"
        )

    def get_as_int(self, dictionary: str, key: str) -> int:
        return parse_int(self.get(dictionary, key))

    def set_as_bool(self, dictionary: str, key: str, value: Union[str, bool]) -> SetResult:
        return self._typed_set(
            lambda v: self.set(dictionary, key, v), value, _bool_text, f"{dictionary}.{key}"
        )

    def get_as_bool(self, dictionary: str, key: str) -> bool:
        return parse_bool(self.get(dictionary, key))


__all__ = [
    "SetResult",
    "parse_int",
    "parse_bool",
    "format_bool",
    "BaseManager",
    "ScalarManager",
    "MapManager",
    "BooleanMapManager",
    "TableManager",
    "CollectionManager",
]
