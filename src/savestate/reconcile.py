"""Reconciliation of persisted shapes against a validated schema.

``reconcile(shape, schema)`` edits ``shape`` in place so that it converges on
the schema: entries unknown to the schema are removed, entries the schema adds
get their default value and entries present on both sides keep their value.
Reconciling already reconciled data against the same schema is a no-op.

Keys are compared exactly (no case folding). A key renamed in the schema is
seen as a removal plus an insertion, so its previous value is lost.
"""

from __future__ import annotations

import logging
from functools import singledispatch
from typing import Dict, Mapping, Sequence

from .schema import CollectionSchema, MapSchema, ScalarSchema, TableSchema
from .shapes import Map, NamedMapCollection, Scalar, Table

logger = logging.getLogger(__name__)


def reconcile_entries(entries: Dict[str, str], defaults: Mapping[str, str]) -> None:
    """Converge a plain key/value dict on ``defaults``."""
    for key in list(entries):
        if key not in defaults:
            del entries[key]
    for key, default in defaults.items():
        if key not in entries:
            entries[key] = default


@singledispatch
def reconcile(shape, schema) -> None:
    raise TypeError(f"No reconciler for shape type {type(shape).__name__}")


@reconcile.register
def _(shape: Scalar, schema: ScalarSchema) -> None:
    _expect(schema, ScalarSchema)
    shape.repair()
    if shape.is_empty():
        shape.set(schema.default)


@reconcile.register
def _(shape: Map, schema: MapSchema) -> None:
    _expect(schema, MapSchema)
    shape.repair()
    before = len(shape.entries)
    reconcile_entries(shape.entries, schema.defaults)
    logger.debug("Reconciled map: %d -> %d keys", before, len(shape.entries))


@reconcile.register
def _(shape: Table, schema: TableSchema) -> None:
    _expect(schema, TableSchema)
    shape.repair()
    shape.fields = dict(schema.fields)

    # field pass, existing rows only
    for values in shape.rows.values():
        reconcile_entries(values, schema.fields)

    # row pass
    _reconcile_rows(shape, schema.rows)
    logger.debug(
        "Reconciled table: %d rows x %d fields", len(shape.rows), len(shape.fields)
    )


def _reconcile_rows(shape: Table, allowed: Sequence[str]) -> None:
    allowed_set = set(allowed)
    for row in shape.get_rows():
        if row not in allowed_set:
            shape.remove_row(row)
    for row in allowed:
        if not shape.row_exists(row):
            shape.set_row(row)


@reconcile.register
def _(shape: NamedMapCollection, schema: CollectionSchema) -> None:
    _expect(schema, CollectionSchema)
    shape.repair()
    for name in shape.names():
        if name not in schema.maps:
            shape.remove_map(name)
    for name, map_schema in schema.maps.items():
        reconcile(shape.add_map(name), map_schema)


def _expect(schema, schema_type: type) -> None:
    if not isinstance(schema, schema_type):
        raise TypeError(
            f"Expected {schema_type.__name__}, got {type(schema).__name__}"
        )


__all__ = ["reconcile", "reconcile_entries"]
