"""
savestate: local persistence with schema reconciliation.

This package provides:
- Data shapes (Scalar, Map, Table, NamedMapCollection) and their schemas
- A JSON codec with a self-describing, validated envelope
- A Store binding one shape to one file, reconciled against its schema on load
- Typed managers per shape, and a DataManager coordinating many of them

Stores do no locking: use each store from one thread, one store per file.
"""

from .errors import (
    StoreError,
    CorruptStoreError,
    NotFoundError,
    StoreNotInitializedError,
    ValidationError,
    SchemaSourceError,
)
from .shapes import Scalar, Map, Table, NamedMapCollection, Shape, new_shape
from .schema import ScalarSchema, MapSchema, TableSchema, CollectionSchema, Schema
from .codec import encode_shape, decode_shape
from .reconcile import reconcile
from .store import Store
from .managers import (
    SetResult,
    ScalarManager,
    MapManager,
    BooleanMapManager,
    TableManager,
    CollectionManager,
)
from .orchestration import DataManager
from .config import StoreSettings

__all__ = [
    "StoreError",
    "CorruptStoreError",
    "NotFoundError",
    "StoreNotInitializedError",
    "ValidationError",
    "SchemaSourceError",
    "Scalar",
    "Map",
    "Table",
    "NamedMapCollection",
    "Shape",
    "new_shape",
    "ScalarSchema",
    "MapSchema",
    "TableSchema",
    "CollectionSchema",
    "Schema",
    "encode_shape",
    "decode_shape",
    "reconcile",
    "Store",
    "SetResult",
    "ScalarManager",
    "MapManager",
    "BooleanMapManager",
    "TableManager",
    "CollectionManager",
    "DataManager",
    "StoreSettings",
]
