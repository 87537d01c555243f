from __future__ import annotations

import logging
from pathlib import Path
from typing import Generic, Optional, TypeVar, Union

from .codec import read_shape, write_shape
from .errors import CorruptStoreError, StoreNotInitializedError
from .paths import ensure_dir, store_path
from .reconcile import reconcile
from .schema import Schema
from .shapes import Shape, new_shape

logger = logging.getLogger(__name__)

ShapeT = TypeVar("ShapeT", bound=Shape)


class Store(Generic[ShapeT]):
    """Binds one data shape to one file and owns its load/reset/save lifecycle.

    The file lives at ``<root_dir>/<name>Data.json``. ``initialize()`` must run
    before the data is read or saved.

    Stores do no locking. A store must only be used from one thread at a
    time, and no two stores (in this or another process) may point at the
    same file.
    """

    def __init__(
        self,
        name: str,
        root_dir: Union[str, Path],
        schema: Schema,
        kind: Optional[str] = None,
        create_dirs: bool = True,
    ) -> None:
        self.name = name
        self.root_dir = Path(root_dir)
        self.schema = schema
        self.kind = kind or schema.KIND
        self.path = store_path(self.root_dir, name)
        self.create_dirs = create_dirs
        self._data: Optional[ShapeT] = None

    def __repr__(self) -> str:
        return f"Store(name={self.name!r}, kind={self.kind!r}, path={str(self.path)!r})"

    @property
    def is_initialized(self) -> bool:
        return self._data is not None

    @property
    def data(self) -> ShapeT:
        if self._data is None:
            raise StoreNotInitializedError(f"Store {self.name!r} has not been initialized", key=self.name)
        return self._data

    def exists_on_disk(self) -> bool:
        return self.path.exists()

    # Lifecycle

    def initialize(self) -> None:
        """Load or bootstrap the data, reconcile it with the schema, then save it.

        A missing file is created right away holding an empty shape. An
        existing file that cannot be decoded raises CorruptStoreError and the
        store stays uninitialized, dropping any data from an earlier load.
        """
        self._data = None
        if self.create_dirs:
            ensure_dir(self.root_dir)

        if not self.path.exists():
            logger.info("A new %s file will be made at %s", self.name + "Data", self.path)
            data = new_shape(self.kind)
            self._write(data)
        else:
            try:
                data = read_shape(self.path, self.kind)
            except CorruptStoreError:
                logger.error("Store %r could not be loaded from %s", self.name, self.path)
                raise

        data.repair()
        reconcile(data, self.schema)
        self._write(data)
        self._data = data
        logger.debug("Store %r initialized from %s", self.name, self.path)

    def save(self) -> None:
        """Persist the in-memory data, overwriting the file."""
        self._write(self.data)

    def reset(self) -> None:
        """Replace the in-memory data with a fresh, empty shape.

        Nothing is reconciled or written; call save() or use
        reset_then_reconcile_then_save() for that.
        """
        self._data = new_shape(self.kind)
        logger.info("Store %r reset", self.name)

    def reconcile(self) -> None:
        reconcile(self.data, self.schema)

    def reset_then_reconcile_then_save(self) -> None:
        """Restore schema defaults and persist them."""
        self.reset()
        self.reconcile()
        self.save()

    def _write(self, data: Shape) -> None:
        try:
            write_shape(self.path, data)
        except OSError:
            logger.exception("Failed to save store %r to %s", self.name, self.path)
            raise


__all__ = ["Store"]
