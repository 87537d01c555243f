from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .managers import BaseManager
from .schema import ScalarSchema
from .shapes import Scalar
from .store import Store

logger = logging.getLogger(__name__)

VERSION_STORE_NAME = "Version"


class DataManager:
    """Coordinates many managers around a stored application version.

    - start(): when the stored version differs from the current one, the
      version store and every manager in ``on_start`` are reset to schema
      defaults and saved
    - save_managers(): saves every manager in ``on_save``
    - reset_managers(): resets and saves every manager in ``on_reset``

    Managers are expected to be initialized already; the lists may overlap.
    """

    def __init__(
        self,
        version: str,
        root_dir: Union[str, Path],
        on_start: Optional[Iterable[BaseManager]] = None,
        on_save: Optional[Iterable[BaseManager]] = None,
        on_reset: Optional[Iterable[BaseManager]] = None,
    ) -> None:
        self.version = version.strip()
        self.on_start: List[BaseManager] = list(on_start or [])
        self.on_save: List[BaseManager] = list(on_save or [])
        self.on_reset: List[BaseManager] = list(on_reset or [])
        # stored as <root>/VersionData.json, without a manager suffix
        self.version_store: Store[Scalar] = Store(VERSION_STORE_NAME, root_dir, ScalarSchema(self.version))
        self.version_store.initialize()

    @property
    def stored_version(self) -> str:
        return self.version_store.data.get()

    def start(self, reset_on_start: bool = False) -> bool:
        """Apply the version check. Returns True when managers were reset."""
        if reset_on_start:
            self.version_store.reset()

        if self.stored_version == self.version:
            return False

        logger.info(
            "Version changed (%r -> %r); resetting %d managers",
            self.stored_version,
            self.version,
            len(self.on_start),
        )
        self.version_store.reset_then_reconcile_then_save()
        for manager in self.on_start:
            manager.save_reset()
        return True

    def save_managers(self) -> None:
        for manager in self.on_save:
            manager.save()
        logger.debug("Saved %d managers", len(self.on_save))

    def reset_managers(self) -> None:
        for manager in self.on_reset:
            manager.save_reset()
        logger.debug("Reset %d managers", len(self.on_reset))


__all__ = ["DataManager", "VERSION_STORE_NAME"]
