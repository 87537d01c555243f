from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class StoreError(Exception):
    """Base exception for store load/save errors."""


class CorruptStoreError(StoreError):
    """Raised when a store file exists but cannot be decoded into the expected shape."""

    def __init__(self, path: Union[str, Path, None], reason: str) -> None:
        self.path = Path(path) if path is not None else None
        self.reason = reason
        where = str(self.path) if self.path is not None else "<memory>"
        super().__init__(f"Corrupt store file {where}: {reason}")


class NotFoundError(StoreError):
    """Raised when a key, row, field or dictionary is absent."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class StoreNotInitializedError(NotFoundError):
    """Raised when store data is accessed before initialize() completed."""


class ValidationError(StoreError):
    """Raised when a value cannot be converted to the requested type."""

    def __init__(self, message: str, value: object = None) -> None:
        super().__init__(message)
        self.value = value


class SchemaSourceError(StoreError):
    """Raised when schema source text cannot be parsed."""
