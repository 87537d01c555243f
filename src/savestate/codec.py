from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

from jsonschema import Draft202012Validator

from .errors import CorruptStoreError
from .shapes import SHAPE_TYPES, Shape

logger = logging.getLogger(__name__)

FORMAT_NAME = "savestate"
# Increment when making breaking changes to the envelope or payload layout
FORMAT_VERSION = 1

_STRING_MAP: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": {"type": "string"},
}

PAYLOAD_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "scalar": {
        "type": "object",
        "properties": {"value": {"type": "string"}},
        "required": ["value"],
        "additionalProperties": False,
    },
    "map": {
        "type": "object",
        "properties": {"entries": _STRING_MAP},
        "required": ["entries"],
        "additionalProperties": False,
    },
    "table": {
        "type": "object",
        "properties": {
            "fields": _STRING_MAP,
            "rows": {"type": "object", "additionalProperties": _STRING_MAP},
        },
        "required": ["fields", "rows"],
        "additionalProperties": False,
    },
    "collection": {
        "type": "object",
        "properties": {
            "maps": {"type": "object", "additionalProperties": _STRING_MAP},
        },
        "required": ["maps"],
        "additionalProperties": False,
    },
}

ENVELOPE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "format": {"const": FORMAT_NAME},
        "version": {"type": "integer", "minimum": 1},
        "kind": {"enum": sorted(PAYLOAD_SCHEMAS)},
        "data": {"type": "object"},
    },
    "required": ["format", "version", "kind", "data"],
    "additionalProperties": False,
}


@lru_cache(maxsize=None)
def _validator(kind: Optional[str]) -> Draft202012Validator:
    schema = ENVELOPE_SCHEMA if kind is None else PAYLOAD_SCHEMAS[kind]
    return Draft202012Validator(schema)


def _first_error(instance: Any, kind: Optional[str]) -> Optional[str]:
    errors = sorted(_validator(kind).iter_errors(instance), key=lambda e: list(e.path))
    if not errors:
        return None
    first = errors[0]
    where = "/".join(str(p) for p in first.path) or "<root>"
    what = "envelope" if kind is None else f"{kind} payload"
    return f"invalid {what} at {where}: {first.message}"


def _check(instance: Any, kind: Optional[str], path: Optional[Path]) -> None:
    reason = _first_error(instance, kind)
    if reason is not None:
        raise CorruptStoreError(path, reason)


def encode_shape(shape: Shape) -> bytes:
    """Encode a shape into the self-describing JSON envelope.

    The payload is checked against the same schema used when decoding, so a
    shape holding non-string values raises ValueError instead of producing a
    file that can no longer be loaded.
    """
    data = shape.to_dict()
    reason = _first_error(data, shape.KIND)
    if reason is not None:
        raise ValueError(f"Cannot encode {shape.KIND} store: {reason}")
    envelope = {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "kind": shape.KIND,
        "data": data,
    }
    return json.dumps(envelope, ensure_ascii=False, sort_keys=True, indent=2).encode("utf-8")


def decode_shape(raw: bytes, expected_kind: str, path: Optional[Path] = None) -> Shape:
    """Decode bytes produced by :func:`encode_shape`.

    Raises CorruptStoreError when the bytes are not valid UTF-8 JSON, when the
    envelope or payload does not match its schema, when the envelope was
    written by a newer format version, or when it holds a different shape kind.
    """
    try:
        envelope = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CorruptStoreError(path, f"not UTF-8 text: {e}") from e
    except json.JSONDecodeError as e:
        raise CorruptStoreError(path, f"invalid JSON: {e}") from e

    _check(envelope, None, path)

    version = envelope["version"]
    if version > FORMAT_VERSION:
        raise CorruptStoreError(
            path, f"format version {version} is newer than supported {FORMAT_VERSION}"
        )
    kind = envelope["kind"]
    if kind != expected_kind:
        raise CorruptStoreError(path, f"expected a {expected_kind} store, found {kind}")

    _check(envelope["data"], kind, path)
    return SHAPE_TYPES[kind].from_dict(envelope["data"])


def write_shape(path: Union[str, Path], shape: Shape) -> None:
    """Replace the content of ``path`` with the encoded shape.

    The file is truncated and rewritten in place; there is no temporary file
    or backup copy.
    """
    p = Path(path)
    p.write_bytes(encode_shape(shape))
    logger.debug("Wrote %s store to %s", shape.KIND, p)


def read_shape(path: Union[str, Path], expected_kind: str) -> Shape:
    p = Path(path)
    raw = p.read_bytes()
    logger.debug("Read %d bytes from %s", len(raw), p)
    return decode_shape(raw, expected_kind, p)


__all__ = [
    "FORMAT_NAME",
    "FORMAT_VERSION",
    "encode_shape",
    "decode_shape",
    "write_shape",
    "read_shape",
]
