from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from .codec import FORMAT_NAME, decode_shape
from .errors import CorruptStoreError
from .logging_config import configure_logging
from .shapes import SHAPE_TYPES

logger = logging.getLogger(__name__)


def _sniff_kind(raw: bytes) -> Optional[str]:
    try:
        envelope = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    if isinstance(envelope, dict) and envelope.get("format") == FORMAT_NAME:
        kind = envelope.get("kind")
        return kind if kind in SHAPE_TYPES else None
    return None


def _load(path: Path, kind: Optional[str]):
    raw = path.read_bytes()
    kind = kind or _sniff_kind(raw)
    if kind is None:
        raise CorruptStoreError(path, "not a savestate file")
    return decode_shape(raw, kind, path)


def _cmd_show(args: argparse.Namespace) -> int:
    path = Path(args.path)
    try:
        shape = _load(path, args.kind)
    except (CorruptStoreError, OSError) as e:
        print(f"ERROR: {e}")
        return 1
    print(json.dumps({"kind": shape.KIND, "data": shape.to_dict()}, indent=2, ensure_ascii=False, sort_keys=True))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    success = True
    for name in args.paths:
        path = Path(name)
        try:
            shape = _load(path, args.kind)
            print(f"OK: {path} ({shape.KIND})")
        except CorruptStoreError as e:
            success = False
            print(f"CORRUPT: {path}: {e.reason}")
        except OSError as e:
            success = False
            print(f"ERROR: {path}: {e}")
    return 0 if success else 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="savestate", description="Inspect savestate store files")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    kinds = sorted(SHAPE_TYPES)

    s = sub.add_parser("show", help="Print the decoded content of a store file")
    s.add_argument("path", help="Path to a <name>Data.json file")
    s.add_argument("--kind", choices=kinds, default=None, help="Expected shape kind (default: read from file)")
    s.set_defaults(func=_cmd_show)

    c = sub.add_parser("check", help="Check that store files decode cleanly")
    c.add_argument("paths", nargs="+", help="Store files to check")
    c.add_argument("--kind", choices=kinds, default=None, help="Expected shape kind (default: read from file)")
    c.set_defaults(func=_cmd_check)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        configure_logging(logging.DEBUG)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
