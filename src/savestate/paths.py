from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from platformdirs import PlatformDirs

logger = logging.getLogger(__name__)

APP_NAME = "savestate"

# Environment variable override (useful for tests and portable installs)
ENV_DATA_DIR = "SAVESTATE_DATA_DIR"

STORE_SUFFIX = "Data"
STORE_EXTENSION = ".json"


def default_data_root(app_name: str = APP_NAME) -> Path:
    """Return the directory stores use when the caller gives no explicit root.

    SAVESTATE_DATA_DIR wins when set; otherwise the platform user data dir:
    Linux: ~/.local/share/<app>
    macOS: ~/Library/Application Support/<app>
    Windows: %LOCALAPPDATA%\\<app>
    """
    override = os.getenv(ENV_DATA_DIR)
    if override:
        return Path(override).expanduser().resolve()
    dirs = PlatformDirs(appname=app_name, appauthor=False)
    return Path(dirs.user_data_dir).expanduser().resolve()


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def store_path(root: Path, name: str, extension: Optional[str] = None) -> Path:
    """Path of the file backing the store called ``name``: ``<root>/<name>Data.json``."""
    if not name:
        raise ValueError("store name must be a non-empty string")
    return Path(root) / f"{name}{STORE_SUFFIX}{extension or STORE_EXTENSION}"
