from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .paths import ENV_DATA_DIR, default_data_root

logger = logging.getLogger(__name__)


@dataclass
class StoreSettings:
    """Where stores keep their files.

    You can override by providing a YAML file with keys:
      - data_dir: str (default: platform user data dir)
    The SAVESTATE_DATA_DIR environment variable takes precedence over data_dir.
    """

    data_dir: Path

    @staticmethod
    def from_env() -> "StoreSettings":
        """SAVESTATE_DATA_DIR if set, else the platform user data dir."""
        return StoreSettings(data_dir=default_data_root())

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "StoreSettings":
        env_dir = os.getenv(ENV_DATA_DIR)
        if env_dir:
            data_dir = Path(env_dir).expanduser().resolve()
        elif data.get("data_dir"):
            data_dir = Path(str(data["data_dir"])).expanduser().resolve()
        else:
            data_dir = default_data_root()
        return StoreSettings(data_dir=data_dir)

    @staticmethod
    def load(path: Optional[Path] = None) -> "StoreSettings":
        """Load settings from an optional YAML file, falling back to defaults."""
        data: Dict[str, Any] = {}
        if path is not None:
            if path.exists():
                with path.open("r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                if not isinstance(data, dict):
                    raise ValueError(f"Settings file {path} must contain a mapping")
                logger.info("Loaded store settings from %s", path)
            else:
                logger.warning("Settings file not found: %s", path)
        settings = StoreSettings.from_dict(data)
        logger.debug("Store settings: %s", settings)
        return settings
