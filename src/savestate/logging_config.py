from __future__ import annotations

import logging
import os
import sys
from typing import Optional

ENV_LOG_LEVEL = "SAVESTATE_LOG_LEVEL"


def resolve_level(default_level: int = logging.INFO) -> int:
    """Level named by SAVESTATE_LOG_LEVEL, or ``default_level`` when unset or unknown."""
    level_name = os.getenv(ENV_LOG_LEVEL)
    if not level_name:
        return default_level
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else default_level


def configure_logging(level: Optional[int] = None) -> int:
    """Send savestate logs to stdout and return the level in effect."""
    effective = resolve_level() if level is None else level
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger()
    root.setLevel(effective)
    # drop handlers left by earlier calls so messages are not duplicated
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    return effective
