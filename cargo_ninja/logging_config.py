"""Central logging configuration driven by LOG_LEVEL and LOG_FILE."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

_CONFIGURED = False

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure global logging once per process.

    ``LOG_LEVEL`` 0 keeps logging silent, 1 enables INFO and 2 or more
    enables DEBUG. ``verbose`` raises the level to at least INFO. Records go
    to ``LOG_FILE`` when it is set, otherwise to stderr.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    level = _read_level(os.getenv("LOG_LEVEL", "0")) or 0
    if verbose:
        level = max(level, 1)

    if level <= 0:
        # Silent mode; keep logging disabled.
        _CONFIGURED = True
        return

    options: Dict[str, Any] = {
        "level": _map_level(level),
        "format": LOG_FORMAT,
        "force": True,
    }
    log_path = os.getenv("LOG_FILE")
    if log_path:
        log_file = Path(log_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        options["filename"] = log_file
        options["filemode"] = "a"
    else:
        options["stream"] = sys.stderr

    logging.basicConfig(**options)
    _CONFIGURED = True


def _read_level(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


def _map_level(level: int) -> int:
    if level >= 2:
        return logging.DEBUG
    return logging.INFO
