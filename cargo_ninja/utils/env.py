from __future__ import annotations

"""Helpers for loading environment configuration."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

import dotenv

_ENV_LOADED = False

_LOGGER = logging.getLogger(__name__)


def load_dotenv(dotenv_path: Union[str, Path] = ".env") -> None:
    """Load environment variables from a ``.env`` file if present.

    Values already present in the process environment are kept.
    """
    global _ENV_LOADED
    if _ENV_LOADED:
        return

    path = Path(dotenv_path)
    if path.exists():
        dotenv.load_dotenv(path, override=False)
        _LOGGER.debug("Loaded environment overrides from %s", path)

    _ENV_LOADED = True


def _truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    lowered = value.strip().lower()
    return lowered in {"1", "true", "yes", "on"}


def cargo_home() -> Path:
    """Return ``$CARGO_HOME``, defaulting to ``~/.cargo``."""
    raw = os.environ.get("CARGO_HOME", "").strip()
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".cargo"


def registry_src_override() -> Optional[Path]:
    """Return the package cache root from ``CARGO_NINJA_REGISTRY_SRC``."""
    raw = os.environ.get("CARGO_NINJA_REGISTRY_SRC", "").strip()
    if not raw:
        return None
    return Path(raw).expanduser()


def extra_skip_patterns() -> List[str]:
    """Return the comma-separated patterns listed in ``CARGO_NINJA_SKIP``."""
    raw = os.environ.get("CARGO_NINJA_SKIP", "")
    return [part.strip() for part in raw.split(",") if part.strip()]


def fail_on_skipped() -> bool:
    """Return True when ``CARGO_NINJA_FAIL_ON_SKIPPED`` is enabled."""
    return _truthy(os.environ.get("CARGO_NINJA_FAIL_ON_SKIPPED"))


def tool_override(variable: str) -> Optional[str]:
    value = os.environ.get(variable, "").strip()
    return value or None
