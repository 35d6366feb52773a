from __future__ import annotations

"""Wrappers around the external ``cargo fetch`` and ``ninja`` processes."""

import logging
import subprocess
from pathlib import Path
from typing import List, Sequence

from cargo_ninja.config import DEFAULT_CARGO, DEFAULT_NINJA
from cargo_ninja.errors import ExternalCommandError

_LOGGER = logging.getLogger(__name__)


def _run(command: Sequence[str]) -> int:
    """Run ``command`` to completion, raising on spawn failure or non-zero exit."""
    _LOGGER.info("Running %s", " ".join(command))
    try:
        completed_process = subprocess.run(list(command), check=True)
    except FileNotFoundError as error:
        raise ExternalCommandError(
            command, 127, reason=f"executable not found ({error.filename})"
        ) from error
    except OSError as error:
        raise ExternalCommandError(
            command, 126, reason=f"cannot be spawned ({error.strerror or error})"
        ) from error
    except subprocess.CalledProcessError as error:
        raise ExternalCommandError(command, error.returncode) from error

    return completed_process.returncode


def fetch_command(manifest_path: Path, cargo: str = DEFAULT_CARGO) -> List[str]:
    return [cargo, "fetch", "--manifest-path", str(manifest_path)]


def build_command(
    plan_path: Path, ninja: str = DEFAULT_NINJA, verbose: bool = False
) -> List[str]:
    command = [ninja, "-f", str(plan_path)]
    if verbose:
        command.append("-v")
    return command


def run_fetch(manifest_path: Path, cargo: str = DEFAULT_CARGO) -> int:
    """Download every locked package into the local package cache."""
    return _run(fetch_command(manifest_path, cargo))


def run_build(
    plan_path: Path, ninja: str = DEFAULT_NINJA, verbose: bool = False
) -> int:
    """Execute the generated plan with ninja."""
    if not plan_path.exists():
        raise ExternalCommandError(
            build_command(plan_path, ninja, verbose),
            1,
            reason=f"build plan not found: {plan_path} (run 'create' first)",
        )
    return _run(build_command(plan_path, ninja, verbose))
