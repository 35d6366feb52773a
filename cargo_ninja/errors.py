"""Common errors raised while generating a build plan."""

from __future__ import annotations

from typing import Optional, Sequence


class CargoNinjaError(RuntimeError):
    """Base class for plan generation failures."""

    exit_code = 1


class ManifestError(CargoNinjaError):
    """Raised when a package manifest is missing or cannot be parsed."""


class LockfileError(CargoNinjaError):
    """Raised when the lock file is missing or malformed."""


class RootPackageNotFound(LockfileError):
    """Raised when the root manifest's package is absent from the lock file."""


class PackageNotFound(LockfileError):
    """Raised when a package id does not exist in the graph."""


class SkippedDependencyError(CargoNinjaError):
    """Raised when a package depends on a skipped package in strict mode."""


class CrateNameCollision(CargoNinjaError):
    """Raised when two emitted packages share a normalized crate name."""


class PlanWriteError(CargoNinjaError):
    """Raised when the build plan cannot be written to disk."""


class ExternalCommandError(CargoNinjaError):
    """Raised when an external tool cannot be spawned or exits non-zero."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        reason: Optional[str] = None,
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.exit_code = returncode or 1
        detail = reason or f"exit status {returncode}"
        super().__init__(f"command {' '.join(self.command)!r} failed: {detail}")
