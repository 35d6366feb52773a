"""Resolve the source file each package is compiled from."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from cargo_ninja.config import BINARY_ENTRY, DEFAULT_EDITION, LIBRARY_ENTRY
from cargo_ninja.errors import ManifestError
from cargo_ninja.manifest import ManifestReader
from cargo_ninja.models import Package

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceEntry:
    """The compilation root of a package and the edition it is written in."""

    path: Path
    edition: str


class EntryResolver:
    """Find the primary source file for a package.

    The root binary always compiles ``src/main.rs``. Library dependencies
    read their own manifest from the package cache and honour a
    ``[lib] path`` override, falling back to ``src/lib.rs``.
    """

    def __init__(self, manifest_reader: Optional[ManifestReader] = None) -> None:
        self._manifests = manifest_reader or ManifestReader()

    def resolve(self, package: Package) -> SourceEntry:
        if package.manifest_dir is None:
            raise ManifestError(
                f"No local source directory for {package.id} "
                f"(source: {package.source or 'unknown'})"
            )

        if package.is_root:
            return SourceEntry(
                path=package.manifest_dir / BINARY_ENTRY,
                edition=package.edition or DEFAULT_EDITION,
            )

        manifest = self._manifests.read(package.manifest_dir / "Cargo.toml")
        relative = Path(manifest.lib_path) if manifest.lib_path else LIBRARY_ENTRY
        entry = SourceEntry(
            path=package.manifest_dir / relative,
            edition=manifest.edition,
        )
        _LOGGER.debug("Resolved %s to %s", package.id, entry.path)
        return entry
