"""Reader for ``Cargo.toml`` package manifests."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from cargo_ninja.config import DEFAULT_EDITION
from cargo_ninja.errors import ManifestError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManifest:
    """The parts of a manifest the generator needs."""

    name: str
    version: Optional[str]
    edition: str = DEFAULT_EDITION
    lib_path: Optional[str] = None
    path_dependencies: Mapping[str, Path] = field(default_factory=dict)


class ManifestReader:
    """Parse manifests and cache them by resolved path."""

    def __init__(self) -> None:
        self._cache: Dict[Path, PackageManifest] = {}

    def read(self, manifest_path: Union[Path, str]) -> PackageManifest:
        path = Path(manifest_path)
        key = path.resolve()
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        manifest = self._parse(path, self._load(path))
        self._cache[key] = manifest
        return manifest

    def _load(self, path: Path) -> Dict[str, Any]:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ManifestError(f"Manifest not found: {path}") from exc
        except OSError as exc:
            raise ManifestError(f"Unable to read manifest {path}: {exc}") from exc

        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ManifestError(f"Invalid manifest {path}: {exc}") from exc
        _LOGGER.debug("Read manifest %s", path)
        return data

    def _parse(self, path: Path, data: Dict[str, Any]) -> PackageManifest:
        package = data.get("package")
        if not isinstance(package, dict) or not package.get("name"):
            raise ManifestError(f"Manifest {path} has no [package] name")

        edition = package.get("edition", DEFAULT_EDITION)
        if not isinstance(edition, str):
            # edition.workspace = true needs the workspace root manifest.
            raise ManifestError(
                f"Manifest {path} does not set a literal edition: {edition!r}"
            )
        version = package.get("version")
        lib_table = data.get("lib")
        lib_path = None
        if isinstance(lib_table, dict) and lib_table.get("path"):
            lib_path = str(lib_table["path"])

        return PackageManifest(
            name=str(package["name"]),
            version=str(version) if isinstance(version, str) else None,
            edition=edition,
            lib_path=lib_path,
            path_dependencies=self._path_dependencies(path, data),
        )

    def _path_dependencies(
        self, path: Path, data: Mapping[str, Any]
    ) -> Dict[str, Path]:
        """Map dependencies declared with ``path = ...`` to their directory."""
        declared = data.get("dependencies")
        if not isinstance(declared, dict):
            return {}

        resolved: Dict[str, Path] = {}
        for alias, spec in declared.items():
            if not isinstance(spec, dict) or "path" not in spec:
                continue
            # A renamed dependency is locked under its real package name.
            package_name = str(spec.get("package", alias))
            resolved[package_name] = path.parent / str(spec["path"])
        return resolved
