"""Build a ``PackageGraph`` from ``Cargo.lock`` and the root ``Cargo.toml``."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from cargo_ninja.errors import LockfileError, RootPackageNotFound
from cargo_ninja.manifest import ManifestReader, PackageManifest
from cargo_ninja.models import Package, PackageGraph, PackageId, PackageKind

_LOGGER = logging.getLogger(__name__)

REGISTRY_SOURCE_PREFIX = "registry+"
GIT_SOURCE_PREFIX = "git+"


@dataclass(frozen=True)
class LockEntry:
    """One ``[[package]]`` table from the lock file."""

    name: str
    version: str
    source: Optional[str]
    dependencies: Tuple[str, ...]

    @property
    def id(self) -> PackageId:
        return PackageId(self.name, self.version)


class LockfileParser:
    """Parse a lock file into the dependency graph of the root package.

    Each lock entry becomes one ``Package``. Dependency references are
    resolved to ``PackageId`` values: a bare name must be unique in the
    lock file, while ``name version`` pins an exact entry.
    """

    def __init__(
        self,
        lockfile_path: Union[Path, str],
        manifest_path: Union[Path, str],
        registry_src: Union[Path, str],
        manifest_reader: Optional[ManifestReader] = None,
    ) -> None:
        self._lockfile_path = Path(lockfile_path)
        self._manifest_path = Path(manifest_path)
        self._registry_src = Path(registry_src)
        self._manifests = manifest_reader or ManifestReader()

    def parse(self) -> PackageGraph:
        """Load both files and return the graph rooted at the manifest."""
        root_manifest = self._manifests.read(self._manifest_path)
        entries = self._read_entries()
        by_id = {entry.id: entry for entry in entries}
        by_name = self._index_by_name(entries)

        root_entry = self._find_root(root_manifest, entries)
        packages: List[Package] = []
        for entry in entries:
            dependencies = tuple(
                self._resolve_reference(entry, reference, by_id, by_name)
                for reference in entry.dependencies
            )
            packages.append(
                self._build_package(entry, dependencies, root_entry, root_manifest)
            )

        graph = PackageGraph.from_packages(root_entry.id, packages)
        _LOGGER.info(
            "Parsed %d packages from %s (root %s)",
            len(graph),
            self._lockfile_path,
            graph.root,
        )
        return graph

    def _read_entries(self) -> List[LockEntry]:
        if not self._lockfile_path.exists():
            raise LockfileError(f"Lock file not found: {self._lockfile_path}")

        try:
            data = tomllib.loads(self._lockfile_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            raise LockfileError(
                f"Invalid lock file {self._lockfile_path}: {exc}"
            ) from exc
        except OSError as exc:
            raise LockfileError(
                f"Unable to read lock file {self._lockfile_path}: {exc}"
            ) from exc

        tables: List[Mapping[str, Any]] = []
        # Version 1 lock files keep the root package in its own table.
        if isinstance(data.get("root"), dict):
            tables.append(data["root"])
        raw_packages = data.get("package", [])
        if not isinstance(raw_packages, list):
            raise LockfileError(
                f"Lock file {self._lockfile_path} has a malformed [[package]] list"
            )
        tables.extend(raw_packages)

        entries = [self._parse_entry(table) for table in tables]
        _LOGGER.debug(
            "Read %d lock entries from %s", len(entries), self._lockfile_path
        )
        return entries

    def _parse_entry(self, table: Mapping[str, Any]) -> LockEntry:
        if not isinstance(table, dict):
            raise LockfileError(
                f"Lock file {self._lockfile_path} has a non-table package entry: "
                f"{table!r}"
            )
        name = table.get("name")
        version = table.get("version")
        if not isinstance(name, str) or not isinstance(version, str):
            raise LockfileError(
                f"Lock entry without name or version in {self._lockfile_path}: "
                f"{dict(table)!r}"
            )
        source = table.get("source")
        dependencies = table.get("dependencies", [])
        if not isinstance(dependencies, list):
            raise LockfileError(f"Malformed dependency list for {name} {version}")
        return LockEntry(
            name=name,
            version=version,
            source=source if isinstance(source, str) else None,
            dependencies=tuple(str(dep) for dep in dependencies),
        )

    @staticmethod
    def _index_by_name(
        entries: Sequence[LockEntry],
    ) -> Dict[str, List[LockEntry]]:
        index: Dict[str, List[LockEntry]] = {}
        for entry in entries:
            index.setdefault(entry.name, []).append(entry)
        return index

    def _find_root(
        self, manifest: PackageManifest, entries: Sequence[LockEntry]
    ) -> LockEntry:
        for entry in entries:
            if entry.name != manifest.name or entry.source is not None:
                continue
            if manifest.version is None or manifest.version == entry.version:
                return entry
        raise RootPackageNotFound(
            f"Root package '{manifest.name}' is missing from "
            f"{self._lockfile_path}"
        )

    def _resolve_reference(
        self,
        owner: LockEntry,
        reference: str,
        by_id: Mapping[PackageId, LockEntry],
        by_name: Mapping[str, List[LockEntry]],
    ) -> PackageId:
        """Resolve ``name``, ``name version`` or ``name version (source)``."""
        parts = reference.split()
        if not parts:
            raise LockfileError(f"Empty dependency reference in {owner.id}")

        name = parts[0]
        if len(parts) >= 2:
            package_id = PackageId(name, parts[1])
            if package_id not in by_id:
                raise LockfileError(
                    f"{owner.id} depends on '{reference}', "
                    "which is not in the lock file"
                )
            return package_id

        candidates = by_name.get(name, [])
        if len(candidates) != 1:
            problem = "missing from" if not candidates else "ambiguous in"
            raise LockfileError(
                f"{owner.id} depends on '{name}', which is {problem} the lock file"
            )
        return candidates[0].id

    def _build_package(
        self,
        entry: LockEntry,
        dependencies: Tuple[PackageId, ...],
        root_entry: LockEntry,
        root_manifest: PackageManifest,
    ) -> Package:
        if entry.id == root_entry.id:
            return Package(
                name=entry.name,
                version=entry.version,
                kind=PackageKind.ROOT_BINARY,
                manifest_dir=self._manifest_path.parent,
                dependencies=dependencies,
                edition=root_manifest.edition,
                source=entry.source,
            )

        return Package(
            name=entry.name,
            version=entry.version,
            kind=PackageKind.LIBRARY_DEPENDENCY,
            manifest_dir=self._source_dir(entry, root_manifest),
            dependencies=dependencies,
            source=entry.source,
        )

    def _source_dir(
        self, entry: LockEntry, root_manifest: PackageManifest
    ) -> Optional[Path]:
        if entry.source is None:
            return root_manifest.path_dependencies.get(entry.name)
        if entry.source.startswith(REGISTRY_SOURCE_PREFIX):
            return self._registry_src / f"{entry.name}-{entry.version}"
        if entry.source.startswith(GIT_SOURCE_PREFIX):
            _LOGGER.debug("No local source directory for git package %s", entry.id)
        return None


def load_package_graph(
    lockfile_path: Union[Path, str],
    manifest_path: Union[Path, str],
    registry_src: Union[Path, str],
    manifest_reader: Optional[ManifestReader] = None,
) -> PackageGraph:
    return LockfileParser(
        lockfile_path, manifest_path, registry_src, manifest_reader
    ).parse()
