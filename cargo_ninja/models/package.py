"""Domain models for packages and the resolved dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from cargo_ninja.errors import PackageNotFound


class PackageKind(str, Enum):
    """Role a package plays in the build."""

    ROOT_BINARY = "bin"
    LIBRARY_DEPENDENCY = "lib"


@dataclass(frozen=True, order=True)
class PackageId:
    """Stable identity of a package inside one lock file."""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


@dataclass(frozen=True)
class Package:
    """A named, versioned compilation unit with its direct dependencies.

    ``manifest_dir`` is the directory holding the package's own
    ``Cargo.toml``; it is ``None`` when the package source has no known
    location on disk (for example git checkouts). ``edition`` is only known
    up front for the root package; dependency editions are read from their
    manifests when the package is compiled.
    """

    name: str
    version: str
    kind: PackageKind
    manifest_dir: Optional[Path]
    dependencies: Tuple[PackageId, ...] = ()
    edition: Optional[str] = None
    source: Optional[str] = None

    @property
    def id(self) -> PackageId:
        return PackageId(self.name, self.version)

    @property
    def is_root(self) -> bool:
        return self.kind is PackageKind.ROOT_BINARY


@dataclass(frozen=True)
class PackageGraph:
    """Directed acyclic graph of packages rooted at the package being built."""

    root: PackageId
    packages: Mapping[PackageId, Package] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.root not in self.packages:
            raise PackageNotFound(f"Root package '{self.root}' is not in graph")

    def __len__(self) -> int:
        return len(self.packages)

    def __contains__(self, package_id: object) -> bool:
        return package_id in self.packages

    @property
    def root_package(self) -> Package:
        return self.packages[self.root]

    def get(self, package_id: PackageId) -> Package:
        try:
            return self.packages[package_id]
        except KeyError as exc:
            raise PackageNotFound(
                f"Package '{package_id}' does not exist in the graph"
            ) from exc

    def dependencies_of(self, package: Package) -> List[Package]:
        """Return the direct dependencies of ``package`` in declared order."""
        return [self.get(dep_id) for dep_id in package.dependencies]

    @classmethod
    def from_packages(
        cls, root: PackageId, packages: List[Package]
    ) -> "PackageGraph":
        index: Dict[PackageId, Package] = {}
        for package in packages:
            index[package.id] = package
        return cls(root=root, packages=index)
