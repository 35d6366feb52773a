"""Shared fixtures: a fake Cargo project and package cache on disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from cargo_ninja import logging_config
from cargo_ninja.config import GeneratorSettings
from cargo_ninja.utils import env

REGISTRY_SOURCE = "registry+https://github.com/rust-lang/crates.io-index"

_ENV_VARS = (
    "CARGO_HOME",
    "CARGO_NINJA_REGISTRY_SRC",
    "CARGO_NINJA_SKIP",
    "CARGO_NINJA_FAIL_ON_SKIPPED",
    "RUSTC",
    "CARGO",
    "NINJA",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(env, "_ENV_LOADED", True)
    monkeypatch.setattr(logging_config, "_CONFIGURED", False)


@dataclass
class CargoProject:
    """Writes Cargo.toml, Cargo.lock and unpacked registry packages."""

    root_dir: Path
    root_name: str = "app"
    root_version: str = "0.1.0"
    root_edition: str = "2018"
    root_dependencies: List[str] = field(default_factory=list)
    packages: Dict[str, dict] = field(default_factory=dict)

    @property
    def manifest_path(self) -> Path:
        return self.root_dir / "Cargo.toml"

    @property
    def lockfile_path(self) -> Path:
        return self.root_dir / "Cargo.lock"

    @property
    def registry_src(self) -> Path:
        return self.root_dir / "registry"

    @property
    def plan_path(self) -> Path:
        return self.root_dir / "build.ninja"

    def add_package(
        self,
        name: str,
        version: str = "1.0.0",
        dependencies: Sequence[str] = (),
        edition: Optional[str] = "2018",
        lib_path: Optional[str] = None,
        write_manifest: bool = True,
    ) -> "CargoProject":
        self.packages[name] = {
            "version": version,
            "dependencies": list(dependencies),
            "edition": edition,
            "lib_path": lib_path,
            "write_manifest": write_manifest,
        }
        return self

    def package_dir(self, name: str) -> Path:
        version = self.packages[name]["version"]
        return self.registry_src / f"{name}-{version}"

    def write(self) -> "CargoProject":
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.manifest_path.write_text(
            "[package]\n"
            f'name = "{self.root_name}"\n'
            f'version = "{self.root_version}"\n'
            f'edition = "{self.root_edition}"\n',
            encoding="utf-8",
        )

        lock_lines = ["version = 3", ""]
        lock_lines.extend(
            self._lock_entry(
                self.root_name, self.root_version, None, self.root_dependencies
            )
        )
        for name, info in self.packages.items():
            lock_lines.extend(
                self._lock_entry(
                    name, info["version"], REGISTRY_SOURCE, info["dependencies"]
                )
            )
            if info["write_manifest"]:
                self._write_package_manifest(name, info)
        self.lockfile_path.write_text("\n".join(lock_lines), encoding="utf-8")
        return self

    def settings(self, **changes: object) -> GeneratorSettings:
        base = GeneratorSettings(
            manifest_path=self.manifest_path,
            lockfile_path=self.lockfile_path,
            plan_path=self.plan_path,
            registry_src=self.registry_src,
        )
        return base.with_overrides(**changes)

    @staticmethod
    def _lock_entry(
        name: str,
        version: str,
        source: Optional[str],
        dependencies: Sequence[str],
    ) -> List[str]:
        lines = ["[[package]]", f'name = "{name}"', f'version = "{version}"']
        if source:
            lines.append(f'source = "{source}"')
        if dependencies:
            lines.append("dependencies = [")
            lines.extend(f' "{dep}",' for dep in dependencies)
            lines.append("]")
        lines.append("")
        return lines

    def _write_package_manifest(self, name: str, info: dict) -> None:
        package_dir = self.package_dir(name)
        package_dir.mkdir(parents=True, exist_ok=True)
        lines = ["[package]", f'name = "{name}"', f'version = "{info["version"]}"']
        if info["edition"]:
            lines.append(f'edition = "{info["edition"]}"')
        if info["lib_path"]:
            lines.extend(["", "[lib]", f'path = "{info["lib_path"]}"'])
        (package_dir / "Cargo.toml").write_text(
            "\n".join(lines) + "\n", encoding="utf-8"
        )


@pytest.fixture
def cargo_project(tmp_path: Path) -> CargoProject:
    return CargoProject(root_dir=tmp_path / "project")
