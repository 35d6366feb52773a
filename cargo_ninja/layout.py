"""Artifact paths under the target directory."""

from __future__ import annotations

from typing import Tuple


class ArtifactLayout:
    """Names the files rustc produces for a crate.

    Binaries land directly in the target directory; libraries land in its
    ``deps`` subdirectory, which is also the library search path.
    """

    def __init__(self, target_dir: str = "target/debug") -> None:
        self.target_dir = target_dir.rstrip("/") or "."

    @property
    def deps_dir(self) -> str:
        return f"{self.target_dir}/deps"

    def binary(self, crate_name: str) -> str:
        return f"{self.target_dir}/{crate_name}"

    def rlib(self, crate_name: str) -> str:
        return f"{self.deps_dir}/lib{crate_name}.rlib"

    def rmeta(self, crate_name: str) -> str:
        return f"{self.deps_dir}/lib{crate_name}.rmeta"

    def library(self, crate_name: str) -> Tuple[str, str]:
        return (self.rlib(crate_name), self.rmeta(crate_name))

    def depfile(self, out_dir: str, crate_name: str) -> str:
        return f"{out_dir}/{crate_name}.d"
