"""Models describing compile rules and the build plan handed to ninja."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from cargo_ninja.models.package import PackageId


class CrateType(str, Enum):
    """Crate kind passed to ``--crate-type``."""

    BIN = "bin"
    LIB = "lib"

    @property
    def emit(self) -> str:
        if self is CrateType.BIN:
            return "dep-info,link"
        return "dep-info,metadata,link"


@dataclass(frozen=True)
class ExternLink:
    """Pairing of a dependency's crate name with its archive artifact."""

    crate_name: str
    artifact: str

    def as_args(self) -> Tuple[str, str]:
        return ("--extern", f"{self.crate_name}={self.artifact}")


@dataclass(frozen=True)
class FetchStep:
    """The rule that refreshes the lock file from the manifest."""

    manifest_path: str
    lockfile_path: str


@dataclass(frozen=True)
class CompileRule:
    """One rustc invocation producing a package's artifacts."""

    package_id: PackageId
    crate_name: str
    crate_type: CrateType
    edition: str
    outputs: Tuple[str, ...]
    inputs: Tuple[str, ...]
    out_dir: str
    depfile: str
    library_search_path: str
    implicit_inputs: Tuple[str, ...] = ()
    order_only_inputs: Tuple[str, ...] = ()
    extra_flags: Tuple[str, ...] = ()
    externs: Tuple[ExternLink, ...] = ()

    @property
    def primary_output(self) -> str:
        return self.outputs[0]

    @property
    def emit(self) -> str:
        return self.crate_type.emit

    @property
    def args(self) -> List[str]:
        """Compiler arguments in the order they appear in the plan."""
        args = [
            "--crate-type",
            self.crate_type.value,
            "--edition",
            self.edition,
            "-L",
            f"dependency={self.library_search_path}",
        ]
        args.extend(self.extra_flags)
        for link in self.externs:
            args.extend(link.as_args())
        return args


@dataclass
class BuildPlan:
    """Ordered compile rules plus the default target declaration."""

    fetch: Optional[FetchStep] = None
    rules: List[CompileRule] = field(default_factory=list)
    default_target: Optional[str] = None

    def add_rule(self, rule: CompileRule) -> None:
        self.rules.append(rule)

    def rule_for(self, package_id: PackageId) -> Optional[CompileRule]:
        for rule in self.rules:
            if rule.package_id == package_id:
                return rule
        return None
