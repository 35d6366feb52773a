"""Domain models shared by the loader, synthesizer and emitter."""

from .package import Package, PackageGraph, PackageId, PackageKind
from .plan import BuildPlan, CompileRule, CrateType, ExternLink, FetchStep

__all__ = [
    "BuildPlan",
    "CompileRule",
    "CrateType",
    "ExternLink",
    "FetchStep",
    "Package",
    "PackageGraph",
    "PackageId",
    "PackageKind",
]
