"""Synthesize one rustc compile rule per package."""

from __future__ import annotations

import logging
from typing import List, Sequence

from cargo_ninja.entry import EntryResolver
from cargo_ninja.errors import SkippedDependencyError
from cargo_ninja.layout import ArtifactLayout
from cargo_ninja.models import (CompileRule, CrateType, ExternLink, Package,
                                PackageGraph)
from cargo_ninja.naming import normalize_name
from cargo_ninja.policy import (DependencyResolution, Excluded, FlagOverrides,
                                Included, SkipSet)

_LOGGER = logging.getLogger(__name__)


class RuleSynthesizer:
    """Build the ``CompileRule`` for a visited package.

    Every identifier that names a crate goes through ``normalize_name`` so a
    dependent's ``--extern`` pairing always matches the artifact its
    dependency produces. Dependencies matched by the skip set resolve to
    ``Excluded``; by default they are left out of the dependent's inputs
    and links, and with ``fail_on_skipped`` they abort generation.
    """

    def __init__(
        self,
        graph: PackageGraph,
        entry_resolver: EntryResolver,
        layout: ArtifactLayout,
        skip_set: SkipSet,
        overrides: FlagOverrides,
        *,
        order_only_inputs: Sequence[str] = (),
        fail_on_skipped: bool = False,
    ) -> None:
        self._graph = graph
        self._entries = entry_resolver
        self._layout = layout
        self._skip_set = skip_set
        self._overrides = overrides
        self._order_only_inputs = tuple(order_only_inputs)
        self._fail_on_skipped = fail_on_skipped

    def resolve_dependency(self, dependency: Package) -> DependencyResolution:
        pattern = self._skip_set.match(dependency.name)
        if pattern is not None:
            return Excluded(
                reason=f"'{dependency.name}' matches skip pattern '{pattern}'"
            )
        return Included(artifact=self._layout.rlib(normalize_name(dependency.name)))

    def synthesize(self, package: Package) -> CompileRule:
        crate_name = normalize_name(package.name)
        entry = self._entries.resolve(package)

        if package.is_root:
            crate_type = CrateType.BIN
            out_dir = self._layout.target_dir
            outputs = (self._layout.binary(crate_name),)
        else:
            crate_type = CrateType.LIB
            out_dir = self._layout.deps_dir
            outputs = self._layout.library(crate_name)

        externs = self._externs_for(package)
        return CompileRule(
            package_id=package.id,
            crate_name=crate_name,
            crate_type=crate_type,
            edition=entry.edition,
            outputs=outputs,
            inputs=(entry.path.as_posix(),),
            out_dir=out_dir,
            depfile=self._layout.depfile(out_dir, crate_name),
            library_search_path=self._layout.deps_dir,
            implicit_inputs=tuple(link.artifact for link in externs),
            order_only_inputs=self._order_only_inputs,
            extra_flags=self._overrides.flags_for(crate_name),
            externs=tuple(externs),
        )

    def _externs_for(self, package: Package) -> List[ExternLink]:
        externs: List[ExternLink] = []
        seen: set[str] = set()
        for dependency in self._graph.dependencies_of(package):
            resolution = self.resolve_dependency(dependency)
            if isinstance(resolution, Excluded):
                self._handle_excluded(package, dependency, resolution)
                continue
            crate_name = normalize_name(dependency.name)
            if crate_name in seen:
                continue
            seen.add(crate_name)
            externs.append(ExternLink(crate_name, resolution.artifact))
        return externs

    def _handle_excluded(
        self,
        package: Package,
        dependency: Package,
        resolution: Excluded,
    ) -> None:
        if self._fail_on_skipped:
            raise SkippedDependencyError(
                f"{package.id} depends on skipped package {dependency.id}: "
                f"{resolution.reason}"
            )
        _LOGGER.warning(
            "Omitting %s from %s: %s",
            dependency.id,
            package.id,
            resolution.reason,
        )
