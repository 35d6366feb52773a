"""Wire the loader, traverser, synthesizer and emitter together."""

from __future__ import annotations

import logging
from typing import Optional

from cargo_ninja.config import GeneratorSettings
from cargo_ninja.emitter import render_plan, write_plan_atomically
from cargo_ninja.errors import CargoNinjaError, PlanWriteError
from cargo_ninja.entry import EntryResolver
from cargo_ninja.layout import ArtifactLayout
from cargo_ninja.lockfile import load_package_graph
from cargo_ninja.manifest import ManifestReader
from cargo_ninja.models import BuildPlan, FetchStep, PackageGraph
from cargo_ninja.policy import FlagOverrides, SkipSet
from cargo_ninja.synthesizer import RuleSynthesizer
from cargo_ninja.traverser import Traverser

_LOGGER = logging.getLogger(__name__)


class PlanGenerator:
    """Turn the resolved lock graph into a ninja build plan."""

    def __init__(
        self,
        settings: GeneratorSettings,
        manifest_reader: Optional[ManifestReader] = None,
    ) -> None:
        self._settings = settings
        self._manifests = manifest_reader or ManifestReader()
        self._skip_set = SkipSet(settings.skip_patterns)
        self._overrides = FlagOverrides(settings.flag_overrides)
        self._layout = ArtifactLayout(settings.target_dir)

    def load_graph(self) -> PackageGraph:
        return load_package_graph(
            self._settings.lockfile_path,
            self._settings.manifest_path,
            self._settings.registry_src,
            self._manifests,
        )

    def build_plan(self, graph: PackageGraph) -> BuildPlan:
        fetch = FetchStep(
            manifest_path=self._settings.manifest_path.as_posix(),
            lockfile_path=self._settings.lockfile_path.as_posix(),
        )
        synthesizer = RuleSynthesizer(
            graph,
            EntryResolver(self._manifests),
            self._layout,
            self._skip_set,
            self._overrides,
            order_only_inputs=(fetch.lockfile_path,),
            fail_on_skipped=self._settings.fail_on_skipped,
        )

        plan = BuildPlan(fetch=fetch)
        for rule in Traverser(graph, synthesizer, self._skip_set).walk():
            plan.add_rule(rule)
            if rule.package_id == graph.root:
                plan.default_target = rule.primary_output

        if plan.default_target is None:
            raise CargoNinjaError(
                f"Root package {graph.root} matches the skip list; nothing to build"
            )

        _LOGGER.info(
            "Planned %d of %d packages", len(plan.rules), len(graph)
        )
        return plan

    def render(self, plan: BuildPlan) -> str:
        return render_plan(
            plan, rustc=self._settings.rustc, cargo=self._settings.cargo
        )

    def generate(self) -> BuildPlan:
        """Load, plan, render and publish; nothing is written on failure."""
        plan = self.build_plan(self.load_graph())
        try:
            write_plan_atomically(self._settings.plan_path, self.render(plan))
        except OSError as exc:
            raise PlanWriteError(
                f"Unable to write build plan {self._settings.plan_path}: {exc}"
            ) from exc
        return plan


def generate_plan(settings: GeneratorSettings) -> BuildPlan:
    return PlanGenerator(settings).generate()
