"""Breadth-first walk of the package graph."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Iterator, Set

from cargo_ninja.errors import CrateNameCollision
from cargo_ninja.models import CompileRule, PackageGraph, PackageId
from cargo_ninja.naming import normalize_name
from cargo_ninja.policy import SkipSet
from cargo_ninja.synthesizer import RuleSynthesizer

_LOGGER = logging.getLogger(__name__)


class Traverser:
    """Visit every package reachable from the root exactly once.

    Skipped packages are still dequeued so their own dependencies are
    reached, but no rule is produced for them. Rule order only affects the
    layout of the plan; ninja orders the build from each rule's inputs.
    """

    def __init__(
        self,
        graph: PackageGraph,
        synthesizer: RuleSynthesizer,
        skip_set: SkipSet,
    ) -> None:
        self._graph = graph
        self._synthesizer = synthesizer
        self._skip_set = skip_set

    def walk(self) -> Iterator[CompileRule]:
        queue: Deque[PackageId] = deque([self._graph.root])
        visited: Set[PackageId] = {self._graph.root}
        crate_owners: Dict[str, PackageId] = {}

        while queue:
            package = self._graph.get(queue.popleft())
            for dependency_id in package.dependencies:
                if dependency_id not in visited:
                    visited.add(dependency_id)
                    queue.append(dependency_id)

            pattern = self._skip_set.match(package.name)
            if pattern is not None:
                _LOGGER.warning(
                    "Skipping %s (matches '%s')", package.id, pattern
                )
                continue

            self._claim_crate_name(crate_owners, package.id)
            rule = self._synthesizer.synthesize(package)
            _LOGGER.debug("Synthesized rule for %s", package.id)
            yield rule

    @staticmethod
    def _claim_crate_name(
        owners: Dict[str, PackageId], package_id: PackageId
    ) -> None:
        crate_name = normalize_name(package_id.name)
        owner = owners.setdefault(crate_name, package_id)
        if owner != package_id:
            raise CrateNameCollision(
                f"{owner} and {package_id} both build crate '{crate_name}'"
            )
