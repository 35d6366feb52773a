"""Skip-list and compiler flag override policy.

Both are plain data injected through ``GeneratorSettings``: the skip set is
a substring predicate over raw package names, and the override table maps a
normalized crate name to extra compiler flags. The table stands in for
feature resolution, which the generator does not perform.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class Included:
    """A dependency that is linked through its archive artifact."""

    artifact: str


@dataclass(frozen=True)
class Excluded:
    """A dependency that was dropped from the plan, and why."""

    reason: str


DependencyResolution = Union[Included, Excluded]


class SkipSet:
    """Substring patterns naming packages that never receive a rule."""

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self._patterns: Tuple[str, ...] = tuple(p for p in patterns if p)

    @property
    def patterns(self) -> Tuple[str, ...]:
        return self._patterns

    def match(self, name: str) -> Optional[str]:
        """Return the first pattern contained in ``name``, if any."""
        for pattern in self._patterns:
            if pattern in name:
                return pattern
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.match(name) is not None

    def __repr__(self) -> str:
        return f"SkipSet({list(self._patterns)!r})"


class FlagOverrides:
    """Extra compiler flags keyed by normalized crate name."""

    def __init__(
        self, overrides: Optional[Mapping[str, Iterable[str]]] = None
    ) -> None:
        self._overrides = {
            name: tuple(flags) for name, flags in (overrides or {}).items()
        }

    def flags_for(self, crate_name: str) -> Tuple[str, ...]:
        return self._overrides.get(crate_name, ())

    def __len__(self) -> int:
        return len(self._overrides)
