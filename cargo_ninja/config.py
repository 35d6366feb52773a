"""
Central configuration for the cargo-ninja generator.

Module-level constants hold the defaults; ``GeneratorSettings`` carries the
values resolved once at startup and injected into every component.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, Mapping, Optional, Tuple

from cargo_ninja.utils import env

# Input and output files ---------------------------------------------------

DEFAULT_MANIFEST_PATH = Path("Cargo.toml")
DEFAULT_LOCKFILE_PATH = Path("Cargo.lock")
DEFAULT_PLAN_PATH = Path("build.ninja")

# Package sources ------------------------------------------------------------

DEFAULT_REGISTRY_INDEX = "index.crates.io-6f17d22bba15001f"
"""Directory name of the crates.io index under ``$CARGO_HOME/registry/src``."""

BINARY_ENTRY = Path("src") / "main.rs"
LIBRARY_ENTRY = Path("src") / "lib.rs"
DEFAULT_EDITION = "2015"

# Artifacts ----------------------------------------------------------------

DEFAULT_TARGET_DIR = "target/debug"

# Policy ---------------------------------------------------------------------

DEFAULT_SKIP_PATTERNS: Tuple[str, ...] = ("winapi",)
"""Packages whose name contains one of these strings never get a rule."""

DEFAULT_FLAG_OVERRIDES: Mapping[str, Tuple[str, ...]] = {
    # No feature resolution; memchr needs its std feature to link.
    "memchr": ("--cfg", "'feature=\"std\"'"),
}

# Tools ----------------------------------------------------------------------

DEFAULT_RUSTC = "rustc"
DEFAULT_CARGO = "cargo"
DEFAULT_NINJA = "ninja"


@dataclass(frozen=True)
class GeneratorSettings:
    """Injected configuration for one generation run."""

    manifest_path: Path = DEFAULT_MANIFEST_PATH
    lockfile_path: Path = DEFAULT_LOCKFILE_PATH
    plan_path: Path = DEFAULT_PLAN_PATH
    registry_src: Path = field(
        default_factory=lambda: env.cargo_home()
        / "registry"
        / "src"
        / DEFAULT_REGISTRY_INDEX
    )
    target_dir: str = DEFAULT_TARGET_DIR
    skip_patterns: Tuple[str, ...] = DEFAULT_SKIP_PATTERNS
    flag_overrides: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_FLAG_OVERRIDES)
    )
    fail_on_skipped: bool = False
    rustc: str = DEFAULT_RUSTC
    cargo: str = DEFAULT_CARGO
    ninja: str = DEFAULT_NINJA

    def with_overrides(self, **changes: object) -> "GeneratorSettings":
        """Return a copy with every non-``None`` value in ``changes`` applied."""
        applied = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **applied)  # type: ignore[arg-type]


def load_settings(
    *,
    manifest_path: Optional[Path] = None,
    lockfile_path: Optional[Path] = None,
    plan_path: Optional[Path] = None,
    registry_src: Optional[Path] = None,
    target_dir: Optional[str] = None,
    fail_on_skipped: Optional[bool] = None,
    extra_skip_patterns: Iterable[str] = (),
) -> GeneratorSettings:
    """Resolve settings from defaults, the environment and explicit values.

    Explicit keyword arguments win over environment variables, which win
    over the module defaults.
    """
    env.load_dotenv()

    skip_patterns = tuple(
        dict.fromkeys(
            [
                *DEFAULT_SKIP_PATTERNS,
                *env.extra_skip_patterns(),
                *extra_skip_patterns,
            ]
        )
    )

    settings = GeneratorSettings(skip_patterns=skip_patterns)
    settings = settings.with_overrides(
        registry_src=env.registry_src_override(),
        fail_on_skipped=env.fail_on_skipped() or None,
        rustc=env.tool_override("RUSTC"),
        cargo=env.tool_override("CARGO"),
        ninja=env.tool_override("NINJA"),
    )
    return settings.with_overrides(
        manifest_path=manifest_path,
        lockfile_path=lockfile_path,
        plan_path=plan_path,
        registry_src=registry_src,
        target_dir=target_dir,
        fail_on_skipped=fail_on_skipped,
    )
