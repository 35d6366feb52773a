"""Serialize a build plan into a ninja file."""

from __future__ import annotations

import io
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Optional, TextIO, Union

from cargo_ninja.models import BuildPlan, CompileRule, FetchStep

_LOGGER = logging.getLogger(__name__)

NINJA_REQUIRED_VERSION = "1.7"
FETCH_RULE = "cargo_fetch"
COMPILE_RULE = "rustc"


def escape_path(path: str) -> str:
    """Escape a path for use in a ninja ``build`` line."""
    return path.replace("$", "$$").replace(" ", "$ ").replace(":", "$:")


def escape_value(value: str) -> str:
    """Escape a variable value; only ``$`` is special there."""
    return value.replace("$", "$$")


def _paths(paths: Iterable[str]) -> str:
    return " ".join(escape_path(path) for path in paths)


class PlanEmitter:
    """Write the preamble, one block per compile rule, then the default."""

    def __init__(
        self, stream: TextIO, *, rustc: str = "rustc", cargo: str = "cargo"
    ) -> None:
        self._stream = stream
        self._rustc = rustc
        self._cargo = cargo

    def write_preamble(self, fetch: Optional[FetchStep] = None) -> None:
        write = self._stream.write
        write("# This file is generated by cargo-ninja. Do not edit.\n")
        write(f"ninja_required_version = {NINJA_REQUIRED_VERSION}\n")
        write(f"rustc = {escape_value(self._rustc)}\n")
        write(f"cargo = {escape_value(self._cargo)}\n")
        write("\n")
        write(f"rule {FETCH_RULE}\n")
        write("  command = $cargo fetch --manifest-path $in\n")
        write("  description = FETCH $in\n")
        write("  restat = 1\n")
        write("\n")
        write(f"rule {COMPILE_RULE}\n")
        write(
            "  command = $rustc --crate-name $crate_name $in $args "
            "--emit=$emit --out-dir $out_dir\n"
        )
        write("  description = RUSTC $crate_name\n")
        write("  depfile = $depfile\n")
        write("  deps = gcc\n")
        write("\n")
        if fetch is not None:
            write(
                f"build {escape_path(fetch.lockfile_path)}: {FETCH_RULE} "
                f"{escape_path(fetch.manifest_path)}\n"
            )
            write("\n")

    def write_rule(self, rule: CompileRule) -> None:
        header = f"build {_paths(rule.outputs)}: {COMPILE_RULE} {_paths(rule.inputs)}"
        if rule.implicit_inputs:
            header += f" | {_paths(rule.implicit_inputs)}"
        if rule.order_only_inputs:
            header += f" || {_paths(rule.order_only_inputs)}"

        write = self._stream.write
        write(header + "\n")
        write(f"  crate_name = {escape_value(rule.crate_name)}\n")
        write(f"  args = {escape_value(' '.join(rule.args))}\n")
        write(f"  out_dir = {escape_value(rule.out_dir)}\n")
        write(f"  emit = {rule.emit}\n")
        write(f"  depfile = {escape_value(rule.depfile)}\n")
        write("\n")

    def write_default(self, target: str) -> None:
        self._stream.write(f"default {escape_path(target)}\n")

    def emit(self, plan: BuildPlan) -> None:
        self.write_preamble(plan.fetch)
        for rule in plan.rules:
            self.write_rule(rule)
        if plan.default_target is not None:
            self.write_default(plan.default_target)


def render_plan(
    plan: BuildPlan, *, rustc: str = "rustc", cargo: str = "cargo"
) -> str:
    """Return the full ninja text for ``plan``."""
    buffer = io.StringIO()
    PlanEmitter(buffer, rustc=rustc, cargo=cargo).emit(plan)
    return buffer.getvalue()


def _published_mode(target: Path) -> int:
    """Keep an existing plan's mode; new plans get 0o666 minus the umask."""
    if target.exists():
        return stat.S_IMODE(target.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_plan_atomically(path: Union[Path, str], text: str) -> Path:
    """Publish ``text`` at ``path`` via a temporary file and ``os.replace``.

    Readers see either the previous file or the complete new one.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_file = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=target.parent,
        prefix=f".{target.name}.",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_file.name)
    try:
        with temp_file:
            temp_file.write(text)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.chmod(temp_path, _published_mode(target))
        os.replace(temp_path, target)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise

    _LOGGER.info("Wrote build plan to %s", target)
    return target
