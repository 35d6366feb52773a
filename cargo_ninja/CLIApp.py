"""CLI wiring for the ``create`` and ``build`` commands."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

from cargo_ninja import __version__
from cargo_ninja.config import (DEFAULT_LOCKFILE_PATH, DEFAULT_MANIFEST_PATH,
                                DEFAULT_PLAN_PATH, GeneratorSettings,
                                load_settings)
from cargo_ninja.errors import CargoNinjaError
from cargo_ninja.generator import PlanGenerator
from cargo_ninja.logging_config import configure_logging
from cargo_ninja.runner import run_build, run_fetch
from cargo_ninja.utils import env

logger = logging.getLogger(__name__)

COMMANDS = ("build", "create")


class CLIApp:
    """Command-line entry point for cargo-ninja."""

    def __init__(self, settings: GeneratorSettings, verbose: bool = False) -> None:
        self._settings = settings
        self._verbose = verbose
        self._handlers: Dict[str, Callable[[], int]] = {
            "build": self.build,
            "create": self.create,
        }

    @property
    def settings(self) -> GeneratorSettings:
        return self._settings

    def create(self) -> int:
        """Fetch the locked packages, then write the build plan."""
        run_fetch(self._settings.manifest_path, self._settings.cargo)
        plan = PlanGenerator(self._settings).generate()
        logger.info(
            "Created %s with %d rules", self._settings.plan_path, len(plan.rules)
        )
        return 0

    def build(self) -> int:
        """Run ninja against the existing build plan."""
        return run_build(
            self._settings.plan_path, self._settings.ninja, self._verbose
        )

    def run(self, command: str) -> int:
        handler = self._handlers.get(command)
        if handler is None:
            raise ValueError(f"Unknown command: {command}")
        return handler()


def build_arg_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(
        prog="cargo-ninja",
        description=(
            "Generate a ninja build plan from Cargo.toml and Cargo.lock, "
            "or run it."
        ),
    )
    argument_parser.add_argument(
        "command",
        nargs="?",
        help="'create' fetches packages and writes the plan; "
        "'build' runs ninja on it.",
    )
    argument_parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    argument_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress to stderr and run ninja verbosely.",
    )
    argument_parser.add_argument(
        "--manifest-path",
        type=Path,
        default=DEFAULT_MANIFEST_PATH,
        help="Path to Cargo.toml (default: %(default)s).",
    )
    argument_parser.add_argument(
        "--lockfile-path",
        type=Path,
        default=DEFAULT_LOCKFILE_PATH,
        help="Path to Cargo.lock (default: %(default)s).",
    )
    argument_parser.add_argument(
        "--plan-path",
        type=Path,
        default=DEFAULT_PLAN_PATH,
        help="Path of the generated ninja file (default: %(default)s).",
    )
    argument_parser.add_argument(
        "--registry-src",
        type=Path,
        default=None,
        help="Directory holding unpacked registry packages.",
    )
    argument_parser.add_argument(
        "--target-dir",
        default=None,
        help="Directory for build artifacts (default: target/debug).",
    )
    argument_parser.add_argument(
        "--fail-on-skipped",
        action="store_true",
        help="Abort when a package depends on a skipped package.",
    )
    return argument_parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    argument_parser = build_arg_parser()
    parsed_args = argument_parser.parse_args(argv)
    env.load_dotenv()
    configure_logging(verbose=parsed_args.verbose)

    if parsed_args.command not in COMMANDS:
        argument_parser.print_usage(sys.stderr)
        print(
            f"Unknown command: {parsed_args.command!r} "
            f"(expected one of: {', '.join(COMMANDS)})",
            file=sys.stderr,
        )
        return 1

    settings = load_settings(
        manifest_path=parsed_args.manifest_path,
        lockfile_path=parsed_args.lockfile_path,
        plan_path=parsed_args.plan_path,
        registry_src=parsed_args.registry_src,
        target_dir=parsed_args.target_dir,
        fail_on_skipped=True if parsed_args.fail_on_skipped else None,
    )
    app = CLIApp(settings, verbose=parsed_args.verbose)
    try:
        return app.run(parsed_args.command)
    except CargoNinjaError as error:
        logger.debug("Command %s failed", parsed_args.command, exc_info=True)
        print(f"error: {error}", file=sys.stderr)
        return error.exit_code


if __name__ == "__main__":
    sys.exit(main())
