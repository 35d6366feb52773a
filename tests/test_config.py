"""Tests for settings resolution and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cargo_ninja import config
from cargo_ninja.config import GeneratorSettings, load_settings
from cargo_ninja.utils import env


def test_default_registry_under_cargo_home(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARGO_HOME", "/opt/cargo")

    settings = GeneratorSettings()

    assert settings.registry_src == (
        Path("/opt/cargo") / "registry" / "src" / config.DEFAULT_REGISTRY_INDEX
    )


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARGO_NINJA_REGISTRY_SRC", "/srv/crates")
    monkeypatch.setenv("CARGO_NINJA_SKIP", "openssl, ,ring")
    monkeypatch.setenv("CARGO_NINJA_FAIL_ON_SKIPPED", "yes")
    monkeypatch.setenv("RUSTC", "/usr/local/bin/rustc")

    settings = load_settings()

    assert settings.registry_src == Path("/srv/crates")
    assert settings.skip_patterns == ("winapi", "openssl", "ring")
    assert settings.fail_on_skipped is True
    assert settings.rustc == "/usr/local/bin/rustc"
    assert settings.cargo == "cargo"


def test_explicit_values_win_over_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("CARGO_NINJA_REGISTRY_SRC", "/srv/crates")

    settings = load_settings(
        registry_src=Path("/tmp/reg"),
        plan_path=Path("out.ninja"),
        extra_skip_patterns=["winapi", "nix"],
    )

    assert settings.registry_src == Path("/tmp/reg")
    assert settings.plan_path == Path("out.ninja")
    assert settings.skip_patterns == ("winapi", "nix")


def test_with_overrides_ignores_none() -> None:
    settings = GeneratorSettings(target_dir="a")

    updated = settings.with_overrides(target_dir=None, fail_on_skipped=True)

    assert updated.target_dir == "a"
    assert updated.fail_on_skipped is True
    assert settings.fail_on_skipped is False


def test_load_dotenv_keeps_existing_values(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    dotenv_path = tmp_path / ".env"
    dotenv_path.write_text(
        "CARGO_NINJA_SKIP=openssl\nRUSTC=from-dotenv\n", encoding="utf-8"
    )
    monkeypatch.setattr(env.os, "environ", dict(os.environ))
    monkeypatch.setenv("RUSTC", "from-shell")
    monkeypatch.setattr(env, "_ENV_LOADED", False)

    env.load_dotenv(dotenv_path)

    assert env.extra_skip_patterns() == ["openssl"]
    assert env.tool_override("RUSTC") == "from-shell"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("1", True), ("TRUE", True), ("on", True), ("0", False), (None, False)],
)
def test_truthy(value, expected) -> None:
    assert env._truthy(value) is expected
