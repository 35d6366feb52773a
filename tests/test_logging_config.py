"""
Unit tests for logging configuration helper.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict

import pytest

from cargo_ninja import logging_config


@pytest.fixture
def basic_config_calls(monkeypatch: pytest.MonkeyPatch) -> list[Dict[str, Any]]:
    calls: list[Dict[str, Any]] = []

    def fake_basic_config(**kwargs: Any) -> None:
        calls.append(kwargs)

    monkeypatch.setattr(logging_config.logging, "basicConfig", fake_basic_config)
    return calls


def test_read_level_invalid_returns_none() -> None:
    assert logging_config._read_level("not-an-int") is None


def test_map_level_thresholds() -> None:
    assert logging_config._map_level(1) == logging_config.logging.INFO
    assert logging_config._map_level(2) == logging_config.logging.DEBUG


def test_silent_by_default(basic_config_calls: list) -> None:
    logging_config.configure_logging()

    assert basic_config_calls == []


def test_verbose_enables_info_on_stderr(basic_config_calls: list) -> None:
    logging_config.configure_logging(verbose=True)
    logging_config.configure_logging(verbose=True)

    assert len(basic_config_calls) == 1
    assert basic_config_calls[0]["level"] == logging_config.logging.INFO
    assert basic_config_calls[0]["force"] is True
    assert basic_config_calls[0]["stream"] is sys.stderr
    assert "filename" not in basic_config_calls[0]


def test_log_level_keeps_debug_when_verbose(
    monkeypatch: pytest.MonkeyPatch, basic_config_calls: list
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "2")

    logging_config.configure_logging(verbose=True)

    assert basic_config_calls[0]["level"] == logging_config.logging.DEBUG


def test_writes_to_file_when_log_file_set(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    basic_config_calls: list,
) -> None:
    log_path = tmp_path / "logs" / "cargo-ninja.log"
    monkeypatch.setenv("LOG_LEVEL", "1")
    monkeypatch.setenv("LOG_FILE", str(log_path))

    logging_config.configure_logging()

    assert basic_config_calls[0]["filename"] == log_path
    assert basic_config_calls[0]["filemode"] == "a"
    assert log_path.parent.is_dir()
