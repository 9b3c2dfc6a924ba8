"""Tests for diagnostic logging configuration."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest
import structlog

from heic_sim.core import logging as logging_module
from heic_sim.core.config import Settings
from heic_sim.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)


if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults after each test."""
    yield
    clear_context()
    structlog.reset_defaults()


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Capture the arguments configure_logging is called with."""
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(logging_module, "configure_logging", lambda **kwargs: calls.append(kwargs))
    return calls


class TestConfigureFromSettings:
    """Tests for configure_logging_from_settings."""

    def test_level_and_format(self, captured: list[dict[str, Any]]) -> None:
        """Test log level and JSON flag are taken from settings."""
        configure_logging_from_settings(Settings(log_level="WARNING", json_logs=True))

        assert captured == [{"level": "WARNING", "json_format": True, "log_file": None}]

    def test_debug_forces_debug_level(self, captured: list[dict[str, Any]]) -> None:
        """Test debug mode overrides the configured level."""
        configure_logging_from_settings(Settings(debug=True, log_level="ERROR"))

        assert captured[0]["level"] == "DEBUG"

    def test_reads_environment_by_default(
        self,
        captured: list[dict[str, Any]],
        mock_env_vars: dict[str, str],
    ) -> None:
        """Test the cached settings are used when none are given."""
        configure_logging_from_settings()

        assert captured[0]["level"] == "DEBUG"
        assert captured[0]["json_format"] is False


class TestRendering:
    """Tests for rendered log output."""

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON rendering carries the event, fields and app name."""
        configure_logging(level="INFO", json_format=True)

        get_logger("tests").info("Battle ended", outcome="Draw")

        entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert entry["event"] == "Battle ended"
        assert entry["outcome"] == "Draw"
        assert entry["app"] == "heic_sim"
        assert entry["level"] == "info"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test entries below the configured level are dropped."""
        configure_logging(level="WARNING", json_format=True)

        get_logger("tests").info("quiet")

        assert "quiet" not in capsys.readouterr().out

    def test_bound_context_included(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test context bound by a host is merged into every entry until cleared."""
        configure_logging(level="INFO", json_format=True)
        logger = get_logger("tests")

        bind_context(sweep="nightly")
        logger.info("first")
        clear_context()
        logger.info("second")

        first, second = (json.loads(line) for line in capsys.readouterr().out.strip().splitlines()[-2:])
        assert first["sweep"] == "nightly"
        assert "sweep" not in second
