"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from heic_sim.core.config import (
    Settings,
    SimulationSettings,
    clear_settings_cache,
    get_settings,
)
from heic_sim.core.exceptions import ConfigurationError


class TestSimulationSettings:
    """Tests for SimulationSettings configuration."""

    def test_default_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default battle rules."""
        monkeypatch.chdir(tmp_path)

        settings = SimulationSettings()

        assert settings.max_turns == 100
        assert settings.gold_cap == 10
        assert settings.riptide_damage == 5
        assert settings.riptide_max_triggers == 1
        assert settings.exposed_limit == 1
        assert settings.annotate_sources is True

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test rules can be overridden from the environment."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HEIC_SIM_BATTLE_MAX_TURNS", "25")
        monkeypatch.setenv("HEIC_SIM_BATTLE_ANNOTATE_SOURCES", "false")

        settings = SimulationSettings()

        assert settings.max_turns == 25
        assert settings.annotate_sources is False

    def test_max_turns_bounds(self) -> None:
        """Test that the round cap must be at least 1."""
        with pytest.raises(ValueError):
            SimulationSettings(max_turns=0)

    def test_riptide_validation(self) -> None:
        """Test that extra riptide ticks require riptide damage."""
        with pytest.raises(ConfigurationError) as exc_info:
            SimulationSettings(riptide_damage=0, riptide_max_triggers=3)

        assert "riptide_max_triggers" in str(exc_info.value)


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "heic-sim"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.json_logs is False
        assert isinstance(settings.simulation, SimulationSettings)

    def test_env_vars(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        mock_env_vars: dict[str, str],
    ) -> None:
        """Test settings read from the environment."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.simulation.max_turns == 42
        assert settings.simulation.gold_cap == 15


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_returns_settings_instance(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that get_settings returns a Settings instance."""
        monkeypatch.chdir(tmp_path)

        assert isinstance(get_settings(), Settings)

    def test_caching(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that settings are cached."""
        monkeypatch.chdir(tmp_path)

        assert get_settings() is get_settings()

    def test_clear_cache(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that clearing the cache reloads settings."""
        monkeypatch.chdir(tmp_path)
        first = get_settings()

        clear_settings_cache()

        assert get_settings() is not first

    def test_invalid_env_raises_configuration_error(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that invalid environment values surface as ConfigurationError."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HEIC_SIM_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError):
            get_settings()
