"""Configuration management for the battle simulator.

Centralized configuration using pydantic-settings, supporting environment
variables, .env files, and per-call overrides passed to ``simulate``.

Example:
    >>> from heic_sim.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.simulation.max_turns
    100

Environment Variables:
    HEIC_SIM_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    HEIC_SIM_JSON_LOGS: Emit diagnostic logs as JSON
    HEIC_SIM_BATTLE_MAX_TURNS: Round cap before a battle is declared a draw
    HEIC_SIM_BATTLE_GOLD_CAP: Maximum gold a fighter can hold
    HEIC_SIM_BATTLE_RIPTIDE_DAMAGE: Damage dealt per riptide tick
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from heic_sim.core.constants import (
    DEFAULT_EXPOSED_LIMIT,
    DEFAULT_MAX_TURNS,
    DEFAULT_RIPTIDE_TRIGGERS,
    GOLD_CAP,
    RIPTIDE_DAMAGE,
)
from heic_sim.core.exceptions import ConfigurationError


class SimulationSettings(BaseSettings):
    """Rules knobs for a single battle.

    Attributes:
        max_turns: Round cap; reaching it ends the battle in a draw.
        gold_cap: Maximum gold a fighter can hold.
        riptide_damage: Flat damage dealt per riptide tick.
        riptide_max_triggers: Default riptide ticks per turn end.
        exposed_limit: Default number of Exposed triggers per battle.
        annotate_sources: Prefix transcript lines with the emitting slug.
    """

    model_config = SettingsConfigDict(
        env_prefix="HEIC_SIM_BATTLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_turns: int = Field(
        default=DEFAULT_MAX_TURNS,
        ge=1,
        le=10_000,
        description="Round cap before a draw is declared",
    )
    gold_cap: int = Field(
        default=GOLD_CAP,
        ge=0,
        description="Maximum gold a fighter can hold",
    )
    riptide_damage: int = Field(
        default=RIPTIDE_DAMAGE,
        ge=0,
        description="Damage per riptide tick",
    )
    riptide_max_triggers: int = Field(
        default=DEFAULT_RIPTIDE_TRIGGERS,
        ge=1,
        description="Default riptide ticks per turn end",
    )
    exposed_limit: int = Field(
        default=DEFAULT_EXPOSED_LIMIT,
        ge=0,
        description="Default Exposed triggers per battle",
    )
    annotate_sources: bool = Field(
        default=True,
        description="Prefix transcript lines with the emitting slug",
    )

    @model_validator(mode="after")
    def validate_riptide(self) -> "SimulationSettings":
        """Reject riptide ticks that could never finish a fighter off.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If riptide ticks are enabled but deal no damage.
        """
        if self.riptide_damage == 0 and self.riptide_max_triggers > 1:
            raise ConfigurationError(
                "riptide_max_triggers > 1 has no effect when riptide_damage is 0",
                config_key="riptide_max_triggers",
            )
        return self


class Settings(BaseSettings):
    """Library settings aggregating all configuration domains.

    Attributes:
        app_name: Library name used in diagnostic logs.
        debug: Enable debug mode.
        log_level: Diagnostic logging level.
        json_logs: Emit diagnostic logs as JSON.
        simulation: Battle rules settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="HEIC_SIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="heic-sim",
        description="Library name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit diagnostic logs as JSON",
    )

    simulation: SimulationSettings = Field(default_factory=SimulationSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load simulator settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "SimulationSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
