"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the heic-sim test suite.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import pytest

from heic_sim.core.config import SimulationSettings
from heic_sim.engine.battle import Battle
from heic_sim.engine.registry import CapabilityRegistry
from heic_sim.models.fighter import Fighter


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from heic_sim.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "HEIC_SIM_DEBUG": "true",
        "HEIC_SIM_LOG_LEVEL": "DEBUG",
        "HEIC_SIM_BATTLE_MAX_TURNS": "42",
        "HEIC_SIM_BATTLE_GOLD_CAP": "15",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def settings() -> SimulationSettings:
    """Provide default battle rules settings."""
    return SimulationSettings()


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def registry() -> CapabilityRegistry:
    """Provide an empty capability registry, private to the test."""
    return CapabilityRegistry()


@pytest.fixture
def make_fighter() -> Callable[..., Fighter]:
    """Factory for fighters with sensible test defaults.

    Returns:
        Callable taking a name and Fighter keyword arguments.
    """

    def _make(name: str = "Fighter", **kwargs: Any) -> Fighter:
        kwargs.setdefault("hp", 20)
        return Fighter(name, **kwargs)

    return _make


@pytest.fixture
def left(make_fighter: Callable[..., Fighter]) -> Fighter:
    """Provide the left fighter."""
    return make_fighter("Left")


@pytest.fixture
def right(make_fighter: Callable[..., Fighter]) -> Fighter:
    """Provide the right fighter."""
    return make_fighter("Right")


@pytest.fixture
def battle(
    left: Fighter,
    right: Fighter,
    registry: CapabilityRegistry,
    settings: SimulationSettings,
) -> Battle:
    """Provide a battle scope over the left and right fighters."""
    return Battle(left, right, registry=registry, settings=settings, seed=7)
