"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        HeicSimError: Base exception for all simulator errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Values a fighter cannot read as numbers.
        SimulationError: Inconsistent engine state.
        CapabilityError: Context for faults raised by capability handlers.
        RegistryError: Invalid capability registrations.

    Configuration:
        Settings: Library settings class.
        SimulationSettings: Battle rules settings.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up diagnostic logging.
        configure_logging_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from heic_sim.core.config import (
    Settings,
    SimulationSettings,
    clear_settings_cache,
    get_settings,
)
from heic_sim.core.exceptions import (
    CapabilityError,
    ConfigurationError,
    HeicSimError,
    RegistryError,
    SimulationError,
    ValidationError,
)
from heic_sim.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)


__all__ = [
    # Exceptions
    "HeicSimError",
    "ConfigurationError",
    "ValidationError",
    "SimulationError",
    "CapabilityError",
    "RegistryError",
    # Configuration
    "Settings",
    "SimulationSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
