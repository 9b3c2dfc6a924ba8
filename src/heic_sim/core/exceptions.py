"""Custom exception hierarchy for the battle simulator.

All exceptions inherit from HeicSimError, enabling unified error handling
at the library boundary while preserving domain-specific context.

Note that ``simulate`` itself never lets an exception escape: faults raised
by capability handlers are absorbed at the dispatch boundary. These types
surface during setup (settings, registry population) and are used to give
absorbed faults structured context in the diagnostic log.

Example:
    >>> from heic_sim.core.exceptions import RegistryError
    >>> raise RegistryError("Handler is not callable", slug="items/blood_chain")
"""

from __future__ import annotations

from typing import Any


class HeicSimError(Exception):
    """Base exception for all simulator errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(HeicSimError):
    """Raised when simulator configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(HeicSimError):
    """Raised when input data cannot be interpreted at all."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# Simulation Domain Exceptions
# =============================================================================


class SimulationError(HeicSimError):
    """Raised when the engine itself reaches an inconsistent state."""

    def __init__(
        self,
        message: str,
        *,
        fighter: str | None = None,
        round_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize simulation error with battle context.

        Args:
            message: Human-readable error description.
            fighter: Name of the fighter involved.
            round_number: Round in progress when the error occurred.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if fighter:
            combined_details["fighter"] = fighter
        if round_number is not None:
            combined_details["round_number"] = round_number
        super().__init__(message, details=combined_details)


class CapabilityError(HeicSimError):
    """Describes a fault raised by an external capability handler.

    The dispatcher never re-raises these; they exist so the absorbed
    fault is logged with the slug and event that produced it.
    """

    def __init__(
        self,
        message: str,
        *,
        slug: str | None = None,
        event: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize capability error with handler context.

        Args:
            message: Human-readable error description.
            slug: Capability slug whose handler failed (None for globals).
            event: Event name being dispatched.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if slug:
            combined_details["slug"] = slug
        if event:
            combined_details["event"] = event
        super().__init__(message, details=combined_details)


class RegistryError(CapabilityError):
    """Raised when a capability cannot be registered."""


__all__ = [
    "HeicSimError",
    "ConfigurationError",
    "ValidationError",
    "SimulationError",
    "CapabilityError",
    "RegistryError",
]
