"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from heic_sim.core.exceptions import (
    CapabilityError,
    ConfigurationError,
    HeicSimError,
    RegistryError,
    SimulationError,
    ValidationError,
)


class TestHeicSimError:
    """Tests for the base HeicSimError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = HeicSimError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = HeicSimError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(HeicSimError("Test", details={"x": 1}))
        assert "HeicSimError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestContextualErrors:
    """Tests for the exceptions that carry domain context."""

    def test_configuration_error(self) -> None:
        """Test config key is recorded."""
        exc = ConfigurationError("Bad value", config_key="max_turns")
        assert exc.details["config_key"] == "max_turns"

    def test_validation_error(self) -> None:
        """Test field name and value are recorded."""
        exc = ValidationError("Bad field", field_name="hp", invalid_value="lots")
        assert exc.details == {"field_name": "hp", "invalid_value": "lots"}

    def test_simulation_error(self) -> None:
        """Test fighter and round are recorded, round 0 included."""
        exc = SimulationError("Broken", fighter="Left", round_number=0)
        assert exc.details == {"fighter": "Left", "round_number": 0}

    def test_capability_error(self) -> None:
        """Test slug and event are recorded."""
        exc = CapabilityError("boom", slug="items/bomb", event="on_hit")
        assert exc.details == {"slug": "items/bomb", "event": "on_hit"}

    def test_global_handler_error_omits_slug(self) -> None:
        """Test that a missing slug is left out of the details."""
        exc = CapabilityError("boom", event="turn_end")
        assert "slug" not in exc.details


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize(
        "exc_type",
        [ConfigurationError, ValidationError, SimulationError, CapabilityError, RegistryError],
    )
    def test_inherits_from_base(self, exc_type: type[HeicSimError]) -> None:
        """Test every exception can be caught as HeicSimError."""
        with pytest.raises(HeicSimError):
            raise exc_type("failure")

    def test_registry_error_is_capability_error(self) -> None:
        """Test registry errors are capability errors."""
        with pytest.raises(CapabilityError):
            raise RegistryError("Duplicate handler", slug="items/a", event="on_hit")
