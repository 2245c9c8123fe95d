"""Errors raised by the simulation engine."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised at construction time for invalid or out-of-range parameters."""


class SimulationOverError(RuntimeError):
    """Raised when asked to advance a simulation that has already ended."""
