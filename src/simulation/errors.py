from __future__ import annotations


class SimulationError(Exception):
    """Base class for errors raised by the simulation engine."""


class ConfigurationError(SimulationError, ValueError):
    """Invalid building, car, zone or timing configuration."""


class InvariantViolation(SimulationError, RuntimeError):
    """A car operation was requested in a state that does not allow it."""
