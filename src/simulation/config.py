from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigurationError


@dataclass
class ElevatorConstraints:
    """Physical constraints applied to every car of a building."""

    capacity: int = 8
    speed_floors_per_second: float = 0.5
    door_time_seconds: float = 4.0

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ConfigurationError(f"Car capacity must be at least 1, got {self.capacity}")
        if self.speed_floors_per_second <= 0:
            raise ConfigurationError("Car speed must be positive")
        if self.door_time_seconds < 0:
            raise ConfigurationError("Door time cannot be negative")


@dataclass
class SimulatorSettings:
    """Tick length and horizon, both in simulated seconds."""

    time_step: float = 0.1
    simulation_time: float = 24 * 60 * 60

    def __post_init__(self) -> None:
        if self.time_step <= 0:
            raise ConfigurationError("Time step must be positive")
        if self.simulation_time <= 0:
            raise ConfigurationError("Simulation time must be positive")
