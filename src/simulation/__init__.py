"""Discrete-time elevator bank simulation primitives."""

from .building import Building
from .clock import SimulatorClock
from .config import ElevatorConstraints, SimulatorSettings
from .control_system import ControlSystem
from .direction import Direction
from .elevator import CarState, ElevatorCar
from .errors import ConfigurationError, InvariantViolation, SimulationError
from .floor import Floor
from .passenger import Passenger
from .simulation import Simulator
from .stats import MetricsSnapshot, SimulatorStats, StatsInterval, StatsSink
from .traffic import MorningRushWindow, PoissonTraffic, ScheduledTraffic, TrafficGenerator

__all__ = [
    "Building",
    "CarState",
    "ConfigurationError",
    "ControlSystem",
    "Direction",
    "ElevatorCar",
    "ElevatorConstraints",
    "Floor",
    "InvariantViolation",
    "MetricsSnapshot",
    "MorningRushWindow",
    "Passenger",
    "PoissonTraffic",
    "ScheduledTraffic",
    "SimulationError",
    "Simulator",
    "SimulatorClock",
    "SimulatorSettings",
    "SimulatorStats",
    "StatsInterval",
    "StatsSink",
    "TrafficGenerator",
]
