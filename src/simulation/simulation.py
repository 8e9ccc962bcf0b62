from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from .building import Building
from .clock import SimulatorClock
from .config import SimulatorSettings
from .control_system import ControlSystem
from .errors import ConfigurationError
from .passenger import Passenger
from .stats import SimulatorStats, StatsSink
from .traffic import PoissonTraffic, TrafficGenerator

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from scheduler import Scheduler

logger = logging.getLogger(__name__)


class Simulator:
    """Fixed-tick elevator simulation driven one ``advance()`` at a time.

    Each tick generates arrivals, lets idle cars already standing at a
    calling floor open, runs the active scheduler's ``update`` and then the
    physics step of every car in roster order. All randomness comes from the
    generator seeded with ``random_seed``.
    """

    def __init__(
        self,
        building: Building,
        scheduler: "Scheduler",
        settings: Optional[SimulatorSettings] = None,
        traffic: Optional[TrafficGenerator] = None,
        random_seed: Optional[int] = None,
        stats: Optional[StatsSink] = None,
        metrics_hook_interval: int = 0,
    ) -> None:
        self.building = building
        self.settings = settings or SimulatorSettings()
        self.clock = SimulatorClock(self.settings.time_step)
        self.random = random.Random(random_seed)
        self.traffic = traffic if traffic is not None else PoissonTraffic(building.num_floors, rng=self.random)
        self.stats = stats if stats is not None else SimulatorStats()
        self.control_system = ControlSystem(scheduler)
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self.metrics_hook_interval = max(0, metrics_hook_interval)
        self.completed: List[Passenger] = []
        self._horizon = self.clock.seconds_to_time(self.settings.simulation_time)
        self._interval_ticks = self.clock.seconds_to_time(SimulatorStats.INTERVAL_LENGTH_SEC)
        self._spawned: List[Tuple[int, int]] = []
        self._next_passenger_id = 0

    @property
    def scheduler(self) -> "Scheduler":
        return self.control_system.scheduler

    @property
    def current_time(self) -> int:
        return self.clock.time_now

    @property
    def horizon(self) -> int:
        return self._horizon

    def advance(self) -> bool:
        """Run one tick. Returns False once the horizon has been reached."""
        if self.clock.time_now >= self._horizon:
            return False

        self._generate_passenger_arrivals()
        # Before update: policies never target a car's own floor, so a car
        # left standing there would be sent elsewhere. Boarding here fires
        # passenger_boarded ahead of this tick's update.
        self.control_system.serve_cars_at_floor(self)
        self.control_system.update(self)
        for car in self.building.elevators:
            car.step(self)

        self.stats.roll_interval(self.clock.time_now, self._interval_ticks)
        if self.metrics_hook_interval and self.clock.time_now % self.metrics_hook_interval == 0:
            self._emit_metrics()

        self.clock.advance()
        return self.clock.time_now < self._horizon

    def run(self, duration: Optional[int] = None) -> None:
        """Advance ``duration`` ticks, or until the horizon when no duration is given."""
        if duration is None:
            while self.advance():
                pass
            return
        for _ in range(duration):
            if not self.advance():
                break

    def set_scheduler(self, scheduler: "Scheduler") -> None:
        logger.info("Switching scheduler to %s at t=%d", scheduler, self.clock.time_now)
        self.control_system.set_scheduler(self, scheduler)
        self._emit("scheduler_changed", {"scheduler": str(scheduler), "time": self.clock.time_now})

    def spawn_passenger(self, origin: int, destination: int) -> None:
        """Queue a manual arrival for the next tick."""
        self._check_trip(origin, destination)
        self._spawned.append((origin, destination))

    def record_trip(self, passenger: Passenger) -> None:
        wait_time = self.clock.time_to_seconds(passenger.wait_time or 0)
        ride_time = self.clock.time_to_seconds(passenger.ride_time or 0)
        self.stats.record_trip(wait_time, ride_time, self.clock.time_now)
        self.completed.append(passenger)
        self._emit("trip", passenger)

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def _generate_passenger_arrivals(self) -> None:
        now = self.clock.time_now
        requests = self.traffic.arrivals(now, self.clock) + self._spawned
        self._spawned = []
        for origin, destination in requests:
            self._check_trip(origin, destination)
            passenger = Passenger(
                passenger_id=self._next_passenger_id,
                origin=origin,
                destination=destination,
                arrival_time=now,
            )
            self._next_passenger_id += 1
            self.stats.record_arrival(passenger)
            self.building.floors[origin].add_passenger(passenger)
            self.control_system.register_hall_call(self, passenger)
        if requests:
            self._emit("arrival", {"time": now, "count": len(requests)})

    def _check_trip(self, origin: int, destination: int) -> None:
        for floor in (origin, destination):
            if self.building.get_floor(floor) is None:
                raise ConfigurationError(f"Floor {floor} is outside the building")
        if origin == destination:
            raise ConfigurationError("Origin and destination must differ")

    def _emit_metrics(self) -> None:
        snapshot = self.stats.snapshot(self.clock.time_now)
        self._emit("metrics", {"metrics": snapshot, "building": self.building.snapshot()})

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
