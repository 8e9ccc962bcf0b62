from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Set

from .direction import Direction
from .errors import InvariantViolation
from .passenger import Passenger

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .floor import Floor
    from .simulation import Simulator

logger = logging.getLogger(__name__)


class CarState(str, Enum):
    IDLE = "idle"
    MOVING = "moving"
    STOPPED = "stopped"


@dataclass(eq=False)
class ElevatorCar:
    """State machine for a single car.

    Policies never assign fields directly. They call ``move_towards`` on an
    idle car or ``stop_at_next_floor`` on a moving one; everything else is
    driven by ``step`` from the simulator's physics pass.
    """

    car_id: int
    capacity: int = 8
    speed_floors_per_second: float = 0.5
    door_time_seconds: float = 4.0
    floor: int = 0
    state: CarState = CarState.IDLE
    direction: Direction = Direction.NONE
    target_floor: Optional[int] = None
    passengers: List[Passenger] = field(default_factory=list)
    car_calls: Set[int] = field(default_factory=set)
    hall_stops: Set[int] = field(default_factory=set)
    _progress: int = field(default=0, repr=False)
    _leg_ticks: int = field(default=1, repr=False)
    _door_timer: int = field(default=0, repr=False)

    @property
    def position(self) -> float:
        if self.state != CarState.MOVING:
            return float(self.floor)
        return self.floor + int(self.direction) * self._progress / self._leg_ticks

    @property
    def pending_stops(self) -> Set[int]:
        return self.car_calls | self.hall_stops

    def next_floor(self) -> int:
        """Floor the car reaches next; its own floor unless it is moving."""
        if self.state == CarState.MOVING:
            return self.floor + int(self.direction)
        return self.floor

    def committed_direction(self) -> Optional[Direction]:
        """Direction the car leaves in once its doors close, None while it has no stops."""
        stops = self.pending_stops
        return self._service_direction(stops) if stops else None

    def can_pickup_passenger(self, passenger: Passenger) -> bool:
        return len(self.passengers) < self.capacity

    def move_towards(self, sim: "Simulator", floor: int) -> None:
        if self.state != CarState.IDLE:
            raise InvariantViolation(
                f"Car {self.car_id} is {self.state.value}; only idle cars can be dispatched"
            )
        if floor == self.floor:
            raise InvariantViolation(f"Car {self.car_id} is already at floor {floor}")
        if sim.building.get_floor(floor) is None:
            raise InvariantViolation(f"Car {self.car_id} cannot move to missing floor {floor}")

        logger.debug("Car %d moving towards floor %d", self.car_id, floor)
        self.hall_stops.add(floor)
        sim.control_system.commit(self, floor)
        self._depart(sim)
        self.check_invariants()

    def stop_at_next_floor(self, sim: "Simulator") -> None:
        if self.state != CarState.MOVING:
            raise InvariantViolation(
                f"Car {self.car_id} is {self.state.value}; only moving cars can stop at the next floor"
            )
        next_floor = self.next_floor()
        logger.debug("Car %d will stop at floor %d", self.car_id, next_floor)
        self.hall_stops.add(next_floor)
        sim.control_system.commit(self, next_floor, self.direction)

    def commit_here(self, sim: "Simulator") -> None:
        """Open an idle car at its current floor to serve a hall call there."""
        if self.state != CarState.IDLE:
            raise InvariantViolation(f"Car {self.car_id} is {self.state.value}, not idle")
        logger.debug("Car %d opening at floor %d", self.car_id, self.floor)
        sim.control_system.commit(self, self.floor)
        self._stop(sim)

    def step(self, sim: "Simulator") -> None:
        if self.state == CarState.MOVING:
            self._move(sim)
        elif self.state == CarState.STOPPED:
            self._door_timer -= 1
            if self._door_timer <= 0:
                self._close_doors(sim)
        self.check_invariants()

    def check_invariants(self) -> None:
        if self.state == CarState.MOVING and (
            self.direction == Direction.NONE or self.target_floor is None
        ):
            raise InvariantViolation(f"Car {self.car_id} is moving without a direction or target")
        if self.state == CarState.IDLE and (
            self.target_floor is not None or self.direction != Direction.NONE
        ):
            raise InvariantViolation(f"Car {self.car_id} is idle with a committed target")

    def snapshot(self) -> dict:
        return {
            "id": self.car_id,
            "floor": self.floor,
            "position": self.position,
            "state": self.state.value,
            "direction": int(self.direction),
            "target": self.target_floor,
            "car_calls": sorted(self.car_calls),
            "passenger_count": len(self.passengers),
        }

    def _move(self, sim: "Simulator") -> None:
        self._progress += 1
        if self._progress < self._leg_ticks:
            return
        self._progress = 0
        self.floor += int(self.direction)
        if (
            self.floor == self.target_floor
            or self.floor in self.car_calls
            or self.floor in self.hall_stops
        ):
            self._stop(sim)

    def _stop(self, sim: "Simulator") -> None:
        self.state = CarState.STOPPED
        self.target_floor = None
        self._progress = 0
        self.car_calls.discard(self.floor)
        self.hall_stops.discard(self.floor)
        self._unload(sim)
        self._load(sim)
        self._door_timer = max(1, sim.clock.seconds_to_time(self.door_time_seconds))

    def _close_doors(self, sim: "Simulator") -> None:
        self._load(sim)
        sim.control_system.reregister_waiting(sim, self, self.floor)
        if self._depart(sim):
            return
        logger.debug("Car %d idle at floor %d", self.car_id, self.floor)
        self.state = CarState.IDLE
        self.direction = Direction.NONE
        sim.control_system.car_idle(sim, self)

    def _depart(self, sim: "Simulator") -> bool:
        stops = self.pending_stops
        if not stops:
            return False
        previous = self.direction
        direction = self._service_direction(stops)
        ahead = [stop for stop in stops if (stop - self.floor) * int(direction) > 0]
        self.target_floor = min(ahead, key=lambda stop: abs(stop - self.floor))
        self.direction = direction
        self.state = CarState.MOVING
        self._progress = 0
        self._leg_ticks = max(1, sim.clock.seconds_to_time(1.0 / self.speed_floors_per_second))
        if previous != Direction.NONE and direction != previous:
            logger.debug("Car %d turned %s at floor %d", self.car_id, direction.name, self.floor)
            sim.control_system.car_turned(sim, self)
        return True

    def _service_direction(self, stops: Set[int]) -> Direction:
        above = any(stop > self.floor for stop in stops)
        below = any(stop < self.floor for stop in stops)
        if self.direction == Direction.UP and above:
            return Direction.UP
        if self.direction == Direction.DOWN and below:
            return Direction.DOWN
        return Direction.UP if above else Direction.DOWN

    def _unload(self, sim: "Simulator") -> None:
        now = sim.clock.time_now
        remaining: List[Passenger] = []
        exited: List[Passenger] = []
        for passenger in self.passengers:
            if passenger.destination == self.floor:
                passenger.record_alighting(now)
                exited.append(passenger)
            else:
                remaining.append(passenger)
        self.passengers = remaining
        for passenger in exited:
            sim.record_trip(passenger)
            sim.control_system.passenger_exited(sim, self, passenger)

    def _load(self, sim: "Simulator") -> None:
        floor = sim.building.get_floor(self.floor)
        free_space = self.capacity - len(self.passengers)
        if floor is None or free_space <= 0 or not floor.has_waiting():
            return
        direction = self._boarding_direction(floor)
        if direction is None:
            return
        now = sim.clock.time_now
        for passenger in floor.board_passengers(direction, free_space):
            passenger.record_boarding(now)
            self.passengers.append(passenger)
            self.car_calls.add(passenger.destination)
            sim.control_system.remove(passenger)
            sim.control_system.passenger_boarded(sim, self, passenger)

    def _boarding_direction(self, floor: "Floor") -> Optional[Direction]:
        direction = self.committed_direction()
        if direction is None:
            return floor.oldest_direction()
        return direction
