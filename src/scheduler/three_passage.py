from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from simulation import Building, CarState, Direction, ElevatorCar, Passenger

from .interface import BaseScheduler
from .utils import floor_distance, sweep_limit

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from simulation import Simulator


def passage_category(car: ElevatorCar, passenger: Passenger) -> Optional[int]:
    """How many passages the car needs before it can serve the call.

    1: idle, or already heading past the caller's floor in the caller's
    direction. 2: has to reverse once. 3: is moving away from the caller in
    the caller's direction and has to reverse twice. ``None`` means the car
    is not a candidate at all.
    """
    if car.state == CarState.IDLE:
        return None if car.floor == passenger.origin else 1
    if car.direction == Direction.NONE:
        return None

    direction = int(car.direction)
    ahead = (passenger.origin - car.next_floor()) * direction >= 0
    if passenger.direction != car.direction:
        return 2
    if not ahead:
        return 3
    limit = sweep_limit(car)
    if limit is not None and (limit - passenger.origin) * direction >= 0:
        return 1
    return 2


class ThreePassageGroupElevator(BaseScheduler):
    """Prefers cars that pass the caller soonest, measured in passages."""

    name = "Three Passage Group Elevator"

    def __init__(self, building: Optional[Building] = None) -> None:
        """``building`` only matches the registry call; the live one comes from ``sim``."""

    def update(self, sim: "Simulator") -> None:
        control = sim.control_system
        for passenger in control.hall_queue:
            if not control.is_queued(passenger):
                continue

            best: Optional[Tuple[ElevatorCar, Tuple[int, int]]] = None
            for car in sim.building.elevators:
                if not car.can_pickup_passenger(passenger):
                    continue
                passage = passage_category(car, passenger)
                if passage is None:
                    continue
                key = (passage, floor_distance(car, passenger.origin))
                if best is None or key < best[1]:
                    best = (car, key)

            if best is None:
                continue
            car, (passage, _) = best
            if car.state == CarState.IDLE:
                car.move_towards(sim, passenger.origin)
            elif (
                passage == 1
                and car.state == CarState.MOVING
                and car.next_floor() == passenger.origin
            ):
                car.stop_at_next_floor(sim)
