from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .direction import Direction
from .elevator import CarState, ElevatorCar
from .passenger import Passenger

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from scheduler import Scheduler

    from .simulation import Simulator

logger = logging.getLogger(__name__)


class ControlSystem:
    """Owns the hall-call queue and routes car and queue events to the active scheduler.

    A passenger sits in the hall queue from arrival until a car commits to
    stopping at its floor or until it boards. Passengers a car leaves behind
    are put back when that car closes its doors.
    """

    def __init__(self, scheduler: "Scheduler") -> None:
        self.scheduler = scheduler
        self._hall_queue: Dict[int, Passenger] = {}

    @property
    def hall_queue(self) -> Tuple[Passenger, ...]:
        """Snapshot of the queued hall calls, safe to iterate while dispatching."""
        return tuple(self._hall_queue.values())

    def is_queued(self, passenger: Passenger) -> bool:
        return passenger.passenger_id in self._hall_queue

    def __len__(self) -> int:
        return len(self._hall_queue)

    def register_hall_call(self, sim: "Simulator", passenger: Passenger) -> None:
        self._hall_queue[passenger.passenger_id] = passenger
        self.scheduler.passenger_arrived(sim, passenger)

    def commit(self, car: ElevatorCar, floor: int, direction: Optional[Direction] = None) -> List[Passenger]:
        """Hand the hall calls on ``floor`` to ``car``, only those going ``direction`` if given."""
        served = [
            p
            for p in self._hall_queue.values()
            if p.origin == floor and (direction is None or p.direction == direction)
        ]
        for passenger in served:
            del self._hall_queue[passenger.passenger_id]
        if served:
            logger.debug("Car %d committed to %d hall call(s) at floor %d", car.car_id, len(served), floor)
        return served

    def remove(self, passenger: Passenger) -> None:
        self._hall_queue.pop(passenger.passenger_id, None)

    def reregister_waiting(self, sim: "Simulator", car: ElevatorCar, floor_number: int) -> None:
        if any(other is not car and floor_number in other.hall_stops for other in sim.building.elevators):
            return
        floor = sim.building.get_floor(floor_number)
        if floor is None:
            return
        for passenger in floor.waiting:
            if passenger.passenger_id not in self._hall_queue:
                logger.debug("Passenger %d re-registered at floor %d", passenger.passenger_id, floor_number)
                self._hall_queue[passenger.passenger_id] = passenger

    def serve_cars_at_floor(self, sim: "Simulator") -> None:
        """Hand hall calls to cars already standing at the caller's floor.

        A stopped car takes over the calls going its way; an idle car opens
        its doors for everyone. Callers a car cannot take along are put back
        on door close.
        """
        for passenger in self.hall_queue:
            if not self.is_queued(passenger):
                continue
            for car in sim.building.elevators:
                if car.floor != passenger.origin:
                    continue
                if car.state == CarState.STOPPED:
                    self.commit(car, car.floor, car.committed_direction())
                    if not self.is_queued(passenger):
                        break
                elif car.state == CarState.IDLE:
                    car.commit_here(sim)
                    break

    def set_scheduler(self, sim: "Simulator", scheduler: "Scheduler") -> None:
        self.scheduler = scheduler
        scheduler.changed_to(sim)

    def update(self, sim: "Simulator") -> None:
        self.scheduler.update(sim)

    def passenger_boarded(self, sim: "Simulator", car: ElevatorCar, passenger: Passenger) -> None:
        self.scheduler.passenger_boarded(sim, car, passenger)

    def passenger_exited(self, sim: "Simulator", car: ElevatorCar, passenger: Passenger) -> None:
        self.scheduler.passenger_exited(sim, car, passenger)

    def car_idle(self, sim: "Simulator", car: ElevatorCar) -> None:
        self.scheduler.on_idle(sim, car)

    def car_turned(self, sim: "Simulator", car: ElevatorCar) -> None:
        self.scheduler.on_turned(sim, car)
