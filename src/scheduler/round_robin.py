from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from simulation import Building, CarState, ElevatorCar, Passenger

from .interface import BaseScheduler
from .utils import is_stop_candidate

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from simulation import Simulator


class RoundRobin(BaseScheduler):
    """Hands hall calls to the cars in turn.

    With ``up_peak`` enabled, cars with nothing to do return to the lobby,
    which suits morning traffic where nearly everyone enters there.
    """

    def __init__(self, building: Building, up_peak: bool = False, lobby_floor: int = 0) -> None:
        self.name = "Up-Peak Group Elevator" if up_peak else "Round Robin"
        self.up_peak = up_peak
        self.lobby_floor = lobby_floor
        self.num_cars = len(building.elevators)
        self._next_car = 0
        self._assignments: Dict[int, int] = {}

    def assigned_car(self, passenger: Passenger) -> int:
        return self._assignments[passenger.passenger_id]

    def passenger_arrived(self, sim: "Simulator", passenger: Passenger) -> None:
        self._assign(passenger)

    def update(self, sim: "Simulator") -> None:
        control = sim.control_system
        queued = control.hall_queue
        live = {passenger.passenger_id for passenger in queued}
        self._assignments = {pid: car_id for pid, car_id in self._assignments.items() if pid in live}

        for passenger in queued:
            if not control.is_queued(passenger):
                continue
            if passenger.passenger_id not in self._assignments:
                # Calls that arrived under another scheduler or were put back in the queue.
                self._assign(passenger)
            car = sim.building.elevators[self._assignments[passenger.passenger_id]]
            if not car.can_pickup_passenger(passenger):
                continue
            if car.state == CarState.IDLE and car.floor != passenger.origin:
                car.move_towards(sim, passenger.origin)
            elif is_stop_candidate(car, passenger):
                car.stop_at_next_floor(sim)

    def on_idle(self, sim: "Simulator", car: ElevatorCar) -> None:
        if not self.up_peak or car.floor == self.lobby_floor:
            return
        if car.car_id in self._assignments.values():
            return
        car.move_towards(sim, self.lobby_floor)

    def _assign(self, passenger: Passenger) -> None:
        self._assignments[passenger.passenger_id] = self._next_car
        self._next_car = (self._next_car + 1) % self.num_cars
