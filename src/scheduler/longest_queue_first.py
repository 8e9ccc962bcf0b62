from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from simulation import Building, ElevatorCar

from .interface import BaseScheduler
from .utils import closest_car, is_dispatch_candidate, is_stop_candidate

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from simulation import Simulator

logger = logging.getLogger(__name__)


class LongestQueueFirst(BaseScheduler):
    """Serves hall calls in queue order with the closest suitable car.

    A moving car that reaches the caller's floor next in the caller's
    direction is stopped there; otherwise the closest idle car is sent.
    """

    name = "Longest Queue First"

    def __init__(self, building: Optional[Building] = None) -> None:
        """``building`` only matches the registry call; the live one comes from ``sim``."""

    def update(self, sim: "Simulator") -> None:
        control = sim.control_system
        for passenger in control.hall_queue:
            if not control.is_queued(passenger):
                continue

            stop_candidates: List[ElevatorCar] = []
            dispatch_candidates: List[ElevatorCar] = []
            for car in sim.building.elevators:
                if not car.can_pickup_passenger(passenger):
                    continue
                if is_stop_candidate(car, passenger):
                    stop_candidates.append(car)
                elif not stop_candidates and is_dispatch_candidate(car, passenger):
                    dispatch_candidates.append(car)

            if stop_candidates:
                car = closest_car(stop_candidates, passenger.origin)
                car.stop_at_next_floor(sim)
            elif dispatch_candidates:
                car = closest_car(dispatch_candidates, passenger.origin)
                logger.debug("Dispatching car %d to floor %d", car.car_id, passenger.origin)
                car.move_towards(sim, passenger.origin)
