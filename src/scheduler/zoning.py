from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from simulation import Building, CarState, ConfigurationError, ElevatorCar, Floor

from .interface import BaseScheduler
from .utils import is_stop_candidate

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from simulation import Simulator

logger = logging.getLogger(__name__)

SPILL_EPSILON = 0.00001


def spillover_sizes(total: int, parts: int) -> List[int]:
    """Split ``total`` into ``parts`` sizes, handing out the remainder by accumulated spill."""
    per_part = total // parts
    spill_per_part = total / parts - per_part
    sizes: List[int] = []
    spill = 0.0
    for _ in range(parts):
        size = per_part
        spill += spill_per_part
        if spill >= 1.0 - SPILL_EPSILON:
            spill = max(0.0, spill - 1.0)
            size += 1
        sizes.append(size)
    sizes[-1] += total - sum(sizes)
    return sizes


@dataclass
class Zone:
    floors: List[Floor]
    cars: List[ElevatorCar]

    @property
    def bottom_floor(self) -> int:
        return self.floors[0].number

    @property
    def middle_floor(self) -> int:
        return self.floors[len(self.floors) // 2].number

    @property
    def top_floor(self) -> int:
        return self.floors[-1].number


class Zoning(BaseScheduler):
    """Splits the building into contiguous zones, each with its own cars."""

    name = "Zoning"

    def __init__(self, building: Building, num_zones: Optional[int] = None) -> None:
        num_floors = len(building.floors)
        num_cars = len(building.elevators)
        if num_zones is None:
            num_zones = min(num_cars, num_floors)
        if num_zones <= 0:
            raise ConfigurationError(f"Zoning needs at least one zone, got {num_zones}")
        if num_zones > num_floors or num_zones > num_cars:
            raise ConfigurationError(
                f"{num_zones} zones do not fit {num_floors} floors and {num_cars} cars"
            )

        self.num_zones = num_zones
        self.zones: List[Zone] = []
        self._floor_to_zone: List[Zone] = []
        self._car_to_zone: List[Zone] = []

        floor_start = 0
        car_start = 0
        for floor_count, car_count in zip(
            spillover_sizes(num_floors, num_zones), spillover_sizes(num_cars, num_zones)
        ):
            zone = Zone(
                floors=list(building.floors[floor_start:floor_start + floor_count]),
                cars=list(building.elevators[car_start:car_start + car_count]),
            )
            self.zones.append(zone)
            self._floor_to_zone.extend([zone] * floor_count)
            self._car_to_zone.extend([zone] * car_count)
            floor_start += floor_count
            car_start += car_count

    def zone_for_floor(self, floor: int) -> Zone:
        return self._floor_to_zone[floor]

    def zone_for_car(self, car: ElevatorCar) -> Zone:
        return self._car_to_zone[car.car_id]

    def update(self, sim: "Simulator") -> None:
        control = sim.control_system
        for passenger in control.hall_queue:
            if not control.is_queued(passenger):
                continue
            for car in self.zone_for_floor(passenger.origin).cars:
                if car.state == CarState.IDLE and car.can_pickup_passenger(passenger):
                    if car.floor != passenger.origin:
                        car.move_towards(sim, passenger.origin)
                    break
                if is_stop_candidate(car, passenger) and car.can_pickup_passenger(passenger):
                    car.stop_at_next_floor(sim)
                    break

    def on_idle(self, sim: "Simulator", car: ElevatorCar) -> None:
        zone = self.zone_for_car(car)
        target: Optional[int] = None

        for floor in zone.floors:
            if not floor.has_waiting():
                continue
            if target is None:
                target = floor.number
                continue

            delta = abs(floor.number - car.floor)
            best_delta = abs(target - car.floor)
            if car.floor < zone.bottom_floor:
                # Below the zone
                if delta > best_delta:
                    target = floor.number
            elif car.floor > zone.top_floor:
                # Above the zone
                if delta < best_delta:
                    target = floor.number
            elif floor.number > target:
                target = floor.number

        if target is None:
            target = zone.middle_floor
        if target != car.floor:
            logger.debug("Parking car %d at floor %d", car.car_id, target)
            car.move_towards(sim, target)
