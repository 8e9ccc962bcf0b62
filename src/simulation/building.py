from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from .config import ElevatorConstraints
from .elevator import ElevatorCar
from .errors import ConfigurationError
from .floor import Floor


@dataclass
class Building:
    """Fixed topology: floors 0..num_floors-1 and a roster of cars with ids 0..n-1."""

    num_floors: int
    elevators: Sequence[ElevatorCar] = field(default_factory=tuple)
    elevator_constraints: ElevatorConstraints = field(default_factory=ElevatorConstraints)
    floors: Tuple[Floor, ...] = field(init=False)

    def __post_init__(self) -> None:
        if self.num_floors < 2:
            raise ConfigurationError(f"A building needs at least two floors, got {self.num_floors}")
        self.elevators = tuple(self.elevators)
        if not self.elevators:
            raise ConfigurationError("A building needs at least one elevator car")
        ids = [car.car_id for car in self.elevators]
        if ids != list(range(len(self.elevators))):
            raise ConfigurationError(f"Car ids must be 0..{len(self.elevators) - 1} in order, got {ids}")
        for car in self.elevators:
            if not 0 <= car.floor < self.num_floors:
                raise ConfigurationError(f"Car {car.car_id} starts outside the building")
        self.floors = tuple(Floor(i) for i in range(self.num_floors))
        self._apply_constraints()

    @classmethod
    def create(
        cls,
        num_floors: int,
        elevator_count: int,
        constraints: Optional[ElevatorConstraints] = None,
    ) -> "Building":
        return cls(
            num_floors=num_floors,
            elevators=[ElevatorCar(i) for i in range(elevator_count)],
            elevator_constraints=constraints or ElevatorConstraints(),
        )

    def get_floor(self, floor_number: int) -> Optional[Floor]:
        if 0 <= floor_number < self.num_floors:
            return self.floors[floor_number]
        return None

    def get_elevator(self, car_id: int) -> Optional[ElevatorCar]:
        if 0 <= car_id < len(self.elevators):
            return self.elevators[car_id]
        return None

    def waiting_count(self) -> int:
        return sum(len(floor) for floor in self.floors)

    def snapshot(self) -> dict:
        return {
            "floors": [len(floor) for floor in self.floors],
            "elevators": [car.snapshot() for car in self.elevators],
        }

    def _apply_constraints(self) -> None:
        for car in self.elevators:
            car.capacity = self.elevator_constraints.capacity
            car.speed_floors_per_second = self.elevator_constraints.speed_floors_per_second
            car.door_time_seconds = self.elevator_constraints.door_time_seconds
