from typing import Iterable, Sequence, Tuple

import pytest

from simulation import (
    Building,
    ElevatorCar,
    ElevatorConstraints,
    ScheduledTraffic,
    Simulator,
    SimulatorSettings,
)

# One floor per second and two seconds of door time, with one-second ticks.
FAST_CARS = ElevatorConstraints(capacity=8, speed_floors_per_second=1.0, door_time_seconds=2.0)


@pytest.fixture
def make_building():
    def factory(num_floors: int = 10, car_floors: Sequence[int] = (0, 0), capacity: int = 8) -> Building:
        return Building(
            num_floors=num_floors,
            elevators=[ElevatorCar(i, floor=floor) for i, floor in enumerate(car_floors)],
            elevator_constraints=ElevatorConstraints(
                capacity=capacity,
                speed_floors_per_second=FAST_CARS.speed_floors_per_second,
                door_time_seconds=FAST_CARS.door_time_seconds,
            ),
        )

    return factory


@pytest.fixture
def make_simulator():
    def factory(
        building: Building,
        scheduler,
        arrivals: Iterable[Tuple[float, int, int]] = (),
        simulation_time: float = 60.0,
    ) -> Simulator:
        return Simulator(
            building=building,
            scheduler=scheduler,
            settings=SimulatorSettings(time_step=1.0, simulation_time=simulation_time),
            traffic=ScheduledTraffic(arrivals),
            random_seed=0,
        )

    return factory
