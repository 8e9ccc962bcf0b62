from __future__ import annotations

from typing import Iterable, Optional, Tuple

from simulation import CarState, Direction, ElevatorCar, Passenger


def floor_distance(car: ElevatorCar, floor: int) -> int:
    return abs(car.floor - floor)


def is_dispatch_candidate(car: ElevatorCar, passenger: Passenger) -> bool:
    """An idle car that would have to travel to reach the passenger."""
    return car.state == CarState.IDLE and car.floor != passenger.origin


def is_stop_candidate(car: ElevatorCar, passenger: Passenger) -> bool:
    """A moving car that reaches the passenger's floor next, going the passenger's way."""
    return (
        car.state == CarState.MOVING
        and car.direction == passenger.direction
        and car.next_floor() == passenger.origin
    )


def closest_car(cars: Iterable[ElevatorCar], floor: int) -> Optional[ElevatorCar]:
    """Car with the smallest floor distance; the first one in order wins ties."""
    best: Optional[Tuple[ElevatorCar, int]] = None
    for car in cars:
        distance = floor_distance(car, floor)
        if best is None or distance < best[1]:
            best = (car, distance)
    return best[0] if best else None


def sweep_limit(car: ElevatorCar) -> Optional[int]:
    """Farthest floor the car will reach before it has to reverse."""
    if car.direction == Direction.NONE:
        return None
    stops = set(car.pending_stops)
    if car.target_floor is not None:
        stops.add(car.target_floor)
    ahead = [stop for stop in stops if (stop - car.floor) * int(car.direction) >= 0]
    if not ahead:
        return car.next_floor()
    return max(ahead, key=lambda stop: abs(stop - car.floor))
