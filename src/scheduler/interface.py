from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from simulation import ElevatorCar, Passenger, Simulator


class Scheduler(Protocol):
    """Strategy interface for dispatching cars to hall calls.

    The simulator calls ``passenger_arrived`` for every new arrival,
    ``update`` once per tick, and the car callbacks as cars board, unload,
    go idle or reverse. ``changed_to`` fires once when the scheduler becomes
    the active one. Schedulers only act through ``ElevatorCar.move_towards``
    and ``ElevatorCar.stop_at_next_floor``; a call that cannot be served yet
    is simply left in the hall queue.
    """

    def passenger_arrived(self, sim: "Simulator", passenger: "Passenger") -> None:
        ...

    def passenger_boarded(self, sim: "Simulator", car: "ElevatorCar", passenger: "Passenger") -> None:
        ...

    def passenger_exited(self, sim: "Simulator", car: "ElevatorCar", passenger: "Passenger") -> None:
        ...

    def update(self, sim: "Simulator") -> None:
        ...

    def on_idle(self, sim: "Simulator", car: "ElevatorCar") -> None:
        ...

    def on_turned(self, sim: "Simulator", car: "ElevatorCar") -> None:
        ...

    def changed_to(self, sim: "Simulator") -> None:
        ...


class BaseScheduler:
    """No-op implementation of every callback."""

    name = "Base"

    def passenger_arrived(self, sim: "Simulator", passenger: "Passenger") -> None:
        pass

    def passenger_boarded(self, sim: "Simulator", car: "ElevatorCar", passenger: "Passenger") -> None:
        pass

    def passenger_exited(self, sim: "Simulator", car: "ElevatorCar", passenger: "Passenger") -> None:
        pass

    def update(self, sim: "Simulator") -> None:
        pass

    def on_idle(self, sim: "Simulator", car: "ElevatorCar") -> None:
        pass

    def on_turned(self, sim: "Simulator", car: "ElevatorCar") -> None:
        pass

    def changed_to(self, sim: "Simulator") -> None:
        pass

    def __str__(self) -> str:
        return self.name
