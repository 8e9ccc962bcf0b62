from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .direction import Direction


@dataclass(eq=False)
class Passenger:
    """A rider travelling between two different floors."""

    passenger_id: int
    origin: int
    destination: int
    arrival_time: int
    board_time: Optional[int] = None
    alight_time: Optional[int] = None

    def __post_init__(self) -> None:
        if self.origin == self.destination:
            raise ValueError(
                f"Passenger {self.passenger_id} has the same origin and destination ({self.origin})"
            )

    @property
    def direction(self) -> Direction:
        return Direction.between(self.origin, self.destination)

    def record_boarding(self, time_step: int) -> None:
        self.board_time = time_step

    def record_alighting(self, time_step: int) -> None:
        self.alight_time = time_step

    @property
    def wait_time(self) -> Optional[int]:
        if self.board_time is None:
            return None
        return self.board_time - self.arrival_time

    @property
    def ride_time(self) -> Optional[int]:
        if self.board_time is None or self.alight_time is None:
            return None
        return self.alight_time - self.board_time
