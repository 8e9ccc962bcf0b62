from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from .direction import Direction
from .passenger import Passenger


@dataclass
class Floor:
    """Represents a floor with directional waiting queues."""

    number: int
    up_queue: Deque[Passenger] = field(default_factory=deque)
    down_queue: Deque[Passenger] = field(default_factory=deque)

    def add_passenger(self, passenger: Passenger) -> None:
        if passenger.origin != self.number:
            raise ValueError(f"Passenger {passenger.passenger_id} does not wait on floor {self.number}")
        if passenger.direction == Direction.UP:
            self.up_queue.append(passenger)
        else:
            self.down_queue.append(passenger)

    def has_waiting(self) -> bool:
        return bool(self.up_queue or self.down_queue)

    @property
    def waiting(self) -> List[Passenger]:
        return sorted(
            list(self.up_queue) + list(self.down_queue),
            key=lambda p: (p.arrival_time, p.passenger_id),
        )

    def oldest_direction(self) -> Optional[Direction]:
        """Direction of the passenger that has waited longest, if anyone waits."""
        if not self.has_waiting():
            return None
        if not self.down_queue:
            return Direction.UP
        if not self.up_queue:
            return Direction.DOWN
        up, down = self.up_queue[0], self.down_queue[0]
        if (down.arrival_time, down.passenger_id) < (up.arrival_time, up.passenger_id):
            return Direction.DOWN
        return Direction.UP

    def board_passengers(self, direction: Direction, capacity: int) -> List[Passenger]:
        queue = self.up_queue if direction == Direction.UP else self.down_queue
        boarded: List[Passenger] = []
        while queue and len(boarded) < capacity:
            boarded.append(queue.popleft())
        return boarded

    def __len__(self) -> int:  # pragma: no cover - convenience
        return len(self.up_queue) + len(self.down_queue)
