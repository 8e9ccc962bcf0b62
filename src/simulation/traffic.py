from __future__ import annotations

import math
import random
from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict, Iterable, List, Optional, Protocol, Tuple

from .clock import SimulatorClock


@dataclass
class MorningRushWindow:
    """Boosts arrivals from one floor between two simulated times (seconds)."""

    start_time: float
    end_time: float
    multiplier: float
    origin_floor: int = 0
    destination_focus: Optional[int] = None

    def active(self, seconds: float, origin: int) -> bool:
        return self.start_time <= seconds < self.end_time and origin == self.origin_floor


class TrafficGenerator(Protocol):
    def arrivals(self, time_now: int, clock: SimulatorClock) -> List[Tuple[int, int]]:
        """Return ``(origin, destination)`` pairs arriving during tick ``time_now``."""
        ...


class PoissonTraffic:
    """Independent Poisson arrivals on every floor with optional rush windows."""

    def __init__(
        self,
        num_floors: int,
        arrival_rate_per_floor: float = 0.01,
        morning_bursts: Optional[List[MorningRushWindow]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.num_floors = num_floors
        self.arrival_rate_per_floor = arrival_rate_per_floor
        self.morning_bursts = morning_bursts or []
        self.random = rng or random.Random()

    def arrivals(self, time_now: int, clock: SimulatorClock) -> List[Tuple[int, int]]:
        seconds = clock.time_to_seconds(time_now)
        generated: List[Tuple[int, int]] = []
        for origin in range(self.num_floors):
            burst = self._active_burst(seconds, origin)
            multiplier = burst.multiplier if burst else 1.0
            count = self._poisson(self.arrival_rate_per_floor * clock.time_step * multiplier)
            for _ in range(count):
                generated.append((origin, self._choose_destination(origin, burst)))
        return generated

    def _active_burst(self, seconds: float, origin: int) -> Optional[MorningRushWindow]:
        return next((b for b in self.morning_bursts if b.active(seconds, origin)), None)

    def _choose_destination(self, origin: int, burst: Optional[MorningRushWindow]) -> int:
        if burst and burst.destination_focus is not None and burst.destination_focus != origin:
            return burst.destination_focus
        possible_floors = [f for f in range(self.num_floors) if f != origin]
        return self.random.choice(possible_floors)

    def _poisson(self, lam: float) -> int:
        if lam <= 0:
            return 0
        L = math.exp(-lam)
        k = 0
        p = 1.0
        while p > L:
            k += 1
            p *= self.random.random()
        return k - 1


class ScheduledTraffic:
    """Replays a fixed list of ``(seconds, origin, destination)`` arrivals."""

    def __init__(self, events: Iterable[Tuple[float, int, int]]) -> None:
        self.events = sorted(events, key=lambda event: event[0])
        self._by_tick: Optional[DefaultDict[int, List[Tuple[int, int]]]] = None

    def arrivals(self, time_now: int, clock: SimulatorClock) -> List[Tuple[int, int]]:
        if self._by_tick is None:
            self._by_tick = defaultdict(list)
            for seconds, origin, destination in self.events:
                self._by_tick[clock.seconds_to_time(seconds)].append((origin, destination))
        return list(self._by_tick.get(time_now, []))
