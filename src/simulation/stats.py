from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Protocol

from .passenger import Passenger


@dataclass
class StatsInterval:
    """Counters accumulated over one window of simulated time. Times are in seconds."""

    start_time: int = 0
    num_arrivals: int = 0
    num_from_lobby: int = 0
    num_to_lobby: int = 0
    num_exits: int = 0
    total_wait: float = 0.0
    total_squared_wait: float = 0.0
    max_wait: float = 0.0

    def add_arrival(self, passenger: Passenger) -> None:
        self.num_arrivals += 1
        if passenger.origin == 0:
            self.num_from_lobby += 1
        if passenger.destination == 0:
            self.num_to_lobby += 1

    def add_trip(self, wait_time: float) -> None:
        self.num_exits += 1
        self.total_wait += wait_time
        self.total_squared_wait += wait_time * wait_time
        self.max_wait = max(self.max_wait, wait_time)

    @property
    def average_wait_time(self) -> float:
        return self.total_wait / self.num_exits if self.num_exits else 0.0

    @property
    def average_squared_wait_time(self) -> float:
        return self.total_squared_wait / self.num_exits if self.num_exits else 0.0


@dataclass
class MetricsSnapshot:
    time_step: int
    average_wait: float
    wait_p95: float
    average_squared_wait: float
    average_ride: float
    ride_p95: float
    throughput: int


class StatsSink(Protocol):
    """What the simulator needs from a statistics collector."""

    def record_arrival(self, passenger: Passenger) -> None:
        ...

    def record_trip(self, wait_time: float, ride_time: float, timestamp: int) -> None:
        ...

    def roll_interval(self, time_now: int, interval_ticks: int) -> None:
        ...

    def reset_poll_interval(self, time_now: int = 0) -> None:
        ...

    def close(self, time_now: int) -> None:
        ...

    @property
    def poll_interval(self) -> StatsInterval:
        ...

    def average_squared_wait_time(self) -> float:
        ...

    def snapshot(self, time_step: int) -> MetricsSnapshot:
        ...


class SimulatorStats:
    """Default stats sink with global, poll and hourly intervals."""

    INTERVAL_LENGTH_SEC = 60 * 60

    def __init__(self) -> None:
        self.wait_times: List[float] = []
        self.ride_times: List[float] = []
        self.trip_timestamps: List[int] = []
        self.throughput: int = 0
        self.global_interval = StatsInterval()
        self.stats_intervals: List[StatsInterval] = []
        self._poll_interval = StatsInterval()
        self._current_interval = StatsInterval()

    @property
    def poll_interval(self) -> StatsInterval:
        return self._poll_interval

    def reset_poll_interval(self, time_now: int = 0) -> None:
        self._poll_interval = StatsInterval(start_time=time_now)

    def record_arrival(self, passenger: Passenger) -> None:
        for interval in self._intervals():
            interval.add_arrival(passenger)

    def record_trip(self, wait_time: float, ride_time: float, timestamp: int) -> None:
        self.wait_times.append(wait_time)
        self.ride_times.append(ride_time)
        self.trip_timestamps.append(timestamp)
        self.throughput += 1
        for interval in self._intervals():
            interval.add_trip(wait_time)

    def roll_interval(self, time_now: int, interval_ticks: int) -> None:
        """Close the hourly interval once tick ``time_now`` completes ``interval_ticks`` of it."""
        if time_now + 1 - self._current_interval.start_time >= interval_ticks:
            self.stats_intervals.append(replace(self._current_interval))
            self._current_interval = StatsInterval(start_time=time_now + 1)

    def close(self, time_now: int) -> None:
        """Append the unfinished interval at the end of a run."""
        if time_now > self._current_interval.start_time:
            self.stats_intervals.append(replace(self._current_interval))
            self._current_interval = StatsInterval(start_time=time_now)

    def average_squared_wait_time(self) -> float:
        return self.global_interval.average_squared_wait_time

    def snapshot(self, time_step: int) -> MetricsSnapshot:
        return MetricsSnapshot(
            time_step=time_step,
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            average_squared_wait=self.average_squared_wait_time(),
            average_ride=self._average(self.ride_times),
            ride_p95=self._percentile(self.ride_times, 0.95),
            throughput=self.throughput,
        )

    def _intervals(self) -> List[StatsInterval]:
        return [self.global_interval, self._poll_interval, self._current_interval]

    def _average(self, values: List[float]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[float], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        d0 = sorted_vals[int(f)] * (c - k)
        d1 = sorted_vals[int(c)] * (k - f)
        return float(d0 + d1)
