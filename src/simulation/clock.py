from __future__ import annotations

import math


class SimulatorClock:
    """Monotonic simulated time counted in integer ticks of ``time_step`` seconds."""

    def __init__(self, time_step: float) -> None:
        self.time_step = time_step
        self._time = 0

    @property
    def time_now(self) -> int:
        return self._time

    def advance(self) -> None:
        self._time += 1

    def seconds_to_time(self, seconds: float) -> int:
        # A tiny tolerance keeps 0.3 / 0.1 from rounding up to 4 ticks.
        return int(math.ceil(seconds / self.time_step - 1e-9))

    def time_to_seconds(self, time: int) -> float:
        return time * self.time_step

    def elapsed_since(self, time: int) -> int:
        return self._time - time

    @property
    def elapsed_seconds(self) -> float:
        return self.time_to_seconds(self._time)

    def hour_of_day(self) -> int:
        return int(self.elapsed_seconds // 3600) % 24
