from __future__ import annotations

from enum import IntEnum


class Direction(IntEnum):
    """Travel direction of a car or a passenger."""

    DOWN = -1
    NONE = 0
    UP = 1

    @classmethod
    def between(cls, origin: int, destination: int) -> "Direction":
        if destination > origin:
            return cls.UP
        if destination < origin:
            return cls.DOWN
        return cls.NONE
