from __future__ import annotations

from functools import partial
from typing import Callable, Dict

from simulation import Building, ConfigurationError

from .interface import BaseScheduler, Scheduler
from .learned_meta import LearnedMetaPolicy
from .learning import LearningAgent, MetaPolicyState, QLearningAgent
from .longest_queue_first import LongestQueueFirst
from .round_robin import RoundRobin
from .three_passage import ThreePassageGroupElevator
from .zoning import Zone, Zoning

__all__ = [
    "BaseScheduler",
    "LearnedMetaPolicy",
    "LearningAgent",
    "LongestQueueFirst",
    "MetaPolicyState",
    "QLearningAgent",
    "RoundRobin",
    "Scheduler",
    "ThreePassageGroupElevator",
    "Zone",
    "Zoning",
    "get_scheduler",
]


SCHEDULER_REGISTRY: Dict[str, Callable[..., Scheduler]] = {
    "longest_queue_first": LongestQueueFirst,
    "zoning": Zoning,
    "round_robin": RoundRobin,
    "up_peak": partial(RoundRobin, up_peak=True),
    "three_passage": ThreePassageGroupElevator,
    "learned_meta": LearnedMetaPolicy.create,
}


def get_scheduler(name: str, building: Building, **kwargs) -> Scheduler:
    factory = SCHEDULER_REGISTRY.get(name.lower())
    if factory is None:
        raise ConfigurationError(f"Unknown scheduler '{name}'. Available: {', '.join(SCHEDULER_REGISTRY)}")
    return factory(building, **kwargs)
