from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union

from simulation import Building, ConfigurationError, ElevatorCar, InvariantViolation, Passenger

from .interface import BaseScheduler, Scheduler
from .learning import LearningAgent, MetaPolicyState, QLearningAgent

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from simulation import Simulator

logger = logging.getLogger(__name__)

DEFAULT_POLICIES = ["longest_queue_first", "zoning", "round_robin", "three_passage", "up_peak"]

PolicyEntry = Union[str, Dict[str, Any]]


def _level(share: float) -> int:
    return min(3, int(share * 4))


def _waiting_level(waiting: int) -> int:
    if waiting == 0:
        return 0
    if waiting <= 5:
        return 1
    if waiting <= 20:
        return 2
    return 3


class LearnedMetaPolicy(BaseScheduler):
    """Lets a learning agent pick which sub-policy runs the building.

    Every ``decision_interval`` seconds the agent is rewarded with the
    negative average squared wait time of the interval that just ended and
    chooses the next sub-policy. All callbacks go to the active sub-policy.
    Switching leaves the cars alone, so commitments made by the previous
    sub-policy play out normally.
    """

    name = "Reinforcement Learning"

    def __init__(
        self,
        building: Building,
        policies: Sequence[Scheduler],
        agent: LearningAgent,
        decision_interval: float = 10 * 60,
        initial: int = 0,
    ) -> None:
        if not policies:
            raise ConfigurationError("The meta-policy needs at least one sub-policy")
        if not 0 <= initial < len(policies):
            raise ConfigurationError(f"Initial policy index {initial} is out of range")
        if decision_interval <= 0:
            raise ConfigurationError("Decision interval must be positive")
        self.policies: List[Scheduler] = list(policies)
        self.agent = agent
        self.decision_interval = decision_interval
        self.active_index = initial
        self.action_usage: List[int] = [initial]
        self.usage_ticks: List[int] = [0] * len(self.policies)
        self.switch_count = 0
        self._last_decision = 0

    @classmethod
    def create(
        cls,
        building: Building,
        policies: Optional[Sequence[PolicyEntry]] = None,
        agent: Optional[LearningAgent] = None,
        decision_interval: float = 10 * 60,
        initial: int = 0,
        agent_options: Optional[Dict[str, Any]] = None,
    ) -> "LearnedMetaPolicy":
        """Build the meta-policy from registry names or ``{"name": ..., "options": ...}`` entries."""
        from . import get_scheduler

        sub_policies: List[Scheduler] = []
        for entry in policies or DEFAULT_POLICIES:
            if isinstance(entry, str):
                sub_policies.append(get_scheduler(entry, building))
            else:
                options = dict(entry.get("options") or {})
                sub_policies.append(get_scheduler(entry["name"], building, **options))
        if agent is None:
            agent = QLearningAgent(len(sub_policies), **(agent_options or {}))
        return cls(building, sub_policies, agent, decision_interval=decision_interval, initial=initial)

    @property
    def active(self) -> Scheduler:
        return self.policies[self.active_index]

    def action_distribution(self) -> List[int]:
        counts = [0] * len(self.policies)
        for action in self.action_usage:
            counts[action] += 1
        return counts

    def usage_seconds(self, sim: "Simulator") -> Dict[str, float]:
        return {
            str(policy): sim.clock.time_to_seconds(ticks)
            for policy, ticks in zip(self.policies, self.usage_ticks)
        }

    def observe_state(self, sim: "Simulator") -> MetaPolicyState:
        interval = sim.stats.poll_interval
        arrivals = interval.num_arrivals
        return MetaPolicyState(
            hour=sim.clock.hour_of_day(),
            waiting_level=_waiting_level(sim.building.waiting_count()),
            up_peak_level=_level(interval.num_from_lobby / arrivals) if arrivals else 0,
            down_peak_level=_level(interval.num_to_lobby / arrivals) if arrivals else 0,
        )

    def select(self, sim: "Simulator", index: int) -> None:
        """Make ``index`` the active sub-policy, firing ``changed_to`` if it changes."""
        if not 0 <= index < len(self.policies):
            raise InvariantViolation(f"Agent chose unknown sub-policy {index}")
        if index == self.active_index:
            return
        logger.info(
            "Meta-policy switching from %s to %s at t=%d",
            self.active,
            self.policies[index],
            sim.clock.time_now,
        )
        self.active_index = index
        self.switch_count += 1
        self.active.changed_to(sim)

    def reward_last_interval(self, sim: "Simulator") -> None:
        """Deliver the reward of the final, unfinished interval at the end of an episode."""
        self.agent.observe_reward(self._interval_reward(sim), terminal=True)

    def update(self, sim: "Simulator") -> None:
        interval_ticks = sim.clock.seconds_to_time(self.decision_interval)
        if sim.clock.elapsed_since(self._last_decision) >= interval_ticks:
            self._decide(sim)
        self.usage_ticks[self.active_index] += 1
        self.active.update(sim)

    def changed_to(self, sim: "Simulator") -> None:
        self._last_decision = sim.clock.time_now
        self.active.changed_to(sim)

    def passenger_arrived(self, sim: "Simulator", passenger: Passenger) -> None:
        self.active.passenger_arrived(sim, passenger)

    def passenger_boarded(self, sim: "Simulator", car: ElevatorCar, passenger: Passenger) -> None:
        self.active.passenger_boarded(sim, car, passenger)

    def passenger_exited(self, sim: "Simulator", car: ElevatorCar, passenger: Passenger) -> None:
        self.active.passenger_exited(sim, car, passenger)

    def on_idle(self, sim: "Simulator", car: ElevatorCar) -> None:
        self.active.on_idle(sim, car)

    def on_turned(self, sim: "Simulator", car: ElevatorCar) -> None:
        self.active.on_turned(sim, car)

    def _decide(self, sim: "Simulator") -> None:
        state = self.observe_state(sim)
        self.agent.observe_reward(self._interval_reward(sim))
        action = self.agent.select_action(state)
        sim.stats.reset_poll_interval(sim.clock.time_now)
        self._last_decision = sim.clock.time_now
        logger.debug("Meta-policy decision at t=%d: %s -> action %d", sim.clock.time_now, state, action)
        self.select(sim, action)
        self.action_usage.append(action)

    def _interval_reward(self, sim: "Simulator") -> float:
        return -sim.stats.poll_interval.average_squared_wait_time
