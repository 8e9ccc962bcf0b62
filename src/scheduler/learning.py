from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict, Hashable, List, Optional, Protocol

import numpy as np


@dataclass(frozen=True)
class MetaPolicyState:
    """Discretised view of the building handed to the learning agent."""

    hour: int
    waiting_level: int
    up_peak_level: int
    down_peak_level: int


class LearningAgent(Protocol):
    """Black-box action selector used by the learned meta-policy."""

    def select_action(self, state: Hashable) -> int:
        ...

    def observe_reward(self, value: float, terminal: bool = False) -> None:
        ...

    def evaluation_mode(self, enabled: bool) -> None:
        ...

    def reset(self) -> None:
        ...


class QLearningAgent:
    """Tabular Q-learning with an epsilon-greedy policy.

    Rewards observed between two decisions are summed and applied to the
    previous state/action pair once the next state is known. In evaluation
    mode the agent acts greedily and the table is left untouched.
    """

    def __init__(
        self,
        num_actions: int,
        alpha: float = 0.1,
        gamma: float = 0.9,
        epsilon: float = 0.1,
        initial_value: float = -1000.0,
        seed: Optional[int] = None,
    ) -> None:
        if num_actions < 1:
            raise ValueError("The agent needs at least one action")
        self.num_actions = num_actions
        self.alpha = alpha
        self.gamma = gamma
        self.epsilon = epsilon
        self.initial_value = initial_value
        self.random = np.random.default_rng(seed)
        self.q_table: DefaultDict[Hashable, np.ndarray] = defaultdict(self._initial_row)
        self.rewards: List[float] = []
        self._evaluation = False
        self._last_state: Optional[Hashable] = None
        self._last_action: Optional[int] = None
        self._pending_reward: Optional[float] = None

    @property
    def state_space(self) -> int:
        return len(self.q_table)

    def select_action(self, state: Hashable) -> int:
        if self._last_state is not None and self._pending_reward is not None:
            self._learn(self._pending_reward, state)

        if not self._evaluation and self.random.random() < self.epsilon:
            action = int(self.random.integers(self.num_actions))
        else:
            action = int(np.argmax(self.q_table[state]))

        self._last_state = state
        self._last_action = action
        self._pending_reward = None
        return action

    def observe_reward(self, value: float, terminal: bool = False) -> None:
        self.rewards.append(value)
        self._pending_reward = (self._pending_reward or 0.0) + value
        if terminal:
            if self._last_state is not None:
                self._learn(self._pending_reward, None)
            self._last_state = None
            self._last_action = None
            self._pending_reward = None

    def evaluation_mode(self, enabled: bool) -> None:
        self._evaluation = enabled

    def reset(self) -> None:
        self.q_table.clear()
        self.rewards = []
        self._last_state = None
        self._last_action = None
        self._pending_reward = None

    def _initial_row(self) -> np.ndarray:
        return np.full(self.num_actions, self.initial_value, dtype=float)

    def _learn(self, reward: float, next_state: Optional[Hashable]) -> None:
        if self._evaluation or self._last_action is None:
            return
        row = self.q_table[self._last_state]
        future = 0.0 if next_state is None else float(np.max(self.q_table[next_state]))
        row[self._last_action] += self.alpha * (reward + self.gamma * future - row[self._last_action])
