import pytest

from scheduler import BaseScheduler, LearnedMetaPolicy, LongestQueueFirst, QLearningAgent, get_scheduler
from simulation import ConfigurationError, InvariantViolation


class ScriptedAgent:
    def __init__(self, actions):
        self.actions = list(actions)
        self.states = []
        self.rewards = []

    def select_action(self, state):
        self.states.append(state)
        return self.actions.pop(0)

    def observe_reward(self, value, terminal=False):
        self.rewards.append((value, terminal))

    def evaluation_mode(self, enabled):
        pass

    def reset(self):
        pass


class RecordingPolicy(BaseScheduler):
    def __init__(self, name):
        self.name = name
        self.updates = 0
        self.changes = 0

    def update(self, sim):
        self.updates += 1

    def changed_to(self, sim):
        self.changes += 1


def _meta(building, agent, decision_interval=10):
    policies = [RecordingPolicy("first"), RecordingPolicy("second")]
    return LearnedMetaPolicy(building, policies, agent, decision_interval=decision_interval)


def test_agent_decides_once_per_interval(make_building, make_simulator):
    building = make_building()
    agent = ScriptedAgent([1, 1])
    meta = _meta(building, agent)
    sim = make_simulator(building, meta)
    first, second = meta.policies

    sim.run(15)
    assert meta.usage_ticks == [10, 5]
    assert meta.action_usage == [0, 1]
    assert (first.updates, second.updates) == (10, 5)
    assert second.changes == 1
    assert len(agent.states) == 1

    sim.run(10)
    assert meta.action_usage == [0, 1, 1]
    assert meta.action_distribution() == [1, 2]
    assert second.changes == 1
    assert meta.switch_count == 1
    assert meta.usage_seconds(sim) == {"first": 10.0, "second": 15.0}


def test_final_interval_is_rewarded_as_terminal(make_building, make_simulator):
    building = make_building()
    agent = ScriptedAgent([0])
    meta = _meta(building, agent)
    sim = make_simulator(building, meta, simulation_time=15)
    sim.run()
    meta.reward_last_interval(sim)

    assert agent.rewards == [(-0.0, False), (-0.0, True)]


def test_reward_is_the_negative_squared_wait_of_the_interval(make_building, make_simulator):
    building = make_building()
    agent = ScriptedAgent([0])
    meta = _meta(building, agent)
    sim = make_simulator(building, meta)
    sim.stats.record_trip(wait_time=3.0, ride_time=1.0, timestamp=0)
    sim.stats.record_trip(wait_time=1.0, ride_time=1.0, timestamp=0)
    sim.run(11)

    assert agent.rewards == [(-5.0, False)]
    assert sim.stats.poll_interval.num_exits == 0


def test_switching_keeps_commitments_of_the_previous_policy(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(0,))
    agent = ScriptedAgent([1, 1, 1])
    meta = LearnedMetaPolicy(
        building,
        [LongestQueueFirst(building), RecordingPolicy("idle")],
        agent,
        decision_interval=3,
    )
    sim = make_simulator(building, meta, arrivals=[(0, 8, 9)])
    sim.run(12)

    assert meta.active_index == 1
    assert len(sim.completed) == 1
    passenger = sim.completed[0]
    assert passenger.board_time == 7
    assert passenger.alight_time == 10


def test_unknown_action_is_an_invariant_violation(make_building, make_simulator):
    building = make_building()
    meta = _meta(building, ScriptedAgent([5]))
    sim = make_simulator(building, meta)
    with pytest.raises(InvariantViolation):
        sim.run(11)


def test_meta_policy_configuration_is_validated(make_building):
    building = make_building()
    with pytest.raises(ConfigurationError):
        LearnedMetaPolicy(building, [], ScriptedAgent([]))
    with pytest.raises(ConfigurationError):
        LearnedMetaPolicy(building, [BaseScheduler()], ScriptedAgent([]), initial=1)
    with pytest.raises(ConfigurationError):
        LearnedMetaPolicy(building, [BaseScheduler()], ScriptedAgent([]), decision_interval=0)


def test_registry_builds_the_default_policy_set(make_building):
    building = make_building(num_floors=10, car_floors=(0, 0, 0))
    meta = get_scheduler("learned_meta", building, agent_options={"seed": 4})

    assert [str(policy) for policy in meta.policies] == [
        "Longest Queue First",
        "Zoning",
        "Round Robin",
        "Three Passage Group Elevator",
        "Up-Peak Group Elevator",
    ]
    assert isinstance(meta.agent, QLearningAgent)
    assert meta.agent.num_actions == 5
    assert str(meta) == "Reinforcement Learning"


def test_registry_accepts_policy_options(make_building):
    building = make_building(num_floors=10, car_floors=(0, 0, 0, 0))
    meta = get_scheduler(
        "learned_meta",
        building,
        policies=["longest_queue_first", {"name": "zoning", "options": {"num_zones": 2}}],
        decision_interval=60,
    )
    assert meta.policies[1].num_zones == 2
    assert meta.decision_interval == 60


def test_unknown_scheduler_name_is_a_configuration_error(make_building):
    with pytest.raises(ConfigurationError):
        get_scheduler("elevator_magic", make_building())
