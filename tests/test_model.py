import pytest

from simulation import (
    Building,
    ConfigurationError,
    Direction,
    ElevatorCar,
    ElevatorConstraints,
    Floor,
    Passenger,
    SimulatorClock,
    SimulatorSettings,
    SimulatorStats,
)


def test_clock_converts_seconds_to_whole_ticks():
    clock = SimulatorClock(0.1)
    assert clock.seconds_to_time(0.3) == 3
    assert clock.seconds_to_time(0.25) == 3
    assert clock.time_to_seconds(25) == pytest.approx(2.5)
    clock.advance()
    clock.advance()
    assert clock.time_now == 2
    assert clock.elapsed_since(1) == 1


def test_clock_hour_of_day_wraps():
    clock = SimulatorClock(3600.0)
    for _ in range(25):
        clock.advance()
    assert clock.hour_of_day() == 1


def test_passenger_requires_distinct_floors():
    with pytest.raises(ValueError):
        Passenger(passenger_id=0, origin=3, destination=3, arrival_time=0)


def test_passenger_direction_and_times():
    passenger = Passenger(passenger_id=1, origin=5, destination=2, arrival_time=10)
    assert passenger.direction == Direction.DOWN
    assert passenger.wait_time is None
    passenger.record_boarding(14)
    passenger.record_alighting(20)
    assert passenger.wait_time == 4
    assert passenger.ride_time == 6


def test_floor_boards_in_direction_and_reports_oldest():
    floor = Floor(3)
    up = Passenger(passenger_id=0, origin=3, destination=7, arrival_time=5)
    down = Passenger(passenger_id=1, origin=3, destination=0, arrival_time=2)
    floor.add_passenger(up)
    floor.add_passenger(down)
    assert floor.oldest_direction() == Direction.DOWN
    assert floor.waiting == [down, up]
    assert floor.board_passengers(Direction.UP, 4) == [up]
    assert floor.has_waiting()
    with pytest.raises(ValueError):
        floor.add_passenger(Passenger(passenger_id=2, origin=4, destination=0, arrival_time=0))


def test_building_validates_topology():
    with pytest.raises(ConfigurationError):
        Building.create(num_floors=1, elevator_count=1)
    with pytest.raises(ConfigurationError):
        Building.create(num_floors=5, elevator_count=0)
    with pytest.raises(ConfigurationError):
        Building(num_floors=5, elevators=[ElevatorCar(1)])
    with pytest.raises(ConfigurationError):
        Building(num_floors=5, elevators=[ElevatorCar(0, floor=7)])


def test_building_applies_constraints_to_every_car():
    constraints = ElevatorConstraints(capacity=3, speed_floors_per_second=2.0, door_time_seconds=1.0)
    building = Building.create(num_floors=6, elevator_count=2, constraints=constraints)
    assert len(building.floors) == 6
    assert [car.capacity for car in building.elevators] == [3, 3]
    assert building.get_floor(6) is None
    assert building.get_elevator(1) is building.elevators[1]


def test_invalid_configuration_values_are_rejected():
    with pytest.raises(ConfigurationError):
        ElevatorConstraints(capacity=0)
    with pytest.raises(ConfigurationError):
        SimulatorSettings(time_step=0)
    with pytest.raises(ConfigurationError):
        SimulatorSettings(simulation_time=-1)


def test_stats_track_squared_wait_and_poll_interval():
    stats = SimulatorStats()
    stats.record_arrival(Passenger(passenger_id=0, origin=0, destination=4, arrival_time=0))
    stats.record_trip(wait_time=2.0, ride_time=5.0, timestamp=7)
    stats.record_trip(wait_time=4.0, ride_time=5.0, timestamp=9)
    assert stats.average_squared_wait_time() == pytest.approx(10.0)
    assert stats.poll_interval.num_exits == 2
    assert stats.poll_interval.num_from_lobby == 1

    stats.reset_poll_interval(time_now=9)
    assert stats.poll_interval.num_exits == 0
    assert stats.poll_interval.start_time == 9
    assert stats.global_interval.num_exits == 2

    stats.roll_interval(time_now=8, interval_ticks=10)
    assert stats.stats_intervals == []
    stats.roll_interval(time_now=9, interval_ticks=10)
    assert len(stats.stats_intervals) == 1
    assert stats.stats_intervals[0].max_wait == 4.0

    snapshot = stats.snapshot(10)
    assert snapshot.throughput == 2
    assert snapshot.average_wait == pytest.approx(3.0)


def test_hourly_intervals_split_on_tick_boundaries():
    stats = SimulatorStats()
    for tick in range(25):
        stats.record_trip(wait_time=1.0, ride_time=1.0, timestamp=tick)
        stats.roll_interval(time_now=tick, interval_ticks=10)
    stats.close(time_now=25)

    assert [interval.start_time for interval in stats.stats_intervals] == [0, 10, 20]
    assert [interval.num_exits for interval in stats.stats_intervals] == [10, 10, 5]

    # Nothing left to close.
    stats.close(time_now=25)
    assert len(stats.stats_intervals) == 3
