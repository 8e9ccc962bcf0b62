from scheduler import LongestQueueFirst
from simulation import CarState


def test_equal_distance_tie_goes_to_first_car_in_roster(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(2, 6))
    sim = make_simulator(building, LongestQueueFirst(building), arrivals=[(0, 4, 8)])
    sim.advance()

    first, second = building.elevators
    assert first.state == CarState.MOVING
    assert first.target_floor == 4
    assert second.state == CarState.IDLE
    assert len(sim.control_system) == 0


def test_closest_idle_car_is_dispatched(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(0, 6))
    sim = make_simulator(building, LongestQueueFirst(building), arrivals=[(0, 4, 1)])
    sim.advance()

    first, second = building.elevators
    assert first.state == CarState.IDLE
    assert second.state == CarState.MOVING
    assert second.target_floor == 4


def test_stop_candidate_beats_idle_car(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(5, 0))
    sim = make_simulator(building, LongestQueueFirst(building), arrivals=[(3, 4, 8)])
    idle_car, moving_car = building.elevators
    moving_car.move_towards(sim, 9)
    for _ in range(3):
        sim.advance()
    assert moving_car.floor == 3
    assert moving_car.next_floor() == 4

    sim.advance()
    assert idle_car.state == CarState.IDLE
    assert idle_car.floor == 5
    assert moving_car.state == CarState.STOPPED
    assert moving_car.floor == 4
    assert [p.destination for p in moving_car.passengers] == [8]


def test_cars_moving_the_wrong_way_are_not_stopped(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(0,))
    sim = make_simulator(building, LongestQueueFirst(building), arrivals=[(3, 4, 1)])
    car = building.elevators[0]
    car.move_towards(sim, 9)
    for _ in range(5):
        sim.advance()

    assert car.state == CarState.MOVING
    assert car.floor == 5
    assert len(sim.control_system) == 1


def test_policy_works_on_the_simulators_building(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(0,))
    sim = make_simulator(building, LongestQueueFirst(), arrivals=[(0, 6, 0)])
    sim.advance()
    assert building.elevators[0].target_floor == 6
