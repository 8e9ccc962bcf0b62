from scheduler import BaseScheduler, RoundRobin, get_scheduler
from simulation import CarState


def test_calls_are_handed_to_cars_in_turn(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(0, 0, 0))
    scheduler = RoundRobin(building)
    sim = make_simulator(building, scheduler, arrivals=[(0, 3, 0), (0, 4, 0), (0, 6, 0)])
    sim.advance()

    assert [car.target_floor for car in building.elevators] == [3, 4, 6]
    assert scheduler.name == "Round Robin"


def test_call_waits_for_its_assigned_car(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(0, 0))
    scheduler = RoundRobin(building)
    sim = make_simulator(building, scheduler, arrivals=[(1, 5, 1), (1, 6, 1)])
    busy = building.elevators[1]
    busy.move_towards(sim, 9)
    sim.advance()
    sim.advance()

    first, _ = building.elevators
    assert first.target_floor == 5
    assert len(sim.control_system) == 1
    waiting = sim.control_system.hall_queue[0]
    assert waiting.origin == 6
    assert scheduler.assigned_car(waiting) == 1


def test_calls_from_an_earlier_scheduler_are_assigned_lazily(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(0, 0))
    sim = make_simulator(building, BaseScheduler(), arrivals=[(0, 4, 0)])
    sim.advance()
    assert len(sim.control_system) == 1

    sim.set_scheduler(RoundRobin(building))
    sim.advance()
    assert building.elevators[0].target_floor == 4
    assert building.elevators[1].state == CarState.IDLE


def test_up_peak_returns_idle_cars_to_the_lobby(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(5, 0))
    scheduler = get_scheduler("up_peak", building)
    sim = make_simulator(building, scheduler)

    away, at_lobby = building.elevators
    scheduler.on_idle(sim, away)
    scheduler.on_idle(sim, at_lobby)
    assert scheduler.name == "Up-Peak Group Elevator"
    assert away.state == CarState.MOVING
    assert away.target_floor == 0
    assert at_lobby.state == CarState.IDLE


def test_plain_round_robin_leaves_idle_cars_alone(make_building, make_simulator):
    building = make_building(num_floors=10, car_floors=(5,))
    scheduler = RoundRobin(building)
    sim = make_simulator(building, scheduler)
    scheduler.on_idle(sim, building.elevators[0])
    assert building.elevators[0].state == CarState.IDLE
