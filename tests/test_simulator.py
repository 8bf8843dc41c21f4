import math

import numpy as np
import pytest

from springmassdamper.model.errors import InvalidConfiguration, NumericalDivergence, SimulationError
from springmassdamper.model.parameters import ControllerGains, InitialState, PhysicalParameters, SimulationConfig
from springmassdamper.model.state import ControllerState, Trajectory
from springmassdamper.solvers.simulator import Simulator


def test_trajectory_has_num_steps_plus_one_points(simulator, gains):
    trajectory, _ = simulator.run(gains=gains)

    assert len(trajectory) == simulator.num_steps + 1 == 10001
    assert trajectory.time.shape == trajectory.position.shape == trajectory.velocity.shape


def test_time_grid_is_uniform(simulator, gains):
    trajectory, _ = simulator.run(gains=gains)

    expected = 0.0 + np.arange(len(trajectory)) * 0.01
    np.testing.assert_allclose(trajectory.time, expected, rtol=0.0, atol=1e-9)
    assert np.all(np.diff(trajectory.time) > 0.0)


def test_initial_values_are_stored_at_index_zero(parameters, gains):
    config = SimulationConfig(t_start=2.0, t_end=3.0, step_size=0.1, x_desired=0.5)
    simulator = Simulator(parameters, config, InitialState(position=0.25, velocity=-1.5))

    trajectory, _ = simulator.run(gains=gains)

    assert trajectory.time[0] == 2.0
    assert trajectory.position[0] == 0.25
    assert trajectory.velocity[0] == -1.5


def test_first_step_matches_hand_computation(simulator, gains):
    t, x, v, state = simulator.step(0.0, 0.0, 1.0, gains, ControllerState())

    # error = 1, previous error and integral are zero
    control_input = 1.0 * 1.0 + 0.5 * 0.0 + 0.9 * (1.0 - 0.0) / 0.01
    assert t == 0.01
    assert x == 0.01
    assert v == 1.0 + ((-0.2 / 1.0) * 1.0 - (1.0 / 1.0) * 0.0 + control_input) * 0.01
    assert control_input == pytest.approx(91.0)
    assert state == ControllerState(integral_term=0.01, prev_error=1.0)


def test_integral_is_used_before_it_is_updated(simulator):
    gains = ControllerGains(kp=0.0, ki=1.0, kd=0.0)
    state = ControllerState(integral_term=2.0, prev_error=0.0)

    _, _, v, new_state = simulator.step(0.0, 0.0, 0.0, gains, state)

    # control = ki * 2.0 (old integral), not ki * (2.0 + 1.0 * h)
    assert v == pytest.approx(2.0 * 0.01)
    assert new_state.integral_term == pytest.approx(2.01)


def test_step_is_deterministic(simulator, gains):
    state = ControllerState(integral_term=0.3, prev_error=0.7)

    first = simulator.step(1.0, 0.4, -0.2, gains, state)
    second = simulator.step(1.0, 0.4, -0.2, gains, state)

    assert first == second
    assert state == ControllerState(integral_term=0.3, prev_error=0.7)


def test_run_twice_gives_identical_trajectories(simulator, gains):
    first, first_state = simulator.run(gains=gains)
    second, second_state = simulator.run(gains=gains)

    assert np.array_equal(first.position, second.position)
    assert np.array_equal(first.velocity, second.velocity)
    assert first_state == second_state


def test_pid_drives_position_to_setpoint(simulator, gains):
    trajectory, _ = simulator.run(gains=gains)

    assert trajectory.is_finite()
    assert abs(trajectory.final_position - 1.0) < 0.05


def test_carried_over_state_changes_the_response(short_simulator, gains):
    fresh, state = short_simulator.run(gains=gains)
    carried, _ = short_simulator.run(gains=gains, state=state)
    reset, _ = short_simulator.run(gains=gains, state=ControllerState())

    assert np.array_equal(fresh.position, reset.position)
    assert not np.array_equal(fresh.position, carried.position)


def test_supplied_trajectory_is_overwritten_in_place(short_simulator, gains):
    trajectory = short_simulator.new_trajectory()
    trajectory.position[0] = 123.0

    returned, _ = short_simulator.run(gains=gains, trajectory=trajectory)

    assert returned is trajectory
    assert trajectory.position[0] == 0.0
    assert trajectory.final_position != 0.0


def test_trajectory_of_wrong_length_is_rejected(short_simulator, gains):
    trajectory = Trajectory.allocate(num_steps=3, t_start=0.0, position=0.0, velocity=1.0)

    with pytest.raises(InvalidConfiguration):
        short_simulator.run(gains=gains, trajectory=trajectory)


def test_divergence_is_reported_with_step(short_simulator):
    unstable = ControllerGains(kp=0.0, ki=0.0, kd=1e5)

    with pytest.raises(NumericalDivergence) as excinfo:
        short_simulator.run(gains=unstable)

    assert 1 <= excinfo.value.step <= short_simulator.num_steps
    assert excinfo.value.iteration is None


def test_divergence_check_can_be_disabled(parameters, short_config, initial_state):
    simulator = Simulator(parameters, short_config, initial_state, check_finite=False)

    trajectory, _ = simulator.run(gains=ControllerGains(kp=0.0, ki=0.0, kd=1e5))

    assert not trajectory.is_finite()


def test_progress_callback_reports_percentages(short_simulator, gains):
    seen = []

    short_simulator.run(gains=gains, callback=seen.append)

    assert seen == [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]


def test_uncontrolled_system_without_spring_force_moves_uniformly():
    parameters = PhysicalParameters(mass=2.0, damping=0.0, stiffness=1e-12)
    config = SimulationConfig(t_start=0.0, t_end=1.0, step_size=0.1, x_desired=0.0)
    simulator = Simulator(parameters, config, InitialState(position=0.0, velocity=1.0))

    trajectory, _ = simulator.run(gains=ControllerGains(kp=0.0, ki=0.0, kd=0.0))

    assert math.isclose(trajectory.final_position, 1.0, rel_tol=1e-9)


def test_mismatched_trajectory_arrays_are_invalid_configuration():
    with pytest.raises(InvalidConfiguration):
        Trajectory(time=np.zeros(3), position=np.zeros(3), velocity=np.zeros(2))

    assert issubclass(InvalidConfiguration, SimulationError)
