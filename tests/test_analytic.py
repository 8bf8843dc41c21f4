import numpy as np
import pytest

from springmassdamper.model.parameters import ControllerGains, InitialState, PhysicalParameters, SimulationConfig
from springmassdamper.solvers.analytic import DampingRegime, free_response, free_response_expm
from springmassdamper.solvers.simulator import Simulator

NO_CONTROL = ControllerGains(kp=0.0, ki=0.0, kd=0.0)

REGIMES = [
    (PhysicalParameters(mass=1.0, damping=0.5, stiffness=1.0), DampingRegime.UNDERDAMPED),
    (PhysicalParameters(mass=1.0, damping=2.0, stiffness=1.0), DampingRegime.CRITICALLY_DAMPED),
    (PhysicalParameters(mass=1.0, damping=5.0, stiffness=1.0), DampingRegime.OVERDAMPED),
]


@pytest.mark.parametrize("parameters, regime", REGIMES)
def test_regime_classification(parameters, regime):
    assert DampingRegime.of(parameters) is regime


def test_undamped_system_is_underdamped():
    assert DampingRegime.of(PhysicalParameters(damping=0.0)) is DampingRegime.UNDERDAMPED


@pytest.mark.parametrize("parameters, regime", REGIMES)
def test_closed_form_matches_matrix_exponential(parameters, regime):
    initial = InitialState(position=0.3, velocity=1.0)
    times = np.linspace(0.0, 10.0, 41)

    x, v = free_response(parameters, initial, times)
    x_ref, v_ref = free_response_expm(parameters, initial, times)

    np.testing.assert_allclose(x, x_ref, atol=1e-10)
    np.testing.assert_allclose(v, v_ref, atol=1e-10)


@pytest.mark.parametrize("parameters, regime", REGIMES)
def test_closed_form_satisfies_initial_conditions(parameters, regime):
    x, v = free_response(parameters, InitialState(position=-0.4, velocity=2.0), 0.0)

    assert x[0] == pytest.approx(-0.4)
    assert v[0] == pytest.approx(2.0)


@pytest.mark.parametrize("parameters, regime", REGIMES)
def test_uncontrolled_euler_run_matches_closed_form(parameters, regime):
    config = SimulationConfig(t_start=0.0, t_end=10.0, step_size=1e-3, x_desired=1.0)
    initial = InitialState(position=0.0, velocity=1.0)
    simulator = Simulator(parameters, config, initial)

    trajectory, _ = simulator.run(gains=NO_CONTROL)
    x, v = free_response(parameters, initial, trajectory.time)

    np.testing.assert_allclose(trajectory.position, x, atol=2e-2)
    np.testing.assert_allclose(trajectory.velocity, v, atol=2e-2)


def test_euler_error_shrinks_with_step_size():
    parameters = PhysicalParameters(mass=1.0, damping=0.5, stiffness=1.0)
    initial = InitialState(position=0.0, velocity=1.0)

    errors = []
    for step_size in (1e-2, 1e-3):
        config = SimulationConfig(t_start=0.0, t_end=5.0, step_size=step_size, x_desired=0.0)
        trajectory, _ = Simulator(parameters, config, initial).run(gains=NO_CONTROL)
        x, _ = free_response(parameters, initial, trajectory.time)
        errors.append(np.max(np.abs(trajectory.position - x)))

    assert errors[1] < errors[0] / 5
