"""
Shared pytest fixtures for the springmassdamper test suite.

Provides the reference scenario (plant, time span, gains) and a shorter
variant for tests that only need a few hundred steps.
"""

import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from springmassdamper.model.parameters import (  # noqa: E402
    ControllerGains,
    InitialState,
    PhysicalParameters,
    SimulationConfig,
)
from springmassdamper.solvers.simulator import Simulator  # noqa: E402


@pytest.fixture
def parameters() -> PhysicalParameters:
    """m = 1, c = 0.2, k = 1."""
    return PhysicalParameters(mass=1.0, damping=0.2, stiffness=1.0)


@pytest.fixture
def initial_state() -> InitialState:
    """x0 = 0, v0 = 1."""
    return InitialState(position=0.0, velocity=1.0)


@pytest.fixture
def gains() -> ControllerGains:
    """kp = 1, ki = 0.5, kd = 0.9."""
    return ControllerGains(kp=1.0, ki=0.5, kd=0.9)


@pytest.fixture
def sim_config() -> SimulationConfig:
    """t in [0, 100], h = 0.01, setpoint 1."""
    return SimulationConfig(t_start=0.0, t_end=100.0, step_size=0.01, x_desired=1.0)


@pytest.fixture
def short_config() -> SimulationConfig:
    """t in [0, 5], h = 0.01, setpoint 1."""
    return SimulationConfig(t_start=0.0, t_end=5.0, step_size=0.01, x_desired=1.0)


@pytest.fixture
def simulator(parameters, sim_config, initial_state) -> Simulator:
    return Simulator(parameters=parameters, config=sim_config, initial_state=initial_state)


@pytest.fixture
def short_simulator(parameters, short_config, initial_state) -> Simulator:
    return Simulator(parameters=parameters, config=short_config, initial_state=initial_state)
