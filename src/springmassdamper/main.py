"""
Program Entry Points
====================
This module wires the simulator, the tuner and the renderer into the two
command-line programs.

Why is this file needed?
------------------------
It acts as the composition root. It:
1. Builds the run inputs from the defaults in `config`.
2. Runs the shared Simulator, optionally followed by the Tuner.
3. Renders the trajectory (or both trajectories) to the output image.
4. Turns every SimulationError into exit code 1.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from springmassdamper import config
from springmassdamper.logging_config import setup_logging
from springmassdamper.model.errors import SimulationError
from springmassdamper.model.parameters import ControllerGains, InitialState, PhysicalParameters, SimulationConfig
from springmassdamper.model.state import ControllerState, Trajectory
from springmassdamper.solvers.simulator import Simulator
from springmassdamper.solvers.tuner import Tuner, TuningResult
from springmassdamper.view.plot import Series, render_series

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    gains: ControllerGains
    trajectory: Trajectory
    state: ControllerState


@dataclass
class TunedResult:
    initial: SimulationResult
    tuning: TuningResult

    @property
    def gains(self) -> ControllerGains:
        return self.tuning.gains


def default_parameters() -> PhysicalParameters:
    return PhysicalParameters(mass=config.MASS, damping=config.DAMPING, stiffness=config.STIFFNESS)


def default_config() -> SimulationConfig:
    return SimulationConfig(
        t_start=config.T_START,
        t_end=config.T_END,
        step_size=config.STEP_SIZE,
        x_desired=config.X_DESIRED,
    )


def default_initial_state() -> InitialState:
    return InitialState(position=config.X0, velocity=config.V0)


def default_gains() -> ControllerGains:
    return ControllerGains(kp=config.KP, ki=config.KI, kd=config.KD)


def run_pid(
    parameters: Optional[PhysicalParameters] = None,
    sim_config: Optional[SimulationConfig] = None,
    initial_state: Optional[InitialState] = None,
    gains: Optional[ControllerGains] = None,
    check_finite: bool = True,
) -> SimulationResult:
    """Single simulator pass with fixed gains."""
    simulator = Simulator(
        parameters=parameters or default_parameters(),
        config=sim_config or default_config(),
        initial_state=initial_state or default_initial_state(),
        check_finite=check_finite,
    )
    gains = gains or default_gains()
    trajectory, state = simulator.run(gains=gains)
    return SimulationResult(gains=gains, trajectory=trajectory, state=state)


def run_tuned(
    parameters: Optional[PhysicalParameters] = None,
    sim_config: Optional[SimulationConfig] = None,
    initial_state: Optional[InitialState] = None,
    gains: Optional[ControllerGains] = None,
    tuning_duration: float = config.TUNING_DURATION,
    tuning_step: float = config.TUNING_STEP,
    carry_over_state: bool = True,
    check_finite: bool = True,
) -> TunedResult:
    """
    Initial pass followed by the tuning loop.

    The initial trajectory is snapshotted before tuning, since every tuning
    pass overwrites the trajectory in place.
    """
    simulator = Simulator(
        parameters=parameters or default_parameters(),
        config=sim_config or default_config(),
        initial_state=initial_state or default_initial_state(),
        check_finite=check_finite,
    )
    tuner = Tuner(
        simulator=simulator,
        tuning_duration=tuning_duration,
        tuning_step=tuning_step,
        carry_over_state=carry_over_state,
    )

    gains = gains or default_gains()
    trajectory, state = simulator.run(gains=gains)
    initial = SimulationResult(gains=gains, trajectory=trajectory.copy(), state=state)

    tuning = tuner.tune(gains=gains, trajectory=trajectory, state=state)
    return TunedResult(initial=initial, tuning=tuning)


def main(output_dir: Optional[str] = None) -> int:
    """Simulate with the default gains and plot the response."""
    setup_logging(level=logging.WARNING)

    try:
        result = run_pid()
        render_series(
            [Series.from_trajectory(result.trajectory, label="PID")],
            path=config.get_output_path(config.PID_IMAGE, output_dir),
            title=config.PID_TITLE,
            size=config.CANVAS_SIZE,
        )
    except SimulationError as e:
        logger.error(str(e))
        return 1
    return 0


def main_tuned(output_dir: Optional[str] = None) -> int:
    """Simulate, auto-tune, plot both responses and print the final gains."""
    setup_logging(level=logging.WARNING)

    try:
        result = run_tuned()
        render_series(
            [
                Series.from_trajectory(result.initial.trajectory, label="PID"),
                Series.from_trajectory(result.tuning.trajectory, label="Tuned PID"),
            ],
            path=config.get_output_path(config.TUNED_IMAGE, output_dir),
            title=config.TUNED_TITLE,
            size=config.CANVAS_SIZE,
        )
    except SimulationError as e:
        logger.error(str(e))
        return 1

    print(result.gains)
    return 0
