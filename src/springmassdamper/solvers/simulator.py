"""
Euler/PID Simulator
===================
The core time-stepping implementation.

Why is this file needed?
------------------------
1. Physics: It implements the equation of motion m x'' + c x' + k x = u.
2. Control: It evaluates the PID law u = kp e + ki I + kd de/dt every step.
3. Time-Stepping: It manages the explicit Euler loop from t_start to t_end
   and writes the state history into a Trajectory.

Note: This module should be pure Python/NumPy and should NOT import matplotlib.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable, Optional

from springmassdamper.model.errors import InvalidConfiguration, NumericalDivergence
from springmassdamper.model.parameters import InitialState
from springmassdamper.model.state import ControllerState, Trajectory

if TYPE_CHECKING:
    from springmassdamper.model.parameters import ControllerGains, PhysicalParameters, SimulationConfig

logger = logging.getLogger(__name__)


class Simulator:
    """
    Fixed-step explicit Euler integrator of a PID-controlled spring-mass-damper.
    """

    def __init__(
        self,
        parameters: PhysicalParameters,
        config: SimulationConfig,
        initial_state: Optional[InitialState] = None,
        check_finite: bool = True,
    ) -> None:
        """
        Initialize the simulator.

        Args:
            parameters: Mass, damping and stiffness of the plant.
            config: Time span, step size and setpoint.
            initial_state: Position and velocity at t_start.
            check_finite: Abort a pass with NumericalDivergence as soon as the
                          state stops being finite.
        """
        self.parameters = parameters
        self.config = config
        self.initial_state = initial_state if initial_state is not None else InitialState()
        self.check_finite = check_finite

        # h > 0, m > 0 and num_steps >= 1 before the first step
        if not config.step_size > 0.0:
            raise InvalidConfiguration(f"Step size must be positive, got {config.step_size}.")
        if not parameters.mass > 0.0:
            raise InvalidConfiguration(f"Mass must be positive, got {parameters.mass}.")
        if config.num_steps < 1:
            raise InvalidConfiguration(f"At least one step is required, got {config.num_steps}.")

        # Coefficients of dv/dt, evaluated as in (-c/m)*v - (k/m)*x
        self._damping_ratio = -parameters.damping / parameters.mass
        self._stiffness_ratio = parameters.stiffness / parameters.mass

    @property
    def num_steps(self) -> int:
        return self.config.num_steps

    def new_trajectory(self) -> Trajectory:
        """Allocate a trajectory seeded with t_start and the initial state."""
        return Trajectory.allocate(
            num_steps=self.num_steps,
            t_start=self.config.t_start,
            position=self.initial_state.position,
            velocity=self.initial_state.velocity,
        )

    def step(
        self,
        time: float,
        position: float,
        velocity: float,
        gains: ControllerGains,
        state: ControllerState,
    ) -> tuple[float, float, float, ControllerState]:
        """
        Advance the system by one step of size h.

        The control law uses the integral accumulated through the previous
        step; the integral and the previous error are updated afterwards.

        Args:
            time: Current time.
            position: Current position x.
            velocity: Current velocity v.
            gains: PID gains.
            state: Controller memory before this step.

        Returns:
            (t_next, x_next, v_next, state_next)
        """
        h = self.config.step_size

        error = self.config.x_desired - position
        control_input = (
            gains.kp * error
            + gains.ki * state.integral_term
            + gains.kd * (error - state.prev_error) / h
        )
        integral_term = state.integral_term + error * h

        dx_dt = velocity
        dv_dt = self._damping_ratio * velocity - self._stiffness_ratio * position + control_input

        x_next = position + dx_dt * h
        v_next = velocity + dv_dt * h
        t_next = time + h

        return t_next, x_next, v_next, ControllerState(integral_term=integral_term, prev_error=error)

    def run(
        self,
        gains: ControllerGains,
        state: Optional[ControllerState] = None,
        trajectory: Optional[Trajectory] = None,
        callback: Optional[Callable[[int], None]] = None,
    ) -> tuple[Trajectory, ControllerState]:
        """
        Integrate from the initial condition over the whole time span.

        Args:
            gains: PID gains, constant for the whole pass.
            state: Controller memory to start from. None starts from zero;
                   pass the state returned by a previous run to carry it over.
            trajectory: Trajectory to overwrite in place. None allocates one.
            callback: Called with the progress percentage every 10 %.

        Returns:
            The filled trajectory and the controller state after the last step.
        """
        if state is None:
            state = ControllerState()

        num_steps = self.num_steps
        if trajectory is None:
            trajectory = self.new_trajectory()
        elif trajectory.num_steps != num_steps:
            raise InvalidConfiguration(
                f"Trajectory holds {trajectory.num_steps} steps, the configuration needs {num_steps}."
            )
        else:
            trajectory.time[0] = self.config.t_start
            trajectory.position[0] = self.initial_state.position
            trajectory.velocity[0] = self.initial_state.velocity

        t_values = trajectory.time
        x_values = trajectory.position
        v_values = trajectory.velocity

        logger.debug(
            f"Running {num_steps} steps with h = {self.config.step_size} "
            f"(kp = {gains.kp}, ki = {gains.ki}, kd = {gains.kd})."
        )

        t = float(t_values[0])
        x = float(x_values[0])
        v = float(v_values[0])
        report_every = max(num_steps // 10, 1)

        # Main time loop
        for i in range(num_steps):
            t, x, v, state = self.step(t, x, v, gains, state)

            if self.check_finite and not (math.isfinite(x) and math.isfinite(v)):
                raise NumericalDivergence(step=i + 1, time=t)

            t_values[i + 1] = t
            x_values[i + 1] = x
            v_values[i + 1] = v

            if callback is not None and (i + 1) % report_every == 0:
                callback(int((i + 1) * 100 / num_steps))

        logger.debug(f"Pass finished at t = {t:.4f} s, x = {x}, v = {v}.")
        return trajectory, state
