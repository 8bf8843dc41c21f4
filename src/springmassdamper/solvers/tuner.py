"""
Gain Tuner
==========
A crude Tyreus-Luyben style heuristic that re-derives the PID gains from the
end of the last simulated response and re-runs the simulation with them.

The heuristic is intentionally simple and unvalidated: gains are computed as
0.6/e, 1.2/sum(e*dt) and 0.075/(de/dt) of the tuning error e, so a response
that has already settled produces very large gains.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import TYPE_CHECKING

from springmassdamper.model.errors import InvalidConfiguration, NumericalDivergence
from springmassdamper.model.parameters import ControllerGains
from springmassdamper.model.state import ControllerState
from springmassdamper.utils import checked_divide

if TYPE_CHECKING:
    from springmassdamper.model.state import Trajectory
    from springmassdamper.solvers.simulator import Simulator

logger = logging.getLogger(__name__)

PROPORTIONAL_FACTOR = 0.6
INTEGRAL_FACTOR = 1.2
DERIVATIVE_FACTOR = 0.075


@dataclass(frozen=True)
class TuningProgress:
    """Memory of the tuning loop itself (not of the PID controller)."""
    integral_sum: float = 0.0
    prev_tuning_error: float = 0.0


@dataclass(frozen=True)
class TuningRecord:
    iteration: int
    tuning_error: float
    integral_sum: float
    derivative: float
    gains: ControllerGains


@dataclass
class TuningResult:
    gains: ControllerGains
    trajectory: Trajectory
    state: ControllerState
    records: list[TuningRecord] = field(default_factory=list)

    @property
    def iterations(self) -> int:
        return len(self.records)


class Tuner:
    """
    Repeatedly updates the gains and re-runs the simulator.
    """

    def __init__(
        self,
        simulator: Simulator,
        tuning_duration: float,
        tuning_step: float,
        carry_over_state: bool = True,
    ) -> None:
        """
        Args:
            simulator: Simulator re-run after every gain update.
            tuning_duration: Length of the tuning window in seconds.
            tuning_step: Length of one tuning iteration in seconds.
            carry_over_state: Keep the controller integral and previous error
                              from one pass to the next. When False every pass
                              starts from a zeroed controller.
        """
        if not (math.isfinite(tuning_step) and tuning_step > 0.0):
            raise InvalidConfiguration(f"Tuning step must be positive, got {tuning_step}.")
        if not (math.isfinite(tuning_duration) and tuning_duration >= 0.0):
            raise InvalidConfiguration(f"Tuning duration must be non-negative, got {tuning_duration}.")

        self.simulator = simulator
        self.tuning_duration = tuning_duration
        self.tuning_step = tuning_step
        self.carry_over_state = carry_over_state

    @property
    def tuning_iterations(self) -> int:
        """floor(tuning_duration / tuning_step)"""
        return math.floor(self.tuning_duration / self.tuning_step)

    def next_gains(
        self,
        last_position: float,
        progress: TuningProgress,
        iteration: int,
    ) -> tuple[TuningRecord, TuningProgress]:
        """
        Compute the gains of one tuning iteration from the observed output.

        Args:
            last_position: Process output, the last stored position.
            progress: Integral sum and previous tuning error so far.
            iteration: Index used in error reports.

        Returns:
            The record of this iteration and the updated tuning progress.

        Raises:
            ControllerSingularity: If the error, its integral or its
                                   derivative is exactly zero.
        """
        tuning_error = self.simulator.config.x_desired - last_position
        integral_sum = progress.integral_sum + tuning_error * self.tuning_step
        derivative = (tuning_error - progress.prev_tuning_error) / self.tuning_step

        gains = ControllerGains(
            kp=checked_divide(PROPORTIONAL_FACTOR, tuning_error, "tuning_error", iteration),
            ki=checked_divide(INTEGRAL_FACTOR, integral_sum, "integral_sum", iteration),
            kd=checked_divide(DERIVATIVE_FACTOR, derivative, "derivative", iteration),
        )
        record = TuningRecord(
            iteration=iteration,
            tuning_error=tuning_error,
            integral_sum=integral_sum,
            derivative=derivative,
            gains=gains,
        )
        return record, TuningProgress(integral_sum=integral_sum, prev_tuning_error=tuning_error)

    def tune(
        self,
        gains: ControllerGains,
        trajectory: Trajectory,
        state: ControllerState,
    ) -> TuningResult:
        """
        Run the tuning loop starting from the result of an earlier pass.

        The trajectory is overwritten in place by every pass.

        Args:
            gains: Gains of the pass that produced `trajectory`.
            trajectory: Trajectory of the earlier pass.
            state: Controller state after the earlier pass.

        Returns:
            Final gains, trajectory and controller state with one record per
            iteration.
        """
        result = TuningResult(gains=gains, trajectory=trajectory, state=state)
        progress = TuningProgress()

        logger.info(
            f"Tuning for {self.tuning_iterations} iterations "
            f"({'carrying over' if self.carry_over_state else 'resetting'} controller state)."
        )

        for iteration in range(self.tuning_iterations):
            record, progress = self.next_gains(
                last_position=result.trajectory.final_position,
                progress=progress,
                iteration=iteration,
            )
            result.records.append(record)
            result.gains = record.gains

            start_state = result.state if self.carry_over_state else ControllerState()
            try:
                result.trajectory, result.state = self.simulator.run(
                    gains=record.gains,
                    state=start_state,
                    trajectory=result.trajectory,
                )
            except NumericalDivergence as exc:
                raise exc.in_iteration(iteration) from exc

            logger.debug(
                f"Iteration {iteration}: error = {record.tuning_error}, {record.gains}, "
                f"final position = {result.trajectory.final_position}"
            )

        return result
