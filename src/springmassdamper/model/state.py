"""
Run State (Data Model)
======================
This module defines the data that changes while a run is in progress.

Why is this file needed?
------------------------
1. Explicit lifetime: The controller memory (integral and previous error) is a
   value passed into and returned from every simulator pass, so the caller
   decides whether it is reset or carried over between passes.
2. History: The trajectory arrays are owned by the simulator during a pass and
   handed read-only to the renderer afterwards.

Classes:
    ControllerState: Integral accumulator and previous error of the PID law.
    Trajectory: Time, position and velocity history of one pass.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from springmassdamper.model.errors import InvalidConfiguration

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class ControllerState:
    integral_term: float = 0.0
    prev_error: float = 0.0


class Trajectory:
    """
    Index-aligned time, position and velocity arrays of length num_steps + 1.
    """
    def __init__(
        self,
        time: npt.NDArray[np.float64],
        position: npt.NDArray[np.float64],
        velocity: npt.NDArray[np.float64],
    ) -> None:
        """
        Initialize the trajectory from existing arrays.

        Args:
            time: Time values in seconds.
            position: Positions in meters.
            velocity: Velocities in m/s.
        """
        if not (time.shape == position.shape == velocity.shape) or time.ndim != 1:
            raise InvalidConfiguration("Time, position and velocity must be 1D arrays of the same length.")
        self.time = time
        self.position = position
        self.velocity = velocity

    @classmethod
    def allocate(cls, num_steps: int, t_start: float, position: float, velocity: float) -> Trajectory:
        """Create zeroed arrays for `num_steps` steps and seed index 0."""
        trajectory = cls(
            time=np.zeros(num_steps + 1, dtype=np.float64),
            position=np.zeros(num_steps + 1, dtype=np.float64),
            velocity=np.zeros(num_steps + 1, dtype=np.float64),
        )
        trajectory.time[0] = t_start
        trajectory.position[0] = position
        trajectory.velocity[0] = velocity
        return trajectory

    def __len__(self) -> int:
        return self.time.size

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(points={len(self)}, t=[{self.time[0]}, {self.time[-1]}])"

    @property
    def num_steps(self) -> int:
        return len(self) - 1

    @property
    def final_position(self) -> float:
        """Position stored at the last index."""
        return float(self.position[-1])

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.position)) and np.all(np.isfinite(self.velocity)))

    def copy(self) -> Trajectory:
        """Independent snapshot of the arrays."""
        return Trajectory(
            time=self.time.copy(),
            position=self.position.copy(),
            velocity=self.velocity.copy(),
        )
