"""
Reference Responses
===================
Exact solutions of the uncontrolled spring-mass-damper, m x'' + c x' + k x = 0.

Why is this file needed?
------------------------
1. Verification: With all gains at zero the Euler simulator must reproduce
   these curves up to its integration error, in every damping regime.
2. Public reference API: `free_response` gives the closed form per regime,
   `free_response_expm` the same through the matrix exponential of the
   state matrix (scipy), independent of the regime.

Note: Not used by the command-line programs; imported by callers who want
to compare a Trajectory against the exact free response.
"""
from __future__ import annotations

from enum import Enum
import math
from typing import TYPE_CHECKING

import numpy as np
import scipy as sp

if TYPE_CHECKING:
    import numpy.typing as npt

    from springmassdamper.model.parameters import InitialState, PhysicalParameters


class DampingRegime(Enum):
    UNDERDAMPED = "underdamped"
    CRITICALLY_DAMPED = "critically damped"
    OVERDAMPED = "overdamped"

    @classmethod
    def of(cls, parameters: PhysicalParameters, rel_tol: float = 1e-12) -> DampingRegime:
        """Classify by the sign of the discriminant c^2 - 4mk."""
        critical = 4.0 * parameters.mass * parameters.stiffness
        discriminant = parameters.damping ** 2 - critical
        if abs(discriminant) <= rel_tol * critical:
            return cls.CRITICALLY_DAMPED
        if discriminant < 0.0:
            return cls.UNDERDAMPED
        return cls.OVERDAMPED


def free_response(
    parameters: PhysicalParameters,
    initial_state: InitialState,
    times: float | npt.NDArray[np.float64],
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Closed-form solution of m x'' + c x' + k x = 0 (no controller).

    Args:
        parameters: Mass, damping and stiffness.
        initial_state: Position and velocity at t = 0.
        times: Time(s) in seconds, measured from the initial state.

    Returns:
        Position and velocity arrays at the requested times.
    """
    t = np.atleast_1d(np.asarray(times, dtype=np.float64))
    x0 = initial_state.position
    v0 = initial_state.velocity

    alpha = parameters.damping / (2.0 * parameters.mass)
    omega0_sq = parameters.stiffness / parameters.mass
    regime = DampingRegime.of(parameters)

    if regime is DampingRegime.UNDERDAMPED:
        omega_d = math.sqrt(omega0_sq - alpha ** 2)
        decay = np.exp(-alpha * t)
        cos = np.cos(omega_d * t)
        sin = np.sin(omega_d * t)
        x = decay * (x0 * cos + (v0 + alpha * x0) / omega_d * sin)
        v = decay * (v0 * cos - (alpha * v0 + omega0_sq * x0) / omega_d * sin)
    elif regime is DampingRegime.CRITICALLY_DAMPED:
        decay = np.exp(-alpha * t)
        b = v0 + alpha * x0
        x = (x0 + b * t) * decay
        v = (v0 - alpha * b * t) * decay
    else:
        beta = math.sqrt(alpha ** 2 - omega0_sq)
        r1 = -alpha + beta
        r2 = -alpha - beta
        a = (v0 - r2 * x0) / (r1 - r2)
        b = x0 - a
        x = a * np.exp(r1 * t) + b * np.exp(r2 * t)
        v = r1 * a * np.exp(r1 * t) + r2 * b * np.exp(r2 * t)

    return x, v


def free_response_expm(
    parameters: PhysicalParameters,
    initial_state: InitialState,
    times: float | npt.NDArray[np.float64],
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Same as `free_response`, via the matrix exponential of the state matrix.
    Independent of the damping regime.
    """
    t = np.atleast_1d(np.asarray(times, dtype=np.float64))
    a_matrix = np.array(
        [
            [0.0, 1.0],
            [-parameters.stiffness / parameters.mass, -parameters.damping / parameters.mass],
        ],
        dtype=np.float64,
    )
    s0 = np.array([initial_state.position, initial_state.velocity], dtype=np.float64)

    states = np.empty((t.size, 2), dtype=np.float64)
    for i, ti in enumerate(t):
        states[i] = sp.linalg.expm(a_matrix * ti) @ s0

    return states[:, 0], states[:, 1]
