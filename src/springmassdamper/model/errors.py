"""
Error Taxonomy
==============
Every failure of a run is one of the classes below. All of them are fatal for
the run; the entry points turn them into a non-zero exit code.

Classes:
    SimulationError: Common base class.
    InvalidConfiguration: Rejected inputs, detected before any step is taken.
    ControllerSingularity: Zero divisor inside a gain formula.
    NumericalDivergence: The integrated state stopped being finite.
    RenderFailure: The image could not be drawn or written.
"""
from __future__ import annotations

from typing import Optional


class SimulationError(Exception):
    """Base class for all errors raised by springmassdamper."""


class InvalidConfiguration(SimulationError, ValueError):
    """Raised when parameters, time span or tuning window are not usable."""


class ControllerSingularity(SimulationError, ZeroDivisionError):
    """
    Raised when a gain formula would divide by exactly zero.

    Attributes:
        quantity: Name of the divisor (e.g. "tuning_error").
        iteration: Tuning iteration index (0-based) at which it happened.
    """

    def __init__(self, quantity: str, iteration: Optional[int] = None) -> None:
        self.quantity = quantity
        self.iteration = iteration
        where = f" at tuning iteration {iteration}" if iteration is not None else ""
        super().__init__(f"Division by zero {quantity}{where}.")


class NumericalDivergence(SimulationError, ArithmeticError):
    """
    Raised when position or velocity becomes infinite or NaN.

    Attributes:
        step: Index of the step that produced the non-finite state.
        iteration: Tuning iteration index, when raised inside the tuner.
    """

    def __init__(self, step: int, time: float, iteration: Optional[int] = None) -> None:
        self.step = step
        self.time = time
        self.iteration = iteration
        where = f"tuning iteration {iteration}, " if iteration is not None else ""
        super().__init__(
            f"State became non-finite at {where}step {step} (t = {time:.4f} s)."
        )

    def in_iteration(self, iteration: int) -> NumericalDivergence:
        """Return a copy of this error tagged with a tuning iteration."""
        return NumericalDivergence(step=self.step, time=self.time, iteration=iteration)


class RenderFailure(SimulationError):
    """Raised when the image backend cannot draw or write the output file."""
