"""
Run Parameters
==============
Immutable inputs of a simulation run.

Classes:
    PhysicalParameters: Mass, damping and stiffness of the plant.
    ControllerGains: Proportional, integral and derivative gains.
    SimulationConfig: Time span, step size and setpoint.
    InitialState: Position and velocity at t_start.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import math

from springmassdamper.model.errors import InvalidConfiguration


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidConfiguration(f"{name} must be a finite number, got {value!r}.")


@dataclass(frozen=True)
class PhysicalParameters:
    mass: float = 1.0  # kg
    damping: float = 0.2  # Ns/m
    stiffness: float = 1.0  # N/m

    def __post_init__(self) -> None:
        _require_finite(mass=self.mass, damping=self.damping, stiffness=self.stiffness)
        if self.mass <= 0.0:
            raise InvalidConfiguration(f"Mass must be positive, got {self.mass}.")
        if self.damping < 0.0:
            raise InvalidConfiguration(f"Damping must be non-negative, got {self.damping}.")
        if self.stiffness <= 0.0:
            raise InvalidConfiguration(f"Stiffness must be positive, got {self.stiffness}.")


@dataclass(frozen=True)
class ControllerGains:
    """
    PID gains. Constant during a single simulator pass; the tuner hands out
    new instances instead of changing an existing one.
    """
    kp: float = 1.0
    ki: float = 0.5
    kd: float = 0.9

    def with_gains(self, **changes: float) -> ControllerGains:
        return replace(self, **changes)

    def __str__(self) -> str:
        return f"kp = {self.kp}, ki = {self.ki}, kd = {self.kd}"


@dataclass(frozen=True)
class SimulationConfig:
    """
    Time discretisation and setpoint.

    Attributes:
        t_start: Start time in seconds.
        t_end: End time in seconds.
        step_size: Euler step h in seconds.
        x_desired: Setpoint position in meters.
    """
    t_start: float = 0.0
    t_end: float = 100.0
    step_size: float = 0.01
    x_desired: float = 1.0

    def __post_init__(self) -> None:
        _require_finite(
            t_start=self.t_start,
            t_end=self.t_end,
            step_size=self.step_size,
            x_desired=self.x_desired,
        )
        if self.step_size <= 0.0:
            raise InvalidConfiguration(f"Step size must be positive, got {self.step_size}.")
        if self.num_steps < 1:
            raise InvalidConfiguration(
                f"Time span [{self.t_start}, {self.t_end}] with step {self.step_size} "
                f"gives {self.num_steps} steps, at least 1 is required."
            )

    @property
    def num_steps(self) -> int:
        """Number of Euler steps, ceil((t_end - t_start) / h)."""
        return math.ceil((self.t_end - self.t_start) / self.step_size)


@dataclass(frozen=True)
class InitialState:
    position: float = 0.0  # m
    velocity: float = 1.0  # m/s

    def __post_init__(self) -> None:
        _require_finite(position=self.position, velocity=self.velocity)
