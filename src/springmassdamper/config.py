"""
Configuration & Defaults
========================
This module serves as the central registry for the default run constants and
output file locations.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (masses, gains, step sizes) from
   being scattered through the solver and the entry points.
2. Reproducibility: Both program variants read the same values, so the blue
   curve of the tuned image is exactly the image of the plain run.

Exports:
    MASS, DAMPING, STIFFNESS: Physical parameters of the plant.
    KP, KI, KD: Initial PID gains.
    T_START, T_END, STEP_SIZE, X_DESIRED: Time span, step and setpoint.
    X0, V0: Initial position and velocity.
    TUNING_DURATION, TUNING_STEP: Window of the tuning heuristic.
    CANVAS_SIZE: Output image size in pixels.
    PID_IMAGE, TUNED_IMAGE: Output file names of the two variants.
"""
import os
from pathlib import Path
from typing import Optional


# Plant
MASS: float = 1.0  # kg
DAMPING: float = 0.2  # Ns/m
STIFFNESS: float = 1.0  # N/m

# Initial conditions
X0: float = 0.0  # m
V0: float = 1.0  # m/s

# Setpoint
X_DESIRED: float = 1.0  # m

# PID gains
KP: float = 1.0
KI: float = 0.5
KD: float = 0.9

# Time span
T_START: float = 0.0  # s
T_END: float = 100.0  # s
STEP_SIZE: float = 0.01  # s

# Tuning window: floor(TUNING_DURATION / TUNING_STEP) iterations
TUNING_DURATION: float = 1.0  # s
TUNING_STEP: float = 0.1  # s

# Rendering
CANVAS_SIZE: tuple[int, int] = (800, 600)  # px
PID_TITLE: str = "Spring-Mass-Damper System with PID Controller"
TUNED_TITLE: str = "Spring-Mass-Damper System with Tuned PID Controller"
PID_IMAGE: str = "spring_mass_damper_pid.png"
TUNED_IMAGE: str = "spring_mass_damper_pid_tuned.png"


def get_output_path(filename: str, directory: Optional[str] = None) -> str:
    """
    Get absolute path of an output image.

    Relative names resolve against `directory`, or the current working
    directory when no directory is given.
    """
    if os.path.isabs(filename):
        return filename
    base_path: Path = Path(directory) if directory is not None else Path.cwd()
    return os.path.join(str(base_path.resolve()), filename)
