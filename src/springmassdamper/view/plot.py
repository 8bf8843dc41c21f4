"""
Trajectory Plotting
===================
Draws one or more time series to a PNG file.

Why is this file needed?
------------------------
1. Output: The run's only artifact is this image.
2. Safety: The image is written to a temporary sibling and moved into place,
   so a failed draw never leaves a truncated file behind. The replacement
   keeps the permission bits of the file it overwrites.
3. Backend: Figures are drawn on an Agg canvas, never through pyplot.

Classes:
    Series: One labelled polyline.
    PlotBounds: Axis limits.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
import stat
import tempfile
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np
import matplotlib
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from springmassdamper.model.errors import RenderFailure

if TYPE_CHECKING:
    import numpy.typing as npt

    from springmassdamper.model.state import Trajectory

logger = logging.getLogger(__name__)

SERIES_COLORS: tuple[str, ...] = ("blue", "red", "green", "black")
DPI: int = 100


@dataclass(frozen=True)
class Series:
    label: str
    time: npt.NDArray[np.float64]
    values: npt.NDArray[np.float64]
    color: Optional[str] = None

    @classmethod
    def from_trajectory(cls, trajectory: Trajectory, label: str, color: Optional[str] = None) -> Series:
        """Position-vs-time series of a trajectory."""
        return cls(label=label, time=trajectory.time, values=trajectory.position, color=color)


@dataclass(frozen=True)
class PlotBounds:
    t_min: float
    t_max: float
    y_min: float
    y_max: float


def _widen(low: float, high: float) -> tuple[float, float]:
    # Matplotlib refuses identical limits
    if low == high:
        pad = 0.5 if low == 0.0 else abs(low) * 0.05
        return low - pad, high + pad
    return low, high


def _output_mode(path: str) -> int:
    """Permission bits for the output: the existing file's, else 0o666 minus umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def compute_bounds(series: Sequence[Series]) -> PlotBounds:
    """
    Bounding box over all series.

    Raises:
        RenderFailure: If there is nothing to draw or the data is not finite.
    """
    if not series:
        raise RenderFailure("No series to plot.")

    times = np.concatenate([np.asarray(s.time, dtype=np.float64) for s in series])
    values = np.concatenate([np.asarray(s.values, dtype=np.float64) for s in series])

    if times.size == 0:
        raise RenderFailure("Series are empty.")
    if not (np.all(np.isfinite(times)) and np.all(np.isfinite(values))):
        raise RenderFailure("Cannot plot non-finite values.")

    t_min, t_max = _widen(float(times.min()), float(times.max()))
    y_min, y_max = _widen(float(values.min()), float(values.max()))
    return PlotBounds(t_min=t_min, t_max=t_max, y_min=y_min, y_max=y_max)


def render_series(
    series: Sequence[Series],
    path: str,
    title: str,
    bounds: Optional[PlotBounds] = None,
    size: tuple[int, int] = (800, 600),
) -> str:
    """
    Plot the series into a PNG image.

    Args:
        series: Series to draw, in drawing order. Without an explicit color
                the first is blue, the second red.
        path: Output file, overwritten if it exists.
        title: Chart title.
        bounds: Axis limits; computed from the data when omitted.
        size: Canvas size in pixels (width, height).

    Returns:
        The path written.

    Raises:
        RenderFailure: If drawing or writing the file fails.
    """
    if bounds is None:
        bounds = compute_bounds(series)

    directory = os.path.dirname(os.path.abspath(path))
    width, height = size

    try:
        fd, temp_path = tempfile.mkstemp(suffix=".png", prefix=".render-", dir=directory)
    except OSError as e:
        raise RenderFailure(f"Cannot create output file in '{directory}': {e}") from e
    os.close(fd)

    # Agg canvas directly, independent of the pyplot backend
    fig = Figure(figsize=(width / DPI, height / DPI), dpi=DPI, layout="constrained")
    FigureCanvasAgg(fig)
    try:
        ax = fig.add_subplot()
        fig.patch.set_facecolor("white")

        for i, s in enumerate(series):
            color = s.color or SERIES_COLORS[i % len(SERIES_COLORS)]
            ax.plot(s.time, s.values, color=color, lw=1.0, label=s.label)

        ax.set_xlim(bounds.t_min, bounds.t_max)
        ax.set_ylim(bounds.y_min, bounds.y_max)

        ax.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        ax.minorticks_on()
        ax.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        ax.set_title(title, fontsize=16)
        ax.set_xlabel("Time (s)")
        ax.set_ylabel("Position (m)")
        if len(series) > 1:
            ax.legend(loc="best")

        # Fixed metadata keeps the bytes reproducible
        fig.savefig(
            temp_path,
            format="png",
            dpi=DPI,
            facecolor="white",
            metadata={"Software": f"matplotlib {matplotlib.__version__}"},
        )
        os.chmod(temp_path, _output_mode(path))
        os.replace(temp_path, path)
    except (OSError, ValueError, RuntimeError) as e:
        raise RenderFailure(f"Failed to render '{path}': {e}") from e
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)

    logger.info(f"Plot saved to: {path}")
    return path
