"""
Visualization utilities for planned paths and tracking runs.

This module provides matplotlib figures (dark style) for:
- A flattened path with its control points and tangent handles
- A simulated tracking run: driven trajectory, lookahead targets, and
  remaining distance / speed command over time
"""

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.figure import Figure

from .bezier import ControlPoint
from .config import (
    PLOT_BLUE,
    PLOT_CREAM,
    PLOT_DARK_BLUE,
    PLOT_ORANGE,
    PLOT_TAUPE,
    PLOT_YELLOW_ORANGE,
)
from .path import Path as SegmentPath
from .simulation import SimulationResult

TIME_CMAP = LinearSegmentedColormap.from_list("tracking_time", [PLOT_ORANGE, PLOT_BLUE])
"""Colormap for time-coloured trajectories: orange (start) to blue (end)."""


def _style_axis(ax: Axes, title: str, xlabel: str, ylabel: str) -> None:
    """Apply dark mode styling to an axis."""
    ax.set_facecolor(PLOT_DARK_BLUE)
    for spine in ax.spines.values():
        spine.set_color(PLOT_CREAM)
    ax.tick_params(colors=PLOT_CREAM, which="both")
    ax.set_xlabel(xlabel, color=PLOT_CREAM)
    ax.set_ylabel(ylabel, color=PLOT_CREAM)
    ax.set_title(title, color=PLOT_CREAM)
    ax.grid(True, alpha=0.2, color=PLOT_CREAM)


def _dark_legend(ax: Axes) -> None:
    legend = ax.legend(facecolor=PLOT_DARK_BLUE, edgecolor=PLOT_TAUPE)
    plt.setp(legend.get_texts(), color=PLOT_CREAM)


def _plot_reference(ax: Axes, path: SegmentPath) -> None:
    waypoints = path.waypoints()
    ax.plot(
        waypoints[:, 0],
        waypoints[:, 1],
        "--",
        color=PLOT_BLUE,
        linewidth=2.0,
        alpha=0.9,
        label="Reference Path",
        zorder=2,
    )


def plot_path(
    path: SegmentPath,
    control_points: Optional[Sequence[ControlPoint]] = None,
    title: str = "Planned Path",
    save_path: Optional[Path] = None,
) -> Figure:
    """Plot a flattened path (x vs y) with optional control points.

    Args:
        path: Path to draw (all segments, retired ones included).
        control_points: Control points to overlay with their tangent handles.
        title: Plot title.
        save_path: Optional path to save the figure.

    Returns:
        Matplotlib figure object.
    """
    fig, ax = plt.subplots(figsize=(10, 8), facecolor=PLOT_DARK_BLUE)
    _style_axis(ax, title, "X Position (m)", "Y Position (m)")

    _plot_reference(ax, path)
    waypoints = path.waypoints()
    ax.scatter(waypoints[:, 0], waypoints[:, 1], s=8, color=PLOT_CREAM, alpha=0.6, zorder=3)

    if control_points:
        for i, point in enumerate(control_points):
            handles = np.array(
                [point.incoming_tangent.as_tuple(), point.position.as_tuple(), point.outgoing_tangent.as_tuple()]
            )
            ax.plot(
                handles[:, 0],
                handles[:, 1],
                "-o",
                color=PLOT_YELLOW_ORANGE,
                markersize=4,
                linewidth=1.0,
                alpha=0.8,
                label="Tangent Handles" if i == 0 else "_nolegend_",
                zorder=4,
            )
        positions = np.array([point.position.as_tuple() for point in control_points])
        ax.plot(
            positions[:, 0],
            positions[:, 1],
            "o",
            color=PLOT_ORANGE,
            markersize=9,
            markeredgecolor="black",
            markeredgewidth=1.0,
            linestyle="none",
            label="Control Points",
            zorder=5,
        )

    ax.set_aspect("equal")
    _dark_legend(ax)
    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_tracking_run(
    path: SegmentPath,
    result: SimulationResult,
    title: str = "Tracking Run",
    save_path: Optional[Path] = None,
) -> Figure:
    """Plot a simulated tracking run.

    Top: reference path, driven trajectory coloured by time, lookahead targets.
    Bottom: remaining distance and linear velocity command over time.

    Args:
        path: Tracked path.
        result: Output of simulate().
        title: Plot title.
        save_path: Optional path to save the figure.

    Returns:
        Matplotlib figure object.
    """
    fig, (ax1, ax2) = plt.subplots(
        2, 1, figsize=(10, 11), facecolor=PLOT_DARK_BLUE, gridspec_kw={"height_ratios": [3, 1]}
    )
    _style_axis(ax1, title, "X Position (m)", "Y Position (m)")
    _style_axis(ax2, "Progress", "Time (s)", "Distance (m) / Speed (m/s)")

    _plot_reference(ax1, path)

    if result.steps > 0:
        x = result.trajectory[:, 0]
        y = result.trajectory[:, 1]
        ax1.plot(x, y, "-", color=PLOT_ORANGE, linewidth=1.5, alpha=0.6, label="Trajectory", zorder=1)
        scatter = ax1.scatter(
            x,
            y,
            c=result.time,
            cmap=TIME_CMAP,
            s=12,
            alpha=0.8,
            edgecolors="black",
            linewidths=0.3,
            zorder=3,
        )
        plt.colorbar(scatter, ax=ax1, label="Time (s)")
        ax1.scatter(
            result.look_ahead[:, 0],
            result.look_ahead[:, 1],
            s=6,
            color=PLOT_YELLOW_ORANGE,
            alpha=0.5,
            label="Lookahead",
            zorder=2,
        )
        ax1.plot(x[0], y[0], "o", color=PLOT_BLUE, markersize=8, markeredgecolor="black", label="Start", zorder=5)
        ax1.plot(x[-1], y[-1], "o", color=PLOT_ORANGE, markersize=8, markeredgecolor="black", label="End", zorder=5)

        ax2.plot(result.time, result.remaining_distance, color=PLOT_BLUE, label="Remaining Distance")
        ax2.plot(result.time, result.v_cmd, color=PLOT_ORANGE, label="v_cmd")
        _dark_legend(ax2)

    ax1.set_aspect("equal")
    _dark_legend(ax1)
    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig
