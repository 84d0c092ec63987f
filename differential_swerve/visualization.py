"""
Visualization of recorded differential traces.

Plots the physical motors next to the logical axes they produce, so the
effect of the coupling matrix can be checked by eye.
"""

import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .config import PLOT_BLUE, PLOT_ORANGE, PLOT_TAUPE


def load_trace(csv_path: Path) -> Dict[str, np.ndarray]:
    """Load a trace CSV into a dictionary of numpy arrays.

    Non-numeric or empty cells become NaN.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        data: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                try:
                    data[key].append(float(value))
                except (ValueError, TypeError):
                    data[key].append(np.nan)

    return {key: np.array(values) for key, values in data.items()}


def style_axis(ax: Axes, title: str = "", xlabel: str = "", ylabel: str = "") -> None:
    """Apply consistent title, labels and grid to an axis."""
    if title:
        ax.set_title(title, fontweight="bold")
    if xlabel:
        ax.set_xlabel(xlabel)
    if ylabel:
        ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3, linestyle="--", linewidth=0.5, color=PLOT_TAUPE)


def plot_trace(trace: Dict[str, np.ndarray], output_path: Optional[Path] = None) -> Figure:
    """Plot positions and velocities of both motors and both logical axes.

    Args:
        trace: Arrays keyed by trace column, as returned by load_trace().
        output_path: If given, the figure is also saved there.

    Returns:
        The 2x2 matplotlib figure.
    """
    t = trace["time"]
    fig, axes = plt.subplots(2, 2, figsize=(12, 8), sharex=True)

    panels = [
        (axes[0, 0], "Physical Position", "rotations", "positive_position", "negative_position"),
        (axes[1, 0], "Physical Velocity", "rotations/s", "positive_velocity", "negative_velocity"),
        (axes[0, 1], "Logical Position", "rotations", "azimuth_position", "wheel_position"),
        (axes[1, 1], "Logical Velocity", "rotations/s", "azimuth_velocity", "wheel_velocity"),
    ]
    for ax, title, unit, first, second in panels:
        ax.plot(t, trace[first], color=PLOT_ORANGE, label=first.split("_")[0])
        ax.plot(t, trace[second], color=PLOT_BLUE, label=second.split("_")[0])
        style_axis(ax, title=title, ylabel=unit)
        ax.legend(loc="best", framealpha=0.9, edgecolor=PLOT_TAUPE)

    for ax in axes[1]:
        ax.set_xlabel("Time (s)")

    fig.suptitle("Differential Trace", fontsize=14, fontweight="bold")
    fig.tight_layout()

    if output_path is not None:
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
        logging.info(f"Saved figure to {output_path}")

    return fig
