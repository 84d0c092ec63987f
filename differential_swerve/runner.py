"""
Simulation runner for a differential swerve module.

Builds a module from two simulated motors, then runs a fixed-period control
loop that senses and commands both logical axes every cycle, in the same order
a robot scheduler would: get_position/get_velocity, then set_velocity. The
per-cycle state can be recorded to CSV and plotted.
"""

import argparse
import logging
import math
import sys
from typing import Dict, List, Optional, Sequence

import numpy as np

from .config import (
    DEFAULT_DIFFERENTIAL_MATRIX,
    SIM_AZIMUTH_VELOCITY,
    SIM_DT,
    SIM_DURATION,
    SIM_MAX_VELOCITY,
    SIM_WHEEL_VELOCITY,
    TERM_BLUE,
    TERM_RESET,
    TRACE_PLOT_NAME,
)
from .coupling import CouplingMatrix
from .data_collector import TRACE_COLUMNS, DataCollector
from .differential import DifferentialMechanism
from .errors import ConfigurationError
from .motor import SimulatedMotor
from .virtual_motor import difference_motor, sum_motor


class CustomFormatter(logging.Formatter):
    """Logging formatter that drops timestamps from INFO messages.

    INFO lines are user-facing status; WARNING, ERROR and DEBUG keep the
    timestamp and level for context.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record based on its level.

        Args:
            record: The log record to format.

        Returns:
            Formatted log message string.
        """
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels with timestamps. If False, show INFO
                 without timestamps and WARNING/ERROR with timestamps.

    Calling it again does not add a second console handler.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        if any(isinstance(h.formatter, CustomFormatter) for h in logger.handlers):
            return
        handler = logging.StreamHandler()
        handler.setFormatter(CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)


def run_simulation(
    coupling: CouplingMatrix,
    azimuth_velocity: float = SIM_AZIMUTH_VELOCITY,
    wheel_velocity: float = SIM_WHEEL_VELOCITY,
    duration: float = SIM_DURATION,
    dt: float = SIM_DT,
    max_velocity: float = SIM_MAX_VELOCITY,
    collector: Optional[DataCollector] = None,
) -> Dict[str, np.ndarray]:
    """Run an open-loop simulation with constant logical commands.

    The azimuth axis is calibrated to zero before the first cycle.

    Args:
        coupling: Coupling between the two simulated motors.
        azimuth_velocity: Command for the sum axis every cycle.
        wheel_velocity: Command for the difference axis every cycle.
        duration: Simulated time (seconds).
        dt: Control cycle period (seconds). Must be positive.
        max_velocity: Free speed of each simulated motor.
        collector: Optional DataCollector that receives every cycle.

    Returns:
        Dictionary mapping each trace column to a numpy array.

    Raises:
        ValueError: If dt is not positive or duration is negative.
    """
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if duration < 0:
        raise ValueError(f"duration must be non-negative, got {duration}")

    positive = SimulatedMotor(max_velocity)
    negative = SimulatedMotor(max_velocity)
    mechanism = DifferentialMechanism(positive, negative, coupling)
    azimuth = sum_motor(mechanism)
    wheel = difference_motor(mechanism)
    azimuth.calibrate_position(0.0)

    rows: List[List[float]] = []
    cycles = int(round(duration / dt))
    for cycle in range(cycles + 1):
        t = cycle * dt
        sample = {
            "positive_position": positive.get_position(),
            "negative_position": negative.get_position(),
            "positive_velocity": positive.get_velocity(),
            "negative_velocity": negative.get_velocity(),
            "azimuth_position": azimuth.get_position(),
            "azimuth_velocity": azimuth.get_velocity(),
            "wheel_position": wheel.get_position(),
            "wheel_velocity": wheel.get_velocity(),
        }
        rows.append([t] + [sample[column] for column in TRACE_COLUMNS[1:]])
        if collector is not None:
            collector.log_cycle(t, sample)

        azimuth.set_velocity(azimuth_velocity)
        wheel.set_velocity(wheel_velocity)
        positive.step(dt)
        negative.step(dt)

    data = np.array(rows).reshape(-1, len(TRACE_COLUMNS))
    return {column: data[:, i] for i, column in enumerate(TRACE_COLUMNS)}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate a differential swerve module with two coupled motors"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    parser.add_argument(
        "--matrix",
        nargs=4,
        type=float,
        metavar=("A", "B", "C", "D"),
        help="Forward differential matrix [[A, B], [C, D]] (default: config.DEFAULT_DIFFERENTIAL_MATRIX)",
    )
    parser.add_argument(
        "--azimuth-velocity", type=float, default=SIM_AZIMUTH_VELOCITY,
        help="Azimuth axis command (rotations/s)",
    )
    parser.add_argument(
        "--wheel-velocity", type=float, default=SIM_WHEEL_VELOCITY,
        help="Wheel axis command (rotations/s)",
    )
    parser.add_argument("--duration", type=float, default=SIM_DURATION, help="Run length (s)")
    parser.add_argument("--dt", type=float, default=SIM_DT, help="Control cycle period (s)")
    parser.add_argument(
        "--output-dir", default=None,
        help="Record the trace to CSV under this directory",
    )
    parser.add_argument(
        "--plot", action="store_true", help="Save a plot of the trace (requires --output-dir)"
    )
    args = parser.parse_args(argv)

    # Rejected before DataCollector creates a run directory
    if not (math.isfinite(args.dt) and args.dt > 0):
        parser.error(f"--dt must be a positive number, got {args.dt}")
    if not (math.isfinite(args.duration) and args.duration >= 0):
        parser.error(f"--duration must be a non-negative number, got {args.duration}")
    for name in ("azimuth_velocity", "wheel_velocity"):
        if not math.isfinite(getattr(args, name)):
            parser.error(f"--{name.replace('_', '-')} must be finite")
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point. Returns the process exit status."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.matrix is not None:
        a, b, c, d = args.matrix
        matrix = [[a, b], [c, d]]
    else:
        matrix = DEFAULT_DIFFERENTIAL_MATRIX

    try:
        coupling = CouplingMatrix.from_config(matrix)
    except ConfigurationError as e:
        logging.error(f"Invalid differential matrix: {e}")
        return 1

    logging.info(f"{TERM_BLUE}Forward matrix: {coupling.forward.tolist()}{TERM_RESET}")
    logging.info(f"{TERM_BLUE}Inverse matrix: {coupling.inverse.tolist()}{TERM_RESET}")

    if args.output_dir is None:
        if args.plot:
            logging.warning("--plot ignored without --output-dir")
        trace = run_simulation(
            coupling, args.azimuth_velocity, args.wheel_velocity, args.duration, args.dt
        )
    else:
        with DataCollector(args.output_dir) as collector:
            trace = run_simulation(
                coupling, args.azimuth_velocity, args.wheel_velocity, args.duration, args.dt,
                collector=collector,
            )
        if args.plot:
            import matplotlib.pyplot as plt

            from .visualization import plot_trace

            fig = plot_trace(trace, collector.run_dir / TRACE_PLOT_NAME)
            plt.close(fig)

    logging.info(
        f"Final azimuth position: {trace['azimuth_position'][-1]:.3f}, "
        f"wheel position: {trace['wheel_position'][-1]:.3f}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
