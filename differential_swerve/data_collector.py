"""CSV logging of differential mechanism state, one row per control cycle.

Each row records both physical motors and both logical axes so coupling
problems (wrong motor order, wrong gearing) show up as a mismatch between the
two halves of the trace.
"""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from .config import RESULTS_DIR_NAME, TERM_BLUE, TERM_RESET, TRACE_FILE_NAME

TRACE_COLUMNS = [
    "time",
    "positive_position",
    "negative_position",
    "positive_velocity",
    "negative_velocity",
    "azimuth_position",
    "azimuth_velocity",
    "wheel_position",
    "wheel_velocity",
]


class DataCollector:
    """Manages the trace CSV for one simulation run.

    Attributes:
        run_dir: Directory path for this run's output files.
        trace_output_path: Path of the trace CSV.
    """

    def __init__(self, output_dir: str = ".", run_dir: Optional[str] = None) -> None:
        """Initialize the data collector.

        Args:
            output_dir: Base directory for output files (default: current directory).
            run_dir: Optional specific run directory. If None, creates timestamped
                directory.

        Raises:
            ValueError: If output_dir is not a valid directory.
        """
        output_path = Path(output_dir)
        if output_path.exists() and not output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {output_dir}")

        self.trace_csv_file: Optional[TextIO] = None
        self.trace_csv_writer: Any = None
        self.rows_written = 0

        if run_dir:
            self.run_dir: Path = Path(run_dir)
        else:
            # results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / RESULTS_DIR_NAME / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.trace_output_path: Path = self.run_dir / TRACE_FILE_NAME

    def setup(self) -> None:
        """Open the trace CSV and write its header. Must be called before logging."""
        self.trace_csv_file = open(self.trace_output_path, "w", newline="")
        self.trace_csv_writer = csv.writer(self.trace_csv_file)
        self.trace_csv_writer.writerow(TRACE_COLUMNS)
        self.trace_csv_file.flush()

        logging.info(f"{TERM_BLUE}✓ Recording trace to {self.run_dir}{TERM_RESET}")

    def log_cycle(self, time: float, sample: Dict[str, float]) -> None:
        """Write one control cycle.

        Args:
            time: Simulated time (seconds).
            sample: Values keyed by TRACE_COLUMNS (excluding "time"). Missing
                keys are written as empty cells.
        """
        if self.trace_csv_writer is None:
            raise RuntimeError("DataCollector.setup() must be called before log_cycle()")

        row = [f"{time:.6f}"]
        for column in TRACE_COLUMNS[1:]:
            value = sample.get(column)
            row.append("" if value is None else f"{value:.6f}")
        self.trace_csv_writer.writerow(row)
        self.rows_written += 1

    def cleanup(self) -> None:
        """Close the trace CSV and log the final output location."""
        if self.trace_csv_file:
            self.trace_csv_file.close()
            self.trace_csv_file = None
            self.trace_csv_writer = None
            logging.info(
                f"{TERM_BLUE}✓ Saved {self.rows_written} cycles to {self.trace_output_path}{TERM_RESET}"
            )

    def __enter__(self) -> "DataCollector":
        self.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()
