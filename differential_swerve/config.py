"""Configuration parameters for the differential swerve module.

This module centralizes the constants used across the package:
- Coupling matrix defaults and validation tolerances
- Logical axis numbering
- Simulated motor and simulation runner defaults
- Output file names
- Plot and terminal colors

Per-module values (location, wheel diameter, controller gains) come from a
SwerveModuleConfiguration instead; see module_config.py.
"""

# ============================================================================
# Coupling Matrix
# ============================================================================

DEFAULT_DIFFERENTIAL_MATRIX = [[0.5, 0.5], [0.5, -0.5]]
"""Forward matrix mapping [positive_rate, negative_rate] to
[azimuth_rate, wheel_rate].

Rows are logical axes, columns are physical motors:
- Row 0 (azimuth) is half the sum of both motors
- Row 1 (wheel) is half their difference

Replace with the measured gearing of the real module.
"""

DETERMINANT_EPSILON = 1e-12
"""Smallest |det| accepted for a forward matrix.

Anything closer to zero is treated as singular: the coupling cannot be
inverted, which means the differential is mislabeled or physically invalid.
"""


# ============================================================================
# Logical Axes
# ============================================================================

SUM_AXIS = 0
"""Logical axis 0, the "sum" axis. Drives azimuth in a swerve module."""

DIFFERENCE_AXIS = 1
"""Logical axis 1, the "difference" axis. Drives wheel speed in a swerve module."""

LOGICAL_AXES = (SUM_AXIS, DIFFERENCE_AXIS)
"""Valid logical axis indices, in matrix row order."""


# ============================================================================
# Simulated Motor Parameters
# ============================================================================

SIM_MAX_VELOCITY = 106.0
"""Free speed of a simulated motor (rotations/s).

Matches a Falcon 500 at 6380 RPM. Commands beyond ±SIM_MAX_VELOCITY are
clamped, the way a percent-output command saturates at 100%.
"""


# ============================================================================
# Simulation Runner
# ============================================================================

SIM_DT = 0.02
"""Control cycle period (seconds). 50 Hz, the usual robot loop rate."""

SIM_DURATION = 5.0
"""Default simulated run length (seconds)."""

SIM_AZIMUTH_VELOCITY = 0.5
"""Default azimuth command for the simulation runner (rotations/s)."""

SIM_WHEEL_VELOCITY = 10.0
"""Default wheel command for the simulation runner (rotations/s)."""


# ============================================================================
# Output Files
# ============================================================================

RESULTS_DIR_NAME = "results"
"""Directory under the output dir that holds timestamped runs."""

TRACE_FILE_NAME = "differential_trace.csv"
"""Per-cycle trace written by DataCollector."""

TRACE_PLOT_NAME = "differential_trace.png"
"""Figure written by the runner when plotting is requested."""


# ============================================================================
# Visualization Colors
# ============================================================================

PLOT_ORANGE = "#f74823"
"""Primary color - positive motor and azimuth axis."""

PLOT_BLUE = "#2374f7"
"""Secondary color - negative motor and wheel axis."""

PLOT_TAUPE = "#686a5f"
"""Neutral color for guides and grids."""

# Terminal color codes (ANSI escape sequences)
TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for status lines (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""
