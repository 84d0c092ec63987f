"""
Differential coupling matrix.

This module derives the forward and inverse 2x2 transforms that relate the two
physical motors of a differential mechanism to its two logical axes:

    [logical_0, logical_1]^T  = F    @ [positive, negative]^T
    [positive, negative]^T    = F^-1 @ [logical_0, logical_1]^T

Column 0 of F belongs to the positive motor and column 1 to the negative motor.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Sequence, Tuple

import numpy as np

from .config import DETERMINANT_EPSILON
from .errors import ConfigurationError


def _is_real(value) -> bool:
    # bool is a Real subclass; a True/False entry is a config typo, not a gain
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def parse_differential_matrix(value) -> np.ndarray:
    """Validate a nested 2x2 structure and convert it to a float array.

    Checks run in a fixed order so the first reported problem is the most
    structural one: outer list, height, row lists, width, then element type.

    Args:
        value: Nested list or tuple of real numbers, e.g. [[1, 1], [1, -1]].

    Returns:
        np.ndarray: 2x2 float64 array.

    Raises:
        ConfigurationError: With constraint "not-a-list", "height", "width"
            or "non-numeric".
    """
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError("not-a-list", "Differential matrix is not a list")
    if len(value) != 2:
        raise ConfigurationError(
            "height", f"Differential matrix does not have height 2 (got {len(value)})"
        )

    arr = np.zeros((2, 2))
    for row, row_value in enumerate(value):
        if not isinstance(row_value, (list, tuple)):
            raise ConfigurationError(
                "not-a-list", "Differential matrix is not a list of lists"
            )
        if len(row_value) != 2:
            raise ConfigurationError(
                "width",
                f"Differential matrix does not have width 2 (row {row} has {len(row_value)})",
            )
        for col, item in enumerate(row_value):
            if not _is_real(item):
                raise ConfigurationError(
                    "non-numeric",
                    f"Differential matrix contains a non-numeric element at [{row}][{col}]: {item!r}",
                )
            arr[row, col] = float(item)

    return arr


def invert_2x2(forward: np.ndarray) -> np.ndarray:
    """
    Closed-form inverse of a 2x2 matrix.

    For F = [[a, b], [c, d]]:
        det(F) = a*d - b*c
        F^-1   = (1 / det) * [[d, -b], [-c, a]]

    Raises:
        ConfigurationError: If |det| <= DETERMINANT_EPSILON (constraint "singular").
    """
    a, b = forward[0]
    c, d = forward[1]
    det = a * d - b * c
    if abs(det) <= DETERMINANT_EPSILON:
        raise ConfigurationError(
            "singular",
            f"Differential matrix is singular (det={det:g}); "
            "check the motor order and gearing of the differential",
        )
    return np.array([[d, -b], [-c, a]]) / det


@dataclass(frozen=True, eq=False)
class CouplingMatrix:
    """Forward and inverse coupling of a differential mechanism.

    Both arrays are read-only. Build instances with from_config(); the direct
    constructor trusts its arguments.

    Attributes:
        forward: 2x2 map from physical motor rates to logical axis rates.
        inverse: 2x2 map from logical axis rates to physical motor rates.
    """

    forward: np.ndarray
    inverse: np.ndarray

    @classmethod
    def from_config(cls, value) -> "CouplingMatrix":
        """Derive the coupling from a nested 2x2 configuration value.

        Raises:
            ConfigurationError: If the value is malformed or singular.
        """
        forward = parse_differential_matrix(value)
        inverse = invert_2x2(forward)
        forward.setflags(write=False)
        inverse.setflags(write=False)
        return cls(forward=forward, inverse=inverse)

    def row(self, axis: int) -> Tuple[float, float]:
        """Coefficients (positive, negative) that produce one logical axis."""
        return float(self.forward[axis, 0]), float(self.forward[axis, 1])

    def to_logical(self, physical: Sequence[float]) -> Tuple[float, float]:
        """Map a (positive, negative) pair of motor values to logical axes."""
        out = self.forward @ np.asarray(physical, dtype=float)
        return float(out[0]), float(out[1])

    def to_physical(self, logical: Sequence[float]) -> Tuple[float, float]:
        """Map a (axis_0, axis_1) pair of logical values to motor values."""
        out = self.inverse @ np.asarray(logical, dtype=float)
        return float(out[0]), float(out[1])
