"""Differential mechanism: two coupled motors driving two logical axes.

The mechanism is the single place where logical axis commands become physical
motor commands. Each logical axis has its own controller issuing commands at
its own pace, so a command for one axis alone is ambiguous. The mechanism
remembers the last rate requested for each axis and always converts the pair:

    (positive, negative) = F^-1 @ (rate_axis_0, rate_axis_1)

Sensing does not go through the mechanism; virtual motors read the physical
motors directly through positive_motor / negative_motor.
"""

import logging
import math
import threading
from typing import Tuple

from .config import DIFFERENCE_AXIS, LOGICAL_AXES, SUM_AXIS
from .coupling import CouplingMatrix
from .motor import SensedMotor


def check_axis(axis: int) -> int:
    """Validate a logical axis index.

    Only the ints 0 and 1 are accepted. True and 1.0 compare equal to 1 but
    are not axis indices.

    Args:
        axis: Candidate axis index.

    Returns:
        The axis, unchanged.

    Raises:
        ValueError: If axis is not SUM_AXIS or DIFFERENCE_AXIS.
    """
    if isinstance(axis, bool) or not isinstance(axis, int) or axis not in LOGICAL_AXES:
        raise ValueError(f"Unknown logical axis {axis!r}, expected one of {LOGICAL_AXES}")
    return axis


class DifferentialMechanism:
    """Owns the coupling and the last commanded logical rates.

    The physical motors are borrowed: their lifetime belongs to the enclosing
    swerve module. Every logical command results in exactly two physical
    set_velocity calls, positive motor first. The cache update and both calls
    run under one lock so a multi-threaded host cannot interleave a stale rate
    with a fresh one.

    Attributes:
        coupling: Forward/inverse matrices. Column 0 is the positive motor.
    """

    def __init__(
        self,
        positive_motor: SensedMotor,
        negative_motor: SensedMotor,
        coupling: CouplingMatrix,
    ) -> None:
        """Initialize the mechanism.

        Args:
            positive_motor: Physical motor for matrix column 0.
            negative_motor: Physical motor for matrix column 1.
            coupling: Coupling derived from the module configuration.

        Raises:
            ValueError: If any collaborator is None.
        """
        if positive_motor is None:
            raise ValueError("Differential mechanism requires a positive motor")
        if negative_motor is None:
            raise ValueError("Differential mechanism requires a negative motor")
        if coupling is None:
            raise ValueError("Differential mechanism requires a coupling matrix")

        self._positive_motor = positive_motor
        self._negative_motor = negative_motor
        self.coupling = coupling

        # Last requested rate per logical axis, zero until first commanded
        self._logical_rates = [0.0, 0.0]
        self._lock = threading.Lock()

    @property
    def positive_motor(self) -> SensedMotor:
        return self._positive_motor

    @property
    def negative_motor(self) -> SensedMotor:
        return self._negative_motor

    @property
    def commanded_velocities(self) -> Tuple[float, float]:
        """Last requested (axis_0, axis_1) rates."""
        with self._lock:
            return self._logical_rates[0], self._logical_rates[1]

    def set_axis_velocity(self, axis: int, velocity: float) -> None:
        """Command one logical axis, holding the other at its last rate.

        Args:
            axis: Logical axis index (SUM_AXIS or DIFFERENCE_AXIS).
            velocity: Requested rate for that axis.

        Raises:
            ValueError: If axis is not a valid logical axis, or velocity is
                not a finite number. The cached rates are left unchanged.
        """
        check_axis(axis)
        try:
            velocity = float(velocity)
        except (TypeError, ValueError):
            raise ValueError(f"Velocity must be a number, got {velocity!r}") from None
        if not math.isfinite(velocity):
            raise ValueError(f"Velocity must be finite, got {velocity}")

        with self._lock:
            self._logical_rates[axis] = velocity
            positive, negative = self.coupling.to_physical(self._logical_rates)
            self._positive_motor.set_velocity(positive)
            self._negative_motor.set_velocity(negative)

        logging.debug(
            f"Axis {axis} -> {velocity:.3f}: "
            f"positive={positive:.3f}, negative={negative:.3f}"
        )

    def set_sum_velocity(self, velocity: float) -> None:
        self.set_axis_velocity(SUM_AXIS, velocity)

    def set_difference_velocity(self, velocity: float) -> None:
        self.set_axis_velocity(DIFFERENCE_AXIS, velocity)
