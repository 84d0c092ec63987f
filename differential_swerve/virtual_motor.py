"""Virtual motors for the logical axes of a differential mechanism.

A VirtualMotor presents one logical axis as an ordinary SensedMotor, so the
azimuth and wheel controllers can be written as if each drove its own motor.

Sensing reads both physical motors and applies this axis's row of the forward
matrix:

    position = c0 * positive.position + c1 * negative.position + offset
    velocity = c0 * positive.velocity + c1 * negative.velocity

With F = [[1, 1], [1, -1]] this is the plain sum and difference of the motors.
Actuation goes through the mechanism, which recombines both axes.
"""

from .config import DIFFERENCE_AXIS, SUM_AXIS
from .differential import DifferentialMechanism, check_axis


class VirtualMotor:
    """One logical axis of a differential, usable wherever a motor is expected.

    Attributes:
        mechanism: The differential this axis derives from. Not owned.
        axis: Logical axis index, i.e. the forward matrix row.
        offset: Added to every position reading. Changed only by calibration.
    """

    def __init__(self, mechanism: DifferentialMechanism, axis: int) -> None:
        if mechanism is None:
            raise ValueError("Virtual motor requires a differential mechanism")
        check_axis(axis)

        self.mechanism = mechanism
        self.axis = axis
        self.offset: float = 0.0

    def _combine(self, positive: float, negative: float) -> float:
        c0, c1 = self.mechanism.coupling.row(self.axis)
        return c0 * positive + c1 * negative

    def get_raw_position(self) -> float:
        """Position of this axis before the calibration offset."""
        return self._combine(
            self.mechanism.positive_motor.get_position(),
            self.mechanism.negative_motor.get_position(),
        )

    def get_position(self) -> float:
        """Calibrated position of this axis.

        Returns:
            Forward-row combination of the physical positions plus offset.
        """
        return self.get_raw_position() + self.offset

    def get_velocity(self) -> float:
        """Rate of this axis. The calibration offset does not apply.

        Returns:
            Forward-row combination of the physical velocities.
        """
        return self._combine(
            self.mechanism.positive_motor.get_velocity(),
            self.mechanism.negative_motor.get_velocity(),
        )

    def calibrate_position(self, position: float) -> None:
        """Re-zero this axis so the current reading becomes `position`.

        Only the offset changes; the physical motors keep their own
        calibration. Calling again with the same target is a no-op.
        """
        self.offset = position - self.get_raw_position()

    def set_velocity(self, velocity: float) -> None:
        """Command this axis through the mechanism.

        The other axis keeps its last commanded rate.

        Args:
            velocity: Requested rate for this axis.

        Raises:
            ValueError: If velocity is not a finite number.
        """
        self.mechanism.set_axis_velocity(self.axis, velocity)


def sum_motor(mechanism: DifferentialMechanism) -> VirtualMotor:
    """Virtual motor for the sum axis (azimuth in a swerve module)."""
    return VirtualMotor(mechanism, SUM_AXIS)


def difference_motor(mechanism: DifferentialMechanism) -> VirtualMotor:
    """Virtual motor for the difference axis (wheel speed in a swerve module)."""
    return VirtualMotor(mechanism, DIFFERENCE_AXIS)
