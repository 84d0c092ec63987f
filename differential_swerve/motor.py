"""Sensed and actuated motor capability.

Anything that can report a position and velocity, be re-zeroed, and take a
velocity command satisfies SensedMotor: physical motor drivers, the virtual
logical motors of a differential, and SimulatedMotor below. Controllers
attach to the capability without knowing which one they drive.

Units are whatever the driver reports (rotations, rotations/s). Both motors
of one differential must use the same units for the coupling algebra to hold.
"""

import math
from typing import Protocol, runtime_checkable

from .config import SIM_MAX_VELOCITY


@runtime_checkable
class SensedMotor(Protocol):
    """A single actuator with position/velocity feedback."""

    def get_position(self) -> float:
        ...

    def get_velocity(self) -> float:
        ...

    def calibrate_position(self, position: float) -> None:
        ...

    def set_velocity(self, velocity: float) -> None:
        ...


class SimulatedMotor:
    """In-memory motor used in place of a hardware driver.

    Velocity commands are clamped to ±max_velocity and integrated by step().
    Calibration shifts an offset; the integrated shaft position is never
    touched, matching how a real driver re-zeroes its encoder reading.

    Attributes:
        max_velocity: Free speed of the motor (rotations/s).
        command_velocity: Last requested velocity, before clamping.
        brake: True when the neutral mode is brake, False for coast.
    """

    def __init__(self, max_velocity: float = SIM_MAX_VELOCITY, position: float = 0.0):
        """Initialize the simulated motor.

        Args:
            max_velocity: Free speed (rotations/s). Must be positive.
            position: Initial shaft position (rotations).

        Raises:
            ValueError: If max_velocity is not positive.
        """
        if max_velocity <= 0:
            raise ValueError(f"max_velocity must be positive, got {max_velocity}")

        self.max_velocity = max_velocity
        self.command_velocity: float = 0.0
        self.brake = True

        self._shaft_position = position
        self._velocity: float = 0.0
        self._offset: float = 0.0

    def get_position(self) -> float:
        """Shaft position as reported by the encoder.

        Returns:
            Integrated shaft position plus the calibration offset (rotations).
        """
        return self._shaft_position + self._offset

    def get_velocity(self) -> float:
        """Applied velocity after clamping (rotations/s)."""
        return self._velocity

    def calibrate_position(self, position: float) -> None:
        """Offset the reading so the current position becomes `position`."""
        self._offset = position - self.get_position() + self._offset

    def set_velocity(self, velocity: float) -> None:
        """Command a velocity, saturating at the free speed.

        Args:
            velocity: Requested velocity (rotations/s). Recorded unclamped in
                command_velocity.

        Raises:
            ValueError: If velocity is NaN or infinite. The motor keeps its
                previous command.
        """
        if not math.isfinite(velocity):
            raise ValueError(f"velocity must be finite, got {velocity}")
        self.command_velocity = velocity
        self._velocity = max(-self.max_velocity, min(self.max_velocity, velocity))

    def set_brake(self) -> None:
        self.brake = True

    def set_coast(self) -> None:
        self.brake = False

    def step(self, dt: float) -> None:
        """Advance the shaft by one control cycle at the applied velocity.

        Raises:
            ValueError: If dt is negative.
        """
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        self._shaft_position += self._velocity * dt
