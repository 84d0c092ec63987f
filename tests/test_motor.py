"""
Tests for motor.py

Run with:
    pytest tests/test_motor.py -v
"""

import pytest

from differential_swerve.motor import SensedMotor, SimulatedMotor


class TestSensedMotorProtocol:
    """Structural capability checks"""

    def test_simulated_motor_satisfies_protocol(self):
        assert isinstance(SimulatedMotor(), SensedMotor)

    def test_incomplete_object_does_not_satisfy_protocol(self):
        class PositionOnly:
            def get_position(self):
                return 0.0

        assert not isinstance(PositionOnly(), SensedMotor)


class TestSimulatedMotor:
    """In-memory motor behaviour"""

    def test_initial_state(self):
        motor = SimulatedMotor(position=2.0)
        assert motor.get_position() == 2.0
        assert motor.get_velocity() == 0.0
        assert motor.command_velocity == 0.0
        assert motor.brake is True

    def test_rejects_non_positive_max_velocity(self):
        with pytest.raises(ValueError, match="max_velocity"):
            SimulatedMotor(max_velocity=0.0)

    def test_step_integrates_velocity(self):
        motor = SimulatedMotor()
        motor.set_velocity(4.0)
        motor.step(0.5)
        motor.step(0.25)
        assert motor.get_position() == pytest.approx(3.0)

    def test_velocity_clamped_to_max(self):
        motor = SimulatedMotor(max_velocity=10.0)
        motor.set_velocity(25.0)
        assert motor.get_velocity() == 10.0
        assert motor.command_velocity == 25.0
        motor.set_velocity(-25.0)
        assert motor.get_velocity() == -10.0

    @pytest.mark.parametrize("velocity", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_velocity_rejected(self, velocity):
        motor = SimulatedMotor(max_velocity=10.0)
        motor.set_velocity(3.0)
        with pytest.raises(ValueError, match="finite"):
            motor.set_velocity(velocity)
        assert motor.get_velocity() == 3.0
        assert motor.command_velocity == 3.0

    def test_negative_dt_rejected(self):
        with pytest.raises(ValueError, match="dt"):
            SimulatedMotor().step(-0.1)

    def test_calibrate_position(self):
        motor = SimulatedMotor(position=7.0)
        motor.calibrate_position(1.0)
        assert motor.get_position() == pytest.approx(1.0)

    def test_calibrate_position_repeated(self):
        """Calibrating twice to the same value keeps the reading there"""
        motor = SimulatedMotor(position=7.0)
        motor.calibrate_position(1.0)
        motor.calibrate_position(1.0)
        assert motor.get_position() == pytest.approx(1.0)

    def test_calibration_survives_motion(self):
        motor = SimulatedMotor(position=7.0)
        motor.calibrate_position(0.0)
        motor.set_velocity(2.0)
        motor.step(1.0)
        assert motor.get_position() == pytest.approx(2.0)

    def test_neutral_mode(self):
        motor = SimulatedMotor()
        motor.set_coast()
        assert motor.brake is False
        motor.set_brake()
        assert motor.brake is True
