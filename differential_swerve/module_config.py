"""Per-module configuration for a differential swerve module.

A module template is a nested mapping, usually loaded by the host from its
own configuration files:

    {
        "location-inches": {"x": 10.0, "y": 10.0},
        "differential-matrix": [[0.5, 0.5], [0.5, -0.5]],
        "wheel-diameter-inches": 3.0,
        "azimuth-controller": {"kP": 1.0, "max-speed": 2.0, "max-acceleration": 8.0},
        "wheel-controller": {"kP": 0.5, "kF": 0.01},
    }

The configuration objects can also sync their scalar values with a key-value
table (a dashboard or tuning tool). The first populate_table() call publishes
the current values; later calls pull any overrides back in. The coupling
matrix is fixed at startup and never published.
"""

import logging
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Mapping, MutableMapping, Tuple

from .coupling import CouplingMatrix
from .differential import DifferentialMechanism
from .errors import ConfigurationError
from .motor import SensedMotor
from .virtual_motor import VirtualMotor, difference_motor, sum_motor


def _require(config: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(config, Mapping):
        raise ConfigurationError("not-a-table", f"{where} is not a table")
    if key not in config:
        raise ConfigurationError("missing-field", f"{where} is missing required field '{key}'")
    return config[key]


def _as_float(value: Any, key: str, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        raise ConfigurationError("non-numeric", f"{where} field '{key}' is not a number: {value!r}")
    return float(value)


def _read_float(config: Mapping[str, Any], key: str, where: str, default=None) -> float:
    if default is not None and isinstance(config, Mapping) and key not in config:
        return default
    return _as_float(_require(config, key, where), key, where)


class _PrefixedTable:
    """View of a flat table where every key is prefixed with `prefix/`."""

    def __init__(self, table: MutableMapping[str, float], prefix: str):
        self._table = table
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}/{key}"

    def __setitem__(self, key: str, value: float) -> None:
        self._table[self._key(key)] = value

    def get(self, key: str, default: float) -> float:
        return self._table.get(self._key(key), default)


@dataclass
class PIDConfiguration:
    """Gains for a PID(F) controller attached to a logical axis."""

    kp: float
    ki: float = 0.0
    kd: float = 0.0
    kf: float = 0.0
    i_zone: float = 0.0
    i_max: float = 0.0

    _first_table_call: bool = field(default=True, init=False, repr=False, compare=False)

    # (table key, attribute)
    _TABLE_FIELDS = (
        ("kP", "kp"),
        ("kI", "ki"),
        ("kD", "kd"),
        ("kF", "kf"),
        ("iZone", "i_zone"),
        ("iMax", "i_max"),
    )

    @classmethod
    def from_dict(cls, config: Mapping[str, Any], where: str = "PID controller") -> "PIDConfiguration":
        """Build from a raw table. Only kP is required.

        Raises:
            ConfigurationError: If kP is missing or any gain is not a number.
        """
        return cls(
            kp=_read_float(config, "kP", where),
            ki=_read_float(config, "kI", where, default=0.0),
            kd=_read_float(config, "kD", where, default=0.0),
            kf=_read_float(config, "kF", where, default=0.0),
            i_zone=_read_float(config, "i-zone", where, default=0.0),
            i_max=_read_float(config, "i-max", where, default=0.0),
        )

    def populate_table(self, table) -> None:
        """Publish gains on the first call, pull overrides afterwards."""
        if self._first_table_call:
            self._first_table_call = False
            for table_key, attr in self._TABLE_FIELDS:
                table[table_key] = getattr(self, attr)
        else:
            for table_key, attr in self._TABLE_FIELDS:
                setattr(self, attr, table.get(table_key, getattr(self, attr)))


@dataclass
class AzimuthControllerConfiguration:
    """PID gains plus trapezoidal motion limits for the azimuth axis."""

    pid: PIDConfiguration
    max_speed: float
    max_acceleration: float

    _first_table_call: bool = field(default=True, init=False, repr=False, compare=False)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "AzimuthControllerConfiguration":
        where = "azimuth-controller"
        return cls(
            pid=PIDConfiguration.from_dict(config, where),
            max_speed=_read_float(config, "max-speed", where),
            max_acceleration=_read_float(config, "max-acceleration", where),
        )

    def populate_table(self, table) -> None:
        self.pid.populate_table(table)
        if self._first_table_call:
            self._first_table_call = False
            table["maxSpeed"] = self.max_speed
            table["maxAcceleration"] = self.max_acceleration
        else:
            self.max_speed = table.get("maxSpeed", self.max_speed)
            self.max_acceleration = table.get("maxAcceleration", self.max_acceleration)


@dataclass
class SwerveModuleConfiguration:
    """All configuration for one differential swerve module.

    Attributes:
        location: Module position on the chassis (inches), (x, y).
        coupling: Forward matrix maps [motor0, motor1] to
            [azimuth_speed, wheel_speed]; unitless.
        wheel_diameter: Wheel diameter (inches).
        azimuth_controller: Azimuth position controller settings.
        wheel_controller: Wheel velocity controller settings.
    """

    location: Tuple[float, float]
    coupling: CouplingMatrix
    wheel_diameter: float
    azimuth_controller: AzimuthControllerConfiguration
    wheel_controller: PIDConfiguration

    _first_table_call: bool = field(default=True, init=False, repr=False, compare=False)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "SwerveModuleConfiguration":
        """Build from an instantiated module template.

        Raises:
            ConfigurationError: On any missing, malformed or singular value.
        """
        where = "swerve module"
        location = _require(config, "location-inches", where)
        wheel_diameter = _read_float(config, "wheel-diameter-inches", where)
        if wheel_diameter <= 0:
            raise ConfigurationError(
                "out-of-range", f"wheel-diameter-inches must be positive, got {wheel_diameter}"
            )

        module_config = cls(
            location=(
                _read_float(location, "x", "location-inches"),
                _read_float(location, "y", "location-inches"),
            ),
            coupling=CouplingMatrix.from_config(_require(config, "differential-matrix", where)),
            wheel_diameter=wheel_diameter,
            azimuth_controller=AzimuthControllerConfiguration.from_dict(
                _require(config, "azimuth-controller", where)
            ),
            wheel_controller=PIDConfiguration.from_dict(
                _require(config, "wheel-controller", where), "wheel-controller"
            ),
        )
        logging.debug(f"Loaded swerve module at {module_config.location}")
        return module_config

    def populate_table(self, table: MutableMapping[str, float]) -> None:
        """Sync scalar settings with a flat key-value table.

        Sub-configurations live under "wheelController/" and
        "azimuthController/".
        """
        self.wheel_controller.populate_table(_PrefixedTable(table, "wheelController"))
        self.azimuth_controller.populate_table(_PrefixedTable(table, "azimuthController"))
        if self._first_table_call:
            self._first_table_call = False
            table["wheelDiameter"] = self.wheel_diameter
            table["locationX"] = self.location[0]
            table["locationY"] = self.location[1]
        else:
            self.wheel_diameter = table.get("wheelDiameter", self.wheel_diameter)
            self.location = (
                table.get("locationX", self.location[0]),
                table.get("locationY", self.location[1]),
            )


def build_differential(
    config: SwerveModuleConfiguration,
    positive_motor: SensedMotor,
    negative_motor: SensedMotor,
) -> Tuple[DifferentialMechanism, VirtualMotor, VirtualMotor]:
    """Wire up a module's differential in startup order.

    Returns:
        (mechanism, azimuth_motor, wheel_motor). The virtual motors hold a
        reference to the mechanism, so keep the mechanism alive as long as
        they are in use.
    """
    mechanism = DifferentialMechanism(positive_motor, negative_motor, config.coupling)
    return mechanism, sum_motor(mechanism), difference_motor(mechanism)
