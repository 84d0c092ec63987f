"""Differential Swerve - Actuation Layer for Two-Motor Coupled Swerve Modules

In a differential swerve module neither motor owns a degree of freedom on its
own. Both motors drive one mechanism, and fixed linear combinations of their
motion produce wheel azimuth and wheel speed. This package converts between
"physical motor space" and "logical axis space" so that ordinary controllers
can drive each logical axis as if it had its own motor.

## Architecture Overview

### Layer 1: Motor Capability (motor.py)
The four-operation contract shared by physical and virtual motors.
- get_position / get_velocity: Sensing
- calibrate_position: Re-zero the reading without moving the motor
- set_velocity: Actuation

### Layer 2: Coupling Matrix (coupling.py)
Forward (physical -> logical) and inverse (logical -> physical) 2x2 transforms.
- Validated structure: 2x2, real numbers
- Closed-form inverse; singular couplings rejected at startup

### Layer 3: Differential Mechanism (differential.py)
Single authority for actuation.
- Caches the last commanded rate of each logical axis
- Every command recombines both axes through the inverse matrix
- Exactly two physical commands per logical command

### Layer 4: Virtual Motors (virtual_motor.py)
One motor per logical axis ("sum" = azimuth, "difference" = wheel).
- Sensing uses the axis's row of the forward matrix
- Calibration adjusts a local offset only

## Modules

### Core
- `config.py` - Centralized constants with documentation
- `errors.py` - ConfigurationError
- `motor.py` - SensedMotor protocol and SimulatedMotor
- `coupling.py` - Coupling matrix derivation
- `differential.py` - Differential mechanism
- `virtual_motor.py` - Virtual logical motors
- `module_config.py` - Per-module configuration and startup wiring

### Simulation & Data
- `runner.py` - Simulation loop and command-line interface
- `data_collector.py` - CSV trace logging
- `visualization.py` - Trace plots

## Quick Start

```python
from differential_swerve import CouplingMatrix, DifferentialMechanism, SimulatedMotor
from differential_swerve import difference_motor, sum_motor

coupling = CouplingMatrix.from_config([[1.0, 1.0], [1.0, -1.0]])
mechanism = DifferentialMechanism(SimulatedMotor(), SimulatedMotor(), coupling)
azimuth, wheel = sum_motor(mechanism), difference_motor(mechanism)

azimuth.calibrate_position(0.0)
wheel.set_velocity(10.0)
```

Or use the command-line interface:
```bash
python -m differential_swerve --matrix 1 1 1 -1 --output-dir . --plot
```
"""

__version__ = "0.1.0"

from .coupling import CouplingMatrix
from .differential import DifferentialMechanism
from .errors import ConfigurationError
from .module_config import (
    AzimuthControllerConfiguration,
    PIDConfiguration,
    SwerveModuleConfiguration,
    build_differential,
)
from .motor import SensedMotor, SimulatedMotor
from .virtual_motor import VirtualMotor, difference_motor, sum_motor

__all__ = [
    "ConfigurationError",
    "CouplingMatrix",
    "DifferentialMechanism",
    "SensedMotor",
    "SimulatedMotor",
    "VirtualMotor",
    "sum_motor",
    "difference_motor",
    "PIDConfiguration",
    "AzimuthControllerConfiguration",
    "SwerveModuleConfiguration",
    "build_differential",
]
