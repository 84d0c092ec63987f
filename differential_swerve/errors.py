"""Error types raised while building a differential swerve module."""


class ConfigurationError(ValueError):
    """Raised when module configuration cannot produce a safe actuator.

    Configuration errors are fatal at startup. They are never caught inside
    this package: a module with an invalid coupling matrix cannot be driven.

    Attributes:
        constraint: Short name of the violated rule, e.g. "height", "width",
            "non-numeric", "singular" or "missing-field".
    """

    def __init__(self, constraint: str, message: str):
        super().__init__(f"{message} [{constraint}]")
        self.constraint = constraint
        self.message = message
