"""
Error types for the Stewart Platform.

Kinematics errors describe poses the platform cannot reach and are
recoverable by choosing another pose. Math errors point at a configuration
or arithmetic bug. Maestro errors come from the servo controller link.
"""

from typing import Optional


class KinematicsError(ValueError):
    """Base class for unreachable poses."""

    message = "Target pose is not possible"

    def __init__(self, leg: Optional[int] = None):
        self.leg = leg
        text = self.message if leg is None else f"{self.message} (leg {leg})"
        super().__init__(text)


class InvalidTargetPosition(KinematicsError):
    message = "Target position is not possible"


class InvalidTargetOrientation(KinematicsError):
    message = "Target orientation is not possible"


class MathError(ArithmeticError):
    """Numeric failure that indicates a bug rather than a bad pose."""


class InvalidFloatConversion(MathError):
    def __init__(self, value=None):
        super().__init__(f"Converting {value!r} to a rounded float has failed")


class InvalidAngle(MathError):
    def __init__(self, leg: Optional[int] = None):
        self.leg = leg
        super().__init__("Error at angle" if leg is None else f"Error at angle (leg {leg})")


class MaestroError(IOError):
    """Base class for servo controller failures."""


class UnableToConnect(MaestroError):
    pass


class UnableToSend(MaestroError):
    pass


class UnableToReceive(MaestroError):
    pass


class InvalidChannel(MaestroError, ValueError):
    pass


class InvalidMovingState(MaestroError):
    pass


class OutOfBounds(MaestroError, ValueError):
    pass
