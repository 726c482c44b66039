"""
Configuration module for Stewart Platform.

This module contains all configuration parameters for the Stewart Platform,
including geometric parameters, servo pulse-width parameters, and the serial
link to the servo controller.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from geometry import Direction

Point = Tuple[float, float, float]

# Measured motor shaft positions (mm), leg 0 to leg 5
DEFAULT_MOTOR_POSITIONS: Tuple[Point, ...] = (
    (28.3, -94.45, 10.0),
    (95.95, 22.72, 10.0),
    (67.65, 71.73, 10.0),
    (-67.65, 71.73, 10.0),
    (-95.95, 22.72, 10.0),
    (-28.3, -94.45, 10.0),
)

DEFAULT_MOTOR_DIRECTIONS: Tuple[Direction, ...] = (
    Direction.RIGHT,
    Direction.LEFT,
    Direction.RIGHT,
    Direction.LEFT,
    Direction.RIGHT,
    Direction.LEFT,
)

@dataclass(frozen=True)
class GeometryConfig:
    """Geometric parameters of the Stewart Platform."""
    top_leg_length: float = 119.0  # Rod between servo horn and platform
    bottom_leg_length: float = 21.1  # Servo horn
    motor_positions: Tuple[Point, ...] = DEFAULT_MOTOR_POSITIONS
    motor_directions: Tuple[Direction, ...] = DEFAULT_MOTOR_DIRECTIONS
    radius_platform: float = 83.6  # Radius of the attachment circle on the top plate
    gamma_platform: float = 16.68  # Half angle between paired attachments (degrees)
    home_position: Point = (0.0, 0.0, 126.0)  # Neutral platform centre

    def __post_init__(self):
        """Validate parameters."""
        if not all(v > 0 for v in [self.top_leg_length, self.bottom_leg_length]):
            raise ValueError("Leg lengths must be positive")
        if len(self.motor_positions) != 6 or len(self.motor_directions) != 6:
            raise ValueError("Exactly six motor positions and directions are required")
        if not all(len(p) == 3 for p in self.motor_positions):
            raise ValueError("Motor positions must be (x, y, z) triples")
        if not all(isinstance(d, Direction) for d in self.motor_directions):
            raise ValueError("Motor directions must be Direction members")
        if self.radius_platform <= 0:
            raise ValueError("Platform radius must be positive")
        if not 0 < self.gamma_platform < 60:
            raise ValueError("Gamma angle must be between 0 and 60 degrees")
        if len(self.home_position) != 3:
            raise ValueError("Home position must be an (x, y, z) triple")

@dataclass(frozen=True)
class ServoConfig:
    """Pulse-width parameters of the hobby servos."""
    min_pulse_us: float = 500.0
    max_pulse_us: float = 2500.0
    center_pulse_us: float = 1500.0  # Pulse at zero angle
    us_per_degree: float = 2000.0 / 180.0
    speed: int = 0  # Maestro speed limit, 0 = unlimited
    acceleration: int = 0  # Maestro acceleration limit, 0 = unlimited

    def __post_init__(self):
        """Validate servo parameters."""
        if not 0 < self.min_pulse_us < self.max_pulse_us:
            raise ValueError("Pulse range must be positive and increasing")
        if not self.min_pulse_us <= self.center_pulse_us <= self.max_pulse_us:
            raise ValueError("Center pulse must lie inside the pulse range")
        if self.us_per_degree == 0:
            raise ValueError("Pulse width per degree must be non-zero")
        if self.speed < 0 or self.acceleration < 0:
            raise ValueError("Speed and acceleration limits must not be negative")

@dataclass(frozen=True)
class MaestroConfig:
    """Serial link to the Maestro servo controller."""
    port: Optional[str] = None
    baud_rate: int = 9600
    timeout: float = 0.01  # Read timeout in seconds
    channels: Tuple[int, ...] = (0, 1, 2, 3, 4, 5)  # Channel per leg

    def __post_init__(self):
        """Validate link parameters."""
        if self.baud_rate <= 0 or self.timeout < 0:
            raise ValueError("Baud rate must be positive and timeout non-negative")
        if len(self.channels) != 6 or len(set(self.channels)) != 6:
            raise ValueError("Six distinct channels are required")

@dataclass(frozen=True)
class PlatformConfig:
    """Complete configuration for the Stewart Platform."""
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    servo: ServoConfig = field(default_factory=ServoConfig)
    maestro: MaestroConfig = field(default_factory=MaestroConfig)

    @classmethod
    def default_config(cls) -> 'PlatformConfig':
        """Create a default configuration."""
        return cls(
            geometry=GeometryConfig(),
            servo=ServoConfig(),
            maestro=MaestroConfig()
        )

# Default configuration instance
default_config = PlatformConfig.default_config()
