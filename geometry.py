"""
Geometry module for Stewart Platform.

This module handles all geometric calculations including:
- Motor and platform attachment point descriptions
- Rotation matrices and their rounding policy
- Leg vectors from motor bases to the moved platform
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple
import numpy as np

from errors import InvalidFloatConversion

NUM_LEGS = 6

# Rotation entries are rounded to this many decimals so repeated solves are
# reproducible and trig noise near singularities is damped.
ROTATION_DECIMALS = 4


class Direction(Enum):
    """Side on which a servo horn is mounted, selecting the angle branch."""
    LEFT = "left"
    RIGHT = "right"


def _frozen_array(values, shape: Tuple[int, ...], name: str) -> np.ndarray:
    array = np.array(values, dtype=float)
    if array.shape != shape:
        raise ValueError(f"{name} must have shape {shape}, got {array.shape}")
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class Motor:
    """A servo fixed to the base.

    Attributes:
        position: Shaft position in the world frame
        direction: Horn mounting side
        motor_id: Leg index, 0 to 5
    """
    position: np.ndarray
    direction: Direction
    motor_id: int

    def __post_init__(self):
        object.__setattr__(self, "position", _frozen_array(self.position, (3,), "Motor position"))
        if not isinstance(self.direction, Direction):
            raise ValueError(f"Motor direction must be a Direction, got {self.direction!r}")
        if not 0 <= self.motor_id < NUM_LEGS:
            raise ValueError(f"Motor id must be between 0 and {NUM_LEGS - 1}")


MotorSet = Tuple[Motor, Motor, Motor, Motor, Motor, Motor]


def validate_motors(motors) -> MotorSet:
    """Check that motors hold exactly one motor per leg, in leg order.

    Returns:
        The motors as a six-tuple
    """
    motors = tuple(motors)
    if len(motors) != NUM_LEGS:
        raise ValueError(f"Exactly {NUM_LEGS} motors are required, got {len(motors)}")
    for index, motor in enumerate(motors):
        if not isinstance(motor, Motor):
            raise ValueError(f"Entry {index} is not a Motor")
        if motor.motor_id != index:
            raise ValueError(f"Motor {motor.motor_id} found in slot {index}")
    return motors


@dataclass(frozen=True, eq=False)
class Platform:
    """The rigid top plate.

    Attributes:
        center: Neutral position of the plate centre in the world frame
        attachments: 6x3 array of leg attachment points in the platform frame,
            row i belonging to leg i
    """
    center: np.ndarray
    attachments: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "center", _frozen_array(self.center, (3,), "Platform center"))
        object.__setattr__(
            self, "attachments",
            _frozen_array(self.attachments, (NUM_LEGS, 3), "Platform attachments")
        )

    @classmethod
    def from_circle(cls, center, radius: float, gamma_deg: float) -> 'Platform':
        """Place the attachments in three pairs on a circle.

        Pairs are centred at 270, 30 and 150 degrees and split by +/- gamma,
        ordered to face motors 0 to 5.

        Args:
            center: Neutral plate centre [x, y, z]
            radius: Radius of the attachment circle
            gamma_deg: Half angle between the two attachments of a pair (degrees)
        """
        gamma = np.deg2rad(gamma_deg)
        phi_platform = np.array([
            3*np.pi/2 + gamma,
            np.pi/6 - gamma,
            np.pi/6 + gamma,
            5*np.pi/6 - gamma,
            5*np.pi/6 + gamma,
            3*np.pi/2 - gamma
        ])
        attachments = np.column_stack([
            radius * np.cos(phi_platform),
            radius * np.sin(phi_platform),
            np.zeros(NUM_LEGS)
        ])
        return cls(center=center, attachments=attachments)


def round_rotation(matrix: np.ndarray, decimals: int = ROTATION_DECIMALS) -> np.ndarray:
    """Apply the rotation rounding policy.

    Every entry is rounded to ``decimals`` places (half to even). Negative
    zeros are normalised so the identity comes back exactly.

    Raises:
        InvalidFloatConversion: If an entry is NaN or infinite
    """
    matrix = np.asarray(matrix, dtype=float)
    if not np.all(np.isfinite(matrix)):
        raise InvalidFloatConversion(matrix)
    return np.round(matrix, decimals) + 0.0


class RotationMatrix:
    """Handles rotation matrix calculations."""

    @staticmethod
    def rot_x(theta: float) -> np.ndarray:
        """Create rotation matrix for rotation around X axis.

        Args:
            theta: Rotation angle in radians

        Returns:
            3x3 rotation matrix
        """
        return np.array([
            [1, 0, 0],
            [0, np.cos(theta), -np.sin(theta)],
            [0, np.sin(theta), np.cos(theta)]
        ])

    @staticmethod
    def rot_y(theta: float) -> np.ndarray:
        """Create rotation matrix for rotation around Y axis.

        Args:
            theta: Rotation angle in radians

        Returns:
            3x3 rotation matrix
        """
        return np.array([
            [np.cos(theta), 0, np.sin(theta)],
            [0, 1, 0],
            [-np.sin(theta), 0, np.cos(theta)]
        ])

    @staticmethod
    def rot_z(theta: float) -> np.ndarray:
        """Create rotation matrix for rotation around Z axis.

        Args:
            theta: Rotation angle in radians

        Returns:
            3x3 rotation matrix
        """
        return np.array([
            [np.cos(theta), -np.sin(theta), 0],
            [np.sin(theta), np.cos(theta), 0],
            [0, 0, 1]
        ])

    @classmethod
    def combined_rotation(cls, roll: float, pitch: float, yaw: float) -> np.ndarray:
        """Create the rounded platform-to-world rotation from roll, pitch, yaw.

        R = Rz(yaw) . Ry(pitch) . Rx(roll), which expands to

            [ ca*cb, ca*sb*sg - sa*cg, sa*sg + ca*cg*sb ]
            [ sa*cb, ca*cg + sa*sb*sg, cg*sa*sb - ca*sg ]
            [ -sb,   cb*sg,            cb*cg            ]

        with a = yaw, b = pitch, g = roll.

        Args:
            roll: Rotation around X axis in radians
            pitch: Rotation around Y axis in radians
            yaw: Rotation around Z axis in radians

        Returns:
            3x3 rotation matrix rounded to ROTATION_DECIMALS places

        Raises:
            InvalidFloatConversion: If an angle is NaN or infinite
        """
        Rx = cls.rot_x(roll)
        Ry = cls.rot_y(pitch)
        Rz = cls.rot_z(yaw)
        return round_rotation(np.matmul(np.matmul(Rz, Ry), Rx))


def resolve_leg_vectors(
    target_position: np.ndarray,
    rotation: np.ndarray,
    platform: Platform,
    motors: MotorSet
) -> np.ndarray:
    """Get the world-frame vector spanning each leg.

    Row i is ``target_position + rotation . attachment[i] - motors[i].position``.

    Args:
        target_position: Platform centre target [x, y, z]
        rotation: 3x3 platform-to-world rotation
        platform: Platform whose attachments are moved
        motors: Six motors, index-aligned with the attachments

    Returns:
        6x3 array of leg vectors
    """
    target_position = np.asarray(target_position, dtype=float)
    base_points = np.array([motor.position for motor in motors])
    platform_points = target_position + np.matmul(platform.attachments, np.asarray(rotation).T)
    return platform_points - base_points


@dataclass(frozen=True, eq=False)
class StewartGeometry:
    """Complete fixed geometry of the platform: shared leg lengths, motors and top plate."""
    top_leg_length: float
    bottom_leg_length: float
    motors: MotorSet
    platform: Platform

    def __post_init__(self):
        if not (self.top_leg_length > 0 and self.bottom_leg_length > 0):
            raise ValueError("Leg lengths must be positive")
        object.__setattr__(self, "motors", validate_motors(self.motors))

    @classmethod
    def from_config(cls, config) -> 'StewartGeometry':
        """Build the geometry from a GeometryConfig."""
        motors = tuple(
            Motor(position=position, direction=direction, motor_id=index)
            for index, (position, direction) in enumerate(
                zip(config.motor_positions, config.motor_directions)
            )
        )
        platform = Platform.from_circle(
            config.home_position,
            config.radius_platform,
            config.gamma_platform
        )
        return cls(
            top_leg_length=config.top_leg_length,
            bottom_leg_length=config.bottom_leg_length,
            motors=motors,
            platform=platform
        )
