"""
Kinematics module for Stewart Platform.

This module handles inverse kinematics calculations to determine the servo
angles required for a desired platform position and orientation.
"""

import logging
import numpy as np
from typing import Iterable, Optional

from errors import InvalidAngle, InvalidTargetOrientation, InvalidTargetPosition
from geometry import (
    NUM_LEGS,
    Direction,
    Motor,
    Platform,
    RotationMatrix,
    StewartGeometry,
    resolve_leg_vectors,
    validate_motors,
)

logger = logging.getLogger(__name__)


def solve_servo_angle(
    leg_vector: np.ndarray,
    top_length: float,
    bottom_length: float,
    direction: Direction,
    leg: Optional[int] = None
) -> float:
    """Solve the servo angle that lets one leg span ``leg_vector``.

    The horn (bottom segment) and rod (top segment) form a triangle with the
    leg vector; the law of cosines gives

        phi = (d^2 + bottom^2 - top^2) / (2 * bottom * r)

    where d is the leg vector length and r its horizontal projection length.
    The angle is atan2(z, y) +/- acos(phi), the sign given by the horn side.

    Args:
        leg_vector: World-frame vector from the motor to the attachment point
        top_length: Rod length
        bottom_length: Horn length
        direction: Horn mounting side
        leg: Leg index reported in errors

    Returns:
        Servo angle in radians

    Raises:
        InvalidTargetPosition: If the vector is not finite, has no horizontal
            component, or cannot be spanned by the two segments
        InvalidAngle: If the resulting angle is not finite
    """
    if not isinstance(direction, Direction):
        raise ValueError(f"Direction must be a Direction, got {direction!r}")

    x, y, z = np.asarray(leg_vector, dtype=float)
    if not np.all(np.isfinite([x, y, z])):
        raise InvalidTargetPosition(leg)

    # Huge finite inputs overflow to inf and are rejected by the range check
    with np.errstate(over="ignore", invalid="ignore"):
        r = np.hypot(x, y)
        if r == 0:
            raise InvalidTargetPosition(leg)
        d = np.linalg.norm([x, y, z])
        phi = (d**2 + bottom_length**2 - top_length**2) / (2 * bottom_length * r)
    # No clamping: out of range means the segments cannot meet
    if not -1.0 <= phi <= 1.0:
        raise InvalidTargetPosition(leg)

    base = np.arctan2(z, y)
    if direction is Direction.LEFT:
        angle = base + np.arccos(phi)
    elif direction is Direction.RIGHT:
        angle = base - np.arccos(phi)

    if not np.isfinite(angle):
        raise InvalidAngle(leg)
    return float(angle)


class KinematicsSolver:
    """Solves inverse kinematics for Stewart Platform.

    The solver only holds the fixed leg lengths and motors; every call is a
    pure function of its arguments, so one instance may be shared between
    threads.
    """

    def __init__(self, top_leg_length: float, bottom_leg_length: float, motors: Iterable[Motor]):
        """Initialize kinematics solver.

        Args:
            top_leg_length: Rod length, shared by all legs
            bottom_leg_length: Horn length, shared by all legs
            motors: Exactly six motors in leg order
        """
        if not (top_leg_length > 0 and bottom_leg_length > 0):
            raise ValueError("Leg lengths must be positive")
        self.top_leg_length = float(top_leg_length)
        self.bottom_leg_length = float(bottom_leg_length)
        self.motors = validate_motors(motors)

    @classmethod
    def from_geometry(cls, geometry: StewartGeometry) -> 'KinematicsSolver':
        return cls(geometry.top_leg_length, geometry.bottom_leg_length, geometry.motors)

    @classmethod
    def from_config(cls, config) -> 'KinematicsSolver':
        """Create a solver from a GeometryConfig."""
        return cls.from_geometry(StewartGeometry.from_config(config))

    def leg_vectors(
        self,
        target_position: np.ndarray,
        target_orientation: np.ndarray,
        platform: Platform
    ) -> np.ndarray:
        """Get the six leg vectors for a pose.

        Args:
            target_position: Platform centre target [x, y, z]
            target_orientation: Rotation angles [roll, pitch, yaw] in radians
            platform: Platform being positioned

        Returns:
            6x3 array of leg vectors

        Raises:
            InvalidTargetPosition: If the position is not three finite values
            InvalidTargetOrientation: If the orientation is not three finite values
        """
        target_position = np.asarray(target_position, dtype=float)
        target_orientation = np.asarray(target_orientation, dtype=float)
        if target_position.shape != (3,) or not np.all(np.isfinite(target_position)):
            raise InvalidTargetPosition()
        if target_orientation.shape != (3,) or not np.all(np.isfinite(target_orientation)):
            raise InvalidTargetOrientation()

        rotation = RotationMatrix.combined_rotation(*target_orientation)
        return resolve_leg_vectors(target_position, rotation, platform, self.motors)

    def inverse_kinematics(
        self,
        target_position: np.ndarray,
        target_orientation: np.ndarray,
        platform: Platform
    ) -> np.ndarray:
        """Solve inverse kinematics to get the six servo angles.

        A pose is valid only if every leg reaches it; the first failing leg
        aborts the solve and no partial result is returned.

        Args:
            target_position: Platform centre target [x, y, z]
            target_orientation: Rotation angles [roll, pitch, yaw] in radians
            platform: Platform being positioned

        Returns:
            Array of 6 servo angles in radians, index-aligned with the motors

        Raises:
            InvalidTargetPosition: If a leg cannot reach the pose; ``error.leg``
                names the first failing leg
            InvalidTargetOrientation: If the orientation is not finite
        """
        leg_vectors = self.leg_vectors(target_position, target_orientation, platform)

        angles = np.empty(NUM_LEGS)
        for motor, leg_vector in zip(self.motors, leg_vectors):
            try:
                angles[motor.motor_id] = solve_servo_angle(
                    leg_vector,
                    self.top_leg_length,
                    self.bottom_leg_length,
                    motor.direction,
                    leg=motor.motor_id
                )
            except InvalidTargetPosition:
                logger.debug("Leg %d cannot span %s", motor.motor_id, leg_vector)
                raise

        logger.debug("Pose %s / %s solved to %s", target_position, target_orientation, angles)
        return angles
