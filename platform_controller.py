"""
Platform controller module for Stewart Platform.

This module provides high-level control of the Stewart Platform by integrating
kinematics, geometry, and the servo controller.
"""

import logging
import numpy as np
from typing import List, Optional, Tuple

from actuator import Maestro, MovingState, ServoMapper
from config import PlatformConfig
from errors import KinematicsError, OutOfBounds
from geometry import StewartGeometry
from kinematics import KinematicsSolver

logger = logging.getLogger(__name__)


class StewartPlatformController:
    """High-level controller for Stewart Platform."""

    def __init__(self, config: PlatformConfig, maestro: Maestro):
        """Initialize Stewart Platform controller.

        Args:
            config: Complete platform configuration
            maestro: Open link to the servo controller
        """
        self.config = config
        self.geometry = StewartGeometry.from_config(config.geometry)
        self.kinematics = KinematicsSolver.from_geometry(self.geometry)
        self.mapper = ServoMapper(config.servo)
        self.maestro = maestro
        self.channels = list(config.maestro.channels)
        self.directions = [motor.direction for motor in self.geometry.motors]

        self._current_position: Optional[np.ndarray] = None
        self._current_orientation: Optional[np.ndarray] = None

    def configure_servos(self) -> None:
        """Send the configured speed and acceleration limits to every channel."""
        count = len(self.channels)
        self.maestro.set_speeds(self.channels, [self.config.servo.speed] * count)
        self.maestro.set_accelerations(self.channels, [self.config.servo.acceleration] * count)

    def move_to_pose(self, position: np.ndarray, orientation: np.ndarray) -> bool:
        """Move platform to desired pose.

        All six targets are computed before anything is sent, so a rejected
        pose leaves the servos where they are.

        Args:
            position: Platform centre target [x, y, z]
            orientation: Rotation angles [roll, pitch, yaw] in radians

        Returns:
            True if movement was commanded, False if the pose was rejected
        """
        try:
            angles = self.kinematics.inverse_kinematics(position, orientation, self.geometry.platform)
            targets = self.mapper.to_targets(angles, self.directions)
        except (KinematicsError, OutOfBounds) as e:
            logger.warning("Movement failed: %s", e)
            return False

        self.maestro.set_targets(self.channels, targets)

        self._current_position = np.array(position, dtype=float)
        self._current_orientation = np.array(orientation, dtype=float)
        return True

    def reset_position(self) -> bool:
        """Move platform to its neutral pose."""
        return self.move_to_pose(self.geometry.platform.center, np.zeros(3))

    def get_servo_angles(self) -> np.ndarray:
        """Get the servo angles reported by the controller, in radians."""
        positions: List[int] = self.maestro.get_positions(self.channels)
        return np.array([
            self.mapper.to_angle(position, direction)
            for position, direction in zip(positions, self.directions)
        ])

    def is_moving(self) -> bool:
        return self.maestro.get_moving_state() is MovingState.MOVING

    @property
    def current_pose(self) -> Tuple[Optional[np.ndarray], Optional[np.ndarray]]:
        """Get the last commanded pose.

        Returns:
            Tuple of position and orientation, both None before the first move
        """
        return self._current_position, self._current_orientation

    def close(self) -> None:
        self.maestro.close()
