"""
Actuator control module for Stewart Platform.

This module drives the hobby servos through a Pololu Maestro servo
controller using its compact serial protocol, and converts servo angles to
the controller's pulse-width targets.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence

import numpy as np
import serial

from config import MaestroConfig, ServoConfig
from errors import (
    InvalidChannel,
    InvalidMovingState,
    OutOfBounds,
    UnableToConnect,
    UnableToReceive,
    UnableToSend,
)
from geometry import Direction

logger = logging.getLogger(__name__)

MAX_CHANNEL = 11
MAX_VALUE = 0x3FFF  # Values travel as two 7-bit bytes

SET_TARGET = 0x84
SET_SPEED = 0x87
SET_ACCELERATION = 0x89
GET_POSITION = 0x90
GET_MOVING_STATE = 0x93


class MovingState(Enum):
    """Whether any servo is still travelling to its target."""
    MOVING = 1
    STOPPED = 0


def split_7bit(value: int) -> bytes:
    """Split a 14-bit value into the low and high 7-bit bytes."""
    if not 0 <= value <= MAX_VALUE:
        raise OutOfBounds(f"Value {value} does not fit in 14 bits")
    return bytes([value & 0x7F, (value >> 7) & 0x7F])


def verify_channel(channel: int) -> None:
    if not 0 <= channel <= MAX_CHANNEL:
        raise InvalidChannel(
            f"Invalid channel {channel}! Valid channels are 0-{MAX_CHANNEL}"
        )


class ServoMapper:
    """Converts servo angles to Maestro targets and back.

    Maestro targets are in quarter-microseconds of pulse width.
    """

    def __init__(self, config: ServoConfig):
        """Initialize servo mapper.

        Args:
            config: Servo pulse-width configuration
        """
        self.config = config
        self.min_target = int(round(4 * config.min_pulse_us))
        self.max_target = int(round(4 * config.max_pulse_us))

    def horn_angle(self, angle: float, direction: Direction) -> float:
        """Get the angle seen by the servo itself.

        Left horns are mounted mirrored, so their horizontal sits at 180 degrees
        of the kinematic angle. The result is wrapped into [-pi, pi).
        """
        if direction is Direction.LEFT:
            angle = np.pi - angle
        return float((angle + np.pi) % (2 * np.pi) - np.pi)

    def to_target(self, angle: float, direction: Direction = Direction.RIGHT) -> int:
        """Get the Maestro target for a servo angle.

        Args:
            angle: Kinematic servo angle in radians
            direction: Horn mounting side

        Returns:
            Target in quarter-microseconds

        Raises:
            OutOfBounds: If the pulse falls outside the servo's range
        """
        angle = self.horn_angle(angle, direction)
        pulse_us = self.config.center_pulse_us + np.rad2deg(angle) * self.config.us_per_degree
        if not np.isfinite(pulse_us):
            raise OutOfBounds(f"Angle {angle} has no pulse width")
        target = int(round(4 * pulse_us))
        if not self.min_target <= target <= self.max_target:
            raise OutOfBounds(
                f"Angle {np.rad2deg(angle):.2f} deg needs target {target}, "
                f"outside {self.min_target}-{self.max_target}"
            )
        return target

    def to_targets(self, angles: Iterable[float], directions: Iterable[Direction]) -> List[int]:
        """Convert every angle, failing before any is sent."""
        return [self.to_target(angle, direction) for angle, direction in zip(angles, directions)]

    def to_angle(self, target: int, direction: Direction = Direction.RIGHT) -> float:
        """Get the kinematic angle in radians for a Maestro target."""
        pulse_us = target / 4.0
        angle = float(np.deg2rad((pulse_us - self.config.center_pulse_us) / self.config.us_per_degree))
        if direction is Direction.LEFT:
            angle = np.pi - angle
        return angle


class Maestro:
    """Serial link to a Maestro servo controller.

    The port is held exclusively until ``close`` is called.
    """

    def __init__(self, serial_port):
        """Initialize with an open serial port.

        Args:
            serial_port: Object with ``write``, ``read`` and ``close``, usually
                a ``serial.Serial``
        """
        self.serial_port = serial_port

    @classmethod
    def connect(cls, port: Optional[str] = None, config: Optional[MaestroConfig] = None) -> 'Maestro':
        """Open the Maestro at the given serial port.

        Args:
            port: Serial port name, defaults to ``config.port``
            config: Link configuration

        Raises:
            UnableToConnect: If the serial connection cannot be established
        """
        config = config or MaestroConfig()
        port = port or config.port
        if port is None:
            raise UnableToConnect("No serial port given for Maestro")
        try:
            serial_port = serial.Serial(port, baudrate=config.baud_rate, timeout=config.timeout, exclusive=True)
        except (serial.SerialException, ValueError) as e:
            raise UnableToConnect(f"Unable to connect to Maestro at {port}: {e}") from e
        logger.info("Connected to Maestro at %s", port)
        return cls(serial_port)

    def close(self) -> None:
        self.serial_port.close()

    def __enter__(self) -> 'Maestro':
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _send_command_no_response(self, data: bytes) -> None:
        try:
            self.serial_port.write(data)
        except serial.SerialException as e:
            raise UnableToSend(f"Lost connection to Maestro: {e}") from e

    def _send_command(self, data: bytes, reply_size: int = 2) -> int:
        self._send_command_no_response(data)
        try:
            reply = self.serial_port.read(reply_size)
        except serial.SerialException as e:
            raise UnableToReceive(f"Unable to receive data: {e}") from e
        if len(reply) != reply_size:
            raise UnableToReceive(f"Expected {reply_size} bytes from Maestro, got {len(reply)}")
        return int.from_bytes(reply, "little")

    def set_acceleration(self, channel: int, acceleration: int) -> None:
        """Set the acceleration limit of a single channel."""
        verify_channel(channel)
        self._send_command_no_response(bytes([SET_ACCELERATION, channel]) + split_7bit(acceleration))

    def set_speed(self, channel: int, speed: int) -> None:
        """Set the speed limit of a single channel."""
        verify_channel(channel)
        self._send_command_no_response(bytes([SET_SPEED, channel]) + split_7bit(speed))

    def set_target(self, channel: int, target: int) -> None:
        """Set the target of a single channel.

        Args:
            channel: Channel 0-11
            target: Pulse width in quarter-microseconds
        """
        verify_channel(channel)
        self._send_command_no_response(bytes([SET_TARGET, channel]) + split_7bit(target))

    def get_position(self, channel: int) -> int:
        """Get the current position of a single channel in quarter-microseconds."""
        verify_channel(channel)
        return self._send_command(bytes([GET_POSITION, channel]))

    def set_accelerations(self, channels: Sequence[int], accelerations: Sequence[int]) -> None:
        for channel, acceleration in zip(channels, accelerations):
            self.set_acceleration(channel, acceleration)

    def set_speeds(self, channels: Sequence[int], speeds: Sequence[int]) -> None:
        for channel, speed in zip(channels, speeds):
            self.set_speed(channel, speed)

    def set_targets(self, channels: Sequence[int], targets: Sequence[int]) -> None:
        for channel, target in zip(channels, targets):
            self.set_target(channel, target)

    def get_positions(self, channels: Sequence[int]) -> List[int]:
        return [self.get_position(channel) for channel in channels]

    def get_moving_state(self) -> MovingState:
        """Check if any of the servos are currently moving.

        Raises:
            InvalidMovingState: If the Maestro replies with anything but 0 or 1
        """
        state = self._send_command(bytes([GET_MOVING_STATE]), reply_size=1)
        try:
            return MovingState(state)
        except ValueError:
            raise InvalidMovingState(
                f"Invalid moving state {state} received from Maestro. Value should be 0 or 1"
            ) from None
