"""
Example usage of Stewart Platform implementation.

This script solves a few poses with the default geometry and, when a serial
port is given, drives a Maestro servo controller through them.

    python example.py                 # print angles only
    python example.py /dev/ttyACM0    # also move the servos
"""

import argparse
import logging
import time
import numpy as np

from actuator import Maestro
from config import PlatformConfig
from errors import KinematicsError
from geometry import StewartGeometry
from kinematics import KinematicsSolver
from platform_controller import StewartPlatformController


def example_poses(home: np.ndarray):
    """Poses relative to the neutral position: (label, position, orientation)."""
    return [
        ("Home", home, np.zeros(3)),
        ("Raise 2", home + [0, 0, 2], np.zeros(3)),
        ("Shift X 5", home + [5, 0, 0], np.zeros(3)),
        ("Roll 1 deg", home, np.deg2rad([1, 0, 0])),
        ("Pitch 1 deg", home, np.deg2rad([0, 1, 0])),
        ("Yaw 3 deg", home, np.deg2rad([0, 0, 3])),
        ("Out of reach", home + [0, 0, 200], np.zeros(3)),
    ]


def print_solutions(config: PlatformConfig) -> None:
    """Solve every example pose and print the servo angles."""
    geometry = StewartGeometry.from_config(config.geometry)
    solver = KinematicsSolver.from_geometry(geometry)

    for label, position, orientation in example_poses(geometry.platform.center):
        try:
            angles = solver.inverse_kinematics(position, orientation, geometry.platform)
        except KinematicsError as e:
            print(f"{label:>12}: {e}")
            continue
        print(f"{label:>12}: " + " ".join(f"{a:8.2f}" for a in np.rad2deg(angles)))


def run_servos(config: PlatformConfig, port: str, settle: float) -> None:
    """Drive the servos through the example poses."""
    with Maestro.connect(port, config.maestro) as maestro:
        controller = StewartPlatformController(config, maestro)
        controller.configure_servos()
        for label, position, orientation in example_poses(controller.geometry.platform.center):
            print(f"\nMoving to {label}")
            if not controller.move_to_pose(position, orientation):
                print(f"Failed to move to {label}")
                continue
            time.sleep(settle)
            print(f"Feedback (deg): {np.round(np.rad2deg(controller.get_servo_angles()), 2)}")
        controller.reset_position()


def main():
    """Main function demonstrating Stewart Platform usage."""
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("port", nargs="?", help="Maestro serial port")
    parser.add_argument("--settle", type=float, default=1.0, help="Seconds to wait after each move")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    config = PlatformConfig.default_config()

    print("\nServo angles (deg), legs 0-5:")
    print_solutions(config)

    if args.port:
        try:
            run_servos(config, args.port, args.settle)
        except KeyboardInterrupt:
            print("\nExiting...")

if __name__ == "__main__":
    main()
