import numpy as np
import pytest

from config import GeometryConfig
from errors import InvalidFloatConversion
from geometry import (
    Direction,
    Motor,
    Platform,
    RotationMatrix,
    StewartGeometry,
    resolve_leg_vectors,
    round_rotation,
    validate_motors,
)

ORIENTATIONS = [
    (0.0, 0.0, 0.0),
    (np.pi/4, np.pi/3, np.pi/2),
    (0.1, -0.2, 0.3),
    (-1.2, 0.7, 2.5),
    (3.0, -3.0, 10.0),
]


def motor_positions(geometry: StewartGeometry) -> np.ndarray:
    return np.array([motor.position for motor in geometry.motors])


@pytest.fixture(scope="module")
def geometry() -> StewartGeometry:
    return StewartGeometry.from_config(GeometryConfig())


class TestRotationMatrix:
    """Tests for the rounded roll/pitch/yaw rotation."""

    def test_zero_orientation_is_identity(self):
        np.testing.assert_array_equal(RotationMatrix.combined_rotation(0.0, 0.0, 0.0), np.eye(3))

    def test_reference_orientation(self):
        expected = np.array([
            [0.0, -0.7071, 0.7071],
            [0.5, 0.6124, 0.6124],
            [-0.8660, 0.3536, 0.3536]
        ])
        R = RotationMatrix.combined_rotation(np.pi/4, np.pi/3, np.pi/2)
        np.testing.assert_array_equal(R, expected)

    def test_equal_angles_orientation(self):
        expected = np.array([
            [0.5780, -0.1730, 0.7975],
            [0.4939, 0.8521, -0.1730],
            [-0.6496, 0.4939, 0.5780]
        ])
        angle = np.sqrt(2.0)/2.0
        R = RotationMatrix.combined_rotation(angle, angle, angle)
        np.testing.assert_array_equal(R, expected)

    @pytest.mark.parametrize("roll,pitch,yaw", ORIENTATIONS)
    def test_orthonormal(self, roll, pitch, yaw):
        R = RotationMatrix.combined_rotation(roll, pitch, yaw)
        np.testing.assert_allclose(R.T @ R, np.eye(3), atol=1e-3)

    @pytest.mark.parametrize("roll,pitch,yaw", ORIENTATIONS)
    def test_matches_closed_form(self, roll, pitch, yaw):
        a, b, g = yaw, pitch, roll
        ca, sa, cb, sb, cg, sg = np.cos(a), np.sin(a), np.cos(b), np.sin(b), np.cos(g), np.sin(g)
        closed_form = np.array([
            [ca*cb, ca*sb*sg - sa*cg, sa*sg + ca*cg*sb],
            [sa*cb, ca*cg + sa*sb*sg, cg*sa*sb - ca*sg],
            [-sb, cb*sg, cb*cg]
        ])
        np.testing.assert_allclose(RotationMatrix.combined_rotation(roll, pitch, yaw), closed_form, atol=1e-4)

    def test_entries_are_rounded(self):
        R = RotationMatrix.combined_rotation(0.1, -0.2, 0.3)
        np.testing.assert_array_equal(R, np.round(R, 4))

    def test_single_axis(self):
        np.testing.assert_allclose(
            RotationMatrix.combined_rotation(0.0, 0.0, np.pi/2) @ np.array([1.0, 0.0, 0.0]),
            [0.0, 1.0, 0.0]
        )

    def test_non_finite_angle_rejected(self):
        with pytest.raises(InvalidFloatConversion):
            RotationMatrix.combined_rotation(np.nan, 0.0, 0.0)
        with pytest.raises(InvalidFloatConversion):
            round_rotation(np.full((3, 3), np.inf))

    def test_negative_zero_normalised(self):
        rounded = round_rotation(np.array([[-1e-9, 0, 0], [0, 1, 0], [0, 0, 1]]))
        assert not np.signbit(rounded[0, 0])


class TestMotorsAndPlatform:
    """Tests for the fixed geometry records."""

    def test_motor_is_read_only(self):
        motor = Motor(position=[1.0, 2.0, 3.0], direction=Direction.LEFT, motor_id=0)
        with pytest.raises(ValueError):
            motor.position[0] = 5.0
        with pytest.raises(AttributeError):
            motor.motor_id = 1

    @pytest.mark.parametrize("kwargs", [
        dict(position=[1.0, 2.0], direction=Direction.LEFT, motor_id=0),
        dict(position=[1.0, 2.0, 3.0], direction="left", motor_id=0),
        dict(position=[1.0, 2.0, 3.0], direction=Direction.LEFT, motor_id=6),
    ])
    def test_invalid_motor(self, kwargs):
        with pytest.raises(ValueError):
            Motor(**kwargs)

    def test_exactly_six_motors(self, geometry):
        with pytest.raises(ValueError, match="Exactly 6"):
            validate_motors(geometry.motors[:5])

    def test_motors_in_leg_order(self, geometry):
        swapped = (geometry.motors[1], geometry.motors[0]) + geometry.motors[2:]
        with pytest.raises(ValueError, match="slot 0"):
            validate_motors(swapped)

    def test_platform_shape_checked(self):
        with pytest.raises(ValueError):
            Platform(center=[0, 0, 0], attachments=np.zeros((5, 3)))

    def test_attachments_on_circle(self, geometry):
        attachments = geometry.platform.attachments
        np.testing.assert_allclose(np.linalg.norm(attachments, axis=1), 83.6)
        np.testing.assert_array_equal(attachments[:, 2], 0.0)

    def test_attachments_face_motors(self, geometry):
        motor_angles = np.arctan2(motor_positions(geometry)[:, 1], motor_positions(geometry)[:, 0])
        attachment_angles = np.arctan2(geometry.platform.attachments[:, 1], geometry.platform.attachments[:, 0])
        np.testing.assert_allclose(attachment_angles, motor_angles, atol=1e-3)

    def test_default_geometry(self, geometry):
        assert [m.motor_id for m in geometry.motors] == list(range(6))
        assert [m.direction for m in geometry.motors] == [Direction.RIGHT, Direction.LEFT] * 3
        np.testing.assert_array_equal(geometry.platform.center, [0.0, 0.0, 126.0])
        assert geometry.top_leg_length == 119.0
        assert geometry.bottom_leg_length == 21.1

    def test_non_positive_leg_length(self, geometry):
        with pytest.raises(ValueError):
            StewartGeometry(0.0, 21.1, geometry.motors, geometry.platform)


class TestLegVectors:
    """Tests for leg vector resolution."""

    def test_zero_pose(self, geometry):
        legs = resolve_leg_vectors(np.zeros(3), np.eye(3), geometry.platform, geometry.motors)
        np.testing.assert_array_equal(legs, geometry.platform.attachments - motor_positions(geometry))

    def test_translation_shifts_every_leg(self, geometry):
        offset = np.array([1.5, -2.0, 3.0])
        home = resolve_leg_vectors(np.zeros(3), np.eye(3), geometry.platform, geometry.motors)
        moved = resolve_leg_vectors(offset, np.eye(3), geometry.platform, geometry.motors)
        np.testing.assert_allclose(moved - home, np.tile(offset, (6, 1)))

    def test_rotation_applied_in_platform_frame(self, geometry):
        R = RotationMatrix.combined_rotation(0.0, 0.0, np.pi/2)
        legs = resolve_leg_vectors(np.zeros(3), R, geometry.platform, geometry.motors)
        for i, motor in enumerate(geometry.motors):
            np.testing.assert_allclose(legs[i], R @ geometry.platform.attachments[i] - motor.position)

