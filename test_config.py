import pytest

from config import (
    GeometryConfig,
    MaestroConfig,
    PlatformConfig,
    ServoConfig,
    default_config,
)
from geometry import Direction


class TestDefaults:
    """Tests for the shipped configuration."""

    def test_default_config(self):
        config = PlatformConfig.default_config()
        assert config.geometry.top_leg_length == 119.0
        assert config.geometry.bottom_leg_length == 21.1
        assert len(config.geometry.motor_positions) == 6
        assert config.maestro.baud_rate == 9600
        assert config.maestro.timeout == 0.01
        assert config.maestro.channels == (0, 1, 2, 3, 4, 5)

    def test_module_default(self):
        assert default_config == PlatformConfig.default_config()

    def test_frozen(self):
        with pytest.raises(AttributeError):
            default_config.geometry.top_leg_length = 100.0


class TestValidation:
    """Tests for rejected parameters."""

    @pytest.mark.parametrize("kwargs", [
        dict(top_leg_length=0.0),
        dict(bottom_leg_length=-21.1),
        dict(motor_positions=((0.0, 0.0, 0.0),) * 5),
        dict(motor_positions=((0.0, 0.0),) * 6),
        dict(motor_directions=(Direction.LEFT,) * 7),
        dict(motor_directions=("left",) * 6),
        dict(radius_platform=0.0),
        dict(gamma_platform=60.0),
        dict(home_position=(0.0, 126.0)),
    ])
    def test_geometry(self, kwargs):
        with pytest.raises(ValueError):
            GeometryConfig(**kwargs)

    @pytest.mark.parametrize("kwargs", [
        dict(min_pulse_us=2500.0, max_pulse_us=500.0),
        dict(center_pulse_us=3000.0),
        dict(us_per_degree=0.0),
        dict(speed=-1),
    ])
    def test_servo(self, kwargs):
        with pytest.raises(ValueError):
            ServoConfig(**kwargs)

    @pytest.mark.parametrize("kwargs", [
        dict(baud_rate=0),
        dict(timeout=-1.0),
        dict(channels=(0, 1, 2, 3, 4)),
        dict(channels=(0, 0, 1, 2, 3, 4)),
    ])
    def test_maestro(self, kwargs):
        with pytest.raises(ValueError):
            MaestroConfig(**kwargs)
