"""Unit tests for the camera module.

Tests cover:
- Pinhole ray through the film center follows the look direction
- Pinhole corner rays and aspect ratio
- Orthographic rays share one direction and span the film rectangle
- Camera basis construction and validation
"""

import math

import pytest


def _normalized(v):
    n = math.sqrt(sum(c * c for c in v))
    return tuple(c / n for c in v)


class TestPinholeCamera:
    """Tests for the pinhole camera."""

    def _setup(self, aspect_ratio=1.0, position=(0.0, 0.0, 0.0)):
        from src.pathtracer.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(
            PinholeCamera(
                position=position,
                look_dir=(0.0, 0.0, 1.0),
                up=(0.0, 1.0, 0.0),
                fov=math.pi / 2.0,
                aspect_ratio=aspect_ratio,
            )
        )

    def test_center_ray(self):
        """Test the center of the film looks straight ahead."""
        from src.pathtracer.camera.pinhole import generate_ray_python

        self._setup(position=(1.0, 2.0, -7.0))
        origin, direction = generate_ray_python(0.5, 0.5)
        assert origin == pytest.approx((1.0, 2.0, -7.0), abs=1e-6)
        assert direction == pytest.approx((0.0, 0.0, 1.0), abs=1e-6)

    def test_edge_rays_span_fov(self):
        """Test the left and right edges are fov / 2 off axis."""
        from src.pathtracer.camera.pinhole import generate_ray_python

        self._setup()
        _, right = generate_ray_python(1.0, 0.5)
        _, left = generate_ray_python(0.0, 0.5)
        assert right == pytest.approx(_normalized((1.0, 0.0, 1.0)), abs=1e-5)
        assert left == pytest.approx(_normalized((-1.0, 0.0, 1.0)), abs=1e-5)

    def test_corner_ray_uses_aspect_ratio(self):
        """Test the vertical extent is the horizontal one over the aspect ratio."""
        from src.pathtracer.camera.pinhole import generate_ray_python

        self._setup(aspect_ratio=2.0)
        _, top_right = generate_ray_python(1.0, 1.0)
        _, bottom_left = generate_ray_python(0.0, 0.0)
        assert top_right == pytest.approx(_normalized((1.0, 0.5, 1.0)), abs=1e-5)
        assert bottom_left == pytest.approx(_normalized((-1.0, -0.5, 1.0)), abs=1e-5)

    def test_basis_is_orthonormalized(self):
        """Test a non-orthogonal up vector is corrected."""
        from src.pathtracer.camera.pinhole import (
            CameraType,
            PinholeCamera,
            get_camera_info,
            setup_camera,
        )

        setup_camera(
            PinholeCamera(
                position=(0.0, 0.0, 0.0),
                look_dir=(0.0, 0.0, 2.0),
                up=(0.0, 1.0, 1.0),
                fov=1.0,
                aspect_ratio=1.0,
            )
        )
        info = get_camera_info()
        assert info["type"] == CameraType.PINHOLE
        assert info["look"] == pytest.approx((0.0, 0.0, 1.0), abs=1e-6)
        assert info["up"] == pytest.approx((0.0, 1.0, 0.0), abs=1e-6)
        assert info["right"] == pytest.approx((1.0, 0.0, 0.0), abs=1e-6)


class TestOrthographicCamera:
    """Tests for the orthographic camera."""

    def test_rays_are_parallel(self):
        """Test every ray shares the look direction and starts on the film."""
        from src.pathtracer.camera.pinhole import (
            OrthographicCamera,
            generate_ray_python,
            setup_camera,
        )

        setup_camera(
            OrthographicCamera(
                scale=4.0,
                aspect_ratio=2.0,
                position=(0.0, 0.0, -5.0),
                look_dir=(0.0, 0.0, 1.0),
                up=(0.0, 1.0, 0.0),
            )
        )

        origin, direction = generate_ray_python(0.0, 0.0)
        assert origin == pytest.approx((-2.0, -1.0, -5.0), abs=1e-5)
        assert direction == pytest.approx((0.0, 0.0, 1.0), abs=1e-6)

        origin, direction = generate_ray_python(1.0, 1.0)
        assert origin == pytest.approx((2.0, 1.0, -5.0), abs=1e-5)
        assert direction == pytest.approx((0.0, 0.0, 1.0), abs=1e-6)

        origin, _ = generate_ray_python(0.5, 0.5)
        assert origin == pytest.approx((0.0, 0.0, -5.0), abs=1e-5)


class TestCameraValidation:
    """Tests for camera setup errors."""

    @pytest.mark.parametrize("fov", [0.0, math.pi, -1.0, 4.0])
    def test_invalid_fov(self, fov):
        """Test field of view outside (0, pi) is rejected."""
        from src.pathtracer.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError):
            setup_camera(PinholeCamera((0, 0, 0), (0, 0, 1), (0, 1, 0), fov, 1.0))

    def test_parallel_up_and_look(self):
        """Test a degenerate basis is rejected."""
        from src.pathtracer.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError):
            setup_camera(PinholeCamera((0, 0, 0), (0, 1, 0), (0, 2, 0), 1.0, 1.0))
        with pytest.raises(ValueError):
            setup_camera(PinholeCamera((0, 0, 0), (0, 0, 0), (0, 1, 0), 1.0, 1.0))

    def test_invalid_aspect_and_scale(self):
        """Test non-positive aspect ratio and scale are rejected."""
        from src.pathtracer.camera.pinhole import (
            OrthographicCamera,
            PinholeCamera,
            setup_camera,
        )

        with pytest.raises(ValueError):
            setup_camera(PinholeCamera((0, 0, 0), (0, 0, 1), (0, 1, 0), 1.0, 0.0))
        with pytest.raises(ValueError):
            setup_camera(OrthographicCamera(0.0, 1.0, (0, 0, 0), (0, 0, 1), (0, 1, 0)))

    def test_unknown_camera_type(self):
        """Test unsupported camera objects raise TypeError."""
        from src.pathtracer.camera.pinhole import setup_camera

        with pytest.raises(TypeError):
            setup_camera("pinhole")
