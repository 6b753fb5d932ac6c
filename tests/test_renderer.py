"""Unit tests for the render loop.

Tests cover:
- RenderSettings validation and aspect ratio
- Radiance sanitization (NaN, Inf, negative)
- render_scene fills every pixel with the requested sample count
- Batching and progress callbacks
"""

import math

import numpy as np
import pytest
import taichi as ti


def _sky_only_scene(sky=(0.2, 0.3, 0.4)):
    from src.pathtracer.camera.pinhole import PinholeCamera, setup_camera
    from src.pathtracer.scene.manager import SceneManager

    scene = SceneManager(sky=sky)
    setup_camera(PinholeCamera((0, 0, 0), (0, 0, 1), (0, 1, 0), math.pi / 2.0, 4.0 / 3.0))
    return scene


class TestRenderSettings:
    """Tests for RenderSettings."""

    def test_defaults(self):
        """Test default size and sample budget."""
        from src.pathtracer.core.renderer import RenderSettings

        settings = RenderSettings()
        assert (settings.image_width, settings.image_height) == (800, 600)
        assert settings.num_of_samples == 16
        assert abs(settings.aspect_ratio - 4.0 / 3.0) < 1e-12

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"image_width": 0},
            {"image_height": -2},
            {"image_width": 5000},
            {"num_of_samples": -1},
        ],
    )
    def test_invalid(self, kwargs):
        """Test invalid settings raise ValueError."""
        from src.pathtracer.core.renderer import RenderSettings

        with pytest.raises(ValueError):
            RenderSettings(**kwargs)


class TestSanitize:
    """Tests for sample sanitization."""

    def test_bad_components_are_zeroed(self):
        """Test NaN, Inf and negative components become zero."""
        from src.pathtracer.core.renderer import _sanitize_radiance

        inputs = ti.Vector.field(3, dtype=ti.f32, shape=2)
        outputs = ti.Vector.field(3, dtype=ti.f32, shape=2)
        inputs.from_numpy(
            np.array([[np.nan, np.inf, -1.0], [0.5, 2.0, -np.inf]], dtype=np.float32)
        )

        @ti.kernel
        def test_kernel():
            for i in range(2):
                outputs[i] = _sanitize_radiance(inputs[i])

        test_kernel()
        result = outputs.to_numpy()
        np.testing.assert_array_equal(result[0], [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(result[1], [0.5, 2.0, 0.0])


class TestRenderScene:
    """Tests for render_scene."""

    def test_sky_only_image(self):
        """Test every pixel of a sky-only render equals the sky."""
        from src.pathtracer.core.film import get_image_numpy, get_sample_counts_numpy
        from src.pathtracer.core.renderer import RenderSettings, render_scene

        _sky_only_scene()
        render_scene(RenderSettings(image_width=8, image_height=6, num_of_samples=3))

        image = get_image_numpy()
        assert image.shape == (6, 8, 3)
        np.testing.assert_allclose(image[..., 0], 0.2, atol=1e-6)
        np.testing.assert_allclose(image[..., 2], 0.4, atol=1e-6)
        assert np.all(get_sample_counts_numpy() == 3)

    def test_batches_and_callback(self):
        """Test the callback sees cumulative progress per batch."""
        from src.pathtracer.core.film import get_total_samples
        from src.pathtracer.core.renderer import RenderSettings, render_scene

        _sky_only_scene()
        progress = []
        render_scene(
            RenderSettings(image_width=4, image_height=4, num_of_samples=5),
            batch_size=2,
            callback=lambda done, total: progress.append((done, total)),
        )
        assert progress == [(2, 5), (4, 5), (5, 5)]
        assert get_total_samples() == 5

    def test_zero_samples(self):
        """Test a zero budget leaves an empty, black film."""
        from src.pathtracer.core.film import get_image_numpy, get_total_samples
        from src.pathtracer.core.renderer import RenderSettings, render_scene

        _sky_only_scene()
        render_scene(RenderSettings(image_width=4, image_height=4, num_of_samples=0))
        assert get_total_samples() == 0
        assert np.all(get_image_numpy() == 0.0)

    def test_invalid_batch_size(self):
        """Test a non-positive batch size raises ValueError."""
        from src.pathtracer.core.renderer import RenderSettings, render_scene

        with pytest.raises(ValueError):
            render_scene(RenderSettings(image_width=4, image_height=4), batch_size=0)

    def test_emitter_fills_view(self):
        """Test a light covering the view shows its emission in every pixel."""
        from src.pathtracer.core.film import get_image_numpy
        from src.pathtracer.core.renderer import RenderSettings, render_scene

        scene = _sky_only_scene(sky=(0.0, 0.0, 0.0))
        scene.add_emissive_plane(
            (0.0, 0.0, 1.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0), 100.0, 100.0, (1.0, 1.0, 1.0), 3.0
        )
        render_scene(RenderSettings(image_width=6, image_height=4, num_of_samples=2))
        np.testing.assert_allclose(get_image_numpy(), 3.0, atol=1e-5)
