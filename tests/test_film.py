"""Unit tests for the film (radiance accumulation buffer).

Tests cover:
- Sample averaging and per-pixel counts
- Orientation: film y = 0 is the bottom image row
- sRGB encoding and 8-bit conversion
- Saving to PNG
- Setup validation and use before setup
"""

import numpy as np
import pytest
from PIL import Image as PILImage


class TestFilmSetup:
    """Tests for film setup and validation."""

    def test_dimensions(self):
        """Test setup_film records the active size."""
        from src.pathtracer.core.film import get_film_dimensions, setup_film

        setup_film(16, 8)
        assert get_film_dimensions() == (16, 8)

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5), (4096, 10), (10, 4096)])
    def test_invalid_dimensions(self, size):
        """Test non-positive or oversized dimensions raise ValueError."""
        from src.pathtracer.core.film import setup_film

        with pytest.raises(ValueError):
            setup_film(*size)

    def test_use_before_setup(self):
        """Test reading the film before setup raises RuntimeError."""
        from src.pathtracer.core.film import add_sample_python, get_image_numpy

        with pytest.raises(RuntimeError, match="Film not set up"):
            get_image_numpy()
        with pytest.raises(RuntimeError):
            add_sample_python(0, 0, (1.0, 1.0, 1.0))

    def test_out_of_range_pixel(self):
        """Test adding a sample outside the film raises IndexError."""
        from src.pathtracer.core.film import add_sample_python, setup_film

        setup_film(4, 4)
        with pytest.raises(IndexError):
            add_sample_python(4, 0, (1.0, 1.0, 1.0))


class TestAccumulation:
    """Tests for sample accumulation and averaging."""

    def test_average(self):
        """Test a pixel shows the mean of its samples."""
        from src.pathtracer.core.film import (
            add_sample_python,
            get_image_numpy,
            get_sample_counts_numpy,
            setup_film,
        )

        setup_film(2, 2)
        add_sample_python(0, 0, (1.0, 2.0, 3.0))
        add_sample_python(0, 0, (3.0, 0.0, 1.0))

        image = get_image_numpy()
        counts = get_sample_counts_numpy()
        assert image.dtype == np.float32
        assert image.shape == (2, 2, 3)
        # Film (0, 0) is the bottom-left pixel
        np.testing.assert_allclose(image[1, 0], [2.0, 1.0, 2.0], atol=1e-6)
        assert counts[1, 0] == 2
        assert counts[0, 0] == 0

    def test_unsampled_pixels_are_black(self):
        """Test pixels without samples are zero rather than NaN."""
        from src.pathtracer.core.film import get_image_numpy, get_total_samples, setup_film

        setup_film(3, 2)
        image = get_image_numpy()
        assert not np.isnan(image).any()
        assert np.all(image == 0.0)
        assert get_total_samples() == 0

    def test_orientation(self):
        """Test the top film row becomes the first image row."""
        from src.pathtracer.core.film import add_sample_python, get_image_numpy, setup_film

        setup_film(3, 2)
        add_sample_python(2, 1, (5.0, 5.0, 5.0))
        image = get_image_numpy()
        assert image[0, 2, 0] == 5.0
        assert image.sum() == 15.0

    def test_values_not_clamped(self):
        """Test HDR values survive averaging."""
        from src.pathtracer.core.film import add_sample_python, get_image_numpy, setup_film

        setup_film(1, 1)
        add_sample_python(0, 0, (27.777, 0.0, 0.0))
        assert abs(get_image_numpy()[0, 0, 0] - 27.777) < 1e-4

    def test_clear_film(self):
        """Test clear_film drops all samples."""
        from src.pathtracer.core.film import (
            add_sample_python,
            clear_film,
            get_sample_counts_numpy,
            setup_film,
        )

        setup_film(2, 2)
        add_sample_python(1, 1, (1.0, 1.0, 1.0))
        clear_film()
        assert get_sample_counts_numpy().sum() == 0


class TestEncoding:
    """Tests for sRGB encoding and export."""

    def test_to_srgb(self):
        """Test both branches of the sRGB curve and clamping."""
        from src.pathtracer.core.film import to_srgb

        values = np.array([-1.0, 0.0, 0.002, 0.5, 1.0, 2.0])
        encoded = to_srgb(values)
        assert encoded[0] == 0.0
        assert encoded[1] == 0.0
        assert abs(encoded[2] - 12.92 * 0.002) < 1e-9
        assert abs(encoded[3] - (1.055 * 0.5 ** (1.0 / 2.4) - 0.055)) < 1e-9
        assert abs(encoded[4] - 1.0) < 1e-9
        assert abs(encoded[5] - 1.0) < 1e-9

    def test_uint8_and_save(self, tmp_path):
        """Test the saved PNG holds the encoded average."""
        from src.pathtracer.core.film import (
            add_sample_python,
            get_image_uint8,
            save_image,
            setup_film,
        )

        setup_film(4, 3)
        add_sample_python(0, 2, (1.0, 0.0, 0.5))

        image = get_image_uint8()
        assert image.dtype == np.uint8
        assert image.shape == (3, 4, 3)
        assert tuple(image[0, 0]) == (255, 0, 188)

        path = tmp_path / "film.png"
        save_image(str(path))
        with PILImage.open(path) as saved:
            assert saved.size == (4, 3)
            assert saved.mode == "RGB"
            assert saved.getpixel((0, 0)) == (255, 0, 188)
