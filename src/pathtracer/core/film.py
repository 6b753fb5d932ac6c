"""Film: the per-pixel radiance accumulation buffer.

Every radiance sample is added to a running sum together with a sample
count. The displayed value of a pixel is sum / count, so samples may arrive
in any number of passes. Pixels use film coordinates: x grows to the right
and y grows upward (y = 0 is the bottom row).

The buffers are preallocated to MAX_FILM_WIDTH x MAX_FILM_HEIGHT so changing
the image size does not recompile kernels.

Example:
    >>> from src.pathtracer.core.film import setup_film, get_image_numpy, save_image
    >>> setup_film(800, 600)
    >>> # ... kernels call add_sample(x, y, radiance) ...
    >>> image = get_image_numpy()  # (600, 800, 3) linear radiance
    >>> save_image("render.png")
"""

import numpy as np
import taichi as ti
import taichi.math as tm
from PIL import Image as PILImage

vec3 = tm.vec3

# Maximum supported film dimensions (preallocated)
MAX_FILM_WIDTH = 2048
MAX_FILM_HEIGHT = 2048

_film_width = ti.field(dtype=ti.i32, shape=())
_film_height = ti.field(dtype=ti.i32, shape=())
_film_initialized = ti.field(dtype=ti.i32, shape=())

# Sum of radiance samples per pixel
_radiance_sum = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_FILM_WIDTH, MAX_FILM_HEIGHT))
# Number of samples per pixel
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_FILM_WIDTH, MAX_FILM_HEIGHT))


def setup_film(width: int, height: int) -> None:
    """Set the active film size and clear the buffers.

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Film dimensions must be positive, got {width}x{height}")
    if width > MAX_FILM_WIDTH or height > MAX_FILM_HEIGHT:
        raise ValueError(
            f"Film dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_FILM_WIDTH}x{MAX_FILM_HEIGHT})"
        )

    _film_width[None] = width
    _film_height[None] = height
    _film_initialized[None] = 1
    clear_film()


def clear_film() -> None:
    """Reset all accumulated samples to zero."""
    _radiance_sum.fill(0.0)
    _sample_count.fill(0)


def reset_film() -> None:
    """Mark the film as not set up."""
    _film_initialized[None] = 0


def get_film_dimensions() -> tuple[int, int]:
    """Get the active film size as (width, height)."""
    return int(_film_width[None]), int(_film_height[None])


def _check_film_initialized() -> None:
    """Raise if setup_film() has not been called."""
    if _film_initialized[None] == 0:
        raise RuntimeError("Film not set up. Call setup_film() first.")


@ti.func
def add_sample(x: ti.i32, y: ti.i32, radiance: vec3):
    """Accumulate one radiance sample into pixel (x, y).

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = bottom).
        radiance: The sample's radiance (RGB).
    """
    _radiance_sum[x, y] += radiance
    _sample_count[x, y] += 1


@ti.kernel
def _add_sample_kernel(x: ti.i32, y: ti.i32, radiance: vec3):
    add_sample(x, y, radiance)


def add_sample_python(x: int, y: int, radiance: tuple[float, float, float]) -> None:
    """Accumulate a sample from Python scope.

    Raises:
        RuntimeError: If the film has not been set up.
        IndexError: If (x, y) lies outside the active film.
    """
    _check_film_initialized()
    width, height = get_film_dimensions()
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) outside film {width}x{height}")
    _add_sample_kernel(x, y, vec3(radiance[0], radiance[1], radiance[2]))


def get_sample_counts_numpy() -> np.ndarray:
    """Get per-pixel sample counts as a (height, width) array, top row first.

    Raises:
        RuntimeError: If the film has not been set up.
    """
    _check_film_initialized()
    width, height = get_film_dimensions()
    counts = _sample_count.to_numpy()[:width, :height]
    return np.flipud(np.transpose(counts, (1, 0)))


def get_total_samples() -> int:
    """Get the smallest per-pixel sample count across the film.

    Raises:
        RuntimeError: If the film has not been set up.
    """
    return int(get_sample_counts_numpy().min())


def get_image_numpy() -> np.ndarray:
    """Get the averaged linear radiance as a NumPy array.

    Pixels without samples are black. Values are not clamped.

    Returns:
        Array of shape (height, width, 3), dtype float32, row 0 at the top.

    Raises:
        RuntimeError: If the film has not been set up.
    """
    _check_film_initialized()
    width, height = get_film_dimensions()

    sums = _radiance_sum.to_numpy()[:width, :height, :]
    counts = _sample_count.to_numpy()[:width, :height]

    image = np.zeros_like(sums)
    covered = counts > 0
    image[covered] = sums[covered] / counts[covered][:, None]

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    # Film y grows upward, image rows grow downward
    image = np.flipud(image)

    return image.astype(np.float32)


def to_srgb(linear: np.ndarray) -> np.ndarray:
    """Apply the sRGB transfer curve to linear values.

    Values are clamped to [0, 1] first.

    Args:
        linear: Array of linear color values.

    Returns:
        Array of encoded values in [0, 1].
    """
    linear = np.clip(linear, 0.0, 1.0)
    return np.where(
        linear <= 0.0031308,
        12.92 * linear,
        1.055 * np.power(linear, 1.0 / 2.4) - 0.055,
    )


def get_image_uint8() -> np.ndarray:
    """Get the averaged image encoded as 8-bit sRGB, shape (height, width, 3)."""
    encoded = to_srgb(get_image_numpy())
    return (encoded * 255.0 + 0.5).astype(np.uint8)


def save_image(filepath: str) -> None:
    """Save the averaged film as an 8-bit sRGB image.

    The format is chosen from the file extension (PNG recommended).

    Raises:
        RuntimeError: If the film has not been set up.
    """
    PILImage.fromarray(get_image_uint8()).save(filepath)
