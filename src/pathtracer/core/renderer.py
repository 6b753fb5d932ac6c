"""Render loop: drive the integrator over every pixel of the film.

For each pixel (x, y) and each sample, a jittered film position is drawn:

    (s, t) = get_sample_2d()
    film_x = (x + s) / width
    film_y = (y + t) / height

The active camera turns it into a primary ray, the integrator estimates its
radiance, and the film accumulates the result. Pixels run in parallel; the
samples of one pixel run serially in the same thread, which is the only
writer of that pixel's film cell.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.core.renderer import RenderSettings, render_scene
    >>> from src.pathtracer.scene.cornell_box import create_cornell_box_scene
    >>> from src.pathtracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_cornell_box_scene()
    >>> setup_camera(camera)
    >>> render_scene(RenderSettings(image_width=200, image_height=150, num_of_samples=16))
"""

from collections.abc import Callable
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.pathtracer.camera.pinhole import generate_ray
from src.pathtracer.core.film import (
    MAX_FILM_HEIGHT,
    MAX_FILM_WIDTH,
    add_sample,
    setup_film,
)
from src.pathtracer.core.integrator import trace_ray
from src.pathtracer.core.sampler import get_sample_2d

vec3 = tm.vec3

# Callback receives (samples_done, samples_target)
ProgressCallback = Callable[[int, int], None]


@dataclass
class RenderSettings:
    """Image size and sample budget of a render.

    Attributes:
        image_width: Width of the film in pixels.
        image_height: Height of the film in pixels.
        num_of_samples: Samples per pixel.
    """

    image_width: int = 800
    image_height: int = 600
    num_of_samples: int = 16

    def __post_init__(self) -> None:
        if not 0 < self.image_width <= MAX_FILM_WIDTH:
            raise ValueError(
                f"image_width must be in [1, {MAX_FILM_WIDTH}], got {self.image_width}"
            )
        if not 0 < self.image_height <= MAX_FILM_HEIGHT:
            raise ValueError(
                f"image_height must be in [1, {MAX_FILM_HEIGHT}], got {self.image_height}"
            )
        if self.num_of_samples < 0:
            raise ValueError(f"num_of_samples must be non-negative, got {self.num_of_samples}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.image_width / self.image_height


@ti.func
def _sanitize_radiance(radiance: vec3) -> vec3:
    """Zero out NaN, Inf and negative components of a sample."""
    result = tm.max(radiance, vec3(0.0, 0.0, 0.0))
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]):
            result[c] = 0.0
    return result


@ti.kernel
def _render_pass(width: ti.i32, height: ti.i32, num_samples: ti.i32):
    """Add num_samples samples to every pixel of the film."""
    for x, y in ti.ndrange(width, height):
        for _ in range(num_samples):
            jitter = get_sample_2d()
            film_x = (ti.cast(x, ti.f32) + jitter.x) / ti.cast(width, ti.f32)
            film_y = (ti.cast(y, ti.f32) + jitter.y) / ti.cast(height, ti.f32)

            radiance = trace_ray(generate_ray(film_x, film_y))
            add_sample(x, y, _sanitize_radiance(radiance))


def render_pass(width: int, height: int, num_samples: int) -> None:
    """Accumulate num_samples more samples per pixel into the film.

    The film must already be set up with the same dimensions.
    """
    if num_samples > 0:
        _render_pass(width, height, num_samples)


def render_scene(
    settings: RenderSettings,
    batch_size: int | None = None,
    callback: ProgressCallback | None = None,
) -> None:
    """Render the current scene through the active camera into a fresh film.

    Args:
        settings: Image size and samples per pixel.
        batch_size: Samples per pixel per kernel launch. Defaults to the
            whole budget in one launch.
        callback: Optional callback after each batch, receiving
            (samples_done, samples_target).

    Raises:
        ValueError: If batch_size is not positive.
    """
    if batch_size is None:
        batch_size = max(settings.num_of_samples, 1)
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    setup_film(settings.image_width, settings.image_height)

    done = 0
    while done < settings.num_of_samples:
        batch = min(batch_size, settings.num_of_samples - done)
        render_pass(settings.image_width, settings.image_height, batch)
        done += batch
        if callback is not None:
            callback(done, settings.num_of_samples)
