"""Progressive renderer for iterative sample accumulation.

This module wraps the render loop for workflows that refine an image over
time:
- Batch rendering (several samples per pixel per kernel launch)
- Progress callbacks or a generator interface between batches
- Reset and resize without touching the scene

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.core.progressive import ProgressiveRenderer
    >>> from src.pathtracer.scene.cornell_box import create_cornell_box_scene
    >>> from src.pathtracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_cornell_box_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = ProgressiveRenderer(400, 300)
    >>> renderer.render(64, batch_size=8)
    >>> image = renderer.get_image_numpy()
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from src.pathtracer.core.film import (
    clear_film,
    get_image_numpy,
    get_image_uint8,
    get_total_samples,
    save_image,
    setup_film,
)
from src.pathtracer.core.renderer import RenderSettings, render_pass

# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates samples over time.

    The renderer keeps the film dimensions and delegates storage to the
    global film buffers (Taichi fields).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the progressive renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        self._width = width
        self._height = height
        setup_film(width, height)

    @classmethod
    def from_settings(cls, settings: RenderSettings) -> "ProgressiveRenderer":
        """Create a renderer sized from RenderSettings."""
        return cls(settings.image_width, settings.image_height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Clear accumulated samples, keeping the dimensions."""
        clear_film()

    def resize(self, width: int, height: int) -> None:
        """Resize the film and clear accumulated samples.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        self._width = width
        self._height = height
        setup_film(width, height)

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples progressively with optional progress callback.

        Accumulates the specified number of samples into the existing film.
        Can be called multiple times to continue refining the image.

        Args:
            num_samples: Total number of samples per pixel to add.
            batch_size: Samples per pixel per kernel launch.
            callback: Optional callback called after each batch.
                Receives (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        for _ in self.render_progressive(num_samples, batch_size, callback):
            pass

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples progressively, yielding progress after each batch.

        Args:
            num_samples: Total number of samples per pixel to add.
            batch_size: Samples per pixel per kernel launch.
            callback: Optional callback called before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if num_samples <= 0:
            return

        target_samples = self.sample_count + num_samples

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_pass(self._width, self._height, batch)
            remaining -= batch

            progress = (self.sample_count, target_samples)
            if callback is not None:
                callback(*progress)
            yield progress

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear radiance, shape (height, width, 3)."""
        return get_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the image encoded as 8-bit sRGB, shape (height, width, 3)."""
        return get_image_uint8()

    def save_image(self, filepath: str) -> None:
        """Save the image as an 8-bit sRGB file (PNG recommended)."""
        save_image(filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
