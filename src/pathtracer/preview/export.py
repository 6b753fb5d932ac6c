"""Image export utilities for rendered images.

The film itself saves its average with the sRGB curve (see
src.pathtracer.core.film.save_image). The helpers here add tone mapping
and a choice of transfer function on top, and a simple error metric for
comparing renders.

Example:
    >>> from src.pathtracer.preview.export import save_png
    >>> save_png(renderer, "cornell.png", tone_map="reinhard")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.pathtracer.preview.display import (
    ToneMapMethod,
    TransferFunction,
    process_image_for_display,
)

if TYPE_CHECKING:
    from src.pathtracer.core.progressive import ProgressiveRenderer


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "none",
    transfer: TransferFunction = "srgb",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit for display or export.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        transfer: Transfer function ("srgb", "gamma", or "linear").
        gamma: Exponent for the "gamma" transfer.
        exposure: Exposure for exposure tone mapping.

    Returns:
        Array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(
        image,
        tone_map=tone_map,
        transfer=transfer,
        gamma=gamma,
        exposure=exposure,
    )
    return (processed * 255.0 + 0.5).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    transfer: TransferFunction = "srgb",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save a linear image array as an 8-bit PNG.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method.
        transfer: Transfer function.
        gamma: Exponent for the "gamma" transfer.
        exposure: Exposure for exposure tone mapping.
    """
    image_uint8 = image_to_uint8(
        image, tone_map=tone_map, transfer=transfer, gamma=gamma, exposure=exposure
    )
    PILImage.fromarray(image_uint8).save(filepath)


def save_png(
    renderer: ProgressiveRenderer,
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    transfer: TransferFunction = "srgb",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save the current render of a ProgressiveRenderer as an 8-bit PNG."""
    save_png_from_array(
        renderer.get_image_numpy(),
        filepath,
        tone_map=tone_map,
        transfer=transfer,
        gamma=gamma,
        exposure=exposure,
    )


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute the root mean squared error between two images.

    Raises:
        ValueError: If the image shapes differ.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
