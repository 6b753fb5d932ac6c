"""Matplotlib-based preview of rendered images.

The film stores linear radiance that can exceed 1 (the area light of the
demo scene is about 28). Before display an image goes through:

1. Optional tone mapping (Reinhard or exposure) to compress HDR values
2. A transfer function: the sRGB curve, a plain power-law gamma, or none
3. Clamping to [0, 1]

Example:
    >>> from src.pathtracer.preview.display import show_preview
    >>> from src.pathtracer.core.progressive import ProgressiveRenderer
    >>>
    >>> renderer = ProgressiveRenderer(400, 300)
    >>> renderer.render(64)
    >>> show_preview(renderer, tone_map="reinhard")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

from src.pathtracer.core.film import to_srgb

if TYPE_CHECKING:
    from src.pathtracer.core.progressive import ProgressiveRenderer


ToneMapMethod = Literal["none", "reinhard", "exposure"]
TransferFunction = Literal["srgb", "gamma", "linear"]


def tone_map_reinhard(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Apply Reinhard tone mapping: L / (1 + L).

    Args:
        image: Linear HDR image array of shape (H, W, 3).

    Returns:
        Tone mapped image in [0, 1).
    """
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.float32],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Apply exposure tone mapping: 1 - exp(-L * exposure).

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        exposure: Brightness scale. Higher values brighten the image.

    Returns:
        Tone mapped image in [0, 1).
    """
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def apply_transfer(
    image: npt.NDArray[np.float32],
    transfer: TransferFunction = "srgb",
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Encode linear values for display.

    Args:
        image: Linear image array; values are clamped to [0, 1].
        transfer: "srgb" for the piecewise sRGB curve, "gamma" for
            in^(1/gamma), "linear" for no encoding.
        gamma: Exponent used by the "gamma" transfer.

    Returns:
        Encoded image in [0, 1].

    Raises:
        ValueError: If the transfer function is unknown or gamma is not
            positive.
    """
    image = np.clip(image, 0.0, 1.0)
    if transfer == "srgb":
        result = to_srgb(image)
    elif transfer == "gamma":
        if gamma <= 0.0:
            raise ValueError(f"Gamma must be positive, got {gamma}")
        result = np.power(image, 1.0 / gamma)
    elif transfer == "linear":
        result = image
    else:
        raise ValueError(f"Unknown transfer function: {transfer}")
    return result.astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    tone_map: ToneMapMethod = "none",
    transfer: TransferFunction = "srgb",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Run the full display pipeline on a linear image.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        transfer: Transfer function ("srgb", "gamma", or "linear").
        gamma: Exponent for the "gamma" transfer.
        exposure: Exposure for exposure tone mapping.

    Returns:
        Processed image in [0, 1].

    Raises:
        ValueError: If the tone mapping method is unknown.
    """
    result = image.copy()

    if tone_map == "reinhard":
        result = tone_map_reinhard(result)
    elif tone_map == "exposure":
        result = tone_map_exposure(result, exposure)
    elif tone_map != "none":
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    return apply_transfer(result, transfer, gamma)


def show_preview(
    renderer: ProgressiveRenderer,
    *,
    tone_map: ToneMapMethod = "none",
    transfer: TransferFunction = "srgb",
    exposure: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display the current render in a Matplotlib window.

    The title shows the sample count unless a custom title is given.

    Args:
        renderer: The ProgressiveRenderer to display.
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        transfer: Transfer function ("srgb", "gamma", or "linear").
        exposure: Exposure for exposure tone mapping.
        title: Custom title.
        figsize: Figure size in inches (width, height).
        block: Whether to block until the window is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(
        renderer.get_image_numpy(),
        tone_map=tone_map,
        transfer=transfer,
        exposure=exposure,
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {renderer.sample_count} SPP"
        if tone_map != "none":
            title += f" ({tone_map})"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
