"""Preview module for display and export.

Components:
    display: Tone mapping, transfer functions and a Matplotlib preview
    export: PNG export helpers and an RMSE metric

Example:
    >>> from src.pathtracer.preview import show_preview, save_png
    >>> from src.pathtracer.core.progressive import ProgressiveRenderer
    >>>
    >>> renderer = ProgressiveRenderer(400, 300)
    >>> renderer.render(64)
    >>> show_preview(renderer, tone_map="reinhard")
    >>> save_png(renderer, "output.png")
"""

from src.pathtracer.preview.display import (
    ToneMapMethod,
    TransferFunction,
    apply_transfer,
    process_image_for_display,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from src.pathtracer.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    # Display functions
    "show_preview",
    # Tone mapping
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_transfer",
    "process_image_for_display",
    "ToneMapMethod",
    "TransferFunction",
    # Export functions
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
