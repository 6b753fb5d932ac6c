"""Core rendering module.

Components:
    ray: Ray record, vector helpers, reflection/refraction, tolerances
    sampler: Uniform random samples for Monte Carlo estimation
    integrator: Path tracing of a single camera ray
    film: Per-pixel radiance accumulation and image output
    renderer: The render loop over every pixel
    progressive: Batched rendering with progress reporting

All per-ray work runs in Taichi kernels.
"""

from .ray import (
    ERROR,
    Ray,
    build_onb_from_normal,
    cross,
    dot,
    equal_error,
    from_basis,
    greater_error,
    is_negative_error,
    is_positive_error,
    is_zero,
    length,
    less_error,
    make_ray,
    normalize,
    ray_at,
    reflect,
    refract,
    to_basis,
    vec3,
)
from .sampler import get_sample, get_sample_2d

# Note: integrator, film, renderer and progressive are NOT imported here to
# avoid circular imports with the scene package. Import them directly, e.g.
#   from src.pathtracer.core.progressive import ProgressiveRenderer

__all__ = [
    "ERROR",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "dot",
    "cross",
    "normalize",
    "reflect",
    "refract",
    "build_onb_from_normal",
    "from_basis",
    "to_basis",
    "equal_error",
    "greater_error",
    "less_error",
    "is_positive_error",
    "is_negative_error",
    "is_zero",
    "get_sample",
    "get_sample_2d",
]
