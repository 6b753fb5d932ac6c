"""Path tracing integrator for Monte Carlo light transport.

This module estimates the radiance arriving along a camera ray by following
a single path through the scene:

    - A ray that escapes returns throughput * sky radiance
    - A ray that hits an emitter returns throughput * emission
    - Otherwise the surface material picks the next direction and the
      throughput is scaled by brdf * |wi . n| / pdf
    - An invalid material sample (pdf ~ 0 or zero direction) absorbs the path

Paths are cut after MAX_DEPTH bounces and contribute nothing in that case.
There is no Russian roulette, so energy carried by longer paths is dropped
(the estimator is biased low for deep paths).

Each bounce starts the next ray at hit + RAY_OFFSET * wi so that the
new ray does not immediately re-hit the surface it left.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.core.integrator import render_pixel_sample
    >>> from src.pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager(sky=(0.05, 0.05, 0.1))
    >>> render_pixel_sample((0, 0, 0), (0, 0, 1))  # empty scene: the sky radiance
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, is_zero, make_ray, ray_at
from src.pathtracer.materials.sample import is_invalid_sample
from src.pathtracer.scene.intersection import get_sky_radiance, trace_scene
from src.pathtracer.scene.manager import get_emission, sample_material

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum number of scene intersections per path
MAX_DEPTH = 8

# Distance along the new direction used to start the next ray
RAY_OFFSET = 0.001


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def trace_ray(camera_ray: Ray) -> vec3:
    """Estimate the radiance arriving along a camera ray.

    Args:
        camera_ray: The primary ray. Its direction must be unit length.

    Returns:
        The radiance estimate (RGB) for this path sample.
    """
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    origin = camera_ray.origin
    direction = camera_ray.direction

    # Taichi has no break inside ti.func loops
    active = 1

    for _ in range(MAX_DEPTH):
        if active == 1:
            ray = make_ray(origin, direction)
            hit = trace_scene(ray)

            if hit.shape_intersection.t < 0.0:
                radiance = throughput * get_sky_radiance()
                active = 0
            else:
                emission = get_emission(hit.material_id)
                if not is_zero(emission):
                    radiance = throughput * emission
                    active = 0
                else:
                    normal = hit.shape_intersection.surface_normal
                    wo = -direction
                    sample = sample_material(hit.material_id, wo, normal)

                    if is_invalid_sample(sample):
                        active = 0
                    else:
                        wi = sample.sample_direction
                        cos_theta = ti.abs(tm.dot(wi, normal))
                        throughput *= sample.brdf * (cos_theta / sample.pdf)

                        hit_point = ray_at(ray, hit.shape_intersection.t)
                        origin = hit_point + RAY_OFFSET * wi
                        direction = wi

    return radiance


# =============================================================================
# Single-Sample Entry Point
# =============================================================================


@ti.kernel
def _render_pixel_sample(origin: vec3, direction: vec3) -> vec3:
    return trace_ray(make_ray(origin, direction))


def render_pixel_sample(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Trace one path from Python scope.

    This is meant for tests and debugging. Full images are rendered by
    the render loop in src.pathtracer.core.renderer.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (normalized before tracing).

    Returns:
        Tuple of (R, G, B) radiance.

    Raises:
        ValueError: If the direction is the zero vector.
    """
    d = np.array(direction, dtype=np.float64)
    length = np.linalg.norm(d)
    if length == 0.0:
        raise ValueError("Ray direction must be non-zero")
    d = d / length

    color = _render_pixel_sample(
        vec3(float(origin[0]), float(origin[1]), float(origin[2])),
        vec3(*d.tolist()),
    )
    return (float(color[0]), float(color[1]), float(color[2]))
