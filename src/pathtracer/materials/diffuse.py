"""Diffuse (Lambertian) material implementation.

The diffuse BRDF is constant over the hemisphere:
    f_r(wi, wo) = color / pi

Directions are drawn uniformly over the hemisphere around the surface normal
with the inversion method. A point is drawn on the unit sphere from two
uniform samples (s, t):

    cos(theta) = 1 - 2t
    phi = 2 * pi * s

and folded into the hemisphere by taking |cos(theta)| as the component along
the normal. Folding a uniform sphere sample doubles the density, so

    pdf(wi) = 1 / (2 * pi)

Outgoing directions on the back side of the surface are rejected with the
invalid sample.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.materials.diffuse import sample_diffuse
    >>> # Use within a Taichi kernel:
    >>> # sample = sample_diffuse(color, wo, normal)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import build_onb_from_normal, from_basis, is_negative_error
from src.pathtracer.core.sampler import get_sample_2d
from src.pathtracer.materials.sample import MaterialSample, invalid_sample

# Type alias for 3D vectors
vec3 = tm.vec3

ONE_OVER_PI = 1.0 / tm.pi


@ti.func
def eval_diffuse(color: vec3) -> vec3:
    """Evaluate the diffuse BRDF (color / pi)."""
    return color * ONE_OVER_PI


@ti.func
def sample_uniform_hemisphere(normal: vec3) -> vec3:
    """Draw a direction uniformly over the hemisphere around a normal.

    Args:
        normal: The surface normal (normalized).

    Returns:
        A unit direction with a non-negative dot product against normal.
    """
    sample_2d = get_sample_2d()
    cos_theta = 1.0 - 2.0 * sample_2d.y
    phi = 2.0 * tm.pi * sample_2d.x
    sin_theta = ti.sqrt(ti.max(0.0, 1.0 - cos_theta * cos_theta))
    local_dir = vec3(sin_theta * ti.cos(phi), sin_theta * ti.sin(phi), ti.abs(cos_theta))

    tangent, bitangent, n = build_onb_from_normal(normal)
    return from_basis(local_dir, tangent, bitangent, n)


@ti.func
def sample_diffuse(color: vec3, wo: vec3, normal: vec3) -> MaterialSample:
    """Sample an incoming direction for a diffuse surface.

    Args:
        color: The diffuse reflectance (RGB).
        wo: Direction pointing away from the surface toward the previous
            path vertex (normalized).
        normal: The surface normal (normalized).

    Returns:
        A MaterialSample with brdf = color / pi and pdf = 1 / (2 pi), or the
        invalid sample when wo is behind the surface.
    """
    result = invalid_sample()
    if not is_negative_error(tm.dot(wo, normal)):
        result = MaterialSample(
            brdf=eval_diffuse(color),
            sample_direction=sample_uniform_hemisphere(normal),
            pdf=0.5 * ONE_OVER_PI,
        )
    return result


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of diffuse materials in the scene
MAX_DIFFUSE_MATERIALS = 256

# Storage for diffuse material properties
diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_DIFFUSE_MATERIALS)
num_diffuse_materials = ti.field(dtype=ti.i32, shape=())


def clear_diffuse_materials() -> None:
    """Clear all diffuse materials."""
    num_diffuse_materials[None] = 0


def add_diffuse_material(color: tuple[float, float, float]) -> int:
    """Add a diffuse material to the material registry.

    Args:
        color: The diffuse reflectance as (R, G, B).
            Each component should be in [0, 1] for energy conservation.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any color component is outside [0, 1].
    """
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Color component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    idx = num_diffuse_materials[None]
    if idx >= MAX_DIFFUSE_MATERIALS:
        raise RuntimeError(
            f"Maximum number of diffuse materials ({MAX_DIFFUSE_MATERIALS}) exceeded"
        )

    diffuse_colors[idx] = vec3(color[0], color[1], color[2])
    num_diffuse_materials[None] = idx + 1
    return idx


def get_diffuse_material_count() -> int:
    """Get the number of diffuse materials in the registry."""
    return int(num_diffuse_materials[None])


@ti.func
def get_diffuse_color(material_idx: ti.i32) -> vec3:
    """Get the color for a diffuse material by index."""
    return diffuse_colors[material_idx]


@ti.func
def sample_diffuse_by_id(material_idx: ti.i32, wo: vec3, normal: vec3) -> MaterialSample:
    """Sample a diffuse material looked up from the registry."""
    return sample_diffuse(get_diffuse_color(material_idx), wo, normal)
