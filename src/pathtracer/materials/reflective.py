"""Reflective (perfect mirror) material implementation.

The mirror reflects ``wo`` about the surface normal:
    wi = 2 (wo . n) n - wo

The reflectance is tinted by Schlick's Fresnel approximation, with the
material color acting as the reflectance at normal incidence (F0):
    F(cos) = F0 + (1 - F0) * (1 - cos)^5

A perfect mirror is a Dirac delta in direction space. It is modeled with
pdf = 1 so the integrator's throughput update brdf * |cos| / pdf reduces to
the Fresnel-weighted cosine.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.materials.reflective import sample_reflective
    >>> # Use within a Taichi kernel:
    >>> # sample = sample_reflective(color, wo, normal)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import is_negative_error, reflect
from src.pathtracer.materials.sample import MaterialSample, invalid_sample

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def fresnel_schlick(r0: vec3, cos_theta: ti.f32) -> vec3:
    """Compute Fresnel reflectance with Schlick's approximation.

    Args:
        r0: Reflectance at normal incidence (RGB).
        cos_theta: Cosine of the angle between the direction and the normal.

    Returns:
        The per-channel reflectance.
    """
    one_minus_cos = 1.0 - cos_theta
    return r0 + (vec3(1.0, 1.0, 1.0) - r0) * (one_minus_cos**5)


@ti.func
def sample_reflective(color: vec3, wo: vec3, normal: vec3) -> MaterialSample:
    """Sample the mirror direction of a reflective surface.

    Args:
        color: Reflectance at normal incidence (RGB).
        wo: Direction pointing away from the surface (normalized).
        normal: The surface normal (normalized).

    Returns:
        A MaterialSample with the mirrored direction, Schlick reflectance as
        brdf and pdf = 1, or the invalid sample when wo is behind the surface.
    """
    wo_dot_n = tm.dot(wo, normal)
    result = invalid_sample()
    if not is_negative_error(wo_dot_n):
        result = MaterialSample(
            brdf=fresnel_schlick(color, wo_dot_n),
            sample_direction=reflect(wo, normal, wo_dot_n),
            pdf=1.0,
        )
    return result


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of reflective materials in the scene
MAX_REFLECTIVE_MATERIALS = 256

# Storage for reflective material properties
reflective_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_REFLECTIVE_MATERIALS)
num_reflective_materials = ti.field(dtype=ti.i32, shape=())


def clear_reflective_materials() -> None:
    """Clear all reflective materials."""
    num_reflective_materials[None] = 0


def add_reflective_material(color: tuple[float, float, float]) -> int:
    """Add a reflective material to the material registry.

    Args:
        color: Reflectance at normal incidence as (R, G, B).
            Each component should be in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any color component is outside [0, 1].
    """
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(f"Color component {i} = {component} is outside [0, 1].")

    idx = num_reflective_materials[None]
    if idx >= MAX_REFLECTIVE_MATERIALS:
        raise RuntimeError(
            f"Maximum number of reflective materials ({MAX_REFLECTIVE_MATERIALS}) exceeded"
        )

    reflective_colors[idx] = vec3(color[0], color[1], color[2])
    num_reflective_materials[None] = idx + 1
    return idx


def get_reflective_material_count() -> int:
    """Get the number of reflective materials in the registry."""
    return int(num_reflective_materials[None])


@ti.func
def get_reflective_color(material_idx: ti.i32) -> vec3:
    """Get the color for a reflective material by index."""
    return reflective_colors[material_idx]


@ti.func
def sample_reflective_by_id(material_idx: ti.i32, wo: vec3, normal: vec3) -> MaterialSample:
    """Sample a reflective material looked up from the registry."""
    return sample_reflective(get_reflective_color(material_idx), wo, normal)
