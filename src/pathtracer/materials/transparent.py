"""Transparent (dielectric) material implementation.

This module implements a smooth dielectric interface such as glass or water.
Light arriving at the interface is either reflected or transmitted; the split
is given by the exact dielectric Fresnel equations for unpolarized light.

Key physics:
    - Snell's law for refraction: n_i * sin(theta_i) = n_t * sin(theta_t)
    - Exact Fresnel reflectance (Walter et al. closed form)
    - Total internal reflection when sin(theta_t) > 1, folded into F = 1

Only one lobe is followed per sample. A uniform draw picks reflection with
probability F and transmission with probability 1 - F, and the returned pdf
is that selection probability.

Orientation: ``wo . n > 0`` means the path arrives from outside the medium.
When ``wo . n < 0`` the path is inside, so the normal and cosine are negated
and the index ratio inverted. Downstream code always works with a positive
cosine.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.materials.transparent import sample_transparent
    >>> # Use within a Taichi kernel:
    >>> # sample = sample_transparent(color, ior, wo, normal)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import equal_error, is_positive_error, reflect, refract
from src.pathtracer.core.sampler import get_sample
from src.pathtracer.materials.sample import MaterialSample, invalid_sample

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def fresnel_dielectric(relative_ior: ti.f32, cos_theta: ti.f32) -> ti.f32:
    """Compute the exact dielectric Fresnel reflectance.

    Uses the closed form
        g = sqrt(eta^2 + c^2 - 1)
        F = 1/2 * ((g - c) / (g + c))^2
              * (1 + ((c (g + c) - 1) / (c (g - c) + 1))^2)

    where eta is the relative index n_t / n_i and c the incident cosine.

    Args:
        relative_ior: Index of the transmitted side over the incident side.
        cos_theta: Cosine of the incident angle (positive).

    Returns:
        The reflectance in [0, 1]. Returns 1 on total internal reflection
        or when the expression degenerates.
    """
    result = 1.0
    g_squared = relative_ior * relative_ior + cos_theta * cos_theta - 1.0
    if is_positive_error(g_squared):
        g = ti.sqrt(g_squared)
        first = (g - cos_theta) / (g + cos_theta)
        first = 0.5 * first * first

        denom = (g - cos_theta) * cos_theta + 1.0
        if not equal_error(denom, 0.0):
            second = ((g + cos_theta) * cos_theta - 1.0) / denom
            result = first * (1.0 + second * second)
    return result


@ti.func
def sample_transparent(color: vec3, ior: ti.f32, wo: vec3, normal: vec3) -> MaterialSample:
    """Sample reflection or transmission at a dielectric interface.

    Args:
        color: Tint of the material (RGB).
        ior: Index of refraction of the medium.
        wo: Direction pointing away from the surface (normalized).
        normal: The geometric surface normal, pointing out of the medium.

    Returns:
        A MaterialSample for the chosen lobe, or the invalid sample at
        grazing incidence or for a degenerate transmitted direction.
    """
    result = invalid_sample()
    wo_dot_n = tm.dot(wo, normal)

    if not equal_error(wo_dot_n, 0.0):
        # eta = n_incident / n_transmitted
        eta = 1.0 / ior
        n = normal
        if wo_dot_n < 0.0:
            eta = ior
            n = -normal
            wo_dot_n = -wo_dot_n

        fresnel = fresnel_dielectric(1.0 / eta, wo_dot_n)

        if get_sample() < fresnel:
            result = MaterialSample(
                brdf=color * (fresnel / wo_dot_n),
                sample_direction=reflect(wo, n, wo_dot_n),
                pdf=fresnel,
            )
        else:
            wi = refract(wo, n, eta, wo_dot_n)
            wi_dot_n = ti.abs(tm.dot(wi, normal))
            if not equal_error(wi_dot_n, 0.0):
                result = MaterialSample(
                    brdf=color * (fresnel * eta * eta / wi_dot_n),
                    sample_direction=wi,
                    pdf=1.0 - fresnel,
                )

    return result


@ti.func
def will_reflect(ior: ti.f32, wo: vec3, normal: vec3) -> ti.i32:
    """Determine if total internal reflection occurs for wo.

    Args:
        ior: Index of refraction of the medium.
        wo: Direction pointing away from the surface (normalized).
        normal: The geometric surface normal.

    Returns:
        1 if no transmitted direction exists, 0 otherwise.
    """
    wo_dot_n = tm.dot(wo, normal)
    eta = 1.0 / ior
    if wo_dot_n < 0.0:
        eta = ior
        wo_dot_n = -wo_dot_n
    return fresnel_dielectric(1.0 / eta, wo_dot_n) >= 1.0


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of transparent materials in the scene
MAX_TRANSPARENT_MATERIALS = 256

# Storage for transparent material properties
transparent_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRANSPARENT_MATERIALS)
transparent_iors = ti.field(dtype=ti.f32, shape=MAX_TRANSPARENT_MATERIALS)
num_transparent_materials = ti.field(dtype=ti.i32, shape=())


def clear_transparent_materials() -> None:
    """Clear all transparent materials."""
    num_transparent_materials[None] = 0


def add_transparent_material(
    color: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ior: float = 1.5,
) -> int:
    """Add a transparent material to the material registry.

    Args:
        color: Tint as (R, G, B), each component in [0, 1].
        ior: Index of refraction. Must be >= 1.0.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If a color component is outside [0, 1] or IOR < 1.
    """
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(f"Color component {i} = {component} is outside [0, 1].")
    if ior < 1.0:
        raise ValueError(
            f"Index of refraction = {ior} is less than 1.0. "
            "IOR must be >= 1.0 for physically meaningful materials."
        )

    idx = num_transparent_materials[None]
    if idx >= MAX_TRANSPARENT_MATERIALS:
        raise RuntimeError(
            f"Maximum number of transparent materials ({MAX_TRANSPARENT_MATERIALS}) exceeded"
        )

    transparent_colors[idx] = vec3(color[0], color[1], color[2])
    transparent_iors[idx] = ior
    num_transparent_materials[None] = idx + 1
    return idx


def get_transparent_material_count() -> int:
    """Get the number of transparent materials in the registry."""
    return int(num_transparent_materials[None])


@ti.func
def get_transparent_ior(material_idx: ti.i32) -> ti.f32:
    """Get the IOR for a transparent material by index."""
    return transparent_iors[material_idx]


@ti.func
def sample_transparent_by_id(material_idx: ti.i32, wo: vec3, normal: vec3) -> MaterialSample:
    """Sample a transparent material looked up from the registry."""
    return sample_transparent(
        transparent_colors[material_idx], transparent_iors[material_idx], wo, normal
    )
