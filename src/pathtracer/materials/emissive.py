"""Emissive (light source) material implementation.

An emissive surface radiates a constant radiance and does not scatter: its
sample function always returns the invalid sample. The integrator checks
emission before sampling and terminates the path on a light, so emitters are
never bounced off.

The emitted radiance is color * intensity, fixed when the material is
registered.
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.materials.sample import MaterialSample, invalid_sample

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def sample_emissive() -> MaterialSample:
    """Emitters never scatter; always returns the invalid sample."""
    return invalid_sample()


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

MAX_EMISSIVE_MATERIALS = 256

emissive_emissions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_EMISSIVE_MATERIALS)
num_emissive_materials = ti.field(dtype=ti.i32, shape=())


def clear_emissive_materials() -> None:
    """Clear all emissive materials."""
    num_emissive_materials[None] = 0


def add_emissive_material(
    color: tuple[float, float, float],
    intensity: float = 1.0,
) -> int:
    """Add an emissive material to the material registry.

    Args:
        color: Emission color as (R, G, B). Components must be non-negative.
        intensity: Scale applied to the color. Must be non-negative.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If a color component or the intensity is negative.
    """
    for i, component in enumerate(color):
        if component < 0.0:
            raise ValueError(f"Emission color component {i} = {component} is negative.")
    if intensity < 0.0:
        raise ValueError(f"Emission intensity = {intensity} is negative.")

    idx = num_emissive_materials[None]
    if idx >= MAX_EMISSIVE_MATERIALS:
        raise RuntimeError(
            f"Maximum number of emissive materials ({MAX_EMISSIVE_MATERIALS}) exceeded"
        )

    emissive_emissions[idx] = vec3(
        color[0] * intensity, color[1] * intensity, color[2] * intensity
    )
    num_emissive_materials[None] = idx + 1
    return idx


def get_emissive_material_count() -> int:
    """Get the number of emissive materials in the registry."""
    return int(num_emissive_materials[None])


@ti.func
def get_emissive_emission(material_idx: ti.i32) -> vec3:
    """Get the emitted radiance for an emissive material by index."""
    return emissive_emissions[material_idx]
