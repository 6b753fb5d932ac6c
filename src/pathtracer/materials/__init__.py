"""Materials module for light scattering models.

Components:
    sample: MaterialSample record and the invalid sample sentinel
    diffuse: Lambertian reflection with uniform hemisphere sampling
    reflective: Perfect mirror with Schlick Fresnel
    transparent: Smooth dielectric with exact Fresnel reflect/refract choice
    emissive: Light sources; never scatter

Each material type keeps a fixed-capacity registry in Taichi fields
(add_*, clear_*, get_*_count) and a sample_*_by_id function used by the
scene-level dispatch.
"""

from .diffuse import (
    add_diffuse_material,
    clear_diffuse_materials,
    eval_diffuse,
    get_diffuse_color,
    get_diffuse_material_count,
    sample_diffuse,
    sample_diffuse_by_id,
    sample_uniform_hemisphere,
)
from .emissive import (
    add_emissive_material,
    clear_emissive_materials,
    get_emissive_emission,
    get_emissive_material_count,
    sample_emissive,
)
from .reflective import (
    add_reflective_material,
    clear_reflective_materials,
    fresnel_schlick,
    get_reflective_color,
    get_reflective_material_count,
    sample_reflective,
    sample_reflective_by_id,
)
from .sample import MaterialSample, invalid_sample, is_invalid_sample
from .transparent import (
    add_transparent_material,
    clear_transparent_materials,
    fresnel_dielectric,
    get_transparent_ior,
    get_transparent_material_count,
    sample_transparent,
    sample_transparent_by_id,
    will_reflect,
)

__all__ = [
    # Sample record
    "MaterialSample",
    "invalid_sample",
    "is_invalid_sample",
    # Diffuse
    "eval_diffuse",
    "sample_uniform_hemisphere",
    "sample_diffuse",
    "sample_diffuse_by_id",
    "add_diffuse_material",
    "clear_diffuse_materials",
    "get_diffuse_material_count",
    "get_diffuse_color",
    # Reflective
    "fresnel_schlick",
    "sample_reflective",
    "sample_reflective_by_id",
    "add_reflective_material",
    "clear_reflective_materials",
    "get_reflective_material_count",
    "get_reflective_color",
    # Transparent
    "fresnel_dielectric",
    "sample_transparent",
    "sample_transparent_by_id",
    "will_reflect",
    "add_transparent_material",
    "clear_transparent_materials",
    "get_transparent_material_count",
    "get_transparent_ior",
    # Emissive
    "sample_emissive",
    "add_emissive_material",
    "clear_emissive_materials",
    "get_emissive_material_count",
    "get_emissive_emission",
]
