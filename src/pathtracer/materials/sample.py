"""Material sample record shared by every material model.

A material sample bundles the BSDF value for a sampled incoming direction
with the direction itself and its probability density. A sample with zero
pdf and a zero direction is the "invalid" sentinel: the path terminates
because no valid scattering event exists.
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import equal_error, is_zero

vec3 = tm.vec3


@ti.dataclass
class MaterialSample:
    """A sampled scattering event.

    Attributes:
        brdf: BSDF value for the sampled direction (RGB).
        sample_direction: Sampled incoming light direction (unit length).
        pdf: Probability density of the sampled direction. Specular lobes
            report their selection probability instead of a true density.
    """

    brdf: vec3
    sample_direction: vec3
    pdf: ti.f32


@ti.func
def invalid_sample() -> MaterialSample:
    """Create the sentinel sample that terminates a path."""
    return MaterialSample(
        brdf=vec3(0.0, 0.0, 0.0),
        sample_direction=vec3(0.0, 0.0, 0.0),
        pdf=0.0,
    )


@ti.func
def is_invalid_sample(sample: MaterialSample) -> ti.i32:
    """Check whether a sample carries no valid scattering event."""
    return equal_error(sample.pdf, 0.0) or is_zero(sample.sample_direction)
