"""Ray data structure and vector utilities for the path tracer.

This module provides the Ray dataclass, the vector helpers used by the
geometry and material code, and the tolerance comparisons applied to every
sign or zero test in the transport math.

All comparisons against zero go through the ``*_error`` helpers, which use a
fixed tolerance (``ERROR``) so that grazing angles and floating-point noise do
not flip a branch.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Tolerance used by all sign and zero comparisons
ERROR = 1e-4


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Must be unit length
            before the ray is handed to intersection or material code.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Tolerance Comparisons
# =============================================================================


@ti.func
def equal_error(a: ti.f32, b: ti.f32) -> ti.i32:
    """Check whether two floats are equal within ERROR."""
    return ti.abs(a - b) < ERROR


@ti.func
def greater_error(a: ti.f32, b: ti.f32) -> ti.i32:
    """Check whether a exceeds b by more than ERROR."""
    return a > b + ERROR


@ti.func
def less_error(a: ti.f32, b: ti.f32) -> ti.i32:
    """Check whether a is below b by more than ERROR."""
    return a < b - ERROR


@ti.func
def is_positive_error(a: ti.f32) -> ti.i32:
    """Check whether a is positive beyond the tolerance."""
    return a > ERROR


@ti.func
def is_negative_error(a: ti.f32) -> ti.i32:
    """Check whether a is negative beyond the tolerance."""
    return a < -ERROR


@ti.func
def is_zero(v: vec3) -> ti.i32:
    """Check if every component of a vector is zero within ERROR.

    Args:
        v: The vector to check.

    Returns:
        1 if all components are within ERROR of zero, 0 otherwise.
    """
    return ti.abs(v.x) < ERROR and ti.abs(v.y) < ERROR and ti.abs(v.z) < ERROR


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product of two vectors."""
    return tm.cross(a, b)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The vector must not be zero length; normalizing a zero vector is a
    contract violation and produces NaNs.
    """
    return tm.normalize(v)


@ti.func
def reflect(wo: vec3, normal: vec3, wo_dot_n: ti.f32) -> vec3:
    """Mirror a direction about a normal.

    Unlike the textbook form that reflects an incoming direction, this takes
    ``wo`` pointing away from the surface and returns the mirrored direction
    also pointing away from the surface, so ``reflect(wo, n) . n == wo . n``.

    Args:
        wo: Direction pointing away from the surface (normalized).
        normal: The surface normal (normalized).
        wo_dot_n: The precomputed dot product of wo and normal.

    Returns:
        The mirrored direction 2 (wo . n) n - wo.
    """
    return normal * (2.0 * wo_dot_n) - wo


@ti.func
def refract(wo: vec3, normal: vec3, eta: ti.f32, wo_dot_n: ti.f32) -> vec3:
    """Refract a direction through a surface using Snell's law.

    ``wo`` points away from the surface on the incident side and ``normal``
    is on the same side as ``wo`` (so ``wo_dot_n`` is positive). The returned
    direction leaves the surface on the opposite side.

    Args:
        wo: Direction pointing away from the surface (normalized).
        normal: The surface normal on the side of wo (normalized).
        eta: Ratio of refractive indices n_incident / n_transmitted.
        wo_dot_n: The precomputed dot product of wo and normal.

    Returns:
        The refracted direction, or a zero vector when the transmitted
        cosine would be imaginary (total internal reflection).
    """
    sin2_theta_t = eta * eta * (1.0 - wo_dot_n * wo_dot_n)
    result = vec3(0.0, 0.0, 0.0)
    if less_error(sin2_theta_t, 1.0):
        cos_theta_t = ti.sqrt(1.0 - sin2_theta_t)
        result = -wo * eta + normal * (eta * wo_dot_n - cos_theta_t)
    return result


# =============================================================================
# Basis Utilities
# =============================================================================


@ti.func
def build_onb_from_normal(normal: vec3):
    """Build an orthonormal basis with the normal as the z axis.

    Args:
        normal: The surface normal (should be normalized).

    Returns:
        A tuple (tangent, bitangent, normal) forming an orthonormal basis.
    """
    # Choose a vector not parallel to normal
    a = vec3(1.0, 0.0, 0.0)
    if ti.abs(normal.x) > 0.9:
        a = vec3(0.0, 1.0, 0.0)
    tangent = normalize(cross(a, normal))
    bitangent = cross(normal, tangent)
    return tangent, bitangent, normal


@ti.func
def from_basis(local: vec3, x_axis: vec3, y_axis: vec3, z_axis: vec3) -> vec3:
    """Express a local-frame vector in world coordinates."""
    return local.x * x_axis + local.y * y_axis + local.z * z_axis


@ti.func
def to_basis(v: vec3, x_axis: vec3, y_axis: vec3, z_axis: vec3) -> vec3:
    """Project a world-space vector onto an orthonormal basis.

    Returns:
        The coordinates (v . x_axis, v . y_axis, v . z_axis).
    """
    return vec3(tm.dot(v, x_axis), tm.dot(v, y_axis), tm.dot(v, z_axis))
