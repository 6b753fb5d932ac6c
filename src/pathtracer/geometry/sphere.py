"""Sphere primitive and the shape intersection record.

The sphere test solves the ray-sphere quadratic in the sphere's local frame.
Because ray directions are unit length, the quadratic's leading coefficient
is exactly 1:

    t^2 + b*t + c = 0
    b = 2 * dot(o, d)
    c = dot(o, o) - radius^2
    o = ray_origin - center

The nearer non-negative root wins. If only the far root is non-negative the
ray started inside the sphere, and that root is used instead.

A miss is reported through the intersection record itself (``t < 0``), never
through an exception.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.geometry.sphere import Sphere, intersect_sphere
    >>> sphere = Sphere(position=ti.math.vec3(0, 0, 5), radius=1.0)
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class ShapeIntersection:
    """Result of intersecting a ray with one shape.

    Attributes:
        t: Distance along the ray to the hit. Negative means no intersection.
        surface_normal: Unit surface normal at the hit. Only meaningful when
            t >= 0.
    """

    t: ti.f32
    surface_normal: vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center position and radius.

    Attributes:
        position: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    position: vec3
    radius: ti.f32


@ti.func
def no_intersection() -> ShapeIntersection:
    """Create the sentinel record for "no intersection" (t = -1)."""
    return ShapeIntersection(t=-1.0, surface_normal=vec3(0.0, 0.0, 0.0))


@ti.func
def intersect_sphere(ray: Ray, sphere: Sphere) -> ShapeIntersection:
    """Intersect a ray with a sphere.

    Args:
        ray: The ray to test. Its direction must be unit length.
        sphere: The sphere to test against.

    Returns:
        A ShapeIntersection with the nearest non-negative t and the outward
        unit normal, or the no-intersection sentinel.
    """
    translated_origin = ray.origin - sphere.position

    # a == 1 for a unit direction
    b = 2.0 * tm.dot(translated_origin, ray.direction)
    c = tm.dot(translated_origin, translated_origin) - sphere.radius * sphere.radius
    disc = b * b - 4.0 * c

    result = no_intersection()

    if disc >= 0.0:
        sqrt_disc = ti.sqrt(disc)
        t_near = (-b - sqrt_disc) * 0.5
        t_far = (-b + sqrt_disc) * 0.5

        t = -1.0
        if t_near >= 0.0:
            t = t_near
        elif t_far >= 0.0:
            # Ray origin is inside the sphere
            t = t_far

        if t >= 0.0:
            hit_point = ray.origin + t * ray.direction
            result = ShapeIntersection(
                t=t,
                surface_normal=tm.normalize(hit_point - sphere.position),
            )

    return result


@ti.func
def make_sphere(position: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(position=position, radius=radius)
