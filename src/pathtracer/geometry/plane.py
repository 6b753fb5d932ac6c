"""Plane primitive: a bounded rectangular patch.

A plane is described by its center ``position`` and an orthonormal basis:

- normal: the facing direction of the patch
- up: the patch's vertical axis
- right: up x normal, the patch's horizontal axis

The patch spans ``[-half_width, half_width]`` along right and
``[-half_height, half_height]`` along up, centered on position.

Ray-plane intersection:
1. Reject rays parallel to the plane (n . d == 0)
2. t = n . (position - origin) / (n . d); reject t < 0
3. Project the hit point (relative to position) onto (right, up)
4. Accept when both coordinates lie inside the half extents

The reported normal is always the configured normal. The patch has no
notion of a back face, so a ray arriving from behind receives a normal
pointing away from it.

Example:
    >>> from src.pathtracer.geometry.plane import make_plane
    >>> # Floor at y = -5 facing up, 8 wide and 6 deep
    >>> floor = make_plane((0, -5, 0), (0, 1, 0), (0, 0, 1), 8.0, 6.0)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, to_basis
from src.pathtracer.geometry.sphere import ShapeIntersection, no_intersection

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Tolerance for validating the plane basis on the host
BASIS_TOLERANCE = 1e-4


@ti.dataclass
class Plane:
    """A bounded rectangular patch with an orthonormal basis.

    Attributes:
        position: Center of the patch (vec3).
        normal: Unit facing direction (vec3).
        up: Unit vertical axis of the patch (vec3).
        right: Unit horizontal axis, up x normal (vec3).
        half_width: Half extent along right.
        half_height: Half extent along up.
    """

    position: vec3
    normal: vec3
    up: vec3
    right: vec3
    half_width: ti.f32
    half_height: ti.f32


def make_plane(
    position: tuple[float, float, float],
    normal: tuple[float, float, float],
    up: tuple[float, float, float],
    width: float,
    height: float,
) -> Plane:
    """Create a plane from its center, basis and full extents.

    Args:
        position: Center of the patch as (x, y, z).
        normal: Unit facing direction.
        up: Unit vertical axis, orthogonal to normal.
        width: Full extent along the horizontal axis.
        height: Full extent along the vertical axis.

    Returns:
        A Plane with right = up x normal and halved extents.

    Raises:
        ValueError: If normal or up is not unit length, if they are not
            orthogonal, or if an extent is not positive.
    """
    n = np.array(normal, dtype=np.float64)
    u = np.array(up, dtype=np.float64)

    if abs(np.linalg.norm(n) - 1.0) > BASIS_TOLERANCE:
        raise ValueError(f"Plane normal {normal} is not unit length")
    if abs(np.linalg.norm(u) - 1.0) > BASIS_TOLERANCE:
        raise ValueError(f"Plane up vector {up} is not unit length")

    right = np.cross(u, n)
    if abs(np.linalg.norm(right) - 1.0) > BASIS_TOLERANCE:
        raise ValueError(f"Plane up {up} and normal {normal} are not orthogonal")
    if width <= 0.0 or height <= 0.0:
        raise ValueError(f"Plane extents must be positive, got {width}x{height}")

    return Plane(
        position=vec3(*position),
        normal=vec3(*n.tolist()),
        up=vec3(*u.tolist()),
        right=vec3(*right.tolist()),
        half_width=width * 0.5,
        half_height=height * 0.5,
    )


@ti.func
def intersect_plane(ray: Ray, plane: Plane) -> ShapeIntersection:
    """Intersect a ray with a bounded plane.

    Args:
        ray: The ray to test. Its direction must be unit length.
        plane: The plane to test against.

    Returns:
        A ShapeIntersection carrying the plane's configured normal, or the
        no-intersection sentinel.
    """
    result = no_intersection()

    denom = tm.dot(plane.normal, ray.direction)
    if ti.abs(denom) > 0.0:
        t = tm.dot(plane.normal, plane.position - ray.origin) / denom
        if t >= 0.0:
            local_hit = ray.origin + t * ray.direction - plane.position
            coords = to_basis(local_hit, plane.right, plane.up, plane.normal)

            if ti.abs(coords.x) <= plane.half_width and ti.abs(coords.y) <= plane.half_height:
                result = ShapeIntersection(t=t, surface_normal=plane.normal)

    return result
