"""Scene storage and nearest-hit scene traversal.

The scene is an ordered list of entities. Each entity pairs one shape
(a sphere or a plane, referenced by type and index into the per-type shape
storage) with one material ID. Shapes and entities are kept in Taichi fields
so that traversal runs inside kernels, and entities refer to shapes and
materials by index rather than by reference.

Traversal is a linear scan in storage order that keeps the smallest
non-negative t. Comparisons are strict, so on an exact tie the entity added
first wins.

The scene also holds the sky radiance returned for rays that escape.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.scene.intersection import (
    ...     add_sphere, add_entity, trace_scene, clear_scene, ShapeType
    ... )
    >>> clear_scene()
    >>> idx = add_sphere((0, 0, 5), 1.0)
    >>> add_entity(ShapeType.SPHERE, idx, material_id=0)
    >>> # Use trace_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray
from src.pathtracer.geometry.plane import Plane, intersect_plane, make_plane
from src.pathtracer.geometry.sphere import (
    ShapeIntersection,
    Sphere,
    intersect_sphere,
    no_intersection,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Material ID of the null material (returned for misses)
NO_MATERIAL = -1

# Upper bound for the closest-hit search
T_MAX = 1e30


class ShapeType(IntEnum):
    """Enumeration of supported shape types."""

    SPHERE = 0
    PLANE = 1


@ti.dataclass
class EntityIntersection:
    """Result of tracing a ray through the whole scene.

    Attributes:
        shape_intersection: The nearest shape hit. t < 0 when nothing was hit.
        material_id: Material ID of the hit entity, or NO_MATERIAL (-1).
    """

    shape_intersection: ShapeIntersection
    material_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024
MAX_PLANES = 1024
MAX_ENTITIES = MAX_SPHERES + MAX_PLANES

# Sphere storage: Structure of Arrays layout
sphere_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Plane storage: Structure of Arrays layout
plane_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_ups = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_rights = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_half_widths = ti.field(dtype=ti.f32, shape=MAX_PLANES)
plane_half_heights = ti.field(dtype=ti.f32, shape=MAX_PLANES)
num_planes = ti.field(dtype=ti.i32, shape=())

# Entity storage, in insertion order
entity_shape_types = ti.field(dtype=ti.i32, shape=MAX_ENTITIES)
entity_shape_indices = ti.field(dtype=ti.i32, shape=MAX_ENTITIES)
entity_material_ids = ti.field(dtype=ti.i32, shape=MAX_ENTITIES)
num_entities = ti.field(dtype=ti.i32, shape=())

# Radiance for rays that escape the scene
sky_radiance = ti.Vector.field(3, dtype=ti.f32, shape=())


def clear_scene() -> None:
    """Clear all shapes and entities and reset the sky to black.

    The field data is not cleared but will be overwritten when new
    primitives are added.
    """
    num_spheres[None] = 0
    num_planes[None] = 0
    num_entities[None] = 0
    sky_radiance[None] = [0.0, 0.0, 0.0]


def set_sky(sky: tuple[float, float, float]) -> None:
    """Set the radiance returned for rays that hit nothing.

    Raises:
        ValueError: If any component is negative.
    """
    for i, component in enumerate(sky):
        if component < 0.0:
            raise ValueError(f"Sky component {i} = {component} is negative.")
    sky_radiance[None] = [sky[0], sky[1], sky[2]]


def get_sky() -> tuple[float, float, float]:
    """Get the sky radiance."""
    sky = sky_radiance[None]
    return (float(sky[0]), float(sky[1]), float(sky[2]))


def add_sphere(position: tuple[float, float, float], radius: float) -> int:
    """Add a sphere to the shape storage.

    Args:
        position: The center of the sphere.
        radius: The radius of the sphere.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the radius is not positive.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_positions[idx] = [position[0], position[1], position[2]]
    sphere_radii[idx] = radius
    num_spheres[None] = idx + 1
    return idx


def add_plane(
    position: tuple[float, float, float],
    normal: tuple[float, float, float],
    up: tuple[float, float, float],
    width: float,
    height: float,
) -> int:
    """Add a bounded plane to the shape storage.

    Args:
        position: Center of the patch.
        normal: Unit facing direction.
        up: Unit vertical axis, orthogonal to normal.
        width: Full extent along up x normal.
        height: Full extent along up.

    Returns:
        The index of the added plane.

    Raises:
        ValueError: If the basis is not orthonormal or an extent is not
            positive (see make_plane).
        RuntimeError: If the maximum number of planes is exceeded.
    """
    plane = make_plane(position, normal, up, width, height)
    idx = num_planes[None]
    if idx >= MAX_PLANES:
        raise RuntimeError(f"Maximum number of planes ({MAX_PLANES}) exceeded")
    plane_positions[idx] = plane.position
    plane_normals[idx] = plane.normal
    plane_ups[idx] = plane.up
    plane_rights[idx] = plane.right
    plane_half_widths[idx] = plane.half_width
    plane_half_heights[idx] = plane.half_height
    num_planes[None] = idx + 1
    return idx


def add_entity(shape_type: ShapeType, shape_index: int, material_id: int) -> int:
    """Append an entity pairing a stored shape with a material.

    Args:
        shape_type: The type of the shape.
        shape_index: Index returned by add_sphere or add_plane.
        material_id: The material ID to attach.

    Returns:
        The index of the entity in traversal order.

    Raises:
        ValueError: If the shape index does not refer to a stored shape.
        RuntimeError: If the maximum number of entities is exceeded.
    """
    if shape_type == ShapeType.SPHERE:
        count = num_spheres[None]
    elif shape_type == ShapeType.PLANE:
        count = num_planes[None]
    else:
        raise ValueError(f"Unknown shape type: {shape_type}")
    if shape_index < 0 or shape_index >= count:
        raise ValueError(f"Invalid {ShapeType(shape_type).name.lower()} index: {shape_index}")

    idx = num_entities[None]
    if idx >= MAX_ENTITIES:
        raise RuntimeError(f"Maximum number of entities ({MAX_ENTITIES}) exceeded")
    entity_shape_types[idx] = int(shape_type)
    entity_shape_indices[idx] = shape_index
    entity_material_ids[idx] = material_id
    num_entities[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_plane_count() -> int:
    """Get the number of planes in the scene."""
    return int(num_planes[None])


def get_entity_count() -> int:
    """Get the number of entities in the scene."""
    return int(num_entities[None])


@ti.func
def _make_miss_record() -> EntityIntersection:
    """Create the EntityIntersection for a ray that hits nothing."""
    return EntityIntersection(shape_intersection=no_intersection(), material_id=NO_MATERIAL)


@ti.func
def intersect_entity(ray: Ray, entity_idx: ti.i32) -> ShapeIntersection:
    """Intersect a ray with the shape of one entity.

    Args:
        ray: The ray to test.
        entity_idx: Index of the entity in traversal order.

    Returns:
        The shape intersection, or the no-intersection sentinel.
    """
    shape_type = entity_shape_types[entity_idx]
    shape_idx = entity_shape_indices[entity_idx]
    result = no_intersection()

    if shape_type == int(ShapeType.SPHERE):
        sphere = Sphere(position=sphere_positions[shape_idx], radius=sphere_radii[shape_idx])
        result = intersect_sphere(ray, sphere)
    elif shape_type == int(ShapeType.PLANE):
        plane = Plane(
            position=plane_positions[shape_idx],
            normal=plane_normals[shape_idx],
            up=plane_ups[shape_idx],
            right=plane_rights[shape_idx],
            half_width=plane_half_widths[shape_idx],
            half_height=plane_half_heights[shape_idx],
        )
        result = intersect_plane(ray, plane)

    return result


@ti.func
def trace_scene(ray: Ray) -> EntityIntersection:
    """Find the nearest entity hit along a ray.

    Args:
        ray: The ray to trace. Its direction must be unit length.

    Returns:
        The nearest hit with its material ID, or a miss record with
        t = -1 and material_id = NO_MATERIAL.
    """
    closest_t = T_MAX
    result = _make_miss_record()

    for i in range(num_entities[None]):
        hit = intersect_entity(ray, i)
        if hit.t >= 0.0 and hit.t < closest_t:
            closest_t = hit.t
            result = EntityIntersection(shape_intersection=hit, material_id=entity_material_ids[i])

    return result


@ti.func
def get_sky_radiance() -> vec3:
    """Get the sky radiance inside a kernel."""
    return sky_radiance[None]
