"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, ShapeIntersection record and the
        no-intersection sentinel (t = -1)
    plane: Bounded rectangular plane patch

All intersection routines are Taichi functions (@ti.func). They return the
nearest non-negative hit distance and the surface normal, or t = -1 on a
miss.
"""

from .plane import Plane, intersect_plane, make_plane
from .sphere import ShapeIntersection, Sphere, intersect_sphere, make_sphere, no_intersection

__all__ = [
    "ShapeIntersection",
    "no_intersection",
    "Sphere",
    "intersect_sphere",
    "make_sphere",
    "Plane",
    "intersect_plane",
    "make_plane",
]
