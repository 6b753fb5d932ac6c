"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (nearest root, outward normal)
- Ray missing sphere
- Ray starting inside sphere (far root)
- Sphere entirely behind the ray
- The no-intersection sentinel
"""

import taichi as ti


def _intersect(origin, direction, center, radius):
    """Run intersect_sphere in a test kernel and return (t, normal)."""
    from src.pathtracer.core.ray import make_ray, vec3
    from src.pathtracer.geometry.sphere import Sphere, intersect_sphere

    t_val = ti.field(dtype=ti.f32, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel():
        ray = make_ray(
            vec3(origin[0], origin[1], origin[2]),
            vec3(direction[0], direction[1], direction[2]).normalized(),
        )
        sphere = Sphere(position=vec3(center[0], center[1], center[2]), radius=radius)
        hit = intersect_sphere(ray, sphere)
        t_val[None] = hit.t
        normal[None] = hit.surface_normal

    test_kernel()
    n = normal[None]
    return float(t_val[None]), (float(n[0]), float(n[1]), float(n[2]))


class TestSphereBasics:
    """Tests for Sphere dataclass and sentinel."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from src.pathtracer.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5)
            center_result[None] = sphere.position
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6

    def test_no_intersection_sentinel(self):
        """Test no_intersection reports t = -1."""
        from src.pathtracer.geometry.sphere import no_intersection

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            t_val[None] = no_intersection().t

        test_kernel()
        assert t_val[None] == -1.0


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_along_center_line(self):
        """Test a ray toward the center hits at distance - radius."""
        t, n = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 5.0), 1.0)
        assert abs(t - 4.0) < 1e-4
        # Outward unit normal faces the ray origin
        assert abs(n[0]) < 1e-5
        assert abs(n[1]) < 1e-5
        assert abs(n[2] + 1.0) < 1e-5

    def test_round_trip_from_two_radii(self):
        """Test a ray from (0, 0, -2r) toward +z hits at t = r."""
        for r in (0.5, 1.0, 3.0):
            t, n = _intersect((0.0, 0.0, -2.0 * r), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), r)
            assert abs(t - r) < 1e-4
            assert abs(n[2] + 1.0) < 1e-5

    def test_miss(self):
        """Test a ray passing beside the sphere misses."""
        t, _ = _intersect((5.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 5.0), 1.0)
        assert t < 0.0

    def test_origin_inside_sphere(self):
        """Test a ray from the center reports the far root t = r."""
        t, n = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 2.0)
        assert abs(t - 2.0) < 1e-4
        # Normal still points out of the sphere
        assert abs(n[2] - 1.0) < 1e-5

    def test_sphere_behind_ray(self):
        """Test a sphere entirely behind the origin is not hit."""
        t, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, -5.0), 1.0)
        assert t < 0.0

    def test_normal_is_unit_length(self):
        """Test the normal is unit length for an off-center hit."""
        t, n = _intersect((0.5, 0.3, -10.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 2.0)
        assert t > 0.0
        assert abs(n[0] ** 2 + n[1] ** 2 + n[2] ** 2 - 1.0) < 1e-5
