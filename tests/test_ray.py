"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Tolerance comparisons and is_zero
- Vector helpers (dot, cross, normalize, length)
- reflect / refract conventions
- Orthonormal basis helpers (to_basis / from_basis)
"""

import math

import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from src.pathtracer.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_positive_t(self):
        """Test ray_at computes the point origin + t * direction."""
        from src.pathtracer.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(1.0, 0.0, 0.0))
            result[None] = ray_at(ray, 5.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 5.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6


class TestToleranceComparisons:
    """Tests for the ERROR-based comparison helpers."""

    def test_error_constant(self):
        """Test the shared tolerance value."""
        from src.pathtracer.core.ray import ERROR

        assert ERROR == 1e-4

    def test_comparisons(self):
        """Test equal/greater/less/positive/negative within tolerance."""
        from src.pathtracer.core.ray import (
            equal_error,
            greater_error,
            is_negative_error,
            is_positive_error,
            less_error,
        )

        results = ti.field(dtype=ti.i32, shape=10)

        @ti.kernel
        def test_kernel():
            results[0] = equal_error(1.0, 1.00005)
            results[1] = equal_error(1.0, 1.001)
            results[2] = greater_error(1.001, 1.0)
            results[3] = greater_error(1.00005, 1.0)
            results[4] = less_error(0.999, 1.0)
            results[5] = less_error(0.99995, 1.0)
            results[6] = is_positive_error(0.001)
            results[7] = is_positive_error(0.00005)
            results[8] = is_negative_error(-0.001)
            results[9] = is_negative_error(-0.00005)

        test_kernel()
        expected = [True, False, True, False, True, False, True, False, True, False]
        assert [results[i] != 0 for i in range(10)] == expected

    def test_is_zero(self):
        """Test is_zero accepts tiny vectors and rejects larger ones."""
        from src.pathtracer.core.ray import is_zero, vec3

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            results[0] = is_zero(vec3(0.0, 0.0, 0.0))
            results[1] = is_zero(vec3(0.00005, -0.00005, 0.0))
            results[2] = is_zero(vec3(0.0, 0.0, 0.01))

        test_kernel()
        assert results[0] != 0
        assert results[1] != 0
        assert results[2] == 0


class TestVectorHelpers:
    """Tests for dot, cross, normalize and length."""

    def test_dot_cross(self):
        """Test dot and cross on basis vectors."""
        from src.pathtracer.core.ray import cross, dot, vec3

        dot_result = ti.field(dtype=ti.f32, shape=())
        cross_result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            dot_result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))
            cross_result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert abs(dot_result[None] - 12.0) < 1e-6
        c = cross_result[None]
        assert abs(c[0]) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6

    def test_normalize_and_length(self):
        """Test normalize returns a unit vector in the same direction."""
        from src.pathtracer.core.ray import length, normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        result_len = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            v = normalize(vec3(3.0, 0.0, 4.0))
            result[None] = v
            result_len[None] = length(v)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 0.6) < 1e-6
        assert abs(r[2] - 0.8) < 1e-6
        assert abs(result_len[None] - 1.0) < 1e-6


class TestReflectRefract:
    """Tests for reflect and refract with wo pointing away from the surface."""

    def test_reflect_preserves_angle(self):
        """Test reflect mirrors wo about the normal."""
        from src.pathtracer.core.ray import normalize, reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            wo = normalize(vec3(1.0, 1.0, 0.0))
            n = vec3(0.0, 1.0, 0.0)
            result[None] = reflect(wo, n, wo.dot(n))

        test_kernel()
        r = result[None]
        s = 1.0 / math.sqrt(2.0)
        assert abs(r[0] + s) < 1e-5
        assert abs(r[1] - s) < 1e-5
        assert abs(r[2]) < 1e-5

    def test_refract_normal_incidence(self):
        """Test refraction at normal incidence passes straight through."""
        from src.pathtracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            wo = vec3(0.0, 1.0, 0.0)
            n = vec3(0.0, 1.0, 0.0)
            result[None] = refract(wo, n, 1.0 / 1.5, 1.0)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-5
        assert abs(r[1] + 1.0) < 1e-5
        assert abs(r[2]) < 1e-5

    def test_refract_obeys_snell(self):
        """Test the refracted direction satisfies Snell's law and is unit."""
        from src.pathtracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        eta = 1.0 / 1.5
        theta_i = math.radians(40.0)
        sin_i = math.sin(theta_i)
        cos_i = math.cos(theta_i)

        @ti.kernel
        def test_kernel():
            wo = vec3(sin_i, cos_i, 0.0)
            n = vec3(0.0, 1.0, 0.0)
            result[None] = refract(wo, n, eta, cos_i)

        test_kernel()
        r = result[None]
        assert abs(r[0] ** 2 + r[1] ** 2 + r[2] ** 2 - 1.0) < 1e-4
        assert r[1] < 0.0
        # Transmitted direction continues on the other side
        sin_t = -r[0]
        assert abs(sin_t - eta * math.sin(theta_i)) < 1e-4

    def test_refract_total_internal_reflection(self):
        """Test refract returns the zero vector beyond the critical angle."""
        from src.pathtracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        sin_i = math.sin(math.radians(60.0))
        cos_i = math.cos(math.radians(60.0))

        @ti.kernel
        def test_kernel():
            wo = vec3(sin_i, cos_i, 0.0)
            n = vec3(0.0, 1.0, 0.0)
            result[None] = refract(wo, n, 1.5, cos_i)

        test_kernel()
        r = result[None]
        assert r[0] == 0.0 and r[1] == 0.0 and r[2] == 0.0


class TestBasis:
    """Tests for the orthonormal basis helpers."""

    def test_onb_is_orthonormal(self):
        """Test build_onb_from_normal yields an orthonormal frame."""
        from src.pathtracer.core.ray import build_onb_from_normal, normalize, vec3

        dots = ti.field(dtype=ti.f32, shape=6)

        @ti.kernel
        def test_kernel():
            n = normalize(vec3(0.3, -0.5, 0.8))
            t, b, z = build_onb_from_normal(n)
            dots[0] = t.dot(t)
            dots[1] = b.dot(b)
            dots[2] = z.dot(z)
            dots[3] = t.dot(b)
            dots[4] = t.dot(z)
            dots[5] = b.dot(z)

        test_kernel()
        for i in range(3):
            assert abs(dots[i] - 1.0) < 1e-5
        for i in range(3, 6):
            assert abs(dots[i]) < 1e-5

    def test_to_from_basis_inverse(self):
        """Test to_basis undoes from_basis for an orthonormal frame."""
        from src.pathtracer.core.ray import (
            build_onb_from_normal,
            from_basis,
            to_basis,
            vec3,
        )

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            t, b, n = build_onb_from_normal(vec3(0.0, 0.0, 1.0))
            world = from_basis(vec3(0.2, -0.4, 0.7), t, b, n)
            result[None] = to_basis(world, t, b, n)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 0.2) < 1e-5
        assert abs(r[1] + 0.4) < 1e-5
        assert abs(r[2] - 0.7) < 1e-5
