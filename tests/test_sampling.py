"""Tests for tangent frames, hemisphere sampling and random sources.

Tests cover:
- Orthonormality of the tangent frame, including normals along the x axis
- Sampled directions are unit length and never point below the surface
- The pole of the hemisphere is reached for u0 = 1
- Agreement between the Python and Taichi samplers
- Seeded random sources are reproducible
"""

import math

import pytest
import taichi as ti

NORMALS = [
    (0.0, 1.0, 0.0),
    (0.0, -1.0, 0.0),
    (0.0, 0.0, 1.0),
    (0.0, 0.0, -1.0),
    (1.0, 0.0, 0.0),
    (-1.0, 0.0, 0.0),
    (0.6, 0.0, 0.8),
    (0.48, -0.6, 0.64),
]


class TestTangentFrame:
    """Tests for build_tangent_frame()."""

    @pytest.mark.parametrize("normal", NORMALS)
    def test_frame_is_orthonormal(self, normal):
        """Test that tangent, normal and bitangent are mutually orthogonal unit vectors."""
        from src.softpt.core.sampling import build_tangent_frame
        from src.softpt.core.vector import Vector3

        n = Vector3(*normal).normalize()
        tangent, bitangent = build_tangent_frame(n)

        assert math.isclose(tangent.length(), 1.0, abs_tol=1e-9)
        assert math.isclose(bitangent.length(), 1.0, abs_tol=1e-9)
        assert abs(tangent.dot(n)) < 1e-9
        assert abs(bitangent.dot(n)) < 1e-9
        assert abs(tangent.dot(bitangent)) < 1e-9

    def test_frame_for_up_normal(self):
        """Test the frame produced from the (-1, 0, 0) seed for an upward normal."""
        from src.softpt.core.sampling import build_tangent_frame
        from src.softpt.core.vector import Vector3

        tangent, bitangent = build_tangent_frame(Vector3(0.0, 1.0, 0.0))
        assert bitangent.is_equivalent(Vector3(0.0, 0.0, 1.0))
        assert tangent.is_equivalent(Vector3(-1.0, 0.0, 0.0))

    def test_frame_for_normal_along_seed_axis(self):
        """Test that a normal along the x axis falls back to the y axis seed."""
        from src.softpt.core.sampling import build_tangent_frame
        from src.softpt.core.vector import Vector3

        tangent, bitangent = build_tangent_frame(Vector3(-1.0, 0.0, 0.0))
        assert bitangent.is_equivalent(Vector3(0.0, 0.0, -1.0))
        assert tangent.is_equivalent(Vector3(0.0, 1.0, 0.0))


class TestHemisphereSampling:
    """Tests for sample_hemisphere()."""

    @pytest.mark.parametrize("normal", NORMALS)
    def test_samples_stay_in_hemisphere(self, normal):
        """Test a grid of (u0, u1) values against every normal."""
        from src.softpt.core.sampling import sample_hemisphere
        from src.softpt.core.vector import Vector3

        n = Vector3(*normal).normalize()
        steps = [k / 8.0 for k in range(8)] + [0.999999]
        for u0 in steps:
            for u1 in steps:
                direction = sample_hemisphere(n, u0, u1)
                assert math.isclose(direction.length(), 1.0, abs_tol=1e-9)
                assert direction.dot(n) >= -1e-5
                assert math.isclose(direction.dot(n), u0, abs_tol=1e-9)

    def test_u0_of_one_returns_normal(self):
        from src.softpt.core.sampling import sample_hemisphere
        from src.softpt.core.vector import Vector3

        n = Vector3(0.48, -0.6, 0.64)
        assert sample_hemisphere(n, 1.0, 0.3).is_equivalent(n)

    def test_u0_of_zero_is_tangent_to_surface(self):
        from src.softpt.core.sampling import sample_hemisphere
        from src.softpt.core.vector import Vector3

        n = Vector3(0.0, 0.0, 1.0)
        direction = sample_hemisphere(n, 0.0, 0.125)
        assert abs(direction.dot(n)) < 1e-12
        assert math.isclose(direction.length(), 1.0)

    def test_azimuth_covers_full_turn(self):
        """Test that u1 = 0 and u1 = 0.5 give opposite tangential directions."""
        from src.softpt.core.sampling import build_tangent_frame, sample_hemisphere
        from src.softpt.core.vector import Vector3

        n = Vector3(0.0, 1.0, 0.0)
        tangent, _ = build_tangent_frame(n)
        assert sample_hemisphere(n, 0.0, 0.0).is_equivalent(tangent)
        assert sample_hemisphere(n, 0.0, 0.5).is_equivalent(-tangent)

    def test_monte_carlo_mean_cosine(self):
        """Test that uniform sampling gives a mean cosine of one half."""
        from src.softpt.core.sampling import make_random_source, sample_hemisphere
        from src.softpt.core.vector import Vector3

        n = Vector3(0.0, 0.0, -1.0)
        rng = make_random_source(3)
        total = 0.0
        count = 20000
        for _ in range(count):
            total += sample_hemisphere(n, rng.random(), rng.random()).dot(n)
        assert abs(total / count - 0.5) < 0.01


class TestTaichiSampling:
    """Tests for the Taichi sampler twin."""

    @pytest.mark.parametrize("normal", NORMALS)
    def test_matches_python_sampler(self, normal):
        from src.softpt.core.ray import vec3
        from src.softpt.core.sampling import sample_hemisphere, sample_hemisphere_uniform
        from src.softpt.core.vector import Vector3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(nx: ti.f32, ny: ti.f32, nz: ti.f32, u0: ti.f32, u1: ti.f32):
            result[None] = sample_hemisphere_uniform(vec3(nx, ny, nz), u0, u1)

        n = Vector3(*normal).normalize()
        for u0, u1 in [(0.1, 0.2), (0.5, 0.75), (0.9, 0.4)]:
            test_kernel(n.x, n.y, n.z, u0, u1)
            expected = sample_hemisphere(n, u0, u1)
            actual = Vector3(*[float(c) for c in result[None]])
            assert actual.is_equivalent(expected, max_delta=1e-4)


class TestRandomSources:
    """Tests for random source helpers."""

    def test_seeded_sources_repeat(self):
        from src.softpt.core.sampling import make_random_source

        a = make_random_source(11)
        b = make_random_source(11)
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_values_in_unit_interval(self):
        from src.softpt.core.sampling import make_random_source

        rng = make_random_source(5)
        for _ in range(1000):
            value = rng.random()
            assert 0.0 <= value < 1.0

    def test_pixel_sources_are_independent(self):
        """Test that pixel streams depend on the pixel and the seed."""
        from src.softpt.core.sampling import pixel_random_source

        first = pixel_random_source(1, 0, 0).random()
        assert pixel_random_source(1, 0, 0).random() == first
        assert pixel_random_source(1, 0, 1).random() != first
        assert pixel_random_source(1, 1, 0).random() != first
        assert pixel_random_source(2, 0, 0).random() != first
