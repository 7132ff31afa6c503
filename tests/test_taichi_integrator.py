"""Tests for the Taichi path tracing backend.

Tests cover:
- Scene upload and the GPU nearest-hit search
- Escaped rays under both background modes
- Emission and the bounce bound
- Agreement with the reference nearest-hit search

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

import pytest
import taichi as ti


def _shells(count, albedo, emissive):
    from src.softpt.scene.scene import Scene

    scene = Scene()
    material_id = scene.add_material(albedo, emissive)
    for radius in range(1, count + 1):
        scene.add_sphere((0.0, 0.0, 0.0), float(radius), material_id)
    return scene


class TestSceneUpload:
    """Tests for upload_scene() and intersect_scene()."""

    def test_upload_default_scene(self):
        from src.softpt.materials.diffuse import get_diffuse_material_count
        from src.softpt.scene.builder import build_default_scene
        from src.softpt.scene.intersection import get_sphere_count, upload_scene

        upload_scene(build_default_scene())
        assert get_sphere_count() == 8
        assert get_diffuse_material_count() == 8

    def test_upload_replaces_previous_scene(self, unit_sphere_scene):
        from src.softpt.scene.builder import build_default_scene
        from src.softpt.scene.intersection import get_sphere_count, upload_scene

        upload_scene(build_default_scene())
        upload_scene(unit_sphere_scene)
        assert get_sphere_count() == 1

    def test_too_many_materials_leaves_previous_scene(self):
        """Test that a material table over capacity is rejected before anything is cleared."""
        from src.softpt.materials.diffuse import MAX_MATERIALS, get_diffuse_material_count
        from src.softpt.scene.builder import build_default_scene
        from src.softpt.scene.intersection import get_sphere_count, upload_scene
        from src.softpt.scene.scene import Scene

        upload_scene(build_default_scene())

        crowded = Scene()
        for _ in range(MAX_MATERIALS + 1):
            crowded.add_material((0.5, 0.5, 0.5))
        crowded.add_sphere((0.0, 0.0, 0.0), 1.0, 0)

        with pytest.raises(RuntimeError, match="materials"):
            upload_scene(crowded)
        assert get_sphere_count() == 8
        assert get_diffuse_material_count() == 8

    def test_clear_scene(self, unit_sphere_scene):
        from src.softpt.materials.diffuse import get_diffuse_material_count
        from src.softpt.scene.intersection import clear_scene, get_sphere_count, upload_scene

        upload_scene(unit_sphere_scene)
        clear_scene()
        assert get_sphere_count() == 0
        assert get_diffuse_material_count() == 0

    @pytest.mark.parametrize(
        "origin,direction",
        [
            ((0.0, 0.5, -1.0), (0.0, -0.6, 0.8)),
            ((0.0, 0.5, -1.0), (0.0, 0.0, 1.0)),
            ((0.0, 0.2, -1.0), (0.1, -0.1, 0.99)),
            ((0.0, 0.5, -1.0), (0.0, 1.0, 0.0)),
        ],
    )
    def test_agrees_with_reference_nearest_hit(self, origin, direction):
        from src.softpt.core.integrator import find_nearest_hit
        from src.softpt.core.ray import Ray, vec3
        from src.softpt.core.vector import Vector3
        from src.softpt.scene.builder import build_default_scene
        from src.softpt.scene.intersection import intersect_scene, upload_scene

        scene = build_default_scene()
        upload_scene(scene)

        index = ti.field(dtype=ti.i32, shape=())
        point = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32):
            for _ in range(1):
                i, p = intersect_scene(vec3(ox, oy, oz), vec3(dx, dy, dz))
                index[None] = i
                point[None] = p

        ray = Ray(Vector3(*origin), Vector3(*direction).normalize())
        test_kernel(*ray.origin, *ray.direction)
        expected = find_nearest_hit(ray, scene)

        if expected is None:
            assert index[None] == -1
        else:
            sphere, hit_point = expected
            assert index[None] == scene.spheres.index(sphere)
            actual = Vector3(*[float(c) for c in point[None]])
            assert actual.is_equivalent(hit_point, max_delta=1e-3)


class TestTraceRay:
    """Tests for trace_ray()."""

    def test_empty_scene_black(self):
        from src.softpt.core.taichi_integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == (0.0, 0.0, 0.0)

    def test_empty_scene_sky(self):
        from src.softpt.config import BackgroundMode, RenderSettings
        from src.softpt.core.taichi_integrator import trace_ray

        settings = RenderSettings(background_mode=BackgroundMode.SKY_GRADIENT)
        up = trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), settings)
        assert up == pytest.approx((0.25, 0.55, 0.75), abs=1e-6)

        down = trace_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0), settings)
        assert down == pytest.approx((-0.25, -0.55, -0.75), abs=1e-6)

    def test_emissive_enclosure(self, emissive_enclosure):
        from src.softpt.config import BackgroundMode, RenderSettings
        from src.softpt.core.taichi_integrator import trace_ray
        from src.softpt.scene.intersection import upload_scene

        upload_scene(emissive_enclosure)
        for mode in BackgroundMode:
            for _ in range(10):
                color = trace_ray((0.0, 0.5, -1.0), (0.0, -0.6, 0.8), RenderSettings(background_mode=mode))
                assert color == (0.25, 0.5, 0.75)

    def test_single_bounce_counts_emission_only(self):
        """Test that with a bound of one only the first hit's emission is returned."""
        from src.softpt.config import RenderSettings
        from src.softpt.core.taichi_integrator import trace_ray
        from src.softpt.scene.intersection import upload_scene

        upload_scene(_shells(4, (1.0, 1.0, 1.0), (1.0, 1.0, 1.0)))
        for _ in range(10):
            color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), RenderSettings(max_bounces=1))
            assert color == pytest.approx((1.0, 1.0, 1.0))

    def test_two_bounces_are_bounded(self):
        """Test that two bounces give Le + cos * Le with cos in [0, 1]."""
        from src.softpt.config import RenderSettings
        from src.softpt.core.taichi_integrator import trace_ray
        from src.softpt.scene.intersection import upload_scene

        upload_scene(_shells(4, (1.0, 1.0, 1.0), (1.0, 1.0, 1.0)))
        for _ in range(20):
            r, g, b = trace_ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), RenderSettings(max_bounces=2))
            assert 1.0 - 1e-5 <= r <= 2.0 + 1e-5
            assert r == pytest.approx(g)
            assert g == pytest.approx(b)

    def test_ground_bounce_mean_matches_sky_integral(self):
        """Test the mean of one diffuse bounce off a white ground into the sky.

        The ray hits the top of the ground with normal +y, so L = sky * cos^2
        with cos uniform in [0, 1], whose mean is sky / 3.
        """
        from src.softpt.config import BackgroundMode, RenderSettings
        from src.softpt.core.taichi_integrator import trace_ray
        from src.softpt.scene.intersection import upload_scene
        from src.softpt.scene.scene import Scene

        scene = Scene()
        white = scene.add_material((1.0, 1.0, 1.0))
        scene.add_sphere((0.0, -100.0, 0.0), 100.0, white)
        upload_scene(scene)

        settings = RenderSettings(max_bounces=2, background_mode=BackgroundMode.SKY_GRADIENT)
        count = 4000
        total = 0.0
        for _ in range(count):
            r, _, _ = trace_ray((0.0, 1.0, 0.0), (0.0, -1.0, 0.0), settings)
            assert r >= 0.0
            total += r

        assert total / count == pytest.approx(settings.sky_color.x / 3.0, abs=0.01)


class TestPrimaryRay:
    """Tests for the kernel-side primary ray."""

    @pytest.mark.parametrize("i,j", [(0, 0), (15, 0), (0, 11), (15, 11), (5, 3), (8, 6)])
    def test_agrees_with_python_camera(self, i, j):
        """Test that the kernel camera matches the Python camera off the default pose."""
        from src.softpt.camera.camera import build_camera_basis, primary_ray
        from src.softpt.config import CameraConfig
        from src.softpt.core.taichi_integrator import primary_ray as kernel_primary_ray
        from src.softpt.core.taichi_integrator import setup_camera
        from src.softpt.core.vector import Vector3

        camera = CameraConfig(position=Vector3(0.3, 0.5, -1.0), target=Vector3(0.1, 0.0, 0.2))
        setup_camera(camera)
        width, height = 16, 12

        origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        direction = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(pi: ti.i32, pj: ti.i32, w: ti.i32, h: ti.i32):
            for _ in range(1):
                o, d = kernel_primary_ray(pi, pj, w, h)
                origin[None] = o
                direction[None] = d

        test_kernel(i, j, width, height)
        expected = primary_ray(build_camera_basis(camera), i, j, width, height)

        actual_origin = Vector3(*[float(c) for c in origin[None]])
        actual_direction = Vector3(*[float(c) for c in direction[None]])
        assert actual_origin.is_equivalent(expected.origin, max_delta=1e-5)
        assert actual_direction.is_equivalent(expected.direction, max_delta=1e-5)


class TestRenderTarget:
    """Tests for render target setup."""

    def test_rejects_oversized_dimensions(self):
        from src.softpt.core.taichi_integrator import setup_render_target

        with pytest.raises(ValueError, match="exceed maximum"):
            setup_render_target(4096, 16)

    def test_rejects_non_positive_dimensions(self):
        from src.softpt.core.taichi_integrator import setup_render_target

        with pytest.raises(ValueError, match="positive"):
            setup_render_target(0, 16)

    def test_dimensions(self):
        from src.softpt.core.taichi_integrator import get_image_dimensions, setup_render_target

        setup_render_target(24, 12)
        assert get_image_dimensions() == (24, 12)

    def test_render_requires_camera(self):
        from src.softpt.core import taichi_integrator

        taichi_integrator.setup_render_target(8, 8)
        taichi_integrator._camera_initialized[None] = 0
        with pytest.raises(RuntimeError, match="Camera not set up"):
            taichi_integrator.render_image(1)

    def test_image_is_height_by_width(self, emissive_enclosure):
        from src.softpt.core.taichi_integrator import (
            get_image_numpy,
            render_image,
            setup_camera,
            setup_render_target,
        )
        from src.softpt.scene.builder import default_camera
        from src.softpt.scene.intersection import upload_scene

        upload_scene(emissive_enclosure)
        setup_camera(default_camera())
        setup_render_target(10, 6)
        render_image(2)

        image = get_image_numpy()
        assert image.shape == (6, 10, 3)
        assert tuple(float(c) for c in image[5, 9]) == pytest.approx((0.25, 0.5, 0.75))
