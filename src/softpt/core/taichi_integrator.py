"""Parallel path tracing integrator built on Taichi kernels.

This module evaluates the same estimator as src.softpt.core.integrator, one
thread per pixel. Taichi functions cannot recurse, so the recursion

    L = Le + albedo * L(bounce) * dot(n, w)

is unrolled into a loop that carries a throughput term:

    radiance   += throughput * Le
    throughput *= albedo * dot(n, w)

After max_bounces hits the loop ends, matching the recursive version returning
zero at that depth. Each thread draws from Taichi's per-thread random
generator, seeded through ti.init(random_seed=...).

Samples are accumulated progressively with a running average, so the image
can be refined over several calls.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.softpt.core.taichi_integrator import (
    ...     render_image, setup_camera, setup_render_target
    ... )
    >>> from src.softpt.scene.builder import build_default_scene, default_camera
    >>> from src.softpt.scene.intersection import upload_scene
    >>>
    >>> upload_scene(build_default_scene())
    >>> setup_camera(default_camera())
    >>> setup_render_target(512, 512)
    >>> render_image(num_samples=64)
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.softpt.camera.camera import build_camera_basis
from src.softpt.config import BackgroundMode, CameraConfig, RenderSettings
from src.softpt.core.sampling import sample_hemisphere_uniform
from src.softpt.core.vector import EPSILON
from src.softpt.materials.diffuse import get_albedo, get_emissive
from src.softpt.scene.intersection import intersect_scene, sphere_centers, sphere_material_ids

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Kernel-side codes for BackgroundMode
BACKGROUND_CODES = {
    BackgroundMode.BLACK: 0,
    BackgroundMode.SKY_GRADIENT: 1,
}

# =============================================================================
# Camera State
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_initialized = ti.field(dtype=ti.i32, shape=())

# Top color of the sky gradient
_sky_color = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: CameraConfig) -> None:
    """Compute the camera basis in Python and upload it.

    Raises:
        DegenerateCameraBasis: If the camera cannot produce a basis.
    """
    basis = build_camera_basis(camera)
    _camera_position[None] = list(basis.position)
    _camera_right[None] = list(basis.right)
    _camera_up[None] = list(basis.up)
    _camera_initialized[None] = 1


@ti.func
def primary_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32):
    """Generate the primary ray through pixel (i, j), row 0 at the top.

    Returns:
        A tuple (origin, direction).
    """
    dx = 2.0 / ti.cast(width, ti.f32)
    dy = 2.0 / ti.cast(height, ti.f32)
    near = _camera_right[None] * (-1.0 + dx * ti.cast(pixel_i, ti.f32)) + _camera_up[None] * (
        1.0 - dy * ti.cast(pixel_j, ti.f32)
    )
    origin = _camera_position[None]
    return origin, tm.normalize(near - origin)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color accumulation buffer, indexed [i, j] with j = 0 at the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image dimensions and clear the buffers.

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _sample_count.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_ready() -> None:
    """Raise if the render target or the camera has not been set up."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")
    if _camera_initialized[None] == 0:
        raise RuntimeError("Camera not set up. Call setup_camera() first.")


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def background_radiance(direction: vec3, background_mode: ti.i32) -> vec3:
    """Radiance of an escaped ray: black, or black-to-sky lerp by direction.y."""
    result = vec3(0.0, 0.0, 0.0)
    if background_mode == 1:
        result = _sky_color[None] * direction.y
    return result


@ti.func
def trace_path(
    ray_origin: vec3,
    ray_direction: vec3,
    max_bounces: ti.i32,
    background_mode: ti.i32,
) -> vec3:
    """Trace a single path and return its radiance estimate.

    Args:
        ray_origin: Origin of the primary ray.
        ray_direction: Direction of the primary ray.
        max_bounces: Number of surface hits after which the path ends.
        background_mode: 0 for black, 1 for sky gradient.

    Returns:
        The estimated radiance (RGB) for this path sample.
    """
    origin = ray_origin
    direction = ray_direction
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)

    # Active flag for path continuation
    active = 1

    for _ in range(max_bounces):
        if active == 1:
            sphere_index, hit_point = intersect_scene(origin, direction)

            if sphere_index < 0:
                radiance += throughput * background_radiance(direction, background_mode)
                active = 0
            else:
                material_id = sphere_material_ids[sphere_index]
                normal = tm.normalize(hit_point - sphere_centers[sphere_index])

                u0 = ti.random(ti.f32)
                u1 = ti.random(ti.f32)
                new_direction = sample_hemisphere_uniform(normal, u0, u1)

                radiance += throughput * get_emissive(material_id)
                throughput *= get_albedo(material_id) * tm.dot(normal, new_direction)

                # Offset along the normal to avoid re-hitting the same surface
                origin = hit_point + normal * EPSILON
                direction = new_direction

    return radiance


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, max_bounces: ti.i32, background_mode: ti.i32):
    """Trace one path through each pixel and fold it into the running average."""
    for i, j in ti.ndrange(width, height):
        origin, direction = primary_ray(i, j, width, height)
        color = trace_path(origin, direction, max_bounces, background_mode)

        _sample_count[i, j] += 1
        n = _sample_count[i, j]

        # Running average: avg_n = avg_{n-1} + (x_n - avg_{n-1}) / n
        _color_buffer[i, j] += (color - _color_buffer[i, j]) / ti.cast(n, ti.f32)


_single_ray_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _trace_single_ray(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    max_bounces: ti.i32,
    background_mode: ti.i32,
):
    # Single-iteration outer loop so the bounce and scene loops stay serial
    for _ in range(1):
        _single_ray_result[None] = trace_path(
            vec3(ox, oy, oz), vec3(dx, dy, dz), max_bounces, background_mode
        )


# =============================================================================
# Public Rendering API
# =============================================================================


def _apply_settings(settings: RenderSettings) -> tuple[int, int]:
    _sky_color[None] = list(settings.sky_color)
    return settings.max_bounces, BACKGROUND_CODES[settings.background_mode]


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    settings: "RenderSettings | None" = None,
) -> tuple[float, float, float]:
    """Trace a single path from Python, for testing and debugging.

    Requires a scene uploaded with upload_scene(); the camera is not used.
    """
    if settings is None:
        settings = RenderSettings()
    max_bounces, background_mode = _apply_settings(settings)
    _trace_single_ray(*origin, *direction, max_bounces, background_mode)
    color = _single_ray_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(num_samples: int = 1, settings: "RenderSettings | None" = None) -> None:
    """Accumulate num_samples more samples per pixel into the color buffer.

    Raises:
        RuntimeError: If the render target or camera has not been set up.
    """
    _check_ready()
    if settings is None:
        settings = RenderSettings()

    width, height = get_image_dimensions()
    max_bounces, background_mode = _apply_settings(settings)

    for _ in range(num_samples):
        _render_one_spp(width, height, max_bounces, background_mode)

    logger.debug("Accumulated %d samples (total %d).", num_samples, get_total_samples())


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel so far.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")
    return int(_sample_count[0, 0])


def get_image_numpy() -> "npt.NDArray[np.float32]":
    """Get the accumulated linear image as a (height, width, 3) array.

    Values are not clamped; row 0 is the top of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))
    return np.ascontiguousarray(image, dtype=np.float32)
