"""Single-threaded image sampler for the reference integrator.

For every pixel the renderer builds one primary ray, averages
samples_per_pixel independent path estimates along it, converts the average
to 8-bit color and hands it to the caller's pixel sink. Pixels are visited
column by column, one sample at a time, with no parallelism.

Randomness is explicit. A caller-supplied random source is shared by every
pixel; otherwise each pixel gets its own generator seeded from
(settings.seed, i, j), which makes seeded renders reproducible regardless of
the order pixels are visited in.

Example:
    >>> from src.softpt.config import RenderSettings
    >>> from src.softpt.preview.export import ImageSink
    >>> from src.softpt.scene.builder import build_default_scene, default_camera
    >>>
    >>> sink = ImageSink(64, 64)
    >>> render(build_default_scene(), default_camera(), 64, 64, sink, RenderSettings(seed=1))
    >>> sink.save_png("spheres.png")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from src.softpt.camera.camera import build_camera_basis, primary_ray
from src.softpt.config import RenderConfig, RenderSettings
from src.softpt.core.integrator import trace_path
from src.softpt.core.ray import Ray
from src.softpt.core.sampling import RandomSource, pixel_random_source
from src.softpt.core.vector import ZERO, Vector3
from src.softpt.preview.export import ImageSink, PixelSink, color_to_rgb8

if TYPE_CHECKING:
    from src.softpt.config import CameraConfig
    from src.softpt.scene.scene import Scene

logger = logging.getLogger(__name__)

# Callback receives (completed_columns, total_columns)
ProgressCallback = Callable[[int, int], None]


def sample_pixel(
    ray: Ray,
    scene: Scene,
    random_source: RandomSource,
    settings: RenderSettings,
) -> Vector3:
    """Average settings.samples_per_pixel path estimates along ray."""
    total = ZERO
    for _ in range(settings.samples_per_pixel):
        total = total + trace_path(ray, scene, random_source, settings)
    return total * (1.0 / settings.samples_per_pixel)


def render(
    scene: Scene,
    camera: CameraConfig,
    width: int,
    height: int,
    sink: PixelSink,
    settings: RenderSettings | None = None,
    random_source: RandomSource | None = None,
    callback: ProgressCallback | None = None,
) -> None:
    """Render the scene and deliver every pixel to sink exactly once.

    Args:
        scene: The scene to render (read-only during the render).
        camera: Camera placement.
        width: Image width in pixels.
        height: Image height in pixels.
        sink: Receives set_pixel(i, j, (r, g, b)) for each pixel.
        settings: Estimator settings. Defaults to RenderSettings().
        random_source: Optional shared random source for all pixels.
        callback: Optional progress callback, called after each column.

    Raises:
        ValueError: If the image dimensions are not positive.
        DegenerateCameraBasis: If the camera cannot produce a basis.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if settings is None:
        settings = RenderSettings()

    basis = build_camera_basis(camera)

    logger.info(
        "Rendering %dx%d at %d spp (max %d bounces, %s background).",
        width,
        height,
        settings.samples_per_pixel,
        settings.max_bounces,
        settings.background_mode.value,
    )
    start_time = time.perf_counter()

    for i in range(width):
        for j in range(height):
            ray = primary_ray(basis, i, j, width, height)
            source = random_source
            if source is None:
                source = pixel_random_source(settings.seed, i, j)
            color = sample_pixel(ray, scene, source, settings)
            sink.set_pixel(i, j, color_to_rgb8(color))

        logger.debug("Finished column %d/%d.", i + 1, width)
        if callback is not None:
            callback(i + 1, width)

    logger.info("Render finished in %.2fs.", time.perf_counter() - start_time)


def render_image(
    config: RenderConfig,
    random_source: RandomSource | None = None,
    callback: ProgressCallback | None = None,
) -> ImageSink:
    """Render a complete RenderConfig into a new ImageSink."""
    sink = ImageSink(config.image.width, config.image.height)
    render(
        config.scene,
        config.camera,
        config.image.width,
        config.image.height,
        sink,
        settings=config.settings,
        random_source=random_source,
        callback=callback,
    )
    return sink
