"""Progressive renderer for the Taichi backend.

This module wraps the Taichi integrator with:
- Progressive rendering that refines over time
- Batch rendering (multiple SPP in one call)
- Progress callbacks or a generator for UI updates
- Delivery of the finished image to any pixel sink

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.softpt.core.progressive import ProgressiveRenderer
    >>> from src.softpt.preview.export import ImageSink
    >>> from src.softpt.scene.builder import build_default_scene, default_camera
    >>>
    >>> renderer = ProgressiveRenderer.for_scene(
    ...     build_default_scene(), default_camera(), 512, 512
    ... )
    >>> renderer.render(1024)
    >>> sink = ImageSink(512, 512)
    >>> renderer.present(sink)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from src.softpt.config import CameraConfig, RenderConfig, RenderSettings
from src.softpt.core.taichi_integrator import (
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    render_image,
    setup_camera,
    setup_render_target,
)
from src.softpt.preview.export import PixelSink, image_to_uint8
from src.softpt.scene.intersection import upload_scene

if TYPE_CHECKING:
    from src.softpt.scene.scene import Scene

logger = logging.getLogger(__name__)

# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates samples over time.

    The renderer keeps its own width/height and settings and delegates to
    the Taichi integrator's global buffers. The scene and camera must have
    been uploaded beforehand, or use for_scene() to do both.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        settings: Estimator settings used for every batch.
    """

    def __init__(self, width: int, height: int, settings: RenderSettings | None = None) -> None:
        """Initialize the progressive renderer.

        Raises:
            ValueError: If dimensions are invalid or exceed the maximum size.
        """
        self._width = width
        self._height = height
        self.settings = settings if settings is not None else RenderSettings()
        setup_render_target(width, height)

    @classmethod
    def for_scene(
        cls,
        scene: Scene,
        camera: CameraConfig,
        width: int,
        height: int,
        settings: RenderSettings | None = None,
    ) -> ProgressiveRenderer:
        """Upload scene and camera, then create a renderer.

        Raises:
            DegenerateCameraBasis: If the camera cannot produce a basis.
            RuntimeError: If the scene exceeds GPU capacity.
        """
        upload_scene(scene)
        setup_camera(camera)
        return cls(width, height, settings)

    @classmethod
    def from_config(cls, config: RenderConfig) -> ProgressiveRenderer:
        return cls.for_scene(
            config.scene,
            config.camera,
            config.image.width,
            config.image.height,
            config.settings,
        )

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Clear the accumulated samples without changing dimensions."""
        clear_render_target()

    def render(
        self,
        num_samples: int | None = None,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples progressively with optional progress callback.

        Args:
            num_samples: Samples per pixel to add. Defaults to
                settings.samples_per_pixel.
            batch_size: Number of samples to render before each callback.
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int | None = None,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples progressively, yielding progress after each batch.

        Yields:
            Tuple of (current_total_samples, target_total_samples).
        """
        if num_samples is None:
            num_samples = self.settings.samples_per_pixel
        if num_samples <= 0:
            return

        target_samples = self.sample_count + num_samples
        start_time = time.perf_counter()

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, self.settings)
            remaining -= batch
            yield (self.sample_count, target_samples)

        logger.info(
            "Rendered %d spp at %dx%d in %.2fs.",
            num_samples,
            self._width,
            self._height,
            time.perf_counter() - start_time,
        )

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the linear image as a (height, width, 3) float32 array."""
        return get_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the image saturated to [0, 1] and scaled to 8-bit."""
        return image_to_uint8(self.get_image_numpy())

    def present(self, sink: PixelSink) -> None:
        """Deliver every pixel of the current image to sink."""
        pixels = self.get_image_uint8()
        for i in range(self._width):
            for j in range(self._height):
                r, g, b = pixels[j, i]
                sink.set_pixel(i, j, (int(r), int(g), int(b)))

    def save_image(self, filepath: str) -> None:
        """Save the current image as an 8-bit PNG."""
        from PIL import Image as PILImage

        PILImage.fromarray(self.get_image_uint8()).save(filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
