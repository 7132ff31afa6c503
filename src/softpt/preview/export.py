"""Pixel sinks and image export.

Renderers deliver their output one pixel at a time to a PixelSink, anything
with a set_pixel(x, y, rgb) method taking 8-bit channels. ImageSink collects
the pixels into a NumPy buffer that can be saved as PNG through Pillow.

Radiance is converted to 8-bit by saturating each channel to [0, 1] and
scaling by 255 with truncation, so values above 1 (emissive surfaces) clamp
to 255 and negative values clamp to 0.

Example:
    >>> sink = ImageSink(64, 48)
    >>> sink.set_pixel(0, 0, (255, 128, 0))
    >>> sink.save_png("output.png")
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.softpt.core.vector import saturate

RGB8 = tuple[int, int, int]


class PixelSink(Protocol):
    """Consumer of rendered pixels."""

    def set_pixel(self, x: int, y: int, color: RGB8) -> None: ...


def color_to_rgb8(color: Iterable[float]) -> RGB8:
    """Convert a linear RGB radiance to an 8-bit triple.

    Args:
        color: Three channel values; any magnitude is accepted.

    Returns:
        Tuple of (R, G, B) integers in [0, 255].
    """
    r, g, b = (int(saturate(c) * 255.0) for c in color)
    return (r, g, b)


def image_to_uint8(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image of shape (H, W, 3) to uint8 the same way."""
    return (np.clip(image, 0.0, 1.0) * 255.0).astype(np.uint8)


class ImageSink:
    """Pixel sink backed by a (height, width, 3) uint8 NumPy array.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: The pixel buffer, row 0 at the top.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)

    def set_pixel(self, x: int, y: int, color: RGB8) -> None:
        self.pixels[y, x] = color

    def to_pil(self) -> PILImage.Image:
        return PILImage.fromarray(self.pixels)

    def save_png(self, filepath: str) -> None:
        """Save the buffer as an 8-bit PNG file."""
        self.to_pil().save(filepath)


def save_png_from_array(image: npt.NDArray[np.float32], filepath: str) -> None:
    """Save a linear float image of shape (H, W, 3) as an 8-bit PNG."""
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
