"""Preview module for output and visualization.

Components:
    export: Pixel sink protocol, NumPy-backed ImageSink and PNG export
    display: Matplotlib-based static preview

Renderers never open windows themselves; they push 8-bit pixels into a sink
supplied by the caller.

Example:
    >>> from src.softpt.preview import ImageSink
    >>> sink = ImageSink(256, 256)
    >>> # render(..., sink=sink, ...)
    >>> sink.save_png("spheres.png")
"""

from src.softpt.preview.display import show_image
from src.softpt.preview.export import (
    ImageSink,
    PixelSink,
    color_to_rgb8,
    compute_rmse,
    image_to_uint8,
    save_png_from_array,
)

__all__ = [
    "show_image",
    "ImageSink",
    "PixelSink",
    "color_to_rgb8",
    "image_to_uint8",
    "save_png_from_array",
    "compute_rmse",
]
