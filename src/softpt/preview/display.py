"""Matplotlib-based preview display for rendered images.

Example:
    >>> from src.softpt.preview.display import show_image
    >>> from src.softpt.preview.export import ImageSink
    >>>
    >>> sink = ImageSink(64, 64)
    >>> show_image(sink.pixels, title="Preview")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def show_image(
    pixels: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display an 8-bit RGB image in a Matplotlib figure.

    Args:
        pixels: Image array of shape (H, W, 3) with dtype uint8, row 0 at top.
        title: Optional figure title.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(pixels)
    ax.axis("off")
    if title is not None:
        ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
