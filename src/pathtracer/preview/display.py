"""Matplotlib-based preview display for rendered images.

Example:
    >>> from pathtracer.preview.display import show_preview
    >>> show_preview(pixels, title="Cornell box")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def show_preview(
    pixels: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib window.

    Args:
        pixels: Array of shape (height, width, 3) with dtype uint8.
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(pixels)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {pixels.shape[1]}x{pixels.shape[0]}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
