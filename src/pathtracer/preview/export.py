"""Image export utilities for rendered images.

Rendered images are ``(height, width, 3)`` uint8 arrays, already gamma
corrected and quantized by the renderer, so export only has to write bytes.

Supported formats:
    - PNG (8-bit RGB via Pillow)
    - PPM (plain-text P3, readable by most image viewers)

Example:
    >>> from pathtracer.preview.export import save_image
    >>> save_image(pixels, "render.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def _check_pixels(pixels: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (height, width, 3), got {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")
    return pixels


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image as a PNG file.

    Args:
        pixels: Array of shape (height, width, 3) with dtype uint8; row 0 is
            the top of the image.
        filepath: Output file path.

    Raises:
        ValueError: If the array has the wrong shape or dtype.
    """
    pixels = _check_pixels(pixels)
    PILImage.fromarray(pixels).save(filepath, format="PNG")
    logger.info("Wrote %dx%d PNG to %s", pixels.shape[1], pixels.shape[0], filepath)


def to_ppm(pixels: npt.NDArray[np.uint8]) -> str:
    """Encode an image as plain-text PPM (P3), one image row per line."""
    pixels = _check_pixels(pixels)
    height, width, _ = pixels.shape
    lines = ["P3", f"{width} {height}", "255"]
    for row in pixels:
        lines.append(" ".join(str(int(c)) for c in row.reshape(-1)))
    return "\n".join(lines) + "\n"


def save_ppm(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image as a plain-text PPM file."""
    Path(filepath).write_text(to_ppm(pixels), encoding="ascii")
    logger.info("Wrote %dx%d PPM to %s", pixels.shape[1], pixels.shape[0], filepath)


def save_image(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an image, choosing PPM for ``.ppm`` paths and PNG otherwise."""
    if Path(filepath).suffix.lower() == ".ppm":
        save_ppm(pixels, filepath)
    else:
        save_png(pixels, filepath)
