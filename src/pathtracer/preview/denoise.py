"""Hook for running an external denoiser over a finished render.

No denoiser ships with this package. Anything that maps a float image to a
float image of the same shape fits the Denoiser protocol, for example a thin
wrapper around Intel Open Image Denoise bindings.

Each 8-bit value is mapped to the centre of its quantization bin in [0, 1),
handed to the denoiser, and the result is quantized back the same way the
renderer quantizes, so an identity denoiser returns the input unchanged.
Scaling by ``b / 255.999`` alone would place each value on the lower edge of
its bin, where float32 rounding can drop it into the bin below; the half-step
offset keeps every byte value stable through the conversion.
"""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)

QUANTIZE_SCALE = 255.999


class Denoiser(Protocol):
    """Filter over display-space float RGB images of shape (height, width, 3)."""

    def __call__(self, image: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]: ...


def to_float(pixels: npt.NDArray[np.uint8]) -> npt.NDArray[np.float32]:
    """Scale 8-bit pixels to floats in [0, 1), one bin centre per byte value."""
    return ((pixels.astype(np.float64) + 0.5) / QUANTIZE_SCALE).astype(np.float32)


def to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Quantize floats to bytes, clamping to [0, 1] first."""
    clipped = np.clip(np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0), 0.0, 1.0)
    return (clipped * QUANTIZE_SCALE).astype(np.uint8)


def denoise(pixels: npt.NDArray[np.uint8], denoiser: Denoiser) -> npt.NDArray[np.uint8]:
    """Run a denoiser over a rendered image.

    Args:
        pixels: Array of shape (height, width, 3) with dtype uint8.
        denoiser: The filter to apply.

    Returns:
        The denoised image, same shape and dtype as the input.

    Raises:
        ValueError: If the input is not an RGB image or the denoiser changes
            the image shape.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (height, width, 3), got {pixels.shape}")

    result = np.asarray(denoiser(to_float(pixels)))
    if result.shape != pixels.shape:
        raise ValueError(
            f"Denoiser returned shape {result.shape}, expected {pixels.shape}"
        )
    logger.debug("Denoised %dx%d image", pixels.shape[1], pixels.shape[0])
    return to_uint8(result)
