"""Preview module for output and visualization.

Components:
    export: PNG and PPM image export (Pillow)
    display: Matplotlib-based static preview
    denoise: Hook for an external denoiser over finished renders

Example:
    >>> from pathtracer.preview import save_png, show_preview
    >>> save_png(pixels, "output.png")
    >>> show_preview(pixels)
"""

from pathtracer.preview.denoise import Denoiser, denoise
from pathtracer.preview.display import show_preview
from pathtracer.preview.export import save_image, save_png, save_ppm, to_ppm

__all__ = [
    # Display functions
    "show_preview",
    # Export functions
    "save_png",
    "save_ppm",
    "save_image",
    "to_ppm",
    # Denoising
    "Denoiser",
    "denoise",
]
