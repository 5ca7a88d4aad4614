"""Camera module for view and ray generation.

Components:
    thin_lens: Thin-lens perspective camera with optional depth of field

Camera responsibilities:
    - Validate the camera configuration
    - Derive the viewport (basis, pixel deltas, lens disk) once
    - Generate jittered, optionally defocused primary rays inside kernels

Pixel coordinates run left to right and top to bottom.
"""

from .thin_lens import Camera, CameraParams, Viewport, compute_viewport

__all__ = [
    "Camera",
    "CameraParams",
    "Viewport",
    "compute_viewport",
]
