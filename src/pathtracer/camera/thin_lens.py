"""Thin-lens camera model for perspective ray generation with depth of field.

The camera is placed by a position and an orientation quaternion. With the
identity orientation it looks down -Z with +X to the right and +Y up. Its
viewport is a rectangle at ``focus_distance`` in front of the camera whose
height is set by the vertical field of view:

    viewport_height = 2 * focus_distance * tan(fov / 2)
    viewport_width = viewport_height * width / height

Pixel (0, 0) is the top-left pixel. Rays start on a disk of radius
``focus_distance * tan(defocus_angle / 2)`` around the camera position, so
only geometry on the focus plane is perfectly sharp. A defocus angle of zero
gives a pinhole camera.

All state is derived once on the Python side with NumPy and uploaded to
Taichi fields; ray generation runs inside kernels.

Example:
    >>> from pathtracer.camera.thin_lens import Camera, CameraParams
    >>> camera = Camera(CameraParams(width=4, height=2, fov=90.0))
    >>> camera.viewport.viewport_width
    4.0
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import taichi as ti

from pathtracer.core import orientation
from pathtracer.core.ray import Ray, random_in_unit_disk, vec3

logger = logging.getLogger(__name__)

Vec3Tuple = tuple[float, float, float]


def _as_tuple(value) -> Vec3Tuple:
    return tuple(float(x) for x in value)


@dataclass(frozen=True)
class CameraParams:
    """Configuration for a thin-lens camera and the render that uses it.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        position: Camera position in world space.
        orientation: Unit quaternion (w, x, y, z); normalized on construction.
        fov: Vertical field of view in degrees, in (0, 180).
        focus_distance: Distance from the camera to the plane of perfect focus.
        defocus_angle: Apex angle in degrees of the cone of rays through each
            pixel. Zero or less disables depth of field.
        background: Flat background colour for rays that escape the scene,
            or None for the sky gradient.
        samples_per_pixel: Radiance samples averaged per pixel.
        max_depth: Maximum number of bounces per path.

    Raises:
        ValueError: If any parameter is outside its valid range.
    """

    width: int
    height: int
    position: Vec3Tuple = (0.0, 0.0, 0.0)
    orientation: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    fov: float = 90.0
    focus_distance: float = 1.0
    defocus_angle: float = 0.0
    background: Optional[Vec3Tuple] = None
    samples_per_pixel: int = 100
    max_depth: int = 50

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {self.fov}")
        if not self.focus_distance > 0.0:
            raise ValueError(f"Focus distance must be positive, got {self.focus_distance}")
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"Samples per pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"Max depth must be non-negative, got {self.max_depth}")

        position = np.asarray(self.position, dtype=np.float64)
        if position.shape != (3,):
            raise ValueError(f"Camera position must have 3 components, got {self.position!r}")
        object.__setattr__(self, "position", _as_tuple(position))
        object.__setattr__(self, "orientation", _as_tuple(orientation.normalize(self.orientation)))

        if self.background is not None:
            if len(self.background) != 3 or any(c < 0.0 for c in self.background):
                raise ValueError(
                    f"Background must be 3 non-negative components, got {self.background!r}"
                )
            object.__setattr__(self, "background", _as_tuple(self.background))

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class Viewport:
    """Derived camera geometry.

    Attributes:
        right: Unit vector toward increasing pixel column.
        up: Unit vector toward the top of the image.
        forward: Unit viewing direction.
        viewport_width: World-space width of the viewport.
        viewport_height: World-space height of the viewport.
        pixel_delta_u: Offset between horizontally adjacent pixel centres.
        pixel_delta_v: Offset between vertically adjacent pixel centres
            (points down the image).
        pixel00: World-space centre of the top-left pixel.
        defocus_radius: Radius of the lens disk; zero for a pinhole.
        defocus_disk_u: Horizontal radius vector of the lens disk.
        defocus_disk_v: Vertical radius vector of the lens disk.
    """

    right: Vec3Tuple
    up: Vec3Tuple
    forward: Vec3Tuple
    viewport_width: float
    viewport_height: float
    pixel_delta_u: Vec3Tuple
    pixel_delta_v: Vec3Tuple
    pixel00: Vec3Tuple
    defocus_radius: float
    defocus_disk_u: Vec3Tuple
    defocus_disk_v: Vec3Tuple


def compute_viewport(params: CameraParams) -> Viewport:
    """Derive the viewport geometry for a camera configuration."""
    right, up, forward = orientation.basis(params.orientation)

    viewport_height = 2.0 * params.focus_distance * math.tan(math.radians(params.fov) / 2.0)
    viewport_width = viewport_height * params.aspect_ratio

    # Image rows run downward, so the vertical edge points along -up
    viewport_u = viewport_width * right
    viewport_v = viewport_height * -up

    pixel_delta_u = viewport_u / params.width
    pixel_delta_v = viewport_v / params.height

    position = np.asarray(params.position)
    upper_left = position + params.focus_distance * forward - viewport_u / 2.0 - viewport_v / 2.0
    pixel00 = upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = 0.0
    if params.defocus_angle > 0.0:
        defocus_radius = params.focus_distance * math.tan(math.radians(params.defocus_angle) / 2.0)

    return Viewport(
        right=_as_tuple(right),
        up=_as_tuple(up),
        forward=_as_tuple(forward),
        viewport_width=float(viewport_width),
        viewport_height=float(viewport_height),
        pixel_delta_u=_as_tuple(pixel_delta_u),
        pixel_delta_v=_as_tuple(pixel_delta_v),
        pixel00=_as_tuple(pixel00),
        defocus_radius=float(defocus_radius),
        defocus_disk_u=_as_tuple(right * defocus_radius),
        defocus_disk_v=_as_tuple(up * defocus_radius),
    )


@ti.data_oriented
class Camera:
    """A camera ready to generate rays inside kernels.

    Args:
        params: The camera configuration.
    """

    def __init__(self, params: CameraParams) -> None:
        self.params = params
        self.viewport = compute_viewport(params)
        self.width = params.width
        self.height = params.height
        self.defocus_enabled = params.defocus_angle > 0.0

        self._center = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._pixel00 = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())
        # Result slots for sample_ray
        self._out_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._out_direction = ti.Vector.field(3, dtype=ti.f32, shape=())

        vp = self.viewport
        self._center[None] = vec3(*params.position)
        self._pixel00[None] = vec3(*vp.pixel00)
        self._delta_u[None] = vec3(*vp.pixel_delta_u)
        self._delta_v[None] = vec3(*vp.pixel_delta_v)
        self._disk_u[None] = vec3(*vp.defocus_disk_u)
        self._disk_v[None] = vec3(*vp.defocus_disk_v)

        logger.debug(
            "Camera %dx%d fov=%.1f viewport=%.4fx%.4f defocus_radius=%.4f",
            self.width,
            self.height,
            params.fov,
            vp.viewport_width,
            vp.viewport_height,
            vp.defocus_radius,
        )

    @ti.func
    def get_ray(self, px: ti.i32, py: ti.i32) -> Ray:
        """Generate a jittered ray through pixel (px, py).

        The sample point is uniformly distributed over the pixel's footprint.
        With depth of field enabled the origin is a random point on the lens
        disk; otherwise it is the camera position.

        Args:
            px: Pixel column (0 = left).
            py: Pixel row (0 = top).

        Returns:
            A Ray whose direction is not normalized.
        """
        offset_x = ti.random(ti.f32) - 0.5
        offset_y = ti.random(ti.f32) - 0.5
        pixel_sample = (
            self._pixel00[None]
            + (ti.cast(px, ti.f32) + offset_x) * self._delta_u[None]
            + (ti.cast(py, ti.f32) + offset_y) * self._delta_v[None]
        )

        origin = self._center[None]
        if ti.static(self.defocus_enabled):
            p = random_in_unit_disk()
            origin = self._center[None] + p.x * self._disk_u[None] + p.y * self._disk_v[None]

        return Ray(origin=origin, direction=pixel_sample - origin)

    @ti.kernel
    def _sample(self, px: ti.i32, py: ti.i32):
        ray = self.get_ray(px, py)
        self._out_origin[None] = ray.origin
        self._out_direction[None] = ray.direction

    def sample_ray(self, px: int, py: int) -> tuple[Vec3Tuple, Vec3Tuple]:
        """Generate one jittered ray for a pixel from Python scope.

        Returns:
            A tuple (origin, direction) of 3-tuples.
        """
        self._sample(px, py)
        return (
            _as_tuple(self._out_origin[None].to_numpy()),
            _as_tuple(self._out_direction[None].to_numpy()),
        )

