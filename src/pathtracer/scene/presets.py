"""Built-in scenes.

``cornell_box`` is the classic Cornell box: five walls, a ceiling light and
two rotated boxes, one glass and one dark metal. The box spans 0 to 555 in
each dimension and the camera looks in through the open front.

``three_spheres`` is a small outdoor scene: a large ground sphere with a
glass sphere, a second glass sphere and a gold metal sphere resting on it,
seen by a camera turned 45 degrees to the right under the sky gradient.

Example:
    >>> from pathtracer.scene.presets import cornell_box
    >>> scene = cornell_box(size=200, samples_per_pixel=16)
    >>> len(scene.objects)
    8
"""

import math
from dataclasses import dataclass

from pathtracer.camera.thin_lens import CameraParams
from pathtracer.core import orientation
from pathtracer.geometry.prism import Prism
from pathtracer.geometry.quad import QuadPrimitive
from pathtracer.geometry.sphere import SpherePrimitive
from pathtracer.materials.types import Dielectric, Diffuse, Light, Metal
from pathtracer.scene.loader import Scene

# =============================================================================
# Cornell Box Constants
# =============================================================================

# Classic Cornell box dimensions (555 units on each side)
BOX_SIZE = 555.0


@dataclass
class CornellBoxParams:
    """Colours and light strength for the Cornell box.

    Attributes:
        light_emission: RGB radiance of the ceiling light.
        left_wall_color: Albedo of the wall at x = 555 (left in the image).
        right_wall_color: Albedo of the wall at x = 0 (right in the image).
        white_color: Albedo of the floor, ceiling and back wall.
    """

    light_emission: tuple[float, float, float] = (50.0, 50.0, 50.0)
    left_wall_color: tuple[float, float, float] = (0.12, 0.45, 0.15)
    right_wall_color: tuple[float, float, float] = (0.65, 0.05, 0.05)
    white_color: tuple[float, float, float] = (0.73, 0.73, 0.73)


def cornell_box(
    size: int = 600,
    samples_per_pixel: int = 1000,
    max_depth: int = 50,
    params: CornellBoxParams | None = None,
) -> Scene:
    """Create the Cornell box scene.

    Args:
        size: Width and height of the square image in pixels.
        samples_per_pixel: Radiance samples averaged per pixel.
        max_depth: Maximum bounces per path.
        params: Optional colour overrides.

    Returns:
        The scene, with objects in the order walls, light, boxes.
    """
    if params is None:
        params = CornellBoxParams()

    materials = [
        Diffuse(params.right_wall_color),
        Diffuse(params.white_color),
        Diffuse(params.left_wall_color),
        Light(params.light_emission),
        Metal((0.1, 0.1, 0.1)),
        Dielectric(1.5),
    ]
    red, white, green, light, metal, glass = range(len(materials))

    s = BOX_SIZE
    objects = [
        QuadPrimitive((s, 0.0, 0.0), (0.0, s, 0.0), (0.0, 0.0, s), green),
        QuadPrimitive((0.0, 0.0, 0.0), (0.0, s, 0.0), (0.0, 0.0, s), red),
        QuadPrimitive((343.0, s - 1.0, 332.0), (-130.0, 0.0, 0.0), (0.0, 0.0, -105.0), light),
        QuadPrimitive((0.0, 0.0, 0.0), (s, 0.0, 0.0), (0.0, 0.0, s), white),
        QuadPrimitive((s, s, s), (-s, 0.0, 0.0), (0.0, 0.0, -s), white),
        QuadPrimitive((0.0, 0.0, s), (s, 0.0, 0.0), (0.0, s, 0.0), white),
        Prism(
            origin=(178.0, 0.0, 178.0),
            width=175.0,
            height=175.0,
            depth=175.0,
            rotation=tuple(orientation.from_euler(0.0, -0.3, 0.0)),
            material_index=glass,
        ),
        Prism(
            origin=(378.0, 0.0, 378.0),
            width=175.0,
            height=350.0,
            depth=175.0,
            rotation=tuple(orientation.from_euler(0.0, 0.3, 0.0)),
            material_index=metal,
        ),
    ]

    camera = CameraParams(
        width=size,
        height=size,
        position=(278.0, 278.0, -800.0),
        orientation=tuple(orientation.facing((0.0, 0.0, 1.0))),
        fov=40.0,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
    )
    return Scene(camera=camera, materials=materials, objects=objects)


def three_spheres(
    width: int = 640,
    height: int = 480,
    samples_per_pixel: int = 100,
    max_depth: int = 50,
) -> Scene:
    """Create the three-spheres scene.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Radiance samples averaged per pixel.
        max_depth: Maximum bounces per path.
    """
    materials = [
        Diffuse((0.8, 0.8, 0.0)),
        Dielectric(1.5),
        Dielectric(1.5),
        Metal((0.8, 0.6, 0.2)),
    ]
    objects = [
        SpherePrimitive((0.0, -100.5, -1.0), 100.0, 0),
        SpherePrimitive((0.0, 0.0, -1.0), 0.5, 1),
        SpherePrimitive((-1.0, 0.0, -1.0), 0.5, 2),
        SpherePrimitive((1.0, 0.0, -1.0), 0.5, 3),
    ]
    camera = CameraParams(
        width=width,
        height=height,
        orientation=tuple(orientation.from_axis_angle((0.0, 1.0, 0.0), math.radians(-45.0))),
        fov=90.0,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
    )
    return Scene(camera=camera, materials=materials, objects=objects)


PRESETS = {
    "cornell-box": cornell_box,
    "three-spheres": three_spheres,
}
