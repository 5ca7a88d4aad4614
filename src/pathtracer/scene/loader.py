"""Scene file loading.

Scenes are TOML documents with a ``[camera]`` table, a ``[[materials]]``
array and an ``[[objects]]`` array::

    [camera]
    image-dimensions = [400, 300]
    samples-per-pixel = 100          # optional
    max-depth = 50                   # optional
    position = [0.0, 0.0, 0.0]       # optional
    rotation = { type = "euler", roll = 0.0, pitch = 0.0, yaw = 0.0 }  # optional
    fov = 90.0
    defocus = { focus_distance = 3.4, defocus_angle = 2.0 }           # optional
    background = [0.0, 0.0, 0.0]     # optional, sky gradient otherwise

    [[materials]]
    type = "diffuse"                 # or "metal" (albedo), "dielectric" (ir),
    albedo = [0.8, 0.3, 0.3]         # "light" (color)

    [[objects]]
    material = 0
    shape = { type = "sphere", center = [0.0, 0.0, -1.0], radius = 0.5 }

Rotations are either Euler angles in radians (roll about X, pitch about Y,
yaw about Z) or a ``direction`` to look along. Shapes are ``sphere``
(center, radius), ``quad`` (q, u, v) or ``prism`` (origin, width, height,
depth and an optional rotation).

Every problem with the file is reported as a SceneError naming the entry it
came from.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from pathtracer.camera.thin_lens import CameraParams
from pathtracer.core import orientation
from pathtracer.errors import SceneError
from pathtracer.geometry.prism import Prism
from pathtracer.geometry.quad import QuadPrimitive
from pathtracer.geometry.sphere import SpherePrimitive
from pathtracer.materials.types import Dielectric, Diffuse, Light, Material, Metal

logger = logging.getLogger(__name__)

SceneObject = Union[SpherePrimitive, QuadPrimitive, Prism]


@dataclass
class Scene:
    """A parsed scene: camera settings, shared materials and objects.

    Attributes:
        camera: Camera and render configuration.
        materials: Materials referenced by index from the objects.
        objects: Spheres, quads and prisms in intersection order.
    """

    camera: CameraParams
    materials: list[Material] = field(default_factory=list)
    objects: list[SceneObject] = field(default_factory=list)


def load_scene(path: Union[str, Path]) -> Scene:
    """Read and parse a scene file.

    Raises:
        SceneError: If the file cannot be read or describes an invalid scene.
    """
    path = Path(path)
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as exc:
        raise SceneError(f"Cannot read scene file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise SceneError(f"Invalid TOML in {path}: {exc}") from exc

    scene = parse_scene(data)
    logger.info(
        "Loaded %s: %d materials, %d objects", path, len(scene.materials), len(scene.objects)
    )
    return scene


def loads_scene(text: str) -> Scene:
    """Parse a scene from a TOML string."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise SceneError(f"Invalid TOML: {exc}") from exc
    return parse_scene(data)


def parse_scene(data: dict[str, Any]) -> Scene:
    """Build a Scene from an already-decoded TOML document."""
    if "camera" not in data:
        raise SceneError("Scene has no [camera] table")

    camera = _parse_camera(data["camera"])
    materials = [
        _with_context(f"materials[{i}]", _parse_material, entry)
        for i, entry in enumerate(data.get("materials", []))
    ]
    objects = [
        _with_context(f"objects[{i}]", _parse_object, entry)
        for i, entry in enumerate(data.get("objects", []))
    ]

    for i, obj in enumerate(objects):
        if obj.material_index >= len(materials):
            raise SceneError(
                f"objects[{i}]: material {obj.material_index} does not exist "
                f"({len(materials)} materials defined)"
            )

    return Scene(camera=camera, materials=materials, objects=objects)


def _with_context(where: str, parse, entry):
    try:
        return parse(entry)
    except SceneError as exc:
        raise SceneError(f"{where}: {exc}") from exc
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SceneError(f"{where}: {_describe(exc)}") from exc


def _describe(exc: Exception) -> str:
    if isinstance(exc, KeyError):
        return f"missing key {exc.args[0]!r}"
    return str(exc)


def _vec3(value, name: str) -> tuple[float, float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise SceneError(f"{name} must be a list of 3 numbers, got {value!r}")
    return tuple(float(x) for x in value)


def _parse_rotation(value: dict[str, Any]):
    kind = value.get("type")
    if kind == "euler":
        return orientation.from_euler(
            float(value["roll"]), float(value["pitch"]), float(value["yaw"])
        )
    if kind == "direction":
        return orientation.facing((float(value["x"]), float(value["y"]), float(value["z"])))
    raise SceneError(f"unknown rotation type {kind!r}")


def _parse_camera(table: dict[str, Any]) -> CameraParams:
    return _with_context("camera", _build_camera, table)


def _build_camera(table: dict[str, Any]) -> CameraParams:
    dims = table["image-dimensions"]
    if not isinstance(dims, (list, tuple)) or len(dims) != 2:
        raise SceneError(f"image-dimensions must be [width, height], got {dims!r}")

    kwargs: dict[str, Any] = {
        "width": int(dims[0]),
        "height": int(dims[1]),
        "fov": float(table["fov"]),
    }
    if "samples-per-pixel" in table:
        kwargs["samples_per_pixel"] = int(table["samples-per-pixel"])
    if "max-depth" in table:
        kwargs["max_depth"] = int(table["max-depth"])
    if "position" in table:
        kwargs["position"] = _vec3(table["position"], "position")
    if "rotation" in table:
        kwargs["orientation"] = tuple(_parse_rotation(table["rotation"]))
    if "defocus" in table:
        defocus = table["defocus"]
        kwargs["focus_distance"] = float(defocus["focus_distance"])
        kwargs["defocus_angle"] = float(defocus["defocus_angle"])
    if "background" in table:
        kwargs["background"] = _vec3(table["background"], "background")
    return CameraParams(**kwargs)


def _parse_material(entry: dict[str, Any]) -> Material:
    kind = entry.get("type")
    if kind == "diffuse":
        return Diffuse(albedo=_vec3(entry["albedo"], "albedo"))
    if kind == "metal":
        return Metal(albedo=_vec3(entry["albedo"], "albedo"))
    if kind == "dielectric":
        return Dielectric(index_of_refraction=float(entry["ir"]))
    if kind == "light":
        return Light(emission=_vec3(entry["color"], "color"))
    raise SceneError(f"unknown material type {kind!r}")


def _parse_object(entry: dict[str, Any]) -> SceneObject:
    material = int(entry["material"])
    if material < 0:
        raise SceneError(f"material index must be non-negative, got {material}")
    shape = entry["shape"]
    kind = shape.get("type")

    if kind == "sphere":
        return SpherePrimitive(
            center=_vec3(shape["center"], "center"),
            radius=float(shape["radius"]),
            material_index=material,
        )
    if kind == "quad":
        return QuadPrimitive(
            q=_vec3(shape["q"], "q"),
            u=_vec3(shape["u"], "u"),
            v=_vec3(shape["v"], "v"),
            material_index=material,
        )
    if kind == "prism":
        rotation = orientation.identity()
        if "rotation" in shape:
            rotation = _parse_rotation(shape["rotation"])
        return Prism(
            origin=_vec3(shape["origin"], "origin"),
            width=float(shape["width"]),
            height=float(shape["height"]),
            depth=float(shape["depth"]),
            rotation=tuple(rotation),
            material_index=material,
        )
    raise SceneError(f"unknown shape type {kind!r}")
