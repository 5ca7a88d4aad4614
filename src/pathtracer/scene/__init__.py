"""Scene module for world construction and scene files.

Components:
    world: Primitive and material storage in Taichi fields, nearest-hit query
    loader: TOML scene files parsed into a Scene
    presets: Built-in Cornell box and three-spheres scenes

Scene data is organized for kernel access:
    - Primitives in list order, tagged sphere or quad
    - Materials stored once and referenced by index
"""

from .loader import Scene, load_scene, loads_scene, parse_scene
from .presets import PRESETS, CornellBoxParams, cornell_box, three_spheres
from .world import Hit, SceneHitRecord, World

__all__ = [
    "World",
    "Hit",
    "SceneHitRecord",
    "Scene",
    "load_scene",
    "loads_scene",
    "parse_scene",
    "PRESETS",
    "CornellBoxParams",
    "cornell_box",
    "three_spheres",
]
