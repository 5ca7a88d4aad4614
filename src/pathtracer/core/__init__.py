"""Core rendering module.

Components:
    ray: Ray data structure, vector helpers and random sampling
    orientation: Unit quaternion helpers used while building scenes
    integrator: Bounded-depth radiance estimator and display conversion
    renderer: Render driver with per-pixel progress reporting
    worker: Background render job streaming progress to the caller

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    length_squared,
    near_zero,
    normalize,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    vec3,
)

# Note: integrator, renderer and worker are NOT imported here to avoid circular
# imports with the scene and camera packages. Import them directly, e.g.
#   from pathtracer.core.renderer import Renderer

__all__ = [
    "Ray",
    "ray_at",
    "vec3",
    "length_squared",
    "normalize",
    "reflect",
    "refract",
    "schlick_reflectance",
    "near_zero",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
]
