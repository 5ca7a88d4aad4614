"""Materials module.

Components:
    types: Material value types and their kernel representation
    diffuse: Lambertian scattering
    metal: Perfect mirror reflection
    dielectric: Glass-like refraction with Schlick reflectance
    light: Emitters that do not scatter
    dispatch: Tag-based selection of the functions above inside kernels
"""

from .dispatch import emitted, scatter
from .types import (
    Dielectric,
    Diffuse,
    Light,
    Material,
    MaterialType,
    Metal,
    kernel_params,
)

__all__ = [
    "Diffuse",
    "Metal",
    "Dielectric",
    "Light",
    "Material",
    "MaterialType",
    "kernel_params",
    "scatter",
    "emitted",
]
