"""Closed dispatch from a material tag to its scattering and emission funcs."""

import taichi as ti
import taichi.math as tm

from .dielectric import scatter_dielectric
from .diffuse import scatter_diffuse
from .light import emit_light, scatter_light
from .metal import scatter_metal
from .types import MaterialType

vec3 = tm.vec3

DIFFUSE = int(MaterialType.DIFFUSE)
METAL = int(MaterialType.METAL)
DIELECTRIC = int(MaterialType.DIELECTRIC)
LIGHT = int(MaterialType.LIGHT)


@ti.func
def scatter(
    kind: ti.i32,
    color: vec3,
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Scatter an incoming ray according to the material kind.

    Args:
        kind: MaterialType tag.
        color: Albedo for diffuse and metal, emission for lights.
        ior: Index of refraction (dielectrics only).
        incident_direction: Direction of the incoming ray.
        normal: Unit normal facing the incoming ray.
        front_face: 1 if the ray hit the outward side of the surface.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
        Unknown tags absorb the ray.
    """
    direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if kind == DIFFUSE:
        direction, attenuation, did_scatter = scatter_diffuse(color, normal)
    elif kind == METAL:
        direction, attenuation, did_scatter = scatter_metal(color, incident_direction, normal)
    elif kind == DIELECTRIC:
        direction, attenuation, did_scatter = scatter_dielectric(
            ior, incident_direction, normal, front_face
        )
    elif kind == LIGHT:
        direction, attenuation, did_scatter = scatter_light()

    return direction, attenuation, did_scatter


@ti.func
def emitted(kind: ti.i32, color: vec3) -> vec3:
    """Emission of a surface; black for everything except lights."""
    result = vec3(0.0, 0.0, 0.0)
    if kind == LIGHT:
        result = emit_light(color)
    return result
