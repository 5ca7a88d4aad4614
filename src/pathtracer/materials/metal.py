"""Metal (specular mirror) scattering."""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import normalize, reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metal(albedo: vec3, incident_direction: vec3, normal: vec3):
    """Reflect the incoming direction about the normal.

    Args:
        albedo: The reflective color (RGB, each component in [0, 1]).
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing the incoming ray.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). The
        reflected direction is unit length and the surface always scatters.
    """
    reflected = reflect(normalize(incident_direction), normal)
    return reflected, albedo, 1
