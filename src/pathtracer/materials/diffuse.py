"""Diffuse (Lambertian) scattering.

A diffuse surface scatters toward ``normal + random_unit_vector()``, which
distributes outgoing directions with a cosine falloff about the normal. The
attenuation is the albedo because the cosine weighting cancels against the
sampling density.
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import near_zero, random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_diffuse(albedo: vec3, normal: vec3):
    """Sample a scattered direction off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
        normal: The unit surface normal, facing the incoming ray.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). A diffuse
        surface always scatters.
    """
    scattered_direction = normal + random_unit_vector()

    # The sample can land opposite the normal and cancel it out
    if near_zero(scattered_direction):
        scattered_direction = normal

    return scattered_direction, albedo, 1
