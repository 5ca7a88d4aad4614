"""Dielectric (glass/water) scattering.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when ratio * sin(theta) > 1

Each interaction picks reflection or refraction at random, with the
reflection probability given by Schlick's approximation, so the expected
contribution matches the Fresnel split without branching the path.
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import normalize, reflect, refract, schlick_reflectance

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_dielectric(
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Compute the scattered direction for a dielectric surface.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing the incoming ray.
        front_face: 1 if the ray enters the material from outside,
            0 if it is leaving the material.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The reflected or refracted unit direction.
        - attenuation: White; clear glass absorbs nothing.
        - did_scatter: Always 1.
    """
    refraction_ratio = ior
    if front_face == 1:
        refraction_ratio = 1.0 / ior

    unit_direction = normalize(incident_direction)
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(tm.max(0.0, 1.0 - cos_theta * cos_theta))

    cannot_refract = refraction_ratio * sin_theta > 1.0

    direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or schlick_reflectance(cos_theta, refraction_ratio) > ti.random(ti.f32):
        direction = reflect(unit_direction, normal)
    else:
        direction = refract(unit_direction, normal, refraction_ratio)

    return direction, vec3(1.0, 1.0, 1.0), 1
