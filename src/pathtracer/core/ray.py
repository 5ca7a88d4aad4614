"""Ray data structure and vector utilities for Taichi kernels.

This module provides the Ray dataclass and the vector helpers shared by the
intersection routines, the material models and the camera. All functions are
Taichi functions and can only be called from inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def point_at() -> ti.f32:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    ...     return ray_at(ray, 5.0).z
    >>> point_at()
    -5.0
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Components below this magnitude count as zero when testing scatter directions
NEAR_ZERO_EPSILON = 1e-8

# Cap on rejection sampling attempts (Taichi funcs cannot loop unbounded)
MAX_REJECTION_ATTEMPTS = 64


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length; every consumer normalizes where it matters.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Squared Euclidean length; avoids the square root when comparing."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    return tm.normalize(v)


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror a vector about a unit normal: v - 2(v.n)n.

    Args:
        v: The incoming direction (pointing toward the surface).
        n: The unit surface normal.

    Returns:
        The reflected direction. Its length equals the length of v.
    """
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: ti.f32) -> vec3:
    """Refract a unit vector through a surface using Snell's law.

    The outgoing direction is split into a component perpendicular to the
    normal, scaled by the refraction ratio, and a parallel component whose
    length keeps the result at unit length.

    Callers must rule out total internal reflection first; the absolute
    value under the square root keeps the result finite if they do not.

    Args:
        uv: The unit incoming direction.
        n: The unit normal, opposing uv.
        etai_over_etat: Ratio of the refractive indices (incident / transmitted).

    Returns:
        The refracted unit direction.
    """
    cos_theta = tm.min(tm.dot(-uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - tm.dot(r_out_perp, r_out_perp))) * n
    return r_out_perp + r_out_parallel


@ti.func
def schlick_reflectance(cosine: ti.f32, refraction_ratio: ti.f32) -> ti.f32:
    """Schlick's approximation of the Fresnel reflectance.

    Args:
        cosine: Cosine of the angle between the incoming ray and the normal.
        refraction_ratio: Ratio of the refractive indices.

    Returns:
        r0 + (1 - r0)(1 - cosine)^5 with r0 = ((1 - ratio) / (1 + ratio))^2.
    """
    r0 = (1.0 - refraction_ratio) / (1.0 + refraction_ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 if every component of v is within NEAR_ZERO_EPSILON of zero."""
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a uniformly distributed point inside the unit ball.

    Rejection samples the cube [-1, 1]^3 until the squared length is at
    most 1. Points too close to the centre to normalize are rejected too.

    Returns:
        A random point p with 0 < |p|^2 <= 1.
    """
    p = vec3(0.0, 0.0, 1.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = vec3(
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
            )
            len_sq = length_squared(candidate)
            if len_sq <= 1.0 and len_sq > 1e-12:
                p = candidate
                found = True
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector uniformly distributed on the sphere."""
    return normalize(random_in_unit_sphere())


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used to place ray origins on the camera's defocus disk.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = vec3(
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
                0.0,
            )
            if candidate.x * candidate.x + candidate.y * candidate.y < 1.0:
                p = candidate
                found = True
    return p
