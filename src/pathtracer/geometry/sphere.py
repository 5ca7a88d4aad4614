"""Sphere primitive with robust ray-sphere intersection.

This module provides the Taichi-side Sphere struct and its intersection
function, plus ``SpherePrimitive``, the validated Python value that scenes
are built from.

The roots of the intersection quadratic are computed with the reformulated
expression from Ray Tracing Gems so that nearly tangent rays do not suffer
catastrophic cancellation.

Example:
    >>> from pathtracer.geometry.sphere import SpherePrimitive
    >>> ball = SpherePrimitive(center=(0.0, 0.0, -1.0), radius=0.5, material_index=0)
    >>> ball.radius
    0.5
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import Ray, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 on a miss.
        t: Ray parameter of the intersection. Only valid if hit == 1.
        point: The 3D point of intersection. Only valid if hit == 1.
        normal: Unit surface normal, always facing against the ray.
            Only valid if hit == 1.
        front_face: 1 if the ray arrived from the outward side of the surface.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve a*t^2 + 2*h*t + c = 0 given sqrt(h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Tangent ray through the origin side; the standard form is exact here
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def set_face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient a unit outward normal against the incoming ray.

    Returns:
        Tuple of (front_face, normal). front_face is 1 when the ray travels
        against the outward normal; the returned normal always opposes the ray.
    """
    front_face = 0
    normal = -outward_normal
    if tm.dot(ray_direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal
    return front_face, normal


@ti.func
def hit_sphere(
    ray: Ray,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    The intersection solves |origin + t * direction - center|^2 = radius^2,
    which expands to the quadratic a*t^2 + 2*h*t + c = 0 with

        a = dot(direction, direction)
        h = dot(direction, oc)  (half of the traditional b)
        c = dot(oc, oc) - radius^2
        oc = origin - center

    The nearer root is taken if it lies in [t_min, t_max), otherwise the
    farther root, otherwise the ray misses.

    Args:
        ray: The ray to test; its direction need not be normalized.
        sphere: The sphere to test intersection against.
        t_min: Smallest accepted t (inclusive).
        t_max: Upper bound on t (exclusive).

    Returns:
        A HitRecord; check its hit field.
    """
    oc = ray.origin - sphere.center

    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(h, a, c, sqrt_d)

        t = t0
        valid = (t >= t_min) and (t < t_max)

        if not valid:
            t = t1
            valid = (t >= t_min) and (t < t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = ray_at(ray, t)
            outward_normal = (hit_point - sphere.center) / sphere.radius
            is_front_face, hit_normal = set_face_normal(ray.direction, outward_normal)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
    )


@dataclass(frozen=True)
class SpherePrimitive:
    """A sphere placed in a scene.

    Attributes:
        center: Center point as an (x, y, z) tuple.
        radius: Radius; must be positive.
        material_index: Index into the world's material list.

    Raises:
        ValueError: If the radius is not positive or the center is malformed.
    """

    center: tuple[float, float, float]
    radius: float
    material_index: int = 0

    def __post_init__(self) -> None:
        center = np.asarray(self.center, dtype=np.float64)
        if center.shape != (3,) or not np.all(np.isfinite(center)):
            raise ValueError(f"Sphere center must be 3 finite numbers, got {self.center!r}")
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        if self.material_index < 0:
            raise ValueError(f"Material index must be non-negative, got {self.material_index}")
        object.__setattr__(self, "center", tuple(float(x) for x in center))
        object.__setattr__(self, "radius", float(self.radius))
