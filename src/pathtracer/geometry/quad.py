"""Quad primitive with ray-quad intersection.

A quad is the parallelogram spanned by a corner point ``q`` and two edge
vectors ``u`` and ``v``; its vertices are q, q+u, q+v and q+u+v. The outward
normal follows the right-hand rule, ``normalize(u x v)``.

Intersection is the parametric plane test:
1. Find where the ray meets the plane containing the quad.
2. Express that point in the quad's (alpha, beta) edge coordinates.
3. Accept it when both coordinates lie in [0, 1).

The plane data (unit normal, plane offset and the reciprocal normal ``w``)
depends only on the quad, so ``QuadPrimitive`` computes it once with NumPy
and the world uploads it alongside the corner and edges.

Example:
    >>> from pathtracer.geometry.quad import QuadPrimitive
    >>> floor = QuadPrimitive(q=(0, 0, 0), u=(1, 0, 0), v=(0, 0, -1))
    >>> floor.normal
    (0.0, 1.0, 0.0)
"""

from dataclasses import dataclass, field

import numpy as np
import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import Ray, ray_at

from .sphere import HitRecord, set_face_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays with |normal . direction| below this are treated as parallel to the plane
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Quad:
    """A quad with its cached plane frame.

    Attributes:
        Q: The corner point of the quad (vec3).
        u: Edge vector from Q to adjacent corner (vec3).
        v: Edge vector from Q to other adjacent corner (vec3).
        normal: Unit plane normal, normalize(u x v).
        d: Plane offset, dot(normal, Q).
        w: Reciprocal normal (u x v) / |u x v|^2 for the edge coordinates.
    """

    Q: vec3
    u: vec3
    v: vec3
    normal: vec3
    d: ti.f32
    w: vec3


@ti.func
def hit_quad(
    ray: Ray,
    quad: Quad,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-quad intersection.

    The plane is hit at

        t = (d - dot(normal, origin)) / dot(normal, direction)

    and with p = hit_point - Q the edge coordinates are

        alpha = dot(w, p x v)
        beta = dot(w, u x p)

    Args:
        ray: The ray to test; its direction need not be normalized.
        quad: The quad to test intersection against.
        t_min: Smallest accepted t (inclusive).
        t_max: Upper bound on t (exclusive).

    Returns:
        A HitRecord; check its hit field.
    """
    denom = tm.dot(quad.normal, ray.direction)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if ti.abs(denom) >= PARALLEL_EPSILON:
        t = (quad.d - tm.dot(quad.normal, ray.origin)) / denom

        if t >= t_min and t < t_max:
            point = ray_at(ray, t)
            planar = point - quad.Q
            alpha = tm.dot(quad.w, tm.cross(planar, quad.v))
            beta = tm.dot(quad.w, tm.cross(quad.u, planar))

            if 0.0 <= alpha < 1.0 and 0.0 <= beta < 1.0:
                did_hit = 1
                hit_t = t
                hit_point = point
                is_front_face, hit_normal = set_face_normal(ray.direction, quad.normal)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
    )


def _as_vec3(value, name: str) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,) or not np.all(np.isfinite(arr)):
        raise ValueError(f"Quad {name} must be 3 finite numbers, got {value!r}")
    return arr


@dataclass(frozen=True)
class QuadPrimitive:
    """A quad placed in a scene, with its plane frame precomputed.

    Attributes:
        q: Corner point.
        u: First edge vector.
        v: Second edge vector.
        material_index: Index into the world's material list.
        normal: Unit normal normalize(u x v) (derived).
        plane_offset: dot(normal, q) (derived).
        w: (u x v) / |u x v|^2 (derived).

    Raises:
        ValueError: If u and v are parallel (zero area) or malformed.
    """

    q: tuple[float, float, float]
    u: tuple[float, float, float]
    v: tuple[float, float, float]
    material_index: int = 0
    normal: tuple[float, float, float] = field(init=False)
    plane_offset: float = field(init=False)
    w: tuple[float, float, float] = field(init=False)

    def __post_init__(self) -> None:
        q = _as_vec3(self.q, "corner")
        u = _as_vec3(self.u, "edge u")
        v = _as_vec3(self.v, "edge v")
        if self.material_index < 0:
            raise ValueError(f"Material index must be non-negative, got {self.material_index}")

        n = np.cross(u, v)
        n_dot_n = float(np.dot(n, n))
        if n_dot_n < 1e-20:
            raise ValueError("Quad edges u and v must not be parallel")
        normal = n / np.sqrt(n_dot_n)

        object.__setattr__(self, "q", tuple(float(x) for x in q))
        object.__setattr__(self, "u", tuple(float(x) for x in u))
        object.__setattr__(self, "v", tuple(float(x) for x in v))
        object.__setattr__(self, "normal", tuple(float(x) for x in normal))
        object.__setattr__(self, "plane_offset", float(np.dot(normal, q)))
        object.__setattr__(self, "w", tuple(float(x) for x in n / n_dot_n))

    @property
    def area(self) -> float:
        """Area of the parallelogram, |u x v|."""
        return float(np.linalg.norm(np.cross(self.u, self.v)))
