"""The world: an ordered list of primitives sharing a list of materials.

Primitives are uploaded into Taichi fields in list order. Every field is
indexed by primitive position, and a per-primitive kind tag selects whether
the sphere or the quad slot holds the data. Materials live in their own
fields and are referenced by index, so many primitives can share one
material.

The nearest-hit query scans every primitive in order with a shrinking upper
bound. Because the bound is exclusive, a later primitive at exactly the same
distance never replaces an earlier one.

Example:
    >>> from pathtracer.geometry import SpherePrimitive
    >>> from pathtracer.materials import Diffuse
    >>> world = World([SpherePrimitive((0, 0, -1), 0.5, 0)], [Diffuse((0.5, 0.5, 0.5))])
    >>> world.hit((0, 0, 0), (0, 0, -1), 0.001, float("inf")).t
    0.5
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import Ray
from pathtracer.geometry.prism import Prism
from pathtracer.geometry.quad import Quad, QuadPrimitive, hit_quad
from pathtracer.geometry.sphere import HitRecord, Sphere, SpherePrimitive, hit_sphere
from pathtracer.materials.types import Material, kernel_params

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

KIND_SPHERE = 0
KIND_QUAD = 1

Primitive = Union[SpherePrimitive, QuadPrimitive]


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-world intersection with material information.

    Attributes:
        hit: 1 if any primitive was hit, 0 on a miss.
        t: Ray parameter of the nearest intersection.
        point: The 3D point of intersection.
        normal: Unit normal facing against the ray.
        front_face: 1 if the ray hit the outward side of the surface.
        material_id: Index of the hit primitive's material, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@dataclass(frozen=True)
class Hit:
    """Python-scope view of a nearest-hit query."""

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    front_face: bool
    material_index: int


@ti.func
def _to_scene_hit_record(rec: HitRecord, material_id: ti.i32) -> SceneHitRecord:
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        front_face=rec.front_face,
        material_id=material_id,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


def flatten(objects: Sequence[Union[Primitive, Prism]]) -> list[Primitive]:
    """Expand prisms into their six faces, keeping list order."""
    primitives: list[Primitive] = []
    for obj in objects:
        if isinstance(obj, Prism):
            primitives.extend(obj.quads())
        elif isinstance(obj, (SpherePrimitive, QuadPrimitive)):
            primitives.append(obj)
        else:
            raise TypeError(f"Unsupported scene object: {obj!r}")
    return primitives


@ti.data_oriented
class World:
    """Primitives and materials uploaded to Taichi fields.

    The world is read-only once constructed; build a new one to change the
    scene.

    Args:
        objects: Spheres, quads and prisms, in intersection order.
        materials: The shared material list.

    Raises:
        ValueError: If a primitive refers to a material index outside
            ``materials``.
    """

    def __init__(
        self,
        objects: Sequence[Union[Primitive, Prism]],
        materials: Sequence[Material],
    ) -> None:
        self.primitives: list[Primitive] = flatten(objects)
        self.materials: list[Material] = list(materials)

        for i, prim in enumerate(self.primitives):
            if not 0 <= prim.material_index < len(self.materials):
                raise ValueError(
                    f"Primitive {i} refers to material {prim.material_index}, "
                    f"but the world has {len(self.materials)} materials"
                )

        # Python ints are baked into kernels as compile-time constants
        self.num_primitives = len(self.primitives)
        self.num_materials = len(self.materials)

        prim_capacity = max(self.num_primitives, 1)
        mat_capacity = max(self.num_materials, 1)

        self.kinds = ti.field(dtype=ti.i32, shape=prim_capacity)
        self.material_ids = ti.field(dtype=ti.i32, shape=prim_capacity)
        self.spheres = Sphere.field(shape=prim_capacity)
        self.quads = Quad.field(shape=prim_capacity)

        self.material_kinds = ti.field(dtype=ti.i32, shape=mat_capacity)
        self.material_colors = ti.Vector.field(3, dtype=ti.f32, shape=mat_capacity)
        self.material_iors = ti.field(dtype=ti.f32, shape=mat_capacity)

        # Result slots for Python-scope queries
        self._q_hit = ti.field(dtype=ti.i32, shape=())
        self._q_t = ti.field(dtype=ti.f32, shape=())
        self._q_point = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._q_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._q_front_face = ti.field(dtype=ti.i32, shape=())
        self._q_material = ti.field(dtype=ti.i32, shape=())

        self._upload()
        logger.debug(
            "World uploaded: %d primitives (%d input objects), %d materials",
            self.num_primitives,
            len(objects),
            self.num_materials,
        )

    @classmethod
    def from_scene(cls, scene) -> "World":
        """Build a world from a parsed scene's objects and materials."""
        return cls(scene.objects, scene.materials)

    def _upload(self) -> None:
        for i, prim in enumerate(self.primitives):
            self.material_ids[i] = prim.material_index
            if isinstance(prim, SpherePrimitive):
                self.kinds[i] = KIND_SPHERE
                self.spheres.center[i] = vec3(*prim.center)
                self.spheres.radius[i] = prim.radius
            else:
                self.kinds[i] = KIND_QUAD
                self.quads.Q[i] = vec3(*prim.q)
                self.quads.u[i] = vec3(*prim.u)
                self.quads.v[i] = vec3(*prim.v)
                self.quads.normal[i] = vec3(*prim.normal)
                self.quads.d[i] = prim.plane_offset
                self.quads.w[i] = vec3(*prim.w)

        for i, material in enumerate(self.materials):
            kind, color, ior = kernel_params(material)
            self.material_kinds[i] = kind
            self.material_colors[i] = vec3(*color)
            self.material_iors[i] = ior

    @ti.func
    def intersect(
        self,
        ray: Ray,
        t_min: ti.f32,
        t_max: ti.f32,
    ) -> SceneHitRecord:
        """Find the nearest hit with t in [t_min, t_max).

        Returns:
            A SceneHitRecord for the closest primitive, or a miss record.
        """
        closest_t = t_max
        result = _make_miss_record()

        for i in range(self.num_primitives):
            rec = HitRecord(hit=0)
            if self.kinds[i] == KIND_SPHERE:
                rec = hit_sphere(ray, self.spheres[i], t_min, closest_t)
            else:
                rec = hit_quad(ray, self.quads[i], t_min, closest_t)
            if rec.hit == 1:
                closest_t = rec.t
                result = _to_scene_hit_record(rec, self.material_ids[i])

        return result

    @ti.kernel
    def _query(self, origin: vec3, direction: vec3, t_min: ti.f32, t_max: ti.f32):
        rec = self.intersect(Ray(origin=origin, direction=direction), t_min, t_max)
        self._q_hit[None] = rec.hit
        self._q_t[None] = rec.t
        self._q_point[None] = rec.point
        self._q_normal[None] = rec.normal
        self._q_front_face[None] = rec.front_face
        self._q_material[None] = rec.material_id

    def hit(self, origin, direction, t_min: float, t_max: float) -> Optional[Hit]:
        """Nearest hit along a ray, queried from Python scope.

        Args:
            origin: Ray origin as 3 numbers.
            direction: Ray direction as 3 numbers (any non-zero length).
            t_min: Smallest accepted t (inclusive).
            t_max: Upper bound on t (exclusive); may be ``float("inf")``.

        Returns:
            The nearest Hit, or None when the ray misses everything.
        """
        self._query(vec3(*origin), vec3(*direction), t_min, t_max)
        if self._q_hit[None] == 0:
            return None
        return Hit(
            t=float(self._q_t[None]),
            point=tuple(float(x) for x in self._q_point[None].to_numpy()),
            normal=tuple(float(x) for x in self._q_normal[None].to_numpy()),
            front_face=bool(self._q_front_face[None]),
            material_index=int(self._q_material[None]),
        )
