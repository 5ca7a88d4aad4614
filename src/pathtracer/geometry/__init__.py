"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection
    quad: Parallelogram primitive with cached plane data
    prism: Box helper that expands into six quads

Intersection routines are Taichi functions; the ``*Primitive`` classes and
``Prism`` are validated Python values that scenes are built from.
"""

from .prism import Prism
from .quad import Quad, QuadPrimitive, hit_quad
from .sphere import HitRecord, Sphere, SpherePrimitive, hit_sphere

__all__ = [
    "Sphere",
    "SpherePrimitive",
    "HitRecord",
    "hit_sphere",
    "Quad",
    "QuadPrimitive",
    "hit_quad",
    "Prism",
]
