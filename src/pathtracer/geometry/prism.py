"""Axis-aligned box helper that expands into six quads.

A prism is described in its own local frame: the origin sits at the centre of
the base, width runs along X, height along Y and depth along Z. An optional
rotation quaternion turns the local frame about the origin before it is placed
in the world. The world never stores prisms directly; they are flattened into
their faces when a scene is built.
"""

from dataclasses import dataclass

import numpy as np

from pathtracer.core import orientation

from .quad import QuadPrimitive


@dataclass(frozen=True)
class Prism:
    """A rectangular box resting on its base centre.

    Attributes:
        origin: World position of the base centre.
        width: Extent along the local X axis.
        height: Extent along the local Y axis (upward from the origin).
        depth: Extent along the local Z axis.
        rotation: Unit quaternion (w, x, y, z) applied about the origin.
        material_index: Index into the world's material list for every face.

    Raises:
        ValueError: If any extent is not positive.
    """

    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    width: float = 1.0
    height: float = 1.0
    depth: float = 1.0
    rotation: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    material_index: int = 0

    def __post_init__(self) -> None:
        for name in ("width", "height", "depth"):
            value = getattr(self, name)
            if not value > 0.0:
                raise ValueError(f"Prism {name} must be positive, got {value}")
        origin = np.asarray(self.origin, dtype=np.float64)
        if origin.shape != (3,):
            raise ValueError(f"Prism origin must have 3 components, got {self.origin!r}")
        object.__setattr__(self, "origin", tuple(float(x) for x in origin))
        object.__setattr__(
            self, "rotation", tuple(float(x) for x in orientation.normalize(self.rotation))
        )

    def quads(self) -> list[QuadPrimitive]:
        """Return the six outward-facing faces.

        Faces come out in the order front (+Z), right (+X), back (-Z),
        left (-X), top (+Y), bottom (-Y).
        """
        lo = np.array([-0.5 * self.width, 0.0, -0.5 * self.depth])
        hi = np.array([0.5 * self.width, self.height, 0.5 * self.depth])

        dx = np.array([hi[0] - lo[0], 0.0, 0.0])
        dy = np.array([0.0, hi[1] - lo[1], 0.0])
        dz = np.array([0.0, 0.0, hi[2] - lo[2]])

        local_faces = [
            (np.array([lo[0], lo[1], hi[2]]), dx, dy),
            (np.array([hi[0], lo[1], hi[2]]), -dz, dy),
            (np.array([hi[0], lo[1], lo[2]]), -dx, dy),
            (np.array([lo[0], lo[1], lo[2]]), dz, dy),
            (np.array([lo[0], hi[1], hi[2]]), dx, -dz),
            (np.array([lo[0], lo[1], lo[2]]), dx, dz),
        ]

        rot = orientation.to_matrix(self.rotation)
        origin = np.asarray(self.origin)
        return [
            QuadPrimitive(
                q=origin + rot @ corner,
                u=rot @ u,
                v=rot @ v,
                material_index=self.material_index,
            )
            for corner, u, v in local_faces
        ]
