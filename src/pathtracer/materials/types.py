"""Material value types.

Materials form a closed set. Each is a frozen dataclass validated on
construction; the world stores them once and primitives refer to them by
index. Inside kernels a material is reduced to its ``MaterialType`` tag, one
colour (albedo or emission) and one scalar (index of refraction).

Example:
    >>> from pathtracer.materials.types import Diffuse, Light
    >>> Diffuse(albedo=(0.5, 0.5, 0.5)).scatters
    True
    >>> Light(emission=(4.0, 4.0, 4.0)).emit()
    (4.0, 4.0, 4.0)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class MaterialType(IntEnum):
    """Tag used to dispatch scattering inside kernels."""

    DIFFUSE = 0
    METAL = 1
    DIELECTRIC = 2
    LIGHT = 3


BLACK = (0.0, 0.0, 0.0)


def _validate_albedo(albedo, owner: str) -> tuple[float, float, float]:
    """Check an RGB reflectance lies in [0, 1] per channel."""
    if len(albedo) != 3:
        raise ValueError(f"{owner} albedo must have 3 components, got {albedo!r}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"{owner} albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return tuple(float(c) for c in albedo)


@dataclass(frozen=True)
class Diffuse:
    """Lambertian reflector.

    Attributes:
        albedo: Reflectance per channel, each in [0, 1].
    """

    albedo: tuple[float, float, float]

    kind = MaterialType.DIFFUSE
    scatters = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", _validate_albedo(self.albedo, "Diffuse"))

    def emit(self) -> tuple[float, float, float]:
        return BLACK


@dataclass(frozen=True)
class Metal:
    """Perfect mirror tinted by its albedo.

    Attributes:
        albedo: Reflectance per channel, each in [0, 1].
    """

    albedo: tuple[float, float, float]

    kind = MaterialType.METAL
    scatters = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", _validate_albedo(self.albedo, "Metal"))

    def emit(self) -> tuple[float, float, float]:
        return BLACK


@dataclass(frozen=True)
class Dielectric:
    """Clear refractive material such as glass or water.

    Attributes:
        index_of_refraction: Ratio of the speed of light in vacuum to that in
            the material. Common values: water 1.33, glass 1.5, diamond 2.4.
    """

    index_of_refraction: float = 1.5

    kind = MaterialType.DIELECTRIC
    scatters = True

    def __post_init__(self) -> None:
        if not self.index_of_refraction >= 1.0:
            raise ValueError(
                f"Index of refraction must be >= 1.0, got {self.index_of_refraction}"
            )
        object.__setattr__(self, "index_of_refraction", float(self.index_of_refraction))

    def emit(self) -> tuple[float, float, float]:
        return BLACK


@dataclass(frozen=True)
class Light:
    """Emitter that absorbs everything that hits it.

    Attributes:
        emission: Emitted radiance per channel. Unbounded above, never negative.
    """

    emission: tuple[float, float, float]

    kind = MaterialType.LIGHT
    scatters = False

    def __post_init__(self) -> None:
        if len(self.emission) != 3:
            raise ValueError(f"Light emission must have 3 components, got {self.emission!r}")
        if any(c < 0.0 for c in self.emission):
            raise ValueError(f"Light emission must be non-negative, got {self.emission!r}")
        object.__setattr__(self, "emission", tuple(float(c) for c in self.emission))

    def emit(self) -> tuple[float, float, float]:
        return self.emission


Material = Union[Diffuse, Metal, Dielectric, Light]


def kernel_params(material: Material) -> tuple[int, tuple[float, float, float], float]:
    """Flatten a material into the (kind, colour, ior) triple stored in fields."""
    if isinstance(material, (Diffuse, Metal)):
        return int(material.kind), material.albedo, 1.0
    if isinstance(material, Dielectric):
        return int(material.kind), BLACK, material.index_of_refraction
    if isinstance(material, Light):
        return int(material.kind), material.emission, 1.0
    raise TypeError(f"Unsupported material: {material!r}")
