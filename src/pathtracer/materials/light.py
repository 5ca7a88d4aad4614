"""Emissive surfaces.

A light absorbs every ray that reaches it and contributes its emission
colour instead. Only the emission lookup lives here; the integrator decides
whether emission is added to the path.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_light():
    """Lights never scatter.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) with
        did_scatter = 0.
    """
    return vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 0.0), 0


@ti.func
def emit_light(emission: vec3) -> vec3:
    return emission
