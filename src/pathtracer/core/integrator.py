"""Path tracing integrator for Monte Carlo light transport.

The radiance arriving along a ray is estimated by following a single random
path: at each hit the surface material either scatters the ray (multiplying
the path throughput by its attenuation) or absorbs it. Rays that escape the
scene pick up the background. A path that is still bouncing after
``max_depth`` interactions contributes nothing.

The estimator is the loop form of the recursive definition

    radiance(ray, 0) = 0
    radiance(ray, d) = background(ray)                          on a miss
                     = emitted + attenuation * radiance(scattered, d - 1)
                                                                on a scatter
                     = emitted                                  on absorption

Surface emission is included when ``light_emission`` is enabled; with it
disabled a light surface simply terminates the path in black.

Example:
    >>> from pathtracer.core.integrator import trace
    >>> from pathtracer.scene.world import World
    >>> trace(World([], []), (0, 0, 0), (0, 1, 0), depth=10)  # straight up at the sky
    (0.5, 0.7, 1.0)
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import Ray
from pathtracer.materials.dispatch import emitted, scatter

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Hits closer than this are ignored to avoid self-intersection (shadow acne)
T_MIN = 0.001

# Unbounded far limit
T_MAX = tm.inf

# Sky gradient endpoints, blended by the ray's vertical direction
SKY_HORIZON = vec3(1.0, 1.0, 1.0)
SKY_ZENITH = vec3(0.5, 0.7, 1.0)

# Largest byte value reached by a channel of exactly 1.0
QUANTIZE_SCALE = 255.999


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Vertical white-to-blue gradient used when no flat background is set."""
    unit_direction = tm.normalize(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * SKY_HORIZON + a * SKY_ZENITH


@ti.func
def radiance(
    world: ti.template(),
    ray: Ray,
    max_depth: ti.i32,
    background: vec3,
    use_sky: ti.i32,
    light_emission: ti.i32,
) -> vec3:
    """Estimate the radiance arriving back along ``ray``.

    Args:
        world: The World to trace against.
        ray: The primary ray; its direction may have any non-zero length.
        max_depth: Maximum number of surface interactions.
        background: Flat background colour, used when use_sky == 0.
        use_sky: 1 to use the sky gradient for escaped rays.
        light_emission: 1 to add the emission of light surfaces.

    Returns:
        One Monte Carlo sample of the incoming radiance.
    """
    result = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray

    # Taichi funcs cannot break out of loops; inactive paths skip the body
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = world.intersect(current, T_MIN, T_MAX)

            if rec.hit == 0:
                sky = background
                if use_sky == 1:
                    sky = sky_color(current.direction)
                result += throughput * sky
                active = 0
            else:
                kind = world.material_kinds[rec.material_id]
                color = world.material_colors[rec.material_id]
                ior = world.material_iors[rec.material_id]

                if light_emission == 1:
                    result += throughput * emitted(kind, color)

                scattered, attenuation, did_scatter = scatter(
                    kind, color, ior, current.direction, rec.normal, rec.front_face
                )

                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    current = Ray(origin=rec.point, direction=scattered)

    return result


@ti.func
def to_display(color: vec3) -> vec3:
    """Map a linear colour to a display value in [0, 1].

    NaN channels become 0, values are clamped to [0, 1] and gamma 2
    (square root) is applied.
    """
    result = color
    for c in ti.static(range(3)):
        if tm.isnan(result[c]):
            result[c] = 0.0
    result = tm.clamp(result, 0.0, 1.0)
    return ti.sqrt(result)


@ti.func
def quantize(value: ti.f32) -> ti.u8:
    """Convert a display value in [0, 1] to a byte."""
    return ti.cast(ti.cast(value * QUANTIZE_SCALE, ti.i32), ti.u8)


@ti.kernel
def _trace_kernel(
    world: ti.template(),
    origin: vec3,
    direction: vec3,
    depth: ti.i32,
    background: vec3,
    use_sky: ti.i32,
    light_emission: ti.i32,
) -> vec3:
    ray = Ray(origin=origin, direction=direction)
    return radiance(world, ray, depth, background, use_sky, light_emission)


def trace(
    world,
    origin,
    direction,
    depth: int,
    background=None,
    light_emission: bool = True,
) -> tuple[float, float, float]:
    """Evaluate one radiance sample along a ray from Python scope.

    Args:
        world: The World to trace against.
        origin: Ray origin as 3 numbers.
        direction: Ray direction as 3 numbers.
        depth: Maximum number of surface interactions; 0 gives black.
        background: Flat background colour, or None for the sky gradient.
        light_emission: Whether light surfaces contribute their emission.

    Returns:
        Tuple of (R, G, B) linear radiance.
    """
    use_sky = 1 if background is None else 0
    flat = (0.0, 0.0, 0.0) if background is None else background
    color = _trace_kernel(
        world,
        vec3(*origin),
        vec3(*direction),
        depth,
        vec3(*flat),
        use_sky,
        int(light_emission),
    )
    return (float(color[0]), float(color[1]), float(color[2]))
