"""Tests for the path tracing integrator.

This module tests the radiance estimator through the Python-scope ``trace``
wrapper:
- Sky gradient and flat background on a miss
- Depth limit
- Light emission and the switch that disables it
- Deterministic mirror bounces

Note: Imports are done inside test methods so that Taichi is initialized by
the session fixture before any field is allocated.
"""

import math

import pytest


def approx3(values, abs=1e-5):
    return pytest.approx(values, abs=abs)


class TestMiss:
    """Rays that hit nothing pick up the background."""

    def test_sky_straight_up(self):
        from pathtracer.core.integrator import trace
        from pathtracer.scene.world import World

        assert trace(World([], []), (0, 0, 0), (0, 1, 0), depth=10) == approx3((0.5, 0.7, 1.0))

    def test_sky_straight_down_is_white(self):
        from pathtracer.core.integrator import trace
        from pathtracer.scene.world import World

        assert trace(World([], []), (0, 0, 0), (0, -5, 0), depth=10) == approx3((1.0, 1.0, 1.0))

    def test_sky_horizon_blend(self):
        from pathtracer.core.integrator import trace
        from pathtracer.scene.world import World

        assert trace(World([], []), (0, 0, 0), (1, 0, 0), depth=1) == approx3((0.75, 0.85, 1.0))

    def test_flat_background(self):
        from pathtracer.core.integrator import trace
        from pathtracer.scene.world import World

        color = trace(World([], []), (0, 0, 0), (0, 1, 0), depth=3, background=(0.1, 0.2, 0.3))
        assert color == approx3((0.1, 0.2, 0.3))


class TestDepthLimit:
    """Paths that run out of depth contribute nothing."""

    def test_depth_zero_is_black(self):
        from pathtracer.core.integrator import trace
        from pathtracer.scene.world import World

        assert trace(World([], []), (0, 0, 0), (0, 1, 0), depth=0) == (0.0, 0.0, 0.0)

    def test_diffuse_hit_at_depth_one_is_black(self, gray_diffuse):
        from pathtracer.core.integrator import trace
        from pathtracer.geometry import SpherePrimitive
        from pathtracer.scene.world import World

        world = World([SpherePrimitive((0, 0, -2), 1.0, 0)], [gray_diffuse])
        assert trace(world, (0, 0, 0), (0, 0, -1), depth=1) == (0.0, 0.0, 0.0)


class TestMirror:
    """Metal bounces are deterministic, so radiance can be checked exactly."""

    def test_mirror_reflects_sky(self):
        from pathtracer.core.integrator import trace
        from pathtracer.geometry import QuadPrimitive
        from pathtracer.materials import Metal
        from pathtracer.scene.world import World

        # Mirror facing +Z; the ray bounces straight back toward +Z
        world = World([QuadPrimitive((-1, -1, -2), (2, 0, 0), (0, 2, 0), 0)], [Metal((0.5, 0.5, 0.5))])
        color = trace(world, (0, 0, 0), (0, 0, -1), depth=2)
        assert color == approx3((0.375, 0.425, 0.5))

    def test_mirror_needs_two_bounces(self):
        from pathtracer.core.integrator import trace
        from pathtracer.geometry import QuadPrimitive
        from pathtracer.materials import Metal
        from pathtracer.scene.world import World

        world = World([QuadPrimitive((-1, -1, -2), (2, 0, 0), (0, 2, 0), 0)], [Metal((0.5, 0.5, 0.5))])
        assert trace(world, (0, 0, 0), (0, 0, -1), depth=1) == (0.0, 0.0, 0.0)


class TestLightEmission:
    """Light surfaces end the path and optionally add their emission."""

    def _light_world(self):
        from pathtracer.geometry import QuadPrimitive
        from pathtracer.materials import Light
        from pathtracer.scene.world import World

        return World([QuadPrimitive((-1, -1, -2), (2, 0, 0), (0, 2, 0), 0)], [Light((4.0, 3.0, 2.0))])

    def test_emission_added(self):
        from pathtracer.core.integrator import trace

        assert trace(self._light_world(), (0, 0, 0), (0, 0, -1), depth=5) == approx3((4.0, 3.0, 2.0))

    def test_emission_disabled(self):
        from pathtracer.core.integrator import trace

        color = trace(self._light_world(), (0, 0, 0), (0, 0, -1), depth=5, light_emission=False)
        assert color == (0.0, 0.0, 0.0)

    def test_light_seen_in_mirror(self):
        """Emission picked up after a bounce is scaled by the mirror albedo."""
        from pathtracer.core.integrator import trace
        from pathtracer.geometry import QuadPrimitive
        from pathtracer.materials import Light, Metal
        from pathtracer.scene.world import World

        s = math.sqrt(0.5)
        # Mirror at 45 degrees sends a -Z ray up to a light on the ceiling
        world = World(
            [
                QuadPrimitive((-1, -1, -1), (2, 0, 0), (0, 2 * s, -2 * s), 0),
                QuadPrimitive((-5, 3, -5), (10, 0, 0), (0, 0, 10), 1),
            ],
            [Metal((0.5, 0.5, 0.5)), Light((2.0, 2.0, 2.0))],
        )
        color = trace(world, (0, 0.1, 0), (0, 0, -1), depth=3)
        assert color == approx3((1.0, 1.0, 1.0), abs=1e-4)
