"""Unit tests for quad intersection.

Tests cover:
- Ray hitting quad center (front and back face)
- Edge rule: alpha and beta must lie in [0, 1)
- Ray parallel to quad plane (no intersection)
- QuadPrimitive derived plane data and validation
"""

import pytest
import taichi as ti


def run_hit(origin, direction, q, u, v, t_min=0.001, t_max=1000.0):
    """Intersect one ray with one quad inside a kernel and return the record."""
    from pathtracer.core.ray import Ray
    from pathtracer.geometry.quad import Quad, QuadPrimitive, hit_quad, vec3

    prim = QuadPrimitive(q, u, v)

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    normal = ti.Vector.field(3, dtype=ti.f32, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, lo: ti.f32, hi: ti.f32):
        quad = Quad(
            Q=vec3(*prim.q),
            u=vec3(*prim.u),
            v=vec3(*prim.v),
            normal=vec3(*prim.normal),
            d=prim.plane_offset,
            w=vec3(*prim.w),
        )
        record = hit_quad(Ray(origin=o, direction=d), quad, lo, hi)
        hit[None] = record.hit
        t_val[None] = record.t
        normal[None] = record.normal
        front_face[None] = record.front_face

    test_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
    return {
        "hit": hit[None],
        "t": t_val[None],
        "normal": normal[None].to_numpy(),
        "front_face": front_face[None],
    }


# Unit square in the z=0 plane, normal +Z
UNIT_Q = (0.0, 0.0, 0.0)
UNIT_U = (1.0, 0.0, 0.0)
UNIT_V = (0.0, 1.0, 0.0)


class TestQuadIntersection:
    """Tests for ray-quad intersection."""

    def test_hit_center_front_face(self):
        rec = run_hit((0.5, 0.5, 2.0), (0.0, 0.0, -1.0), UNIT_Q, UNIT_U, UNIT_V)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5
        assert rec["front_face"] == 1
        assert abs(rec["normal"][2] - 1.0) < 1e-5

    def test_hit_center_back_face(self):
        rec = run_hit((0.5, 0.5, -2.0), (0.0, 0.0, 1.0), UNIT_Q, UNIT_U, UNIT_V)
        assert rec["hit"] == 1
        assert rec["front_face"] == 0
        assert abs(rec["normal"][2] + 1.0) < 1e-5

    def test_miss_outside_bounds(self):
        rec = run_hit((1.5, 0.5, 2.0), (0.0, 0.0, -1.0), UNIT_Q, UNIT_U, UNIT_V)
        assert rec["hit"] == 0

    def test_parallel_ray_misses(self):
        rec = run_hit((0.5, 0.5, 0.0), (1.0, 0.0, 0.0), UNIT_Q, UNIT_U, UNIT_V)
        assert rec["hit"] == 0

    def test_behind_ray_misses(self):
        rec = run_hit((0.5, 0.5, 2.0), (0.0, 0.0, 1.0), UNIT_Q, UNIT_U, UNIT_V)
        assert rec["hit"] == 0

    def test_t_max_is_exclusive(self):
        rec = run_hit((0.5, 0.5, 2.0), (0.0, 0.0, -1.0), UNIT_Q, UNIT_U, UNIT_V, t_max=2.0)
        assert rec["hit"] == 0


class TestEdgeRule:
    """The lower edges belong to the quad, the upper edges do not."""

    def test_alpha_zero_edge_hits(self):
        rec = run_hit((0.0, 0.5, 2.0), (0.0, 0.0, -1.0), UNIT_Q, UNIT_U, UNIT_V)
        assert rec["hit"] == 1

    def test_beta_zero_edge_hits(self):
        rec = run_hit((0.5, 0.0, 2.0), (0.0, 0.0, -1.0), UNIT_Q, UNIT_U, UNIT_V)
        assert rec["hit"] == 1

    def test_alpha_one_edge_misses(self):
        rec = run_hit((1.0, 0.5, 2.0), (0.0, 0.0, -1.0), UNIT_Q, UNIT_U, UNIT_V)
        assert rec["hit"] == 0

    def test_beta_one_edge_misses(self):
        rec = run_hit((0.5, 1.0, 2.0), (0.0, 0.0, -1.0), UNIT_Q, UNIT_U, UNIT_V)
        assert rec["hit"] == 0


class TestQuadPrimitive:
    """Tests for QuadPrimitive plane caching and validation."""

    def test_derived_plane_data(self):
        from pathtracer.geometry import QuadPrimitive

        quad = QuadPrimitive((0.0, 0.0, 3.0), (2.0, 0.0, 0.0), (0.0, 4.0, 0.0), 1)
        assert quad.normal == pytest.approx((0.0, 0.0, 1.0))
        assert quad.plane_offset == pytest.approx(3.0)
        # w = n / (n . n) with n = u x v = (0, 0, 8)
        assert quad.w == pytest.approx((0.0, 0.0, 0.125))
        assert quad.area == pytest.approx(8.0)
        assert quad.material_index == 1

    def test_normal_follows_right_hand_rule(self):
        from pathtracer.geometry import QuadPrimitive

        floor = QuadPrimitive((0, 0, 0), (1, 0, 0), (0, 0, -1))
        assert floor.normal == pytest.approx((0.0, 1.0, 0.0))

    def test_parallel_edges_rejected(self):
        from pathtracer.geometry import QuadPrimitive

        with pytest.raises(ValueError, match="parallel"):
            QuadPrimitive((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (2.0, 0.0, 0.0))

    def test_malformed_vector_rejected(self):
        from pathtracer.geometry import QuadPrimitive

        with pytest.raises(ValueError):
            QuadPrimitive((0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
