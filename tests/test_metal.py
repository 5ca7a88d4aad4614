"""Unit tests for metal (mirror) scattering and the Metal type."""

import pytest
import taichi as ti


class TestScatterMetal:
    """Tests for scatter_metal."""

    def test_mirror_reflection(self):
        from pathtracer.core.ray import vec3
        from pathtracer.materials.metal import scatter_metal

        direction_out = ti.Vector.field(3, dtype=ti.f32, shape=())
        attenuation_out = ti.Vector.field(3, dtype=ti.f32, shape=())
        flag = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            direction, attenuation, did_scatter = scatter_metal(
                vec3(0.9, 0.8, 0.7), vec3(2.0, -2.0, 0.0), vec3(0.0, 1.0, 0.0)
            )
            direction_out[None] = direction
            attenuation_out[None] = attenuation
            flag[None] = did_scatter

        test_kernel()
        s = 2 ** -0.5
        assert direction_out[None].to_numpy() == pytest.approx([s, s, 0.0], abs=1e-5)
        assert attenuation_out[None].to_numpy() == pytest.approx([0.9, 0.8, 0.7], abs=1e-6)
        assert flag[None] == 1

    def test_normal_incidence_reflects_back(self):
        from pathtracer.core.ray import vec3
        from pathtracer.materials.metal import scatter_metal

        direction_out = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            direction, _, _ = scatter_metal(
                vec3(1.0, 1.0, 1.0), vec3(0.0, 0.0, -3.0), vec3(0.0, 0.0, 1.0)
            )
            direction_out[None] = direction

        test_kernel()
        assert direction_out[None].to_numpy() == pytest.approx([0.0, 0.0, 1.0], abs=1e-6)


class TestMetalType:
    """Tests for the Metal value type."""

    def test_valid(self):
        from pathtracer.materials import MaterialType, Metal

        material = Metal((0.8, 0.6, 0.2))
        assert material.kind == MaterialType.METAL
        assert material.scatters
        assert material.emit() == (0.0, 0.0, 0.0)

    def test_invalid_albedo_rejected(self):
        from pathtracer.materials import Metal

        with pytest.raises(ValueError, match="outside"):
            Metal((0.8, 1.5, 0.2))
