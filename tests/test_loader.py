"""Tests for scene file loading.

Tests cover:
- The bundled Cornell box and three-spheres scene files
- Every camera key, material kind and shape kind
- Errors reported as SceneError with the offending entry named
"""

import math
from pathlib import Path

import pytest

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

MINIMAL = """
[camera]
image-dimensions = [40, 30]
fov = 60.0
"""


class TestExampleFiles:
    """The example scenes parse into the expected objects."""

    def test_cornell_box_file(self):
        from pathtracer.geometry import Prism, QuadPrimitive
        from pathtracer.materials import Dielectric, Diffuse, Light, Metal
        from pathtracer.scene import load_scene

        scene = load_scene(EXAMPLES / "cornell_box.toml")

        assert (scene.camera.width, scene.camera.height) == (1000, 1000)
        assert scene.camera.samples_per_pixel == 1000
        assert scene.camera.position == (278.0, 278.0, -800.0)
        assert scene.camera.fov == 40.0

        assert [type(m) for m in scene.materials] == [Diffuse, Diffuse, Diffuse, Light, Metal, Dielectric]
        assert scene.materials[3].emission == (50.0, 50.0, 50.0)
        assert scene.materials[5].index_of_refraction == 1.5

        assert len(scene.objects) == 8
        assert all(isinstance(o, QuadPrimitive) for o in scene.objects[:6])
        assert all(isinstance(o, Prism) for o in scene.objects[6:])
        assert scene.objects[2].material_index == 3
        assert scene.objects[7].height == 350.0

    def test_cornell_box_camera_faces_box(self):
        from pathtracer.camera import compute_viewport
        from pathtracer.scene import load_scene

        scene = load_scene(EXAMPLES / "cornell_box.toml")
        vp = compute_viewport(scene.camera)
        assert vp.forward == pytest.approx((0.0, 0.0, 1.0), abs=1e-9)
        assert vp.up == pytest.approx((0.0, 1.0, 0.0), abs=1e-9)

    def test_cornell_box_file_matches_preset(self):
        from pathtracer.scene import cornell_box, load_scene

        loaded = load_scene(EXAMPLES / "cornell_box.toml")
        preset = cornell_box(size=1000, samples_per_pixel=1000)
        assert loaded.materials == preset.materials
        assert loaded.objects == preset.objects

    def test_three_spheres_file(self):
        from pathtracer.scene import load_scene

        scene = load_scene(EXAMPLES / "three_spheres.toml")
        assert len(scene.objects) == 4
        assert scene.camera.max_depth == 50
        assert scene.objects[0].radius == 100.0

    def test_world_builds_from_loaded_scene(self):
        from pathtracer.scene import World, load_scene

        world = World.from_scene(load_scene(EXAMPLES / "cornell_box.toml"))
        # Six walls plus two prisms of six faces each
        assert world.num_primitives == 18


class TestCameraKeys:
    """Tests for the [camera] table."""

    def test_minimal_camera(self):
        from pathtracer.scene import loads_scene

        scene = loads_scene(MINIMAL)
        assert (scene.camera.width, scene.camera.height) == (40, 30)
        assert scene.camera.fov == 60.0
        assert scene.camera.background is None
        assert scene.materials == []
        assert scene.objects == []

    def test_all_camera_keys(self):
        from pathtracer.scene import loads_scene

        scene = loads_scene(
            """
            [camera]
            image-dimensions = [8, 6]
            samples-per-pixel = 7
            max-depth = 3
            position = [1.0, 2.0, 3.0]
            rotation = { type = "euler", roll = 0.0, pitch = 0.0, yaw = 0.0 }
            fov = 45.0
            defocus = { focus_distance = 3.4, defocus_angle = 2.0 }
            background = [0.1, 0.2, 0.3]
            """
        )
        camera = scene.camera
        assert camera.samples_per_pixel == 7
        assert camera.max_depth == 3
        assert camera.position == (1.0, 2.0, 3.0)
        assert camera.orientation == pytest.approx((1.0, 0.0, 0.0, 0.0))
        assert camera.focus_distance == 3.4
        assert camera.defocus_angle == 2.0
        assert camera.background == (0.1, 0.2, 0.3)

    def test_euler_rotation(self):
        from pathtracer.camera import compute_viewport
        from pathtracer.scene import loads_scene

        scene = loads_scene(
            MINIMAL + f'rotation = {{ type = "euler", roll = {math.pi / 2}, pitch = 0.0, yaw = 0.0 }}\n'
        )
        assert compute_viewport(scene.camera).forward == pytest.approx((0.0, 1.0, 0.0), abs=1e-9)

    def test_missing_camera(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match="camera"):
            loads_scene("[[materials]]\ntype = 'diffuse'\nalbedo = [0.5, 0.5, 0.5]\n")

    def test_missing_fov(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match="camera: missing key 'fov'"):
            loads_scene("[camera]\nimage-dimensions = [4, 4]\n")

    def test_invalid_dimensions(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match="image-dimensions"):
            loads_scene("[camera]\nimage-dimensions = [4]\nfov = 40.0\n")

    def test_out_of_range_value(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match="Field of view"):
            loads_scene("[camera]\nimage-dimensions = [4, 4]\nfov = 200.0\n")

    def test_unknown_rotation(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match="rotation type"):
            loads_scene(MINIMAL + 'rotation = { type = "spin" }\n')


class TestMaterialsAndObjects:
    """Tests for [[materials]] and [[objects]]."""

    def test_every_kind(self):
        from pathtracer.geometry import Prism, QuadPrimitive, SpherePrimitive
        from pathtracer.materials import Dielectric, Diffuse, Light, Metal
        from pathtracer.scene import loads_scene

        scene = loads_scene(
            MINIMAL
            + """
            [[materials]]
            type = "diffuse"
            albedo = [0.5, 0.5, 0.5]

            [[materials]]
            type = "metal"
            albedo = [0.8, 0.6, 0.2]

            [[materials]]
            type = "dielectric"
            ir = 1.33

            [[materials]]
            type = "light"
            color = [4.0, 4.0, 4.0]

            [[objects]]
            material = 0
            shape = { type = "sphere", center = [0.0, 0.0, -1.0], radius = 0.5 }

            [[objects]]
            material = 3
            shape = { type = "quad", q = [0.0, 1.0, 0.0], u = [1.0, 0.0, 0.0], v = [0.0, 0.0, 1.0] }

            [[objects]]
            material = 2
            shape = { type = "prism", origin = [0.0, 0.0, 0.0], width = 1.0, height = 2.0, depth = 1.0 }

            [[objects]]
            material = 1
            shape = { type = "prism", origin = [1.0, 0.0, 0.0], width = 1.0, height = 1.0, depth = 1.0, rotation = { type = "direction", x = 1.0, y = 0.0, z = 0.0 } }
            """
        )
        assert scene.materials == [
            Diffuse((0.5, 0.5, 0.5)),
            Metal((0.8, 0.6, 0.2)),
            Dielectric(1.33),
            Light((4.0, 4.0, 4.0)),
        ]
        assert [type(o) for o in scene.objects] == [SpherePrimitive, QuadPrimitive, Prism, Prism]
        assert scene.objects[2].rotation == (1.0, 0.0, 0.0, 0.0)
        assert scene.objects[3].rotation != (1.0, 0.0, 0.0, 0.0)

    def test_unknown_material(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match=r"materials\[0\]: unknown material type 'plastic'"):
            loads_scene(MINIMAL + '[[materials]]\ntype = "plastic"\n')

    def test_invalid_material_value(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match=r"materials\[0\]"):
            loads_scene(MINIMAL + '[[materials]]\ntype = "diffuse"\nalbedo = [2.0, 0.0, 0.0]\n')

    def test_unknown_shape(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match=r"objects\[0\]: unknown shape type 'torus'"):
            loads_scene(
                MINIMAL
                + '[[materials]]\ntype = "diffuse"\nalbedo = [0.5, 0.5, 0.5]\n'
                + '[[objects]]\nmaterial = 0\nshape = { type = "torus" }\n'
            )

    def test_material_out_of_range(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match=r"objects\[0\]: material 1 does not exist"):
            loads_scene(
                MINIMAL
                + '[[materials]]\ntype = "diffuse"\nalbedo = [0.5, 0.5, 0.5]\n'
                + '[[objects]]\nmaterial = 1\nshape = { type = "sphere", center = [0.0, 0.0, 0.0], radius = 1.0 }\n'
            )

    def test_degenerate_quad(self):
        from pathtracer.errors import SceneError
        from pathtracer.scene import loads_scene

        with pytest.raises(SceneError, match="parallel"):
            loads_scene(
                MINIMAL
                + '[[materials]]\ntype = "diffuse"\nalbedo = [0.5, 0.5, 0.5]\n'
                + '[[objects]]\nmaterial = 0\nshape = { type = "quad", q = [0.0, 0.0, 0.0], u = [1.0, 0.0, 0.0], v = [2.0, 0.0, 0.0] }\n'
            )


class TestFileErrors:
    """Tests for unreadable and malformed files."""

    def test_missing_file(self, tmp_path):
        from pathtracer.errors import SceneError
        from pathtracer.scene import load_scene

        with pytest.raises(SceneError, match="Cannot read"):
            load_scene(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        from pathtracer.errors import SceneError
        from pathtracer.scene import load_scene

        path = tmp_path / "bad.toml"
        path.write_text("[camera\n")
        with pytest.raises(SceneError, match="Invalid TOML"):
            load_scene(path)

    def test_scene_error_is_value_error(self):
        from pathtracer.errors import SceneError

        assert issubclass(SceneError, ValueError)
