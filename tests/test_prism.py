"""Unit tests for the Prism helper."""

import math

import numpy as np
import pytest


def face_centres(prism):
    return [np.asarray(q.q) + 0.5 * (np.asarray(q.u) + np.asarray(q.v)) for q in prism.quads()]


class TestPrismFaces:
    """Tests for the six generated quads."""

    def test_six_faces(self):
        from pathtracer.geometry import Prism

        assert len(Prism(width=1.0, height=2.0, depth=3.0).quads()) == 6

    def test_face_order_and_normals(self):
        from pathtracer.geometry import Prism

        normals = [q.normal for q in Prism(width=1.0, height=1.0, depth=1.0).quads()]
        expected = [
            (0.0, 0.0, 1.0),
            (1.0, 0.0, 0.0),
            (0.0, 0.0, -1.0),
            (-1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, -1.0, 0.0),
        ]
        for actual, want in zip(normals, expected):
            assert actual == pytest.approx(want, abs=1e-12)

    def test_faces_point_outward(self):
        """Each face normal points away from the box centre."""
        from pathtracer.core import orientation
        from pathtracer.geometry import Prism

        prism = Prism(
            origin=(10.0, 0.0, -4.0),
            width=2.0,
            height=3.0,
            depth=1.5,
            rotation=tuple(orientation.from_euler(0.2, 0.7, -0.4)),
        )
        centre = np.mean(face_centres(prism), axis=0)
        for quad, face_centre in zip(prism.quads(), face_centres(prism)):
            assert np.dot(np.asarray(quad.normal), face_centre - centre) > 0.0

    def test_base_rests_on_origin(self):
        from pathtracer.geometry import Prism

        prism = Prism(origin=(178.0, 0.0, 178.0), width=175.0, height=350.0, depth=175.0)
        bottom = prism.quads()[5]
        top = prism.quads()[4]
        assert bottom.q[1] == pytest.approx(0.0)
        assert top.q[1] == pytest.approx(350.0)
        centre = face_centres(prism)[5]
        assert centre == pytest.approx([178.0, 0.0, 178.0])

    def test_rotation_about_base_centre(self):
        """A quarter turn about Y swaps width and depth around the origin."""
        from pathtracer.core import orientation
        from pathtracer.geometry import Prism

        rotation = tuple(orientation.from_axis_angle((0.0, 1.0, 0.0), math.pi / 2))
        prism = Prism(origin=(1.0, 0.0, 1.0), width=4.0, height=1.0, depth=2.0, rotation=rotation)
        corners = np.array(
            [np.asarray(q.q) + a * np.asarray(q.u) + b * np.asarray(q.v)
             for q in prism.quads() for a in (0, 1) for b in (0, 1)]
        )
        assert corners[:, 0].min() == pytest.approx(0.0)
        assert corners[:, 0].max() == pytest.approx(2.0)
        assert corners[:, 2].min() == pytest.approx(-1.0)
        assert corners[:, 2].max() == pytest.approx(3.0)

    def test_material_index_shared(self):
        from pathtracer.geometry import Prism

        quads = Prism(material_index=3).quads()
        assert all(q.material_index == 3 for q in quads)


class TestPrismValidation:
    """Tests for Prism construction checks."""

    @pytest.mark.parametrize("field", ["width", "height", "depth"])
    def test_non_positive_extent_rejected(self, field):
        from pathtracer.geometry import Prism

        with pytest.raises(ValueError, match=field):
            Prism(**{field: 0.0})

    def test_zero_rotation_rejected(self):
        from pathtracer.geometry import Prism

        with pytest.raises(ValueError):
            Prism(rotation=(0.0, 0.0, 0.0, 0.0))
