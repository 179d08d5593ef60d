import itertools
import math

import numpy as np
import pytest

from geoquery.errors import DegenerateInput, InsufficientInput, InvalidInput
from geoquery.geom import point
from geoquery.hull import HullMesh, convex_hull, hull_side
from geoquery.records import HullSide, HullSideRecord

CUBE = [point(x, y, z) for x, y, z in itertools.product((0, 1), repeat=3)]


class TestConvexHull:

    def test_cube(self):
        mesh = convex_hull(CUBE + [point(0.5, 0.5, 0.5), point(0.2, 0.7, 0.1)])
        assert isinstance(mesh, HullMesh)
        assert set(mesh.vertices) == set(CUBE)
        assert math.isclose(mesh.volume, 1.0)
        assert len(mesh.faces) == 12
        assert len(mesh.equations) == 12
        assert len(mesh.edges()) == 18

    def test_faces_wound_outward(self):
        mesh = convex_hull(CUBE)
        verts = mesh.as_array()
        center = verts.mean(axis=0)
        for face in mesh.faces:
            a, b, c = (verts[i] for i in face)
            n = np.cross(b - a, c - a)
            assert float(n @ ((a + b + c) / 3.0 - center)) > 0.0

    def test_equations_are_unit_outward(self):
        mesh = convex_hull(CUBE)
        for nx, ny, nz, off in mesh.equations:
            assert math.isclose(nx * nx + ny * ny + nz * nz, 1.0)
            # center of the cube is half a unit inside every face
            assert math.isclose(0.5 * (nx + ny + nz) + off, -0.5)

    def test_too_few_points(self):
        with pytest.raises(InsufficientInput):
            convex_hull(CUBE[:3])

    def test_coplanar(self):
        flat = [point(x, y, 0) for x, y in itertools.product(range(3), repeat=2)]
        with pytest.raises(DegenerateInput) as info:
            convex_hull(flat)
        assert info.value.details['rank'] == 2

    def test_small_scale(self):
        # a 0.5 mm cube in metre units is a valid solid
        s = 5e-4
        small = [point(s * x, s * y, s * z) for x, y, z in CUBE]
        mesh = convex_hull(small)
        assert len(mesh.vertices) == 8
        assert math.isclose(mesh.volume, s ** 3, rel_tol=1e-6)
        assert hull_side((s / 2, s / 2, s / 2), small).side is HullSide.ON_BOUNDED_SIDE

    def test_thin_hull(self):
        sliver = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0.5, 0.5, 0.5)]
        with pytest.raises(DegenerateInput) as info:
            convex_hull(sliver, tol=0.1)
        assert "rank" not in info.value.details
        assert math.isclose(info.value.details["thickness"], (1 / 12) / 2.25)
        assert convex_hull(sliver, tol=0.01).volume > 0.0

    def test_bad_input(self):
        with pytest.raises(InvalidInput):
            convex_hull(CUBE + [(1, 2)])


class TestHullSide:

    def test_inside(self):
        rec = hull_side((0.5, 0.5, 0.5), CUBE)
        assert isinstance(rec, HullSideRecord)
        assert rec.side is HullSide.ON_BOUNDED_SIDE
        assert math.isclose(rec.distance, -0.5)

    def test_boundary(self):
        assert hull_side((1, 0.5, 0.5), CUBE).side is HullSide.ON_BOUNDARY
        assert hull_side((0, 0, 0), CUBE).side is HullSide.ON_BOUNDARY
        assert hull_side((1 + 1e-12, 0.5, 0.5), CUBE).side is HullSide.ON_BOUNDARY

    def test_outside(self):
        rec = hull_side((3, 0.5, 0.5), CUBE)
        assert rec.side is HullSide.ON_UNBOUNDED_SIDE
        assert math.isclose(rec.distance, 2.0)

    def test_tolerance(self):
        assert hull_side((1.01, 0.5, 0.5), CUBE).side is HullSide.ON_UNBOUNDED_SIDE
        assert hull_side((1.01, 0.5, 0.5), CUBE, tol=0.1).side is HullSide.ON_BOUNDARY
