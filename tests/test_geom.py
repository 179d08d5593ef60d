import math

import pytest

from geoquery.errors import DegenerateInput, InvalidInput
from geoquery.geom import *
## unit tests for geoquery geom.py


class TestValueTypes:
    """points, vectors and the affine arithmetic between them"""

    def test_point_construction(self):
        p = point(1, 2, 3)
        assert isinstance(p, Point3D)
        assert p == Point3D(1.0, 2.0, 3.0)
        assert point([1, 2, 3]) == p
        assert point((1.0, 2.0, 3.0)) == p
        assert point(p) == p
        assert tuple(p) == (1.0, 2.0, 3.0)
        assert p[2] == 3.0
        assert len(p) == 3

    def test_point_rejects_bad_input(self):
        with pytest.raises(InvalidInput):
            point(1, 2)
        with pytest.raises(InvalidInput):
            point(1, 2, float('nan'))
        with pytest.raises(InvalidInput):
            point(1, 2, float('inf'))
        with pytest.raises(InvalidInput):
            point(1, True, 3)
        with pytest.raises(InvalidInput):
            point("abc")
        with pytest.raises(InvalidInput):
            point(42)

    def test_affine_arithmetic(self):
        p = point(1, 1, 1)
        q = point(2, 3, 4)
        v = q - p
        assert isinstance(v, Vector3D)
        assert v == Vector3D(1.0, 2.0, 3.0)
        assert p + v == q
        assert q - v == p
        assert isinstance(p + v, Point3D)
        with pytest.raises(TypeError):
            p + q

    def test_vector_ops(self):
        a = vect(1, 0, 0)
        b = vect(0, 1, 0)
        assert a.cross(b) == Vector3D(0.0, 0.0, 1.0)
        assert a.dot(b) == 0.0
        assert (a + b) * 2 == Vector3D(2.0, 2.0, 0.0)
        assert 2 * a == Vector3D(2.0, 0.0, 0.0)
        assert -a == Vector3D(-1.0, 0.0, 0.0)
        assert vect(3, 4, 0).mag() == 5.0
        assert vect(3, 4, 0).mag2() == 25.0
        assert vect(0, 0, 7).normalized() == Vector3D(0.0, 0.0, 1.0)

    def test_normalize_zero_vector(self):
        with pytest.raises(DegenerateInput):
            vect(0, 0, 0).normalized()

    def test_length_from_origin(self):
        assert point(1, 2, 2).length() == 3.0
        assert ORIGIN.length() == 0.0


class TestSegment:

    def test_sample_endpoints_exact(self):
        a = point(0.1, 0.2, 0.3)
        b = point(1.7, -2.9, 3.3)
        s = Segment(a, b)
        assert s.sample(0.0) == a
        assert s.sample(1.0) == b
        mid = s.sample(0.5)
        assert math.isclose(mid.x, 0.9)

    def test_degenerate(self):
        p = point(1, 1, 1)
        assert Segment(p, p).is_degenerate()
        assert Segment(p, point(1, 1, 1 + 1e-12)).is_degenerate()
        assert not Segment(p, point(1, 1, 2)).is_degenerate()
        assert Segment(p, point(1, 1, 1.001)).is_degenerate(tol=0.01)

    def test_line_direction(self):
        l = Line(point(0, 0, 0), point(0, 2, 0))
        assert l.direction() == Vector3D(0.0, 2.0, 0.0)
        assert l.sample(2.0) == point(0, 4, 0)


def test_to_points_reports_index():
    pts = to_points([(0, 0, 0), [1, 1, 1]])
    assert pts == [point(0, 0, 0), point(1, 1, 1)]
    with pytest.raises(InvalidInput) as info:
        to_points([(0, 0, 0), (1, 1), (2, 2, 2)])
    assert info.value.details['index'] == 1
    with pytest.raises(InvalidInput):
        to_points(None)


def test_functional_helpers():
    a = [1, 2, 3]
    b = [4, 5, 6]
    assert add(a, b) == Vector3D(5.0, 7.0, 9.0)
    assert sub(b, a) == Vector3D(3.0, 3.0, 3.0)
    assert scale3(a, 2) == Vector3D(2.0, 4.0, 6.0)
    assert dot(a, b) == 32
    assert cross([1, 0, 0], [0, 1, 0]) == Vector3D(0.0, 0.0, 1.0)
    assert dist([0, 0, 0], [0, 3, 4]) == 5.0
    assert mag([0, 3, 4]) == 5.0
    assert mag2([0, 3, 4]) == 25.0
    assert vclose(a, [1, 2, 3 + 1e-12])
    assert not vclose(a, [1, 2, 3.1])
    assert close(1.0, 1.0 + 1e-12)
    assert close(1.0, 1.05, tol=0.1)
    assert isgoodnum(3)
    assert not isgoodnum(False)
    assert not isgoodnum(float('nan'))
