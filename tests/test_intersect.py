import pytest

from geoquery.errors import DegenerateInput
from geoquery.geom import point, vclose
from geoquery.intersect import intersect_lines, intersect_segments, linepoint, onsegment
from geoquery.records import IntersectionRecord, IntersectionType

NONE = IntersectionType.NONE
POINT = IntersectionType.POINT
SEGMENT = IntersectionType.SEGMENT
LINE = IntersectionType.LINE


class TestSegments:

    def test_collinear_overlap(self):
        rec = intersect_segments((0, 0, 0), (2, 0, 0), (1, 0, 0), (3, 0, 0))
        assert isinstance(rec, IntersectionRecord)
        assert rec.type is SEGMENT
        assert rec.geometry == (point(1, 0, 0), point(2, 0, 0))

    def test_overlap_ordered_along_first(self):
        rec = intersect_segments((0, 0, 0), (2, 0, 0), (3, 0, 0), (1, 0, 0))
        assert rec.geometry == (point(1, 0, 0), point(2, 0, 0))
        rec = intersect_segments((2, 0, 0), (0, 0, 0), (1, 0, 0), (3, 0, 0))
        assert rec.geometry == (point(2, 0, 0), point(1, 0, 0))

    def test_identical(self):
        a, b = point(0.1, 0.2, 0.3), point(1.7, 2.9, -3.3)
        rec = intersect_segments(a, b, a, b)
        assert rec.type is SEGMENT
        assert rec.geometry == (a, b)
        rec = intersect_segments(a, b, b, a)
        assert rec.geometry == (a, b)

    def test_contained(self):
        rec = intersect_segments((0, 0, 0), (4, 4, 4), (1, 1, 1), (2, 2, 2))
        assert rec.type is SEGMENT
        assert rec.geometry == (point(1, 1, 1), point(2, 2, 2))

    def test_collinear_touching(self):
        rec = intersect_segments((0, 0, 0), (1, 0, 0), (1, 0, 0), (2, 0, 0))
        assert rec.type is POINT
        assert rec.geometry == (point(1, 0, 0),)

    def test_collinear_disjoint(self):
        assert intersect_segments((0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)).type is NONE

    def test_shared_endpoint(self):
        a2 = point(0.3, 0.7, 1.1)
        rec = intersect_segments((0, 0, 0), a2, a2, (5, -1, 2))
        assert rec.type is POINT
        assert rec.geometry[0] == a2

    def test_crossing(self):
        rec = intersect_segments((0, 0, 0), (2, 2, 0), (0, 2, 0), (2, 0, 0))
        assert rec.type is POINT
        assert vclose(rec.geometry[0], (1, 1, 0))

    def test_crossing_out_of_range(self):
        assert intersect_segments((0, 0, 0), (1, 1, 0), (0, 4, 0), (4, 0, 0)).type is NONE

    def test_t_junction(self):
        rec = intersect_segments((0, 0, 0), (2, 0, 0), (1, 0, 0), (1, 5, 0))
        assert rec.type is POINT
        assert rec.geometry[0] == point(1, 0, 0)

    def test_parallel_offset(self):
        assert intersect_segments((0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0)).type is NONE

    def test_skew(self):
        assert intersect_segments((0, 0, 0), (1, 0, 0), (0.5, -1, 1), (0.5, 1, 1)).type is NONE

    def test_nearly_parallel(self):
        rec = intersect_segments((0, 0, 0), (1, 0, 0), (0, 1e-3, 0), (1, 1e-3 + 1e-13, 0))
        assert rec.type is NONE

    def test_tolerance(self):
        rec = intersect_segments((0, 0, 0), (2, 0, 0), (1, -1, 0.001), (1, 1, 0.001))
        assert rec.type is NONE
        rec = intersect_segments((0, 0, 0), (2, 0, 0), (1, -1, 0.001), (1, 1, 0.001), tol=0.01)
        assert rec.type is POINT

    def test_degenerate_segments(self):
        p = point(1, 0, 0)
        rec = intersect_segments(p, p, (0, 0, 0), (2, 0, 0))
        assert rec.type is POINT
        assert rec.geometry == (p,)
        rec = intersect_segments((0, 0, 0), (2, 0, 0), p, p)
        assert rec.geometry == (p,)
        assert intersect_segments(p, p, (0, 1, 0), (2, 1, 0)).type is NONE
        assert intersect_segments(p, p, p, p).type is POINT
        assert intersect_segments(p, p, (1, 0, 1), (1, 0, 1)).type is NONE


class TestLines:

    def test_crossing(self):
        rec = intersect_lines((0, 0, 0), (1, 0, 0), (5, -1, 0), (5, 1, 0))
        assert rec.type is POINT
        assert vclose(rec.geometry[0], (5, 0, 0))

    def test_collinear(self):
        rec = intersect_lines((0, 0, 0), (1, 1, 1), (3, 3, 3), (-2, -2, -2))
        assert rec.type is LINE
        assert rec.geometry == (point(0, 0, 0), point(1, 1, 1))

    def test_parallel(self):
        assert intersect_lines((0, 0, 0), (1, 0, 0), (0, 0, 1), (1, 0, 1)).type is NONE

    def test_skew(self):
        assert intersect_lines((0, 0, 0), (1, 0, 0), (0, 0, 1), (0, 1, 1)).type is NONE

    def test_shared_point(self):
        rec = intersect_lines((0, 0, 0), (1, 2, 3), (1, 2, 3), (4, 4, 4))
        assert rec.geometry == (point(1, 2, 3),)

    def test_degenerate_line(self):
        with pytest.raises(DegenerateInput):
            intersect_lines((1, 1, 1), (1, 1, 1), (0, 0, 0), (1, 0, 0))


def test_linepoint():
    assert linepoint((0, 0, 0), (2, 0, 0), (1, 5, 0)) == point(1, 0, 0)
    assert linepoint((0, 0, 0), (2, 0, 0), (5, 5, 0)) == point(2, 0, 0)
    assert linepoint((0, 0, 0), (2, 0, 0), (5, 5, 0), inside=False) == point(5, 0, 0)
    assert onsegment((1, 0, 0), (0, 0, 0), (2, 0, 0))
    assert not onsegment((3, 0, 0), (0, 0, 0), (2, 0, 0))
