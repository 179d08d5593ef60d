## segment and line intersection for geoquery
## Copyright (c) 2024 geoquery contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.


"""Intersection of two segments or two lines in 3D.

The classification is parametric.  Two directions are parallel when the
sine of the angle between them is within epsilon; non-parallel lines are
coplanar when the orientation predicate puts them within epsilon of a
common plane, and skew (no intersection) otherwise.  Whenever the
answer is one of the input endpoints, that input coordinate is returned
as is rather than a recomputed value.
"""

import logging
from typing import Optional

from geoquery.config import resolve_epsilon
from geoquery.errors import DegenerateInput, NumericInstability
from geoquery.geom import cross, dist, dot, mag, point, sample, sub, vclose
from geoquery.predicates import orient3d
from geoquery.records import IntersectionRecord, IntersectionType

logger = logging.getLogger(__name__)

## computed points are checked against both inputs with this many
## epsilons of slack: one for the skew distance, one for endpoint
## snapping, and the rest for rounding
_VERIFY_SLACK = 4.0


## closest point to ``p`` on the line through ``p1`` and ``p2``, or on
## the segment when ``inside`` is true.  A zero-length segment is its
## start point.

def linepoint(p1, p2, p, inside=True):
    """Closest point to ``p`` on line (or segment, if ``inside``) ``p1``-``p2``"""
    d = sub(p2, p1)
    dd = dot(d, d)
    if dd == 0.0:
        return point(p1)
    u = dot(sub(p, p1), d) / dd
    if inside:
        u = min(1.0, max(0.0, u))
    return sample(p1, p2, u)


def onsegment(p, p1, p2, tol=None):
    """ does point ``p`` lie on segment ``p1``-``p2`` within ``tol``?"""
    return dist(p, linepoint(p1, p2, p)) <= resolve_epsilon(tol)


def intersect_segments(a1, a2, b1, b2, tol: Optional[float] = None) -> IntersectionRecord:
    """Intersect segment ``a1``-``a2`` with segment ``b1``-``b2``.

    Returns a record of type ``NONE``, ``POINT`` or ``SEGMENT``.  A
    collinear overlap is reported ordered along the direction of the
    first segment; an overlap of zero length is a ``POINT``.  A segment
    whose endpoints coincide is treated as a point.
    """
    eps = resolve_epsilon(tol)
    a1, a2, b1, b2 = point(a1), point(a2), point(b1), point(b2)
    la = dist(a1, a2)
    lb = dist(b1, b2)

    if la <= eps or lb <= eps:
        return _degenerate_segments(a1, a2, la, b1, b2, lb, eps)

    da = sub(a2, a1)
    db = sub(b2, b1)
    n = cross(da, db)
    nlen = mag(n)

    if nlen / (la * lb) <= eps:
        ## parallel: either collinear or disjoint
        if mag(cross(sub(b1, a1), da)) / la > eps:
            return _none()
        return _collinear_overlap(a1, a2, la, b1, b2, eps)

    if _skew(a1, a2, b1, b2, nlen, eps):
        return _none()

    t, u = _params(a1, da, b1, db, n, nlen)
    if t < -eps / la or t > 1.0 + eps / la or u < -eps / lb or u > 1.0 + eps / lb:
        return _none()

    p = _snap(a1, a2, la, t, b1, b2, lb, u, eps)
    slack = _VERIFY_SLACK * eps
    if not (onsegment(p, a1, a2, slack) and onsegment(p, b1, b2, slack)):
        raise NumericInstability("intersection point is not on both segments",
                                 operation="intersect_segments", point=tuple(p))
    return IntersectionRecord(IntersectionType.POINT, (p,))


def intersect_lines(a1, a2, b1, b2, tol: Optional[float] = None) -> IntersectionRecord:
    """Intersect the line through ``a1``, ``a2`` with the line through ``b1``, ``b2``.

    Returns a record of type ``NONE``, ``POINT`` or ``LINE``.  Collinear
    lines are the same point set whatever their orientation, and the
    ``LINE`` payload is the first line's defining points.  Raises
    ``DegenerateInput`` when either line is defined by coincident points.
    """
    eps = resolve_epsilon(tol)
    a1, a2, b1, b2 = point(a1), point(a2), point(b1), point(b2)
    la = dist(a1, a2)
    lb = dist(b1, b2)
    if la <= eps or lb <= eps:
        raise DegenerateInput("a line needs two distinct points",
                              operation="intersect_lines",
                              first_length=la, second_length=lb)

    da = sub(a2, a1)
    db = sub(b2, b1)
    n = cross(da, db)
    nlen = mag(n)

    if nlen / (la * lb) <= eps:
        if mag(cross(sub(b1, a1), da)) / la > eps:
            return _none()
        return IntersectionRecord(IntersectionType.LINE, (a1, a2))

    if _skew(a1, a2, b1, b2, nlen, eps):
        return _none()

    t, u = _params(a1, da, b1, db, n, nlen)
    p = _snap(a1, a2, la, t, b1, b2, lb, u, eps, clamp=False)
    slack = _VERIFY_SLACK * eps
    if dist(p, linepoint(a1, a2, p, False)) > slack or dist(p, linepoint(b1, b2, p, False)) > slack:
        raise NumericInstability("intersection point is not on both lines",
                                 operation="intersect_lines", point=tuple(p))
    return IntersectionRecord(IntersectionType.POINT, (p,))


def _none():
    return IntersectionRecord(IntersectionType.NONE)


def _skew(a1, a2, b1, b2, nlen, eps):
    ## |orient3d| is the line distance times |da x db|
    vol = orient3d(a1, a2, b1, b2)
    return vol != 0.0 and abs(vol) / nlen > eps


def _params(a1, da, b1, db, n, nlen):
    w = sub(b1, a1)
    n2 = nlen * nlen
    t = dot(cross(w, db), n) / n2
    u = dot(cross(w, da), n) / n2
    return t, u


def _snap(a1, a2, la, t, b1, b2, lb, u, eps, clamp=True):
    ## prefer an input endpoint over a computed point
    for param, length, lo, hi in ((t, la, a1, a2), (u, lb, b1, b2)):
        if abs(param) * length <= eps:
            return lo
        if abs(1.0 - param) * length <= eps:
            return hi
    if clamp:
        t = min(1.0, max(0.0, t))
    return sample(a1, a2, t)


def _degenerate_segments(a1, a2, la, b1, b2, lb, eps):
    if la <= eps and lb <= eps:
        if vclose(a1, b1, eps):
            return IntersectionRecord(IntersectionType.POINT, (a1,))
        return _none()
    if la <= eps:
        hit = onsegment(a1, b1, b2, eps)
        return IntersectionRecord(IntersectionType.POINT, (a1,)) if hit else _none()
    hit = onsegment(b1, a1, a2, eps)
    return IntersectionRecord(IntersectionType.POINT, (b1,)) if hit else _none()


def _collinear_overlap(a1, a2, la, b1, b2, eps):
    ## positions along the first segment, measured from a1
    ua = sub(a2, a1)
    tb1 = dot(sub(b1, a1), ua) / la
    tb2 = dot(sub(b2, a1), ua) / la
    first, last = sorted(((tb1, b1), (tb2, b2)), key=lambda e: e[0])

    start = (0.0, a1) if first[0] <= 0.0 else first
    end = (la, a2) if last[0] >= la else last
    overlap = end[0] - start[0]
    if overlap < -eps:
        return _none()
    if overlap <= eps:
        return IntersectionRecord(IntersectionType.POINT, (start[1],))
    logger.debug("collinear overlap of length %g", overlap)
    return IntersectionRecord(IntersectionType.SEGMENT, (start[1], end[1]))


__all__ = [
    'linepoint',
    'onsegment',
    'intersect_segments',
    'intersect_lines',
]
