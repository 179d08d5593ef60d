## axis-aligned bounding boxes for geoquery
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


from typing import Iterable, Optional

from geoquery.config import resolve_epsilon
from geoquery.errors import InvalidInput, error_too_few_points
from geoquery.geom import Point3D, point, vclose
from geoquery.records import AABBRecord

## The box is accumulated in a single pass over the input.  Only the
## six running bounds are kept, so the cloud may be any iterable,
## including a generator.  The bounds are always attained by some
## input coordinate; no padding is applied.


def aabb(points: Iterable) -> AABBRecord:
    """Compute the axis-aligned bounding box of point cloud ``points``.

    Raises ``InsufficientInput`` for an empty cloud and ``InvalidInput``
    for a malformed or non-finite point.  A single point gives a box
    with ``min == max``.
    """
    if points is None:
        raise InvalidInput("point cloud is None")
    n = 0
    minx = miny = minz = maxx = maxy = maxz = 0.0
    for i, p in enumerate(points):
        try:
            x, y, z = point(p)
        except InvalidInput as exc:
            raise InvalidInput(f"point {i}: {exc.message}", index=i) from exc
        if n == 0:
            minx = maxx = x
            miny = maxy = y
            minz = maxz = z
        else:
            if x < minx:
                minx = x
            if x > maxx:
                maxx = x
            if y < miny:
                miny = y
            if y > maxy:
                maxy = y
            if z < minz:
                minz = z
            if z > maxz:
                maxz = z
        n += 1
    if n == 0:
        raise error_too_few_points("aabb", 1, 0)
    return AABBRecord(Point3D(minx, miny, minz), Point3D(maxx, maxy, maxz))


def isinsidebbox(box: AABBRecord, p, tol: Optional[float] = None) -> bool:
    """ does point ``p`` lie inside (or on) bounding box ``box``, within ``tol``?"""
    eps = resolve_epsilon(tol)
    return all(box.min[i] - eps <= p[i] <= box.max[i] + eps for i in range(3))


def is_singular(box: AABBRecord, tol: Optional[float] = None) -> bool:
    """ is the box collapsed to a single point?"""
    return vclose(box.min, box.max, tol)


__all__ = [
    'aabb',
    'isinsidebbox',
    'is_singular',
]
