## foundational 3D primitives for geoquery
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

"""foundational 3D primitives for **geoquery**

====================
OVERVIEW
====================

The geoquery.geom module provides the value types and elementary
vector operations shared by every query: bounding boxes, hulls, the
spatial locator, the intersection classifier and coordinate system
transforms.

points and vectors
==================

``Point3D`` is a location, ``Vector3D`` is a displacement.  Both are
immutable double precision triples that can be indexed and iterated
like a ``(x, y, z)`` tuple, so anything that accepts a 3-sequence
accepts them too.  The arithmetic follows the affine rules:

- ``Point3D - Point3D -> Vector3D``
- ``Point3D + Vector3D -> Point3D``
- ``Vector3D + Vector3D -> Vector3D``, ``Vector3D * scalar -> Vector3D``

``Point3D.length()`` is the distance of the point from the world
origin.  It is not a property of any figure; it is reported alongside
every point in the legacy JSON-lines output.

segments and lines
==================

A ``Segment`` is an ordered pair of points parameterized over
`0 <= u <= 1`, where `u=0` is the start and `u=1` the end.  A ``Line``
is defined by two points as well, but has infinite extent.  A segment
whose endpoints coincide within epsilon is *degenerate*.

functional helpers
==================

``add``, ``sub``, ``scale3``, ``dot``, ``cross``, ``mag``, ``dist``,
``close`` and ``vclose`` operate on any 3-sequences and mirror the
operator forms.  ``point()`` and ``vect()`` build values from practically
anything; ``to_points()`` converts a whole point cloud and rejects
malformed or non-finite coordinates with ``InvalidInput``.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import isfinite, sqrt
from numbers import Real
from typing import Iterable, Iterator, List, Optional, Sequence

from geoquery.config import resolve_epsilon
from geoquery.errors import DegenerateInput, InvalidInput

## operations on scalars
## -----------------------


def isgoodnum(n) -> bool:
    """ determine if an argument is actually a finite scalar number, and not boolean
    """
    return (not isinstance(n, bool)) and isinstance(n, Real) and isfinite(n)


def close(a: float, b: float, tol: Optional[float] = None) -> bool:
    """ are two scalars the same within epsilon
    """
    return abs(a - b) <= resolve_epsilon(tol)


## value types
## -----------

@dataclass(frozen=True)
class Vector3D:
    """Immutable displacement in 3D space."""

    x: float
    y: float
    z: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, i: int) -> float:
        return (self.x, self.y, self.z)[i]

    def __len__(self) -> int:
        return 3

    def __add__(self, other: "Vector3D") -> "Vector3D":
        if not isinstance(other, Vector3D):
            return NotImplemented
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3D") -> "Vector3D":
        if not isinstance(other, Vector3D):
            return NotImplemented
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, c: float) -> "Vector3D":
        if not isinstance(c, Real):
            return NotImplemented
        return Vector3D(self.x * c, self.y * c, self.z * c)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3D":
        return Vector3D(-self.x, -self.y, -self.z)

    def dot(self, other: Sequence[float]) -> float:
        return dot(self, other)

    def cross(self, other: Sequence[float]) -> "Vector3D":
        return cross(self, other)

    def mag2(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def mag(self) -> float:
        return sqrt(self.mag2())

    def normalized(self, tol: Optional[float] = None) -> "Vector3D":
        """Return the unit vector in this direction.

        Raises ``DegenerateInput`` for vectors shorter than epsilon.
        """
        m = self.mag()
        if m <= resolve_epsilon(tol):
            raise DegenerateInput("zero-length vector has no direction",
                                  vector=tuple(self))
        return Vector3D(self.x / m, self.y / m, self.z / m)


@dataclass(frozen=True)
class Point3D:
    """Immutable location in 3D space."""

    x: float
    y: float
    z: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, i: int) -> float:
        return (self.x, self.y, self.z)[i]

    def __len__(self) -> int:
        return 3

    def __add__(self, v: Vector3D) -> "Point3D":
        if not isinstance(v, Vector3D):
            return NotImplemented
        return Point3D(self.x + v.x, self.y + v.y, self.z + v.z)

    def __sub__(self, other):
        if isinstance(other, Point3D):
            return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vector3D):
            return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def length(self) -> float:
        """Euclidean distance from the world origin."""
        return sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


ORIGIN = Point3D(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Segment:
    """Ordered pair of points, parameterized over `0 <= u <= 1`."""

    start: Point3D
    end: Point3D

    def direction(self) -> Vector3D:
        return self.end - self.start

    def length(self) -> float:
        return dist(self.start, self.end)

    def is_degenerate(self, tol: Optional[float] = None) -> bool:
        return self.length() <= resolve_epsilon(tol)

    def sample(self, u: float) -> Point3D:
        return sample(self.start, self.end, u)


@dataclass(frozen=True)
class Line:
    """Infinite line through two distinct points."""

    p1: Point3D
    p2: Point3D

    def direction(self) -> Vector3D:
        return self.p2 - self.p1

    def sample(self, u: float) -> Point3D:
        return sample(self.p1, self.p2, u)


## construction and conversion
## ---------------------------

def point(*args) -> Point3D:
    """Point creation from a point, a 3-sequence, or three scalars"""
    if len(args) == 1:
        args = tuple(_components(args[0]))
    if len(args) != 3:
        raise InvalidInput(f"a point needs three coordinates, got {len(args)}",
                           value=args)
    for c in args:
        if not isgoodnum(c):
            raise InvalidInput(f"bad coordinate {c!r}", value=args)
    return Point3D(float(args[0]), float(args[1]), float(args[2]))


def vect(*args) -> Vector3D:
    """Vector creation from a vector, a 3-sequence, or three scalars"""
    p = point(*args)
    return Vector3D(p.x, p.y, p.z)


def _components(value) -> Sequence:
    if isinstance(value, (Point3D, Vector3D)):
        return tuple(value)
    try:
        return tuple(value)
    except TypeError:
        raise InvalidInput(f"cannot interpret {value!r} as a 3D coordinate",
                           value=repr(value)) from None


def to_points(points: Iterable) -> List[Point3D]:
    """Convert a point cloud into a list of ``Point3D``.

    Raises ``InvalidInput`` naming the offending index for malformed or
    non-finite entries.
    """
    if points is None:
        raise InvalidInput("point cloud is None")
    result: List[Point3D] = []
    for i, p in enumerate(points):
        try:
            result.append(p if isinstance(p, Point3D) and _finite(p) else point(p))
        except InvalidInput as exc:
            raise InvalidInput(f"point {i}: {exc.message}", index=i) from exc
    return result


def _finite(p: Point3D) -> bool:
    return isfinite(p.x) and isfinite(p.y) and isfinite(p.z)


## R^3 -> R^3 functions
## --------------------

def add(a, b) -> Vector3D:
    """ 3 vector, `a + b`"""
    return Vector3D(a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a, b) -> Vector3D:
    """ 3 vector, `a - b`"""
    return Vector3D(a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale3(a, c: float) -> Vector3D:
    """ 3 vector, vector ``a`` times scalar ``c``, `a * c`"""
    return Vector3D(a[0] * c, a[1] * c, a[2] * c)


def cross(a, b) -> Vector3D:
    """Compute the cross product of 3 vectors ``a x b``"""
    return Vector3D(a[1] * b[2] - a[2] * b[1],
                    a[2] * b[0] - a[0] * b[2],
                    a[0] * b[1] - a[1] * b[0])


def sample(p1, p2, u: float) -> Point3D:
    """Sample the parameterized segment ``p1``-``p2``.  Values `0 <= u <= 1`
    fall within the segment; `u=0` and `u=1` return the endpoints exactly.
    """
    if u == 0.0:
        return point(p1)
    if u == 1.0:
        return point(p2)
    return Point3D(p1[0] + u * (p2[0] - p1[0]),
                   p1[1] + u * (p2[1] - p1[1]),
                   p1[2] + u * (p2[2] - p1[2]))


## R^3 -> R functions
## ------------------

def dot(a, b) -> float:
    """ 3 vector ``a`` dot ``b`` """
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def mag2(a) -> float:
    """ squared magnitude of 3 vector ``a``"""
    return a[0] * a[0] + a[1] * a[1] + a[2] * a[2]


def mag(a) -> float:
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(mag2(a))


def dist(a, b) -> float:
    """ compute the euclidean distance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a, b))


def vclose(a, b, tol: Optional[float] = None) -> bool:
    """ are two points/vectors the same within epsilon"""
    return dist(a, b) <= resolve_epsilon(tol)


__all__ = [
    'isgoodnum',
    'close',
    'Vector3D',
    'Point3D',
    'ORIGIN',
    'Segment',
    'Line',
    'point',
    'vect',
    'to_points',
    'add',
    'sub',
    'scale3',
    'cross',
    'sample',
    'dot',
    'mag2',
    'mag',
    'dist',
    'vclose',
]
