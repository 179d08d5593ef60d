"""Typed query results.

Every query produces a ``ResultRecord``: a ``kind`` tag plus one of the
payload records below.  Payloads expose ``points()`` so that a caller
(or ``geoquery.io.json_lines``) can serialize any of them uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from geoquery.config import resolve_epsilon
from geoquery.geom import Point3D, Vector3D
from geoquery.lcs import LocalCoordinateSystem


class RecordKind(Enum):
    """Tag of a ``ResultRecord``."""
    AABB = "AABB"
    OBB = "OBB"
    LOCATOR = "LOCATOR"
    INTERSECTION = "INTERSECTION"
    TRANSFORM = "TRANSFORM"
    HULL_SIDE = "HULL_SIDE"


class Location(Enum):
    """Where a query point lies relative to a triangulation."""
    VERTEX = "VERTEX"
    EDGE = "EDGE"
    FACET = "FACET"
    CELL = "CELL"
    OUTSIDE_CONVEX_HULL = "OUTSIDE_CONVEX_HULL"
    OUTSIDE_AFFINE_HULL = "OUTSIDE_AFFINE_HULL"


class IntersectionType(Enum):
    """Shape of the intersection of two segments or lines."""
    NONE = "NULL"
    POINT = "POINT"
    SEGMENT = "SEGMENT"
    LINE = "LINE"


class HullSide(Enum):
    """Side of a closed convex hull surface."""
    ON_BOUNDED_SIDE = "ON_BOUNDED_SIDE"
    ON_BOUNDARY = "ON_BOUNDARY"
    ON_UNBOUNDED_SIDE = "ON_UNBOUNDED_SIDE"


@dataclass(frozen=True)
class AABBRecord:
    """Axis-aligned box spanning ``min`` to ``max``."""

    min: Point3D
    max: Point3D

    def points(self) -> Tuple[Point3D, ...]:
        return (self.min, self.max)

    def extents(self) -> Vector3D:
        return self.max - self.min

    def volume(self) -> float:
        e = self.extents()
        return e.x * e.y * e.z


@dataclass(frozen=True)
class OBBRecord:
    """Oriented box: eight corners plus the frame they were built in.

    ``frame`` has its origin at the box center and unit axes along the
    box edges; ``half_extents`` are measured along those axes.  Corner
    ``k`` has local signs ``CORNER_SIGNS[k]``.
    """

    corners: Tuple[Point3D, ...]
    frame: LocalCoordinateSystem
    half_extents: Vector3D

    CORNER_SIGNS = ((-1, -1, -1), (1, -1, -1), (1, 1, -1), (-1, 1, -1),
                    (-1, 1, 1), (-1, -1, 1), (1, -1, 1), (1, 1, 1))

    def points(self) -> Tuple[Point3D, ...]:
        return self.corners

    @property
    def center(self) -> Point3D:
        return self.frame.origin

    def volume(self) -> float:
        h = self.half_extents
        return 8.0 * h.x * h.y * h.z

    def contains(self, p, tol: Optional[float] = None) -> bool:
        """Is ``p`` (world coordinates) inside the box, within ``tol``?"""
        eps = resolve_epsilon(tol)
        local = self.frame.to_local(p)
        return (abs(local.x) <= self.half_extents.x + eps
                and abs(local.y) <= self.half_extents.y + eps
                and abs(local.z) <= self.half_extents.z + eps)


@dataclass(frozen=True)
class LocationRecord:
    """Classification of a query point; ``cell`` lists the vertices of the
    containing tetrahedron when the point is inside the triangulation."""

    location: Location
    cell: Tuple[Point3D, ...] = ()

    def points(self) -> Tuple[Point3D, ...]:
        return self.cell


@dataclass(frozen=True)
class IntersectionRecord:
    """``NONE``: no points; ``POINT``: one; ``SEGMENT``/``LINE``: two."""

    type: IntersectionType
    geometry: Tuple[Point3D, ...] = ()

    def points(self) -> Tuple[Point3D, ...]:
        return self.geometry


@dataclass(frozen=True)
class TransformRecord:
    point: Point3D

    def points(self) -> Tuple[Point3D, ...]:
        return (self.point,)


@dataclass(frozen=True)
class HullSideRecord:
    side: HullSide
    distance: float = 0.0

    def points(self) -> Tuple[Point3D, ...]:
        return ()


Payload = Union[AABBRecord, OBBRecord, LocationRecord, IntersectionRecord,
                TransformRecord, HullSideRecord]

_KIND_BY_PAYLOAD = {
    AABBRecord: RecordKind.AABB,
    OBBRecord: RecordKind.OBB,
    LocationRecord: RecordKind.LOCATOR,
    IntersectionRecord: RecordKind.INTERSECTION,
    TransformRecord: RecordKind.TRANSFORM,
    HullSideRecord: RecordKind.HULL_SIDE,
}


@dataclass(frozen=True)
class ResultRecord:
    """Tagged union of every query result."""

    kind: RecordKind
    payload: Payload

    def __post_init__(self) -> None:
        expected = _KIND_BY_PAYLOAD.get(type(self.payload))
        if expected is not self.kind:
            raise TypeError(f"{type(self.payload).__name__} cannot be tagged {self.kind.name}")

    @classmethod
    def wrap(cls, payload: Payload) -> "ResultRecord":
        """Tag ``payload`` with its kind."""
        try:
            kind = _KIND_BY_PAYLOAD[type(payload)]
        except KeyError:
            raise TypeError(f"not a result payload: {payload!r}") from None
        return cls(kind, payload)

    def points(self) -> Tuple[Point3D, ...]:
        return self.payload.points()


__all__ = [
    "RecordKind",
    "Location",
    "IntersectionType",
    "HullSide",
    "AABBRecord",
    "OBBRecord",
    "LocationRecord",
    "IntersectionRecord",
    "TransformRecord",
    "HullSideRecord",
    "ResultRecord",
]
