"""Query entry points.

Each function runs one query and returns a ``QueryResult`` instead of
raising: geometry failures (``GeometryError`` and subclasses) are
captured in ``QueryResult.error`` and logged at WARNING.  Anything else,
such as a ``TypeError`` from a programming mistake, propagates.

Every query takes an optional ``tol`` keyword that overrides the
configured epsilon for that call only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from geoquery import bbox, hull, intersect, lcs, locator, obb
from geoquery.errors import GeometryError
from geoquery.lcs import LocalCoordinateSystem
from geoquery.records import ResultRecord, TransformRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    ok: bool
    record: Optional[ResultRecord] = None
    error: Optional[GeometryError] = None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> ResultRecord:
        """Return the record, or raise the stored error."""
        if not self.ok:
            raise self.error
        return self.record


def _run(name: str, compute: Callable, *args) -> QueryResult:
    try:
        payload = compute(*args)
    except GeometryError as exc:
        logger.warning("%s failed: %s", name, exc)
        return QueryResult(False, error=exc)
    record = ResultRecord.wrap(payload)
    logger.debug("%s -> %s", name, record.kind.name)
    return QueryResult(True, record=record)


def compute_aabb(points: Iterable, tol: Optional[float] = None) -> QueryResult:
    """Axis-aligned bounding box of ``points``.

    The box is exact, so ``tol`` is accepted only for a uniform signature.
    """
    return _run("compute_aabb", bbox.aabb, points)


def compute_obb(points: Iterable, tol: Optional[float] = None) -> QueryResult:
    """Approximate optimal oriented bounding box of ``points``."""
    return _run("compute_obb", obb.oriented_bounding_box, points, tol)


def locate_point(query, cloud: Iterable, tol: Optional[float] = None) -> QueryResult:
    """Location of ``query`` in the Delaunay tetrahedralization of ``cloud``."""
    return _run("locate_point", locator.locate, query, cloud, tol)


def intersect_segments(a1, a2, b1, b2, tol: Optional[float] = None) -> QueryResult:
    return _run("intersect_segments", intersect.intersect_segments, a1, a2, b1, b2, tol)


def intersect_lines(a1, a2, b1, b2, tol: Optional[float] = None) -> QueryResult:
    return _run("intersect_lines", intersect.intersect_lines, a1, a2, b1, b2, tol)


def transform_point(p, source: LocalCoordinateSystem, target: LocalCoordinateSystem,
                    tol: Optional[float] = None) -> QueryResult:
    """Express ``p``, given in ``source`` coordinates, in ``target`` coordinates."""
    def compute(p, source, target, tol):
        return TransformRecord(lcs.transform_point(p, source, target, tol))
    return _run("transform_point", compute, p, source, target, tol)


def classify_point_in_hull(query, cloud: Iterable, tol: Optional[float] = None) -> QueryResult:
    """Side of the convex hull surface of ``cloud`` on which ``query`` lies."""
    return _run("classify_point_in_hull", hull.hull_side, query, cloud, tol)


__all__ = [
    "QueryResult",
    "compute_aabb",
    "compute_obb",
    "locate_point",
    "intersect_segments",
    "intersect_lines",
    "transform_point",
    "classify_point_in_hull",
]
