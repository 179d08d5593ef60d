"""Point location in a Delaunay tetrahedralization.

``locate`` triangulates the cloud with ``scipy.spatial.Delaunay`` and
reports which feature of the triangulation holds the query point.  The
triangulation is rebuilt for every call and never kept.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np
from scipy.spatial import Delaunay, QhullError

from geoquery.config import resolve_epsilon
from geoquery.errors import NumericInstability, error_too_few_points
from geoquery.geom import Point3D, point, to_points
from geoquery.predicates import affine_rank
from geoquery.records import Location, LocationRecord

logger = logging.getLogger(__name__)

# number of non-zero barycentric coordinates -> feature
_BY_SUPPORT = {
    1: Location.VERTEX,
    2: Location.EDGE,
    3: Location.FACET,
    4: Location.CELL,
}


def locate(query, cloud: Iterable, tol: Optional[float] = None) -> LocationRecord:
    """Classify ``query`` against the Delaunay tetrahedralization of ``cloud``.

    Precedence is vertex, edge, facet, cell: a query within ``tol`` of an
    input point is a ``VERTEX``; otherwise the distances from the faces
    of the enclosing cell that are within ``tol`` of zero are treated as
    zero and the remaining count selects the feature.  A query up to
    ``tol`` outside the hull still counts as on it.  A cloud that does
    not span 3D yields ``OUTSIDE_AFFINE_HULL``.
    """
    eps = resolve_epsilon(tol)
    q = point(query)
    pts = to_points(cloud)
    if len(pts) < 4:
        raise error_too_few_points("locate", 4, len(pts))

    rank, _ = affine_rank(pts, eps)
    if rank < 3:
        logger.debug("locate: cloud has affine rank %d", rank)
        return LocationRecord(Location.OUTSIDE_AFFINE_HULL)

    arr = np.array([tuple(p) for p in pts], dtype=float)
    try:
        tri = Delaunay(arr)
    except QhullError as exc:
        raise NumericInstability("Qhull rejected a point set that spans 3D",
                                 operation="locate",
                                 reason=str(exc).strip().split("\n", 1)[0]) from exc

    qa = np.array(tuple(q), dtype=float)
    dist = _face_distances(tri, qa)
    # how far the query sticks out of each cell; flat cells are never chosen
    outside = np.max(-dist, axis=1)
    outside = np.where(np.isnan(outside), np.inf, outside)
    simplex = int(np.argmin(outside))
    if outside[simplex] > eps:
        simplex = -1

    nearest = int(np.argmin(np.linalg.norm(arr - qa, axis=1)))
    if np.linalg.norm(arr[nearest] - qa) <= eps:
        if simplex < 0:
            simplex = int(tri.vertex_to_simplex[nearest])
        return LocationRecord(Location.VERTEX, _cell(tri, simplex))

    if simplex < 0:
        return LocationRecord(Location.OUTSIDE_CONVEX_HULL)

    d = dist[simplex]
    support = int(np.count_nonzero(np.abs(d) > eps))
    location = _BY_SUPPORT.get(support)
    if location is None:
        raise NumericInstability("query has no barycentric support in its cell",
                                 operation="locate", face_distances=[float(x) for x in d])
    logger.debug("locate: simplex %d, face distances %s -> %s", simplex, d, location.name)
    return LocationRecord(location, _cell(tri, simplex))


def _face_distances(tri: Delaunay, qa: np.ndarray) -> np.ndarray:
    """Signed distance of ``qa`` from the face opposite each vertex of
    every simplex, positive inside.  Barycentric coordinate ``k`` times
    the height of vertex ``k`` above its opposite face."""
    T = tri.transform
    b = np.einsum('ijk,ik->ij', T[:, :3], qa - T[:, 3])
    bary = np.column_stack((b, 1.0 - b.sum(axis=1)))

    cells = tri.points[tri.simplices]
    heights = np.empty(bary.shape)
    for k in range(4):
        a, b1, c = (cells[:, j] for j in range(4) if j != k)
        n = np.cross(b1 - a, c - a)
        with np.errstate(invalid='ignore', divide='ignore'):
            heights[:, k] = (np.abs(np.einsum('ij,ij->i', cells[:, k] - a, n))
                             / np.linalg.norm(n, axis=1))
    return bary * heights


def _cell(tri: Delaunay, simplex: int):
    if simplex < 0:
        return ()
    return tuple(Point3D(*(float(x) for x in tri.points[j])) for j in tri.simplices[simplex])


__all__ = [
    "locate",
]
