"""Convex hulls of 3D point clouds.

The hull is computed with Qhull through ``scipy.spatial.ConvexHull``.
Input is screened first with ``affine_rank`` so that flat clouds are
reported as ``DegenerateInput`` instead of surfacing as a Qhull error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from geoquery.config import resolve_epsilon
from geoquery.errors import (DegenerateInput, NumericInstability, error_not_spanning,
                             error_too_few_points)
from geoquery.geom import Point3D, point, to_points
from geoquery.predicates import affine_rank
from geoquery.records import HullSide, HullSideRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HullMesh:
    """Closed triangulated hull surface.

    ``faces`` index into ``vertices`` and are wound counterclockwise seen
    from outside.  ``equations[k]`` is ``(nx, ny, nz, offset)`` for face
    ``k`` with a unit outward normal, so that ``n . p + offset`` is the
    signed distance of ``p`` from the face plane (negative inside).
    """

    vertices: Tuple[Point3D, ...]
    faces: Tuple[Tuple[int, int, int], ...]
    equations: Tuple[Tuple[float, float, float, float], ...]
    volume: float

    def normals(self) -> List[Tuple[float, float, float]]:
        return [eq[:3] for eq in self.equations]

    def edges(self) -> List[Tuple[int, int]]:
        """Distinct undirected edges as sorted vertex index pairs, in face order."""
        seen = set()
        result = []
        for face in self.faces:
            for i in range(3):
                e = tuple(sorted((face[i], face[(i + 1) % 3])))
                if e not in seen:
                    seen.add(e)
                    result.append(e)
        return result

    def as_array(self) -> np.ndarray:
        return np.array([tuple(v) for v in self.vertices], dtype=float)

    def signed_distance(self, p) -> float:
        """Largest signed face-plane distance of ``p``.

        Negative inside the hull, zero on the surface, positive outside.
        Outside the hull this is a lower bound of the true distance.
        """
        q = np.array([p[0], p[1], p[2], 1.0], dtype=float)
        return float(np.max(np.asarray(self.equations) @ q))


def convex_hull(points: Iterable, tol: Optional[float] = None) -> HullMesh:
    """Build the convex hull of ``points``.

    Raises ``InsufficientInput`` for fewer than four points,
    ``DegenerateInput`` when the cloud is flat or the hull thickness
    (volume over squared diameter) does not exceed ``tol``, and
    ``NumericInstability`` when Qhull rejects a cloud the rank test
    accepted.
    """
    eps = resolve_epsilon(tol)
    pts = to_points(points)
    if len(pts) < 4:
        raise error_too_few_points("convex_hull", 4, len(pts))
    rank, _ = affine_rank(pts, eps)
    if rank < 3:
        raise error_not_spanning("convex_hull", rank)

    arr = np.array([tuple(p) for p in pts], dtype=float)
    try:
        qh = ConvexHull(arr)
    except QhullError as exc:
        raise NumericInstability("Qhull rejected a point set that spans 3D",
                                 operation="convex_hull",
                                 reason=str(exc).strip().split("\n", 1)[0]) from exc

    # volume over squared diameter is a length, comparable with eps
    diameter = float(np.linalg.norm(np.ptp(arr, axis=0)))
    thickness = float(qh.volume) / (diameter * diameter)
    if thickness <= eps:
        raise DegenerateInput("convex_hull needs a hull with thickness above tolerance",
                              operation="convex_hull", thickness=thickness, tolerance=eps)

    remap = {int(j): k for k, j in enumerate(qh.vertices)}
    vertices = tuple(pts[int(j)] for j in qh.vertices)
    faces = []
    for simplex, eq in zip(qh.simplices, qh.equations):
        a, b, c = (int(j) for j in simplex)
        # Qhull does not orient simplices; wind them to match the outward normal
        n = np.cross(arr[b] - arr[a], arr[c] - arr[a])
        if float(n @ eq[:3]) < 0.0:
            b, c = c, b
        faces.append((remap[a], remap[b], remap[c]))
    equations = tuple(tuple(float(x) for x in eq) for eq in qh.equations)

    logger.debug("convex_hull: %d points -> %d vertices, %d faces",
                 len(pts), len(vertices), len(faces))
    return HullMesh(vertices, tuple(faces), equations, float(qh.volume))


def hull_side(p, points: Iterable, tol: Optional[float] = None) -> HullSideRecord:
    """Classify ``p`` against the convex hull surface of ``points``."""
    eps = resolve_epsilon(tol)
    q = point(p)
    mesh = convex_hull(points, eps)
    d = mesh.signed_distance(q)
    if d > eps:
        side = HullSide.ON_UNBOUNDED_SIDE
    elif d >= -eps:
        side = HullSide.ON_BOUNDARY
    else:
        side = HullSide.ON_BOUNDED_SIDE
    return HullSideRecord(side, d)


__all__ = [
    "HullMesh",
    "convex_hull",
    "hull_side",
]
