"""Approximate minimum-volume oriented bounding boxes.

The box is chosen among a fixed, ordered family of candidate frames
built from the convex hull of the input:

1. every distinct hull face normal, with the box side flush against
   the face and the in-plane orientation found by rotating calipers on
   the projected hull (minimum-area rectangle);
2. every distinct hull edge direction, with a box axis parallel to the
   edge and the same caliper search in the orthogonal plane;
3. the principal axes of the hull vertices;
4. the world axes.

The smallest volume wins, and on a tie the earlier candidate is kept,
so identical inputs always give identical boxes.  Because the world
axes are a candidate the result is never larger than the AABB.  The
box is not guaranteed to be the global optimum.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from geoquery.config import resolve_epsilon
from geoquery.errors import NumericInstability
from geoquery.geom import Point3D, Vector3D
from geoquery.hull import HullMesh, convex_hull
from geoquery.lcs import LocalCoordinateSystem
from geoquery.records import OBBRecord

logger = logging.getLogger(__name__)

_WORLD = np.eye(3)


def oriented_bounding_box(points: Iterable, tol: Optional[float] = None) -> OBBRecord:
    """Fit an oriented bounding box around ``points``.

    The cloud must satisfy ``convex_hull``: at least four points that are
    not coplanar.  Raises ``NumericInstability`` when a hull vertex ends
    up outside the fitted box.
    """
    eps = resolve_epsilon(tol)
    mesh = convex_hull(points, eps)
    verts = mesh.as_array()

    best = None
    best_volume = np.inf
    candidates = _candidate_frames(mesh, verts, eps)
    for axes in candidates:
        box = _fit(verts, axes)
        if box[3] < best_volume:
            best, best_volume = box, box[3]
    logger.debug("oriented_bounding_box: %d candidate frames, volume %g",
                 len(candidates), best_volume)

    axes, lo, hi, _ = best
    record = _record(axes, lo, hi)

    scale = max(1.0, float(np.max(np.abs(verts))))
    for v in mesh.vertices:
        if not record.contains(v, eps * scale):
            raise NumericInstability("hull vertex lies outside the fitted box",
                                     operation="oriented_bounding_box", vertex=tuple(v))
    return record


def _candidate_frames(mesh: HullMesh, verts: np.ndarray, eps: float) -> List[np.ndarray]:
    frames = []
    normals: List[np.ndarray] = []
    for n in mesh.normals():
        _add_direction(normals, np.asarray(n, dtype=float), eps)
    for n in normals:
        frames.append(_caliper_frame(verts, n))

    directions: List[np.ndarray] = []
    for i, j in mesh.edges():
        d = verts[j] - verts[i]
        length = np.linalg.norm(d)
        if length > eps:
            _add_direction(directions, d / length, eps)
    for d in directions:
        frames.append(_caliper_frame(verts, d))

    frames.append(_principal_frame(verts))
    frames.append(_WORLD.copy())
    return frames


def _add_direction(found: List[np.ndarray], d: np.ndarray, eps: float) -> None:
    # d and -d give the same box
    for f in found:
        if abs(float(f @ d)) >= 1.0 - eps:
            return
    found.append(d)


def _caliper_frame(verts: np.ndarray, w: np.ndarray) -> np.ndarray:
    """Frame with third axis ``w`` and the minimum-area rectangle in the
    plane orthogonal to ``w``.  Rows are the box axes."""
    # start from the world axis least aligned with w
    e = _WORLD[int(np.argmin(np.abs(w)))]
    u0 = np.cross(w, e)
    u0 /= np.linalg.norm(u0)
    v0 = np.cross(w, u0)

    flat = np.column_stack((verts @ u0, verts @ v0))
    try:
        ring = flat[ConvexHull(flat).vertices]
    except QhullError:
        logger.debug("caliper: projection along %s is not 2D, using the seed axes", w)
        return _right_handed(np.vstack((u0, v0, w)))

    edges = np.roll(ring, -1, axis=0) - ring
    lengths = np.linalg.norm(edges, axis=1)
    keep = lengths > 0.0
    dirs = edges[keep] / lengths[keep][:, None]
    perps = np.column_stack((-dirs[:, 1], dirs[:, 0]))

    along = ring @ dirs.T
    across = ring @ perps.T
    areas = np.ptp(along, axis=0) * np.ptp(across, axis=0)
    k = int(np.argmin(areas))

    x = dirs[k, 0] * u0 + dirs[k, 1] * v0
    y = perps[k, 0] * u0 + perps[k, 1] * v0
    return _right_handed(np.vstack((x, y, w)))


def _principal_frame(verts: np.ndarray) -> np.ndarray:
    centered = verts - verts.mean(axis=0)
    cov = np.cov(centered, rowvar=False)
    values, vectors = np.linalg.eigh(cov)
    order = values.argsort()[::-1]
    return _right_handed(vectors[:, order].T)


def _right_handed(axes: np.ndarray) -> np.ndarray:
    axes = np.array(axes, dtype=float)
    if np.linalg.det(axes) < 0.0:
        axes[2] = -axes[2]
    return axes


def _fit(verts: np.ndarray, axes: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray, float]:
    local = verts @ axes.T
    lo = local.min(axis=0)
    hi = local.max(axis=0)
    return axes, lo, hi, float(np.prod(hi - lo))


def _record(axes: np.ndarray, lo: np.ndarray, hi: np.ndarray) -> OBBRecord:
    half = (hi - lo) / 2.0
    center = ((hi + lo) / 2.0) @ axes
    corners = []
    for signs in OBBRecord.CORNER_SIGNS:
        c = center + sum(s * h * a for s, h, a in zip(signs, half, axes))
        corners.append(Point3D(float(c[0]), float(c[1]), float(c[2])))
    frame = LocalCoordinateSystem(Point3D(*(float(x) for x in center)),
                                  Vector3D(*(float(x) for x in axes[0])),
                                  Vector3D(*(float(x) for x in axes[1])),
                                  Vector3D(*(float(x) for x in axes[2])))
    return OBBRecord(tuple(corners), frame, Vector3D(*(float(x) for x in half)))


__all__ = [
    "oriented_bounding_box",
]
