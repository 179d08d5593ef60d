"""Orientation and affine-rank predicates with a precision fallback.

Orientation tests decide whether four points are coplanar, which side
of a plane a point lies on, and therefore whether a cloud spans 3D.
Each determinant is first evaluated in floating point together with a
forward error bound.  When the magnitude falls under the bound the sign
cannot be trusted, and the determinant is re-evaluated with ``mpmath``
at ``Tolerance.predicate_dps`` decimal digits.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import mpmath as mpm
import numpy as np

from geoquery.config import get_tolerance, resolve_epsilon

logger = logging.getLogger(__name__)

# (7 + 56u)u for u = 2**-53, the forward error bound of the float orient3d
_O3D_ERRBOUND = 7.7715611723761027e-16


def orient3d(a: Sequence[float], b: Sequence[float],
             c: Sequence[float], d: Sequence[float]) -> float:
    """Return six times the signed volume of tetrahedron ``abcd``.

    Positive when ``d`` lies below the plane through ``a``, ``b``, ``c``
    (counterclockwise seen from above), negative above, zero when the
    four points are coplanar.  The sign is reliable.
    """

    adx, ady, adz = a[0] - d[0], a[1] - d[1], a[2] - d[2]
    bdx, bdy, bdz = b[0] - d[0], b[1] - d[1], b[2] - d[2]
    cdx, cdy, cdz = c[0] - d[0], c[1] - d[1], c[2] - d[2]

    bdxcdy = bdx * cdy
    cdxbdy = cdx * bdy
    cdxady = cdx * ady
    adxcdy = adx * cdy
    adxbdy = adx * bdy
    bdxady = bdx * ady

    det = (adz * (bdxcdy - cdxbdy)
           + bdz * (cdxady - adxcdy)
           + cdz * (adxbdy - bdxady))

    permanent = ((abs(bdxcdy) + abs(cdxbdy)) * abs(adz)
                 + (abs(cdxady) + abs(adxcdy)) * abs(bdz)
                 + (abs(adxbdy) + abs(bdxady)) * abs(cdz))
    if abs(det) > _O3D_ERRBOUND * permanent:
        return det
    return _orient3d_mp(a, b, c, d)


def _orient3d_mp(a, b, c, d) -> float:
    dps = get_tolerance().predicate_dps
    with mpm.workdps(dps):
        ma = [mpm.mpf(float(v)) for v in a[:3]]
        mb = [mpm.mpf(float(v)) for v in b[:3]]
        mc = [mpm.mpf(float(v)) for v in c[:3]]
        md = [mpm.mpf(float(v)) for v in d[:3]]
        m = mpm.matrix([[ma[i] - md[i] for i in range(3)],
                        [mb[i] - md[i] for i in range(3)],
                        [mc[i] - md[i] for i in range(3)]])
        det = mpm.det(m)
        return float(det)


def orientation(a, b, c, d) -> int:
    """Sign of ``orient3d``: 1, -1, or 0 when coplanar."""

    det = orient3d(a, b, c, d)
    if det > 0.0:
        return 1
    if det < 0.0:
        return -1
    return 0


def affine_rank(points: Sequence[Sequence[float]],
                tol: Optional[float] = None) -> Tuple[int, List[int]]:
    """Return ``(rank, basis)`` of the affine span of ``points``.

    ``rank`` is 0 (all coincident), 1 (collinear), 2 (coplanar) or 3.
    ``basis`` holds the indices of ``rank + 1`` points spanning that
    space, chosen greedily as the points farthest from the span so far.
    Distances within ``tol`` of zero count as zero.
    """

    eps = resolve_epsilon(tol)
    if len(points) == 0:
        return -1, []
    pts = np.asarray([[float(p[0]), float(p[1]), float(p[2])] for p in points])

    i0 = 0
    offsets = pts - pts[i0]
    d0 = np.linalg.norm(offsets, axis=1)
    i1 = int(np.argmax(d0))
    if d0[i1] <= eps:
        return 0, [i0]

    axis = offsets[i1] / d0[i1]
    perp = offsets - np.outer(offsets @ axis, axis)
    d1 = np.linalg.norm(perp, axis=1)
    i2 = int(np.argmax(d1))
    if d1[i2] <= eps:
        return 1, [i0, i1]

    normal = np.cross(offsets[i1], offsets[i2])
    nlen = float(np.linalg.norm(normal))
    d2 = np.abs(offsets @ normal) / nlen
    i3 = int(np.argmax(d2))
    if d2[i3] <= eps:
        return 2, [i0, i1, i2]
    # confirm the float estimate with the robust predicate
    volume = orient3d(pts[i0], pts[i1], pts[i2], pts[i3])
    if volume == 0.0 or abs(volume) / nlen <= eps:
        logger.debug("affine_rank: float estimate %g overruled by predicate", d2[i3])
        return 2, [i0, i1, i2]
    return 3, [i0, i1, i2, i3]


__all__ = [
    'orient3d',
    'orientation',
    'affine_rank',
]
