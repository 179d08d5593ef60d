# -*- coding: utf-8 -*-
"""geoquery: geometric queries on 3D point clouds, segments and lines.

The query functions in ``geoquery.queries`` are re-exported here::

    from geoquery import compute_aabb

    result = compute_aabb([(0, 0, 0), (1, 2, 3), (-1, 0, 5)])
    if result:
        box = result.record.payload
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("geoquery")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from geoquery.errors import (
    DegenerateInput,
    GeometryError,
    InsufficientInput,
    InvalidInput,
    NumericInstability,
    SingularTransform,
)
from geoquery.geom import Line, Point3D, Segment, Vector3D
from geoquery.lcs import GLOBAL_CS, LocalCoordinateSystem
from geoquery.queries import (
    QueryResult,
    classify_point_in_hull,
    compute_aabb,
    compute_obb,
    intersect_lines,
    intersect_segments,
    locate_point,
    transform_point,
)

__all__ = [
    "__version__",
    "GeometryError",
    "InsufficientInput",
    "DegenerateInput",
    "SingularTransform",
    "NumericInstability",
    "InvalidInput",
    "Point3D",
    "Vector3D",
    "Segment",
    "Line",
    "LocalCoordinateSystem",
    "GLOBAL_CS",
    "QueryResult",
    "compute_aabb",
    "compute_obb",
    "locate_point",
    "intersect_segments",
    "intersect_lines",
    "transform_point",
    "classify_point_in_hull",
]
