"""JSON-lines text format for query results.

Each point is one JSON object per line::

    {"Length": 3.7416573867739413, "X": 1.0, "Y": 2.0, "Z": 3.0}

where ``Length`` is the distance of the point from the world origin.
Records other than plain point lists start with one header line naming
their classification: ``{"IntersectionType": "SEGMENT"}``,
``{"Location": "FACET"}`` or ``{"Side": "ON_BOUNDARY"}``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from geoquery.errors import InvalidInput
from geoquery.geom import Point3D, point
from geoquery.records import (
    AABBRecord,
    HullSideRecord,
    IntersectionRecord,
    LocationRecord,
    OBBRecord,
    ResultRecord,
    TransformRecord,
)

_HEADER_KEYS = ("IntersectionType", "Location", "Side")


def point_to_dict(p: Point3D) -> Dict[str, float]:
    return {"Length": p.length(), "X": p.x, "Y": p.y, "Z": p.z}


def to_json_lines(record) -> str:
    """Render a ``ResultRecord`` (or a bare payload) as JSON-lines text."""

    payload = record.payload if isinstance(record, ResultRecord) else record
    lines = []
    if isinstance(payload, IntersectionRecord):
        lines.append(json.dumps({"IntersectionType": payload.type.value}))
    elif isinstance(payload, LocationRecord):
        lines.append(json.dumps({"Location": payload.location.value}))
    elif isinstance(payload, HullSideRecord):
        lines.append(json.dumps({"Side": payload.side.value}))
    for p in payload.points():
        lines.append(json.dumps(point_to_dict(p)))
    return "\n".join(lines) + "\n"


def parse_points(text: str) -> List[Point3D]:
    """Read the points back from JSON-lines text, skipping header lines."""

    result = []
    for n, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"line {n}: {exc.msg}", line=n) from exc
        if not isinstance(obj, dict):
            raise InvalidInput(f"line {n}: expected a JSON object", line=n)
        if any(k in obj for k in _HEADER_KEYS):
            continue
        try:
            coords = (obj["X"], obj["Y"], obj["Z"])
        except KeyError as exc:
            raise InvalidInput(f"line {n}: missing coordinate {exc.args[0]}", line=n) from None
        result.append(point(coords))
    return result


def _xyz(p) -> List[float]:
    return [p[0], p[1], p[2]]


def record_to_dict(record) -> Dict[str, Any]:
    """Plain JSON-compatible dict describing a ``ResultRecord`` or payload."""

    if not isinstance(record, ResultRecord):
        record = ResultRecord.wrap(record)
    payload = record.payload
    out: Dict[str, Any] = {"kind": record.kind.value}
    if isinstance(payload, AABBRecord):
        out.update(min=_xyz(payload.min), max=_xyz(payload.max))
    elif isinstance(payload, OBBRecord):
        frame = payload.frame
        out.update(corners=[_xyz(c) for c in payload.corners],
                   center=_xyz(payload.center),
                   axes=[_xyz(frame.x_axis), _xyz(frame.y_axis), _xyz(frame.z_axis)],
                   half_extents=_xyz(payload.half_extents),
                   volume=payload.volume())
    elif isinstance(payload, LocationRecord):
        out.update(location=payload.location.value, cell=[_xyz(c) for c in payload.cell])
    elif isinstance(payload, IntersectionRecord):
        out.update(type=payload.type.value, points=[_xyz(p) for p in payload.geometry])
    elif isinstance(payload, TransformRecord):
        out.update(point=_xyz(payload.point))
    elif isinstance(payload, HullSideRecord):
        out.update(side=payload.side.value, distance=payload.distance)
    return out


__all__ = [
    "point_to_dict",
    "to_json_lines",
    "parse_points",
    "record_to_dict",
]
