"""Serialization adapters for query results."""

from geoquery.io.json_lines import parse_points, record_to_dict, to_json_lines

__all__ = [
    "parse_points",
    "record_to_dict",
    "to_json_lines",
]
