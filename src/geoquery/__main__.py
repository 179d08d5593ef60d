#!/usr/bin/env python3
"""
Command line interface for geoquery.

Usage:
    python -m geoquery aabb [POINT ...] [--file CLOUD.json]
    python -m geoquery obb [POINT ...] [--file CLOUD.json]
    python -m geoquery locate QUERY [POINT ...] [--file CLOUD.json]
    python -m geoquery hull-side QUERY [POINT ...] [--file CLOUD.json]
    python -m geoquery intersect A1 A2 B1 B2 [--lines]
    python -m geoquery transform POINT [--source O X Y Z] [--target O X Y Z]

A POINT is written ``x,y,z``.  A point starting with a minus sign looks
like an option, so put it after ``--`` or in the cloud file.  A cloud
file holds a JSON list of ``[x, y, z]`` triples; ``-`` reads it from
stdin.  Results are printed as JSON lines, or as one JSON object with
``--json``.

Exit status is 0 on success, 1 when the query fails on its input
geometry, and 2 for usage errors.

Examples:
    python -m geoquery aabb 0,0,0 1,2,3 -- -1,0,5
    python -m geoquery intersect 0,0,0 2,0,0 1,0,0 3,0,0
    python -m geoquery --epsilon 1e-6 locate 0.2,0.2,0.2 --file cloud.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from geoquery import queries
from geoquery.config import get_tolerance, load_config, using_tolerance
from geoquery.errors import InvalidInput
from geoquery.geom import point
from geoquery.io.json_lines import record_to_dict, to_json_lines
from geoquery.lcs import GLOBAL_CS, LocalCoordinateSystem
from geoquery.logging_config import setup_logging

EXIT_OK = 0
EXIT_GEOMETRY = 1
EXIT_USAGE = 2


class UsageError(Exception):
    """Bad command line input detected after argument parsing."""


def parse_point(text: str):
    """Parse ``'x,y,z'`` into a ``Point3D``."""
    parts = text.split(',')
    if len(parts) != 3:
        raise UsageError(f"Invalid point: {text} (expected x,y,z)")
    try:
        return point(*(float(p) for p in parts))
    except (ValueError, InvalidInput):
        raise UsageError(f"Invalid point: {text} (coordinates must be finite numbers)") from None


def read_cloud(args):
    """Collect the point cloud from inline arguments and/or ``--file``."""
    cloud = [parse_point(p) for p in args.points]
    if args.file:
        if args.file == '-':
            text = sys.stdin.read()
        else:
            path = Path(args.file)
            if not path.exists():
                raise UsageError(f"File not found: {path}")
            text = path.read_text()
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise UsageError(f"{args.file}: not valid JSON ({e.msg})") from None
        if not isinstance(data, list):
            raise UsageError(f"{args.file}: expected a JSON list of [x, y, z] points")
        cloud.extend(data)
    return cloud


def parse_frame(values):
    if values is None:
        return GLOBAL_CS
    origin, x, y, z = (parse_point(v) for v in values)
    return LocalCoordinateSystem.create(origin, x, y, z)


def cmd_aabb(args):
    return queries.compute_aabb(read_cloud(args))


def cmd_obb(args):
    return queries.compute_obb(read_cloud(args))


def cmd_locate(args):
    return queries.locate_point(parse_point(args.query), read_cloud(args))


def cmd_hull_side(args):
    return queries.classify_point_in_hull(parse_point(args.query), read_cloud(args))


def cmd_intersect(args):
    a1, a2, b1, b2 = (parse_point(p) for p in (args.a1, args.a2, args.b1, args.b2))
    if args.lines:
        return queries.intersect_lines(a1, a2, b1, b2)
    return queries.intersect_segments(a1, a2, b1, b2)


def cmd_transform(args):
    source = parse_frame(args.source)
    target = parse_frame(args.target)
    return queries.transform_point(parse_point(args.point), source, target)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='python -m geoquery',
        description='3D point cloud and segment geometry queries',
    )
    parser.add_argument('--epsilon', type=float, metavar='EPS',
                        help='Absolute tolerance (overrides config and environment)')
    parser.add_argument('--config', metavar='FILE',
                        help='YAML file with epsilon / predicate_dps')
    parser.add_argument('--json', action='store_true',
                        help='Print one JSON object instead of JSON lines')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log progress to stderr (repeat for debug output)')

    subparsers = parser.add_subparsers(dest='action', required=True)

    def cloud_parser(name, text, query=False):
        p = subparsers.add_parser(name, help=text)
        if query:
            p.add_argument('query', help='Query point x,y,z')
        p.add_argument('points', nargs='*', metavar='POINT', help='Cloud point x,y,z')
        p.add_argument('-f', '--file', metavar='FILE',
                       help="JSON list of [x, y, z] points ('-' for stdin)")
        return p

    cloud_parser('aabb', 'Axis-aligned bounding box').set_defaults(func=cmd_aabb)
    cloud_parser('obb', 'Oriented bounding box').set_defaults(func=cmd_obb)
    cloud_parser('locate', 'Locate a point in the Delaunay tetrahedralization',
                 query=True).set_defaults(func=cmd_locate)
    cloud_parser('hull-side', 'Classify a point against the convex hull',
                 query=True).set_defaults(func=cmd_hull_side)

    isect = subparsers.add_parser('intersect', help='Intersect two segments (or lines)')
    for name in ('a1', 'a2', 'b1', 'b2'):
        isect.add_argument(name, help='Point x,y,z')
    isect.add_argument('--lines', action='store_true',
                       help='Treat the inputs as infinite lines')
    isect.set_defaults(func=cmd_intersect)

    xf = subparsers.add_parser('transform', help='Transform a point between coordinate systems')
    xf.add_argument('point', help='Point x,y,z in source coordinates')
    xf.add_argument('--source', nargs=4, metavar=('ORIGIN', 'X', 'Y', 'Z'),
                    help='Source frame (default: global)')
    xf.add_argument('--target', nargs=4, metavar=('ORIGIN', 'X', 'Y', 'Z'),
                    help='Target frame (default: global)')
    xf.set_defaults(func=cmd_transform)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    setup_logging(level)

    try:
        tol = load_config(args.config) if args.config else get_tolerance()
        epsilon = args.epsilon if args.epsilon is not None else tol.epsilon
        with using_tolerance(epsilon=epsilon, predicate_dps=tol.predicate_dps):
            result = args.func(args)
    except (UsageError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if not result:
        print(f"Error: {result.error}", file=sys.stderr)
        return EXIT_GEOMETRY

    if args.json:
        print(json.dumps(record_to_dict(result.record), indent=2))
    else:
        sys.stdout.write(to_json_lines(result.record))
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
