"""Local coordinate systems and point transfer between them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from geoquery.geom import ORIGIN, Point3D, Vector3D, point, vect
from geoquery.xform import AffineMap, from_axes


@dataclass(frozen=True)
class LocalCoordinateSystem:
    """A frame given by an origin and three axes, all in world coordinates.

    The axes are expected to be orthonormal.  This is a precondition on
    the caller and is not checked: skewed or scaled axes still define a
    valid affine map, and only singular axis sets are rejected (when the
    map is inverted).
    """

    origin: Point3D
    x_axis: Vector3D
    y_axis: Vector3D
    z_axis: Vector3D

    @classmethod
    def create(cls, origin: Sequence[float], x_axis: Sequence[float],
               y_axis: Sequence[float], z_axis: Sequence[float]) -> "LocalCoordinateSystem":
        """Build a frame from plain 3-sequences."""
        return cls(point(origin), vect(x_axis), vect(y_axis), vect(z_axis))

    def map_to_global(self) -> AffineMap:
        """Map local coordinates to world coordinates."""
        return from_axes(self.x_axis, self.y_axis, self.z_axis, self.origin)

    def map_from_global(self, tol: Optional[float] = None) -> AffineMap:
        """Map world coordinates to local coordinates.

        Raises ``SingularTransform`` when the axes are linearly dependent.
        """
        return self.map_to_global().inverse(tol)

    def map_to(self, target: "LocalCoordinateSystem", tol: Optional[float] = None) -> AffineMap:
        """Map coordinates expressed in this frame into ``target``."""
        if target == self:
            return AffineMap()
        return target.map_from_global(tol).mul(self.map_to_global())

    def to_global(self, p: Sequence[float]) -> Point3D:
        return self.map_to_global().transform_point(point(p))

    def to_local(self, p: Sequence[float], tol: Optional[float] = None) -> Point3D:
        return self.map_from_global(tol).transform_point(point(p))


GLOBAL_CS = LocalCoordinateSystem(ORIGIN,
                                  Vector3D(1.0, 0.0, 0.0),
                                  Vector3D(0.0, 1.0, 0.0),
                                  Vector3D(0.0, 0.0, 1.0))


def transform_point(p: Sequence[float], source: LocalCoordinateSystem,
                    target: LocalCoordinateSystem, tol: Optional[float] = None) -> Point3D:
    """Express ``p``, given in ``source`` coordinates, in ``target`` coordinates."""

    return source.map_to(target, tol).transform_point(point(p))


__all__ = [
    "LocalCoordinateSystem",
    "GLOBAL_CS",
    "transform_point",
]
