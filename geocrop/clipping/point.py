"""Point clipping and the pass-through clipper for remaining kinds."""

from __future__ import annotations

from geocrop.clipping.base import Clipper
from geocrop.core.models import Geometry, GeometryKind, Point
from geocrop.geometry.predicates import GeometryLike, point_in_polygon


class PointClipper(Clipper):
    """Keep a Point only if it lies inside (or on) the boundary."""

    @property
    def name(self) -> str:
        return "point"

    @property
    def kinds(self) -> tuple[GeometryKind, ...]:
        return (GeometryKind.POINT,)

    def clip(self, geometry: Geometry, boundary: GeometryLike) -> Geometry | None:
        if not isinstance(geometry, Point):
            raise TypeError(f"PointClipper cannot clip {geometry.kind.value}")
        return geometry if point_in_polygon(geometry, boundary) else None


class PassThroughClipper(Clipper):
    """Keep any intersecting geometry unchanged.

    Used for kinds without a dedicated clipper (MultiPoint). The cropper
    has already established that the geometry intersects the boundary.
    """

    @property
    def name(self) -> str:
        return "pass_through"

    @property
    def kinds(self) -> tuple[GeometryKind, ...]:
        return (GeometryKind.MULTI_POINT,)

    def clip(self, geometry: Geometry, boundary: GeometryLike) -> Geometry | None:
        return geometry
