"""Polygon clipping: intersect Polygon / MultiPolygon features with the boundary."""

from __future__ import annotations

import logging
from typing import Optional, Union

from geocrop.clipping.base import Clipper
from geocrop.core.exceptions import PredicateFailure
from geocrop.core.models import (
    Geometry,
    GeometryKind,
    MultiPolygon,
    Polygon,
    Ring,
)
from geocrop.geometry.predicates import (
    GeometryLike,
    intersect_polygons,
    intersects,
    within,
)

logger = logging.getLogger("geocrop.clipping.polygon")

PolygonCoords = tuple[Ring, ...]


class PolygonClipper(Clipper):
    """Clip Polygon and MultiPolygon geometries to the boundary.

    A Polygon within the boundary is kept unchanged, coordinates and ring
    start included. Any other Polygon is replaced by its exact intersection
    with the boundary, or dropped when that intersection has no area.

    A MultiPolygon is clipped part by part and recombined: no surviving
    part drops the feature, one part yields a Polygon, several yield a
    MultiPolygon.
    """

    @property
    def name(self) -> str:
        return "polygon"

    @property
    def kinds(self) -> tuple[GeometryKind, ...]:
        return (GeometryKind.POLYGON, GeometryKind.MULTI_POLYGON)

    def clip(self, geometry: Geometry, boundary: GeometryLike) -> Geometry | None:
        if isinstance(geometry, Polygon):
            return self._clip_polygon(geometry, boundary)
        if isinstance(geometry, MultiPolygon):
            return self._clip_multipolygon(geometry, boundary)
        raise TypeError(f"PolygonClipper cannot clip {geometry.kind.value}")

    def _clip_polygon(
        self, polygon: Polygon, boundary: GeometryLike
    ) -> Optional[Union[Polygon, MultiPolygon]]:
        # Contained polygons keep their exact coordinates
        if within(polygon, boundary):
            return polygon
        try:
            return intersect_polygons(polygon, boundary)
        except PredicateFailure as exc:
            logger.warning("Polygon intersection failed, dropping polygon: %s", exc)
            return None

    def _clip_multipolygon(
        self, multi: MultiPolygon, boundary: GeometryLike
    ) -> Optional[Union[Polygon, MultiPolygon]]:
        parts: list[PolygonCoords] = []
        for i, part in enumerate(multi.parts()):
            if not intersects(part, boundary):
                continue
            if within(part, boundary):
                parts.append(part.coordinates)
                continue
            try:
                clipped = intersect_polygons(part, boundary)
            except PredicateFailure as exc:
                logger.warning("MultiPolygon part %d: intersection failed, keeping it unclipped: %s", i, exc)
                parts.append(part.coordinates)
                continue

            if isinstance(clipped, MultiPolygon):
                parts.extend(clipped.coordinates)
            elif isinstance(clipped, Polygon):
                parts.append(clipped.coordinates)

        return recombine_parts(parts)


def recombine_parts(parts: list[PolygonCoords]) -> Optional[Union[Polygon, MultiPolygon]]:
    """0 parts → None, 1 → Polygon, more → MultiPolygon."""
    if not parts:
        return None
    if len(parts) == 1:
        return Polygon(parts[0])
    return MultiPolygon(tuple(parts))
