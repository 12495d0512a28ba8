"""Planar predicates used by the clippers, backed by shapely.

Every function accepts GeoCrop model geometries, converts them to shapely
and wraps any GEOS/shapely error in ``PredicateFailure`` so callers can
isolate a failing feature or vertex pair.

Point-in-polygon is boundary-inclusive: a point lying on a boundary edge
or vertex counts as inside (``covers`` rather than ``contains``).
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Union

from shapely.errors import GEOSException, ShapelyError
from shapely.geometry import GeometryCollection
from shapely.geometry import LineString as ShapelyLineString
from shapely.geometry import MultiPolygon as ShapelyMultiPolygon
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry.base import BaseGeometry

from geocrop.core.exceptions import InvalidGeometry, PredicateFailure
from geocrop.core.models import (
    Coordinate,
    Geometry,
    MultiPolygon,
    Point,
    Polygon,
    geometry_from_shapely,
)

logger = logging.getLogger("geocrop.geometry.predicates")

_LIBRARY_ERRORS = (GEOSException, ShapelyError, ValueError, TypeError)

GeometryLike = Union[Geometry, BaseGeometry]


def as_shape(geometry: GeometryLike) -> BaseGeometry:
    """Return the shapely form of a model (or already-shapely) geometry."""
    if isinstance(geometry, BaseGeometry):
        return geometry
    try:
        return geometry.to_shapely()
    except _LIBRARY_ERRORS as exc:
        raise PredicateFailure(
            f"Cannot build {geometry.kind.value} for predicate: {exc}"
        ) from exc


def point_in_polygon(point: GeometryLike, polygon: GeometryLike) -> bool:
    """True if the point lies inside or on the boundary of the polygon."""
    try:
        return bool(as_shape(polygon).covers(as_shape(point)))
    except _LIBRARY_ERRORS as exc:
        raise PredicateFailure(f"point_in_polygon failed: {exc}") from exc


def coordinate_in_polygon(coord: Coordinate, polygon: GeometryLike) -> bool:
    """``point_in_polygon`` for a bare (x, y) pair."""
    try:
        return bool(as_shape(polygon).covers(ShapelyPoint(coord)))
    except _LIBRARY_ERRORS as exc:
        raise PredicateFailure(f"point_in_polygon failed at {coord}: {exc}") from exc


def intersects(a: GeometryLike, b: GeometryLike) -> bool:
    """True if the two geometries share any point."""
    try:
        return bool(as_shape(a).intersects(as_shape(b)))
    except _LIBRARY_ERRORS as exc:
        raise PredicateFailure(f"intersects failed: {exc}") from exc


def within(a: GeometryLike, b: GeometryLike) -> bool:
    """True if ``a`` lies entirely inside ``b`` (boundaries may touch)."""
    try:
        return bool(as_shape(a).within(as_shape(b)))
    except _LIBRARY_ERRORS as exc:
        raise PredicateFailure(f"within failed: {exc}") from exc


def intersect_polygons(
    a: GeometryLike, b: GeometryLike
) -> Optional[Union[Polygon, MultiPolygon]]:
    """Return the polygonal part of ``a ∩ b``.

    Returns
    -------
    Polygon, MultiPolygon or None
        ``None`` when the intersection has no area (empty, or only shared
        edges/vertices).

    Raises
    ------
    PredicateFailure
        If GEOS cannot compute the overlay.
    """
    try:
        result = as_shape(a).intersection(as_shape(b))
    except _LIBRARY_ERRORS as exc:
        raise PredicateFailure(f"intersect_polygons failed: {exc}") from exc

    polygons = [p for p in _iter_polygons(result) if not p.is_empty and p.area > 0]
    if not polygons:
        return None

    merged: BaseGeometry = (
        polygons[0] if len(polygons) == 1 else ShapelyMultiPolygon(polygons)
    )
    try:
        return geometry_from_shapely(merged)  # type: ignore[return-value]
    except InvalidGeometry as exc:
        raise PredicateFailure(f"intersect_polygons produced bad output: {exc}") from exc


def line_intersections(line: GeometryLike, boundary: GeometryLike) -> list[Coordinate]:
    """Points where ``line`` meets the rings of ``boundary``.

    Points are unique and ordered by their distance along ``line``.
    A stretch of the line running along a boundary edge contributes its two
    end points.
    """
    try:
        line_shape = as_shape(line)
        edges = as_shape(boundary).boundary
        hits = line_shape.intersection(edges)
        found: dict[Coordinate, float] = {}
        for coord in _iter_coords(hits):
            if coord not in found:
                found[coord] = line_shape.project(ShapelyPoint(coord))
    except _LIBRARY_ERRORS as exc:
        raise PredicateFailure(f"line_intersections failed: {exc}") from exc

    return sorted(found, key=found.__getitem__)


def centroid(geometry: GeometryLike) -> Point:
    try:
        c = as_shape(geometry).centroid
    except _LIBRARY_ERRORS as exc:
        raise PredicateFailure(f"centroid failed: {exc}") from exc
    return Point((c.x, c.y))


# ── Internal Helpers ────────────────────────────────────────────────────


def _iter_polygons(geom: BaseGeometry) -> Iterator[ShapelyPolygon]:
    if isinstance(geom, ShapelyPolygon):
        yield geom
    elif isinstance(geom, (ShapelyMultiPolygon, GeometryCollection)):
        for part in geom.geoms:
            yield from _iter_polygons(part)


def _iter_coords(geom: BaseGeometry) -> Iterator[Coordinate]:
    if geom.is_empty:
        return
    if isinstance(geom, ShapelyPoint):
        yield (geom.x, geom.y)
    elif isinstance(geom, ShapelyLineString):
        coords = list(geom.coords)
        yield (coords[0][0], coords[0][1])
        yield (coords[-1][0], coords[-1][1])
    elif hasattr(geom, "geoms"):
        for part in geom.geoms:
            yield from _iter_coords(part)
