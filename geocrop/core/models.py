"""Core data models for the GeoCrop pipeline.

Defines the data structures that flow through the system:
  GeoJSON mapping → Geometry / Feature → clipped Feature → split Features

Geometry is a closed set of frozen dataclasses, one per GeoJSON kind.
Dispatch happens on the class (or on ``kind``), never on raw strings.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Mapping, Optional, Union

from shapely.geometry import mapping as shapely_mapping
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from geocrop.core.exceptions import InvalidGeometry

logger = logging.getLogger("geocrop.core.models")

Coordinate = tuple[float, float]
Ring = tuple[Coordinate, ...]

# ── Enums ───────────────────────────────────────────────────────────────


class GeometryKind(Enum):
    """GeoJSON geometry type tag."""

    POINT = "Point"
    MULTI_POINT = "MultiPoint"
    LINE_STRING = "LineString"
    MULTI_LINE_STRING = "MultiLineString"
    POLYGON = "Polygon"
    MULTI_POLYGON = "MultiPolygon"


# ── Geometry Variants ───────────────────────────────────────────────────


class _GeometryBase:
    """Shared behaviour of the geometry variants."""

    kind: ClassVar[GeometryKind]
    coordinates: Any

    def to_geojson(self) -> dict[str, Any]:
        """Return a GeoJSON-shaped mapping with list coordinates."""
        return {"type": self.kind.value, "coordinates": _as_lists(self.coordinates)}

    def to_shapely(self) -> BaseGeometry:
        return shape(self.to_geojson())

    @property
    def __geo_interface__(self) -> dict[str, Any]:
        return self.to_geojson()


@dataclass(frozen=True)
class Point(_GeometryBase):
    coordinates: Coordinate
    kind: ClassVar[GeometryKind] = GeometryKind.POINT


@dataclass(frozen=True)
class MultiPoint(_GeometryBase):
    coordinates: tuple[Coordinate, ...]
    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POINT


@dataclass(frozen=True)
class LineString(_GeometryBase):
    coordinates: tuple[Coordinate, ...]
    kind: ClassVar[GeometryKind] = GeometryKind.LINE_STRING


@dataclass(frozen=True)
class MultiLineString(_GeometryBase):
    coordinates: tuple[tuple[Coordinate, ...], ...]
    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_LINE_STRING

    def parts(self) -> list[LineString]:
        return [LineString(line) for line in self.coordinates]


@dataclass(frozen=True)
class Polygon(_GeometryBase):
    """First ring is the exterior, the rest are holes."""

    coordinates: tuple[Ring, ...]
    kind: ClassVar[GeometryKind] = GeometryKind.POLYGON

    @property
    def rings(self) -> tuple[Ring, ...]:
        return self.coordinates


@dataclass(frozen=True)
class MultiPolygon(_GeometryBase):
    coordinates: tuple[tuple[Ring, ...], ...]
    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POLYGON

    def parts(self) -> list[Polygon]:
        return [Polygon(rings) for rings in self.coordinates]

    @property
    def rings(self) -> tuple[Ring, ...]:
        return tuple(ring for rings in self.coordinates for ring in rings)


Geometry = Union[Point, MultiPoint, LineString, MultiLineString, Polygon, MultiPolygon]
Boundary = Union[Polygon, MultiPolygon]

# ── Feature ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Feature:
    """A geometry plus an opaque property mapping.

    ``geometry`` is ``None`` when the source record had no geometry or one
    that could not be parsed; the cropper skips such features.
    """

    geometry: Optional[Geometry]
    properties: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_geojson(cls, data: Any) -> "Feature":
        """Build a Feature from a GeoJSON Feature (or bare geometry) mapping.

        Never raises for bad geometry: the geometry is stored as ``None``.
        """
        if isinstance(data, Feature):
            return data
        if not isinstance(data, Mapping):
            return cls(geometry=None, properties={})

        if data.get("type") == "Feature" or "geometry" in data:
            raw_geometry = data.get("geometry")
            properties = data.get("properties") or {}
        else:
            raw_geometry = data
            properties = {}

        geometry = None
        if raw_geometry is not None:
            try:
                geometry = geometry_from_geojson(raw_geometry)
            except InvalidGeometry as exc:
                logger.debug("Unparseable feature geometry: %s", exc)
        return cls(geometry=geometry, properties=dict(properties))

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": self.geometry.to_geojson() if self.geometry else None,
            "properties": dict(self.properties),
        }

    def with_geometry(self, geometry: Geometry) -> "Feature":
        return replace(self, geometry=geometry)


# ── Parsing ─────────────────────────────────────────────────────────────


def geometry_from_geojson(data: Any) -> Geometry:
    """Parse a GeoJSON geometry mapping (or ``__geo_interface__`` object).

    Only structure is checked here: known type, nesting depth and numeric
    coordinate pairs. Ring closure is the validators' job.

    Raises
    ------
    InvalidGeometry
        If the mapping is not a supported, well-formed geometry.
    """
    if isinstance(data, _GeometryBase):
        return data  # type: ignore[return-value]
    if isinstance(data, BaseGeometry):
        return geometry_from_shapely(data)
    if not isinstance(data, Mapping) and hasattr(data, "__geo_interface__"):
        data = data.__geo_interface__
    if not isinstance(data, Mapping):
        raise InvalidGeometry(f"Expected a geometry mapping, got {type(data).__name__}")

    if data.get("type") == "Feature":
        return geometry_from_geojson(data.get("geometry"))

    type_name = data.get("type")
    try:
        kind = GeometryKind(type_name)
    except ValueError:
        raise InvalidGeometry(f"Unsupported geometry type: {type_name!r}") from None

    coords = data.get("coordinates")
    if coords is None:
        raise InvalidGeometry(f"{kind.value} has no coordinates")

    if kind is GeometryKind.POINT:
        return Point(_coord(coords))
    if kind is GeometryKind.MULTI_POINT:
        return MultiPoint(_coord_seq(coords))
    if kind is GeometryKind.LINE_STRING:
        return LineString(_coord_seq(coords))
    if kind is GeometryKind.MULTI_LINE_STRING:
        return MultiLineString(tuple(_coord_seq(line) for line in _seq(coords)))
    if kind is GeometryKind.POLYGON:
        return Polygon(tuple(_coord_seq(ring) for ring in _seq(coords)))
    return MultiPolygon(
        tuple(
            tuple(_coord_seq(ring) for ring in _seq(poly))
            for poly in _seq(coords)
        )
    )


def geometry_from_shapely(geom: BaseGeometry) -> Geometry:
    """Convert a shapely geometry into the GeoCrop model."""
    if geom is None or geom.is_empty:
        raise InvalidGeometry("Empty shapely geometry")
    return geometry_from_geojson(shapely_mapping(geom))


# ── Internal Helpers ────────────────────────────────────────────────────


def _seq(value: Any) -> list:
    if not isinstance(value, (list, tuple)):
        raise InvalidGeometry(f"Expected a coordinate array, got {type(value).__name__}")
    return list(value)


def _coord(value: Any) -> Coordinate:
    items = _seq(value)
    if len(items) < 2:
        raise InvalidGeometry(f"Coordinate needs 2 components, got {len(items)}")
    x, y = items[0], items[1]
    for component in (x, y):
        if isinstance(component, bool) or not isinstance(component, numbers.Real):
            raise InvalidGeometry(f"Non-numeric coordinate component: {component!r}")
    # Elevation, if present, is dropped
    return (float(x), float(y))


def _coord_seq(value: Any) -> tuple[Coordinate, ...]:
    return tuple(_coord(item) for item in _seq(value))


def _as_lists(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_as_lists(item) for item in value]
    return value


# ── Clip Result ─────────────────────────────────────────────────────────


@dataclass
class ClipResult:
    """Outcome of clipping one geometry against the boundary."""

    clipper: str
    original: Geometry
    geometry: Optional[Geometry]
    error: Optional[str] = None

    @property
    def dropped(self) -> bool:
        return self.geometry is None

    @property
    def changed(self) -> bool:
        return self.geometry is not None and self.geometry != self.original
