"""Structural validation for boundaries and clipped geometries.

Two entry points matter to callers:
1. ``validate_boundary`` runs once per clipping pass; failure is fatal.
2. ``validate_clipped_geometry`` runs on every clipped result; failure
   only drops that feature.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Sequence

from geocrop.core.exceptions import InvalidGeometry, ValidationFailure
from geocrop.core.models import (
    Boundary,
    Geometry,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    geometry_from_geojson,
)

logger = logging.getLogger("geocrop.validation")


# ── Boundary Validation ─────────────────────────────────────────────────


def validate_ring_closure(ring: Sequence[Sequence[float]]) -> None:
    """Fail unless the ring has at least 4 coordinates and is exactly closed.

    Closure uses exact equality: producers are expected to repeat the
    first coordinate verbatim.
    """
    if len(ring) < 4:
        raise InvalidGeometry(f"Ring has {len(ring)} coordinates, needs at least 4")
    first, last = ring[0], ring[-1]
    if tuple(first[:2]) != tuple(last[:2]):
        raise InvalidGeometry(
            f"Ring is not closed: first {tuple(first)} != last {tuple(last)}"
        )


def validate_boundary(geometry: Any) -> Boundary:
    """Check that ``geometry`` can serve as a clipping boundary.

    Parameters
    ----------
    geometry : Geometry, mapping or shapely geometry
        The candidate boundary. GeoJSON Feature wrappers are unwrapped.

    Returns
    -------
    Polygon or MultiPolygon
        The parsed boundary.

    Raises
    ------
    InvalidGeometry
        If the geometry is not a Polygon/MultiPolygon or any ring is open
        or too short.
    """
    if geometry is None:
        raise InvalidGeometry("No boundary geometry supplied")

    parsed = geometry_from_geojson(geometry)
    if not isinstance(parsed, (Polygon, MultiPolygon)):
        raise InvalidGeometry(
            f"Boundary must be a Polygon or MultiPolygon, got {parsed.kind.value}"
        )

    validate_polygon_rings(parsed)
    return parsed


def validate_polygon_rings(geometry: Polygon | MultiPolygon) -> None:
    """Run ``validate_ring_closure`` on every ring of a (Multi)Polygon.

    Raises
    ------
    InvalidGeometry
        Naming the first polygon and ring that fail.
    """
    polygons = geometry.coordinates if isinstance(geometry, MultiPolygon) else (geometry.coordinates,)
    if not polygons:
        raise InvalidGeometry(f"{geometry.kind.value} has no polygons")

    for i, rings in enumerate(polygons):
        if not rings:
            raise InvalidGeometry(f"Polygon {i} has no rings")
        for j, ring in enumerate(rings):
            try:
                validate_ring_closure(ring)
            except InvalidGeometry as exc:
                raise InvalidGeometry(f"Polygon {i}, ring {j}: {exc}") from None


# ── Post-Clip Validation ────────────────────────────────────────────────


@dataclass
class ValidationResult:
    """Result of validating one clipped geometry."""

    passed: bool
    checks_run: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)


class ClipValidator:
    """Structural sanity check for clipper output.

    Usage::

        v = ClipValidator()
        result = v.check(geometry)
        if not result.passed:
            print("Dropped:", result.failures)
    """

    def check(self, geometry: Geometry | None) -> ValidationResult:
        result = ValidationResult(passed=True)

        # Check 1: Null geometry
        result.checks_run.append("null_check")
        if geometry is None:
            result.passed = False
            result.failures.append("Clipped geometry is missing")
            return result

        # Check 2: Coordinate arity and finiteness
        result.checks_run.append("coordinate_check")
        bad = [c for c in _iter_coordinates(geometry) if not _is_valid_coordinate(c)]
        if bad:
            result.failures.append(f"{len(bad)} invalid coordinate(s), first: {bad[0]!r}")

        # Check 3: Minimum structure per kind
        result.checks_run.append("structure_check")
        result.failures.extend(self._structure_failures(geometry))

        if result.failures:
            result.passed = False
            logger.debug(
                "Clipped %s failed validation: %s",
                geometry.kind.value,
                "; ".join(result.failures),
            )
        return result

    @staticmethod
    def _structure_failures(geometry: Geometry) -> list[str]:
        failures: list[str] = []
        if isinstance(geometry, Point):
            return failures

        if isinstance(geometry, MultiPoint):
            if not geometry.coordinates:
                failures.append("MultiPoint has no points")
        elif isinstance(geometry, LineString):
            if len(geometry.coordinates) < 2:
                failures.append("LineString has fewer than 2 points")
        elif isinstance(geometry, MultiLineString):
            if not geometry.coordinates:
                failures.append("MultiLineString has no lines")
            for i, line in enumerate(geometry.coordinates):
                if len(line) < 2:
                    failures.append(f"Line {i} has fewer than 2 points")
        elif isinstance(geometry, (Polygon, MultiPolygon)):
            polygons = (
                geometry.coordinates
                if isinstance(geometry, MultiPolygon)
                else (geometry.coordinates,)
            )
            if not polygons:
                failures.append("MultiPolygon has no polygons")
            for i, rings in enumerate(polygons):
                if not rings:
                    failures.append(f"Polygon {i} has no rings")
                for j, ring in enumerate(rings):
                    try:
                        validate_ring_closure(ring)
                    except InvalidGeometry as exc:
                        failures.append(f"Polygon {i}, ring {j}: {exc}")
        return failures


_DEFAULT_VALIDATOR = ClipValidator()


def validate_clipped_geometry(geometry: Geometry | None) -> Geometry:
    """Raise ``ValidationFailure`` unless the clipped geometry is usable."""
    result = _DEFAULT_VALIDATOR.check(geometry)
    if not result.passed:
        raise ValidationFailure("; ".join(result.failures))
    return geometry  # type: ignore[return-value]


# ── Internal Helpers ────────────────────────────────────────────────────


def _iter_coordinates(geometry: Geometry):
    if isinstance(geometry, Point):
        yield geometry.coordinates
    elif isinstance(geometry, (MultiPoint, LineString)):
        yield from geometry.coordinates
    elif isinstance(geometry, (MultiLineString, Polygon)):
        for seq in geometry.coordinates:
            yield from seq
    elif isinstance(geometry, MultiPolygon):
        for rings in geometry.coordinates:
            for ring in rings:
                yield from ring


def _is_valid_coordinate(coord: Any) -> bool:
    if not isinstance(coord, (list, tuple)) or len(coord) != 2:
        return False
    return all(
        isinstance(v, numbers.Real) and not isinstance(v, bool) and math.isfinite(v)
        for v in coord
    )
