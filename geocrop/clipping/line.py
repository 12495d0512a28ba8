"""Line clipping: cut LineString / MultiLineString features to the boundary.

The clipper walks a line one vertex pair at a time and classifies both
endpoints as inside or outside the boundary. ``SegmentWalker`` keeps the
open segment and the list of emitted segments, so each transition is a
small, separately testable step.

Crossings for a pair are the points where the 2-point sub-segment meets
the boundary rings, minus points that coincide with the pair's own
endpoints (an endpoint resting on the boundary is a contact, not a
crossing).

Expected crossing parity per transition:

    in/in    even   (0 = interior, 2 = exit and re-entry)
    in/out   odd
    out/in   odd
    out/out  even   (0 = skipped, 2 = pass-through)

When the count has the wrong parity (tangent contacts, endpoints on the
boundary) the pair is resolved by testing the midpoint of every piece
between consecutive crossings instead.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Union

from geocrop.clipping.base import Clipper
from geocrop.core.exceptions import PredicateFailure
from geocrop.core.models import (
    Coordinate,
    Geometry,
    GeometryKind,
    LineString,
    MultiLineString,
)
from geocrop.geometry.predicates import (
    GeometryLike,
    coordinate_in_polygon,
    intersects,
    line_intersections,
    within,
)

logger = logging.getLogger("geocrop.clipping.line")

Segment = list[Coordinate]


class SegmentWalker:
    """Finite-state accumulator for the segment-by-segment walk.

    Usage::

        walker = SegmentWalker()
        walker.extend(p1, p2)
        walker.close_at(exit_point)
        segments = walker.finish()
    """

    def __init__(self, tolerance: float = 1e-12) -> None:
        self.tolerance = tolerance
        self.current: Segment = []
        self.segments: list[Segment] = []

    @property
    def is_open(self) -> bool:
        return bool(self.current)

    def same(self, a: Coordinate, b: Coordinate) -> bool:
        return math.isclose(a[0], b[0], rel_tol=0.0, abs_tol=self.tolerance) and math.isclose(
            a[1], b[1], rel_tol=0.0, abs_tol=self.tolerance
        )

    def extend(self, *points: Coordinate) -> None:
        for point in points:
            if not self.current or not self.same(self.current[-1], point):
                self.current.append(point)

    def start_at(self, *points: Coordinate) -> None:
        """Discard the open segment and begin a new one."""
        self.current = []
        self.extend(*points)

    def close_at(self, point: Optional[Coordinate] = None) -> None:
        """Finish the open segment (optionally at ``point``) and emit it."""
        if point is not None and self.current:
            self.extend(point)
        self._emit(self.current)
        self.current = []

    def emit_pairs(self, crossings: Sequence[Coordinate]) -> None:
        """Emit ``[c0, c1], [c2, c3], ...`` as standalone segments."""
        for i in range(0, len(crossings) - 1, 2):
            self._emit([crossings[i], crossings[i + 1]])

    def finish(self) -> list[Segment]:
        self.close_at()
        return self.segments

    def _emit(self, points: Segment) -> None:
        cleaned: Segment = []
        for point in points:
            if not cleaned or not self.same(cleaned[-1], point):
                cleaned.append(point)
        if len(cleaned) >= 2:
            self.segments.append(cleaned)


def clip_line_coordinates(
    coords: Sequence[Coordinate],
    boundary: GeometryLike,
    tolerance: float = 1e-12,
) -> list[Segment]:
    """Clip one line's coordinates to the boundary.

    Returns
    -------
    list of segments
        0..N disjoint coordinate runs, each with at least 2 points.
    """
    coords = [(c[0], c[1]) for c in coords]
    if len(coords) < 2:
        return []

    line = LineString(tuple(coords))
    try:
        # A line within a concave boundary can still run along its edges
        fully_inside = within(line, boundary) and not line_intersections(line, boundary)
    except PredicateFailure as exc:
        logger.warning("Whole-line check failed, walking vertex pairs: %s", exc)
        fully_inside = False
    if fully_inside:
        return [list(coords)]

    walker = SegmentWalker(tolerance)
    for i in range(len(coords) - 1):
        p1, p2 = coords[i], coords[i + 1]
        try:
            _step(walker, p1, p2, boundary)
        except PredicateFailure as exc:
            logger.warning("Skipping vertex pair %d of line: %s", i, exc)
            walker.close_at()

    segments = walker.finish()
    logger.debug("Line with %d points clipped into %d segment(s)", len(coords), len(segments))
    return segments


def encode_segments(segments: list[Segment]) -> Optional[Union[LineString, MultiLineString]]:
    """0 segments → None, 1 → LineString, more → MultiLineString."""
    if not segments:
        return None
    if len(segments) == 1:
        return LineString(tuple(segments[0]))
    return MultiLineString(tuple(tuple(seg) for seg in segments))


class LineClipper(Clipper):
    """Clip LineString and MultiLineString geometries to the boundary.

    MultiLineString members that do not touch the boundary are skipped;
    the segments of all remaining members are flattened into one result.
    """

    def __init__(self, tolerance: float = 1e-12) -> None:
        self.tolerance = tolerance

    @property
    def name(self) -> str:
        return "line"

    @property
    def kinds(self) -> tuple[GeometryKind, ...]:
        return (GeometryKind.LINE_STRING, GeometryKind.MULTI_LINE_STRING)

    def clip(self, geometry: Geometry, boundary: GeometryLike) -> Geometry | None:
        if isinstance(geometry, LineString):
            return encode_segments(
                clip_line_coordinates(geometry.coordinates, boundary, self.tolerance)
            )
        if isinstance(geometry, MultiLineString):
            return encode_segments(self._clip_members(geometry, boundary))
        raise TypeError(f"LineClipper cannot clip {geometry.kind.value}")

    def _clip_members(self, geometry: MultiLineString, boundary: GeometryLike) -> list[Segment]:
        segments: list[Segment] = []
        for i, member in enumerate(geometry.parts()):
            try:
                if not intersects(member, boundary):
                    continue
                segments.extend(
                    clip_line_coordinates(member.coordinates, boundary, self.tolerance)
                )
            except PredicateFailure as exc:
                logger.warning("Skipping MultiLineString member %d: %s", i, exc)
        return segments


# ── Walk Step ───────────────────────────────────────────────────────────


def _step(
    walker: SegmentWalker,
    p1: Coordinate,
    p2: Coordinate,
    boundary: GeometryLike,
) -> None:
    p1_inside = coordinate_in_polygon(p1, boundary)
    p2_inside = coordinate_in_polygon(p2, boundary)
    crossings, touches = _crossings(walker, p1, p2, boundary)
    count = len(crossings)

    if p1_inside and p2_inside:
        if count == 0 and not touches:
            if not walker.is_open:
                walker.extend(p1)
            walker.extend(p2)
        elif count and count % 2 == 0:
            # Leaves the boundary and comes back within one edge
            if not walker.is_open:
                walker.extend(p1)
            walker.close_at(crossings[0])
            walker.emit_pairs(crossings[1:-1])
            walker.start_at(crossings[-1], p2)
        else:
            _walk_pieces(walker, p1, p2, crossings, boundary)

    elif p1_inside and not p2_inside:
        if count % 2 == 1:
            if not walker.is_open:
                walker.extend(p1)
            walker.close_at(crossings[0])
            walker.emit_pairs(crossings[1:])
        else:
            _walk_pieces(walker, p1, p2, crossings, boundary)

    elif not p1_inside and p2_inside:
        if count % 2 == 1:
            walker.emit_pairs(crossings[:-1])
            walker.start_at(crossings[-1], p2)
        else:
            _walk_pieces(walker, p1, p2, crossings, boundary)

    else:
        if count >= 2 and count % 2 == 0:
            # Passes straight through the boundary
            walker.emit_pairs(crossings)
        elif count >= 2:
            _walk_pieces(walker, p1, p2, crossings, boundary)


def _crossings(
    walker: SegmentWalker,
    p1: Coordinate,
    p2: Coordinate,
    boundary: GeometryLike,
) -> tuple[list[Coordinate], bool]:
    """Boundary crossings strictly between p1 and p2, and whether an endpoint touches."""
    points = line_intersections(LineString((p1, p2)), boundary)
    crossings = [c for c in points if not walker.same(c, p1) and not walker.same(c, p2)]
    return crossings, len(crossings) < len(points)


def _walk_pieces(
    walker: SegmentWalker,
    p1: Coordinate,
    p2: Coordinate,
    crossings: list[Coordinate],
    boundary: GeometryLike,
) -> None:
    """Resolve an ambiguous pair by classifying each piece's midpoint."""
    logger.debug("Resolving pair %s → %s with %d crossing(s) by midpoints", p1, p2, len(crossings))
    stops = [p1, *crossings, p2]
    for a, b in zip(stops, stops[1:]):
        mid = ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)
        if coordinate_in_polygon(mid, boundary):
            if not walker.is_open:
                walker.extend(a)
            walker.extend(b)
        else:
            walker.close_at()
