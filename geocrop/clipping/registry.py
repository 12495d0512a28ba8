"""Clipper registry — maps geometry kinds to Clipper instances."""

from __future__ import annotations

import logging
from typing import Optional

from geocrop.clipping.base import Clipper
from geocrop.core.models import GeometryKind

logger = logging.getLogger("geocrop.clipping.registry")


class ClipperRegistry:
    """Registry that maps geometry kinds to the clipper that handles them.

    Usage::

        registry = ClipperRegistry()
        registry.register(PointClipper())
        registry.register(LineClipper())

        clipper = registry.get(GeometryKind.POINT)
        result = clipper.apply(geometry, boundary)
    """

    def __init__(self) -> None:
        self._by_kind: dict[GeometryKind, Clipper] = {}

    def register(self, clipper: Clipper) -> None:
        """Register a clipper for every kind it declares."""
        for kind in clipper.kinds:
            if kind in self._by_kind:
                logger.warning(
                    "Overwriting clipper for %s: %s → %s",
                    kind.value,
                    self._by_kind[kind].name,
                    clipper.name,
                )
            self._by_kind[kind] = clipper
        logger.debug("Registered clipper: %s", clipper.name)

    def get(self, kind: GeometryKind) -> Optional[Clipper]:
        """Look up the clipper for a geometry kind."""
        return self._by_kind.get(kind)

    def list_clippers(self) -> list[str]:
        """Return the distinct registered clipper names."""
        return list(dict.fromkeys(c.name for c in self._by_kind.values()))

    def __contains__(self, kind: GeometryKind) -> bool:
        return kind in self._by_kind


def build_default_registry(tolerance: float = 1e-12) -> ClipperRegistry:
    """Create a registry covering every geometry kind."""
    from geocrop.clipping.line import LineClipper
    from geocrop.clipping.point import PassThroughClipper, PointClipper
    from geocrop.clipping.polygon import PolygonClipper

    registry = ClipperRegistry()
    for clipper in (
        PointClipper(),
        LineClipper(tolerance=tolerance),
        PolygonClipper(),
        PassThroughClipper(),
    ):
        registry.register(clipper)

    return registry
