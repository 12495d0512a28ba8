"""Abstract base class for all boundary clippers.

Every geometry family (points, lines, polygons, pass-through) has a
``Clipper`` subclass that implements ``name``, ``kinds`` and ``clip``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from geocrop.core.exceptions import PredicateFailure
from geocrop.core.models import ClipResult, Geometry, GeometryKind
from geocrop.geometry.predicates import GeometryLike

logger = logging.getLogger("geocrop.clipping")


class Clipper(ABC):
    """Base class for boundary clipping operations.

    Subclasses must implement:
    - ``name``  — unique string identifier
    - ``kinds`` — the geometry kinds this clipper handles
    - ``clip``  — restrict one geometry to the boundary

    The ``apply`` method wraps ``clip`` so that a failure on one geometry
    becomes a dropped result instead of an exception.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this clipper (e.g. ``"line"``)."""
        ...

    @property
    @abstractmethod
    def kinds(self) -> tuple[GeometryKind, ...]:
        ...

    @abstractmethod
    def clip(self, geometry: Geometry, boundary: GeometryLike) -> Geometry | None:
        """Return the part of ``geometry`` inside ``boundary``.

        Parameters
        ----------
        geometry : Geometry
            A geometry already known to intersect the boundary.
        boundary : Polygon, MultiPolygon or shapely geometry
            A validated boundary.

        Returns
        -------
        Geometry or None
            The clipped geometry, or ``None`` if nothing survives.
        """
        ...

    def apply(self, geometry: Geometry, boundary: GeometryLike) -> ClipResult:
        """Run ``clip`` and isolate any failure into a dropped result."""
        try:
            clipped = self.clip(geometry, boundary)
        except PredicateFailure as exc:
            logger.warning("Clipper %s: predicate failed on %s: %s", self.name, geometry.kind.value, exc)
            return ClipResult(self.name, geometry, None, error=str(exc))
        except Exception as exc:
            logger.warning("Clipper %s failed on %s: %s", self.name, geometry.kind.value, exc)
            return ClipResult(self.name, geometry, None, error=str(exc))
        return ClipResult(self.name, geometry, clipped)
