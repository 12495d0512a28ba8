"""Rounded-coordinate content hash used for per-call deduplication."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from geocrop.core.models import Geometry


def round_coordinates(coords: Any, precision: int) -> Any:
    """Round every numeric component of a nested coordinate structure."""
    if isinstance(coords, (list, tuple)):
        return [round_coordinates(item, precision) for item in coords]
    # + 0.0 folds -0.0 into 0.0 so both hash the same
    return round(float(coords), precision) + 0.0


def geometry_hash(geometry: Geometry, precision: int = 6) -> str:
    """Fingerprint a geometry by its type tag and rounded coordinates.

    Two geometries whose coordinates agree to ``precision`` decimal places
    (6 places is ~0.1 m in degrees) produce the same hash.
    """
    rounded = round_coordinates(geometry.coordinates, precision)
    text = f"{geometry.kind.value}:{json.dumps(rounded, separators=(',', ':'))}"
    return hashlib.sha256(text.encode()).hexdigest()
