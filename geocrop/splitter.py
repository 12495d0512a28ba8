"""Multi-part splitter: one Feature per part of a MultiPolygon / MultiLineString."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from geocrop.core.config import DEFAULT_CONFIG, SplitConfig
from geocrop.core.models import (
    Feature,
    LineString,
    MultiLineString,
    MultiPolygon,
    Polygon,
)

logger = logging.getLogger("geocrop.splitter")


def find_label(properties: dict[str, Any], label_keys: Sequence[str]) -> Optional[tuple[str, str]]:
    """Return ``(key, value)`` of the first non-empty string label, if any."""
    for key in label_keys:
        value = properties.get(key)
        if isinstance(value, str) and value.strip():
            return key, value
    return None


def split_multipart(
    features: Sequence[Feature],
    *,
    config: SplitConfig = DEFAULT_CONFIG.split,
    source_indices: Optional[Sequence[int]] = None,
) -> list[Feature]:
    """Expand every multi-part feature into single-part features.

    Parameters
    ----------
    features : sequence of Feature
        Features to expand. Kinds other than MultiPolygon and
        MultiLineString are returned unchanged.
    config : SplitConfig
        Label keys and templates for the part names.
    source_indices : sequence of int, optional
        0-based position of each feature in the original input batch,
        used for ``Feature N (Part k)`` names. Defaults to the position in
        ``features``.

    Returns
    -------
    list of Feature
    """
    if source_indices is None:
        source_indices = range(len(features))

    result: list[Feature] = []
    for feature, source_index in zip(features, source_indices):
        geometry = feature.geometry
        if isinstance(geometry, MultiPolygon):
            parts = [Polygon(coords) for coords in geometry.coordinates]
        elif isinstance(geometry, MultiLineString):
            parts = [LineString(coords) for coords in geometry.coordinates]
        else:
            result.append(feature)
            continue

        properties = dict(feature.properties)
        label = find_label(properties, config.label_keys)
        for k, part in enumerate(parts, start=1):
            part_props = dict(properties)
            if label is not None:
                key, value = label
                part_props[key] = config.part_template.format(label=value, part=k)
            else:
                part_props[config.label_keys[0]] = config.fallback_template.format(
                    index=source_index + 1, part=k
                )
            result.append(Feature(geometry=part, properties=part_props))

        logger.debug("Split %s into %d part(s)", geometry.kind.value, len(parts))

    return result
