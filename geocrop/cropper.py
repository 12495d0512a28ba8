"""Feature cropper: restricts a batch of features to a boundary.

Runs every feature through:
  intersects check → kind-specific clipper → post-clip validation → dedup
then expands surviving multi-part features into single-part ones.

Only an invalid boundary aborts the pass. Every per-feature failure is
logged and turned into a dropped feature.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import shapely

from geocrop.audit.diagnostics import CropDiagnostics, CropOutcome
from geocrop.clipping.registry import ClipperRegistry, build_default_registry
from geocrop.core.config import DEFAULT_CONFIG, GeoCropConfig
from geocrop.core.exceptions import InvalidGeometry, PredicateFailure, ValidationFailure
from geocrop.core.models import Feature, MultiPolygon, Polygon
from geocrop.geometry.hashing import geometry_hash
from geocrop.geometry.predicates import as_shape, intersects
from geocrop.splitter import split_multipart
from geocrop.validation.validator import (
    validate_boundary,
    validate_clipped_geometry,
    validate_polygon_rings,
)

logger = logging.getLogger("geocrop.cropper")


class FeatureCropper:
    """Clip feature batches against a boundary.

    Usage::

        cropper = FeatureCropper()
        kept = cropper.crop(boundary, features)

    The instance holds only immutable collaborators; all per-call state
    (the dedup set) lives inside ``crop``, so one cropper can serve
    concurrent calls.
    """

    def __init__(
        self,
        config: GeoCropConfig = DEFAULT_CONFIG,
        registry: Optional[ClipperRegistry] = None,
    ):
        self.config = config
        self.registry = registry or build_default_registry(
            tolerance=config.crop.contact_tolerance
        )

    def crop(
        self,
        boundary: Any,
        features: Iterable[Any],
        sink: Optional[CropDiagnostics] = None,
    ) -> list[Feature]:
        """Clip ``features`` to ``boundary``.

        Parameters
        ----------
        boundary : Polygon, MultiPolygon, GeoJSON mapping or shapely geometry
            The clipping boundary. Validated once before any feature.
        features : iterable of Feature or GeoJSON Feature mappings
            The candidate features.
        sink : CropDiagnostics, optional
            Receives one entry per input feature.

        Returns
        -------
        list of Feature
            Surviving features, multi-part results split into parts.

        Raises
        ------
        InvalidGeometry
            If the boundary fails validation. No partial result is returned.
        """
        parsed = validate_boundary(boundary)
        try:
            boundary_shape = as_shape(parsed)
        except PredicateFailure as exc:
            raise InvalidGeometry(f"Boundary cannot be built: {exc}") from exc
        shapely.prepare(boundary_shape)

        crop_cfg = self.config.crop
        seen: set[str] = set()
        kept: list[Feature] = []
        kept_indices: list[int] = []
        processed = 0

        for index, item in enumerate(features):
            processed += 1
            feature = Feature.from_geojson(item)
            outcome, clipped, detail = self._crop_one(feature, boundary_shape)

            if clipped is not None and crop_cfg.deduplicate:
                key = geometry_hash(clipped.geometry, crop_cfg.hash_precision)
                if key in seen:
                    outcome, clipped, detail = CropOutcome.DROPPED_DUPLICATE, None, "duplicate geometry"
                else:
                    seen.add(key)

            if sink is not None:
                kind = feature.geometry.kind.value if feature.geometry else None
                sink.record(index, outcome, kind, detail)
            if clipped is not None:
                kept.append(clipped)
                kept_indices.append(index)

        result = (
            split_multipart(kept, config=self.config.split, source_indices=kept_indices)
            if crop_cfg.split_multipart
            else kept
        )
        logger.info(
            "Cropped %d feature(s): %d kept, %d after splitting",
            processed,
            len(kept),
            len(result),
        )
        return result

    def _crop_one(
        self, feature: Feature, boundary_shape: Any
    ) -> tuple[CropOutcome, Optional[Feature], str]:
        geometry = feature.geometry
        if geometry is None:
            return CropOutcome.SKIPPED_MALFORMED, None, "missing or malformed geometry"

        if isinstance(geometry, (Polygon, MultiPolygon)):
            try:
                validate_polygon_rings(geometry)
            except InvalidGeometry as exc:
                logger.warning("Skipping %s with bad ring: %s", geometry.kind.value, exc)
                return CropOutcome.SKIPPED_MALFORMED, None, str(exc)

        try:
            if not intersects(geometry, boundary_shape):
                return CropOutcome.DROPPED_OUTSIDE, None, ""
        except PredicateFailure as exc:
            logger.warning("Intersects test failed for %s: %s", geometry.kind.value, exc)
            return CropOutcome.DROPPED_ERROR, None, str(exc)

        clipper = self.registry.get(geometry.kind)
        if clipper is None:
            # Unknown kinds are kept as long as they touch the boundary
            clipped_geometry, changed = geometry, False
        else:
            result = clipper.apply(geometry, boundary_shape)
            if result.error is not None:
                return CropOutcome.DROPPED_ERROR, None, result.error
            if result.dropped:
                return CropOutcome.DROPPED_EMPTY, None, f"nothing left after {clipper.name} clip"
            clipped_geometry, changed = result.geometry, result.changed

        try:
            validate_clipped_geometry(clipped_geometry)
        except ValidationFailure as exc:
            logger.warning("Dropping clipped %s: %s", clipped_geometry.kind.value, exc)
            return CropOutcome.DROPPED_INVALID, None, str(exc)

        outcome = CropOutcome.CLIPPED if changed else CropOutcome.KEPT
        return outcome, feature.with_geometry(clipped_geometry), ""


def crop_features(
    boundary: Any,
    features: Iterable[Any],
    *,
    config: GeoCropConfig = DEFAULT_CONFIG,
    sink: Optional[CropDiagnostics] = None,
) -> list[Feature]:
    """Clip a feature batch to a boundary. See ``FeatureCropper.crop``."""
    return FeatureCropper(config=config).crop(boundary, features, sink=sink)
