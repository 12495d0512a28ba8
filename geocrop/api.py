"""File-level API for GeoCrop, ``import geocrop; geocrop.crop_file(...)``.

Wraps the in-memory engine with geopandas I/O for scripting, notebooks and
CLI usage. The engine itself (``geocrop.cropper``) never touches files.

Examples
--------
>>> import geocrop
>>> result = geocrop.crop_file("roads.geojson", "city.geojson", output="roads_city.geojson")
>>> print(result.summary())
>>> geocrop.validate_boundary_file("city.geojson")
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import geopandas as gpd
from shapely.ops import unary_union

from geocrop.audit.diagnostics import CropDiagnostics
from geocrop.core.config import DEFAULT_CONFIG, GeoCropConfig
from geocrop.core.exceptions import InvalidGeometry
from geocrop.core.models import Boundary, Feature
from geocrop.cropper import crop_features
from geocrop.validation.validator import validate_boundary

logger = logging.getLogger("geocrop.api")


# ── Result Container ────────────────────────────────────────────────────


class CropResult(dict):
    """Clipping results with a nice ``__repr__``."""

    def __repr__(self) -> str:
        ic = self.get("input_count", "?")
        oc = self.get("output_count", "?")
        return f"<CropResult input={ic} output={oc}>"

    @property
    def features(self) -> list[Feature]:
        return self.get("features", [])

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines = [
            "GeoCrop Results",
            f"   Input features:   {self.get('input_count', '?')}",
            f"   Output features:  {self.get('output_count', '?')}",
        ]
        outcomes = {k: v for k, v in self.get("outcomes", {}).items() if v}
        skip = {"processed", "kept", "dropped"}
        breakdown = {k: v for k, v in outcomes.items() if k not in skip}
        if breakdown:
            lines.append("   Outcomes:")
            for name, count in breakdown.items():
                lines.append(f"     • {name}: {count}")
        if self.get("output"):
            lines.append(f"   Written to:       {self['output']}")
        return "\n".join(lines)


# ── Internal Helpers ────────────────────────────────────────────────────


def _read_file(file_path: str | Path, config: GeoCropConfig) -> gpd.GeoDataFrame:
    """Read a vector file into a GeoDataFrame."""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    supported = config.io.supported_suffixes
    if suffix not in supported:
        raise ValueError(
            f"Unsupported format '{suffix}'. Supported: {', '.join(sorted(supported))}"
        )

    gdf = gpd.read_file(str(path))
    logger.info("Loaded %d features from %s", len(gdf), path.name)
    return gdf


def _boundary_from_frame(gdf: gpd.GeoDataFrame) -> Boundary:
    """Dissolve all rows of a boundary file into one validated boundary."""
    geoms = [g for g in gdf.geometry if g is not None and not g.is_empty]
    if not geoms:
        raise InvalidGeometry("Boundary file contains no geometry")
    merged = geoms[0] if len(geoms) == 1 else unary_union(geoms)
    return validate_boundary(merged)


def _write_file(
    features: list[Feature],
    path: Path,
    crs,
    config: GeoCropConfig,
) -> None:
    if features:
        gdf = gpd.GeoDataFrame.from_features(
            [f.to_geojson() for f in features], crs=crs
        )
    else:
        gdf = gpd.GeoDataFrame({"geometry": []}, geometry="geometry", crs=crs)

    driver = config.io.output_driver
    if driver is None and path.suffix.lower() in (".geojson", ".json"):
        driver = "GeoJSON"
    gdf.to_file(str(path), driver=driver)
    logger.info("Saved %d features to %s", len(gdf), path)


# ── Public API ──────────────────────────────────────────────────────────


def validate_boundary_file(
    file_path: str | Path,
    *,
    config: GeoCropConfig = DEFAULT_CONFIG,
) -> Boundary:
    """Load a boundary file and validate it.

    Multi-row files are dissolved into one Polygon/MultiPolygon first.

    Raises
    ------
    InvalidGeometry
        If the dissolved boundary is not a usable clipping boundary.
    """
    return _boundary_from_frame(_read_file(file_path, config))


def crop_file(
    features_path: str | Path,
    boundary_path: str | Path,
    output: Optional[str | Path] = None,
    *,
    config: GeoCropConfig = DEFAULT_CONFIG,
    precision: Optional[int] = None,
    split: Optional[bool] = None,
) -> CropResult:
    """Clip the features of one vector file to the boundary in another.

    Parameters
    ----------
    features_path : str or Path
        GeoJSON, Shapefile or GeoPackage with the candidate features.
    boundary_path : str or Path
        File holding the boundary polygon(s).
    output : str or Path, optional
        Write the surviving features here.
    precision : int, optional
        Override the dedup hash precision (decimal places).
    split : bool, optional
        Override whether multi-part results are split into parts.

    Returns
    -------
    CropResult
        A dict-like object with counts, per-outcome totals and the
        resulting features.
    """
    crop_cfg = config.crop
    if precision is not None:
        crop_cfg = replace(crop_cfg, hash_precision=precision)
    if split is not None:
        crop_cfg = replace(crop_cfg, split_multipart=split)
    config = replace(config, crop=crop_cfg)

    features_gdf = _read_file(features_path, config)
    boundary_gdf = _read_file(boundary_path, config)

    if (
        features_gdf.crs is not None
        and boundary_gdf.crs is not None
        and features_gdf.crs != boundary_gdf.crs
    ):
        logger.warning(
            "CRS mismatch: features %s vs boundary %s (no reprojection is done)",
            features_gdf.crs,
            boundary_gdf.crs,
        )

    boundary = _boundary_from_frame(boundary_gdf)
    records = list(features_gdf.iterfeatures(na="null"))

    sink = CropDiagnostics()
    cropped = crop_features(boundary, records, config=config, sink=sink)

    out_path = None
    if output:
        out_path = Path(output)
        _write_file(cropped, out_path, features_gdf.crs, config)

    return CropResult(
        input_count=len(records),
        output_count=len(cropped),
        outcomes=sink.summary(),
        features=cropped,
        output=str(out_path) if out_path else None,
    )
