"""GeoCrop configuration: clipping, dedup, splitting and file I/O settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class CropConfig:
    """Settings for one clipping pass."""

    hash_precision: int = 6          # decimal places, ~0.1 m in degrees
    deduplicate: bool = True
    split_multipart: bool = True
    contact_tolerance: float = 1e-12


@dataclass(frozen=True)
class SplitConfig:
    """How split parts of a multi-part feature are labelled."""

    label_keys: tuple[str, ...] = ("name", "feature_name", "label")
    part_template: str = "{label} (Part {part})"
    fallback_template: str = "Feature {index} (Part {part})"


@dataclass(frozen=True)
class IOConfig:
    """Vector file settings for the file-level API and CLI."""

    supported_suffixes: tuple[str, ...] = (".geojson", ".json", ".shp", ".gpkg")
    output_driver: Optional[str] = None


@dataclass(frozen=True)
class GeoCropConfig:
    """Top-level GeoCrop configuration."""

    crop: CropConfig = field(default_factory=CropConfig)
    split: SplitConfig = field(default_factory=SplitConfig)
    io: IOConfig = field(default_factory=IOConfig)


DEFAULT_CONFIG = GeoCropConfig()
