"""GeoCrop — clip map features to an administrative boundary.

One-liner API::

    import geocrop

    geocrop.crop_features(boundary, features)
    geocrop.validate_boundary(boundary)
    geocrop.crop_file("roads.geojson", "city.geojson", output="clipped.geojson")
"""

__version__ = "1.0.0"

from geocrop.api import CropResult, crop_file, validate_boundary_file
from geocrop.core.exceptions import (
    GeoCropError,
    InvalidGeometry,
    PredicateFailure,
    ValidationFailure,
)
from geocrop.core.models import Feature, GeometryKind
from geocrop.cropper import FeatureCropper, crop_features
from geocrop.validation.validator import validate_boundary

__all__ = [
    "crop_features",
    "validate_boundary",
    "crop_file",
    "validate_boundary_file",
    "FeatureCropper",
    "Feature",
    "GeometryKind",
    "CropResult",
    "GeoCropError",
    "InvalidGeometry",
    "PredicateFailure",
    "ValidationFailure",
    "__version__",
]
