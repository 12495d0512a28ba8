"""GeoCrop custom exceptions."""

from __future__ import annotations


class GeoCropError(Exception):
    """Base exception for all GeoCrop errors."""


class InvalidGeometry(GeoCropError):
    """Raised when a geometry is malformed or a ring is not closed."""


class PredicateFailure(GeoCropError):
    """Raised when the underlying geometry library fails on a specific op."""


class ValidationFailure(GeoCropError):
    """Raised when a clipped geometry fails the post-clip structural check."""
