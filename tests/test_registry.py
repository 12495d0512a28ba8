"""Tests for the clipper registry and the Clipper base class."""

import logging

from geocrop.clipping.base import Clipper
from geocrop.clipping.point import PointClipper
from geocrop.clipping.registry import ClipperRegistry, build_default_registry
from geocrop.core.exceptions import PredicateFailure
from geocrop.core.models import GeometryKind, Point


class _FailingClipper(Clipper):
    name = "failing"
    kinds = (GeometryKind.POINT,)

    def clip(self, geometry, boundary):
        raise PredicateFailure("no GEOS today")


class TestClipperRegistry:
    def test_register_and_get(self):
        registry = ClipperRegistry()
        clipper = PointClipper()
        registry.register(clipper)
        assert registry.get(GeometryKind.POINT) is clipper
        assert GeometryKind.POINT in registry
        assert registry.get(GeometryKind.POLYGON) is None

    def test_overwrite_warns(self, caplog):
        registry = ClipperRegistry()
        registry.register(PointClipper())
        with caplog.at_level(logging.WARNING, logger="geocrop.clipping.registry"):
            registry.register(_FailingClipper())
        assert "Overwriting clipper" in caplog.text
        assert registry.get(GeometryKind.POINT).name == "failing"

    def test_default_registry_covers_every_kind(self):
        registry = build_default_registry()
        for kind in GeometryKind:
            assert kind in registry
        assert registry.list_clippers() == ["point", "line", "polygon", "pass_through"]

    def test_default_registry_passes_tolerance(self):
        registry = build_default_registry(tolerance=0.5)
        assert registry.get(GeometryKind.LINE_STRING).tolerance == 0.5


class TestClipperApply:
    def test_predicate_failure_becomes_error_result(self, square_boundary):
        result = _FailingClipper().apply(Point((5, 5)), square_boundary)
        assert result.dropped
        assert result.clipper == "failing"
        assert "no GEOS today" in result.error

    def test_success(self, square_boundary):
        result = PointClipper().apply(Point((5, 5)), square_boundary)
        assert result.error is None
        assert result.geometry == Point((5, 5))
