"""Unit tests for the geometry model and Feature parsing."""

import pytest
from shapely.geometry import Polygon as ShapelyPolygon

from geocrop.core.exceptions import InvalidGeometry
from geocrop.core.models import (
    ClipResult,
    Feature,
    GeometryKind,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    geometry_from_geojson,
    geometry_from_shapely,
)


class TestGeometryKind:
    def test_values_match_geojson(self):
        assert GeometryKind.POINT.value == "Point"
        assert GeometryKind.LINE_STRING.value == "LineString"
        assert GeometryKind.MULTI_POLYGON.value == "MultiPolygon"

    def test_each_variant_carries_its_kind(self):
        assert Point((0, 0)).kind is GeometryKind.POINT
        assert MultiPoint(((0, 0),)).kind is GeometryKind.MULTI_POINT
        assert LineString(((0, 0), (1, 1))).kind is GeometryKind.LINE_STRING
        assert MultiLineString((((0, 0), (1, 1)),)).kind is GeometryKind.MULTI_LINE_STRING


class TestGeometryFromGeojson:
    def test_point(self):
        geom = geometry_from_geojson({"type": "Point", "coordinates": [1, 2]})
        assert geom == Point((1.0, 2.0))

    def test_elevation_dropped(self):
        geom = geometry_from_geojson({"type": "LineString", "coordinates": [[0, 0, 5], [1, 1, 7]]})
        assert geom.coordinates == ((0.0, 0.0), (1.0, 1.0))

    def test_polygon_with_hole(self):
        geom = geometry_from_geojson({
            "type": "Polygon",
            "coordinates": [
                [[0, 0], [0, 10], [10, 10], [10, 0], [0, 0]],
                [[4, 4], [6, 4], [6, 6], [4, 6], [4, 4]],
            ],
        })
        assert isinstance(geom, Polygon)
        assert len(geom.rings) == 2

    def test_multipolygon(self):
        ring = [[0, 0], [0, 1], [1, 1], [0, 0]]
        geom = geometry_from_geojson({"type": "MultiPolygon", "coordinates": [[ring], [ring]]})
        assert isinstance(geom, MultiPolygon)
        assert len(geom.parts()) == 2

    def test_feature_wrapper_unwrapped(self):
        geom = geometry_from_geojson({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [3, 4]},
            "properties": {},
        })
        assert geom == Point((3.0, 4.0))

    def test_unsupported_type(self):
        with pytest.raises(InvalidGeometry, match="Unsupported"):
            geometry_from_geojson({"type": "GeometryCollection", "geometries": []})

    def test_missing_coordinates(self):
        with pytest.raises(InvalidGeometry):
            geometry_from_geojson({"type": "Point"})

    def test_non_numeric_component(self):
        with pytest.raises(InvalidGeometry):
            geometry_from_geojson({"type": "Point", "coordinates": ["a", 1]})

    def test_bool_component_rejected(self):
        with pytest.raises(InvalidGeometry):
            geometry_from_geojson({"type": "Point", "coordinates": [True, 1]})

    def test_wrong_nesting(self):
        with pytest.raises(InvalidGeometry):
            geometry_from_geojson({"type": "Polygon", "coordinates": [[1, 2], [3, 4]]})

    def test_not_a_mapping(self):
        with pytest.raises(InvalidGeometry):
            geometry_from_geojson("POINT (1 2)")

    def test_model_instance_passes_through(self):
        point = Point((1, 2))
        assert geometry_from_geojson(point) is point


class TestShapelyConversion:
    def test_from_shapely(self):
        geom = geometry_from_shapely(ShapelyPolygon([(0, 0), (0, 1), (1, 1), (0, 0)]))
        assert isinstance(geom, Polygon)
        assert geom.rings[0][0] == geom.rings[0][-1]

    def test_empty_shapely_rejected(self):
        with pytest.raises(InvalidGeometry):
            geometry_from_shapely(ShapelyPolygon())

    def test_to_shapely(self):
        line = LineString(((0, 0), (3, 4)))
        assert line.to_shapely().length == pytest.approx(5.0)

    def test_to_geojson_uses_lists(self):
        data = Polygon((((0, 0), (0, 1), (1, 1), (0, 0)),)).to_geojson()
        assert data["type"] == "Polygon"
        assert data["coordinates"][0][0] == [0, 0]


class TestFeature:
    def test_from_geojson(self):
        feature = Feature.from_geojson({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [1, 1]},
            "properties": {"name": "Well"},
        })
        assert feature.geometry == Point((1.0, 1.0))
        assert feature.properties == {"name": "Well"}

    def test_bad_geometry_becomes_none(self):
        feature = Feature.from_geojson({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": "nope"},
            "properties": {"name": "Broken"},
        })
        assert feature.geometry is None
        assert feature.properties == {"name": "Broken"}

    def test_missing_geometry(self):
        feature = Feature.from_geojson({"type": "Feature", "geometry": None, "properties": None})
        assert feature.geometry is None
        assert feature.properties == {}

    def test_non_mapping_input(self):
        assert Feature.from_geojson(42).geometry is None

    def test_bare_geometry_mapping(self):
        feature = Feature.from_geojson({"type": "Point", "coordinates": [0, 0]})
        assert feature.geometry == Point((0.0, 0.0))

    def test_to_geojson(self):
        data = Feature(Point((1, 2)), {"a": 1}).to_geojson()
        assert data == {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [1, 2]},
            "properties": {"a": 1},
        }

    def test_with_geometry_keeps_properties(self):
        feature = Feature(Point((1, 2)), {"a": 1})
        moved = feature.with_geometry(Point((3, 4)))
        assert moved.properties == {"a": 1}
        assert feature.geometry == Point((1, 2))


class TestClipResult:
    def test_unchanged(self):
        point = Point((1, 1))
        result = ClipResult("point", point, point)
        assert not result.dropped
        assert not result.changed

    def test_dropped(self):
        result = ClipResult("point", Point((1, 1)), None)
        assert result.dropped
        assert not result.changed
