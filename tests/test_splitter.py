"""Tests for the multi-part splitter."""

from geocrop.core.config import SplitConfig
from geocrop.core.models import (
    Feature,
    LineString,
    MultiLineString,
    MultiPolygon,
    Point,
    Polygon,
)
from geocrop.splitter import find_label, split_multipart

RING_A = ((0, 0), (0, 1), (1, 1), (0, 0))
RING_B = ((5, 5), (5, 6), (6, 6), (5, 5))


class TestFindLabel:
    def test_first_key_wins(self):
        assert find_label({"name": "A", "label": "B"}, ("name", "label")) == ("name", "A")

    def test_falls_through_to_later_key(self):
        assert find_label({"feature_name": "Lake"}, ("name", "feature_name")) == ("feature_name", "Lake")

    def test_ignores_non_strings_and_blanks(self):
        assert find_label({"name": 7, "label": "  "}, ("name", "label")) is None


class TestSplitMultipart:
    def test_single_part_features_untouched(self):
        feature = Feature(Point((1, 1)), {"name": "P"})
        assert split_multipart([feature]) == [feature]

    def test_multipolygon_with_name(self):
        feature = Feature(MultiPolygon(((RING_A,), (RING_B,))), {"name": "Park", "area": 3})
        parts = split_multipart([feature])
        assert [p.geometry for p in parts] == [Polygon((RING_A,)), Polygon((RING_B,))]
        assert [p.properties for p in parts] == [
            {"name": "Park (Part 1)", "area": 3},
            {"name": "Park (Part 2)", "area": 3},
        ]

    def test_label_under_alternate_key(self):
        feature = Feature(MultiPolygon(((RING_A,), (RING_B,))), {"label": "Block"})
        parts = split_multipart([feature])
        assert [p.properties["label"] for p in parts] == ["Block (Part 1)", "Block (Part 2)"]
        assert "name" not in parts[0].properties

    def test_multilinestring_without_name(self):
        feature = Feature(MultiLineString((((0, 0), (1, 1)), ((2, 2), (3, 3)))), {})
        parts = split_multipart([feature])
        assert all(isinstance(p.geometry, LineString) for p in parts)
        assert [p.properties["name"] for p in parts] == [
            "Feature 1 (Part 1)",
            "Feature 1 (Part 2)",
        ]

    def test_source_indices_drive_fallback_names(self):
        feature = Feature(MultiLineString((((0, 0), (1, 1)), ((2, 2), (3, 3)))), {})
        parts = split_multipart([feature], source_indices=[4])
        assert parts[0].properties["name"] == "Feature 5 (Part 1)"

    def test_original_properties_not_mutated(self):
        props = {"name": "Park"}
        split_multipart([Feature(MultiPolygon(((RING_A,), (RING_B,))), props)])
        assert props == {"name": "Park"}

    def test_custom_templates(self):
        config = SplitConfig(label_keys=("title",), part_template="{label}#{part}")
        feature = Feature(MultiPolygon(((RING_A,), (RING_B,))), {"title": "Zone"})
        parts = split_multipart([feature], config=config)
        assert [p.properties["title"] for p in parts] == ["Zone#1", "Zone#2"]

    def test_order_is_preserved(self):
        features = [
            Feature(Point((0, 0)), {"name": "first"}),
            Feature(MultiPolygon(((RING_A,), (RING_B,))), {"name": "Park"}),
            Feature(Point((1, 1)), {"name": "last"}),
        ]
        names = [p.properties["name"] for p in split_multipart(features)]
        assert names == ["first", "Park (Part 1)", "Park (Part 2)", "last"]
