"""Tests for the GeoCrop CLI."""

import geopandas as gpd
import pytest
from click.testing import CliRunner
from shapely.geometry import LineString, Point, box

from geocrop.cli import cli


@pytest.fixture
def boundary_file(tmp_path):
    gdf = gpd.GeoDataFrame(geometry=[box(0, 0, 10, 10)], crs="EPSG:4326")
    path = tmp_path / "city.geojson"
    gdf.to_file(path, driver="GeoJSON")
    return path


@pytest.fixture
def features_file(tmp_path):
    gdf = gpd.GeoDataFrame(
        {"name": ["A", "Road", "Far"]},
        geometry=[Point(5, 5), LineString([(-5, 5), (15, 5)]), Point(50, 50)],
        crs="EPSG:4326",
    )
    path = tmp_path / "features.geojson"
    gdf.to_file(path, driver="GeoJSON")
    return path


class TestCLI:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "GeoCrop" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "version" in result.output.lower()

    def test_no_subcommand_shows_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "crop" in result.output

    def test_crop_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["crop", "--help"])
        assert result.exit_code == 0
        assert "--no-split" in result.output


class TestCropCommand:
    def test_crop_prints_summary(self, features_file, boundary_file):
        runner = CliRunner()
        result = runner.invoke(cli, ["crop", str(features_file), str(boundary_file)])
        assert result.exit_code == 0
        assert "Input features:   3" in result.output
        assert "Output features:  2" in result.output

    def test_crop_writes_output(self, features_file, boundary_file, tmp_path):
        out = tmp_path / "out.geojson"
        runner = CliRunner()
        result = runner.invoke(
            cli, ["crop", str(features_file), str(boundary_file), "-o", str(out)]
        )
        assert result.exit_code == 0
        assert out.exists()
        assert len(gpd.read_file(out)) == 2

    def test_crop_with_bad_boundary_fails(self, features_file, tmp_path):
        gdf = gpd.GeoDataFrame(geometry=[Point(0, 0)], crs="EPSG:4326")
        path = tmp_path / "point.geojson"
        gdf.to_file(path, driver="GeoJSON")
        runner = CliRunner()
        result = runner.invoke(cli, ["crop", str(features_file), str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_file(self, boundary_file):
        runner = CliRunner()
        result = runner.invoke(cli, ["crop", "nope.geojson", str(boundary_file)])
        assert result.exit_code != 0


class TestValidateBoundaryCommand:
    def test_valid(self, boundary_file):
        runner = CliRunner()
        result = runner.invoke(cli, ["validate-boundary", str(boundary_file)])
        assert result.exit_code == 0
        assert "Boundary OK: Polygon with 1 ring(s)" in result.output

    def test_invalid(self, tmp_path):
        gdf = gpd.GeoDataFrame(geometry=[Point(0, 0)], crs="EPSG:4326")
        path = tmp_path / "point.geojson"
        gdf.to_file(path, driver="GeoJSON")
        runner = CliRunner()
        result = runner.invoke(cli, ["validate-boundary", str(path)])
        assert result.exit_code == 1
        assert "Invalid boundary" in result.output
