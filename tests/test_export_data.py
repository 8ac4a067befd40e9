"""
Tests for the export script.

Tests cover:
- GeoJSON output is longitude-first and ranked
- CSV output via pandas
- CLI exit codes for planning failures
"""

import json
from unittest.mock import patch

import pandas as pd

from cleanroute.errors import EndpointResolutionError
from cleanroute.planner import RoutePlanner
from export_data import main, plan_to_geojson, run_export

from conftest import make_plan


class TestGeojson:
    def test_features(self):
        plan = make_plan("Bangalore, India", means=(40.0, 60.0))
        geo = plan_to_geojson(plan)
        assert geo["type"] == "FeatureCollection"
        first = geo["features"][0]
        assert first["geometry"]["coordinates"][0] == [77.59, 12.97]
        assert first["properties"]["recommended"] is True
        assert geo["features"][1]["properties"]["premium_pct"] == 50


class TestRunExport:
    def test_writes_files(self, tmp_path, geocoder, route_source, sampler):
        planner = RoutePlanner(geocoder, route_source, sampler, profiles=["driving-car", "cycling-regular"])
        run_export("Bangalore, India", "Mysore, India", out_dir=tmp_path, planner=planner)

        geojson_path = tmp_path / "routes_bangalore_india__mysore_india.geojson"
        csv_path = tmp_path / "routes_bangalore_india__mysore_india.csv"
        assert geojson_path.exists()
        assert len(json.loads(geojson_path.read_text())["features"]) == 2

        frame = pd.read_csv(csv_path)
        assert list(frame["rank"]) == [1, 2]
        assert frame["mean_aqi"].is_monotonic_increasing
        assert set(frame["profile"]) == {"driving-car", "cycling-regular"}

    def test_cli_reports_unresolved(self, capsys):
        with patch("export_data.run_export", side_effect=EndpointResolutionError(["origin"])):
            assert main(["--origin", "", "--destination", "Mysore, India"]) == 1
        assert "Could not find one or both locations" in capsys.readouterr().out
