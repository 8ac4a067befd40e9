"""
Tests for the air-quality sampler and AQI helpers.

Tests cover:
- Boundary value analysis: EPA PM2.5 breakpoints
- Category lookup for each AQI band
- Sampler fallbacks: no station, no PM2.5, non-finite readings, network and parsing errors
- Clamping into [0, 500]
"""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from cleanroute.air_quality import AirQualitySampler, aqi_category, clamp_aqi, pm25_to_aqi

from conftest import BANGALORE


def _response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def _openaq(measurements):
    return {"results": [{"location": "Peenya", "measurements": measurements}]}


class TestPm25ToAqi:
    @pytest.mark.parametrize(
        "concentration, expected",
        [
            (0.0, 0),
            (9.0, 50),
            (9.1, 51),
            (12.0, 56),
            (35.4, 100),
            (35.5, 101),
            (55.4, 150),
            (55.5, 151),
            (125.4, 200),
            (125.5, 201),
            (225.4, 300),
            (225.5, 301),
            (325.4, 500),
        ],
    )
    def test_breakpoints(self, concentration, expected):
        assert pm25_to_aqi(concentration) == expected

    def test_truncates_to_one_decimal(self):
        # 9.05 truncates to 9.0 and stays in the Good band.
        assert pm25_to_aqi(9.05) == 50

    def test_negative_reading_is_zero(self):
        assert pm25_to_aqi(-4.2) == 0

    def test_beyond_scale(self):
        assert pm25_to_aqi(800.0) == 500


class TestCategories:
    @pytest.mark.parametrize(
        "aqi, category",
        [
            (0, "Good"),
            (50, "Good"),
            (51, "Moderate"),
            (100, "Moderate"),
            (101, "Unhealthy for Sensitive Groups"),
            (151, "Unhealthy"),
            (250, "Very Unhealthy"),
            (499, "Hazardous"),
            (900, "Hazardous"),
            (-10, "Good"),
        ],
    )
    def test_category(self, aqi, category):
        assert aqi_category(aqi)["category"] == category

    def test_clamp(self):
        assert clamp_aqi(-1) == 0.0
        assert clamp_aqi(501) == 500.0
        assert clamp_aqi(75) == 75.0


class TestSampler:
    @pytest.fixture
    def sampler(self):
        return AirQualitySampler(url="https://aq.example/latest", api_key="secret", radius_m=25000, timeout=3)

    def test_uses_nearest_station_pm25(self, sampler):
        payload = _openaq(
            [{"parameter": "pm10", "value": 80.0}, {"parameter": "pm25", "value": 12.0, "unit": "µg/m³"}]
        )
        with patch("cleanroute.air_quality.requests.get", return_value=_response(payload)) as mock_get:
            assert sampler.sample_at(BANGALORE) == 56.0

        _, kwargs = mock_get.call_args
        assert kwargs["params"] == {"coordinates": "12.97,77.59", "radius": 25000, "limit": 1}
        assert kwargs["headers"] == {"X-API-Key": "secret"}
        assert kwargs["timeout"] == 3

    def test_no_station_returns_default(self, sampler):
        with patch("cleanroute.air_quality.requests.get", return_value=_response({"results": []})):
            assert sampler.sample_at(BANGALORE) == 75.0

    def test_station_without_pm25_returns_default(self, sampler):
        payload = _openaq([{"parameter": "o3", "value": 0.03}])
        with patch("cleanroute.air_quality.requests.get", return_value=_response(payload)):
            assert sampler.sample_at(BANGALORE) == 75.0

    @pytest.mark.parametrize(
        "error",
        [
            requests.exceptions.ConnectionError("down"),
            requests.exceptions.Timeout("slow"),
        ],
    )
    def test_network_error_returns_default(self, sampler, error):
        with patch("cleanroute.air_quality.requests.get", side_effect=error):
            assert sampler.sample_at(BANGALORE) == 75.0

    def test_http_error_returns_default(self, sampler):
        response = Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("500")
        with patch("cleanroute.air_quality.requests.get", return_value=response):
            assert sampler.sample_at(BANGALORE) == 75.0

    def test_malformed_payload_returns_default(self, sampler):
        with patch("cleanroute.air_quality.requests.get", return_value=_response(["not", "a", "dict"])):
            assert sampler.sample_at(BANGALORE) == 75.0

    @pytest.mark.parametrize("raw_value", ["NaN", "Infinity", "1e400"])
    def test_non_finite_reading_returns_default(self, sampler, raw_value):
        payload = json.loads(
            '{"results": [{"measurements": [{"parameter": "pm25", "value": %s}]}]}' % raw_value
        )
        with patch("cleanroute.air_quality.requests.get", return_value=_response(payload)):
            assert sampler.sample_at(BANGALORE) == 75.0

    def test_result_is_clamped(self, sampler):
        payload = _openaq([{"parameter": "pm25", "value": 1200.0}])
        with patch("cleanroute.air_quality.requests.get", return_value=_response(payload)):
            assert sampler.sample_at(BANGALORE) == 500.0

    def test_default_is_clamped(self):
        sampler = AirQualitySampler(url="https://aq.example/latest", default_aqi=900.0)
        with patch("cleanroute.air_quality.requests.get", side_effect=requests.exceptions.ConnectionError()):
            assert sampler.sample_at(BANGALORE) == 500.0

    def test_no_api_key_sends_no_header(self):
        sampler = AirQualitySampler(url="https://aq.example/latest", api_key="")
        with patch("cleanroute.air_quality.requests.get", return_value=_response({"results": []})) as mock_get:
            sampler.sample_at(BANGALORE)
        assert mock_get.call_args.kwargs["headers"] == {}
