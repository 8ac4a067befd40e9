"""Air-quality lookups along routes.

The sampler asks OpenAQ for the nearest station's latest PM2.5 reading and
converts it to an AQI with the US EPA breakpoint table (2024 revision). When
no station reports within the search radius, or the lookup fails, a moderate
default is used so every sampled point yields a value.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

import requests

from config import (
    AQI_MAX,
    AQI_MIN,
    DEFAULT_AQI,
    OPENAQ_API_KEY,
    OPENAQ_LATEST_URL,
    OPENAQ_RADIUS_M,
    REQUEST_TIMEOUT_S,
)

LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)

# (C_low, C_high, I_low, I_high), concentration in µg/m³ (24-hour average).
PM25_BREAKPOINTS: List[Tuple[float, float, int, int]] = [
    (0.0, 9.0, 0, 50),
    (9.1, 35.4, 51, 100),
    (35.5, 55.4, 101, 150),
    (55.5, 125.4, 151, 200),
    (125.5, 225.4, 201, 300),
    (225.5, 325.4, 301, 500),
]

PM25_PARAMETERS = {"pm25", "pm2.5", "pm_25"}

AQI_CATEGORIES: List[Dict[str, Any]] = [
    {
        "min_value": 0,
        "max_value": 50,
        "category": "Good",
        "color_hex": "#00E400",
        "health_message": "Air quality is satisfactory, and air pollution poses little or no risk.",
    },
    {
        "min_value": 51,
        "max_value": 100,
        "category": "Moderate",
        "color_hex": "#FFFF00",
        "health_message": "Air quality is acceptable. However, there may be a risk for some people, "
        "particularly those who are unusually sensitive to air pollution.",
    },
    {
        "min_value": 101,
        "max_value": 150,
        "category": "Unhealthy for Sensitive Groups",
        "color_hex": "#FF7E00",
        "health_message": "Members of sensitive groups may experience health effects. "
        "The general public is less likely to be affected.",
    },
    {
        "min_value": 151,
        "max_value": 200,
        "category": "Unhealthy",
        "color_hex": "#FF0000",
        "health_message": "Some members of the general public may experience health effects; "
        "members of sensitive groups may experience more serious health effects.",
    },
    {
        "min_value": 201,
        "max_value": 300,
        "category": "Very Unhealthy",
        "color_hex": "#99004C",
        "health_message": "Health alert: The risk of health effects is increased for everyone.",
    },
    {
        "min_value": 301,
        "max_value": 500,
        "category": "Hazardous",
        "color_hex": "#7E0023",
        "health_message": "Health warning of emergency conditions: everyone is more likely to be affected.",
    },
]


def clamp_aqi(value: float) -> float:
    return max(AQI_MIN, min(AQI_MAX, float(value)))


def pm25_to_aqi(concentration: float) -> float:
    """Convert a PM2.5 concentration (µg/m³) to an AQI value.

    Uses linear interpolation within the EPA breakpoint band. Concentrations
    are truncated to one decimal place first, as the EPA method requires;
    negative readings count as zero and anything past the top band is 500.
    """
    c = math.floor(max(0.0, float(concentration)) * 10 + 1e-9) / 10
    for c_lo, c_hi, i_lo, i_hi in PM25_BREAKPOINTS:
        if c_lo <= c <= c_hi:
            return float(round((i_hi - i_lo) / (c_hi - c_lo) * (c - c_lo) + i_lo))
    return AQI_MAX


def aqi_category(aqi: float) -> Dict[str, Any]:
    """Return the EPA category entry for an AQI value."""
    value = round(clamp_aqi(aqi))
    for entry in AQI_CATEGORIES:
        if value <= entry["max_value"]:
            return entry
    return AQI_CATEGORIES[-1]


def _find_pm25(results: List[Dict[str, Any]]) -> Optional[float]:
    if not results:
        return None
    for m in results[0].get("measurements") or []:
        if str(m.get("parameter", "")).lower() in PM25_PARAMETERS and m.get("value") is not None:
            value = float(m["value"])
            # NaN and overflowed readings (e.g. 1e400) come through json as floats
            return value if math.isfinite(value) else None
    return None


class AirQualitySampler:
    """Estimate the AQI at a coordinate from the nearest reporting station."""

    def __init__(
        self,
        url: str = OPENAQ_LATEST_URL,
        api_key: Optional[str] = OPENAQ_API_KEY,
        radius_m: int = OPENAQ_RADIUS_M,
        timeout: float = REQUEST_TIMEOUT_S,
        default_aqi: float = DEFAULT_AQI,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.radius_m = radius_m
        self.timeout = timeout
        self.default_aqi = default_aqi

    def sample_at(self, location: LatLon) -> float:
        """Always returns a value in [AQI_MIN, AQI_MAX]."""
        pm25 = self._nearest_pm25(location)
        if pm25 is None:
            return clamp_aqi(self.default_aqi)
        aqi = clamp_aqi(pm25_to_aqi(pm25))
        logger.debug("PM2.5 %.1f at %s -> AQI %.0f", pm25, location, aqi)
        return aqi

    def _nearest_pm25(self, location: LatLon) -> Optional[float]:
        lat, lon = location
        params = {
            "coordinates": f"{lat},{lon}",
            "radius": self.radius_m,
            "limit": 1,
        }
        headers = {"X-API-Key": self.api_key} if self.api_key else {}
        try:
            response = requests.get(self.url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            pm25 = _find_pm25(response.json().get("results") or [])
        except requests.exceptions.RequestException as e:
            logger.warning("Air-quality lookup failed at %s: %s", location, e)
            return None
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Malformed air-quality response at %s: %r", location, e)
            return None

        if pm25 is None:
            logger.debug("No PM2.5 station within %dm of %s", self.radius_m, location)
        return pm25
