"""Static configuration for the CleanRoute service.

All coordinates use (latitude, longitude) in WGS84.
External endpoints, keys and limits can be overridden through environment
variables so the same code runs against self-hosted routing or air-quality
services.
"""

import os
from typing import List, Tuple

LatLon = Tuple[float, float]


def _env_list(name: str, default: str) -> List[str]:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# Geocoding goes through OSMnx's Nominatim client; Nominatim requires a
# descriptive user agent.
NOMINATIM_USER_AGENT = os.environ.get("CLEANROUTE_USER_AGENT", "cleanroute/0.1")

ORS_DIRECTIONS_URL = os.environ.get(
    "ORS_DIRECTIONS_URL", "https://api.openrouteservice.org/v2/directions"
)
ORS_API_KEY = os.environ.get("ORS_API_KEY", "")

OPENAQ_LATEST_URL = os.environ.get("OPENAQ_LATEST_URL", "https://api.openaq.org/v2/latest")
OPENAQ_API_KEY = os.environ.get("OPENAQ_API_KEY", "")
OPENAQ_RADIUS_M = int(os.environ.get("OPENAQ_RADIUS_M", 25000))

# Applied to every outbound call; a timeout counts as a failed lookup.
REQUEST_TIMEOUT_S = float(os.environ.get("CLEANROUTE_TIMEOUT_S", 12))

# At most this many strided points are sampled along each route.
SAMPLE_CAP = int(os.environ.get("CLEANROUTE_SAMPLE_CAP", 10))

AQI_MIN = 0.0
AQI_MAX = 500.0
DEFAULT_AQI = 75.0  # moderate

FALLBACK_DURATION_S = 3600.0

DEFAULT_PROFILES = _env_list("CLEANROUTE_PROFILES", "driving-car,cycling-regular")


class Trip:
    """Named trip with fixed endpoints, used for demos and exports."""

    def __init__(self, name: str, origin: str, destination: str, origin_hint: LatLon) -> None:
        self.name = name
        self.origin = origin
        self.destination = destination
        self.origin_hint = origin_hint


BANGALORE_MYSORE_TRIP = Trip(
    name="bangalore_mysore",
    origin="Bangalore, India",
    destination="Mysore, India",
    origin_hint=(12.9716, 77.5946),  # Bangalore city centre, default map view
)

DEFAULT_TRIP = BANGALORE_MYSORE_TRIP
