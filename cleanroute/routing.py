from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import osmnx as ox
import requests

from config import FALLBACK_DURATION_S, ORS_API_KEY, ORS_DIRECTIONS_URL, REQUEST_TIMEOUT_S

from .models import RouteCandidate

LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)


def route_id_for(profile: str) -> str:
    return f"route-{profile}"


def great_circle_m(origin: LatLon, destination: LatLon) -> float:
    """Great-circle distance between two (lat, lon) points in meters."""
    return float(
        ox.distance.great_circle(origin[0], origin[1], destination[0], destination[1])
    )


def straight_line_route(origin: LatLon, destination: LatLon, profile: str) -> RouteCandidate:
    """Degraded 3-point route used whenever the routing service fails."""
    midpoint = ((origin[0] + destination[0]) / 2, (origin[1] + destination[1]) / 2)
    # Identical endpoints still need a positive distance.
    distance = max(1.0, great_circle_m(origin, destination))
    return RouteCandidate(
        id=route_id_for(profile),
        profile=profile,
        path=(origin, midpoint, destination),
        distance_m=distance,
        duration_s=FALLBACK_DURATION_S,
        source="fallback",
    )


def _parse_directions(data: Dict[str, Any]) -> Tuple[List[LatLon], float, float]:
    """Extract path, distance and duration from an ORS GeoJSON response.

    Raises KeyError/IndexError/TypeError/ValueError on malformed payloads.
    """
    feature = data["features"][0]
    # GeoJSON is [lon, lat]; the rest of the service is (lat, lon).
    coords = [(float(c[1]), float(c[0])) for c in feature["geometry"]["coordinates"]]
    if not coords:
        raise ValueError("route geometry is empty")

    props = feature["properties"]
    segments = props.get("segments") or []
    if segments:
        distance = sum(float(s.get("distance", 0.0)) for s in segments)
        duration = sum(float(s.get("duration", 0.0)) for s in segments)
    else:
        summary = props["summary"]
        distance = float(summary["distance"])
        duration = float(summary["duration"])
    return coords, distance, duration


class RouteSource:
    """Fetch one best route per travel profile from OpenRouteService."""

    def __init__(
        self,
        base_url: str = ORS_DIRECTIONS_URL,
        api_key: Optional[str] = ORS_API_KEY,
        timeout: float = REQUEST_TIMEOUT_S,
        fallback_enabled: bool = True,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.fallback_enabled = fallback_enabled

    def fetch_route(
        self, origin: LatLon, destination: LatLon, profile: str
    ) -> Optional[RouteCandidate]:
        """Return the service's route, or a straight-line fallback on any failure.

        ``None`` is only returned when the fallback has been disabled.
        """
        url = f"{self.base_url}/{profile}"
        params = {
            "start": f"{origin[1]},{origin[0]}",
            "end": f"{destination[1]},{destination[0]}",
        }
        if self.api_key:
            params["api_key"] = self.api_key
        headers = {"Accept": "application/json, application/geo+json"}

        try:
            logger.info("Requesting %s route %s -> %s", profile, origin, destination)
            response = requests.get(url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            coords, distance, duration = _parse_directions(response.json())
        except requests.exceptions.RequestException as e:
            logger.warning("Routing request failed for profile=%s: %s", profile, e)
            return self._fallback(origin, destination, profile)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Malformed routing response for profile=%s: %r", profile, e)
            return self._fallback(origin, destination, profile)

        logger.info(
            "Route %s: %d points, %.0f m, %.0f s", profile, len(coords), distance, duration
        )
        return RouteCandidate(
            id=route_id_for(profile),
            profile=profile,
            path=tuple(coords),
            distance_m=distance,
            duration_s=duration,
            source="service",
        )

    def _fallback(
        self, origin: LatLon, destination: LatLon, profile: str
    ) -> Optional[RouteCandidate]:
        if not self.fallback_enabled:
            return None
        logger.info("Using straight-line fallback for profile=%s", profile)
        return straight_line_route(origin, destination, profile)
