from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

import osmnx as ox
import requests

from config import NOMINATIM_USER_AGENT, REQUEST_TIMEOUT_S

LatLon = Tuple[float, float]

# Configure OSMnx caching so repeated Nominatim queries are served from disk.
BASE_DIR = Path(__file__).resolve().parent.parent
CACHE_DIR = BASE_DIR / "cache"
CACHE_DIR.mkdir(exist_ok=True)
ox.settings.cache_folder = str(CACHE_DIR)
ox.settings.use_cache = True
ox.settings.requests_timeout = REQUEST_TIMEOUT_S
ox.settings.http_user_agent = NOMINATIM_USER_AGENT
ox.settings.log_console = False

logger = logging.getLogger(__name__)


def _normalize_query(place_name: str) -> str:
    return " ".join(place_name.split()).casefold()


class Geocoder:
    """Resolve free-text place names to (lat, lon) via Nominatim.

    ``resolve`` never raises for lookup problems: zero results, network errors
    and malformed responses all come back as ``None`` so the planner can report
    the endpoint as unresolved.
    """

    def __init__(self, use_cache: bool = True) -> None:
        self.use_cache = use_cache
        self._cache: Dict[str, LatLon] = {}
        self._lock = threading.Lock()

    def resolve(self, place_name: str) -> Optional[LatLon]:
        if not place_name or not place_name.strip():
            logger.info("Skipping geocode for blank place name")
            return None

        key = _normalize_query(place_name)
        if self.use_cache:
            with self._lock:
                cached = self._cache.get(key)
            if cached is not None:
                return cached

        logger.info("Geocoding place name %r", place_name)
        try:
            lat, lon = ox.geocode(place_name.strip())
            point = (float(lat), float(lon))
        except ox._errors.InsufficientResponseError:
            logger.warning("No geocoding result for %r", place_name)
            return None
        except (requests.exceptions.RequestException, ox._errors.ResponseStatusCodeError) as e:
            logger.warning("Geocoding request failed for %r: %s", place_name, e)
            return None
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Malformed geocoding response for %r: %s", place_name, e)
            return None

        if self.use_cache:
            with self._lock:
                self._cache[key] = point
        return point

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
