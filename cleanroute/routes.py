import logging
from typing import Tuple

from flask import Blueprint, current_app, jsonify, request

from config import DEFAULT_TRIP

from .air_quality import aqi_category
from .conditions import HEALTH_TIPS, simulate_air_quality, simulate_health_alerts, simulate_weather, tip_at
from .errors import EndpointResolutionError, NoRoutesError, PlanCancelled

bp = Blueprint("main", __name__)
logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _no_cache(response, status: int = 200):
    for key, value in NO_CACHE_HEADERS.items():
        response.headers[key] = value
    return response, status


def _error(message: str, status: int, **extra):
    payload = {"error": message}
    payload.update(extra)
    return _no_cache(jsonify(payload), status)


def _location_args() -> Tuple[float, float]:
    """Parse ``lat``/``lon`` query parameters, raising ValueError if invalid."""
    try:
        lat = float(request.args["lat"])
        lon = float(request.args["lon"])
    except (KeyError, TypeError, ValueError):
        raise ValueError("lat and lon query parameters are required numbers") from None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise ValueError("lat must be within [-90, 90] and lon within [-180, 180]")
    return lat, lon


@bp.route("/api/health")
def health():
    """Simple health check endpoint."""
    return _no_cache(jsonify({"status": "ok"}))


@bp.route("/api/routes", methods=["POST"])
def plan_routes():
    """Plan routes between two place names, ranked by mean AQI."""
    body = request.get_json(silent=True)
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return _error("request body must be a JSON object", 400)
    origin = body.get("origin", DEFAULT_TRIP.origin)
    destination = body.get("destination", DEFAULT_TRIP.destination)
    profiles = body.get("profiles")

    if not isinstance(origin, str) or not isinstance(destination, str):
        return _error("origin and destination must be strings", 400)
    if profiles is not None and (
        not isinstance(profiles, list) or not all(isinstance(p, str) for p in profiles)
    ):
        return _error("profiles must be a list of strings", 400)

    session = current_app.extensions["plan_session"]
    logger.info("Route request origin=%r destination=%r", origin, destination)
    try:
        plan = session.plan(origin, destination, profiles=profiles)
    except EndpointResolutionError as e:
        return _error("Could not find one or both locations", 422, unresolved=e.unresolved)
    except NoRoutesError:
        return _error("No routes found", 404)
    except PlanCancelled:
        return _error("Request superseded by a newer route request", 409)
    except Exception:
        logger.exception("Route planning failed origin=%r destination=%r", origin, destination)
        return _error("Route planning failed on the server. Check logs for details.", 500)

    return _no_cache(jsonify(plan.to_dict()))


@bp.route("/api/routes/latest")
def latest_plan():
    plan = current_app.extensions["plan_session"].current
    if plan is None:
        return _error("No route plan available", 404)
    return _no_cache(jsonify(plan.to_dict()))


@bp.route("/api/air-quality")
def air_quality():
    """Sample the AQI at a single point with the route sampler."""
    try:
        lat, lon = _location_args()
    except ValueError as e:
        return _error(str(e), 400)

    sampler = current_app.extensions["plan_session"].planner.sampler
    aqi = sampler.sample_at((lat, lon))
    category = aqi_category(aqi)
    payload = {
        "lat": lat,
        "lon": lon,
        "aqi": aqi,
        "category": category["category"],
        "color_hex": category["color_hex"],
        "health_message": category["health_message"],
    }
    return _no_cache(jsonify(payload))


@bp.route("/api/conditions")
def conditions():
    """Simulated weather, air quality and health alerts for a location."""
    try:
        location = _location_args()
    except ValueError as e:
        return _error(str(e), 400)

    rng = current_app.extensions["conditions_rng"]
    payload = {
        "weather": simulate_weather(location, rng),
        "air_quality": simulate_air_quality(location, rng),
        "alerts": simulate_health_alerts(rng),
    }
    return _no_cache(jsonify(payload))


@bp.route("/api/tips")
def tips():
    try:
        index = int(request.args.get("index", 0))
    except ValueError:
        return _error("index must be an integer", 400)
    return _no_cache(
        jsonify({"index": index % len(HEALTH_TIPS), "count": len(HEALTH_TIPS), "tip": tip_at(index)})
    )
