from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional, Tuple

LatLon = Tuple[float, float]


RouteSourceKind = Literal["service", "fallback"]


def _latlon_list(path: Tuple[LatLon, ...]) -> List[List[float]]:
    return [[float(lat), float(lon)] for lat, lon in path]


@dataclass(frozen=True)
class RouteCandidate:
    id: str
    profile: str
    path: Tuple[LatLon, ...]
    distance_m: float
    duration_s: float
    source: RouteSourceKind = "service"

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("route path must contain at least one coordinate")
        # Accept any sequence of pairs but store an immutable copy.
        object.__setattr__(self, "path", tuple((float(lat), float(lon)) for lat, lon in self.path))

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "profile": self.profile,
            "path": _latlon_list(self.path),
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
            "source": self.source,
            "is_fallback": self.is_fallback,
        }


@dataclass(frozen=True)
class ExposureSample:
    location: LatLon
    aqi: float

    def to_dict(self) -> Dict:
        lat, lon = self.location
        return {"lat": lat, "lon": lon, "aqi": self.aqi}


@dataclass(frozen=True)
class EvaluatedRoute:
    route: RouteCandidate
    samples: Tuple[ExposureSample, ...]
    mean_aqi: float

    @property
    def id(self) -> str:
        return self.route.id

    @property
    def profile(self) -> str:
        return self.route.profile

    @property
    def path(self) -> Tuple[LatLon, ...]:
        return self.route.path

    @property
    def distance_m(self) -> float:
        return self.route.distance_m

    @property
    def duration_s(self) -> float:
        return self.route.duration_s

    @property
    def is_fallback(self) -> bool:
        return self.route.is_fallback

    def to_dict(self) -> Dict:
        payload = self.route.to_dict()
        payload["mean_aqi"] = self.mean_aqi
        payload["samples"] = [s.to_dict() for s in self.samples]
        return payload


@dataclass(frozen=True)
class ResolvedPlace:
    query: str
    location: LatLon

    def to_dict(self) -> Dict:
        lat, lon = self.location
        return {"query": self.query, "lat": lat, "lon": lon}


@dataclass(frozen=True)
class RoutePlan:
    """Ranked routes for one origin/destination request, cleanest first."""

    origin: ResolvedPlace
    destination: ResolvedPlace
    routes: Tuple[EvaluatedRoute, ...]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def recommended(self) -> Optional[EvaluatedRoute]:
        return self.routes[0] if self.routes else None

    def premium_for(self, route: EvaluatedRoute) -> Optional[float]:
        # Late import: ranking depends on this module.
        from .ranking import exposure_premium

        if self.recommended is None:
            return None
        return exposure_premium(route, self.recommended)

    def to_dict(self) -> Dict:
        from .air_quality import aqi_category
        from .ranking import rounded_premium

        recommended = self.recommended
        routes = []
        for rank, r in enumerate(self.routes, start=1):
            payload = r.to_dict()
            payload["rank"] = rank
            payload["recommended"] = r is recommended
            payload["category"] = aqi_category(r.mean_aqi)["category"]
            payload["premium_pct"] = rounded_premium(r, recommended) if recommended else None
            routes.append(payload)
        return {
            "origin": self.origin.to_dict(),
            "destination": self.destination.to_dict(),
            "created_at": self.created_at.isoformat(),
            "recommended_id": recommended.id if recommended else None,
            "routes": routes,
        }
