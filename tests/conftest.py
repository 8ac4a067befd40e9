"""
Pytest configuration for CleanRoute tests.

Registers custom markers and provides fake adapters so no test touches the
network.
"""

from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pytest

from cleanroute.models import EvaluatedRoute, ResolvedPlace, RouteCandidate, RoutePlan
from cleanroute.routing import straight_line_route

LatLon = Tuple[float, float]

BANGALORE = (12.97, 77.59)
MYSORE = (12.30, 76.65)


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


class FakeGeocoder:
    def __init__(self, places: Dict[str, LatLon]):
        self.places = places
        self.calls: List[str] = []

    def resolve(self, place_name: str) -> Optional[LatLon]:
        self.calls.append(place_name)
        return self.places.get(place_name)


class FakeRouteSource:
    """Returns a dense path per profile; unknown profiles fall back."""

    def __init__(self, paths: Dict[str, List[LatLon]]):
        self.paths = paths
        self.calls: List[str] = []

    def fetch_route(self, origin: LatLon, destination: LatLon, profile: str) -> RouteCandidate:
        self.calls.append(profile)
        path = self.paths.get(profile)
        if path is None:
            return straight_line_route(origin, destination, profile)
        return RouteCandidate(
            id=f"route-{profile}",
            profile=profile,
            path=tuple(path),
            distance_m=150000.0,
            duration_s=7200.0,
        )


class FakeSampler:
    """AQI from a function of the coordinate; records every call."""

    def __init__(self, fn: Callable[[LatLon], float]):
        self.fn = fn
        self.calls: List[LatLon] = []

    def sample_at(self, location: LatLon) -> float:
        self.calls.append(location)
        return self.fn(location)


def interpolate(origin: LatLon, destination: LatLon, n: int) -> List[LatLon]:
    return [
        (
            origin[0] + (destination[0] - origin[0]) * i / (n - 1),
            origin[1] + (destination[1] - origin[1]) * i / (n - 1),
        )
        for i in range(n)
    ]


def make_evaluated(route_id: str, mean_aqi: float, profile: Optional[str] = None) -> EvaluatedRoute:
    route = RouteCandidate(
        id=route_id,
        profile=profile or route_id,
        path=(BANGALORE, MYSORE),
        distance_m=1000.0,
        duration_s=60.0,
    )
    return EvaluatedRoute(route=route, samples=(), mean_aqi=mean_aqi)


def make_plan(query: str, means: Iterable[float] = (50.0,)) -> RoutePlan:
    routes = tuple(make_evaluated(f"route-{i}", m) for i, m in enumerate(means))
    return RoutePlan(
        origin=ResolvedPlace(query=query, location=BANGALORE),
        destination=ResolvedPlace(query="Mysore, India", location=MYSORE),
        routes=routes,
    )


@pytest.fixture
def geocoder():
    return FakeGeocoder({"Bangalore, India": BANGALORE, "Mysore, India": MYSORE})


@pytest.fixture
def route_source():
    return FakeRouteSource(
        {
            "driving-car": interpolate(BANGALORE, MYSORE, 250),
            "cycling-regular": interpolate(BANGALORE, MYSORE, 40),
        }
    )


@pytest.fixture
def sampler():
    # Further east (towards Bangalore) is dirtier.
    return FakeSampler(lambda loc: 40.0 + (loc[1] - 76.0) * 50.0)
