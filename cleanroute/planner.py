"""Route planning: geocode, fetch routes per profile, evaluate and rank.

Each stage fans out over a thread pool and is joined before the next one
starts. A request carries a cancel event; ``PlanSession`` sets it when a
newer request arrives so the older one stops at its next checkpoint and its
result is discarded.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from config import DEFAULT_PROFILES, SAMPLE_CAP

from .air_quality import AirQualitySampler
from .errors import EndpointResolutionError, NoRoutesError, PlanCancelled
from .exposure import evaluate_route
from .geocoding import Geocoder
from .models import EvaluatedRoute, ResolvedPlace, RouteCandidate, RoutePlan
from .ranking import rank_routes
from .routing import RouteSource

LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)


def _check_cancelled(cancel_event: Optional[threading.Event], stage: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise PlanCancelled(f"planning cancelled before {stage}")


class RoutePlanner:
    def __init__(
        self,
        geocoder: Optional[Geocoder] = None,
        route_source: Optional[RouteSource] = None,
        sampler: Optional[AirQualitySampler] = None,
        profiles: Sequence[str] = tuple(DEFAULT_PROFILES),
        sample_cap: int = SAMPLE_CAP,
        max_workers: int = 4,
    ) -> None:
        self.geocoder = geocoder or Geocoder()
        self.route_source = route_source or RouteSource()
        self.sampler = sampler or AirQualitySampler()
        self.profiles = list(profiles)
        self.sample_cap = sample_cap
        self.max_workers = max_workers

    def plan_routes(
        self,
        origin_text: str,
        destination_text: str,
        profiles: Optional[Sequence[str]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> RoutePlan:
        """Plan routes between two place names, cleanest first.

        Raises EndpointResolutionError when either place cannot be geocoded,
        NoRoutesError when no profile yields a route, and PlanCancelled when
        ``cancel_event`` is set before the plan completes.
        """
        profiles = list(self.profiles if profiles is None else profiles)
        logger.info(
            "Planning routes %r -> %r for profiles=%s", origin_text, destination_text, profiles
        )

        origin, destination = self._resolve_endpoints(origin_text, destination_text)
        _check_cancelled(cancel_event, "route fetching")

        candidates = self._fetch_candidates(origin.location, destination.location, profiles)
        if not candidates:
            raise NoRoutesError()
        _check_cancelled(cancel_event, "evaluation")

        evaluated = self._evaluate_all(candidates, cancel_event)
        _check_cancelled(cancel_event, "ranking")

        ranked = rank_routes(evaluated)
        logger.info(
            "Plan ready: %d routes, recommended=%s (mean AQI %.1f)",
            len(ranked),
            ranked[0].id,
            ranked[0].mean_aqi,
        )
        return RoutePlan(origin=origin, destination=destination, routes=tuple(ranked))

    def _resolve_endpoints(
        self, origin_text: str, destination_text: str
    ) -> Tuple[ResolvedPlace, ResolvedPlace]:
        with ThreadPoolExecutor(max_workers=2) as pool:
            origin_future = pool.submit(self.geocoder.resolve, origin_text)
            destination_future = pool.submit(self.geocoder.resolve, destination_text)
            origin = origin_future.result()
            destination = destination_future.result()

        unresolved: List[str] = []
        if origin is None:
            unresolved.append("origin")
        if destination is None:
            unresolved.append("destination")
        if unresolved:
            logger.warning("Could not resolve %s", ", ".join(unresolved))
            raise EndpointResolutionError(unresolved)

        return (
            ResolvedPlace(query=origin_text, location=origin),
            ResolvedPlace(query=destination_text, location=destination),
        )

    def _fetch_candidates(
        self, origin: LatLon, destination: LatLon, profiles: List[str]
    ) -> List[RouteCandidate]:
        if not profiles:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(profiles))) as pool:
            futures = [
                pool.submit(self.route_source.fetch_route, origin, destination, profile)
                for profile in profiles
            ]
            # Collected in submission order so ties rank by request order.
            results = [f.result() for f in futures]
        return [r for r in results if r is not None]

    def _evaluate_all(
        self, candidates: List[RouteCandidate], cancel_event: Optional[threading.Event]
    ) -> List[EvaluatedRoute]:
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(candidates))) as pool:
            futures = [
                pool.submit(evaluate_route, route, self.sampler, self.sample_cap, cancel_event)
                for route in candidates
            ]
            return [f.result() for f in futures]


class PlanSession:
    """Holds the latest plan; a new request supersedes the one in flight."""

    def __init__(self, planner: RoutePlanner) -> None:
        self.planner = planner
        self._lock = threading.Lock()
        self._generation = 0
        self._active: Optional[threading.Event] = None
        self._current: Optional[RoutePlan] = None

    @property
    def current(self) -> Optional[RoutePlan]:
        with self._lock:
            return self._current

    def plan(
        self,
        origin_text: str,
        destination_text: str,
        profiles: Optional[Sequence[str]] = None,
    ) -> RoutePlan:
        with self._lock:
            if self._active is not None:
                logger.info("Superseding in-flight planning request")
                self._active.set()
            self._generation += 1
            generation = self._generation
            cancel_event = threading.Event()
            self._active = cancel_event
            self._current = None

        try:
            plan = self.planner.plan_routes(
                origin_text, destination_text, profiles=profiles, cancel_event=cancel_event
            )
        finally:
            with self._lock:
                if self._generation == generation:
                    self._active = None

        with self._lock:
            if self._generation != generation or cancel_event.is_set():
                raise PlanCancelled("a newer planning request replaced this one")
            self._current = plan
        return plan

    def cancel(self) -> None:
        with self._lock:
            if self._active is not None:
                self._active.set()
