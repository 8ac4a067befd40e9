from __future__ import annotations

import logging
import threading
from typing import List, Optional, Protocol, Tuple

from config import SAMPLE_CAP

from .errors import PlanCancelled
from .models import EvaluatedRoute, ExposureSample, RouteCandidate

LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)


class Sampler(Protocol):
    def sample_at(self, location: LatLon) -> float: ...


def sampling_stride(length: int, cap: int = SAMPLE_CAP) -> int:
    if cap < 1:
        raise ValueError("sample cap must be at least 1")
    return max(1, length // cap)


def sample_indices(length: int, cap: int = SAMPLE_CAP) -> List[int]:
    """Indices 0, stride, 2*stride, ... below ``length``."""
    stride = sampling_stride(length, cap)
    return list(range(0, length, stride))


def evaluate_route(
    route: RouteCandidate,
    sampler: Sampler,
    cap: int = SAMPLE_CAP,
    cancel_event: Optional[threading.Event] = None,
) -> EvaluatedRoute:
    """Sample air quality at evenly strided points and average them.

    The number of sampler calls depends on the stride, not on how densely
    the routing service resolved the path.
    """
    path = route.path
    if not path:
        raise ValueError(f"route {route.id} has an empty path")

    samples: List[ExposureSample] = []
    for idx in sample_indices(len(path), cap):
        if cancel_event is not None and cancel_event.is_set():
            raise PlanCancelled(f"evaluation of {route.id} cancelled")
        point = path[idx]
        samples.append(ExposureSample(location=point, aqi=float(sampler.sample_at(point))))

    mean_aqi = sum(s.aqi for s in samples) / len(samples)
    logger.info(
        "Evaluated %s: %d samples over %d points, mean AQI %.1f",
        route.id,
        len(samples),
        len(path),
        mean_aqi,
    )
    return EvaluatedRoute(route=route, samples=tuple(samples), mean_aqi=mean_aqi)
