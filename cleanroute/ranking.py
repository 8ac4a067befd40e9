from __future__ import annotations

from typing import Iterable, List, Optional

from .models import EvaluatedRoute


def rank_routes(routes: Iterable[EvaluatedRoute]) -> List[EvaluatedRoute]:
    """Cleanest first. ``sorted`` is stable, so ties keep request order."""
    return sorted(routes, key=lambda r: r.mean_aqi)


def recommended_route(routes: Iterable[EvaluatedRoute]) -> Optional[EvaluatedRoute]:
    ranked = rank_routes(routes)
    return ranked[0] if ranked else None


def exposure_premium(route: EvaluatedRoute, recommended: EvaluatedRoute) -> Optional[float]:
    """Extra exposure of ``route`` relative to the recommended one, in percent.

    Never negative. Undefined (``None``) when the recommended route has a
    zero mean and ``route`` does not.
    """
    if recommended.mean_aqi <= 0:
        return 0.0 if route.mean_aqi <= recommended.mean_aqi else None
    premium = (route.mean_aqi - recommended.mean_aqi) / recommended.mean_aqi * 100.0
    return max(0.0, premium)


def rounded_premium(route: EvaluatedRoute, recommended: EvaluatedRoute) -> Optional[int]:
    premium = exposure_premium(route, recommended)
    return None if premium is None else int(round(premium))
