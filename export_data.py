"""Export helper for the CleanRoute service.

This script runs the same planning pipeline as the web API and writes the
ranked routes to GeoJSON and CSV files so you can open them in mapping
tools or spreadsheets.
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from cleanroute import _configure_logging
from cleanroute.air_quality import aqi_category
from cleanroute.errors import EndpointResolutionError, NoRoutesError
from cleanroute.models import RoutePlan
from cleanroute.planner import RoutePlanner
from cleanroute.ranking import rounded_premium
from config import DEFAULT_PROFILES, DEFAULT_TRIP


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_") or "trip"


def plan_to_geojson(plan: RoutePlan) -> Dict:
    features: List[Dict] = []
    recommended = plan.recommended
    for rank, r in enumerate(plan.routes, start=1):
        line_coords = [[lon, lat] for (lat, lon) in r.path]
        props = {
            "id": r.id,
            "profile": r.profile,
            "rank": rank,
            "recommended": r is recommended,
            "mean_aqi": r.mean_aqi,
            "category": aqi_category(r.mean_aqi)["category"],
            "premium_pct": rounded_premium(r, recommended),
            "distance_m": r.distance_m,
            "duration_s": r.duration_s,
            "source": r.route.source,
        }
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": line_coords},
                "properties": props,
            }
        )
    return {"type": "FeatureCollection", "features": features}


def plan_to_frame(plan: RoutePlan) -> pd.DataFrame:
    recommended = plan.recommended
    rows = []
    for rank, r in enumerate(plan.routes, start=1):
        rows.append(
            {
                "rank": rank,
                "id": r.id,
                "profile": r.profile,
                "mean_aqi": round(r.mean_aqi, 1),
                "category": aqi_category(r.mean_aqi)["category"],
                "premium_pct": rounded_premium(r, recommended),
                "distance_km": round(r.distance_m / 1000, 1),
                "duration_min": round(r.duration_s / 60),
                "samples": len(r.samples),
                "fallback": r.is_fallback,
            }
        )
    return pd.DataFrame(rows)


def run_export(
    origin: str,
    destination: str,
    profiles: Optional[List[str]] = None,
    out_dir: Optional[Path] = None,
    planner: Optional[RoutePlanner] = None,
) -> Path:
    planner = planner or RoutePlanner()
    plan = planner.plan_routes(origin, destination, profiles=profiles)

    out_dir = out_dir or Path(__file__).parent / "exports"
    out_dir.mkdir(parents=True, exist_ok=True)
    name = f"{_slug(origin)}__{_slug(destination)}"

    with (out_dir / f"routes_{name}.geojson").open("w", encoding="utf-8") as f:
        json.dump(plan_to_geojson(plan), f, indent=2)

    plan_to_frame(plan).to_csv(out_dir / f"routes_{name}.csv", index=False)

    print(f"Exported {len(plan.routes)} routes for '{origin}' -> '{destination}' to {out_dir}")
    return out_dir


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Plan routes by air-quality exposure and export them to GeoJSON and CSV."
    )
    parser.add_argument("--origin", default=DEFAULT_TRIP.origin, help="Origin place name.")
    parser.add_argument(
        "--destination", default=DEFAULT_TRIP.destination, help="Destination place name."
    )
    parser.add_argument(
        "--profiles",
        default=",".join(DEFAULT_PROFILES),
        help="Comma-separated travel profiles (defaults to the configured profiles).",
    )
    args = parser.parse_args(argv)
    profiles = [p.strip() for p in args.profiles.split(",") if p.strip()]

    _configure_logging()
    try:
        run_export(args.origin, args.destination, profiles)
    except EndpointResolutionError as e:
        print(f"Could not find one or both locations ({', '.join(e.unresolved)}).")
        return 1
    except NoRoutesError:
        print("No routes found.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
