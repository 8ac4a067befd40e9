"""Simulated current conditions for a location.

These are placeholder generators for the dashboard panels. Randomness always
comes from the ``random.Random`` passed in, so callers and tests control it.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from .air_quality import aqi_category

LatLon = Tuple[float, float]

WEATHER_DESCRIPTIONS = ["Clear sky", "Few clouds", "Partly cloudy", "Overcast"]


def simulate_weather(location: LatLon, rng: random.Random) -> Dict:
    lat, _ = location
    # Temperature drifts with latitude around a 20 C baseline.
    base_temp = 20 + (lat / 90) * 15 + (rng.random() - 0.5) * 10
    return {
        "temperature": round(base_temp),
        "humidity": round(40 + rng.random() * 40),
        "description": WEATHER_DESCRIPTIONS[rng.randrange(len(WEATHER_DESCRIPTIONS))],
        "wind_speed": round(rng.random() * 15 + 2, 1),
        "visibility": round(8 + rng.random() * 7, 1),
        "pressure": round(1000 + rng.random() * 40),
        "feels_like": round(base_temp + (rng.random() - 0.5) * 5),
    }


def simulate_air_quality(location: LatLon, rng: random.Random) -> Dict:
    aqi = round(30 + rng.random() * 120)
    category = aqi_category(aqi)
    lat, lon = location
    return {
        "lat": lat,
        "lon": lon,
        "aqi": aqi,
        "category": category["category"],
        "health_message": category["health_message"],
        "pollutants": {
            "pm25": round(10 + rng.random() * 40, 1),
            "pm10": round(15 + rng.random() * 50, 1),
            "no2": round(20 + rng.random() * 60, 1),
            "o3": round(80 + rng.random() * 40, 1),
            "so2": round(5 + rng.random() * 20, 1),
            "co": round(0.5 + rng.random() * 2, 2),
        },
    }


def _alert(kind: str, alert_type: str, title: str, message: str, severity: str, now: datetime) -> Dict:
    return {
        "id": f"{kind}-{int(now.timestamp() * 1000)}",
        "type": alert_type,
        "title": title,
        "message": message,
        "timestamp": now.isoformat(),
        "severity": severity,
    }


def simulate_health_alerts(rng: random.Random, now: Optional[datetime] = None) -> List[Dict]:
    """At least one alert is always returned."""
    now = now or datetime.now(timezone.utc)
    alerts: List[Dict] = []

    if rng.random() > 0.7:
        alerts.append(
            _alert(
                "pollen",
                "warning",
                "High Pollen Count",
                "Pollen levels are elevated in your area. Consider limiting outdoor "
                "activities if you have allergies.",
                "moderate",
                now,
            )
        )
    if rng.random() > 0.6:
        alerts.append(
            _alert(
                "aqi",
                "danger",
                "Poor Air Quality",
                "Air quality index exceeds healthy levels. Sensitive groups should avoid "
                "outdoor exercise.",
                "high",
                now,
            )
        )
    if rng.random() > 0.8:
        alerts.append(
            _alert(
                "uv",
                "info",
                "High UV Index",
                "UV radiation is high today. Use sunscreen and protective clothing when outdoors.",
                "moderate",
                now,
            )
        )

    if not alerts:
        alerts.append(
            _alert(
                "good",
                "info",
                "Good Environmental Conditions",
                "Air quality and weather conditions are favorable for outdoor activities.",
                "low",
                now,
            )
        )
    return alerts


HEALTH_TIPS: List[Dict] = [
    {
        "id": "1",
        "category": "air-quality",
        "title": "Understanding Air Quality Index (AQI)",
        "content": "AQI is a standardized way to measure air pollution. Values below 50 are "
        "considered good, while values above 150 can affect sensitive individuals.",
        "actionable": [
            "Check AQI before outdoor activities",
            "Limit exercise outdoors when AQI > 100",
            "Use air purifiers indoors during high pollution days",
            "Wear N95 masks in heavily polluted areas",
        ],
    },
    {
        "id": "2",
        "category": "health",
        "title": "Protecting Yourself from Air Pollution",
        "content": "Long-term exposure to air pollution can lead to respiratory and "
        "cardiovascular diseases. Children, elderly, and people with pre-existing "
        "conditions are most vulnerable.",
        "actionable": [
            "Exercise indoors when air quality is poor",
            "Keep windows closed during high pollution",
            "Avoid busy roads during peak hours",
        ],
    },
    {
        "id": "3",
        "category": "weather",
        "title": "Heat Index and Health Risks",
        "content": "The heat index combines temperature and humidity to show how hot it "
        "feels. High values can lead to heat exhaustion and heat stroke.",
        "actionable": [
            "Stay hydrated throughout the day",
            "Wear light-colored, loose clothing",
            "Avoid outdoor activities during peak heat (10 AM - 4 PM)",
        ],
    },
    {
        "id": "4",
        "category": "environment",
        "title": "Green Spaces and Mental Health",
        "content": "Access to parks and green areas reduces stress, improves mood, and "
        "provides cleaner air.",
        "actionable": [
            "Spend at least 20 minutes in nature daily",
            "Visit local parks and green spaces",
            "Take walking meetings in parks when possible",
        ],
    },
    {
        "id": "5",
        "category": "safety",
        "title": "UV Radiation and Skin Protection",
        "content": "UV radiation peaks between 10 AM and 4 PM. Even on cloudy days, up to 80% "
        "of UV rays can penetrate clouds.",
        "actionable": [
            "Apply SPF 30+ sunscreen 30 minutes before going outside",
            "Wear a wide-brimmed hat and sunglasses",
            "Seek shade during midday hours",
        ],
    },
]


def tip_at(index: int) -> Dict:
    """Rotating access: any integer index wraps around the catalogue."""
    return HEALTH_TIPS[index % len(HEALTH_TIPS)]
