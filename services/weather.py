"""Historical weather lookup against the Visual Crossing timeline API."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from analytics.common import round_to
from models.weather import WeatherReading

log = logging.getLogger(__name__)

VISUAL_CROSSING_BASE_URL = (
    "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
)
TIMEOUT = 10
WINDY_THRESHOLD_KPH = 25
CALM_THRESHOLD_KPH = 10
KPH_PER_MPH = 1.60934

# Checked in order; the first keyword found in the conditions wins.
WEATHER_MAPPING: List[Tuple[str, str]] = [
    ("rain", "Rainy"),
    ("showers", "Rainy"),
    ("drizzle", "Rainy"),
    ("thunderstorm", "Rainy"),
    ("clear", "Sunny"),
    ("sunny", "Sunny"),
    ("overcast", "Cloudy"),
    ("cloudy", "Cloudy"),
    ("partially cloudy", "Cloudy"),
    ("fog", "Cloudy"),
    ("snow", "Cold"),
    ("freezing", "Cold"),
    ("ice", "Cold"),
]


def fahrenheit_to_celsius(f: float) -> float:
    return round_to((f - 32) * 5 / 9, 1)


def mph_to_kph(mph: float) -> float:
    return round_to(mph * KPH_PER_MPH, 1)


def map_conditions_to_category(conditions: str, wind_speed_kph: float) -> str:
    """Strong wind overrides everything; otherwise keyword match, then calm/sunny, then Other."""
    text = (conditions or "").lower()
    if wind_speed_kph >= WINDY_THRESHOLD_KPH:
        return "Windy"

    for keyword, category in WEATHER_MAPPING:
        if keyword in text:
            return category

    if wind_speed_kph <= CALM_THRESHOLD_KPH:
        if "clear" in text or "sun" in text:
            return "Sunny"
        return "Calm"
    return "Other"


def _noon_observation(day: Dict[str, Any]) -> Dict[str, Any]:
    """The 12:00 hour when hourly data is present, else the daily summary."""
    for hour in day.get("hours") or []:
        if str(hour.get("datetime", "")).startswith("12:"):
            return hour
    return day


def parse_timeline(payload: Dict[str, Any]) -> Optional[WeatherReading]:
    days = payload.get("days") or []
    if not days:
        return None

    observation = _noon_observation(days[0])
    temp_c = fahrenheit_to_celsius(observation.get("temp") or 0)
    wind_kph = mph_to_kph(observation.get("windspeed") or 0)
    conditions = observation.get("conditions") or ""
    return WeatherReading(
        weather=map_conditions_to_category(conditions, wind_kph),
        temp_c=temp_c,
        wind_speed_kph=wind_kph,
        conditions=conditions,
    )


class WeatherLookup:
    """
    Best-effort weather for a course on a given day.

    Never raises: a missing API key, blank location, HTTP error, empty
    payload or network failure all return None.
    """

    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.session = session or requests.Session()

    def build_url(self, day: date, location: str) -> str:
        encoded = quote(location.strip(), safe="")
        iso = day.isoformat()
        return f"{VISUAL_CROSSING_BASE_URL}/{encoded}/{iso}/{iso}"

    def fetch(self, day: date, location: Optional[str]) -> Optional[WeatherReading]:
        if not self.api_key:
            log.warning("VISUAL_CROSSING_API_KEY not configured; skipping weather lookup")
            return None
        if not location or not location.strip():
            log.warning("No location provided; skipping weather lookup")
            return None

        params = {
            "unitGroup": "us",
            "include": "hours",
            "key": self.api_key,
            "contentType": "json",
        }
        try:
            log.info("Fetching weather for %s on %s", location, day)
            resp = self.session.get(
                self.build_url(day, location),
                params=params,
                headers={"Accept": "application/json"},
                timeout=TIMEOUT,
            )
            if not resp.ok:
                log.error("Weather API error: %s - %s", resp.status_code, resp.text[:200])
                return None
            reading = parse_timeline(resp.json())
        except (requests.RequestException, ValueError) as exc:
            log.error("Weather API error: %s", exc)
            return None

        if reading is None:
            log.warning("Weather API returned no data for %s", day)
            return None
        log.info("Weather retrieved: %s", reading.describe())
        return reading

    __call__ = fetch
