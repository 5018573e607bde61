"""Helpers for fetching current conditions from the OpenWeatherMap API."""
from __future__ import annotations

import math
import random
from typing import Any, Mapping, Optional

import requests
import requests_cache
from retry_requests import retry

from weather_guide.config import settings
from weather_guide.domain import WeatherCondition, WeatherSnapshot
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag='openweathermap_client')

cache_session = requests_cache.CachedSession(settings.http_cache_name, expire_after=settings.http_cache_ttl_seconds)
session = retry(cache_session, retries=3, backoff_factor=0.2)

# OpenWeatherMap "main" group -> our condition category. Anything else is cloudy.
CONDITION_MAP: dict[str, WeatherCondition] = {
    "Clear": WeatherCondition.SUNNY,
    "Clouds": WeatherCondition.CLOUDY,
    "Rain": WeatherCondition.RAINY,
    "Drizzle": WeatherCondition.RAINY,
    "Thunderstorm": WeatherCondition.STORMY,
    "Snow": WeatherCondition.SNOWY,
    "Mist": WeatherCondition.FOGGY,
    "Fog": WeatherCondition.FOGGY,
    "Haze": WeatherCondition.FOGGY,
    "Dust": WeatherCondition.WINDY,
    "Sand": WeatherCondition.WINDY,
    "Squall": WeatherCondition.WINDY,
    "Tornado": WeatherCondition.STORMY,
}
DEFAULT_CONDITION = WeatherCondition.CLOUDY

RAINING_GROUPS = {"Rain", "Drizzle", "Thunderstorm"}


class WeatherProviderError(RuntimeError):
    """Raised when the weather provider cannot return usable data."""


def _round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching how readings are displayed."""
    return int(math.floor(float(value) + 0.5))


def map_condition(main: Optional[str]) -> WeatherCondition:
    """Map an OpenWeatherMap weather group onto a condition category."""
    return CONDITION_MAP.get(main or "", DEFAULT_CONDITION)


def estimate_rain_probability(data: Mapping[str, Any], rng: random.Random | None = None) -> int:
    """
    Estimate rain probability from a current-weather payload.

    The current-weather endpoint has no probability field: if it is already
    raining the estimate is 80-94%, otherwise it blends cloud cover and
    humidity, clamped to [5, 95].
    """
    weather = (data.get("weather") or [{}])[0]
    group = weather.get("main")
    humidity = (data.get("main") or {}).get("humidity") or 50
    clouds = (data.get("clouds") or {}).get("all") or 0

    if group in RAINING_GROUPS:
        return (rng or random).randint(80, 94)

    base = clouds * 0.4 + humidity * 0.3
    return min(95, max(5, _round_half_up(base)))


def normalize_current_weather(data: Mapping[str, Any], rng: random.Random | None = None) -> WeatherSnapshot:
    """Convert an OpenWeatherMap current-weather payload into a WeatherSnapshot."""
    try:
        main = data["main"]
        weather = (data.get("weather") or [{}])[0]
        sys_block = data.get("sys") or {}
        wind = data.get("wind") or {}

        condition = map_condition(weather.get("main"))
        country = sys_block.get("country")
        name = data.get("name") or ""
        location = f"{name}, {country}" if country else name

        return WeatherSnapshot(
            location=location,
            temperature_c=_round_half_up(main["temp"]),
            feels_like_c=_round_half_up(main.get("feels_like", main["temp"])),
            condition=condition,
            humidity_pct=int(main.get("humidity", 0)),
            # m/s -> km/h
            wind_speed_kmh=_round_half_up((wind.get("speed") or 0) * 3.6),
            rain_probability_pct=estimate_rain_probability(data, rng),
            description=weather.get("description") or condition.value,
            sunrise_epoch=sys_block.get("sunrise") or None,
            sunset_epoch=sys_block.get("sunset") or None,
            timezone_offset_seconds=data.get("timezone", 0),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise WeatherProviderError(f"Unexpected OpenWeatherMap payload: {exc}") from exc


def _get_current(params: dict, *, api_key: str | None, base_url: str | None) -> dict:
    """Call the current-weather endpoint and return the decoded JSON body."""
    key = api_key or settings.openweathermap_api_key
    if not key:
        raise WeatherProviderError("OpenWeatherMap API key not configured")

    url = f"{(base_url or settings.openweathermap_base_url).rstrip('/')}/weather"
    query = {**params, "appid": key, "units": "metric"}

    resp = session.get(url, params=query, timeout=settings.request_timeout_seconds)
    try:
        data = resp.json()
    except ValueError as exc:
        raise WeatherProviderError(f"OpenWeatherMap returned a non-JSON response (HTTP {resp.status_code})") from exc
    if not isinstance(data, dict):
        raise WeatherProviderError(
            f"OpenWeatherMap returned {type(data).__name__} instead of an object (HTTP {resp.status_code})"
        )

    # Successful payloads carry cod=200 (int); errors carry a string code and a message.
    if resp.status_code != 200 or str(data.get("cod")) != "200":
        message = data.get("message") or f"HTTP {resp.status_code}"
        logger.warning(
            "OpenWeatherMap request failed",
            extra={"status_code": resp.status_code, "provider_message": message},
        )
        raise WeatherProviderError(message)

    return data


def fetch_weather_by_city(city: str,
                          *,
                          api_key: str | None = None,
                          base_url: str | None = None,
                          rng: random.Random | None = None,
                          ) -> WeatherSnapshot:
    """Fetch current conditions for a city name, e.g. "Pune" or "Pune, IN"."""
    if not city or not city.strip():
        raise WeatherProviderError("Please provide either city name or coordinates")
    logger.info("Fetching current weather by city", extra={"city": city})
    data = _get_current({"q": city.strip()}, api_key=api_key, base_url=base_url)
    return normalize_current_weather(data, rng)


def fetch_weather_by_coordinates(latitude: float,
                                 longitude: float,
                                 *,
                                 api_key: str | None = None,
                                 base_url: str | None = None,
                                 rng: random.Random | None = None,
                                 ) -> WeatherSnapshot:
    """Fetch current conditions for a latitude/longitude pair."""
    logger.info("Fetching current weather by coordinates", extra={"latitude": latitude, "longitude": longitude})
    data = _get_current({"lat": latitude, "lon": longitude}, api_key=api_key, base_url=base_url)
    return normalize_current_weather(data, rng)


def main():
    """Manual test helper for the provider client."""
    snapshot = fetch_weather_by_city(settings.default_location)
    print(snapshot.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
