"""Synthetic weather snapshots used when the live provider is unavailable."""
from __future__ import annotations

import random

from weather_guide.domain import WeatherCondition, WeatherSnapshot

# Conditions the generator draws from; storms, fog and snow are never synthesized.
SAMPLE_CONDITIONS: tuple[WeatherCondition, ...] = (
    WeatherCondition.SUNNY,
    WeatherCondition.CLOUDY,
    WeatherCondition.RAINY,
    WeatherCondition.WINDY,
)

DESCRIPTIONS: dict[WeatherCondition, str] = {
    WeatherCondition.SUNNY: "Clear sky with bright sunshine",
    WeatherCondition.CLOUDY: "Partly cloudy with some sun",
    WeatherCondition.RAINY: "Light to moderate rain expected",
    WeatherCondition.STORMY: "Thunderstorms in the area",
    WeatherCondition.WINDY: "Strong winds throughout the day",
    WeatherCondition.FOGGY: "Misty conditions with low visibility",
    WeatherCondition.SNOWY: "Light snowfall expected",
}

INDIAN_CITIES: tuple[str, ...] = (
    "Mumbai, India",
    "Delhi, India",
    "Bangalore, India",
    "Chennai, India",
    "Kolkata, India",
    "Hyderabad, India",
    "Pune, India",
    "Ahmedabad, India",
    "Jaipur, India",
    "Lucknow, India",
    "Nagpur, India",
    "Bhopal, India",
    "Chandigarh, India",
    "Kochi, India",
    "Patna, India",
)

DEFAULT_SAMPLE_LOCATION = INDIAN_CITIES[0]


def _sample_rain_probability(condition: WeatherCondition, rng: random.Random) -> float:
    if condition == WeatherCondition.RAINY:
        return 70 + rng.random() * 25
    if condition == WeatherCondition.CLOUDY:
        return 30 + rng.random() * 30
    if condition == WeatherCondition.SUNNY:
        return 5 + rng.random() * 15
    return 20


def generate_sample_snapshot(location: str | None = None, rng: random.Random | None = None) -> WeatherSnapshot:
    """
    Generate a plausible warm-climate snapshot for `location`.

    Temperature 28-38°C, humidity 50-90%, wind 10-35 km/h, rain probability
    driven by the drawn condition. Pass a seeded `rng` for reproducible output.
    """
    rng = rng or random.Random()
    base_temp = 28 + rng.random() * 10
    condition = rng.choice(SAMPLE_CONDITIONS)
    rain_probability = _sample_rain_probability(condition, rng)

    return WeatherSnapshot(
        location=location or DEFAULT_SAMPLE_LOCATION,
        temperature_c=round(base_temp),
        condition=condition,
        humidity_pct=round(50 + rng.random() * 40),
        wind_speed_kmh=round(10 + rng.random() * 25),
        rain_probability_pct=round(rain_probability),
        feels_like_c=round(base_temp + (rng.random() * 4 - 2)),
        description=DESCRIPTIONS[condition],
    )


def fetch_sample_by_city(city: str, **_kwargs) -> WeatherSnapshot:
    """Data-source adapter: sample snapshot labelled with the requested city."""
    return generate_sample_snapshot(city)


def fetch_sample_by_coordinates(latitude: float, longitude: float, **_kwargs) -> WeatherSnapshot:
    """Data-source adapter: sample snapshot labelled with the coordinates."""
    return generate_sample_snapshot(f"{latitude:.2f}, {longitude:.2f}")
