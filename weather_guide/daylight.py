"""Day/night detection and background theme selection for the presentation layer."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from weather_guide.domain import WeatherCondition, WeatherSnapshot, WeatherTheme, condition_key

NIGHT_BACKGROUND = "weather-bg-night"
DEFAULT_BACKGROUND = "weather-bg-sunny"

# Used when the provider did not report sunrise/sunset.
FALLBACK_DAY_START_HOUR = 6
FALLBACK_DAY_END_HOUR = 18

_BACKGROUNDS: dict[str, str] = {
    WeatherCondition.SUNNY.value: "weather-bg-sunny",
    WeatherCondition.CLOUDY.value: "weather-bg-cloudy",
    WeatherCondition.RAINY.value: "weather-bg-rainy",
    WeatherCondition.STORMY.value: "weather-bg-stormy",
    WeatherCondition.SNOWY.value: "weather-bg-snowy",
    WeatherCondition.WINDY.value: "weather-bg-cloudy",
    WeatherCondition.FOGGY.value: "weather-bg-cloudy",
}


def local_hour(snapshot: WeatherSnapshot, now_epoch: float) -> int:
    """Hour of day (0-23) at the snapshot's location."""
    offset = snapshot.timezone_offset_seconds or 0
    local = datetime.fromtimestamp(now_epoch, tz=timezone.utc) + timedelta(seconds=offset)
    return local.hour


def is_daytime(snapshot: WeatherSnapshot, now_epoch: float) -> bool:
    """
    Return True if it is day at the snapshot's location.

    Prefers the provider's sunrise/sunset epochs; falls back to a fixed
    06:00-18:00 local window when either is missing.
    """
    sunrise, sunset = snapshot.sunrise_epoch, snapshot.sunset_epoch
    if sunrise and sunset:
        return sunrise <= now_epoch < sunset
    hour = local_hour(snapshot, now_epoch)
    return FALLBACK_DAY_START_HOUR <= hour < FALLBACK_DAY_END_HOUR


def background_class(condition: WeatherCondition | str) -> str:
    """Map a condition to its CSS background class."""
    return _BACKGROUNDS.get(condition_key(condition), DEFAULT_BACKGROUND)


def weather_theme(snapshot: WeatherSnapshot, now_epoch: float) -> WeatherTheme:
    """Combine the condition background with the day/night check."""
    day = is_daytime(snapshot, now_epoch)
    background = background_class(snapshot.condition) if day else NIGHT_BACKGROUND
    return WeatherTheme(background=background, is_day=day)
