"""Data source factories for plugging different weather backends."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_data_source
from .mock_source import INDIAN_CITIES, generate_sample_snapshot
from .openweathermap_client import (
    WeatherProviderError,
    fetch_weather_by_city,
    fetch_weather_by_coordinates,
)

__all__ = [
    "build_data_source",
    "WeatherDataSource",
    "CallableWeatherDataSource",
    "INDIAN_CITIES",
    "generate_sample_snapshot",
    "WeatherProviderError",
    "fetch_weather_by_city",
    "fetch_weather_by_coordinates",
]
