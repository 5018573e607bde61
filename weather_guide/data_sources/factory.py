"""Factory helpers for choosing a weather data source at startup."""

from __future__ import annotations

from weather_guide import config
from weather_guide.data_sources.base import CallableWeatherDataSource, WeatherDataSource
from weather_guide.data_sources.mock_source import fetch_sample_by_city, fetch_sample_by_coordinates
from weather_guide.data_sources.openweathermap_client import fetch_weather_by_city, fetch_weather_by_coordinates
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "openweathermap"


def build_data_source(settings: config.Settings | None = None) -> WeatherDataSource:
    """Instantiate the configured weather data source."""
    settings = settings or config.settings
    source = (settings.weather_source or DEFAULT_SOURCE_NAME).lower()

    if source == "openweathermap":
        if not settings.openweathermap_api_key:
            logger.warning("OpenWeatherMap selected but no API key configured; lookups will fall back to samples")
        logger.info("Using OpenWeatherMap data source",
                    extra={"base_url": mask_url(settings.openweathermap_base_url)})
        return CallableWeatherDataSource(
            by_city=fetch_weather_by_city,
            by_coordinates=fetch_weather_by_coordinates,
            name="openweathermap",
        )

    if source == "mock":
        logger.info("Using sample (mock) data source")
        return CallableWeatherDataSource(
            by_city=fetch_sample_by_city,
            by_coordinates=fetch_sample_by_coordinates,
            name="mock",
        )

    raise ValueError(f"Unknown weather source '{source}'")
