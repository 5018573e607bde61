"""Resolve a location to a weather snapshot, substituting sample data on provider failure."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from weather_guide.config import settings
from weather_guide.data_sources import WeatherDataSource, WeatherProviderError, build_data_source
from weather_guide.data_sources.mock_source import generate_sample_snapshot
from weather_guide.domain import SnapshotSource, WeatherSnapshot
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="weather_service")

PROVIDER_ERRORS = (WeatherProviderError, requests.RequestException)


@dataclass
class WeatherLookup:
    """A snapshot plus where it came from and, for samples, why."""
    snapshot: WeatherSnapshot
    source: SnapshotSource
    error: Optional[str] = None


def get_weather(
    *,
    city: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    data_source: WeatherDataSource | None = None,
    fallback_to_sample: bool | None = None,
) -> WeatherLookup:
    """
    Fetch the current snapshot for a city or a coordinate pair.

    Coordinates take precedence over the city; with neither, the configured
    default location is used. When fallback is enabled, a failed coordinate
    lookup is retried live for the default location, and if the provider
    still fails a synthetic snapshot labelled with the last attempted
    location is returned instead, so downstream advice always has valid input.
    """
    ds = data_source or build_data_source(settings)
    fallback = settings.fallback_to_sample if fallback_to_sample is None else fallback_to_sample
    use_coordinates = latitude is not None and longitude is not None
    location_label = f"{latitude:.2f}, {longitude:.2f}" if use_coordinates else (city or settings.default_location)

    try:
        if use_coordinates:
            try:
                snapshot = ds.fetch_by_coordinates(latitude, longitude)
            except PROVIDER_ERRORS as exc:
                if not fallback:
                    raise
                logger.warning(
                    "Coordinate lookup failed; retrying with the default location",
                    extra={"location": location_label, "error": str(exc)},
                )
                location_label = settings.default_location
                snapshot = ds.fetch_by_city(settings.default_location)
        else:
            snapshot = ds.fetch_by_city(city or settings.default_location)
    except PROVIDER_ERRORS as exc:
        if not fallback:
            logger.error("Weather lookup failed", extra={"location": location_label, "error": str(exc)})
            raise
        logger.warning(
            "Weather lookup failed; substituting sample data",
            extra={"location": location_label, "error": str(exc)},
        )
        return WeatherLookup(
            snapshot=generate_sample_snapshot(location_label),
            source=SnapshotSource.SAMPLE,
            error=str(exc),
        )

    logger.debug("Resolved weather snapshot", extra={"location": snapshot.location})
    # the mock backend never produces live readings
    source = SnapshotSource.SAMPLE if getattr(ds, "name", None) == "mock" else SnapshotSource.LIVE
    return WeatherLookup(snapshot=snapshot, source=source)
