"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from weather_guide.domain import WeatherSnapshot


class WeatherDataSource(Protocol):
    """Interface for anything that can provide a current-weather snapshot."""

    def fetch_by_city(self, city: str) -> WeatherSnapshot:
        """Return current conditions for a city name."""
        ...

    def fetch_by_coordinates(self, latitude: float, longitude: float) -> WeatherSnapshot:
        """Return current conditions for a coordinate pair."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap two callables so they can be swapped for different backends."""

    by_city: Callable[..., WeatherSnapshot]
    by_coordinates: Callable[..., WeatherSnapshot]
    name: str = "custom"

    def fetch_by_city(self, city: str) -> WeatherSnapshot:
        """Delegate to the configured city lookup."""
        return self.by_city(city)

    def fetch_by_coordinates(self, latitude: float, longitude: float) -> WeatherSnapshot:
        """Delegate to the configured coordinate lookup."""
        return self.by_coordinates(latitude, longitude)
