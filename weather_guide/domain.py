"""Domain vocabulary and strict schemas for weather advice.

This module defines the contract shared by the advice engine, the travel
advisory generator, the weather provider clients and the HTTP layer: enums,
the weather snapshot, and the generated message/advisory payloads. No rule
logic lives here.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


class WeatherCondition(str, Enum):
    """Condition categories understood by the advice rules."""
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    STORMY = "stormy"
    WINDY = "windy"
    FOGGY = "foggy"
    SNOWY = "snowy"


class PersonaMode(str, Enum):
    """Advice-seeking role that selects the rule set."""
    GENERAL = "general"
    FARMER = "farmer"
    ACTIVITY = "activity"


class MessageKind(str, Enum):
    """Severity/category tag for an advice message."""
    GREETING = "greeting"
    ADVICE = "advice"
    WARNING = "warning"
    TIP = "tip"


class TipCategory(str, Enum):
    """Category of a community-submitted tip."""
    TRAVEL = "travel"
    FOOD = "food"
    SAFETY = "safety"
    WEATHER = "weather"
    GENERAL = "general"


class SnapshotSource(str, Enum):
    """Where a snapshot came from."""
    LIVE = "live"
    SAMPLE = "sample"


def condition_key(condition: WeatherCondition | str | None) -> str:
    """Return the plain string value for a condition, known or not."""
    if condition is None:
        return ""
    return getattr(condition, "value", condition)


class WeatherSnapshot(_StrictBaseModel):
    """A single point-in-time weather observation for one location."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    location: str
    temperature_c: int
    feels_like_c: int
    condition: WeatherCondition | str
    humidity_pct: int = Field(ge=0, le=100)
    rain_probability_pct: int = Field(ge=0, le=100)
    wind_speed_kmh: int = Field(ge=0)
    description: str = ""
    sunrise_epoch: int | None = None
    sunset_epoch: int | None = None
    timezone_offset_seconds: int | None = None

    @field_validator("condition", mode="before")
    @classmethod
    def coerce_known_condition(cls, v):
        """Map known condition strings onto the enum; keep unknown strings as-is."""
        if isinstance(v, WeatherCondition):
            return v
        if isinstance(v, str):
            try:
                return WeatherCondition(v.strip().lower())
            except ValueError:
                return v
        return v


class AdviceMessage(_StrictBaseModel):
    """One unit of generated guidance text."""
    id: str
    content: str
    kind: MessageKind
    created_at: datetime


class TravelAdvisory(_StrictBaseModel):
    """Five categorized tip lists for the local-guide panel."""
    weather: List[str] = Field(default_factory=list)
    travel: List[str] = Field(default_factory=list)
    safety: List[str] = Field(default_factory=list)
    local_tips: List[str] = Field(default_factory=list)
    best_times: List[str] = Field(default_factory=list)


class LocalTip(_StrictBaseModel):
    """A community tip posted on the local-guide board."""
    id: str
    location: str
    author: str
    content: str
    category: TipCategory = TipCategory.GENERAL
    likes: int = 0
    created_at: datetime


class WeatherTheme(_StrictBaseModel):
    """Presentation hints derived from a snapshot."""
    background: str
    is_day: bool
