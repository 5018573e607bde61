"""Deterministic persona-aware weather advice.

This module converts a weather snapshot + persona mode into an ordered list of
AdviceMessage objects. A greeting always comes first, followed by the output
of exactly one rule set (farmer, activity or general). Every rule is a pure
function of the snapshot that yields at most one message; rule sets are
evaluated in declaration order and nothing here reads the clock except the
optional batch timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from weather_guide.domain import (
    AdviceMessage,
    MessageKind,
    PersonaMode,
    WeatherCondition,
    WeatherSnapshot,
)

GREETING_ID = "greeting"


@dataclass(frozen=True)
class _Draft:
    """Advice produced by a rule, before it is stamped with the batch time."""
    id: str
    content: str
    kind: MessageKind


Rule = Callable[[WeatherSnapshot], Optional[_Draft]]


def greeting_for_hour(hour: int) -> str:
    """Pick the greeting template for an hour of the day."""
    if hour < 12:
        return "Good morning! ☀️"
    if hour < 17:
        return "Good afternoon! 🌤️"
    return "Good evening! 🌙"


def _greeting(snapshot: WeatherSnapshot, hour: int) -> _Draft:
    """Build the single greeting that opens every batch."""
    return _Draft(
        id=GREETING_ID,
        content=(
            f"{greeting_for_hour(hour)} Today in {snapshot.location}: {snapshot.description}. "
            f"Temperature is {snapshot.temperature_c}°C."
        ),
        kind=MessageKind.GREETING,
    )


# ---------------------------------------------------------------------------
# Farmer rules
# ---------------------------------------------------------------------------

def _farmer_irrigation(s: WeatherSnapshot) -> Optional[_Draft]:
    """Irrigation guidance from rain probability; [20, 40] stays silent."""
    if s.rain_probability_pct > 70:
        return _Draft("rain-advice",
                      "🌧️ Good rainfall expected today. No need to water your crops - save water and rest!",
                      MessageKind.ADVICE)
    if s.rain_probability_pct > 40:
        return _Draft("rain-advice",
                      "🌦️ Some rain possible. Water crops lightly in the morning just in case.",
                      MessageKind.ADVICE)
    if s.rain_probability_pct < 20 and s.temperature_c > 30:
        return _Draft("rain-advice",
                      "💧 No rain expected and it's hot! Water your crops early morning and evening.",
                      MessageKind.WARNING)
    return None


def _farmer_temperature(s: WeatherSnapshot) -> Optional[_Draft]:
    """Heat/cold guidance, most severe first."""
    if s.temperature_c > 40:
        return _Draft("heat-warning",
                      "🔥 Extreme heat alert! Protect young plants with shade. Water crops before 7 AM.",
                      MessageKind.WARNING)
    if s.temperature_c > 35:
        return _Draft("heat-advice",
                      "☀️ Very hot today. Best time for farm work: 6-9 AM and after 5 PM.",
                      MessageKind.ADVICE)
    if s.temperature_c < 10:
        return _Draft("cold-warning",
                      "❄️ Cold weather! Cover sensitive plants to protect from frost damage.",
                      MessageKind.WARNING)
    return None


def _farmer_wind(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.wind_speed_kmh > 40:
        return _Draft("wind-warning",
                      "💨 Strong winds today! Secure tall plants and avoid spraying pesticides.",
                      MessageKind.WARNING)
    if s.wind_speed_kmh > 25:
        return _Draft("wind-advice",
                      "🍃 Windy conditions. Support tall crops like corn and sunflowers.",
                      MessageKind.ADVICE)
    return None


def _farmer_humidity(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.humidity_pct > 80 and s.temperature_c > 25:
        return _Draft("humidity-warning",
                      "💦 High humidity! Watch for fungal diseases. Avoid watering leaves.",
                      MessageKind.WARNING)
    return None


def _farmer_work_day(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.condition == WeatherCondition.SUNNY and s.temperature_c < 32:
        return _Draft("work-tip",
                      "🌾 Perfect weather for field work! Good day for planting or harvesting.",
                      MessageKind.TIP)
    return None


FARMER_RULES: tuple[Rule, ...] = (
    _farmer_irrigation,
    _farmer_temperature,
    _farmer_wind,
    _farmer_humidity,
    _farmer_work_day,
)


# ---------------------------------------------------------------------------
# Activity rules
# ---------------------------------------------------------------------------

def _activity_outdoor(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.rain_probability_pct < 30 and 20 <= s.temperature_c <= 32:
        return _Draft("outdoor-advice",
                      "🌳 Great weather for outdoor activities! Perfect for morning walks or evening sports.",
                      MessageKind.ADVICE)
    return None


def _activity_market(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.condition in (WeatherCondition.SUNNY, WeatherCondition.CLOUDY) and s.rain_probability_pct < 40:
        return _Draft("market-advice",
                      "🛒 Good day for market visits and shopping. Weather looks stable.",
                      MessageKind.ADVICE)
    return None


def _activity_travel(s: WeatherSnapshot) -> Optional[_Draft]:
    """Travel guidance; stormy/foggy below both thresholds is left to the safety rules."""
    if s.rain_probability_pct > 60:
        return _Draft("travel-warning",
                      "🚗 Rain expected - plan travel carefully. Carry umbrella if going out.",
                      MessageKind.WARNING)
    if s.wind_speed_kmh > 35:
        return _Draft("travel-warning",
                      "💨 Strong winds may affect travel. Drive carefully on highways.",
                      MessageKind.WARNING)
    if s.condition not in (WeatherCondition.STORMY, WeatherCondition.FOGGY):
        return _Draft("travel-advice",
                      "✈️ Good conditions for travel today. Roads should be clear.",
                      MessageKind.ADVICE)
    return None


def _activity_sports(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.temperature_c > 35:
        return _Draft("sports-warning",
                      "🏃 Too hot for outdoor sports. Exercise indoors or early morning only.",
                      MessageKind.WARNING)
    if 18 <= s.temperature_c <= 28 and s.rain_probability_pct < 30:
        return _Draft("sports-advice",
                      "⚽ Perfect weather for outdoor sports and exercise!",
                      MessageKind.TIP)
    return None


def _activity_storm(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.condition == WeatherCondition.STORMY:
        return _Draft("safety-warning",
                      "⚠️ Storm alert! Stay indoors and avoid unnecessary travel.",
                      MessageKind.WARNING)
    return None


def _activity_fog(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.condition == WeatherCondition.FOGGY:
        return _Draft("fog-warning",
                      "🌫️ Foggy conditions. Drive slowly and use fog lights if traveling.",
                      MessageKind.WARNING)
    return None


ACTIVITY_RULES: tuple[Rule, ...] = (
    _activity_outdoor,
    _activity_market,
    _activity_travel,
    _activity_sports,
    _activity_storm,
    _activity_fog,
)


# ---------------------------------------------------------------------------
# General rules
# ---------------------------------------------------------------------------

def _general_rain(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.rain_probability_pct > 50:
        return _Draft("rain-tip", "☔ Don't forget your umbrella! Rain is expected today.", MessageKind.TIP)
    return None


def _general_heat(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.temperature_c > 32:
        return _Draft("heat-tip", "🥤 Stay hydrated! Drink plenty of water and avoid direct sun.",
                      MessageKind.ADVICE)
    return None


def _general_cold(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.temperature_c < 15:
        return _Draft("cold-tip", "🧥 It's chilly! Wear warm clothes when going outside.", MessageKind.TIP)
    return None


def _general_nice_day(s: WeatherSnapshot) -> Optional[_Draft]:
    if s.condition == WeatherCondition.SUNNY and 20 <= s.temperature_c <= 30:
        return _Draft("nice-day", "😊 Beautiful day ahead! Enjoy the pleasant weather.", MessageKind.ADVICE)
    return None


GENERAL_RULES: tuple[Rule, ...] = (
    _general_rain,
    _general_heat,
    _general_cold,
    _general_nice_day,
)


RULE_SETS: dict[PersonaMode, tuple[Rule, ...]] = {
    PersonaMode.FARMER: FARMER_RULES,
    PersonaMode.ACTIVITY: ACTIVITY_RULES,
    PersonaMode.GENERAL: GENERAL_RULES,
}


def _rules_for_mode(mode: PersonaMode | str) -> Sequence[Rule]:
    """Resolve a mode to its rule set; anything unrecognized gets the general rules."""
    try:
        return RULE_SETS[PersonaMode(mode)]
    except ValueError:
        return GENERAL_RULES


def generate_advice(
    snapshot: WeatherSnapshot,
    mode: PersonaMode | str,
    now_hour: int,
    *,
    created_at: datetime | None = None,
) -> list[AdviceMessage]:
    """
    Pure function: greeting plus the selected rule set's messages, in rule order.

    `now_hour` is the caller's wall-clock hour (0-23) and only selects the
    greeting. `created_at` stamps every message in the batch; when omitted a
    single UTC timestamp is taken for the whole batch.
    """
    stamp = created_at or datetime.now(timezone.utc)

    drafts: list[_Draft] = [_greeting(snapshot, now_hour)]
    for rule in _rules_for_mode(mode):
        draft = rule(snapshot)
        if draft is not None:
            drafts.append(draft)

    return [
        AdviceMessage(id=d.id, content=d.content, kind=d.kind, created_at=stamp)
        for d in drafts
    ]
