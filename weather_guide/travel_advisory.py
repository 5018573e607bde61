"""Local-guide travel advisory built from a weather snapshot.

Each section is an append-only list: condition/threshold driven sentences
first, then the always-present general tips. No sorting or de-duplication.
"""

from __future__ import annotations

from weather_guide.domain import TravelAdvisory, WeatherCondition, WeatherSnapshot, condition_key

_SUNNY = WeatherCondition.SUNNY.value
_RAINY = WeatherCondition.RAINY.value
_STORMY = WeatherCondition.STORMY.value
_FOGGY = WeatherCondition.FOGGY.value

_CONDITION_GREETINGS: dict[str, str] = {
    WeatherCondition.SUNNY.value: "☀️ It's a beautiful sunny day! Temperature is around {t}°C - perfect for exploring!",
    WeatherCondition.CLOUDY.value: "☁️ Cloudy skies today at {t}°C. Great weather for walking around without harsh sun.",
    WeatherCondition.RAINY.value: "🌧️ It's raining here with {t}°C. Carry an umbrella and enjoy the fresh smell of rain!",
    WeatherCondition.STORMY.value: "⛈️ Storm warning! Temperature is {t}°C. Best to stay indoors for now.",
    WeatherCondition.WINDY.value: "💨 Quite windy today at {t}°C. Hold onto your hats!",
    WeatherCondition.FOGGY.value: "🌫️ Foggy conditions with {t}°C. Visibility might be low, so take care.",
    WeatherCondition.SNOWY.value: "❄️ It's snowing! Temperature is {t}°C. Bundle up and enjoy the winter wonderland!",
}
_DEFAULT_GREETING = "Current temperature is {t}°C."

GENERAL_TRAVEL_TIPS = (
    "🗺️ Download offline maps - mobile networks can be spotty in some areas.",
    "💵 Keep small change handy for local transport and street vendors.",
)

GENERAL_SAFETY_TIPS = (
    "📱 Save local emergency numbers: Police 100, Ambulance 108.",
    "🎒 Keep valuables secure, especially in crowded areas.",
)

GENERAL_LOCAL_TIPS = (
    "🙏 A friendly \"Namaste\" goes a long way with locals.",
    "🛍️ Bargain respectfully at local markets - it's expected!",
    "🕐 Many shops close for afternoon siesta (2-5 PM) in smaller towns.",
)


def _weather_greeting(condition: str, temperature: int) -> str:
    """Condition greeting, with a plain fallback for unknown conditions."""
    return _CONDITION_GREETINGS.get(condition, _DEFAULT_GREETING).format(t=temperature)


def _seasonal_advice(temperature: int, humidity: int) -> list[str]:
    tips: list[str] = []

    if temperature > 35:
        tips.append("🥵 It's quite hot! Stay hydrated and avoid peak afternoon sun (12-4 PM).")
        tips.append("💧 Carry a water bottle - you'll need at least 2-3 liters today.")
    elif temperature > 28:
        tips.append("🌡️ Warm weather - light cotton clothes recommended.")
        tips.append("🧴 Don't forget sunscreen if you're out for long.")
    # very cold is checked before chilly so the most severe band wins
    elif temperature < 5:
        tips.append("🥶 Quite cold today! Thermal wear recommended.")
    elif temperature < 15:
        tips.append("🧥 It's chilly! Bring layers and a warm jacket.")

    if humidity > 80:
        tips.append("💦 High humidity - you might feel sticky. Wear breathable fabrics.")

    return tips


def _travel_tips(condition: str, temperature: int, wind_speed: int) -> list[str]:
    tips: list[str] = []

    if condition in (_RAINY, _STORMY):
        tips.append("🚕 Better to use cabs or auto-rickshaws today rather than two-wheelers.")
        tips.append("🚌 Public buses might be delayed due to weather. Plan extra time.")
    elif condition == _SUNNY and temperature < 32:
        tips.append("🛺 Great day for an auto-rickshaw ride to explore the city!")
        tips.append("🚶 Perfect weather for walking tours of the old city areas.")

    if condition == _FOGGY:
        tips.append("🚗 If driving, use fog lights and maintain safe distance.")
        tips.append("✈️ Check flight status - fog might cause delays.")

    if wind_speed > 30:
        tips.append("🏍️ Two-wheeler riders be careful - strong crosswinds on highways.")

    tips.extend(GENERAL_TRAVEL_TIPS)
    return tips


def _safety_tips(condition: str, temperature: int, rain_probability: int) -> list[str]:
    tips: list[str] = []

    if condition == _STORMY:
        tips.append("⚠️ Avoid open areas, trees, and metal structures during lightning.")
        tips.append("🏠 If outdoors, seek shelter immediately.")

    if rain_probability > 70:
        tips.append("🌊 Watch out for waterlogged roads - avoid if possible.")
        tips.append("⚡ Stay away from electrical poles and wires during rain.")

    if temperature > 38:
        tips.append("🏥 Signs of heat stroke: dizziness, nausea. Seek shade and water immediately.")
        tips.append("👶 Keep elderly and children indoors during afternoon hours.")

    if condition == _FOGGY:
        tips.append("👀 Visibility is low - walk carefully near roads.")

    tips.extend(GENERAL_SAFETY_TIPS)
    return tips


def _local_tips(condition: str, temperature: int) -> list[str]:
    tips: list[str] = []

    if condition == _SUNNY and temperature > 25:
        tips.append("🍧 Try local ice gola (shaved ice) or sugarcane juice from street vendors!")
        tips.append("☕ Evening chai at a local tapri (tea stall) is a must-try experience.")

    if condition == _RAINY:
        tips.append("🍵 Hot chai and pakoras during rain - a local favorite combo!")
        tips.append("🌧️ Monsoon brings out the best street food - try corn on the cob!")

    if temperature < 20:
        tips.append("🍲 Perfect weather for local hot dishes and soups.")

    tips.extend(GENERAL_LOCAL_TIPS)
    return tips


def _best_times(condition: str, temperature: int) -> list[str]:
    tips: list[str] = []

    if temperature > 30:
        tips.append("🌅 Best time to explore: Early morning (6-9 AM) or evening (5-7 PM).")
        tips.append("🌙 Night markets and food streets come alive after 7 PM.")
    elif temperature < 15:
        tips.append("☀️ Best time to be outdoors: Mid-day when it's warmest (11 AM - 3 PM).")
    else:
        tips.append("🎉 Great weather! You can explore comfortably throughout the day.")

    if condition == _SUNNY:
        tips.append("📸 Golden hour photography: 6-7 AM and 5-6 PM for best light.")

    return tips


def generate_travel_advisory(snapshot: WeatherSnapshot) -> TravelAdvisory:
    """Pure function: build the five advisory lists for a snapshot."""
    condition = condition_key(snapshot.condition)
    temperature = snapshot.temperature_c

    return TravelAdvisory(
        weather=[
            _weather_greeting(condition, temperature),
            *_seasonal_advice(temperature, snapshot.humidity_pct),
        ],
        travel=_travel_tips(condition, temperature, snapshot.wind_speed_kmh),
        safety=_safety_tips(condition, temperature, snapshot.rain_probability_pct),
        local_tips=_local_tips(condition, temperature),
        best_times=_best_times(condition, temperature),
    )


def welcome_message(location: str) -> str:
    """Opening line of the local-guide panel."""
    return (
        f"🙏 Namaste! Welcome to {location}! I'm your local guide. "
        "Let me share some tips to make your visit wonderful!"
    )


def community_prompt() -> str:
    return "💬 Have you visited this place? Share your tips and experiences to help fellow travelers!"
