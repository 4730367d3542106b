"""Short text advisories assembled from threshold-gated fragments.

Two independent generators:

- current_advisory: what to expect right now, from temperature,
  condition, humidity and wind.
- forecast_advisory: what changes tomorrow compared with today.

Each fragment is checked on its own; several can fire together. Both
functions are pure, so the same inputs always give the same text.
"""

from __future__ import annotations

from typing import Sequence

from src.conditions import Category
from src.errors import InsufficientForecastError
from src.normalizer import ForecastDay

# Current-conditions fragments, in output order
HEAT_FRAGMENT = "\U0001f321\ufe0f It's very hot! Stay hydrated and keep the AC on."
COLD_FRAGMENT = "\u2744\ufe0f It's chilly, wear warm clothes."
UMBRELLA_FRAGMENT = "\u2614 It's raining, keep an umbrella with you!"
POSSIBLE_RAIN_FRAGMENT = "\u2601\ufe0f Clouds are gathering, rain is possible."
HUMIDITY_FRAGMENT = "\U0001f4a7 Humidity is high, it may feel uncomfortable."
HIGH_WIND_FRAGMENT = "\U0001f4a8 Strong winds are blowing!"
PLEASANT_FALLBACK = "\U0001f308 The weather is pleasant!"

# Day-over-day fragments, in output order
FORECAST_HEADER = "\U0001f914 Weather Prediction:"
WARMING_FRAGMENT = "\U0001f321\ufe0f Temperature will rise tomorrow!"
COOLING_FRAGMENT = "\u2744\ufe0f Expect cooler weather tomorrow!"
HIGH_RAIN_FRAGMENT = "\U0001f327\ufe0f High chance of rain tomorrow!"
MODERATE_RAIN_FRAGMENT = "\u2614 Keep an umbrella handy!"
WINDY_FRAGMENT = "\U0001f4a8 Expect windy conditions!"

HOT_ABOVE_C = 30
COLD_BELOW_C = 15
HUMID_ABOVE_PCT = 80
WINDY_NOW_ABOVE_KPH = 20

TEMP_SWING_C = 2
HIGH_RAIN_ABOVE_PCT = 70
MODERATE_RAIN_ABOVE_PCT = 30
WINDY_TOMORROW_ABOVE_KPH = 30


def current_advisory(
    temperature_c: float,
    category: Category,
    humidity: float,
    wind_kph: float,
) -> str:
    """Build the advisory for current conditions.

    Args:
        temperature_c: Air temperature in Celsius.
        category: Classified condition.
        humidity: Relative humidity percentage.
        wind_kph: Wind speed in km/h.

    Returns:
        Triggered fragments joined by single spaces, or the pleasant
        weather fallback when nothing triggered.
    """
    fragments: list[str] = []
    if temperature_c > HOT_ABOVE_C:
        fragments.append(HEAT_FRAGMENT)
    if temperature_c < COLD_BELOW_C:
        fragments.append(COLD_FRAGMENT)
    if category == Category.RAIN:
        fragments.append(UMBRELLA_FRAGMENT)
    if category == Category.CLOUDY:
        fragments.append(POSSIBLE_RAIN_FRAGMENT)
    if humidity > HUMID_ABOVE_PCT:
        fragments.append(HUMIDITY_FRAGMENT)
    if wind_kph > WINDY_NOW_ABOVE_KPH:
        fragments.append(HIGH_WIND_FRAGMENT)
    return " ".join(fragments) or PLEASANT_FALLBACK


def forecast_advisory(days: Sequence[ForecastDay]) -> str:
    """Build the day-over-day advisory from the first two forecast days.

    The header is always present. Unlike current_advisory there is no
    fallback sentence: with nothing to report the result is the header.

    Raises:
        InsufficientForecastError: If fewer than two days are given.
    """
    if len(days) < 2:
        raise InsufficientForecastError(
            f"Day-over-day prediction needs 2 forecast days, got {len(days)}."
        )
    today, tomorrow = days[0], days[1]

    fragments: list[str] = []
    if tomorrow.avg_temp_c > today.avg_temp_c + TEMP_SWING_C:
        fragments.append(WARMING_FRAGMENT)
    elif tomorrow.avg_temp_c < today.avg_temp_c - TEMP_SWING_C:
        fragments.append(COOLING_FRAGMENT)

    if tomorrow.rain_chance > HIGH_RAIN_ABOVE_PCT:
        fragments.append(HIGH_RAIN_FRAGMENT)
    elif tomorrow.rain_chance > MODERATE_RAIN_ABOVE_PCT:
        fragments.append(MODERATE_RAIN_FRAGMENT)

    if tomorrow.max_wind_kph > WINDY_TOMORROW_ABOVE_KPH:
        fragments.append(WINDY_FRAGMENT)

    if not fragments:
        return FORECAST_HEADER
    return FORECAST_HEADER + "\n" + " ".join(fragments)
