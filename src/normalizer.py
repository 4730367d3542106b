"""Conversion of raw WeatherAPI.com payloads into internal records.

The raw response is owned by the API; the records here are what the
screens render. Temperatures stay in Celsius throughout and are only
converted for display (see format_temperature).

Optional values the API may omit (air quality, precipitation, astronomy)
become None, which the UI renders as "N/A" rather than zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.errors import MalformedResponse

UNAVAILABLE = "N/A"


# ---------------------------------------------------------------------------
# Unit conversion helpers
# ---------------------------------------------------------------------------

def celsius_to_fahrenheit(celsius: float | None) -> int | None:
    """Convert Celsius to Fahrenheit, rounding to nearest integer."""
    if celsius is None:
        return None
    return round(celsius * 9 / 5 + 32)


def format_temperature(celsius: float | None, unit: str = "C") -> str:
    """Format a Celsius value for display in the chosen unit ("C" or "F")."""
    if celsius is None:
        return UNAVAILABLE
    if unit.upper() == "F":
        return f"{celsius_to_fahrenheit(celsius)}\u00b0F"
    return f"{round(celsius)}\u00b0C"


def display_value(value: Any, suffix: str = "") -> str:
    """Render an optional value, using the unavailable marker for None."""
    if value is None:
        return UNAVAILABLE
    return f"{value}{suffix}"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Astro:
    """Astronomical data for one forecast day.

    Attributes:
        sunrise: Local sunrise time (e.g., "06:42 AM").
        sunset: Local sunset time.
        moon_phase: Moon phase name (e.g., "Waxing Gibbous").
        moon_illumination: Illuminated fraction in percent, as text.
    """

    sunrise: str = ""
    sunset: str = ""
    moon_phase: str = ""
    moon_illumination: str = ""


@dataclass(frozen=True)
class CurrentConditions:
    """Current weather for the requested location.

    Attributes:
        city: Location name reported by the API.
        country: Country name (may be empty).
        temperature_c: Air temperature in Celsius.
        condition: Free-text condition (e.g., "Patchy rain possible").
        humidity: Relative humidity percentage.
        wind_kph: Wind speed in km/h.
        pressure_mb: Pressure in millibars.
        visibility_km: Visibility in km.
        feels_like_c: Apparent temperature in Celsius.
        wind_direction: Compass direction (e.g., "NW").
        uv_index: UV index.
        air_quality: US EPA index, None when unavailable.
        precipitation_mm: Precipitation in mm, None when unavailable.
        cloud_cover: Cloud cover percentage, None when unavailable.
        icon_url: Condition icon URL supplied by the API.
        last_updated: Local time of the observation.
        sunrise: Today's sunrise, when the payload carries a forecast.
        sunset: Today's sunset, when the payload carries a forecast.
        moon_phase: Today's moon phase, when the payload carries a forecast.
    """

    city: str
    country: str
    temperature_c: float
    condition: str
    humidity: float
    wind_kph: float
    pressure_mb: float
    visibility_km: float
    feels_like_c: float
    wind_direction: str
    uv_index: float
    air_quality: int | None = None
    precipitation_mm: float | None = None
    cloud_cover: float | None = None
    icon_url: str = ""
    last_updated: str = ""
    sunrise: str | None = None
    sunset: str | None = None
    moon_phase: str | None = None


@dataclass(frozen=True)
class ForecastDay:
    """One day of the forecast, in the order the API returned it."""

    date: str
    max_temp_c: float
    min_temp_c: float
    avg_temp_c: float
    condition: str
    rain_chance: float
    max_wind_kph: float
    uv: float | None = None
    astro: Astro = field(default_factory=Astro)


@dataclass(frozen=True)
class NormalizedWeather:
    """Everything one screen renders from a single response."""

    location_name: str
    country: str
    current: CurrentConditions
    days: list[ForecastDay] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------

def _require(data: Any, *path: str) -> Any:
    """Walk `path` into nested dicts, raising MalformedResponse if absent."""
    value = data
    for key in path:
        if not isinstance(value, dict) or value.get(key) is None:
            raise MalformedResponse(
                f"Weather response is missing '{'.'.join(path)}'."
            )
        value = value[key]
    return value


def _require_number(data: Any, *path: str) -> float:
    """Like _require, but the value must be an int or float."""
    value = _require(data, *path)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedResponse(
            f"Weather response field '{'.'.join(path)}' is not a number: {value!r}."
        )
    return value


def _require_text(data: Any, *path: str) -> str:
    value = _require(data, *path)
    if not isinstance(value, str):
        raise MalformedResponse(
            f"Weather response field '{'.'.join(path)}' is not text: {value!r}."
        )
    return value


def _optional_int(data: Any, *path: str) -> int | None:
    """Read an optional integer index; absent or non-numeric reads as None."""
    value = _optional(data, *path)
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional(data: Any, *path: str) -> Any:
    """Walk `path` into nested dicts, returning None if any step is absent."""
    value = data
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _forecast_days_raw(raw: dict) -> list:
    days = _optional(raw, "forecast", "forecastday")
    if not isinstance(days, list):
        return []
    return days


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _parse_astro(raw_day: dict) -> Astro:
    astro = raw_day.get("astro")
    if not isinstance(astro, dict):
        return Astro()
    return Astro(
        sunrise=_text(astro.get("sunrise")),
        sunset=_text(astro.get("sunset")),
        moon_phase=_text(astro.get("moon_phase")),
        moon_illumination=_text(astro.get("moon_illumination")),
    )


def normalize_current(raw: dict) -> CurrentConditions:
    """Flatten the `location` and `current` blocks of a response.

    Works for both the current and the forecast endpoints; when the
    payload carries forecast days, today's astronomy is copied over.

    Raises:
        MalformedResponse: If `location`, `current` or a required field
            is missing or has the wrong type.
    """
    _require(raw, "location")
    current = _require(raw, "current")

    today_astro = None
    days = _forecast_days_raw(raw)
    if days and isinstance(days[0], dict):
        today_astro = _parse_astro(days[0])

    return CurrentConditions(
        city=_require_text(raw, "location", "name"),
        country=_text(_optional(raw, "location", "country")),
        temperature_c=_require_number(current, "temp_c"),
        condition=_require_text(current, "condition", "text"),
        humidity=_require_number(current, "humidity"),
        wind_kph=_require_number(current, "wind_kph"),
        pressure_mb=_require_number(current, "pressure_mb"),
        visibility_km=_require_number(current, "vis_km"),
        feels_like_c=_require_number(current, "feelslike_c"),
        wind_direction=_require_text(current, "wind_dir"),
        uv_index=_require_number(current, "uv"),
        air_quality=_optional_int(current, "air_quality", "us-epa-index"),
        precipitation_mm=_optional(current, "precip_mm"),
        cloud_cover=_optional(current, "cloud"),
        icon_url=_text(_optional(current, "condition", "icon")),
        last_updated=_text(_optional(current, "last_updated")),
        sunrise=today_astro.sunrise if today_astro else None,
        sunset=today_astro.sunset if today_astro else None,
        moon_phase=today_astro.moon_phase if today_astro else None,
    )


def normalize_forecast(raw: dict) -> list[ForecastDay]:
    """Convert `forecast.forecastday` into ForecastDay records.

    Order is preserved exactly as returned; nothing is sorted or merged.

    Raises:
        MalformedResponse: If there are no forecast days or a day lacks
            a required field or carries one of the wrong type.
    """
    raw_days = _forecast_days_raw(raw)
    if not raw_days:
        raise MalformedResponse("Weather response contains no forecast days.")

    days = []
    for d in raw_days:
        day = _require(d, "day")
        days.append(
            ForecastDay(
                date=_require_text(d, "date"),
                max_temp_c=_require_number(day, "maxtemp_c"),
                min_temp_c=_require_number(day, "mintemp_c"),
                avg_temp_c=_require_number(day, "avgtemp_c"),
                condition=_require_text(day, "condition", "text"),
                rain_chance=_require_number(day, "daily_chance_of_rain"),
                max_wind_kph=_require_number(day, "maxwind_kph"),
                uv=_optional(day, "uv"),
                astro=_parse_astro(d),
            )
        )
    return days


def normalize(raw: dict) -> NormalizedWeather:
    """Normalize a forecast response into current conditions plus days."""
    current = normalize_current(raw)
    return NormalizedWeather(
        location_name=current.city,
        country=current.country,
        current=current,
        days=normalize_forecast(raw),
    )
