"""Conversational weather Q&A powered by the Anthropic Claude API.

Takes the normalized WeatherAPI data as context and answers user questions
about the weather in natural language (e.g., "Do I need a jacket
tomorrow?", "Which day this week is best for a picnic?").
"""

from __future__ import annotations

import logging

import anthropic

from src import config
from src.advisory import current_advisory, forecast_advisory
from src.conditions import classify
from src.errors import InsufficientForecastError
from src.normalizer import NormalizedWeather, display_value

logger = logging.getLogger(__name__)


class ChatError(Exception):
    """Raised when the chat API call fails."""


_SYSTEM_PROMPT = """\
You are a helpful weather assistant. You answer questions about the weather
based on the forecast data provided below (temperatures in Celsius, wind in km/h).

Rules:
- Base your answers ONLY on the data provided. Do not make up weather information.
- Be specific about days, temperatures, and conditions when the data supports it.
- If the data does not contain enough information to answer a question, say so honestly.
- Keep answers concise and conversational.
- For activity-related questions, consider temperature, rain chance, and wind.

Location: {location_name}{country}

--- CURRENT CONDITIONS ---
{current_conditions}

--- DAILY FORECAST ---
{daily_forecast}

--- ADVISORIES ---
{advisories}
"""


def _build_current_context(weather: NormalizedWeather) -> str:
    """Format the current conditions as readable text."""
    c = weather.current
    return (
        f"{c.condition}, {c.temperature_c}C (feels like {c.feels_like_c}C), "
        f"humidity {c.humidity}%, wind {c.wind_kph} km/h {c.wind_direction}, "
        f"pressure {c.pressure_mb} mb, visibility {c.visibility_km} km, "
        f"UV {c.uv_index}, air quality (US EPA) {display_value(c.air_quality)}"
    )


def _build_daily_context(weather: NormalizedWeather) -> str:
    """Format the forecast days as readable text."""
    lines = []
    for d in weather.days:
        lines.append(
            f"{d.date}: {d.condition}, low {d.min_temp_c}C / high {d.max_temp_c}C "
            f"(avg {d.avg_temp_c}C), rain chance {d.rain_chance}%, "
            f"max wind {d.max_wind_kph} km/h"
        )
    return "\n".join(lines) if lines else "Daily forecast not available."


def _build_advisory_context(weather: NormalizedWeather) -> str:
    c = weather.current
    lines = [
        current_advisory(c.temperature_c, classify(c.condition), c.humidity, c.wind_kph)
    ]
    try:
        lines.append(forecast_advisory(weather.days))
    except InsufficientForecastError:
        pass
    return "\n".join(lines)


def chat_available() -> bool:
    """Whether the Q&A section should be offered at all."""
    return config.CHAT_ENABLED and bool(config.get_anthropic_api_key())


def ask_weather_question(
    question: str,
    weather: NormalizedWeather,
    chat_history: list[dict] | None = None,
) -> str:
    """Ask a natural-language question about the loaded weather.

    Args:
        question: The user's question (e.g., "Will it rain tomorrow?").
        weather: Normalized weather for the location being viewed.
        chat_history: Optional list of prior messages as
            [{"role": "user", "content": "..."}, {"role": "assistant", "content": "..."}].

    Returns:
        Claude's text response.

    Raises:
        ChatError: If the API key is missing or the API call fails.
    """
    api_key = config.get_anthropic_api_key()
    if not api_key:
        raise ChatError(
            "ANTHROPIC_API_KEY is not set. "
            "Please set it in your environment to use the chat feature."
        )

    system = _SYSTEM_PROMPT.format(
        location_name=weather.location_name,
        country=f", {weather.country}" if weather.country else "",
        current_conditions=_build_current_context(weather),
        daily_forecast=_build_daily_context(weather),
        advisories=_build_advisory_context(weather),
    )

    messages = []
    if chat_history:
        messages.extend(chat_history)
    messages.append({"role": "user", "content": question})

    try:
        client = anthropic.Anthropic(api_key=api_key)
        response = client.messages.create(
            model=config.ANTHROPIC_MODEL,
            max_tokens=config.CHAT_MAX_TOKENS,
            system=system,
            messages=messages,
        )
        return response.content[0].text
    except anthropic.APIError as exc:
        logger.error("Weather chat request failed: %s", exc)
        raise ChatError(f"Weather chat request failed: {exc}")
