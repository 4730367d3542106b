"""Centralized configuration loaded from environment variables.

All settings are read from environment variables with sensible defaults.
API keys are also looked up in Streamlit secrets (st.secrets) so the app
works on Streamlit Cloud without hardcoded values.
"""

import os


def _get_secret(key: str) -> str:
    """Read a secret from st.secrets, falling back to the environment.

    Must be called at runtime (not import time) because Streamlit
    Cloud only makes st.secrets available after the app starts.
    """
    try:
        import streamlit as st
        if hasattr(st, "secrets") and key in st.secrets:
            return str(st.secrets[key])
    except Exception:
        pass
    return os.environ.get(key, "")


def get_weather_api_key() -> str:
    """Get the WeatherAPI.com key lazily.

    An empty key is not an error here: the API rejects the request and
    the user sees the standard fetch-error message.
    """
    return _get_secret("WEATHER_API_KEY")


def get_anthropic_api_key() -> str:
    """Get the Anthropic API key lazily so st.secrets is ready."""
    return _get_secret("ANTHROPIC_API_KEY")


def _get_int(key: str, default: int) -> int:
    """Read an integer environment variable with a default."""
    return int(os.environ.get(key, str(default)))


def _get_bool(key: str, default: bool) -> bool:
    """Read a yes/no environment variable (1, true, yes, on) with a default."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# WeatherAPI.com
WEATHER_API_BASE_URL: str = os.environ.get(
    "WEATHER_API_BASE_URL", "https://api.weatherapi.com/v1"
)
WEATHER_API_TIMEOUT: int = _get_int("WEATHER_API_TIMEOUT", 10)

# Days requested by the dashboard strip and by the forecast page
CURRENT_FORECAST_DAYS: int = _get_int("CURRENT_FORECAST_DAYS", 5)
FORECAST_DAYS: int = _get_int("FORECAST_DAYS", 7)

# Geocoding (Nominatim) for "share location"
NOMINATIM_USER_AGENT: str = os.environ.get(
    "NOMINATIM_USER_AGENT", "weathernow-dashboard"
)
NOMINATIM_TIMEOUT: int = _get_int("NOMINATIM_TIMEOUT", 10)

# Weather Q&A is off unless CHAT_ENABLED is set and a key is configured
CHAT_ENABLED: bool = _get_bool("CHAT_ENABLED", False)

# Anthropic API: model and tokens from env vars, key read lazily
ANTHROPIC_MODEL: str = os.environ.get("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
CHAT_MAX_TOKENS: int = _get_int("CHAT_MAX_TOKENS", 1024)

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
