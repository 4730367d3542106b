"""Error kinds shared by the client, normalizer and screens.

Every error carries a fixed, user-facing message. Screens show that
message as-is; the exception text itself is only for logs.
"""

from __future__ import annotations

FETCH_ERROR_MESSAGE = "Failed to fetch weather data"
LOCATION_ERROR_MESSAGE = "Please enable location access or search for a city."


class WeatherAppError(Exception):
    """Base class for failures a screen turns into its error state."""

    user_message: str = FETCH_ERROR_MESSAGE


class LocationDenied(WeatherAppError):
    """Raised when no usable location is available."""

    user_message = LOCATION_ERROR_MESSAGE


class NetworkFailure(WeatherAppError):
    """Raised on transport errors, timeouts, non-2xx responses or bad JSON."""


class MalformedResponse(WeatherAppError):
    """Raised when a response parses but lacks required fields."""


class InsufficientForecastError(MalformedResponse):
    """Raised when fewer forecast days are present than an operation needs."""
