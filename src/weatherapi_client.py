"""WeatherAPI.com client for current conditions and forecasts.

Two endpoints are used:
1. /current.json?key=...&q=...&aqi=... -> current conditions
2. /forecast.json?key=...&q=...&days=...&aqi=yes -> current + daily forecast

`q` is either a city name or a "lat,lon" string. The raw JSON is returned
unchanged; see normalizer.py for the conversion to internal records.
Each call makes a single attempt; retrying is left to the user.
"""

from __future__ import annotations

import logging

import httpx

from src import config
from src.errors import NetworkFailure

logger = logging.getLogger(__name__)


def coordinates_query(latitude: float, longitude: float) -> str:
    """Format coordinates as the API's "lat,lon" query value."""
    return f"{round(latitude, 4)},{round(longitude, 4)}"


def _create_client() -> httpx.Client:
    """Create an httpx client configured for WeatherAPI.com."""
    return httpx.Client(
        base_url=config.WEATHER_API_BASE_URL,
        headers={"Accept": "application/json"},
        timeout=config.WEATHER_API_TIMEOUT,
    )


def _api_error_message(response: httpx.Response) -> str:
    """Pull the API's own error text out of an error body, if any."""
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return ""


def _request(client: httpx.Client, path: str, params: dict) -> dict:
    """Make a single GET request and return the parsed JSON body.

    Args:
        client: The httpx client to use.
        path: Endpoint path relative to the base URL.
        params: Query parameters (the API key is added here).

    Returns:
        Parsed JSON response as a dict.

    Raises:
        NetworkFailure: On timeouts, HTTP errors, non-200 statuses or
            invalid JSON.
    """
    query = {"key": config.get_weather_api_key(), **params}
    logger.info("GET %s q=%s", path, params.get("q"))
    try:
        response = client.get(path, params=query)
    except httpx.TimeoutException:
        logger.warning("Request to %s timed out", path)
        raise NetworkFailure("Request to WeatherAPI timed out.")
    except httpx.HTTPError as exc:
        logger.warning("HTTP error for %s: %s", path, exc)
        raise NetworkFailure(f"HTTP error communicating with WeatherAPI: {exc}")

    if response.status_code != 200:
        detail = _api_error_message(response)
        logger.error(
            "WeatherAPI returned HTTP %s for %s: %s",
            response.status_code, path, detail or "no detail",
        )
        raise NetworkFailure(
            f"Unexpected response from WeatherAPI (HTTP {response.status_code})."
            + (f" {detail}" if detail else "")
        )

    try:
        data = response.json()
    except ValueError:
        logger.error("Invalid JSON from %s", path)
        raise NetworkFailure("Received invalid JSON from WeatherAPI.")

    if not isinstance(data, dict):
        raise NetworkFailure("Received invalid JSON from WeatherAPI.")
    return data


def get_current(query: str, aqi: bool = False) -> dict:
    """Fetch current conditions for a city name or "lat,lon" query.

    Raises:
        NetworkFailure: On any API communication error.
    """
    client = _create_client()
    try:
        return _request(
            client,
            "/current.json",
            {"q": query, "aqi": "yes" if aqi else "no"},
        )
    finally:
        client.close()


def get_forecast(query: str, days: int) -> dict:
    """Fetch current conditions plus a `days`-day forecast.

    Args:
        query: City name or "lat,lon" string.
        days: Number of forecast days to request.

    Returns:
        The raw forecast response.

    Raises:
        NetworkFailure: On any API communication error.
    """
    client = _create_client()
    try:
        return _request(
            client,
            "/forecast.json",
            {"q": query, "days": days, "aqi": "yes"},
        )
    finally:
        client.close()
