"""Location resolution for the dashboard and forecast pages.

Coordinates reach the app as `lat`/`lon` URL query parameters (set by the
"Share location" action). A missing or non-numeric parameter reads as 0,
and 0 means "no location available". Typed place names are turned into
coordinates with the Nominatim geocoder via geopy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.geocoders import Nominatim

from src import config
from src.errors import LocationDenied

logger = logging.getLogger(__name__)


class GeocodingError(LocationDenied):
    """Raised when a place name cannot be resolved to coordinates."""


@dataclass(frozen=True)
class GeoLocation:
    """A resolved geographic location with coordinates.

    Attributes:
        latitude: Decimal latitude.
        longitude: Decimal longitude.
        display_name: Human-readable location name.
    """

    latitude: float
    longitude: float
    display_name: str


def parse_coordinate(value: str | float | None) -> float:
    """Parse a query-parameter coordinate, defaulting to 0.0.

    Mirrors the URL contract: absent, empty or non-numeric values read
    as 0, which downstream code treats as "no location".
    """
    if value is None:
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if parsed != parsed:  # NaN
        return 0.0
    return parsed


def has_location(latitude: float, longitude: float) -> bool:
    """Whether the coordinates describe a real location (neither is 0)."""
    return bool(latitude) and bool(longitude)


def geocode_location(query: str) -> GeoLocation:
    """Convert a user-provided place name to coordinates.

    Args:
        query: A city, address or postal code.

    Returns:
        GeoLocation with latitude, longitude, and display name.

    Raises:
        GeocodingError: If the query is empty, the geocoder is unavailable,
            or nothing matches.
    """
    query = query.strip()
    if not query:
        raise GeocodingError("Please enter a location.")

    try:
        geolocator = Nominatim(
            user_agent=config.NOMINATIM_USER_AGENT,
            timeout=config.NOMINATIM_TIMEOUT,
        )
        result = geolocator.geocode(query, exactly_one=True)
    except GeocoderTimedOut:
        logger.warning("Geocoding timed out for %r", query)
        raise GeocodingError("Location lookup timed out. Please try again.")
    except GeocoderServiceError as exc:
        logger.warning("Geocoding service error for %r: %s", query, exc)
        raise GeocodingError("Location lookup is unavailable right now.")

    if result is None:
        raise GeocodingError(
            "Could not find that location. Try a city name like 'Paris'."
        )

    logger.info("Geocoded %r to %.4f,%.4f", query, result.latitude, result.longitude)
    return GeoLocation(
        latitude=result.latitude,
        longitude=result.longitude,
        display_name=result.address,
    )
