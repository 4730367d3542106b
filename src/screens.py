"""Screen controllers for the dashboard, the forecast page and the header.

Controllers own the fetch lifecycle of their screen and turn normalized
weather into view records. They hold no Streamlit state, so the same
logic runs under `streamlit run` and in tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable

from src import config, weatherapi_client
from src.advisory import current_advisory, forecast_advisory
from src.conditions import Category, classify
from src.errors import (
    FETCH_ERROR_MESSAGE,
    InsufficientForecastError,
    LOCATION_ERROR_MESSAGE,
    LocationDenied,
    WeatherAppError,
)
from src.fetch_state import FetchState, RequestTracker
from src.geocoding import has_location
from src.normalizer import (
    ForecastDay,
    NormalizedWeather,
    display_value,
    normalize,
    normalize_current,
)
from src.theme import (
    DEFAULT_GRADIENT,
    select_animation,
    select_header_theme,
    select_icon,
    select_theme,
)

logger = logging.getLogger(__name__)

CITY_REQUIRED_MESSAGE = "Please enter a city name."
FORECAST_ERROR_MESSAGE = "Failed to fetch forecast data \U0001f614"
SHARE_LOCATION_PROMPT = "Please share your location first! \U0001f4cd"
SHARE_LOCATION_HINT = "Use the Share location button to see the forecast \u26c5"


# ---------------------------------------------------------------------------
# View records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CurrentView:
    """Everything the dashboard renders for one successful fetch."""

    weather: NormalizedWeather
    category: Category
    theme: str
    icon: str
    advisory: str
    animation: str | None = None


@dataclass(frozen=True)
class DayCard:
    """One forecast day with its display extras."""

    day: ForecastDay
    weekday: str
    icon: str


@dataclass(frozen=True)
class Highlights:
    """Today's highlights on the forecast page."""

    sunrise: str
    sunset: str
    moon_phase: str
    moon_illumination: str
    air_quality: str
    wind_kph: float


@dataclass(frozen=True)
class ForecastView:
    """Everything the forecast page renders for one successful fetch.

    Attributes:
        weather: The normalized response.
        cards: One DayCard per forecast day, in API order.
        advisory: Day-over-day advisory, None with fewer than two days.
        highlights: Sun, moon, air quality and wind for today.
        category: Category of today's current conditions.
    """

    weather: NormalizedWeather
    cards: list[DayCard] = field(default_factory=list)
    advisory: str | None = None
    highlights: Highlights | None = None
    category: Category = Category.UNCLASSIFIED


def weekday_label(day_date: str) -> str:
    """Short weekday for an ISO date ("2026-02-22" -> "Sun")."""
    try:
        return date.fromisoformat(day_date).strftime("%a")
    except ValueError:
        return day_date


def build_current_view(weather: NormalizedWeather) -> CurrentView:
    current = weather.current
    category = classify(current.condition)
    return CurrentView(
        weather=weather,
        category=category,
        theme=select_theme(category),
        icon=select_icon(category),
        advisory=current_advisory(
            current.temperature_c, category, current.humidity, current.wind_kph
        ),
        animation=select_animation(category),
    )


def build_forecast_view(weather: NormalizedWeather) -> ForecastView:
    """Derive icons, the day-over-day advisory and highlights."""
    cards = [
        DayCard(day=d, weekday=weekday_label(d.date), icon=select_icon(classify(d.condition)))
        for d in weather.days
    ]

    try:
        advisory = forecast_advisory(weather.days)
    except InsufficientForecastError as exc:
        logger.info("No day-over-day advisory: %s", exc)
        advisory = None

    highlights = None
    if weather.days:
        astro = weather.days[0].astro
        highlights = Highlights(
            sunrise=astro.sunrise,
            sunset=astro.sunset,
            moon_phase=astro.moon_phase,
            moon_illumination=astro.moon_illumination,
            air_quality=display_value(weather.current.air_quality),
            wind_kph=weather.current.wind_kph,
        )

    return ForecastView(
        weather=weather,
        cards=cards,
        advisory=advisory,
        highlights=highlights,
        category=classify(weather.current.condition),
    )


# ---------------------------------------------------------------------------
# Controllers
# ---------------------------------------------------------------------------

class _Screen:
    """Shared fetch-normalize-settle cycle for one screen."""

    name = "screen"
    fetch_error_message = FETCH_ERROR_MESSAGE

    def __init__(self, fetch: Callable[..., dict] | None = None) -> None:
        self.tracker = RequestTracker(self.name)
        self._fetch = fetch or weatherapi_client.get_forecast

    @property
    def state(self) -> FetchState:
        return self.tracker.state

    def _request(self, query: str) -> dict:
        raise NotImplementedError

    def _parse(self, raw: dict) -> NormalizedWeather:
        return normalize(raw)

    def _build(self, weather: NormalizedWeather):
        raise NotImplementedError

    def _load(self, query: str) -> FetchState:
        seq = self.tracker.begin()
        try:
            view = self._build(self._parse(self._request(query)))
        except LocationDenied as exc:
            logger.warning("%s: location unavailable: %s", self.name, exc)
            self.tracker.fail(seq, exc.user_message)
        except WeatherAppError as exc:
            logger.warning("%s: fetch for %r failed: %s", self.name, query, exc)
            self.tracker.fail(seq, self.fetch_error_message)
        else:
            self.tracker.succeed(seq, view)
        return self.tracker.state


class CurrentWeatherScreen(_Screen):
    """Dashboard: current conditions plus a short forecast strip.

    An empty search sets `validation_message` and leaves the state, and
    whatever weather it holds, untouched.
    """

    name = "current"

    def __init__(self, fetch: Callable[..., dict] | None = None) -> None:
        super().__init__(fetch)
        self.validation_message = ""

    def _request(self, query: str) -> dict:
        return self._fetch(query, config.CURRENT_FORECAST_DAYS)

    def _build(self, weather: NormalizedWeather) -> CurrentView:
        return build_current_view(weather)

    def load_city(self, city: str) -> FetchState:
        """Fetch weather for a searched city name."""
        city = (city or "").strip()
        if not city:
            self.validation_message = CITY_REQUIRED_MESSAGE
            return self.state
        self.validation_message = ""
        return self._load(city)

    def load_coordinates(self, latitude: float, longitude: float) -> FetchState:
        """Fetch weather for shared coordinates."""
        self.validation_message = ""
        if not has_location(latitude, longitude):
            self.tracker.fail(self.tracker.begin(), LOCATION_ERROR_MESSAGE)
            return self.state
        return self._load(weatherapi_client.coordinates_query(latitude, longitude))

    @property
    def theme(self) -> str:
        if self.state.is_success:
            return self.state.data.theme
        return DEFAULT_GRADIENT


class TodayScreen(CurrentWeatherScreen):
    """Home page: current conditions only, from the current-conditions endpoint."""

    name = "today"

    def __init__(self, fetch: Callable[..., dict] | None = None) -> None:
        super().__init__(fetch or weatherapi_client.get_current)

    def _request(self, query: str) -> dict:
        return self._fetch(query)

    def _parse(self, raw: dict) -> NormalizedWeather:
        current = normalize_current(raw)
        return NormalizedWeather(
            location_name=current.city,
            country=current.country,
            current=current,
        )


class ForecastScreen(_Screen):
    """Multi-day forecast for shared coordinates."""

    name = "forecast"
    fetch_error_message = FORECAST_ERROR_MESSAGE

    def __init__(self, fetch: Callable[..., dict] | None = None) -> None:
        super().__init__(fetch)
        self.needs_location = False

    def _request(self, query: str) -> dict:
        return self._fetch(query, config.FORECAST_DAYS)

    def _build(self, weather: NormalizedWeather) -> ForecastView:
        return build_forecast_view(weather)

    def load(self, latitude: float, longitude: float) -> FetchState:
        """Fetch the forecast, or ask for a location when there is none.

        Coordinates of 0 mean no location was shared: the screen stays
        idle, sets `needs_location` and makes no request.
        """
        if not has_location(latitude, longitude):
            self.needs_location = True
            return self.state
        self.needs_location = False
        return self._load(weatherapi_client.coordinates_query(latitude, longitude))


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

def clock_labels(now: datetime) -> tuple[str, str]:
    """Long date and short time for the header clock.

    Returns e.g. ("Sunday, February 22, 2026", "03:07 PM").
    """
    long_date = f"{now:%A}, {now:%B} {now.day}, {now:%Y}"
    return long_date, now.strftime("%I:%M %p")


def header_tints(category: Category | None) -> tuple[str, str]:
    """Header background before and after the page is scrolled."""
    return (
        select_header_theme(category, scrolled=False),
        select_header_theme(category, scrolled=True),
    )
