"""Tests for the screen controllers."""

from datetime import datetime
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from src.advisory import FORECAST_HEADER, POSSIBLE_RAIN_FRAGMENT
from src.conditions import Category
from src.errors import (
    FETCH_ERROR_MESSAGE,
    LOCATION_ERROR_MESSAGE,
    MalformedResponse,
    NetworkFailure,
)
from src.screens import (
    CITY_REQUIRED_MESSAGE,
    FORECAST_ERROR_MESSAGE,
    CurrentView,
    CurrentWeatherScreen,
    ForecastScreen,
    ForecastView,
    TodayScreen,
    build_forecast_view,
    clock_labels,
    header_tints,
    weekday_label,
)
from src.theme import DEFAULT_GRADIENT, HEADER_TRANSPARENT, select_theme


def _fetch_returning(payload):
    return MagicMock(return_value=payload)


def _fetch_raising(exc):
    return MagicMock(side_effect=exc)


class TestCurrentWeatherScreen:
    """Test the dashboard controller."""

    def test_starts_idle(self):
        screen = CurrentWeatherScreen(fetch=MagicMock())

        assert screen.state.status == "idle"
        assert screen.theme == DEFAULT_GRADIENT

    def test_city_success_builds_view(self, forecast_response):
        fetch = _fetch_returning(forecast_response)
        screen = CurrentWeatherScreen(fetch=fetch)

        state = screen.load_city("  Lahore ")

        fetch.assert_called_once_with("Lahore", 5)
        assert state.is_success
        view = state.data
        assert isinstance(view, CurrentView)
        assert view.weather.location_name == "Lahore"
        assert view.category == Category.CLOUDY
        assert view.theme == select_theme(Category.CLOUDY)
        assert view.icon == "\u2601\ufe0f"
        assert view.advisory == POSSIBLE_RAIN_FRAGMENT
        assert view.animation is None
        assert screen.theme == view.theme

    def test_rainy_city_is_animated(self, forecast_response):
        forecast_response["current"]["condition"]["text"] = "Light rain"
        screen = CurrentWeatherScreen(fetch=_fetch_returning(forecast_response))

        view = screen.load_city("Lahore").data

        assert view.category == Category.RAIN
        assert "wx-rain" in view.animation

    def test_empty_city_does_not_fetch(self):
        fetch = MagicMock()
        screen = CurrentWeatherScreen(fetch=fetch)

        state = screen.load_city("   ")

        fetch.assert_not_called()
        assert state.status == "idle"
        assert screen.validation_message == CITY_REQUIRED_MESSAGE

    def test_empty_city_keeps_weather_on_screen(self, forecast_response):
        fetch = _fetch_returning(forecast_response)
        screen = CurrentWeatherScreen(fetch=fetch)
        shown = screen.load_city("Lahore")

        state = screen.load_city("")

        assert fetch.call_count == 1
        assert state is shown
        assert state.data.weather.location_name == "Lahore"
        assert screen.validation_message == CITY_REQUIRED_MESSAGE

    def test_next_search_clears_validation_message(self, forecast_response):
        screen = CurrentWeatherScreen(fetch=_fetch_returning(forecast_response))
        screen.load_city("")

        screen.load_city("Lahore")

        assert screen.validation_message == ""

    def test_coordinates_success(self, forecast_response):
        fetch = _fetch_returning(forecast_response)
        screen = CurrentWeatherScreen(fetch=fetch)

        state = screen.load_coordinates(31.54971234, 74.3436)

        fetch.assert_called_once_with("31.5497,74.3436", 5)
        assert state.is_success

    def test_no_coordinates_is_location_error(self):
        fetch = MagicMock()
        screen = CurrentWeatherScreen(fetch=fetch)

        state = screen.load_coordinates(0.0, 0.0)

        fetch.assert_not_called()
        assert state.message == LOCATION_ERROR_MESSAGE

    @pytest.mark.parametrize(
        "exc",
        [
            NetworkFailure("Request to WeatherAPI timed out."),
            MalformedResponse("Weather response is missing 'current'."),
        ],
    )
    def test_failures_show_fixed_message(self, exc):
        screen = CurrentWeatherScreen(fetch=_fetch_raising(exc))

        state = screen.load_city("Lahore")

        assert state.is_error
        assert state.message == FETCH_ERROR_MESSAGE
        assert screen.theme == DEFAULT_GRADIENT

    def test_malformed_payload_is_error(self):
        screen = CurrentWeatherScreen(fetch=_fetch_returning({"location": {}}))

        assert screen.load_city("Lahore").message == FETCH_ERROR_MESSAGE

    def test_error_then_success_recovers(self, forecast_response):
        fetch = MagicMock(side_effect=[NetworkFailure("down"), forecast_response])
        screen = CurrentWeatherScreen(fetch=fetch)

        assert screen.load_city("Lahore").is_error
        assert screen.load_city("Lahore").is_success

    def test_superseded_result_is_discarded(self, forecast_response):
        paris = dict(forecast_response, location=dict(forecast_response["location"], name="Paris"))
        screen = CurrentWeatherScreen()

        def fetch(query, days):
            if query == "Lahore":
                # a newer search starts before this one settles
                screen.load_city("Paris")
                return forecast_response
            return paris

        screen._fetch = fetch
        state = screen.load_city("Lahore")

        assert state.data.weather.location_name == "Paris"

    @respx.mock
    def test_default_fetch_uses_weatherapi(self, forecast_response, monkeypatch):
        monkeypatch.setenv("WEATHER_API_KEY", "test-key")
        route = respx.get(path="/v1/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_response)
        )

        state = CurrentWeatherScreen().load_city("Lahore")

        assert state.is_success
        assert route.calls.last.request.url.params["days"] == "5"


class TestForecastScreen:
    """Test the forecast page controller."""

    def test_no_location_asks_to_share(self):
        fetch = MagicMock()
        screen = ForecastScreen(fetch=fetch)

        state = screen.load(0, 0)

        fetch.assert_not_called()
        assert screen.needs_location is True
        assert state.status == "idle"

    def test_success_builds_forecast_view(self, forecast_response):
        fetch = _fetch_returning(forecast_response)
        screen = ForecastScreen(fetch=fetch)

        state = screen.load(31.5497, 74.3436)

        fetch.assert_called_once_with("31.5497,74.3436", 7)
        assert screen.needs_location is False
        view = state.data
        assert isinstance(view, ForecastView)
        assert [c.weekday for c in view.cards] == ["Sun", "Mon", "Tue"]
        assert view.cards[1].icon == "\U0001f327\ufe0f"
        assert view.advisory.startswith(FORECAST_HEADER + "\n")
        assert view.category == Category.CLOUDY

    def test_highlights(self, forecast_response):
        view = ForecastScreen(fetch=_fetch_returning(forecast_response)).load(31.5, 74.3).data

        assert view.highlights.sunrise == "06:42 AM"
        assert view.highlights.moon_illumination == "78"
        assert view.highlights.air_quality == "3"
        assert view.highlights.wind_kph == 11.2

    def test_single_day_has_no_prediction(self, single_day_response):
        view = ForecastScreen(fetch=_fetch_returning(single_day_response)).load(31.5, 74.3).data

        assert view.advisory is None
        assert len(view.cards) == 1

    def test_failure_shows_forecast_message(self):
        screen = ForecastScreen(fetch=_fetch_raising(NetworkFailure("down")))

        state = screen.load(31.5, 74.3)

        assert state.message == FORECAST_ERROR_MESSAGE

    def test_location_shared_after_prompt(self, forecast_response):
        screen = ForecastScreen(fetch=_fetch_returning(forecast_response))
        screen.load(0, 0)

        screen.load(31.5, 74.3)

        assert screen.needs_location is False
        assert screen.state.is_success


class TestViewHelpers:
    """Test pure view helpers."""

    def test_weekday_label(self):
        assert weekday_label("2026-02-22") == "Sun"

    def test_weekday_label_bad_date(self):
        assert weekday_label("someday") == "someday"

    def test_missing_air_quality_shows_unavailable(self, sample_weather):
        from dataclasses import replace

        weather = replace(
            sample_weather, current=replace(sample_weather.current, air_quality=None)
        )

        assert build_forecast_view(weather).highlights.air_quality == "N/A"

    def test_clock_labels(self):
        assert clock_labels(datetime(2026, 2, 22, 15, 7)) == (
            "Sunday, February 22, 2026",
            "03:07 PM",
        )

    def test_header_tints(self):
        resting, scrolled = header_tints(Category.RAIN)

        assert resting == HEADER_TRANSPARENT
        assert scrolled != HEADER_TRANSPARENT

    def test_header_tints_without_weather(self):
        assert header_tints(None) == (HEADER_TRANSPARENT, HEADER_TRANSPARENT)


class TestWrongShapedPayloads:
    """Bad field types settle the screen in its error state."""

    def test_astro_not_an_object_still_renders(self, forecast_response):
        forecast_response["forecast"]["forecastday"][0]["astro"] = "unavailable"
        screen = ForecastScreen(fetch=_fetch_returning(forecast_response))

        state = screen.load(31.5, 74.3)

        assert state.is_success
        assert state.data.highlights.sunrise == ""

    def test_non_numeric_air_quality_shows_unavailable(self, forecast_response):
        forecast_response["current"]["air_quality"] = {"us-epa-index": "n/a"}
        screen = CurrentWeatherScreen(fetch=_fetch_returning(forecast_response))

        state = screen.load_city("Lahore")

        assert state.is_success
        assert state.data.weather.current.air_quality is None

    def test_non_numeric_temperature_is_fetch_error(self, forecast_response):
        forecast_response["current"]["temp_c"] = "hot"
        screen = CurrentWeatherScreen(fetch=_fetch_returning(forecast_response))

        state = screen.load_city("Lahore")

        assert state.is_error
        assert state.message == FETCH_ERROR_MESSAGE

    def test_non_numeric_forecast_day_is_forecast_error(self, forecast_response):
        forecast_response["forecast"]["forecastday"][0]["day"]["maxwind_kph"] = "calm"
        screen = ForecastScreen(fetch=_fetch_returning(forecast_response))

        state = screen.load(31.5, 74.3)

        assert state.message == FORECAST_ERROR_MESSAGE


class TestTodayScreen:
    """Test the current-conditions home page controller."""

    def test_city_uses_current_endpoint_payload(self, current_response):
        fetch = _fetch_returning(current_response)
        screen = TodayScreen(fetch=fetch)

        state = screen.load_city("Lahore")

        fetch.assert_called_once_with("Lahore")
        assert state.is_success
        assert state.data.weather.current.temperature_c == 24.0
        assert state.data.weather.days == []
        assert state.data.advisory == POSSIBLE_RAIN_FRAGMENT

    def test_coordinates(self, current_response):
        fetch = _fetch_returning(current_response)

        TodayScreen(fetch=fetch).load_coordinates(31.5497, 74.3436)

        fetch.assert_called_once_with("31.5497,74.3436")

    def test_failure_shows_fixed_message(self):
        screen = TodayScreen(fetch=_fetch_raising(NetworkFailure("down")))

        assert screen.load_city("Lahore").message == FETCH_ERROR_MESSAGE

    @respx.mock
    def test_default_fetch_uses_current_endpoint(self, current_response, monkeypatch):
        monkeypatch.setenv("WEATHER_API_KEY", "test-key")
        route = respx.get(path="/v1/current.json").mock(
            return_value=httpx.Response(200, json=current_response)
        )

        state = TodayScreen().load_city("Lahore")

        assert state.is_success
        assert route.calls.last.request.url.params["aqi"] == "no"
