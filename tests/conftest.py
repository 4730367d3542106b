"""Shared test fixtures for WeatherAPI.com response data."""

import copy

import pytest


_LOCATION = {
    "name": "Lahore",
    "region": "Punjab",
    "country": "Pakistan",
    "lat": 31.55,
    "lon": 74.34,
    "localtime": "2026-02-22 14:05",
}

_CURRENT = {
    "last_updated": "2026-02-22 14:00",
    "temp_c": 24.0,
    "feelslike_c": 25.1,
    "condition": {
        "text": "Partly cloudy",
        "icon": "//cdn.weatherapi.com/weather/64x64/day/116.png",
        "code": 1003,
    },
    "wind_kph": 11.2,
    "wind_dir": "NW",
    "pressure_mb": 1014.0,
    "precip_mm": 0.0,
    "humidity": 45,
    "cloud": 25,
    "vis_km": 10.0,
    "uv": 5.0,
    "air_quality": {"us-epa-index": 3},
}


def _day(date, avg, rain, wind, text="Sunny", max_t=None, min_t=None):
    return {
        "date": date,
        "day": {
            "maxtemp_c": max_t if max_t is not None else avg + 5,
            "mintemp_c": min_t if min_t is not None else avg - 5,
            "avgtemp_c": avg,
            "maxwind_kph": wind,
            "daily_chance_of_rain": rain,
            "condition": {"text": text, "icon": "", "code": 1000},
            "uv": 6.0,
        },
        "astro": {
            "sunrise": "06:42 AM",
            "sunset": "05:58 PM",
            "moon_phase": "Waxing Gibbous",
            "moon_illumination": 78,
        },
    }


@pytest.fixture()
def current_response():
    """Sample /current.json response for Lahore."""
    return {
        "location": copy.deepcopy(_LOCATION),
        "current": copy.deepcopy(_CURRENT),
    }


@pytest.fixture()
def forecast_response():
    """Sample /forecast.json response with three days."""
    return {
        "location": copy.deepcopy(_LOCATION),
        "current": copy.deepcopy(_CURRENT),
        "forecast": {
            "forecastday": [
                _day("2026-02-22", 20.0, 10, 12.0, "Sunny"),
                _day("2026-02-23", 23.0, 80, 35.0, "Patchy rain possible"),
                _day("2026-02-24", 18.0, 0, 8.0, "Overcast"),
            ]
        },
    }


@pytest.fixture()
def single_day_response(forecast_response):
    """Forecast response trimmed to a single day."""
    forecast_response["forecast"]["forecastday"] = (
        forecast_response["forecast"]["forecastday"][:1]
    )
    return forecast_response


@pytest.fixture()
def make_day():
    """Factory for raw forecast-day entries."""
    return _day


@pytest.fixture()
def sample_weather(forecast_response):
    """NormalizedWeather built from the three-day forecast response."""
    from src.normalizer import normalize

    return normalize(forecast_response)
