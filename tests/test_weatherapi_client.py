"""Tests for the WeatherAPI.com client module."""

from unittest.mock import patch

import httpx
import pytest
import respx

from src.errors import NetworkFailure
from src.weatherapi_client import coordinates_query, get_current, get_forecast


FORECAST_PATH = "/v1/forecast.json"
CURRENT_PATH = "/v1/current.json"


@pytest.fixture(autouse=True)
def api_key():
    with patch.dict("os.environ", {"WEATHER_API_KEY": "test-key"}):
        yield


class TestCoordinatesQuery:
    """Test the "lat,lon" query formatting."""

    def test_formats_lat_lon(self):
        assert coordinates_query(31.5497, 74.3436) == "31.5497,74.3436"

    def test_rounds_to_four_decimals(self):
        assert coordinates_query(31.54971234, -74.34361234) == "31.5497,-74.3436"


class TestGetForecastSuccess:
    """Test successful forecast retrieval."""

    @respx.mock
    def test_returns_raw_payload(self, forecast_response):
        respx.get(path=FORECAST_PATH).mock(
            return_value=httpx.Response(200, json=forecast_response)
        )

        result = get_forecast("Lahore", 7)

        assert result["location"]["name"] == "Lahore"
        assert len(result["forecast"]["forecastday"]) == 3

    @respx.mock
    def test_sends_expected_query_params(self, forecast_response):
        route = respx.get(path=FORECAST_PATH).mock(
            return_value=httpx.Response(200, json=forecast_response)
        )

        get_forecast("31.5497,74.3436", 7)

        params = route.calls.last.request.url.params
        assert params["key"] == "test-key"
        assert params["q"] == "31.5497,74.3436"
        assert params["days"] == "7"
        assert params["aqi"] == "yes"

    @respx.mock
    def test_uses_configured_host(self, forecast_response):
        route = respx.get(path=FORECAST_PATH).mock(
            return_value=httpx.Response(200, json=forecast_response)
        )

        get_forecast("Lahore", 5)

        assert route.calls.last.request.url.host == "api.weatherapi.com"


class TestGetCurrent:
    """Test the current-conditions endpoint."""

    @respx.mock
    def test_aqi_off_by_default(self, current_response):
        route = respx.get(path=CURRENT_PATH).mock(
            return_value=httpx.Response(200, json=current_response)
        )

        result = get_current("Lahore")

        assert result["current"]["temp_c"] == 24.0
        params = route.calls.last.request.url.params
        assert params["q"] == "Lahore"
        assert params["aqi"] == "no"

    @respx.mock
    def test_aqi_on(self, current_response):
        route = respx.get(path=CURRENT_PATH).mock(
            return_value=httpx.Response(200, json=current_response)
        )

        get_current("Lahore", aqi=True)

        assert route.calls.last.request.url.params["aqi"] == "yes"


class TestGetForecastErrors:
    """Test error handling in forecast retrieval."""

    @respx.mock
    def test_unauthorized_raises_network_failure(self):
        respx.get(path=FORECAST_PATH).mock(
            return_value=httpx.Response(
                401,
                json={"error": {"code": 1002, "message": "API key is invalid."}},
            )
        )

        with pytest.raises(NetworkFailure, match="HTTP 401"):
            get_forecast("Lahore", 7)

    @respx.mock
    def test_api_error_message_is_included(self):
        respx.get(path=FORECAST_PATH).mock(
            return_value=httpx.Response(
                400,
                json={"error": {"code": 1006, "message": "No matching location found."}},
            )
        )

        with pytest.raises(NetworkFailure, match="No matching location"):
            get_forecast("Atlantis", 7)

    @respx.mock
    def test_server_error_is_not_retried(self):
        route = respx.get(path=FORECAST_PATH).mock(
            return_value=httpx.Response(500, json={})
        )

        with pytest.raises(NetworkFailure, match="HTTP 500"):
            get_forecast("Lahore", 7)
        assert route.call_count == 1

    @respx.mock
    def test_timeout_raises_network_failure(self):
        respx.get(path=FORECAST_PATH).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(NetworkFailure, match="timed out"):
            get_forecast("Lahore", 7)

    @respx.mock
    def test_connection_error_raises_network_failure(self):
        respx.get(path=FORECAST_PATH).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(NetworkFailure, match="HTTP error"):
            get_forecast("Lahore", 7)

    @respx.mock
    def test_invalid_json_raises_network_failure(self):
        respx.get(path=FORECAST_PATH).mock(
            return_value=httpx.Response(
                200, content=b"not json", headers={"content-type": "text/plain"}
            )
        )

        with pytest.raises(NetworkFailure, match="invalid JSON"):
            get_forecast("Lahore", 7)

    @respx.mock
    def test_non_object_json_raises_network_failure(self):
        respx.get(path=FORECAST_PATH).mock(
            return_value=httpx.Response(200, json=["unexpected"])
        )

        with pytest.raises(NetworkFailure, match="invalid JSON"):
            get_forecast("Lahore", 7)
