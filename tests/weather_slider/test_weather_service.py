"""
Tests for the concurrent fetch-and-merge of current weather and forecast.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from weather_slider.external_api import (
    CityNotFoundError,
    ForecastFormatError,
    MissingAPIKeyError,
    MissingCityError,
    OpenWeatherMapClient,
    ProviderUnavailableError,
    WeatherAPIError,
)
from weather_slider.models import ForecastResponse, WeatherSnapshot
from weather_slider.weather_service import WeatherService


@pytest.fixture
def snapshot(mock_current_response) -> WeatherSnapshot:
    return WeatherSnapshot.model_validate(mock_current_response)


@pytest.fixture
def forecast(mock_forecast_response) -> ForecastResponse:
    return ForecastResponse.model_validate(mock_forecast_response)


@pytest.fixture
def api_client(snapshot, forecast) -> MagicMock:
    client = MagicMock(spec=OpenWeatherMapClient)
    client.get_current_weather = AsyncMock(return_value=snapshot)
    client.get_forecast = AsyncMock(return_value=forecast)
    return client


class TestFetchWeather:
    """Test WeatherService.fetch_weather."""

    @pytest.mark.asyncio
    async def test_both_succeed(self, sample_api_key, api_client, snapshot, forecast):
        service = WeatherService(sample_api_key, client=api_client)

        bundle = await service.fetch_weather("  London  ")

        assert bundle.city == "London"
        assert bundle.current == snapshot
        assert bundle.forecast == forecast
        api_client.get_current_weather.assert_awaited_once_with("London")
        api_client.get_forecast.assert_awaited_once_with("London")

    @pytest.mark.asyncio
    async def test_current_failure_degrades(self, sample_api_key, api_client, forecast):
        """Losing the current weather keeps the forecast."""
        api_client.get_current_weather.side_effect = ProviderUnavailableError(
            "Failed to fetch current weather (Status: 500)"
        )
        service = WeatherService(sample_api_key, client=api_client)

        bundle = await service.fetch_weather("London")

        assert bundle.current is None
        assert bundle.forecast == forecast

    @pytest.mark.asyncio
    async def test_current_unexpected_failure_degrades(self, sample_api_key, api_client):
        api_client.get_current_weather.side_effect = RuntimeError("boom")
        service = WeatherService(sample_api_key, client=api_client)

        bundle = await service.fetch_weather("London")

        assert bundle.current is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            CityNotFoundError("Forecast for 'Atlantis' not found."),
            ProviderUnavailableError("Failed to fetch forecast (Status: 503)"),
            ForecastFormatError("Forecast response is missing its entry list"),
        ],
    )
    async def test_forecast_failure_fails_lookup(self, sample_api_key, api_client, error):
        api_client.get_forecast.side_effect = error
        service = WeatherService(sample_api_key, client=api_client)

        with pytest.raises(type(error)) as exc_info:
            await service.fetch_weather("Atlantis")

        assert exc_info.value is error
        # the sibling request still ran to completion
        api_client.get_current_weather.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_forecast_unexpected_failure_is_wrapped(
        self, sample_api_key, api_client
    ):
        api_client.get_forecast.side_effect = ValueError("bad json")
        service = WeatherService(sample_api_key, client=api_client)

        with pytest.raises(WeatherAPIError) as exc_info:
            await service.fetch_weather("London")

        assert exc_info.value.message == "Forecast data unavailable"
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_requests_run_concurrently(self, sample_api_key, api_client, forecast):
        """Neither request waits for the other to finish."""
        both_started = asyncio.Event()
        started = []

        async def wait_for_sibling(name, result):
            started.append(name)
            if len(started) == 2:
                both_started.set()
            await asyncio.wait_for(both_started.wait(), timeout=1)
            return result

        async def current_call(city):
            return await wait_for_sibling("current", None)

        async def forecast_call(city):
            return await wait_for_sibling("forecast", forecast)

        api_client.get_current_weather.side_effect = current_call
        api_client.get_forecast.side_effect = forecast_call
        service = WeatherService(sample_api_key, client=api_client)

        bundle = await service.fetch_weather("London")

        assert sorted(started) == ["current", "forecast"]
        assert bundle.forecast == forecast

    @pytest.mark.asyncio
    @pytest.mark.parametrize("city", ["", "   ", None])
    async def test_empty_city_makes_no_request(self, sample_api_key, api_client, city):
        service = WeatherService(sample_api_key, client=api_client)

        with pytest.raises(MissingCityError) as exc_info:
            await service.fetch_weather(city)

        assert exc_info.value.message == "Please enter a city name."
        api_client.get_current_weather.assert_not_called()
        api_client.get_forecast.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_api_key_makes_no_request(self, api_client):
        service = WeatherService("", client=api_client)

        with pytest.raises(MissingAPIKeyError):
            await service.fetch_weather("London")

        api_client.get_forecast.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_city_checked_before_api_key(self, api_client):
        """A blank city is reported even when no key is configured."""
        service = WeatherService("", client=api_client)

        with pytest.raises(MissingCityError) as exc_info:
            await service.fetch_weather("   ")

        assert exc_info.value.message == "Please enter a city name."
        api_client.get_current_weather.assert_not_called()
        api_client.get_forecast.assert_not_called()

    def test_builds_client_from_api_key(self, sample_api_key):
        service = WeatherService(sample_api_key)

        assert isinstance(service.api_client, OpenWeatherMapClient)
        assert service.api_client.api_key == sample_api_key
