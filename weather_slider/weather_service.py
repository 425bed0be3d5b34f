"""
Weather service layer: concurrent fetch of current weather and forecast.
"""

import asyncio
import logging
from typing import Optional

from weather_slider.external_api import (
    MissingAPIKeyError,
    MissingCityError,
    OpenWeatherMapClient,
    WeatherAPIError,
)
from weather_slider.models import WeatherBundle

logger = logging.getLogger(__name__)


class WeatherService:
    """
    Fetches and merges the two OpenWeatherMap responses for a city.
    """

    def __init__(
        self,
        api_key: Optional[str],
        client: Optional[OpenWeatherMapClient] = None,
    ):
        """
        Initialize the weather service.

        Args:
            api_key: OpenWeatherMap API key
            client: Client to use instead of building one from ``api_key``
        """
        self.api_key = api_key
        self.api_client = client or OpenWeatherMapClient(api_key or "")

    async def fetch_weather(self, city: str) -> WeatherBundle:
        """
        Fetch current weather and forecast for a city concurrently.

        Both requests always run to completion. A forecast failure fails
        the whole lookup; a current weather failure only drops the snapshot.

        Args:
            city: Name of the city

        Returns:
            WeatherBundle: Snapshot (or None) and forecast

        Raises:
            WeatherAPIError: If the input is invalid or the forecast failed
        """
        city = (city or "").strip()
        if not city:
            raise MissingCityError("Please enter a city name.")
        if not self.api_key:
            raise MissingAPIKeyError("API Key not found")

        current_result, forecast_result = await asyncio.gather(
            self.api_client.get_current_weather(city),
            self.api_client.get_forecast(city),
            return_exceptions=True,
        )

        if isinstance(forecast_result, BaseException):
            logger.warning("Forecast lookup failed for %s: %s", city, forecast_result)
            if isinstance(forecast_result, WeatherAPIError):
                raise forecast_result
            raise WeatherAPIError("Forecast data unavailable") from forecast_result

        current = current_result
        if isinstance(current_result, BaseException):
            logger.warning(
                "Could not fetch current weather for %s, using forecast only: %s",
                city,
                current_result,
            )
            current = None

        return WeatherBundle(city=city, current=current, forecast=forecast_result)

