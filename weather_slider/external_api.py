"""
External API client for OpenWeatherMap service.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

import aiohttp
from pydantic import ValidationError

from weather_slider.config import ExternalAPIConfig, RetryConfig
from weather_slider.models import ForecastResponse, WeatherSnapshot
from weather_slider.retry_service import (
    RetryConfig as RetryConfigClass,
    RetryError,
    api_retry,
)

logger = logging.getLogger(__name__)


class WeatherAPIError(Exception):
    """Base exception for weather lookup errors."""

    default_status: Optional[int] = None

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code or self.default_status
        super().__init__(message)


class MissingCityError(WeatherAPIError):
    """No city name was given."""

    default_status = 400


class MissingAPIKeyError(WeatherAPIError):
    """The OpenWeatherMap credential is not configured."""

    default_status = 500


class InvalidAPIKeyError(WeatherAPIError):
    default_status = 401


class CityNotFoundError(WeatherAPIError):
    default_status = 404


class ProviderUnavailableError(WeatherAPIError):
    """Non-2xx response other than 404/401, or a network failure."""

    default_status = 503


class ForecastFormatError(WeatherAPIError):
    """Forecast payload is missing its entry list or is malformed."""

    default_status = 502


class OpenWeatherMapClient:
    """
    Asynchronous client for the current weather and forecast endpoints.
    """

    def __init__(
        self,
        api_key: str,
        timeout: Optional[int] = None,
        units: Optional[str] = None,
        retry_config: Optional[RetryConfigClass] = None,
    ):
        """
        Initialize the OpenWeatherMap client.

        Args:
            api_key: OpenWeatherMap API key
            timeout: Request timeout in seconds (defaults to config value)
            units: Unit system passed to the provider (defaults to config value)
            retry_config: Retry behaviour (defaults to config values)
        """
        self.api_key = api_key
        self.base_url = ExternalAPIConfig.OPENWEATHER_BASE_URL
        self.units = units or ExternalAPIConfig.OPENWEATHER_UNITS
        self.timeout = aiohttp.ClientTimeout(
            total=timeout or ExternalAPIConfig.OPENWEATHER_TIMEOUT
        )
        self.retry_config = retry_config or RetryConfigClass(
            max_attempts=RetryConfig.API_MAX_ATTEMPTS,
            base_delay=RetryConfig.API_BASE_DELAY,
            backoff_multiplier=RetryConfig.API_BACKOFF_MULTIPLIER,
            max_delay=RetryConfig.API_MAX_DELAY,
            jitter=RetryConfig.API_JITTER,
            jitter_range=RetryConfig.API_JITTER_RANGE,
        )

    async def get_current_weather(self, city: str) -> WeatherSnapshot:
        """
        Get the current weather snapshot for a city.

        Raises:
            WeatherAPIError: If the request fails after retries
        """
        payload = await self._fetch_json(
            "weather",
            city,
            not_found_message=f"City '{city.strip()}' not found.",
            label="current weather",
        )
        try:
            return WeatherSnapshot.model_validate(payload)
        except ValidationError as e:
            raise WeatherAPIError("Malformed current weather response") from e

    async def get_forecast(self, city: str) -> ForecastResponse:
        """
        Get the 5 day / 3 hour forecast for a city.

        Raises:
            ForecastFormatError: If the payload has no usable entry list
            WeatherAPIError: If the request fails after retries
        """
        payload = await self._fetch_json(
            "forecast",
            city,
            not_found_message=f"Forecast for '{city.strip()}' not found.",
            label="forecast",
        )
        if not isinstance(payload, dict) or "list" not in payload:
            raise ForecastFormatError("Forecast response is missing its entry list")
        try:
            return ForecastResponse.model_validate(payload)
        except ValidationError as e:
            raise ForecastFormatError("Malformed forecast response") from e

    async def _fetch_json(
        self, endpoint: str, city: str, not_found_message: str, label: str
    ) -> Any:
        if not city or not city.strip():
            raise MissingCityError("No city provided")
        if not self.api_key:
            raise MissingAPIKeyError("API Key not found")

        url = f"{self.base_url}/{endpoint}"
        params = {
            "q": city.strip(),
            "appid": self.api_key,
            "units": self.units,
        }

        @api_retry(self.retry_config)
        async def _fetch_with_retry() -> Any:
            logger.debug("Requesting %s for city: %s", label, city)
            status, payload = await self._get(url, params)

            if status == 200:
                logger.debug("Successfully fetched %s for %s", label, city)
                return payload

            if status == 404:
                logger.warning(not_found_message)
                raise CityNotFoundError(not_found_message)

            if status == 401:
                logger.error("Invalid API key")
                raise InvalidAPIKeyError("Invalid API key")

            logger.error("API error for %s %s (status: %d)", label, city, status)
            raise ProviderUnavailableError(
                f"Failed to fetch {label} (Status: {status})"
            )

        try:
            return await _fetch_with_retry()
        except RetryError as e:
            status = getattr(e.last_exception, "status", None)
            if status:
                message = f"Failed to fetch {label} (Status: {status})"
            else:
                message = f"Failed to fetch {label}"
            raise ProviderUnavailableError(message) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderUnavailableError(f"Failed to fetch {label}") from e

    async def _get(self, url: str, params: Dict[str, str]) -> Tuple[int, Any]:
        """
        Perform one GET request.

        Server errors are raised as ``aiohttp.ClientResponseError`` so the
        retry decorator can pick them up.
        """
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(url, params=params) as response:
                if response.status >= 500:
                    response.raise_for_status()
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    payload = None
                return response.status, payload
