"""
Search page wiring: binds the search routes to an application.
"""

import logging
from typing import Callable, List, Optional, Tuple

from fastapi import APIRouter, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from starlette.routing import BaseRoute

from weather_slider.config import AppConfig
from weather_slider.external_api import WeatherAPIError
from weather_slider.forecast_normalizer import prepare_forecast_days
from weather_slider.models import ElementIds, ForecastDaysResponse
from weather_slider.rendering import render_error, render_page, render_weather_display
from weather_slider.weather_service import WeatherService

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Could not retrieve weather data."

ServiceFactory = Callable[[], WeatherService]


def default_service_factory() -> WeatherService:
    return WeatherService(AppConfig.OPENWEATHER_API_KEY)


class SearchRegistration:
    """Handle for the routes added by ``setup_search``."""

    def __init__(self, app: FastAPI, routes: List[BaseRoute]):
        self.app = app
        self.routes = routes

    @property
    def attached(self) -> bool:
        return any(route in self.app.router.routes for route in self.routes)

    def detach(self) -> None:
        """Remove the search routes from the application."""
        for route in self.routes:
            if route in self.app.router.routes:
                self.app.router.routes.remove(route)
        self.app.openapi_schema = None
        logger.debug("Detached %d search routes", len(self.routes))


async def run_search(service: WeatherService, city: str) -> Tuple[int, str]:
    """
    Run one search and render the results area.

    Every failure is converted into a displayed message.

    Returns:
        HTTP status code and the markup for the display container
    """
    try:
        bundle = await service.fetch_weather(city)
        days = prepare_forecast_days(
            bundle.current, bundle.forecast, max_days=AppConfig.FORECAST_DAYS
        )
        logger.info("Prepared %d forecast days for %s", len(days), bundle.city)
        return 200, render_weather_display(days)

    except WeatherAPIError as e:
        logger.warning("Weather lookup failed for %r: %s", city, e.message)
        return e.status_code or 500, render_error(e.message)

    except Exception:  # pylint: disable=broad-exception-caught
        logger.exception("Error fetching or displaying weather data for %r", city)
        return 500, render_error(GENERIC_ERROR_MESSAGE)


def setup_search(
    app: FastAPI,
    element_ids: Optional[ElementIds] = None,
    service_factory: ServiceFactory = default_service_factory,
    prefix: str = "",
) -> SearchRegistration:
    """
    Register the search page, the search handler and the JSON endpoint.

    Args:
        app: Application to register on
        element_ids: DOM ids used by the rendered page
        service_factory: Builds the weather service for each request
        prefix: Path prefix for all routes

    Returns:
        SearchRegistration: Handle that can remove the routes again
    """
    element_ids = element_ids or ElementIds()
    search_path = f"{prefix}/search"
    router = APIRouter()

    @router.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def search_page():
        return HTMLResponse(render_page(element_ids, search_path=search_path))

    @router.get("/search", response_class=HTMLResponse)
    async def search(city: str = Query("")):
        """Search a city and render the results page."""
        status_code, content = await run_search(service_factory(), city)
        return HTMLResponse(
            render_page(element_ids, content, search_path=search_path),
            status_code=status_code,
        )

    @router.get("/api/weather/{city}", response_model=ForecastDaysResponse)
    async def weather_days(city: str):
        """
        Get normalized forecast days for a city.

        Raises:
            HTTPException: With the status code of the lookup error
        """
        try:
            bundle = await service_factory().fetch_weather(city)
        except WeatherAPIError as e:
            logger.warning("Weather API error for %s: %s", city, e.message)
            raise HTTPException(
                status_code=e.status_code or 500, detail=e.message
            ) from e

        days = prepare_forecast_days(
            bundle.current, bundle.forecast, max_days=AppConfig.FORECAST_DAYS
        )
        return ForecastDaysResponse(
            city=bundle.city, has_current=bundle.current is not None, days=days
        )

    before = len(app.router.routes)
    app.include_router(router, prefix=prefix)
    routes = app.router.routes[before:]
    app.openapi_schema = None

    logger.info("Registered %d search routes under %r", len(routes), prefix or "/")
    return SearchRegistration(app, list(routes))
