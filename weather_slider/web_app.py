"""
FastAPI application for the city weather search page, with a Lambda adapter.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum

from weather_slider.config import AppConfig
from weather_slider.models import ElementIds
from weather_slider.search import ServiceFactory, default_service_factory, setup_search

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or AppConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    element_ids: Optional[ElementIds] = None,
    service_factory: ServiceFactory = default_service_factory,
) -> FastAPI:
    """
    Build the application.

    Args:
        element_ids: DOM ids for the search page
        service_factory: Builds the weather service for each search
    """
    configure_logging()

    app = FastAPI(
        title="City Weather Slider",
        description="City weather lookup with per-day time sliders",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Report whether the service is up and has a provider credential."""
        return {
            "status": "healthy",
            "environment": AppConfig.ENV,
            "api_key_configured": bool(AppConfig.OPENWEATHER_API_KEY),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):  # pylint: disable=unused-argument
        """Global exception handler for unhandled errors."""
        logger.error("Unhandled exception: %s", str(exc))
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred",
                "status_code": 500,
            },
        )

    setup_search(app, element_ids, service_factory)
    logger.info("Application created for environment %s", AppConfig.ENV)
    return app


app = create_app()

# AWS Lambda handler using Mangum
lambda_handler = Mangum(app, lifespan="off")
