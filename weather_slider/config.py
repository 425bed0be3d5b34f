"""
Configuration constants for the weather slider service.
"""

import os


class RetryConfig:
    """Retry configuration for provider calls"""

    API_MAX_ATTEMPTS = int(os.getenv("API_MAX_ATTEMPTS", "3"))
    API_BASE_DELAY = float(os.getenv("API_BASE_DELAY", "1.0"))
    API_BACKOFF_MULTIPLIER = float(os.getenv("API_BACKOFF_MULTIPLIER", "2.0"))
    API_MAX_DELAY = float(os.getenv("API_MAX_DELAY", "30.0"))
    API_JITTER = os.getenv("API_JITTER", "true").lower() == "true"
    API_JITTER_RANGE = float(os.getenv("API_JITTER_RANGE", "0.1"))


class ExternalAPIConfig:
    """External API configuration"""

    OPENWEATHER_BASE_URL = os.getenv(
        "OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5"
    )
    OPENWEATHER_TIMEOUT = int(os.getenv("OPENWEATHER_TIMEOUT", "10"))
    OPENWEATHER_UNITS = os.getenv("OPENWEATHER_UNITS", "metric")
    ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon}@2x.png"


class AppConfig:
    """Application configuration"""

    ENV = os.getenv("ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    FORECAST_DAYS = int(os.getenv("FORECAST_DAYS", "5"))

    OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")
