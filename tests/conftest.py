"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timezone

import pytest

# 2024-01-01 12:00:00 UTC
LONDON_NOON = 1704110400


def make_forecast_entry(dt: int, temp: float = 10.0) -> dict:
    """Build one forecast list item shaped like the provider's."""
    moment = datetime.fromtimestamp(dt, tz=timezone.utc)
    return {
        "dt": dt,
        "dt_txt": moment.strftime("%Y-%m-%d %H:%M:%S"),
        "main": {"temp": temp, "humidity": 80, "pressure": 1012},
        "weather": [
            {"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}
        ],
        "wind": {"speed": 4.1, "deg": 240},
    }


@pytest.fixture
def sample_api_key() -> str:
    """Sample API key for testing."""
    return "test_openweather_api_key_123"


@pytest.fixture
def mock_current_response() -> dict:
    """Mock current weather response for London at noon."""
    return {
        "name": "London",
        "dt": LONDON_NOON,
        "main": {"temp": 8.46, "humidity": 71, "pressure": 1019},
        "weather": [
            {"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}
        ],
        "wind": {"speed": 5.66, "deg": 250},
        "sys": {"country": "GB"},
    }


@pytest.fixture
def mock_forecast_response() -> dict:
    """
    Mock forecast: 12:00 and 15:00 on the first day, then four full days.
    """
    first_day = [LONDON_NOON, LONDON_NOON + 3 * 3600]
    next_midnight = LONDON_NOON + 12 * 3600
    following_days = [next_midnight + step * 3 * 3600 for step in range(4 * 8)]
    return {
        "cod": "200",
        "cnt": len(first_day) + len(following_days),
        "list": [make_forecast_entry(dt) for dt in first_day + following_days],
        "city": {"name": "London", "country": "GB"},
    }


@pytest.fixture
def six_day_forecast_response() -> dict:
    """Mock forecast spanning six calendar days."""
    start = LONDON_NOON - 12 * 3600
    entries = [start + step * 3 * 3600 for step in range(6 * 8)]
    return {"list": [make_forecast_entry(dt) for dt in reversed(entries)]}


@pytest.fixture
def forecast_entry_factory():
    return make_forecast_entry


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 1, 13, 30, tzinfo=timezone.utc)
