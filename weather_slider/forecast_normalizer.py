"""
Normalization of current weather and forecast payloads into day buckets.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from weather_slider.config import AppConfig
from weather_slider.models import (
    DayBucket,
    ForecastEntry,
    ForecastResponse,
    WeatherSnapshot,
)

DT_TXT_FORMAT = "%Y-%m-%d %H:%M:%S"


def convert_current_to_entry(
    current: WeatherSnapshot, now: Optional[datetime] = None
) -> ForecastEntry:
    """
    Convert a current weather snapshot into a forecast-shaped entry.

    The snapshot's ``dt`` is used when present, otherwise ``now``.
    ``dt_txt`` is always derived from that instant in UTC.
    """
    if current.dt:
        moment = datetime.fromtimestamp(current.dt, tz=timezone.utc)
    else:
        moment = now or datetime.now(timezone.utc)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        moment = moment.astimezone(timezone.utc)

    return ForecastEntry(
        dt=current.dt or int(moment.timestamp()),
        dt_txt=moment.strftime(DT_TXT_FORMAT),
        main=current.main,
        weather=current.weather,
        wind=current.wind,
    )


def _dedupe_by_timestamp(entries: List[ForecastEntry]) -> List[ForecastEntry]:
    seen = set()
    unique = []
    for entry in entries:
        if entry.dt in seen:
            continue
        seen.add(entry.dt)
        unique.append(entry)
    return unique


def prepare_forecast_days(
    current: Optional[WeatherSnapshot],
    forecast: ForecastResponse,
    max_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[DayBucket]:
    """
    Group forecast entries by date and merge the current snapshot in.

    The snapshot becomes the first entry of its day. Every bucket is
    deduplicated by ``dt``.

    Args:
        current: Current weather snapshot, or None when it was unavailable
        forecast: Forecast response
        max_days: Number of day buckets to keep (defaults to config value)
        now: Fallback instant for snapshots without a timestamp

    Returns:
        Day buckets sorted by date, today first. Empty when the forecast
        has no entries.
    """
    if not forecast.entries:
        return []

    if max_days is None:
        max_days = AppConfig.FORECAST_DAYS

    daily: Dict[str, List[ForecastEntry]] = {}
    for entry in sorted(forecast.entries, key=lambda item: item.dt):
        daily.setdefault(entry.date_key, []).append(entry)

    if current is not None:
        current_entry = convert_current_to_entry(current, now=now)
        daily.setdefault(current_entry.date_key, []).insert(0, current_entry)

    # First occurrence wins, so the snapshot beats a forecast step at the same dt
    return [
        DayBucket(date=date, entries=_dedupe_by_timestamp(daily[date]))
        for date in sorted(daily)[:max_days]
    ]
