"""Forecast aggregation and display formatting."""

import logging
import string
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Union

from forecast_lookup.weather.models import ForecastDay, WeatherData, WeatherError

logger = logging.getLogger(__name__)

FORECAST_DAYS = 5
DAY_LABEL_FORMAT = "%A, %B %d"


def aggregate_forecast(payload: Optional[Union[WeatherData, WeatherError]]) -> List[ForecastDay]:
    """Group a 3-hourly forecast payload into daily summaries.

    Args:
        payload: Decoded /forecast payload

    Returns:
        Up to five ForecastDay entries in the order their days first appear
    """
    if not isinstance(payload, WeatherData):
        return []

    entries = payload.entries
    if entries is None:
        return []

    daily_data = _group_by_day(entries)

    daily_forecasts = []
    for label, day in daily_data.items():
        daily_forecasts.append(
            ForecastDay(
                date=label,
                high=round_half_up(max(day["temps"])),
                low=round_half_up(min(day["temps"])),
                description=format_description(day["descriptions"][0]),
            )
        )

    return daily_forecasts[:FORECAST_DAYS]


def _group_by_day(entries: List[Dict[str, Any]]) -> Dict[str, Dict[str, list]]:
    """Group forecast entries by calendar-day label, keeping first-seen order.

    Args:
        entries: Forecast time-series entries

    Returns:
        Dictionary mapping day labels to accumulated temps, descriptions and codes
    """
    daily_data: Dict[str, Dict[str, list]] = {}

    for entry in entries:
        try:
            label = _day_label(entry)
            temp = float(entry["main"]["temp"])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid forecast entry: {e}")
            continue

        weather = (entry.get("weather") or [{}])[0]
        day = daily_data.setdefault(label, {"temps": [], "descriptions": [], "weather_codes": []})
        day["temps"].append(temp)
        day["descriptions"].append(weather.get("description"))
        day["weather_codes"].append(weather.get("id"))

    return daily_data


def _day_label(entry: Dict[str, Any]) -> str:
    """Derive the day label from ``dt_txt``, falling back to the ``dt`` epoch."""
    if entry.get("dt_txt"):
        moment = datetime.fromisoformat(str(entry["dt_txt"]))
    else:
        moment = datetime.fromtimestamp(int(entry["dt"]), tz=timezone.utc)
    return moment.strftime(DAY_LABEL_FORMAT)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_description(description: Optional[str]) -> Optional[str]:
    if not description or not str(description).strip():
        return None
    return string.capwords(str(description))


def format_temperature(temp: Optional[float], unit: str = "metric") -> Optional[str]:
    """Format a temperature for display, e.g. ``21°C``."""
    if temp is None:
        return None

    symbol = "°F" if unit == "imperial" else "°C"
    return f"{round_half_up(temp)}{symbol}"
