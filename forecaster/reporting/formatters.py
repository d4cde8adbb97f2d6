"""Output formatters for forecast results."""

import json
from datetime import date

from forecaster.aggregation.time_conversion import (
    WeekdayAccent,
    WeekdayStyle,
    device_today,
    format_date,
    weekday_accent,
    weekday_name,
)
from forecaster.models.result import ForecastResult, ResultSource
from forecaster.reporting.icons import icon_url

ACCENT_MARKERS = {
    WeekdayAccent.DEFAULT: " ",
    WeekdayAccent.SATURDAY: "+",
    WeekdayAccent.SUNDAY: "*",
}


def format_forecast_text(
    result: ForecastResult,
    style: WeekdayStyle = WeekdayStyle.FULL,
    today: date | None = None,
) -> str:
    """Plain text forecast, one line per day."""
    if result.forecast is None:
        return f"=== {result.city_key or '?'} ===\nForecast unavailable. Try again later."

    label = "cached" if result.source == ResultSource.FALLBACK else "live"
    lines = [f"=== {result.forecast.city_key} ({label}) ==="]
    if today is None:
        today = device_today()
    for i, day in enumerate(result.forecast.days):
        marker = ACCENT_MARKERS[weekday_accent(day.calendar_date)]
        when = "Today" if day.calendar_date == today else weekday_name(day.calendar_date, style)
        lines.append(
            f"{marker}{format_date(day.calendar_date)} {when:<10} "
            f"{day.weather_kind:<13} {day.temperature_celsius:>4}°C  "
            f"{icon_url(day.weather_icon_code, primary=i == 0)}"
        )
    return "\n".join(lines)


def forecast_to_dict(result: ForecastResult) -> dict:
    data: dict = {
        "city": result.city_key,
        "source": result.source.value,
        "days": [],
    }
    if result.forecast is not None:
        data["days"] = [
            {
                "date": day.calendar_date.isoformat(),
                "weekday": weekday_name(day.calendar_date),
                "accent": weekday_accent(day.calendar_date).value,
                "weather": day.weather_kind,
                "icon": day.weather_icon_code,
                "icon_url": icon_url(day.weather_icon_code, primary=i == 0),
                "temperature_c": day.temperature_celsius,
            }
            for i, day in enumerate(result.forecast.days)
        ]
    return data


def format_forecast_json(result: ForecastResult) -> str:
    """JSON forecast for programmatic consumption."""
    return json.dumps(forecast_to_dict(result), indent=2, ensure_ascii=False)
