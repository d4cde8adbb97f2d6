"""Flat key/value text encoding of a ForecastSet for the on-device cache.

The record is a JSON object written one key per line, in a fixed order:

    {
    "city": "Tokyo",
    "date0": "2024/01/02",
    "weather0": "Clear",
    "weathericon0": "01d",
    "temperature0": "7",
    ...
    "temperature4": "9"
    }

All values are strings. serialize() output is byte-compatible with records
written by earlier versions.
"""

import json
import re

from forecaster.aggregation.time_conversion import format_date, parse_date
from forecaster.errors import FormatError
from forecaster.models.forecast import FORECAST_DAYS, DailySummary, ForecastSet

CITY_KEY = "city"
# Canonical ASCII decimal, as serialize() writes it
TEMPERATURE_PATTERN = re.compile(r"0|-?[1-9][0-9]*")


class NotFound:
    """Marker for "no cache entry". A valid outcome, not an error."""

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()


def day_keys(index: int) -> tuple[str, str, str, str]:
    return (
        f"date{index}",
        f"weather{index}",
        f"weathericon{index}",
        f"temperature{index}",
    )


def expected_keys() -> list[str]:
    keys = [CITY_KEY]
    for i in range(FORECAST_DAYS):
        keys.extend(day_keys(i))
    return keys


def _literal(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def serialize(forecast: ForecastSet) -> str:
    entries = [f"{_literal(CITY_KEY)}: {_literal(forecast.city_key)}"]
    for i, day in enumerate(forecast.days):
        date_key, weather_key, icon_key, temp_key = day_keys(i)
        entries.append(f"{_literal(date_key)}: {_literal(format_date(day.calendar_date))}")
        entries.append(f"{_literal(weather_key)}: {_literal(day.weather_kind)}")
        entries.append(f"{_literal(icon_key)}: {_literal(day.weather_icon_code)}")
        entries.append(f"{_literal(temp_key)}: {_literal(str(day.temperature_celsius))}")
    return "{\n" + ",\n".join(entries) + "\n}"


def deserialize(text: str) -> ForecastSet | NotFound:
    """Decode a cache record.

    Returns NOT_FOUND for empty input. Raises FormatError for anything that
    is not a complete record. Unknown extra keys are ignored.
    """
    if not text or not text.strip():
        return NOT_FOUND

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"Cache record is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise FormatError("Cache record must be a JSON object")

    missing = [k for k in expected_keys() if k not in data]
    if missing:
        raise FormatError(f"Cache record missing keys: {', '.join(missing)}")

    city = _string_field(data, CITY_KEY)
    if not city:
        raise FormatError("Cache record has an empty city")

    days = [_decode_day(data, i) for i in range(FORECAST_DAYS)]
    try:
        return ForecastSet(city_key=city, days=tuple(days))
    except ValueError as e:
        raise FormatError(f"Cache record is inconsistent: {e}") from e


def _decode_day(data: dict, index: int) -> DailySummary:
    date_key, weather_key, icon_key, temp_key = day_keys(index)
    temperature = _string_field(data, temp_key)
    if not TEMPERATURE_PATTERN.fullmatch(temperature):
        raise FormatError(f"{temp_key} is not an integer: {temperature!r}")
    return DailySummary(
        calendar_date=parse_date(_string_field(data, date_key)),
        weather_kind=_string_field(data, weather_key),
        weather_icon_code=_string_field(data, icon_key),
        temperature_celsius=int(temperature),
    )


def _string_field(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise FormatError(f"{key} must be a string, got {type(value).__name__}")
    return value
