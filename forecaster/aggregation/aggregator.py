"""Reduce 3-hourly forecast samples to one summary per calendar day."""

import logging
import math
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import date, tzinfo

from forecaster.aggregation.time_conversion import epoch_to_local_date, resolve_zone
from forecaster.errors import MalformedResponseError
from forecaster.models.forecast import (
    FORECAST_DAYS,
    DailySummary,
    ForecastSet,
    RawSample,
)

logger = logging.getLogger(__name__)


def most_common(values: Iterable[str]) -> str:
    """Mode of a sequence. Ties go to the value encountered first."""
    counts = Counter(values)
    if not counts:
        raise ValueError("most_common() of an empty sequence")
    return counts.most_common(1)[0][0]


def aggregate(
    samples: Iterable[RawSample], vendor_zone: str | tzinfo
) -> list[DailySummary]:
    """Group samples by local calendar date and summarize each day.

    Returns one DailySummary per distinct date, sorted ascending. Raises
    MalformedResponseError for a sample time outside the calendar range.
    """
    zone = resolve_zone(vendor_zone)
    groups: dict[date, list[RawSample]] = {}
    for sample in samples:
        try:
            day = epoch_to_local_date(sample.epoch_seconds_utc, zone)
        except (ValueError, OverflowError, OSError) as e:
            raise MalformedResponseError(
                f"Sample time {sample.epoch_seconds_utc} is out of range"
            ) from e
        groups.setdefault(day, []).append(sample)

    return [_summarize(day, groups[day]) for day in sorted(groups)]


def _div_toward_zero(total: int, count: int) -> int:
    quotient = abs(total) // count
    return -quotient if total < 0 else quotient


def _summarize(day: date, group: Sequence[RawSample]) -> DailySummary:
    # Each sample is truncated to whole degrees before summing
    total = sum(math.trunc(s.temperature_celsius) for s in group)
    return DailySummary(
        calendar_date=day,
        weather_kind=most_common(s.weather_kind for s in group),
        weather_icon_code=most_common(s.weather_icon_code for s in group),
        temperature_celsius=_div_toward_zero(total, len(group)),
    )


def build_forecast_set(
    city_key: str, samples: Iterable[RawSample], vendor_zone: str | tzinfo
) -> ForecastSet:
    """Aggregate samples into the first FORECAST_DAYS days for a city.

    Raises MalformedResponseError when fewer distinct days are present.
    """
    days = aggregate(samples, vendor_zone)
    if len(days) < FORECAST_DAYS:
        raise MalformedResponseError(
            f"Expected at least {FORECAST_DAYS} days for {city_key}, got {len(days)}"
        )
    if len(days) > FORECAST_DAYS:
        logger.debug(
            "Dropping %d trailing day(s) for %s", len(days) - FORECAST_DAYS, city_key
        )
    return ForecastSet(city_key=city_key, days=tuple(days[:FORECAST_DAYS]))
