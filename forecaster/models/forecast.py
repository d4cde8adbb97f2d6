"""Forecast data models."""

from dataclasses import dataclass
from datetime import date

FORECAST_DAYS = 5


@dataclass(frozen=True)
class RawSample:
    epoch_seconds_utc: int
    temperature_celsius: float
    weather_kind: str
    weather_icon_code: str


@dataclass(frozen=True)
class DailySummary:
    calendar_date: date
    weather_kind: str
    weather_icon_code: str
    temperature_celsius: int


@dataclass(frozen=True)
class ForecastSet:
    """Exactly FORECAST_DAYS daily summaries for one city, ascending by date."""

    city_key: str
    days: tuple[DailySummary, ...]

    def __post_init__(self) -> None:
        if not self.city_key:
            raise ValueError("city_key must not be empty")
        # Accept any sequence but store a tuple so the set stays immutable
        object.__setattr__(self, "days", tuple(self.days))
        if len(self.days) != FORECAST_DAYS:
            raise ValueError(
                f"expected {FORECAST_DAYS} days, got {len(self.days)}"
            )
        for prev, cur in zip(self.days, self.days[1:]):
            if cur.calendar_date <= prev.calendar_date:
                raise ValueError(
                    f"days not ascending: {prev.calendar_date} then {cur.calendar_date}"
                )


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float
