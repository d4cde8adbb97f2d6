"""Outcome of a single forecast request."""

from dataclasses import dataclass
from enum import StrEnum

from forecaster.models.forecast import ForecastSet


class ResultSource(StrEnum):
    LIVE = "live"
    FALLBACK = "fallback"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ForecastResult:
    city_key: str
    source: ResultSource
    forecast: ForecastSet | None = None

    @classmethod
    def live(cls, forecast: ForecastSet) -> "ForecastResult":
        return cls(forecast.city_key, ResultSource.LIVE, forecast)

    @classmethod
    def fallback(cls, forecast: ForecastSet) -> "ForecastResult":
        return cls(forecast.city_key, ResultSource.FALLBACK, forecast)

    @classmethod
    def unavailable(cls, city_key: str) -> "ForecastResult":
        return cls(city_key, ResultSource.UNAVAILABLE, None)

    @property
    def is_available(self) -> bool:
        return self.forecast is not None

    @property
    def is_fallback(self) -> bool:
        return self.source == ResultSource.FALLBACK
