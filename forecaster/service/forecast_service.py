"""Forecast service: live fetch with fallback to the last cached snapshot."""

import asyncio
import logging
from collections.abc import Callable
from datetime import tzinfo
from typing import Protocol

from forecaster.aggregation.aggregator import build_forecast_set
from forecaster.cache.codec import NotFound, deserialize
from forecaster.errors import FormatError, MalformedResponseError, TransportError
from forecaster.ingest.response_schema import parse_forecast_response
from forecaster.models.result import ForecastResult

logger = logging.getLogger(__name__)


class RawForecastSource(Protocol):
    async def fetch_raw_forecast(self, city_key: str) -> object: ...


class ForecastService:
    """Fetches and aggregates a 5-day forecast for one city per call.

    Holds no state between requests. Persisting live results is left to the
    caller; load_record only reads the last record written for a city and
    returns "" when there is none. It is a blocking call and runs in a
    worker thread.
    """

    def __init__(
        self,
        source: RawForecastSource,
        load_record: Callable[[str], str],
        vendor_zone: str | tzinfo = "Asia/Tokyo",
    ):
        self.source = source
        self.load_record = load_record
        self.vendor_zone = vendor_zone

    async def get_forecast(self, city_key: str) -> ForecastResult:
        if not city_key:
            logger.error("Empty city key, forecast unavailable")
            return ForecastResult.unavailable(city_key)

        try:
            payload = await self.source.fetch_raw_forecast(city_key)
            samples = parse_forecast_response(payload)
            forecast = build_forecast_set(city_key, samples, self.vendor_zone)
        except (TransportError, MalformedResponseError) as e:
            logger.warning("Live forecast failed for %s, using cache: %s", city_key, e)
            return await self._fallback(city_key)

        logger.info("Fetched live forecast for %s", city_key)
        return ForecastResult.live(forecast)

    async def _fallback(self, city_key: str) -> ForecastResult:
        try:
            record = await asyncio.to_thread(self.load_record, city_key)
            cached = deserialize(record)
        except FormatError as e:
            logger.error("Cached forecast for %s is unreadable: %s", city_key, e)
            return ForecastResult.unavailable(city_key)
        except Exception:
            logger.exception("Cache lookup failed for %s", city_key)
            return ForecastResult.unavailable(city_key)

        if isinstance(cached, NotFound):
            logger.error("No cached forecast for %s, forecast unavailable", city_key)
            return ForecastResult.unavailable(city_key)
        if cached.city_key != city_key:
            logger.error(
                "Cached forecast under %s is for %s, ignoring", city_key, cached.city_key
            )
            return ForecastResult.unavailable(city_key)

        logger.info("Serving cached forecast for %s", city_key)
        return ForecastResult.fallback(cached)
