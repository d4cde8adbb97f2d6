"""Forecast pipeline: fetch through the service and persist live results."""

import asyncio
import logging
import sqlite3
import threading

import httpx

from forecaster.cache.codec import serialize
from forecaster.config.schema import AppConfig
from forecaster.ingest.geocoding_client import GeocodingClient
from forecaster.ingest.openweather_client import OpenWeatherClient
from forecaster.location.device import DeviceLocator
from forecaster.location.resolver import LocationResolver
from forecaster.models.forecast import Coordinate
from forecaster.models.result import ForecastResult, ResultSource
from forecaster.service.forecast_service import ForecastService
from forecaster.storage import cache_repo
from forecaster.storage.database import open_store

logger = logging.getLogger(__name__)


class ForecastPipeline:
    """Owns the cache store and decides what gets persisted.

    Only live results are written back; fallback results are already the
    stored record and unavailable results carry nothing to store. Store calls
    from coroutines run in worker threads, one at a time.
    """

    def __init__(
        self,
        config: AppConfig,
        db_path: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self.db_path = db_path or config.storage.db_path
        self.http_client = http_client
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def conn(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is None:
                self._conn = open_store(self.db_path)
            return self._conn

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def load_record(self, city_key: str) -> str:
        conn = self.conn
        with self._lock:
            return cache_repo.get_record(conn, city_key)

    def store_record(self, city_key: str, record: str) -> None:
        conn = self.conn
        with self._lock:
            cache_repo.save_record(conn, city_key, record)

    def build_service(self) -> ForecastService:
        ow = self.config.openweather
        client = OpenWeatherClient(
            api_key=ow.api_key,
            base_url=ow.base_url,
            units=ow.units,
            lang=ow.lang,
            timeout=ow.timeout_seconds,
            client=self.http_client,
        )
        return ForecastService(
            client,
            self.load_record,
            vendor_zone=ow.vendor_timezone,
        )

    def build_resolver(self, locator: DeviceLocator) -> LocationResolver:
        geo = self.config.geocoding
        loc = self.config.location
        return LocationResolver(
            GeocodingClient(
                api_key=geo.api_key,
                base_url=geo.base_url,
                timeout=geo.timeout_seconds,
                client=self.http_client,
            ),
            locator,
            home=Coordinate(loc.home.latitude, loc.home.longitude),
            fix_timeout=loc.fix_timeout_seconds,
            unknown_label=geo.unknown_label,
        )

    async def refresh(self, city_key: str) -> ForecastResult:
        """Get the forecast for a city, persisting it when it came from the API."""
        result = await self.build_service().get_forecast(city_key)
        if result.source == ResultSource.LIVE and result.forecast is not None:
            await asyncio.to_thread(
                self.store_record, city_key, serialize(result.forecast)
            )
            logger.info("Cached forecast for %s", city_key)
        return result

    async def refresh_many(self, city_keys: list[str]) -> list[ForecastResult]:
        """Refresh several cities concurrently, results in input order."""
        return list(await asyncio.gather(*(self.refresh(k) for k in city_keys)))

    async def refresh_current(self, locator: DeviceLocator) -> ForecastResult:
        """Resolve the device's region and refresh its forecast."""
        resolver = self.build_resolver(locator)
        region = await resolver.current_region_name()
        if region == resolver.unknown_label:
            logger.error("Current region could not be resolved")
            return ForecastResult.unavailable(region)
        logger.info("Current region resolved to %s", region)
        return await self.refresh(region)
