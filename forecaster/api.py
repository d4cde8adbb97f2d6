"""FastAPI backend feeding the city selector and forecast detail views."""

import asyncio

from fastapi import FastAPI, HTTPException

from forecaster.config.schema import AppConfig
from forecaster.location.device import FixedLocator
from forecaster.models.forecast import Coordinate
from forecaster.models.result import ForecastResult
from forecaster.pipeline.forecast_pipeline import ForecastPipeline
from forecaster.reporting.formatters import forecast_to_dict
from forecaster.reporting.icons import icon_url
from forecaster.storage import cache_repo


def create_app(config: AppConfig, db_path: str | None = None) -> FastAPI:
    app = FastAPI(title="Forecaster", version="0.1.0")

    def _pipeline() -> ForecastPipeline:
        return ForecastPipeline(config, db_path)

    def _respond(result: ForecastResult) -> dict:
        # Unavailable means the client should offer a retry
        if not result.is_available:
            raise HTTPException(503, f"Forecast unavailable for {result.city_key}")
        return forecast_to_dict(result)

    @app.get("/api/cities")
    def get_cities():
        """Cities offered in the selector."""
        return [
            {
                "key": c.key,
                "name": c.name,
                "latitude": c.latitude,
                "longitude": c.longitude,
            }
            for c in config.cities
            if c.enabled
        ]

    @app.get("/api/forecast/{city}")
    async def get_forecast(city: str):
        """5-day forecast for a city, live or from the cache."""
        pipeline = _pipeline()
        try:
            return _respond(await pipeline.refresh(city))
        finally:
            await asyncio.to_thread(pipeline.close)

    @app.get("/api/here")
    async def get_here_forecast(lat: float | None = None, lon: float | None = None):
        """Forecast for the caller's coordinate, or the configured home."""
        if (lat is None) != (lon is None):
            raise HTTPException(400, "Pass both lat and lon, or neither")
        if lat is None or lon is None:
            home = config.location.home
            coordinate = Coordinate(home.latitude, home.longitude)
        else:
            coordinate = Coordinate(lat, lon)

        pipeline = _pipeline()
        try:
            return _respond(await pipeline.refresh_current(FixedLocator(coordinate)))
        finally:
            await asyncio.to_thread(pipeline.close)

    @app.get("/api/cache")
    def get_cache():
        """Cities with a cached forecast."""
        pipeline = _pipeline()
        try:
            return cache_repo.list_records(pipeline.conn)
        finally:
            pipeline.close()

    @app.get("/api/icon/{code}")
    def get_icon(code: str, primary: bool = True):
        return {"code": code, "url": icon_url(code, primary=primary)}

    return app
