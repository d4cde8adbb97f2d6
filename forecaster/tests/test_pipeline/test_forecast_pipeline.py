"""End-to-end pipeline tests: mocked vendor APIs, real SQLite cache."""

import asyncio
import json
import threading
from datetime import date

import httpx
import pytest
import respx

from forecaster.cache.codec import deserialize, serialize
from forecaster.config.schema import AppConfig
from forecaster.location.device import DeniedLocator, FixedLocator
from forecaster.models.forecast import Coordinate
from forecaster.models.result import ResultSource
from forecaster.pipeline.forecast_pipeline import ForecastPipeline
from forecaster.storage import cache_repo
from forecaster.tests.conftest import GEO_BASE, OW_BASE

FORECAST_URL = f"{OW_BASE}/forecast"
GEOCODE_URL = f"{GEO_BASE}/maps/api/geocode/json"


@pytest.fixture
def pipeline(test_config: AppConfig):
    p = ForecastPipeline(test_config)
    yield p
    p.close()


class TestRefresh:
    @respx.mock
    def test_live_result_is_persisted(self, pipeline: ForecastPipeline, forecast_payload: dict):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=forecast_payload))

        result = asyncio.run(pipeline.refresh("Tokyo"))

        assert result.source == ResultSource.LIVE
        days = result.forecast.days
        assert [d.calendar_date for d in days] == [date(2024, 1, d) for d in range(1, 6)]
        assert [d.temperature_celsius for d in days] == [4, 6, 8, 10, 12]
        assert deserialize(cache_repo.get_record(pipeline.conn, "Tokyo")) == result.forecast

    @respx.mock
    def test_outage_falls_back_to_last_live(
        self, pipeline: ForecastPipeline, forecast_payload: dict
    ):
        route = respx.get(FORECAST_URL)
        route.side_effect = [
            httpx.Response(200, json=forecast_payload),
            httpx.ConnectError("network down"),
        ]

        live = asyncio.run(pipeline.refresh("Tokyo"))
        cached = asyncio.run(pipeline.refresh("Tokyo"))

        assert cached.source == ResultSource.FALLBACK
        assert cached.forecast == live.forecast

    @respx.mock
    def test_malformed_payload_falls_back(
        self, pipeline: ForecastPipeline, tokyo_forecast
    ):
        cache_repo.save_record(pipeline.conn, "Tokyo", serialize(tokyo_forecast))
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json={"cod": "200", "list": []})
        )

        result = asyncio.run(pipeline.refresh("Tokyo"))
        assert result.source == ResultSource.FALLBACK
        assert result.forecast == tokyo_forecast

    @respx.mock
    def test_fallback_does_not_rewrite_cache(self, pipeline: ForecastPipeline, tokyo_forecast):
        record = serialize(tokyo_forecast)
        cache_repo.save_record(pipeline.conn, "Tokyo", record)
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(503))

        asyncio.run(pipeline.refresh("Tokyo"))
        assert cache_repo.get_record(pipeline.conn, "Tokyo") == record

    @respx.mock
    def test_nan_temperature_falls_back(
        self, pipeline: ForecastPipeline, forecast_payload: dict, tokyo_forecast
    ):
        cache_repo.save_record(pipeline.conn, "Tokyo", serialize(tokyo_forecast))
        forecast_payload["list"][0]["main"]["temp"] = float("nan")
        body = json.dumps(forecast_payload)
        assert "NaN" in body
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(
                200, content=body.encode(), headers={"Content-Type": "application/json"}
            )
        )

        result = asyncio.run(pipeline.refresh("Tokyo"))
        assert result.source == ResultSource.FALLBACK
        assert result.forecast == tokyo_forecast

    @respx.mock
    def test_nan_temperature_without_cache_is_unavailable(
        self, pipeline: ForecastPipeline, forecast_payload: dict
    ):
        forecast_payload["list"][0]["main"]["temp"] = float("nan")
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, content=json.dumps(forecast_payload).encode())
        )

        result = asyncio.run(pipeline.refresh("Tokyo"))
        assert result.source == ResultSource.UNAVAILABLE

    @respx.mock
    def test_no_cache_is_unavailable(self, pipeline: ForecastPipeline):
        respx.get(FORECAST_URL).mock(side_effect=httpx.ConnectError("network down"))

        result = asyncio.run(pipeline.refresh("Tokyo"))
        assert result.source == ResultSource.UNAVAILABLE
        assert result.forecast is None
        assert cache_repo.get_record(pipeline.conn, "Tokyo") == ""

    @respx.mock
    def test_store_calls_run_off_the_event_loop(
        self, pipeline: ForecastPipeline, forecast_payload: dict, monkeypatch
    ):
        threads: list[int] = []
        real_save = cache_repo.save_record
        real_get = cache_repo.get_record

        def save(conn, city_key, record):
            threads.append(threading.get_ident())
            real_save(conn, city_key, record)

        def get(conn, city_key):
            threads.append(threading.get_ident())
            return real_get(conn, city_key)

        monkeypatch.setattr(cache_repo, "save_record", save)
        monkeypatch.setattr(cache_repo, "get_record", get)
        route = respx.get(FORECAST_URL)
        route.side_effect = [
            httpx.Response(200, json=forecast_payload),
            httpx.ConnectError("network down"),
        ]

        async def run() -> tuple[int, ResultSource]:
            await pipeline.refresh("Tokyo")
            result = await pipeline.refresh("Tokyo")
            return threading.get_ident(), result.source

        loop_thread, source = asyncio.run(run())

        assert source == ResultSource.FALLBACK
        assert len(threads) == 2
        assert loop_thread not in threads

    @respx.mock
    def test_refresh_many_keeps_order(self, pipeline: ForecastPipeline, forecast_payload: dict):
        respx.get(FORECAST_URL, params={"q": "Tokyo"}).mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        respx.get(FORECAST_URL, params={"q": "Oita"}).mock(return_value=httpx.Response(500))

        results = asyncio.run(pipeline.refresh_many(["Oita", "Tokyo"]))

        assert [r.city_key for r in results] == ["Oita", "Tokyo"]
        assert [r.source for r in results] == [ResultSource.UNAVAILABLE, ResultSource.LIVE]
        assert [r["city_key"] for r in cache_repo.list_records(pipeline.conn)] == ["Tokyo"]


class TestRefreshCurrent:
    @respx.mock
    def test_region_drives_forecast(
        self, pipeline: ForecastPipeline, forecast_payload: dict, geocode_payload: dict
    ):
        geo = respx.get(GEOCODE_URL).mock(
            return_value=httpx.Response(200, json=geocode_payload)
        )
        ow = respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )

        result = asyncio.run(
            pipeline.refresh_current(FixedLocator(Coordinate(35.69, 139.70)))
        )

        assert result.city_key == "Tokyo"
        assert result.source == ResultSource.LIVE
        assert geo.calls[0].request.url.params["latlng"] == "35.69,139.7"
        assert ow.calls[0].request.url.params["q"] == "Tokyo"

    @respx.mock
    def test_denied_permission_uses_home(
        self, pipeline: ForecastPipeline, forecast_payload: dict, geocode_payload: dict
    ):
        geo = respx.get(GEOCODE_URL).mock(
            return_value=httpx.Response(200, json=geocode_payload)
        )
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=forecast_payload))

        asyncio.run(pipeline.refresh_current(DeniedLocator()))
        assert geo.calls[0].request.url.params["latlng"] == "35.6895,139.6917"

    @respx.mock
    def test_unknown_region_is_unavailable(self, pipeline: ForecastPipeline):
        respx.get(GEOCODE_URL).mock(
            return_value=httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})
        )
        ow = respx.get(FORECAST_URL)

        result = asyncio.run(pipeline.refresh_current(DeniedLocator()))

        assert result.source == ResultSource.UNAVAILABLE
        assert result.city_key == "Unknown"
        assert not ow.called
