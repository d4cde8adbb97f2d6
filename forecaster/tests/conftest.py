"""Shared test fixtures."""

from collections.abc import Callable
from datetime import UTC, date, datetime
from pathlib import Path

import pytest
import yaml

from forecaster.config.defaults import DEFAULT_CITIES
from forecaster.config.schema import AppConfig
from forecaster.models.forecast import DailySummary, ForecastSet

OW_BASE = "https://test-ow.example.com/data/2.5"
GEO_BASE = "https://test-geo.example.com"

# 2024-01-01T00:00 in Asia/Tokyo
JST_MIDNIGHT_2024_01_01 = int(datetime(2023, 12, 31, 15, 0, tzinfo=UTC).timestamp())
THREE_HOURS = 3 * 3600


def forecast_item(dt: int, temp: float, kind: str = "Clear", icon: str = "01d") -> dict:
    """One entry of the vendor's "list" array, with the noise real payloads carry."""
    return {
        "dt": dt,
        "main": {"temp": temp, "feels_like": temp - 1, "humidity": 60},
        "weather": [{"id": 800, "main": kind, "description": kind.lower(), "icon": icon}],
        "dt_txt": datetime.fromtimestamp(dt, tz=UTC).strftime("%Y-%m-%d %H:%M:%S"),
    }


@pytest.fixture
def payload_factory() -> Callable[..., dict]:
    """Build a forecast payload of 3-hourly samples.

    Sample k gets temperature 2*day + (k % 8) + 1.25, where day is k // 8,
    so each full JST day averages to 2*day + 4 in whole degrees.
    """

    def build(count: int = 40, start: int = JST_MIDNIGHT_2024_01_01) -> dict:
        items = []
        for k in range(count):
            day, slot = divmod(k, 8)
            kind, icon = ("Clouds", "04n") if slot < 5 else ("Rain", "10d")
            items.append(
                forecast_item(start + k * THREE_HOURS, 2 * day + slot + 1.25, kind, icon)
            )
        return {"cod": "200", "cnt": count, "list": items, "city": {"name": "Tokyo"}}

    return build


@pytest.fixture
def forecast_payload(payload_factory) -> dict:
    """40 samples covering exactly 2024-01-01..2024-01-05 in Asia/Tokyo."""
    return payload_factory()


@pytest.fixture
def tokyo_forecast() -> ForecastSet:
    return ForecastSet(
        city_key="Tokyo",
        days=tuple(
            DailySummary(date(2024, 1, d), kind, icon, temp)
            for d, kind, icon, temp in [
                (1, "Clear", "01d", 7),
                (2, "Clouds", "04d", 5),
                (3, "Rain", "10d", -2),
                (4, "Snow", "13d", 0),
                (5, "Clear", "01d", 12),
            ]
        ),
    )


@pytest.fixture
def geocode_payload() -> dict:
    return {
        "status": "OK",
        "results": [
            {
                "address_components": [
                    {"long_name": "Shinjuku City", "types": ["locality", "political"]},
                    {
                        "long_name": "Tokyo",
                        "types": ["administrative_area_level_1", "political"],
                    },
                    {"long_name": "Japan", "types": ["country", "political"]},
                ]
            }
        ],
    }


@pytest.fixture
def test_config(tmp_path: Path) -> AppConfig:
    """Config pointing at mock API hosts and a temporary database."""
    return AppConfig(
        openweather={"base_url": OW_BASE, "api_key": "ow-test"},
        geocoding={"base_url": GEO_BASE, "api_key": "geo-test"},
        location={"fix_timeout_seconds": 0.5},
        storage={"db_path": str(tmp_path / "forecaster.db")},
        cities=DEFAULT_CITIES,
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "openweather": {"base_url": OW_BASE, "api_key": "ow-test"},
        "geocoding": {"base_url": GEO_BASE, "api_key": "geo-test"},
        "storage": {"db_path": str(tmp_path / "forecaster.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
