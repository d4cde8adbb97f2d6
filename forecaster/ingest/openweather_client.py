"""OpenWeather 5-day / 3-hour forecast client."""

import logging
import os

import httpx

from forecaster.ingest.http import get_json

logger = logging.getLogger(__name__)

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"


class OpenWeatherClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = OPENWEATHER_BASE_URL,
        units: str = "metric",
        lang: str = "ja",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key or os.environ.get("OPENWEATHER_API_KEY", "")
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.lang = lang
        self.timeout = timeout
        self._client = client

    async def fetch_raw_forecast(self, city_key: str) -> object:
        """Fetch the raw forecast JSON for a city. No retries."""
        if not self.api_key:
            logger.warning("OpenWeather API key is not set; request will likely fail")
        params = {
            "q": city_key,
            "APPID": self.api_key,
            "units": self.units,
            "lang": self.lang,
        }
        return await get_json(
            f"{self.base_url}/forecast",
            params,
            timeout=self.timeout,
            client=self._client,
            label="OpenWeather",
        )
