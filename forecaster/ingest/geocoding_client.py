"""Google Maps reverse-geocoding client."""

import os

import httpx

from forecaster.ingest.http import get_json

GOOGLEMAPS_BASE_URL = "https://maps.googleapis.com"


class GeocodingClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = GOOGLEMAPS_BASE_URL,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key or os.environ.get("GOOGLEMAPS_API_KEY", "")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def reverse_geocode(self, latitude: float, longitude: float) -> object:
        params = {"latlng": f"{latitude},{longitude}", "key": self.api_key}
        return await get_json(
            f"{self.base_url}/maps/api/geocode/json",
            params,
            timeout=self.timeout,
            client=self._client,
            label="Geocoding",
        )
