"""Current-location and region-name resolution with fixed fallbacks."""

import asyncio
import logging
from typing import Protocol

from forecaster.ingest.response_schema import parse_region_name
from forecaster.location.device import DeviceLocator
from forecaster.models.forecast import Coordinate

logger = logging.getLogger(__name__)

DEFAULT_UNKNOWN_LABEL = "Unknown"


class ReverseGeocoder(Protocol):
    async def reverse_geocode(self, latitude: float, longitude: float) -> object: ...


class LocationResolver:
    """Resolves where the device is. Never raises; degrades to defaults."""

    def __init__(
        self,
        geocoder: ReverseGeocoder,
        locator: DeviceLocator,
        home: Coordinate,
        fix_timeout: float = 10.0,
        unknown_label: str = DEFAULT_UNKNOWN_LABEL,
    ):
        self.geocoder = geocoder
        self.locator = locator
        self.home = home
        self.fix_timeout = fix_timeout
        self.unknown_label = unknown_label

    async def current_coordinate(self) -> Coordinate:
        """Device fix if permitted and available in time, else the home coordinate."""
        try:
            if not self.locator.has_permission():
                logger.info("Location permission not granted, using home")
                return self.home
            fix = await asyncio.wait_for(
                self.locator.last_known(), timeout=self.fix_timeout
            )
        except TimeoutError:
            logger.warning(
                "No location fix within %.1fs, using home", self.fix_timeout
            )
            return self.home
        except Exception:
            logger.exception("Location lookup failed, using home")
            return self.home

        if fix is None:
            logger.info("No last known location, using home")
            return self.home
        return fix

    async def region_name_for(self, coordinate: Coordinate) -> str:
        """First-level administrative region for a coordinate, or the unknown label."""
        try:
            payload = await self.geocoder.reverse_geocode(
                coordinate.latitude, coordinate.longitude
            )
            name = parse_region_name(payload)
        except Exception as e:
            logger.warning(
                "Reverse geocoding failed for %s,%s: %s",
                coordinate.latitude, coordinate.longitude, e,
            )
            return self.unknown_label

        if not name:
            logger.info(
                "No region found for %s,%s", coordinate.latitude, coordinate.longitude
            )
            return self.unknown_label
        return name

    async def current_region_name(self) -> str:
        return await self.region_name_for(await self.current_coordinate())
