"""Device location providers."""

from typing import Protocol

from forecaster.models.forecast import Coordinate


class DeviceLocator(Protocol):
    def has_permission(self) -> bool: ...

    async def last_known(self) -> Coordinate | None: ...


class FixedLocator:
    """Reports a known coordinate, e.g. one passed on the command line."""

    def __init__(self, coordinate: Coordinate):
        self.coordinate = coordinate

    def has_permission(self) -> bool:
        return True

    async def last_known(self) -> Coordinate | None:
        return self.coordinate


class DeniedLocator:
    """Stands in for a device where location permission was not granted."""

    def has_permission(self) -> bool:
        return False

    async def last_known(self) -> Coordinate | None:
        return None
