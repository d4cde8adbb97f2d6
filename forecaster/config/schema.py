"""Pydantic v2 configuration schema with strict validation."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from forecaster.aggregation.time_conversion import WeekdayStyle


def _check_zone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {value!r}") from e
    return value


class CoordinateConfig(BaseModel):
    model_config = {"extra": "forbid"}

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class CityConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    key: str = Field(min_length=1)  # query value sent to the forecast API
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    enabled: bool = True


class OpenWeatherConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.openweathermap.org/data/2.5"
    api_key: str = ""
    units: str = "metric"
    lang: str = "ja"
    vendor_timezone: str = "Asia/Tokyo"
    timeout_seconds: float = Field(default=30.0, gt=0.0)

    @field_validator("vendor_timezone")
    @classmethod
    def _valid_zone(cls, v: str) -> str:
        return _check_zone(v)


class GeocodingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://maps.googleapis.com"
    api_key: str = ""
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    unknown_label: str = "Unknown"


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    # Tokyo
    home: CoordinateConfig = CoordinateConfig(latitude=35.6895, longitude=139.6917)
    fix_timeout_seconds: float = Field(default=10.0, gt=0.0)


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    timezone: str | None = None  # None: device local time
    weekday_style: WeekdayStyle = WeekdayStyle.FULL

    @field_validator("timezone")
    @classmethod
    def _valid_zone(cls, v: str | None) -> str | None:
        return v if v is None else _check_zone(v)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/forecaster.db"


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    openweather: OpenWeatherConfig = OpenWeatherConfig()
    geocoding: GeocodingConfig = GeocodingConfig()
    location: LocationConfig = LocationConfig()
    display: DisplayConfig = DisplayConfig()
    storage: StorageConfig = StorageConfig()
    cities: list[CityConfig] = []

    def city(self, key: str) -> CityConfig | None:
        for c in self.cities:
            if c.key == key:
                return c
        return None
