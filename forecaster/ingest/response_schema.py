"""Strict decode of OpenWeather forecast and Google geocoding payloads."""

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from forecaster.errors import MalformedResponseError
from forecaster.models.forecast import RawSample

REGION_COMPONENT_TYPE = "administrative_area_level_1"
GEOCODE_STATUS_OK = "OK"
# 9999-12-31T23:59:59Z
MAX_EPOCH_SECONDS = 253402300799


class _Payload(BaseModel):
    # Vendors add fields freely; only the ones we read are checked
    model_config = ConfigDict(extra="ignore", frozen=True)


class MainBlock(_Payload):
    temp: float = Field(allow_inf_nan=False)

    @field_validator("temp", mode="before")
    @classmethod
    def _numeric_only(cls, v: object) -> object:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"temp must be a number, got {type(v).__name__}")
        return v


class WeatherBlock(_Payload):
    main: StrictStr
    icon: StrictStr = Field(min_length=1)


class ForecastItem(_Payload):
    dt: StrictInt = Field(ge=0, le=MAX_EPOCH_SECONDS)
    main: MainBlock
    weather: list[WeatherBlock] = Field(min_length=1)


class ForecastResponse(_Payload):
    items: list[ForecastItem] = Field(alias="list")


class AddressComponent(_Payload):
    long_name: StrictStr
    types: list[StrictStr]


class GeocodingResult(_Payload):
    address_components: list[AddressComponent]


class GeocodingResponse(_Payload):
    status: StrictStr
    results: list[GeocodingResult] = []


def parse_forecast_response(payload: object) -> list[RawSample]:
    """Decode a forecast payload into raw samples, in feed order.

    The first entry of each item's weather list describes the sample.
    """
    try:
        response = ForecastResponse.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Forecast payload has unexpected shape ({e.error_count()} errors): {e}"
        ) from e
    return [
        RawSample(
            epoch_seconds_utc=item.dt,
            temperature_celsius=item.main.temp,
            weather_kind=item.weather[0].main,
            weather_icon_code=item.weather[0].icon,
        )
        for item in response.items
    ]


def parse_region_name(payload: object) -> str | None:
    """Return the first-level administrative area name, or None if absent."""
    try:
        response = GeocodingResponse.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Geocoding payload has unexpected shape: {e}"
        ) from e

    if response.status != GEOCODE_STATUS_OK or not response.results:
        return None
    for component in response.results[0].address_components:
        if REGION_COMPONENT_TYPE in component.types:
            return component.long_name
    return None
