"""Default cities offered in the city selector."""

from forecaster.config.schema import CityConfig

DEFAULT_CITIES: list[CityConfig] = [
    CityConfig(name="Hokkaido", key="Hokkaido", latitude=43.0643, longitude=141.3468),
    CityConfig(name="Tokyo", key="Tokyo", latitude=35.6895, longitude=139.6917),
    CityConfig(name="Hyogo", key="Hyogo", latitude=34.6912, longitude=135.1830),
    CityConfig(name="Oita", key="Oita", latitude=33.2381, longitude=131.6126),
]
