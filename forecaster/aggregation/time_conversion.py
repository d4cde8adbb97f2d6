"""Date and timezone helpers for forecast bucketing and display."""

from datetime import UTC, date, datetime, tzinfo
from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from forecaster.errors import FormatError

# yyyy/MM/dd, the only pattern used by the persisted cache record
CACHE_DATE_PATTERN = "%Y/%m/%d"

WEEKDAY_NAMES = [
    "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday",
]


class WeekdayStyle(StrEnum):
    FULL = "full"
    SHORT = "short"
    NARROW = "narrow"


class WeekdayAccent(StrEnum):
    DEFAULT = "default"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


def resolve_zone(zone: str | tzinfo) -> tzinfo:
    """Return a tzinfo for a zone name, passing tzinfo objects through."""
    if isinstance(zone, tzinfo):
        return zone
    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {zone!r}") from e


def epoch_to_local_date(epoch_seconds_utc: int, zone: str | tzinfo) -> date:
    """Calendar date of a UTC instant as seen in the given timezone."""
    instant = datetime.fromtimestamp(epoch_seconds_utc, tz=UTC)
    return instant.astimezone(resolve_zone(zone)).date()


def device_today(zone: str | tzinfo | None = None) -> date:
    """Today's date in the given zone, or in the device's local zone."""
    if zone is None:
        return datetime.now().astimezone().date()
    return datetime.now(resolve_zone(zone)).date()


def format_date(value: date, pattern: str = CACHE_DATE_PATTERN) -> str:
    return value.strftime(pattern)


def parse_date(text: str, pattern: str = CACHE_DATE_PATTERN) -> date:
    """Parse a date string, requiring an exact round-trip through format_date."""
    if not isinstance(text, str):
        raise FormatError(f"Date must be a string, got {type(text).__name__}")
    try:
        parsed = datetime.strptime(text, pattern).date()
    except ValueError as e:
        raise FormatError(f"Date {text!r} does not match {pattern!r}") from e
    # strptime tolerates unpadded fields ("2024/1/2"); the cache format does not
    if format_date(parsed, pattern) != text:
        raise FormatError(f"Date {text!r} does not match {pattern!r}")
    return parsed


def weekday_name(value: date, style: WeekdayStyle = WeekdayStyle.FULL) -> str:
    name = WEEKDAY_NAMES[value.weekday()]
    if style == WeekdayStyle.SHORT:
        return name[:3]
    if style == WeekdayStyle.NARROW:
        return name[0]
    return name


def weekday_accent(value: date) -> WeekdayAccent:
    """Accent used when rendering a weekday: Saturday and Sunday stand out."""
    weekday = value.weekday()
    if weekday == 5:
        return WeekdayAccent.SATURDAY
    if weekday == 6:
        return WeekdayAccent.SUNDAY
    return WeekdayAccent.DEFAULT
