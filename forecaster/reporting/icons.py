"""OpenWeather icon URL derivation."""

ICON_URL_LARGE = "https://openweathermap.org/img/wn/{code}@4x.png"
ICON_URL_SMALL = "https://openweathermap.org/img/wn/{code}.png"


def day_variant(code: str) -> str:
    """Force the day variant of an icon code: "10n" -> "10d"."""
    if not code:
        raise ValueError("icon code must not be empty")
    if code.endswith("d"):
        return code
    return code[:-1] + "d"


def icon_url(code: str, primary: bool = True) -> str:
    """URL of the day-variant icon, large for the primary day, small otherwise."""
    template = ICON_URL_LARGE if primary else ICON_URL_SMALL
    return template.format(code=day_variant(code))
