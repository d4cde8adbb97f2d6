"""Error taxonomy for forecast fetching, decoding and caching."""


class ForecasterError(Exception):
    """Base class for all forecaster errors."""


class TransportError(ForecasterError):
    """Raised when an HTTP call fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ForecasterError):
    """Raised when a vendor payload does not have the expected shape."""


class FormatError(ForecasterError):
    """Raised when cached text or a date string does not parse."""
