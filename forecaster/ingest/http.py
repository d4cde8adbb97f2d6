"""Shared async GET helper mapping httpx failures onto the error taxonomy."""

import logging

import httpx

from forecaster.errors import MalformedResponseError, TransportError

logger = logging.getLogger(__name__)


async def get_json(
    url: str,
    params: dict[str, str],
    *,
    timeout: float,
    client: httpx.AsyncClient | None = None,
    label: str = "HTTP",
) -> object:
    """GET a URL and decode its JSON body.

    Raises TransportError for request failures and non-2xx statuses,
    MalformedResponseError for a body that is not JSON.
    """
    try:
        if client is not None:
            resp = await client.get(url, params=params, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as owned:
                resp = await owned.get(url, params=params)
    except httpx.RequestError as e:
        logger.warning("%s request failed: %s -> %s", label, url, e)
        raise TransportError(f"{label} request failed: {e}") from e

    if not resp.is_success:
        logger.warning("%s %s returned %d", label, url, resp.status_code)
        raise TransportError(
            f"{label} returned HTTP {resp.status_code}", resp.status_code
        )

    try:
        return resp.json()
    except ValueError as e:
        raise MalformedResponseError(f"{label} body is not JSON: {e}") from e
