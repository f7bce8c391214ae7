"""
HTTP fetch client for the wind providers

One GET per call with a per-phase timeout. Every outcome other than a complete
200 response body is raised as an AcquisitionError subclass:

- httpx timeout          -> FetchTimeout
- DNS / connect / TLS    -> TransportFailure
- status != 200          -> HttpStatusError(code), body never parsed
"""

import logging
from typing import Mapping, Optional

import httpx

from multi_wind.resilience import FetchTimeout, HttpStatusError, TransportFailure
from multi_wind.ssl_helper import get_httpx_ssl_context

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


async def fetch_body(
    url: str,
    headers: Mapping[str, str],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bytes:
    """
    Fetch a URL and return the complete response body.

    Args:
        url: Fully built provider URL
        headers: Provider specific request headers
        timeout: Seconds allowed for each phase (connect, read, write, pool)
        transport: Optional httpx transport (used by tests)

    Returns:
        Raw response body bytes (status 200 only)

    Raises:
        FetchTimeout, TransportFailure, HttpStatusError
    """
    client_kwargs = {"timeout": timeout, "headers": dict(headers)}
    if transport is not None:
        client_kwargs["transport"] = transport
    else:
        client_kwargs["verify"] = get_httpx_ssl_context()

    try:
        async with httpx.AsyncClient(**client_kwargs) as client:
            resp = await client.get(url)

    except httpx.TimeoutException as e:
        logger.warning(f"[fetch_body] Request timed out after {timeout}s: {url}")
        raise FetchTimeout(f"Timed out after {timeout}s") from e
    except httpx.RequestError as e:
        logger.warning(f"[fetch_body] Request error: {type(e).__name__}: {e}")
        raise TransportFailure(f"{type(e).__name__}: {e}") from e

    logger.info(f"[fetch_body] Response status: {resp.status_code}")
    logger.debug(f"[fetch_body] Content-Type: {resp.headers.get('content-type')}")

    if resp.status_code != 200:
        logger.warning(f"[fetch_body] Request failed. Status Code: {resp.status_code}")
        raise HttpStatusError(resp.status_code)

    return resp.content
