"""
Data acquisition: one fetch cycle for the configured provider.

build URL -> fetch body -> parse response, stopping at the first failure.
Stateless; the scheduler passes the config on every call.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from multi_wind.config import ProviderConfig
from multi_wind.fetch import DEFAULT_TIMEOUT_SECONDS, fetch_body
from multi_wind.models import WindObservation
from multi_wind.providers import get_provider
from multi_wind.resilience import AcquisitionError, categorize_error

logger = logging.getLogger(__name__)


@dataclass
class AcquisitionResult:
    """Outcome of one cycle: exactly one of observation / error is set."""
    observation: Optional[WindObservation] = None
    error: Optional[AcquisitionError] = None

    @property
    def ok(self) -> bool:
        return self.observation is not None


async def acquire_once(
    config: ProviderConfig,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AcquisitionResult:
    """
    Fetch and normalize the current wind for one location.

    Args:
        config: Provider and location
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)

    Returns:
        AcquisitionResult with either the observation or the error
    """
    provider = get_provider(config.provider)
    name = config.provider.name
    url = provider.build_url(config)

    logger.info(f"[acquire_once] Fetching wind data from {name} API: {url}")
    start = time.time()

    try:
        body = await fetch_body(url, provider.headers(), timeout=timeout, transport=transport)
        observation = provider.parse_body(body)
    except AcquisitionError as e:
        error_type, error_msg = categorize_error(e)
        logger.error(
            f"[acquire_once] {name} failed after {time.time() - start:.2f}s: "
            f"{error_type.value} - {error_msg}"
        )
        return AcquisitionResult(error=e)

    logger.info(
        f"[acquire_once] {name}: {observation.wind_speed} m/s, "
        f"{observation.wind_direction}° ({time.time() - start:.2f}s)"
    )
    return AcquisitionResult(observation=observation)
