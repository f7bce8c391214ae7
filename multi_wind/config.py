"""
Configuration for Multi-Wind

Settings come from the environment (a .env file is loaded by the caller via
python-dotenv) and can be overridden by the CLI. Invalid numbers are rejected
here so a NaN never reaches a request URL.

Environment variables:
    MULTI_WIND_PROVIDER         smhi | yr (default smhi)
    MULTI_WIND_LAT              latitude, degrees (default 57.7089, Goteborg)
    MULTI_WIND_LON              longitude, degrees (default 11.9746)
    MULTI_WIND_ALTITUDE         meters above sea level, used by YR (default 0)
    MULTI_WIND_UPDATE_INTERVAL  seconds between refreshes (default 1800)
    MULTI_WIND_RETRY_DELAY      seconds before a retry (default 2)
    MULTI_WIND_MAX_RETRIES      retries per refresh period (default 3)
    MULTI_WIND_TIMEOUT          request timeout in seconds (default 10)
    MULTI_WIND_DISPLAY_TYPE     textsea | beaufort | ms (default textsea)
    MULTI_WIND_DIRECTION_TYPE   compass | degrees (default compass)
    MULTI_WIND_ICON_ONLY        true | false (default false)
"""

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from multi_wind.models import Provider
from multi_wind.resilience import RetryConfig

logger = logging.getLogger(__name__)

DEFAULT_LAT = 57.7089
DEFAULT_LON = 11.9746

DISPLAY_TYPES = ("textsea", "beaufort", "ms")
DIRECTION_TYPES = ("compass", "degrees")


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


@dataclass(frozen=True)
class ProviderConfig:
    """Location and provider for one acquisition cycle."""
    provider: Provider = Provider.SMHI
    lat: float = DEFAULT_LAT
    lon: float = DEFAULT_LON
    altitude: int = 0


@dataclass
class WindConfig:
    """Scheduling and display settings."""
    update_interval_seconds: float = 30 * 60
    retry: RetryConfig = field(default_factory=RetryConfig)
    timeout_seconds: float = 10.0
    display_type: str = "textsea"
    direction_type: str = "compass"
    icon_only: bool = False


def _parse_float(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be numeric, got {value!r}") from None
    if math.isnan(number) or math.isinf(number):
        raise ConfigError(f"{name} must be a finite number, got {value!r}")
    return number


def _clamp(name: str, value: float, low: float, high: float) -> float:
    clamped = min(max(value, low), high)
    if clamped != value:
        logger.warning(f"[config] {name}={value} out of range, clamped to {clamped}")
    return clamped


def parse_provider(value: Any) -> Provider:
    """Map a provider name to its variant, falling back to SMHI."""
    if isinstance(value, Provider):
        return value
    try:
        return Provider(str(value).strip().lower())
    except ValueError:
        logger.warning(f"[config] Invalid provider {value!r}, defaulting to SMHI")
        return Provider.SMHI


def make_provider_config(
    provider: Any = Provider.SMHI,
    lat: Any = DEFAULT_LAT,
    lon: Any = DEFAULT_LON,
    altitude: Any = 0,
) -> ProviderConfig:
    """
    Build a validated ProviderConfig from loosely typed values.

    Coordinates are parsed as floats and clamped to their valid range.
    Altitude is truncated to an int; a missing altitude means 0.

    Raises:
        ConfigError: if a coordinate or the altitude is not a finite number,
            or the altitude is negative.
    """
    lat_value = _clamp("lat", _parse_float("lat", lat), -90.0, 90.0)
    lon_value = _clamp("lon", _parse_float("lon", lon), -180.0, 180.0)

    if altitude is None or altitude == "":
        altitude = 0
    altitude_value = int(_parse_float("altitude", altitude))
    if altitude_value < 0:
        raise ConfigError(f"altitude must be >= 0, got {altitude!r}")

    return ProviderConfig(
        provider=parse_provider(provider),
        lat=lat_value,
        lon=lon_value,
        altitude=altitude_value,
    )


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _choice(name: str, value: str, choices: tuple, default: str) -> str:
    value = value.strip().lower()
    if value not in choices:
        logger.warning(f"[config] Invalid {name} {value!r}, defaulting to {default!r}")
        return default
    return value


def load_config(env: Optional[Mapping[str, str]] = None) -> Tuple[ProviderConfig, WindConfig]:
    """
    Load provider and scheduling settings from the environment.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        Tuple of (ProviderConfig, WindConfig)
    """
    if env is None:
        env = os.environ

    provider_config = make_provider_config(
        provider=env.get("MULTI_WIND_PROVIDER", "smhi"),
        lat=env.get("MULTI_WIND_LAT", DEFAULT_LAT),
        lon=env.get("MULTI_WIND_LON", DEFAULT_LON),
        altitude=env.get("MULTI_WIND_ALTITUDE", 0),
    )

    update_interval = _parse_float(
        "update_interval", env.get("MULTI_WIND_UPDATE_INTERVAL", 30 * 60)
    )
    retry_delay = _parse_float("retry_delay", env.get("MULTI_WIND_RETRY_DELAY", 2.0))
    timeout = _parse_float("timeout", env.get("MULTI_WIND_TIMEOUT", 10.0))
    max_retries = int(_parse_float("max_retries", env.get("MULTI_WIND_MAX_RETRIES", 3)))

    if update_interval <= 0 or timeout <= 0:
        raise ConfigError("update_interval and timeout must be positive")
    if retry_delay < 0 or max_retries < 0:
        raise ConfigError("retry_delay and max_retries must not be negative")

    wind_config = WindConfig(
        update_interval_seconds=update_interval,
        retry=RetryConfig(max_retries=max_retries, retry_delay_seconds=retry_delay),
        timeout_seconds=timeout,
        display_type=_choice(
            "display_type", env.get("MULTI_WIND_DISPLAY_TYPE", "textsea"),
            DISPLAY_TYPES, "textsea",
        ),
        direction_type=_choice(
            "direction_type", env.get("MULTI_WIND_DIRECTION_TYPE", "compass"),
            DIRECTION_TYPES, "compass",
        ),
        icon_only=_parse_bool(env.get("MULTI_WIND_ICON_ONLY", "false")),
    )

    logger.info(
        f"[config] provider={provider_config.provider.value} "
        f"lat={provider_config.lat} lon={provider_config.lon} "
        f"altitude={provider_config.altitude} "
        f"interval={wind_config.update_interval_seconds}s "
        f"retries={max_retries}x{retry_delay}s"
    )

    return provider_config, wind_config
