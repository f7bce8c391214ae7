"""
YR (Norwegian Meteorological Institute, api.met.no) Provider

Uses the Locationforecast 2.0 "complete" API. The first timeseries entry is
the current hour; instant details carry wind_speed and wind_from_direction.

Met.no terms of service require a descriptive User-Agent with contact info;
requests without one are answered with 403.
"""

import logging
from typing import Any

import httpx

from multi_wind.config import ProviderConfig
from multi_wind.models import Provider, WindObservation
from multi_wind.providers.base import WindProvider

logger = logging.getLogger(__name__)

_DETAILS_PATH = ("properties", "timeseries", 0, "data", "instant", "details")


def format_plain(value: float) -> str:
    """Plain decimal form; integral values print without a trailing ".0"."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class YrProvider(WindProvider):
    """Provider for met.no (YR backend) location forecasts."""

    provider = Provider.YR

    BASE_URL = "https://api.met.no/weatherapi/locationforecast/2.0/complete"

    # Required User-Agent per Met.no API terms
    HEADERS = {
        "User-Agent": "MultiWind/1.0.0 github.com/user/multi-wind",
        "Accept": "application/json",
    }

    def build_url(self, config: ProviderConfig) -> str:
        params = {
            "altitude": int(config.altitude),
            "lat": format_plain(config.lat),
            "lon": format_plain(config.lon),
        }
        return str(httpx.URL(self.BASE_URL, params=params))

    def parse(self, data: Any) -> WindObservation:
        node = data
        path = ""
        for step in _DETAILS_PATH:
            if isinstance(step, int):
                path = f"{path}[{step}]"
                node = self.require_first(node, path)
            else:
                path = f"{path}.{step}" if path else step
                node = self.require_key(node, step, path)

        speed = self.require_number(
            self.require_key(node, "wind_speed", f"{path}.wind_speed"),
            f"{path}.wind_speed",
        )
        direction = self.require_number(
            self.require_key(node, "wind_from_direction", f"{path}.wind_from_direction"),
            f"{path}.wind_from_direction",
        )

        observation = WindObservation(wind_speed=speed, wind_direction=direction)
        logger.info(
            f"[YrProvider] Parsed wind: {observation.wind_speed} m/s "
            f"from {observation.wind_direction}°"
        )
        return observation
