"""
SMHI (Swedish Meteorological and Hydrological Institute) Provider

Uses the pmp3g point forecast API. The first time series entry is the
current hour; wind speed and direction are the "ws" and "wd" parameters.

SMHI rejects coordinates that do not have exactly six decimals, so both are
formatted before they are embedded in the path (longitude first).
"""

import logging
from typing import Any, Dict

from multi_wind.config import ProviderConfig
from multi_wind.models import Provider, WindObservation
from multi_wind.providers.base import WindProvider
from multi_wind.resilience import SchemaMismatch

logger = logging.getLogger(__name__)


def format_coordinate(coord: float) -> str:
    """Format a coordinate with exactly six decimals (11 -> "11.000000")."""
    return f"{float(coord):.6f}"


class SmhiProvider(WindProvider):
    """Provider for SMHI pmp3g point forecasts."""

    provider = Provider.SMHI

    BASE_URL = "https://opendata-download-metfcst.smhi.se/api/category/pmp3g/version/2/geotype/point"

    HEADERS = {
        "Accept": "application/json",
        "User-Agent": "MultiWind/1.0.0",
    }

    def build_url(self, config: ProviderConfig) -> str:
        lon = format_coordinate(config.lon)
        lat = format_coordinate(config.lat)
        return f"{self.BASE_URL}/lon/{lon}/lat/{lat}/data.json"

    def _find_parameter(self, parameters: list, name: str) -> Dict[str, Any]:
        for param in parameters:
            if isinstance(param, dict) and param.get("name") == name:
                return param
        raise SchemaMismatch(self.provider, f"timeSeries[0].parameters[{name}]")

    def parse(self, data: Any) -> WindObservation:
        series = self.require_key(data, "timeSeries", "timeSeries")
        current = self.require_first(series, "timeSeries[0]")
        parameters = self.require_key(current, "parameters", "timeSeries[0].parameters")
        if not isinstance(parameters, list):
            raise SchemaMismatch(
                self.provider, "timeSeries[0].parameters",
                f"is {type(parameters).__name__}, not an array",
            )

        values = {}
        for name in ("ws", "wd"):
            path = f"timeSeries[0].parameters[{name}]"
            param = self._find_parameter(parameters, name)
            first = self.require_first(
                self.require_key(param, "values", f"{path}.values"),
                f"{path}.values[0]",
            )
            values[name] = self.require_number(first, f"{path}.values[0]")

        observation = WindObservation(wind_speed=values["ws"], wind_direction=values["wd"])
        logger.info(
            f"[SmhiProvider] Parsed wind: {observation.wind_speed} m/s "
            f"from {observation.wind_direction}°"
        )
        return observation
