"""
Providers package for Multi-Wind

Two interchangeable wind data providers, selected by the Provider enum:

1. SMHI - Swedish Meteorological and Hydrological Institute (pmp3g)
2. YR   - Norwegian Meteorological Institute (api.met.no Locationforecast 2.0)

Each variant builds its own URL, supplies its own headers and parses its own
response schema into a WindObservation.
"""

from typing import Dict

from multi_wind.config import ProviderConfig
from multi_wind.models import Provider, WindObservation
from multi_wind.providers.base import WindProvider
from multi_wind.providers.smhi import SmhiProvider, format_coordinate
from multi_wind.providers.yr import YrProvider

PROVIDERS: Dict[Provider, WindProvider] = {
    Provider.SMHI: SmhiProvider(),
    Provider.YR: YrProvider(),
}


def get_provider(provider: Provider) -> WindProvider:
    """Return the implementation for a provider variant."""
    return PROVIDERS[provider]


def build_url(config: ProviderConfig) -> str:
    """Build the request URL for the configured provider and location."""
    return get_provider(config.provider).build_url(config)


def parse_response(provider: Provider, raw_body: bytes) -> WindObservation:
    """Parse a raw response body from the given provider."""
    return get_provider(provider).parse_body(raw_body)


__all__ = [
    "PROVIDERS",
    "WindProvider",
    "SmhiProvider",
    "YrProvider",
    "build_url",
    "format_coordinate",
    "get_provider",
    "parse_response",
]
