"""
Shared fixtures: provider payloads and configs.
"""

import json
import sys
from pathlib import Path

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from multi_wind.config import ProviderConfig
from multi_wind.models import Provider


def smhi_document(ws=7.5, wd=180):
    """Trimmed pmp3g response: first time series entry with a few parameters."""
    return {
        "approvedTime": "2024-01-05T10:00:00Z",
        "geometry": {"type": "Point", "coordinates": [[11.974600, 57.708900]]},
        "timeSeries": [
            {
                "validTime": "2024-01-05T11:00:00Z",
                "parameters": [
                    {"name": "t", "levelType": "hl", "level": 2, "unit": "Cel", "values": [-3.1]},
                    {"name": "wd", "levelType": "hl", "level": 10, "unit": "degree", "values": [wd, 190]},
                    {"name": "ws", "levelType": "hl", "level": 10, "unit": "m/s", "values": [ws, 8.1]},
                    {"name": "r", "levelType": "hl", "level": 2, "unit": "percent", "values": [87]},
                ],
            },
            {
                "validTime": "2024-01-05T12:00:00Z",
                "parameters": [
                    {"name": "ws", "values": [9.9]},
                    {"name": "wd", "values": [270]},
                ],
            },
        ],
    }


def yr_document(speed=4.2, direction=225.3):
    """Trimmed Locationforecast 2.0 complete response."""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [11.9746, 57.7089, 0]},
        "properties": {
            "meta": {"updated_at": "2024-01-05T10:12:45Z", "units": {"wind_speed": "m/s"}},
            "timeseries": [
                {
                    "time": "2024-01-05T11:00:00Z",
                    "data": {
                        "instant": {
                            "details": {
                                "air_pressure_at_sea_level": 1003.4,
                                "air_temperature": -2.8,
                                "relative_humidity": 88.1,
                                "wind_from_direction": direction,
                                "wind_speed": speed,
                            }
                        },
                        "next_1_hours": {"summary": {"symbol_code": "cloudy"}},
                    },
                },
            ],
        },
    }


@pytest.fixture
def smhi_config():
    return ProviderConfig(provider=Provider.SMHI, lat=57.7089, lon=11.9746)


@pytest.fixture
def yr_config():
    return ProviderConfig(provider=Provider.YR, lat=59.9139, lon=10.7522, altitude=23)


@pytest.fixture
def smhi_body():
    return json.dumps(smhi_document()).encode("utf-8")


@pytest.fixture
def yr_body():
    return json.dumps(yr_document()).encode("utf-8")


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler):
        self.requests = []

        def recording_handler(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)
