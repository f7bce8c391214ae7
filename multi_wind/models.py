"""
Core data types shared by the providers, the orchestrator and the renderer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class Provider(Enum):
    """Supported wind data providers."""
    SMHI = "smhi"
    YR = "yr"


@dataclass(frozen=True)
class WindObservation:
    """
    Current wind at the configured location.

    Speeds are meters/second as reported by both providers. A direction of
    exactly 0 is the providers' "no direction" sentinel.
    """
    wind_speed: float
    wind_direction: float

    def to_dict(self) -> Dict[str, float]:
        """Record handed across the outbound boundary."""
        return {
            "windSpeed": self.wind_speed,
            "windDirection": self.wind_direction,
        }
