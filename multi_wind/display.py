"""
Plain-text rendering of a WindObservation for the CLI.

English labels only. Speed is shown as a descriptive sea term ("textsea"),
a Beaufort force ("beaufort") or raw meters/second ("ms"); direction as a
compass point or degrees.
"""

from dataclasses import dataclass
from typing import Tuple

from multi_wind.classify import (
    classify_beaufort,
    classify_descriptive,
    direction_icon,
    direction_label,
    format_number,
    wind_icon,
)
from multi_wind.config import WindConfig
from multi_wind.models import WindObservation

LABELS = {
    "CALM": "Calm",
    "BREEZE": "Breeze",
    "GALE": "Gale",
    "STORM": "Storm",
    "HURRICANE": "Hurricane",
    "BEAUFORT": "Beaufort",
    "MS": "m/s",
    "WIND_SPEED": "Wind speed",
    "WIND_DIRECTION": "Wind direction",
    "LOADING": "Loading...",
    "ERROR": "Error loading wind data",
}


@dataclass(frozen=True)
class WindLine:
    icon: str
    text: str


def format_speed(speed: float, display_type: str = "textsea") -> str:
    if display_type == "textsea":
        return LABELS[classify_descriptive(speed).value]
    if display_type == "beaufort":
        return f"{classify_beaufort(speed)} {LABELS['BEAUFORT']}"
    return f"{format_number(speed)} {LABELS['MS']}"


def format_wind(observation: WindObservation, config: WindConfig) -> Tuple[WindLine, WindLine]:
    """Speed and direction lines, each with its Weather Icons class."""
    speed_value = format_speed(observation.wind_speed, config.display_type)
    direction_value = direction_label(observation.wind_direction, config.direction_type)

    if not config.icon_only:
        speed_value = f"{LABELS['WIND_SPEED']}: {speed_value}"
        direction_value = f"{LABELS['WIND_DIRECTION']}: {direction_value}"

    return (
        WindLine(icon=wind_icon(observation.wind_speed, config.display_type), text=speed_value),
        WindLine(icon=direction_icon(observation.wind_direction), text=direction_value),
    )


def format_error() -> str:
    return LABELS["ERROR"]


def format_loading() -> str:
    return LABELS["LOADING"]
