"""
Wind classification for display

Maps a wind speed (m/s) onto three independent scales and a direction
(degrees) onto compass octants and arrow icons. The descriptive terms,
Beaufort forces and speed icons each have their own boundary table; the
tables look similar but are not interchangeable.

Icon names are Weather Icons classes (wi-*).
"""

from enum import Enum
from typing import Optional

UNAVAILABLE = "N/A"
NO_DIRECTION_ICON = "wi-na"

# Upper bound (inclusive) for Beaufort forces 0..11; above the last is force 12
BEAUFORT_CEILINGS = (0.2, 1.5, 3.3, 5.4, 7.9, 10.7, 13.8, 17.1, 20.7, 24.4, 28.4, 32.6)

COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

# Arrow points where the wind is blowing to (wind FROM north -> arrow down)
DIRECTION_ICONS = (
    "wi-direction-down",
    "wi-direction-down-left",
    "wi-direction-left",
    "wi-direction-up-left",
    "wi-direction-up",
    "wi-direction-up-right",
    "wi-direction-right",
    "wi-direction-down-right",
)


class SpeedTerm(Enum):
    """Descriptive sea terms."""
    CALM = "CALM"
    BREEZE = "BREEZE"
    GALE = "GALE"
    STORM = "STORM"
    HURRICANE = "HURRICANE"


def classify_descriptive(speed: float) -> SpeedTerm:
    if speed >= 32.7:
        return SpeedTerm.HURRICANE
    if speed >= 24.5:
        return SpeedTerm.STORM
    if speed >= 13.9:
        return SpeedTerm.GALE
    if speed >= 0.3:
        return SpeedTerm.BREEZE
    return SpeedTerm.CALM


def classify_beaufort(speed: float) -> int:
    """Beaufort force 0-12: first force whose ceiling the speed does not exceed."""
    for force, ceiling in enumerate(BEAUFORT_CEILINGS):
        if speed <= ceiling:
            return force
    return 12


def beaufort_icon(speed: float) -> str:
    return f"wi-wind-beaufort-{classify_beaufort(speed)}"


def wind_icon(speed: float, display_type: str = "textsea") -> str:
    """Speed icon; Beaufort display uses the dedicated per-force icons."""
    if display_type == "beaufort":
        return beaufort_icon(speed)

    if speed <= 0.2:
        return "wi-cloud"
    if speed <= 3.3:
        return "wi-windy"
    if speed <= 13.8:
        return "wi-strong-wind"
    if speed <= 24.4:
        return "wi-gale-warning"
    if speed <= 32.6:
        return "wi-storm-warning"
    return "wi-hurricane-warning"


def format_number(value: float) -> str:
    """Whole numbers without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def normalize_degrees(degrees: float) -> float:
    """Bring any heading into [0, 360)."""
    return degrees % 360


def compass_octant(degrees: float) -> int:
    """Index 0-7 (N, NE, ... NW) of the 45 degree sector centered on each point."""
    return int(((normalize_degrees(degrees) + 22.5) % 360) // 45)


def compass_direction(degrees: float) -> Optional[str]:
    """
    Compass point for a heading, or None when the direction is unavailable.

    Only an exact 0 is the "no data" sentinel; 360 is due north.
    """
    if degrees == 0:
        return None
    return COMPASS_POINTS[compass_octant(degrees)]


def direction_label(degrees: float, direction_type: str = "compass") -> str:
    """Compass point or raw degree label, "N/A" for the sentinel."""
    if degrees == 0:
        return UNAVAILABLE
    if direction_type == "compass":
        return compass_direction(degrees)
    return f"{format_number(degrees)}°"


def direction_icon(degrees: float) -> str:
    """
    Arrow icon for a heading.

    Sector upper edges are inclusive here (22.5 -> north arrow), unlike
    compass_direction where 22.5 already reads NE.
    """
    if degrees == 0:
        return NO_DIRECTION_ICON

    normalized = normalize_degrees(degrees)
    if normalized > 337.5 or normalized <= 22.5:
        return DIRECTION_ICONS[0]
    for index, upper in enumerate((67.5, 112.5, 157.5, 202.5, 247.5, 292.5, 337.5), start=1):
        if normalized <= upper:
            return DIRECTION_ICONS[index]
    return NO_DIRECTION_ICON
