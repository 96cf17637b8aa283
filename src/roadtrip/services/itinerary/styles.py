"""Driving-style policy: per-day distance and driving-time ceilings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ...errors import InvalidConfiguration


class DrivingStyle(str, Enum):
    RELAXED = "relaxed"
    MODERATE = "moderate"
    INTENSIVE = "intensive"


@dataclass(frozen=True, slots=True)
class DrivingStyleLimits:
    style: DrivingStyle
    max_daily_distance_km: float
    max_daily_hours: float
    short_description: str
    description: str


DRIVING_STYLE_LIMITS: dict[DrivingStyle, DrivingStyleLimits] = {
    DrivingStyle.RELAXED: DrivingStyleLimits(
        style=DrivingStyle.RELAXED,
        max_daily_distance_km=300.0,
        max_daily_hours=4.0,
        short_description="~4 hours / ~300 km per day",
        description=(
            "Take it easy. Short drives with plenty of time to explore, "
            "arrive early and enjoy your campsite."
        ),
    ),
    DrivingStyle.MODERATE: DrivingStyleLimits(
        style=DrivingStyle.MODERATE,
        max_daily_distance_km=400.0,
        max_daily_hours=6.0,
        short_description="~6 hours / ~400 km per day",
        description=(
            "A good balance. Enough driving to make progress, with time to stop "
            "and explore along the way."
        ),
    ),
    DrivingStyle.INTENSIVE: DrivingStyleLimits(
        style=DrivingStyle.INTENSIVE,
        max_daily_distance_km=550.0,
        max_daily_hours=8.0,
        short_description="~8 hours / ~550 km per day",
        description=(
            "Cover ground efficiently. Longer driving days for experienced "
            "road-trippers who want to reach their destination faster."
        ),
    ),
}


def limits_for(style: str | DrivingStyle) -> DrivingStyleLimits:
    """Return the limits for ``style``; unknown styles are a configuration error."""
    try:
        return DRIVING_STYLE_LIMITS[DrivingStyle(style)]
    except ValueError as exc:
        known = ", ".join(member.value for member in DrivingStyle)
        raise InvalidConfiguration(f"Unknown driving style '{style}'. Expected one of: {known}.") from exc
