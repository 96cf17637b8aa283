"""Split a routed trip into daily legs, rest days and an optional crossing."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Crossing, Location
from ..geospatial import RouteLine, format_coordinates
from .models import DayType, Leg
from .styles import DrivingStyleLimits

# Trips shorter than this are treated as "already there".
NEGLIGIBLE_DISTANCE_KM = 0.1
_EPSILON_KM = 1e-6

CROSSING_PACE_WARNING = "Today's travel exceeds your preferred pace due to a mandatory crossing."


def daily_distance_allowance(limits: DrivingStyleLimits, hours_per_km: float) -> float:
    """Distance one day may cover: the tighter of the distance and time ceilings."""

    if hours_per_km <= 0:
        return limits.max_daily_distance_km
    return min(limits.max_daily_distance_km, limits.max_daily_hours / hours_per_km)


class _RouteSplitter:
    """Turns positions along the route (km from start) into driving legs."""

    def __init__(
        self,
        line: RouteLine,
        start: Location,
        end: Location,
        total_distance_km: float,
        hours_per_km: float,
        limits: DrivingStyleLimits,
    ) -> None:
        self.line = line
        self.start = start
        self.end = end
        self.total_distance_km = total_distance_km
        self.hours_per_km = hours_per_km
        self.limits = limits
        self.daily_km = daily_distance_allowance(limits, hours_per_km)

    def _full_days(self, from_km: float, to_km: float) -> list[float]:
        # Multiples of the daily distance; repeated addition drifts past the ceiling.
        positions = [from_km]
        days = 1
        while to_km - (from_km + (days - 1) * self.daily_km) > self.daily_km + _EPSILON_KM:
            positions.append(from_km + days * self.daily_km)
            days += 1
        return positions

    def carve(self, from_km: float, to_km: float) -> list[float]:
        """Day boundaries between two positions; the remainder becomes the last day."""
        positions = self._full_days(from_km, to_km)
        positions.append(to_km)
        return positions

    def full_days_before(self, limit_km: float) -> list[float]:
        """Boundaries of whole days that finish before ``limit_km``."""
        return self._full_days(0.0, limit_km)

    def location_at(self, position_km: float) -> Location:
        if position_km <= _EPSILON_KM:
            return self.start
        if position_km >= self.total_distance_km - _EPSILON_KM:
            return self.end
        lat, lon = self.line.point_at(position_km)
        return Location(name=format_coordinates(lat, lon), latitude=lat, longitude=lon)

    def driving_legs(self, positions: Sequence[float], first: Location | None = None) -> list[Leg]:
        legs: list[Leg] = []
        previous = first or self.location_at(positions[0])
        for from_km, to_km in zip(positions, positions[1:]):
            destination = self.location_at(to_km)
            distance = min(to_km - from_km, self.limits.max_daily_distance_km)
            legs.append(
                Leg(
                    kind=DayType.DRIVING,
                    start=previous,
                    end=destination,
                    distance_km=distance,
                    driving_hours=min(distance * self.hours_per_km, self.limits.max_daily_hours),
                )
            )
            previous = destination
        return legs


def segment(
    total_distance_km: float,
    total_driving_hours: float,
    start: Location,
    end: Location,
    limits: DrivingStyleLimits,
    rest_day_frequency: int = 0,
    crossing: Crossing | None = None,
    *,
    geometry: Sequence[tuple[float, float]] | None = None,
) -> list[Leg]:
    """Return the trip's legs in travel order, rest days included.

    ``geometry`` is the routed polyline as (lat, lon) pairs. Without it, day
    endpoints are interpolated on the straight line between start and end.
    """
    if total_distance_km < NEGLIGIBLE_DISTANCE_KM and crossing is None:
        return [Leg(kind=DayType.DRIVING, start=start, end=end)]

    if geometry is not None and len(geometry) >= 2:
        line = RouteLine(geometry, total_distance_km)
    else:
        line = RouteLine.straight(start.coordinates, end.coordinates, total_distance_km)

    hours_per_km = total_driving_hours / total_distance_km if total_distance_km > 0 else 0.0
    splitter = _RouteSplitter(
        line,
        start,
        end,
        total_distance_km,
        hours_per_km,
        limits,
    )

    if crossing is None:
        travel_legs = splitter.driving_legs(splitter.carve(0.0, total_distance_km))
    else:
        travel_legs = _legs_with_crossing(splitter, crossing, limits)

    return _insert_rest_days(travel_legs, rest_day_frequency)


def _legs_with_crossing(splitter: _RouteSplitter, crossing: Crossing, limits: DrivingStyleLimits) -> list[Leg]:
    # The terminal the route reaches first is where the vehicle boards.
    boarding, landing = crossing.departure, crossing.arrival
    board_km = splitter.line.locate(boarding.latitude, boarding.longitude)
    land_km = splitter.line.locate(landing.latitude, landing.longitude)
    if land_km < board_km:
        boarding, landing = landing, boarding
        board_km, land_km = land_km, board_km

    before = splitter.full_days_before(board_km)
    legs = splitter.driving_legs(before) if len(before) > 1 else []

    # The crossing day drives the rest of the way to the port, then crosses.
    approach_km = board_km - before[-1]
    distance = approach_km + (land_km - board_km)
    hours = approach_km * splitter.hours_per_km + crossing.duration_hours
    warnings: tuple[str, ...] = ()
    if distance > limits.max_daily_distance_km + _EPSILON_KM or hours > limits.max_daily_hours + _EPSILON_KM:
        warnings = (CROSSING_PACE_WARNING,)

    has_onward_drive = splitter.total_distance_km - land_km > NEGLIGIBLE_DISTANCE_KM
    landing_location = landing.as_location() if has_onward_drive else splitter.end
    legs.append(
        Leg(
            kind=DayType.CROSSING,
            start=splitter.location_at(before[-1]),
            end=landing_location,
            distance_km=distance,
            driving_hours=hours,
            crossing=crossing,
            warnings=warnings,
        )
    )

    if has_onward_drive:
        onward = splitter.carve(land_km, splitter.total_distance_km)
        legs.extend(splitter.driving_legs(onward, first=landing_location))
    return legs


def _insert_rest_days(travel_legs: list[Leg], rest_day_frequency: int) -> list[Leg]:
    if rest_day_frequency <= 0:
        return list(travel_legs)

    legs: list[Leg] = []
    since_rest = 0
    for index, leg in enumerate(travel_legs):
        legs.append(leg)
        since_rest += 1
        is_last = index == len(travel_legs) - 1
        if since_rest >= rest_day_frequency and not is_last:
            legs.append(Leg(kind=DayType.REST, start=leg.end, end=leg.end))
            since_rest = 0
    return legs
