"""Assemble legs and ranked overnight candidates into a dated itinerary."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, Sequence

from ...config import settings
from ...errors import ItineraryAssemblyError
from .models import Day, DayCandidates, DayType, Itinerary, Leg
from .styles import DrivingStyleLimits

REST_DAY_NOTE = "Rest day — explore the area, relax, or do laundry!"


def day_notes(leg: Leg, limits: DrivingStyleLimits | None, is_last: bool) -> list[str]:
    notes: list[str] = []
    if leg.kind is DayType.CROSSING:
        notes.append("This day includes a crossing — allow extra time for check-in and boarding.")
        if leg.crossing is not None and leg.crossing.overnight:
            notes.append(f"Overnight on board the {leg.crossing.name} crossing.")
    if is_last:
        notes.append("Arrival day! You've made it to your destination.")
    if leg.kind is not DayType.DRIVING:
        return notes

    if limits is not None and leg.driving_hours > limits.max_daily_hours * 0.9:
        notes.append("Long driving day — make sure to take regular breaks.")
    if leg.driving_hours < 2 and not is_last:
        notes.append("Short driving day — plenty of time to explore the area.")
    if leg.distance_km > 200:
        breaks = math.floor(leg.driving_hours / 2)
        if breaks > 0:
            notes.append(f"Plan for {breaks} rest stop{'s' if breaks > 1 else ''} during the drive.")
    return notes


def assemble(
    legs: Sequence[Leg],
    day_candidates: Sequence[DayCandidates],
    departure_date: date,
    *,
    limits: DrivingStyleLimits | None = None,
    return_date: date | None = None,
    extra_warnings: Iterable[str] = (),
    route_geometry: Sequence[tuple[float, float]] = (),
    long_trip_km: float | None = None,
) -> Itinerary:
    """Build the final itinerary. Performs no I/O.

    Raises:
        ItineraryAssemblyError: ``day_candidates`` does not line up with ``legs``.
    """
    if not legs:
        raise ItineraryAssemblyError("Cannot assemble an itinerary without legs.")
    if len(legs) != len(day_candidates):
        raise ItineraryAssemblyError(
            f"Got {len(day_candidates)} candidate slots for {len(legs)} legs."
        )
    last_index = len(legs) - 1
    if not legs[last_index].is_travel:
        raise ItineraryAssemblyError("The itinerary cannot end on a rest day.")

    warnings: list[str] = list(extra_warnings)
    days: list[Day] = []
    last_night_day: int | None = None

    for index, (leg, slot) in enumerate(zip(legs, day_candidates)):
        day_number = index + 1
        is_last = index == last_index
        if (leg.kind is DayType.REST or is_last) and slot.candidates:
            raise ItineraryAssemblyError(f"Day {day_number} must not carry overnight candidates.")

        if leg.kind is DayType.REST:
            notes = [REST_DAY_NOTE]
            if last_night_day is not None:
                notes.append(f"Staying at the same overnight stop as day {last_night_day}.")
        else:
            notes = day_notes(leg, limits, is_last)
            sleeps_on_board = leg.crossing is not None and leg.crossing.overnight
            # A night on board leaves no stop for a following rest day to reuse.
            last_night_day = None if sleeps_on_board else day_number
            if not is_last and not sleeps_on_board:
                if slot.failure is not None:
                    notes.append(f"{slot.failure.message}. {slot.failure.suggestion}")
                    warnings.append(
                        f"No accommodation found near day {day_number}: {slot.failure.message.lower()}."
                    )
                elif not slot.candidates:
                    warnings.append(f"No accommodation found near day {day_number}.")
            if leg.kind is DayType.CROSSING and leg.warnings:
                notes.extend(leg.warnings)
                warnings.append(
                    f"Daily distance exceeds your chosen driving style on day {day_number} "
                    "due to a mandatory crossing."
                )

        days.append(
            Day(
                day_number=day_number,
                date=departure_date + timedelta(days=index),
                day_type=leg.kind,
                start=leg.start,
                end=leg.end,
                distance_km=leg.distance_km,
                driving_hours=leg.driving_hours,
                overnight_candidates=slot.candidates,
                selected_overnight=slot.candidates[0] if slot.candidates else None,
                notes=tuple(notes),
                crossing=leg.crossing,
                warnings=leg.warnings,
            )
        )

    total_distance = sum(day.distance_km for day in days)
    total_hours = sum(day.driving_hours for day in days)
    crossing = next((leg.crossing for leg in legs if leg.crossing is not None), None)
    has_rest_days = any(leg.kind is DayType.REST for leg in legs)

    threshold = settings.long_trip_warning_km if long_trip_km is None else long_trip_km
    if total_distance > threshold and not has_rest_days:
        warnings.append("This is a long trip. Consider adding rest days for comfort.")
    if crossing is not None and crossing.overnight:
        warnings.append(f"The {crossing.name} is an overnight crossing — you'll sleep on the ferry.")
    if return_date is not None and days[-1].date > return_date:
        warnings.append(
            f"The itinerary needs {len(days)} days and ends on {days[-1].date.isoformat()}, "
            f"after your return date of {return_date.isoformat()}."
        )

    return Itinerary(
        days=tuple(days),
        total_days=len(days),
        total_distance_km=total_distance,
        total_driving_hours=total_hours,
        warnings=tuple(warnings),
        crossing=crossing,
        route_geometry=tuple(route_geometry),
    )


def select_overnight_candidate(itinerary: Itinerary, day_number: int, candidate_id: str | None) -> Itinerary:
    """Return a copy of ``itinerary`` with the day's selected stop replaced.

    ``candidate_id=None`` clears the selection. Scores are not recomputed.
    """
    if not 1 <= day_number <= len(itinerary.days):
        raise ValueError(f"Day {day_number} is not part of this itinerary.")
    day = itinerary.days[day_number - 1]

    if candidate_id is None:
        selected = None
    else:
        selected = next(
            (candidate for candidate in day.overnight_candidates if candidate.candidate_id == candidate_id),
            None,
        )
        if selected is None:
            raise ValueError(f"Candidate '{candidate_id}' is not an option for day {day_number}.")

    days = list(itinerary.days)
    days[day_number - 1] = replace(day, selected_overnight=selected)
    return replace(itinerary, days=tuple(days))
