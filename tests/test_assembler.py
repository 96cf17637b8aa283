from datetime import date, timedelta

import pytest

from src.roadtrip.errors import ItineraryAssemblyError
from src.roadtrip.models.domain import Crossing, CrossingTerminal, Location, OvernightStop
from src.roadtrip.services.campsites.errors import OvernightSearchError, SearchFailureKind
from src.roadtrip.services.itinerary.assembler import (
    REST_DAY_NOTE,
    assemble,
    day_notes,
    select_overnight_candidate,
)
from src.roadtrip.services.itinerary.models import DayCandidates, DayType, Leg, OvernightCandidate
from src.roadtrip.services.itinerary.segmenter import CROSSING_PACE_WARNING
from src.roadtrip.services.itinerary.styles import limits_for

DEPARTURE = date(2026, 6, 1)
MODERATE = limits_for("moderate")

A = Location("Calais", 50.95, 1.86)
B = Location("Reims", 49.25, 4.03)
C = Location("Dijon", 47.32, 5.04)
D = Location("Lyon", 45.76, 4.84)


def _candidate(stop_id: str, score: float, distance: float = 1.0) -> OvernightCandidate:
    stop = OvernightStop(stop_id=stop_id, name=stop_id, category="campsite", latitude=0.0, longitude=0.0)
    return OvernightCandidate(stop=stop, distance_from_route_km=distance, suitability_score=score)


def _drive(start: Location, end: Location, km: float = 280.0, hours: float = 3.5) -> Leg:
    return Leg(kind=DayType.DRIVING, start=start, end=end, distance_km=km, driving_hours=hours)


def _itinerary():
    legs = [_drive(A, B), _drive(B, C, 220.0, 2.6), _drive(C, D, 190.0, 2.1)]
    slots = [
        DayCandidates(candidates=(_candidate("node/1", 90), _candidate("node/2", 75)), searched=True),
        DayCandidates(candidates=(_candidate("node/3", 60),), searched=True),
        DayCandidates(),
    ]
    return assemble(legs, slots, DEPARTURE, limits=MODERATE)


def test_days_are_numbered_dated_and_contiguous():
    itinerary = _itinerary()

    assert [day.day_number for day in itinerary.days] == [1, 2, 3]
    assert [day.date for day in itinerary.days] == [DEPARTURE + timedelta(days=i) for i in range(3)]
    for previous, current in zip(itinerary.days, itinerary.days[1:]):
        assert current.start == previous.end


def test_totals_equal_the_sum_of_days():
    itinerary = _itinerary()

    assert itinerary.total_days == len(itinerary.days) == 3
    assert itinerary.total_distance_km == pytest.approx(690.0)
    assert itinerary.total_driving_hours == pytest.approx(8.2)
    assert itinerary.warnings == ()


def test_best_candidate_is_selected_by_default():
    itinerary = _itinerary()

    assert itinerary.days[0].selected_overnight.candidate_id == "node/1"
    assert itinerary.days[1].selected_overnight.candidate_id == "node/3"
    assert itinerary.days[2].overnight_candidates == ()
    assert itinerary.days[2].selected_overnight is None


def test_mismatched_slots_are_an_assembly_error():
    legs = [_drive(A, B), _drive(B, C)]

    with pytest.raises(ItineraryAssemblyError):
        assemble(legs, [DayCandidates()], DEPARTURE)


def test_final_day_must_not_carry_candidates():
    legs = [_drive(A, B)]

    with pytest.raises(ItineraryAssemblyError):
        assemble(legs, [DayCandidates(candidates=(_candidate("node/1", 50),), searched=True)], DEPARTURE)


def test_rest_day_reuses_previous_night():
    legs = [_drive(A, B), Leg(kind=DayType.REST, start=B, end=B), _drive(B, C)]
    slots = [DayCandidates(candidates=(_candidate("node/1", 80),), searched=True), DayCandidates(), DayCandidates()]

    itinerary = assemble(legs, slots, DEPARTURE, limits=MODERATE)
    rest = itinerary.days[1]

    assert rest.day_type is DayType.REST
    assert rest.distance_km == 0 and rest.driving_hours == 0
    assert rest.start == rest.end == B
    assert rest.overnight_candidates == ()
    assert rest.selected_overnight is None
    assert rest.notes[0] == REST_DAY_NOTE
    assert "day 1" in rest.notes[1]


def test_failed_search_becomes_a_day_warning():
    legs = [_drive(A, B), _drive(B, C), _drive(C, D)]
    failure = OvernightSearchError(SearchFailureKind.AREA_TOO_LARGE, "Bounding box too large")
    slots = [
        DayCandidates(candidates=(_candidate("node/1", 80),), searched=True),
        DayCandidates(searched=True, failure=failure),
        DayCandidates(),
    ]

    itinerary = assemble(legs, slots, DEPARTURE)

    assert itinerary.days[1].selected_overnight is None
    assert itinerary.warnings == ("No accommodation found near day 2: search area too large.",)
    assert any("smaller area" in note for note in itinerary.days[1].notes)


def test_empty_search_result_is_reported():
    legs = [_drive(A, B), _drive(B, C)]

    itinerary = assemble(legs, [DayCandidates(searched=True), DayCandidates()], DEPARTURE)

    assert itinerary.warnings == ("No accommodation found near day 1.",)


def test_crossing_pace_warning_is_reported_at_itinerary_level():
    ferry = Crossing(
        crossing_id="slow",
        name="Slow Ferry",
        crossing_type="ferry",
        departure=CrossingTerminal("Dover", 51.12, 1.31, "GB"),
        arrival=CrossingTerminal("Calais", 50.95, 1.86, "FR"),
        duration_minutes=420,
        overnight=True,
    )
    crossing_leg = Leg(
        kind=DayType.CROSSING,
        start=Location("London", 51.5, -0.1),
        end=A,
        distance_km=160.0,
        driving_hours=8.5,
        crossing=ferry,
        warnings=(CROSSING_PACE_WARNING,),
    )

    itinerary = assemble([crossing_leg, _drive(A, B)], [DayCandidates(), DayCandidates()], DEPARTURE, limits=MODERATE)

    assert itinerary.crossing is ferry
    assert itinerary.days[0].warnings == (CROSSING_PACE_WARNING,)
    assert (
        "Daily distance exceeds your chosen driving style on day 1 due to a mandatory crossing."
        in itinerary.warnings
    )
    assert any("overnight crossing" in warning for warning in itinerary.warnings)
    # Nobody needs a campsite while sleeping on the ferry.
    assert not any("No accommodation" in warning for warning in itinerary.warnings)


def test_long_trip_without_rest_days_is_flagged():
    legs = [_drive(A, B, km=1500.0), _drive(B, C, km=1200.0)]
    slots = [DayCandidates(candidates=(_candidate("node/1", 80),), searched=True), DayCandidates()]

    itinerary = assemble(legs, slots, DEPARTURE, long_trip_km=2500)

    assert "This is a long trip. Consider adding rest days for comfort." in itinerary.warnings


def test_return_date_overrun_is_flagged():
    itinerary = assemble(
        [_drive(A, B), _drive(B, C)],
        [DayCandidates(candidates=(_candidate("node/1", 80),), searched=True), DayCandidates()],
        DEPARTURE,
        return_date=DEPARTURE,
    )

    assert any("after your return date" in warning for warning in itinerary.warnings)


def test_day_notes_describe_the_driving_load():
    long_day = day_notes(_drive(A, B, km=390.0, hours=5.8), MODERATE, is_last=False)
    short_day = day_notes(_drive(A, B, km=80.0, hours=1.0), MODERATE, is_last=False)
    arrival = day_notes(_drive(A, B, km=80.0, hours=1.0), MODERATE, is_last=True)

    assert any(note.startswith("Long driving day") for note in long_day)
    assert "Plan for 2 rest stops during the drive." in long_day
    assert any(note.startswith("Short driving day") for note in short_day)
    assert any(note.startswith("Arrival day") for note in arrival)
    assert not any(note.startswith("Short driving day") for note in arrival)


def test_select_replaces_only_the_target_day():
    itinerary = _itinerary()

    updated = select_overnight_candidate(itinerary, 1, "node/2")

    assert updated.days[0].selected_overnight.candidate_id == "node/2"
    assert updated.days[1] == itinerary.days[1]
    assert [c.suitability_score for c in updated.days[0].overnight_candidates] == [90, 75]
    # The input itinerary is untouched.
    assert itinerary.days[0].selected_overnight.candidate_id == "node/1"


def test_select_is_idempotent():
    itinerary = _itinerary()

    once = select_overnight_candidate(itinerary, 1, "node/2")
    twice = select_overnight_candidate(once, 1, "node/2")

    assert once == twice


def test_select_none_clears_the_choice():
    itinerary = select_overnight_candidate(_itinerary(), 2, None)

    assert itinerary.days[1].selected_overnight is None
    assert itinerary.days[1].overnight_candidates


@pytest.mark.parametrize("day_number, candidate_id", [(0, "node/1"), (4, "node/1"), (1, "node/3"), (3, "node/1")])
def test_select_rejects_unknown_days_and_candidates(day_number, candidate_id):
    with pytest.raises(ValueError):
        select_overnight_candidate(_itinerary(), day_number, candidate_id)


def test_rest_day_after_overnight_crossing_does_not_reuse_a_stop():
    ferry = Crossing(
        crossing_id="night",
        name="Night Ferry",
        crossing_type="ferry",
        departure=CrossingTerminal("Portsmouth", 50.80, -1.09, "GB"),
        arrival=CrossingTerminal("Caen", 49.28, -0.25, "FR"),
        duration_minutes=360,
        overnight=True,
    )
    landing = Location("Caen", 49.28, -0.25)
    legs = [
        Leg(
            kind=DayType.CROSSING,
            start=Location("London", 51.5, -0.1),
            end=landing,
            distance_km=290.0,
            driving_hours=7.5,
            crossing=ferry,
        ),
        Leg(kind=DayType.REST, start=landing, end=landing),
        _drive(landing, B),
    ]

    itinerary = assemble(legs, [DayCandidates(), DayCandidates(), DayCandidates()], DEPARTURE, limits=MODERATE)

    assert itinerary.days[1].notes == (REST_DAY_NOTE,)
