import random

import pytest

from src.roadtrip.models.domain import Crossing, CrossingTerminal, Location
from src.roadtrip.services.itinerary.models import DayType
from src.roadtrip.services.itinerary.segmenter import (
    CROSSING_PACE_WARNING,
    daily_distance_allowance,
    segment,
)
from src.roadtrip.services.itinerary.styles import DrivingStyle, limits_for

# A trip along the 48th parallel keeps interpolated endpoints easy to reason about.
START = Location(name="Paris", latitude=48.0, longitude=2.0)
END = Location(name="Munich", latitude=48.0, longitude=12.0)
RELAXED = limits_for("relaxed")


def _crossing(departure_lon: float, arrival_lon: float, minutes: int = 90, overnight: bool = False) -> Crossing:
    return Crossing(
        crossing_id="test-crossing",
        name="Test Ferry",
        crossing_type="ferry",
        departure=CrossingTerminal(name="Port A", latitude=48.0, longitude=departure_lon, country="AA"),
        arrival=CrossingTerminal(name="Port B", latitude=48.0, longitude=arrival_lon, country="BB"),
        duration_minutes=minutes,
        overnight=overnight,
    )


def test_distance_ceiling_applies_when_it_is_tighter():
    legs = segment(1000.0, 10.0, START, END, RELAXED)

    assert [leg.kind for leg in legs] == [DayType.DRIVING] * 4
    assert [leg.distance_km for leg in legs] == pytest.approx([300.0, 300.0, 300.0, 100.0])
    assert legs[0].start == START
    assert legs[-1].end == END
    assert legs[0].end.latitude == pytest.approx(48.0)
    assert legs[0].end.longitude == pytest.approx(5.0)
    assert legs[0].end.name == "48.00°N, 5.00°E"
    assert legs[1].start == legs[0].end


def test_time_ceiling_applies_on_slow_routes():
    # 50 km/h average: four hours only cover 200 km.
    legs = segment(600.0, 12.0, START, END, RELAXED)

    assert [leg.distance_km for leg in legs] == pytest.approx([200.0, 200.0, 200.0])
    assert all(leg.driving_hours <= RELAXED.max_daily_hours + 1e-6 for leg in legs)


def test_daily_allowance_uses_tighter_ceiling():
    assert daily_distance_allowance(RELAXED, 0.01) == pytest.approx(300.0)
    assert daily_distance_allowance(RELAXED, 0.02) == pytest.approx(200.0)
    assert daily_distance_allowance(RELAXED, 0.0) == pytest.approx(300.0)


def test_remainder_becomes_last_day_without_padding():
    legs = segment(650.0, 6.5, START, END, RELAXED)

    assert [leg.distance_km for leg in legs] == pytest.approx([300.0, 300.0, 50.0])


def test_distance_exactly_one_day_is_a_single_leg():
    legs = segment(300.0, 3.0, START, END, RELAXED)

    assert len(legs) == 1
    assert legs[0].distance_km == pytest.approx(300.0)


def test_zero_distance_trip_is_one_empty_driving_day():
    legs = segment(0.0, 0.0, START, START, RELAXED)

    assert len(legs) == 1
    assert legs[0].kind is DayType.DRIVING
    assert legs[0].distance_km == 0
    assert legs[0].driving_hours == 0
    assert legs[0].start == legs[0].end == START


def test_totals_are_preserved():
    legs = segment(1234.5, 14.2, START, END, RELAXED, rest_day_frequency=2)

    assert sum(leg.distance_km for leg in legs) == pytest.approx(1234.5)
    assert sum(leg.driving_hours for leg in legs) == pytest.approx(14.2)


@pytest.mark.parametrize(
    "frequency, expected",
    [
        (0, "DDDD"),
        (1, "DRDRDRD"),
        (2, "DDRDD"),
        (3, "DDDRD"),
        (4, "DDDD"),
    ],
)
def test_rest_days_follow_every_n_travel_days(frequency, expected):
    legs = segment(1000.0, 10.0, START, END, RELAXED, rest_day_frequency=frequency)

    assert "".join(leg.kind.value[0].upper() for leg in legs) == expected
    assert legs[0].kind is not DayType.REST
    assert legs[-1].kind is not DayType.REST


def test_rest_day_stays_at_previous_endpoint():
    legs = segment(1000.0, 10.0, START, END, RELAXED, rest_day_frequency=2)
    rest = legs[2]

    assert rest.kind is DayType.REST
    assert rest.start == rest.end == legs[1].end
    assert rest.distance_km == 0
    assert rest.driving_hours == 0


def test_crossing_between_day_two_and_three_becomes_its_own_day():
    # Without the crossing the day-2 and day-3 endpoints sit at 600 and 900 km.
    crossing = _crossing(departure_lon=8.5, arrival_lon=9.0)

    legs = segment(1000.0, 10.0, START, END, RELAXED, crossing=crossing)

    assert [leg.kind for leg in legs] == [
        DayType.DRIVING,
        DayType.DRIVING,
        DayType.CROSSING,
        DayType.DRIVING,
    ]
    crossing_leg = legs[2]
    assert crossing_leg.crossing is crossing
    assert crossing_leg.start == legs[1].end
    assert crossing_leg.end.name == "Port B"
    # 50 km to the port plus 50 km at sea, half an hour of driving plus the sailing.
    assert crossing_leg.distance_km == pytest.approx(100.0)
    assert crossing_leg.driving_hours == pytest.approx(2.0)
    assert crossing_leg.warnings == ()
    assert legs[3].start == crossing_leg.end
    assert legs[3].distance_km == pytest.approx(300.0)
    assert legs[3].end == END


def test_long_crossing_is_kept_whole_and_flagged():
    crossing = _crossing(departure_lon=8.5, arrival_lon=9.0, minutes=360)

    legs = segment(1000.0, 10.0, START, END, RELAXED, crossing=crossing)
    crossing_leg = next(leg for leg in legs if leg.kind is DayType.CROSSING)

    assert crossing_leg.driving_hours > RELAXED.max_daily_hours
    assert crossing_leg.warnings == (CROSSING_PACE_WARNING,)
    for leg in legs:
        if leg.kind is DayType.DRIVING:
            assert leg.distance_km <= RELAXED.max_daily_distance_km + 1e-6
            assert leg.driving_hours <= RELAXED.max_daily_hours + 1e-6


def test_crossing_terminals_are_oriented_in_travel_direction():
    crossing = _crossing(departure_lon=9.0, arrival_lon=8.5)

    legs = segment(1000.0, 10.0, START, END, RELAXED, crossing=crossing)
    crossing_leg = legs[2]

    assert crossing_leg.kind is DayType.CROSSING
    assert crossing_leg.end.name == "Port A"


def test_crossing_at_destination_is_the_final_leg():
    crossing = _crossing(departure_lon=11.5, arrival_lon=12.0)

    legs = segment(1000.0, 10.0, START, END, RELAXED, crossing=crossing)

    assert legs[-1].kind is DayType.CROSSING
    assert legs[-1].end == END


def test_crossing_near_start_is_the_first_day():
    crossing = _crossing(departure_lon=2.5, arrival_lon=3.0)

    legs = segment(1000.0, 10.0, START, END, RELAXED, crossing=crossing)

    assert legs[0].kind is DayType.CROSSING
    assert legs[0].start == START
    assert legs[0].distance_km == pytest.approx(100.0)


def test_routed_geometry_drives_endpoint_positions():
    # An L-shaped route: two degrees north, then two degrees east.
    geometry = [(48.0, 2.0), (50.0, 2.0), (50.0, 4.0)]

    legs = segment(600.0, 6.0, START, Location("Lille", 50.0, 4.0), RELAXED, geometry=geometry)

    assert len(legs) == 2
    assert legs[0].end.latitude == pytest.approx(50.0)
    assert legs[0].end.longitude == pytest.approx(2.0)


def test_driving_days_never_exceed_the_ceilings():
    rng = random.Random(20260601)
    for _ in range(500):
        limits = limits_for(rng.choice(list(DrivingStyle)))
        distance = round(rng.uniform(0.2, 5000.0), 2)
        hours = round(distance / rng.uniform(20.0, 130.0), 2) or 0.01
        frequency = rng.randint(0, 4)

        legs = segment(distance, hours, START, END, limits, rest_day_frequency=frequency)

        for leg in legs:
            assert leg.distance_km <= limits.max_daily_distance_km, (limits.style, distance, hours, leg)
            assert leg.driving_hours <= limits.max_daily_hours, (limits.style, distance, hours, leg)
        assert sum(leg.distance_km for leg in legs) == pytest.approx(distance)


def test_time_bound_full_day_lands_on_the_hour_ceiling():
    legs = segment(2090.54, 44.83, START, END, RELAXED)

    assert all(leg.driving_hours <= RELAXED.max_daily_hours for leg in legs)
    assert legs[0].driving_hours == pytest.approx(RELAXED.max_daily_hours)
