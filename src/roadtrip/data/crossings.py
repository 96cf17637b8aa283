"""Static catalog of UK <-> mainland Europe sea and tunnel crossings."""

from __future__ import annotations

from ..models.domain import Crossing, CrossingTerminal, Location
from ..services.geospatial import haversine_km

# Average road speed used to compare crossings by total travel time.
PORT_DRIVE_SPEED_KMH = 80.0

_DOVER = CrossingTerminal(name="Dover", latitude=51.1279, longitude=1.3134, country="GB")
_PORTSMOUTH = CrossingTerminal(name="Portsmouth", latitude=50.7989, longitude=-1.0872, country="GB")

CROSSINGS: tuple[Crossing, ...] = (
    Crossing(
        crossing_id="dover-calais",
        name="Dover → Calais",
        crossing_type="ferry",
        departure=_DOVER,
        arrival=CrossingTerminal(name="Calais", latitude=50.9513, longitude=1.8587, country="FR"),
        duration_minutes=90,
        operators=("P&O Ferries", "DFDS"),
        cost_low=100,
        cost_high=300,
        notes="Most popular crossing. Frequent sailings, short crossing time.",
    ),
    Crossing(
        crossing_id="dover-dunkirk",
        name="Dover → Dunkirk",
        crossing_type="ferry",
        departure=_DOVER,
        arrival=CrossingTerminal(name="Dunkirk", latitude=51.0486, longitude=2.3767, country="FR"),
        duration_minutes=120,
        operators=("DFDS",),
        cost_low=80,
        cost_high=250,
        notes="Good alternative to Calais. Often cheaper, slightly longer crossing.",
    ),
    Crossing(
        crossing_id="eurotunnel",
        name="Folkestone → Calais",
        crossing_type="tunnel",
        departure=CrossingTerminal(name="Folkestone", latitude=51.0947, longitude=1.1354, country="GB"),
        arrival=CrossingTerminal(name="Calais (Coquelles)", latitude=50.9268, longitude=1.8134, country="FR"),
        duration_minutes=35,
        operators=("Eurotunnel Le Shuttle",),
        cost_low=120,
        cost_high=400,
        max_vehicle_length=18.0,
        notes="Fastest crossing. Drive on, drive off. Check height limits for high vehicles.",
    ),
    Crossing(
        crossing_id="portsmouth-caen",
        name="Portsmouth → Caen (Ouistreham)",
        crossing_type="ferry",
        departure=_PORTSMOUTH,
        arrival=CrossingTerminal(name="Caen (Ouistreham)", latitude=49.283, longitude=-0.2488, country="FR"),
        duration_minutes=360,
        operators=("Brittany Ferries",),
        cost_low=150,
        cost_high=450,
        overnight=True,
        notes="Arrives in Normandy. Good for western France, Spain and Portugal.",
    ),
    Crossing(
        crossing_id="portsmouth-lehavre",
        name="Portsmouth → Le Havre",
        crossing_type="ferry",
        departure=_PORTSMOUTH,
        arrival=CrossingTerminal(name="Le Havre", latitude=49.4872, longitude=0.1063, country="FR"),
        duration_minutes=330,
        operators=("Brittany Ferries",),
        cost_low=150,
        cost_high=400,
        overnight=True,
        notes="Overnight crossing. Arrives early morning.",
    ),
    Crossing(
        crossing_id="hull-rotterdam",
        name="Hull → Rotterdam (Europoort)",
        crossing_type="ferry",
        departure=CrossingTerminal(name="Hull", latitude=53.7389, longitude=-0.2769, country="GB"),
        arrival=CrossingTerminal(name="Rotterdam (Europoort)", latitude=51.9500, longitude=4.1333, country="NL"),
        duration_minutes=720,
        operators=("P&O Ferries",),
        cost_low=200,
        cost_high=500,
        overnight=True,
        notes="Overnight sailing to the Netherlands. Useful from northern England.",
    ),
)


def list_crossings() -> tuple[Crossing, ...]:
    return CROSSINGS


def get_crossing(crossing_id: str) -> Crossing | None:
    for crossing in CROSSINGS:
        if crossing.crossing_id == crossing_id:
            return crossing
    return None


def is_uk_or_ireland(lat: float, lon: float) -> bool:
    is_uk = 49.9 <= lat <= 60.9 and -8.2 <= lon <= 1.8
    is_ireland = 51.4 <= lat <= 55.4 and -10.5 <= lon <= -5.9
    return is_uk or is_ireland


def is_mainland_europe(lat: float, lon: float) -> bool:
    return 35 <= lat <= 72 and -10 <= lon <= 40 and not is_uk_or_ireland(lat, lon)


def needs_crossing(start: Location, end: Location) -> bool:
    """True when the trip goes between the UK/Ireland and mainland Europe."""

    start_uk = is_uk_or_ireland(start.latitude, start.longitude)
    end_uk = is_uk_or_ireland(end.latitude, end.longitude)
    return (start_uk and is_mainland_europe(end.latitude, end.longitude)) or (
        end_uk and is_mainland_europe(start.latitude, start.longitude)
    )


def recommended_crossings(start: Location, end: Location) -> list[Crossing]:
    """Crossings sorted by estimated total time: drive to port, cross, drive on."""

    start_uk = is_uk_or_ireland(start.latitude, start.longitude)

    def total_hours(crossing: Crossing) -> float:
        uk_terminal = crossing.departure if start_uk else crossing.arrival
        eu_terminal = crossing.arrival if start_uk else crossing.departure
        drive_km = haversine_km(start.latitude, start.longitude, uk_terminal.latitude, uk_terminal.longitude)
        drive_km += haversine_km(eu_terminal.latitude, eu_terminal.longitude, end.latitude, end.longitude)
        return drive_km / PORT_DRIVE_SPEED_KMH + crossing.duration_hours

    return sorted(CROSSINGS, key=total_hours)
