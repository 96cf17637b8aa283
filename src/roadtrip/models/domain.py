"""Domain models for trip requests, vehicles, crossings and overnight stops."""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Optional


@dataclass(frozen=True, slots=True)
class Location:
    """A named point on the map."""

    name: str
    latitude: float
    longitude: float

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class VehicleProfile:
    """Dimensions of the travelling vehicle (metres and tonnes)."""

    vehicle_type: Literal["motorhome", "caravan", "campervan"]
    height: float
    width: float
    length: float
    weight: float


@dataclass(frozen=True, slots=True)
class CrossingTerminal:
    name: str
    latitude: float
    longitude: float
    country: str

    def as_location(self) -> Location:
        return Location(name=self.name, latitude=self.latitude, longitude=self.longitude)


@dataclass(frozen=True, slots=True)
class Crossing:
    """A fixed-duration sea or tunnel crossing chosen by the traveller."""

    crossing_id: str
    name: str
    crossing_type: Literal["ferry", "tunnel"]
    departure: CrossingTerminal
    arrival: CrossingTerminal
    duration_minutes: int
    operators: tuple[str, ...] = ()
    cost_low: float = 0.0
    cost_high: float = 0.0
    currency: str = "GBP"
    overnight: bool = False
    max_vehicle_length: Optional[float] = None
    notes: str = ""

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / 60.0


@dataclass(frozen=True, slots=True)
class TripRequest:
    """Everything needed for one itinerary generation run."""

    start: Location
    end: Location
    departure_date: date
    driving_style: str
    return_date: Optional[date] = None
    crossing: Optional[Crossing] = None
    rest_day_frequency: int = 0
    vehicle_profile: Optional[VehicleProfile] = None


@dataclass(frozen=True, slots=True)
class BoundingBox:
    south: float
    west: float
    north: float
    east: float


@dataclass(frozen=True, slots=True)
class VehicleAccess:
    """Access restrictions recorded for a stop. ``None`` means not tagged."""

    motorhome: Optional[bool] = None
    caravan: Optional[bool] = None
    max_height: Optional[float] = None
    max_length: Optional[float] = None
    max_weight: Optional[float] = None

    def has_restrictions(self) -> bool:
        return any(
            value is not None
            for value in (self.motorhome, self.caravan, self.max_height, self.max_length, self.max_weight)
        )


@dataclass(frozen=True, slots=True)
class OvernightStop:
    """A campsite, caravan site or motorhome aire returned by the stop provider."""

    stop_id: str
    name: str
    category: str
    latitude: float
    longitude: float
    amenities: frozenset[str] = field(default_factory=frozenset)
    access: VehicleAccess = field(default_factory=VehicleAccess)
    website: Optional[str] = None
    source: str = "openstreetmap"
