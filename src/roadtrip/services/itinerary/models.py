"""Itinerary domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from ...models.domain import Crossing, Location, OvernightStop
from ..campsites.errors import OvernightSearchError


class DayType(str, Enum):
    DRIVING = "driving"
    REST = "rest"
    CROSSING = "crossing"


@dataclass(frozen=True, slots=True)
class Leg:
    """One segment of the trip in travel order. Rest legs start and end at the same place."""

    kind: DayType
    start: Location
    end: Location
    distance_km: float = 0.0
    driving_hours: float = 0.0
    crossing: Optional[Crossing] = None
    warnings: tuple[str, ...] = ()

    @property
    def is_travel(self) -> bool:
        return self.kind is not DayType.REST


@dataclass(frozen=True, slots=True)
class OvernightCandidate:
    stop: OvernightStop
    distance_from_route_km: float
    suitability_score: float
    amenity_summary: tuple[str, ...] = ()

    @property
    def candidate_id(self) -> str:
        return self.stop.stop_id


@dataclass(frozen=True, slots=True)
class DayCandidates:
    """Outcome of the overnight search for one leg, already scored and ranked."""

    candidates: tuple[OvernightCandidate, ...] = ()
    searched: bool = False
    failure: Optional[OvernightSearchError] = None


@dataclass(frozen=True, slots=True)
class Day:
    day_number: int
    date: date
    day_type: DayType
    start: Location
    end: Location
    distance_km: float
    driving_hours: float
    overnight_candidates: tuple[OvernightCandidate, ...] = ()
    selected_overnight: Optional[OvernightCandidate] = None
    notes: tuple[str, ...] = ()
    crossing: Optional[Crossing] = None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Itinerary:
    days: tuple[Day, ...]
    total_days: int
    total_distance_km: float
    total_driving_hours: float
    warnings: tuple[str, ...] = ()
    crossing: Optional[Crossing] = None
    route_geometry: tuple[tuple[float, float], ...] = field(default=(), repr=False)


class GenerationStatus(str, Enum):
    COMPLETE = "complete"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class GenerationResult:
    status: GenerationStatus
    itinerary: Optional[Itinerary] = None

    @property
    def cancelled(self) -> bool:
        return self.status is GenerationStatus.CANCELLED
