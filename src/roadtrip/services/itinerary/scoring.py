"""Suitability scoring and ranking of overnight stops."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ...models.domain import Location, OvernightStop, VehicleProfile
from ..geospatial import haversine_km
from .models import OvernightCandidate


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    """Percentage weights of the three sub-scores; must sum to 100."""

    proximity: float
    amenity: float
    compatibility: float

    def __post_init__(self) -> None:
        total = self.proximity + self.amenity + self.compatibility
        if abs(total - 100.0) > 1e-9:
            raise ValueError(f"Scoring weights must sum to 100, got {total}.")


SCORING_WEIGHTS = ScoringWeights(proximity=50.0, amenity=30.0, compatibility=20.0)

DESIRABLE_AMENITIES: frozenset[str] = frozenset({"power", "water", "showers", "wifi"})

# Display order for amenity summaries.
AMENITY_LABELS: tuple[tuple[str, str], ...] = (
    ("showers", "Showers"),
    ("power", "Electric"),
    ("toilets", "Toilets"),
    ("water", "Water"),
    ("wifi", "WiFi"),
    ("restaurant", "Restaurant"),
    ("laundry", "Laundry"),
    ("swimming_pool", "Pool"),
    ("shop", "Shop"),
    ("playground", "Playground"),
    ("dump_station", "Dump station"),
)


def proximity_score(distance_km: float, max_radius_km: float) -> float:
    if max_radius_km <= 0:
        return 100.0 if distance_km <= 0 else 0.0
    return min(100.0, max(0.0, 100.0 * (1.0 - distance_km / max_radius_km)))


def amenity_score(amenities: Iterable[str]) -> float:
    matched = DESIRABLE_AMENITIES.intersection(amenities)
    return 100.0 * len(matched) / len(DESIRABLE_AMENITIES)


def compatibility_score(stop: OvernightStop, vehicle: VehicleProfile | None) -> float:
    """100 unless the vehicle breaks a restriction the stop explicitly records.

    Untagged restrictions never count against a stop.
    """
    access = stop.access
    if vehicle is None or not access.has_restrictions():
        return 100.0
    if vehicle.vehicle_type == "caravan":
        if access.caravan is False:
            return 0.0
    elif access.motorhome is False:
        return 0.0
    for limit, actual in (
        (access.max_height, vehicle.height),
        (access.max_length, vehicle.length),
        (access.max_weight, vehicle.weight),
    ):
        if limit is not None and actual > limit:
            return 0.0
    return 100.0


def score(
    stop: OvernightStop,
    distance_km: float,
    max_radius_km: float,
    vehicle: VehicleProfile | None = None,
    weights: ScoringWeights = SCORING_WEIGHTS,
) -> float:
    """Weighted suitability in [0, 100]."""
    total = (
        weights.proximity * proximity_score(distance_km, max_radius_km)
        + weights.amenity * amenity_score(stop.amenities)
        + weights.compatibility * compatibility_score(stop, vehicle)
    ) / 100.0
    return round(min(100.0, max(0.0, total)), 1)


def amenity_summary(amenities: Iterable[str]) -> tuple[str, ...]:
    present = set(amenities)
    return tuple(label for key, label in AMENITY_LABELS if key in present)


def rank_candidates(
    stops: Iterable[OvernightStop],
    anchor: Location,
    max_radius_km: float,
    vehicle: VehicleProfile | None = None,
) -> tuple[OvernightCandidate, ...]:
    """Score every stop against the day's endpoint and sort best first.

    Ties on score go to the closer stop. Zero-score stops are kept.
    """
    candidates = []
    for stop in stops:
        distance = haversine_km(anchor.latitude, anchor.longitude, stop.latitude, stop.longitude)
        candidates.append(
            OvernightCandidate(
                stop=stop,
                distance_from_route_km=round(distance, 1),
                suitability_score=score(stop, distance, max_radius_km, vehicle),
                amenity_summary=amenity_summary(stop.amenities),
            )
        )
    candidates.sort(key=lambda c: (-c.suitability_score, c.distance_from_route_km, c.candidate_id))
    return tuple(candidates)
