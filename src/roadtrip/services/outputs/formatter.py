"""Serializers that turn itinerary domain objects into API schemas."""

from __future__ import annotations

from dataclasses import asdict

from ...models.domain import Crossing, Location
from ...schemas.itinerary import (
    CrossingModel,
    DayModel,
    DrivingStyleModel,
    ItineraryResponse,
    LocationModel,
    OvernightCandidateModel,
    OvernightStopModel,
)
from ..itinerary.models import Day, Itinerary, OvernightCandidate
from ..itinerary.styles import DrivingStyleLimits


def _location(location: Location) -> LocationModel:
    return LocationModel(name=location.name, latitude=location.latitude, longitude=location.longitude)


def crossing_to_model(crossing: Crossing) -> CrossingModel:
    payload = asdict(crossing)
    payload["operators"] = list(crossing.operators)
    return CrossingModel(**payload)


def candidate_to_model(candidate: OvernightCandidate) -> OvernightCandidateModel:
    stop = candidate.stop
    return OvernightCandidateModel(
        stop=OvernightStopModel(
            stop_id=stop.stop_id,
            name=stop.name,
            category=stop.category,
            latitude=stop.latitude,
            longitude=stop.longitude,
            amenities=sorted(stop.amenities),
            website=stop.website,
        ),
        distance_from_route_km=candidate.distance_from_route_km,
        suitability_score=candidate.suitability_score,
        amenity_summary=list(candidate.amenity_summary),
    )


def day_to_model(day: Day) -> DayModel:
    return DayModel(
        day_number=day.day_number,
        date=day.date,
        day_type=day.day_type.value,
        start=_location(day.start),
        end=_location(day.end),
        distance_km=round(day.distance_km, 1),
        driving_hours=round(day.driving_hours, 1),
        overnight_candidates=[candidate_to_model(candidate) for candidate in day.overnight_candidates],
        selected_overnight=candidate_to_model(day.selected_overnight) if day.selected_overnight else None,
        notes=list(day.notes),
        crossing=crossing_to_model(day.crossing) if day.crossing else None,
        warnings=list(day.warnings),
    )


def itinerary_to_response(itinerary: Itinerary) -> ItineraryResponse:
    return ItineraryResponse(
        total_days=itinerary.total_days,
        total_distance_km=round(itinerary.total_distance_km, 1),
        total_driving_hours=round(itinerary.total_driving_hours, 1),
        warnings=list(itinerary.warnings),
        crossing=crossing_to_model(itinerary.crossing) if itinerary.crossing else None,
        days=[day_to_model(day) for day in itinerary.days],
        route_geometry=list(itinerary.route_geometry),
    )


def style_to_model(limits: DrivingStyleLimits) -> DrivingStyleModel:
    return DrivingStyleModel(
        style=limits.style.value,
        max_daily_distance_km=limits.max_daily_distance_km,
        max_daily_hours=limits.max_daily_hours,
        short_description=limits.short_description,
        description=limits.description,
    )
