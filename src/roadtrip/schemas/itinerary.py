"""Itinerary request/response schemas."""

from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import Crossing, Location, TripRequest, VehicleProfile


class LocationModel(BaseModel):
    name: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> Location:
        return Location(name=self.name, latitude=self.latitude, longitude=self.longitude)


class VehicleProfileModel(BaseModel):
    vehicle_type: Literal["motorhome", "caravan", "campervan"] = "motorhome"
    height: float = Field(..., gt=0, description="Metres.")
    width: float = Field(..., gt=0, description="Metres.")
    length: float = Field(..., gt=0, description="Metres.")
    weight: float = Field(..., gt=0, description="Tonnes.")

    def to_domain(self) -> VehicleProfile:
        return VehicleProfile(**self.model_dump())


class TripRequestModel(BaseModel):
    start: LocationModel
    end: LocationModel
    departure_date: dt.date
    return_date: Optional[dt.date] = None
    driving_style: str = Field(default="moderate", description="relaxed, moderate or intensive.")
    crossing_id: Optional[str] = Field(default=None, description="Identifier from the crossing catalog.")
    rest_day_frequency: int = Field(
        default=0,
        ge=0,
        description="Insert a rest day after this many travel days; 0 disables rest days.",
    )
    vehicle_profile: Optional[VehicleProfileModel] = None

    def to_domain(self, crossing: Crossing | None = None) -> TripRequest:
        return TripRequest(
            start=self.start.to_domain(),
            end=self.end.to_domain(),
            departure_date=self.departure_date,
            return_date=self.return_date,
            driving_style=self.driving_style,
            crossing=crossing,
            rest_day_frequency=self.rest_day_frequency,
            vehicle_profile=self.vehicle_profile.to_domain() if self.vehicle_profile else None,
        )


class CrossingTerminalModel(BaseModel):
    name: str
    latitude: float
    longitude: float
    country: str


class CrossingModel(BaseModel):
    crossing_id: str
    name: str
    crossing_type: str
    departure: CrossingTerminalModel
    arrival: CrossingTerminalModel
    duration_minutes: int
    operators: List[str]
    cost_low: float
    cost_high: float
    currency: str
    overnight: bool
    max_vehicle_length: Optional[float] = None
    notes: str = ""


class OvernightStopModel(BaseModel):
    stop_id: str
    name: str
    category: str
    latitude: float
    longitude: float
    amenities: List[str]
    website: Optional[str] = None


class OvernightCandidateModel(BaseModel):
    stop: OvernightStopModel
    distance_from_route_km: float
    suitability_score: float
    amenity_summary: List[str]


class DayModel(BaseModel):
    day_number: int
    date: dt.date
    day_type: Literal["driving", "rest", "crossing"]
    start: LocationModel
    end: LocationModel
    distance_km: float
    driving_hours: float
    overnight_candidates: List[OvernightCandidateModel]
    selected_overnight: Optional[OvernightCandidateModel] = None
    notes: List[str]
    crossing: Optional[CrossingModel] = None
    warnings: List[str]


class ItineraryResponse(BaseModel):
    total_days: int
    total_distance_km: float
    total_driving_hours: float
    warnings: List[str]
    crossing: Optional[CrossingModel] = None
    days: List[DayModel]
    route_geometry: List[tuple[float, float]] = Field(default_factory=list)


class DrivingStyleModel(BaseModel):
    style: str
    max_daily_distance_km: float
    max_daily_hours: float
    short_description: str
    description: str
