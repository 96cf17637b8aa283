"""Itinerary generation engine."""

from .assembler import assemble, select_overnight_candidate
from .cancellation import CancellationToken
from .models import Day, DayType, GenerationResult, GenerationStatus, Itinerary, Leg, OvernightCandidate
from .service import ItineraryPlanner, PlannerRegistry, generate_itinerary
from .styles import DrivingStyle, DrivingStyleLimits, limits_for

__all__ = [
    "generate_itinerary",
    "select_overnight_candidate",
    "assemble",
    "ItineraryPlanner",
    "PlannerRegistry",
    "CancellationToken",
    "GenerationResult",
    "GenerationStatus",
    "Itinerary",
    "Day",
    "DayType",
    "Leg",
    "OvernightCandidate",
    "DrivingStyle",
    "DrivingStyleLimits",
    "limits_for",
]
