"""Reference data endpoints: driving styles and crossings."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query, status

from ...data.crossings import list_crossings, needs_crossing, recommended_crossings
from ...models.domain import Location
from ...schemas.itinerary import CrossingModel, DrivingStyleModel
from ...services.itinerary.styles import DRIVING_STYLE_LIMITS
from ...services.outputs.formatter import crossing_to_model, style_to_model

router = APIRouter(tags=["catalog"])


@router.get("/driving-styles", response_model=List[DrivingStyleModel], status_code=status.HTTP_200_OK)
def driving_styles() -> List[DrivingStyleModel]:
    return [style_to_model(limits) for limits in DRIVING_STYLE_LIMITS.values()]


@router.get("/crossings", response_model=List[CrossingModel], status_code=status.HTTP_200_OK)
def crossings() -> List[CrossingModel]:
    return [crossing_to_model(crossing) for crossing in list_crossings()]


@router.get("/crossings/recommended", status_code=status.HTTP_200_OK)
def crossings_recommended(
    start_lat: float = Query(..., ge=-90, le=90),
    start_lng: float = Query(..., ge=-180, le=180),
    end_lat: float = Query(..., ge=-90, le=90),
    end_lng: float = Query(..., ge=-180, le=180),
) -> dict:
    """Crossings ordered by estimated total travel time for the journey."""
    start = Location(name="start", latitude=start_lat, longitude=start_lng)
    end = Location(name="end", latitude=end_lat, longitude=end_lng)
    if not needs_crossing(start, end):
        return {"needs_crossing": False, "crossings": []}
    return {
        "needs_crossing": True,
        "crossings": [crossing_to_model(crossing).model_dump() for crossing in recommended_crossings(start, end)],
    }
