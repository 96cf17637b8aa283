"""Itinerary generation endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from ...data.crossings import get_crossing
from ...errors import RouteUnavailable
from ...schemas.itinerary import ItineraryResponse, TripRequestModel
from ...services.itinerary.service import PlannerRegistry
from ...services.outputs.formatter import itinerary_to_response

router = APIRouter(prefix="/itineraries", tags=["itineraries"])

logger = logging.getLogger(__name__)


def get_planner_registry(request: Request) -> PlannerRegistry:
    return request.app.state.planner_registry


@router.post("/generate", response_model=ItineraryResponse, status_code=status.HTTP_200_OK)
async def generate(
    payload: TripRequestModel,
    x_client_id: Optional[str] = Header(
        default=None,
        description="Stable per-client key; a newer request with the same key cancels the older one.",
    ),
    registry: PlannerRegistry = Depends(get_planner_registry),
) -> ItineraryResponse:
    crossing = None
    if payload.crossing_id:
        crossing = get_crossing(payload.crossing_id)
        if crossing is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown crossing '{payload.crossing_id}'.",
            )
    planner = registry.planner_for(x_client_id)
    try:
        result = await planner.submit(payload.to_domain(crossing))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RouteUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error generating itinerary: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate itinerary: {str(exc)}",
        ) from exc
    finally:
        registry.release(x_client_id)

    if result.itinerary is None:
        # A newer request from the same client superseded this one.
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Itinerary generation was cancelled.")
    return itinerary_to_response(result.itinerary)
