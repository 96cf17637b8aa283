"""Concurrent overnight-stop searches around each day's endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, Sequence

import httpx

from ...config import settings
from ...models.domain import BoundingBox, OvernightStop, VehicleProfile
from ..campsites.errors import OvernightSearchError, classify_search_error
from ..geospatial import bounding_box_around
from .cancellation import CancellationToken
from .models import DayCandidates, Leg
from .scoring import rank_candidates

logger = logging.getLogger(__name__)


class OvernightStopProvider(Protocol):
    async def search_overnight_stops(
        self,
        bbox: BoundingBox,
        categories: Sequence[str],
        vehicle_filter: VehicleProfile | None = None,
    ) -> list[OvernightStop]: ...


def overnight_search_targets(legs: Sequence[Leg]) -> list[int]:
    """Indexes of legs that end with a night off the boat and before the destination."""

    travel_indexes = [index for index, leg in enumerate(legs) if leg.is_travel]
    targets = []
    for index in travel_indexes[:-1]:
        crossing = legs[index].crossing
        if crossing is not None and crossing.overnight:
            continue
        targets.append(index)
    return targets


async def fetch_candidates(
    leg: Leg,
    search_radius_km: float,
    provider: OvernightStopProvider,
    *,
    categories: Sequence[str] | None = None,
    max_retries: int | None = None,
    backoff_seconds: float | None = None,
    cancel_token: CancellationToken | None = None,
) -> list[OvernightStop] | None:
    """Search around the leg's endpoint, retrying transient failures.

    Returns ``None`` if the run was cancelled before a provider call was made.

    Raises:
        OvernightSearchError: the search failed after retries or for a
            non-retryable reason.

    Exceptions outside the provider failure taxonomy propagate unchanged.
    """
    categories = tuple(categories or settings.overnight_categories)
    max_retries = settings.overnight_max_retries if max_retries is None else max_retries
    backoff_seconds = settings.overnight_backoff_seconds if backoff_seconds is None else backoff_seconds
    bbox = bounding_box_around(leg.end.latitude, leg.end.longitude, search_radius_km)

    attempt = 0
    while True:
        if cancel_token is not None and cancel_token.cancelled:
            return None
        try:
            return await provider.search_overnight_stops(bbox, categories)
        except (OvernightSearchError, httpx.HTTPError, ConnectionError, asyncio.TimeoutError) as exc:
            error = classify_search_error(exc)
            attempt += 1
            if not error.retryable or attempt > max_retries:
                if error is exc:
                    raise
                raise error from exc
            wait_time = backoff_seconds * (2 ** (attempt - 1))
            logger.debug(
                f"Overnight search near {leg.end.name} failed ({error.kind.value}), "
                f"retrying in {wait_time:.1f}s (attempt {attempt}/{max_retries})"
            )
            await asyncio.sleep(wait_time)


async def fetch_all_candidates(
    legs: Sequence[Leg],
    provider: OvernightStopProvider,
    *,
    search_radius_km: float | None = None,
    vehicle: VehicleProfile | None = None,
    max_parallel: int | None = None,
    cancel_token: CancellationToken | None = None,
    **fetch_options,
) -> list[DayCandidates]:
    """Search for every target leg concurrently; one slot per leg, aligned by index.

    A failed search only degrades its own slot.
    """
    radius = search_radius_km or settings.overnight_search_radius_km
    semaphore = asyncio.Semaphore(max_parallel or settings.overnight_max_parallel_searches)
    slots = [DayCandidates() for _ in legs]

    async def search(index: int) -> None:
        leg = legs[index]
        async with semaphore:
            try:
                stops = await fetch_candidates(
                    leg, radius, provider, cancel_token=cancel_token, **fetch_options
                )
            except OvernightSearchError as error:
                logger.warning(f"Overnight search for leg {index + 1} near {leg.end.name} failed: {error}")
                slots[index] = DayCandidates(searched=True, failure=error)
                return
        if stops is None:
            return
        # Scoring is synchronous and runs as soon as this day's results arrive.
        slots[index] = DayCandidates(
            candidates=rank_candidates(stops, leg.end, radius, vehicle),
            searched=True,
        )

    await asyncio.gather(*(search(index) for index in overnight_search_targets(legs)))
    return slots
