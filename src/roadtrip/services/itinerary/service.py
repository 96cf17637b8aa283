"""Itinerary generation orchestration."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Callable, Protocol, Sequence

from ...config import settings
from ...data.vehicle_repository import VehicleProfileStore
from ...errors import InvalidConfiguration
from ...models.domain import Location, TripRequest
from ..geospatial import format_coordinates, haversine_km
from ..routing.models import RouteSummary
from .assembler import assemble
from .cancellation import CancellationToken, GenerationCancelled, run_cancellable
from .fetcher import OvernightStopProvider, fetch_all_candidates
from .models import GenerationResult, GenerationStatus, Leg
from .segmenter import segment
from .styles import DrivingStyleLimits, limits_for

logger = logging.getLogger(__name__)


class RouteProvider(Protocol):
    async def compute_route(self, waypoints: Sequence[tuple[float, float]]) -> RouteSummary: ...


class ReverseGeocoder(Protocol):
    async def reverse_geocode(self, lat: float, lon: float) -> str: ...


def _check_location(location: Location | None, label: str) -> None:
    if location is None:
        raise InvalidConfiguration(f"A {label} location is required.")
    if not (math.isfinite(location.latitude) and math.isfinite(location.longitude)):
        raise InvalidConfiguration(f"The {label} location has invalid coordinates.")
    if not (-90 <= location.latitude <= 90 and -180 <= location.longitude <= 180):
        raise InvalidConfiguration(f"The {label} location is outside valid latitude/longitude ranges.")


def validate_request(request: TripRequest) -> DrivingStyleLimits:
    """Reject malformed requests before any I/O and return the style's limits."""

    _check_location(request.start, "start")
    _check_location(request.end, "end")
    if request.departure_date is None:
        raise InvalidConfiguration("A departure date is required.")
    if request.return_date is not None and request.return_date < request.departure_date:
        raise InvalidConfiguration("The return date cannot be before the departure date.")
    if request.rest_day_frequency < 0:
        raise InvalidConfiguration("Rest-day frequency cannot be negative.")
    return limits_for(request.driving_style)


def route_waypoints(request: TripRequest) -> list[tuple[float, float]]:
    """Start, the crossing terminals in travel order, then the end."""

    waypoints = [request.start.coordinates]
    crossing = request.crossing
    if crossing is not None:
        first, second = crossing.departure, crossing.arrival

        def detour(a, b) -> float:
            return haversine_km(*request.start.coordinates, a.latitude, a.longitude) + haversine_km(
                b.latitude, b.longitude, *request.end.coordinates
            )

        if detour(second, first) < detour(first, second):
            first, second = second, first
        waypoints.extend([(first.latitude, first.longitude), (second.latitude, second.longitude)])
    waypoints.append(request.end.coordinates)
    return waypoints


async def name_day_endpoints(legs: Sequence[Leg], geocoder: ReverseGeocoder) -> list[Leg]:
    """Replace coordinate labels of intermediate endpoints with place names."""

    names: dict[Location, Location] = {}
    for leg in legs:
        location = leg.end
        if location in names or location.name != format_coordinates(location.latitude, location.longitude):
            continue
        name = await geocoder.reverse_geocode(location.latitude, location.longitude)
        names[location] = replace(location, name=name)
    return [replace(leg, start=names.get(leg.start, leg.start), end=names.get(leg.end, leg.end)) for leg in legs]


async def generate_itinerary(
    request: TripRequest,
    cancel_token: CancellationToken | None = None,
    *,
    route_provider: RouteProvider,
    stop_provider: OvernightStopProvider,
    vehicle_store: VehicleProfileStore | None = None,
    geocoder: ReverseGeocoder | None = None,
    search_radius_km: float | None = None,
) -> GenerationResult:
    """Generate a day-by-day itinerary for ``request``.

    Returns a complete itinerary (possibly carrying warnings) or a cancelled
    result with no itinerary.

    Raises:
        InvalidConfiguration: the request is malformed or names an unknown style.
        RouteUnavailable: no route could be computed.
    """
    limits = validate_request(request)
    vehicle = request.vehicle_profile
    if vehicle is None and vehicle_store is not None:
        vehicle = vehicle_store.get_vehicle_profile()
    radius = search_radius_km or settings.overnight_search_radius_km

    try:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        route = await run_cancellable(route_provider.compute_route(route_waypoints(request)), cancel_token)
        legs = segment(
            route.distance_km,
            route.duration_hours,
            request.start,
            request.end,
            limits,
            request.rest_day_frequency,
            request.crossing,
            geometry=route.geometry,
        )
        logger.info(
            f"Segmented {route.distance_km:.0f} km trip from {request.start.name} to {request.end.name} "
            f"into {len(legs)} days ({limits.style.value})"
        )
        if geocoder is not None:
            legs = await run_cancellable(name_day_endpoints(legs, geocoder), cancel_token)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        slots = await run_cancellable(
            fetch_all_candidates(
                legs,
                stop_provider,
                search_radius_km=radius,
                vehicle=vehicle,
                cancel_token=cancel_token,
            ),
            cancel_token,
        )
    except GenerationCancelled:
        logger.info(f"Itinerary generation from {request.start.name} to {request.end.name} cancelled")
        return GenerationResult(status=GenerationStatus.CANCELLED)

    itinerary = assemble(
        legs,
        slots,
        request.departure_date,
        limits=limits,
        return_date=request.return_date,
        route_geometry=route.geometry,
    )
    logger.info(
        f"Generated itinerary: {itinerary.total_days} days, {itinerary.total_distance_km:.0f} km, "
        f"{len(itinerary.warnings)} warnings"
    )
    return GenerationResult(status=GenerationStatus.COMPLETE, itinerary=itinerary)


class ItineraryPlanner:
    """Runs generations for one caller; a new submission supersedes the one in flight."""

    def __init__(
        self,
        route_provider: RouteProvider,
        stop_provider: OvernightStopProvider,
        vehicle_store: VehicleProfileStore | None = None,
        geocoder: ReverseGeocoder | None = None,
    ) -> None:
        self.route_provider = route_provider
        self.stop_provider = stop_provider
        self.vehicle_store = vehicle_store
        self.geocoder = geocoder
        self._current: CancellationToken | None = None

    async def submit(self, request: TripRequest) -> GenerationResult:
        self.cancel()
        token = CancellationToken()
        self._current = token
        try:
            return await generate_itinerary(
                request,
                token,
                route_provider=self.route_provider,
                stop_provider=self.stop_provider,
                vehicle_store=self.vehicle_store,
                geocoder=self.geocoder,
            )
        finally:
            if self._current is token:
                self._current = None

    def cancel(self) -> None:
        if self._current is not None:
            self._current.cancel()

    @property
    def busy(self) -> bool:
        return self._current is not None


class PlannerRegistry:
    """One planner per client key, so a client's newer request supersedes its older one.

    Requests without a key get a fresh planner and never supersede anything.
    Idle planners are dropped on release.
    """

    def __init__(self, factory: Callable[[], ItineraryPlanner]) -> None:
        self._factory = factory
        self._planners: dict[str, ItineraryPlanner] = {}

    def planner_for(self, client_id: str | None) -> ItineraryPlanner:
        if client_id is None:
            return self._factory()
        planner = self._planners.get(client_id)
        if planner is None:
            planner = self._factory()
            self._planners[client_id] = planner
        return planner

    def release(self, client_id: str | None) -> None:
        if client_id is None:
            return
        planner = self._planners.get(client_id)
        if planner is not None and not planner.busy:
            del self._planners[client_id]

    def __len__(self) -> int:
        return len(self._planners)


def default_planner(vehicle_store: VehicleProfileStore | None = None) -> ItineraryPlanner:
    """Planner wired to OSRM, Overpass and (if enabled) Nominatim."""
    from ..campsites.overpass_client import OverpassClient
    from ..geocoding.nominatim import NominatimGeocoder
    from ..routing.osrm_client import OSRMClient

    geocoder = NominatimGeocoder() if settings.reverse_geocode_endpoints else None
    return ItineraryPlanner(OSRMClient(), OverpassClient(), vehicle_store=vehicle_store, geocoder=geocoder)
