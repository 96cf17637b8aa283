"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import httpx

from ...config import settings
from ...errors import RouteUnavailable
from .models import RouteSummary

logger = logging.getLogger(__name__)


class OSRMClient:
    """Route provider backed by the OSRM ``route`` endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.osrm_base_url
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"User-Agent": settings.user_agent},
            transport=self._transport,
        )

    async def compute_route(self, waypoints: Sequence[tuple[float, float]]) -> RouteSummary:
        """Route through ``waypoints`` ((lat, lon) pairs) and summarise the result."""

        data = await self.route(waypoints)
        route = data["routes"][0]
        geometry = decode_polyline(route.get("geometry") or "")
        if len(geometry) < 2:
            geometry = list(waypoints)
        return RouteSummary(
            distance_km=float(route.get("distance", 0.0)) / 1000.0,
            duration_hours=float(route.get("duration", 0.0)) / 3600.0,
            geometry=geometry,
        )

    async def route(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Get route geometry between coordinates using OSRM route endpoint.

        Args:
            coordinates: Sequence of (lat, lon) tuples for the route waypoints

        Returns:
            Raw OSRM payload with ``routes[0]`` holding distance (m), duration (s)
            and a polyline geometry.

        Raises:
            RouteUnavailable: OSRM found no route, or kept failing after retries.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        # OSRM route endpoint expects coordinates as "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        params = {
            "overview": "full",
            "geometries": "polyline",
            "steps": "false",
        }
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"

        async with self._get_client() as client:
            attempt = 0
            while True:
                try:
                    response = await client.get(url, params=params)
                    if response.status_code == 400:
                        # OSRM answers 400 with a code such as NoRoute or InvalidQuery.
                        data = response.json()
                    else:
                        response.raise_for_status()
                        data = response.json()
                    if data.get("code") != "Ok" or not data.get("routes"):
                        error_msg = data.get("message") or data.get("code") or "Unknown OSRM route error"
                        raise RouteUnavailable(f"OSRM route request failed: {error_msg}")
                    return data
                except RouteUnavailable:
                    raise
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM route request failed after {self.max_retries} retries: {e}")
                        raise RouteUnavailable(
                            f"Routing service at {self.base_url} is not reachable: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM route error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    await asyncio.sleep(wait_time)
                except (httpx.HTTPError, ValueError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM route request failed after {self.max_retries} retries: {e}")
                        raise RouteUnavailable(f"Routing service returned an error: {e}") from e
                    await asyncio.sleep(self.backoff_seconds * attempt)


def decode_polyline(polyline: str) -> list[tuple[float, float]]:
    """Decode Google polyline string to list of (lat, lon) coordinates.

    OSRM uses Google's polyline encoding format for route geometry.
    """
    coordinates = []
    index = 0
    lat = 0
    lon = 0

    while index < len(polyline):
        deltas = []
        for _ in range(2):
            shift = 0
            result = 0
            while True:
                b = ord(polyline[index]) - 63
                index += 1
                result |= (b & 0x1f) << shift
                shift += 5
                if b < 0x20:
                    break
            deltas.append(~(result >> 1) if (result & 1) else (result >> 1))
        lat += deltas[0]
        lon += deltas[1]
        coordinates.append((lat / 1e5, lon / 1e5))

    return coordinates


async def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health with a minimal two-point route request."""
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    test_coords = "13.388860,52.517037;13.385983,52.496891"
    url = f"{base.rstrip('/')}/route/v1/{settings.osrm_profile}/{test_coords}"
    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(url, params={"overview": "false"})
            response.raise_for_status()
            return response.json().get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False
