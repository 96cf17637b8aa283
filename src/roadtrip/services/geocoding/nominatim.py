"""Reverse geocoding of day endpoints through Nominatim."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

from ...config import settings
from ..geospatial import format_coordinates

# Nominatim usage policy: at most one request per second.
MIN_REQUEST_INTERVAL_SECONDS = 1.1

logger = logging.getLogger(__name__)


class NominatimGeocoder:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 10.0,
        min_interval: float = MIN_REQUEST_INTERVAL_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.nominatim_url).rstrip("/")
        self.timeout = timeout
        self.min_interval = min_interval
        self._transport = transport
        self._lock = asyncio.Lock()
        self._last_request = 0.0

    async def reverse_geocode(self, lat: float, lon: float) -> str:
        """Return a "City, Country" label, or a coordinate label if lookup fails."""

        fallback = format_coordinates(lat, lon)
        async with self._lock:
            wait = self.min_interval - (time.monotonic() - self._last_request)
            if wait > 0:
                await asyncio.sleep(wait)
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout,
                    headers={"User-Agent": settings.user_agent},
                    transport=self._transport,
                ) as client:
                    response = await client.get(
                        f"{self.base_url}/reverse",
                        params={"lat": lat, "lon": lon, "format": "json", "zoom": 10, "accept-language": "en"},
                    )
                    response.raise_for_status()
                    data = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                logger.debug(f"Reverse geocoding failed for ({lat:.4f}, {lon:.4f}): {exc}")
                return fallback
            finally:
                self._last_request = time.monotonic()

        return label_from_nominatim(data) or fallback


def label_from_nominatim(data: dict) -> str | None:
    address = data.get("address") or {}
    place = address.get("city") or address.get("town") or address.get("village") or address.get("hamlet")
    region = address.get("state") or address.get("county")
    country = address.get("country")
    if place and country:
        return f"{place}, {country}"
    if region and country:
        return f"{region}, {country}"
    if country:
        return country
    display_name = data.get("display_name")
    if display_name:
        return ",".join(display_name.split(",")[:2]).strip()
    return None
