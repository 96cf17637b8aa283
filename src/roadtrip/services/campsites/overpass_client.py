"""Overnight-stop provider backed by the Overpass API (OpenStreetMap)."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

import httpx

from ...config import settings
from ...models.domain import BoundingBox, OvernightStop, VehicleAccess, VehicleProfile
from .errors import OvernightSearchError, SearchFailureKind, classify_search_error

# Larger boxes routinely time out on the public Overpass instances.
MAX_BBOX_SPAN_DEGREES = 5.0

_PRIMARY_FILTERS: dict[str, tuple[str, ...]] = {
    "campsite": ('["tourism"="camp_site"]',),
    "caravan_site": ('["tourism"="caravan_site"]',),
    "aire": ('["amenity"="parking"]["motorhome"="yes"]',),
}

_NUMBER = re.compile(r"[-+]?\d+(?:[.,]\d+)?")

logger = logging.getLogger(__name__)


class OverpassClient:
    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        max_results: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url or settings.overpass_url
        self.timeout = timeout if timeout is not None else settings.overpass_timeout_seconds
        self.max_results = max_results if max_results is not None else settings.overpass_max_results
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"User-Agent": settings.user_agent},
            transport=self._transport,
        )

    async def search_overnight_stops(
        self,
        bbox: BoundingBox,
        categories: Sequence[str],
        vehicle_filter: VehicleProfile | None = None,
    ) -> list[OvernightStop]:
        """Return overnight stops inside ``bbox``.

        Raises:
            OvernightSearchError: classified failure (timeout, rate limit, area too
                large, no data, provider unavailable).
        """
        query = build_query(bbox, categories)
        try:
            async with self._get_client() as client:
                response = await client.post(self.url, data={"data": query})
                response.raise_for_status()
                try:
                    payload = response.json()
                except ValueError as exc:
                    # Overpass answers overload and rate limits with HTML pages.
                    raise OvernightSearchError(
                        SearchFailureKind.PROVIDER_UNAVAILABLE,
                        "Overpass returned a non-JSON response",
                    ) from exc
        except OvernightSearchError:
            raise
        except httpx.HTTPError as exc:
            raise classify_search_error(exc) from exc

        remark = str(payload.get("remark") or "")
        if "timed out" in remark or "out of memory" in remark:
            raise OvernightSearchError(SearchFailureKind.TIMEOUT, remark)

        stops = [
            stop
            for stop in parse_elements(payload.get("elements") or [])
            if _allowed_for_vehicle(stop, vehicle_filter)
        ]
        logger.debug(f"Overpass returned {len(stops)} overnight stops for {bbox}")
        return stops[: self.max_results]


def build_query(bbox: BoundingBox, categories: Iterable[str]) -> str:
    """Build an Overpass QL query for the requested stop categories."""

    for value, low, high in (
        (bbox.south, -90, 90),
        (bbox.north, -90, 90),
        (bbox.west, -180, 180),
        (bbox.east, -180, 180),
    ):
        if not low <= value <= high:
            raise OvernightSearchError(
                SearchFailureKind.AREA_TOO_LARGE,
                f"Invalid coordinates: lat={bbox.south}-{bbox.north}, lng={bbox.west}-{bbox.east}",
            )
    lat_span = bbox.north - bbox.south
    lng_span = bbox.east - bbox.west
    if lat_span > MAX_BBOX_SPAN_DEGREES or lng_span > MAX_BBOX_SPAN_DEGREES:
        raise OvernightSearchError(
            SearchFailureKind.AREA_TOO_LARGE,
            f"Bounding box too large: {lat_span:.2f}° lat x {lng_span:.2f}° lng "
            f"(max {MAX_BBOX_SPAN_DEGREES:g}° each)",
        )

    box = f"{bbox.south:.6f},{bbox.west:.6f},{bbox.north:.6f},{bbox.east:.6f}"
    statements: list[str] = []
    for category in categories:
        for tag_filter in _PRIMARY_FILTERS.get(category, ()):
            statements.append(f"node{tag_filter}({box});")
            statements.append(f"way{tag_filter}({box});")
    if not statements:
        statements.append(f'node["tourism"="camp_site"]({box});')
    return f"[out:json][timeout:25];({''.join(statements)});out center 1000;"


def parse_elements(elements: Iterable[dict]) -> list[OvernightStop]:
    stops: list[OvernightStop] = []
    for element in elements:
        if "lat" in element and "lon" in element:
            lat, lon = element["lat"], element["lon"]
        elif "center" in element:
            lat, lon = element["center"]["lat"], element["center"]["lon"]
        else:
            continue
        tags = element.get("tags") or {}
        category = _category(tags)
        osm_id = f"{element.get('type', 'node')}/{element.get('id')}"
        stops.append(
            OvernightStop(
                stop_id=osm_id,
                name=tags.get("name") or f"{category.replace('_', ' ')} {element.get('id')}",
                category=category,
                latitude=float(lat),
                longitude=float(lon),
                amenities=_amenities(tags),
                access=VehicleAccess(
                    motorhome=_yes_no(tags.get("motorhome")),
                    caravan=_yes_no(tags.get("caravans") or tags.get("caravan")),
                    max_height=_measure(tags.get("maxheight")),
                    max_length=_measure(tags.get("maxlength")),
                    max_weight=_measure(tags.get("maxweight")),
                ),
                website=tags.get("website") or tags.get("contact:website"),
            )
        )
    return stops


def _category(tags: dict) -> str:
    tourism = tags.get("tourism")
    if tourism == "camp_site":
        return "campsite"
    if tourism == "caravan_site":
        return "caravan_site"
    return "aire"


def _amenities(tags: dict) -> frozenset[str]:
    found: set[str] = set()
    if _truthy(tags.get("power_supply")) or _truthy(tags.get("electricity")):
        found.add("power")
    if _truthy(tags.get("drinking_water")) or _truthy(tags.get("water_point")):
        found.add("water")
    if _truthy(tags.get("shower")) or _truthy(tags.get("showers")):
        found.add("showers")
    if tags.get("internet_access") in {"wlan", "wifi", "yes"}:
        found.add("wifi")
    for key, amenity in (
        ("toilets", "toilets"),
        ("laundry", "laundry"),
        ("washing_machine", "laundry"),
        ("shop", "shop"),
        ("restaurant", "restaurant"),
        ("swimming_pool", "swimming_pool"),
        ("playground", "playground"),
        ("sanitary_dump_station", "dump_station"),
    ):
        if _truthy(tags.get(key)):
            found.add(amenity)
    return frozenset(found)


def _truthy(value: str | None) -> bool:
    return value is not None and value.lower() not in {"no", "none", "0", "false"}


def _yes_no(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.lower()
    if lowered in {"yes", "designated", "permissive"}:
        return True
    if lowered == "no":
        return False
    return None


def _measure(value: str | None) -> float | None:
    """Parse the leading number of a tag such as ``3.5 m`` or ``7.5t``."""
    if not value:
        return None
    match = _NUMBER.search(value)
    if not match:
        return None
    return float(match.group().replace(",", "."))


def _allowed_for_vehicle(stop: OvernightStop, vehicle: VehicleProfile | None) -> bool:
    if vehicle is None:
        return True
    if vehicle.vehicle_type == "caravan":
        return stop.access.caravan is not False
    return stop.access.motorhome is not False
