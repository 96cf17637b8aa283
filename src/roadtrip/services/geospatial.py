"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import LineString, Point

from ..models.domain import BoundingBox

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LAT = 111.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def bounding_box_around(lat: float, lon: float, radius_km: float) -> BoundingBox:
    """Return a box extending ``radius_km`` in every direction from (lat, lon)."""

    lat_delta = radius_km / KM_PER_DEGREE_LAT
    # Clamp cos(lat) so boxes near the poles stay finite.
    lon_delta = lat_delta / max(math.cos(math.radians(lat)), 0.01)
    return BoundingBox(
        south=max(-90.0, lat - lat_delta),
        west=max(-180.0, lon - lon_delta),
        north=min(90.0, lat + lat_delta),
        east=min(180.0, lon + lon_delta),
    )


def format_coordinates(lat: float, lon: float) -> str:
    """Human-readable label used when a point has no place name."""

    lat_hemisphere = "N" if lat >= 0 else "S"
    lon_hemisphere = "E" if lon >= 0 else "W"
    return f"{abs(lat):.2f}°{lat_hemisphere}, {abs(lon):.2f}°{lon_hemisphere}"


class RouteLine:
    """Route geometry that maps distances along the route to coordinates and back.

    Positions are expressed in kilometres from the start and are scaled to the
    routed distance, so they stay consistent with the provider's total even
    though the polyline itself is measured in degrees.
    """

    def __init__(self, points: Sequence[tuple[float, float]], total_distance_km: float) -> None:
        if len(points) < 2:
            raise ValueError("A route line needs at least two points.")
        # shapely works in (x, y) = (lon, lat)
        self._line = LineString([(lon, lat) for lat, lon in points])
        self.total_distance_km = total_distance_km

    @classmethod
    def straight(cls, start: tuple[float, float], end: tuple[float, float], total_distance_km: float) -> "RouteLine":
        if start == end:
            # Degenerate line; nudge the end so shapely accepts it.
            end = (end[0], end[1] + 1e-9)
        return cls([start, end], total_distance_km)

    def point_at(self, distance_km: float) -> tuple[float, float]:
        """Coordinate (lat, lon) at ``distance_km`` along the route."""

        if self.total_distance_km <= 0:
            fraction = 0.0
        else:
            fraction = min(max(distance_km / self.total_distance_km, 0.0), 1.0)
        point = self._line.interpolate(fraction, normalized=True)
        return (point.y, point.x)

    def locate(self, lat: float, lon: float) -> float:
        """Distance in km along the route of the route point nearest (lat, lon)."""

        fraction = self._line.project(Point(lon, lat), normalized=True)
        return fraction * self.total_distance_km
