"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class RouteSummary:
    distance_km: float
    duration_hours: float
    geometry: List[tuple[float, float]] = field(default_factory=list)

    @property
    def average_speed_kmh(self) -> float | None:
        if self.duration_hours <= 0:
            return None
        return self.distance_km / self.duration_hours
