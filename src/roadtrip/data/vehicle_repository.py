"""Vehicle profile lookup used by the overnight suitability scorer."""

from __future__ import annotations

from typing import Protocol

from ..models.domain import VehicleProfile


class VehicleProfileStore(Protocol):
    def get_vehicle_profile(self) -> VehicleProfile | None: ...


class InMemoryVehicleProfileStore:
    """Holds the traveller's current vehicle, if one has been configured."""

    def __init__(self, profile: VehicleProfile | None = None) -> None:
        self._profile = profile

    def get_vehicle_profile(self) -> VehicleProfile | None:
        return self._profile

    def set_vehicle_profile(self, profile: VehicleProfile | None) -> None:
        self._profile = profile
