"""Route group exports."""

from . import catalog, health, itineraries

__all__ = ["health", "catalog", "itineraries"]
