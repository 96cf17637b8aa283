"""Exception types shared across the itinerary engine."""

from __future__ import annotations


class InvalidConfiguration(ValueError):
    """The request or configuration is unusable; raised before any I/O and never retried."""


class RouteUnavailable(RuntimeError):
    """The routing provider could not produce a route between the trip points."""


class ItineraryAssemblyError(RuntimeError):
    """Components handed the assembler inconsistent data. Indicates a bug, not bad input."""
