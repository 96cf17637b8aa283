"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROADTRIP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Road Trip Itinerary API"
    api_prefix: str = "/api"
    user_agent: str = Field(
        default="RoadTripPlanner/1.0",
        description="User-Agent header sent to public OSM services.",
    )

    osrm_base_url: Optional[str] = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "driving-hgv"] = Field(
        default="driving",
        description="OSRM profile to use when computing travel times.",
    )
    osrm_timeout_seconds: float = Field(default=30.0, gt=0.0)
    osrm_max_retries: int = Field(default=3, ge=0)
    osrm_backoff_seconds: float = Field(default=1.0, ge=0.0)

    overpass_url: str = Field(
        default="https://overpass-api.de/api/interpreter",
        description="Overpass API interpreter endpoint used for overnight stop searches.",
    )
    overpass_timeout_seconds: float = Field(default=30.0, gt=0.0)
    overpass_max_results: int = Field(default=20, ge=1)
    overnight_max_retries: int = Field(default=2, ge=0)
    overnight_backoff_seconds: float = Field(default=1.0, ge=0.0)
    overnight_max_parallel_searches: int = Field(
        default=4,
        ge=1,
        description="Upper bound on concurrent overnight searches for one itinerary.",
    )
    overnight_search_radius_km: float = Field(default=15.0, gt=0.0)
    overnight_categories: tuple[str, ...] = Field(default=("campsite", "caravan_site"))

    nominatim_url: str = Field(default="https://nominatim.openstreetmap.org")
    reverse_geocode_endpoints: bool = Field(
        default=False,
        description="Name intermediate day endpoints through Nominatim reverse geocoding.",
    )

    long_trip_warning_km: float = Field(default=2500.0, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", "overnight_categories", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
