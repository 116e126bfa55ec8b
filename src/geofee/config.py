"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="GEOFEE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Geo & Fee Engine"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level applied by create_app().")

    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="API key for the Google Maps Geocoding and Distance Matrix web services.",
    )
    google_maps_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api",
        description="Base URL for the Google Maps web services.",
    )
    provider_timeout_seconds: float = Field(default=5.0, gt=0.0)
    provider_max_retries: int = Field(default=1, ge=0)
    provider_backoff_seconds: float = Field(default=0.5, ge=0.0)

    rate_limit_per_minute: int = Field(default=60, ge=1, description="Provider calls admitted per window, per bucket.")
    rate_limit_window_seconds: float = Field(default=60.0, gt=0.0)

    geocode_cache_max_entries: int = Field(default=10_000, ge=1)
    geocode_cache_ttl_seconds: Optional[float] = Field(
        default=None,
        description="Geocode cache lifetime. None keeps entries for the process lifetime.",
    )
    distance_cache_max_entries: int = Field(default=5_000, ge=1)
    distance_cache_ttl_seconds: Optional[float] = Field(default=15 * 60, gt=0.0)
    fallback_minutes_per_mile: float = Field(default=2.5, gt=0.0)

    location_ttl_seconds: float = Field(default=60 * 60, gt=0.0)
    location_store_path: Optional[Path] = Field(
        default=None,
        description="Directory for persisted user location documents. None keeps them in memory.",
    )
    default_nearby_radius_miles: float = Field(default=25.0, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key used by the usage log sink.",
    )

    @field_validator("location_store_path", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
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
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
