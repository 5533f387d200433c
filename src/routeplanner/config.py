"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTEPLANNER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Route Planner API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for persisted route outputs.")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    average_speed_kmh: float = Field(
        default=50.0,
        gt=0.0,
        description="Constant average speed used to estimate travel time from straight-line distance.",
    )
    two_opt_max_iterations: int = Field(default=100, ge=1)
    clustering_max_iterations: int = Field(default=10, ge=1)
    clustering_tolerance_degrees: float = Field(
        default=0.0001,
        ge=0.0,
        description="Centroid movement (degrees) below which clustering is considered converged.",
    )
    max_parallel_drivers: int = Field(default=4, ge=1)

    directions_base_url: Optional[str] = Field(
        default=None,
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    directions_profile: Literal["driving", "driving-hgv", "car"] = Field(
        default="driving",
        description="OSRM profile to use when optimizing trips.",
    )
    directions_timeout_seconds: float = Field(default=15.0, gt=0.0)
    directions_max_waypoints: int = Field(
        default=25,
        ge=0,
        description="Largest number of intermediate waypoints sent to the directions service.",
    )

    geocoding_base_url: str = Field(default="https://nominatim.openstreetmap.org")
    geocoding_user_agent: str = Field(default="routeplanner")
    geocoding_timeout_seconds: float = Field(default=10.0, gt=0.0)

    fuel_price_per_liter: float = Field(default=1.80, ge=0.0)
    fuel_consumption_l_per_100km: float = Field(default=8.0, ge=0.0)
    hourly_rate: float = Field(default=30.0, ge=0.0)
    maintenance_cost_per_km: float = Field(default=0.05, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
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

    @field_validator("directions_base_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text.rstrip("/") or None


settings = Settings()
