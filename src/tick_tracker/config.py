"""
Application settings loaded from the environment.

Every field can be overridden with a ``TICK_``-prefixed environment variable
(``TICK_DATASET_URL``, ``TICK_API_PORT``...) or a ``.env`` file in the working
directory.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the tick sightings service."""

    model_config = SettingsConfigDict(
        env_prefix="TICK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "tick-tracker"
    app_env: str = "development"
    debug: bool = False

    # Dataset
    dataset_path: Path = Path("data/tick_sightings.csv")
    dataset_url: str | None = None
    cache_dir: Path = Path("data")
    cache_ttl_hours: int = 24
    timezone: str = "Europe/London"

    # API
    api_host: str = ""
    api_port: int = 8080

    # Observability
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"Unknown time zone: {v!r}"
            raise ValueError(msg) from exc
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def zone(self) -> ZoneInfo:
        """Reference time zone for all calendar derivations."""
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    return Settings()
