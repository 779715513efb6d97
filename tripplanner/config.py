"""Typed settings loaded from the environment."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings; every field can be overridden via TRIPPLANNER_*."""

    model_config = SettingsConfigDict(
        env_prefix="TRIPPLANNER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Scheduling defaults
    default_duration_minutes: int = Field(default=60, gt=0)
    fallback_timezone: str = "UTC"

    # Logging
    log_level: str = "INFO"

    # Load the Paris/London demo trip at startup
    seed_demo_data: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
