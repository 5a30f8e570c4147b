"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from calorie_tracker.adapters.fdc_client import DEFAULT_BASE_URL
from calorie_tracker.domain.calories import DEFAULT_DAILY_GOAL

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    preferences_table: str = "preferences"
    fdc_api_key: str | None = None
    fdc_base_url: str = DEFAULT_BASE_URL
    lookup_page_size: int = 25
    timezone: str = "UTC"
    default_daily_goal: int = DEFAULT_DAILY_GOAL
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_api_key(raw: str | None) -> str | None:
    """Return a usable API key or None when unset or blank."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
