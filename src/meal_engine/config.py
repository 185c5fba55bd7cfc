"""Engine configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT
    debug: bool = False
    suggestion_cache_ttl_seconds: int = Field(default=900, ge=0)
    pantry_filter_cache_ttl_seconds: int = Field(default=1800, ge=0)
    eligibility_concurrency: int = Field(default=8, ge=1)
    recent_days: int = Field(default=1, ge=1)
    default_page_size: int = Field(default=10, ge=1, le=100)
    random_pool_size: int = Field(default=100, ge=1)
    random_count: int = Field(default=3, ge=1)

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
