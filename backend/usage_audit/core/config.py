"""Application configuration loaded from environment variables."""

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_user_id() -> str:
    return os.environ.get("USER") or os.environ.get("USERNAME") or "unknown"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # App
    app_name: str = "usage-audit"
    debug: bool = False

    # Usage store
    usage_file: str = ".ai-usage/usage.json"
    max_retained_sessions: int = 1000

    # Audit report
    report_limit_max: int = 100
    # Rebuild the summary from sessions instead of trusting the stored one
    audit_recompute_summary: bool = False
    insights_recent_sessions: int = 50
    insights_top_files: int = 20

    # Tracking
    default_user_id: str = Field(default_factory=_default_user_id)
    prompt_max_chars: int = 200

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
