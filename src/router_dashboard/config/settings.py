"""
Application settings using Pydantic.

Provides environment-based configuration loading with ROUTER_DASHBOARD_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ROUTER_DASHBOARD_",
        extra="ignore",
    )

    # Grafana API configuration (upload is skipped when grafana_url is unset)
    grafana_url: str | None = None
    grafana_token: str | None = None
    grafana_org_id: int | None = None
    grafana_folder_uid: str | None = None

    # Output
    output_file: str = "router-monitor-dashboard.json"

    # HTTP client settings
    http_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
