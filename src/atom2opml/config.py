# ABOUTME: Centralized configuration using Pydantic Settings.
# ABOUTME: Loads boundary settings (fetching, server, logging) from environment and .env file.

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ATOM2OPML_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Input acquisition
    fetch_timeout: float = 15.0
    fetch_user_agent: str = "atom2opml/0.1.0 (+https://pypi.org/project/atom2opml/)"
    max_feed_bytes: int = 10 * 1024 * 1024

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
