"""Environment-driven configuration using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All configuration comes from environment variables / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Heroku API ---
    heroku_api_key: str = ""
    heroku_api_url: str = "https://api.heroku.com"
    heroku_accept: str = "application/vnd.heroku+json; version=3"

    # --- HTTP ---
    http_timeout_seconds: float = 30.0
    http_max_retries: int = 0  # transport errors only, 0 = single attempt

    # --- Client ---
    client_mode: Literal["live", "dry"] = "live"

    # --- Observability ---
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    @property
    def is_dry_run(self) -> bool:
        return self.client_mode == "dry"

    @property
    def has_api_key(self) -> bool:
        return bool(self.heroku_api_key.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
