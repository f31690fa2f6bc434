"""
Application Settings

Loaded from environment variables and an optional project-level .env file.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent

load_dotenv(PROJECT_ROOT / ".env")


class Settings(BaseSettings):
    """Process configuration for the ReefMetrics API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "ReefMetrics API"
    app_version: str = "1.0.0"

    # ── OpenRouter (advisory service) ──────────────────────────────────
    openrouter_api_key: str = ""
    openrouter_default_model: str = "anthropic/claude-3.5-sonnet"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    advisory_timeout_seconds: float = 30.0
    app_referer: str = "https://reefmetrics.app"
    app_title: str = "ReefMetrics"

    # ── Logging ────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def advisory_configured(self) -> bool:
        return bool(self.openrouter_api_key.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
