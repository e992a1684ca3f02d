"""Application configuration using Pydantic Settings.

Loads settings from environment variables and .env file.
All settings have sensible defaults for local development.
"""

from __future__ import annotations

import json
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.services.extractors.base import DEFAULT_USER_AGENT

# Valid Python logging levels
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Service-wide configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Server ---
    service_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False

    # --- Logging ---
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level to uppercase.

        Falls back to INFO if an invalid level is provided.
        """
        normalized = v.upper().strip()
        if normalized not in VALID_LOG_LEVELS:
            # Log a warning (to stderr since logging may not be configured yet)
            import sys

            print(
                f"WARNING: Invalid LOG_LEVEL '{v}'. "
                f"Valid levels are: {', '.join(sorted(VALID_LOG_LEVELS))}. "
                "Falling back to INFO.",
                file=sys.stderr,
            )
            return "INFO"
        return normalized

    def get_log_level_int(self) -> int:
        """Return the integer value of the configured log level."""
        return getattr(logging, self.log_level, logging.INFO)

    # --- Scraper ---
    user_agent: str = DEFAULT_USER_AGENT
    # "li_at=...; JSESSIONID=..." copied from a logged-in browser session
    linkedin_cookies: str | None = None
    playwright_headless: bool = True
    navigation_timeout_seconds: int = 30
    twitter_navigation_timeout_seconds: int = 60
    settle_delay_ms: int = 2000
    twitter_settle_delay_ms: int = 5000
    tweet_selector_timeout_ms: int = 10000
    pre_navigation_delay_min_ms: int = 1000
    pre_navigation_delay_max_ms: int = 3000
    fast_path_timeout_seconds: float = 15.0
    twitter_oembed_endpoint: str = "https://publish.twitter.com/oembed"
    extraction_timeout_seconds: float = 120.0  # whole fast path + render budget

    # --- AI provider (OpenRouter) ---
    openrouter_api_key: str | None = None
    openrouter_model: str = "meta-llama/llama-3.3-70b-instruct:free"
    openrouter_base_url: str = "https://openrouter.ai/api/v1/"
    openrouter_timeout_seconds: float = 60.0
    openrouter_temperature: float = 0.7
    openrouter_max_tokens: int = 1000
    openrouter_referer: str = "https://pulsetag.local"
    openrouter_title: str = "PulseTag"
    max_prompt_chars: int = 5000

    # --- CORS ---
    cors_origins: str = "http://localhost:3000"

    def get_cors_origins(self) -> list[str]:
        """Parse cors_origins as JSON list or comma-separated string."""
        raw = self.cors_origins.strip()
        if raw.startswith("["):
            return json.loads(raw)
        return [o.strip() for o in raw.split(",") if o.strip()]


settings = Settings()
