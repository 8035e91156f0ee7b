"""Application configuration using Pydantic Settings.

Loads settings from environment variables and .env file.
All settings have sensible defaults for local development.
"""

from __future__ import annotations

import json
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

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
    port: int = 3001
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

    # --- Note Fetching ---
    note_fetch_timeout: int = 15  # seconds per attempt
    note_fetch_max_retries: int = 3  # total attempts, not extra retries
    note_fetch_retry_delay: float = 1.0  # seconds, multiplied by attempt index
    note_fetch_user_agent: str | None = None  # None = rotate browser UAs
    note_fetch_proxy: str | None = None

    # --- Note Extraction Thresholds ---
    note_min_content_length: int = 10
    note_min_fragment_length: int = 20
    note_last_resort_threshold: int = 5000
    note_last_resort_slice_start: float = 0.2
    note_last_resort_slice_end: float = 0.8
    note_max_places: int = 10
    note_use_trafilatura: bool = True  # readable-text pass before last resort

    # Comma-separated host suffixes; empty accepts any host
    allowed_source_hosts: str = ""

    def get_allowed_source_hosts(self) -> list[str]:
        """Parse allowed_source_hosts as a comma-separated list."""
        return [
            h.strip().lower()
            for h in self.allowed_source_hosts.split(",")
            if h.strip()
        ]

    # --- Tag Extraction (OpenAI-compatible chat completions) ---
    openai_api_key: str | None = None
    openai_api_base: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    openai_proxy_url: str | None = None
    tag_extraction_timeout: int = 60  # seconds
    tag_max_count: int = 20
    tag_max_input_chars: int = 2000

    # --- CORS ---
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    def get_cors_origins(self) -> list[str]:
        """Parse cors_origins as JSON list or comma-separated string."""
        raw = self.cors_origins.strip()
        if raw.startswith("["):
            return json.loads(raw)
        return [o.strip() for o in raw.split(",") if o.strip()]


settings = Settings()
