# src/fxsync/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and a .env file with validation.

Files that USE this module:
- fxsync.app (loads settings for startup and wiring)
- fxsync.adapters.providers.fixer (API key, base URL and HTTP timeout defaults)
- fxsync.adapters.persistence.rate_store (database URL default)

Files that this module USES:
- fxsync.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from datetime import timedelta  # Sync cadence as a duration
from functools import lru_cache  # Cache the process-wide settings instance
from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic
from sqlalchemy.exc import ArgumentError  # Raised for unparseable database URLs

from fxsync.shared.validators import (
    validate_api_key,  # Validate upstream access key format
    validate_bot_token,  # Validate Telegram bot token format
    is_in_memory_sqlite,  # Detect SQLite databases without a file
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Upstream provider (Fixer) ---
    fixer_api_key: str = Field(..., alias="FIXER_API_KEY")
    fixer_base_url: str = Field(default="http://data.fixer.io/api", alias="FIXER_BASE_URL")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Persistence ---
    database_url: str = Field(default="sqlite:///./data/exchange_rates.db", alias="DATABASE_URL")
    data_dir: Path = Field(default=Path("./data"), alias="DATA_DIR")

    # --- Scheduling ---
    # Unset means one snapshot per day at the next UTC midnight
    sync_interval_minutes: Optional[int] = Field(default=None, alias="SYNC_INTERVAL_MINUTES", ge=1, le=1440)
    sync_on_startup: bool = Field(default=True, alias="SYNC_ON_STARTUP")

    # --- Telegram ---
    bot_token: str = Field(default="", alias="BOT_TOKEN")

    # --- Logging (for server deployment) ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="FXSYNC_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def sync_interval(self) -> Optional[timedelta]:
        """Fixed sync cadence, or None for daily runs at UTC midnight."""
        if self.sync_interval_minutes is None:
            return None
        return timedelta(minutes=self.sync_interval_minutes)

    @property
    def pid_file(self) -> Path:
        return self.data_dir / "fxsync.pid"

    @field_validator("fixer_api_key")
    @classmethod
    def validate_fixer_api_key(cls, v: str) -> str:
        """Validate access key format."""
        v = v.strip()
        if not validate_api_key(v):
            raise ValueError("Invalid FIXER_API_KEY format")
        return v

    @field_validator("fixer_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Require a persistent database; in-memory SQLite is for tests only."""
        try:
            in_memory = is_in_memory_sqlite(v)
        except ArgumentError as e:
            raise ValueError(f"Invalid DATABASE_URL: {e}") from e
        if in_memory:
            raise ValueError("DATABASE_URL must point to a database file, not in-memory SQLite")
        return v

    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate bot token format (empty is allowed until the bot is started)."""
        if v and not validate_bot_token(v):
            raise ValueError("Invalid BOT_TOKEN format")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the process-wide settings instance.

    Raises:
        pydantic.ValidationError: If FIXER_API_KEY is missing or any value is invalid
    """
    return Settings()


# ============================================================================
# Deployment Instructions
# ============================================================================
#
# 1. Put FIXER_API_KEY and BOT_TOKEN into .env (or export them).
#
# 2. Run the bot and the daily sync in the background:
#    nohup python -m fxsync > fxsync.log 2>&1 &
#
# 3. Take a snapshot every 2 minutes while testing:
#    SYNC_INTERVAL_MINUTES=2 python -m fxsync
#
# 4. Stop it:
#    pkill -f "python -m fxsync"
#
# ============================================================================
