"""
Configuration settings for flashdeck.

Uses Pydantic Settings for environment variable management with .env file support.
Every setting can be overridden with a FLASHDECK_ prefixed variable, e.g.
FLASHDECK_DATA_DIR=/tmp/cards.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FLASHDECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".flashdeck",
        description="Root directory for flashdeck data",
    )
    decks_dir: Path | None = Field(
        default=None,
        description="Directory holding one JSON file per deck (default: <data_dir>/decks)",
    )
    backup_dir: Path | None = Field(
        default=None,
        description="Directory for exported backups (default: <data_dir>/backups)",
    )

    # ========================================
    # Study Sessions
    # ========================================
    new_cards_per_session: int = Field(
        default=20,
        ge=0,
        description="Maximum new cards introduced per study session",
    )

    # ========================================
    # SM-2 Scheduler
    # ========================================
    minimum_ease: float = Field(
        default=1.3,
        ge=1.3,
        description="Lower bound for a card's ease factor",
    )
    easy_bonus: float = Field(
        default=1.3,
        ge=1.0,
        description="Extra interval multiplier for Easy ratings",
    )
    relearn_minutes: int = Field(
        default=10,
        ge=1,
        description="Retry delay for a new card rated Again",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @property
    def resolved_decks_dir(self) -> Path:
        return (self.decks_dir or self.data_dir / "decks").expanduser()

    @property
    def resolved_backup_dir(self) -> Path:
        return (self.backup_dir or self.data_dir / "backups").expanduser()

    def get_scheduler_config(self) -> dict[str, float | int]:
        """Get SM-2 scheduler configuration as a dictionary."""
        return {
            "minimum_ease": self.minimum_ease,
            "easy_bonus": self.easy_bonus,
            "relearn_minutes": self.relearn_minutes,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
