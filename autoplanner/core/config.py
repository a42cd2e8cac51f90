"""
Application configuration using Pydantic Settings.

Planner defaults (work window, buffer sizes, split granularity) can be
overridden from the environment or a .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Logging
    # ===========================================
    # Forces DEBUG output from setup_logger regardless of LOG_LEVEL
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ===========================================
    # Planner defaults
    # ===========================================
    # Work window used when the caller does not supply one ("HH:MM")
    DEFAULT_WORK_START: str = "08:00"
    DEFAULT_WORK_END: str = "20:00"

    # Duration assumed for tasks without an explicit duration
    DEFAULT_TASK_MINUTES: int = 60

    # Gap inserted after each flexible chunk (FOCUS_URGENT_BUFFER)
    BUFFER_MINUTES: int = 10
    # Gap inserted after each flexible chunk (LOOSE_SCHEDULE_BREAKS)
    BREAK_MINUTES: int = 15
    # Smallest chunk a split task may be cut into
    MIN_SPLIT_MINUTES: int = 15


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
