"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
copy engine.

Usage:
    from recordcopy.config import CopySettings

    # Load from environment variables (RECORDCOPY_*)
    settings = CopySettings()

    # Or override with explicit values
    settings = CopySettings(max_concurrent=4, rollback_attempts=3)
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CopySettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the copy engine.

    Attributes:
        max_concurrent: Max member copies in flight per to-many relationship
            (None = unlimited).
        rollback_attempts: Attempts to unload each clone during rollback
            (1 = no retry).
        rollback_backoff: Backoff strategy between unload attempts.
        rollback_base_delay: Base delay in seconds for backoff calculation.

    Environment Variables:
        RECORDCOPY_MAX_CONCURRENT
        RECORDCOPY_ROLLBACK_ATTEMPTS
        RECORDCOPY_ROLLBACK_BACKOFF
        RECORDCOPY_ROLLBACK_BASE_DELAY
    """

    model_config = SettingsConfigDict(
        env_prefix="RECORDCOPY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_concurrent: int | None = Field(default=None, ge=1)
    rollback_attempts: int = Field(default=1, ge=1)
    rollback_backoff: Literal["none", "linear", "exponential"] = "none"
    rollback_base_delay: float = Field(default=0.1, ge=0.0)
