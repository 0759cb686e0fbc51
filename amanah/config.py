# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration, read from ``AMANAH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AMANAH_",
        env_file=".env",
        extra="ignore",
    )

    database_url: str = Field(default="sqlite:///./amanah.db")

    # Decision cache
    decision_cache_ttl_seconds: float = Field(default=300.0, gt=0)

    # Profile fetch retry policy
    profile_fetch_max_attempts: int = Field(default=10, ge=1)
    profile_fetch_base_delay_seconds: float = Field(default=1.0, ge=0)
    profile_fetch_timeout_seconds: float = Field(default=10.0, gt=0)

    # None disables the inactivity sign-out
    inactivity_timeout_seconds: float | None = Field(default=None, gt=0)

    session_expiry_days: int = Field(default=7, ge=1)

    login_path: str = "/login"
    credential_reset_path: str = "/force-password-change"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
