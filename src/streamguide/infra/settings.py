"""
Application settings for streamguide.

This module defines all configuration settings using Pydantic BaseSettings.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings using Pydantic BaseSettings."""

    # Guide synthesis
    guide_timezone: str = Field(default="", alias="GUIDE_TIMEZONE")  # IANA name; empty = server local
    thumbnail_width: int = Field(default=1066, alias="THUMBNAIL_WIDTH")
    thumbnail_height: int = Field(default=600, alias="THUMBNAIL_HEIGHT")
    placeholder_title: str = Field(default="No description available", alias="PLACEHOLDER_TITLE")
    guide_country: str = Field(default="United States", alias="GUIDE_COUNTRY")

    # Channel directory (JSON file with {"channels": [...]})
    channels_file: str = Field(default="", alias="CHANNELS_FILE")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    env: str = Field(default="dev", alias="ENV")  # dev|prod|test

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


def _resolve_env_file() -> str | None:
    # 1) Explicit override
    explicit = os.getenv("STREAMGUIDE_ENV_FILE")
    if explicit and Path(explicit).is_file():
        return explicit

    # 2) CWD .env
    cwd_env = Path.cwd() / ".env"
    if cwd_env.is_file():
        return str(cwd_env)

    # 3) Walk up from this file to find nearest .env
    here = Path(__file__).resolve()
    for parent in here.parents:
        candidate = parent / ".env"
        if candidate.is_file():
            return str(candidate)
    return None


# Global settings instance (load from best-effort .env discovery)
_env_file = _resolve_env_file()
settings = Settings(_env_file=_env_file) if _env_file else Settings()  # type: ignore[call-arg]
