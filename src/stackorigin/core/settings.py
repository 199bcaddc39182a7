"""Environment-driven settings for stackorigin.

Configuration is read from ``STACKORIGIN_*`` environment variables and an
optional ``.env`` file, validated by pydantic at first use.

Fields
──────
stack_trace_limit    : Maximum raw frames read per capture (default: 10)
log_level            : Structlog log level for the package's own logging
log_format           : ``console`` or ``json`` renderer
service_name         : Default ``service.name`` for records
service_version      : Default ``service.version`` for records
service_environment  : Default ``service.environment`` for records
service_id           : Default ``service.id`` for records

Examples:
    >>> from stackorigin.core.settings import get_settings
    >>> get_settings().stack_trace_limit
    10
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecordSettings(BaseSettings):
    """Settings shared by stack capture and log records."""

    model_config = SettingsConfigDict(
        env_prefix="STACKORIGIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Capture ──────────────────────────────────────────────────
    stack_trace_limit: int = Field(
        default=10,
        ge=1,
        description="Maximum number of raw frames read per capture",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # ── Service defaults ─────────────────────────────────────────
    service_name: str = ""
    service_version: str = ""
    service_environment: str = ""
    service_id: str = ""

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache(maxsize=1)
def get_settings() -> RecordSettings:
    """Return the process-wide settings, loading them on first call."""
    return RecordSettings()


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()


__all__ = ["RecordSettings", "get_settings", "reset_settings"]
