"""Structured log records whose origin fields are derived from the call stack."""

from stackorigin.records.record import (
    ORIGIN_FRAME_OFFSET,
    PROPERTIES,
    READONLY_PROPERTIES,
    LogRecord,
)

__all__ = ["LogRecord", "ORIGIN_FRAME_OFFSET", "PROPERTIES", "READONLY_PROPERTIES"]
