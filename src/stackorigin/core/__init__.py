"""stackorigin.core -- errors, settings and timestamp primitives.

Architecture::

    errors.py       Structured error hierarchy (StackOriginError and friends)
    settings.py     pydantic-settings configuration (STACKORIGIN_ prefix)
    timestamps.py   UTC helpers (stdlib-only)
"""

from stackorigin.core.errors import (
    ErrorCategory,
    MissingStackError,
    ReadOnlyFieldError,
    RecordFieldError,
    StackOriginError,
    UnknownFieldError,
    UnsupportedPlatformError,
    categorize_error,
)
from stackorigin.core.settings import RecordSettings, get_settings, reset_settings
from stackorigin.core.timestamps import to_iso8601, utc_now, utc_now_iso

__all__ = [
    # Errors
    "ErrorCategory",
    "StackOriginError",
    "UnsupportedPlatformError",
    "MissingStackError",
    "RecordFieldError",
    "UnknownFieldError",
    "ReadOnlyFieldError",
    "categorize_error",
    # Settings
    "RecordSettings",
    "get_settings",
    "reset_settings",
    # Timestamps
    "utc_now",
    "utc_now_iso",
    "to_iso8601",
]
