"""
Structured logging for stackorigin itself.

Usage:
    from stackorigin.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")
    log = get_logger(__name__)
"""

from stackorigin.logging.config import (
    configure_logging,
    get_logger,
    is_configured,
    is_debug_enabled,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "is_configured",
    "is_debug_enabled",
]
