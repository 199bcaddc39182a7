"""
stackorigin - call-site capture and self-locating structured log records.

Usage:
    from stackorigin import LogRecord, callsites

    sites = callsites()          # descriptors for the current stack
    record = LogRecord()         # log.origin.* point at this line
    record["message"] = "hello"
    print(record)
"""

__version__ = "0.1.0"

from stackorigin.core.errors import (
    MissingStackError,
    ReadOnlyFieldError,
    StackOriginError,
    UnknownFieldError,
    UnsupportedPlatformError,
)
from stackorigin.records import LogRecord
from stackorigin.stack import (
    CALLSITE_PROBES,
    CallSite,
    FrameDescriptor,
    OriginDetails,
    callsites,
    capture,
    parse_callsite,
)

__all__ = [
    "__version__",
    # Capture
    "callsites",
    "capture",
    "parse_callsite",
    "CALLSITE_PROBES",
    "CallSite",
    "FrameDescriptor",
    "OriginDetails",
    # Records
    "LogRecord",
    # Errors
    "StackOriginError",
    "UnsupportedPlatformError",
    "MissingStackError",
    "UnknownFieldError",
    "ReadOnlyFieldError",
]
