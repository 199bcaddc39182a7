"""
Structured error types for stackorigin.

Every failure the package reports extends ``StackOriginError`` so callers can
catch one base class, route on ``category`` and serialize the error with
``to_dict()``.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     StackOriginError                         │
        │              (category, context, cause)                      │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  UnsupportedPlatformError    MissingStackError               │
        │  (PLATFORM)                  (STACK)                         │
        │                                                              │
        │  RecordFieldError (RECORD)                                   │
        │       │                                                      │
        │  UnknownFieldError    ReadOnlyFieldError                     │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> error = MissingStackError("no traceback").with_context(error_type="ValueError")
    >>> error.to_dict()["category"]
    'STACK'

Guardrails:
    ❌ DON'T: Return an empty frame list when the interpreter cannot introspect
    ✅ DO: Raise UnsupportedPlatformError so callers notice the gap
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories for classification and routing."""

    PLATFORM = "PLATFORM"  # Interpreter lacks frame introspection
    STACK = "STACK"  # Stack information missing or unreadable
    RECORD = "RECORD"  # Invalid access to a LogRecord field
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


class StackOriginError(Exception):
    """
    Base exception for all stackorigin errors.

    Carries:
    - **category:** ErrorCategory for classification
    - **context:** dict of metadata for logging
    - **cause:** optional underlying exception, also chained as ``__cause__``

    Subclasses set ``default_category``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> StackOriginError:
        """
        Add context to this error (fluent API).

        Usage:
            raise MissingStackError("no traceback").with_context(error_type="KeyError")
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# STACK CAPTURE ERRORS
# =============================================================================


class UnsupportedPlatformError(StackOriginError):
    """The running interpreter cannot expose stack frames."""

    default_category = ErrorCategory.PLATFORM


class MissingStackError(StackOriginError):
    """An error was given for inspection but carries no stack information."""

    default_category = ErrorCategory.STACK


# =============================================================================
# RECORD ERRORS
# =============================================================================


class RecordFieldError(StackOriginError):
    """Invalid access to a LogRecord field."""

    default_category = ErrorCategory.RECORD


class UnknownFieldError(RecordFieldError, KeyError):
    """The key is not one of LogRecord.PROPERTIES."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.message


class ReadOnlyFieldError(RecordFieldError):
    """The key is derived at construction and cannot be assigned."""


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: BaseException) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, StackOriginError):
        return error.category
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "StackOriginError",
    "UnsupportedPlatformError",
    "MissingStackError",
    "RecordFieldError",
    "UnknownFieldError",
    "ReadOnlyFieldError",
    "categorize_error",
]
