"""
Log record with ECS-style dotted keys.

A ``LogRecord`` holds a fixed, ordered set of fields. The origin fields
(``log.origin.*``) are derived from the call stack when the record is
constructed and point at the code that instantiated it; everything else is
assigned by the caller.

Example:
    >>> record = LogRecord()
    >>> record["message"] = "Processing started"
    >>> record["log.level"] = "INFO"
    >>> record.to_dict()["log.origin.function"]
    'main'
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Iterator
from typing import Any, Final

from stackorigin.core.errors import MissingStackError, ReadOnlyFieldError, UnknownFieldError
from stackorigin.core.settings import RecordSettings, get_settings
from stackorigin.core.timestamps import utc_now_iso
from stackorigin.stack.capturing import callsites
from stackorigin.stack.hooks import error_stack
from stackorigin.stack.models import OriginDetails

# Frames between the instantiating code and the capture call:
# [0] _get_origin_details, [1] __init__, [2] caller.
# Recompute whenever the call chain from __init__ to callsites() changes.
ORIGIN_FRAME_OFFSET: Final = 2

PROPERTIES: Final[tuple[str, ...]] = (
    "@timestamp",
    "message",
    "data",
    "log.level",
    "log.logger",
    "log.origin.file.column",
    "log.origin.file.line",
    "log.origin.file.name",
    "log.origin.file.path",
    "log.origin.function",
    "error.code",
    "error.id",
    "error.message",
    "error.stack_trace",
    "error.type",
    "service.name",
    "service.version",
    "service.environment",
    "service.id",
    "process.args",
    "process.args_count",
    "event.duration",
    "http.version",
    "http.request.id",
    "http.request.method",
    "http.request.mime_type",
    "http.response.body.content",
    "http.response.mime_type",
    "http.response.status_code",
    "url.domain",
    "url.extension",
    "url.fragment",
    "url.full",
    "url.password",
    "url.path",
    "url.port",
    "url.query",
    "url.scheme",
    "url.username",
)

READONLY_PROPERTIES: Final = frozenset(
    {
        "@timestamp",
        "log.origin.file.column",
        "log.origin.file.line",
        "log.origin.file.name",
        "log.origin.file.path",
        "log.origin.function",
        "process.args",
        "process.args_count",
    }
)

# Numeric fields default to 0, every other caller-assigned field to "".
_NUMERIC_PROPERTIES: Final = frozenset({"http.response.status_code", "url.port"})


def _origin_from_path(path: str) -> str:
    """File name after the last path separator."""
    if not path:
        return ""
    cut = max(path.rfind("/"), path.rfind(os.sep))
    return path[cut + 1 :]


class LogRecord:
    """
    A single log event and its metadata.

    Fields are read and assigned by dotted key::

        record["http.request.method"] = "POST"

    Keys outside ``PROPERTIES`` raise ``UnknownFieldError``; assigning a key
    in ``READONLY_PROPERTIES`` raises ``ReadOnlyFieldError``.
    """

    PROPERTIES: Final = PROPERTIES
    READONLY_PROPERTIES: Final = READONLY_PROPERTIES

    __slots__ = ("_values", "_origin")

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._origin = self._get_origin_details()

        for key in PROPERTIES:
            self._values[key] = 0 if key in _NUMERIC_PROPERTIES else ""

        self._values["@timestamp"] = utc_now_iso()
        self._values["log.logger"] = "unknown"

        self._values["log.origin.file.column"] = self._origin.column
        self._values["log.origin.file.line"] = self._origin.line
        self._values["log.origin.file.name"] = self._origin.file_name
        self._values["log.origin.file.path"] = self._origin.path
        self._values["log.origin.function"] = self._origin.function

        args = list(sys.argv[1:])
        self._values["process.args"] = args
        self._values["process.args_count"] = len(args)

    def _get_origin_details(self) -> OriginDetails:
        sites = callsites()
        if len(sites) <= ORIGIN_FRAME_OFFSET:
            return OriginDetails()

        site = sites[ORIGIN_FRAME_OFFSET]
        path = site.file_name or ""
        return OriginDetails(
            column=site.column_number or 0,
            line=site.line_number or 0,
            file_name=_origin_from_path(path),
            path=path,
            function=site.function_name or "none",
        )

    # -- field access -----------------------------------------------------

    @property
    def origin(self) -> OriginDetails:
        """Where this record was instantiated."""
        return self._origin

    def __getitem__(self, key: str) -> Any:
        if key not in self._values:
            raise UnknownFieldError(f"Unknown log record field: {key!r}").with_context(key=key)
        return self._values[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if key not in self._values:
            raise UnknownFieldError(f"Unknown log record field: {key!r}").with_context(key=key)
        if key in READONLY_PROPERTIES:
            raise ReadOnlyFieldError(f"Log record field {key!r} is read-only").with_context(key=key)
        self._values[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(PROPERTIES)

    def __len__(self) -> int:
        return len(PROPERTIES)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def update(self, values: dict[str, Any] | None = None, **fields: Any) -> LogRecord:
        """Assign several fields at once; returns self for chaining."""
        for key, value in {**(values or {}), **fields}.items():
            self[key] = value
        return self

    # -- enrichment -------------------------------------------------------

    def bind_error(self, error: BaseException) -> LogRecord:
        """
        Fill the ``error.*`` fields from an exception.

        The stack trace is read through the installed stack-trace hook, so it
        is rendered as traceback text unless the hook was replaced. An error
        that was never raised leaves ``error.stack_trace`` empty.
        """
        self["error.type"] = type(error).__name__
        self["error.message"] = str(error)

        code = getattr(error, "code", None)
        if code is not None and not callable(code):
            self["error.code"] = str(code)

        try:
            stack = error_stack(error)
        except MissingStackError:
            stack = ""
        self["error.stack_trace"] = stack if isinstance(stack, str) else str(stack)
        return self

    def apply_settings(self, settings: RecordSettings | None = None) -> LogRecord:
        """Copy non-empty ``service.*`` defaults from settings."""
        settings = settings or get_settings()
        defaults = {
            "service.name": settings.service_name,
            "service.version": settings.service_version,
            "service.environment": settings.service_environment,
            "service.id": settings.service_id,
        }
        for key, value in defaults.items():
            if value:
                self[key] = value
        return self

    # -- serialization ----------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Fields holding truthy values, in ``PROPERTIES`` order."""
        result: dict[str, Any] = {}
        for key in PROPERTIES:
            value = self._values[key]
            if value:
                result[key] = value
        return result

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def __str__(self) -> str:
        return self.to_json(indent=2)

    def __repr__(self) -> str:
        return (
            f"LogRecord(message={self._values['message']!r}, "
            f"origin={self._origin.file_name}:{self._origin.line}:{self._origin.column})"
        )


__all__ = ["LogRecord", "ORIGIN_FRAME_OFFSET", "PROPERTIES", "READONLY_PROPERTIES"]
