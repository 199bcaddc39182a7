"""
Process-wide stack-trace formatting hook.

``error_stack(error)`` reads the raw frames of an error and hands them to the
installed ``prepare_stack_trace`` hook, whose return value is the error's
"stack". The default hook renders a Python-style traceback string; a hook
may return anything, e.g. the raw ``CallSite`` list itself.

Raw frames of an error, innermost first:

* ``StackCarrier`` errors record the stack when they are constructed;
* a raised exception uses its traceback (raise site first) followed by the
  frames enclosing the handler;
* anything else has no stack and raises ``MissingStackError``.

The frame count is bounded by ``stack_trace_limit`` (settings default when
left as None).

The hook and the lock guarding it are shared by every thread. Code that swaps
the hook must hold ``hook_lock`` and restore the previous hook in ``finally``.
"""

from __future__ import annotations

import inspect
import threading
import traceback
from collections.abc import Callable
from types import FrameType
from typing import Any

from stackorigin.core.errors import MissingStackError, UnsupportedPlatformError
from stackorigin.core.settings import get_settings
from stackorigin.logging import get_logger
from stackorigin.stack.probes import CallSite

PrepareStackTrace = Callable[[BaseException, list[CallSite]], Any]

logger = get_logger(__name__)

hook_lock = threading.RLock()

# Explicit override of the settings value; None means "use settings".
stack_trace_limit: int | None = None


def default_prepare_stack_trace(error: BaseException, callsites: list[CallSite]) -> str:
    """Render ``callsites`` the way the interpreter prints a traceback."""
    summary = traceback.StackSummary.from_list([cs.to_frame_summary() for cs in reversed(callsites)])
    lines = ["Traceback (most recent call last):\n"]
    lines.extend(summary.format())
    lines.extend(traceback.format_exception_only(type(error), error))
    return "".join(lines)


_prepare_stack_trace: PrepareStackTrace = default_prepare_stack_trace


def get_prepare_stack_trace() -> PrepareStackTrace:
    """Return the installed hook."""
    return _prepare_stack_trace


def _hook_name(hook: Any) -> str:
    return getattr(hook, "__qualname__", type(hook).__qualname__)


def swap_prepare_stack_trace(hook: PrepareStackTrace) -> PrepareStackTrace:
    """
    Replace the hook without logging and return the previous one.

    Used for short-lived overrides that are restored in ``finally``; the
    caller must hold ``hook_lock``.
    """
    global _prepare_stack_trace

    previous = _prepare_stack_trace
    _prepare_stack_trace = hook
    return previous


def set_prepare_stack_trace(hook: PrepareStackTrace | None) -> PrepareStackTrace:
    """
    Install ``hook`` (None restores the default) and return the previous one.

    Callers overriding the hook temporarily should hold ``hook_lock``.
    """
    if hook is not None and not callable(hook):
        raise TypeError(f"prepare_stack_trace hook must be callable, got {type(hook).__name__}")
    if hook is None:
        hook = default_prepare_stack_trace
    with hook_lock:
        previous = swap_prepare_stack_trace(hook)
    logger.debug(
        "prepare_stack_trace_installed",
        hook=_hook_name(hook),
        previous=_hook_name(previous),
    )
    return previous


def get_stack_trace_limit() -> int:
    """Maximum number of raw frames read per error."""
    if stack_trace_limit is None:
        return get_settings().stack_trace_limit
    if stack_trace_limit < 1:
        raise ValueError(f"stack_trace_limit must be at least 1, got {stack_trace_limit!r}")
    return stack_trace_limit


def current_frame() -> FrameType:
    """The caller's frame; fails on interpreters without frame support."""
    frame = inspect.currentframe()
    if frame is None:
        raise UnsupportedPlatformError("This interpreter does not expose stack frames")
    # skip current_frame itself
    return frame.f_back


def walk_frames(frame: FrameType | None, limit: int) -> list[CallSite]:
    """Handles for ``frame`` and its callers, innermost first, at most ``limit``."""
    callsites: list[CallSite] = []
    while frame is not None and len(callsites) < limit:
        callsites.append(CallSite(frame))
        frame = frame.f_back
    return callsites


class StackCarrier(Exception):
    """Exception that records the stack where it was constructed."""

    def __init__(self, *args: Any):
        super().__init__(*args)
        frame = current_frame()
        # skip the __init__ chain of this instance
        while frame is not None and frame.f_code.co_name == "__init__" and frame.f_locals.get("self") is self:
            frame = frame.f_back
        self.callsites = walk_frames(frame, get_stack_trace_limit())


def raw_callsites(error: BaseException) -> list[CallSite]:
    """Raw frame handles of ``error``, innermost first."""
    limit = get_stack_trace_limit()
    if isinstance(error, StackCarrier):
        return list(error.callsites[:limit])

    tb = error.__traceback__
    if tb is None:
        raise MissingStackError(
            "Error has no stack information; raise it first or pass a StackCarrier",
        ).with_context(error_type=type(error).__name__)

    inner: list[CallSite] = []
    handler_frame = tb.tb_frame
    while tb is not None:
        inner.append(CallSite.from_traceback(tb))
        tb = tb.tb_next
    inner.reverse()
    callsites = inner + walk_frames(handler_frame.f_back, limit)
    return callsites[:limit]


def error_stack(error: BaseException) -> Any:
    """Read ``error``'s stack through the installed hook."""
    with hook_lock:
        return _prepare_stack_trace(error, raw_callsites(error))


__all__ = [
    "PrepareStackTrace",
    "StackCarrier",
    "current_frame",
    "default_prepare_stack_trace",
    "error_stack",
    "get_prepare_stack_trace",
    "get_stack_trace_limit",
    "hook_lock",
    "raw_callsites",
    "set_prepare_stack_trace",
    "stack_trace_limit",
    "swap_prepare_stack_trace",
    "walk_frames",
]
