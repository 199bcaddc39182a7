"""
Capture the current call stack as plain descriptors.

Usage:
    from stackorigin.stack import callsites

    sites = callsites()
    site = sites[0]  # the frame that called callsites()
    print(site.function_name, site.line_number)

    try:
        risky()
    except Exception as exc:
        sites = callsites(exc)  # raise site first, nothing dropped
"""

from __future__ import annotations

from typing import Any

from stackorigin.stack import hooks
from stackorigin.stack.models import FrameDescriptor
from stackorigin.stack.parser import parse_callsite
from stackorigin.stack.probes import CallSite


class _StackOnlyError(hooks.StackCarrier):
    """Marker error created by callsites() when no error is supplied."""


def _return_raw(error: BaseException, callsites: list[CallSite]) -> list[CallSite]:
    return callsites


def callsites(error: BaseException | None = None) -> list[FrameDescriptor]:
    """
    Return descriptors for every frame of ``error``'s stack, innermost first.

    Without an argument the stack of the caller is captured and the frame of
    this function is left out. A caller-supplied error keeps all of its
    frames.

    The stack-trace hook is replaced for the duration of the call and the
    previous hook is restored on every exit path.

    Raises:
        UnsupportedPlatformError: the interpreter exposes no stack frames
        MissingStackError: ``error`` was never raised and records no stack
    """
    owned = error is None
    if owned:
        error = _StackOnlyError()

    with hooks.hook_lock:
        saved = hooks.swap_prepare_stack_trace(_return_raw)
        try:
            stack: Any = hooks.error_stack(error)

            if owned:
                stack = stack[1:]

            return [parse_callsite(cs) for cs in stack]
        finally:
            hooks.swap_prepare_stack_trace(saved)
            if owned:
                # recorded frames reference the marker through their locals
                error.callsites.clear()


capture = callsites

__all__ = ["callsites", "capture"]
