"""
Frame handles and the closed set of probes read from them.

A ``CallSite`` is an opaque handle over one activation record: a Python frame
plus the instruction offset and line it was executing when the handle was
taken. Frames keep running after a handle is created, so the offset is
snapshotted up front; everything else is read lazily by the probes.

``CALLSITE_PROBES`` is the fixed, ordered list of accessor names that
``parse_callsite`` invokes. Probes prefixed with ``get_`` produce the field
named by the rest of the probe name; ``is_*`` probes keep their name.
"""

from __future__ import annotations

import inspect
import itertools
import traceback
from types import CodeType, FrameType, TracebackType
from typing import Any, Final

CALLSITE_PROBES: Final[tuple[str, ...]] = (
    "get_receiver",
    "get_type_name",
    "get_function",
    "get_function_name",
    "get_method_name",
    "get_file_name",
    "get_line_number",
    "get_column_number",
    "get_eval_origin",
    "is_toplevel",
    "is_eval",
    "is_native",
    "is_constructor",
    "is_async",
    "is_promise_all",
    "get_promise_index",
)

_RECEIVER_NAMES: Final = ("self", "cls")
_ASYNC_FLAGS: Final = inspect.CO_COROUTINE | inspect.CO_ASYNC_GENERATOR | inspect.CO_ITERABLE_COROUTINE
_MODULE_CODE_NAME: Final = "<module>"
_CONSTRUCTOR_NAMES: Final = ("__init__", "__new__")


def _code_position(code: CodeType, lasti: int) -> tuple[int | None, int | None, int | None, int | None]:
    """Return (lineno, end_lineno, col_offset, end_col_offset) of the instruction at ``lasti``."""
    if lasti < 0:
        return (None, None, None, None)
    # co_positions yields one entry per 2-byte code unit
    return next(itertools.islice(code.co_positions(), lasti // 2, None), (None, None, None, None))


class CallSite:
    """One frame of a captured stack, queried through ``CALLSITE_PROBES``."""

    __slots__ = ("_frame", "_lasti", "_lineno")

    def __init__(self, frame: FrameType, lasti: int | None = None, lineno: int | None = None):
        self._frame = frame
        self._lasti = frame.f_lasti if lasti is None else lasti
        self._lineno = frame.f_lineno if lineno is None else lineno

    @classmethod
    def from_traceback(cls, tb: TracebackType) -> CallSite:
        return cls(tb.tb_frame, tb.tb_lasti, tb.tb_lineno)

    @property
    def frame(self) -> FrameType:
        return self._frame

    @property
    def code(self) -> CodeType:
        return self._frame.f_code

    # -- receiver / function ----------------------------------------------

    def get_receiver(self) -> Any:
        """The bound ``self``/``cls`` of the frame, or None for plain functions."""
        code = self.code
        if code.co_argcount < 1 or code.co_varnames[0] not in _RECEIVER_NAMES:
            return None
        return self._frame.f_locals.get(code.co_varnames[0])

    def get_type_name(self) -> str | None:
        receiver = self.get_receiver()
        if receiver is None:
            return None
        owner = receiver if isinstance(receiver, type) else type(receiver)
        return owner.__qualname__

    def get_function(self) -> Any:
        return self._lookup_function()[1]

    def get_function_name(self) -> str | None:
        name = self.code.co_name
        return None if name == _MODULE_CODE_NAME else name

    def get_method_name(self) -> str | None:
        return self._lookup_function()[0]

    def _lookup_function(self) -> tuple[str | None, Any]:
        """
        Find the function object running in this frame.

        Returns ``(method_name, function)``: the attribute name on the
        receiver's type for methods, ``None`` for module-level functions.
        """
        code = self.code
        receiver = self.get_receiver()
        if receiver is not None:
            owner = receiver if isinstance(receiver, type) else type(receiver)
            for klass in owner.__mro__:
                for name in _attribute_names(klass, code.co_name):
                    func = _match_code(klass.__dict__.get(name), code)
                    if func is not None:
                        return name, func
        func = _match_code(self._frame.f_globals.get(code.co_name), code)
        return None, func

    # -- location ---------------------------------------------------------

    def get_file_name(self) -> str | None:
        return self.code.co_filename or None

    def get_line_number(self) -> int | None:
        lineno = _code_position(self.code, self._lasti)[0]
        return lineno if lineno is not None else self._lineno

    def get_column_number(self) -> int | None:
        col_offset = _code_position(self.code, self._lasti)[2]
        return None if col_offset is None else col_offset + 1

    def get_eval_origin(self) -> str | None:
        if not self.is_eval():
            return None
        back = self._frame.f_back
        if back is None:
            return None
        return f"{back.f_code.co_name} ({back.f_code.co_filename}:{back.f_lineno})"

    # -- flags ------------------------------------------------------------

    def is_toplevel(self) -> bool:
        return self.get_receiver() is None

    def is_eval(self) -> bool:
        filename = self.code.co_filename
        return filename.startswith("<") and filename.endswith(">") and not self.is_native()

    def is_native(self) -> bool:
        return self.code.co_filename.startswith("<frozen ")

    def is_constructor(self) -> bool:
        return self.code.co_name in _CONSTRUCTOR_NAMES

    def is_async(self) -> bool:
        return bool(self.code.co_flags & _ASYNC_FLAGS)

    def is_promise_all(self) -> bool:
        return self.code.co_name == "gather" and self._frame.f_globals.get("__name__") == "asyncio.tasks"

    def get_promise_index(self) -> int | None:
        return None

    # -- rendering --------------------------------------------------------

    def to_frame_summary(self) -> traceback.FrameSummary:
        """Convert to a stdlib FrameSummary for traceback-style rendering."""
        _, end_lineno, col_offset, end_col_offset = _code_position(self.code, self._lasti)
        return traceback.FrameSummary(
            self.code.co_filename,
            self.get_line_number(),
            self.code.co_name,
            lookup_line=False,
            end_lineno=end_lineno,
            colno=col_offset,
            end_colno=end_col_offset,
        )

    def __repr__(self) -> str:
        name = self.get_function_name() or _MODULE_CODE_NAME
        return f"<CallSite {name} ({self.code.co_filename}:{self.get_line_number()}:{self.get_column_number()})>"


def _attribute_names(klass: type, co_name: str) -> tuple[str, ...]:
    # private methods are stored under their mangled name
    if co_name.startswith("__") and not co_name.endswith("__"):
        return (co_name, f"_{klass.__name__.lstrip('_')}{co_name}")
    return (co_name,)


def _match_code(candidate: Any, code: CodeType) -> Any:
    """Return the callable in ``candidate``'s wrapper chain whose code is ``code``."""
    if isinstance(candidate, (staticmethod, classmethod)):
        candidate = candidate.__func__
    elif isinstance(candidate, property):
        candidate = candidate.fget
    seen = set()
    while candidate is not None and id(candidate) not in seen:
        if getattr(candidate, "__code__", None) is code:
            return candidate
        seen.add(id(candidate))
        candidate = getattr(candidate, "__wrapped__", None)
    return None


__all__ = ["CALLSITE_PROBES", "CallSite"]
