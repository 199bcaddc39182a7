"""Plain descriptors produced from frame handles."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass(frozen=True)
class FrameDescriptor:
    """
    Plain translation of one ``CallSite``.

    Every field is independently nullable: a frame reports only what the
    interpreter knows about it (e.g. module-level code has no function name,
    plain functions have no receiver).
    """

    receiver: Any = None
    # Bound self/cls of the frame.

    type_name: str | None = None
    # Qualified name of the receiver's type.

    function: Any = None
    # Function object executing in the frame, when resolvable.

    function_name: str | None = None
    # Name of the executing function; None for module-level code.

    method_name: str | None = None
    # Attribute name holding the function on the receiver's type.

    file_name: str | None = None
    line_number: int | None = None
    column_number: int | None = None
    # 1-based source position of the executing instruction.

    eval_origin: str | None = None
    # Where exec/eval ran the code, for code compiled from a string.

    is_toplevel: bool = False
    is_eval: bool = False
    is_native: bool = False
    is_constructor: bool = False
    is_async: bool = False
    is_promise_all: bool = False
    promise_index: int | None = None

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        """Field names in declared order."""
        return tuple(f.name for f in fields(cls))

    def to_dict(self) -> dict[str, Any]:
        """All fields, including absent ones, in declared order."""
        # asdict() would deep-copy the receiver and function
        return {name: getattr(self, name) for name in self.keys()}

    def location(self) -> str:
        return f"{self.file_name}:{self.line_number}:{self.column_number}"


@dataclass(frozen=True)
class OriginDetails:
    """Where a log record was instantiated."""

    column: int = 0
    line: int = 0
    file_name: str = ""
    path: str = ""
    function: str = "none"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = ["FrameDescriptor", "OriginDetails"]
