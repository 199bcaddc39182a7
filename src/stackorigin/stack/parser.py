"""Translate frame handles into plain ``FrameDescriptor`` values."""

from __future__ import annotations

from typing import Any

from stackorigin.logging import get_logger
from stackorigin.stack.models import FrameDescriptor
from stackorigin.stack.probes import CALLSITE_PROBES, CallSite

logger = get_logger(__name__)

_GETTER_PREFIX = "get_"


def probe_field_name(probe: str) -> str:
    """Field produced by a probe: ``get_function_name`` -> ``function_name``, ``is_eval`` -> ``is_eval``."""
    return probe.removeprefix(_GETTER_PREFIX)


def parse_callsite(callsite: CallSite) -> FrameDescriptor:
    """
    Invoke every probe in ``CALLSITE_PROBES`` on ``callsite``.

    A probe that fails leaves its field absent (None); the rest of the
    descriptor is still populated.
    """
    values: dict[str, Any] = {}
    for probe in CALLSITE_PROBES:
        field_name = probe_field_name(probe)
        try:
            values[field_name] = getattr(callsite, probe)()
        except Exception as exc:
            logger.debug(
                "callsite_probe_failed",
                probe=probe,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            values[field_name] = None
    return FrameDescriptor(**values)


__all__ = ["parse_callsite", "probe_field_name"]
