"""
Call-site capture (``stackorigin.stack``).

Components, leaves first:
- probes:  CallSite handles and the closed CALLSITE_PROBES list
- models:  FrameDescriptor / OriginDetails
- parser:  parse_callsite (CallSite -> FrameDescriptor)
- hooks:   process-wide prepare_stack_trace hook
- capturing: callsites() / capture()
"""

from stackorigin.stack import hooks
from stackorigin.stack.capturing import callsites, capture
from stackorigin.stack.hooks import (
    StackCarrier,
    default_prepare_stack_trace,
    error_stack,
    get_prepare_stack_trace,
    set_prepare_stack_trace,
)
from stackorigin.stack.models import FrameDescriptor, OriginDetails
from stackorigin.stack.parser import parse_callsite, probe_field_name
from stackorigin.stack.probes import CALLSITE_PROBES, CallSite

__all__ = [
    # Capture
    "callsites",
    "capture",
    # Parsing
    "parse_callsite",
    "probe_field_name",
    "CALLSITE_PROBES",
    "CallSite",
    # Models
    "FrameDescriptor",
    "OriginDetails",
    # Hook
    "hooks",
    "StackCarrier",
    "default_prepare_stack_trace",
    "error_stack",
    "get_prepare_stack_trace",
    "set_prepare_stack_trace",
]
