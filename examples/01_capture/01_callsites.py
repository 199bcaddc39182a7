#!/usr/bin/env python3
"""Call-site Capture — Inspect the running stack as plain descriptors.

WHY CALL-SITE CAPTURE
─────────────────────
Tracebacks are text. Tools that attribute events to code (loggers,
profilers, audit trails) need the stack as data: which function, which
file, which line and column, and whether the frame is a method, a
constructor, a coroutine or exec'd code.

ARCHITECTURE
────────────
    callsites(error=None)
        │  swap prepare_stack_trace hook (restored in finally)
        ▼
    raw CallSite handles ──► parse_callsite ──► FrameDescriptor
                                 (16 probes)

Run: python examples/01_capture/01_callsites.py

See Also:
    02_records/01_log_record — records that locate their own origin
"""
from stackorigin import callsites
from stackorigin.stack import error_stack


class Inventory:
    def reserve(self, sku):
        return callsites()[0]


def fail():
    raise LookupError("sku not found")


def main():
    print("=" * 60)
    print("Call-site Capture Examples")
    print("=" * 60)

    # === 1. Capture the current stack ===
    print("\n[1] Current Stack")

    for site in callsites():
        print(f"  {site.function_name or '<module>'} at {site.location()}")

    # === 2. Methods carry their receiver ===
    print("\n[2] Method Frame")

    site = Inventory().reserve("A-100")
    print(f"  type_name={site.type_name} method_name={site.method_name}")
    print(f"  is_toplevel={site.is_toplevel} is_constructor={site.is_constructor}")

    # === 3. Stack of a raised error ===
    print("\n[3] Raised Error")

    try:
        fail()
    except LookupError as exc:
        first = callsites(exc)[0]
        print(f"  raised in {first.function_name} at line {first.line_number}")
        print("  default hook renders:")
        for line in error_stack(exc).splitlines():
            print(f"    {line}")


if __name__ == "__main__":
    main()
