#!/usr/bin/env python3
"""Log Records — ECS-style records that know where they were created.

WHY SELF-LOCATING RECORDS
─────────────────────────
Every log event should say which file, line and function produced it,
without the caller passing that information by hand. LogRecord reads
it from the call stack when it is constructed.

KEY OPERATIONS
──────────────
    Operation             Purpose
    ───────────────────── ───────────────────────────────────
    LogRecord()           Create a record; log.origin.* derived
    record[key] = value   Assign a dotted ECS field
    record.bind_error(e)  Fill error.* from an exception
    record.to_dict()      Truthy fields in declared order
    str(record)           Pretty-printed JSON

Run: python examples/02_records/01_log_record.py
"""
from stackorigin import LogRecord
from stackorigin.core.settings import RecordSettings


def handle_request():
    record = LogRecord()
    record["message"] = "request served"
    record["log.level"] = "INFO"
    record["http.request.method"] = "GET"
    record["http.response.status_code"] = 200
    record["url.path"] = "/search"
    return record


def main():
    print("=" * 60)
    print("Log Record Examples")
    print("=" * 60)

    # === 1. Origin is derived automatically ===
    print("\n[1] Origin")

    record = handle_request()
    print(f"  {record.origin.function} at {record.origin.file_name}:{record.origin.line}")

    # === 2. Serialization keeps declared order ===
    print("\n[2] Serialized")

    record.apply_settings(RecordSettings(service_name="search-api", service_version="2.1.0"))
    print(record)

    # === 3. Errors ===
    print("\n[3] Error Fields")

    try:
        {}["missing"]
    except KeyError as exc:
        failed = LogRecord().bind_error(exc)
    print(f"  error.type={failed['error.type']}")
    print(f"  error.stack_trace has {len(failed['error.stack_trace'].splitlines())} lines")


if __name__ == "__main__":
    main()
