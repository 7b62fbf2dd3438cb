from __future__ import annotations

from datetime import datetime, timezone


def format_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC, e.g. 2026-02-01T10:00:00.123456Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
