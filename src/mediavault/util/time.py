from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

EPOCH: datetime = datetime(1970, 1, 1, tzinfo=timezone.utc)


def now_utc() -> datetime:
    """Return current time as tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse RFC3339 timestamp string into tz-aware UTC datetime.

    Accepts strings like:
      - 2025-01-01T12:34:56Z
      - 2025-01-01T12:34:56.123Z
      - 2025-01-01T12:34:56+09:00
    """
    if not isinstance(value, str) or not value:
        raise ValueError("RFC3339 value must be a non-empty string")

    s = value.strip()
    # Python's fromisoformat doesn't accept 'Z' in 3.9/3.10, so normalize.
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)  # raises ValueError if invalid
    dt = normalize_dt(dt)
    return dt.astimezone(timezone.utc)


def to_rfc3339(dt: datetime) -> str:
    """
    Convert tz-aware datetime to RFC3339 (UTC, with 'Z').

    Keeps microseconds so that a parse/format round trip is exact.
    """
    dt = normalize_dt(dt).astimezone(timezone.utc)
    s = dt.isoformat(timespec="microseconds")
    return s.replace("+00:00", "Z")


def normalize_dt(dt: datetime) -> datetime:
    """Ensure datetime is tz-aware. Raises if naive."""
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        raise ValueError("naive datetime is not allowed; timezone-aware required")
    return dt


def same_instant(a: datetime, b: datetime) -> bool:
    """Return True if two tz-aware datetimes represent the same instant in time."""
    a_utc = normalize_dt(a).astimezone(timezone.utc)
    b_utc = normalize_dt(b).astimezone(timezone.utc)
    return a_utc == b_utc


def from_epoch_millis(value: int | float) -> datetime:
    """Convert milliseconds since the Unix epoch (browser ``Date.now()``) to UTC."""
    return EPOCH + timedelta(milliseconds=value)


def to_epoch_millis(dt: datetime) -> int:
    """Convert a tz-aware datetime to whole milliseconds since the Unix epoch."""
    delta = normalize_dt(dt).astimezone(timezone.utc) - EPOCH
    return delta // timedelta(milliseconds=1)


def coerce_timestamp(value: Any) -> datetime:
    """
    Read a persisted timestamp.

    Accepts RFC3339 strings, epoch milliseconds (int/float, not bool) and
    tz-aware datetimes (Firestore returns datetime subclasses).
    """
    if isinstance(value, datetime):
        return normalize_dt(value).astimezone(timezone.utc)
    if isinstance(value, bool):
        raise TypeError("timestamp must not be a bool")
    if isinstance(value, (int, float)):
        return from_epoch_millis(value)
    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return from_epoch_millis(int(s))
        return parse_rfc3339(s)
    raise TypeError(f"unsupported timestamp value: {value!r}")
