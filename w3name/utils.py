"""
w3name.utils
------------
Lightweight helpers for base64, RFC 3339 timestamps, nanosecond durations and
canonical CBOR serialization.
These functions keep record signing deterministic for a given clock reading.
"""

from __future__ import annotations
import base64, re
from datetime import datetime, timedelta, timezone
from typing import Any

import cbor2

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$",
    re.ASCII,
)


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"), validate=True)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_rfc3339_nanos(dt: datetime) -> str:
    """RFC 3339 in UTC with nine fractional digits and a literal Z."""
    dt = dt.astimezone(timezone.utc)
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
        f".{dt.microsecond * 1000:09d}Z"
    )


def parse_rfc3339(s: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware UTC datetime.

    Fractional seconds beyond microsecond precision are truncated.
    Raises ValueError for anything that is not a valid RFC 3339 date-time.
    """
    m = _RFC3339.match(s)
    if not m:
        raise ValueError(f"not an RFC 3339 timestamp: {s!r}")
    year, month, day, hour, minute, second, frac, offset = m.groups()
    micros = int((frac or "")[:6].ljust(6, "0"))

    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"invalid UTC offset: {offset!r}")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))

    try:
        dt = datetime(int(year), int(month), int(day), int(hour), int(minute), int(second), micros, tzinfo=tz)
        return dt.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(str(e)) from e


def duration_ns(start: datetime, end: datetime) -> int:
    # exact integer arithmetic; timedelta.total_seconds() loses precision
    td = end - start
    return (td.days * 86_400 + td.seconds) * 1_000_000_000 + td.microseconds * 1_000


def canonical_cbor(obj: Any) -> bytes:
    # Deterministic CBOR: shortest integers, map keys sorted length-first then bytewise
    return cbor2.dumps(obj, canonical=True)
