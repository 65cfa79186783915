"""Identifier and clock helpers used across the core modules."""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Return a fresh globally unique identifier."""

    return str(uuid.uuid4())


def now_ms() -> int:
    """Return the current wall-clock instant in epoch milliseconds."""

    return int(time.time() * 1000)


def now_iso() -> str:
    """Return the current instant as an ISO-8601 UTC string."""

    return ms_to_iso(now_ms())


def ms_to_iso(value: int) -> str:
    """Format epoch milliseconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 instant, accepting a trailing ``Z``.

    Naive values are treated as UTC so comparisons never mix aware and
    naive datetimes.
    """

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def iso_to_ms(value: str) -> int:
    """Return epoch milliseconds for the ISO instant ``value``."""

    return int(round(parse_iso(value).timestamp() * 1000))
