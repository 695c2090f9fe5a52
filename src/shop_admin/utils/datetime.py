"""Date-time helpers for order timestamps."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a naive timestamp, matching stored columns."""

    return datetime.now(timezone.utc).replace(tzinfo=None)
