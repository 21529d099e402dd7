"""Time utilities."""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def not_before(previous: Optional[datetime]) -> datetime:
    """Return the current UTC time, clamped so it never precedes `previous`.

    Wall clocks can step backwards; append-only logs use this to keep their
    timestamps non-decreasing in insertion order.
    """
    now = utc_now()
    if previous is not None and now < previous:
        return previous
    return now
