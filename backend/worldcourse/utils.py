"""Small time and arithmetic helpers shared by services."""
import math
from datetime import datetime, UTC
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return an aware UTC datetime.

    SQLite hands back naive datetimes; those are stored in UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (0.5 goes up)."""
    return int(math.floor(value + 0.5))


def percentage(part: float, whole: float) -> int:
    """Whole-number percentage of part/whole; 0 when whole is not positive."""
    if not whole or whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def time_ago(moment: Optional[datetime], now: Optional[datetime] = None) -> Optional[str]:
    """Human readable age such as "just now", "5 minutes ago" or "3 days ago"."""
    if moment is None:
        return None
    now = ensure_utc(now) if now else utcnow()
    seconds = int((now - ensure_utc(moment)).total_seconds())
    if seconds < 60:
        return "just now"
    for size, unit in ((60 * 60 * 24 * 30, "month"), (60 * 60 * 24 * 7, "week"),
                       (60 * 60 * 24, "day"), (60 * 60, "hour"), (60, "minute")):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "just now"
