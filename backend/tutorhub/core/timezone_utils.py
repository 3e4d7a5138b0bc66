"""
Timezone and interval utilities for the scheduling core.

Absolute instants are always stored in UTC. Civil projections (day of week,
HH:mm) are only used to match sessions against recurring availability windows.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Iterator, Optional, Tuple

import pytz

from .enums import DayOfWeek

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"


def ensure_utc(dt: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are assumed to already be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def get_timezone(name: Optional[str]) -> pytz.BaseTzInfo:
    """
    Resolve an IANA timezone name.

    Unknown or empty names fall back to UTC so that a bad profile value never
    blocks scheduling.
    """
    if not name:
        return pytz.UTC
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        logger.warning("Unknown timezone %r, falling back to UTC", name)
        return pytz.UTC


def overlaps(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open interval overlap: touching endpoints do not overlap."""
    return a_start < b_end and b_start < a_end


def local_day_and_time(instant: datetime, tz_name: Optional[str] = DEFAULT_TIMEZONE) -> Tuple[DayOfWeek, str]:
    """
    Project an absolute instant into (day of week, "HH:mm") for a timezone.

    Args:
        instant: Absolute instant (naive values are treated as UTC)
        tz_name: IANA timezone identifier

    Returns:
        Tuple of the civil day of week and the zero-padded 24h local time
    """
    local = ensure_utc(instant).astimezone(get_timezone(tz_name))
    return DayOfWeek.from_weekday(local.weekday()), local.strftime("%H:%M")


def time_le(a: str, b: str) -> bool:
    """Compare zero-padded "HH:mm" strings."""
    return a <= b


def window_contains(
    window_start: str, window_end: str, local_start: str, local_end: str
) -> bool:
    """True if [local_start, local_end] lies inside [window_start, window_end]."""
    return time_le(window_start, local_start) and time_le(local_end, window_end)


def iter_slot_starts(
    range_start: datetime,
    range_end: datetime,
    duration: timedelta,
    stride: timedelta,
) -> Iterator[datetime]:
    """Yield candidate slot starts stepping by ``stride`` while the slot still fits."""
    slot_start = ensure_utc(range_start)
    end = ensure_utc(range_end)
    while slot_start + duration <= end:
        yield slot_start
        slot_start = slot_start + stride
