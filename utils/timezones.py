"""
Timezone helpers for per-user reminder times.

Stored instants are UTC. Naive datetimes (as returned by the DateTime columns)
are treated as UTC.
"""

from datetime import date, datetime, timezone as dt_timezone, tzinfo
from typing import Optional

import pytz

from core import get_logger

logger = get_logger(__name__)

_reported_timezones: set = set()


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(dt_timezone.utc)


def ensure_utc(instant: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=dt_timezone.utc)
    return instant.astimezone(dt_timezone.utc)


def is_valid_timezone(name: Optional[str]) -> bool:
    """Check whether ``name`` is a known IANA timezone."""
    if not name:
        return False
    try:
        pytz.timezone(name)
    except pytz.exceptions.UnknownTimeZoneError:
        return False
    return True


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """
    Look up an IANA timezone.

    Returns None for unknown names, which ``to_local`` interprets as the
    system local timezone. The first fallback for each name is logged as a
    warning, later ones at debug level.
    """
    try:
        return pytz.timezone(name)
    except pytz.exceptions.UnknownTimeZoneError:
        if name in _reported_timezones:
            logger.debug("Unknown timezone, falling back to system local time", timezone=name)
        else:
            _reported_timezones.add(name)
            logger.warning("Unknown timezone, falling back to system local time", timezone=name)
        return None


def to_local(instant: datetime, tz: Optional[tzinfo]) -> datetime:
    """Convert an instant to wall-clock time in ``tz`` (system local when None)."""
    return ensure_utc(instant).astimezone(tz)


def local_time_hhmm(instant: datetime, tz: Optional[tzinfo]) -> str:
    """Wall-clock time of day in ``tz`` as HH:MM, truncated to the minute."""
    return to_local(instant, tz).strftime("%H:%M")


def local_date(instant: datetime, tz: Optional[tzinfo]) -> date:
    """Calendar date of ``instant`` in ``tz``."""
    return to_local(instant, tz).date()


def normalize_reminder_time(value: Optional[str]) -> Optional[str]:
    """
    Parse a time-of-day string into zero-padded HH:MM.

    Accepts "9:05", "09:05" and "09:05:00". Returns None when the value is not a
    valid 24-hour time.
    """
    if not value:
        return None
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt).strftime("%H:%M")
        except ValueError:
            continue
    return None
