"""
Fire decision for daily reminders.

A reminder fires when the current wall-clock minute in the user's timezone is
exactly the configured HH:MM and nothing was sent yet on that local calendar
day. A tick that misses the configured minute skips that day's reminder.
"""

from datetime import datetime
from typing import Optional

from core import get_logger
from utils.timezones import local_date, local_time_hhmm, normalize_reminder_time, resolve_timezone

logger = get_logger(__name__)

_reported_times: set = set()


def should_fire(
    reminder_time: str,
    timezone: str,
    last_sent_at: Optional[datetime],
    now: datetime,
) -> bool:
    """
    Decide whether a reminder should be sent at ``now``.

    Args:
        reminder_time: Configured local time of day, HH:MM (24h)
        timezone: IANA timezone name; unknown names fall back to system local time
        last_sent_at: Last successful delivery instant (naive values are UTC)
        now: Current instant (naive values are UTC)

    Returns:
        True if the reminder is due now and was not already sent today
    """
    target = normalize_reminder_time(reminder_time)
    if target is None:
        if reminder_time in _reported_times:
            logger.debug("Unparseable reminder time, not firing", reminder_time=reminder_time)
        else:
            _reported_times.add(reminder_time)
            logger.warning("Unparseable reminder time, not firing", reminder_time=reminder_time)
        return False

    tz = resolve_timezone(timezone)

    if local_time_hhmm(now, tz) != target:
        return False

    if last_sent_at is None:
        return True

    # Same local day means today's reminder already went out
    return local_date(last_sent_at, tz) != local_date(now, tz)
