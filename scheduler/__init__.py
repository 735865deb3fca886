"""
Recurring delivery of daily affirmation reminders.
"""

from scheduler.fire_decision import should_fire
from scheduler.reminder_scheduler import ReminderScheduler, TickResult

__all__ = [
    "should_fire",
    "ReminderScheduler",
    "TickResult",
]
