"""
External collaborators used by the reminder scheduler.
"""

from services.affirmation_generator import AffirmationGenerator, clean_affirmation
from services.sms_notifier import SMSResult, TwilioSMSNotifier

__all__ = [
    "AffirmationGenerator",
    "clean_affirmation",
    "SMSResult",
    "TwilioSMSNotifier",
]
