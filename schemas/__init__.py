"""
Pydantic schemas for type-safe data transfer.
"""

from schemas.reminder import (
    DeliveryMethod,
    ReminderSettingsSchema,
    ReminderSettingsUpdateSchema,
    SendSMSRequest,
)

__all__ = [
    "DeliveryMethod",
    "ReminderSettingsSchema",
    "ReminderSettingsUpdateSchema",
    "SendSMSRequest",
]
