"""Reminder settings schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from utils.timezones import is_valid_timezone, normalize_reminder_time


class DeliveryMethod(str, Enum):
    """Where the daily affirmation is delivered."""

    APP = "app"
    SMS = "sms"


class ReminderSettingsSchema(BaseModel):
    """Complete reminder configuration for one user."""

    id: int = Field(..., description="Row ID")
    user_id: str = Field(..., description="Owning user ID")
    is_enabled: bool = Field(default=False, description="Whether reminders are active")
    reminder_time: str = Field(default="09:00", description="Local time of day (HH:MM, 24h)")
    timezone: str = Field(default="America/New_York", description="IANA timezone for reminder_time")
    delivery_method: str = Field(default=DeliveryMethod.APP.value, description="'app' or 'sms'")
    phone_number: Optional[str] = Field(None, description="SMS destination")
    last_sent_at: Optional[datetime] = Field(None, description="Last successful delivery (UTC)")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def wants_sms(self) -> bool:
        """True when this configuration is an active SMS reminder with a destination."""
        return (
            self.is_enabled
            and self.delivery_method == DeliveryMethod.SMS.value
            and bool(self.phone_number and self.phone_number.strip())
        )


class ReminderSettingsUpdateSchema(BaseModel):
    """
    Partial update for a user's reminder settings.

    Fields left as None are not touched. last_sent_at is owned by the scheduler
    and cannot be set here.
    """

    is_enabled: Optional[bool] = None
    reminder_time: Optional[str] = Field(None, description="Local time of day (HH:MM, 24h)")
    timezone: Optional[str] = Field(None, max_length=100, description="IANA timezone")
    delivery_method: Optional[DeliveryMethod] = None
    phone_number: Optional[str] = Field(None, max_length=32, description="SMS destination")

    model_config = ConfigDict(extra="forbid")

    @field_validator("reminder_time")
    @classmethod
    def validate_reminder_time(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        normalized = normalize_reminder_time(v)
        if normalized is None:
            raise ValueError("reminder_time must be HH:MM in 24-hour form")
        return normalized

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_timezone(v):
            raise ValueError(f"Invalid timezone: {v}")
        return v

    @field_validator("phone_number")
    @classmethod
    def strip_phone_number(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class SendSMSRequest(BaseModel):
    """Manual affirmation send request."""

    phone_number: Optional[str] = Field(None, description="SMS destination")
    affirmation: Optional[str] = Field(None, description="Affirmation text to send")
