"""
SQLAlchemy models for the reminder service.
Defines the per-user reminder settings table consumed by the scheduler.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    Index,
    Integer,
    String,
    DateTime,
    Boolean,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReminderSettings(Base):
    """Reminder settings - one row per user, written by settings management and the scheduler."""

    __tablename__ = "reminder_settings"
    __table_args__ = (
        Index(
            "idx_reminder_settings_sms",
            "is_enabled",
            "delivery_method",
            postgresql_where="is_enabled = TRUE",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), unique=True, nullable=False, index=True)
    is_enabled = Column(Boolean, default=False, nullable=False)
    reminder_time = Column(String(5), default="09:00", nullable=False)  # HH:MM, 24h
    timezone = Column(String(100), default="America/New_York", nullable=False)  # IANA timezone
    delivery_method = Column(String(20), default="app", nullable=False)  # "app" or "sms"
    phone_number = Column(String(32), nullable=True)
    last_sent_at = Column(DateTime, nullable=True)  # naive UTC
    created_at = Column(DateTime, default=lambda: datetime.utcnow(), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.utcnow(), nullable=False)

    def __repr__(self):
        return (
            f"<ReminderSettings(user_id='{self.user_id}', enabled={self.is_enabled}, "
            f"method='{self.delivery_method}', time='{self.reminder_time}')>"
        )
