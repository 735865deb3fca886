"""
Shared pytest fixtures for reminder service tests.
"""

import os
import tempfile

# Settings are read at import time; keep tests off real services.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.gettempdir(), "affirmation-reminders-test.db"
)
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from datetime import datetime
from itertools import count
from unittest.mock import AsyncMock

import pytz

from schemas import ReminderSettingsSchema
from services.sms_notifier import SMSResult


NEW_YORK = pytz.timezone("America/New_York")


# --- Time fixtures ---

@pytest.fixture
def ny_nine_am():
    """09:00:30 on Thursday 2026-01-15 in New York (14:00:30 UTC)."""
    return NEW_YORK.localize(datetime(2026, 1, 15, 9, 0, 30)).astimezone(pytz.utc)


# --- Configuration builders ---

_ids = count(1)


@pytest.fixture
def make_config():
    """Factory for reminder configurations; defaults to an enabled 09:00 New York SMS reminder."""

    def _make(**overrides) -> ReminderSettingsSchema:
        row_id = next(_ids)
        data = {
            "id": row_id,
            "user_id": f"user-{row_id}",
            "is_enabled": True,
            "reminder_time": "09:00",
            "timezone": "America/New_York",
            "delivery_method": "sms",
            "phone_number": f"+1555000{row_id:04d}",
            "last_sent_at": None,
        }
        data.update(overrides)
        return ReminderSettingsSchema(**data)

    return _make


# --- Mock collaborators ---

@pytest.fixture
def mock_source():
    """Mock settings source (database) with no configurations."""
    source = AsyncMock()
    source.list_reminder_settings = AsyncMock(return_value=[])
    source.record_successful_send = AsyncMock(return_value=True)
    return source


@pytest.fixture
def mock_generator():
    """Mock content generator returning a fixed affirmation."""
    generator = AsyncMock()
    generator.generate_daily_affirmation_text = AsyncMock(return_value="I am capable of amazing things.")
    return generator


@pytest.fixture
def mock_notifier():
    """Mock SMS notifier that always succeeds."""
    notifier = AsyncMock()
    notifier.send_text = AsyncMock(return_value=SMSResult(success=True, message_id="SM0001"))
    notifier.send_affirmation_reminder = AsyncMock(
        return_value=SMSResult(success=True, message_id="SM0002")
    )
    return notifier
