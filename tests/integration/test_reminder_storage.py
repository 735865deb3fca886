"""
Integration tests for reminder settings storage on SQLite.

Run with: pytest tests/integration -m integration
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from core import DatabaseConnectionError, InvalidInputError
from scheduler import ReminderScheduler
from schemas import ReminderSettingsUpdateSchema
from services.sms_notifier import SMSResult
from storage.database import AsyncDatabase

pytestmark = pytest.mark.integration


@pytest.fixture
async def database(tmp_path):
    """Fresh SQLite database per test."""
    database = AsyncDatabase(f"sqlite+aiosqlite:///{tmp_path / 'reminders.db'}")
    await database.create_tables()
    yield database
    await database.dispose()


def sms_update(**overrides) -> ReminderSettingsUpdateSchema:
    data = {
        "is_enabled": True,
        "delivery_method": "sms",
        "phone_number": "+15550001111",
        "reminder_time": "09:00",
        "timezone": "America/New_York",
    }
    data.update(overrides)
    return ReminderSettingsUpdateSchema(**data)


class TestConnection:

    async def test_check_connection_succeeds_on_reachable_database(self, database):
        await database.check_connection()

    async def test_unreachable_database_raises_connection_error(self, tmp_path):
        unreachable = AsyncDatabase(f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'reminders.db'}")
        try:
            with pytest.raises(DatabaseConnectionError) as exc:
                await unreachable.check_connection()
            assert exc.value.error_code == "DATABASE_CONNECTION_ERROR"

            with pytest.raises(DatabaseConnectionError):
                await unreachable.create_tables()
        finally:
            await unreachable.dispose()

    async def test_drop_tables_removes_stored_settings(self, database):
        await database.upsert_reminder_settings("user-1", sms_update())

        await database.drop_tables()
        await database.create_tables()

        assert await database.get_reminder_settings("user-1") is None


class TestUpsert:

    async def test_creates_row_with_defaults(self, database):
        saved = await database.upsert_reminder_settings("user-1", ReminderSettingsUpdateSchema())

        assert saved.user_id == "user-1"
        assert saved.is_enabled is False
        assert saved.reminder_time == "09:00"
        assert saved.timezone == "America/New_York"
        assert saved.delivery_method == "app"
        assert saved.last_sent_at is None

    async def test_partial_update_keeps_other_fields(self, database):
        await database.upsert_reminder_settings("user-1", sms_update())

        updated = await database.upsert_reminder_settings(
            "user-1", ReminderSettingsUpdateSchema(reminder_time="07:15")
        )

        assert updated.reminder_time == "07:15"
        assert updated.phone_number == "+15550001111"
        assert updated.delivery_method == "sms"
        assert updated.is_enabled is True

    async def test_enabling_sms_without_phone_is_rejected(self, database):
        with pytest.raises(InvalidInputError) as exc:
            await database.upsert_reminder_settings("user-1", sms_update(phone_number=None))

        assert exc.value.context["field"] == "phone_number"
        assert await database.get_reminder_settings("user-1") is None

    async def test_get_missing_returns_none(self, database):
        assert await database.get_reminder_settings("nobody") is None


class TestListing:

    async def test_list_returns_every_configuration(self, database):
        await database.upsert_reminder_settings("sms-user", sms_update())
        await database.upsert_reminder_settings("app-user", ReminderSettingsUpdateSchema(is_enabled=True))
        await database.upsert_reminder_settings("off-user", sms_update(is_enabled=False))

        all_rows = await database.list_reminder_settings()
        sms_rows = await database.list_enabled_sms_reminder_settings()

        assert {r.user_id for r in all_rows} == {"sms-user", "app-user", "off-user"}
        assert [r.user_id for r in sms_rows] == ["sms-user"]


class TestRecordSuccessfulSend:

    async def test_sets_last_sent_at(self, database):
        await database.upsert_reminder_settings("user-1", sms_update())
        sent_at = datetime(2026, 1, 15, 14, 0, 12, tzinfo=timezone.utc)

        assert await database.record_successful_send("user-1", sent_at) is True

        row = await database.get_reminder_settings("user-1")
        assert row.last_sent_at == datetime(2026, 1, 15, 14, 0, 12)

    async def test_never_moves_backward(self, database):
        await database.upsert_reminder_settings("user-1", sms_update())
        newer = datetime(2026, 1, 15, 14, 0, tzinfo=timezone.utc)
        await database.record_successful_send("user-1", newer)

        assert await database.record_successful_send("user-1", newer - timedelta(days=1)) is False

        row = await database.get_reminder_settings("user-1")
        assert row.last_sent_at == newer.replace(tzinfo=None)

    async def test_unknown_user_is_not_recorded(self, database):
        assert await database.record_successful_send("ghost") is False


class TestSchedulerAgainstDatabase:

    async def test_reminder_is_sent_once_per_local_day(self, database):
        await database.upsert_reminder_settings("user-1", sms_update())
        now = datetime(2026, 1, 15, 14, 0, 5, tzinfo=timezone.utc)  # 09:00 in New York
        notifier = AsyncMock()
        notifier.send_text = AsyncMock(return_value=SMSResult(success=True, message_id="SM1"))
        generator = AsyncMock()
        generator.generate_daily_affirmation_text = AsyncMock(return_value="I am enough.")

        scheduler = ReminderScheduler(database, generator, notifier, clock=lambda: now)
        first = await scheduler.process_tick()
        second = await scheduler.process_tick()

        assert first.sent == 1
        assert second.due == 0
        notifier.send_text.assert_awaited_once()
        row = await database.get_reminder_settings("user-1")
        assert row.last_sent_at == now.replace(tzinfo=None)

    async def test_failed_send_leaves_row_untouched(self, database):
        await database.upsert_reminder_settings("user-1", sms_update())
        now = datetime(2026, 1, 15, 14, 0, 5, tzinfo=timezone.utc)
        notifier = AsyncMock()
        notifier.send_text = AsyncMock(return_value=SMSResult(success=False, error="undeliverable"))
        generator = AsyncMock()
        generator.generate_daily_affirmation_text = AsyncMock(return_value="I am enough.")

        result = await ReminderScheduler(database, generator, notifier, clock=lambda: now).process_tick()

        assert result.failed == 1
        row = await database.get_reminder_settings("user-1")
        assert row.last_sent_at is None
