"""
Tests for reminder settings schemas.
"""

import pytest
from pydantic import ValidationError

from schemas import DeliveryMethod, ReminderSettingsUpdateSchema


class TestReminderSettingsUpdate:

    def test_all_fields_optional(self):
        update = ReminderSettingsUpdateSchema()
        assert update.model_dump(exclude_none=True) == {}

    def test_normalizes_reminder_time(self):
        update = ReminderSettingsUpdateSchema(reminder_time="7:05")
        assert update.reminder_time == "07:05"

    @pytest.mark.parametrize("value", ["25:00", "7pm", "12:75"])
    def test_rejects_invalid_reminder_time(self, value):
        with pytest.raises(ValidationError) as exc:
            ReminderSettingsUpdateSchema(reminder_time=value)
        assert exc.value.errors()[0]["loc"] == ("reminder_time",)

    def test_rejects_unknown_timezone(self):
        with pytest.raises(ValidationError):
            ReminderSettingsUpdateSchema(timezone="Atlantis/Capital")

    def test_accepts_iana_timezone(self):
        assert ReminderSettingsUpdateSchema(timezone="Asia/Tokyo").timezone == "Asia/Tokyo"

    def test_delivery_method_is_an_enum(self):
        update = ReminderSettingsUpdateSchema(delivery_method="sms")
        assert update.delivery_method is DeliveryMethod.SMS
        assert update.model_dump(exclude_none=True, mode="json") == {"delivery_method": "sms"}

    def test_rejects_unknown_delivery_method(self):
        with pytest.raises(ValidationError):
            ReminderSettingsUpdateSchema(delivery_method="pigeon")

    def test_last_sent_at_cannot_be_set_by_clients(self):
        with pytest.raises(ValidationError) as exc:
            ReminderSettingsUpdateSchema.model_validate({"last_sent_at": "2026-01-01T00:00:00Z"})
        assert exc.value.errors()[0]["loc"] == ("last_sent_at",)


class TestReminderSettingsSchema:

    @pytest.mark.parametrize("overrides,expected", [
        ({}, True),
        ({"is_enabled": False}, False),
        ({"delivery_method": "app"}, False),
        ({"phone_number": None}, False),
        ({"phone_number": "  "}, False),
    ])
    def test_wants_sms(self, make_config, overrides, expected):
        assert make_config(**overrides).wants_sms is expected
