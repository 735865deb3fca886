"""
Tests for timezone helpers.
"""

import pytest
from unittest.mock import patch
from datetime import date, datetime, timezone

import pytz

from utils.timezones import (
    ensure_utc,
    is_valid_timezone,
    local_date,
    local_time_hhmm,
    normalize_reminder_time,
    resolve_timezone,
)


class TestEnsureUtc:

    def test_naive_datetime_gets_utc(self):
        result = ensure_utc(datetime(2026, 1, 15, 14, 0))
        assert result.tzinfo is timezone.utc
        assert result.hour == 14

    def test_aware_datetime_is_converted(self):
        tokyo = pytz.timezone("Asia/Tokyo").localize(datetime(2026, 1, 16, 9, 0))
        result = ensure_utc(tokyo)
        assert (result.day, result.hour) == (16, 0)


class TestTimezoneLookup:

    @pytest.mark.parametrize("name", ["America/New_York", "Asia/Tokyo", "UTC", "Europe/London"])
    def test_known_timezones_are_valid(self, name):
        assert is_valid_timezone(name)
        assert resolve_timezone(name) is not None

    @pytest.mark.parametrize("name", ["Mars/Base", "", None, "America/Nowhere"])
    def test_unknown_timezones(self, name):
        assert not is_valid_timezone(name)
        assert resolve_timezone(name) is None

    def test_unknown_timezone_warns_once_per_name(self):
        with patch("utils.timezones.logger") as log:
            for _ in range(3):
                resolve_timezone("Atlantis/Capital")
            resolve_timezone("Atlantis/Harbour")

        warned = [c.kwargs["timezone"] for c in log.warning.call_args_list]
        assert warned == ["Atlantis/Capital", "Atlantis/Harbour"]
        assert log.debug.call_count == 2


class TestLocalConversion:

    def test_local_time_truncates_to_minute(self):
        instant = datetime(2026, 1, 15, 14, 0, 59, tzinfo=timezone.utc)
        assert local_time_hhmm(instant, pytz.timezone("America/New_York")) == "09:00"

    def test_local_date_can_differ_from_utc_date(self):
        instant = datetime(2026, 1, 15, 23, 30, tzinfo=timezone.utc)
        assert local_date(instant, pytz.timezone("Asia/Tokyo")) == date(2026, 1, 16)
        assert local_date(instant, pytz.timezone("America/New_York")) == date(2026, 1, 15)


class TestNormalizeReminderTime:

    @pytest.mark.parametrize("value,expected", [
        ("09:00", "09:00"),
        ("9:00", "09:00"),
        (" 21:45 ", "21:45"),
        ("07:30:00", "07:30"),
        ("00:00", "00:00"),
    ])
    def test_valid_times(self, value, expected):
        assert normalize_reminder_time(value) == expected

    @pytest.mark.parametrize("value", [None, "", "24:00", "12:61", "noon", "9am"])
    def test_invalid_times(self, value):
        assert normalize_reminder_time(value) is None
