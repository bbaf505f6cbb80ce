"""Tests for generic timestamp helpers."""

from datetime import datetime, timezone

from core.timestamps import format_duration, to_iso, utc_now


class TestUtcNow:
    def test_is_aware_utc_without_microseconds(self):
        now = utc_now()
        assert now.tzinfo == timezone.utc
        assert now.microsecond == 0


class TestIsoHelpers:
    def test_to_iso_aware(self):
        dt = datetime(2024, 1, 9, 3, 40, tzinfo=timezone.utc)
        assert to_iso(dt) == "2024-01-09T03:40:00+00:00"

    def test_to_iso_naive_is_assumed_utc(self):
        assert to_iso(datetime(2024, 1, 9)) == "2024-01-09T00:00:00+00:00"

    def test_to_iso_none(self):
        assert to_iso(None) is None


class TestFormatDuration:
    def test_hours_minutes_seconds(self):
        assert format_duration(3661) == "1h 1m 1s"

    def test_zero(self):
        assert format_duration(0) == "0s"

    def test_negative(self):
        assert format_duration(-5) == "0s"
