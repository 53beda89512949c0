"""Tests for the timezone handling service."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from voicetask.services.timezone import TimezoneService, resolve_timezone


class TestResolveTimezone:
    def test_valid_name(self):
        assert resolve_timezone("Europe/Paris") == ZoneInfo("Europe/Paris")

    def test_unknown_name_falls_back_to_setting(self):
        with_default = resolve_timezone(None)
        assert resolve_timezone("Mars/Olympus_Mons") == with_default

    def test_invalid_key_does_not_raise(self):
        assert resolve_timezone("../etc/passwd") is not None


class TestTimezoneService:
    def test_fixed_now_is_converted(self):
        fixed = datetime(2026, 10, 19, 14, 0, tzinfo=UTC)
        service = TimezoneService("America/New_York", now=fixed)

        now = service.now()

        assert now.hour == 10
        assert now.tzinfo == ZoneInfo("America/New_York")

    def test_naive_fixed_now_is_local(self):
        service = TimezoneService("Asia/Tokyo", now=datetime(2026, 10, 19, 9, 0))
        assert service.now().utcoffset().total_seconds() == 9 * 3600

    def test_wall_clock_now_is_aware(self):
        assert TimezoneService("UTC").now().tzinfo is not None

    def test_to_utc(self):
        service = TimezoneService("America/New_York")
        local = datetime(2026, 10, 20, 14, 0)
        assert service.to_utc(local) == datetime(2026, 10, 20, 18, 0, tzinfo=UTC)

    def test_to_utc_across_dst(self):
        service = TimezoneService("America/New_York")
        # First Monday after clocks go back
        assert service.to_utc(datetime(2026, 11, 2, 9, 0)).hour == 14
