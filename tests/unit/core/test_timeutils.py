"""Tests for timestamp helpers."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from trade_analytics.core.errors import InvalidTimestampError
from trade_analytics.core.timeutils import (
    as_utc,
    calendar_day,
    parse_timestamp,
    wall_clock_hhmm,
)

NY = ZoneInfo("America/New_York")


class TestParseTimestamp:
    def test_zulu_suffix(self):
        assert parse_timestamp("2024-03-04T14:30:00Z") == datetime(
            2024, 3, 4, 14, 30, tzinfo=timezone.utc
        )

    def test_datetime_passthrough(self):
        ts = datetime(2024, 1, 1)
        assert parse_timestamp(ts) is ts

    @pytest.mark.parametrize("value", ["", "   ", "not a date", 12345, None])
    def test_rejects_garbage(self, value):
        with pytest.raises(InvalidTimestampError):
            parse_timestamp(value)


class TestConversions:
    def test_naive_is_utc(self):
        assert as_utc(datetime(2024, 1, 1, 12)).tzinfo is timezone.utc

    def test_calendar_day_crosses_midnight(self):
        # 02:00 UTC is still the previous evening in New York
        ts = datetime(2024, 3, 5, 2, 0, tzinfo=timezone.utc)
        assert calendar_day(ts, NY) == date(2024, 3, 4)
        assert calendar_day(ts, timezone.utc) == date(2024, 3, 5)

    def test_calendar_day_respects_dst(self):
        # EDT (UTC-4) from 2024-03-10
        ts = datetime(2024, 3, 12, 3, 30, tzinfo=timezone.utc)
        assert calendar_day(ts, NY) == date(2024, 3, 11)

    def test_wall_clock_zero_padded(self):
        ts = datetime(2024, 3, 4, 1, 5, tzinfo=timezone.utc)
        assert wall_clock_hhmm(ts, timezone.utc) == "01:05"
        assert wall_clock_hhmm(ts, timezone(timedelta(hours=8))) == "09:05"
