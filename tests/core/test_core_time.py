"""
Tests for core.time — Clock protocol and temporal helpers.
"""

import pytest
from datetime import date, datetime, timedelta, timezone

from core.time.clock import (
    FixedClock,
    SystemClock,
    get_default_clock,
)
from core.time.temporal import DateRange, expiry_from, is_past


# ── Clock Tests ──────────────────────────────────────────────

class TestSystemClock:
    def test_returns_utc_datetime(self):
        dt = SystemClock().now_utc()
        assert dt.tzinfo == timezone.utc

    def test_time_advances(self):
        clock = SystemClock()
        t1 = clock.now_utc()
        t2 = clock.now_utc()
        assert t2 >= t1


class TestFixedClock:
    def test_returns_fixed_time(self):
        fixed = datetime(2026, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        assert clock.now_utc() == fixed
        assert clock.now_utc() == fixed

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            FixedClock(datetime(2026, 1, 1))

    def test_advance(self):
        fixed = datetime(2026, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        clock.advance(601)
        assert clock.now_utc() == fixed + timedelta(seconds=601)


class TestDefaultClock:
    def test_default_is_system_clock(self):
        assert isinstance(get_default_clock(), SystemClock)
        assert get_default_clock() is get_default_clock()


# ── Temporal Helpers ─────────────────────────────────────────

class TestDateRange:
    def test_contains_dates_inclusive(self):
        period = DateRange(date(2026, 3, 1), date(2026, 3, 31))
        assert period.contains(date(2026, 3, 1))
        assert period.contains(date(2026, 3, 31))
        assert not period.contains(date(2026, 4, 1))

    def test_contains_datetime_by_date(self):
        period = DateRange(date(2026, 3, 1), date(2026, 3, 1))
        late = datetime(2026, 3, 1, 23, 59, tzinfo=timezone.utc)
        assert period.contains(late)

    def test_rejects_start_after_end(self):
        with pytest.raises(ValueError, match="must be <="):
            DateRange(date(2026, 3, 2), date(2026, 3, 1))


class TestExpiry:
    def test_expiry_from(self):
        issued = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        assert expiry_from(issued, 600) == datetime(2026, 3, 1, 9, 10, tzinfo=timezone.utc)

    def test_is_past_is_strict(self):
        deadline = datetime(2026, 3, 1, 9, 10, tzinfo=timezone.utc)
        assert not is_past(deadline, deadline)
        assert is_past(deadline, deadline + timedelta(seconds=1))
