from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from core.config import settings
from core.periods import DateRange, Period, current_period_range, month_range, resolve_range, week_range


@pytest.fixture(autouse=True)
def utc_sunday_weeks(monkeypatch):
    monkeypatch.setattr(settings, "journal_timezone", "UTC")
    monkeypatch.setattr(settings, "week_start", "sunday")


def test_week_starts_on_sunday():
    window = week_range(datetime(2024, 12, 4, 15, 30, tzinfo=timezone.utc))
    assert window.start == datetime(2024, 12, 1, tzinfo=timezone.utc)
    assert window.end == datetime(2024, 12, 8, tzinfo=timezone.utc) - timedelta(microseconds=1)


def test_week_on_boundary_days():
    sunday = week_range(datetime(2024, 12, 1, 0, 0, tzinfo=timezone.utc))
    saturday = week_range(datetime(2024, 12, 7, 23, 59, tzinfo=timezone.utc))
    assert sunday == saturday
    assert sunday.start.weekday() == 6


def test_week_start_setting(monkeypatch):
    monkeypatch.setattr(settings, "week_start", "monday")
    window = week_range(datetime(2024, 12, 1, 12, 0, tzinfo=timezone.utc))  # a Sunday
    assert window.start == datetime(2024, 11, 25, tzinfo=timezone.utc)


def test_month_range_december():
    window = month_range(datetime(2024, 12, 31, 23, 0, tzinfo=timezone.utc))
    assert window.start == datetime(2024, 12, 1, tzinfo=timezone.utc)
    assert window.end == datetime(2025, 1, 1, tzinfo=timezone.utc) - timedelta(microseconds=1)


def test_month_range_leap_february():
    window = month_range(datetime(2024, 2, 10, tzinfo=timezone.utc))
    assert window.end.day == 29
    assert window.contains(datetime(2024, 2, 29, 23, 59, 59, tzinfo=timezone.utc))
    assert not window.contains(datetime(2024, 3, 1, tzinfo=timezone.utc))


def test_window_is_inclusive():
    window = DateRange(datetime(2024, 1, 1, tzinfo=timezone.utc), datetime(2024, 1, 2, tzinfo=timezone.utc))
    assert window.contains(window.start)
    assert window.contains(window.end)


def test_journal_timezone_shifts_the_week(monkeypatch):
    monkeypatch.setattr(settings, "journal_timezone", "America/New_York")
    # 03:00 UTC Sunday is still Saturday evening in New York
    window = week_range(datetime(2024, 12, 1, 3, 0, tzinfo=timezone.utc))
    assert window.start == datetime(2024, 11, 24, tzinfo=ZoneInfo("America/New_York"))


def test_naive_now_read_in_journal_timezone():
    window = current_period_range("monthly", datetime(2024, 6, 15, 8, 0))
    assert window.start == datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_resolve_range_prefers_custom():
    custom = (datetime(2024, 3, 1), datetime(2024, 3, 5))
    window = resolve_range("weekly", custom)
    assert window.start == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert window.end == datetime(2024, 3, 5, tzinfo=timezone.utc)


def test_period_parse():
    assert Period.parse("Weekly") is Period.WEEKLY
    assert Period.parse(Period.MONTHLY) is Period.MONTHLY
    with pytest.raises(ValueError):
        Period.parse("yearly")
    with pytest.raises(ValueError):
        current_period_range("daily")
