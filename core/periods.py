"""Calendar period windows for goals and rule tallies.

A period window is always resolved against "now" at call time: the calendar
week (starting on the configured weekday, Sunday by default) or calendar month
that contains the evaluation instant. Windows are inclusive at both ends; the
end is the last microsecond of the final day.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Tuple

from core.config import settings


class Period(Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value) -> "Period":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown period: {value!r} (expected 'weekly' or 'monthly')")


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts <= self.end

    def as_tuple(self) -> Tuple[datetime, datetime]:
        return self.start, self.end


def _now(now: Optional[datetime]) -> datetime:
    tz = settings.tz
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def _start_of_day(ts: datetime) -> datetime:
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def week_range(now: Optional[datetime] = None, week_start: Optional[int] = None) -> DateRange:
    """Calendar week containing ``now``; ``week_start`` is a Python weekday (Mon=0)."""
    current = _now(now)
    first_day = settings.week_start_weekday if week_start is None else week_start
    offset = (current.weekday() - first_day) % 7
    start = _start_of_day(current) - timedelta(days=offset)
    next_start = start + timedelta(days=7)
    return DateRange(start, next_start - timedelta(microseconds=1))


def month_range(now: Optional[datetime] = None) -> DateRange:
    """Calendar month containing ``now``."""
    current = _now(now)
    start = _start_of_day(current).replace(day=1)
    if start.month == 12:
        next_start = start.replace(year=start.year + 1, month=1)
    else:
        next_start = start.replace(month=start.month + 1)
    return DateRange(start, next_start - timedelta(microseconds=1))


def current_period_range(period, now: Optional[datetime] = None) -> DateRange:
    """Window for ``period`` ('weekly' or 'monthly') around ``now``."""
    if Period.parse(period) is Period.WEEKLY:
        return week_range(now)
    return month_range(now)


def resolve_range(
    period,
    custom_range: Optional[Tuple[datetime, datetime]] = None,
    now: Optional[datetime] = None,
) -> DateRange:
    """Custom range when given (naive ends read in the journal timezone), else the period window."""
    if custom_range is not None:
        start, end = custom_range
        tz = settings.tz
        if start.tzinfo is None:
            start = start.replace(tzinfo=tz)
        if end.tzinfo is None:
            end = end.replace(tzinfo=tz)
        return DateRange(start, end)
    return current_period_range(period, now)
