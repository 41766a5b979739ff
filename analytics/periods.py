"""Calendar period boundaries shared by the analytics modules.

Every boundary is derived from a single captured ``now`` so that all checks
made during one computation agree with each other.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Tuple

WEEK_STARTS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")


def resolve_now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now()


def end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def month_range(day: date) -> Tuple[date, date]:
    """Return the first and last day of the calendar month containing ``day``."""

    return day.replace(day=1), end_of_month(day)


def shift_months(day: date, months: int) -> date:
    """Move ``day`` by whole months, clamping to the target month's length."""

    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    last = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last))


def last_month_range(today: date | None = None) -> Tuple[date, date]:
    """Return the first and last day of the calendar month before ``today``."""

    today = today or date.today()
    first_of_this_month = today.replace(day=1)
    last_day_previous_month = first_of_this_month - timedelta(days=1)
    first_day_previous_month = last_day_previous_month.replace(day=1)
    return first_day_previous_month, last_day_previous_month


def start_of_week(day: date, week_start: str = "SUN") -> date:
    offset = (day.weekday() - WEEK_STARTS.index(week_start.upper())) % 7
    return day - timedelta(days=offset)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def day_of_week(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class Periods:
    today: date
    week_start: date
    week_end: date
    month_start: date
    month_end: date
    year_start: date
    last_month_start: date
    last_month_end: date

    @classmethod
    def capture(cls, now: datetime | None = None, week_start: str = "SUN") -> "Periods":
        today = resolve_now(now).date()
        first_of_week = start_of_week(today, week_start)
        month_start, month_end = month_range(today)
        last_start, last_end = last_month_range(today)
        return cls(
            today=today,
            week_start=first_of_week,
            week_end=first_of_week + timedelta(days=6),
            month_start=month_start,
            month_end=month_end,
            year_start=today.replace(month=1, day=1),
            last_month_start=last_start,
            last_month_end=last_end,
        )

    def is_today(self, day: date) -> bool:
        return day == self.today

    def in_week(self, day: date) -> bool:
        return self.week_start <= day <= self.week_end

    def in_month(self, day: date) -> bool:
        return (day.year, day.month) == (self.today.year, self.today.month)

    def in_last_month(self, day: date) -> bool:
        return self.last_month_start <= day <= self.last_month_end

    def in_year_to_date(self, day: date) -> bool:
        return self.year_start <= day <= self.today
