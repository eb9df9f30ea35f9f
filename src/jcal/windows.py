"""
Date windows for schedule filtering.

A window is computed from a single DateSelector and a reference instant
("now", UTC). Day and week selectors resolve to a closed instant range
(DayRange); month selectors resolve to a year+month equality test
(MonthMatch), not to a range.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from .errors import ValidationError
from .utils import parse_calendar_date, to_utc


class DateSelector(Enum):
    """Date filters, declared in priority order: the first one set wins."""

    DATE = "date"
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this-week"
    NEXT_WEEK = "next-week"
    THIS_MONTH = "this-month"
    NEXT_MONTH = "next-month"


@dataclass(frozen=True)
class DateFilter:
    selector: DateSelector
    # Only used by DateSelector.DATE
    date_arg: Optional[str] = None


@dataclass(frozen=True)
class DayRange:
    """Closed interval [start, end] of UTC instants."""

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= to_utc(instant) <= self.end


@dataclass(frozen=True)
class MonthMatch:
    """Matches any instant whose UTC (year, month) equals this one."""

    year: int
    month: int

    def contains(self, instant: datetime) -> bool:
        instant = to_utc(instant)
        return (instant.year, instant.month) == (self.year, self.month)


DateWindow = Union[DayRange, MonthMatch]


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def start_of_iso_week(day: date) -> datetime:
    # ISO weeks start on Monday (weekday() == 0)
    return start_of_day(day - timedelta(days=day.weekday()))


def end_of_iso_week(day: date) -> datetime:
    return end_of_day(day + timedelta(days=6 - day.weekday()))


def _day_range(day: date) -> DayRange:
    return DayRange(start_of_day(day), end_of_day(day))


def _week_range(day: date) -> DayRange:
    return DayRange(start_of_iso_week(day), end_of_iso_week(day))


# PUBLIC_INTERFACE
def select_date_filter(
    date: Optional[str] = None,
    today: bool = False,
    tomorrow: bool = False,
    this_week: bool = False,
    next_week: bool = False,
    this_month: bool = False,
    next_month: bool = False,
) -> Optional[DateFilter]:
    """
    Collapse the date flags of a list command into one DateFilter.

    Flags are not combined: the first truthy one in DateSelector order wins.
    Returns None when no date flag is set.
    """
    flags = {
        DateSelector.DATE: date,
        DateSelector.TODAY: today,
        DateSelector.TOMORROW: tomorrow,
        DateSelector.THIS_WEEK: this_week,
        DateSelector.NEXT_WEEK: next_week,
        DateSelector.THIS_MONTH: this_month,
        DateSelector.NEXT_MONTH: next_month,
    }
    for selector in DateSelector:
        if flags[selector]:
            return DateFilter(selector, date if selector is DateSelector.DATE else None)
    return None


# PUBLIC_INTERFACE
def resolve_window(date_filter: DateFilter, now: datetime) -> DateWindow:
    """
    Resolve a DateFilter against `now` into a DateWindow.

    Raises ValidationError if the explicit date argument is not `YYYY-MM-DD`.
    """
    today = to_utc(now).date()
    selector = date_filter.selector

    if selector is DateSelector.DATE:
        if not date_filter.date_arg:
            raise ValidationError("a date is required (YYYY-MM-DD)", field="date")
        try:
            target = parse_calendar_date(date_filter.date_arg)
        except ValueError as e:
            raise ValidationError(str(e), field="date") from e
        return _day_range(target)
    if selector is DateSelector.TODAY:
        return _day_range(today)
    if selector is DateSelector.TOMORROW:
        return _day_range(today + timedelta(days=1))
    if selector is DateSelector.THIS_WEEK:
        return _week_range(today)
    if selector is DateSelector.NEXT_WEEK:
        return _week_range(today + timedelta(weeks=1))
    if selector is DateSelector.THIS_MONTH:
        return MonthMatch(today.year, today.month)
    if selector is DateSelector.NEXT_MONTH:
        ref = today + relativedelta(months=1)
        return MonthMatch(ref.year, ref.month)
    raise ValueError(f"unknown date selector: {selector!r}")
