"""Date manipulation utilities"""

from datetime import date, datetime
from typing import Tuple

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    """Gregorian leap year rule"""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month (1-12)"""
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def clamped_date(year: int, month: int, day: int) -> date:
    """
    Build a date, pulling month into 1-12 and day into the month's valid range.

    Example:
        clamped_date(2024, 2, 31) -> 2024-02-29
    """
    month = min(max(month, 1), 12)
    day = min(max(day, 1), days_in_month(year, month))
    return date(year, month, day)


def next_month(year: int, month: int) -> Tuple[int, int]:
    """(year, month) of the calendar month after the given one"""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def previous_month(year: int, month: int) -> Tuple[int, int]:
    """(year, month) of the calendar month before the given one"""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def sunday_weekday(d: date) -> int:
    """Day of week with 0 = Sunday, 6 = Saturday"""
    return d.isoweekday() % 7


def to_date(value: str | date) -> date:
    """Accept an ISO YYYY-MM-DD string, a date or a datetime"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def to_iso(value: str | date) -> str:
    """Normalize a date or date string to YYYY-MM-DD"""
    return to_date(value).isoformat()


def month_bounds(d: date) -> Tuple[date, date]:
    """First and last day of the month containing d"""
    return date(d.year, d.month, 1), date(d.year, d.month, days_in_month(d.year, d.month))
