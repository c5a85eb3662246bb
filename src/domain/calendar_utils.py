"""Calendar helpers for recurring billing

Weekdays are numbered 0=Sunday .. 6=Saturday everywhere in the billing
domain. Python's ``date.weekday()`` numbers Monday as 0, so every
conversion goes through ``weekday_of``.
"""

from calendar import monthrange
from datetime import date, timedelta
from enum import IntEnum
from typing import List, Optional


class Weekday(IntEnum):
    """Day of week as stored on recurring bookings"""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


def weekday_of(day: date) -> Weekday:
    return Weekday((day.weekday() + 1) % 7)


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def occurrence_dates(year: int, month: int, day_of_week: int) -> List[date]:
    """
    List every date in the month falling on the given weekday

    Only the month's own days are considered, never spilling into
    the adjacent months.

    Args:
        year: Calendar year
        month: Month (1-12)
        day_of_week: 0=Sunday .. 6=Saturday

    Returns:
        Dates in ascending order
    """
    first = date(year, month, 1)
    return [
        first + timedelta(days=offset)
        for offset in range(days_in_month(year, month))
        if weekday_of(first + timedelta(days=offset)) == day_of_week
    ]


def count_occurrences(year: int, month: int, day_of_week: int) -> int:
    """Count how many times a weekday occurs in a month (always 4 or 5)"""
    first = date(year, month, 1)
    count = 0
    for offset in range(days_in_month(year, month)):
        if weekday_of(first + timedelta(days=offset)) == day_of_week:
            count += 1
    return count


def ranges_overlap(
    start: date,
    end: Optional[date],
    window_start: date,
    window_end_exclusive: date,
) -> bool:
    """
    Check whether [start, end] intersects [window_start, window_end_exclusive)

    ``end`` of None means open-ended.
    """
    if start >= window_end_exclusive:
        return False
    return end is None or end >= window_start
