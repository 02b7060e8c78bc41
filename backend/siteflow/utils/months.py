"""Calendar-month arithmetic on integer month indexes.

A month index is ``year * 12 + (month - 1)`` so that adding N months is plain
integer addition and chronological order is numeric order.
"""
from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import date, timedelta


def month_index(value: date) -> int:
    return value.year * 12 + (value.month - 1)


def month_key(index: int) -> str:
    year, month0 = divmod(index, 12)
    return f"{year:04d}-{month0 + 1:02d}"


def last_day(index: int) -> date:
    year, month0 = divmod(index, 12)
    return date(year, month0 + 1, calendar.monthrange(year, month0 + 1)[1])


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def iter_month_segments(start: date, end: date) -> Iterator[tuple[int, int]]:
    """Yield ``(month_index, day_count)`` for every calendar month touched by ``[start, end]``.

    Summing ``day_count`` over the segments gives the inclusive day count of the span,
    so posting ``day_count * daily_rate`` per segment is the same as walking day by day.
    """
    if end < start:
        return
    cursor = start
    while True:
        index = month_index(cursor)
        segment_end = min(end, last_day(index))
        yield index, inclusive_days(cursor, segment_end)
        if segment_end >= end:
            return
        cursor = segment_end + timedelta(days=1)
