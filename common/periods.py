"""
Period and calendar helpers.

Month indexes are 0-based (January == 0) inside this module; the public API
accepts 1-12 and converts with ``month_index_from_number`` before calling in.
"""
from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

ZERO_HOURS = Decimal("0.00")
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class MonthRange:
    start: date
    end: date


def month_index_from_number(month: int) -> int:
    """Convert a calendar month number (1-12) to a 0-based index."""
    month = int(month)
    if month < 1 or month > 12:
        raise ValueError("month must be between 1 and 12")
    return month - 1


def _month_number(month_index: int) -> int:
    if month_index < 0 or month_index > 11:
        raise ValueError("month_index must be between 0 and 11")
    return month_index + 1


def month_date_range(year: int, month_index: int) -> MonthRange:
    month = _month_number(month_index)
    last_day = calendar.monthrange(year, month)[1]
    return MonthRange(start=date(year, month, 1), end=date(year, month, last_day))


def working_days_in_month(year: int, month_index: int, *, rest_weekday: int = calendar.SUNDAY) -> int:
    """Days in the month that are not the weekly rest day."""
    month = _month_number(month_index)
    days_in_month = calendar.monthrange(year, month)[1]
    return sum(
        1
        for day in range(1, days_in_month + 1)
        if date(year, month, day).weekday() != rest_weekday
    )


def month_name(month_index: int) -> str:
    return calendar.month_name[_month_number(month_index)]


def pay_period_label(year: int, month_index: int) -> str:
    """Short label such as ``Oct 2025``."""
    return f"{month_name(month_index)[:3]} {year}"


def inclusive_day_count(start, end) -> int:
    """
    Whole days covered by ``start``..``end`` inclusive of both ends.

    Dates count calendar days; datetimes round a partial day up.
    """
    if isinstance(start, datetime) and isinstance(end, datetime):
        seconds = abs((end - start).total_seconds())
        return math.ceil(seconds / 86400) + 1
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    return abs((end - start).days) + 1


def iter_days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def working_hours(check_in: datetime | None, check_out: datetime | None) -> Decimal:
    """Hours between check-in and check-out, rounded to 2 decimals."""
    if not check_in or not check_out:
        return ZERO_HOURS
    seconds = Decimal(str((check_out - check_in).total_seconds()))
    return (seconds / Decimal(3600)).quantize(_CENT, rounding=ROUND_HALF_UP)
