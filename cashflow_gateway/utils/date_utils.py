"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List

from dateutil.relativedelta import relativedelta


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month"""
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, pulling day-of-month back to the month's last day if it overflows"""
    return date(year, month, min(day, days_in_month(year, month)))


def shift_month(anchor: date, months: int, day: int) -> date:
    """
    Move `months` calendar months from anchor and land on `day`.

    The day is clamped to the target month's length (31 in February -> 28/29),
    never rolled over into the following month.
    """
    target = anchor.replace(day=1) + relativedelta(months=months)
    return clamp_day(target.year, target.month, day)
