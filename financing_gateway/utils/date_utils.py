"""Date manipulation utilities"""

import calendar
from datetime import date


def add_months(from_date: date, months: int) -> date:
    """Add calendar months to a date, clamping the day to the target month's length"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
