"""Calendar helpers.

The host ``datetime`` module does the heavy lifting. These helpers only cover
what it doesn't: month arithmetic and month-difference estimates.
"""

from datetime import date as _date


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


# 1-indexed days per month
_MONTHDAYS = [0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def days_in_month(year: int, month: int) -> int:
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


def add_months(d: _date, months: int) -> _date:
    """Shift a date by a number of months.
    If the day doesn't exist in the target month, it is clipped to the
    last day of that month (e.g. Jan 31 + 1 month = Feb 28/29)."""
    if not months:
        return d
    year_delta, month0_new = divmod(d.month - 1 + months, 12)
    year_new = d.year + year_delta
    month_new = month0_new + 1
    try:
        return d.replace(year=year_new, month=month_new)
    except ValueError:
        # only happens when we move to a month with fewer days
        return d.replace(
            year=year_new,
            month=month_new,
            day=days_in_month(year_new, month_new),
        )


def months_diff_estimate(
    a_year: int, a_month: int, b_year: int, b_month: int
) -> int:
    """Difference in months between two year-month pairs, ignoring days.
    May overshoot the number of *whole* months by one."""
    return (b_year - a_year) * 12 + (b_month - a_month)


def trunc_div(a: int, b: int) -> int:
    """Integer division truncating toward zero (unlike ``//``)"""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q
