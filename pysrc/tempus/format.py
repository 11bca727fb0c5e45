"""Formatting and parsing with ``strftime``-style patterns.

A :class:`Formatter` combines one or more patterns with a zone. The first
pattern is used for printing, all of them are tried when parsing.

Example
-------
>>> from tempus import date_time
>>> from tempus.format import formatter, parse, unparse
>>> unparse(date_time(1986, 10, 14, 4, 3, 27, 456), formatter("date-time"))
'1986-10-14T04:03:27.456+0000'
>>> parse("1986-10-14")
ZonedInstant(1986-10-14T00:00:00.000Z)

Note
----
The ``%f`` directive stands for milliseconds (3 digits) when printing.
When parsing it accepts 1 to 6 digits, of which only the milliseconds are kept.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, replace
from datetime import datetime as _datetime, tzinfo as _tzinfo
from typing import Any, Mapping, Optional, TextIO, Union

from ._core import (
    UTC,
    CalendarAmount,
    ExactDuration,
    LocalDate,
    LocalDateTime,
    LocalTime,
    TemporalValue,
    YearMonth,
    ZonedInstant,
    from_zone,
    in_hours,
    in_minutes,
    in_seconds,
    now,
    supports,
    to_zone,
)
from .coerce import (
    from_py_datetime,
    from_py_time,
    to_py_date,
    to_py_datetime,
    to_py_time,
)

__all__ = [
    "FORMATTERS",
    "Formatter",
    "ParseFailure",
    "formatter",
    "formatter_local",
    "parse",
    "parse_local",
    "parse_local_date",
    "parse_local_time",
    "parse_year_month",
    "show_formatters",
    "to_mapping",
    "unparse",
    "unparse_local",
    "unparse_local_date",
    "unparse_local_time",
    "unparse_year_month",
    "with_zone",
]


class ParseFailure(ValueError):
    """A string didn't match any of the formats it was parsed with"""


@dataclass(frozen=True)
class Formatter:
    """Patterns for printing and parsing, with the zone of the results.

    A formatter without a zone (see :func:`formatter_local`) prints
    zoned values in their own zone, and parses zoned values in UTC.
    """

    patterns: tuple[str, ...]
    zone: Optional[_tzinfo] = UTC

    def __post_init__(self) -> None:
        if not self.patterns:
            raise ValueError("A formatter needs at least one pattern")

    @property
    def pattern(self) -> str:
        """The pattern used for printing"""
        return self.patterns[0]


FORMATTERS: Mapping[str, Formatter] = {
    name: Formatter((pattern,))
    for name, pattern in [
        ("basic-date", "%Y%m%d"),
        ("date", "%Y-%m-%d"),
        ("date-time", "%Y-%m-%dT%H:%M:%S.%f%z"),
        ("date-time-no-ms", "%Y-%m-%dT%H:%M:%S%z"),
        ("date-hour-minute-second", "%Y-%m-%dT%H:%M:%S"),
        ("local-date", "%Y-%m-%d"),
        ("local-date-time", "%Y-%m-%dT%H:%M:%S.%f"),
        ("local-time", "%H:%M:%S.%f"),
        ("hour-minute", "%H:%M"),
        ("hour-minute-second", "%H:%M:%S"),
        ("ordinal-date", "%Y-%j"),
        ("week-date", "%G-W%V-%u"),
        ("rfc822", "%a, %d %b %Y %H:%M:%S %z"),
        ("mysql", "%Y-%m-%d %H:%M:%S"),
    ]
}
"""The built-in formatters by name, in the order :func:`parse` tries them"""


def formatter(*names_or_patterns: str, zone: _tzinfo = UTC) -> Formatter:
    """A formatter for the given built-in names or patterns, in ``zone``

    Example
    -------
    >>> formatter("%Y/%m/%d", "%d.%m.%Y").pattern
    '%Y/%m/%d'
    """
    patterns: list[str] = []
    for item in names_or_patterns:
        if item in FORMATTERS:
            patterns.extend(FORMATTERS[item].patterns)
        else:
            patterns.append(item)
    return Formatter(tuple(patterns), zone)


def formatter_local(*patterns: str) -> Formatter:
    """A formatter without a zone, for local values"""
    return replace(formatter(*patterns), zone=None)


def with_zone(fmt: Formatter, zone: _tzinfo, /) -> Formatter:
    return replace(fmt, zone=zone)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

_DIRECTIVE = re.compile(r"%([%a-zA-Z])")
_YEAR_DIRECTIVES = frozenset("YyG")
_HOUR_DIRECTIVES = frozenset("HI")
# %G is an ISO week-based year, which doesn't go with a month
_CALENDAR_YEAR_DIRECTIVES = frozenset("Yy")
_MONTH_DIRECTIVES = frozenset("mbB")


def _directives(pattern: str) -> set[str]:
    return set(_DIRECTIVE.findall(pattern)) - {"%"}


def _has_date(pattern: str) -> bool:
    return bool(_directives(pattern) & _YEAR_DIRECTIVES)


def _has_time(pattern: str) -> bool:
    return bool(_directives(pattern) & _HOUR_DIRECTIVES)


def _has_year_month(pattern: str) -> bool:
    found = _directives(pattern)
    return bool(found & _CALENDAR_YEAR_DIRECTIVES and found & _MONTH_DIRECTIVES)


def _candidates(fmt: Optional[Formatter]) -> list[tuple[str, Formatter]]:
    if fmt is None:
        return [(p, f) for f in FORMATTERS.values() for p in f.patterns]
    return [(p, fmt) for p in fmt.patterns]


def _parse_with(
    s: str, fmt: Optional[Formatter], needs: Any, kind: str
) -> tuple[_datetime, Formatter]:
    if not isinstance(s, str):
        raise TypeError(f"Expected a string, got {s!r}")
    for pattern, f in _candidates(fmt):
        if not needs(pattern):
            continue
        try:
            return _datetime.strptime(s, pattern), f
        except ValueError:
            continue
    raise ParseFailure(f"Could not parse {s!r} as a {kind}")


def parse(s: str, fmt: Optional[Formatter] = None, /) -> ZonedInstant:
    """Parse a string into a :class:`ZonedInstant`.

    Without a formatter, all built-in formatters are tried in order.
    An offset in the string determines the moment in time, which is then
    expressed in the formatter's zone. Without an offset, the string is
    read as local time in the formatter's zone.

    Raises
    ------
    ParseFailure
        If none of the patterns match
    """
    dt, f = _parse_with(s, fmt, _has_date, "date-time")
    zone = f.zone or UTC
    if dt.tzinfo is None:
        return from_zone(from_py_datetime(dt), zone)
    return to_zone(from_py_datetime(dt), zone)


def parse_local(s: str, fmt: Optional[Formatter] = None, /) -> LocalDateTime:
    """Parse a string into a :class:`LocalDateTime`. An offset in the
    string is ignored: the local reading is kept as written."""
    dt, _ = _parse_with(s, fmt, _has_date, "local date-time")
    return from_py_datetime(dt.replace(tzinfo=None)).local()


def parse_local_date(s: str, fmt: Optional[Formatter] = None, /) -> LocalDate:
    dt, _ = _parse_with(s, fmt, _has_date, "local date")
    return LocalDate(dt.year, dt.month, dt.day)


def parse_local_time(s: str, fmt: Optional[Formatter] = None, /) -> LocalTime:
    dt, _ = _parse_with(s, fmt, _has_time, "local time")
    return from_py_time(dt.time())


def parse_year_month(s: str, fmt: Optional[Formatter] = None, /) -> YearMonth:
    """Parse a string into a :class:`~tempus.YearMonth`. Only patterns
    with both a year and a month are tried.

    Example
    -------
    >>> parse_year_month("03/2020", formatter("%m/%Y"))
    YearMonth(2020-03)
    """
    dt, _ = _parse_with(s, fmt, _has_year_month, "year-month")
    return YearMonth(dt.year, dt.month)


# ---------------------------------------------------------------------------
# Printing
# ---------------------------------------------------------------------------


def _render(obj: Any, pattern: str, ms: int) -> str:
    # strftime only knows microseconds, so we fill in %f ourselves.
    # Escaped percent signs must be left alone.
    return obj.strftime(
        "%%".join(part.replace("%f", f"{ms:03d}") for part in pattern.split("%%"))
    )


def unparse(value: TemporalValue, fmt: Formatter, /) -> str:
    """Print a value with the formatter's first pattern.
    Zoned values are first moved to the formatter's zone, if it has one.

    Example
    -------
    >>> from tempus import date_time, zone_for_offset
    >>> unparse(date_time(2020, 1, 1, 12), formatter("mysql", zone=zone_for_offset(2)))
    '2020-01-01 14:00:00'
    """
    if isinstance(value, ZonedInstant):
        if fmt.zone is not None:
            value = to_zone(value, fmt.zone)
        return _render(to_py_datetime(value), fmt.pattern, value.millisecond)
    elif isinstance(value, LocalDateTime):
        return unparse_local(value, fmt)
    elif isinstance(value, LocalDate):
        return unparse_local_date(value, fmt)
    elif isinstance(value, LocalTime):
        return unparse_local_time(value, fmt)
    elif isinstance(value, YearMonth):
        return unparse_year_month(value, fmt)
    raise TypeError(f"Cannot format {value!r}")


def unparse_local(value: LocalDateTime, fmt: Formatter, /) -> str:
    if not isinstance(value, LocalDateTime):
        raise TypeError(f"Expected a LocalDateTime, got {value!r}")
    return _render(to_py_datetime(value), fmt.pattern, value.millisecond)


def unparse_local_date(value: LocalDate, fmt: Formatter, /) -> str:
    if not isinstance(value, LocalDate):
        raise TypeError(f"Expected a LocalDate, got {value!r}")
    return _render(to_py_date(value), fmt.pattern, 0)


def unparse_local_time(value: LocalTime, fmt: Formatter, /) -> str:
    if not isinstance(value, LocalTime):
        raise TypeError(f"Expected a LocalTime, got {value!r}")
    return _render(to_py_time(value), fmt.pattern, value.millisecond)


def unparse_year_month(value: YearMonth, fmt: Formatter, /) -> str:
    """Print a year-month. It is rendered as the first day of the month,
    so day directives in the pattern give '01'."""
    if not isinstance(value, YearMonth):
        raise TypeError(f"Expected a YearMonth, got {value!r}")
    return _render(to_py_date(value.on_day(1)), fmt.pattern, 0)


def show_formatters(
    value: Optional[TemporalValue] = None, file: Optional[TextIO] = None
) -> None:
    """Print a sample of every built-in formatter, using the current
    time if no value is given."""
    if value is None:
        value = now()
    out = file or sys.stdout
    for name, fmt in FORMATTERS.items():
        print(f"{name:<26}{unparse(value, fmt)}", file=out)


_MAPPING_FIELDS = [
    ("years", "year"),
    ("months", "month"),
    ("days", "day"),
    ("hours", "hour"),
    ("minutes", "minute"),
    ("seconds", "second"),
]


def to_mapping(
    value: Union[TemporalValue, CalendarAmount, ExactDuration], /
) -> dict[str, int]:
    """The calendar and clock fields of a value, by plural name.
    Fields the value doesn't have are left out.

    Amounts are split into their components: years, months and days for
    a calendar amount, hours, minutes and seconds for an exact duration.
    Negative durations give negative components.

    Example
    -------
    >>> from tempus import local_date
    >>> to_mapping(local_date(2020, 3, 4))
    {'years': 2020, 'months': 3, 'days': 4}
    """
    if isinstance(value, CalendarAmount):
        return {"years": value.years, "months": value.months, "days": value.days}
    elif isinstance(value, ExactDuration):
        h, m, s = in_hours(value), in_minutes(value), in_seconds(value)
        return {"hours": h, "minutes": m - h * 60, "seconds": s - m * 60}
    return {
        key: getattr(value, field)
        for key, field in _MAPPING_FIELDS
        if supports(value, field)
    }
