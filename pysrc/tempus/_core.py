# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.


# Maintainer's notes:
#
# - Why is everything in one file?
#   - Flat is better than nested
#   - It prevents circular imports since the classes 'know' about each other
# - The five temporal classes are a closed set. Generic operations
#   (field access, comparison, arithmetic) go through the capability table
#   at the bottom of the "operations" section. Adding a variant means adding
#   a class and one entry in that table.
# - All values have millisecond precision. Anything finer coming from
#   the host (the system clock, ``datetime`` objects) is truncated.
from __future__ import annotations

__version__ = "0.1.0"

import enum
import warnings
from contextvars import ContextVar, Token
from datetime import (
    date as _date,
    datetime as _datetime,
    time as _time,
    timedelta as _timedelta,
    tzinfo as _tzinfo,
)
from functools import reduce
from operator import attrgetter, eq, gt, lt, methodcaller
from time import time_ns
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Literal,
    Mapping,
    NamedTuple,
    Optional,
    Protocol,
    Union,
    no_type_check,
    overload,
)
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from ._common import (
    EPOCH,
    MAX_OFFSET_SECS,
    UTC,
    check_millis,
    check_utc_bounds,
    mk_fixed_tzinfo,
)
from ._math import add_months, days_in_month, months_diff_estimate, trunc_div
from ._system import system_zone

__all__ = [
    # Temporal values
    "ZonedInstant",
    "LocalDateTime",
    "LocalDate",
    "LocalTime",
    "YearMonth",
    "TemporalValue",
    "date_time",
    "date_midnight",
    "local_date_time",
    "local_date",
    "local_time",
    "year_month",
    "epoch",
    # Amounts
    "CalendarAmount",
    "ExactDuration",
    "Amount",
    "Unit",
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "millis",
    # Capabilities
    "supports",
    "year",
    "month",
    "day",
    "day_of_week",
    "hour",
    "minute",
    "second",
    "millisecond",
    "equal",
    "is_after",
    "is_before",
    "add_amount",
    "subtract_amount",
    "plus",
    "minus",
    "first_day_of_month",
    "last_day_of_month",
    "number_of_days_in_month",
    "nth_day_of_month",
    "week_of_year",
    "week_based_year",
    "floor",
    # Zones and clock
    "UTC",
    "default_zone",
    "zone_for_id",
    "zone_for_offset",
    "available_zone_ids",
    "to_zone",
    "from_zone",
    "now",
    "today",
    "time_now",
    "today_at",
    "with_time_at_start_of_day",
    "ago",
    "from_now",
    "yesterday",
    "mins_ago",
    # Intervals and measurement
    "Interval",
    "interval",
    "start",
    "end",
    "within",
    "overlaps",
    "abuts",
    "overlap",
    "extend",
    "adjust",
    "earliest",
    "latest",
    "in_unit",
    "in_millis",
    "in_seconds",
    "in_minutes",
    "in_hours",
    "in_days",
    "in_weeks",
    "in_months",
    "in_years",
    # Diagnostics and deprecated aliases
    "DiagnosticSink",
    "WarningsSink",
    "NullSink",
    "sec",
    "secs",
    "in_msecs",
    "in_secs",
    "today_at_midnight",
    # Exceptions
    "InvalidFieldValue",
    "UnsupportedCapability",
    "CrossVariantComparison",
    # Constants
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
    "Weekday",
]


class Weekday(enum.Enum):
    """The days of the week; ``.value`` corresponds with ISO numbering."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7


MONDAY = Weekday.MONDAY
TUESDAY = Weekday.TUESDAY
WEDNESDAY = Weekday.WEDNESDAY
THURSDAY = Weekday.THURSDAY
FRIDAY = Weekday.FRIDAY
SATURDAY = Weekday.SATURDAY
SUNDAY = Weekday.SUNDAY

_object_new = object.__new__
_MILLIS_PER_DAY = 86_400_000
_ONE_MILLI = _timedelta(milliseconds=1)


class InvalidFieldValue(ValueError):
    """A field is outside of its valid range, e.g. month 13"""


class UnsupportedCapability(TypeError):
    """An operation was invoked on a value that doesn't support it,
    e.g. the day of the week of a :class:`LocalTime`"""

    @classmethod
    def _for(cls, operation: str, value: object) -> UnsupportedCapability:
        return cls(f"{type(value).__name__} does not support {operation!r}")


class CrossVariantComparison(TypeError):
    """Two temporal values of different kinds were combined"""

    @classmethod
    def _for(cls, a: object, b: object) -> CrossVariantComparison:
        return cls(
            f"Cannot combine {type(a).__name__} with {type(b).__name__}"
        )


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


def _invalid_fields(e: ValueError) -> InvalidFieldValue:
    return InvalidFieldValue(str(e))


def _check_zone(zone: object) -> _tzinfo:
    if not isinstance(zone, _tzinfo):
        raise TypeError(f"Expected a timezone, got {zone!r}")
    return zone


def _resolve_local(
    dt: _datetime, zone: _tzinfo, prev_offset: Optional[_timedelta] = None
) -> _datetime:
    """Attach a zone to a naive datetime.

    Times skipped by a DST transition are moved forward by the length of the
    gap. Repeated times get the earlier offset, unless ``prev_offset`` is
    one of the two valid offsets.
    """
    dt = dt.replace(tzinfo=zone, fold=0)
    try:
        normalized = dt.astimezone(UTC).astimezone(zone)
    except (OverflowError, ValueError):
        raise InvalidFieldValue("Instant out of range") from None
    # Skipped times don't survive a UTC roundtrip
    if normalized.replace(tzinfo=None, fold=0) != dt.replace(tzinfo=None):
        return normalized
    if (
        prev_offset is not None
        and dt.utcoffset() != prev_offset
        and dt.replace(fold=1).utcoffset() == prev_offset
    ):
        return dt.replace(fold=1)
    return dt


def _shift_date(d: _date, months: int, days: int) -> _date:
    try:
        return add_months(d, months) + _timedelta(days)
    except (OverflowError, ValueError):
        raise InvalidFieldValue("Result out of range") from None


@final
class ZonedInstant(_ImmutableBase):
    """An exact moment in time, read in a timezone or fixed offset.

    Example
    -------
    >>> ZonedInstant(1986, 10, 14, 4, 3, 27, 456)
    ZonedInstant(1986-10-14T04:03:27.456Z)
    >>> ZonedInstant(2024, 7, 1, 12, zone=zone_for_id("Europe/Paris"))
    ZonedInstant(2024-07-01T12:00:00.000+02:00[Europe/Paris])

    Note
    ----
    Local times which don't exist in the zone (because of a DST gap)
    are moved forward by the length of the gap. Local times which occur
    twice get the earlier offset.
    """

    __slots__ = ("_py_dt",)

    def __init__(
        self,
        year: int,
        month: int = 1,
        day: int = 1,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
        *,
        zone: _tzinfo = UTC,
    ) -> None:
        try:
            naive = _datetime(
                year,
                month,
                day,
                hour,
                minute,
                second,
                check_millis(millisecond) * 1_000,
            )
        except ValueError as e:
            raise _invalid_fields(e) from None
        self._py_dt = _resolve_local(naive, _check_zone(zone))

    @property
    def year(self) -> int:
        return self._py_dt.year

    @property
    def month(self) -> int:
        return self._py_dt.month

    @property
    def day(self) -> int:
        return self._py_dt.day

    @property
    def hour(self) -> int:
        return self._py_dt.hour

    @property
    def minute(self) -> int:
        return self._py_dt.minute

    @property
    def second(self) -> int:
        return self._py_dt.second

    @property
    def millisecond(self) -> int:
        return self._py_dt.microsecond // 1_000

    @property
    def zone(self) -> _tzinfo:
        """The timezone or fixed offset this instant is read in"""
        # mypy doesn't know tzinfo is never None here
        return self._py_dt.tzinfo  # type: ignore[return-value]

    @property
    def offset(self) -> ExactDuration:
        """The UTC offset at this instant"""
        return ExactDuration._from_millis_unchecked(
            self._py_dt.utcoffset() // _ONE_MILLI  # type: ignore[operator]
        )

    def day_of_week(self) -> Weekday:
        return Weekday(self._py_dt.isoweekday())

    def local(self) -> LocalDateTime:
        """The local date and time, without the zone

        Example
        -------
        >>> ZonedInstant(2020, 8, 15, 23, 12).local()
        LocalDateTime(2020-08-15T23:12:00.000)
        """
        return LocalDateTime._from_py_unchecked(
            self._py_dt.replace(tzinfo=None, fold=0)
        )

    def date(self) -> LocalDate:
        return LocalDate._from_py_unchecked(self._py_dt.date())

    def time(self) -> LocalTime:
        return LocalTime._from_py_unchecked(self._py_dt.time())

    def format_iso(self) -> str:
        """Format as ISO 8601 with milliseconds, followed by the zone ID
        in brackets if the zone has one. UTC is written as ``Z``.

        Example
        -------
        >>> ZonedInstant(1986, 10, 14).format_iso()
        '1986-10-14T00:00:00.000Z'
        """
        s = self._py_dt.isoformat(timespec="milliseconds")
        tz = self._py_dt.tzinfo
        if tz is UTC:
            return s[:-6] + "Z"
        elif key := getattr(tz, "key", None):
            return f"{s}[{key}]"
        return s

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"ZonedInstant({self})"

    def _utc(self) -> _datetime:
        # Comparisons between datetimes with the *same* tzinfo ignore the
        # offset, so we always compare in UTC.
        return self._py_dt.astimezone(UTC)

    def __eq__(self, other: object) -> bool:
        """Compare for equality of the exact moment in time.
        The zone is not taken into account.

        Example
        -------
        >>> a = ZonedInstant(2020, 8, 15, 12)
        >>> a == to_zone(a, zone_for_offset(2))
        True
        """
        if not isinstance(other, ZonedInstant):
            return NotImplemented
        return self._utc() == other._utc()

    def __hash__(self) -> int:
        return hash(self._utc())

    def __lt__(self, other: ZonedInstant) -> bool:
        if not isinstance(other, ZonedInstant):
            return NotImplemented
        return self._utc() < other._utc()

    def __le__(self, other: ZonedInstant) -> bool:
        if not isinstance(other, ZonedInstant):
            return NotImplemented
        return self._utc() <= other._utc()

    def __gt__(self, other: ZonedInstant) -> bool:
        if not isinstance(other, ZonedInstant):
            return NotImplemented
        return self._utc() > other._utc()

    def __ge__(self, other: ZonedInstant) -> bool:
        if not isinstance(other, ZonedInstant):
            return NotImplemented
        return self._utc() >= other._utc()

    @classmethod
    def _from_py_unchecked(cls, dt: _datetime, /) -> ZonedInstant:
        self = _object_new(cls)
        self._py_dt = dt
        return self

    @classmethod
    def _from_epoch_millis(cls, ms: int, zone: _tzinfo) -> ZonedInstant:
        return cls._from_py_unchecked(
            (EPOCH + _timedelta(milliseconds=ms)).astimezone(zone)
        )

    def _epoch_millis(self) -> int:
        return (self._py_dt - EPOCH) // _ONE_MILLI


@final
class LocalDateTime(_ImmutableBase):
    """A date and time of day, without a timezone

    Example
    -------
    >>> LocalDateTime(1986, 10, 14, 4, 3, 27, 456)
    LocalDateTime(1986-10-14T04:03:27.456)
    """

    __slots__ = ("_py_dt",)

    def __init__(
        self,
        year: int,
        month: int = 1,
        day: int = 1,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
    ) -> None:
        try:
            self._py_dt = _datetime(
                year,
                month,
                day,
                hour,
                minute,
                second,
                check_millis(millisecond) * 1_000,
            )
        except ValueError as e:
            raise _invalid_fields(e) from None

    @property
    def year(self) -> int:
        return self._py_dt.year

    @property
    def month(self) -> int:
        return self._py_dt.month

    @property
    def day(self) -> int:
        return self._py_dt.day

    @property
    def hour(self) -> int:
        return self._py_dt.hour

    @property
    def minute(self) -> int:
        return self._py_dt.minute

    @property
    def second(self) -> int:
        return self._py_dt.second

    @property
    def millisecond(self) -> int:
        return self._py_dt.microsecond // 1_000

    def day_of_week(self) -> Weekday:
        return Weekday(self._py_dt.isoweekday())

    def date(self) -> LocalDate:
        return LocalDate._from_py_unchecked(self._py_dt.date())

    def time(self) -> LocalTime:
        return LocalTime._from_py_unchecked(self._py_dt.time())

    def format_iso(self) -> str:
        return self._py_dt.isoformat(timespec="milliseconds")

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"LocalDateTime({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self._py_dt == other._py_dt

    def __hash__(self) -> int:
        return hash(self._py_dt)

    def __lt__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self._py_dt < other._py_dt

    def __le__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self._py_dt <= other._py_dt

    def __gt__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self._py_dt > other._py_dt

    def __ge__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self._py_dt >= other._py_dt

    @classmethod
    def _from_py_unchecked(cls, dt: _datetime, /) -> LocalDateTime:
        self = _object_new(cls)
        self._py_dt = dt
        return self


@final
class LocalDate(_ImmutableBase):
    """A date without a time component

    Example
    -------
    >>> LocalDate(2021, 1, 2)
    LocalDate(2021-01-02)
    """

    __slots__ = ("_py_date",)

    def __init__(self, year: int, month: int, day: int) -> None:
        try:
            self._py_date = _date(year, month, day)
        except ValueError as e:
            raise _invalid_fields(e) from None

    @property
    def year(self) -> int:
        return self._py_date.year

    @property
    def month(self) -> int:
        return self._py_date.month

    @property
    def day(self) -> int:
        return self._py_date.day

    def day_of_week(self) -> Weekday:
        """The day of the week

        Example
        -------
        >>> LocalDate(2021, 1, 2).day_of_week()
        Weekday.SATURDAY
        """
        return Weekday(self._py_date.isoweekday())

    def year_month(self) -> YearMonth:
        return YearMonth._from_py_unchecked(self._py_date.replace(day=1))

    def at(self, t: LocalTime, /) -> LocalDateTime:
        """Combine a date with a time to create a datetime

        Example
        -------
        >>> LocalDate(2021, 1, 2).at(LocalTime(12, 30))
        LocalDateTime(2021-01-02T12:30:00.000)
        """
        return LocalDateTime._from_py_unchecked(
            _datetime.combine(self._py_date, t._py_time)
        )

    def format_iso(self) -> str:
        return self._py_date.isoformat()

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"LocalDate({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._py_date == other._py_date

    def __hash__(self) -> int:
        return hash(self._py_date)

    def __lt__(self, other: LocalDate) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._py_date < other._py_date

    def __le__(self, other: LocalDate) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._py_date <= other._py_date

    def __gt__(self, other: LocalDate) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._py_date > other._py_date

    def __ge__(self, other: LocalDate) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._py_date >= other._py_date

    @classmethod
    def _from_py_unchecked(cls, d: _date, /) -> LocalDate:
        self = _object_new(cls)
        self._py_date = d
        return self


@final
class LocalTime(_ImmutableBase):
    """Time of day without a date component

    Example
    -------
    >>> LocalTime(12, 30, 0)
    LocalTime(12:30:00.000)
    """

    __slots__ = ("_py_time",)

    def __init__(
        self,
        hour: int,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
    ) -> None:
        try:
            self._py_time = _time(
                hour, minute, second, check_millis(millisecond) * 1_000
            )
        except ValueError as e:
            raise _invalid_fields(e) from None

    MIDNIGHT: ClassVar[LocalTime]
    """The time at the start of the day (00:00:00)"""

    @property
    def hour(self) -> int:
        return self._py_time.hour

    @property
    def minute(self) -> int:
        return self._py_time.minute

    @property
    def second(self) -> int:
        return self._py_time.second

    @property
    def millisecond(self) -> int:
        return self._py_time.microsecond // 1_000

    def format_iso(self) -> str:
        return self._py_time.isoformat(timespec="milliseconds")

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"LocalTime({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._py_time == other._py_time

    def __hash__(self) -> int:
        return hash(self._py_time)

    def __lt__(self, other: LocalTime) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._py_time < other._py_time

    def __le__(self, other: LocalTime) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._py_time <= other._py_time

    def __gt__(self, other: LocalTime) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._py_time > other._py_time

    def __ge__(self, other: LocalTime) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._py_time >= other._py_time

    def _millis_of_day(self) -> int:
        t = self._py_time
        return (
            (t.hour * 60 + t.minute) * 60 + t.second
        ) * 1_000 + t.microsecond // 1_000

    @classmethod
    def _from_millis_of_day(cls, ms: int) -> LocalTime:
        secs, ms = divmod(ms % _MILLIS_PER_DAY, 1_000)
        mins, secs = divmod(secs, 60)
        return cls._from_py_unchecked(_time(*divmod(mins, 60), secs, ms * 1_000))

    @classmethod
    def _from_py_unchecked(cls, t: _time, /) -> LocalTime:
        self = _object_new(cls)
        self._py_time = t
        return self


LocalTime.MIDNIGHT = LocalTime(0)


@final
class YearMonth(_ImmutableBase):
    """A year and month without a day component

    Example
    -------
    >>> YearMonth(2021, 1)
    YearMonth(2021-01)
    """

    __slots__ = ("_py_date",)

    def __init__(self, year: int, month: int = 1) -> None:
        try:
            self._py_date = _date(year, month, 1)
        except ValueError as e:
            raise _invalid_fields(e) from None

    @property
    def year(self) -> int:
        return self._py_date.year

    @property
    def month(self) -> int:
        return self._py_date.month

    def on_day(self, day: int, /) -> LocalDate:
        """Create a date from this year-month with a given day

        Example
        -------
        >>> YearMonth(2021, 1).on_day(2)
        LocalDate(2021-01-02)
        """
        try:
            return LocalDate._from_py_unchecked(self._py_date.replace(day=day))
        except ValueError as e:
            raise _invalid_fields(e) from None

    def format_iso(self) -> str:
        return self._py_date.isoformat()[:7]

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"YearMonth({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._py_date == other._py_date

    def __hash__(self) -> int:
        return hash(self._py_date)

    def __lt__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._py_date < other._py_date

    def __le__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._py_date <= other._py_date

    def __gt__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._py_date > other._py_date

    def __ge__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._py_date >= other._py_date

    @classmethod
    def _from_py_unchecked(cls, d: _date, /) -> YearMonth:
        self = _object_new(cls)
        self._py_date = d
        return self


TemporalValue = Union[ZonedInstant, LocalDateTime, LocalDate, LocalTime, YearMonth]


def date_time(
    year: int,
    month: int = 1,
    day: int = 1,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millis: int = 0,
) -> ZonedInstant:
    """Create a :class:`ZonedInstant` in UTC.

    Month and day are 1-indexed, the time fields 0-indexed.
    Any number of trailing fields can be omitted.

    Example
    -------
    >>> date_time(1986, 10, 14)
    ZonedInstant(1986-10-14T00:00:00.000Z)
    """
    return ZonedInstant(year, month, day, hour, minute, second, millis)


def date_midnight(year: int, month: int = 1, day: int = 1) -> ZonedInstant:
    """Midnight at the start of the given date, in UTC"""
    return ZonedInstant(year, month, day)


def local_date_time(
    year: int,
    month: int = 1,
    day: int = 1,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millis: int = 0,
) -> LocalDateTime:
    """Create a :class:`LocalDateTime`. Trailing fields can be omitted,
    like with :func:`date_time`."""
    return LocalDateTime(year, month, day, hour, minute, second, millis)


def local_date(year: int, month: int, day: int) -> LocalDate:
    return LocalDate(year, month, day)


def local_time(
    hour: int, minute: int = 0, second: int = 0, millis: int = 0
) -> LocalTime:
    return LocalTime(hour, minute, second, millis)


def year_month(year: int, month: int = 1) -> YearMonth:
    return YearMonth(year, month)


def epoch() -> ZonedInstant:
    """The start of the UNIX epoch, in UTC"""
    return ZonedInstant._from_py_unchecked(EPOCH)


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------


class Unit(enum.Enum):
    """A unit of time without a magnitude. Used to measure spans,
    e.g. ``in_unit(span, Unit.MINUTES)``. Units can't be added to values."""

    YEARS = "years"
    MONTHS = "months"
    WEEKS = "weeks"
    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"
    SECONDS = "seconds"
    MILLIS = "millis"

    @property
    def is_calendar(self) -> bool:
        """Whether the length of this unit depends on the calendar"""
        return self in _CALENDAR_UNITS


_CALENDAR_UNITS = frozenset([Unit.YEARS, Unit.MONTHS, Unit.WEEKS, Unit.DAYS])


def _check_ints(**kwargs: object) -> None:
    for name, value in kwargs.items():
        if not isinstance(value, int):
            raise TypeError(f"{name} must be an integer, got {value!r}")


@final
class CalendarAmount(_ImmutableBase):
    """An amount of calendar units: years, months, weeks and days.

    The exact length depends on the value it's applied to, since months
    have different lengths. Weeks are stored as 7 days.

    Example
    -------
    >>> CalendarAmount(months=1, weeks=3)
    CalendarAmount(months=1, days=21)

    When applied, the months (including 12 per year) are added first.
    If the resulting day doesn't exist in the target month, it is
    clipped to the last day of the month. Then the days are added.

    >>> plus(date_time(2021, 1, 31), CalendarAmount(months=1, days=1))
    ZonedInstant(2021-03-01T00:00:00.000Z)
    """

    __slots__ = ("_years", "_months", "_days")

    def __init__(
        self, *, years: int = 0, months: int = 0, weeks: int = 0, days: int = 0
    ) -> None:
        _check_ints(years=years, months=months, weeks=weeks, days=days)
        self._years = years
        self._months = months
        self._days = weeks * 7 + days

    @property
    def years(self) -> int:
        return self._years

    @property
    def months(self) -> int:
        return self._months

    @property
    def days(self) -> int:
        return self._days

    def _total_months(self) -> int:
        return self._years * 12 + self._months

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalendarAmount):
            return NotImplemented
        return (self._years, self._months, self._days) == (
            other._years,
            other._months,
            other._days,
        )

    def __hash__(self) -> int:
        return hash((CalendarAmount, self._years, self._months, self._days))

    def __bool__(self) -> bool:
        return bool(self._years or self._months or self._days)

    def __neg__(self) -> CalendarAmount:
        return CalendarAmount(
            years=-self._years, months=-self._months, days=-self._days
        )

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{name}={value}"
            for name, value in (
                ("years", self._years),
                ("months", self._months),
                ("days", self._days),
            )
            if value
        )
        return f"CalendarAmount({fields})"


@final
class ExactDuration(_ImmutableBase):
    """An exact amount of time: hours, minutes, seconds and milliseconds.

    The inputs are normalized, so 90 minutes becomes 1 hour and 30 minutes.

    Example
    -------
    >>> ExactDuration(hours=1, minutes=30) == ExactDuration(minutes=90)
    True
    """

    __slots__ = ("_total_ms",)

    def __init__(
        self,
        *,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        millis: int = 0,
    ) -> None:
        _check_ints(hours=hours, minutes=minutes, seconds=seconds, millis=millis)
        self._total_ms = (
            hours * 3_600_000 + minutes * 60_000 + seconds * 1_000 + millis
        )

    def _timedelta(self) -> _timedelta:
        return _timedelta(milliseconds=self._total_ms)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExactDuration):
            return NotImplemented
        return self._total_ms == other._total_ms

    def __hash__(self) -> int:
        return hash((ExactDuration, self._total_ms))

    def __bool__(self) -> bool:
        return bool(self._total_ms)

    def __neg__(self) -> ExactDuration:
        return ExactDuration._from_millis_unchecked(-self._total_ms)

    def __repr__(self) -> str:
        return f"ExactDuration(millis={self._total_ms})"

    @classmethod
    def _from_millis_unchecked(cls, ms: int) -> ExactDuration:
        self = _object_new(cls)
        self._total_ms = ms
        return self


Amount = Union[CalendarAmount, ExactDuration]


def years(n: Optional[int] = None, /) -> Union[CalendarAmount, Unit]:
    """An amount of ``n`` years, or the :attr:`Unit.YEARS` marker if
    called without arguments.
    ``years(1) == CalendarAmount(years=1)``
    """
    return Unit.YEARS if n is None else CalendarAmount(years=n)


def months(n: Optional[int] = None, /) -> Union[CalendarAmount, Unit]:
    """An amount of ``n`` months, or the :attr:`Unit.MONTHS` marker.
    ``months(1) == CalendarAmount(months=1)``
    """
    return Unit.MONTHS if n is None else CalendarAmount(months=n)


def weeks(n: Optional[int] = None, /) -> Union[CalendarAmount, Unit]:
    """An amount of ``n`` weeks, or the :attr:`Unit.WEEKS` marker.
    ``weeks(1) == CalendarAmount(weeks=1)``
    """
    return Unit.WEEKS if n is None else CalendarAmount(weeks=n)


def days(n: Optional[int] = None, /) -> Union[CalendarAmount, Unit]:
    """An amount of ``n`` days, or the :attr:`Unit.DAYS` marker.
    ``days(1) == CalendarAmount(days=1)``
    """
    return Unit.DAYS if n is None else CalendarAmount(days=n)


def hours(n: Optional[int] = None, /) -> Union[ExactDuration, Unit]:
    """An amount of ``n`` hours, or the :attr:`Unit.HOURS` marker.
    ``hours(1) == ExactDuration(hours=1)``
    """
    return Unit.HOURS if n is None else ExactDuration(hours=n)


def minutes(n: Optional[int] = None, /) -> Union[ExactDuration, Unit]:
    """An amount of ``n`` minutes, or the :attr:`Unit.MINUTES` marker.
    ``minutes(1) == ExactDuration(minutes=1)``
    """
    return Unit.MINUTES if n is None else ExactDuration(minutes=n)


def seconds(n: Optional[int] = None, /) -> Union[ExactDuration, Unit]:
    """An amount of ``n`` seconds, or the :attr:`Unit.SECONDS` marker.
    ``seconds(1) == ExactDuration(seconds=1)``
    """
    return Unit.SECONDS if n is None else ExactDuration(seconds=n)


def millis(n: Optional[int] = None, /) -> Union[ExactDuration, Unit]:
    """An amount of ``n`` milliseconds, or the :attr:`Unit.MILLIS` marker.
    ``millis(1) == ExactDuration(millis=1)``
    """
    return Unit.MILLIS if n is None else ExactDuration(millis=n)


def _check_amount(amount: object) -> Amount:
    if isinstance(amount, (CalendarAmount, ExactDuration)):
        return amount
    elif isinstance(amount, Unit):
        raise TypeError(
            f"{amount} is a unit without a magnitude and can't be added. "
            f"Use e.g. {amount.value}(1) instead."
        )
    raise TypeError(f"Expected an amount, got {amount!r}")


# ---------------------------------------------------------------------------
# Variant-specific implementations of the capabilities
# ---------------------------------------------------------------------------


def _add_to_zoned(v: ZonedInstant, amount: Amount) -> ZonedInstant:
    dt = v._py_dt
    if isinstance(_check_amount(amount), CalendarAmount):
        if not amount:
            return v
        return ZonedInstant._from_py_unchecked(
            _resolve_local(
                _datetime.combine(
                    _shift_date(
                        dt.date(), amount._total_months(), amount._days
                    ),
                    dt.time(),
                ),
                v.zone,
                dt.utcoffset(),
            )
        )
    # Exact durations are added to the absolute moment in time.
    # The local reading may shift because of DST.
    try:
        return ZonedInstant._from_py_unchecked(
            check_utc_bounds(
                (v._utc() + amount._timedelta()).astimezone(v.zone)
            )
        )
    except (OverflowError, ValueError):
        raise InvalidFieldValue("Result out of range") from None


def _add_to_local_dt(v: LocalDateTime, amount: Amount) -> LocalDateTime:
    dt = v._py_dt
    if isinstance(_check_amount(amount), CalendarAmount):
        return LocalDateTime._from_py_unchecked(
            _datetime.combine(
                _shift_date(dt.date(), amount._total_months(), amount._days),
                dt.time(),
            )
        )
    try:
        return LocalDateTime._from_py_unchecked(dt + amount._timedelta())
    except OverflowError:
        raise InvalidFieldValue("Result out of range") from None


def _add_to_date(v: LocalDate, amount: Amount) -> LocalDate:
    if isinstance(_check_amount(amount), ExactDuration):
        raise UnsupportedCapability._for("adding an exact duration", v)
    return LocalDate._from_py_unchecked(
        _shift_date(v._py_date, amount._total_months(), amount._days)
    )


def _add_to_time(v: LocalTime, amount: Amount) -> LocalTime:
    if isinstance(_check_amount(amount), CalendarAmount):
        raise UnsupportedCapability._for("adding a calendar amount", v)
    # wraps around midnight
    return LocalTime._from_millis_of_day(v._millis_of_day() + amount._total_ms)


def _add_to_year_month(v: YearMonth, amount: Amount) -> YearMonth:
    if isinstance(_check_amount(amount), ExactDuration) or amount._days:
        raise UnsupportedCapability._for(
            "adding amounts smaller than a month", v
        )
    return YearMonth._from_py_unchecked(
        _shift_date(v._py_date, amount._total_months(), 0)
    )


def _subtracting(add: Callable[[Any, Amount], Any]) -> Callable[[Any, Amount], Any]:
    def subtract(v: Any, amount: Amount) -> Any:
        return add(v, -_check_amount(amount))

    return subtract


def _zoned_with_day(v: ZonedInstant, day: Callable[[int, int], int]) -> ZonedInstant:
    dt = v._py_dt
    return ZonedInstant._from_py_unchecked(
        _resolve_local(
            dt.replace(tzinfo=None, day=day(dt.year, dt.month)),
            v.zone,
            dt.utcoffset(),
        )
    )


def _first_day(year: int, month: int) -> int:
    return 1


def _millis_between_zoned(a: ZonedInstant, b: ZonedInstant) -> int:
    return (b._utc() - a._utc()) // _ONE_MILLI


def _millis_between_local_dt(a: LocalDateTime, b: LocalDateTime) -> int:
    return (b._py_dt - a._py_dt) // _ONE_MILLI


def _millis_between_times(a: LocalTime, b: LocalTime) -> int:
    return b._millis_of_day() - a._millis_of_day()


def _as_py_date(v: Any) -> _date:
    return v._py_date if isinstance(v, LocalDate) else v._py_dt.date()


def _iso_week(v: Any) -> int:
    return _as_py_date(v).isocalendar()[1]


def _iso_week_year(v: Any) -> int:
    return _as_py_date(v).isocalendar()[0]


def _now_zoned(v: ZonedInstant) -> ZonedInstant:
    return to_zone(now(), v.zone)


def _now_local_dt(v: LocalDateTime) -> LocalDateTime:
    return to_zone(now(), default_zone()).local()


def _now_date(v: LocalDate) -> LocalDate:
    return today()


def _now_time(v: LocalTime) -> LocalTime:
    return time_now()


def _now_year_month(v: YearMonth) -> YearMonth:
    return today().year_month()


_COMPARISON: Mapping[str, Callable[[Any, Any], bool]] = {
    "equal": eq,
    "is_after": gt,
    "is_before": lt,
}
_DATE_FIELDS: Mapping[str, Callable[[Any], Any]] = {
    "year": attrgetter("year"),
    "month": attrgetter("month"),
    "day": attrgetter("day"),
    "day_of_week": methodcaller("day_of_week"),
    "week_of_year": _iso_week,
    "week_based_year": _iso_week_year,
}
_TIME_FIELDS: Mapping[str, Callable[[Any], int]] = {
    "hour": attrgetter("hour"),
    "minute": attrgetter("minute"),
    "second": attrgetter("second"),
    "millisecond": attrgetter("millisecond"),
}

# The capability table: which operations each kind of value supports,
# and how. Operations with a leading underscore are internal.
_CAPABILITIES: Mapping[type, Mapping[str, Callable[..., Any]]] = {
    ZonedInstant: {
        **_DATE_FIELDS,
        **_TIME_FIELDS,
        **_COMPARISON,
        "add_amount": _add_to_zoned,
        "subtract_amount": _subtracting(_add_to_zoned),
        "first_day_of_month": lambda v: _zoned_with_day(v, _first_day),
        "last_day_of_month": lambda v: _zoned_with_day(v, days_in_month),
        "_epoch_day": lambda v: v._py_dt.toordinal(),
        "_millis_between": _millis_between_zoned,
        "_now": _now_zoned,
    },
    LocalDateTime: {
        **_DATE_FIELDS,
        **_TIME_FIELDS,
        **_COMPARISON,
        "add_amount": _add_to_local_dt,
        "subtract_amount": _subtracting(_add_to_local_dt),
        "first_day_of_month": lambda v: LocalDateTime._from_py_unchecked(
            v._py_dt.replace(day=1)
        ),
        "last_day_of_month": lambda v: LocalDateTime._from_py_unchecked(
            v._py_dt.replace(day=days_in_month(v.year, v.month))
        ),
        "_epoch_day": lambda v: v._py_dt.toordinal(),
        "_millis_between": _millis_between_local_dt,
        "_now": _now_local_dt,
    },
    LocalDate: {
        **_DATE_FIELDS,
        **_COMPARISON,
        "add_amount": _add_to_date,
        "subtract_amount": _subtracting(_add_to_date),
        "first_day_of_month": lambda v: LocalDate._from_py_unchecked(
            v._py_date.replace(day=1)
        ),
        "last_day_of_month": lambda v: LocalDate._from_py_unchecked(
            v._py_date.replace(day=days_in_month(v.year, v.month))
        ),
        "_epoch_day": lambda v: v._py_date.toordinal(),
        "_now": _now_date,
    },
    LocalTime: {
        **_TIME_FIELDS,
        **_COMPARISON,
        "add_amount": _add_to_time,
        "subtract_amount": _subtracting(_add_to_time),
        "_millis_between": _millis_between_times,
        "_now": _now_time,
    },
    YearMonth: {
        "year": attrgetter("year"),
        "month": attrgetter("month"),
        **_COMPARISON,
        "add_amount": _add_to_year_month,
        "subtract_amount": _subtracting(_add_to_year_month),
        "_now": _now_year_month,
    },
}


def _capability(value: object, operation: str) -> Callable[..., Any]:
    try:
        table = _CAPABILITIES[type(value)]
    except KeyError:
        raise TypeError(f"Expected a temporal value, got {value!r}") from None
    try:
        return table[operation]
    except KeyError:
        raise UnsupportedCapability._for(
            operation.lstrip("_"), value
        ) from None


def _capability_for(value: object, operation: str, action: str) -> Callable[..., Any]:
    # Like _capability, but reports the public action instead of the
    # internal operation it relies on
    try:
        return _capability(value, operation)
    except UnsupportedCapability:
        raise UnsupportedCapability._for(action, value) from None


# ---------------------------------------------------------------------------
# Generic operations, dispatched through the capability table
# ---------------------------------------------------------------------------


def supports(value: TemporalValue, operation: str, /) -> bool:
    """Whether the kind of value supports the given operation

    Example
    -------
    >>> supports(local_time(12), "hour")
    True
    >>> supports(local_time(12), "day_of_week")
    False
    """
    if operation.startswith("_"):
        return False
    try:
        return operation in _CAPABILITIES[type(value)]
    except KeyError:
        raise TypeError(f"Expected a temporal value, got {value!r}") from None


def year(value: TemporalValue, /) -> int:
    """The year. Not supported by :class:`LocalTime`."""
    return _capability(value, "year")(value)


def month(value: TemporalValue, /) -> int:
    """The month of the year (1-12). Not supported by :class:`LocalTime`."""
    return _capability(value, "month")(value)


def day(value: TemporalValue, /) -> int:
    """The day of the month"""
    return _capability(value, "day")(value)


def day_of_week(value: TemporalValue, /) -> Weekday:
    """The day of the week. Monday is 1 and Sunday is 7.

    Example
    -------
    >>> day_of_week(date_time(1986, 10, 14))
    Weekday.TUESDAY
    """
    return _capability(value, "day_of_week")(value)


def hour(value: TemporalValue, /) -> int:
    """The hour of the day. A time of 12:01am has an hour of 0."""
    return _capability(value, "hour")(value)


def minute(value: TemporalValue, /) -> int:
    return _capability(value, "minute")(value)


def second(value: TemporalValue, /) -> int:
    return _capability(value, "second")(value)


def millisecond(value: TemporalValue, /) -> int:
    return _capability(value, "millisecond")(value)


def week_of_year(value: TemporalValue, /) -> int:
    """The ISO 8601 week number (1-53)

    Example
    -------
    >>> week_of_year(local_date(2021, 1, 3))  # still in the last week of 2020
    53
    """
    return _capability(value, "week_of_year")(value)


def week_based_year(value: TemporalValue, /) -> int:
    """The ISO 8601 week-based year, which may differ from the calendar
    year in the first and last days of the year."""
    return _capability(value, "week_based_year")(value)


def _check_same_kind(a: object, b: object) -> None:
    if type(a) is not type(b):
        raise CrossVariantComparison._for(a, b)


def equal(a: TemporalValue, b: TemporalValue, /) -> bool:
    """Whether two values of the same kind are equal.
    :class:`ZonedInstant` values are equal if they're the same moment,
    regardless of zone.

    Raises
    ------
    CrossVariantComparison
        If the values are of different kinds
    """
    op = _capability(a, "equal")
    _check_same_kind(a, b)
    return op(a, b)


def is_after(a: TemporalValue, b: TemporalValue, /) -> bool:
    """Whether ``a`` is strictly after ``b``"""
    op = _capability(a, "is_after")
    _check_same_kind(a, b)
    return op(a, b)


def is_before(a: TemporalValue, b: TemporalValue, /) -> bool:
    """Whether ``a`` is strictly before ``b``"""
    op = _capability(a, "is_before")
    _check_same_kind(a, b)
    return op(a, b)


def add_amount(value: TemporalValue, amount: Amount, /) -> Any:
    """Move a value forward by a single amount"""
    return _capability(value, "add_amount")(value, amount)


def subtract_amount(value: TemporalValue, amount: Amount, /) -> Any:
    """Move a value backward by a single amount"""
    return _capability(value, "subtract_amount")(value, amount)


def plus(value: TemporalValue, /, *amounts: Amount) -> Any:
    """Move a value forward by the given amounts, applied one by one from
    left to right. Order matters for calendar amounts:

    >>> plus(date_time(1986, 10, 14), months(1), weeks(3))
    ZonedInstant(1986-12-05T00:00:00.000Z)
    >>> plus(local_date(2021, 1, 31), months(1), months(1))
    LocalDate(2021-03-28)
    >>> plus(local_date(2021, 1, 31), months(2))
    LocalDate(2021-03-31)
    """
    op = _capability(value, "add_amount")
    return reduce(op, amounts, value)


def minus(value: TemporalValue, /, *amounts: Amount) -> Any:
    """Move a value backward by the given amounts, applied one by one.

    Note
    ----
    Because of clipping at the end of the month, subtracting an amount
    doesn't always undo adding it:

    >>> minus(plus(local_date(2021, 1, 31), months(1)), months(1))
    LocalDate(2021-01-28)

    The same goes for a zoned value whose local time is skipped by a DST
    transition along the way. It is moved forward by the length of the gap:

    >>> ams = zone_for_id("Europe/Amsterdam")
    >>> minus(plus(ZonedInstant(2023, 3, 25, 2, 30, zone=ams), days(1)), days(1))
    ZonedInstant(2023-03-25T03:30:00.000+01:00[Europe/Amsterdam])
    """
    op = _capability(value, "subtract_amount")
    return reduce(op, amounts, value)


def _value_or_year_month(value_or_year: Any, month: Optional[int]) -> Any:
    return value_or_year if month is None else ZonedInstant(value_or_year, month)


@overload
def first_day_of_month(value: TemporalValue, /) -> Any: ...


@overload
def first_day_of_month(year: int, month: int, /) -> ZonedInstant: ...


def first_day_of_month(value_or_year: Any, month: Optional[int] = None, /) -> Any:
    """The value with the day set to 1. With a year and a month,
    midnight on the first of that month in UTC."""
    value = _value_or_year_month(value_or_year, month)
    return _capability(value, "first_day_of_month")(value)


@overload
def last_day_of_month(value: TemporalValue, /) -> Any: ...


@overload
def last_day_of_month(year: int, month: int, /) -> ZonedInstant: ...


def last_day_of_month(value_or_year: Any, month: Optional[int] = None, /) -> Any:
    """The value with the day set to the last day of its month

    Example
    -------
    >>> last_day_of_month(local_date(2024, 2, 10))
    LocalDate(2024-02-29)
    """
    value = _value_or_year_month(value_or_year, month)
    return _capability(value, "last_day_of_month")(value)


@overload
def number_of_days_in_month(value: TemporalValue, /) -> int: ...


@overload
def number_of_days_in_month(year: int, month: int, /) -> int: ...


def number_of_days_in_month(value_or_year: Any, month: Optional[int] = None, /) -> int:
    """The number of days in the month of the value

    Example
    -------
    >>> number_of_days_in_month(2024, 2)
    29
    """
    return day(last_day_of_month(_value_or_year_month(value_or_year, month)))


@overload
def nth_day_of_month(value: TemporalValue, n: int, /) -> Any: ...


@overload
def nth_day_of_month(year: int, month: int, n: int, /) -> ZonedInstant: ...


def nth_day_of_month(*args: Any) -> Any:
    """The n-th day of the month of the value.

    This is plain day arithmetic from the first of the month, so ``n``
    greater than the length of the month rolls over into the next month:

    >>> nth_day_of_month(local_date(2021, 2, 10), 30)
    LocalDate(2021-03-02)
    """
    if len(args) == 2:
        value, n = args
    elif len(args) == 3:
        value, n = ZonedInstant(args[0], args[1]), args[2]
    else:
        raise TypeError(
            f"nth_day_of_month() takes 2 or 3 arguments ({len(args)} given)"
        )
    return plus(first_day_of_month(value), CalendarAmount(days=n - 1))


# ---------------------------------------------------------------------------
# Floor
# ---------------------------------------------------------------------------

FloorUnit = Literal[
    "year", "month", "day", "hour", "minute", "second", "millisecond"
]

# From finest to coarsest: the field, the amount to subtract its reading
# with, and the lowest value the field can have.
_FLOOR_STEPS: list[tuple[str, Callable[[int], Any], int]] = [
    ("millisecond", millis, 0),
    ("second", seconds, 0),
    ("minute", minutes, 0),
    ("hour", hours, 0),
    ("day", days, 1),
    ("month", months, 1),
    ("year", years, 1),
]
_FLOOR_UNITS = frozenset(field for field, _, _ in _FLOOR_STEPS)


def floor(value: TemporalValue, unit: FloorUnit, /) -> Any:
    """Truncate a value to the start of the given unit.
    The field of the unit itself and all coarser fields are kept,
    all finer fields are reset to their lowest value.

    Example
    -------
    >>> floor(date_time(1986, 10, 14, 4, 3, 27, 456), "hour")
    ZonedInstant(1986-10-14T04:00:00.000Z)
    >>> floor(local_date(1986, 10, 14), "year")
    LocalDate(1986-01-01)

    Raises
    ------
    UnsupportedCapability
        If the value doesn't have the given unit, e.g. flooring a
        :class:`LocalTime` to a year.
    """
    if unit not in _FLOOR_UNITS:
        raise ValueError(f"Invalid unit: {unit!r}")
    elif not supports(value, unit):
        raise UnsupportedCapability._for(f"floor to {unit}", value)
    elif isinstance(value, ZonedInstant):
        # Floor the local reading, then place it back in the zone.
        # Subtracting exact hours would go wrong on days with a DST change.
        dt = value._py_dt
        return ZonedInstant._from_py_unchecked(
            _resolve_local(
                floor(value.local(), unit)._py_dt, value.zone, dt.utcoffset()
            )
        )

    for field, amount, lowest in _FLOOR_STEPS:
        if field == unit:
            break
        # e.g. a YearMonth has no finer fields to reset
        if supports(value, field):
            reading = _capability(value, field)(value)
            value = subtract_amount(value, amount(reading - lowest))
    return value


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------


def default_zone() -> _tzinfo:
    """The timezone of the host system.

    Determined from the ``TZ`` environment variable, or the system
    configuration if it isn't set.
    """
    return system_zone()


def zone_for_id(name: str, /) -> ZoneInfo:
    """The timezone with the given IANA ID, e.g. ``"America/Matamoros"``

    Raises
    ------
    InvalidFieldValue
        If no timezone with that ID is available
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidFieldValue(f"Unknown timezone ID: {name!r}") from None


def zone_for_offset(hours: int, minutes: int = 0, seconds: int = 0) -> _tzinfo:
    """A fixed UTC offset. The components must have the same sign.

    Example
    -------
    >>> zone_for_offset(-2)
    datetime.timezone(datetime.timedelta(days=-1, seconds=79200))
    >>> zone_for_offset(5, 30)
    datetime.timezone(datetime.timedelta(seconds=19800))
    """
    _check_ints(hours=hours, minutes=minutes, seconds=seconds)
    if not (-59 <= minutes <= 59 and -59 <= seconds <= 59):
        raise InvalidFieldValue(
            f"Offset minutes and seconds must be in -59..59, got {minutes}, {seconds}"
        )
    signs = {(c > 0) - (c < 0) for c in (hours, minutes, seconds)} - {0}
    if len(signs) > 1:
        raise InvalidFieldValue(
            f"Offset components must have the same sign, got {hours}, {minutes}, {seconds}"
        )
    total = hours * 3_600 + minutes * 60 + seconds
    if abs(total) > MAX_OFFSET_SECS:
        raise InvalidFieldValue("Offset must be within -18:00..+18:00")
    return mk_fixed_tzinfo(total)


def available_zone_ids() -> set[str]:
    """The IDs which can be passed to :func:`zone_for_id`"""
    return available_timezones()


def to_zone(value: ZonedInstant, zone: _tzinfo, /) -> ZonedInstant:
    """The same moment in time, read in another zone

    Example
    -------
    >>> to_zone(date_time(1986, 10, 22), zone_for_offset(-2))
    ZonedInstant(1986-10-21T22:00:00.000-02:00)
    """
    if not isinstance(value, ZonedInstant):
        raise UnsupportedCapability._for("to_zone", value)
    try:
        return ZonedInstant._from_py_unchecked(
            value._py_dt.astimezone(_check_zone(zone))
        )
    except (OverflowError, ValueError):
        raise InvalidFieldValue("Instant out of range") from None


def from_zone(value: ZonedInstant, zone: _tzinfo, /) -> ZonedInstant:
    """The same local date and time, in another zone. This is a
    different moment in time, unless the offsets happen to match.

    Example
    -------
    >>> from_zone(date_time(1986, 10, 22), zone_for_offset(-2))
    ZonedInstant(1986-10-22T00:00:00.000-02:00)
    """
    if not isinstance(value, ZonedInstant):
        raise UnsupportedCapability._for("from_zone", value)
    dt = value._py_dt
    return ZonedInstant._from_py_unchecked(
        _resolve_local(
            dt.replace(tzinfo=None, fold=0), _check_zone(zone), dt.utcoffset()
        )
    )


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class _ClockPin(NamedTuple):
    nanos: int
    # The reading of the real clock when pinned, if the clock keeps ticking
    pinned_at: Optional[int]


# Pins live in a context variable so they only affect the current thread
# or task (and tasks started from it), never concurrent callers.
_clock_pin: ContextVar[Optional[_ClockPin]] = ContextVar(
    "tempus_clock_pin", default=None
)


def _now_nanos() -> int:
    pin = _clock_pin.get()
    if pin is None:
        return time_ns()
    elif pin.pinned_at is None:
        return pin.nanos
    return pin.nanos + time_ns() - pin.pinned_at


def _pin_clock(
    value: ZonedInstant, keep_ticking: bool
) -> Token[Optional[_ClockPin]]:
    return _clock_pin.set(
        _ClockPin(
            value._epoch_millis() * 1_000_000,
            time_ns() if keep_ticking else None,
        )
    )


def _unpin_clock(token: Token[Optional[_ClockPin]]) -> None:
    _clock_pin.reset(token)


def now() -> ZonedInstant:
    """The current moment, in UTC"""
    return ZonedInstant._from_epoch_millis(_now_nanos() // 1_000_000, UTC)


def today() -> LocalDate:
    """The current date in the default zone"""
    return to_zone(now(), default_zone()).date()


def time_now() -> LocalTime:
    """The current time of day in the default zone"""
    return to_zone(now(), default_zone()).time()


def today_at(
    hour: int,
    minute: int,
    second: int = 0,
    millis: int = 0,
    zone: _tzinfo = UTC,
) -> ZonedInstant:
    """Today's date (in the default zone) at the given time, in ``zone``"""
    return ZonedInstant._from_py_unchecked(
        _resolve_local(
            _datetime.combine(
                today()._py_date,
                LocalTime(hour, minute, second, millis)._py_time,
            ),
            _check_zone(zone),
        )
    )


def with_time_at_start_of_day(value: ZonedInstant, /) -> ZonedInstant:
    """The start of the day of the value, in its zone. This is normally
    midnight, but not always: in some zones, DST starts at midnight."""
    if not isinstance(value, ZonedInstant):
        raise UnsupportedCapability._for("with_time_at_start_of_day", value)
    return ZonedInstant._from_py_unchecked(
        _resolve_local(
            _datetime.combine(value._py_dt.date(), _time()), value.zone
        )
    )


def ago(*amounts: Amount) -> ZonedInstant:
    """The moment the given amounts before now

    >>> ago(years(5))  # doctest: +SKIP
    """
    return minus(now(), *amounts)


def from_now(*amounts: Amount) -> ZonedInstant:
    """The moment the given amounts after now"""
    return plus(now(), *amounts)


def yesterday() -> ZonedInstant:
    """Exactly one calendar day before now"""
    return ago(CalendarAmount(days=1))


def mins_ago(value: ZonedInstant, /) -> int:
    """The number of whole minutes between the value and now"""
    return in_minutes(interval(value, now()))


# ---------------------------------------------------------------------------
# Intervals
# ---------------------------------------------------------------------------


@final
class Interval(_ImmutableBase):
    """The span between two values of the same kind. Intervals are
    closed at the start and open at the end: the start is part of the
    interval, the end is not.

    Example
    -------
    >>> i = Interval(date_time(1986), date_time(1990))
    >>> within(i, date_time(1986))
    True
    >>> within(i, date_time(1990))
    False

    Note
    ----
    The start is not checked to be before the end. Zero-length intervals
    (where start and end are equal) are allowed.
    """

    __slots__ = ("_start", "_end")

    def __init__(self, start: TemporalValue, end: TemporalValue) -> None:
        _capability(start, "equal")
        _check_same_kind(start, end)
        self._start = start
        self._end = end

    @property
    def start(self) -> TemporalValue:
        return self._start

    @property
    def end(self) -> TemporalValue:
        return self._end

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return (
            type(self._start) is type(other._start)
            and self._start == other._start
            and self._end == other._end
        )

    def __hash__(self) -> int:
        return hash((self._start, self._end))

    def __repr__(self) -> str:
        return f"Interval({self._start}/{self._end})"


def interval(start: TemporalValue, end: TemporalValue, /) -> Interval:
    """Create an :class:`Interval`. The values must be of the same kind."""
    return Interval(start, end)


def start(i: Interval, /) -> TemporalValue:
    return i.start


def end(i: Interval, /) -> TemporalValue:
    return i.end


@overload
def within(i: Interval, t: TemporalValue, /) -> bool: ...


@overload
def within(start: TemporalValue, end: TemporalValue, t: TemporalValue, /) -> bool: ...


def within(*args: Any) -> bool:
    """Whether a value lies within a range.

    With an interval and a value: whether the interval contains the value.
    A value equal to the end of the interval is *not* contained.

    >>> within(interval(date_time(1986), date_time(1990)), date_time(1987))
    True

    With a start, an end, and a value: whether the value lies between
    start and end, *including* both.

    >>> within(local_date(2020, 1, 1), local_date(2020, 2, 1), local_date(2020, 2, 1))
    True
    """
    if len(args) == 2:
        i, t = args
        return equal(i.start, t) or (is_before(i.start, t) and is_after(i.end, t))
    elif len(args) == 3:
        s, e, t = args
        return (
            equal(s, t)
            or equal(e, t)
            or (is_before(s, t) and is_after(e, t))
        )
    raise TypeError(f"within() takes 2 or 3 arguments ({len(args)} given)")


@overload
def overlaps(a: Interval, b: Interval, /) -> bool: ...


@overload
def overlaps(
    start_a: TemporalValue,
    end_a: TemporalValue,
    start_b: TemporalValue,
    end_b: TemporalValue,
    /,
) -> bool: ...


def overlaps(*args: Any) -> bool:
    """Whether two ranges overlap.

    With two intervals: whether they share any moment. Intervals which
    only touch (see :func:`abuts`) do *not* overlap.

    >>> a = interval(date_time(1986), date_time(1990))
    >>> overlaps(a, interval(date_time(1987), date_time(1991)))
    True
    >>> overlaps(a, interval(date_time(1990), date_time(1991)))
    False

    Note
    ----
    The test is ``a.end > b.start and a.start < b.end``, which is also
    applied to intervals whose end comes before their start.

    With four values ``(start_a, end_a, start_b, end_b)``: whether the
    ranges overlap *or* touch.
    """
    if len(args) == 2:
        a, b = args
        return is_after(a.end, b.start) and is_before(a.start, b.end)
    elif len(args) == 4:
        start_a, end_a, start_b, end_b = args
        return (
            (is_before(start_b, end_a) and is_after(end_b, start_a))
            or equal(start_a, end_b)
            or equal(start_b, end_a)
        )
    raise TypeError(f"overlaps() takes 2 or 4 arguments ({len(args)} given)")


def abuts(a: Interval, b: Interval, /) -> bool:
    """Whether interval ``a`` ends exactly where ``b`` starts.

    Only this direction is checked. To check whether two intervals touch
    in any order, use ``abuts(a, b) or abuts(b, a)``.
    """
    return equal(a.end, b.start)


def overlap(a: Interval, b: Optional[Interval] = None, /) -> Optional[Interval]:
    """The overlapping part of two intervals, or ``None`` if they
    don't overlap.

    If ``b`` is omitted, a zero-length interval at the current moment
    (of the same kind as ``a``) is used instead.

    >>> overlap(interval(date_time(1986), date_time(1990)),
    ...         interval(date_time(1987), date_time(1991)))
    Interval(1987-01-01T00:00:00.000Z/1990-01-01T00:00:00.000Z)
    """
    if not isinstance(a, Interval):
        raise TypeError(f"Expected an interval, got {a!r}")
    if b is None:
        current = _capability(a.start, "_now")(a.start)
        return overlap(a, Interval(current, current))
    elif overlaps(a, b):
        return Interval(latest(a.start, b.start), earliest(a.end, b.end))
    return None


def extend(i: Interval, /, *amounts: Amount) -> Interval:
    """The interval with its end moved forward by the amounts"""
    return Interval(i.start, plus(i.end, *amounts))


def adjust(i: Interval, /, *amounts: Amount) -> Interval:
    """The interval with both start and end moved by the amounts.
    Each boundary is shifted on its own, so calendar amounts may change
    the length of the interval.

    >>> adjust(interval(local_date(2021, 1, 28), local_date(2021, 1, 31)), months(1))
    Interval(2021-02-28/2021-02-28)
    """
    return Interval(plus(i.start, *amounts), plus(i.end, *amounts))


def _values_arg(fname: str, values: tuple[Any, ...]) -> tuple[Any, ...]:
    if len(values) == 1 and type(values[0]) not in _CAPABILITIES:
        values = tuple(values[0])
    if not values:
        raise ValueError(f"{fname}() requires at least one value")
    return values


def earliest(*values: Any) -> Any:
    """The earliest of the values, given as arguments or as one iterable.
    If several are equally early, the first one is returned."""
    return reduce(
        lambda a, b: b if is_before(b, a) else a,
        _values_arg("earliest", values),
    )


def latest(*values: Any) -> Any:
    """The latest of the values, given as arguments or as one iterable.
    If several are equally late, the first one is returned."""
    return reduce(
        lambda a, b: b if is_after(b, a) else a,
        _values_arg("latest", values),
    )


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------

_MILLIS_PER_UNIT: Mapping[Unit, int] = {
    Unit.MILLIS: 1,
    Unit.SECONDS: 1_000,
    Unit.MINUTES: 60_000,
    Unit.HOURS: 3_600_000,
    Unit.DAYS: _MILLIS_PER_DAY,
    Unit.WEEKS: 7 * _MILLIS_PER_DAY,
}


def _whole_units(
    start: Any, end: Any, amount: Callable[[int], Any], estimate: int
) -> int:
    # The estimate is at most one unit too large (in absolute terms)
    n = estimate
    if n > 0 and is_after(plus(start, amount(n)), end):
        n -= 1
    elif n < 0 and is_before(plus(start, amount(n)), end):
        n += 1
    return n


def _interval_in_unit(i: Interval, unit: Unit) -> int:
    s, e = i.start, i.end
    action = f"in_{unit.value}"
    if not unit.is_calendar:
        between = _capability_for(s, "_millis_between", action)
        return trunc_div(between(s, e), _MILLIS_PER_UNIT[unit])

    if isinstance(s, ZonedInstant):
        # Calendar units are counted on the local reading in the start's zone
        e = to_zone(e, s.zone)
    if unit is Unit.DAYS or unit is Unit.WEEKS:
        epoch_day = _capability_for(s, "_epoch_day", action)
        n = _whole_units(
            s,
            e,
            lambda n: CalendarAmount(days=n),
            epoch_day(e) - epoch_day(s),
        )
        return n if unit is Unit.DAYS else trunc_div(n, 7)

    _capability_for(s, "month", action)
    n = _whole_units(
        s,
        e,
        lambda n: CalendarAmount(months=n),
        months_diff_estimate(year(s), month(s), year(e), month(e)),
    )
    return n if unit is Unit.MONTHS else trunc_div(n, 12)


def in_unit(span: Union[Interval, Amount], unit: Unit, /) -> int:
    """The number of whole units in an interval or amount, truncated
    toward zero. Each unit is counted independently.

    Example
    -------
    >>> i = interval(date_time(1986, 10, 2), date_time(1986, 10, 14))
    >>> in_unit(i, Unit.MINUTES)
    17280
    >>> in_unit(i, Unit.WEEKS)
    1
    >>> in_unit(hours(50), Unit.DAYS)
    2

    Raises
    ------
    UnsupportedCapability
        If the unit can't be counted, e.g. hours in an interval of dates,
        or months in an exact duration.
    """
    if not isinstance(unit, Unit):
        raise TypeError(f"Expected a Unit, got {unit!r}")
    if isinstance(span, Interval):
        return _interval_in_unit(span, unit)
    elif isinstance(span, ExactDuration):
        if unit is Unit.MONTHS or unit is Unit.YEARS:
            raise UnsupportedCapability._for(f"in_{unit.value}", span)
        return trunc_div(span._total_ms, _MILLIS_PER_UNIT[unit])
    elif isinstance(span, CalendarAmount):
        if unit is Unit.YEARS:
            return trunc_div(span._total_months(), 12)
        elif unit is Unit.MONTHS:
            return span._total_months()
        # Months have no fixed number of days
        elif unit.is_calendar and not span._total_months():
            return span._days if unit is Unit.DAYS else trunc_div(span._days, 7)
        raise UnsupportedCapability._for(f"in_{unit.value}", span)
    raise TypeError(f"Expected an interval or amount, got {span!r}")


def in_millis(span: Union[Interval, Amount], /) -> int:
    return in_unit(span, Unit.MILLIS)


def in_seconds(span: Union[Interval, Amount], /) -> int:
    return in_unit(span, Unit.SECONDS)


def in_minutes(span: Union[Interval, Amount], /) -> int:
    return in_unit(span, Unit.MINUTES)


def in_hours(span: Union[Interval, Amount], /) -> int:
    return in_unit(span, Unit.HOURS)


def in_days(span: Union[Interval, Amount], /) -> int:
    return in_unit(span, Unit.DAYS)


def in_weeks(span: Union[Interval, Amount], /) -> int:
    return in_unit(span, Unit.WEEKS)


def in_months(span: Union[Interval, Amount], /) -> int:
    return in_unit(span, Unit.MONTHS)


def in_years(span: Union[Interval, Amount], /) -> int:
    return in_unit(span, Unit.YEARS)


# ---------------------------------------------------------------------------
# Diagnostics and deprecated aliases
# ---------------------------------------------------------------------------


class DiagnosticSink(Protocol):
    """Receives non-fatal notices, such as the use of deprecated functions"""

    def notice(self, message: str, /) -> None: ...


class WarningsSink:
    """Reports notices as a :class:`DeprecationWarning`"""

    __slots__ = ()

    def notice(self, message: str, /) -> None:
        # point the warning at the caller of the deprecated function
        warnings.warn(message, DeprecationWarning, stacklevel=3)


class NullSink:
    """Discards all notices"""

    __slots__ = ()

    def notice(self, message: str, /) -> None:
        pass


_DEFAULT_SINK = WarningsSink()


def sec(value: TemporalValue, /, *, sink: DiagnosticSink = _DEFAULT_SINK) -> int:
    """Deprecated alias of :func:`second`"""
    sink.notice("sec() is deprecated in favor of second()")
    return second(value)


def secs(
    n: Optional[int] = None, /, *, sink: DiagnosticSink = _DEFAULT_SINK
) -> Union[ExactDuration, Unit]:
    """Deprecated alias of :func:`seconds`"""
    sink.notice("secs() is deprecated in favor of seconds()")
    return seconds(n)


def in_msecs(i: Interval, /, *, sink: DiagnosticSink = _DEFAULT_SINK) -> int:
    """Deprecated alias of :func:`in_millis`"""
    sink.notice("in_msecs() is deprecated in favor of in_millis()")
    return in_millis(i)


def in_secs(i: Interval, /, *, sink: DiagnosticSink = _DEFAULT_SINK) -> int:
    """Deprecated alias of :func:`in_seconds`"""
    sink.notice("in_secs() is deprecated in favor of in_seconds()")
    return in_seconds(i)


def today_at_midnight(
    zone: _tzinfo = UTC, /, *, sink: DiagnosticSink = _DEFAULT_SINK
) -> ZonedInstant:
    """Deprecated: use :func:`with_time_at_start_of_day` instead.
    Today's date (in the default zone) at midnight in ``zone``."""
    sink.notice(
        "today_at_midnight() is deprecated in favor of with_time_at_start_of_day()"
    )
    return today_at(0, 0, zone=zone)


# We expose the public members in the root of the module.
# For clarity, we remove the "_core" part from the names,
# since this is an implementation detail.
for name in __all__:
    member = locals()[name]
    if getattr(member, "__module__", None) == __name__:  # pragma: no branch
        member.__module__ = "tempus"

# clear up loop variables so they don't leak into the namespace
del name
del member

# disable further subclassing
final(_ImmutableBase)
