"""Conversion between tempus values and external timestamp representations:
the standard library's ``datetime`` types, epoch milliseconds, and
``sqlite3`` columns.

Note
----
Values have millisecond precision, so any sub-millisecond part of
incoming ``datetime`` and ``time`` objects is truncated. The ``tzinfo`` of
``time`` objects is dropped, since a :class:`~tempus.LocalTime` has no zone.
"""

from __future__ import annotations

import sqlite3
from datetime import (
    date as _date,
    datetime as _datetime,
    time as _time,
    tzinfo as _tzinfo,
)
from typing import Optional, Union, overload

from ._common import UTC, truncate_to_millis
from ._core import (
    InvalidFieldValue,
    LocalDate,
    LocalDateTime,
    LocalTime,
    YearMonth,
    ZonedInstant,
)

__all__ = [
    "from_millis",
    "from_py_date",
    "from_py_datetime",
    "from_py_time",
    "register_sqlite_adapters",
    "to_millis",
    "to_py_date",
    "to_py_datetime",
    "to_py_time",
    "to_zoned_instant",
]


@overload
def to_py_datetime(value: ZonedInstant, /) -> _datetime: ...


@overload
def to_py_datetime(value: LocalDateTime, /) -> _datetime: ...


def to_py_datetime(value: Union[ZonedInstant, LocalDateTime], /) -> _datetime:
    """An aware ``datetime`` for a :class:`~tempus.ZonedInstant`,
    or a naive one for a :class:`~tempus.LocalDateTime`"""
    if isinstance(value, (ZonedInstant, LocalDateTime)):
        return value._py_dt
    raise TypeError(f"Expected a ZonedInstant or LocalDateTime, got {value!r}")


def from_py_datetime(dt: _datetime, /) -> ZonedInstant:
    """Create a :class:`~tempus.ZonedInstant` from a ``datetime``.

    Naive datetimes are taken to be in UTC. Aware datetimes keep their
    ``tzinfo``. A local time skipped by a DST transition is moved forward.

    Example
    -------
    >>> from_py_datetime(datetime(2020, 8, 15, 23, 12, 9, 987_654))
    ZonedInstant(2020-08-15T23:12:09.987Z)
    """
    if not isinstance(dt, _datetime):
        raise TypeError(f"Expected a datetime, got {dt!r}")
    dt = truncate_to_millis(dt)
    if dt.tzinfo is None or dt.utcoffset() is None:
        return ZonedInstant._from_py_unchecked(dt.replace(tzinfo=UTC))
    try:
        # the roundtrip normalizes local times that don't exist
        return ZonedInstant._from_py_unchecked(
            dt.astimezone(UTC).astimezone(dt.tzinfo)
        )
    except (OverflowError, ValueError):
        raise InvalidFieldValue("Instant out of range") from None


def to_py_date(value: Union[ZonedInstant, LocalDateTime, LocalDate], /) -> _date:
    if isinstance(value, (ZonedInstant, LocalDateTime)):
        return value._py_dt.date()
    elif isinstance(value, LocalDate):
        return value._py_date
    raise TypeError(f"Expected a value with a date, got {value!r}")


def from_py_date(d: _date, /) -> ZonedInstant:
    """Midnight at the start of the date, in UTC"""
    if isinstance(d, _datetime) or not isinstance(d, _date):
        raise TypeError(f"Expected a date, got {d!r}")
    return ZonedInstant(d.year, d.month, d.day)


def to_py_time(value: Union[ZonedInstant, LocalDateTime, LocalTime], /) -> _time:
    """The time of day, without a zone"""
    if isinstance(value, (ZonedInstant, LocalDateTime)):
        return value._py_dt.time()
    elif isinstance(value, LocalTime):
        return value._py_time
    raise TypeError(f"Expected a value with a time of day, got {value!r}")


def from_py_time(t: _time, /) -> LocalTime:
    if not isinstance(t, _time):
        raise TypeError(f"Expected a time, got {t!r}")
    return LocalTime._from_py_unchecked(
        truncate_to_millis(t).replace(tzinfo=None, fold=0)
    )


def to_millis(value: ZonedInstant, /) -> int:
    """Milliseconds since the UNIX epoch"""
    if not isinstance(value, ZonedInstant):
        raise TypeError(f"Expected a ZonedInstant, got {value!r}")
    return value._epoch_millis()


def from_millis(ms: int, /, zone: _tzinfo = UTC) -> ZonedInstant:
    """The moment ``ms`` milliseconds after the UNIX epoch, in ``zone``

    Example
    -------
    >>> from_millis(529_632_000_000)
    ZonedInstant(1986-10-14T00:00:00.000Z)
    """
    if not isinstance(ms, int):
        raise TypeError(f"Expected an integer, got {ms!r}")
    try:
        return ZonedInstant._from_epoch_millis(ms, zone)
    except (OverflowError, ValueError):
        raise InvalidFieldValue(f"Epoch milliseconds out of range: {ms}") from None


def to_zoned_instant(obj: object, /) -> Optional[ZonedInstant]:
    """Coerce anything that denotes a moment in time to a
    :class:`~tempus.ZonedInstant`. Local values are taken to be in UTC,
    strings are parsed with the built-in formats.
    ``None`` is passed through.
    """
    if obj is None or isinstance(obj, ZonedInstant):
        return obj
    elif isinstance(obj, int) and not isinstance(obj, bool):
        return from_millis(obj)
    elif isinstance(obj, _datetime):
        return from_py_datetime(obj)
    elif isinstance(obj, _date):
        return from_py_date(obj)
    elif isinstance(obj, LocalDateTime):
        return ZonedInstant._from_py_unchecked(obj._py_dt.replace(tzinfo=UTC))
    elif isinstance(obj, LocalDate):
        return from_py_date(obj._py_date)
    elif isinstance(obj, YearMonth):
        return from_py_date(obj._py_date)
    elif isinstance(obj, str):
        from .format import parse

        return parse(obj)
    raise TypeError(f"Cannot coerce {obj!r} to a ZonedInstant")


def _adapt_instant(value: ZonedInstant) -> str:
    return value._utc().isoformat(timespec="milliseconds")


def _convert_timestamp(raw: bytes) -> ZonedInstant:
    return from_py_datetime(_datetime.fromisoformat(raw.decode()))


def _convert_date(raw: bytes) -> LocalDate:
    return LocalDate._from_py_unchecked(_date.fromisoformat(raw.decode()))


def _convert_time(raw: bytes) -> LocalTime:
    return from_py_time(_time.fromisoformat(raw.decode()))


def register_sqlite_adapters() -> None:
    """Let ``sqlite3`` store tempus values as ISO 8601 text, and read
    columns declared as ``tempus_timestamp``, ``tempus_date`` or
    ``tempus_time`` back.

    Zoned values are stored in UTC, so they sort correctly as text.
    Converters only apply to connections opened with
    ``detect_types=sqlite3.PARSE_DECLTYPES``.
    """
    sqlite3.register_adapter(ZonedInstant, _adapt_instant)
    for cls in (LocalDateTime, LocalDate, LocalTime, YearMonth):
        sqlite3.register_adapter(cls, cls.format_iso)
    sqlite3.register_converter("tempus_timestamp", _convert_timestamp)
    sqlite3.register_converter("tempus_date", _convert_date)
    sqlite3.register_converter("tempus_time", _convert_time)
