"""Hypothesis strategies for generating tempus values in property tests.

Requires the ``hypothesis`` package (``pip install tempus[strategies]``).

Example
-------
>>> from hypothesis import given
>>> from tempus.strategies import PAST, zoned_instants
>>> @given(zoned_instants(between=PAST))
... def test_something(value): ...
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo as _tzinfo
from typing import Literal, Optional

from hypothesis import strategies as st

from ._core import (
    UTC,
    LocalDate,
    LocalDateTime,
    LocalTime,
    YearMonth,
    ZonedInstant,
    available_zone_ids,
    date_time,
    zone_for_id,
)
from .coerce import from_millis, to_millis

__all__ = [
    "FUTURE",
    "InstantRange",
    "PAST",
    "PAST_AND_FUTURE",
    "local_date_times",
    "local_dates",
    "local_times",
    "temporal_values",
    "time_zones",
    "year_months",
    "zoned_instants",
]


@dataclass(frozen=True)
class InstantRange:
    """The bounds (both inclusive) within which instants are generated"""

    start: ZonedInstant
    end: ZonedInstant

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("The end of a range can't be before its start")

    def millis(self) -> st.SearchStrategy[int]:
        return st.integers(to_millis(self.start), to_millis(self.end))


PAST = InstantRange(date_time(2001, 1, 1), date_time(2010, 12, 31))
PAST_AND_FUTURE = InstantRange(
    date_time(2011, 1, 1), date_time(2030, 12, 31, 23, 59, 59)
)
FUTURE = InstantRange(date_time(2031, 1, 1), date_time(2040, 12, 31, 23, 59, 59))


def time_zones() -> st.SearchStrategy[_tzinfo]:
    """UTC, or any of the available zones"""
    return st.one_of(
        st.just(UTC),
        st.sampled_from(sorted(available_zone_ids())).map(zone_for_id),
    )


def zoned_instants(
    between: InstantRange = PAST_AND_FUTURE,
    zones: Optional[st.SearchStrategy[_tzinfo]] = None,
) -> st.SearchStrategy[ZonedInstant]:
    """Instants within the range. In UTC unless a strategy for zones is given."""
    if zones is None:
        return between.millis().map(from_millis)
    return st.builds(from_millis, between.millis(), zones)


def local_date_times(
    between: InstantRange = PAST_AND_FUTURE,
) -> st.SearchStrategy[LocalDateTime]:
    return zoned_instants(between).map(ZonedInstant.local)


def local_dates(
    between: InstantRange = PAST_AND_FUTURE,
) -> st.SearchStrategy[LocalDate]:
    return zoned_instants(between).map(ZonedInstant.date)


def local_times() -> st.SearchStrategy[LocalTime]:
    return st.integers(0, 86_399_999).map(LocalTime._from_millis_of_day)


def year_months(
    between: InstantRange = PAST_AND_FUTURE,
) -> st.SearchStrategy[YearMonth]:
    return local_dates(between).map(LocalDate.year_month)


TemporalKind = Literal[
    "zoned_instant", "local_date_time", "local_date", "local_time", "year_month"
]


def temporal_values(
    kind: TemporalKind, between: InstantRange = PAST_AND_FUTURE
) -> st.SearchStrategy[object]:
    """Values of the given kind, e.g. ``temporal_values("local_date")``"""
    if kind == "zoned_instant":
        return zoned_instants(between)
    elif kind == "local_date_time":
        return local_date_times(between)
    elif kind == "local_date":
        return local_dates(between)
    elif kind == "local_time":
        return local_times()
    elif kind == "year_month":
        return year_months(between)
    raise ValueError(f"Unknown kind: {kind!r}")
