from copy import copy, deepcopy
from zoneinfo import ZoneInfo

import pytest

from tempus import (
    UTC,
    InvalidFieldValue,
    LocalDate,
    LocalDateTime,
    LocalTime,
    Weekday,
    ZonedInstant,
    date_midnight,
    date_time,
    epoch,
    hours,
    local_date_time,
    plus,
    to_zone,
    zone_for_offset,
)

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual

AMS = ZoneInfo("Europe/Amsterdam")


class TestInit:

    def test_defaults(self):
        d = ZonedInstant(2020)
        assert (d.year, d.month, d.day) == (2020, 1, 1)
        assert (d.hour, d.minute, d.second, d.millisecond) == (0, 0, 0, 0)
        assert d.zone is UTC

    def test_all_fields(self):
        d = ZonedInstant(1986, 10, 14, 4, 3, 27, 456, zone=AMS)
        assert d.year == 1986
        assert d.month == 10
        assert d.day == 14
        assert d.hour == 4
        assert d.minute == 3
        assert d.second == 27
        assert d.millisecond == 456
        assert d.zone is AMS

    @pytest.mark.parametrize(
        "args",
        [
            (2021, 13),
            (2021, 2, 29),
            (2020, 4, 31),
            (2020, 1, 1, 24),
            (2020, 1, 1, 0, 60),
            (2020, 1, 1, 0, 0, 60),
            (2020, 1, 1, 0, 0, 0, 1_000),
            (2020, 1, 1, 0, 0, 0, -1),
            (0, 1, 1),
            (10_000, 1, 1),
        ],
    )
    def test_invalid_fields(self, args):
        with pytest.raises(InvalidFieldValue):
            ZonedInstant(*args)

    def test_invalid_fields_are_value_errors(self):
        with pytest.raises(ValueError, match="month"):
            ZonedInstant(2021, 13)

    def test_invalid_types(self):
        with pytest.raises(TypeError):
            ZonedInstant("2020")  # type: ignore[arg-type]

        with pytest.raises(TypeError):
            ZonedInstant(2020, zone="Europe/Amsterdam")  # type: ignore[arg-type]

    def test_skipped_time_moves_forward(self):
        d = ZonedInstant(2023, 3, 26, 2, 30, zone=AMS)
        assert (d.hour, d.minute) == (3, 30)
        assert d.offset == hours(2)

    def test_repeated_time_takes_earlier_offset(self):
        d = ZonedInstant(2023, 10, 29, 2, 30, zone=AMS)
        assert (d.hour, d.minute) == (2, 30)
        assert d.offset == hours(2)


def test_module_constructors():
    assert date_time(1986, 10, 14) == ZonedInstant(1986, 10, 14)
    assert date_time(1986, 10, 14, 4, 3, 27, 456) == ZonedInstant(
        1986, 10, 14, 4, 3, 27, 456
    )
    assert date_midnight(1986, 10, 14) == ZonedInstant(1986, 10, 14)
    assert epoch() == ZonedInstant(1970)
    assert epoch().zone is UTC


def test_offset():
    assert date_time(2020).offset == hours(0)
    assert ZonedInstant(2020, 7, 1, zone=AMS).offset == hours(2)
    assert ZonedInstant(2020, 1, 1, zone=AMS).offset == hours(1)
    assert ZonedInstant(2020, 1, 1, zone=zone_for_offset(-3)).offset == hours(-3)


def test_conversions():
    d = ZonedInstant(1986, 10, 14, 4, 3, 27, 456, zone=AMS)
    assert d.local() == LocalDateTime(1986, 10, 14, 4, 3, 27, 456)
    assert d.date() == LocalDate(1986, 10, 14)
    assert d.time() == LocalTime(4, 3, 27, 456)
    assert d.day_of_week() is Weekday.TUESDAY


def test_eq():
    d = date_time(2020, 8, 15, 12)
    same = date_time(2020, 8, 15, 12)
    same_moment = to_zone(d, AMS)
    different = date_time(2020, 8, 15, 13)

    assert d == same
    assert d == same_moment
    assert not d == different
    assert not d == NeverEqual()
    assert d == AlwaysEqual()

    assert not d != same
    assert not d != same_moment
    assert d != different
    assert d != NeverEqual()
    assert not d != AlwaysEqual()
    assert d != None  # noqa: E711
    assert not d == None  # noqa: E711
    assert d != local_date_time(2020, 8, 15, 12)

    assert hash(d) == hash(same) == hash(same_moment)


def test_repeated_times_are_different_moments():
    earlier = ZonedInstant(2023, 10, 29, 2, 30, zone=AMS)
    later = plus(earlier, hours(1))
    assert later.local() == earlier.local()
    assert later.offset == hours(1)
    assert earlier != later
    assert earlier < later
    assert later == date_time(2023, 10, 29, 1, 30)
    assert hash(later) == hash(date_time(2023, 10, 29, 1, 30))


def test_comparison():
    d = date_time(2020, 8, 15, 12)
    same = to_zone(d, zone_for_offset(5))
    bigger = date_time(2020, 8, 15, 13)
    smaller = to_zone(date_time(2020, 8, 15, 11), AMS)

    assert d <= same
    assert d <= bigger
    assert not d <= smaller
    assert d <= AlwaysLarger()
    assert not d <= AlwaysSmaller()

    assert not d < same
    assert d < bigger
    assert not d < smaller
    assert d < AlwaysLarger()
    assert not d < AlwaysSmaller()

    assert d >= same
    assert not d >= bigger
    assert d >= smaller
    assert not d >= AlwaysLarger()
    assert d >= AlwaysSmaller()

    assert not d > same
    assert not d > bigger
    assert d > smaller
    assert not d > AlwaysLarger()
    assert d > AlwaysSmaller()

    with pytest.raises(TypeError):
        d < local_date_time(2020)  # type: ignore[operator]


def test_str():
    assert str(date_time(1986, 10, 14, 4, 3, 27, 456)) == "1986-10-14T04:03:27.456Z"
    assert (
        str(ZonedInstant(2024, 7, 1, 12, zone=ZoneInfo("Europe/Paris")))
        == "2024-07-01T12:00:00.000+02:00[Europe/Paris]"
    )
    assert (
        str(to_zone(date_time(1986, 10, 22), zone_for_offset(-2)))
        == "1986-10-21T22:00:00.000-02:00"
    )


def test_repr():
    assert repr(date_time(1986, 10, 14)) == "ZonedInstant(1986-10-14T00:00:00.000Z)"


def test_copy():
    d = date_time(2020, 8, 15)
    assert copy(d) is d
    assert deepcopy(d) is d


def test_cannot_subclass():
    with pytest.raises(TypeError):

        class Subclass(ZonedInstant):  # type: ignore[misc]
            pass


def test_immutable():
    d = date_time(2020)
    with pytest.raises(AttributeError):
        d.year = 2021  # type: ignore[misc]
