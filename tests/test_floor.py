from zoneinfo import ZoneInfo

import pytest
from hypothesis import given

from tempus import (
    UnsupportedCapability,
    ZonedInstant,
    date_time,
    floor,
    hours,
    local_date,
    local_date_time,
    local_time,
    year_month,
)
from tempus.strategies import local_date_times, zoned_instants

AMS = ZoneInfo("Europe/Amsterdam")
UNITS = ["year", "month", "day", "hour", "minute", "second", "millisecond"]


@pytest.mark.parametrize(
    "unit, expect",
    [
        ("year", date_time(1986)),
        ("month", date_time(1986, 10)),
        ("day", date_time(1986, 10, 14)),
        ("hour", date_time(1986, 10, 14, 4)),
        ("minute", date_time(1986, 10, 14, 4, 3)),
        ("second", date_time(1986, 10, 14, 4, 3, 27)),
        ("millisecond", date_time(1986, 10, 14, 4, 3, 27, 456)),
    ],
)
def test_zoned(unit, expect):
    assert floor(date_time(1986, 10, 14, 4, 3, 27, 456), unit) == expect


def test_local_date_time():
    d = local_date_time(2021, 7, 31, 23, 59, 59, 999)
    assert floor(d, "month") == local_date_time(2021, 7, 1)
    assert floor(d, "minute") == local_date_time(2021, 7, 31, 23, 59)


def test_local_date():
    assert floor(local_date(1986, 10, 14), "year") == local_date(1986, 1, 1)
    assert floor(local_date(1986, 10, 14), "month") == local_date(1986, 10, 1)
    assert floor(local_date(1986, 10, 14), "day") == local_date(1986, 10, 14)
    with pytest.raises(UnsupportedCapability):
        floor(local_date(1986, 10, 14), "hour")


def test_local_time():
    assert floor(local_time(4, 3, 27, 456), "hour") == local_time(4)
    assert floor(local_time(4, 3, 27, 456), "second") == local_time(4, 3, 27)
    with pytest.raises(UnsupportedCapability):
        floor(local_time(4), "day")


def test_year_month():
    assert floor(year_month(1986, 10), "year") == year_month(1986, 1)
    assert floor(year_month(1986, 10), "month") == year_month(1986, 10)
    with pytest.raises(UnsupportedCapability):
        floor(year_month(1986, 10), "day")


def test_zoned_on_dst_day():
    d = ZonedInstant(2023, 3, 26, 12, 30, zone=AMS)
    floored = floor(d, "day")
    assert floored == ZonedInstant(2023, 3, 26, zone=AMS)
    assert floored.offset == hours(1)
    assert floored.zone is AMS
    assert floor(d, "hour").local() == local_date_time(2023, 3, 26, 12)


def test_invalid_unit():
    with pytest.raises(ValueError, match="week"):
        floor(date_time(2020), "week")  # type: ignore[arg-type]


@given(zoned_instants())
def test_idempotent_zoned(d):
    for unit in UNITS:
        once = floor(d, unit)
        assert floor(once, unit) == once
        assert once <= d


@given(local_date_times())
def test_idempotent_local(d):
    for unit in UNITS:
        once = floor(d, unit)
        assert floor(once, unit) == once
        assert once <= d
