import sys
from time import sleep
from zoneinfo import ZoneInfo

import pytest

from tempus import (
    UTC,
    ZonedInstant,
    ago,
    date_time,
    days,
    from_now,
    hours,
    in_hours,
    interval,
    local_date,
    local_time,
    mins_ago,
    minus,
    minutes,
    now,
    patch_current_time,
    plus,
    seconds,
    time_now,
    to_zone,
    today,
    today_at,
    with_time_at_start_of_day,
    yesterday,
)

from .common import system_tz, system_tz_ams

AMS = ZoneInfo("Europe/Amsterdam")


def test_now_is_utc():
    n = now()
    assert n.zone is UTC
    assert n > date_time(2024, 1, 1)


@pytest.mark.skipif(
    sys.implementation.name == "pypy",
    reason="time-machine doesn't support PyPy",
)
def test_time_machine():
    import time_machine

    with time_machine.travel("1980-03-02 02:00 UTC", tick=False):
        assert now() == date_time(1980, 3, 2, 2)


@system_tz_ams()
def test_patch_time():
    i = date_time(1980, 3, 2, 2)

    # simplest case: freeze time at fixed UTC
    with patch_current_time(i, keep_ticking=False) as p:
        assert now() == i
        assert today() == local_date(1980, 3, 2)
        assert time_now() == local_time(3)
        p.shift(hours(3))
        p.shift(hours(1))
        assert now() == plus(i, hours(4))

    # patch has ended
    assert now() > date_time(2024, 1, 1)
    assert today() > local_date(2024, 1, 1)

    # complex case: freeze time at zoned instant and keep ticking
    with patch_current_time(to_zone(i, AMS), keep_ticking=True) as p:
        assert in_hours(interval(i, now())) == 0
        p.shift(hours(2))
        sleep(0.000001)
        assert 2 <= in_hours(interval(i, now())) < 3
        p.shift(days(2))
        sleep(0.000001)
        assert 50 <= in_hours(interval(i, now())) < 51

    assert in_hours(interval(i, now())) > 40_000


def test_nested_patches():
    outer = date_time(2000)
    inner = date_time(2010)
    with patch_current_time(outer, keep_ticking=False):
        with patch_current_time(inner, keep_ticking=False):
            assert now() == inner
        assert now() == outer


def test_patch_requires_instant():
    with pytest.raises(TypeError):
        with patch_current_time(local_date(2020, 1, 1), keep_ticking=False):  # type: ignore[arg-type]
            pass


class TestRelative:

    pinned = date_time(2020, 5, 4, 12)

    @system_tz("UTC")
    def test_today_at(self):
        with patch_current_time(self.pinned, keep_ticking=False):
            assert today_at(8, 30) == date_time(2020, 5, 4, 8, 30)
            assert today_at(8, 30, 15, 250) == date_time(2020, 5, 4, 8, 30, 15, 250)
            assert today_at(8, 30, zone=AMS) == ZonedInstant(
                2020, 5, 4, 8, 30, zone=AMS
            )

    @system_tz("UTC")
    def test_ago_and_from_now(self):
        with patch_current_time(self.pinned, keep_ticking=False):
            assert ago(hours(2)) == date_time(2020, 5, 4, 10)
            assert ago(days(1), hours(2)) == date_time(2020, 5, 3, 10)
            assert from_now(minutes(5)) == date_time(2020, 5, 4, 12, 5)
            assert yesterday() == date_time(2020, 5, 3, 12)

    @system_tz("UTC")
    def test_mins_ago(self):
        with patch_current_time(self.pinned, keep_ticking=False):
            assert mins_ago(minus(self.pinned, minutes(90), seconds(30))) == 90
            assert mins_ago(plus(self.pinned, minutes(5))) == -5


def test_with_time_at_start_of_day():
    assert with_time_at_start_of_day(
        ZonedInstant(2020, 5, 4, 13, zone=AMS)
    ) == ZonedInstant(2020, 5, 4, zone=AMS)
    assert with_time_at_start_of_day(date_time(2020, 5, 4, 23, 59)) == (
        date_time(2020, 5, 4)
    )
    # a day which starts at 01:00 because of DST
    havana = ZoneInfo("America/Havana")
    start = with_time_at_start_of_day(ZonedInstant(2013, 3, 10, 12, zone=havana))
    assert (start.hour, start.minute) == (1, 0)
