from zoneinfo import ZoneInfo

import pytest

from tempus import (
    CrossVariantComparison,
    UnsupportedCapability,
    Weekday,
    ZonedInstant,
    date_time,
    day,
    day_of_week,
    equal,
    first_day_of_month,
    hour,
    is_after,
    is_before,
    last_day_of_month,
    local_date,
    local_date_time,
    local_time,
    millisecond,
    minute,
    month,
    nth_day_of_month,
    number_of_days_in_month,
    second,
    supports,
    to_zone,
    week_based_year,
    week_of_year,
    year,
    year_month,
)

AMS = ZoneInfo("Europe/Amsterdam")

ALL_OPERATIONS = [
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
    "first_day_of_month",
    "last_day_of_month",
    "week_of_year",
    "week_based_year",
]
DATE_ONLY = {"hour", "minute", "second", "millisecond"}
TIME_ONLY = {
    "hour",
    "minute",
    "second",
    "millisecond",
    "equal",
    "is_after",
    "is_before",
    "add_amount",
    "subtract_amount",
}
YEAR_MONTH_ONLY = {
    "year",
    "month",
    "equal",
    "is_after",
    "is_before",
    "add_amount",
    "subtract_amount",
}


@pytest.mark.parametrize("operation", ALL_OPERATIONS)
def test_support_matrix(operation):
    assert supports(date_time(2020), operation)
    assert supports(local_date_time(2020), operation)
    assert supports(local_date(2020, 1, 1), operation) is (
        operation not in DATE_ONLY
    )
    assert supports(local_time(12), operation) is (operation in TIME_ONLY)
    assert supports(year_month(2020), operation) is (
        operation in YEAR_MONTH_ONLY
    )


def test_supports_unknown():
    assert not supports(date_time(2020), "foo")
    assert not supports(date_time(2020), "_epoch_day")
    with pytest.raises(TypeError):
        supports("2020-01-01", "year")  # type: ignore[arg-type]


def test_fields():
    d = date_time(1986, 10, 14, 4, 3, 27, 456)
    assert year(d) == 1986
    assert month(d) == 10
    assert day(d) == 14
    assert hour(d) == 4
    assert minute(d) == 3
    assert second(d) == 27
    assert millisecond(d) == 456
    assert day_of_week(d) is Weekday.TUESDAY

    assert year(year_month(2021, 5)) == 2021
    assert month(year_month(2021, 5)) == 5
    assert hour(local_time(13, 1)) == 13


def test_fields_in_zone():
    d = to_zone(date_time(2020, 12, 31, 23, 30), AMS)
    assert year(d) == 2021
    assert day(d) == 1
    assert hour(d) == 0


def test_unsupported():
    with pytest.raises(UnsupportedCapability, match="LocalTime.*'year'"):
        year(local_time(12))

    with pytest.raises(UnsupportedCapability, match="LocalDate.*'hour'"):
        hour(local_date(2020, 1, 1))

    with pytest.raises(UnsupportedCapability):
        day(year_month(2020, 1))

    # it's a TypeError
    with pytest.raises(TypeError):
        day_of_week(local_time(12))


def test_not_temporal():
    with pytest.raises(TypeError, match="temporal"):
        year(2020)  # type: ignore[arg-type]


class TestWeekFields:

    @pytest.mark.parametrize(
        "d, week, week_year",
        [
            (local_date(2021, 1, 3), 53, 2020),
            (local_date(2021, 1, 4), 1, 2021),
            (local_date(2019, 12, 30), 1, 2020),
            (local_date(1986, 10, 14), 42, 1986),
        ],
    )
    def test_iso_weeks(self, d, week, week_year):
        assert week_of_year(d) == week
        assert week_based_year(d) == week_year

    def test_datetimes(self):
        assert week_of_year(date_time(2021, 1, 3, 23)) == 53
        assert week_based_year(local_date_time(2021, 1, 3)) == 2020


class TestComparison:

    def test_same_kind(self):
        a = date_time(2020, 1, 1)
        b = date_time(2020, 1, 2)
        assert is_before(a, b)
        assert not is_before(b, a)
        assert is_after(b, a)
        assert not is_after(a, a)
        assert equal(a, to_zone(a, AMS))
        assert not equal(a, b)

    def test_local_kinds(self):
        assert is_before(local_time(1), local_time(2))
        assert is_after(year_month(2021, 2), year_month(2021, 1))
        assert equal(local_date(2020, 1, 1), local_date(2020, 1, 1))

    def test_cross_variant(self):
        with pytest.raises(CrossVariantComparison):
            equal(date_time(2020), local_date_time(2020))

        with pytest.raises(CrossVariantComparison):
            is_after(local_date(2020, 1, 1), year_month(2020, 1))

        with pytest.raises(CrossVariantComparison):
            is_before(local_time(12), 12)  # type: ignore[arg-type]

        assert issubclass(CrossVariantComparison, TypeError)


class TestMonthAdjusters:

    def test_first_day(self):
        assert first_day_of_month(local_date_time(2021, 5, 17, 13)) == (
            local_date_time(2021, 5, 1, 13)
        )
        assert first_day_of_month(local_date(2021, 5, 17)) == local_date(
            2021, 5, 1
        )
        assert first_day_of_month(2021, 5) == date_time(2021, 5, 1)

    def test_last_day(self):
        assert last_day_of_month(local_date(2024, 2, 10)) == local_date(
            2024, 2, 29
        )
        assert last_day_of_month(local_date(2023, 2, 10)) == local_date(
            2023, 2, 28
        )
        assert last_day_of_month(2021, 4) == date_time(2021, 4, 30)

    def test_zoned_keeps_time_and_zone(self):
        d = ZonedInstant(2021, 3, 10, 8, 15, zone=AMS)
        last = last_day_of_month(d)
        assert last.local() == local_date_time(2021, 3, 31, 8, 15)
        assert last.zone is AMS
        # DST started in between
        assert last.offset != d.offset

    def test_number_of_days(self):
        assert number_of_days_in_month(2024, 2) == 29
        assert number_of_days_in_month(2023, 2) == 28
        assert number_of_days_in_month(2100, 2) == 28
        assert number_of_days_in_month(2000, 2) == 29
        assert number_of_days_in_month(local_date(2021, 12, 5)) == 31
        assert number_of_days_in_month(date_time(2021, 4, 5)) == 30

    def test_nth_day(self):
        assert nth_day_of_month(local_date(2021, 2, 10), 3) == local_date(
            2021, 2, 3
        )
        assert nth_day_of_month(2021, 2, 30) == date_time(2021, 3, 2)
        assert nth_day_of_month(local_date(2021, 2, 10), 30) == local_date(
            2021, 3, 2
        )
        with pytest.raises(TypeError):
            nth_day_of_month(local_date(2021, 2, 10))  # type: ignore[call-overload]

    def test_unsupported(self):
        with pytest.raises(UnsupportedCapability):
            first_day_of_month(local_time(12))
        with pytest.raises(UnsupportedCapability):
            last_day_of_month(year_month(2021, 1))
