import pytest

from tempus import InvalidFieldValue, LocalTime, local_time

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual


class TestInit:

    def test_defaults(self):
        t = LocalTime(12)
        assert (t.hour, t.minute, t.second, t.millisecond) == (12, 0, 0, 0)

    def test_all_fields(self):
        t = local_time(4, 3, 27, 456)
        assert t.hour == 4
        assert t.minute == 3
        assert t.second == 27
        assert t.millisecond == 456

    @pytest.mark.parametrize(
        "args",
        [(24,), (-1,), (0, 60), (0, 0, 60), (0, 0, 0, 1_000)],
    )
    def test_invalid(self, args):
        with pytest.raises(InvalidFieldValue):
            LocalTime(*args)

    def test_no_args(self):
        with pytest.raises(TypeError):
            LocalTime()  # type: ignore[call-arg]


def test_midnight():
    assert LocalTime.MIDNIGHT == LocalTime(0)


def test_eq():
    t = LocalTime(12, 30)
    same = LocalTime(12, 30, 0, 0)
    different = LocalTime(12, 30, 0, 1)

    assert t == same
    assert not t == different
    assert not t == NeverEqual()
    assert t == AlwaysEqual()
    assert t != None  # noqa: E711

    assert hash(t) == hash(same)


def test_comparison():
    t = LocalTime(12, 30)
    assert t < LocalTime(12, 30, 0, 1)
    assert t <= LocalTime(12, 30)
    assert t > LocalTime(0)
    assert t >= LocalTime(12, 29, 59, 999)
    assert t < AlwaysLarger()
    assert t > AlwaysSmaller()


def test_str_and_repr():
    assert str(LocalTime(4, 3, 27, 45)) == "04:03:27.045"
    assert repr(LocalTime(12, 30)) == "LocalTime(12:30:00.000)"
