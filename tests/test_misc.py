import pytest

import tempus
from tempus import (
    CrossVariantComparison,
    InvalidFieldValue,
    ParseFailure,
    UnsupportedCapability,
    ZonedInstant,
    date_time,
    interval,
)


def test_exceptions():
    assert issubclass(InvalidFieldValue, ValueError)
    assert issubclass(ParseFailure, ValueError)
    assert issubclass(UnsupportedCapability, TypeError)
    assert issubclass(CrossVariantComparison, TypeError)


def test_version():
    from tempus import __version__

    assert isinstance(__version__, str)


def test_no_attr_on_module():
    with pytest.raises((AttributeError, ImportError), match="DoesntExist"):
        from tempus import DoesntExist  # type: ignore[attr-defined] # noqa


def test_all_exported():
    for name in tempus.__all__:
        assert hasattr(tempus, name), name


def test_module_name():
    assert ZonedInstant.__module__ == "tempus"
    assert date_time.__module__ == "tempus"
    assert interval.__module__ == "tempus"
