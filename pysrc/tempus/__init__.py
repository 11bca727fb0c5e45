from __future__ import annotations

from ._core import *
from ._core import (  # for the docs
    __all__ as _core_all,
    __version__,
    _pin_clock,
    _unpin_clock,
    now,
)
from .format import ParseFailure

from contextlib import contextmanager as _contextmanager
from dataclasses import dataclass as _dataclass
from typing import Iterator as _Iterator

__all__ = [*_core_all, "ParseFailure", "patch_current_time"]


@_dataclass
class _TimePatch:
    _pin: ZonedInstant
    _keep_ticking: bool
    _token: object

    def shift(self, *amounts: Amount) -> None:
        """Move the pinned clock by the given amounts"""
        if self._keep_ticking:
            self._pin = new = plus(now(), *amounts)
        else:
            self._pin = new = plus(self._pin, *amounts)
        _unpin_clock(self._token)  # type: ignore[arg-type]
        self._token = _pin_clock(new, self._keep_ticking)


@_contextmanager
def patch_current_time(
    instant: ZonedInstant,
    /,
    *,
    keep_ticking: bool,
) -> _Iterator[_TimePatch]:
    """Patch the current time to a fixed value (for testing purposes).
    Behaves as a context manager or decorator, with similar semantics to
    ``unittest.mock.patch``.

    Important
    ---------

    * The patch only applies to the current thread or asyncio task
      (and tasks it starts). Other threads keep seeing the real time.
    * This function only affects tempus's clock functions. It does not
      affect the standard library's time functions or any other libraries.
      Use the ``time_machine`` package if you also want to patch other libraries.
    * It doesn't affect the default zone.
      If you need to patch it, set the ``TZ`` environment variable.

    Example
    -------

    >>> from tempus import date_time, hours, now, patch_current_time, plus
    >>> i = date_time(1980, 3, 2, 2)
    >>> with patch_current_time(i, keep_ticking=False) as p:
    ...     assert now() == i
    ...     p.shift(hours(4))
    ...     assert now() == plus(i, hours(4))
    ...
    >>> assert now() != i
    """
    if not isinstance(instant, ZonedInstant):
        raise TypeError(f"Expected a ZonedInstant, got {instant!r}")
    patch = _TimePatch(instant, keep_ticking, _pin_clock(instant, keep_ticking))
    try:
        yield patch
    finally:
        _unpin_clock(patch._token)  # type: ignore[arg-type]
