from datetime import (
    datetime as _datetime,
    timedelta as _timedelta,
    timezone as _timezone,
)
from functools import lru_cache

UTC = _timezone.utc
EPOCH = _datetime(1970, 1, 1, tzinfo=UTC)
Millis = int  # 0-999

# Fixed offsets are limited to the same range as ISO 8601 offsets in practice
MAX_OFFSET_SECS = 18 * 3_600


# We cache fixed-offset tzinfo objects to avoid creating multiple identical ones.
# It's very common to only have whole-hour offsets, so this helps a lot.
@lru_cache
def mk_fixed_tzinfo(secs: int, /) -> _timezone:
    return UTC if secs == 0 else _timezone(_timedelta(seconds=secs))


def check_millis(ms: int, /) -> Millis:
    if not 0 <= ms < 1_000:
        raise ValueError(f"millisecond must be in 0..999, got {ms}")
    return ms


def truncate_to_millis(dt, /):
    """Drop the sub-millisecond part of a datetime or time"""
    return dt.replace(microsecond=dt.microsecond // 1_000 * 1_000)


def check_utc_bounds(dt: _datetime) -> _datetime:
    try:
        dt.astimezone(UTC)
    except (OverflowError, ValueError):
        raise ValueError("Instant out of range")
    return dt
