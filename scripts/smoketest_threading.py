"""
Stress tests for thread-safety of pure operations and clock patching.

Note this isn't a unit test, because it relies on real threads running
for a while.
"""

import sys
import time
from threading import Thread

from tempus import (
    date_time,
    days,
    floor,
    hours,
    in_hours,
    interval,
    months,
    now,
    patch_current_time,
    plus,
    to_zone,
    zone_for_id,
)

if not hasattr(sys, "_is_gil_enabled") or sys._is_gil_enabled():
    # Running with GIL enabled can still be useful to compare performance,
    # but be sure to warn that threading hasn't been stress tested.
    print("WARNING: Running with GIL enabled. Threading not stress tested.")


START = date_time(2024, 6, 15, 12)
NUM_THREADS = 16
NUM_ITERATIONS = 500
TIMEZONE_SAMPLE = [
    "UTC",
    "America/Guyana",
    "Etc/GMT-11",
    "Europe/Vienna",
    "America/Rainy_River",
    "Asia/Ulaanbaatar",
    "US/Alaska",
    "America/Rankin_Inlet",
    "Arctic/Longyearbyen",
    "Pacific/Bougainville",
    "Africa/Monrovia",
    "Europe/Copenhagen",
    "America/Hermosillo",
    "Africa/Brazzaville",
    "Asia/Tashkent",
    "Pacific/Saipan",
    "Europe/Tallinn",
    "Europe/Uzhgorod",
    "Africa/Nairobi",
    "America/Argentina/Ushuaia",
    "Brazil/Acre",
]
assert (
    len(TIMEZONE_SAMPLE) % NUM_THREADS
), "Timezone sample should not be evenly divisible by number of threads"
TZS = TIMEZONE_SAMPLE * (NUM_THREADS * NUM_ITERATIONS)


def arithmetic_in_zones(tzs):
    """Calendar arithmetic and flooring in many zones at once"""
    for tz in tzs:
        d = plus(to_zone(START, zone_for_id(tz)), months(1), days(3))
        assert floor(d, "day") <= d


def pinned_clocks(tzs):
    """Each thread pins its own clock, which no other thread may see"""
    for n, tz in enumerate(tzs[:NUM_ITERATIONS]):
        pin = plus(START, hours(n))
        with patch_current_time(to_zone(pin, zone_for_id(tz)), keep_ticking=False):
            assert now() == pin
            assert in_hours(interval(START, now())) == n
    assert now() > START


def main(func):
    print(f"Starting test: {func.__name__}")
    threads = []

    start_time = time.time()

    for n in range(NUM_THREADS):
        thread = Thread(target=func, args=(TZS[n::NUM_THREADS],))
        threads.append(thread)
        thread.start()

    for thread in threads:
        thread.join()

    end_time = time.time()
    print(f"Execution time: {end_time - start_time:.2f} seconds")


if __name__ == "__main__":
    main(arithmetic_in_zones)
    main(pinned_clocks)
