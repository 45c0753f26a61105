"""Circular time-of-day window over a minute ring."""

from __future__ import annotations

import numbers
from typing import List

from stationflow.errors import InvalidTimeFilter

from .domain_types import MINUTES_PER_DAY, Trip
from .minute_index import MinuteRing

NO_FILTER = -1
WINDOW_HALF_WIDTH_MINUTES = 60


def validate_time_filter(value: object) -> int:
    """Return ``value`` as an int if it is ``NO_FILTER`` or a minute of day.

    Raises :class:`InvalidTimeFilter` for anything else, including bools and
    non-integral numbers.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidTimeFilter(value)
    if isinstance(value, numbers.Integral):
        minute = int(value)
    else:
        if not float(value).is_integer():
            raise InvalidTimeFilter(value)
        minute = int(value)
    if minute != NO_FILTER and not 0 <= minute < MINUTES_PER_DAY:
        raise InvalidTimeFilter(value)
    return minute


def window_bounds(center: int) -> tuple[int, int]:
    """Return ``(lo, hi)`` slot bounds for a window centred on ``center``.

    The window covers ``center - 60`` through ``center + 59``; ``hi`` is
    exclusive. ``lo > hi`` means the window straddles midnight.
    """
    lo = (center - WINDOW_HALF_WIDTH_MINUTES + MINUTES_PER_DAY) % MINUTES_PER_DAY
    hi = (center + WINDOW_HALF_WIDTH_MINUTES) % MINUTES_PER_DAY
    return lo, hi


def filter_by_minute(ring: MinuteRing, center: int) -> List[Trip]:
    """Return the trips of ``ring`` that fall inside the window around ``center``.

    ``NO_FILTER`` returns every trip. Output is in slot order starting at the
    window's lower bound, not chronological order.
    """
    center = validate_time_filter(center)
    if center == NO_FILTER:
        return ring.all()
    lo, hi = window_bounds(center)
    if lo > hi:
        return ring.slice_range(lo, MINUTES_PER_DAY) + ring.slice_range(0, hi)
    return ring.slice_range(lo, hi)


__all__ = [
    "NO_FILTER",
    "WINDOW_HALF_WIDTH_MINUTES",
    "filter_by_minute",
    "validate_time_filter",
    "window_bounds",
]
