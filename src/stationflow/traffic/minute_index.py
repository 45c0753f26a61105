"""Minute-of-day bucket rings used for windowed traffic queries."""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from .domain_types import MINUTES_PER_DAY, Trip

logger = logging.getLogger(__name__)


class MinuteRing:
    """Fixed ring of 1440 slots, one per minute of day, holding trips in insertion order."""

    def __init__(self, name: str):
        self.name = name
        self._slots: List[List[Trip]] = [[] for _ in range(MINUTES_PER_DAY)]
        self._size = 0
        self._frozen = False

    # ----------------------------------------------------------------- building
    def _append(self, minute: int, trip: Trip) -> None:
        if self._frozen:
            raise RuntimeError(f"{self.name} ring is frozen; no further inserts allowed")
        self._slots[_check_minute(minute)].append(trip)
        self._size += 1

    def _freeze(self) -> None:
        self._frozen = True

    # ---------------------------------------------------------------- properties
    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return self._size

    # ------------------------------------------------------------------ queries
    def slot(self, minute: int) -> Tuple[Trip, ...]:
        return tuple(self._slots[_check_minute(minute)])

    def slice_range(self, lo: int, hi: int) -> List[Trip]:
        """Concatenate slots ``[lo, hi)`` in ascending order, without wraparound."""
        if not 0 <= lo <= MINUTES_PER_DAY or not 0 <= hi <= MINUTES_PER_DAY:
            raise ValueError(f"Slot bounds must lie in [0, {MINUTES_PER_DAY}], got ({lo}, {hi})")
        result: List[Trip] = []
        for bucket in self._slots[lo:hi]:
            result.extend(bucket)
        return result

    def all(self) -> List[Trip]:
        return self.slice_range(0, MINUTES_PER_DAY)

    def counts_per_minute(self) -> List[int]:
        return [len(bucket) for bucket in self._slots]


class MinuteBucketIndex:
    """Departure and arrival rings built once at load time and then frozen."""

    def __init__(self, trips: Iterable[Trip] = ()):
        self.departures = MinuteRing("departure")
        self.arrivals = MinuteRing("arrival")
        for trip in trips:
            self.insert(trip)

    @classmethod
    def build(cls, trips: Iterable[Trip]) -> "MinuteBucketIndex":
        """Bucket every trip and return the frozen index."""
        index = cls(trips)
        index.freeze()
        logger.info("Bucketed %d trips into %d minute slots", index.num_trips, MINUTES_PER_DAY)
        return index

    def insert(self, trip: Trip) -> None:
        start_minute = trip.start_minute
        end_minute = trip.end_minute
        _check_minute(start_minute)
        _check_minute(end_minute)
        self.departures._append(start_minute, trip)
        self.arrivals._append(end_minute, trip)

    def freeze(self) -> None:
        self.departures._freeze()
        self.arrivals._freeze()

    @property
    def frozen(self) -> bool:
        return self.departures.frozen and self.arrivals.frozen

    @property
    def num_trips(self) -> int:
        return len(self.departures)


def _check_minute(minute: int) -> int:
    if not 0 <= minute < MINUTES_PER_DAY:
        raise ValueError(f"Minute of day must lie in [0, {MINUTES_PER_DAY - 1}], got {minute}")
    return minute


__all__ = ["MinuteBucketIndex", "MinuteRing"]
