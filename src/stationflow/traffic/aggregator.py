"""Station-level rollup of windowed departures and arrivals."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Sequence

from .domain_types import Station, Trip
from .minute_index import MinuteBucketIndex
from .window_filter import NO_FILTER, filter_by_minute, validate_time_filter

logger = logging.getLogger(__name__)


@dataclass
class TrafficCounts:
    """Station id -> trip count mapping whose lookups default to zero.

    Ids that match no catalog station are kept but never read back.
    """

    counts: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def rollup(cls, trips: Iterable[Trip], key: Callable[[Trip], str]) -> "TrafficCounts":
        counts: Dict[str, int] = {}
        for trip in trips:
            station_id = key(trip)
            counts[station_id] = counts.get(station_id, 0) + 1
        return cls(counts=counts)

    def get(self, station_id: str) -> int:
        return self.counts.get(station_id, 0)

    def __contains__(self, station_id: object) -> bool:
        return station_id in self.counts

    def __len__(self) -> int:
        return len(self.counts)

    def total(self) -> int:
        return sum(self.counts.values())


def departure_counts(index: MinuteBucketIndex, center: int = NO_FILTER) -> TrafficCounts:
    return TrafficCounts.rollup(
        filter_by_minute(index.departures, center), lambda trip: trip.start_station_id
    )


def arrival_counts(index: MinuteBucketIndex, center: int = NO_FILTER) -> TrafficCounts:
    return TrafficCounts.rollup(
        filter_by_minute(index.arrivals, center), lambda trip: trip.end_station_id
    )


def compute_station_traffic(
    stations: Sequence[Station],
    index: MinuteBucketIndex,
    center: int = NO_FILTER,
) -> List[Station]:
    """Overwrite departures/arrivals/total_traffic on every station and return them.

    Counts are computed in full before any station is touched, so an invalid
    ``center`` leaves the previous annotations in place.
    """
    center = validate_time_filter(center)
    dep = departure_counts(index, center)
    arr = arrival_counts(index, center)
    annotations = [
        (station, dep.get(station.short_name), arr.get(station.short_name))
        for station in stations
    ]
    for station, departures, arrivals in annotations:
        station.annotate(departures, arrivals)
    logger.debug(
        "Aggregated %d departures and %d arrivals over %d stations (center=%d)",
        dep.total(),
        arr.total(),
        len(annotations),
        center,
    )
    return list(stations)


def max_total_traffic(stations: Iterable[Station]) -> int:
    return max((station.total_traffic for station in stations), default=0)


__all__ = [
    "TrafficCounts",
    "arrival_counts",
    "compute_station_traffic",
    "departure_counts",
    "max_total_traffic",
]
