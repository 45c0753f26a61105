"""Minute-bucketed station traffic statistics."""

from .errors import InvalidStationRecord, InvalidTimeFilter, InvalidTimestamp, InvalidTripRecord
from .traffic import (
    NO_FILTER,
    MinuteBucketIndex,
    Station,
    Trip,
    compute_station_traffic,
    filter_by_minute,
)

__all__ = [
    "InvalidStationRecord",
    "InvalidTimeFilter",
    "InvalidTimestamp",
    "InvalidTripRecord",
    "MinuteBucketIndex",
    "NO_FILTER",
    "Station",
    "Trip",
    "compute_station_traffic",
    "filter_by_minute",
]
