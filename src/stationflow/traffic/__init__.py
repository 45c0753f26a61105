"""Traffic package exports."""

from .aggregator import TrafficCounts, compute_station_traffic, max_total_traffic
from .domain_types import MINUTES_PER_DAY, Station, Trip, minutes_since_midnight
from .minute_index import MinuteBucketIndex, MinuteRing
from .window_filter import NO_FILTER, filter_by_minute, validate_time_filter, window_bounds

__all__ = [
    "MINUTES_PER_DAY",
    "MinuteBucketIndex",
    "MinuteRing",
    "NO_FILTER",
    "Station",
    "TrafficCounts",
    "Trip",
    "compute_station_traffic",
    "filter_by_minute",
    "max_total_traffic",
    "minutes_since_midnight",
    "validate_time_filter",
    "window_bounds",
]
