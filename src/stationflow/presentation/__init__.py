"""Presentation-side scales and snapshot publishing."""

from .scales import (
    FLOW_LEVELS,
    UNFILTERED_RADIUS_RANGE,
    WINDOWED_RADIUS_RANGE,
    RadiusScale,
    flow_level,
    flow_levels,
    flow_ratio,
)
from .time_labels import ANY_TIME_LABEL, format_minute_of_day, time_filter_label
from .traffic_view import FilterMode, StationTraffic, TrafficSnapshot, TrafficView

__all__ = [
    "ANY_TIME_LABEL",
    "FLOW_LEVELS",
    "FilterMode",
    "RadiusScale",
    "StationTraffic",
    "TrafficSnapshot",
    "TrafficView",
    "UNFILTERED_RADIUS_RANGE",
    "WINDOWED_RADIUS_RANGE",
    "flow_level",
    "flow_levels",
    "flow_ratio",
    "format_minute_of_day",
    "time_filter_label",
]
