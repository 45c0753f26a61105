"""Human-readable labels for time-filter values."""

from __future__ import annotations

from stationflow.traffic.window_filter import NO_FILTER, validate_time_filter

ANY_TIME_LABEL = "Any time"


def format_minute_of_day(minute: int) -> str:
    """Format a minute of day as a short 12-hour clock label, e.g. ``9:05 AM``."""
    minute = validate_time_filter(minute)
    if minute == NO_FILTER:
        raise ValueError("NO_FILTER has no clock time")
    hours, mins = divmod(minute, 60)
    suffix = "AM" if hours < 12 else "PM"
    return f"{hours % 12 or 12}:{mins:02d} {suffix}"


def time_filter_label(center: int) -> str:
    if validate_time_filter(center) == NO_FILTER:
        return ANY_TIME_LABEL
    return format_minute_of_day(center)


__all__ = ["ANY_TIME_LABEL", "format_minute_of_day", "time_filter_label"]
