"""Core records shared across the traffic package."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

MINUTES_PER_DAY = 1440


def minutes_since_midnight(value: datetime) -> int:
    """Return the minute of day (0-1439) of a wall-clock timestamp."""
    return (value.hour * 60 + value.minute) % MINUTES_PER_DAY


@dataclass(frozen=True)
class Trip:
    """Single bike trip between two stations."""

    start_station_id: str
    end_station_id: str
    start_time: datetime
    end_time: datetime

    @property
    def start_minute(self) -> int:
        return minutes_since_midnight(self.start_time)

    @property
    def end_minute(self) -> int:
        return minutes_since_midnight(self.end_time)


@dataclass(eq=False)
class Station:
    """Catalog station re-annotated with traffic counts on every query.

    Identity is ``short_name``; the three count fields are overwritten by each
    aggregation and never accumulated.
    """

    short_name: str
    longitude: float
    latitude: float
    departures: int = 0
    arrivals: int = 0
    total_traffic: int = 0

    def annotate(self, departures: int, arrivals: int) -> None:
        self.departures = int(departures)
        self.arrivals = int(arrivals)
        self.total_traffic = self.departures + self.arrivals

    def __hash__(self) -> int:  # pragma: no cover - trivial
        return hash(self.short_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Station):
            return NotImplemented
        return self.short_name == other.short_name


__all__ = ["MINUTES_PER_DAY", "Station", "Trip", "minutes_since_midnight"]
