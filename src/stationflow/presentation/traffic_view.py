"""Filter-mode state machine that publishes immutable traffic snapshots.

:class:`TrafficView` owns the station list and the frozen
:class:`~stationflow.traffic.minute_index.MinuteBucketIndex`. Every call to
:meth:`TrafficView.set_time_filter` validates the control value, re-runs the
aggregation for the new window and pushes a :class:`TrafficSnapshot` to each
subscriber. A rejected control value raises before anything is recomputed, so
the stations and the current snapshot stay as they were.

Example
-------
>>> view = TrafficView(stations, index)
>>> view.subscribe(lambda snapshot: print(snapshot.label, len(snapshot.stations)))
>>> view.set_time_filter(8 * 60)   # windowed around 8:00 AM
>>> view.set_time_filter(NO_FILTER)  # back to unfiltered
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

import pandas as pd

from stationflow.traffic.aggregator import compute_station_traffic, max_total_traffic
from stationflow.traffic.domain_types import Station
from stationflow.traffic.minute_index import MinuteBucketIndex
from stationflow.traffic.window_filter import NO_FILTER, validate_time_filter

from .scales import UNFILTERED_RADIUS_RANGE, WINDOWED_RADIUS_RANGE, RadiusScale, flow_level
from .time_labels import time_filter_label

logger = logging.getLogger(__name__)

SnapshotListener = Callable[["TrafficSnapshot"], None]


class FilterMode(enum.Enum):
    UNFILTERED = "unfiltered"
    WINDOWED = "windowed"

    @classmethod
    def for_center(cls, center: int) -> "FilterMode":
        return cls.UNFILTERED if center == NO_FILTER else cls.WINDOWED


@dataclass(frozen=True)
class StationTraffic:
    """Per-station payload consumed by the renderer."""

    short_name: str
    longitude: float
    latitude: float
    departures: int
    arrivals: int
    total_traffic: int
    radius: float
    flow_level: float

    def describe(self) -> str:
        return (
            f"{self.total_traffic} trips "
            f"({self.departures} departures, {self.arrivals} arrivals)"
        )


@dataclass(frozen=True)
class TrafficSnapshot:
    """Immutable result of one aggregation run."""

    mode: FilterMode
    center: int
    radius_scale: RadiusScale
    stations: Tuple[StationTraffic, ...]

    @property
    def label(self) -> str:
        return time_filter_label(self.center)

    def by_station(self) -> Dict[str, StationTraffic]:
        return {row.short_name: row for row in self.stations}

    def to_dataframe(self) -> pd.DataFrame:
        columns = [
            "short_name",
            "longitude",
            "latitude",
            "departures",
            "arrivals",
            "total_traffic",
            "radius",
            "flow_level",
        ]
        if not self.stations:
            return pd.DataFrame(columns=columns)
        rows = [{column: getattr(row, column) for column in columns} for row in self.stations]
        return pd.DataFrame(rows, columns=columns)


class TrafficView:
    """Unfiltered/windowed state machine over a frozen minute index."""

    def __init__(
        self,
        stations: Sequence[Station],
        index: MinuteBucketIndex,
        *,
        unfiltered_radius_range: Tuple[float, float] = UNFILTERED_RADIUS_RANGE,
        windowed_radius_range: Tuple[float, float] = WINDOWED_RADIUS_RANGE,
    ) -> None:
        if not index.frozen:
            raise ValueError("TrafficView requires a frozen MinuteBucketIndex")
        self._stations: List[Station] = list(stations)
        self._index = index
        self._unfiltered_range = tuple(unfiltered_radius_range)
        self._windowed_range = tuple(windowed_radius_range)
        self._listeners: List[SnapshotListener] = []

        compute_station_traffic(self._stations, self._index, NO_FILTER)
        # The radius domain is fixed by the unfiltered totals.
        self._base_scale = RadiusScale(max_total_traffic=max_total_traffic(self._stations))
        self._snapshot = self._build_snapshot(NO_FILTER)

    # ---------------------------------------------------------------- properties
    @property
    def snapshot(self) -> TrafficSnapshot:
        return self._snapshot

    @property
    def mode(self) -> FilterMode:
        return self._snapshot.mode

    @property
    def center(self) -> int:
        return self._snapshot.center

    @property
    def stations(self) -> List[Station]:
        return list(self._stations)

    @property
    def max_total_traffic(self) -> int:
        return self._base_scale.max_total_traffic

    # ---------------------------------------------------------------- observers
    def subscribe(self, listener: SnapshotListener, *, replay: bool = True) -> None:
        """Register ``listener``; by default it immediately receives the current snapshot."""
        self._listeners.append(listener)
        if replay:
            listener(self._snapshot)

    def unsubscribe(self, listener: SnapshotListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError as exc:
            raise KeyError("Listener is not subscribed") from exc

    # --------------------------------------------------------------- transitions
    def set_time_filter(self, value: object) -> TrafficSnapshot:
        """Switch to ``value`` (``-1`` or a minute of day) and publish the new snapshot."""
        center = validate_time_filter(value)
        compute_station_traffic(self._stations, self._index, center)
        self._snapshot = self._build_snapshot(center)
        logger.debug("Time filter set to %s (%s)", self._snapshot.label, self._snapshot.mode.value)
        for listener in list(self._listeners):
            listener(self._snapshot)
        return self._snapshot

    def radius_scale_for(self, mode: FilterMode) -> RadiusScale:
        if mode is FilterMode.UNFILTERED:
            return self._base_scale.with_range(self._unfiltered_range)
        return self._base_scale.with_range(self._windowed_range)

    # ------------------------------------------------------------------ helpers
    def _build_snapshot(self, center: int) -> TrafficSnapshot:
        mode = FilterMode.for_center(center)
        scale = self.radius_scale_for(mode)
        rows = tuple(
            StationTraffic(
                short_name=station.short_name,
                longitude=station.longitude,
                latitude=station.latitude,
                departures=station.departures,
                arrivals=station.arrivals,
                total_traffic=station.total_traffic,
                radius=scale(station.total_traffic),
                flow_level=flow_level(station.departures, station.total_traffic),
            )
            for station in self._stations
        )
        return TrafficSnapshot(mode=mode, center=center, radius_scale=scale, stations=rows)


__all__ = ["FilterMode", "StationTraffic", "TrafficSnapshot", "TrafficView"]
