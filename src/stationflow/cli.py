"""Compute per-station trip traffic for one or more time-of-day windows."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, List, Sequence

import pandas as pd
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from stationflow.errors import (
    InvalidStationRecord,
    InvalidTimeFilter,
    InvalidTimestamp,
    InvalidTripRecord,
)
from stationflow.ingest.ingest_config import IngestPolicy, StationFlowConfig
from stationflow.ingest.station_catalog import load_station_catalog
from stationflow.ingest.trip_ingester import TripIngester
from stationflow.presentation.traffic_view import TrafficSnapshot, TrafficView
from stationflow.traffic.domain_types import Trip
from stationflow.traffic.minute_index import MinuteBucketIndex
from stationflow.traffic.window_filter import NO_FILTER

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        default=None,
        help="Optional YAML config; command-line flags override its values.",
    )
    parser.add_argument("--stations", default=None, help="Station catalog JSON.")
    parser.add_argument("--trips", default=None, help="Trips CSV.")
    parser.add_argument(
        "--time-filter",
        type=int,
        action="append",
        default=None,
        help=(
            "Minute of day (0-1439) to centre the 120-minute window on, or -1 for all trips. "
            "May be repeated."
        ),
    )
    parser.add_argument(
        "--on-invalid",
        choices=[policy.value for policy in IngestPolicy],
        default=None,
        help="Abort on the first malformed trip row (default) or skip and count it.",
    )
    parser.add_argument("--timestamp-format", default=None, help="strptime format for trip times.")
    parser.add_argument("--output-csv", default=None, help="Write station traffic for every filter here.")
    parser.add_argument("--top", type=int, default=10, help="Rows shown per filter in the summary table.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> StationFlowConfig:
    config = StationFlowConfig.from_yaml(args.config) if args.config else StationFlowConfig()
    if args.stations:
        config.stations_path = Path(args.stations)
    if args.trips:
        config.trips_path = Path(args.trips)
    if args.on_invalid:
        config.on_invalid = IngestPolicy.parse(args.on_invalid)
    if args.timestamp_format:
        config.timestamp_format = args.timestamp_format
    if config.stations_path is None or config.trips_path is None:
        raise SystemExit("Both a station catalog and a trips CSV are required (--stations/--trips or --config).")
    return config


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    config = build_config(args)
    try:
        stations = load_station_catalog(config.stations_path)
        ingester = TripIngester.from_csv(
            config.trips_path,
            policy=config.on_invalid,
            columns=config.columns,
            timestamp_format=config.timestamp_format,
        )
        index = _build_index_with_progress(ingester)
    except (InvalidTimestamp, InvalidTripRecord, InvalidStationRecord) as exc:
        raise SystemExit(str(exc)) from exc

    view = TrafficView(
        stations,
        index,
        unfiltered_radius_range=config.unfiltered_radius_range,
        windowed_radius_range=config.windowed_radius_range,
    )
    time_filters = args.time_filter or [NO_FILTER]
    snapshots: List[TrafficSnapshot] = []
    try:
        for value in time_filters:
            snapshots.append(view.set_time_filter(value))
    except InvalidTimeFilter as exc:
        raise SystemExit(str(exc)) from exc

    console = Console()
    for snapshot in snapshots:
        console.print(_summary_table(snapshot, args.top))
    if args.output_csv:
        frame = snapshots_to_dataframe(snapshots)
        _write_csv(args.output_csv, frame)
        logger.info("Wrote %d station rows to %s", len(frame), args.output_csv)


def snapshots_to_dataframe(snapshots: Iterable[TrafficSnapshot]) -> pd.DataFrame:
    frames = []
    for snapshot in snapshots:
        frame = snapshot.to_dataframe()
        frame.insert(0, "time_filter", snapshot.center)
        frames.append(frame)
    if not frames:
        return pd.DataFrame()
    return pd.concat(frames, ignore_index=True)


def _write_csv(path: str | Path, dataframe: pd.DataFrame) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    dataframe.to_csv(output_path, index=False)


def _build_index_with_progress(ingester: TripIngester) -> MinuteBucketIndex:
    """Bucket trips while displaying a progress bar over the trip rows."""

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        transient=True,
    )

    with progress:
        task_id = progress.add_task("Bucketing trips", total=len(ingester))

        def iter_with_progress() -> Iterable[Trip]:
            for trip in ingester.iter_trips():
                yield trip
                progress.advance(task_id)

        return ingester.build_index(iter_with_progress())


def _summary_table(snapshot: TrafficSnapshot, top: int) -> Table:
    table = Table(title=f"Station traffic: {snapshot.label} ({snapshot.mode.value})")
    for column in ("Station", "Departures", "Arrivals", "Total", "Radius", "Flow"):
        table.add_column(column, justify="left" if column == "Station" else "right")
    ranked = sorted(snapshot.stations, key=lambda row: (-row.total_traffic, row.short_name))
    for row in ranked[: max(top, 0)]:
        table.add_row(
            row.short_name,
            str(row.departures),
            str(row.arrivals),
            str(row.total_traffic),
            f"{row.radius:.1f}",
            f"{row.flow_level:g}",
        )
    return table


if __name__ == "__main__":
    main()
