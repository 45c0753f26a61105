"""Parse trip records and bucket them into a :class:`MinuteBucketIndex`."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Mapping

import pandas as pd

from stationflow.errors import InvalidTimestamp, InvalidTripRecord
from stationflow.traffic.domain_types import Trip
from stationflow.traffic.minute_index import MinuteBucketIndex

from .ingest_config import IngestPolicy, TripColumns

logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    """Row counts gathered while parsing a trip table."""

    total_rows: int = 0
    accepted: int = 0
    skipped_timestamps: int = 0
    skipped_missing_ids: int = 0
    first_errors: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return self.skipped_timestamps + self.skipped_missing_ids

    def _note(self, message: str, limit: int = 5) -> None:
        if len(self.first_errors) < limit:
            self.first_errors.append(message)


class TripIngester:
    """Validates a trip table and yields :class:`Trip` records.

    With :attr:`IngestPolicy.ABORT` the first unparseable timestamp raises
    :class:`InvalidTimestamp` (and a row with an empty station id raises
    :class:`InvalidTripRecord`). With :attr:`IngestPolicy.SKIP` such rows are
    dropped and counted in :attr:`report`.
    """

    def __init__(
        self,
        frame: pd.DataFrame,
        *,
        policy: IngestPolicy | str = IngestPolicy.ABORT,
        columns: TripColumns | None = None,
        timestamp_format: str | None = None,
        source: str = "<records>",
    ):
        self.policy = IngestPolicy.parse(policy)
        self.columns = columns or TripColumns()
        self.timestamp_format = timestamp_format
        self.source = source
        self.report = IngestReport()
        missing = [name for name in self.columns.as_dict().values() if name not in frame.columns]
        if missing:
            raise InvalidTripRecord(f"Trip data from {source} is missing columns: {missing}")
        self._frame = frame

    # ------------------------------------------------------------------ builders
    @classmethod
    def from_csv(
        cls,
        path: str | Path,
        *,
        policy: IngestPolicy | str = IngestPolicy.ABORT,
        columns: TripColumns | None = None,
        timestamp_format: str | None = None,
    ) -> "TripIngester":
        csv_path = Path(path)
        if not csv_path.exists():
            raise FileNotFoundError(f"Trips CSV not found at {csv_path}")
        columns = columns or TripColumns()
        frame = pd.read_csv(
            csv_path,
            usecols=lambda name: name in set(columns.as_dict().values()),
            dtype=str,
            keep_default_na=False,
        )
        return cls(
            frame,
            policy=policy,
            columns=columns,
            timestamp_format=timestamp_format,
            source=str(csv_path),
        )

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, object]],
        *,
        policy: IngestPolicy | str = IngestPolicy.ABORT,
        columns: TripColumns | None = None,
        timestamp_format: str | None = None,
    ) -> "TripIngester":
        columns = columns or TripColumns()
        frame = pd.DataFrame(list(records), columns=list(columns.as_dict().values()))
        return cls(frame, policy=policy, columns=columns, timestamp_format=timestamp_format)

    # --------------------------------------------------------------------- API
    def __len__(self) -> int:
        return len(self._frame)

    def iter_trips(self) -> Iterator[Trip]:
        """Yield valid trips in file order, applying the ingest policy to bad rows."""
        cols = self.columns
        self.report = IngestReport(total_rows=len(self._frame))
        start_ids = _normalize_ids(self._frame[cols.start_station_id])
        end_ids = _normalize_ids(self._frame[cols.end_station_id])
        start_times = self._parse_times(self._frame[cols.start_time])
        end_times = self._parse_times(self._frame[cols.end_time])

        for row_number, (start_id, end_id, started, ended, raw_start, raw_end) in enumerate(
            zip(
                start_ids,
                end_ids,
                start_times,
                end_times,
                self._frame[cols.start_time],
                self._frame[cols.end_time],
            ),
            start=1,
        ):
            if pd.isna(started) or pd.isna(ended):
                raw = raw_start if pd.isna(started) else raw_end
                label = cols.start_time if pd.isna(started) else cols.end_time
                message = f"Row {row_number} of {self.source}: cannot parse {label}={raw!r}"
                if self.policy is IngestPolicy.ABORT:
                    raise InvalidTimestamp(message, row_number=row_number, value=raw)
                self.report.skipped_timestamps += 1
                self.report._note(message)
                continue
            if not start_id or not end_id:
                message = f"Row {row_number} of {self.source}: missing station id"
                if self.policy is IngestPolicy.ABORT:
                    raise InvalidTripRecord(message)
                self.report.skipped_missing_ids += 1
                self.report._note(message)
                continue
            self.report.accepted += 1
            yield Trip(
                start_station_id=start_id,
                end_station_id=end_id,
                start_time=pd.Timestamp(started).to_pydatetime(),
                end_time=pd.Timestamp(ended).to_pydatetime(),
            )
        self._log_report()

    def build_index(self, trips: Iterable[Trip] | None = None) -> MinuteBucketIndex:
        """Bucket ``trips`` (default: :meth:`iter_trips`) into a frozen index."""
        return MinuteBucketIndex.build(self.iter_trips() if trips is None else trips)

    # ----------------------------------------------------------------- helpers
    def _parse_times(self, values: pd.Series) -> pd.Series:
        """Parse timestamps so each value keeps its own wall-clock time and offset."""
        fmt = self.timestamp_format or "ISO8601"
        try:
            return pd.to_datetime(values, format=fmt, errors="coerce")
        except ValueError:
            # Offsets differ across rows (DST change); parse value by value.
            return values.map(lambda value: pd.to_datetime(value, format=fmt, errors="coerce"))

    def _log_report(self) -> None:
        report = self.report
        logger.info(
            "Parsed %d of %d trip rows from %s", report.accepted, report.total_rows, self.source
        )
        if report.skipped:
            logger.warning(
                "Skipped %d trip rows (%d bad timestamps, %d missing station ids); first: %s",
                report.skipped,
                report.skipped_timestamps,
                report.skipped_missing_ids,
                "; ".join(report.first_errors),
            )


def load_trip_index(
    path: str | Path,
    *,
    policy: IngestPolicy | str = IngestPolicy.ABORT,
    columns: TripColumns | None = None,
    timestamp_format: str | None = None,
) -> MinuteBucketIndex:
    """Read a trips CSV and return the frozen minute index."""
    ingester = TripIngester.from_csv(
        path, policy=policy, columns=columns, timestamp_format=timestamp_format
    )
    return ingester.build_index()


def _normalize_ids(values: pd.Series) -> List[str]:
    return ["" if pd.isna(value) else str(value).strip() for value in values]


__all__ = ["IngestReport", "TripIngester", "load_trip_index"]
