from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Tuple

import yaml

from stationflow.presentation.scales import UNFILTERED_RADIUS_RANGE, WINDOWED_RADIUS_RANGE

logger = logging.getLogger(__name__)


class IngestPolicy(enum.Enum):
    """What to do with a trip record whose timestamps or station ids are unusable."""

    ABORT = "abort"
    SKIP = "skip"

    @classmethod
    def parse(cls, value: "IngestPolicy | str") -> "IngestPolicy":
        if isinstance(value, cls):
            return value
        token = str(value or "").strip().lower()
        try:
            return cls(token)
        except ValueError as exc:
            choices = ", ".join(policy.value for policy in cls)
            raise ValueError(f"on_invalid must be one of {choices}, got {value!r}") from exc


@dataclass(frozen=True)
class TripColumns:
    """CSV column names for the four trip fields."""

    start_station_id: str = "start_station_id"
    end_station_id: str = "end_station_id"
    start_time: str = "started_at"
    end_time: str = "ended_at"

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> "TripColumns":
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError("'columns' must be a mapping of trip fields to CSV column names")
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown trip column keys: {sorted(unknown)}")
        values: Dict[str, str] = {}
        for key, column in data.items():
            if not isinstance(column, str) or not column.strip():
                raise ValueError(f"Column name for {key!r} must be a non-empty string")
            values[key] = column.strip()
        return cls(**values)

    def as_dict(self) -> Dict[str, str]:
        return {
            "start_station_id": self.start_station_id,
            "end_station_id": self.end_station_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }


def _parse_radius_range(value: object, label: str) -> Tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"{label} must be a two-element [min, max] list")
    low, high = float(value[0]), float(value[1])
    if low < 0 or high < low:
        raise ValueError(f"{label} must satisfy 0 <= min <= max, got [{low}, {high}]")
    return low, high


@dataclass
class StationFlowConfig:
    stations_path: Path | None = None
    trips_path: Path | None = None
    on_invalid: IngestPolicy = IngestPolicy.ABORT
    timestamp_format: str | None = None
    columns: TripColumns = field(default_factory=TripColumns)
    unfiltered_radius_range: Tuple[float, float] = UNFILTERED_RADIUS_RANGE
    windowed_radius_range: Tuple[float, float] = WINDOWED_RADIUS_RANGE

    @classmethod
    def from_yaml(cls, path: str | Path) -> "StationFlowConfig":
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config YAML not found at {config_path}")
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, Mapping):
            raise TypeError("Config YAML must contain a mapping at the top level")
        return cls.from_mapping(data, base_dir=config_path.parent)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, object], *, base_dir: Path | None = None
    ) -> "StationFlowConfig":
        """Build a config; relative paths resolve against ``base_dir`` when given."""
        known = {
            "stations",
            "trips",
            "on_invalid",
            "timestamp_format",
            "columns",
            "unfiltered_radius_range",
            "windowed_radius_range",
        }
        for key in data:
            if key not in known:
                logger.warning("Ignoring unknown config key %r", key)

        timestamp_format = data.get("timestamp_format")
        if timestamp_format is not None and not isinstance(timestamp_format, str):
            raise TypeError("timestamp_format must be a strptime format string")

        config = cls(
            stations_path=_resolve_path(data.get("stations"), base_dir),
            trips_path=_resolve_path(data.get("trips"), base_dir),
            on_invalid=IngestPolicy.parse(data.get("on_invalid", IngestPolicy.ABORT.value)),
            timestamp_format=timestamp_format or None,
            columns=TripColumns.from_mapping(data.get("columns")),
        )
        if "unfiltered_radius_range" in data:
            config.unfiltered_radius_range = _parse_radius_range(
                data["unfiltered_radius_range"], "unfiltered_radius_range"
            )
        if "windowed_radius_range" in data:
            config.windowed_radius_range = _parse_radius_range(
                data["windowed_radius_range"], "windowed_radius_range"
            )
        return config

    def to_yaml(self, path: str | Path) -> None:
        output: Dict[str, object] = {
            "on_invalid": self.on_invalid.value,
            "columns": self.columns.as_dict(),
            "unfiltered_radius_range": [float(v) for v in self.unfiltered_radius_range],
            "windowed_radius_range": [float(v) for v in self.windowed_radius_range],
        }
        if self.stations_path is not None:
            output["stations"] = str(self.stations_path)
        if self.trips_path is not None:
            output["trips"] = str(self.trips_path)
        if self.timestamp_format:
            output["timestamp_format"] = self.timestamp_format
        dest = Path(path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        with dest.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(output, handle, sort_keys=True)


def _resolve_path(value: object, base_dir: Path | None) -> Path | None:
    if value is None:
        return None
    path = Path(str(value)).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return path


__all__ = ["IngestPolicy", "StationFlowConfig", "TripColumns"]
