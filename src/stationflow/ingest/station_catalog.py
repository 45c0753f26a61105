"""Loader for the station catalog JSON."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Iterable, List, Mapping

from stationflow.errors import InvalidStationRecord
from stationflow.traffic.domain_types import Station

logger = logging.getLogger(__name__)


def load_station_catalog(path: str | Path) -> List[Station]:
    """Read stations from a JSON list or a ``{"data": {"stations": [...]}}`` feed."""
    catalog_path = Path(path)
    if not catalog_path.exists():
        raise FileNotFoundError(f"Station catalog not found at {catalog_path}")
    with catalog_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    stations = stations_from_records(_station_entries(payload))
    logger.info("Loaded %d stations from %s", len(stations), catalog_path)
    return stations


def stations_from_records(records: Iterable[Mapping[str, object]]) -> List[Station]:
    stations: List[Station] = []
    seen = set()
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise InvalidStationRecord(f"Station entry {position} must be a mapping")
        short_name = str(record.get("short_name") or "").strip()
        if not short_name:
            raise InvalidStationRecord(f"Station entry {position} is missing 'short_name'")
        if short_name in seen:
            raise InvalidStationRecord(f"Duplicate station short_name {short_name!r}")
        seen.add(short_name)
        stations.append(
            Station(
                short_name=short_name,
                longitude=_coordinate(record, ("lon", "longitude"), short_name),
                latitude=_coordinate(record, ("lat", "latitude"), short_name),
            )
        )
    return stations


def _station_entries(payload: object) -> list:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        data = payload.get("data")
        if isinstance(data, Mapping) and isinstance(data.get("stations"), list):
            return data["stations"]
        if isinstance(payload.get("stations"), list):
            return payload["stations"]
    raise InvalidStationRecord(
        "Station catalog must be a list or contain 'stations' / 'data.stations'"
    )


def _coordinate(record: Mapping[str, object], keys: tuple, short_name: str) -> float:
    for key in keys:
        raw = record.get(key)
        if raw is None or raw == "":
            continue
        try:
            value = float(raw)
        except (TypeError, ValueError) as exc:
            raise InvalidStationRecord(
                f"Station {short_name!r} has non-numeric {key}: {raw!r}"
            ) from exc
        if not math.isfinite(value):
            raise InvalidStationRecord(f"Station {short_name!r} has non-finite {key}")
        return value
    raise InvalidStationRecord(f"Station {short_name!r} is missing {' / '.join(keys)}")


__all__ = ["load_station_catalog", "stations_from_records"]
