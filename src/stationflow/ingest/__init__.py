"""Loaders for the station catalog and the trip table."""

from .ingest_config import IngestPolicy, StationFlowConfig, TripColumns
from .station_catalog import load_station_catalog, stations_from_records
from .trip_ingester import IngestReport, TripIngester, load_trip_index

__all__ = [
    "IngestPolicy",
    "IngestReport",
    "StationFlowConfig",
    "TripColumns",
    "TripIngester",
    "load_station_catalog",
    "load_trip_index",
    "stations_from_records",
]
