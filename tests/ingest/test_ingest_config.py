from __future__ import annotations

import textwrap

import pytest

from stationflow.ingest.ingest_config import IngestPolicy, StationFlowConfig, TripColumns


def test_config_roundtrip(tmp_path):
    yaml_text = textwrap.dedent(
        """
        stations: data/stations.json
        trips: data/trips.csv
        on_invalid: skip
        timestamp_format: '%Y-%m-%d %H:%M:%S'
        columns:
          start_time: start_ts
          end_time: end_ts
        windowed_radius_range: [2, 40]
        """
    ).strip()
    config_path = tmp_path / "stationflow.yaml"
    config_path.write_text(yaml_text, encoding="utf-8")

    config = StationFlowConfig.from_yaml(config_path)
    assert config.stations_path == tmp_path / "data" / "stations.json"
    assert config.trips_path == tmp_path / "data" / "trips.csv"
    assert config.on_invalid is IngestPolicy.SKIP
    assert config.columns.start_time == "start_ts"
    assert config.columns.start_station_id == "start_station_id"
    assert config.unfiltered_radius_range == (0.0, 25.0)
    assert config.windowed_radius_range == (2.0, 40.0)

    roundtrip_path = tmp_path / "out" / "roundtrip.yaml"
    config.to_yaml(roundtrip_path)
    roundtrip = StationFlowConfig.from_yaml(roundtrip_path)
    assert roundtrip.stations_path == config.stations_path
    assert roundtrip.columns == config.columns
    assert roundtrip.timestamp_format == config.timestamp_format
    assert roundtrip.windowed_radius_range == (2.0, 40.0)


def test_defaults_follow_abort_policy():
    config = StationFlowConfig.from_mapping({})
    assert config.on_invalid is IngestPolicy.ABORT
    assert config.columns == TripColumns()
    assert config.stations_path is None


@pytest.mark.parametrize(
    "data",
    [
        {"on_invalid": "retry"},
        {"columns": {"start_time": ""}},
        {"columns": {"duration": "x"}},
        {"windowed_radius_range": [50, 3]},
        {"unfiltered_radius_range": [1]},
    ],
)
def test_invalid_config_values(data):
    with pytest.raises(ValueError):
        StationFlowConfig.from_mapping(data)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        StationFlowConfig.from_yaml(tmp_path / "nope.yaml")
