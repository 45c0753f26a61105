from __future__ import annotations

import json

import pytest

from stationflow.errors import InvalidStationRecord
from stationflow.ingest.station_catalog import load_station_catalog, stations_from_records


def test_loads_nested_feed(tmp_path):
    path = tmp_path / "stations.json"
    path.write_text(
        json.dumps(
            {
                "data": {
                    "stations": [
                        {"short_name": "A32000", "lon": "-71.0941", "lat": "42.3602", "name": "MIT"},
                        {"short_name": "B32001", "lon": -71.1, "lat": 42.35},
                    ]
                }
            }
        ),
        encoding="utf-8",
    )
    stations = load_station_catalog(path)
    assert [s.short_name for s in stations] == ["A32000", "B32001"]
    assert stations[0].longitude == pytest.approx(-71.0941)
    assert stations[0].latitude == pytest.approx(42.3602)
    assert (stations[0].departures, stations[0].arrivals, stations[0].total_traffic) == (0, 0, 0)


def test_accepts_plain_list_with_long_names(tmp_path):
    path = tmp_path / "stations.json"
    path.write_text(json.dumps([{"short_name": "X", "longitude": 1.5, "latitude": 2.5}]), encoding="utf-8")
    (station,) = load_station_catalog(path)
    assert (station.longitude, station.latitude) == (1.5, 2.5)


@pytest.mark.parametrize(
    "records",
    [
        [{"lon": 1, "lat": 2}],
        [{"short_name": "A", "lat": 2}],
        [{"short_name": "A", "lon": "east", "lat": 2}],
        [{"short_name": "A", "lon": 1, "lat": 2}, {"short_name": "A", "lon": 3, "lat": 4}],
    ],
)
def test_invalid_station_records(records):
    with pytest.raises(InvalidStationRecord):
        stations_from_records(records)


def test_unrecognised_payload(tmp_path):
    path = tmp_path / "stations.json"
    path.write_text(json.dumps({"data": {}}), encoding="utf-8")
    with pytest.raises(InvalidStationRecord):
        load_station_catalog(path)
