from __future__ import annotations

from datetime import datetime

import pytest

from stationflow.traffic.domain_types import Trip, minutes_since_midnight
from stationflow.traffic.minute_index import MinuteBucketIndex


def _trip(start_id: str, end_id: str, start: tuple[int, int], end: tuple[int, int], day: int = 1) -> Trip:
    return Trip(
        start_station_id=start_id,
        end_station_id=end_id,
        start_time=datetime(2024, 3, day, *start),
        end_time=datetime(2024, 3, day, *end),
    )


def test_minutes_since_midnight_ignores_date_and_seconds():
    assert minutes_since_midnight(datetime(2024, 3, 1, 0, 0, 59)) == 0
    assert minutes_since_midnight(datetime(2024, 3, 17, 23, 59)) == 1439
    assert minutes_since_midnight(datetime(2023, 1, 1, 13, 7)) == 787


def test_every_trip_lands_in_exactly_one_slot_per_ring():
    trips = [
        _trip("A", "B", (0, 5), (0, 20)),
        _trip("B", "A", (23, 58), (0, 10), day=2),
        _trip("C", "C", (12, 0), (12, 45)),
        _trip("A", "C", (12, 0), (13, 1)),
    ]
    index = MinuteBucketIndex.build(trips)

    for trip in trips:
        dep_hits = [m for m in range(1440) if any(t is trip for t in index.departures.slot(m))]
        arr_hits = [m for m in range(1440) if any(t is trip for t in index.arrivals.slot(m))]
        assert dep_hits == [trip.start_minute]
        assert arr_hits == [trip.end_minute]
    assert index.num_trips == 4
    assert len(index.arrivals) == 4


def test_slots_keep_insertion_order():
    first = _trip("A", "B", (8, 0), (8, 10))
    second = _trip("C", "D", (8, 0), (8, 30))
    index = MinuteBucketIndex.build([first, second])
    assert index.departures.slot(480) == (first, second)


def test_slice_range_is_half_open_and_ascending():
    late = _trip("A", "B", (10, 0), (10, 5))
    early = _trip("C", "D", (9, 0), (9, 5))
    boundary = _trip("E", "F", (11, 0), (11, 5))
    index = MinuteBucketIndex.build([late, early, boundary])

    result = index.departures.slice_range(540, 660)
    assert result == [early, late]
    assert index.departures.slice_range(660, 660) == []
    assert index.departures.all() == [early, late, boundary]


def test_slice_range_rejects_out_of_bounds():
    index = MinuteBucketIndex.build([])
    with pytest.raises(ValueError):
        index.departures.slice_range(-1, 10)
    with pytest.raises(ValueError):
        index.departures.slice_range(0, 1441)


def test_frozen_index_rejects_inserts():
    index = MinuteBucketIndex.build([_trip("A", "B", (1, 0), (1, 5))])
    assert index.frozen
    with pytest.raises(RuntimeError):
        index.insert(_trip("A", "B", (2, 0), (2, 5)))
    assert index.num_trips == 1


def test_counts_per_minute_matches_ring_length():
    trips = [_trip("A", "B", (h, 0), (h, 30)) for h in range(24)]
    index = MinuteBucketIndex.build(trips)
    counts = index.arrivals.counts_per_minute()
    assert len(counts) == 1440
    assert sum(counts) == len(index.arrivals) == 24
    assert counts[30] == 1
