from __future__ import annotations

import math

import numpy as np
import pytest

from stationflow.presentation.scales import (
    UNFILTERED_RADIUS_RANGE,
    WINDOWED_RADIUS_RANGE,
    RadiusScale,
    flow_level,
    flow_levels,
    flow_ratio,
)
from stationflow.presentation.time_labels import format_minute_of_day, time_filter_label


def test_radius_scale_is_square_root():
    scale = RadiusScale(max_total_traffic=100, output_range=UNFILTERED_RADIUS_RANGE)
    assert scale(0) == pytest.approx(0.0)
    assert scale(25) == pytest.approx(12.5)
    assert scale(100) == pytest.approx(25.0)


def test_windowed_range_keeps_domain():
    base = RadiusScale(max_total_traffic=400)
    windowed = base.with_range(WINDOWED_RADIUS_RANGE)
    assert windowed.max_total_traffic == 400
    assert windowed(0) == pytest.approx(3.0)
    assert windowed(100) == pytest.approx(3.0 + 47.0 * 0.5)
    assert windowed(400) == pytest.approx(50.0)


def test_radius_scale_with_empty_domain_returns_range_minimum():
    assert RadiusScale(max_total_traffic=0)(0) == 0.0
    assert RadiusScale(max_total_traffic=0, output_range=(3, 50))(0) == 3.0


def test_vectorised_radii_match_scalar():
    scale = RadiusScale(max_total_traffic=81, output_range=(3, 50))
    totals = [0, 1, 9, 40, 81]
    np.testing.assert_allclose(scale.radii(totals), [scale(t) for t in totals])


def test_flow_level_thresholds():
    assert flow_level(0, 10) == 0.0
    assert flow_level(3, 10) == 0.0
    assert flow_level(1, 3) == 0.5
    assert flow_level(5, 10) == 0.5
    assert flow_level(2, 3) == 1.0
    assert flow_level(10, 10) == 1.0


def test_flow_level_zero_traffic_falls_back_to_zero():
    assert flow_ratio(0, 0) == 0.0
    level = flow_level(0, 0)
    assert level == 0.0
    assert not math.isnan(level)


def test_vectorised_flow_levels():
    levels = flow_levels([0, 1, 5, 9, 0], [0, 3, 10, 10, 4])
    np.testing.assert_allclose(levels, [0.0, 0.5, 0.5, 1.0, 0.0])


def test_time_labels():
    assert time_filter_label(-1) == "Any time"
    assert format_minute_of_day(0) == "12:00 AM"
    assert format_minute_of_day(545) == "9:05 AM"
    assert format_minute_of_day(720) == "12:00 PM"
    assert time_filter_label(1439) == "11:59 PM"
    with pytest.raises(ValueError):
        format_minute_of_day(-1)
