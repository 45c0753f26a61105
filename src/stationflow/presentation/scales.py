"""Numeric scales handed to the rendering side."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

UNFILTERED_RADIUS_RANGE: Tuple[float, float] = (0.0, 25.0)
WINDOWED_RADIUS_RANGE: Tuple[float, float] = (3.0, 50.0)

FLOW_LEVELS: Tuple[float, ...] = (0.0, 0.5, 1.0)
_FLOW_THRESHOLDS = np.array([1.0 / 3.0, 2.0 / 3.0])


@dataclass(frozen=True)
class RadiusScale:
    """Square-root scale from ``[0, max_total_traffic]`` onto a pixel range.

    ``max_total_traffic`` comes from the unfiltered aggregation and stays
    fixed; only the output range changes between filter modes.
    """

    max_total_traffic: int
    output_range: Tuple[float, float] = UNFILTERED_RADIUS_RANGE

    def __post_init__(self) -> None:
        if self.max_total_traffic < 0:
            raise ValueError("max_total_traffic must be non-negative")
        low, high = self.output_range
        object.__setattr__(self, "output_range", (float(low), float(high)))

    def with_range(self, radius_range: Tuple[float, float]) -> "RadiusScale":
        return RadiusScale(max_total_traffic=self.max_total_traffic, output_range=radius_range)

    def __call__(self, total_traffic: float) -> float:
        low, high = self.output_range
        if self.max_total_traffic == 0:
            return low
        fraction = math.sqrt(max(float(total_traffic), 0.0)) / math.sqrt(self.max_total_traffic)
        return low + (high - low) * fraction

    def radii(self, totals: Sequence[float]) -> np.ndarray:
        """Vectorised version of :meth:`__call__`."""
        values = np.clip(np.asarray(totals, dtype=float), 0.0, None)
        low, high = self.output_range
        if self.max_total_traffic == 0:
            return np.full(values.shape, low)
        return low + (high - low) * np.sqrt(values) / math.sqrt(self.max_total_traffic)


def flow_ratio(departures: int, total_traffic: int) -> float:
    """Share of traffic that departs; 0.0 when the station saw no trips."""
    if total_traffic <= 0:
        return 0.0
    return departures / total_traffic


def flow_level(departures: int, total_traffic: int) -> float:
    """Quantise the departure share into 0, 0.5 or 1 (thresholds at 1/3 and 2/3)."""
    ratio = flow_ratio(departures, total_traffic)
    return FLOW_LEVELS[int(np.digitize(ratio, _FLOW_THRESHOLDS))]


def flow_levels(departures: Sequence[int], totals: Sequence[int]) -> np.ndarray:
    dep = np.asarray(departures, dtype=float)
    tot = np.asarray(totals, dtype=float)
    ratios = np.divide(dep, tot, out=np.zeros_like(dep), where=tot > 0)
    ratios = np.clip(ratios, 0.0, 1.0)
    return np.asarray(FLOW_LEVELS)[np.digitize(ratios, _FLOW_THRESHOLDS)]


__all__ = [
    "FLOW_LEVELS",
    "RadiusScale",
    "UNFILTERED_RADIUS_RANGE",
    "WINDOWED_RADIUS_RANGE",
    "flow_level",
    "flow_levels",
    "flow_ratio",
]
