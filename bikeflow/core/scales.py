"""
Scales
======
Maps station traffic to visual encodings.

Scales are immutable and derived fresh from the active traffic frame on
every recomputation.
"""

import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

import pandas as pd

from ..config import (
    FLOW_BUCKETS,
    FLOW_COLORS,
    RADIUS_RANGE_ALL,
    RADIUS_RANGE_FILTERED,
    ZERO_TRAFFIC_FLOW,
)


@dataclass(frozen=True)
class SqrtScale:
    """
    Continuous square-root scale.

    Marker area, not radius, grows linearly with the input. A degenerate
    domain (both ends equal) maps everything to the start of the range.
    """

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = (math.sqrt(max(d, 0)) for d in self.domain)
        r0, r1 = self.range
        if d1 == d0:
            return float(r0)
        t = (math.sqrt(max(value, 0)) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)


@dataclass(frozen=True)
class QuantizeScale:
    """
    Uniform quantizing scale over a continuous domain.

    Missing or NaN input falls into `fallback`, which defaults to the middle
    bucket.
    """

    domain: Tuple[float, float] = (0, 1)
    range: Tuple[float, ...] = FLOW_BUCKETS
    fallback: Optional[float] = None

    @property
    def thresholds(self) -> Tuple[float, ...]:
        d0, d1 = self.domain
        n = len(self.range)
        return tuple(d0 + (i + 1) * (d1 - d0) / n for i in range(n - 1))

    def __call__(self, value: Optional[float]) -> float:
        if value is None or math.isnan(value):
            if self.fallback is not None:
                return self.fallback
            return self.range[len(self.range) // 2]
        return self.range[bisect_right(self.thresholds, value)]


class Scales(NamedTuple):
    radius: SqrtScale
    flow: QuantizeScale


def departure_ratio(departures: int, total: int) -> float:
    """Share of a station's traffic that is departures; NaN with no traffic."""
    if not total:
        return math.nan
    return departures / total


def derive_scales(traffic: pd.DataFrame, filter_active: bool) -> Scales:
    """
    Build the radius and flow scales for the active traffic frame.

    Args:
        traffic: Output of compute_station_traffic for the active trips.
        filter_active: Whether a time window is applied. Filtered views use
                       a larger range with a visible minimum size.

    Returns:
        Scales(radius, flow)
    """
    max_traffic = 0
    if not traffic.empty:
        peak = traffic['total_traffic'].max()
        max_traffic = 0 if pd.isna(peak) else int(peak)

    radius_range = RADIUS_RANGE_FILTERED if filter_active else RADIUS_RANGE_ALL
    return Scales(
        radius=SqrtScale(domain=(0, max_traffic), range=radius_range),
        flow=QuantizeScale(domain=(0, 1), range=FLOW_BUCKETS, fallback=ZERO_TRAFFIC_FLOW),
    )


def flow_color(bucket: float) -> str:
    """Fill color for a flow bucket."""
    return FLOW_COLORS[bucket]
