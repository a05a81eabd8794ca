"""Tests for radius and flow scales."""

import math

import pytest

from bikeflow.config import FLOW_BUCKETS, FLOW_COLORS
from bikeflow.core.scales import QuantizeScale, SqrtScale, departure_ratio, derive_scales, flow_color
from bikeflow.core.traffic import compute_station_traffic

from conftest import make_trips


def test_radius_is_zero_for_zero_traffic_without_filter() -> None:
    scale = SqrtScale(domain=(0, 100), range=(0, 25))

    assert scale(0) == 0
    assert scale(100) == pytest.approx(25)


def test_radius_starts_at_range_minimum_with_filter() -> None:
    scale = SqrtScale(domain=(0, 100), range=(3, 50))

    assert scale(0) == 3
    assert scale(100) == pytest.approx(50)


def test_radius_is_monotonic() -> None:
    scale = SqrtScale(domain=(0, 500), range=(0, 25))
    radii = [scale(v) for v in range(0, 501, 5)]

    assert all(a <= b for a, b in zip(radii, radii[1:]))


def test_area_grows_linearly_with_traffic() -> None:
    scale = SqrtScale(domain=(0, 400), range=(0, 25))

    assert scale(400) == pytest.approx(2 * scale(100))


def test_degenerate_domain_maps_to_range_minimum() -> None:
    assert SqrtScale(domain=(0, 0), range=(0, 25))(0) == 0
    assert SqrtScale(domain=(0, 0), range=(3, 50))(0) == 3


@pytest.mark.parametrize('ratio, bucket', [
    (0.0, 0),
    (0.2, 0),
    (1 / 3, 0.5),
    (0.5, 0.5),
    (0.66, 0.5),
    (2 / 3, 1),
    (0.9, 1),
    (1.0, 1),
])
def test_flow_quantizes_into_three_buckets(ratio: float, bucket: float) -> None:
    assert QuantizeScale()(ratio) == bucket


def test_zero_traffic_ratio_falls_into_balanced_bucket() -> None:
    ratio = departure_ratio(0, 0)

    assert math.isnan(ratio)
    assert QuantizeScale()(ratio) == 0.5
    assert QuantizeScale()(None) == 0.5


def test_departure_ratio() -> None:
    assert departure_ratio(3, 4) == 0.75
    assert departure_ratio(0, 5) == 0


def test_derive_scales_uses_range_for_mode(stations, trips) -> None:
    traffic = compute_station_traffic(stations, trips)

    unfiltered = derive_scales(traffic, filter_active=False)
    filtered = derive_scales(traffic, filter_active=True)

    assert unfiltered.radius.range == (0, 25)
    assert filtered.radius.range == (3, 50)
    assert unfiltered.radius.domain == (0, 4)
    assert filtered.radius.domain == (0, 4)


def test_derive_scales_with_no_traffic(stations) -> None:
    traffic = compute_station_traffic(stations, make_trips([]))

    scales = derive_scales(traffic, filter_active=False)

    assert [scales.radius(v) for v in traffic['total_traffic']] == [0, 0, 0]


def test_derive_scales_returns_new_scales_each_time(stations, trips) -> None:
    traffic = compute_station_traffic(stations, trips)

    first = derive_scales(traffic, filter_active=False)
    second = derive_scales(traffic, filter_active=True)

    assert first.radius.range == (0, 25)
    assert first is not second


def test_flow_buckets_all_have_colors() -> None:
    for bucket in FLOW_BUCKETS:
        assert flow_color(bucket) == FLOW_COLORS[bucket]
