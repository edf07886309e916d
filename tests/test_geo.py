"""Tests for the distance and averaging primitives."""

from __future__ import annotations

import numpy as np
import pytest

from ridetrack.geometry.geo import (
    DistanceCache,
    average_point,
    cross_track_distance,
    distance,
    haversine_array,
    point_distance,
    round_half_up,
)

from conftest import METRES_PER_DEGREE, make_point


def test_distance_zero_for_identical_points() -> None:
    assert distance(51.48, -3.18, 51.48, -3.18) == 0.0


def test_distance_is_symmetric() -> None:
    forward = distance(35.6812, 139.7671, 34.7025, 135.4959)
    backward = distance(34.7025, 135.4959, 35.6812, 139.7671)
    assert forward == pytest.approx(backward, rel=1e-12)


def test_one_degree_of_latitude_at_equator() -> None:
    assert distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_194.93, abs=1.0)


def test_haversine_array_matches_scalar_distance() -> None:
    lats = np.array([0.0, 0.5, -1.2, 45.0])
    lons = np.array([0.0, 0.3, 2.0, -100.0])
    vectorised = haversine_array(10.0, 20.0, lats, lons)
    expected = [distance(10.0, 20.0, lat, lon) for lat, lon in zip(lats, lons)]
    assert vectorised == pytest.approx(expected, rel=1e-9)


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(1.49) == 1
    assert round_half_up(-0.5) == 0


def test_average_point_means_coordinates_and_midpoint_time() -> None:
    points = [
        make_point(0.0, 0.0, 100, elevation=12.0, heart_rate=140),
        make_point(0.002, 0.004, 101, elevation=99.0),
        make_point(0.001, 0.002, 103),
    ]
    center = average_point(points)
    assert center.latitude == pytest.approx(0.001)
    assert center.longitude == pytest.approx(0.002)
    # (100 + 103) / 2 = 101.5 rounds half up.
    assert center.timestamp == 102
    assert center.elevation == 12.0
    assert center.heart_rate == 140


def test_average_point_rejects_empty_input() -> None:
    with pytest.raises(ValueError):
        average_point([])


def test_cross_track_distance_zero_on_line() -> None:
    start = make_point(0.0, 0.0)
    mid = make_point(0.0001, 0.0)
    end = make_point(0.0002, 0.0)
    assert cross_track_distance(mid, start, end) == pytest.approx(0.0, abs=1e-6)


def test_cross_track_distance_perpendicular_offset() -> None:
    start = make_point(0.0, 0.0)
    end = make_point(0.01, 0.0)
    # 100 m east of a north-south line along the prime meridian.
    point = make_point(0.005, 100.0 / METRES_PER_DEGREE)
    assert cross_track_distance(point, start, end) == pytest.approx(100.0, rel=1e-3)


def test_cross_track_distance_degenerate_segment_falls_back() -> None:
    anchor = make_point(10.0, 10.0)
    point = make_point(10.001, 10.0)
    assert cross_track_distance(point, anchor, anchor) == pytest.approx(
        point_distance(point, anchor)
    )


def test_cross_track_distance_point_on_line_start() -> None:
    start = make_point(51.4800, -3.1800)
    end = make_point(51.4810, -3.1790)
    assert cross_track_distance(start, start, end) == pytest.approx(0.0, abs=1e-6)


def test_distance_cache_shares_symmetric_pairs() -> None:
    calls = []

    def fake_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        calls.append((lat1, lon1, lat2, lon2))
        return 42.0

    cache = DistanceCache(distance_fn=fake_distance)
    a = make_point(1.0, 2.0)
    b = make_point(3.0, 4.0)
    assert cache(a, b) == 42.0
    assert cache(b, a) == 42.0
    assert len(calls) == 1
    assert cache.hits == 1 and cache.misses == 1


def test_distance_cache_rounds_keys_to_six_decimals() -> None:
    cache = DistanceCache()
    a = make_point(1.0, 2.0)
    b = make_point(1.01, 2.0)
    nearly_a = make_point(1.0000000001, 2.0)
    first = cache(a, b)
    assert cache(nearly_a, b) == first
    assert len(cache) == 1


def test_distance_cache_eviction_recomputes() -> None:
    cache = DistanceCache(max_entries=1)
    a, b, c = make_point(0.0, 0.0), make_point(0.0, 1.0), make_point(1.0, 0.0)
    ab = cache(a, b)
    cache(a, c)
    assert len(cache) == 1
    assert cache(a, b) == ab
    assert cache.misses == 3
