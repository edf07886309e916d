"""Tests for adaptive collinear point removal."""

from __future__ import annotations

import pytest

from ridetrack.geometry.simplification import remove_collinear_points
from ridetrack.models import CollinearRemovalLevel, ReductionStats

from conftest import METRES_PER_DEGREE, make_point, straight_track


def test_three_point_line_keeps_endpoints() -> None:
    p0 = make_point(0.0, 0.0)
    p1 = make_point(0.0001, 0.0)
    p2 = make_point(0.0002, 0.0)
    assert remove_collinear_points([p0, p1, p2], CollinearRemovalLevel.MEDIUM) == [p0, p2]


def test_straight_run_collapses_to_two_points() -> None:
    points = straight_track(50, dt=None)
    assert remove_collinear_points(points) == [points[0], points[-1]]


def test_corner_is_retained(l_shaped_trip) -> None:
    result = remove_collinear_points(l_shaped_trip)
    corner = l_shaped_trip[10]
    assert result == [l_shaped_trip[0], corner, l_shaped_trip[-1]]


@pytest.mark.parametrize("level", list(CollinearRemovalLevel))
def test_endpoints_and_order_preserved_for_zigzag(level: CollinearRemovalLevel) -> None:
    points = [
        make_point(i * 0.001, (0.0004 if i % 2 else 0.0) + i * 0.00001)
        for i in range(25)
    ]
    result = remove_collinear_points(points, level)
    assert result[0] is points[0]
    assert result[-1] is points[-1]
    assert len(result) <= len(points)
    indices = [points.index(p) for p in result]
    assert indices == sorted(indices)


def test_tolerance_scales_with_span_length() -> None:
    # 0.8 m off a 200 m line: above LOW (0.4 m) but below HIGH (1.0 m) tolerance.
    start = make_point(0.0, 0.0)
    mid = make_point(100 / METRES_PER_DEGREE, 0.8 / METRES_PER_DEGREE)
    end = make_point(200 / METRES_PER_DEGREE, 0.0)
    assert remove_collinear_points([start, mid, end], CollinearRemovalLevel.LOW) == [
        start,
        mid,
        end,
    ]
    assert remove_collinear_points([start, mid, end], CollinearRemovalLevel.HIGH) == [
        start,
        end,
    ]


def test_raw_float_ratio_is_accepted() -> None:
    points = straight_track(5, dt=None)
    assert remove_collinear_points(points, 0.0) == [points[0], points[-1]]


@pytest.mark.parametrize("count", [0, 1, 2])
def test_short_inputs_returned_as_new_list(count: int) -> None:
    points = straight_track(count, dt=None)
    result = remove_collinear_points(points)
    assert result == points
    assert result is not points


def test_negative_ratio_rejected() -> None:
    with pytest.raises(ValueError):
        remove_collinear_points(straight_track(5), -0.1)


def test_stats_callback_reports_reduction() -> None:
    seen: list[ReductionStats] = []
    remove_collinear_points(straight_track(10, dt=None), on_stats=seen.append)
    assert seen == [ReductionStats("collinear", 10, 2)]
    assert seen[0].reduction_pct == pytest.approx(80.0)
