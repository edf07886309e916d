"""Tests for the compact API point conversion and boundary validation."""

from __future__ import annotations

import math

import pytest

from ridetrack.errors import TrackValidationError
from ridetrack.models import TrackPoint
from ridetrack.transform import (
    transform_api_route_track_point,
    transform_api_route_track_points,
    transform_api_track_point,
    transform_api_track_points,
    transform_track_point_to_api,
    transform_track_points_to_api,
    validate_track_point,
    validate_track_points,
)


def test_trip_point_maps_every_field() -> None:
    raw = {"x": -3.18, "y": 51.48, "e": 12.5, "t": 1_700_000_000, "s": 4.2, "h": 150, "c": 88}
    point = transform_api_track_point(raw)
    assert point == TrackPoint(
        longitude=-3.18,
        latitude=51.48,
        elevation=12.5,
        timestamp=1_700_000_000,
        speed=4.2,
        heart_rate=150,
        cadence=88,
    )


def test_missing_optional_fields_become_none() -> None:
    point = transform_api_track_point({"x": 1.0, "y": 2.0})
    assert point.elevation is None
    assert point.timestamp is None
    assert not point.has_timestamp


def test_route_point_drops_temporal_fields() -> None:
    point = transform_api_route_track_point({"x": 1.0, "y": 2.0, "e": 30.0, "t": 99, "h": 140})
    assert point == TrackPoint(longitude=1.0, latitude=2.0, elevation=30.0)
    points = transform_api_route_track_points([{"x": 1.0, "y": 2.0, "t": 5}])
    assert points[0].timestamp is None


@pytest.mark.parametrize(
    "raw",
    [
        {"y": 2.0},
        {"x": 1.0},
        {"x": "1.0", "y": 2.0},
        {"x": True, "y": 2.0},
        {"x": 181.0, "y": 2.0},
        {"x": 1.0, "y": -90.5},
        {"x": math.nan, "y": 2.0},
        {"x": 1.0, "y": 2.0, "e": "high"},
    ],
)
def test_invalid_points_rejected(raw: dict) -> None:
    with pytest.raises(TrackValidationError):
        transform_api_track_point(raw)


def test_batch_errors_name_the_offending_index() -> None:
    with pytest.raises(TrackValidationError, match="Invalid track point 1"):
        transform_api_track_points([{"x": 0.0, "y": 0.0}, {"x": 0.0, "y": 95.0}])


def test_boundary_coordinates_are_valid() -> None:
    point = TrackPoint(longitude=-180.0, latitude=90.0)
    assert validate_track_point(point) is point
    assert validate_track_points([point]) == [point]


def test_validate_reports_index() -> None:
    with pytest.raises(TrackValidationError, match="point 3"):
        validate_track_point(TrackPoint(longitude=math.inf, latitude=0.0), 3)


def test_export_omits_missing_fields() -> None:
    point = TrackPoint(longitude=1.5, latitude=2.5, timestamp=10)
    assert transform_track_point_to_api(point) == {"x": 1.5, "y": 2.5, "t": 10}
    raw = [{"x": 1.0, "y": 2.0, "e": 3.0, "t": 4, "s": 5.0, "h": 6, "c": 7}]
    assert transform_track_points_to_api(transform_api_track_points(raw)) == raw
