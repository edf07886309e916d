"""Tests for geographic extremes."""

from __future__ import annotations

import pytest

from ridetrack.analysis import geographic_extremes
from ridetrack.errors import EmptyTrackError

from conftest import make_point


def test_extremes_of_a_loop() -> None:
    points = [
        make_point(51.48, -3.18),
        make_point(51.50, -3.17),
        make_point(51.49, -3.15),
        make_point(51.47, -3.16),
        make_point(51.48, -3.20),
    ]
    extremes = geographic_extremes(points)
    assert extremes.northernmost is points[1]
    assert extremes.southernmost is points[3]
    assert extremes.easternmost is points[2]
    assert extremes.westernmost is points[4]


def test_first_point_wins_ties() -> None:
    first = make_point(10.0, 10.0, 1)
    twin = make_point(10.0, 10.0, 2)
    extremes = geographic_extremes([first, twin])
    assert extremes.northernmost is first
    assert extremes.southernmost is first
    assert extremes.easternmost is first
    assert extremes.westernmost is first


def test_empty_track_raises() -> None:
    with pytest.raises(EmptyTrackError):
        geographic_extremes([])
