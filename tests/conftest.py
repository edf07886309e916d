"""Global pytest fixtures & helpers.

Adds project root to path and provides synthetic track builders shared by the
geometry, normalisation and investigation tests.
"""
from __future__ import annotations

import math
import os
import sys
from typing import List, Optional

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ridetrack.models import TrackPoint

# Metres per degree of latitude (and of longitude on the equator).
METRES_PER_DEGREE = 6_371_000.0 * math.pi / 180.0


# --- Factory helpers -------------------------------------------------
def make_point(
    lat: float,
    lon: float,
    timestamp: Optional[float] = None,
    elevation: Optional[float] = None,
    **extra,
) -> TrackPoint:
    return TrackPoint(
        longitude=lon, latitude=lat, elevation=elevation, timestamp=timestamp, **extra
    )


def offset(point: TrackPoint, north_m: float = 0.0, east_m: float = 0.0) -> tuple[float, float]:
    """Return (lat, lon) displaced from ``point`` by metres (valid near the equator)."""

    lat = point.latitude + north_m / METRES_PER_DEGREE
    lon = point.longitude + east_m / (METRES_PER_DEGREE * math.cos(math.radians(lat)))
    return lat, lon


def straight_track(
    count: int,
    *,
    step_m: float = 100.0,
    dt: Optional[float] = 60.0,
    start_lat: float = 0.0,
    start_lon: float = 0.0,
    start_time: float = 1_700_000_000,
) -> List[TrackPoint]:
    """Points heading due north, ``step_m`` apart and ``dt`` seconds apart."""

    points = []
    for i in range(count):
        timestamp = None if dt is None else start_time + i * dt
        points.append(
            make_point(start_lat + i * step_m / METRES_PER_DEGREE, start_lon, timestamp)
        )
    return points


def dwell_track() -> List[TrackPoint]:
    """Five moving samples, a 14-minute stop (points 5..19), five moving samples."""

    points: List[TrackPoint] = []
    t0 = 1_700_000_000
    for i in range(5):
        points.append(make_point(i * 200 / METRES_PER_DEGREE, 0.0, t0 + i * 60, 10.0 + i))
    stop_lat = 5 * 200 / METRES_PER_DEGREE
    jitter = [0, 8, -6, 12, -10, 4, -3, 9, -12, 6, 0, -8, 10, -4, 2]
    for j, metres in enumerate(jitter):
        points.append(
            make_point(
                stop_lat + metres / METRES_PER_DEGREE,
                jitter[-1 - j] / METRES_PER_DEGREE,
                t0 + (5 + j) * 60,
                50.0 + j,
            )
        )
    for k in range(1, 6):
        points.append(
            make_point(stop_lat + k * 200 / METRES_PER_DEGREE, 0.0, t0 + (19 + k) * 60, 60.0)
        )
    return points


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def dwell_points() -> List[TrackPoint]:
    return dwell_track()


@pytest.fixture
def l_shaped_trip() -> List[TrackPoint]:
    """Ten samples north then ten samples east, 150 m and 30 s apart."""

    north = straight_track(11, step_m=150.0, dt=30.0)
    corner = north[-1]
    east = []
    for i in range(1, 11):
        lat, lon = offset(corner, east_m=i * 150.0)
        east.append(make_point(corner.latitude, lon, corner.timestamp + i * 30))
    return north + east
