"""Great-circle distance helpers shared by every track processing stage."""

from __future__ import annotations

from dataclasses import replace
import math
from typing import Callable, Sequence, Tuple

from cachetools import LRUCache
import numpy as np
from numpy.typing import NDArray

from ..config import DISTANCE_CACHE_MAX_ENTRIES
from ..models import TrackPoint

EARTH_RADIUS_M = 6_371_000.0
_DEGENERATE_SEGMENT_RAD = 1e-10
_CACHE_KEY_DECIMALS = 6

DistanceFn = Callable[[float, float, float, float], float]
CoordinateKey = Tuple[float, float]


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the haversine distance in metres between two lat/lon points."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    )
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def point_distance(a: TrackPoint, b: TrackPoint) -> float:
    """Distance in metres between two track points."""

    return distance(a.latitude, a.longitude, b.latitude, b.longitude)


def haversine_array(
    lat: float,
    lon: float,
    lats: NDArray[np.float64],
    lons: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Vectorised haversine from one point to many (metres)."""

    phi1 = np.radians(lat)
    phi2 = np.radians(lats)
    d_phi = np.radians(lats - lat)
    d_lambda = np.radians(lons - lon)
    a = np.sin(d_phi / 2.0) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2.0) ** 2
    a = np.clip(a, 0.0, 1.0)
    c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (towards +inf)."""

    return int(math.floor(value + 0.5))


def average_point(points: Sequence[TrackPoint]) -> TrackPoint:
    """Return the centre of a cluster of timestamped points.

    Latitude and longitude are arithmetic means, which is accurate enough for
    small local clusters. The timestamp is the rounded midpoint between the
    first and last sample; every other field is copied from the first point.
    """

    if not points:
        raise ValueError("Cannot average an empty point collection")
    first = points[0]
    last = points[-1]
    if first.timestamp is None or last.timestamp is None:
        raise ValueError("Averaging requires timestamped first and last points")
    avg_lat = sum(p.latitude for p in points) / len(points)
    avg_lon = sum(p.longitude for p in points) / len(points)
    avg_time = round_half_up((first.timestamp + last.timestamp) / 2.0)
    return replace(first, latitude=avg_lat, longitude=avg_lon, timestamp=avg_time)


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, value))


def _initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lon = lon2 - lon1
    return math.atan2(
        math.sin(d_lon) * math.cos(lat2),
        math.cos(lat1) * math.sin(lat2)
        - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon),
    )


def cross_track_distance(
    point: TrackPoint,
    line_start: TrackPoint,
    line_end: TrackPoint,
) -> float:
    """Perpendicular distance (metres) from ``point`` to the great circle start->end.

    When the line endpoints coincide the direct distance to ``line_start`` is
    returned instead.
    """

    lat1 = math.radians(line_start.latitude)
    lon1 = math.radians(line_start.longitude)
    lat2 = math.radians(line_end.latitude)
    lon2 = math.radians(line_end.longitude)
    lat_p = math.radians(point.latitude)
    lon_p = math.radians(point.longitude)

    if (
        abs(lat1 - lat2) < _DEGENERATE_SEGMENT_RAD
        and abs(lon1 - lon2) < _DEGENERATE_SEGMENT_RAD
    ):
        return point_distance(point, line_start)

    bearing13 = _initial_bearing(lat1, lon1, lat_p, lon_p)
    bearing12 = _initial_bearing(lat1, lon1, lat2, lon2)
    # Angular distance start->point via the spherical law of cosines.
    angular13 = math.acos(
        _clamp_unit(
            math.sin(lat1) * math.sin(lat_p)
            + math.cos(lat1) * math.cos(lat_p) * math.cos(lon_p - lon1)
        )
    )
    return abs(
        math.asin(_clamp_unit(math.sin(angular13) * math.sin(bearing13 - bearing12)))
        * EARTH_RADIUS_M
    )


def _coordinate_key(point: TrackPoint) -> CoordinateKey:
    return (
        round(point.latitude, _CACHE_KEY_DECIMALS),
        round(point.longitude, _CACHE_KEY_DECIMALS),
    )


class DistanceCache:
    """Memoised point-to-point distance lookups.

    Pairs are keyed by their coordinates rounded to six decimals and ordered
    canonically, so ``(a, b)`` and ``(b, a)`` share one entry. The underlying
    routine can be swapped, e.g. for a projected or planar metric in tests.
    """

    def __init__(
        self,
        max_entries: int = DISTANCE_CACHE_MAX_ENTRIES,
        distance_fn: DistanceFn = distance,
    ) -> None:
        self._cache: LRUCache = LRUCache(maxsize=max(1, max_entries))
        self._distance_fn = distance_fn
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._cache)

    def __call__(self, a: TrackPoint, b: TrackPoint) -> float:
        key_a = _coordinate_key(a)
        key_b = _coordinate_key(b)
        cache_key = (key_a, key_b) if key_a <= key_b else (key_b, key_a)
        cached = self._cache.get(cache_key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        value = self._distance_fn(a.latitude, a.longitude, b.latitude, b.longitude)
        self._cache[cache_key] = value
        return value

    def clear(self) -> None:
        self._cache.clear()
        self.hits = 0
        self.misses = 0


__all__ = [
    "EARTH_RADIUS_M",
    "DistanceCache",
    "DistanceFn",
    "average_point",
    "cross_track_distance",
    "distance",
    "haversine_array",
    "point_distance",
    "round_half_up",
]
