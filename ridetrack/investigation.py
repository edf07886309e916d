"""Investigation point selection.

Picks a bounded set of locations worth field follow-up from a full track.
Meaningful locations (start/end, long stops, geographic extremes, elevation
peaks) score high; mechanical coverage samples (course divisions, time and
distance intervals) score low.

Flow:
    1. Generate scored candidates from every heuristic.
    2. Merge candidates within 1 km of each other. Points scoring at least
       ``PROTECTED_SCORE_THRESHOLD`` are never discarded in favour of one
       another.
    3. Add an isolation bonus of one point per kilometre to the nearest
       surviving neighbour.
    4. Keep the top ``max_points`` by score, swapping the start and end back
       in if the bonus pushed either past the cut.

Elevation peak detection and the merge/bonus passes are quadratic. Peak
detection is bounded by ``max_peak_scan_points``; beyond roughly 5 000 points
a spatial index (grid or k-d tree) is the next step.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from .analysis import geographic_extremes
from .config import (
    INVESTIGATION_MAX_PEAK_SCAN_POINTS,
    INVESTIGATION_MAX_POINTS,
    INVESTIGATION_STATIONARY_MAX_RADIUS_M,
    INVESTIGATION_STATIONARY_MIN_DURATION_S,
)
from .geometry.geo import DistanceCache, haversine_array, point_distance, round_half_up
from .geometry.stationary import get_significant_locations
from .models import ScoredPoint, TrackPoint, has_timestamps

_LOGGER = logging.getLogger(__name__)

# Meaningful locations.
SCORE_START_END_POINT = 100
SCORE_STATIONARY_POINT = 80
SCORE_EXTREME_POINT = 70
SCORE_ELEVATION_PEAK = 60

# Mechanical coverage samples.
SCORE_COURSE_DIVISION = 20
SCORE_TIME_INTERVAL = 10
SCORE_DISTANCE_INTERVAL = 10

PROTECTED_SCORE_THRESHOLD = 80
MERGE_DISTANCE_THRESHOLD_M = 1000.0
ELEVATION_DIFF_THRESHOLD_M = 50.0
ELEVATION_RANGE_M = 1000.0
COURSE_DIVISIONS = 10
TIME_INTERVAL_S = 30 * 60
TIME_INTERVAL_TOLERANCE_S = 30
DISTANCE_INTERVAL_M = 5000.0
EARLY_EXIT_DISTANCE_M = 10.0


@dataclass(slots=True)
class InvestigationPointsOptions:
    """Caller-facing knobs for investigation point selection."""

    max_points: int = INVESTIGATION_MAX_POINTS
    stationary_min_duration: float = INVESTIGATION_STATIONARY_MIN_DURATION_S
    stationary_max_distance: float = INVESTIGATION_STATIONARY_MAX_RADIUS_M
    max_peak_scan_points: int = INVESTIGATION_MAX_PEAK_SCAN_POINTS

    def __post_init__(self) -> None:
        if self.max_points < 1:
            raise ValueError("max_points must be at least 1")
        if self.max_peak_scan_points < 2:
            raise ValueError("max_peak_scan_points must be at least 2")


def _scored(points: Sequence[TrackPoint], score: int) -> List[ScoredPoint]:
    return [ScoredPoint(point=p, score=score) for p in points]


def _endpoint_candidates(points: Sequence[TrackPoint]) -> List[ScoredPoint]:
    endpoints = [points[0]]
    if len(points) > 1:
        endpoints.append(points[-1])
    return _scored(endpoints, SCORE_START_END_POINT)


def _stationary_candidates(
    points: Sequence[TrackPoint], options: InvestigationPointsOptions
) -> List[ScoredPoint]:
    if not has_timestamps(points):
        return []
    locations = get_significant_locations(
        points,
        min_duration=options.stationary_min_duration,
        max_distance=options.stationary_max_distance,
    )
    return _scored(locations, SCORE_STATIONARY_POINT)


def _peak_scan_indices(count: int, max_points: int) -> np.ndarray:
    """Evenly spaced indices (endpoints included) capping the peak scan size."""

    if count <= max_points:
        return np.arange(count)
    _LOGGER.warning(
        "Track has %d points; elevation peak scan decimated to %d", count, max_points
    )
    return np.linspace(0, count - 1, num=max_points, dtype=int)


def find_elevation_peaks(
    points: Sequence[TrackPoint],
    *,
    max_scan_points: int = INVESTIGATION_MAX_PEAK_SCAN_POINTS,
) -> List[TrackPoint]:
    """Return points that top their 1 km neighbourhood by a meaningful margin.

    A point qualifies when no other point within ``ELEVATION_RANGE_M`` is higher
    and the elevation range of that neighbourhood (itself included) is at least
    ``ELEVATION_DIFF_THRESHOLD_M``. Points without elevation are ignored.
    """

    if not points:
        return []
    sample = [points[int(i)] for i in _peak_scan_indices(len(points), max_scan_points)]
    elevations = np.asarray(
        [np.nan if p.elevation is None else p.elevation for p in sample], dtype=float
    )
    known = ~np.isnan(elevations)
    if not known.any():
        return []
    lats = np.asarray([p.latitude for p in sample], dtype=float)
    lons = np.asarray([p.longitude for p in sample], dtype=float)

    peaks: List[TrackPoint] = []
    for idx, point in enumerate(sample):
        if not known[idx]:
            continue
        distances = haversine_array(point.latitude, point.longitude, lats, lons)
        in_range = (distances <= ELEVATION_RANGE_M) & known
        in_range[idx] = True
        neighbourhood = elevations[in_range]
        own = elevations[idx]
        if np.any(neighbourhood > own):
            continue
        if float(own - np.min(neighbourhood)) >= ELEVATION_DIFF_THRESHOLD_M:
            peaks.append(point)
    return peaks


def _course_division_candidates(points: Sequence[TrackPoint]) -> List[ScoredPoint]:
    count = len(points)
    if count < COURSE_DIVISIONS:
        return []
    indices = [(count - 1) * k // COURSE_DIVISIONS for k in range(1, COURSE_DIVISIONS + 1)]
    return _scored([points[i] for i in indices], SCORE_COURSE_DIVISION)


def _extreme_candidates(points: Sequence[TrackPoint]) -> List[ScoredPoint]:
    extremes = geographic_extremes(points)
    return _scored(
        [
            extremes.northernmost,
            extremes.southernmost,
            extremes.easternmost,
            extremes.westernmost,
        ],
        SCORE_EXTREME_POINT,
    )


def _time_interval_candidates(points: Sequence[TrackPoint]) -> List[ScoredPoint]:
    start_time = points[0].timestamp
    if start_time is None:
        return []
    selected: List[TrackPoint] = []
    for point in points:
        if point.timestamp is None:
            continue
        elapsed = point.timestamp - start_time
        if elapsed <= 0:
            continue
        remainder = elapsed % TIME_INTERVAL_S
        if (
            remainder <= TIME_INTERVAL_TOLERANCE_S
            or TIME_INTERVAL_S - remainder <= TIME_INTERVAL_TOLERANCE_S
        ):
            selected.append(point)
    return _scored(selected, SCORE_TIME_INTERVAL)


def _distance_interval_candidates(points: Sequence[TrackPoint]) -> List[ScoredPoint]:
    selected: List[TrackPoint] = []
    total = 0.0
    last_marked = 0.0
    for prev_point, point in zip(points, points[1:]):
        total += point_distance(prev_point, point)
        if total - last_marked >= DISTANCE_INTERVAL_M:
            selected.append(point)
            last_marked = math.floor(total / DISTANCE_INTERVAL_M) * DISTANCE_INTERVAL_M
    return _scored(selected, SCORE_DISTANCE_INTERVAL)


def generate_candidates(
    points: Sequence[TrackPoint],
    options: Optional[InvestigationPointsOptions] = None,
) -> List[ScoredPoint]:
    """Return every heuristic's scored candidates in generation order."""

    if not points:
        return []
    options = options or InvestigationPointsOptions()
    peaks = find_elevation_peaks(points, max_scan_points=options.max_peak_scan_points)
    candidates: List[ScoredPoint] = []
    candidates.extend(_endpoint_candidates(points))
    candidates.extend(_stationary_candidates(points, options))
    candidates.extend(_scored(peaks, SCORE_ELEVATION_PEAK))
    candidates.extend(_course_division_candidates(points))
    candidates.extend(_extreme_candidates(points))
    candidates.extend(_time_interval_candidates(points))
    candidates.extend(_distance_interval_candidates(points))
    return candidates


def merge_nearby_candidates(
    candidates: Sequence[ScoredPoint],
    distance_cache: DistanceCache,
) -> List[ScoredPoint]:
    """Thin candidates closer than ``MERGE_DISTANCE_THRESHOLD_M`` to one another.

    Candidates are visited by descending score (stable, so generation order
    breaks ties). Against each accepted neighbour in range:

    * both protected: keep both and keep checking;
    * only the accepted one protected: drop the candidate;
    * only the candidate protected: replace the accepted one;
    * neither protected: the strictly higher score wins, else the first seen.
    """

    ordered = sorted(candidates, key=lambda c: c.score, reverse=True)
    merged: List[ScoredPoint] = []
    for candidate in ordered:
        should_add = True
        for idx, existing in enumerate(merged):
            if distance_cache(candidate.point, existing.point) > MERGE_DISTANCE_THRESHOLD_M:
                continue
            candidate_protected = candidate.score >= PROTECTED_SCORE_THRESHOLD
            existing_protected = existing.score >= PROTECTED_SCORE_THRESHOLD
            if candidate_protected and existing_protected:
                continue
            if existing_protected:
                should_add = False
            elif candidate_protected:
                del merged[idx]
            elif candidate.score > existing.score:
                del merged[idx]
            else:
                should_add = False
            break
        if should_add:
            merged.append(candidate)
    return merged


def apply_isolation_bonus(
    merged: Sequence[ScoredPoint],
    distance_cache: DistanceCache,
) -> None:
    """Add one point per kilometre (rounded) to each point's nearest neighbour."""

    for i, current in enumerate(merged):
        min_distance = math.inf
        for j, other in enumerate(merged):
            if i == j:
                continue
            dist = distance_cache(current.point, other.point)
            if dist < min_distance:
                min_distance = dist
                if min_distance < EARLY_EXIT_DISTANCE_M:
                    break
        if min_distance != math.inf:
            current.score += round_half_up(min_distance / 1000.0)


def _top_with_endpoints(
    ranked: Sequence[ScoredPoint],
    endpoints: Sequence[ScoredPoint],
    max_points: int,
) -> List[ScoredPoint]:
    """Cut ``ranked`` to ``max_points`` without losing the start or end.

    The isolation bonus can lift a far-off candidate above the endpoints; when
    that pushes an endpoint past the cut it takes the lowest-ranked
    non-endpoint slot instead. With ``max_points == 1`` only the best
    candidate is kept.
    """

    selected = list(ranked[:max_points])
    if max_points < 2:
        return selected
    for endpoint in endpoints:
        if any(endpoint is chosen for chosen in selected):
            continue
        for idx in range(len(selected) - 1, -1, -1):
            if not any(selected[idx] is other for other in endpoints):
                del selected[idx]
                break
        selected.append(endpoint)
    selected.sort(key=lambda c: c.score, reverse=True)
    return selected


def select_investigation_points(
    points: Sequence[TrackPoint],
    options: Optional[InvestigationPointsOptions] = None,
    *,
    distance_cache: Optional[DistanceCache] = None,
) -> List[TrackPoint]:
    """Select at most ``options.max_points`` investigation points.

    The result is ordered by descending score, not chronologically; use
    :func:`sort_chronologically` before building a path from it. When
    ``options.max_points`` is at least 2 the first and last track points are
    always included.

    Args:
        points: Full track, raw or normalised.
        options: Selection settings; defaults from :mod:`ridetrack.config`.
        distance_cache: Memoised distance routine shared by the merge and bonus
            passes. A fresh cache is created when omitted.
    """

    if not points:
        return []
    options = options or InvestigationPointsOptions()
    cache = distance_cache if distance_cache is not None else DistanceCache()

    candidates = generate_candidates(points, options)
    # Endpoint candidates are generated first and, being protected, survive the merge.
    endpoints = candidates[: 2 if len(points) > 1 else 1]
    merged = merge_nearby_candidates(candidates, cache)
    apply_isolation_bonus(merged, cache)
    merged.sort(key=lambda c: c.score, reverse=True)
    selected = _top_with_endpoints(merged, endpoints, options.max_points)

    _LOGGER.info(
        "Selected %d investigation points (%d candidates, %d after merge) from %d samples",
        len(selected),
        len(candidates),
        len(merged),
        len(points),
    )
    _LOGGER.debug("Distance cache hits=%d misses=%d", cache.hits, cache.misses)
    return [scored.point for scored in selected]


def sort_chronologically(points: Sequence[TrackPoint]) -> List[TrackPoint]:
    """Return points ordered by timestamp; untimed points keep their order at the end."""

    return sorted(
        points,
        key=lambda p: (p.timestamp is None, p.timestamp if p.timestamp is not None else 0),
    )


__all__ = [
    "InvestigationPointsOptions",
    "apply_isolation_bonus",
    "find_elevation_peaks",
    "generate_candidates",
    "merge_nearby_candidates",
    "select_investigation_points",
    "sort_chronologically",
]
