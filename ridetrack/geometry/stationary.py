"""Dwell detection and consolidation for timestamped tracks.

Groups are found with an anchor scan: the first point of the current span is
the anchor, and the span closes as soon as a sample strays further than the
distance threshold from it. A closed span counts as stationary when it holds
more than one point and lasts at least the time threshold. Because the anchor
only moves on divergence, groups never overlap.

A target drifting slowly can escape its own anchor while staying within a
larger effective radius; such dwells are split or missed.
"""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import List, Optional, Sequence

from ..config import (
    INVESTIGATION_STATIONARY_MAX_RADIUS_M,
    INVESTIGATION_STATIONARY_MIN_DURATION_S,
    STATIONARY_DISTANCE_THRESHOLD_M,
    STATIONARY_TIME_THRESHOLD_S,
)
from ..models import ReductionStats, StationaryGroup, StatsCallback, TrackPoint
from .geo import average_point, point_distance

_LOGGER = logging.getLogger(__name__)


def _require_timestamps(points: Sequence[TrackPoint]) -> None:
    for idx, point in enumerate(points):
        if point.timestamp is None:
            raise ValueError(f"Stationary detection requires timestamps (point {idx})")


def _build_group(
    points: Sequence[TrackPoint], start: int, end: int
) -> StationaryGroup:
    members = list(points[start : end + 1])
    center = average_point(members)
    radius = max(point_distance(center, p) for p in members)
    return StationaryGroup(
        start_index=start,
        end_index=end,
        points=members,
        center_point=center,
        duration=members[-1].timestamp - members[0].timestamp,  # type: ignore[operator]
        radius=radius,
    )


def detect_stationary_groups(
    points: Sequence[TrackPoint],
    *,
    distance_threshold: float = STATIONARY_DISTANCE_THRESHOLD_M,
    time_threshold: float = STATIONARY_TIME_THRESHOLD_S,
) -> List[StationaryGroup]:
    """Return the dwell episodes of a timestamped track.

    Args:
        points: Chronologically ordered samples, all timestamped.
        distance_threshold: Radius (metres) around the span anchor.
        time_threshold: Minimum span duration (seconds).

    Raises:
        ValueError: If any point lacks a timestamp.
    """

    _require_timestamps(points)
    groups: List[StationaryGroup] = []
    group_start = 0

    for i in range(1, len(points)):
        if point_distance(points[group_start], points[i]) <= distance_threshold:
            continue
        end = i - 1
        duration = points[end].timestamp - points[group_start].timestamp  # type: ignore[operator]
        if duration >= time_threshold and end > group_start:
            groups.append(_build_group(points, group_start, end))
        group_start = i

    end = len(points) - 1
    if group_start < end:
        duration = points[end].timestamp - points[group_start].timestamp  # type: ignore[operator]
        if duration >= time_threshold:
            groups.append(_build_group(points, group_start, end))

    return groups


def extract_stationary_markers(groups: Sequence[StationaryGroup]) -> List[TrackPoint]:
    """Centre points of the groups, suitable for map markers."""

    return [group.center_point for group in groups]


def get_significant_locations(
    points: Sequence[TrackPoint],
    min_duration: float = INVESTIGATION_STATIONARY_MIN_DURATION_S,
    max_distance: float = INVESTIGATION_STATIONARY_MAX_RADIUS_M,
) -> List[TrackPoint]:
    """Centre points of long stays (default: 30 minutes within 200 m)."""

    groups = detect_stationary_groups(
        points, distance_threshold=max_distance, time_threshold=min_duration
    )
    return extract_stationary_markers(groups)


def consolidate_stationary_points(
    points: Sequence[TrackPoint],
    *,
    distance_threshold: float = STATIONARY_DISTANCE_THRESHOLD_M,
    time_threshold: float = STATIONARY_TIME_THRESHOLD_S,
    on_stats: Optional[StatsCallback] = None,
) -> List[TrackPoint]:
    """Replace each dwell episode with its first, centre and last points.

    The synthetic centre takes the averaged position and timestamp and copies
    every other field from the group's first point. Points outside any group
    pass through unchanged.
    """

    if len(points) < 2:
        return list(points)

    groups = detect_stationary_groups(
        points, distance_threshold=distance_threshold, time_threshold=time_threshold
    )
    if not groups:
        if on_stats is not None:
            on_stats(ReductionStats("stationary", len(points), len(points)))
        return list(points)

    result: List[TrackPoint] = []
    next_index = 0
    for group in groups:
        result.extend(points[next_index : group.start_index])
        first = points[group.start_index]
        result.append(first)
        result.append(
            replace(
                first,
                latitude=group.center_point.latitude,
                longitude=group.center_point.longitude,
                timestamp=group.center_point.timestamp,
            )
        )
        if group.end_index > group.start_index:
            result.append(points[group.end_index])
        next_index = group.end_index + 1
    result.extend(points[next_index:])

    stats = ReductionStats("stationary", len(points), len(result))
    _LOGGER.debug(
        "Stationary consolidation: %d groups, %d -> %d points (-%d, %.1f%% reduction)",
        len(groups),
        stats.input_count,
        stats.output_count,
        stats.removed_count,
        stats.reduction_pct,
    )
    if on_stats is not None:
        on_stats(stats)
    return result


__all__ = [
    "consolidate_stationary_points",
    "detect_stationary_groups",
    "extract_stationary_markers",
    "get_significant_locations",
]
