"""Adaptive single-pass removal of collinear track points."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

from ..models import CollinearRemovalLevel, ReductionStats, StatsCallback, TrackPoint
from .geo import cross_track_distance, point_distance

_LOGGER = logging.getLogger(__name__)

ToleranceRatio = Union[CollinearRemovalLevel, float]


def remove_collinear_points(
    points: Sequence[TrackPoint],
    tolerance_ratio: ToleranceRatio = CollinearRemovalLevel.MEDIUM,
    *,
    on_stats: Optional[StatsCallback] = None,
) -> List[TrackPoint]:
    """Remove intermediate points lying close to the line between their neighbours.

    Each interior point is compared against the line from the most recently
    retained point to the next original point, so long straight runs collapse
    in one pass. The allowed deviation is ``tolerance_ratio`` times the length
    of that line. First and last points are always kept.

    Args:
        points: Ordered coordinate samples; timestamps are not required.
        tolerance_ratio: A :class:`CollinearRemovalLevel` or a raw ratio.
        on_stats: Optional callback receiving the stage's :class:`ReductionStats`.

    Returns:
        A new list containing the retained points in their original order.

    Raises:
        ValueError: If ``tolerance_ratio`` is negative.
    """

    ratio = float(tolerance_ratio)
    if ratio < 0:
        raise ValueError("tolerance_ratio must not be negative")
    if len(points) <= 2:
        return list(points)

    result: List[TrackPoint] = [points[0]]
    for i in range(1, len(points) - 1):
        prev_point = result[-1]
        current = points[i]
        next_point = points[i + 1]
        tolerance = point_distance(prev_point, next_point) * ratio
        if cross_track_distance(current, prev_point, next_point) > tolerance:
            result.append(current)
    result.append(points[-1])

    stats = ReductionStats("collinear", len(points), len(result))
    _LOGGER.debug(
        "Collinear removal: %d -> %d points (-%d, %.1f%% reduction)",
        stats.input_count,
        stats.output_count,
        stats.removed_count,
        stats.reduction_pct,
    )
    if on_stats is not None:
        on_stats(stats)
    return result


__all__ = ["ToleranceRatio", "remove_collinear_points"]
