"""Rejection of implausible samples from recorded tracks."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from ..config import SPEED_OUTLIER_SIGMA
from ..models import ReductionStats, SpeedStatistics, StatsCallback, TrackPoint
from .geo import point_distance

_LOGGER = logging.getLogger(__name__)


def calculate_speed(a: TrackPoint, b: TrackPoint) -> float:
    """Return the implied speed (m/s) between two samples, 0 when undefined."""

    if a.timestamp is None or b.timestamp is None:
        return 0.0
    time_diff = abs(b.timestamp - a.timestamp)
    if time_diff == 0:
        return 0.0
    return point_distance(a, b) / time_diff


def _pair_speeds(points: Sequence[TrackPoint]) -> List[float]:
    """Speeds between consecutive samples; element ``i`` covers ``i -> i+1``."""

    return [calculate_speed(points[i - 1], points[i]) for i in range(1, len(points))]


def compute_speed_statistics(
    points: Sequence[TrackPoint],
    *,
    sigma: float = SPEED_OUTLIER_SIGMA,
) -> SpeedStatistics:
    """Return mean, population standard deviation and outlier threshold.

    Only strictly positive speeds contribute. Without any, the threshold is
    infinite so nothing is rejected.
    """

    return _statistics_from_speeds(_pair_speeds(points), sigma)


def _statistics_from_speeds(speeds: Sequence[float], sigma: float) -> SpeedStatistics:
    samples = np.asarray([s for s in speeds if s > 0], dtype=float)
    if samples.size == 0:
        return SpeedStatistics(
            mean=0.0, std_dev=0.0, threshold=math.inf, sample_count=0
        )
    mean = float(np.mean(samples))
    std_dev = float(np.std(samples))
    return SpeedStatistics(
        mean=mean,
        std_dev=std_dev,
        threshold=mean + sigma * std_dev,
        sample_count=int(samples.size),
    )


def remove_speed_outliers(
    points: Sequence[TrackPoint],
    *,
    sigma: float = SPEED_OUTLIER_SIGMA,
    on_stats: Optional[StatsCallback] = None,
) -> List[TrackPoint]:
    """Drop samples whose speed to either neighbour exceeds the outlier threshold.

    Decisions are made against the original sequence: removing one point never
    changes the speeds used to judge another. Boundary points are only checked
    against the neighbour that exists. Surviving points keep their order.
    """

    if len(points) < 2:
        _LOGGER.debug("Too few points (%d), skipping speed outlier removal", len(points))
        return list(points)

    speeds = _pair_speeds(points)
    stats = _statistics_from_speeds(speeds, sigma)
    _LOGGER.debug(
        "Speed statistics: mean=%.2f km/h stddev=%.2f km/h threshold=%.2f km/h",
        stats.mean * 3.6,
        stats.std_dev * 3.6,
        stats.threshold * 3.6,
    )

    filtered: List[TrackPoint] = []
    last = len(points) - 1
    for idx, point in enumerate(points):
        incoming = speeds[idx - 1] if idx > 0 else 0.0
        outgoing = speeds[idx] if idx < last else 0.0
        if incoming > stats.threshold or outgoing > stats.threshold:
            _LOGGER.debug(
                "Removing sample %d (speed in=%.2f km/h out=%.2f km/h)",
                idx,
                incoming * 3.6,
                outgoing * 3.6,
            )
            continue
        filtered.append(point)

    result = ReductionStats("speed_outliers", len(points), len(filtered))
    _LOGGER.info(
        "Removed %d speed outliers (%.1f%%): %d -> %d points",
        result.removed_count,
        result.reduction_pct,
        result.input_count,
        result.output_count,
    )
    if on_stats is not None:
        on_stats(result)
    return filtered


def sanitize_track_points(
    points: Sequence[TrackPoint],
    *,
    on_stats: Optional[StatsCallback] = None,
) -> List[TrackPoint]:
    """Drop samples whose coordinates are not finite numbers.

    Range checks belong to the ingestion boundary; this only protects the
    numeric stages from NaN/inf that slipped through a lenient reader.
    """

    cleaned = [
        p for p in points if math.isfinite(p.latitude) and math.isfinite(p.longitude)
    ]
    if len(cleaned) != len(points):
        _LOGGER.warning(
            "Dropped %d samples with non-finite coordinates", len(points) - len(cleaned)
        )
    if on_stats is not None:
        on_stats(ReductionStats("sanitize", len(points), len(cleaned)))
    return cleaned


__all__ = [
    "calculate_speed",
    "compute_speed_statistics",
    "remove_speed_outliers",
    "sanitize_track_points",
]
