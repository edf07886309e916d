"""Track normalisation pipeline.

Pure transformation: given raw samples it returns a much shorter sequence in
the original chronological order. Trips (timestamped) get collinear removal
followed by stationary consolidation; routes only get collinear removal.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config import SPEED_FILTER_ENABLED
from ..models import (
    CleanedTrack,
    CollinearRemovalLevel,
    ReductionStats,
    StatsCallback,
    TrackKind,
    TrackPoint,
    has_timestamps,
)
from .sanitizers import remove_speed_outliers, sanitize_track_points
from .simplification import ToleranceRatio, remove_collinear_points
from .stationary import consolidate_stationary_points

_LOGGER = logging.getLogger(__name__)


def track_kind(points: Sequence[TrackPoint]) -> TrackKind:
    """Resolve the processing variant: ``TRIP`` only when every point has a timestamp."""

    return TrackKind.TRIP if has_timestamps(points) else TrackKind.ROUTE


def normalize_track_points(
    points: Sequence[TrackPoint],
    removal_level: ToleranceRatio = CollinearRemovalLevel.MEDIUM,
    *,
    kind: Optional[TrackKind] = None,
    on_stats: Optional[StatsCallback] = None,
) -> List[TrackPoint]:
    """Simplify a track and, for trips, consolidate dwell episodes.

    Re-running on the output is a no-op only for tracks without dwell
    episodes. A consolidated stop's synthetic centre can be dropped by the
    collinear pass, after which the stop is consolidated again around a new
    centre; normalise raw samples once rather than feeding results back in.

    Args:
        points: Track samples in chronological (or course) order.
        removal_level: Collinear removal strength.
        kind: Processing variant. Resolved with :func:`track_kind` when omitted.
        on_stats: Optional callback receiving one :class:`ReductionStats` per stage.
    """

    if not points:
        return []
    if kind is None:
        kind = track_kind(points)

    simplified = remove_collinear_points(points, removal_level, on_stats=on_stats)
    if kind is TrackKind.TRIP:
        return consolidate_stationary_points(simplified, on_stats=on_stats)
    # Distance-based simplification of routes is not implemented; the
    # collinear pass is all they get.
    return simplified


def clean_track(
    points: Sequence[TrackPoint],
    removal_level: ToleranceRatio = CollinearRemovalLevel.MEDIUM,
    *,
    kind: Optional[TrackKind] = None,
    speed_filter: bool = SPEED_FILTER_ENABLED,
    on_stats: Optional[StatsCallback] = None,
) -> CleanedTrack:
    """Run the full cleaning pipeline and collect per-stage statistics.

    Stages: non-finite coordinate removal, speed outlier rejection (trips only,
    unless disabled), then :func:`normalize_track_points`.
    """

    if kind is None:
        kind = track_kind(points)
    collected: List[ReductionStats] = []

    def _record(stats: ReductionStats) -> None:
        collected.append(stats)
        if on_stats is not None:
            on_stats(stats)

    current = sanitize_track_points(points, on_stats=_record)
    if kind is TrackKind.TRIP and speed_filter:
        current = remove_speed_outliers(current, on_stats=_record)
    current = normalize_track_points(
        current, removal_level, kind=kind, on_stats=_record
    )
    _LOGGER.info(
        "Cleaned %s track: %d -> %d points", kind.value, len(points), len(current)
    )
    return CleanedTrack(kind=kind, points=current, stats=collected)


__all__ = ["clean_track", "normalize_track_points", "track_kind"]
