"""GPS geometry processing: distances, outlier rejection, simplification and
dwell consolidation.
"""

from .geo import (
    DistanceCache,
    average_point,
    cross_track_distance,
    distance,
    point_distance,
)
from .normalizer import clean_track, normalize_track_points, track_kind
from .sanitizers import (
    compute_speed_statistics,
    remove_speed_outliers,
    sanitize_track_points,
)
from .simplification import remove_collinear_points
from .stationary import (
    consolidate_stationary_points,
    detect_stationary_groups,
    get_significant_locations,
)

__all__ = [
    "DistanceCache",
    "average_point",
    "clean_track",
    "compute_speed_statistics",
    "consolidate_stationary_points",
    "cross_track_distance",
    "detect_stationary_groups",
    "distance",
    "get_significant_locations",
    "normalize_track_points",
    "point_distance",
    "remove_collinear_points",
    "remove_speed_outliers",
    "sanitize_track_points",
    "track_kind",
]
