"""GPS track cleaning and investigation point selection."""

from .errors import EmptyTrackError, TrackError, TrackFileError, TrackValidationError
from .geometry import clean_track, normalize_track_points
from .investigation import InvestigationPointsOptions, select_investigation_points
from .main import main
from .models import CollinearRemovalLevel, TrackKind, TrackPoint

__all__ = [
    "main",
    "clean_track",
    "normalize_track_points",
    "select_investigation_points",
    "InvestigationPointsOptions",
    "CollinearRemovalLevel",
    "TrackKind",
    "TrackPoint",
    "TrackError",
    "TrackFileError",
    "TrackValidationError",
    "EmptyTrackError",
]
