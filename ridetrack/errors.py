"""Central error types used across the application."""

from __future__ import annotations


class TrackError(RuntimeError):
    """Base error for track ingestion and export failures."""


class TrackValidationError(TrackError):
    """Raised when a track point has missing or out-of-range coordinates."""


class TrackFileError(TrackError):
    """Raised when a track file cannot be parsed or lacks required columns."""


class EmptyTrackError(TrackError):
    """Raised when a path has to be built from a track without points."""


__all__ = [
    "TrackError",
    "TrackValidationError",
    "TrackFileError",
    "EmptyTrackError",
]
