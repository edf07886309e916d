"""Utility entry points for supplementary ridetrack tooling."""

from .preview_map import create_track_map

__all__ = ["create_track_map"]
