"""Summary analysis derived from track points."""

from __future__ import annotations

from typing import Sequence

from .errors import EmptyTrackError
from .models import TrackPoint, TripAnalysis


def geographic_extremes(points: Sequence[TrackPoint]) -> TripAnalysis:
    """Return the northern-, southern-, eastern- and westernmost points.

    The earliest point wins ties.

    Raises:
        EmptyTrackError: If ``points`` is empty.
    """

    if not points:
        raise EmptyTrackError("No track points available for analysis")
    north = south = east = west = points[0]
    for point in points:
        if point.latitude > north.latitude:
            north = point
        if point.latitude < south.latitude:
            south = point
        if point.longitude > east.longitude:
            east = point
        if point.longitude < west.longitude:
            west = point
    return TripAnalysis(
        northernmost=north, southernmost=south, easternmost=east, westernmost=west
    )


__all__ = ["geographic_extremes"]
