"""Conversion between the upstream compact point format and :class:`TrackPoint`.

The tracking service ships samples with single-letter keys::

    {"x": lon, "y": lat, "e": elevation, "t": unix_seconds,
     "s": speed, "h": heart_rate, "c": cadence}

Routes carry only ``x``, ``y`` and ``e``. This module is also the boundary
where coordinate validity is enforced; the processing core assumes valid input.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .errors import TrackValidationError
from .models import TrackPoint

_API_FIELDS = (
    ("x", "longitude"),
    ("y", "latitude"),
    ("e", "elevation"),
    ("t", "timestamp"),
    ("s", "speed"),
    ("h", "heart_rate"),
    ("c", "cadence"),
)


def _optional_number(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TrackValidationError(f"Expected a number, got {value!r}")
    return value


def validate_track_point(point: TrackPoint, index: Optional[int] = None) -> TrackPoint:
    """Return ``point`` unchanged if its coordinates are finite and in range.

    Raises:
        TrackValidationError: On non-numeric, non-finite or out-of-range
            longitude/latitude.
    """

    label = f"point {index}" if index is not None else "point"
    for name, limit in (("longitude", 180.0), ("latitude", 90.0)):
        value = getattr(point, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TrackValidationError(f"{label} has non-numeric {name} {value!r}")
        if not math.isfinite(value) or not -limit <= value <= limit:
            raise TrackValidationError(f"{label} has out-of-range {name} {value!r}")
    return point


def validate_track_points(points: Iterable[TrackPoint]) -> List[TrackPoint]:
    return [validate_track_point(p, idx) for idx, p in enumerate(points)]


def transform_api_track_point(raw: Mapping[str, Any]) -> TrackPoint:
    """Convert one compact API sample into a :class:`TrackPoint`."""

    if "x" not in raw or "y" not in raw:
        raise TrackValidationError(f"Track point missing x/y coordinates: {dict(raw)!r}")
    values = {attr: _optional_number(raw.get(key)) for key, attr in _API_FIELDS}
    return validate_track_point(TrackPoint(**values))


def transform_api_track_points(raw_points: Iterable[Mapping[str, Any]]) -> List[TrackPoint]:
    points: List[TrackPoint] = []
    for idx, raw in enumerate(raw_points):
        try:
            points.append(transform_api_track_point(raw))
        except TrackValidationError as exc:
            raise TrackValidationError(f"Invalid track point {idx}: {exc}") from exc
    return points


def transform_api_route_track_point(raw: Mapping[str, Any]) -> TrackPoint:
    """Convert a route sample (``x``, ``y``, ``e`` only); extra keys are ignored."""

    return transform_api_track_point({key: raw.get(key) for key in ("x", "y", "e")})


def transform_api_route_track_points(
    raw_points: Iterable[Mapping[str, Any]],
) -> List[TrackPoint]:
    return transform_api_track_points(
        {key: raw.get(key) for key in ("x", "y", "e")} for raw in raw_points
    )


def transform_track_point_to_api(point: TrackPoint) -> Dict[str, float]:
    """Convert a :class:`TrackPoint` back into the compact format, omitting blanks."""

    payload: Dict[str, float] = {}
    for key, attr in _API_FIELDS:
        value = getattr(point, attr)
        if value is not None:
            payload[key] = value
    return payload


def transform_track_points_to_api(points: Iterable[TrackPoint]) -> List[Dict[str, float]]:
    return [transform_track_point_to_api(p) for p in points]


__all__ = [
    "transform_api_route_track_point",
    "transform_api_route_track_points",
    "transform_api_track_point",
    "transform_api_track_points",
    "transform_track_point_to_api",
    "transform_track_points_to_api",
    "validate_track_point",
    "validate_track_points",
]
