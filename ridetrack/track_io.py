"""Track file reading and writing (CSV, Excel and compact JSON payloads).

Tabular files use one row per sample with the columns in ``TRACK_COLUMNS``;
only ``longitude`` and ``latitude`` are required. JSON files hold the compact
upstream format, either as a bare list or wrapped as
``{"trip": {"track_points": [...]}}`` / ``{"route": {"track_points": [...]}}``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import pandas as pd

from .errors import EmptyTrackError, TrackFileError, TrackValidationError
from .models import TrackPoint
from .transform import (
    transform_api_route_track_points,
    transform_api_track_points,
    transform_track_points_to_api,
    validate_track_point,
)

_LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]

TRACK_COLUMNS = [
    "longitude",
    "latitude",
    "elevation",
    "timestamp",
    "speed",
    "heart_rate",
    "cadence",
]
_REQUIRED_COLUMNS = {"longitude", "latitude"}
_TABULAR_SUFFIXES = {".csv", ".xlsx"}


def _cell(value: Any) -> Optional[float]:
    if pd.isna(value):
        return None
    number = float(value)
    if number.is_integer():
        return int(number)
    return number


def frame_to_points(frame: pd.DataFrame) -> List[TrackPoint]:
    """Convert a sample-per-row frame into validated track points."""

    columns = {str(col).strip().lower(): col for col in frame.columns}
    missing = _REQUIRED_COLUMNS - set(columns)
    if missing:
        raise TrackFileError(f"Missing required columns: {', '.join(sorted(missing))}")
    present = [name for name in TRACK_COLUMNS if name in columns]
    points: List[TrackPoint] = []
    for row_number, row in enumerate(frame[[columns[n] for n in present]].itertuples(index=False)):
        try:
            values = {name: _cell(value) for name, value in zip(present, row)}
            point = TrackPoint(**values)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise TrackFileError(f"Row {row_number + 2} is malformed: {exc}") from exc
        points.append(validate_track_point(point, row_number))
    return points


def points_to_frame(points: Sequence[TrackPoint]) -> pd.DataFrame:
    """Return a frame with one row per point and the ``TRACK_COLUMNS`` layout."""

    rows = [{name: getattr(p, name) for name in TRACK_COLUMNS} for p in points]
    return pd.DataFrame(rows, columns=TRACK_COLUMNS)


def _points_from_payload(payload: Any) -> List[TrackPoint]:
    if isinstance(payload, list):
        return transform_api_track_points(payload)
    if isinstance(payload, dict):
        trip = payload.get("trip")
        if isinstance(trip, dict) and isinstance(trip.get("track_points"), list):
            return transform_api_track_points(trip["track_points"])
        route = payload.get("route")
        if isinstance(route, dict) and isinstance(route.get("track_points"), list):
            return transform_api_route_track_points(route["track_points"])
        if isinstance(payload.get("track_points"), list):
            return transform_api_track_points(payload["track_points"])
    raise TrackFileError("JSON payload does not contain a list of track points")


def read_track(path: PathLike) -> List[TrackPoint]:
    """Load a track from ``path``.

    Raises:
        FileNotFoundError: If the file does not exist.
        TrackFileError: If the file is malformed or of an unsupported type.
        TrackValidationError: If a point has invalid coordinates.
    """

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(file_path)
    suffix = file_path.suffix.lower()
    try:
        if suffix == ".json":
            with file_path.open("r", encoding="utf-8") as handle:
                points = _points_from_payload(json.load(handle))
        elif suffix == ".csv":
            points = frame_to_points(pd.read_csv(file_path))
        elif suffix == ".xlsx":
            points = frame_to_points(pd.read_excel(file_path, engine="openpyxl"))
        else:
            raise TrackFileError(f"Unsupported track file type '{suffix}'")
    except (json.JSONDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise TrackFileError(f"Unable to parse {file_path}: {exc}") from exc
    except TrackValidationError as exc:
        raise TrackValidationError(f"{file_path}: {exc}") from exc
    _LOGGER.info("Loaded %d track points from %s", len(points), file_path)
    return points


def write_track(path: PathLike, points: Sequence[TrackPoint]) -> Path:
    """Persist ``points`` to ``path``; the suffix selects the format.

    Raises:
        EmptyTrackError: If ``points`` is empty.
        TrackFileError: If the suffix is not supported.
    """

    if not points:
        raise EmptyTrackError("Cannot write a track without points")
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix not in _TABULAR_SUFFIXES and suffix != ".json":
        raise TrackFileError(f"Unsupported track file type '{suffix}'")
    file_path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".json":
        with file_path.open("w", encoding="utf-8") as handle:
            json.dump(transform_track_points_to_api(points), handle, indent=2)
    elif suffix == ".csv":
        points_to_frame(points).to_csv(file_path, index=False)
    else:
        points_to_frame(points).to_excel(file_path, index=False, engine="openpyxl")
    _LOGGER.info("Wrote %d track points to %s", len(points), file_path)
    return file_path


__all__ = [
    "TRACK_COLUMNS",
    "frame_to_points",
    "points_to_frame",
    "read_track",
    "write_track",
]
