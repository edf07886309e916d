"""Dataclasses describing GPS track samples and the results derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A single GPS sample.

    Attributes:
        longitude: Longitude in decimal degrees, within [-180, 180].
        latitude: Latitude in decimal degrees, within [-90, 90].
        elevation: Elevation in metres, when recorded.
        timestamp: Unix epoch seconds. Routes (planned courses) have none.
        speed: Device-reported speed in metres/second.
        heart_rate: Heart rate in beats per minute.
        cadence: Cadence in revolutions per minute.
    """

    longitude: float
    latitude: float
    elevation: Optional[float] = None
    timestamp: Optional[float] = None
    speed: Optional[float] = None
    heart_rate: Optional[float] = None
    cadence: Optional[float] = None

    @property
    def has_timestamp(self) -> bool:
        return self.timestamp is not None


def has_timestamps(points: Sequence[TrackPoint]) -> bool:
    """Return True when every point carries a timestamp (False for empty input)."""

    return bool(points) and all(p.timestamp is not None for p in points)


class TrackKind(str, Enum):
    """Processing variant of a track.

    ``TRIP`` tracks are recorded rides with timestamps and get temporal
    processing (speed filtering, stationary consolidation). ``ROUTE`` tracks are
    planned courses carrying coordinates only.
    """

    TRIP = "trip"
    ROUTE = "route"


class CollinearRemovalLevel(float, Enum):
    """Tolerance ratios for collinear point removal."""

    LOW = 0.002  # keeps more points
    MEDIUM = 0.0035
    HIGH = 0.005  # removes more aggressively

    @classmethod
    def from_name(cls, name: str) -> "CollinearRemovalLevel":
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            choices = ", ".join(level.name.lower() for level in cls)
            raise ValueError(
                f"Unknown collinear removal level '{name}' (expected one of: {choices})"
            ) from exc


@dataclass(slots=True)
class StationaryGroup:
    """A contiguous span of points judged to be a single dwell episode."""

    start_index: int
    end_index: int
    points: List[TrackPoint]
    center_point: TrackPoint
    duration: float
    radius: float


@dataclass(slots=True)
class ScoredPoint:
    """Investigation point candidate with its accumulated priority score."""

    point: TrackPoint
    score: int


@dataclass(frozen=True, slots=True)
class ReductionStats:
    """Point counts before and after one processing stage."""

    stage: str
    input_count: int
    output_count: int

    @property
    def removed_count(self) -> int:
        return self.input_count - self.output_count

    @property
    def reduction_pct(self) -> float:
        if self.input_count == 0:
            return 0.0
        return self.removed_count / self.input_count * 100.0


StatsCallback = Callable[[ReductionStats], None]


@dataclass(frozen=True, slots=True)
class SpeedStatistics:
    """Distribution of consecutive-point speeds used for outlier rejection."""

    mean: float
    std_dev: float
    threshold: float
    sample_count: int


@dataclass(frozen=True, slots=True)
class TripAnalysis:
    """Geographic extremes of a track."""

    northernmost: TrackPoint
    southernmost: TrackPoint
    easternmost: TrackPoint
    westernmost: TrackPoint


@dataclass(slots=True)
class CleanedTrack:
    """Output of the full cleaning pipeline with per-stage statistics."""

    kind: TrackKind
    points: List[TrackPoint]
    stats: List[ReductionStats] = field(default_factory=list)


__all__ = [
    "CleanedTrack",
    "CollinearRemovalLevel",
    "ReductionStats",
    "ScoredPoint",
    "SpeedStatistics",
    "StationaryGroup",
    "StatsCallback",
    "TrackKind",
    "TrackPoint",
    "TripAnalysis",
    "has_timestamps",
]
