"""Command-line entry point.

Run:
    python -m ridetrack normalize ride.json --output ride_clean.csv
    python -m ridetrack investigate ride.json --max-points 30 --map-html map.html
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .config import (
    DEFAULT_COLLINEAR_LEVEL,
    INVESTIGATION_MAX_POINTS,
    INVESTIGATION_STATIONARY_MAX_RADIUS_M,
    INVESTIGATION_STATIONARY_MIN_DURATION_S,
    LOG_FORMAT,
    LOG_LEVEL,
    SPEED_FILTER_ENABLED,
)
from .errors import TrackError
from .geometry.normalizer import clean_track
from .investigation import (
    InvestigationPointsOptions,
    select_investigation_points,
    sort_chronologically,
)
from .models import CollinearRemovalLevel, ReductionStats, TrackKind, TrackPoint
from .tools.preview_map import create_track_map
from .track_io import read_track, write_track


def _setup_logging() -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


def _default_output_path(input_path: Path, suffix: str) -> Path:
    return input_path.parent / f"{input_path.stem}_{suffix}{input_path.suffix}"


def _log_stats(stats: ReductionStats) -> None:
    logging.info(
        "%s: %d -> %d points (-%d, %.1f%% reduction)",
        stats.stage,
        stats.input_count,
        stats.output_count,
        stats.removed_count,
        stats.reduction_pct,
    )


def _write_map(
    path: Optional[Path],
    track: Sequence[TrackPoint],
    investigation_points: Optional[Sequence[TrackPoint]] = None,
) -> None:
    if path is None:
        return
    create_track_map(
        track, investigation_points=investigation_points, output_html_path=path
    )
    logging.info("Preview map written to %s", path)


def _cmd_normalize(args: argparse.Namespace) -> int:
    points = read_track(args.input)
    kind = TrackKind(args.kind) if args.kind else None
    cleaned = clean_track(
        points,
        CollinearRemovalLevel.from_name(args.level),
        kind=kind,
        speed_filter=not args.no_speed_filter,
        on_stats=_log_stats,
    )
    output = args.output or _default_output_path(args.input, "normalized")
    write_track(output, cleaned.points)
    _write_map(args.map_html, cleaned.points)
    return 0


def _cmd_investigate(args: argparse.Namespace) -> int:
    points = read_track(args.input)
    options = InvestigationPointsOptions(
        max_points=args.max_points,
        stationary_min_duration=args.min_duration,
        stationary_max_distance=args.max_radius,
    )
    selected: List[TrackPoint] = select_investigation_points(points, options)
    if args.chronological:
        selected = sort_chronologically(selected)
    output = args.output or _default_output_path(args.input, "investigation")
    write_track(output, selected)
    _write_map(args.map_html, points, selected)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="ridetrack",
        description="Clean GPS tracks and select investigation points.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    normalize = sub.add_parser("normalize", help="Filter and simplify a track")
    normalize.add_argument("input", type=Path, help="Track file (.json, .csv, .xlsx)")
    normalize.add_argument("--output", type=Path, help="Output track file")
    normalize.add_argument(
        "--level",
        choices=[level.name.lower() for level in CollinearRemovalLevel],
        default=DEFAULT_COLLINEAR_LEVEL,
        help="Collinear removal strength (default: %(default)s)",
    )
    normalize.add_argument(
        "--kind",
        choices=[kind.value for kind in TrackKind],
        help="Force trip (timestamped) or route processing",
    )
    normalize.add_argument(
        "--no-speed-filter",
        action="store_true",
        default=not SPEED_FILTER_ENABLED,
        help="Skip speed outlier rejection",
    )
    normalize.add_argument("--map-html", type=Path, help="Write an HTML preview map")
    normalize.set_defaults(handler=_cmd_normalize)

    investigate = sub.add_parser(
        "investigate", help="Select points worth field follow-up"
    )
    investigate.add_argument("input", type=Path, help="Track file (.json, .csv, .xlsx)")
    investigate.add_argument("--output", type=Path, help="Output track file")
    investigate.add_argument(
        "--max-points",
        type=int,
        default=INVESTIGATION_MAX_POINTS,
        help="Maximum number of points (default: %(default)s)",
    )
    investigate.add_argument(
        "--min-duration",
        type=float,
        default=INVESTIGATION_STATIONARY_MIN_DURATION_S,
        help="Minimum stop duration in seconds (default: %(default)s)",
    )
    investigate.add_argument(
        "--max-radius",
        type=float,
        default=INVESTIGATION_STATIONARY_MAX_RADIUS_M,
        help="Maximum stop radius in metres (default: %(default)s)",
    )
    investigate.add_argument(
        "--chronological",
        action="store_true",
        help="Order output by timestamp instead of score",
    )
    investigate.add_argument("--map-html", type=Path, help="Write an HTML preview map")
    investigate.set_defaults(handler=_cmd_investigate)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m ridetrack``."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging()

    try:
        return args.handler(args)
    except FileNotFoundError as exc:
        logging.error("Track file not found: %s", exc)
    except (TrackError, ValueError) as exc:
        logging.error("%s", exc)
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
