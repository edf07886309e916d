"""Interactive HTML preview of a cleaned track and its investigation points."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import folium  # Using folium to build an interactive Leaflet map.

from ..errors import EmptyTrackError
from ..models import TrackPoint

LatLon = Tuple[float, float]
PathLike = Union[str, Path]

_TRACK_COLOR = "#2c7bb6"
_START_COLOR = "#1a9641"
_END_COLOR = "#d73027"
_INVESTIGATION_COLOR = "#fdae61"


def _latlon(points: Sequence[TrackPoint]) -> List[LatLon]:
    return [(p.latitude, p.longitude) for p in points]


def _format_timestamp(timestamp: Optional[float]) -> str:
    if timestamp is None:
        return "n/a"
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(
        "%Y-%m-%d %H:%M:%S UTC"
    )


def _popup_html(rank: int, point: TrackPoint) -> str:
    lines = [
        f"<strong>#{rank}</strong>",
        f"{point.latitude:.6f}, {point.longitude:.6f}",
        f"Time: {_format_timestamp(point.timestamp)}",
    ]
    if point.elevation is not None:
        lines.append(f"Elevation: {point.elevation:.0f} m")
    return "<br>".join(lines)


def create_track_map(
    track: Sequence[TrackPoint],
    *,
    investigation_points: Optional[Sequence[TrackPoint]] = None,
    output_html_path: Optional[PathLike] = None,
) -> folium.Map:
    """Create an interactive map of ``track`` with optional investigation markers.

    Args:
        track: Points drawn as a polyline in the given order.
        investigation_points: Markers numbered in the given order (score rank
            for selector output).
        output_html_path: Optional path to persist the map as an HTML file.

    Returns:
        A :class:`folium.Map` instance.

    Raises:
        EmptyTrackError: If ``track`` has no points.
    """

    if not track:
        raise EmptyTrackError("Cannot build a map from an empty track")
    coordinates = _latlon(track)

    folium_map = folium.Map(location=coordinates[0], zoom_start=13, control_scale=True)
    if len(coordinates) > 1:
        folium.PolyLine(
            coordinates,
            color=_TRACK_COLOR,
            weight=4,
            opacity=0.7,
            tooltip="Track",
        ).add_to(folium_map)
        folium_map.fit_bounds(
            [
                (min(lat for lat, _ in coordinates), min(lon for _, lon in coordinates)),
                (max(lat for lat, _ in coordinates), max(lon for _, lon in coordinates)),
            ]
        )

    for label, point, color in (
        ("Start", track[0], _START_COLOR),
        ("End", track[-1], _END_COLOR),
    ):
        folium.CircleMarker(
            location=(point.latitude, point.longitude),
            radius=6,
            color=color,
            fill=True,
            fill_color=color,
            tooltip=label,
        ).add_to(folium_map)

    for rank, point in enumerate(investigation_points or [], start=1):
        folium.CircleMarker(
            location=(point.latitude, point.longitude),
            radius=5,
            color=_INVESTIGATION_COLOR,
            fill=True,
            fill_color=_INVESTIGATION_COLOR,
            tooltip=f"Investigation point #{rank}",
            popup=folium.Popup(html=_popup_html(rank, point), max_width=300),
        ).add_to(folium_map)

    if output_html_path is not None:
        output_path = Path(output_html_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(output_path))

    return folium_map


__all__ = ["create_track_map"]
