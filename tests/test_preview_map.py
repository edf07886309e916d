"""Tests for the folium preview map."""

from __future__ import annotations

from pathlib import Path

import folium
import pytest

from ridetrack.errors import EmptyTrackError
from ridetrack.tools.preview_map import create_track_map

from conftest import make_point


def _children(map_object: folium.Map, kind: type) -> list:
    return [child for child in map_object._children.values() if isinstance(child, kind)]


def test_map_draws_track_and_investigation_points(tmp_path: Path) -> None:
    track = [
        make_point(51.4800, -3.1800, 1_700_000_000),
        make_point(51.4805, -3.1790, 1_700_000_060),
        make_point(51.4810, -3.1800, 1_700_000_120),
    ]
    output_path = tmp_path / "maps" / "preview.html"
    map_object = create_track_map(
        track,
        investigation_points=[make_point(51.4805, -3.1790, 1_700_000_060, 42.0)],
        output_html_path=output_path,
    )

    assert isinstance(map_object, folium.Map)
    assert len(_children(map_object, folium.PolyLine)) == 1
    # Start, end and one investigation marker.
    assert len(_children(map_object, folium.CircleMarker)) == 3
    assert output_path.exists(), "Expected the HTML map output to be written"
    html = output_path.read_text(encoding="utf-8")
    assert "Investigation point #1" in html
    assert "Elevation: 42 m" in html


def test_single_point_track_has_markers_only() -> None:
    map_object = create_track_map([make_point(10.0, 20.0)])
    assert _children(map_object, folium.PolyLine) == []
    assert len(_children(map_object, folium.CircleMarker)) == 2


def test_empty_track_raises() -> None:
    with pytest.raises(EmptyTrackError):
        create_track_map([])
