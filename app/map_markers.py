"""Marker styling for the air-quality map."""

from __future__ import annotations

import math
from urllib.parse import quote

from app.domain import MapPoint

DEFAULT_MARKER_COLOR = "yellow"
MARKER_RADIUS = 10
MARKER_STROKE = "orange"
_URI_COMPONENT_SAFE = "-_.!~*'()"

# (upper bound inclusive, color); the first band also includes its lower bound 0.
AQI_MARKER_BANDS: tuple[tuple[float, str], ...] = (
    (50, "green"),
    (100, "yellow"),
    (150, "orange"),
    (200, "red"),
    (300, "purple"),
)
AQI_MARKER_TOP_COLOR = "maroon"


class MapMarker(MapPoint):
    """Map point decorated with its marker icon and dashboard link."""
    marker_color: str
    marker_icon: str
    dashboard_path: str


def marker_color(aqi: float | None) -> str:
    """Pick the US AQI band color for a marker; unusable values get the default."""
    if aqi is None or not math.isfinite(aqi) or aqi < 0:
        return DEFAULT_MARKER_COLOR
    for upper, color in AQI_MARKER_BANDS:
        if aqi <= upper:
            return color
    return AQI_MARKER_TOP_COLOR


def marker_icon_data_url(aqi: float | None, radius: int = MARKER_RADIUS) -> str:
    """Return a filled circle SVG as a data URL suitable for a map marker icon."""
    size = radius * 2
    svg = (
        f"<svg xmlns='http://www.w3.org/2000/svg' width='{size}' height='{size}' viewBox='0 0 {size} {size}'>"
        f"<circle cx='{radius}' cy='{radius}' r='{radius - 1}' fill='{marker_color(aqi)}' "
        f"stroke='{MARKER_STROKE}' stroke-width='1'/>"
        "</svg>"
    )
    return f"data:image/svg+xml;charset=UTF-8,{quote(svg, safe=_URI_COMPONENT_SAFE)}"


def dashboard_path(latitude: float, longitude: float) -> str:
    """Route of the per-location dashboard page."""
    return f"/dashboard/{latitude}/{longitude}"


def to_marker(point: MapPoint) -> MapMarker:
    """Decorate a map point with its marker styling."""
    return MapMarker(
        **point.model_dump(),
        marker_color=marker_color(point.aqi),
        marker_icon=marker_icon_data_url(point.aqi),
        dashboard_path=dashboard_path(point.latitude, point.longitude),
    )


def to_markers(points: list[MapPoint]) -> list[MapMarker]:
    """Decorate a list of map points, preserving order."""
    return [to_marker(p) for p in points]
