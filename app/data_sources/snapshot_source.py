"""JSON snapshot-backed air-quality data source.

Serves the same data as the remote API from a single file, for offline demos
and fixtures. Expected layout::

    {
        "locations": [ {<hourly measurement>}, ... ],
        "points": [ {<map point>}, ... ],
        "health_impact_score": 2
    }

Locations are matched to the nearest stored coordinates within a tolerance.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping

from pydantic import ValidationError

from app.data_sources.base import AirQualityDataSource, DataSourceError
from app.domain import HourlyMeasurement, MapPoint
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="snapshot_data_source")


class SnapshotLookupError(DataSourceError):
    """Raised when the snapshot has no data for a request."""


class SnapshotAirQualitySource(AirQualityDataSource):
    """Answer data-source calls from an in-memory snapshot."""

    DEFAULT_TOLERANCE_DEG = 0.01

    def __init__(
        self,
        locations: List[HourlyMeasurement],
        points: List[MapPoint],
        health_impact_score: float | None = None,
        *,
        tolerance_deg: float = DEFAULT_TOLERANCE_DEG,
    ) -> None:
        """Hold parsed snapshot contents."""
        self.locations = list(locations)
        self.points = list(points)
        self.health_impact_score = health_impact_score
        self.tolerance_deg = tolerance_deg

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any], **kwargs) -> "SnapshotAirQualitySource":
        """Validate a decoded snapshot document."""
        try:
            locations = [HourlyMeasurement.model_validate(x) for x in payload.get("locations", [])]
            points = [MapPoint.model_validate(x) for x in payload.get("points", [])]
        except ValidationError as exc:
            raise ValueError(f"Invalid snapshot contents: {exc}") from exc
        score = payload.get("health_impact_score")
        if score is not None:
            if isinstance(score, bool) or not isinstance(score, (int, float)):
                raise ValueError(f"Invalid snapshot health_impact_score: {score!r}")
            score = float(score)
        return cls(locations, points, score, **kwargs)

    @classmethod
    def from_path(cls, path: str | Path, **kwargs) -> "SnapshotAirQualitySource":
        """Load a snapshot file from disk."""
        with open(path, encoding="utf-8") as fh:
            payload = json.load(fh)
        source = cls.from_mapping(payload, **kwargs)
        logger.info(
            "Loaded air-quality snapshot",
            extra={"path": str(path), "locations": len(source.locations), "points": len(source.points)},
        )
        return source

    def fetch_location_series(self, latitude: float, longitude: float) -> HourlyMeasurement:
        """Return the stored location closest to the requested coordinates."""
        best: HourlyMeasurement | None = None
        best_dist = None
        for loc in self.locations:
            dist = max(abs(loc.latitude - latitude), abs(loc.longitude - longitude))
            if dist <= self.tolerance_deg and (best_dist is None or dist < best_dist):
                best, best_dist = loc, dist
        if best is None:
            raise SnapshotLookupError(f"No snapshot data near {latitude}, {longitude}")
        return best

    def fetch_grid_points(
        self,
        lat_start: float = 0,
        lat_end: float = 180,
        lon_start: float = 0,
        lon_end: float = 180,
        step: float = 0.25,
    ) -> List[MapPoint]:
        """Return stored points inside the requested bounds; step is ignored."""
        return [
            p for p in self.points
            if lat_start <= p.latitude <= lat_end and lon_start <= p.longitude <= lon_end
        ]

    def fetch_region_points(self, step: float = 0.25) -> List[MapPoint]:
        """Return every stored point."""
        return list(self.points)

    def fetch_health_impact_score(self, *_args, **_kwargs) -> float:
        """Return the stored score regardless of inputs."""
        if self.health_impact_score is None:
            raise SnapshotLookupError("Snapshot has no health-impact score")
        return float(self.health_impact_score)
