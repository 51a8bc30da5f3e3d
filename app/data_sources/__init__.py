"""Data source factories for plugging different air-quality backends."""

from .base import AirQualityDataSource, CallableAirQualityDataSource, DataSourceError
from .factory import build_data_source
from .snapshot_source import SnapshotAirQualitySource, SnapshotLookupError
from .air_quality_client import (
    AirQualityApiError,
    fetch_grid_points,
    fetch_health_impact_score,
    fetch_location_series,
    fetch_region_points,
    latest_samples,
)

__all__ = [
    "build_data_source",
    "SnapshotAirQualitySource",
    "SnapshotLookupError",
    "AirQualityDataSource",
    "CallableAirQualityDataSource",
    "DataSourceError",
    "AirQualityApiError",
    "fetch_grid_points",
    "fetch_health_impact_score",
    "fetch_location_series",
    "fetch_region_points",
    "latest_samples",
]
