"""Factory helpers for choosing an air-quality data source at startup."""

from __future__ import annotations

from app import config
from app.data_sources.base import AirQualityDataSource, CallableAirQualityDataSource
from app.data_sources.air_quality_client import (
    fetch_grid_points,
    fetch_health_impact_score,
    fetch_location_series,
    fetch_region_points,
)
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "api"


def build_data_source(settings: config.Settings | None = None) -> AirQualityDataSource:
    """Instantiate the configured air-quality data source."""
    settings = settings or config.settings
    source = (settings.data_source or DEFAULT_SOURCE_NAME).lower()

    if source == "api":
        logger.info("Using air-quality API data source", extra={"base_url": mask_url(settings.api_base_url)})
        return CallableAirQualityDataSource(
            location_series=fetch_location_series,
            grid_points=fetch_grid_points,
            region_points=fetch_region_points,
            health_impact_score=fetch_health_impact_score,
        )

    if source == "snapshot":
        from .snapshot_source import SnapshotAirQualitySource

        path = settings.snapshot_path
        if not path:
            raise ValueError("snapshot_path must be set for the snapshot data source")
        logger.info("Using snapshot data source", extra={"path": path})
        return SnapshotAirQualitySource.from_path(path)

    raise ValueError(f"Unknown data source '{source}'")
