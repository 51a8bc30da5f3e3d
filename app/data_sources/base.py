"""Interfaces and helpers for air-quality data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Protocol

from app.domain import HourlyMeasurement, MapPoint


class DataSourceError(RuntimeError):
    """Raised by any data source that cannot provide the requested data."""


class AirQualityDataSource(Protocol):
    """Interface for anything that can provide hourly measurements, map points and health-impact scores."""

    def fetch_location_series(self, latitude: float, longitude: float) -> HourlyMeasurement:
        """Return the hourly pollutant history for one location."""
        ...

    def fetch_grid_points(
        self,
        lat_start: float = 0,
        lat_end: float = 180,
        lon_start: float = 0,
        lon_end: float = 180,
        step: float = 0.25,
    ) -> List[MapPoint]:
        """Return aggregated readings for a lat/lon grid."""
        ...

    def fetch_region_points(self, step: float = 0.25) -> List[MapPoint]:
        """Return aggregated readings for the preset map region."""
        ...

    def fetch_health_impact_score(
        self,
        aqi: float,
        pm10: float,
        pm2_5: float,
        co: float,
        no2: float,
        so2: float,
        o3: float,
    ) -> float:
        """Return the externally predicted health-impact score."""
        ...


@dataclass
class CallableAirQualityDataSource(AirQualityDataSource):
    """Wrap four callables so they can be swapped for different backends."""

    location_series: Callable[..., HourlyMeasurement]
    grid_points: Callable[..., List[MapPoint]]
    region_points: Callable[..., List[MapPoint]]
    health_impact_score: Callable[..., float]

    def fetch_location_series(self, *args, **kwargs) -> HourlyMeasurement:
        """Delegate to the configured hourly-series callable."""
        return self.location_series(*args, **kwargs)

    def fetch_grid_points(self, *args, **kwargs) -> List[MapPoint]:
        """Delegate to the configured grid callable."""
        return self.grid_points(*args, **kwargs)

    def fetch_region_points(self, *args, **kwargs) -> List[MapPoint]:
        """Delegate to the configured region callable."""
        return self.region_points(*args, **kwargs)

    def fetch_health_impact_score(self, *args, **kwargs) -> float:
        """Delegate to the configured health-impact callable."""
        return self.health_impact_score(*args, **kwargs)
