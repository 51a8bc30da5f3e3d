"""Assemble the per-location dashboard from fetched measurements and the risk engine."""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

from app.data_sources import (
    AirQualityDataSource,
    CallableAirQualityDataSource,
    DataSourceError,
    fetch_grid_points,
    fetch_health_impact_score,
    fetch_location_series,
    fetch_region_points,
    latest_samples,
)
from app.domain import (
    ChartDataset,
    ChartPanel,
    HealthImpactCard,
    HourlyMeasurement,
    LocationDashboard,
)
from app.health_impact import build_health_impact_card
from app.risk_engine import build_risk_report
from app.time_axis import build_hourly_labels
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="app/dashboard_service")


class SeriesLengthMismatchError(ValueError):
    """Raised when the series of one location do not share a single hourly length."""


@dataclass(frozen=True)
class SeriesSpec:
    """One charted line: measurement field, legend label and line color."""
    field: str
    label: str
    border_color: str


@dataclass(frozen=True)
class PanelSpec:
    """A chart panel and the series drawn on it."""
    title: str
    series: tuple[SeriesSpec, ...]


CHART_PANELS: tuple[PanelSpec, ...] = (
    PanelSpec("Hourly AQI", (SeriesSpec("aqi_hourly", "AQI", "rgba(255, 206, 86, 1)"),)),
    PanelSpec("PM2.5 Levels", (SeriesSpec("pm2_5", "PM2.5", "rgba(153, 102, 255, 1)"),)),
    PanelSpec("PM10 Levels", (SeriesSpec("pm10", "PM10", "rgba(75, 192, 192, 1)"),)),
    PanelSpec(
        "Other Gases (CO, NO₂, SO₂)",
        (
            SeriesSpec("co", "CO", "rgba(255, 159, 64, 1)"),
            SeriesSpec("no2", "NO₂", "rgba(255, 99, 132, 1)"),
            SeriesSpec("so2", "SO₂", "rgba(54, 162, 235, 1)"),
            SeriesSpec("o3", "O₃", "rgba(100, 149, 237, 1)"),
        ),
    ),
)

CHARTED_FIELDS = tuple(s.field for panel in CHART_PANELS for s in panel.series)


def _default_data_source() -> AirQualityDataSource:
    """Data source backed directly by the air-quality API client."""
    return CallableAirQualityDataSource(
        location_series=fetch_location_series,
        grid_points=fetch_grid_points,
        region_points=fetch_region_points,
        health_impact_score=fetch_health_impact_score,
    )


def series_length(measurement: HourlyMeasurement, fields: Sequence[str] = CHARTED_FIELDS) -> int:
    """
    Common length of every present, non-empty series.

    Absent and empty series are left out of the chart rather than padded. Any
    disagreement among the rest raises, since labels would silently drift
    against samples otherwise.
    """
    lengths = {f: len(getattr(measurement, f)) for f in fields if getattr(measurement, f)}
    distinct = set(lengths.values())
    if len(distinct) > 1:
        raise SeriesLengthMismatchError(f"Hourly series lengths differ: {lengths}")
    return distinct.pop() if distinct else 0


def _chart_values(series: Sequence[Optional[float]] | None) -> List[float | None]:
    """Copy a series for charting, turning invalid samples into gaps."""
    out: List[float | None] = []
    for v in series or ():
        if v is None or isinstance(v, bool) or not math.isfinite(v):
            out.append(None)
        else:
            out.append(float(v))
    return out


def build_chart_panels(measurement: HourlyMeasurement) -> List[ChartPanel]:
    """Build the fixed set of chart panels; datasets share one x-axis."""
    panels: List[ChartPanel] = []
    for spec in CHART_PANELS:
        panels.append(
            ChartPanel(
                title=spec.title,
                datasets=[
                    ChartDataset(
                        label=s.label,
                        data=_chart_values(getattr(measurement, s.field)),
                        border_color=s.border_color,
                    )
                    for s in spec.series
                ],
            )
        )
    return panels


def resolve_label_timezone(name: str | None) -> dt.tzinfo | None:
    """Resolve a configured IANA zone name; None keeps the process-local zone."""
    if not name:
        return None
    return ZoneInfo(name)


def get_health_impact(
    measurement: HourlyMeasurement,
    *,
    data_source: AirQualityDataSource | None = None,
) -> HealthImpactCard:
    """
    Fetch the predicted score for the latest samples and classify it.

    A failed prediction becomes an explicit unavailable card, never a default
    severity.
    """
    ds = data_source or _default_data_source()
    params = latest_samples(measurement)
    try:
        score = ds.fetch_health_impact_score(**params)
    except DataSourceError as exc:
        logger.warning("Health-impact prediction unavailable", extra={"error": str(exc)})
        score = None
    return build_health_impact_card(score)


def get_location_dashboard(
    latitude: float,
    longitude: float,
    *,
    now: dt.datetime | None = None,
    label_tz: dt.tzinfo | None = None,
    data_source: AirQualityDataSource | None = None,
) -> LocationDashboard:
    """
    Fetch one location's series and derive everything the dashboard renders.

    Fetch failures of the series propagate as DataSourceError; the caller shows
    a generic error instead of invoking the engine on partial data.
    """
    ds = data_source or _default_data_source()

    logger.info(
        "Building location dashboard",
        extra={"latitude": latitude, "longitude": longitude},
    )
    measurement = ds.fetch_location_series(latitude, longitude)

    length = series_length(measurement)
    labels = build_hourly_labels(length, now or dt.datetime.now(dt.timezone.utc), label_tz)

    dashboard = LocationDashboard(
        latitude=measurement.latitude,
        longitude=measurement.longitude,
        aqi=measurement.aqi,
        status=measurement.status,
        labels=labels,
        charts=build_chart_panels(measurement),
        risk_report=build_risk_report(measurement),
        health_impact=get_health_impact(measurement, data_source=ds),
    )

    logger.info(
        "Computed location dashboard",
        extra={"hours": length, "issues": len(dashboard.risk_report.issues)},
    )
    return dashboard


def main():
    """Manual test helper for dashboard assembly."""
    from app.risk_engine import format_issue

    lat, lon = 43.24, 76.89
    dashboard = get_location_dashboard(lat, lon)
    print(f"location: {dashboard.latitude}, {dashboard.longitude}\n"
          f"    aqi: {dashboard.aqi} ({dashboard.status})\n"
          f"    hours: {len(dashboard.labels)} ({dashboard.labels[:1]} .. {dashboard.labels[-1:]})")
    for row in dashboard.risk_report.rows:
        print(f"    {row.label}: {row.peak_display} / {row.threshold_display} -> {row.status_text}")
    for issue in dashboard.risk_report.issues:
        print(f"    ! {format_issue(issue)}")
    if dashboard.risk_report.issues_summary:
        print(f"    {dashboard.risk_report.issues_summary}")
    card = dashboard.health_impact
    print(f"    health impact: {card.severity.label if card.severity else card.message}")


if __name__ == "__main__":
    main()
