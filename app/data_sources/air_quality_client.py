"""Helpers for fetching measurements and health-impact predictions from the air-quality API."""
from __future__ import annotations

import math
from typing import Any, List, Optional, Sequence

import requests
import requests_cache
from pydantic import ValidationError
from retry_requests import retry

from app.config import settings
from app.data_sources.base import DataSourceError
from app.domain import HourlyMeasurement, MapPoint
from utils.logging_utils import get_tagged_logger, mask_url
logger = get_tagged_logger(__name__, tag='air_quality_client')

cache_session = requests_cache.CachedSession('.cache', expire_after=settings.http_cache_seconds)
session = retry(cache_session, retries=settings.http_retries, backoff_factor=0.2)

SINGLE_LOCATION_PATH = "/air-quality"
GRID_PATH = "/air-quality/all"
REGION_PATH = "/air-quality/kazakhstan"
HEALTH_IMPACT_PATH = "/health-impact"

# Order of the health-impact query parameters, keyed by HourlyMeasurement field.
HEALTH_IMPACT_FIELDS = ("aqi_hourly", "pm10", "pm2_5", "co", "no2", "so2", "o3")


class AirQualityApiError(DataSourceError):
    """Raised when the air-quality API cannot be reached or returns an unusable payload."""


def _url(path: str, base_url: str | None = None) -> str:
    """Join the configured base URL with an endpoint path."""
    base = (base_url or settings.api_base_url).rstrip("/")
    return f"{base}{path}"


def _get_json(path: str, params: dict, *, base_url: str | None = None) -> Any:
    """GET an endpoint and decode its JSON body, wrapping transport errors."""
    url = _url(path, base_url)
    try:
        resp = session.get(url, params=params, timeout=settings.api_timeout_seconds)
        resp.raise_for_status()
        return resp.json()
    except requests.exceptions.RequestException as exc:
        logger.warning(
            "Air-quality API request failed",
            extra={"url": mask_url(url), "params": params, "error": str(exc)},
        )
        raise AirQualityApiError(f"Request to {path} failed: {exc}") from exc
    except ValueError as exc:
        # json decoding error
        raise AirQualityApiError(f"Response from {path} is not valid JSON") from exc


def _parse_points(data: Any, *, context: str) -> List[MapPoint]:
    """Validate a {'data': [...]} map response into MapPoint objects."""
    if not isinstance(data, dict) or not isinstance(data.get("data"), list):
        raise AirQualityApiError(f"Unexpected {context} payload shape")
    try:
        return [MapPoint.model_validate(item) for item in data["data"]]
    except ValidationError as exc:
        raise AirQualityApiError(f"Invalid {context} point: {exc}") from exc


def _parse_score(data: Any) -> float:
    """
    Accept the shapes the predictor has been seen to return: a bare number,
    a numeric string, or an object with a `prediction` member.
    """
    raw = data.get("prediction") if isinstance(data, dict) else data
    if isinstance(raw, bool) or raw is None:
        raise AirQualityApiError(f"Health-impact response has no numeric prediction: {data!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise AirQualityApiError(f"Health-impact prediction is not numeric: {raw!r}") from exc
    if math.isnan(value):
        raise AirQualityApiError("Health-impact prediction is NaN")
    return value


def latest_sample(series: Optional[Sequence[Optional[float]]]) -> float:
    """Most recent sample of a series; 0 when absent, empty, or not a finite number."""
    if not series:
        return 0.0
    last = series[-1]
    if last is None or isinstance(last, bool):
        return 0.0
    try:
        value = float(last)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def latest_samples(measurement: HourlyMeasurement) -> dict[str, float]:
    """Health-impact query parameters built from the last sample of every series."""
    params = {}
    for field in HEALTH_IMPACT_FIELDS:
        # the predictor names the AQI input `aqi`, not `aqi_hourly`
        name = "aqi" if field == "aqi_hourly" else field
        params[name] = latest_sample(getattr(measurement, field))
    return params


def fetch_location_series(latitude: float, longitude: float, *, base_url: str | None = None) -> HourlyMeasurement:
    """Fetch the hourly pollutant history for a single location."""
    data = _get_json(SINGLE_LOCATION_PATH, {"latitude": latitude, "longitude": longitude}, base_url=base_url)
    try:
        measurement = HourlyMeasurement.model_validate(data)
    except ValidationError as exc:
        raise AirQualityApiError(f"Invalid hourly measurement payload: {exc}") from exc
    logger.debug(
        "Fetched hourly series",
        extra={"latitude": latitude, "longitude": longitude,
               "hours": len(measurement.pm10 or ())},
    )
    return measurement


def fetch_grid_points(
    lat_start: float = 0,
    lat_end: float = 180,
    lon_start: float = 0,
    lon_end: float = 180,
    step: float = 0.25,
    *,
    base_url: str | None = None,
) -> List[MapPoint]:
    """Fetch aggregated readings for every cell of a lat/lon grid."""
    params = {
        "lat_start": lat_start,
        "lat_end": lat_end,
        "lon_start": lon_start,
        "lon_end": lon_end,
        "step": step,
    }
    return _parse_points(_get_json(GRID_PATH, params, base_url=base_url), context="grid")


def fetch_region_points(step: float = 0.25, *, base_url: str | None = None) -> List[MapPoint]:
    """Fetch aggregated readings for the preset region shown on the map."""
    return _parse_points(_get_json(REGION_PATH, {"step": step}, base_url=base_url), context="region")


def fetch_health_impact_score(
    aqi: float,
    pm10: float,
    pm2_5: float,
    co: float,
    no2: float,
    so2: float,
    o3: float,
    *,
    base_url: str | None = None,
) -> float:
    """Ask the external predictor for a health-impact score from the latest samples."""
    params = {"aqi": aqi, "pm10": pm10, "pm2_5": pm2_5, "co": co, "no2": no2, "so2": so2, "o3": o3}
    return _parse_score(_get_json(HEALTH_IMPACT_PATH, params, base_url=base_url))


def main():
    """Manual test helper for the air-quality client."""
    lat, lon = 43.24, 76.89

    measurement = fetch_location_series(lat, lon)
    print(f"location: {measurement.latitude}, {measurement.longitude}\n"
          f"    aqi: {measurement.aqi} ({measurement.status})\n"
          f"    hours: {len(measurement.pm10 or ())}\n"
          f"    latest: {latest_samples(measurement)}")
    print(f"    health impact: {fetch_health_impact_score(**latest_samples(measurement))}")


if __name__ == "__main__":
    main()
