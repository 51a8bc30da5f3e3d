"""HTTP API for the air-quality dashboard."""

import datetime as dt
import hmac
from typing import List, Optional
from zoneinfo import ZoneInfoNotFoundError

import redis
from fastapi import APIRouter, Depends, Header, HTTPException, Path, Query, status
from pydantic import BaseModel

from .config import settings
from .dashboard_service import (
    SeriesLengthMismatchError,
    get_location_dashboard,
    resolve_label_timezone,
)
from .data_sources import DataSourceError, build_data_source
from .domain import SEVERITY_LEVELS, LocationDashboard, RiskReport, SeverityLevel
from .map_markers import MapMarker, to_markers
from .risk_engine import build_risk_report
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="app/api")

FETCH_ERROR_DETAIL = "Failed to fetch hourly data"
MAP_FETCH_ERROR_DETAIL = "Failed to fetch map data"

_redis_client = None
if settings.api_key_redis_url:
    try:
        _redis_client = redis.Redis.from_url(settings.api_key_redis_url)
        logger.info("API key checks will use Redis backend",
                    extra={"redis_url": mask_url(settings.api_key_redis_url)})
    except ValueError as exc:
        logger.warning("Invalid Redis URL for API key checks; falling back to static key",
                       extra={"error": str(exc)})


def require_api_key(x_api_key: str | None = Header(default=None)):
    """
    Validate X-API-Key header against Redis (if configured) or the static api_key setting.
    """
    # No key configured anywhere: open access (dev/default mode).
    if not settings.api_key and not _redis_client:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if _redis_client:
        logger.debug("Checking API key against Redis")
        try:
            if _redis_client.sismember(settings.api_key_redis_set, x_api_key):
                return
        except redis.exceptions.RedisError as e:
            logger.warning("Redis API key lookup error; falling back to static key",
                           extra={"error": str(e)})

    if settings.api_key and hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
DATA_SOURCE = build_data_source(settings)


class MapPointsResponse(BaseModel):
    """Decorated map markers."""
    data: List[MapMarker]


class SeverityLevelsResponse(BaseModel):
    """The static severity table, lowest index first."""
    levels: List[SeverityLevel]


def _resolve_tz(tz_name: Optional[str]) -> Optional[dt.tzinfo]:
    """Resolve a timezone name from the request or settings; 400 when unknown."""
    name = tz_name or settings.label_timezone
    try:
        return resolve_label_timezone(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise HTTPException(status_code=400, detail=f"Invalid timezone: {name}")


@router.get("/map/points", response_model=MapPointsResponse)
def get_map_points(step: Optional[float] = Query(default=None, gt=0)):
    """Return the region's grid readings decorated as map markers."""
    step = step or settings.map_step
    try:
        points = DATA_SOURCE.fetch_region_points(step=step)
    except DataSourceError as exc:
        logger.error("Region fetch failed", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=MAP_FETCH_ERROR_DETAIL)
    logger.debug(f"Fetched {len(points)} region points at step {step}")
    return MapPointsResponse(data=to_markers(points))


@router.get("/map/grid", response_model=MapPointsResponse)
def get_map_grid(
    lat_start: float = Query(default=0, ge=-90, le=180),
    lat_end: float = Query(default=180, ge=-90, le=180),
    lon_start: float = Query(default=0, ge=-180, le=180),
    lon_end: float = Query(default=180, ge=-180, le=180),
    step: Optional[float] = Query(default=None, gt=0),
):
    """Return readings for an arbitrary lat/lon grid decorated as map markers."""
    if lat_start > lat_end or lon_start > lon_end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Grid start must not exceed end")
    try:
        points = DATA_SOURCE.fetch_grid_points(
            lat_start=lat_start,
            lat_end=lat_end,
            lon_start=lon_start,
            lon_end=lon_end,
            step=step or settings.map_step,
        )
    except DataSourceError as exc:
        logger.error("Grid fetch failed", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=MAP_FETCH_ERROR_DETAIL)
    return MapPointsResponse(data=to_markers(points))


@router.get("/locations/{latitude}/{longitude}/dashboard", response_model=LocationDashboard)
def get_dashboard(
    latitude: float = Path(..., ge=-90, le=90),
    longitude: float = Path(..., ge=-180, le=180),
    tz: Optional[str] = Query(default=None, description="IANA zone for chart labels"),
):
    """Return charts, risk report and health-impact card for one location."""
    label_tz = _resolve_tz(tz)
    try:
        return get_location_dashboard(latitude, longitude, label_tz=label_tz, data_source=DATA_SOURCE)
    except DataSourceError as exc:
        logger.error("Location fetch failed", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=FETCH_ERROR_DETAIL)
    except SeriesLengthMismatchError as exc:
        logger.error("Upstream series are misaligned", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.get("/locations/{latitude}/{longitude}/risk-report", response_model=RiskReport)
def get_risk_report(latitude: float = Path(..., ge=-90, le=90), longitude: float = Path(..., ge=-180, le=180)):
    """Return only the pollutant peak report for one location."""
    try:
        measurement = DATA_SOURCE.fetch_location_series(latitude, longitude)
    except DataSourceError as exc:
        logger.error("Location fetch failed", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=FETCH_ERROR_DETAIL)
    return build_risk_report(measurement)


@router.get("/health-impact/levels", response_model=SeverityLevelsResponse)
def get_severity_levels():
    """Return the static health-impact severity table."""
    return SeverityLevelsResponse(levels=list(SEVERITY_LEVELS))
