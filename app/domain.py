"""Domain vocabulary and strict schemas for pollutant risk reports.

This module defines the stable contract between the risk engine and the HTTP
layer: pollutant keys, the fixed guideline tables, and Pydantic models for the
payloads that flow through the system. No interpretation logic lives here.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


class PollutantKey(str, Enum):
    """Pollutants covered by the guideline table, keyed by their API field names."""
    PM2_5 = "pm2_5"
    PM10 = "pm10"
    NO2 = "no2"
    O3 = "o3"
    SO2 = "so2"
    CO = "co"


# Drives both the tabular report and the issue list.
DISPLAY_ORDER: Tuple[PollutantKey, ...] = (
    PollutantKey.PM2_5,
    PollutantKey.PM10,
    PollutantKey.NO2,
    PollutantKey.O3,
    PollutantKey.SO2,
    PollutantKey.CO,
)

UG_M3 = "µg/m³"
MG_M3 = "mg/m³"

# WHO short-term air quality guideline levels. CO is in mg/m³, the rest in µg/m³.
THRESHOLDS: Mapping[PollutantKey, float] = MappingProxyType({
    PollutantKey.PM2_5: 15,
    PollutantKey.PM10: 45,
    PollutantKey.NO2: 25,
    PollutantKey.O3: 100,
    PollutantKey.SO2: 40,
    PollutantKey.CO: 4,
})

UNITS: Mapping[PollutantKey, str] = MappingProxyType({
    PollutantKey.PM2_5: UG_M3,
    PollutantKey.PM10: UG_M3,
    PollutantKey.NO2: UG_M3,
    PollutantKey.O3: UG_M3,
    PollutantKey.SO2: UG_M3,
    PollutantKey.CO: MG_M3,
})

POLLUTANT_LABELS: Mapping[PollutantKey, str] = MappingProxyType({
    PollutantKey.PM2_5: "PM2.5",
    PollutantKey.PM10: "PM10",
    PollutantKey.NO2: "NO2",
    PollutantKey.O3: "O3",
    PollutantKey.SO2: "SO2",
    PollutantKey.CO: "CO",
})

SYMPTOMS: Mapping[PollutantKey, str] = MappingProxyType({
    PollutantKey.PM2_5: (
        "Increased risk of cardio-respiratory diseases, asthma exacerbation, coughing, "
        "shortness of breath, higher mortality with long-term exposure"
    ),
    PollutantKey.PM10: (
        "Irritation of the respiratory tract, worsening of chronic lung diseases, "
        "increased hospital admissions"
    ),
    PollutantKey.NO2: (
        "Respiratory tract irritation, worsening of asthma symptoms, reduced lung function, "
        "increased susceptibility to infections"
    ),
    PollutantKey.O3: (
        "Coughing, throat/chest pain, worsening of asthma, and reduced lung function "
        "during physical activity"
    ),
    PollutantKey.SO2: "Bronchospasm in asthmatics, coughing, irritation of the respiratory tract",
    PollutantKey.CO: (
        "Reduced oxygen delivery (especially in people with heart disease), dizziness, weakness; "
        "in high doses, risk of stroke or heart attack"
    ),
})

FALLBACK_SYMPTOM = "Respiratory symptoms are possible"

NO_ISSUES_TEXT = "No pollutant peaks above WHO short-term AQGs."
ELEVATED_TEXT = "Elevated"
WITHIN_GUIDELINE_TEXT = "Within WHO short-term AQG"
MISSING_VALUE_TEXT = "—"
IMPACT_UNAVAILABLE_TEXT = "Health impact data unavailable"


class HourlyMeasurement(BaseModel):
    """One location's hourly pollutant history, oldest sample first."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    latitude: float
    longitude: float
    aqi: Optional[float] = None
    status: Optional[str] = None
    aqi_hourly: Optional[Tuple[Optional[float], ...]] = None
    pm10: Optional[Tuple[Optional[float], ...]] = None
    pm2_5: Optional[Tuple[Optional[float], ...]] = None
    co: Optional[Tuple[Optional[float], ...]] = None
    no2: Optional[Tuple[Optional[float], ...]] = None
    so2: Optional[Tuple[Optional[float], ...]] = None
    o3: Optional[Tuple[Optional[float], ...]] = None

    def series(self, key: PollutantKey) -> Optional[Tuple[Optional[float], ...]]:
        """Return the hourly series for a pollutant key."""
        return getattr(self, key.value)


class MapPoint(BaseModel):
    """Aggregated single-value reading for one grid cell of the map."""

    model_config = ConfigDict(extra="ignore")

    latitude: float
    longitude: float
    aqi: float
    status: Optional[str] = None
    pm10: Optional[float] = None
    pm2_5: Optional[float] = None
    co: Optional[float] = None
    no2: Optional[float] = None
    so2: Optional[float] = None


class PollutantEvaluation(_StrictBaseModel):
    """Peak value of one pollutant compared against its guideline threshold."""
    key: PollutantKey
    value: float | None = None
    threshold: float
    elevated: bool = False


class RiskIssue(_StrictBaseModel):
    """A pollutant whose peak exceeds its guideline, with the associated symptoms."""
    key: PollutantKey
    label: str
    peak_value: float
    threshold: float
    unit: str
    symptoms: str


class RiskReportRow(_StrictBaseModel):
    """Display row of the tabular risk report."""
    key: PollutantKey
    label: str
    peak_value: float | None = None
    peak_display: str
    threshold: float
    threshold_display: str
    unit: str
    elevated: bool
    status_text: str


class RiskReport(_StrictBaseModel):
    """Tabular report plus the derived issue list."""
    rows: List[RiskReportRow] = Field(default_factory=list)
    issues: List[RiskIssue] = Field(default_factory=list)
    issues_summary: str | None = None


class SeverityLevel(_StrictBaseModel):
    """One of the six ordered health-impact severity levels."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(ge=0, le=5)
    label: str
    color_class: str
    description: str


SEVERITY_LEVELS: Tuple[SeverityLevel, ...] = (
    SeverityLevel(
        index=0,
        label="Good",
        color_class="bg-green-100 text-green-800",
        description="Air quality is satisfactory and poses little or no risk.",
    ),
    SeverityLevel(
        index=1,
        label="Moderate",
        color_class="bg-yellow-100 text-yellow-800",
        description="Air quality is acceptable; some pollutants may be a concern for a few sensitive people.",
    ),
    SeverityLevel(
        index=2,
        label="Unhealthy for Sensitive Groups",
        color_class="bg-orange-100 text-orange-800",
        description="Sensitive groups may experience health effects; general public is unlikely to be affected.",
    ),
    SeverityLevel(
        index=3,
        label="Unhealthy",
        color_class="bg-red-100 text-red-800",
        description="Everyone may begin to experience adverse health effects.",
    ),
    SeverityLevel(
        index=4,
        label="Very Unhealthy",
        color_class="bg-purple-100 text-purple-800",
        description="Health alert: everyone may experience more serious effects.",
    ),
    SeverityLevel(
        index=5,
        label="Hazardous",
        color_class="bg-rose-200 text-rose-900",
        description="Emergency conditions: serious health effects for entire population.",
    ),
)


class HealthImpactCard(_StrictBaseModel):
    """Classification card payload; `severity` is None when no score is available."""
    score: float | None = None
    severity: SeverityLevel | None = None
    message: str | None = None


class ChartDataset(_StrictBaseModel):
    """One line of a chart panel; invalid samples are None gaps."""
    label: str
    data: List[float | None] = Field(default_factory=list)
    border_color: str


class ChartPanel(_StrictBaseModel):
    """A titled chart sharing the location's hourly labels."""
    title: str
    datasets: List[ChartDataset] = Field(default_factory=list)


class LocationDashboard(_StrictBaseModel):
    """Everything the dashboard page renders for one location."""
    latitude: float
    longitude: float
    aqi: float | None = None
    status: str | None = None
    labels: List[str] = Field(default_factory=list)
    charts: List[ChartPanel] = Field(default_factory=list)
    risk_report: RiskReport
    health_impact: HealthImpactCard
