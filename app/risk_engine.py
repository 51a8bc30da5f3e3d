"""Deterministic pollutant risk logic.

This module converts raw hourly pollutant series into peak values, compares
them against the fixed WHO short-term guideline table and annotates elevated
pollutants with their typical symptoms. Every function is pure: no I/O, no
logging, no shared mutable state, and nothing here raises for missing data.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Iterable, Mapping

from app.domain import (
    DISPLAY_ORDER,
    ELEVATED_TEXT,
    FALLBACK_SYMPTOM,
    MISSING_VALUE_TEXT,
    NO_ISSUES_TEXT,
    POLLUTANT_LABELS,
    SYMPTOMS,
    THRESHOLDS,
    UNITS,
    WITHIN_GUIDELINE_TEXT,
    HourlyMeasurement,
    PollutantEvaluation,
    PollutantKey,
    RiskIssue,
    RiskReport,
    RiskReportRow,
)


def _is_valid_sample(value: Any) -> bool:
    """Return True for finite real numbers (bools are not samples)."""
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, Real):
        return False
    return math.isfinite(value)


def extract_peak(series: Iterable[Any] | None) -> float | None:
    """
    Reduce an hourly series to its maximum finite sample.

    Absent, empty and all-invalid series collapse to None, never to zero.
    """
    if not series:
        return None
    valid = [float(v) for v in series if _is_valid_sample(v)]
    if not valid:
        return None
    return max(valid)


def extract_peaks(measurement: HourlyMeasurement) -> dict[PollutantKey, float | None]:
    """Peak value per pollutant, in display order."""
    return {key: extract_peak(measurement.series(key)) for key in DISPLAY_ORDER}


def _is_elevated(value: float | None, threshold: float) -> bool:
    """Strictly-greater comparison; a peak equal to the guideline is not elevated."""
    return value is not None and value > threshold


def evaluate(peaks: Mapping[PollutantKey, float | None]) -> dict[PollutantKey, PollutantEvaluation]:
    """Compare each pollutant's peak against its guideline threshold."""
    evaluations: dict[PollutantKey, PollutantEvaluation] = {}
    for key in DISPLAY_ORDER:
        value = peaks.get(key)
        threshold = THRESHOLDS[key]
        evaluations[key] = PollutantEvaluation(
            key=key,
            value=value,
            threshold=threshold,
            elevated=_is_elevated(value, threshold),
        )
    return evaluations


def annotate(evaluations: Mapping[PollutantKey, PollutantEvaluation]) -> list[RiskIssue]:
    """
    Build one RiskIssue per elevated pollutant.

    Issues follow DISPLAY_ORDER no matter how the input mapping is ordered. The
    elevation flag is re-derived from value/threshold so that hand-built
    evaluations cannot smuggle in an issue below its guideline.
    """
    issues: list[RiskIssue] = []
    for key in DISPLAY_ORDER:
        ev = evaluations.get(key)
        if ev is None or not _is_elevated(ev.value, ev.threshold):
            continue
        issues.append(
            RiskIssue(
                key=key,
                label=POLLUTANT_LABELS.get(key, key.value.upper()),
                peak_value=ev.value,
                threshold=ev.threshold,
                unit=UNITS[key],
                symptoms=SYMPTOMS.get(key) or FALLBACK_SYMPTOM,
            )
        )
    return issues


def format_value(key: PollutantKey, value: float | None) -> str:
    """Format a peak with the unit of its pollutant; CO keeps two decimals."""
    if value is None:
        return MISSING_VALUE_TEXT
    if key == PollutantKey.CO:
        return f"{value:.2f} {UNITS[key]}"
    return f"{value:.1f} {UNITS[key]}"


def format_threshold(key: PollutantKey, threshold: float | None = None) -> str:
    """Format a guideline threshold with the unit of its pollutant."""
    thr = THRESHOLDS[key] if threshold is None else threshold
    return f"{thr:g} {UNITS[key]}"


def format_issue(issue: RiskIssue) -> str:
    """One-line summary of an issue, e.g. 'PM2.5 > 31.2 µg/m³ | <symptoms>'."""
    return f"{issue.label} > {issue.peak_value:.1f} {issue.unit} | {issue.symptoms}"


def _report_row(ev: PollutantEvaluation) -> RiskReportRow:
    """Convert an evaluation into a display row."""
    return RiskReportRow(
        key=ev.key,
        label=POLLUTANT_LABELS[ev.key],
        peak_value=ev.value,
        peak_display=format_value(ev.key, ev.value),
        threshold=ev.threshold,
        threshold_display=format_threshold(ev.key, ev.threshold),
        unit=UNITS[ev.key],
        elevated=ev.elevated,
        status_text=ELEVATED_TEXT if ev.elevated else WITHIN_GUIDELINE_TEXT,
    )


def build_risk_report(measurement: HourlyMeasurement) -> RiskReport:
    """Pure function: peaks -> evaluation -> issues, rendered as a report."""
    evaluations = evaluate(extract_peaks(measurement))
    issues = annotate(evaluations)
    return RiskReport(
        rows=[_report_row(evaluations[key]) for key in DISPLAY_ORDER],
        issues=issues,
        issues_summary=None if issues else NO_ISSUES_TEXT,
    )
