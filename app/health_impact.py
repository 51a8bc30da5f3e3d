"""Map an externally predicted health-impact score onto the severity table."""

from __future__ import annotations

import math
from typing import Sequence

from app.domain import (
    IMPACT_UNAVAILABLE_TEXT,
    SEVERITY_LEVELS,
    HealthImpactCard,
    SeverityLevel,
)


def _round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer; .5 ties move away from zero."""
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return int(math.copysign(whole, value))


def clamp_score(score: float, levels: Sequence[SeverityLevel] = SEVERITY_LEVELS) -> int:
    """
    Clamp a raw score into the valid index range of `levels`, then round.

    The predictor's range is not bounded by contract, so negative values map to
    the first level and anything past the end maps to the last one. Clamping
    happens before rounding so infinities never reach int().
    """
    top = len(levels) - 1
    bounded = min(float(top), max(0.0, float(score)))
    return _round_half_away_from_zero(bounded)


def classify(score: float | None, levels: Sequence[SeverityLevel] = SEVERITY_LEVELS) -> SeverityLevel | None:
    """Return the severity level for `score`, or None when no score is available."""
    if score is None:
        return None
    if isinstance(score, float) and math.isnan(score):
        return None
    return levels[clamp_score(score, levels)]


def build_health_impact_card(score: float | None) -> HealthImpactCard:
    """Card payload: severity when classified, explicit unavailable message otherwise."""
    severity = classify(score)
    if severity is None:
        return HealthImpactCard(score=None, severity=None, message=IMPACT_UNAVAILABLE_TEXT)
    return HealthImpactCard(score=score, severity=severity, message=severity.description)
