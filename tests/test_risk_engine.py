import math

import pytest

from app.domain import (
    DISPLAY_ORDER,
    FALLBACK_SYMPTOM,
    NO_ISSUES_TEXT,
    SYMPTOMS,
    THRESHOLDS,
    HourlyMeasurement,
    PollutantEvaluation,
    PollutantKey,
)
from app.risk_engine import (
    annotate,
    build_risk_report,
    evaluate,
    extract_peak,
    extract_peaks,
    format_issue,
    format_threshold,
    format_value,
)


def make_measurement(**overrides):
    base = {
        "latitude": 43.24,
        "longitude": 76.89,
        "aqi": 42,
        "status": "Good",
        "aqi_hourly": [40, 41, 42],
        "pm10": [10.0, 12.0, 11.0],
        "pm2_5": [5.0, 6.0, 7.0],
        "co": [0.3, 0.4, 0.35],
        "no2": [8.0, 9.0, 10.0],
        "so2": [2.0, 2.5, 3.0],
        "o3": [50.0, 60.0, 55.0],
    }
    base.update(overrides)
    return HourlyMeasurement(**base)


@pytest.mark.parametrize("series", [None, [], (), [None], [math.nan, math.inf, -math.inf, None]])
def test_extract_peak_missing_or_invalid_is_none(series):
    assert extract_peak(series) is None


def test_extract_peak_ignores_non_finite_samples():
    assert extract_peak([12, math.nan, 30, -math.inf, 5]) == 30
    assert extract_peak([math.inf, 1.5]) == 1.5


def test_extract_peak_skips_non_numeric_entries():
    assert extract_peak([None, "abc", True, 3.0]) == 3.0


def test_extract_peak_handles_negative_only_series():
    assert extract_peak([-3.0, -1.0]) == -1.0


def test_extract_peaks_uses_display_order_and_null_for_missing():
    peaks = extract_peaks(make_measurement(so2=None, co=[]))
    assert list(peaks) == list(DISPLAY_ORDER)
    assert peaks[PollutantKey.SO2] is None
    assert peaks[PollutantKey.CO] is None
    assert peaks[PollutantKey.O3] == 60.0


def test_evaluate_is_strictly_greater_than():
    at_limit = evaluate({PollutantKey.PM2_5: 15.0})
    assert at_limit[PollutantKey.PM2_5].elevated is False
    above = evaluate({PollutantKey.PM2_5: 15.01})
    assert above[PollutantKey.PM2_5].elevated is True


def test_evaluate_covers_all_keys_and_missing_values():
    result = evaluate({})
    assert list(result) == list(DISPLAY_ORDER)
    for key, ev in result.items():
        assert ev.value is None
        assert ev.elevated is False
        assert ev.threshold == THRESHOLDS[key]


def test_evaluate_co_uses_mg_threshold():
    result = evaluate({PollutantKey.CO: 4.5, PollutantKey.PM10: 4.5})
    assert result[PollutantKey.CO].elevated is True
    assert result[PollutantKey.PM10].elevated is False


def test_annotate_empty_when_nothing_elevated():
    assert annotate(evaluate({PollutantKey.PM10: 10.0})) == []


def test_annotate_follows_display_order_regardless_of_input_order():
    evaluations = evaluate({PollutantKey.CO: 9.0, PollutantKey.NO2: 80.0, PollutantKey.PM2_5: 40.0})
    shuffled = dict(reversed(list(evaluations.items())))
    issues = annotate(shuffled)
    assert [i.key for i in issues] == [PollutantKey.PM2_5, PollutantKey.NO2, PollutantKey.CO]
    assert issues[0].symptoms == SYMPTOMS[PollutantKey.PM2_5]
    assert issues[-1].unit == "mg/m³"


def test_annotate_ignores_elevated_flag_below_threshold():
    forged = {
        PollutantKey.PM10: PollutantEvaluation(key=PollutantKey.PM10, value=10.0, threshold=45, elevated=True),
    }
    assert annotate(forged) == []


def test_every_pollutant_has_a_symptom_description():
    for key in DISPLAY_ORDER:
        assert SYMPTOMS[key]
        assert SYMPTOMS[key] != FALLBACK_SYMPTOM


def test_annotate_uses_generic_symptom_when_table_entry_missing(monkeypatch):
    from types import MappingProxyType

    import app.risk_engine as risk_engine

    trimmed = {k: v for k, v in SYMPTOMS.items() if k != PollutantKey.SO2}
    monkeypatch.setattr(risk_engine, "SYMPTOMS", MappingProxyType(trimmed))
    issues = annotate(evaluate({PollutantKey.SO2: 41.0, PollutantKey.PM10: 50.0}))
    by_key = {i.key: i for i in issues}
    assert by_key[PollutantKey.SO2].symptoms == FALLBACK_SYMPTOM
    assert by_key[PollutantKey.PM10].symptoms == SYMPTOMS[PollutantKey.PM10]


def test_annotate_round_trip_matches_direct_pipeline():
    measurement = make_measurement(pm2_5=[20.0, math.nan, 16.0], o3=[101.0], co=[4.0])
    direct = annotate(evaluate(extract_peaks(measurement)))
    evaluations = evaluate(extract_peaks(measurement))
    replayed = annotate(evaluate({k: ev.value for k, ev in evaluations.items()}))
    assert replayed == direct
    assert [i.key for i in direct] == [PollutantKey.PM2_5, PollutantKey.O3]


def test_format_value_selects_unit_by_key():
    assert format_value(PollutantKey.CO, 1.234) == "1.23 mg/m³"
    assert format_value(PollutantKey.PM2_5, 12.345) == "12.3 µg/m³"
    assert format_value(PollutantKey.NO2, None) == "—"


def test_format_threshold_selects_unit_by_key():
    assert format_threshold(PollutantKey.CO) == "4 mg/m³"
    assert format_threshold(PollutantKey.O3) == "100 µg/m³"


def test_build_risk_report_clean_air_says_so():
    report = build_risk_report(make_measurement())
    assert report.issues == []
    assert report.issues_summary == NO_ISSUES_TEXT
    assert [r.label for r in report.rows] == ["PM2.5", "PM10", "NO2", "O3", "SO2", "CO"]
    assert all(r.status_text == "Within WHO short-term AQG" for r in report.rows)


def test_build_risk_report_elevated_rows_and_issue_text():
    report = build_risk_report(make_measurement(pm2_5=[10.0, 31.2], so2=None))
    pm25_row = report.rows[0]
    assert pm25_row.elevated is True
    assert pm25_row.status_text == "Elevated"
    assert pm25_row.peak_display == "31.2 µg/m³"
    so2_row = next(r for r in report.rows if r.key == PollutantKey.SO2)
    assert so2_row.peak_value is None
    assert so2_row.peak_display == "—"
    assert report.issues_summary is None
    assert format_issue(report.issues[0]).startswith("PM2.5 > 31.2 µg/m³ | ")
