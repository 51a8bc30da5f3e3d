import math

import pytest

from app.domain import IMPACT_UNAVAILABLE_TEXT, SEVERITY_LEVELS
from app.health_impact import build_health_impact_card, clamp_score, classify


def test_classify_none_is_unavailable():
    assert classify(None) is None


def test_classify_nan_is_unavailable():
    assert classify(math.nan) is None


def test_classify_clamps_out_of_range_scores():
    assert classify(-3) == SEVERITY_LEVELS[0]
    assert classify(-3).label == "Good"
    assert classify(9) == SEVERITY_LEVELS[5]
    assert classify(9).label == "Hazardous"
    assert classify(math.inf).index == 5
    assert classify(-math.inf).index == 0


@pytest.mark.parametrize("score", range(6))
def test_classify_in_range_indexes_directly(score):
    assert classify(score).index == score


@pytest.mark.parametrize(
    "score, expected",
    [
        (0.4, 0), (0.5, 1), (1.49, 1), (2.5, 3), (3.5, 4), (4.6, 5), (5.4, 5), (-0.5, 0),
        (0.49999999999999994, 0), (2.4999999999999996, 2),
    ],
)
def test_fractional_scores_round_half_away_from_zero(score, expected):
    assert clamp_score(score) == expected


def test_severity_table_is_ordered_and_complete():
    assert [lvl.index for lvl in SEVERITY_LEVELS] == list(range(6))
    assert all(lvl.label and lvl.color_class and lvl.description for lvl in SEVERITY_LEVELS)


def test_card_for_missing_score_is_explicitly_unavailable():
    card = build_health_impact_card(None)
    assert card.severity is None
    assert card.score is None
    assert card.message == IMPACT_UNAVAILABLE_TEXT


def test_card_for_score_zero_is_good_not_unavailable():
    card = build_health_impact_card(0)
    assert card.severity.label == "Good"
    assert card.message == SEVERITY_LEVELS[0].description
