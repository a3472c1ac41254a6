"""Tests for score clamping, parsing and the tier/action policy.

Covers:
- Property-based tests (Hypothesis) for clamp and monotonicity
- Tier breakpoints and threshold actions
- ScoreThresholds validation
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from src.pocketnotes.classifier.scoring import (
    ScoreThresholds,
    clamp_score,
    get_action,
    get_tier,
    make_category_score,
    parse_score,
)
from src.pocketnotes.models import Action, Category, Tier

_TIER_RANK = [Tier.INSUFFICIENT, Tier.LOW, Tier.MODERATE, Tier.HIGH, Tier.DEFINITE]
_ACTION_RANK = [Action.SKIP, Action.SHOW_BUTTON, Action.AUTO_CONFIRM]


# ============================================================================
# Property-Based Tests (Hypothesis)
# ============================================================================


@given(value=st.floats(min_value=-1e9, max_value=1e9, allow_nan=False))
@settings(max_examples=200)
def test_clamp_within_bounds(value):
    assert 0 <= clamp_score(value) <= 100


@given(a=st.integers(min_value=0, max_value=100), b=st.integers(min_value=0, max_value=100))
@settings(max_examples=200)
def test_tier_monotonic(a, b):
    low, high = sorted((a, b))
    assert _TIER_RANK.index(get_tier(low)) <= _TIER_RANK.index(get_tier(high))


@given(
    a=st.integers(min_value=0, max_value=100),
    b=st.integers(min_value=0, max_value=100),
    show=st.integers(min_value=0, max_value=100),
    gap=st.integers(min_value=0, max_value=100),
)
@settings(max_examples=200)
def test_action_monotonic(a, b, show, gap):
    thresholds = ScoreThresholds(auto_confirm=min(100, show + gap), show_button=show)
    low, high = sorted((a, b))
    assert _ACTION_RANK.index(get_action(low, thresholds)) <= _ACTION_RANK.index(
        get_action(high, thresholds)
    )


# ============================================================================
# Unit Tests
# ============================================================================


class TestTiers:
    @pytest.mark.parametrize(
        "score,tier",
        [
            (100, Tier.DEFINITE),
            (95, Tier.DEFINITE),
            (94, Tier.HIGH),
            (85, Tier.HIGH),
            (84, Tier.MODERATE),
            (70, Tier.MODERATE),
            (69, Tier.LOW),
            (60, Tier.LOW),
            (59, Tier.INSUFFICIENT),
            (0, Tier.INSUFFICIENT),
        ],
    )
    def test_breakpoints(self, score, tier):
        assert get_tier(score) == tier


class TestActions:
    def test_default_thresholds(self):
        thresholds = ScoreThresholds()
        assert get_action(95, thresholds) == Action.AUTO_CONFIRM
        assert get_action(94, thresholds) == Action.SHOW_BUTTON
        assert get_action(60, thresholds) == Action.SHOW_BUTTON
        assert get_action(59, thresholds) == Action.SKIP

    def test_custom_thresholds(self):
        thresholds = ScoreThresholds(auto_confirm=80, show_button=50)
        assert get_action(80, thresholds) == Action.AUTO_CONFIRM
        assert get_action(50, thresholds) == Action.SHOW_BUTTON

    def test_equal_thresholds_have_no_button_band(self):
        thresholds = ScoreThresholds(auto_confirm=70, show_button=70)
        assert get_action(69, thresholds) == Action.SKIP
        assert get_action(70, thresholds) == Action.AUTO_CONFIRM


class TestScoreThresholds:
    def test_show_button_above_auto_confirm_rejected(self):
        with pytest.raises(ValueError, match="show_button"):
            ScoreThresholds(auto_confirm=60, show_button=95)

    def test_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            ScoreThresholds(auto_confirm=101, show_button=60)
        with pytest.raises(ValueError):
            ScoreThresholds(auto_confirm=95, show_button=-1)

    def test_from_config(self, make_config):
        config = make_config(auto_confirm_threshold=90, show_button_threshold=50)
        thresholds = ScoreThresholds.from_config(config)
        assert thresholds == ScoreThresholds(auto_confirm=90, show_button=50)


class TestParseScore:
    @pytest.mark.parametrize(
        "text,expected",
        [("87", 87), (" 87\n", 87), ("87/100", 87), ("100", 100), ("150", 100), ("-5", 0), ("+42", 42)],
    )
    def test_numeric(self, text, expected):
        assert parse_score(text) == expected

    @pytest.mark.parametrize("text", ["", "high", "Score: 80", "-", "  \n"])
    def test_non_numeric_raises(self, text):
        with pytest.raises(ValueError):
            parse_score(text)


class TestMakeCategoryScore:
    def test_clamps_and_derives(self):
        score = make_category_score(Category.BLOG, 120, ScoreThresholds())
        assert score.score == 100
        assert score.tier == Tier.DEFINITE
        assert score.action == Action.AUTO_CONFIRM
        assert score.confidence == 1.0

    def test_skip_keeps_raw_score(self):
        score = make_category_score(Category.IDEA, 42, ScoreThresholds())
        assert score.score == 42
        assert score.action == Action.SKIP
        assert score.tier == Tier.INSUFFICIENT
