"""Unit tests for shared data models."""

from datetime import datetime, timezone

import pytest

from src.pocketnotes.models import (
    ALL_CATEGORIES,
    CATEGORY_LABELS,
    Action,
    Category,
    CategoryScore,
    MatchKind,
    SuggestionCandidate,
    Tier,
    category_order,
)

CREATED = datetime(2025, 11, 20, tzinfo=timezone.utc)


class TestCategory:
    def test_taxonomy_order(self):
        assert [c.value for c in ALL_CATEGORIES] == [
            "todo",
            "idea",
            "blog",
            "youtube",
            "reference",
            "japanese",
        ]
        assert [category_order(c) for c in ALL_CATEGORIES] == list(range(6))

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            Category("podcast")

    def test_values_compare_as_strings(self):
        assert Category.BLOG == "blog"
        assert Category("youtube") is Category.YOUTUBE

    def test_every_category_labelled(self):
        assert set(CATEGORY_LABELS) == set(Category)
        assert CATEGORY_LABELS[Category.YOUTUBE] == "YouTube"


class TestEnums:
    def test_action_values(self):
        assert Action.AUTO_CONFIRM.value == "auto-confirm"
        assert Action.SHOW_BUTTON.value == "show-button"
        assert Action.SKIP.value == "skip"

    def test_tier_values(self):
        assert [t.value for t in Tier] == ["definite", "high", "moderate", "low", "insufficient"]

    def test_match_kind_values(self):
        assert MatchKind.BOTH.value == "semantic+lexical"


class TestCategoryScore:
    def test_confidence_scale(self):
        score = CategoryScore(Category.TODO, 87, Tier.HIGH, Action.SHOW_BUTTON)
        assert score.confidence == 0.87

    @pytest.mark.parametrize("bad", [-1, 101])
    def test_out_of_range_rejected(self, bad):
        with pytest.raises(ValueError, match="score"):
            CategoryScore(Category.TODO, bad, Tier.LOW, Action.SKIP)

    def test_immutable(self):
        score = CategoryScore(Category.IDEA, 50, Tier.INSUFFICIENT, Action.SKIP)
        with pytest.raises(AttributeError):
            score.score = 99


class TestSuggestionCandidate:
    def test_string_category_coerced(self):
        candidate = SuggestionCandidate(id=1, category="blog", created_at=CREATED)
        assert candidate.category is Category.BLOG
        assert candidate.impression_count == 0

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            SuggestionCandidate(id=1, category="podcast", created_at=CREATED)

    def test_negative_impressions_rejected(self):
        with pytest.raises(ValueError, match="impression_count"):
            SuggestionCandidate(
                id=1, category=Category.TODO, created_at=CREATED, impression_count=-1
            )
