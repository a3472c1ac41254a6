"""Tests for hybrid ranking.

Covers:
- Property-based tests (Hypothesis) for combined score bounds
- Ordering and tie-breaking
- Row merging and validation
"""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from src.pocketnotes.models import HybridRow, MatchKind
from src.pocketnotes.ranking import combine_scores, lexical_score, rank_hybrid

NOW = datetime(2025, 11, 21, 9, 0, tzinfo=timezone.utc)

unit = st.floats(min_value=0.0, max_value=1.0, allow_nan=False)
optional_unit = st.one_of(st.none(), unit)


# ============================================================================
# Property-Based Tests (Hypothesis)
# ============================================================================


@given(semantic=optional_unit, lexical=optional_unit)
@settings(max_examples=300)
def test_combined_within_bounds(semantic, lexical):
    assert 0.0 <= combine_scores(semantic, lexical) <= 1.0


@given(lexical=unit)
@settings(max_examples=200)
def test_lexical_only_is_exactly_thirty_percent(lexical):
    items = rank_hybrid([HybridRow(id=1, lexical_score=lexical)])
    assert items[0].combined_score == 0.3 * lexical
    assert items[0].match_kind == MatchKind.LEXICAL


@given(rows=st.lists(st.tuples(optional_unit, optional_unit), max_size=20))
@settings(max_examples=200)
def test_output_sorted_descending(rows):
    items = rank_hybrid(
        [HybridRow(id=i, semantic_score=s, lexical_score=l) for i, (s, l) in enumerate(rows)]
    )
    scores = [i.combined_score for i in items]
    assert scores == sorted(scores, reverse=True)
    assert len(items) == sum(1 for s, l in rows if s is not None or l is not None)


# ============================================================================
# Unit Tests
# ============================================================================


class TestRankHybrid:
    def test_semantic_beats_lexical_at_equal_similarity(self):
        items = rank_hybrid(
            [
                HybridRow(id="y", lexical_score=0.9),
                HybridRow(id="x", semantic_score=0.9),
            ]
        )

        assert [i.id for i in items] == ["x", "y"]
        assert items[0].combined_score == pytest.approx(0.63)
        assert items[1].combined_score == pytest.approx(0.27)

    def test_match_kinds(self):
        items = rank_hybrid(
            [
                HybridRow(id="s", semantic_score=0.5),
                HybridRow(id="l", lexical_score=0.5),
                HybridRow(id="b", semantic_score=0.5, lexical_score=0.5),
            ]
        )
        kinds = {i.id: i.match_kind for i in items}
        assert kinds == {"s": MatchKind.SEMANTIC, "l": MatchKind.LEXICAL, "b": MatchKind.BOTH}
        assert MatchKind.BOTH.value == "semantic+lexical"

    def test_tie_broken_by_newest_first(self):
        items = rank_hybrid(
            [
                HybridRow(id="old", semantic_score=0.8, created_at=NOW - timedelta(days=3)),
                HybridRow(id="undated", semantic_score=0.8),
                HybridRow(id="new", semantic_score=0.8, created_at=NOW),
            ]
        )
        assert [i.id for i in items] == ["new", "old", "undated"]

    def test_full_tie_keeps_input_order(self):
        items = rank_hybrid(
            [HybridRow(id=n, lexical_score=0.4, created_at=NOW) for n in ("a", "b", "c")]
        )
        assert [i.id for i in items] == ["a", "b", "c"]

    def test_rows_from_both_passes_merged(self):
        items = rank_hybrid(
            [
                HybridRow(id=7, semantic_score=0.8, created_at=NOW, payload={"content": "c"}),
                HybridRow(id=9, lexical_score=0.5),
                HybridRow(id=7, lexical_score=0.6, payload={"category": "blog"}),
            ]
        )

        assert len(items) == 2
        merged = items[0]
        assert merged.id == 7
        assert merged.match_kind == MatchKind.BOTH
        assert merged.combined_score == pytest.approx(0.7 * 0.8 + 0.3 * 0.6)
        assert merged.payload == {"content": "c", "category": "blog"}
        assert merged.created_at == NOW

    def test_rows_without_scores_dropped(self):
        items = rank_hybrid([HybridRow(id=1), HybridRow(id=2, semantic_score=0.1)])
        assert [i.id for i in items] == [2]

    def test_limit(self):
        rows = [HybridRow(id=i, semantic_score=i / 10) for i in range(10)]
        assert [i.id for i in rank_hybrid(rows, limit=3)] == [9, 8, 7]
        assert rank_hybrid(rows, limit=0) == []

    def test_negative_limit_rejected(self):
        with pytest.raises(ValueError):
            rank_hybrid([], limit=-1)

    def test_empty_input(self):
        assert rank_hybrid([]) == []

    @pytest.mark.parametrize("bad", [-0.01, 1.01, float("nan")])
    def test_out_of_range_scores_rejected(self, bad):
        with pytest.raises(ValueError):
            rank_hybrid([HybridRow(id=1, semantic_score=bad)])
        with pytest.raises(ValueError):
            rank_hybrid([HybridRow(id=1, lexical_score=bad)])

    def test_custom_weights(self):
        items = rank_hybrid(
            [HybridRow(id=1, semantic_score=1.0, lexical_score=0.0)],
            semantic_weight=0.5,
            lexical_weight=0.5,
        )
        assert items[0].combined_score == 0.5

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="sum to 1"):
            rank_hybrid([HybridRow(id=1, semantic_score=0.5)], semantic_weight=0.9)

    def test_weights_from_config(self, make_config):
        config = make_config(semantic_weight=0.6, lexical_weight=0.4)
        rows = [HybridRow(id=1, semantic_score=1.0), HybridRow(id=2, lexical_score=1.0)]

        items = rank_hybrid(rows, config=config)

        assert [(i.id, i.combined_score) for i in items] == [(1, 0.6), (2, 0.4)]

    def test_weights_from_environment(self, monkeypatch):
        monkeypatch.setenv("SEMANTIC_WEIGHT", "0.6")
        monkeypatch.setenv("LEXICAL_WEIGHT", "0.4")

        items = rank_hybrid([HybridRow(id=1, semantic_score=1.0)])
        assert items[0].combined_score == 0.6

    def test_explicit_weights_override_config(self, make_config):
        config = make_config(semantic_weight=0.6, lexical_weight=0.4)
        items = rank_hybrid(
            [HybridRow(id=1, semantic_score=1.0)],
            semantic_weight=0.5,
            lexical_weight=0.5,
            config=config,
        )
        assert items[0].combined_score == 0.5


class TestLexicalScore:
    def test_plain_trigram(self):
        assert lexical_score(0.35) == 0.35

    def test_substring_floor(self):
        assert lexical_score(0.05, substring_match=True) == 0.2
        assert lexical_score(0.6, substring_match=True) == 0.6

    def test_substring_without_trigram(self):
        assert lexical_score(None, substring_match=True) == 0.2

    def test_no_signal(self):
        assert lexical_score(None) is None

    def test_custom_floor(self):
        assert lexical_score(0.1, substring_match=True, floor=0.3) == 0.3

    def test_floor_from_config(self, make_config):
        config = make_config(substring_min_similarity=0.35)
        assert lexical_score(0.1, substring_match=True, config=config) == 0.35
        assert lexical_score(None, substring_match=True, config=config) == 0.35
