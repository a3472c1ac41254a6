"""Suggestion selection: at most one note per category from a recent pool.

Two strategies:
- weighted random, favouring notes shown fewer times (weight 1 / (1 + impressions))
- semantic, re-scoring every candidate against a free-text query

Selection never writes anything back; bumping impression counts for the
chosen notes is the caller's job.
"""

import asyncio
import logging
import random
from typing import Iterable, Optional, Protocol, Sequence

from .classifier.metrics import record_suggestion
from .config import get_config
from .models import ALL_CATEGORIES, Category, SuggestionCandidate

logger = logging.getLogger("pocketnotes.suggestions")

__all__ = [
    "RelevanceScorer",
    "impression_weight",
    "select_by_llm_score",
    "select_weighted_random",
]


class RelevanceScorer(Protocol):
    """Anything that scores note text against a query on a 0-100 scale."""

    async def score_relevance(self, content: str, query: str) -> int: ...


def impression_weight(impression_count: int) -> float:
    return 1.0 / (1 + impression_count)


def _group_by_category(
    pool: Iterable[SuggestionCandidate], categories: Sequence[Category]
) -> dict[Category, list[SuggestionCandidate]]:
    groups: dict[Category, list[SuggestionCandidate]] = {c: [] for c in categories}
    for candidate in pool:
        if candidate.category in groups:
            groups[candidate.category].append(candidate)
    return groups


def select_weighted_random(
    pool: Iterable[SuggestionCandidate],
    rng: Optional[random.Random] = None,
    categories: Sequence[Category] = ALL_CATEGORIES,
) -> list[SuggestionCandidate]:
    """Pick one candidate per category, less-shown candidates more likely.

    One uniform draw u in [0, total_weight) per category; the first candidate
    whose cumulative weight exceeds u wins.

    Args:
        pool: Candidates from the storage layer's lookback window
        rng: random.Random-compatible source (module random if omitted)
        categories: Categories to select for, in output order

    Returns:
        Selected candidates in category order; empty categories are omitted
    """
    rng = rng or random
    selected = []

    for category, candidates in _group_by_category(pool, categories).items():
        if not candidates:
            continue

        weights = [impression_weight(c.impression_count) for c in candidates]
        draw = rng.random() * sum(weights)

        # Only reached through float round-off at the top of the range
        choice = candidates[-1]
        cumulative = 0.0
        for candidate, weight in zip(candidates, weights):
            cumulative += weight
            if cumulative > draw:
                choice = candidate
                break

        selected.append(choice)
        record_suggestion("weighted_random", category.value)

    logger.debug(
        "suggestions_selected",
        extra={"strategy": "weighted_random", "count": len(selected)},
    )
    return selected


async def _score_candidate(
    scorer: RelevanceScorer, candidate: SuggestionCandidate, query: str
) -> int:
    try:
        return await scorer.score_relevance(candidate.content, query)
    except Exception as e:
        logger.warning(
            "suggestion_score_failed",
            extra={"candidate_id": str(candidate.id), "error": str(e)},
        )
        return 0


async def select_by_llm_score(
    pool: Sequence[SuggestionCandidate],
    query: str,
    scorer: RelevanceScorer,
    relevance_floor: Optional[int] = None,
    categories: Sequence[Category] = ALL_CATEGORIES,
    max_pool: Optional[int] = None,
) -> list[SuggestionCandidate]:
    """Pick the most query-relevant candidate per category.

    Every candidate costs one external scoring call; all calls run
    concurrently. A failed call counts as 0.

    Args:
        pool: Candidates from the storage layer's lookback window
        query: Free-text query from the user
        scorer: Relevance scorer (usually ExternalScorer)
        relevance_floor: Minimum best score for a category to be included
            (config suggestion_relevance_floor if omitted)
        categories: Categories to select for, in output order
        max_pool: Largest accepted pool (config suggestion_max_llm_pool if omitted)

    Returns:
        Selected candidates in category order; ties go to the earlier candidate

    Raises:
        ValueError: If the query is empty or the pool exceeds max_pool
    """
    if not query or not query.strip():
        raise ValueError("query must not be empty")

    if relevance_floor is None or max_pool is None:
        config = get_config()
        if relevance_floor is None:
            relevance_floor = config.suggestion_relevance_floor
        if max_pool is None:
            max_pool = config.suggestion_max_llm_pool

    pool = list(pool)
    if len(pool) > max_pool:
        raise ValueError(
            f"pool of {len(pool)} candidates exceeds max_pool={max_pool}; "
            "cap the pool before semantic selection"
        )

    groups = _group_by_category(pool, categories)
    candidates = [c for members in groups.values() for c in members]
    scores = await asyncio.gather(
        *(_score_candidate(scorer, c, query) for c in candidates)
    )
    remaining = iter(scores)

    selected = []
    for category, members in groups.items():
        if not members:
            continue

        best, best_score = None, -1
        for candidate in members:
            score = next(remaining)
            if score > best_score:
                best, best_score = candidate, score

        if best_score < relevance_floor:
            logger.debug(
                "suggestion_below_floor",
                extra={
                    "category": category.value,
                    "best_score": best_score,
                    "floor": relevance_floor,
                },
            )
            continue

        selected.append(best)
        record_suggestion("llm_score", category.value)

    logger.info(
        "suggestions_selected",
        extra={
            "strategy": "llm_score",
            "pool_size": len(pool),
            "count": len(selected),
        },
    )
    return selected
