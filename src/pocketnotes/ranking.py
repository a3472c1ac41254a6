"""Hybrid relevance ranking: semantic and lexical similarity fused into one order.

Formula:
    combined_score = (0.7 * semantic_similarity) + (0.3 * lexical_similarity)

A missing component counts as 0. Weights and the substring floor come from
PocketConfig (semantic_weight, lexical_weight, substring_min_similarity). The
storage layer selects the rows and computes both similarities; this module
only fuses and orders them.
"""

import logging
from typing import Iterable, Optional

from .config import PocketConfig, get_config
from .models import HybridRow, MatchKind, RankedItem

logger = logging.getLogger("pocketnotes.ranking")

__all__ = [
    "LEXICAL_WEIGHT",
    "SEMANTIC_WEIGHT",
    "combine_scores",
    "lexical_score",
    "rank_hybrid",
]

SEMANTIC_WEIGHT = 0.7
LEXICAL_WEIGHT = 0.3


def _check_unit(name: str, value: Optional[float]) -> None:
    if value is not None and not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")


def combine_scores(
    semantic: Optional[float],
    lexical: Optional[float],
    semantic_weight: float = SEMANTIC_WEIGHT,
    lexical_weight: float = LEXICAL_WEIGHT,
) -> float:
    """Fuse semantic and lexical similarity.

    Args:
        semantic: Cosine similarity in [0, 1], or None when absent
        lexical: Trigram/substring similarity in [0, 1], or None when absent
        semantic_weight: Weight of the semantic component
        lexical_weight: Weight of the lexical component

    Returns:
        Combined score in [0, 1] when the weights sum to 1.

    Raises:
        ValueError: If a score or weight is outside [0, 1], or the weights do not sum to 1
    """
    _check_unit("semantic_score", semantic)
    _check_unit("lexical_score", lexical)
    _check_unit("semantic_weight", semantic_weight)
    _check_unit("lexical_weight", lexical_weight)
    if abs(semantic_weight + lexical_weight - 1.0) > 1e-9:
        raise ValueError(
            f"weights must sum to 1, got {semantic_weight} + {lexical_weight}"
        )

    return semantic_weight * (semantic or 0.0) + lexical_weight * (lexical or 0.0)


def lexical_score(
    trigram_similarity: Optional[float],
    substring_match: bool = False,
    floor: Optional[float] = None,
    config: Optional[PocketConfig] = None,
) -> Optional[float]:
    """Normalize a lexical match the way the storage layer does.

    A row that contains the query as a substring scores at least `floor`,
    however low its trigram similarity.
    `floor` defaults to config substring_min_similarity.

    Returns:
        Lexical similarity in [0, 1], or None when there is no lexical signal
    """
    if floor is None:
        floor = (config or get_config()).substring_min_similarity
    if trigram_similarity is None:
        return floor if substring_match else None
    if substring_match:
        return max(trigram_similarity, floor)
    return trigram_similarity


def _match_kind(row: HybridRow) -> MatchKind:
    if row.semantic_score is not None and row.lexical_score is not None:
        return MatchKind.BOTH
    if row.semantic_score is not None:
        return MatchKind.SEMANTIC
    return MatchKind.LEXICAL


def _max_optional(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def _merge_rows(rows: Iterable[HybridRow]) -> list[HybridRow]:
    """Join the semantic and lexical passes on id, keeping first-seen order."""
    merged: dict = {}
    for row in rows:
        seen = merged.get(row.id)
        if seen is None:
            merged[row.id] = row
            continue
        merged[row.id] = HybridRow(
            id=row.id,
            semantic_score=_max_optional(seen.semantic_score, row.semantic_score),
            lexical_score=_max_optional(seen.lexical_score, row.lexical_score),
            created_at=seen.created_at or row.created_at,
            payload={**row.payload, **seen.payload},
        )
    return list(merged.values())


def rank_hybrid(
    rows: Iterable[HybridRow],
    limit: Optional[int] = None,
    semantic_weight: Optional[float] = None,
    lexical_weight: Optional[float] = None,
    config: Optional[PocketConfig] = None,
) -> list[RankedItem]:
    """Fuse and order hybrid search rows.

    Order is combined score descending, then newest first (rows without a
    timestamp last), then input order. Rows with neither similarity are dropped.

    Args:
        rows: Rows from the storage layer's semantic and/or lexical passes
        limit: Keep at most this many items
        semantic_weight: Weight of the semantic component (config if omitted)
        lexical_weight: Weight of the lexical component (config if omitted)
        config: Configuration (global config if omitted)

    Raises:
        ValueError: If any similarity is outside [0, 1], the weights do not
            sum to 1, or limit is negative

    Example:
        >>> items = rank_hybrid([
        ...     HybridRow(id="x", semantic_score=0.9),
        ...     HybridRow(id="y", lexical_score=0.9),
        ... ])
        >>> [(i.id, round(i.combined_score, 2)) for i in items]
        [('x', 0.63), ('y', 0.27)]
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    if semantic_weight is None or lexical_weight is None:
        config = config or get_config()
        if semantic_weight is None:
            semantic_weight = config.semantic_weight
        if lexical_weight is None:
            lexical_weight = config.lexical_weight

    rows = list(rows)
    for row in rows:
        _check_unit("semantic_score", row.semantic_score)
        _check_unit("lexical_score", row.lexical_score)

    items = []
    dropped = 0
    for row in _merge_rows(rows):
        if row.semantic_score is None and row.lexical_score is None:
            dropped += 1
            continue
        items.append(
            RankedItem(
                id=row.id,
                semantic_score=row.semantic_score,
                lexical_score=row.lexical_score,
                combined_score=combine_scores(
                    row.semantic_score,
                    row.lexical_score,
                    semantic_weight,
                    lexical_weight,
                ),
                match_kind=_match_kind(row),
                created_at=row.created_at,
                payload=row.payload,
            )
        )

    # Stable sorts, least significant key first
    dated = [i for i in items if i.created_at is not None]
    undated = [i for i in items if i.created_at is None]
    dated.sort(key=lambda i: i.created_at, reverse=True)
    ordered = dated + undated
    ordered.sort(key=lambda i: i.combined_score, reverse=True)

    if dropped:
        logger.debug("hybrid_rows_dropped", extra={"count": dropped})

    return ordered[:limit] if limit is not None else ordered
