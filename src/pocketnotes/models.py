"""Shared data models for classification, ranking and suggestions.

Categories are a closed enumeration. Every component iterates ALL_CATEGORIES,
whose order is the tie-break order callers see in sorted results.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

__all__ = [
    "ALL_CATEGORIES",
    "CATEGORY_LABELS",
    "Action",
    "Category",
    "CategoryScore",
    "ClassificationInput",
    "HybridRow",
    "MatchKind",
    "RankedItem",
    "SuggestionCandidate",
    "Tier",
    "category_order",
]


class Category(str, Enum):
    """Note categories (fixed taxonomy of six).

    Note: Uses (str, Enum) so values compare equal to their storage strings.
    Category("podcast") raises ValueError; unknown categories never slip in.
    """

    TODO = "todo"
    IDEA = "idea"
    BLOG = "blog"
    YOUTUBE = "youtube"
    REFERENCE = "reference"
    JAPANESE = "japanese"


class Tier(str, Enum):
    """Confidence buckets derived from a 0-100 score."""

    DEFINITE = "definite"  # >= 95
    HIGH = "high"  # 85-94
    MODERATE = "moderate"  # 70-84
    LOW = "low"  # 60-69
    INSUFFICIENT = "insufficient"  # < 60


class Action(str, Enum):
    """What the UI does with a category score."""

    AUTO_CONFIRM = "auto-confirm"
    SHOW_BUTTON = "show-button"
    SKIP = "skip"


class MatchKind(str, Enum):
    """Which similarity components produced a ranked row."""

    SEMANTIC = "semantic"
    LEXICAL = "lexical"
    BOTH = "semantic+lexical"


ALL_CATEGORIES: tuple[Category, ...] = (
    Category.TODO,
    Category.IDEA,
    Category.BLOG,
    Category.YOUTUBE,
    Category.REFERENCE,
    Category.JAPANESE,
)

CATEGORY_LABELS: dict[Category, str] = {
    Category.TODO: "Todo",
    Category.IDEA: "Idea",
    Category.BLOG: "Blog",
    Category.YOUTUBE: "YouTube",
    Category.REFERENCE: "Reference",
    Category.JAPANESE: "Japanese",
}

_CATEGORY_INDEX: dict[Category, int] = {c: i for i, c in enumerate(ALL_CATEGORIES)}


def _validate_taxonomy() -> None:
    """Fail at import if the taxonomy table and the enum drift apart."""
    if len(ALL_CATEGORIES) != 6 or len(set(ALL_CATEGORIES)) != 6:
        raise RuntimeError("Category taxonomy must contain exactly 6 unique categories")
    if set(ALL_CATEGORIES) != set(Category):
        raise RuntimeError("ALL_CATEGORIES does not match the Category enum")
    missing = [c.value for c in ALL_CATEGORIES if c not in CATEGORY_LABELS]
    if missing:
        raise RuntimeError(f"Categories without a label: {', '.join(missing)}")


_validate_taxonomy()


def category_order(category: Category) -> int:
    """Position of a category in the taxonomy (sort tie-breaker)."""
    return _CATEGORY_INDEX[category]


@dataclass(frozen=True)
class CategoryScore:
    """Score for one category after fusion and threshold policy.

    Attributes:
        category: Category scored
        score: Integer 0-100
        tier: Confidence bucket for score
        action: auto-confirm, show-button or skip
    """

    category: Category
    score: int
    tier: Tier
    action: Action

    def __post_init__(self):
        if not 0 <= self.score <= 100:
            raise ValueError(f"score must be in [0, 100], got {self.score}")

    @property
    def confidence(self) -> float:
        """Score on the 0.0-1.0 scale used by the storage layer."""
        return self.score / 100


@dataclass(frozen=True)
class ClassificationInput:
    """A note as seen by the classifier."""

    text: str
    urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class HybridRow:
    """One row returned by the storage layer's hybrid search.

    Attributes:
        id: Note identifier
        semantic_score: Normalized cosine similarity (0.0-1.0), None if the row
            did not come from the vector pass
        lexical_score: Trigram similarity or substring indicator (0.0-1.0),
            None if the row did not come from the lexical pass
        created_at: Note creation time, used as a tie-breaker
        payload: Opaque row data passed through to the ranked item
    """

    id: Any
    semantic_score: Optional[float] = None
    lexical_score: Optional[float] = None
    created_at: Optional[datetime] = None
    payload: dict = field(default_factory=dict)


@dataclass(frozen=True)
class RankedItem:
    """A row after hybrid fusion."""

    id: Any
    semantic_score: Optional[float]
    lexical_score: Optional[float]
    combined_score: float
    match_kind: MatchKind
    created_at: Optional[datetime] = None
    payload: dict = field(default_factory=dict)


@dataclass(frozen=True)
class SuggestionCandidate:
    """A note eligible for suggestion, as supplied by the storage layer.

    impression_count is owned by storage; selection only reads it.
    """

    id: Any
    category: Category
    created_at: datetime
    impression_count: int = 0
    content: str = ""

    def __post_init__(self):
        if self.impression_count < 0:
            raise ValueError(
                f"impression_count must be >= 0, got {self.impression_count}"
            )
        if not isinstance(self.category, Category):
            object.__setattr__(self, "category", Category(self.category))
