"""pocketnotes - classification and hybrid ranking for short notes.

Provides:
- Category classification (pattern rules + concurrent external scoring)
- Text embeddings for semantic search
- Hybrid semantic/lexical ranking
- Per-category suggestion selection

Python Version: 3.10+ required
"""

# Configure before other imports so module loggers inherit the handler
from .logging_config import StructuredFormatter, configure_logging

configure_logging()

from .__version__ import __version__
from .auto_classify import (
    AutoClassifyResult,
    AutoClassifyService,
    NoteStore,
    NoteToClassify,
)
from .classifier import CategoryClassifier, ExternalScorer, ScoreThresholds
from .config import PocketConfig, get_config, reset_config
from .embeddings import (
    EmbeddingError,
    EmbeddingProvider,
    EmbeddingTimeoutError,
    prepare_note_text,
)
from .models import (
    ALL_CATEGORIES,
    Action,
    Category,
    CategoryScore,
    HybridRow,
    MatchKind,
    RankedItem,
    SuggestionCandidate,
    Tier,
)
from .ranking import combine_scores, lexical_score, rank_hybrid
from .suggestions import select_by_llm_score, select_weighted_random

__all__ = [
    "ALL_CATEGORIES",
    "Action",
    "AutoClassifyResult",
    "AutoClassifyService",
    "Category",
    "CategoryClassifier",
    "CategoryScore",
    "EmbeddingError",
    "EmbeddingProvider",
    "EmbeddingTimeoutError",
    "ExternalScorer",
    "HybridRow",
    "MatchKind",
    "NoteStore",
    "NoteToClassify",
    "PocketConfig",
    "RankedItem",
    "ScoreThresholds",
    "StructuredFormatter",
    "SuggestionCandidate",
    "Tier",
    "__version__",
    "combine_scores",
    "configure_logging",
    "get_config",
    "lexical_score",
    "prepare_note_text",
    "rank_hybrid",
    "reset_config",
    "select_by_llm_score",
    "select_weighted_random",
]
