"""Note classification: pattern rules fused with concurrent external scoring.

Public API:
    - CategoryClassifier: classify(), classify_all(), classify_link()
    - ExternalScorer: score(), score_relevance()
    - detect_by_pattern(): deterministic pattern scores
    - ScoreThresholds, get_tier(), get_action(): tier/action policy
    - RateLimiter: per-provider token buckets
"""

from .category_classifier import CategoryClassifier
from .rate_limiter import RateLimiter, RateLimitTimeoutError
from .rules import detect_by_pattern
from .scorer import ExternalScorer, build_provider_chain
from .scoring import (
    ScoreThresholds,
    clamp_score,
    get_action,
    get_tier,
    make_category_score,
    parse_score,
)

__all__ = [
    "CategoryClassifier",
    "ExternalScorer",
    "RateLimitTimeoutError",
    "RateLimiter",
    "ScoreThresholds",
    "build_provider_chain",
    "clamp_score",
    "detect_by_pattern",
    "get_action",
    "get_tier",
    "make_category_score",
    "parse_score",
]
