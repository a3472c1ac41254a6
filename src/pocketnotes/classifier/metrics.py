"""Prometheus metrics for classification, embeddings and suggestions.

All metrics use the `pocketnotes_*` prefix.
"""

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger("pocketnotes.classifier.metrics")

__all__ = [
    "classification_results_total",
    "embedding_latency_seconds",
    "embedding_requests_total",
    "pattern_overrides_total",
    "record_classification",
    "record_embedding",
    "record_fallback",
    "record_pattern_override",
    "record_score",
    "record_suggestion",
    "scorer_fallbacks_total",
    "scorer_latency_seconds",
    "scorer_requests_total",
    "scorer_tokens_total",
    "suggestion_selections_total",
]

# =============================================================================
# PROMETHEUS METRICS
# =============================================================================

scorer_requests_total = Counter(
    "pocketnotes_scorer_requests_total",
    "Total external scoring requests",
    ["provider", "category", "status"],
)

scorer_tokens_total = Counter(
    "pocketnotes_scorer_tokens_total",
    "Total tokens used by the external scorer",
    ["provider", "direction"],  # direction: input/output
)

scorer_latency_seconds = Histogram(
    "pocketnotes_scorer_latency_seconds",
    "External scoring latency",
    ["provider"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

scorer_fallbacks_total = Counter(
    "pocketnotes_scorer_fallbacks_total",
    "Provider fallback events",
    ["from_provider", "to_provider", "reason"],
)

# Pattern detection raised the external score
pattern_overrides_total = Counter(
    "pocketnotes_pattern_overrides_total",
    "Categories whose final score came from pattern detection",
    ["category"],
)

classification_results_total = Counter(
    "pocketnotes_classification_results_total",
    "Category scores produced, by resulting action",
    ["category", "action"],
)

embedding_requests_total = Counter(
    "pocketnotes_embedding_requests_total",
    "Total embedding requests",
    ["status"],
)

embedding_latency_seconds = Histogram(
    "pocketnotes_embedding_latency_seconds",
    "Embedding request latency",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 15.0],
)

suggestion_selections_total = Counter(
    "pocketnotes_suggestion_selections_total",
    "Suggestions selected, by strategy",
    ["strategy", "category"],
)

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def record_score(
    provider: str,
    category: str,
    success: bool,
    latency_seconds: float,
    input_tokens: int = 0,
    output_tokens: int = 0,
):
    """Record one external scoring call.

    Args:
        provider: Provider name (gemini, openrouter, claude)
        category: Category (or "relevance") the call scored
        success: True if a score was parsed, False on any failure
        latency_seconds: Time taken for the call
        input_tokens: Number of input tokens used
        output_tokens: Number of output tokens generated
    """
    status = "success" if success else "error"

    scorer_requests_total.labels(
        provider=provider, category=category, status=status
    ).inc()
    scorer_latency_seconds.labels(provider=provider).observe(latency_seconds)

    if input_tokens > 0:
        scorer_tokens_total.labels(provider=provider, direction="input").inc(
            input_tokens
        )
    if output_tokens > 0:
        scorer_tokens_total.labels(provider=provider, direction="output").inc(
            output_tokens
        )

    logger.debug(
        "score_recorded",
        extra={
            "provider": provider,
            "category": category,
            "success": success,
            "latency_seconds": latency_seconds,
        },
    )


def record_fallback(from_provider: str, to_provider: str, reason: str):
    """Record a provider fallback event.

    Args:
        from_provider: Provider that failed
        to_provider: Provider being tried next
        reason: Reason for fallback (timeout, connection, parse, rate_limited)
    """
    scorer_fallbacks_total.labels(
        from_provider=from_provider, to_provider=to_provider, reason=reason
    ).inc()

    logger.info(
        "scorer_fallback",
        extra={"from": from_provider, "to": to_provider, "reason": reason},
    )


def record_pattern_override(category: str):
    pattern_overrides_total.labels(category=category).inc()


def record_classification(category: str, action: str):
    classification_results_total.labels(category=category, action=action).inc()


def record_embedding(success: bool, latency_seconds: float):
    status = "success" if success else "error"
    embedding_requests_total.labels(status=status).inc()
    embedding_latency_seconds.observe(latency_seconds)


def record_suggestion(strategy: str, category: str):
    suggestion_selections_total.labels(strategy=strategy, category=category).inc()
