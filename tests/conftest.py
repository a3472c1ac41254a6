"""Shared pytest fixtures for pocketnotes tests.

Fixture Organization:
    - Isolation fixtures (autouse): environment, config singleton, logging
    - Config fixtures: PocketConfig built from explicit values
    - Stub fixtures: deterministic scorers and in-memory note stores
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from src.pocketnotes.config import PocketConfig, reset_config
from src.pocketnotes.models import Category, SuggestionCandidate

# Environment variables PocketConfig reads that a developer shell may export
_CONFIG_ENV_VARS = [
    "CLASSIFIER_ENABLED",
    "JAPANESE_CATEGORY_ENABLED",
    "AUTO_CONFIRM_THRESHOLD",
    "SHOW_BUTTON_THRESHOLD",
    "MIN_CONTENT_LENGTH",
    "SCORER_PRIMARY_PROVIDER",
    "SCORER_FALLBACK_PROVIDERS",
    "SCORER_TIMEOUT_SECONDS",
    "GEMINI_API_KEY",
    "OPENROUTER_API_KEY",
    "ANTHROPIC_API_KEY",
    "EMBEDDING_MIN_INTERVAL_MS",
    "SEMANTIC_WEIGHT",
    "LEXICAL_WEIGHT",
    "SUBSTRING_MIN_SIMILARITY",
    "SUGGESTION_RELEVANCE_FLOOR",
    "SUGGESTION_MAX_LLM_POOL",
    "POCKETNOTES_LOG_LEVEL",
    "POCKETNOTES_LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Clear config env vars and the config singleton around every test."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def reset_logging():
    """Re-enable propagation so caplog sees pocketnotes records.

    configure_logging() runs on package import and turns propagation off.
    """
    logger = logging.getLogger("pocketnotes")
    logger.handlers.clear()
    logger.propagate = True
    yield
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def make_config():
    """Factory for PocketConfig with explicit overrides (no .env lookup)."""

    def _make(**overrides) -> PocketConfig:
        values = {
            "gemini_api_key": "test-gemini-key",
            "embedding_min_interval_ms": 0,
        }
        values.update(overrides)
        return PocketConfig(_env_file=None, **values)

    return _make


@pytest.fixture
def config(make_config) -> PocketConfig:
    return make_config()


class StubScorer:
    """Deterministic stand-in for ExternalScorer.

    Attributes:
        scores: Category -> score returned by score()
        failing: Categories whose score() raises TimeoutError
        relevance: content -> score returned by score_relevance()
        calls: Every (method, argument) pair seen, in call order
    """

    def __init__(self, scores=None, failing=(), relevance=None, default=0):
        self.scores = dict(scores or {})
        self.failing = set(failing)
        self.relevance = dict(relevance or {})
        self.default = default
        self.calls = []

    async def score(self, text, urls, category):
        self.calls.append(("score", category))
        if category in self.failing:
            raise TimeoutError(f"stub timeout for {category.value}")
        return self.scores.get(category, self.default)

    async def score_relevance(self, content, query):
        self.calls.append(("score_relevance", content))
        value = self.relevance.get(content, self.default)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def stub_scorer_cls():
    return StubScorer


class InMemoryNoteStore:
    """NoteStore that records writes instead of persisting them."""

    def __init__(self, fail_categories=(), reject_embedding=False):
        self.categories = []
        self.embeddings = {}
        self.fail_categories = set(fail_categories)
        self.reject_embedding = reject_embedding

    async def add_note_category(self, note_id, category, confidence, user_confirmed):
        if category in self.fail_categories:
            raise RuntimeError(f"write failed for {category.value}")
        self.categories.append((note_id, category, confidence, user_confirmed))
        return True

    async def update_note_embedding(self, note_id, embedding):
        if self.reject_embedding:
            return False
        self.embeddings[note_id] = embedding
        return True


@pytest.fixture
def note_store():
    return InMemoryNoteStore()


@pytest.fixture
def note_store_cls():
    return InMemoryNoteStore


@pytest.fixture
def make_candidate():
    """Factory for SuggestionCandidate with a fixed reference time."""
    base = datetime(2025, 11, 20, 12, 0, tzinfo=timezone.utc)

    def _make(id, category=Category.TODO, impressions=0, content="", age_hours=0):
        return SuggestionCandidate(
            id=id,
            category=category,
            created_at=base - timedelta(hours=age_hours),
            impression_count=impressions,
            content=content or f"note {id}",
        )

    return _make
