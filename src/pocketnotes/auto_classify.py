"""Background classification and embedding of newly saved notes.

process_note() never raises: every failure is logged and reported in the
result, so it is safe to fire and forget.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

from .classifier.category_classifier import CategoryClassifier
from .config import PocketConfig, get_config
from .embeddings import EmbeddingError, EmbeddingProvider, prepare_note_text
from .models import Action, Category, CategoryScore

logger = logging.getLogger("pocketnotes.auto_classify")

__all__ = ["AutoClassifyResult", "AutoClassifyService", "NoteStore", "NoteToClassify"]


class NoteStore(Protocol):
    """Persistence the pipeline writes to. Both methods report success."""

    async def add_note_category(
        self, note_id: Any, category: Category, confidence: float, user_confirmed: bool
    ) -> bool: ...

    async def update_note_embedding(self, note_id: Any, embedding: list[float]) -> bool: ...


@dataclass(frozen=True)
class NoteToClassify:
    note_id: Any
    content: str
    urls: tuple[str, ...] = ()


@dataclass
class AutoClassifyResult:
    """Outcome of processing one note.

    Attributes:
        note_id: Note processed
        auto_confirmed: (category, score) pairs stored as confirmed
        suggested: (category, score) pairs stored for review
        embedding: Stored vector, or None if none was stored
        skipped: True when the note was too short to classify
        error: Message of an unexpected failure, if any
    """

    note_id: Any
    auto_confirmed: list[tuple[Category, int]] = field(default_factory=list)
    suggested: list[tuple[Category, int]] = field(default_factory=list)
    embedding: Optional[list[float]] = None
    skipped: bool = False
    error: Optional[str] = None


class AutoClassifyService:
    """Classifies a note and embeds it concurrently, then persists both."""

    def __init__(
        self,
        classifier: CategoryClassifier,
        embedder: Optional[EmbeddingProvider] = None,
        config: Optional[PocketConfig] = None,
    ):
        config = config or get_config()
        self.classifier = classifier
        self.embedder = embedder
        self.min_content_length = config.min_content_length

    async def process_note(self, note: NoteToClassify, db: NoteStore) -> AutoClassifyResult:
        result = AutoClassifyResult(note_id=note.note_id)

        if len(note.content.strip()) < self.min_content_length:
            logger.debug(
                "note_too_short",
                extra={"note_id": str(note.note_id), "chars": len(note.content.strip())},
            )
            result.skipped = True
            return result

        try:
            scores, embedding = await asyncio.gather(
                self._classify(note), self._embed(note)
            )

            await self._save_categories(note.note_id, scores, db, result)

            if embedding:
                if await db.update_note_embedding(note.note_id, embedding):
                    result.embedding = embedding
        except Exception as e:
            logger.error(
                "auto_classify_failed",
                extra={"note_id": str(note.note_id), "error": str(e)},
            )
            result.error = str(e)
            return result

        logger.info(
            "note_auto_classified",
            extra={
                "note_id": str(note.note_id),
                "auto_confirmed": len(result.auto_confirmed),
                "suggested": len(result.suggested),
                "embedded": result.embedding is not None,
            },
        )
        return result

    async def _classify(self, note: NoteToClassify) -> list[CategoryScore]:
        return await self.classifier.classify(note.content, list(note.urls))

    async def _embed(self, note: NoteToClassify) -> Optional[list[float]]:
        if self.embedder is None:
            return None
        text = prepare_note_text(note.content, [{"url": u} for u in note.urls])
        try:
            return await self.embedder.embed(text)
        except EmbeddingError as e:
            logger.warning(
                "note_embedding_failed",
                extra={"note_id": str(note.note_id), "error": str(e)},
            )
            return None

    async def _save_categories(
        self,
        note_id: Any,
        scores: Sequence[CategoryScore],
        db: NoteStore,
        result: AutoClassifyResult,
    ) -> None:
        for score in scores:
            confirmed = score.action is Action.AUTO_CONFIRM
            try:
                saved = await db.add_note_category(
                    note_id, score.category, score.confidence, confirmed
                )
            except Exception as e:
                logger.warning(
                    "note_category_save_failed",
                    extra={
                        "note_id": str(note_id),
                        "category": score.category.value,
                        "error": str(e),
                    },
                )
                continue

            if not saved:
                continue
            if confirmed:
                result.auto_confirmed.append((score.category, score.score))
            elif score.action is Action.SHOW_BUTTON:
                result.suggested.append((score.category, score.score))
