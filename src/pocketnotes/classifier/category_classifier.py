"""Category classification: pattern detection fused with concurrent external scoring.

Flow:
1. Pattern detection (sync, no I/O)
2. One external score per enabled category, all awaited together
3. Fusion: a pattern score only ever raises the external score; disabled
   categories are not fused and come out as 0 / skip
4. Tier/action from thresholds, sorted by score then taxonomy order

A failing category branch scores 0; it never cancels its siblings. A failure
of the whole operation yields an empty result.
"""

import asyncio
import logging
from typing import Optional, Sequence

from ..config import PocketConfig, get_config
from ..models import ALL_CATEGORIES, Action, Category, CategoryScore, category_order
from .metrics import record_classification, record_pattern_override
from .rules import detect_by_pattern
from .scorer import ExternalScorer
from .scoring import ScoreThresholds, get_tier, make_category_score

logger = logging.getLogger("pocketnotes.classifier.category_classifier")

__all__ = ["CategoryClassifier"]


class CategoryClassifier:
    """Assigns confidence-scored categories to notes and links.

    Example:
        >>> classifier = CategoryClassifier()
        >>> scores = await classifier.classify("明日までにレポートを書く", [])
        >>> scores[0].category, scores[0].action
        (<Category.JAPANESE: 'japanese'>, <Action.AUTO_CONFIRM: 'auto-confirm'>)
    """

    def __init__(
        self,
        scorer: Optional[ExternalScorer] = None,
        thresholds: Optional[ScoreThresholds] = None,
        config: Optional[PocketConfig] = None,
    ):
        """Initialize the classifier.

        Args:
            scorer: External scorer (built from config if omitted)
            thresholds: Action thresholds (taken from config if omitted)
            config: Configuration (global config if omitted)

        Raises:
            ValueError: If thresholds are out of range or show-button > auto-confirm
        """
        config = config or get_config()
        self.enabled = config.classifier_enabled
        self.japanese_enabled = config.japanese_category_enabled
        self.thresholds = thresholds or ScoreThresholds.from_config(config)
        self.scorer = scorer if scorer is not None else ExternalScorer(config=config)

    @property
    def scored_categories(self) -> tuple[Category, ...]:
        """Categories sent to the external scorer, in taxonomy order."""
        if self.japanese_enabled:
            return ALL_CATEGORIES
        return tuple(c for c in ALL_CATEGORIES if c is not Category.JAPANESE)

    async def classify(
        self, text: str, urls: Optional[Sequence[str]] = None
    ) -> list[CategoryScore]:
        """Scores worth showing: every category whose action is not skip."""
        scores = await self.classify_all(text, urls)
        return [s for s in scores if s.action is not Action.SKIP]

    async def classify_all(
        self, text: str, urls: Optional[Sequence[str]] = None
    ) -> list[CategoryScore]:
        """One score per category, skip entries included with their raw score.

        Returns:
            All six categories sorted by score descending (taxonomy order on
            ties), or [] when classification is disabled or fails outright
        """
        if not self.enabled:
            logger.debug("classification_disabled")
            return []

        url_list = list(urls or [])
        try:
            scores = await self._score_categories(text, url_list)
        except Exception as e:
            logger.error(
                "classification_failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return []

        for s in scores:
            record_classification(s.category.value, s.action.value)

        logger.info(
            "note_classified",
            extra={
                "url_count": len(url_list),
                "scores": {s.category.value: s.score for s in scores},
            },
        )
        return scores

    async def classify_link(
        self,
        url: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> list[CategoryScore]:
        """Classify a saved link from its metadata.

        Title and description form the content; the bare URL stands in when
        both are missing.
        """
        parts = [p for p in (title, description) if p]
        content = "\n\n".join(parts) if parts else url
        return await self.classify(content, [url])

    async def _score_categories(
        self, text: str, urls: list[str]
    ) -> list[CategoryScore]:
        pattern_scores = detect_by_pattern(text, urls)
        categories = self.scored_categories

        external = await asyncio.gather(
            *(self._score_branch(text, urls, c) for c in categories)
        )
        external_scores = dict(zip(categories, external))

        results = []
        for category in ALL_CATEGORIES:
            if category not in external_scores:
                # Disabled: skip whatever the thresholds say
                results.append(CategoryScore(category, 0, get_tier(0), Action.SKIP))
                continue

            final = external_scores[category]
            pattern = pattern_scores.get(category)
            if pattern is not None and pattern > final:
                logger.debug(
                    "pattern_override",
                    extra={
                        "category": category.value,
                        "pattern_score": pattern,
                        "external_score": final,
                    },
                )
                record_pattern_override(category.value)
                final = pattern
            results.append(make_category_score(category, final, self.thresholds))

        results.sort(key=lambda s: (-s.score, category_order(s.category)))
        return results

    async def _score_branch(self, text: str, urls: list[str], category: Category) -> int:
        try:
            return await self.scorer.score(text, urls, category)
        except Exception as e:
            logger.warning(
                "category_branch_failed",
                extra={"category": category.value, "error": str(e)},
            )
            return 0
