"""External scorer: one prompt in, one 0-100 integer out.

Walks the provider chain (primary first, then fallbacks). Each attempt waits
for a rate-limit token, runs under a hard timeout and parses the leading
integer of the reply. Failures fall through to the next provider; when every
provider fails the score is 0. Nothing here raises on a per-call failure.
"""

import asyncio
import logging
import time
from typing import Optional, Sequence

from ..config import PocketConfig, get_config
from ..models import Category
from .metrics import record_fallback, record_score
from .prompts import build_category_prompt, build_relevance_prompt
from .providers import BaseProvider, build_provider
from .rate_limiter import RateLimiter, RateLimitTimeoutError
from .scoring import parse_score

logger = logging.getLogger("pocketnotes.classifier.scorer")

__all__ = ["ExternalScorer", "build_provider_chain"]

# Metric/log label for relevance calls
RELEVANCE_LABEL = "relevance"


def build_provider_chain(config: Optional[PocketConfig] = None) -> list[BaseProvider]:
    """Build the provider chain from configuration.

    Returns:
        Provider instances in priority order, primary first, without duplicates
    """
    config = config or get_config()
    names = [config.scorer_primary_provider]
    names.extend(n for n in config.fallback_providers if n not in names)

    providers = []
    for name in names:
        try:
            providers.append(build_provider(name, config))
        except ValueError as e:
            logger.warning(
                "provider_init_failed", extra={"provider": name, "error": str(e)}
            )

    logger.info("provider_chain_built", extra={"providers": names})
    return providers


def _failure_reason(error: Exception) -> str:
    if isinstance(error, RateLimitTimeoutError):
        return "rate_limited"
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return "timeout"
    if isinstance(error, ConnectionError):
        return "connection"
    return "parse"


class ExternalScorer:
    """Scores notes against categories (or free-text queries) with an external model.

    Example:
        >>> async with ExternalScorer() as scorer:
        ...     await scorer.score("buy milk tomorrow", [], Category.TODO)
        92
    """

    def __init__(
        self,
        providers: Optional[Sequence[BaseProvider]] = None,
        rate_limiter: Optional[RateLimiter] = None,
        config: Optional[PocketConfig] = None,
    ):
        """Initialize the scorer.

        Args:
            providers: Provider chain in priority order (built from config if omitted)
            rate_limiter: Shared token bucket limiter (built from config if omitted)
            config: Configuration (global config if omitted)
        """
        config = config or get_config()
        self.providers = (
            list(providers) if providers is not None else build_provider_chain(config)
        )
        self.rate_limiter = rate_limiter or RateLimiter(
            requests_per_minute=config.rate_limit_per_minute,
            burst_size=config.rate_limit_burst,
        )
        self.timeout_seconds = config.scorer_timeout_seconds
        self.max_input_chars = config.scorer_max_input_chars

        if not any(p.is_available() for p in self.providers):
            logger.warning(
                "no_scoring_providers_available",
                extra={"providers": [p.name for p in self.providers]},
            )

    async def score(
        self, text: str, urls: Optional[Sequence[str]], category: Category
    ) -> int:
        """Score how well a note fits one category.

        Returns:
            Integer in [0, 100]; 0 when every provider failed
        """
        prompt = build_category_prompt(
            category, text, list(urls or []), max_chars=self.max_input_chars
        )
        return await self._score_prompt(prompt, category.value)

    async def score_relevance(self, content: str, query: str) -> int:
        """Score how relevant a note is to a free-text query.

        Returns:
            Integer in [0, 100]; 0 when every provider failed
        """
        prompt = build_relevance_prompt(content, query, max_chars=self.max_input_chars)
        return await self._score_prompt(prompt, RELEVANCE_LABEL)

    async def _score_prompt(self, prompt: str, label: str) -> int:
        providers = self.providers
        last_error: Optional[Exception] = None

        for idx, provider in enumerate(providers):
            provider_name = provider.name
            next_name = providers[idx + 1].name if idx < len(providers) - 1 else None

            if not provider.is_available():
                logger.debug("provider_unavailable", extra={"provider": provider_name})
                if next_name:
                    record_fallback(provider_name, next_name, "unavailable")
                continue

            start_time = time.monotonic()
            try:
                await self.rate_limiter.wait_for_token(
                    provider_name, timeout=self.timeout_seconds
                )
                response = await asyncio.wait_for(
                    provider.complete(prompt), timeout=self.timeout_seconds
                )
                score = parse_score(response.text)
            except (TimeoutError, asyncio.TimeoutError, ConnectionError, ValueError) as e:
                reason = _failure_reason(e)
                record_score(
                    provider_name,
                    label,
                    success=False,
                    latency_seconds=time.monotonic() - start_time,
                )
                if next_name:
                    record_fallback(provider_name, next_name, reason)
                logger.warning(
                    "score_failed",
                    extra={
                        "provider": provider_name,
                        "category": label,
                        "reason": reason,
                        "error": str(e),
                    },
                )
                last_error = e
                continue

            latency_seconds = time.monotonic() - start_time
            record_score(
                provider_name,
                label,
                success=True,
                latency_seconds=latency_seconds,
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
            )
            logger.debug(
                "category_scored",
                extra={
                    "provider": provider_name,
                    "category": label,
                    "score": score,
                    "latency_seconds": latency_seconds,
                },
            )
            return score

        logger.error(
            "all_providers_failed",
            extra={
                "category": label,
                "last_error": str(last_error) if last_error else "no available provider",
            },
        )
        return 0

    async def aclose(self) -> None:
        for provider in self.providers:
            await provider.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()
