"""Embedding client for pocketnotes.

Async httpx client for the Gemini embedContent endpoint with a minimum
inter-call delay, explicit timeouts, retry on timeout and structured logging.
"""

import asyncio
import logging
import random
import time
from typing import Optional, Sequence

import httpx

from .classifier.metrics import record_embedding
from .config import PocketConfig, get_config

__all__ = [
    "EmbeddingError",
    "EmbeddingProvider",
    "EmbeddingTimeoutError",
    "MinIntervalLimiter",
    "prepare_note_text",
]

logger = logging.getLogger("pocketnotes.embed")


class EmbeddingError(Exception):
    """Raised when embedding generation fails.

    Wraps httpx errors, timeouts and malformed responses.
    """


class EmbeddingTimeoutError(EmbeddingError):
    """The embedding request timed out. The only failure embed() retries."""


class MinIntervalLimiter:
    """One permit per interval, shared by every caller of one provider instance.

    The last-call timestamp lives behind an asyncio.Lock held across the wait,
    so concurrent callers are released one interval apart, in arrival order.
    """

    def __init__(self, min_interval_seconds: float):
        if min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be >= 0")
        self.min_interval_seconds = min_interval_seconds
        self._last_call: Optional[float] = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            if self._last_call is not None:
                wait = self.min_interval_seconds - (time.monotonic() - self._last_call)
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_call = time.monotonic()


def prepare_note_text(content: str, links: Optional[Sequence[dict]] = None) -> str:
    """Combine note content with link metadata for embedding.

    Args:
        content: Note body
        links: Dicts with a "url" key and an optional "title"

    Example:
        >>> prepare_note_text("read later", [{"url": "https://a.io", "title": "A"}])
        'read later\\nLinks: A (https://a.io)'
    """
    if not links:
        return content
    parts = [
        f"{link['title']} ({link['url']})" if link.get("title") else link["url"]
        for link in links
    ]
    return f"{content}\nLinks: {', '.join(parts)}"


class EmbeddingProvider:
    """Client for the Gemini text embedding API.

    Calls from one instance are serialized through its MinIntervalLimiter;
    embed_batch never issues requests in parallel.

    Example:
        >>> async with EmbeddingProvider() as provider:
        ...     vector = await provider.embed("hybrid search notes")
        >>> len(vector)
        768
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[PocketConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        limiter: Optional[MinIntervalLimiter] = None,
        max_retries: int = 2,
        backoff_base: float = 0.5,
    ):
        """Initialize the embedding provider.

        Args:
            api_key: Gemini API key (config gemini_api_key if omitted)
            config: Configuration (global config if omitted)
            client: Preconfigured httpx.AsyncClient
            limiter: Interval limiter (built from config if omitted)
            max_retries: Retries after a timeout before giving up
            backoff_base: Base for exponential backoff with full jitter

        Raises:
            ValueError: If no API key is configured
        """
        self.config = config or get_config()
        self.api_key = api_key or self.config.gemini_api_key.get_secret_value()
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY is required for EmbeddingProvider")

        self.model = self.config.embedding_model
        self.dimension = self.config.embedding_dimension
        self.max_chars = self.config.embedding_max_chars
        self.url = (
            f"{self.config.gemini_base_url.rstrip('/')}/models/{self.model}:embedContent"
        )
        self.limiter = limiter or MinIntervalLimiter(
            self.config.embedding_min_interval_ms / 1000
        )
        self._max_retries = max_retries
        self._backoff_base = backoff_base

        timeout_config = httpx.Timeout(
            connect=3.0,
            read=self.config.embedding_timeout_seconds,
            write=5.0,
            pool=3.0,
        )
        limits = httpx.Limits(max_keepalive_connections=5, max_connections=10)
        self.client = client or httpx.AsyncClient(
            timeout=timeout_config,
            limits=limits,
            headers={"x-goog-api-key": self.api_key},
        )

    async def embed(self, text: str) -> list[float]:
        """Embed one text, retrying on timeouts.

        Input longer than embedding_max_chars is cut silently.

        Raises:
            EmbeddingError: If all retries are exhausted or a non-timeout error occurs
        """
        truncated = text[: self.max_chars]
        if len(text) > self.max_chars:
            logger.debug(
                "embedding_input_truncated",
                extra={"original_chars": len(text), "max_chars": self.max_chars},
            )

        last_error: Optional[EmbeddingTimeoutError] = None
        for attempt in range(1 + self._max_retries):
            try:
                return await self._embed_once(truncated)
            except EmbeddingTimeoutError as e:
                last_error = e
                if attempt < self._max_retries:
                    sleep_time = random.uniform(0, self._backoff_base * (2**attempt))
                    logger.warning(
                        "embedding_retry",
                        extra={
                            "attempt": attempt + 1,
                            "max_retries": self._max_retries,
                            "sleep_seconds": round(sleep_time, 2),
                        },
                    )
                    await asyncio.sleep(sleep_time)
        raise last_error  # type: ignore[misc]

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed texts one after another, in order."""
        vectors = []
        for text in texts:
            vectors.append(await self.embed(text))
        return vectors

    async def _embed_once(self, text: str) -> list[float]:
        await self.limiter.acquire()
        start_time = time.perf_counter()

        try:
            response = await self.client.post(
                self.url,
                json={
                    "model": f"models/{self.model}",
                    "content": {"parts": [{"text": text}]},
                },
            )
            response.raise_for_status()
            values = response.json()["embedding"]["values"]
        except httpx.TimeoutException as e:
            record_embedding(False, time.perf_counter() - start_time)
            logger.error("embedding_timeout", extra={"error": str(e)})
            raise EmbeddingTimeoutError("EMBEDDING_TIMEOUT") from e
        except httpx.HTTPError as e:
            record_embedding(False, time.perf_counter() - start_time)
            logger.error(
                "embedding_error",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise EmbeddingError(f"EMBEDDING_ERROR: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            record_embedding(False, time.perf_counter() - start_time)
            logger.error("embedding_malformed_response", extra={"error": str(e)})
            raise EmbeddingError(f"EMBEDDING_MALFORMED: {e}") from e

        if not isinstance(values, list) or len(values) != self.dimension:
            record_embedding(False, time.perf_counter() - start_time)
            got = len(values) if isinstance(values, list) else type(values).__name__
            logger.error(
                "embedding_dimension_mismatch",
                extra={"expected": self.dimension, "got": got},
            )
            raise EmbeddingError(
                f"EMBEDDING_DIMENSION_MISMATCH: expected {self.dimension}, got {got}"
            )

        duration_seconds = time.perf_counter() - start_time
        record_embedding(True, duration_seconds)
        logger.debug(
            "embedding_generated",
            extra={"chars": len(text), "duration_ms": round(duration_seconds * 1000, 2)},
        )
        return [float(v) for v in values]

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()
