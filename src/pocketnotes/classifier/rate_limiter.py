"""Token bucket rate limiter for scoring providers.

Keeps category fan-out under each provider's requests-per-minute ceiling.
One bucket per provider; waiting is cooperative (asyncio.sleep) so other
tasks on the loop keep running while a caller waits for a token.
"""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass, field

logger = logging.getLogger("pocketnotes.classifier.rate_limiter")

__all__ = ["RateLimitTimeoutError", "RateLimiter", "TokenBucket"]

# Poll interval while waiting for a refill
_WAIT_STEP_SECONDS = 0.1


class RateLimitTimeoutError(TimeoutError):
    """No token became available within the caller's timeout."""


@dataclass
class TokenBucket:
    """Token bucket for rate limiting a single provider.

    Attributes:
        capacity: Maximum tokens in bucket
        tokens: Current tokens available
        refill_rate: Tokens added per second
        last_refill: Monotonic timestamp of last refill
    """

    capacity: float
    tokens: float
    refill_rate: float
    last_refill: float
    lock: threading.Lock = field(default_factory=threading.Lock)


class RateLimiter:
    """Token bucket rate limiter with per-provider limits.

    Check-and-consume happens under a plain lock with no await in between, so
    it is safe both on one event loop and across threads.

    Example:
        >>> limiter = RateLimiter(requests_per_minute=40, burst_size=40)
        >>> await limiter.wait_for_token("gemini", timeout=10.0)
    """

    def __init__(self, requests_per_minute: int = 40, burst_size: int = 40):
        """Initialize rate limiter.

        Args:
            requests_per_minute: Average requests allowed per minute per provider
            burst_size: Maximum burst size (tokens in bucket)

        Raises:
            ValueError: If either limit is not positive
        """
        if requests_per_minute <= 0 or burst_size <= 0:
            raise ValueError("requests_per_minute and burst_size must be positive")

        self.requests_per_minute = requests_per_minute
        self.burst_size = burst_size
        self.refill_rate = requests_per_minute / 60.0

        self._buckets: dict[str, TokenBucket] = {}
        self._global_lock = threading.Lock()

        logger.debug(
            "rate_limiter_initialized",
            extra={
                "requests_per_minute": requests_per_minute,
                "burst_size": burst_size,
            },
        )

    def _get_bucket(self, provider: str) -> TokenBucket:
        with self._global_lock:
            if provider not in self._buckets:
                self._buckets[provider] = TokenBucket(
                    capacity=self.burst_size,
                    tokens=self.burst_size,  # Start full
                    refill_rate=self.refill_rate,
                    last_refill=time.monotonic(),
                )
            return self._buckets[provider]

    def _refill_bucket(self, bucket: TokenBucket) -> None:
        now = time.monotonic()
        elapsed = now - bucket.last_refill
        bucket.tokens = min(bucket.capacity, bucket.tokens + elapsed * bucket.refill_rate)
        bucket.last_refill = now

    def allow_request(self, provider: str, tokens: int = 1) -> bool:
        """Consume tokens if available without waiting.

        Returns:
            True if request allowed, False if rate limit exceeded
        """
        bucket = self._get_bucket(provider)

        with bucket.lock:
            self._refill_bucket(bucket)
            if bucket.tokens >= tokens:
                bucket.tokens -= tokens
                return True

        logger.debug(
            "rate_limit_exceeded",
            extra={"provider": provider, "tokens_needed": tokens},
        )
        return False

    async def wait_for_token(
        self, provider: str, tokens: int = 1, timeout: float = 30.0
    ) -> None:
        """Wait until tokens are available, then consume them.

        Args:
            provider: Provider name
            tokens: Number of tokens needed
            timeout: Maximum seconds to wait

        Raises:
            RateLimitTimeoutError: If no token became available in time
        """
        deadline = time.monotonic() + timeout

        while True:
            if self.allow_request(provider, tokens):
                return

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(
                    "rate_limit_timeout",
                    extra={"provider": provider, "timeout_seconds": timeout},
                )
                raise RateLimitTimeoutError(
                    f"Could not acquire {tokens} token(s) for {provider} within {timeout}s"
                )
            await asyncio.sleep(min(_WAIT_STEP_SECONDS, remaining))
