"""Claude (Anthropic) provider for score completions.

Uses the Anthropic SDK's async client.
"""

import logging
from typing import Optional

from anthropic import APIConnectionError, APIStatusError, APITimeoutError, AsyncAnthropic

from .base import BaseProvider, ProviderResponse

logger = logging.getLogger("pocketnotes.classifier.providers.claude")

__all__ = ["ClaudeProvider"]


class ClaudeProvider(BaseProvider):
    """Claude/Anthropic provider for score completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-3-5-haiku-20241022",
        timeout: float = 10.0,
        max_output_tokens: int = 10,
        temperature: float = 0.3,
        client: Optional[AsyncAnthropic] = None,
    ):
        super().__init__(timeout, max_output_tokens, temperature)
        self.api_key = api_key or None
        self.model = model

        if client is not None:
            self._client = client
        elif not self.api_key:
            logger.warning("claude_no_api_key")
            self._client = None
        else:
            # Retries are the scorer's job (fallback chain), not the SDK's
            self._client = AsyncAnthropic(
                api_key=self.api_key, timeout=timeout, max_retries=0
            )

    @property
    def name(self) -> str:
        return "claude"

    def is_available(self) -> bool:
        return self._client is not None

    async def complete(self, prompt: str) -> ProviderResponse:
        """Score a prompt with Claude.

        Raises:
            TimeoutError: If request exceeds timeout
            ConnectionError: If Claude is unreachable or rejects the request
            ValueError: If the response carries no text
        """
        if self._client is None:
            raise ConnectionError("Claude client not initialized (missing API key)")

        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_output_tokens,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except APITimeoutError as e:
            logger.error("claude_timeout", extra={"error": str(e)})
            raise TimeoutError(f"Claude request timed out: {e}") from e
        except (APIConnectionError, APIStatusError) as e:
            logger.error("claude_api_error", extra={"error": str(e)})
            raise ConnectionError(f"Claude API error: {e}") from e

        text = "".join(
            getattr(block, "text", "") for block in (response.content or [])
        )
        if not text:
            logger.error("claude_empty_response")
            raise ValueError("Claude returned no text content")

        return ProviderResponse(
            text=text,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model_name=response.model,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
