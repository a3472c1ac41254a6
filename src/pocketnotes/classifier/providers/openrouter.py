"""OpenRouter provider for cloud score completions.

Uses the OpenAI-compatible chat completions endpoint.
"""

import json
import logging
from typing import Optional

import httpx

from .base import BaseProvider, ProviderResponse

logger = logging.getLogger("pocketnotes.classifier.providers.openrouter")

__all__ = ["OpenRouterProvider"]


class OpenRouterProvider(BaseProvider):
    """OpenRouter provider for score completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "google/gemini-2.5-flash",
        timeout: float = 10.0,
        max_output_tokens: int = 10,
        temperature: float = 0.3,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize OpenRouter provider.

        Args:
            api_key: OpenRouter API key
            base_url: OpenRouter API base URL
            model: Model name
            timeout: Request timeout in seconds
            max_output_tokens: Completion length cap
            temperature: Sampling temperature
            client: Optional preconfigured httpx.AsyncClient
        """
        super().__init__(timeout, max_output_tokens, temperature)
        self.api_key = api_key or None
        self.base_url = base_url.rstrip("/")
        self.model = model

        if not self.api_key:
            logger.warning("openrouter_no_api_key")

        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {self.api_key or ''}",
                "Content-Type": "application/json",
                "X-Title": "pocketnotes",
            },
        )

    @property
    def name(self) -> str:
        return "openrouter"

    def is_available(self) -> bool:
        return self.api_key is not None

    async def complete(self, prompt: str) -> ProviderResponse:
        """Score a prompt with OpenRouter.

        Raises:
            TimeoutError: If request exceeds timeout
            ConnectionError: If OpenRouter is unreachable
            ValueError: If response is malformed
        """
        if not self.api_key:
            raise ConnectionError("OpenRouter API key not configured")

        try:
            response = await self._client.post(
                f"{self.base_url}/chat/completions",
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "max_tokens": self.max_output_tokens,
                    "temperature": self.temperature,
                },
            )
            response.raise_for_status()

            result = response.json()
            text = result["choices"][0]["message"]["content"] or ""

            usage = result.get("usage") or {}
            return ProviderResponse(
                text=text,
                input_tokens=usage.get("prompt_tokens", 0),
                output_tokens=usage.get("completion_tokens", 0),
                model_name=result.get("model", self.model),
            )

        except httpx.TimeoutException as e:
            logger.error("openrouter_timeout", extra={"error": str(e)})
            raise TimeoutError(f"OpenRouter request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error("openrouter_http_error", extra={"error": str(e)})
            raise ConnectionError(f"OpenRouter HTTP error: {e}") from e
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            logger.error("openrouter_parse_error", extra={"error": str(e)})
            raise ValueError(f"Invalid OpenRouter response: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
