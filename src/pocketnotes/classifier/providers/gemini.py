"""Google Gemini provider for score completions.

Talks to the Generative Language REST API (generateContent) over httpx.
"""

import json
import logging
from typing import Optional

import httpx

from .base import BaseProvider, ProviderResponse

logger = logging.getLogger("pocketnotes.classifier.providers.gemini")

__all__ = ["GeminiProvider"]


class GeminiProvider(BaseProvider):
    """Gemini provider for score completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-2.5-flash",
        timeout: float = 10.0,
        max_output_tokens: int = 10,
        temperature: float = 0.3,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout, max_output_tokens, temperature)
        self.api_key = api_key or None
        self.base_url = base_url.rstrip("/")
        self.model = model

        if not self.api_key:
            logger.warning("gemini_no_api_key")

        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={
                "x-goog-api-key": self.api_key or "",
                "Content-Type": "application/json",
            },
        )

    @property
    def name(self) -> str:
        return "gemini"

    def is_available(self) -> bool:
        return self.api_key is not None

    async def complete(self, prompt: str) -> ProviderResponse:
        """Score a prompt with Gemini.

        Raises:
            TimeoutError: If request exceeds timeout
            ConnectionError: If Gemini is unreachable
            ValueError: If response is malformed or blocked
        """
        if not self.api_key:
            raise ConnectionError("Gemini API key not configured")

        try:
            response = await self._client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                json={
                    "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                    "generationConfig": {
                        "maxOutputTokens": self.max_output_tokens,
                        "temperature": self.temperature,
                    },
                },
            )
            response.raise_for_status()

            result = response.json()
            parts = result["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)

            usage = result.get("usageMetadata") or {}
            return ProviderResponse(
                text=text,
                input_tokens=usage.get("promptTokenCount", 0),
                output_tokens=usage.get("candidatesTokenCount", 0),
                model_name=result.get("modelVersion", self.model),
            )

        except httpx.TimeoutException as e:
            logger.error("gemini_timeout", extra={"error": str(e)})
            raise TimeoutError(f"Gemini request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error("gemini_http_error", extra={"error": str(e)})
            raise ConnectionError(f"Gemini HTTP error: {e}") from e
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            # Safety-blocked responses come back without candidates/content
            logger.error("gemini_parse_error", extra={"error": str(e)})
            raise ValueError(f"Invalid Gemini response: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
