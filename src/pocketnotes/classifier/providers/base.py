"""Base provider abstract class for score completions.

Defines the interface every scoring provider implements: send one prompt,
get back the raw text the model produced.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger("pocketnotes.classifier.providers")

__all__ = ["BaseProvider", "ProviderResponse"]


@dataclass
class ProviderResponse:
    """Response from a scoring provider.

    Attributes:
        text: Raw text returned by the model
        input_tokens: Number of input tokens used
        output_tokens: Number of output tokens used
        model_name: Specific model used (e.g., "gemini-2.5-flash")
    """

    text: str
    input_tokens: int = 0
    output_tokens: int = 0
    model_name: str = ""


class BaseProvider(ABC):
    """Abstract base class for scoring providers.

    Providers report missing credentials once, at construction, through
    is_available(); complete() is only called on available providers.
    """

    def __init__(self, timeout: float = 10.0, max_output_tokens: int = 10, temperature: float = 0.3):
        """Initialize provider.

        Args:
            timeout: Request timeout in seconds
            max_output_tokens: Completion length cap
            temperature: Sampling temperature
        """
        self.timeout = timeout
        self.max_output_tokens = max_output_tokens
        self.temperature = temperature

    @abstractmethod
    async def complete(self, prompt: str) -> ProviderResponse:
        """Send a prompt and return the model's text.

        Raises:
            TimeoutError: If request exceeds timeout
            ConnectionError: If provider is unreachable or returns an HTTP error
            ValueError: If the response body is malformed
        """

    @abstractmethod
    def is_available(self) -> bool:
        """True if the provider is configured and can accept requests."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging and metrics (e.g., "gemini")."""

    async def aclose(self) -> None:
        """Clean up resources. Override in subclasses if needed."""
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()
