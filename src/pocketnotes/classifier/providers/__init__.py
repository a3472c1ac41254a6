"""Scoring providers package.

Exports all available completion providers and the factory that builds them
from configuration.
"""

from typing import Optional

from ...config import PocketConfig, get_config
from .base import BaseProvider, ProviderResponse
from .claude import ClaudeProvider
from .gemini import GeminiProvider
from .openrouter import OpenRouterProvider

__all__ = [
    "BaseProvider",
    "ClaudeProvider",
    "GeminiProvider",
    "OpenRouterProvider",
    "ProviderResponse",
    "build_provider",
]


def build_provider(name: str, config: Optional[PocketConfig] = None) -> BaseProvider:
    """Build a provider by name from configuration.

    Raises:
        ValueError: If the provider name is unknown
    """
    config = config or get_config()
    common = {
        "timeout": config.scorer_timeout_seconds,
        "max_output_tokens": config.scorer_max_output_tokens,
        "temperature": config.scorer_temperature,
    }

    if name == "gemini":
        return GeminiProvider(
            api_key=config.gemini_api_key.get_secret_value(),
            base_url=config.gemini_base_url,
            model=config.gemini_model,
            **common,
        )
    if name == "openrouter":
        return OpenRouterProvider(
            api_key=config.openrouter_api_key.get_secret_value(),
            base_url=config.openrouter_base_url,
            model=config.openrouter_model,
            **common,
        )
    if name == "claude":
        return ClaudeProvider(
            api_key=config.anthropic_api_key.get_secret_value(),
            model=config.anthropic_model,
            **common,
        )
    raise ValueError(f"Unknown provider: {name}")
