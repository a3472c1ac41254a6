"""Configuration management with pydantic-settings for pocketnotes.

- pydantic-settings for type-safe configuration
- Automatic .env file loading with proper precedence
- Validation with clear error messages
- SecretStr for provider credentials
- Frozen config (immutable after load)
"""

import logging
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("pocketnotes.config")

__all__ = [
    "SUPPORTED_PROVIDERS",
    "PocketConfig",
    "get_config",
    "reset_config",
]

# Providers the scorer knows how to build
SUPPORTED_PROVIDERS = ("gemini", "openrouter", "claude")


class PocketConfig(BaseSettings):
    """Configuration for the classification and ranking engine.

    Loads from (in order of precedence):
    1. Environment variables (highest priority)
    2. .env file in the working directory
    3. Default values (lowest priority)

    All threshold values are validated on load; an invalid combination is a
    startup error, not a per-call one.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    # =========================================================================
    # Classification policy
    # =========================================================================
    classifier_enabled: bool = Field(
        default=True,
        description="Master switch. When false, classification returns no scores and makes no external calls.",
    )

    japanese_category_enabled: bool = Field(
        default=True,
        description="Score the japanese category with the external model.",
    )

    auto_confirm_threshold: int = Field(
        default=95,
        ge=0,
        le=100,
        description="Scores at or above this are confirmed without asking the user.",
    )

    show_button_threshold: int = Field(
        default=60,
        ge=0,
        le=100,
        description="Scores at or above this (and below auto-confirm) are offered as a suggestion button.",
    )

    min_content_length: int = Field(
        default=20,
        ge=0,
        le=1000,
        description="Notes shorter than this (after stripping) are not auto-classified.",
    )

    # =========================================================================
    # External scorer
    # =========================================================================
    scorer_primary_provider: str = Field(
        default="gemini",
        description="Provider used first for category scoring.",
    )

    scorer_fallback_providers: str = Field(
        default="openrouter",
        description="Comma-separated providers tried in order when the primary fails.",
    )

    scorer_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=120.0,
        description="Per-call timeout for one scoring request.",
    )

    scorer_max_input_chars: int = Field(
        default=4000,
        ge=100,
        le=100000,
        description="Note text longer than this is truncated inside prompts.",
    )

    scorer_max_output_tokens: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Scoring responses are a single integer, so this stays small.",
    )

    scorer_temperature: float = Field(default=0.3, ge=0.0, le=2.0)

    rate_limit_per_minute: int = Field(
        default=40,
        ge=1,
        le=10000,
        description="Average scoring requests per minute per provider.",
    )

    rate_limit_burst: int = Field(
        default=40,
        ge=1,
        le=1000,
        description="Token bucket capacity per provider.",
    )

    gemini_api_key: SecretStr = Field(default=SecretStr(""))
    gemini_model: str = Field(default="gemini-2.5-flash")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta"
    )

    openrouter_api_key: SecretStr = Field(default=SecretStr(""))
    openrouter_model: str = Field(default="google/gemini-2.5-flash")
    openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1")

    anthropic_api_key: SecretStr = Field(default=SecretStr(""))
    anthropic_model: str = Field(default="claude-3-5-haiku-20241022")

    # =========================================================================
    # Embeddings
    # =========================================================================
    embedding_model: str = Field(default="text-embedding-004")

    embedding_dimension: int = Field(
        default=768,
        ge=64,
        le=4096,
        description="Expected vector length. A mismatching response is an error.",
    )

    embedding_max_chars: int = Field(
        default=2000,
        ge=100,
        le=100000,
        description="Input is silently cut to this many characters before embedding.",
    )

    embedding_min_interval_ms: int = Field(
        default=60,
        ge=0,
        le=60000,
        description="Minimum delay between two embedding calls from one provider instance.",
    )

    embedding_timeout_seconds: float = Field(default=15.0, gt=0.0, le=300.0)

    # =========================================================================
    # Hybrid ranking
    # =========================================================================
    semantic_weight: float = Field(default=0.7, ge=0.0, le=1.0)
    lexical_weight: float = Field(default=0.3, ge=0.0, le=1.0)

    substring_min_similarity: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Lexical similarity floor for rows that contain the query as a substring.",
    )

    # =========================================================================
    # Suggestions
    # =========================================================================
    suggestion_relevance_floor: int = Field(
        default=40,
        ge=0,
        le=100,
        description="Categories whose best relevance score is below this are left out.",
    )

    suggestion_max_llm_pool: int = Field(
        default=30,
        ge=1,
        le=500,
        description="Largest pool the semantic strategy accepts (one external call per candidate).",
    )

    @field_validator("scorer_primary_provider")
    @classmethod
    def validate_primary_provider(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unknown provider '{v}'. Must be one of: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        return v

    @field_validator("scorer_fallback_providers")
    @classmethod
    def validate_fallback_providers(cls, v: str) -> str:
        names = [p.strip().lower() for p in v.split(",") if p.strip()]
        unknown = [p for p in names if p not in SUPPORTED_PROVIDERS]
        if unknown:
            raise ValueError(
                f"Unknown fallback providers: {', '.join(unknown)}"
            )
        return ",".join(names)

    @property
    def fallback_providers(self) -> list[str]:
        """Fallback provider names in the order they are tried."""
        return [p for p in self.scorer_fallback_providers.split(",") if p]

    @model_validator(mode="after")
    def validate_thresholds(self) -> "PocketConfig":
        """show-button must not sit above auto-confirm."""
        if self.show_button_threshold > self.auto_confirm_threshold:
            raise ValueError(
                "SHOW_BUTTON_THRESHOLD must be <= AUTO_CONFIRM_THRESHOLD "
                f"(got {self.show_button_threshold} > {self.auto_confirm_threshold})"
            )
        return self

    @model_validator(mode="after")
    def validate_ranking_weights(self) -> "PocketConfig":
        """Weights must sum to 1 so the combined score stays in [0, 1]."""
        if abs(self.semantic_weight + self.lexical_weight - 1.0) > 1e-9:
            raise ValueError(
                "SEMANTIC_WEIGHT + LEXICAL_WEIGHT must equal 1.0 "
                f"(got {self.semantic_weight} + {self.lexical_weight})"
            )
        return self


@lru_cache(maxsize=1)
def get_config() -> PocketConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return the
    cached instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return PocketConfig()


def reset_config() -> None:
    """Reset configuration singleton for testing.

    Warning:
        Only use in test code. Production code should not reset config.
    """
    get_config.cache_clear()
