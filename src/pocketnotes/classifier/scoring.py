"""Score clamping and the tier/action policy.

Tier depends only on the score; action depends on the score and the two
configured thresholds. Both are monotonic non-decreasing in score.
"""

from dataclasses import dataclass
from typing import Optional

from ..config import PocketConfig, get_config
from ..models import Action, Category, CategoryScore, Tier
from .config import TIER_BREAKPOINTS

__all__ = [
    "ScoreThresholds",
    "clamp_score",
    "get_action",
    "get_tier",
    "make_category_score",
    "parse_score",
]


@dataclass(frozen=True)
class ScoreThresholds:
    """Auto-confirm and show-button cut-offs (inclusive)."""

    auto_confirm: int = 95
    show_button: int = 60

    def __post_init__(self):
        if not 0 <= self.show_button <= 100 or not 0 <= self.auto_confirm <= 100:
            raise ValueError("thresholds must be in [0, 100]")
        if self.show_button > self.auto_confirm:
            raise ValueError(
                f"show_button threshold ({self.show_button}) must be <= "
                f"auto_confirm threshold ({self.auto_confirm})"
            )

    @classmethod
    def from_config(cls, config: Optional[PocketConfig] = None) -> "ScoreThresholds":
        config = config or get_config()
        return cls(
            auto_confirm=config.auto_confirm_threshold,
            show_button=config.show_button_threshold,
        )


def clamp_score(value: float) -> int:
    """Round and clamp any numeric value into [0, 100]."""
    return max(0, min(100, int(round(value))))


def parse_score(response_text: str) -> int:
    """Parse a model response as a 0-100 integer.

    Accepts a leading integer with optional surrounding whitespace or trailing
    text ("87", " 87\\n", "87/100"). A leading sign is honoured and then clamped.

    Raises:
        ValueError: If the response does not start with an integer
    """
    text = response_text.strip()
    end = 0
    if text[:1] in ("-", "+"):
        end = 1
    while end < len(text) and text[end].isdigit():
        end += 1
    digits = text[:end]
    if not digits.lstrip("+-"):
        raise ValueError(f"Non-numeric score response: {text[:50]!r}")
    return clamp_score(int(digits))


def get_tier(score: int) -> Tier:
    for lower_bound, tier in TIER_BREAKPOINTS:
        if score >= lower_bound:
            return Tier(tier)
    return Tier.INSUFFICIENT


def get_action(score: int, thresholds: ScoreThresholds) -> Action:
    if score >= thresholds.auto_confirm:
        return Action.AUTO_CONFIRM
    if score >= thresholds.show_button:
        return Action.SHOW_BUTTON
    return Action.SKIP


def make_category_score(
    category: Category, score: float, thresholds: ScoreThresholds
) -> CategoryScore:
    """Build a CategoryScore with tier and action derived from the score."""
    clamped = clamp_score(score)
    return CategoryScore(
        category=category,
        score=clamped,
        tier=get_tier(clamped),
        action=get_action(clamped, thresholds),
    )
