"""Rule-based category detection.

Deterministic scores for categories with an unambiguous signal (Japanese kana,
known video/blog/learning/documentation sites). No I/O. A category missing
from the result means "no opinion", not zero.
"""

import logging
from typing import Optional
from urllib.parse import urlsplit

from ..models import Category
from .config import (
    CJK_RANGE,
    HIRAGANA_RANGE,
    KATAKANA_RANGE,
    SCRIPT_MIN_CHARS_FOR_DEFINITE,
    SCRIPT_SCORE,
    SCRIPT_SCORE_DEFINITE,
    URL_RULES,
)

logger = logging.getLogger("pocketnotes.classifier.rules")

__all__ = ["detect_by_pattern", "detect_script", "detect_url"]


def _in_range(char: str, bounds: tuple[str, str]) -> bool:
    return bounds[0] <= char <= bounds[1]


def detect_script(text: str) -> Optional[int]:
    """Score Japanese script presence.

    Returns:
        95 if kana are present and at least 3 kana/kanji characters overall,
        85 if kana are present, None otherwise (kanji alone may be Chinese).

    Examples:
        >>> detect_script("ありがとう")
        95
        >>> detect_script("ア")
        85
        >>> detect_script("中文")
    """
    if not text:
        return None

    has_kana = False
    japanese_chars = 0
    for char in text:
        if _in_range(char, HIRAGANA_RANGE) or _in_range(char, KATAKANA_RANGE):
            has_kana = True
            japanese_chars += 1
        elif _in_range(char, CJK_RANGE):
            japanese_chars += 1

    if not has_kana:
        return None
    if japanese_chars >= SCRIPT_MIN_CHARS_FOR_DEFINITE:
        return SCRIPT_SCORE_DEFINITE
    return SCRIPT_SCORE


def _split_url(url: str) -> Optional[tuple[str, str]]:
    """Return (host, path) lower-cased, or None if the URL can't be parsed."""
    candidate = url.strip().lower()
    if not candidate:
        return None
    if "://" not in candidate:
        candidate = f"http://{candidate}"
    try:
        parts = urlsplit(candidate)
        host = parts.hostname or ""
    except ValueError:
        return None
    if not host:
        return None
    return host, parts.path or "/"


def _domain_matches(host: str, path: str, entry: str) -> bool:
    if "/" in entry:
        domain, _, prefix = entry.partition("/")
        return _domain_matches(host, path, domain) and path.startswith(f"/{prefix}")
    return host == entry or host.endswith(f".{entry}")


def _rule_matches(kind: str, host: str, path: str, entry: str) -> bool:
    if kind == "domain":
        return _domain_matches(host, path, entry)
    if kind == "path":
        return entry in path
    if kind == "host_prefix":
        return f".{entry}" in f".{host}"
    if kind == "substring":
        return entry in f"{host}{path}"
    raise ValueError(f"Unknown URL rule kind: {kind}")


def detect_url(url: str) -> dict[Category, int]:
    """Score one URL against the allowlists."""
    split = _split_url(url)
    if split is None:
        logger.debug("url_unparseable", extra={"url": url[:200]})
        return {}

    host, path = split
    scores: dict[Category, int] = {}
    for category, kind, entries, score in URL_RULES:
        if any(_rule_matches(kind, host, path, entry) for entry in entries):
            scores[category] = max(scores.get(category, 0), score)
    return scores


def detect_by_pattern(text: str, urls: Optional[list[str]] = None) -> dict[Category, int]:
    """Deterministic category scores for a note.

    Args:
        text: Note text
        urls: URLs attached to the note

    Returns:
        Mapping of category to score for categories with a confident signal.

    Examples:
        >>> detect_by_pattern("watch later", ["https://youtu.be/abc"])
        {<Category.YOUTUBE: 'youtube'>: 100}
        >>> detect_by_pattern("plain text")
        {}
    """
    scores: dict[Category, int] = {}

    script_score = detect_script(text or "")
    if script_score is not None:
        scores[Category.JAPANESE] = script_score

    for url in urls or []:
        if not isinstance(url, str):
            continue
        for category, score in detect_url(url).items():
            scores[category] = max(scores.get(category, 0), score)

    if scores:
        logger.debug(
            "pattern_match",
            extra={"scores": {c.value: s for c, s in scores.items()}},
        )
    return scores
