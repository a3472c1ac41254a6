"""Classifier static configuration.

Pattern tables and score breakpoints used by the deterministic detector and
the tier policy. Runtime-tunable values (thresholds, providers, timeouts)
live in pocketnotes.config.
"""

from ..models import Category

__all__ = [
    "BLOG_PATH_PATTERNS",
    "BLOG_PLATFORM_DOMAINS",
    "CJK_RANGE",
    "DOCUMENTATION_HOST_PREFIXES",
    "DOCUMENTATION_PATTERNS",
    "HIRAGANA_RANGE",
    "JAPANESE_LEARNING_DOMAINS",
    "KATAKANA_RANGE",
    "SCRIPT_MIN_CHARS_FOR_DEFINITE",
    "SCRIPT_SCORE",
    "SCRIPT_SCORE_DEFINITE",
    "TIER_BREAKPOINTS",
    "URL_RULES",
    "VIDEO_PLATFORM_DOMAINS",
    "YOUTUBE_DOMAINS",
]

# =============================================================================
# SCRIPT DETECTION (japanese)
# =============================================================================
# Kanji share the CJK block with Chinese hanzi, so only kana can trigger the
# rule; the broader range only decides between 85 and 95.
HIRAGANA_RANGE = ("\u3040", "\u309f")
KATAKANA_RANGE = ("\u30a0", "\u30ff")
CJK_RANGE = ("\u4e00", "\u9fff")

SCRIPT_SCORE = 85
SCRIPT_SCORE_DEFINITE = 95
SCRIPT_MIN_CHARS_FOR_DEFINITE = 3

# =============================================================================
# URL ALLOWLISTS
# =============================================================================
YOUTUBE_DOMAINS: list[str] = ["youtube.com", "youtu.be"]

VIDEO_PLATFORM_DOMAINS: list[str] = [
    "youtube.com",
    "youtu.be",
    "vimeo.com",
    "twitch.tv",
    "loom.com",
]

JAPANESE_LEARNING_DOMAINS: list[str] = [
    "jisho.org",
    "bunpro.jp",
    "wanikani.com",
    "jpdb.io",
    "tangorin.com",
    "guidetojapanese.org",
    "nhk.or.jp/lesson",
]

BLOG_PLATFORM_DOMAINS: list[str] = [
    "medium.com",
    "dev.to",
    "hashnode.dev",
    "substack.com",
    "ghost.io",
]

BLOG_PATH_PATTERNS: list[str] = ["/blog/", "/article/", "/post/", "/posts/"]

# Documentation subdomains
DOCUMENTATION_HOST_PREFIXES: list[str] = ["docs.", "api.", "developer.", "reference."]

# Domains / path fragments matched against host + path
DOCUMENTATION_PATTERNS: list[str] = ["readthedocs.io", "github.com/", "/docs/"]

# (category, kind, entries, score) evaluated in order; max wins per category.
#   kind "domain": host equals entry or ends with "." + entry; entries with a
#                  path ("nhk.or.jp/lesson") match as a prefix of host + path
#   kind "path": entry is a substring of the URL path
#   kind "host_prefix": a host label starts with entry ("docs." matches docs.python.org)
#   kind "substring": entry is a substring of host + path
URL_RULES: list[tuple[Category, str, list[str], int]] = [
    (Category.YOUTUBE, "domain", YOUTUBE_DOMAINS, 100),
    (Category.YOUTUBE, "domain", VIDEO_PLATFORM_DOMAINS, 95),
    (Category.JAPANESE, "domain", JAPANESE_LEARNING_DOMAINS, 95),
    (Category.BLOG, "domain", BLOG_PLATFORM_DOMAINS, 95),
    (Category.BLOG, "path", BLOG_PATH_PATTERNS, 85),
    (Category.REFERENCE, "host_prefix", DOCUMENTATION_HOST_PREFIXES, 90),
    (Category.REFERENCE, "substring", DOCUMENTATION_PATTERNS, 90),
]

# =============================================================================
# TIERS
# =============================================================================
# Lower bound of each tier, highest first. Anything below the last is
# "insufficient".
TIER_BREAKPOINTS: list[tuple[int, str]] = [
    (95, "definite"),
    (85, "high"),
    (70, "moderate"),
    (60, "low"),
]
