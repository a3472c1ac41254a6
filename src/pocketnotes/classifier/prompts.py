"""Scoring prompt templates.

One prompt per category, each asking for a single 0-100 integer, plus a
relevance prompt that treats a free-text query as a one-off category.
"""

from typing import Optional

from ..models import Category

__all__ = [
    "CATEGORY_PROMPTS",
    "RELEVANCE_PROMPT",
    "build_category_prompt",
    "build_relevance_prompt",
]

_RESPONSE_RULE = "Return ONLY an integer 0-100. No explanation."

_NOTE_BLOCK = """CONTENT: "{content}"
URLS: {urls}"""

CATEGORY_PROMPTS: dict[Category, str] = {
    Category.TODO: """You are a task detection AI. Analyze the content and score how likely it represents a TODO/task/action item.

{note_block}

Score 0-100 based on:
- Task verbs (need, must, should, remind, fix, implement): +40
- Temporal indicators (tomorrow, deadline, by date): +30
- Urgency markers (important, urgent, ASAP): +20
- Checkbox format or action list: +10

{response_rule}""",
    Category.IDEA: """You are an idea detection AI. Analyze the content and score how likely it represents a creative IDEA/concept/brainstorm.

{note_block}

Score 0-100 based on:
- Explicit idea markers (idea:, what if, concept): +40
- Creative/speculative language (could build, imagine, new approach): +30
- Innovation terms (novel, creative, unique): +20
- Hypothetical scenarios (if we, suppose, consider): +10

{response_rule}""",
    Category.BLOG: """You are a blog/article detection AI. Analyze the content and score how likely it contains blog posts or written articles.

{note_block}

Score 0-100 based on:
- Known blog platforms (medium.com, dev.to, substack.com): +50
- URL path indicators (/blog/, /article/, /post/): +30
- Reading material mentions (article, blog post, wrote about): +15
- Content structure hints (long-form, tutorial): +5

{response_rule}""",
    Category.YOUTUBE: """You are a video content detection AI. Analyze the content and score how likely it contains video/YouTube content.

{note_block}

Score 0-100 based on:
- YouTube URL (youtube.com, youtu.be): +60
- Other video platforms (vimeo, twitch, loom): +50
- Video keywords (video, watch, tutorial, talk): +30
- Streaming/recording mentions (webinar, conference, recorded): +10

{response_rule}""",
    Category.REFERENCE: """You are a reference/documentation detection AI. Analyze the content and score how likely it contains reference material or documentation.

{note_block}

Score 0-100 based on:
- Official docs URLs (docs.*, api.*, developer.*): +50
- Documentation mentions (docs, API reference, manual): +30
- Knowledge bases (stackoverflow, wiki, MDN): +15
- Learning resources (guide, tutorial, how-to): +5

{response_rule}""",
    Category.JAPANESE: """You are a Japanese language study material detection AI. Analyze the content and score how likely it contains Japanese learning content.

{note_block}

Score 0-100 based on:
- Contains hiragana or katakana: +50 (if 3+ chars: +60)
- Japanese learning site URLs (jisho.org, bunpro.jp, wanikani.com): +50
- Language keywords (Japanese, JLPT, kanji, grammar): +30
- Romanized Japanese in educational context: +20
- Learning context (study, vocabulary, syntax): +10

Special rules:
- If hiragana or katakana present: minimum score 85
- Mixed Japanese + English explanation: score 90-95
- Pure Chinese text (only CJK ideographs, no kana): score 0-30 (not Japanese)

Chinese and Japanese share many characters. Only score high if hiragana or
katakana are present, or the context clearly indicates Japanese study (JLPT,
Japanese grammar, etc.).

{response_rule}""",
}

RELEVANCE_PROMPT = """You are analyzing a note for relevance to a user query.

User Query: "{query}"

Note Content:
\"\"\"
{content}
\"\"\"

Score this note's relevance to the query on a scale of 0-100:
- 0-20: Completely irrelevant
- 21-40: Tangentially related
- 41-60: Somewhat relevant
- 61-80: Quite relevant
- 81-100: Highly relevant

{response_rule}"""


def _truncate(content: str, max_chars: Optional[int]) -> str:
    if max_chars is not None and len(content) > max_chars:
        return content[:max_chars] + "\n\n[...truncated]"
    return content


def build_category_prompt(
    category: Category,
    content: str,
    urls: Optional[list[str]] = None,
    max_chars: Optional[int] = None,
) -> str:
    """Build the scoring prompt for one category.

    Args:
        category: Category to score
        content: Note text
        urls: URLs attached to the note
        max_chars: Truncate content beyond this many characters

    Returns:
        Formatted prompt string
    """
    url_list = ", ".join(urls) if urls else "none"
    note_block = _NOTE_BLOCK.format(content=_truncate(content, max_chars), urls=url_list)
    return CATEGORY_PROMPTS[category].format(
        note_block=note_block, response_rule=_RESPONSE_RULE
    )


def build_relevance_prompt(
    content: str, query: str, max_chars: Optional[int] = None
) -> str:
    """Build the prompt scoring a note against a free-text query."""
    return RELEVANCE_PROMPT.format(
        query=query.strip(),
        content=_truncate(content, max_chars),
        response_rule=_RESPONSE_RULE,
    )
