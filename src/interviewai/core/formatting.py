from __future__ import annotations

import re

from interviewai.core.vocabulary import CHAT_TOPICS

TRUNCATION_MARKER = "..."
SENTENCE_BOUNDARY_RATIO = 0.8
DEFAULT_CHAT_TITLE = "New Chat"
MAX_TITLE_WORDS = 6

_SENTENCE_TERMINATORS = ".!?"
_NON_WORD = re.compile(r"[^\w\s]")


def truncate_text(text: str, max_length: int) -> str:
    """Bound ``text`` to ``max_length`` characters plus a marker.

    Prefers to stop at the last sentence terminator when one falls in the
    final 20% of the allowed length.
    """
    if len(text) <= max_length:
        return text

    cut = text[:max_length]
    boundary = max(cut.rfind(char) for char in _SENTENCE_TERMINATORS)
    if boundary > max_length * SENTENCE_BOUNDARY_RATIO:
        return cut[: boundary + 1] + TRUNCATION_MARKER
    return cut + TRUNCATION_MARKER


def generate_chat_title(first_message: str, default: str = DEFAULT_CHAT_TITLE) -> str:
    cleaned = _NON_WORD.sub("", first_message).strip().lower()
    words = cleaned.split()
    if not words:
        return default

    title = " ".join(word[:1].upper() + word[1:] for word in words[:MAX_TITLE_WORDS])
    if len(words) > MAX_TITLE_WORDS:
        title += "..."
    return title


def generate_ai_title(
    message: str,
    topics: tuple[str, ...] | list[str] = CHAT_TOPICS,
    default: str = DEFAULT_CHAT_TITLE,
) -> str:
    lowered = message.lower()
    for topic in topics:
        if topic in lowered:
            return f"{topic[:1].upper()}{topic[1:]} Discussion"
    return generate_chat_title(message, default=default)
