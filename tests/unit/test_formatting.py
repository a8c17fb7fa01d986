from interviewai.core.formatting import generate_ai_title, generate_chat_title, truncate_text


def test_truncate_text_returns_short_text_unchanged() -> None:
    assert truncate_text("Short answer.", 100) == "Short answer."


def test_truncate_text_prefers_late_sentence_boundary() -> None:
    text = "a" * 85 + ". " + "b" * 50
    assert truncate_text(text, 100) == "a" * 85 + "." + "..."


def test_truncate_text_hard_cuts_when_boundary_is_early() -> None:
    text = "a" * 50 + "! " + "b" * 100
    assert truncate_text(text, 100) == text[:100] + "..."


def test_chat_title_uses_first_six_words() -> None:
    title = generate_chat_title("How do I prepare for a system design interview?")
    assert title == "How Do I Prepare For A..."


def test_chat_title_strips_punctuation_and_defaults_when_empty() -> None:
    assert generate_chat_title("hello, world!") == "Hello World"
    assert generate_chat_title("?!...") == "New Chat"


def test_ai_title_uses_first_matching_topic() -> None:
    assert generate_ai_title("Can you help me debug my Python script?") == "Python Discussion"


def test_ai_title_falls_back_to_chat_title() -> None:
    assert generate_ai_title("tell me a joke") == "Tell Me A Joke"
