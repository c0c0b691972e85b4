"""
Token Counter for the Pagination Pipeline

Uses tiktoken with the cl100k_base encoding. Token counts are reported
in the pagination statistics so the quiz generator can estimate prompt
size before the selection is handed off.

Usage:
    from pagination.token_counter import count_tokens, count_tokens_batch

    n = count_tokens("Ein Absatz aus dem Skript.")
    counts = count_tokens_batch([page.text_content for page in pages])
"""

import tiktoken

# Initialized on first use, reused across calls.
_encoder: tiktoken.Encoding | None = None


def _get_encoder() -> tiktoken.Encoding:
    global _encoder
    if _encoder is None:
        _encoder = tiktoken.get_encoding("cl100k_base")
    return _encoder


def count_tokens(text: str) -> int:
    """
    Count the number of tokens in a text string.

    Args:
        text: The text to tokenize.

    Returns:
        Number of tokens (0 for empty text).
    """
    if not text:
        return 0
    return len(_get_encoder().encode(text, disallowed_special=()))


def count_tokens_batch(texts: list[str]) -> list[int]:
    """Count tokens for a list of texts, one count per input."""
    encoder = _get_encoder()
    return [len(encoder.encode(t, disallowed_special=())) if t else 0 for t in texts]
