from __future__ import annotations

import unicodedata
from typing import NamedTuple


PUNCTUATION = frozenset(".,!;:?\"'()/\\[]")


class WordWithPunctuation(NamedTuple):
    word: str
    punctuation: str = ""


def is_letter_or_digit(ch: str) -> bool:
    category = unicodedata.category(ch)
    return category.startswith("L") or category == "Nd"


def _word_before(text: str, end: int) -> str | None:
    while end > 0 and not is_letter_or_digit(text[end - 1]):
        end -= 1
    if end == 0:
        return None
    start = end - 1
    while start > 0 and is_letter_or_digit(text[start - 1]):
        start -= 1
    return text[start:end]


def extract_last_word(text_before_cursor: str | None) -> str | None:
    """Return the last run of letters/digits before the cursor, if any."""
    if not text_before_cursor:
        return None
    text = text_before_cursor.rstrip()
    return _word_before(text, len(text))


def extract_last_word_with_punctuation(
    text_before_cursor: str | None,
) -> WordWithPunctuation | None:
    """Like ``extract_last_word`` but also reports one trailing punctuation mark."""
    if not text_before_cursor:
        return None
    text = text_before_cursor.rstrip()
    end = len(text)
    punctuation = ""
    if end and text[-1] in PUNCTUATION:
        punctuation = text[-1]
        end -= 1
    word = _word_before(text, end)
    if word is None:
        return None
    return WordWithPunctuation(word, punctuation)
