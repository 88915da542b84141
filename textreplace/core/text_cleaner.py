from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from textreplace.core.entry import strip_capitalize_marker
from textreplace.core.index import ReplacementIndex
from textreplace.core.tokenizer import is_letter_or_digit


@dataclass
class WordMatch:
    start: int
    end: int
    word: str
    correction: str
    always_on: bool


@dataclass
class ReplacementResult:
    text: str
    replacement_hits: int


def iter_words(text: str) -> Iterator[tuple[int, int]]:
    start = None
    for i, ch in enumerate(text):
        if is_letter_or_digit(ch):
            if start is None:
                start = i
        elif start is not None:
            yield start, i
            start = None
    if start is not None:
        yield start, len(text)


def find_replaceable_words(text: str, index: ReplacementIndex) -> list[WordMatch]:
    matches: list[WordMatch] = []
    for start, end in iter_words(text):
        word = text[start:end]
        correction = index.lookup(word)
        if correction is None:
            continue
        matches.append(
            WordMatch(
                start=start,
                end=end,
                word=word,
                correction=correction,
                always_on=index.is_always_on(word),
            )
        )
    return matches


def apply_replacements(
    text: str,
    index: ReplacementIndex,
    always_on_only: bool = False,
) -> ReplacementResult:
    pieces: list[str] = []
    cursor = 0
    total_hits = 0
    for match in find_replaceable_words(text, index):
        if always_on_only and not match.always_on:
            continue
        pieces.append(text[cursor:match.start])
        pieces.append(strip_capitalize_marker(match.correction))
        cursor = match.end
        total_hits += 1
    pieces.append(text[cursor:])
    return ReplacementResult(text="".join(pieces), replacement_hits=total_hits)
