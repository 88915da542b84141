from __future__ import annotations

import logging
from dataclasses import dataclass

from textreplace.core.entry import MARKER, strip_capitalize_marker
from textreplace.core.storage import StoreError
from textreplace.core.table import ReplacementTable
from textreplace.core.tokenizer import extract_last_word_with_punctuation


@dataclass
class Suggestion:
    word: str
    punctuation: str
    correction: str
    always_on: bool

    @property
    def text(self) -> str:
        return strip_capitalize_marker(self.correction)

    @property
    def keep_case(self) -> bool:
        return self.correction.startswith(MARKER)


class ReplacementEngine:
    """Entry point for the keyboard: turns the text before the cursor into a suggestion."""

    def __init__(self, table: ReplacementTable) -> None:
        self.table = table
        self.logger = logging.getLogger("textreplace.engine")

    def suggest(self, text_before_cursor: str) -> Suggestion | None:
        found = extract_last_word_with_punctuation(text_before_cursor)
        if found is None:
            return None
        correction = self.table.lookup(found.word)
        if correction is None:
            return None
        suggestion = Suggestion(
            word=found.word,
            punctuation=found.punctuation,
            correction=correction,
            always_on=self.table.is_always_on(found.word),
        )
        self.logger.debug(
            "Suggestion for %r: %r always_on=%s",
            found.word,
            suggestion.text,
            suggestion.always_on,
        )
        return suggestion

    def accept(self, suggestion: Suggestion) -> str:
        """Count the accepted correction and return the text to insert."""
        try:
            self.table.record_usage(suggestion.word)
        except StoreError as exc:
            self.logger.warning("Usage counter not updated for %r: %s", suggestion.word, exc)
        return suggestion.text + suggestion.punctuation
