from __future__ import annotations

from dataclasses import dataclass


MARKER = "^"


def split_marker(text: str) -> tuple[str, bool]:
    if text.startswith(MARKER):
        return text[len(MARKER):], True
    return text, False


def strip_capitalize_marker(correction: str) -> str:
    """Drop a leading marker from a correction so it is inserted with its exact case."""
    return split_marker(correction)[0]


@dataclass
class Entry:
    """One replacement rule.

    The marker character is a persistence detail: ``match_case`` is True for
    rules written as ``^Foo`` (exact-case trigger) and ``keep_case`` is True
    for corrections written as ``^Bar`` (insert without auto-capitalization).
    """

    trigger: str = ""
    replacement: str = ""
    always_on: bool = False
    usage_counter: int = 0
    match_case: bool = False
    keep_case: bool = False

    def __post_init__(self) -> None:
        self.usage_counter = max(0, int(self.usage_counter))

    @classmethod
    def parse(
        cls,
        misspelling: str,
        correction: str,
        always_on: bool = False,
        usage_counter: int = 0,
    ) -> "Entry":
        trigger, match_case = split_marker(misspelling or "")
        replacement, keep_case = split_marker(correction or "")
        return cls(
            trigger=trigger,
            replacement=replacement,
            always_on=always_on,
            usage_counter=usage_counter,
            match_case=match_case,
            keep_case=keep_case,
        )

    @property
    def misspelling(self) -> str:
        return MARKER + self.trigger if self.match_case else self.trigger

    @misspelling.setter
    def misspelling(self, value: str) -> None:
        self.trigger, self.match_case = split_marker(value or "")

    @property
    def correction(self) -> str:
        return MARKER + self.replacement if self.keep_case else self.replacement

    @correction.setter
    def correction(self, value: str) -> None:
        self.replacement, self.keep_case = split_marker(value or "")

    def is_blank(self) -> bool:
        return not self.misspelling.strip() and not self.correction.strip()

    def is_persistable(self) -> bool:
        return bool(self.misspelling.strip())
