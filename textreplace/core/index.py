from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from textreplace.core.entry import MARKER, Entry


@dataclass(frozen=True)
class _Target:
    correction: str
    always_on: bool
    entry: Entry


def lookup_key(misspelling: str) -> str:
    """Key under which a stored misspelling is indexed.

    ``^Foo`` keeps its case and marker; anything else is lowercased.
    """
    return misspelling if misspelling.startswith(MARKER) else misspelling.lower()


def _matches(entry: Entry, word: str, exact: bool) -> bool:
    misspelling = entry.misspelling.strip()
    if exact:
        return misspelling == MARKER + word
    return not misspelling.startswith(MARKER) and misspelling.lower() == word.lower()


def find_entry_position(entries: Sequence[Entry], word: str) -> int | None:
    """Position of the entry ``word`` resolves to, using the same rules as lookup."""
    if not word:
        return None
    for exact in (True, False):
        found = None
        for position, entry in enumerate(entries):
            if entry.is_persistable() and _matches(entry, word, exact):
                found = position
        if found is not None:
            return found
    return None

def collapse_duplicates(entries: Iterable[Entry]) -> list[Entry]:
    """Keep only the last entry per lookup key, in the order the survivors were read."""
    rows = list(entries)
    winners: dict[str, int] = {}
    for position, entry in enumerate(rows):
        misspelling = entry.misspelling.strip()
        if misspelling:
            winners[lookup_key(misspelling)] = position
    keep = set(winners.values())
    return [
        entry
        for position, entry in enumerate(rows)
        if position in keep or not entry.misspelling.strip()
    ]


class ReplacementIndex:
    """Read-only lookup table rebuilt from scratch whenever the entries change.

    Exact-case rules (``^Foo``) and case-folded rules live in separate maps so
    a folded lookup can never reach an exact-case key.
    """

    def __init__(self, entries: Iterable[Entry] = ()) -> None:
        self.logger = logging.getLogger("textreplace.index")
        self._exact: dict[str, _Target] = {}
        self._folded: dict[str, _Target] = {}
        for entry in entries:
            misspelling = entry.misspelling.strip()
            if not misspelling:
                continue
            target = _Target(
                correction=entry.correction.strip(),
                always_on=entry.always_on,
                entry=entry,
            )
            if misspelling.startswith(MARKER):
                self._exact[misspelling[len(MARKER):]] = target
            else:
                self._folded[misspelling.lower()] = target
            self.logger.debug("Indexed replacement: %r -> %r", misspelling, entry.correction)
        self.logger.info("Replacement index built. keys=%s", len(self))

    def __len__(self) -> int:
        return len(self._exact) + len(self._folded)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self._resolve(word) is not None

    def _resolve(self, word: str) -> _Target | None:
        if not word:
            return None
        exact = self._exact.get(word)
        if exact is not None:
            return exact
        return self._folded.get(word.lower())

    def lookup(self, word: str) -> str | None:
        target = self._resolve(word)
        return target.correction if target is not None else None

    def is_always_on(self, word: str) -> bool:
        target = self._resolve(word)
        return target is not None and target.always_on

    def match(self, word: str) -> Entry | None:
        target = self._resolve(word)
        return target.entry if target is not None else None
