from __future__ import annotations

from collections.abc import Sequence

from textreplace.core.entry import Entry


class SearchNavigator:
    """Steps through rows whose misspelling or correction equals a query.

    Matching is whole-field and case-insensitive. Stepping wraps around in
    both directions.
    """

    def __init__(self, entries: Sequence[Entry], query: str = "") -> None:
        self.entries = entries
        self.query = query.strip()
        self._matches: list[int] = []
        self._current = -1
        self._searched = False

    @property
    def matches(self) -> list[int]:
        return list(self._matches)

    @property
    def match_count(self) -> int:
        return len(self._matches)

    @property
    def current(self) -> int | None:
        if self._current < 0:
            return None
        return self._matches[self._current]

    def search(self, query: str | None = None) -> list[int]:
        if query is not None:
            self.query = query.strip()
        self._searched = True
        self._matches = []
        self._current = -1
        if not self.query:
            return []
        term = self.query.lower()
        for position, entry in enumerate(self.entries):
            if entry is None:
                continue
            if entry.misspelling.lower() == term or entry.correction.lower() == term:
                self._matches.append(position)
        if self._matches:
            self._current = 0
        return list(self._matches)

    def _search_if_needed(self) -> bool:
        if self._searched and self._matches:
            return False
        self.search()
        return True

    def next(self) -> int | None:
        if not self._search_if_needed() and self._current >= 0:
            self._current = (self._current + 1) % len(self._matches)
        return self.current

    def previous(self) -> int | None:
        if self._search_if_needed():
            if self._matches:
                self._current = len(self._matches) - 1
        else:
            self._current = (self._current - 1) % len(self._matches)
        return self.current

    def status(self) -> tuple[int, int]:
        """(1-based position of the current match, total matches)."""
        return (self._current + 1 if self._current >= 0 else 0, len(self._matches))
