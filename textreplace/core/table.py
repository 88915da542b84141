from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from textreplace.core import codec
from textreplace.core.entry import Entry
from textreplace.core.index import ReplacementIndex, collapse_duplicates, find_entry_position
from textreplace.core.search import SearchNavigator
from textreplace.core.storage import ReplacementStore


class ReplacementTable:
    """Editable list of replacement rules backed by a ``ReplacementStore``.

    Row 0 is always an empty placeholder used to type a new rule. Edits are
    kept in memory and only written by ``save``; ``has_unsaved_changes``
    tells the caller whether a write is needed.
    """

    def __init__(self, store: ReplacementStore, sort_by_usage: bool = True) -> None:
        self.store = store
        self.sort_by_usage = sort_by_usage
        self.logger = logging.getLogger("textreplace.table")
        self._entries: list[Entry] = [Entry()]
        self._index = ReplacementIndex()
        self._dirty = False

    @property
    def entries(self) -> list[Entry]:
        return self._entries

    @property
    def index(self) -> ReplacementIndex:
        return self._index

    @property
    def has_unsaved_changes(self) -> bool:
        return self._dirty

    def mark_saved(self) -> None:
        self._dirty = False

    def __len__(self) -> int:
        return len(self._entries)

    def _ensure_placeholder(self) -> None:
        if not self._entries or not self._entries[0].is_blank():
            self._entries.insert(0, Entry())

    def _set_entries(self, entries: Iterable[Entry]) -> None:
        rows = list(entries)
        if self.sort_by_usage:
            rows.sort(key=lambda entry: entry.usage_counter, reverse=True)
        self._entries[:] = rows
        self._ensure_placeholder()

    def _rebuild_index(self) -> None:
        self._index = ReplacementIndex(self.get_persistable_entries())

    def reload(self) -> None:
        entries = collapse_duplicates(self.store.load())
        self._set_entries(entries)
        self._index = ReplacementIndex(entries)
        self._dirty = False

    def save(self) -> bool:
        """Write pending edits. Returns False when there was nothing to write."""
        if not self._dirty:
            return False
        self.store.save(self.get_persistable_entries())
        self._dirty = False
        self._rebuild_index()
        return True

    def get_persistable_entries(self) -> list[Entry]:
        return [entry for entry in self._entries if not entry.is_blank()]

    def _edited(self, position: int) -> None:
        self._dirty = True
        if position == 0 and not self._entries[0].is_blank():
            self._ensure_placeholder()

    def set_misspelling(self, position: int, text: str) -> None:
        self._entries[position].misspelling = text
        self._edited(position)

    def set_correction(self, position: int, text: str) -> None:
        self._entries[position].correction = text
        self._edited(position)

    def set_always_on(self, position: int, always_on: bool) -> None:
        self._entries[position].always_on = bool(always_on)
        self._dirty = True

    def add_from_csv_line(self, line: str) -> Entry | None:
        """Add a rule typed as ``misspelling,correction[,always_on]`` and persist it."""
        parts = [part.strip() for part in codec.parse_line(line.strip())]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            return None
        always_on = len(parts) > 2 and parts[2].lower() == "true"
        entry = Entry.parse(parts[0], parts[1], always_on=always_on)
        self._entries.insert(1, entry)
        self._dirty = True
        self.save()
        self.logger.info("Added replacement from input: %r -> %r", entry.misspelling, entry.correction)
        return entry

    def delete(self, positions: Iterable[int]) -> int:
        removed = 0
        for position in sorted(set(positions), reverse=True):
            if 0 <= position < len(self._entries):
                del self._entries[position]
                removed += 1
        self._ensure_placeholder()
        self._dirty = True
        return removed

    def delete_all(self) -> None:
        self._entries[:] = [Entry()]
        self._dirty = True

    def count_unused(self) -> int:
        return sum(
            1
            for entry in self._entries
            if entry.usage_counter == 0 and not entry.is_blank()
        )

    def delete_where_unused(self) -> int:
        kept = [
            entry
            for entry in self._entries
            if entry.usage_counter > 0 and not entry.is_blank()
        ]
        removed = len(self.get_persistable_entries()) - len(kept)
        self._entries[:] = kept
        self._ensure_placeholder()
        if removed:
            self._dirty = True
        return removed

    def clear_all_counters(self) -> None:
        for entry in self._entries:
            if entry.usage_counter:
                entry.usage_counter = 0
                self._dirty = True

    def record_usage(self, word: str) -> bool:
        """Count one accepted correction for ``word`` in the stored table.

        Rewrites the whole file and rebuilds the index. No-op when counter
        tracking is off or nothing matches.
        """
        if not word or not self.store.track_counters:
            return False
        stored = self.store.load()
        position = find_entry_position(stored, word)
        if position is None:
            return False
        stored[position].usage_counter += 1
        self.store.save(stored)
        self._index = ReplacementIndex(stored)

        # Keep the editable copy in step so a later save does not undo the count.
        live = find_entry_position(self._entries, word)
        if live is not None:
            self._entries[live].usage_counter = stored[position].usage_counter
        self.logger.debug("Usage recorded for %r", word)
        return True

    def lookup(self, word: str) -> str | None:
        return self._index.lookup(word)

    def is_always_on(self, word: str) -> bool:
        return self._index.is_always_on(word)

    def navigator(self, query: str = "") -> SearchNavigator:
        return SearchNavigator(self._entries, query)

    def import_from(self, source: Path) -> int:
        entries = self.store.import_from(source)
        self._set_entries(entries)
        self._index = ReplacementIndex(entries)
        self._dirty = False
        return len(entries)

    def export_to(self, directory: Path, now: datetime | None = None) -> Path:
        return self.store.export_to(directory, self.get_persistable_entries(), now=now)
