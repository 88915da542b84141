from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from textreplace.core import codec
from textreplace.core.entry import Entry
from textreplace.core.index import collapse_duplicates


EXPORT_PREFIX = "text_replacements_"


class StoreError(RuntimeError):
    pass


def read_entries(path: Path) -> list[Entry]:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise StoreError(f"Could not read {path}: {exc}") from exc
    try:
        return codec.decode(data)
    except UnicodeDecodeError as exc:
        raise StoreError(f"{path} is not valid UTF-8: {exc}") from exc


def write_entries(
    path: Path,
    entries: Iterable[Entry],
    include_counter: bool = False,
) -> None:
    """Replace ``path`` atomically; the previous file survives a failed write."""
    payload = codec.encode_bytes(entries, include_counter=include_counter)
    tmp_path = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{path.stem}_", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as exc:
        raise StoreError(f"Could not write {path}: {exc}") from exc
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)


class ReplacementStore:
    def __init__(self, path: Path, track_counters: bool = True):
        self.path = path
        self.track_counters = track_counters
        self.logger = logging.getLogger("textreplace.storage")

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> list[Entry]:
        """Read the table; a missing file is an empty table, not an error."""
        if not self.path.exists():
            self.logger.info("Replacement table not found, starting empty: %s", self.path)
            return []
        entries = read_entries(self.path)
        self.logger.info("Loaded replacement table. entries=%s", len(entries))
        return entries

    def save(self, entries: Iterable[Entry]) -> None:
        entries = [entry for entry in entries if entry.is_persistable()]
        write_entries(self.path, entries, include_counter=self.track_counters)
        self.logger.info("Saved replacement table. entries=%s", len(entries))

    def seed_from(self, defaults_path: Path) -> bool:
        if self.path.exists():
            return False
        if not defaults_path.exists():
            self.logger.warning("Default replacement table missing: %s", defaults_path)
            return False
        entries = read_entries(defaults_path)
        if not entries:
            return False
        self.save(entries)
        self.logger.info("Seeded replacement table from %s", defaults_path)
        return True

    def import_from(self, source: Path) -> list[Entry]:
        entries = collapse_duplicates(read_entries(source))
        if not entries:
            raise StoreError(f"No valid entries in {source}")
        self.save(entries)
        self.logger.info("Imported %s entries from %s", len(entries), source)
        return entries

    def export_to(
        self,
        directory: Path,
        entries: Iterable[Entry],
        now: datetime | None = None,
    ) -> Path:
        stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
        target = directory / f"{EXPORT_PREFIX}{stamp}.csv"
        write_entries(target, entries, include_counter=True)
        self.logger.info("Exported replacement table to %s", target)
        return target
