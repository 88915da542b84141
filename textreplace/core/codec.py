"""Line-oriented CSV format for replacement tables.

The first record of every document is a header and is never read as data.
Quoted fields may contain commas, doubled quotes and line breaks, so records
are split with a small state machine rather than ``str.split``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from textreplace.core.entry import Entry


HEADER = "Misspell,Correct,Always on?"
COUNTER_HEADER = HEADER + ",Counter"
BOM = "\ufeff"
ENCODING = "utf-8"

_NEEDS_QUOTES = (",", '"', "\n")

logger = logging.getLogger("textreplace.codec")


def escape(field: str) -> str:
    if any(ch in field for ch in _NEEDS_QUOTES):
        return '"' + field.replace('"', '""') + '"'
    return field


def unescape(field: str) -> str:
    if len(field) >= 2 and field.startswith('"') and field.endswith('"'):
        return field[1:-1].replace('""', '"')
    return field


def parse_line(line: str) -> list[str]:
    """Split one record into unquoted field values.

    A quote opens a quoted section only at the start of a field; elsewhere
    in an unquoted field it is kept as a literal character.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    at_field_start = True
    i = 0
    while i < len(line):
        ch = line[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < len(line) and line[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(ch)
        elif ch == '"' and at_field_start:
            in_quotes = True
            at_field_start = False
        elif ch == ",":
            fields.append("".join(current))
            current = []
            at_field_start = True
        else:
            current.append(ch)
            if ch not in " \t":
                at_field_start = False
        i += 1
    fields.append("".join(current))
    return fields


def split_records(text: str) -> Iterator[str]:
    """Yield raw records, keeping line breaks that sit inside quoted fields."""
    start = 0
    in_quotes = False
    at_field_start = True
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < length and text[i + 1] == '"':
                    i += 1
                else:
                    in_quotes = False
        elif ch == '"' and at_field_start:
            in_quotes = True
            at_field_start = False
        elif ch == "\n":
            end = i - 1 if i > start and text[i - 1] == "\r" else i
            yield text[start:end]
            start = i + 1
            at_field_start = True
        elif ch == ",":
            at_field_start = True
        elif ch not in " \t":
            at_field_start = False
        i += 1
    if start >= length:
        return
    tail = text[start:]
    if in_quotes:
        # An unterminated quote would otherwise swallow the rest of the file.
        logger.warning("Unterminated quoted field; reading remaining lines one by one")
        for line in tail.splitlines():
            yield line
        return
    yield tail.rstrip("\r")


def _parse_counter(raw: str) -> int:
    try:
        return max(0, int(raw))
    except ValueError:
        return 0


def decode_record(record: str) -> Entry:
    """Best-effort parse of one record; malformed input yields a blank Entry."""
    if not record.strip():
        return Entry()
    parts = [part.strip() for part in parse_line(record)]
    if len(parts) < 3:
        logger.debug("Malformed record skipped: %r", record)
        return Entry()
    usage_counter = _parse_counter(parts[3]) if len(parts) > 3 else 0
    return Entry.parse(
        misspelling=parts[0],
        correction=parts[1],
        always_on=parts[2].lower() == "true",
        usage_counter=usage_counter,
    )


def encode_record(entry: Entry, include_counter: bool = False) -> str:
    fields = [
        escape(entry.misspelling),
        escape(entry.correction),
        "true" if entry.always_on else "false",
    ]
    if include_counter:
        fields.append(str(entry.usage_counter))
    return ",".join(fields)


def decode(data: str | bytes) -> list[Entry]:
    if isinstance(data, bytes):
        text = data.decode("utf-8-sig")
    else:
        text = data[1:] if data.startswith(BOM) else data

    entries: list[Entry] = []
    records = split_records(text)
    next(records, None)
    for record in records:
        entry = decode_record(record)
        if entry.misspelling:
            entries.append(entry)
    return entries


def encode(entries: Iterable[Entry], include_counter: bool = False) -> str:
    lines = [COUNTER_HEADER if include_counter else HEADER]
    for entry in entries:
        if entry is None or not entry.is_persistable():
            continue
        lines.append(encode_record(entry, include_counter=include_counter))
    return "".join(line + "\n" for line in lines)


def encode_bytes(entries: Iterable[Entry], include_counter: bool = False) -> bytes:
    return (BOM + encode(entries, include_counter=include_counter)).encode(ENCODING)
