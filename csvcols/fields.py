"""Delimited-field scanning for a single line of text.

A quote-aware state machine splits a line into field ranges. Malformed quoting
never raises: an unterminated quote simply runs to end of line, and the ranges
always tile the whole line up to the column cap.
"""

from __future__ import annotations

from typing import NamedTuple

EOL = -1
QUOTE = '"'


class FieldRange(NamedTuple):
    """Half-open ``[start, end)`` string offsets; ``end == EOL`` means end of line."""

    start: int
    end: int


def field_ranges(line: str, sep: str, max_columns: int) -> list[FieldRange]:
    """Return the ranges of each field on ``line``.

    Scanning stops once ``max_columns`` fields have been emitted. When fewer
    fields were emitted, the remainder of the line becomes a final field
    ending at ``EOL``.
    """
    max_columns = max(1, max_columns)
    ranges: list[FieldRange] = []
    length = len(line)
    in_quotes = False
    start = 0
    k = 0
    while k < length:
        ch = line[k]
        if ch == QUOTE:
            if in_quotes and k + 1 < length and line[k + 1] == QUOTE:
                # Escaped quote: consume both characters as content.
                k += 1
            else:
                in_quotes = not in_quotes
        elif ch == sep and not in_quotes:
            ranges.append(FieldRange(start, k))
            start = k + 1
        k += 1
        if len(ranges) >= max_columns:
            break
    if len(ranges) < max_columns:
        ranges.append(FieldRange(start, EOL))
    return ranges


def resolve_end(field: FieldRange, line: str) -> int:
    """Return the concrete end offset of ``field`` on ``line``."""
    return len(line) if field.end == EOL else field.end


def field_text(line: str, field: FieldRange) -> str:
    return line[field.start : resolve_end(field, line)]


def normalize_cell(text: str) -> str:
    """Trim whitespace and strip one layer of RFC-4180 style quoting.

    ``"a""b"`` becomes ``a"b``. Text that is not wrapped in quotes on both
    sides is only trimmed.
    """
    cell = text.strip()
    if len(cell) >= 2 and cell[0] == QUOTE and cell[-1] == QUOTE:
        cell = cell[1:-1].replace(QUOTE * 2, QUOTE)
    return cell


def normalized_cells(line: str, sep: str, max_columns: int) -> list[str]:
    """Parse ``line`` and return the normalized text of every field."""
    return [normalize_cell(field_text(line, field)) for field in field_ranges(line, sep, max_columns)]


def cursor_column_index(line: str, sep: str, max_columns: int, offset: int) -> int:
    """Return the 1-based column containing string offset ``offset``.

    Range ends are inclusive, so an offset sitting on a separator belongs to
    the field that ends there. Falls back to column 1 when nothing matches.
    """
    for index, field in enumerate(field_ranges(line, sep, max_columns), start=1):
        if field.end == EOL:
            if offset >= field.start:
                return index
            continue
        if field.start <= offset <= field.end:
            return index
    return 1
