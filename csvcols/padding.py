"""Fixed-width table rendering for the clean view.

Each cell is normalized, padded to its column width and followed by a fixed
gap. The start offset of every column in the padded text is recorded so the
cursor and per-column highlights can be mapped into padded coordinates.
"""

from __future__ import annotations

from typing import NamedTuple

from .ansi import display_width
from .fields import normalized_cells

COLUMN_GAP = 2


class PaddedLines(NamedTuple):
    lines: list[str]
    column_starts: list[list[int]]


def pad_line(line: str, sep: str, widths: dict[int, int], gap: int = COLUMN_GAP) -> tuple[str, list[int]]:
    parts: list[str] = []
    starts: list[int] = []
    x = 0
    for index, cell in enumerate(normalized_cells(line, sep, max(len(widths), 1)), start=1):
        starts.append(x)
        padding = max(0, widths.get(index, 0) - display_width(cell)) + gap
        parts.append(cell + " " * padding)
        x += len(cell) + padding
    return "".join(parts), starts


def pad_lines(lines: list[str], sep: str, widths: dict[int, int], gap: int = COLUMN_GAP) -> PaddedLines:
    """Render ``lines`` as padded table rows.

    Lines are parsed into at most ``len(widths)`` fields. A column missing from
    the table gets width 0: the cell followed by the gap only.
    """
    rendered: list[str] = []
    column_starts: list[list[int]] = []
    for line in lines:
        text, starts = pad_line(line, sep, widths, gap)
        rendered.append(text)
        column_starts.append(starts)
    return PaddedLines(rendered, column_starts)
