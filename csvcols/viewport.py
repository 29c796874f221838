"""Column coloring for the visible line range and horizontal slicing helpers.

Coloring is a pure function of line text and column index, so repeating it on
every scroll or edit event always yields the same assignments.
"""

from __future__ import annotations

from typing import NamedTuple

from .ansi import char_display_width
from .fields import EOL, FieldRange, field_ranges, resolve_end

SEPARATOR_GROUP = "separator"


class Highlight(NamedTuple):
    """One color assignment: ``[start, end)`` on ``line`` in class ``group``.

    ``group`` is a palette color class (``int``) or ``SEPARATOR_GROUP``.
    """

    line: int
    start: int
    end: int
    group: int | str


def color_class(column_index: int, palette_size: int) -> int:
    """Map a 1-based column index onto the palette, cycling."""
    return (column_index - 1) % max(1, palette_size)


def render_visible(
    lines: list[str],
    sep: str,
    max_columns: int,
    palette_size: int,
) -> list[list[tuple[FieldRange, int]]]:
    """Return ``(range, color_class)`` pairs for each line's fields."""
    return [
        [
            (field, color_class(index, palette_size))
            for index, field in enumerate(field_ranges(line, sep, max_columns), start=1)
        ]
        for line in lines
    ]


def highlight_assignments(
    top: int,
    lines: list[str],
    sep: str,
    max_columns: int,
    palette_size: int,
) -> list[Highlight]:
    """Flatten ``render_visible`` into absolute-line highlights with ``EOL`` resolved.

    Empty fields produce no highlight.
    """
    out: list[Highlight] = []
    for row, assigned in enumerate(render_visible(lines, sep, max_columns, palette_size)):
        line = lines[row]
        for field, group in assigned:
            end = resolve_end(field, line)
            if end > field.start:
                out.append(Highlight(top + row, field.start, end, group))
    return out


def slice_display(line: str, leftcol: int, width: int) -> tuple[str, int]:
    """Slice ``line`` to display cells ``[leftcol, leftcol + width)``.

    Returns the visible substring and the string offset it starts at.
    """
    if width <= 0 or not line:
        return "", 0
    col = 0
    i = 0
    while i < len(line) and col < leftcol:
        col += char_display_width(line[i], col)
        i += 1
    start = i
    target = leftcol + width
    while i < len(line) and col < target:
        col += char_display_width(line[i], col)
        i += 1
    return line[start:i], start


def clip_to_slice(start: int, end: int, offset: int, visible_length: int) -> tuple[int, int] | None:
    """Translate a full-line range into slice coordinates.

    ``end`` may be ``EOL``. Returns ``None`` when no part of the range is
    visible in the slice.
    """
    vs = start - offset
    ve = visible_length if end == EOL else end - offset
    s = max(0, vs)
    e = min(ve, visible_length)
    if s >= e:
        return None
    return s, e
