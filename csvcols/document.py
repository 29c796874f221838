"""Host buffer and window model.

A ``Buffer`` owns line text and a content-version token that changes on every
edit. A ``Window`` shows one buffer through a viewport: top line, horizontal
scroll (``leftcol``), size, gutter width and cursor. Offsets are string
indices into a line.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from pathlib import Path

from .ansi import char_display_width, display_width

_BUFFER_IDS = itertools.count(1)
_WINDOW_IDS = itertools.count(1000)

_SUFFIX_FILETYPES = {".csv": "csv", ".tsv": "tsv", ".tab": "tsv"}


def filetype_for_name(name: str) -> str:
    return _SUFFIX_FILETYPES.get(Path(name).suffix.lower(), "")


@dataclass
class Buffer:
    name: str = ""
    lines: list[str] = field(default_factory=list)
    filetype: str | None = None
    id: int = field(default_factory=lambda: next(_BUFFER_IDS))
    version: int = 0

    def __post_init__(self) -> None:
        if self.filetype is None:
            self.filetype = filetype_for_name(self.name)

    @classmethod
    def from_text(cls, text: str, name: str = "", filetype: str | None = None) -> Buffer:
        return cls(name=name, lines=split_lines(text), filetype=filetype)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def get_lines(self, start: int, end: int) -> list[str]:
        start = max(0, start)
        return self.lines[start:max(start, end)]

    def line(self, index: int) -> str:
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return ""

    def replace_lines(self, start: int, end: int, new_lines: list[str]) -> None:
        """Replace ``lines[start:end]`` and bump the content version."""
        self.lines[start:end] = list(new_lines)
        self.version += 1

    def set_text(self, text: str) -> None:
        self.lines = split_lines(text)
        self.version += 1


def split_lines(text: str) -> list[str]:
    """Split on newlines; a trailing newline does not start an extra empty line."""
    lines = [line.rstrip("\r") for line in text.split("\n")]
    if lines and not lines[-1]:
        lines.pop()
    return lines


@dataclass
class Window:
    """Viewport onto a buffer.

    ``height`` counts text rows; ``textoff`` is the gutter width in cells
    (line numbers) that precedes the text area.
    """

    buffer: Buffer
    width: int = 80
    height: int = 24
    top: int = 0
    leftcol: int = 0
    textoff: int = 0
    cursor_line: int = 0
    cursor_offset: int = 0
    id: int = field(default_factory=lambda: next(_WINDOW_IDS))

    @property
    def text_width(self) -> int:
        return max(0, self.width - self.textoff)

    @property
    def cursor(self) -> tuple[int, int]:
        return self.cursor_line, self.cursor_offset

    def visible_range(self) -> tuple[int, int]:
        """Return ``(top, bottom)`` with ``bottom`` exclusive."""
        total = self.buffer.line_count
        top = max(0, min(self.top, total))
        return top, min(total, top + max(0, self.height))

    def max_top(self) -> int:
        return max(0, self.buffer.line_count - max(1, self.height))

    def scroll_to(self, top: int) -> None:
        self.top = max(0, min(top, self.max_top()))

    def scroll_horizontal(self, delta: int) -> None:
        self.leftcol = max(0, self.leftcol + delta)

    def set_cursor(self, line: int, offset: int) -> None:
        """Clamp and move the cursor, then scroll so it stays visible."""
        total = self.buffer.line_count
        line = max(0, min(line, total - 1)) if total else 0
        text = self.buffer.line(line)
        self.cursor_line = line
        self.cursor_offset = max(0, min(offset, max(0, len(text) - 1)))
        self.follow_cursor()

    def move_cursor(self, lines: int = 0, chars: int = 0) -> None:
        self.set_cursor(self.cursor_line + lines, self.cursor_offset + chars)

    def follow_cursor(self) -> None:
        if self.cursor_line < self.top:
            self.top = self.cursor_line
        elif self.height > 0 and self.cursor_line >= self.top + self.height:
            self.top = self.cursor_line - self.height + 1
        self.scroll_to(self.top)

        text_w = self.text_width
        if text_w <= 0:
            return
        text = self.buffer.line(self.cursor_line)
        cursor_col = display_width(text[: self.cursor_offset])
        cursor_cells = char_display_width(text[self.cursor_offset], cursor_col) if self.cursor_offset < len(text) else 1
        if cursor_col < self.leftcol:
            self.leftcol = cursor_col
        elif cursor_col + cursor_cells > self.leftcol + text_w:
            self.leftcol = cursor_col + cursor_cells - text_w
