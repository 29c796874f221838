"""Frame composition for the terminal viewer.

The primary window rows are drawn first (column colors for delimited text,
syntax colors otherwise), then every open surface is painted over its rows
back to front, so the sticky header lands above the clean view. The last row
is a reverse-video status bar.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

from .ansi import char_display_width, slice_ansi_line
from .document import Window
from .palette import CURSOR_SGR, STATUS_SGR, WARNING_SGR, Palette
from .surfaces import Surface
from .sync import RefreshResult
from .viewport import Highlight, clip_to_slice, slice_display

HEADER_BASE_SGR = "\033[4m"
GUTTER_SGR = "\033[2;38;5;245m"


@dataclass
class FrameContext:
    window: Window
    palette: Palette
    result: RefreshResult = field(default_factory=RefreshResult)
    surfaces: list[Surface] = field(default_factory=list)
    delimited: bool = True
    syntax_lines: list[str] | None = None
    status_left: str = ""
    status_right: str = ""
    message: str = ""
    message_is_warning: bool = False
    show_cursor: bool = True


def style_row(
    text: str,
    spans: list[tuple[int, int, int | str]],
    palette: Palette,
    cursor: int | None = None,
    base_sgr: str = "",
) -> str:
    """Render ``text`` with colored ``spans`` and an optional reverse-video cursor.

    Later spans win where they overlap. Tabs expand to spaces at the current
    display column. ``base_sgr`` is re-applied after every reset.
    """
    groups: list[int | str | None] = [None] * len(text)
    for start, end, group in spans:
        for idx in range(max(0, start), min(end, len(text))):
            groups[idx] = group

    use_color = palette.enabled
    out: list[str] = [base_sgr] if base_sgr and use_color else []
    active: str | None = None
    col = 0
    for idx, ch in enumerate(text):
        group = groups[idx]
        wanted = palette.sgr(group) if group is not None and use_color else ""
        if idx == cursor and use_color:
            wanted += CURSOR_SGR
        if wanted != (active or ""):
            if active:
                out.append(palette.reset + base_sgr)
            if wanted:
                out.append(wanted)
            active = wanted
        width = char_display_width(ch, col)
        out.append(" " * width if ch == "\t" else ch)
        col += width
    if cursor is not None and cursor >= len(text) and use_color:
        if active:
            out.append(palette.reset + base_sgr)
            active = ""
        out.append(CURSOR_SGR + " ")
        active = CURSOR_SGR
    if active or (base_sgr and use_color):
        out.append(palette.reset)
    return "".join(out)


def gutter(line_index: int | None, width: int, palette: Palette) -> str:
    if width <= 0:
        return ""
    label = "" if line_index is None else str(line_index + 1)
    text = f"{label:>{width - 1}} "[-width:]
    if palette.enabled:
        return f"{GUTTER_SGR}{text}{palette.reset}"
    return text


def _line_spans(highlights: list[Highlight], line: int, offset: int, visible: int) -> list[tuple[int, int, int | str]]:
    spans: list[tuple[int, int, int | str]] = []
    for highlight in highlights:
        if highlight.line != line:
            continue
        span = clip_to_slice(highlight.start, highlight.end, offset, visible)
        if span is not None:
            spans.append((span[0], span[1], highlight.group))
    return spans


def _pad_to(text_cells: int, width: int) -> str:
    return " " * max(0, width - text_cells)


def primary_rows(context: FrameContext) -> list[str]:
    """Render the window's own text rows (without gutter)."""
    window = context.window
    buffer = window.buffer
    top = window.top
    text_w = window.text_width
    cursor_line, cursor_offset = window.cursor
    clean_has_cursor = context.result.clean_cursor is not None
    rows: list[str] = []
    for row in range(window.height):
        line_index = top + row
        if line_index >= buffer.line_count:
            rows.append("")
            continue
        if not context.delimited and context.syntax_lines is not None:
            rows.append(slice_ansi_line(context.syntax_lines[line_index], window.leftcol, text_w))
            continue
        text, offset = slice_display(buffer.lines[line_index], window.leftcol, text_w)
        cursor = None
        if context.show_cursor and line_index == cursor_line and not clean_has_cursor:
            cursor = cursor_offset - offset
            if cursor < 0 or cursor > len(text):
                cursor = None
        spans = _line_spans(context.result.highlights, line_index, offset, len(text))
        rows.append(style_row(text, spans, context.palette, cursor=cursor))
    return rows


def surface_rows(surface: Surface, palette: Palette, show_cursor: bool = True) -> list[str]:
    """Render one surface into ``geometry.height`` opaque rows."""
    base = HEADER_BASE_SGR if surface.kind == "header" else ""
    rows: list[str] = []
    for row in range(surface.geometry.height):
        text = surface.lines[row] if row < len(surface.lines) else ""
        spans = [(h.start, h.end, h.group) for h in surface.highlights if h.line == row]
        cursor = None
        if show_cursor and surface.cursor is not None and surface.cursor[0] == row:
            cursor = surface.cursor[1]
        cells = sum(char_display_width(ch, 0) for ch in text)
        rows.append(style_row(text, spans, palette, cursor=cursor, base_sgr=base) + _pad_to(cells, surface.geometry.width))
    return rows


def header_controls(count: int, clean_active: bool, separator: str | None) -> str:
    sep_label = "TAB" if separator == "\t" else repr(separator) if separator else "-"
    clean_label = "clean" if clean_active else "raw"
    return f"CSV hdr: [-] {count} [+]  [{clean_label}]  sep={sep_label}"


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def compose_rows(context: FrameContext) -> list[str]:
    """Return every text row of the frame, gutter included, status bar excluded."""
    window = context.window
    palette = context.palette
    body = primary_rows(context)
    for surface in context.surfaces:
        painted = surface_rows(surface, palette, show_cursor=context.show_cursor)
        for idx, text in enumerate(painted):
            row = surface.geometry.row + idx
            if 0 <= row < len(body):
                body[row] = text
    out: list[str] = []
    for row, text in enumerate(body):
        line_index = window.top + row
        label = line_index if line_index < window.buffer.line_count else None
        out.append(gutter(label, window.textoff, palette) + text)
    return out


def status_row(context: FrameContext) -> str:
    left = context.message or context.status_left
    status = build_status_line(left, context.window.width, context.status_right)
    if not context.palette.enabled:
        return status
    sgr = WARNING_SGR + STATUS_SGR if context.message_is_warning else STATUS_SGR
    return f"{sgr}{status}{context.palette.reset}"


def render_frame(context: FrameContext) -> str:
    out: list[str] = ["\033[H\033[J"]
    for text in compose_rows(context):
        out.append(text)
        out.append("\r\n")
    out.append(status_row(context))
    return "".join(out)


def write_frame(context: FrameContext) -> None:
    os.write(sys.stdout.fileno(), render_frame(context).encode("utf-8", errors="replace"))
