"""Sticky header and clean-view overlays kept in lockstep with a window.

Every refresh recomputes the window's overlays from scratch for the visible
line range: primary column highlights, the sticky header surface and the
padded clean-view surface with its mirrored cursor. Surface placement goes
through ``open_surface``, which turns host geometry failures into ``None`` so
the overlay is simply skipped for that frame.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from .config import Config
from .detection import classify_buffer, resolve_separator
from .document import Buffer, Window
from .errors import SurfaceError
from .fields import EOL, cursor_column_index, field_ranges
from .padding import PaddedLines, pad_lines
from .state import BufferState, ViewRegistry, WindowState
from .surfaces import CLEAN_ZINDEX, HEADER_ZINDEX, Geometry, Surface, SurfaceHost
from .viewport import (
    SEPARATOR_GROUP,
    Highlight,
    clip_to_slice,
    color_class,
    highlight_assignments,
    slice_display,
)
from .widths import body_widths, header_widths, merge_widths

logger = logging.getLogger(__name__)

HEADER = "header"
CLEAN = "clean"


class OverlayMode(enum.Enum):
    INACTIVE = "inactive"
    HEADER_ONLY = "header"
    CLEAN_ONLY = "clean"
    HEADER_AND_CLEAN = "header+clean"


def header_visible(header_lines: int, top: int) -> bool:
    """The sticky header only shows once the first ``header_lines`` lines scrolled away."""
    return header_lines > 0 and top >= header_lines


def overlay_mode(delimited: bool, header_lines: int, top: int, clean_active: bool) -> OverlayMode:
    if not delimited:
        return OverlayMode.INACTIVE
    header = header_visible(header_lines, top)
    if header and clean_active:
        return OverlayMode.HEADER_AND_CLEAN
    if header:
        return OverlayMode.HEADER_ONLY
    if clean_active:
        return OverlayMode.CLEAN_ONLY
    return OverlayMode.INACTIVE


def rendered_mode(header_open: bool, clean_open: bool) -> OverlayMode:
    """Mode matching the surfaces that actually exist after a refresh."""
    if header_open and clean_open:
        return OverlayMode.HEADER_AND_CLEAN
    if header_open:
        return OverlayMode.HEADER_ONLY
    if clean_open:
        return OverlayMode.CLEAN_ONLY
    return OverlayMode.INACTIVE


@dataclass
class SlicedRows:
    """Rows cut to the window's horizontal slice, with their highlights."""

    lines: list[str] = field(default_factory=list)
    offsets: list[int] = field(default_factory=list)
    highlights: list[Highlight] = field(default_factory=list)


@dataclass
class RefreshResult:
    mode: OverlayMode = OverlayMode.INACTIVE
    separator: str | None = None
    highlights: list[Highlight] = field(default_factory=list)
    header: Surface | None = None
    clean: Surface | None = None
    clean_cursor: tuple[int, int] | None = None


def _slice_rows(lines: list[str], leftcol: int, width: int) -> SlicedRows:
    rows = SlicedRows()
    for line in lines:
        text, offset = slice_display(line, leftcol, width)
        rows.lines.append(text)
        rows.offsets.append(offset)
    return rows


def padded_rows(padded: PaddedLines, leftcol: int, width: int, palette_size: int) -> SlicedRows:
    """Slice padded table rows and color each column span up to the next column."""
    rows = _slice_rows(padded.lines, leftcol, width)
    for row, starts in enumerate(padded.column_starts):
        offset = rows.offsets[row]
        visible = len(rows.lines[row])
        for index, start in enumerate(starts, start=1):
            end = starts[index] if index < len(starts) else EOL
            span = clip_to_slice(start, end, offset, visible)
            if span is not None:
                rows.highlights.append(Highlight(row, span[0], span[1], color_class(index, palette_size)))
    return rows


def raw_header_rows(
    lines: list[str],
    sep: str,
    max_columns: int,
    leftcol: int,
    width: int,
    palette_size: int,
) -> SlicedRows:
    """Slice raw header lines, coloring fields and marking visible separators."""
    rows = _slice_rows(lines, leftcol, width)
    for row, line in enumerate(lines):
        offset = rows.offsets[row]
        visible = len(rows.lines[row])
        ranges = field_ranges(line, sep, max_columns)
        for index, field_range in enumerate(ranges, start=1):
            span = clip_to_slice(field_range.start, field_range.end, offset, visible)
            if span is not None:
                rows.highlights.append(Highlight(row, span[0], span[1], color_class(index, palette_size)))
            if index < len(ranges) and field_range.end != EOL:
                sep_col = field_range.end - offset
                if 0 <= sep_col < visible:
                    rows.highlights.append(Highlight(row, sep_col, sep_col + 1, SEPARATOR_GROUP))
    return rows


def mirror_cursor_column(
    line: str,
    sep: str,
    max_columns: int,
    offset: int,
    column_starts: list[int],
    slice_offset: int,
) -> int:
    """Map a primary cursor offset to the start of its column in the sliced padded row."""
    index = cursor_column_index(line, sep, max_columns, offset)
    start = column_starts[index - 1] if index - 1 < len(column_starts) else 0
    return max(0, start - slice_offset)


def open_surface(host: SurfaceHost, window_state: WindowState, window_id: int, kind: str, geometry: Geometry) -> Surface | None:
    """Create or reposition the ``kind`` surface of a window.

    Returns ``None`` when the host rejects the geometry; any stale surface of
    that kind is closed so nothing outdated stays on screen.
    """
    existing = getattr(window_state, kind)
    try:
        if host.is_valid(existing):
            return host.configure(existing, geometry)
        surface = host.open(window_id, kind, geometry)
    except SurfaceError as exc:
        logger.debug("skipping %s overlay for window %s: %s", kind, window_id, exc)
        close_surface(host, window_state, kind)
        return None
    setattr(window_state, kind, surface)
    return surface


def close_surface(host: SurfaceHost, window_state: WindowState, kind: str) -> None:
    surface = getattr(window_state, kind)
    if surface is not None:
        host.close(surface)
        setattr(window_state, kind, None)


def _fill_surface(host: SurfaceHost, window_state: WindowState, kind: str, surface: Surface, rows: SlicedRows) -> Surface | None:
    try:
        host.set_content(surface, rows.lines, rows.highlights)
    except SurfaceError as exc:
        logger.debug("dropping %s overlay: %s", kind, exc)
        close_surface(host, window_state, kind)
        return None
    return surface


class Synchronizer:
    """Owns overlay state for every window and runs the refresh pipeline."""

    def __init__(self, config: Config, registry: ViewRegistry | None = None, host: SurfaceHost | None = None) -> None:
        self.config = config
        self.registry = registry if registry is not None else ViewRegistry()
        self.host = host if host is not None else SurfaceHost()

    # -- per-buffer settings -------------------------------------------------

    def buffer_state(self, buffer: Buffer) -> BufferState:
        return self.registry.buffer_state(buffer.id)

    def is_delimited(self, buffer: Buffer) -> bool:
        return classify_buffer(buffer, self.buffer_state(buffer), self.config)

    def separator(self, buffer: Buffer) -> str:
        return resolve_separator(buffer, self.buffer_state(buffer), self.config)

    def header_count(self, buffer: Buffer) -> int:
        return self.buffer_state(buffer).header_count(self.config.default_header_lines)

    def set_header_count(self, buffer: Buffer, count: int) -> int:
        state = self.buffer_state(buffer)
        state.set_header_count(count)
        return state.header_count(self.config.default_header_lines)

    def adjust_header_count(self, buffer: Buffer, delta: int) -> int:
        return self.set_header_count(buffer, self.header_count(buffer) + delta)

    def toggle_header(self, buffer: Buffer) -> int:
        current = self.header_count(buffer)
        default = self.config.default_header_lines or 1
        return self.set_header_count(buffer, 0 if current > 0 else default)

    def clean_active(self, buffer: Buffer) -> bool:
        return bool(self.buffer_state(buffer).clean_active)

    def set_clean_view(self, window: Window, active: bool) -> None:
        self.buffer_state(window.buffer).clean_active = active
        if not active:
            window_state = self.registry.peek_window(window.id)
            if window_state is not None:
                close_surface(self.host, window_state, CLEAN)

    # -- lifecycle -------------------------------------------------------------

    def close_overlays(self, window_id: int) -> None:
        window_state = self.registry.peek_window(window_id)
        if window_state is None:
            return
        close_surface(self.host, window_state, HEADER)
        close_surface(self.host, window_state, CLEAN)

    def window_closed(self, window_id: int) -> None:
        self.close_overlays(window_id)
        self.registry.drop_window(window_id)
        self.host.detach_window(window_id)

    def buffer_closed(self, buffer_id: int) -> None:
        self.registry.drop_buffer(buffer_id)

    # -- rendering ---------------------------------------------------------------

    def refresh(self, window: Window) -> RefreshResult:
        """Recompute highlights and overlays for ``window`` from scratch."""
        buffer = window.buffer
        buffer_state = self.buffer_state(buffer)
        result = RefreshResult()

        if not self.is_delimited(buffer):
            self.close_overlays(window.id)
            return result

        if self.config.auto_enable_clean_view and buffer_state.clean_active is None:
            buffer_state.clean_active = True

        sep = self.separator(buffer)
        result.separator = sep
        top, bottom = window.visible_range()
        if bottom <= top or window.text_width <= 0:
            self.close_overlays(window.id)
            return result

        self.host.attach_window(window.id, window.width, window.height)
        window_state = self.registry.window_state(window.id)
        palette_size = len(self.config.colors)
        result.highlights = highlight_assignments(
            top,
            buffer.get_lines(top, bottom),
            sep,
            self.config.max_columns,
            palette_size,
        )

        header_n = buffer_state.header_count(self.config.default_header_lines)
        wanted = overlay_mode(True, header_n, top, bool(buffer_state.clean_active))

        if wanted in (OverlayMode.CLEAN_ONLY, OverlayMode.HEADER_AND_CLEAN):
            result.clean, result.clean_cursor = self._render_clean_view(window, buffer_state, window_state, sep, top, bottom)
        else:
            close_surface(self.host, window_state, CLEAN)
        if wanted in (OverlayMode.HEADER_ONLY, OverlayMode.HEADER_AND_CLEAN):
            result.header = self._render_header(window, buffer_state, window_state, sep, header_n)
        else:
            close_surface(self.host, window_state, HEADER)
        result.mode = rendered_mode(result.header is not None, result.clean is not None)
        return result

    def _render_header(
        self,
        window: Window,
        buffer_state: BufferState,
        window_state: WindowState,
        sep: str,
        count: int,
    ) -> Surface | None:
        buffer = window.buffer
        upto = min(count, buffer.line_count)
        lines = buffer.get_lines(0, upto)
        text_w = window.text_width
        palette_size = len(self.config.colors)

        if buffer_state.clean_active:
            widths = buffer_state.merged_widths or buffer_state.widths.widths
            if not widths:
                widths = body_widths(buffer, buffer_state, sep, self.config.max_columns, 0, buffer.line_count, True)
            rows = padded_rows(pad_lines(lines, sep, widths), window.leftcol, text_w, palette_size)
        else:
            rows = raw_header_rows(lines, sep, self.config.max_columns, window.leftcol, text_w, palette_size)

        geometry = Geometry(row=0, col=window.textoff, width=max(1, text_w), height=upto, zindex=HEADER_ZINDEX)
        surface = open_surface(self.host, window_state, window.id, HEADER, geometry)
        if surface is None:
            return None
        return _fill_surface(self.host, window_state, HEADER, surface, rows)

    def _render_clean_view(
        self,
        window: Window,
        buffer_state: BufferState,
        window_state: WindowState,
        sep: str,
        top: int,
        bottom: int,
    ) -> tuple[Surface | None, tuple[int, int] | None]:
        buffer = window.buffer
        max_columns = self.config.max_columns
        body = body_widths(buffer, buffer_state, sep, max_columns, top, bottom, self.config.clean_view_full_scan)
        header_n = buffer_state.header_count(self.config.default_header_lines)
        header = header_widths(buffer.get_lines(0, header_n), sep, max_columns) if header_n > 0 else {}
        widths = merge_widths(body, header)
        buffer_state.merged_widths = widths

        padded = pad_lines(buffer.get_lines(top, bottom), sep, widths)
        rows = padded_rows(padded, window.leftcol, window.text_width, len(self.config.colors))

        geometry = Geometry(
            row=0,
            col=window.textoff,
            width=max(1, window.text_width),
            height=max(1, window.height),
            zindex=CLEAN_ZINDEX,
        )
        surface = open_surface(self.host, window_state, window.id, CLEAN, geometry)
        if surface is None:
            return None, None
        if _fill_surface(self.host, window_state, CLEAN, surface, rows) is None:
            return None, None

        cursor_line, cursor_offset = window.cursor
        if not top <= cursor_line < bottom:
            return surface, None
        rel = cursor_line - top
        col = mirror_cursor_column(
            buffer.line(cursor_line),
            sep,
            max_columns,
            cursor_offset,
            padded.column_starts[rel],
            rows.offsets[rel],
        )
        try:
            self.host.set_cursor(surface, rel, col)
        except SurfaceError as exc:
            logger.debug("clean-view cursor not placed: %s", exc)
            return surface, None
        return surface, (rel, col)

