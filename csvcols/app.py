"""Viewer runtime: one window onto one file, refreshed on every event.

Each key press, resize, or on-disk change runs a full synchronous refresh
followed by a frame write. Nothing is queued: the latest refresh always
overwrites the previous frame.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .config import Config
from .document import Buffer, Window
from .highlight import highlight_lines, read_text, sanitize_terminal_text
from .input import read_key
from .keys import KeyHandler, ViewerState
from .palette import Palette
from .render import FrameContext, compose_rows, header_controls, write_frame
from .sync import Synchronizer
from .terminal import TerminalController
from .watch import FileWatch

logger = logging.getLogger(__name__)

WATCH_POLL_MS = 500


def load_buffer(path: Path) -> Buffer:
    return Buffer.from_text(sanitize_terminal_text(read_text(path)), name=str(path))


class Viewer:
    """Binds a buffer, its window, and the overlay synchronizer together."""

    def __init__(
        self,
        path: Path,
        config: Config,
        *,
        no_color: bool = False,
        width: int = 80,
        height: int = 24,
        textoff: int = 0,
        buffer: Buffer | None = None,
    ) -> None:
        self.path = path
        self.buffer = buffer if buffer is not None else load_buffer(path)
        self.window = Window(self.buffer, width=width, height=height, textoff=textoff)
        self.sync = Synchronizer(config)
        self.palette = Palette.from_config(config, no_color=no_color)
        self.state = ViewerState(self.window)
        self.keys = KeyHandler(self.state, self.sync, reload=self.reload)
        self._syntax_cache: tuple[int, list[str]] | None = None

    def reload(self) -> str:
        """Re-read the file from disk; the buffer's content version changes."""
        try:
            text = sanitize_terminal_text(read_text(self.path))
        except OSError as exc:
            logger.debug("reload of %s failed", self.path, exc_info=True)
            return f"Reload failed: {exc}"
        self.buffer.set_text(text)
        self.window.set_cursor(self.window.cursor_line, self.window.cursor_offset)
        return "Reloaded"

    def resize(self, columns: int, lines: int) -> None:
        self.window.width = max(1, columns)
        self.window.height = max(1, lines - 1)
        self.window.follow_cursor()

    def _syntax_lines(self) -> list[str]:
        version = self.buffer.version
        if self._syntax_cache is None or self._syntax_cache[0] != version:
            lines = self.buffer.lines
            if self.palette.enabled:
                lines = highlight_lines(lines, self.path.name, self.sync.config.style)
            self._syntax_cache = (version, lines)
        return self._syntax_cache[1]

    def frame(self) -> FrameContext:
        result = self.sync.refresh(self.window)
        delimited = result.separator is not None
        context = FrameContext(
            window=self.window,
            palette=self.palette,
            result=result,
            surfaces=self.sync.host.surfaces_for(self.window.id),
            delimited=delimited,
            syntax_lines=None if delimited else self._syntax_lines(),
            message=self.state.message,
            message_is_warning=self.state.message_is_warning,
        )
        line, offset = self.window.cursor
        context.status_left = f"{self.path} ({line + 1}:{offset + 1}/{self.buffer.line_count})"
        if self.state.prompt_active:
            context.message = ":" + self.state.prompt_text.replace("\t", "\\t")
            context.message_is_warning = False
        if delimited and self.sync.config.show_header_controls:
            context.status_right = header_controls(
                self.sync.header_count(self.buffer),
                self.sync.clean_active(self.buffer),
                result.separator,
            )
        else:
            context.status_right = "│ q quit"
        return context

    def close(self) -> None:
        self.sync.window_closed(self.window.id)
        self.sync.buffer_closed(self.buffer.id)


def render_once(viewer: Viewer, top: int = 0, leftcol: int = 0) -> str:
    """Compose one frame without a terminal, for ``--render`` output."""
    viewer.window.scroll_to(top)
    viewer.window.leftcol = max(0, leftcol)
    viewer.window.cursor_line = viewer.window.top
    viewer.window.cursor_offset = 0
    context = viewer.frame()
    context.show_cursor = False
    rows = [row.rstrip(" ") for row in compose_rows(context)]
    while rows and not rows[-1]:
        rows.pop()
    return "".join(row + "\n" for row in rows)


def run_viewer(viewer: Viewer, terminal: TerminalController, stdin_fd: int) -> None:
    """Run the interactive loop until a quit key or command."""
    watch = FileWatch(viewer.path)
    dirty = True
    last_size: tuple[int, int] | None = None
    try:
        with terminal.raw_mode():
            while True:
                term = shutil.get_terminal_size((80, 24))
                size = (term.columns, term.lines)
                if size != last_size:
                    viewer.resize(*size)
                    last_size = size
                    dirty = True
                if dirty:
                    write_frame(viewer.frame())
                    dirty = False

                key = read_key(stdin_fd, timeout_ms=WATCH_POLL_MS)
                if not key:
                    if watch.changed():
                        viewer.state.message = viewer.reload()
                        dirty = True
                    continue
                if viewer.keys.handle(key):
                    break
                if key == "R":
                    watch.mark_seen()
                dirty = True
    finally:
        viewer.close()
