"""Per-buffer and per-window view state with an explicit lifecycle.

Records are created lazily on first access and removed explicitly when the
host reports a buffer or window closing. All mutation happens on the single
event thread, so no locking is involved.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .surfaces import Surface


@dataclass
class WidthCache:
    widths: dict[int, int] = field(default_factory=dict)
    version: int | None = None
    full_scan: bool = False
    separator: str | None = None
    max_columns: int | None = None

    def is_fresh(self, version: int, full_scan: bool, separator: str, max_columns: int) -> bool:
        """Full-scan widths stay valid while content, separator and column cap are unchanged."""
        return (
            full_scan
            and self.full_scan
            and self.version == version
            and self.separator == separator
            and self.max_columns == max_columns
        )

    def store(self, widths: dict[int, int], version: int, full_scan: bool, separator: str, max_columns: int) -> None:
        self.widths = widths
        self.version = version
        self.full_scan = full_scan
        self.separator = separator
        self.max_columns = max_columns


@dataclass
class BufferState:
    """View settings for one delimited-text buffer.

    ``header_lines`` is ``None`` until the user sets it, meaning "use the
    configured default". ``clean_active`` is ``None`` until the clean view is
    switched on or off for the first time.
    """

    separator: str | None = None
    header_lines: int | None = None
    clean_active: bool | None = None
    auto_delimited: bool | None = None
    auto_separator: str | None = None
    widths: WidthCache = field(default_factory=WidthCache)
    merged_widths: dict[int, int] = field(default_factory=dict)

    def header_count(self, default: int) -> int:
        if self.header_lines is None:
            return max(0, default)
        return self.header_lines

    def set_header_count(self, count: int) -> None:
        self.header_lines = max(0, int(count))

    def reset_detection(self) -> None:
        self.auto_delimited = None
        self.auto_separator = None


@dataclass
class WindowState:
    """Overlay surfaces attached to one window.

    Invariant: at most one header and one clean-view surface per window.
    """

    header: Surface | None = None
    clean: Surface | None = None


class ViewRegistry:
    """Owns all per-buffer and per-window state for the process."""

    def __init__(self) -> None:
        self._buffers: dict[int, BufferState] = {}
        self._windows: dict[int, WindowState] = {}

    def buffer_state(self, buffer_id: int) -> BufferState:
        state = self._buffers.get(buffer_id)
        if state is None:
            state = BufferState()
            self._buffers[buffer_id] = state
        return state

    def window_state(self, window_id: int) -> WindowState:
        state = self._windows.get(window_id)
        if state is None:
            state = WindowState()
            self._windows[window_id] = state
        return state

    def peek_window(self, window_id: int) -> WindowState | None:
        return self._windows.get(window_id)

    def drop_buffer(self, buffer_id: int) -> None:
        self._buffers.pop(buffer_id, None)

    def drop_window(self, window_id: int) -> WindowState | None:
        return self._windows.pop(window_id, None)

    def reset_detection(self) -> None:
        """Forget cached auto-detection verdicts so buffers are re-evaluated."""
        for state in self._buffers.values():
            state.reset_detection()

    def buffer_ids(self) -> list[int]:
        return list(self._buffers)

    def window_ids(self) -> list[int]:
        return list(self._windows)
