"""Key handling for the interactive viewer.

Normal-mode keys move the cursor, scroll, and drive the header and
clean-view toggles. ``:`` opens a one-line command prompt whose input is
handed to ``commands.run_command``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .commands import CommandOutcome, run_command, toggle_clean_view
from .document import Window
from .fields import field_ranges
from .key_registry import KeyComboBinding, KeyComboRegistry
from .sync import Synchronizer


@dataclass
class ViewerState:
    window: Window
    prompt_active: bool = False
    prompt_text: str = ""
    message: str = ""
    message_is_warning: bool = False

    def show(self, outcome: CommandOutcome) -> None:
        self.message = outcome.message
        self.message_is_warning = outcome.warning


def next_field_start(line: str, sep: str, max_columns: int, offset: int) -> int:
    """Offset of the first field starting after ``offset``, or ``offset`` if none."""
    for field_range in field_ranges(line, sep, max_columns):
        if field_range.start > offset and field_range.start < len(line):
            return field_range.start
    return offset


def previous_field_start(line: str, sep: str, max_columns: int, offset: int) -> int:
    """Offset of the last field starting before ``offset``, or 0."""
    best = 0
    for field_range in field_ranges(line, sep, max_columns):
        if field_range.start < offset:
            best = field_range.start
    return best


class KeyHandler:
    """Dispatches key tokens against viewer state and the synchronizer."""

    def __init__(self, state: ViewerState, sync: Synchronizer, reload: Callable[[], str] | None = None) -> None:
        self.state = state
        self.sync = sync
        self.reload = reload
        self.registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("j", "DOWN"), lambda: self._move(lines=1)),
            KeyComboBinding(("k", "UP"), lambda: self._move(lines=-1)),
            KeyComboBinding(("h", "LEFT"), lambda: self._move(chars=-1)),
            KeyComboBinding(("l", "RIGHT"), lambda: self._move(chars=1)),
            KeyComboBinding(("w", "TAB"), self._next_field),
            KeyComboBinding(("b",), self._previous_field),
            KeyComboBinding(("0", "HOME"), lambda: self._set_offset(0)),
            KeyComboBinding(("$", "END"), lambda: self._set_offset(len(self._current_line()))),
            KeyComboBinding(("g",), lambda: self._goto_line(0)),
            KeyComboBinding(("G",), lambda: self._goto_line(self.state.window.buffer.line_count - 1)),
            KeyComboBinding(("CTRL_D",), lambda: self._move(lines=max(1, self.state.window.height // 2))),
            KeyComboBinding(("CTRL_U",), lambda: self._move(lines=-max(1, self.state.window.height // 2))),
            KeyComboBinding(("PAGE_DOWN", "CTRL_F", " "), lambda: self._move(lines=max(1, self.state.window.height))),
            KeyComboBinding(("PAGE_UP", "CTRL_B"), lambda: self._move(lines=-max(1, self.state.window.height))),
            KeyComboBinding(("SHIFT_RIGHT", "L"), lambda: self._scroll_columns(1)),
            KeyComboBinding(("SHIFT_LEFT", "H"), lambda: self._scroll_columns(-1)),
            KeyComboBinding(("+",), lambda: self._command("header-inc")),
            KeyComboBinding(("-",), lambda: self._command("header-dec")),
            KeyComboBinding(("t",), lambda: self._command("header-toggle")),
            KeyComboBinding(("C",), self._toggle_clean),
            KeyComboBinding(("R",), self._reload),
            KeyComboBinding(("CTRL_L",), lambda: self._command("refresh")),
            KeyComboBinding((":",), self._open_prompt),
            KeyComboBinding(("q", "CTRL_C"), lambda: True),
        )

    def _current_line(self) -> str:
        window = self.state.window
        return window.buffer.line(window.cursor_line)

    def _move(self, lines: int = 0, chars: int = 0) -> bool:
        self.state.window.move_cursor(lines=lines, chars=chars)
        return False

    def _set_offset(self, offset: int) -> bool:
        window = self.state.window
        window.set_cursor(window.cursor_line, offset)
        return False

    def _goto_line(self, line: int) -> bool:
        window = self.state.window
        window.set_cursor(line, window.cursor_offset)
        return False

    def _next_field(self) -> bool:
        window = self.state.window
        sep = self.sync.separator(window.buffer)
        offset = next_field_start(self._current_line(), sep, self.sync.config.max_columns, window.cursor_offset)
        return self._set_offset(offset)

    def _previous_field(self) -> bool:
        window = self.state.window
        sep = self.sync.separator(window.buffer)
        offset = previous_field_start(self._current_line(), sep, self.sync.config.max_columns, window.cursor_offset)
        return self._set_offset(offset)

    def _scroll_columns(self, direction: int) -> bool:
        window = self.state.window
        window.scroll_horizontal(direction * max(1, window.text_width // 2))
        return False

    def _command(self, line: str) -> bool:
        outcome = run_command(line, self.sync, self.state.window)
        self.state.show(outcome)
        return outcome.quit

    def _toggle_clean(self) -> bool:
        self.state.show(toggle_clean_view(self.sync, self.state.window))
        return False

    def _reload(self) -> bool:
        if self.reload is not None:
            self.state.show(CommandOutcome(self.reload()))
        return False

    def _open_prompt(self) -> bool:
        self.state.prompt_active = True
        self.state.prompt_text = ""
        return False

    def _handle_prompt_key(self, key: str) -> bool:
        state = self.state
        if key == "ESC" or key == "CTRL_C":
            state.prompt_active = False
            state.prompt_text = ""
            return False
        if key == "ENTER":
            line = state.prompt_text
            state.prompt_active = False
            state.prompt_text = ""
            return self._command(line)
        if key == "BACKSPACE":
            if not state.prompt_text:
                state.prompt_active = False
            state.prompt_text = state.prompt_text[:-1]
            return False
        if key == "TAB":
            state.prompt_text += "\t"
        elif len(key) == 1 and key.isprintable():
            state.prompt_text += key
        return False

    def handle(self, key: str) -> bool:
        """Handle one key token and return ``True`` when the viewer should quit.

        Unbound keys are ignored and leave the status message in place.
        """
        if not key:
            return False
        if self.state.prompt_active:
            return self._handle_prompt_key(key)
        if key not in self.registry:
            return False
        self.state.message = ""
        self.state.message_is_warning = False
        result = self.registry.dispatch(key)
        return bool(result)
