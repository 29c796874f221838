"""User commands entered at the ``:`` prompt.

Each command acts on the current window's buffer through the
``Synchronizer``. Bad arguments are rejected with a warning and leave all
state unchanged; nothing here raises into the event loop.
"""

from __future__ import annotations

import math
import shlex
from collections.abc import Callable
from dataclasses import dataclass

from .config import parse_header_count, parse_switch, save_settings
from .document import Window
from .errors import ConfigError
from .sync import Synchronizer

PERSISTED_SWITCHES = (
    "auto_detect_separator",
    "auto_enable_any_buffer",
    "auto_enable_clean_view",
)


@dataclass(frozen=True)
class CommandOutcome:
    message: str = ""
    warning: bool = False
    quit: bool = False


CommandHandler = Callable[[Synchronizer, Window, list[str]], CommandOutcome]


def _parse_delta(args: list[str]) -> int:
    if not args:
        return 1
    try:
        value = float(args[0])
    except ValueError as exc:
        raise ConfigError(f"expected a number, got {args[0]!r}") from exc
    if not math.isfinite(value):
        raise ConfigError(f"expected a number, got {args[0]!r}")
    return math.floor(value)


def _single_arg(args: list[str], usage: str) -> str:
    if len(args) != 1:
        raise ConfigError(f"usage: {usage}")
    return args[0]


def _header(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    if not args:
        return CommandOutcome(f"Header lines: {sync.header_count(window.buffer)}")
    count = sync.set_header_count(window.buffer, parse_header_count(args[0]))
    return CommandOutcome(f"Header lines: {count}")


def _header_inc(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    count = sync.adjust_header_count(window.buffer, _parse_delta(args))
    return CommandOutcome(f"Header lines: {count}")


def _header_dec(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    count = sync.adjust_header_count(window.buffer, -_parse_delta(args))
    return CommandOutcome(f"Header lines: {count}")


def _header_toggle(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    count = sync.toggle_header(window.buffer)
    return CommandOutcome(f"Header lines: {count}")


def _refresh(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    sync.refresh(window)
    return CommandOutcome()


def _clear(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    sync.close_overlays(window.id)
    return CommandOutcome("Overlays cleared")


def toggle_clean_view(sync: Synchronizer, window: Window, args: list[str] | None = None) -> CommandOutcome:
    if not sync.is_delimited(window.buffer):
        return CommandOutcome("Clean view is only available for CSV/TSV buffers", warning=True)
    active = not sync.clean_active(window.buffer)
    sync.set_clean_view(window, active)
    return CommandOutcome(f"Clean view: {'on' if active else 'off'}")


def _autosep_toggle(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    enabled = not sync.config.auto_detect_separator
    sync.config = sync.config.with_overrides({"auto_detect_separator": enabled})
    return CommandOutcome(f"auto separator detection: {'ON' if enabled else 'OFF'}")


def _switch_command(option: str, usage: str, label: str, reset_detection: bool = False) -> CommandHandler:
    def handler(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
        enabled = parse_switch(_single_arg(args, usage))
        sync.config = sync.config.with_overrides({option: enabled})
        if reset_detection:
            sync.registry.reset_detection()
        return CommandOutcome(f"{label}: {'ON' if enabled else 'OFF'}")

    return handler


def _sep(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    state = sync.buffer_state(window.buffer)
    if not args:
        return CommandOutcome(f"Separator: {sync.separator(window.buffer)!r}")
    raw = args[0]
    if raw.lower() in {"tab", "\\t"}:
        raw = "\t"
    elif raw.lower() == "auto":
        state.separator = None
        return CommandOutcome("Separator: auto")
    if len(raw) != 1:
        raise ConfigError("sep expects a single character, 'tab' or 'auto'")
    state.separator = raw
    return CommandOutcome(f"Separator: {raw!r}")


def _save(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    save_settings(sync.config, PERSISTED_SWITCHES)
    return CommandOutcome("Settings saved")


def _quit(sync: Synchronizer, window: Window, args: list[str]) -> CommandOutcome:
    return CommandOutcome(quit=True)


COMMANDS: dict[str, CommandHandler] = {
    "header": _header,
    "header-inc": _header_inc,
    "header-dec": _header_dec,
    "header-toggle": _header_toggle,
    "refresh": _refresh,
    "clear": _clear,
    "clean-toggle": toggle_clean_view,
    "autosep-toggle": _autosep_toggle,
    "autosep": _switch_command("auto_detect_separator", "autosep {on|off}", "auto separator detection"),
    "autoenable": _switch_command(
        "auto_enable_any_buffer",
        "autoenable {on|off}",
        "auto CSV detection",
        reset_detection=True,
    ),
    "autoclean": _switch_command("auto_enable_clean_view", "autoclean {on|off}", "auto clean view"),
    "sep": _sep,
    "save": _save,
    "q": _quit,
    "quit": _quit,
}


def run_command(line: str, sync: Synchronizer, window: Window) -> CommandOutcome:
    """Parse and execute one command line."""
    try:
        words = shlex.split(line)
    except ValueError as exc:
        return CommandOutcome(str(exc), warning=True)
    if not words:
        return CommandOutcome()
    name, args = words[0], words[1:]
    handler = COMMANDS.get(name)
    if handler is None:
        return CommandOutcome(f"Unknown command: {name}", warning=True)
    try:
        return handler(sync, window, args)
    except ConfigError as exc:
        return CommandOutcome(str(exc), warning=True)
