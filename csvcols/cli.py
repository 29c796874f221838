"""Command-line front door for csvcols.

Parses options, builds the configuration (defaults, then the persisted
override file, then command-line flags) and either prints one rendered frame
or starts the interactive viewer.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .app import Viewer, render_once, run_viewer
from .config import Config, load_settings
from .errors import ConfigError
from .terminal import TerminalController


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _separator(value: str) -> str:
    if value.lower() in {"tab", "\\t"}:
        return "\t"
    if len(value) != 1:
        raise argparse.ArgumentTypeError("separator must be a single character or 'tab'")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csvcols",
        description="View CSV/TSV files with colored columns, a sticky header and a padded clean view.",
    )
    parser.add_argument("path", help="File to view.")
    parser.add_argument("--separator", type=_separator, default=None, help="Field separator (default: detect).")
    parser.add_argument("--header-lines", type=_nonnegative_int, default=None, help="Sticky header line count.")
    parser.add_argument("--clean", action="store_true", help="Start in clean (padded) view.")
    parser.add_argument("--full-scan", action="store_true", help="Compute clean-view widths from the whole file.")
    parser.add_argument("--mode", choices=("bg", "fg"), default=None, help="Color column backgrounds or text.")
    parser.add_argument("--max-columns", type=_positive_int, default=None, help="Soft cap on columns per line.")
    parser.add_argument("--number", action="store_true", help="Show a line-number gutter.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--render", action="store_true", help="Print one rendered frame and exit.")
    parser.add_argument("--width", type=_positive_int, default=None, help="Frame width for --render.")
    parser.add_argument("--height", type=_positive_int, default=None, help="Frame height for --render.")
    parser.add_argument("--top", type=_nonnegative_int, default=0, help="First visible line for --render.")
    parser.add_argument("--leftcol", type=_nonnegative_int, default=0, help="Horizontal scroll for --render.")
    parser.add_argument("--log-file", default=None, help="Write debug logs to this file.")
    return parser


def config_from_args(args: argparse.Namespace, base: Config) -> Config:
    overrides: dict[str, object] = {}
    if args.header_lines is not None:
        overrides["default_header_lines"] = args.header_lines
    if args.full_scan:
        overrides["clean_view_full_scan"] = True
    if args.mode is not None:
        overrides["mode"] = args.mode
    if args.max_columns is not None:
        overrides["max_columns"] = args.max_columns
    return base.with_overrides(overrides)


def _configure_logging(log_file: str | None) -> None:
    if not log_file:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    root = logging.getLogger("csvcols")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def gutter_width(line_count: int) -> int:
    return len(str(max(1, line_count))) + 1


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and render or view the given file."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_file)

    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")
    try:
        config = config_from_args(args, load_settings())
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc

    term = shutil.get_terminal_size((80, 24))
    viewer = Viewer(path, config, no_color=args.no_color or (not args.render and not sys.stdout.isatty()))
    if args.number:
        viewer.window.textoff = gutter_width(viewer.buffer.line_count)
    if args.separator is not None:
        viewer.sync.buffer_state(viewer.buffer).separator = args.separator
    if args.clean:
        viewer.sync.buffer_state(viewer.buffer).clean_active = True

    if args.render:
        viewer.window.width = args.width or term.columns
        viewer.window.height = args.height or max(1, viewer.buffer.line_count - args.top)
        sys.stdout.write(render_once(viewer, top=args.top, leftcol=args.leftcol))
        return

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("Interactive mode needs a terminal; use --render for plain output.")
    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    run_viewer(viewer, terminal, sys.stdin.fileno())


if __name__ == "__main__":
    main()
