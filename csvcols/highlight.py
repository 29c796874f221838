"""Text loading, sanitization, and Pygments highlighting for non-delimited files.

Files that are not classified as delimited text are shown as plain source
with syntax colors and no overlays.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
FALLBACK_STYLE = "monokai"


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
        elif code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
        else:
            out.append(ch)
    return "".join(out)


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> TerminalFormatter:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.debug("unknown pygments style %r, using %s", style, FALLBACK_STYLE)
        style = FALLBACK_STYLE
    return TerminalFormatter(style=style)


def highlight_lines(lines: list[str], name: str, style: str = FALLBACK_STYLE) -> list[str]:
    """Return ANSI-colored copies of ``lines`` using the lexer for ``name``.

    The result always has one entry per input line; plain lines are returned
    when no lexer matches the file name.
    """
    if not lines:
        return []
    source = "\n".join(lines)
    try:
        lexer = get_lexer_for_filename(name, source) if name else TextLexer()
    except ClassNotFound:
        return list(lines)
    rendered = pygments_highlight(source, lexer, _formatter_for_style(style))
    colored = rendered.rstrip("\n").split("\n")
    if len(colored) != len(lines):
        logger.debug("highlighted line count mismatch for %s", name)
        return list(lines)
    return colored
