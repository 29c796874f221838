"""Display-width measurement and ANSI-aware line shaping.

Widths follow terminal cell rules: tabs expand to the next tab stop,
combining marks take no cells, and East Asian wide/fullwidth characters take
two. Escape sequences never count toward width.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int = 0) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str, start_col: int = 0) -> int:
    """Return the number of cells ``text`` occupies when drawn at ``start_col``."""
    col = start_col
    for ch in text:
        col += char_display_width(ch, col)
    return col - start_col


def slice_ansi_line(text: str, start_cols: int, max_cols: int) -> str:
    """Return the ``[start_cols, start_cols + max_cols)`` cell window of a styled line.

    The most recent SGR sequence seen before the window is re-emitted at the
    window start so the first visible characters keep their color.
    """
    if max_cols <= 0 or not text:
        return ""
    start_cols = max(0, start_cols)

    out: list[str] = []
    col = 0
    shown = 0
    i = 0
    pending_sgr = ""
    injected = False
    while i < len(text) and shown < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                seq = match.group(0)
                if seq.endswith("m"):
                    pending_sgr = seq
                    if col >= start_cols:
                        out.append(seq)
                        injected = True
                elif col >= start_cols:
                    out.append(seq)
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        i += 1
        if col + w <= start_cols:
            col += w
            continue
        if not injected and pending_sgr:
            out.append(pending_sgr)
            injected = True
        if ch == "\t":
            spaces = min(w, max_cols - shown)
            out.append(" " * spaces)
            shown += spaces
            col += w
            continue
        if shown + w > max_cols:
            break
        out.append(ch)
        shown += w
        col += w

    return "".join(out)
