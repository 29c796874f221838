"""Per-column display widths for the clean (padded) view.

Widths are measured on normalized cells (trimmed, one layer of quoting
removed) using terminal cell widths. Full-scan widths are cached on the
buffer state keyed by content version; windowed widths are cheap enough to
recompute on every refresh.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .ansi import display_width
from .document import Buffer
from .fields import normalized_cells
from .state import BufferState

logger = logging.getLogger(__name__)


def column_widths(lines: Iterable[str], sep: str, max_columns: int) -> dict[int, int]:
    """Return ``{column_index: max_width}`` with 1-based contiguous keys."""
    widths: dict[int, int] = {}
    for line in lines:
        for index, cell in enumerate(normalized_cells(line, sep, max_columns), start=1):
            widths[index] = max(widths.get(index, 0), display_width(cell))
    return widths


def merge_widths(*tables: dict[int, int]) -> dict[int, int]:
    """Column-wise maximum of several width tables."""
    merged: dict[int, int] = {}
    for table in tables:
        for index, width in table.items():
            merged[index] = max(merged.get(index, 0), width)
    return merged


def header_widths(header_lines: Iterable[str], sep: str, max_columns: int) -> dict[int, int]:
    """Widths contributed by header lines; lines without ``sep`` are skipped."""
    return column_widths((line for line in header_lines if sep in line), sep, max_columns)


def body_widths(
    buffer: Buffer,
    state: BufferState,
    sep: str,
    max_columns: int,
    top: int,
    bottom: int,
    full_scan: bool,
) -> dict[int, int]:
    """Return body widths for the clean view, using the state's cache.

    Full scans cover every buffer line and are reused while the buffer's
    content version, ``sep`` and ``max_columns`` are unchanged. Windowed scans
    cover ``[top, bottom)``.
    """
    cache = state.widths
    if cache.is_fresh(buffer.version, full_scan, sep, max_columns):
        return cache.widths
    if full_scan:
        logger.debug("full width scan of buffer %s at version %s", buffer.id, buffer.version)
        widths = column_widths(buffer.lines, sep, max_columns)
    else:
        widths = column_widths(buffer.get_lines(top, bottom), sep, max_columns)
    cache.store(widths, buffer.version, full_scan, sep, max_columns)
    return widths
