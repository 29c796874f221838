"""Separator detection and delimited-buffer classification.

``detect_separator`` samples non-blank lines and picks the candidate with the
highest raw occurrence count. Classification first trusts the declared
filetype and file name, then falls back to content heuristics whose
thresholds all come from ``Config``.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable, Sequence
from pathlib import PurePath

from .config import Config
from .document import Buffer
from .state import BufferState

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = ","
TAB = "\t"


def is_blank(line: str) -> bool:
    return not line.strip()


def count_occurrences(line: str, sep: str) -> int:
    """Count raw separator occurrences, ignoring quoting."""
    return line.count(sep)


def detect_separator(
    lines: Iterable[str],
    candidates: Sequence[str],
    nonempty_limit: int = 10,
    max_lines: int | None = None,
) -> str | None:
    """Return the most frequent candidate across sampled non-blank lines.

    At most ``max_lines`` lines are read and sampling stops after
    ``nonempty_limit`` non-blank lines. Ties go to the earlier candidate.
    Returns ``None`` when no candidate occurs at all.
    """
    counts = {candidate: 0 for candidate in candidates}
    nonempty = 0
    for scanned, line in enumerate(lines):
        if max_lines is not None and scanned >= max_lines:
            break
        if is_blank(line):
            continue
        for candidate in counts:
            counts[candidate] += count_occurrences(line, candidate)
        nonempty += 1
        if nonempty >= nonempty_limit:
            break

    best: str | None = None
    best_count = 0
    for candidate in candidates:
        if counts[candidate] > best_count:
            best, best_count = candidate, counts[candidate]
    return best


def looks_columnar(lines: Iterable[str], min_columns: int, agree_level: float) -> bool:
    """Return whether enough non-blank lines split into ``min_columns`` words."""
    nonempty = 0
    agree = 0
    for line in lines:
        if is_blank(line):
            continue
        nonempty += 1
        if len(line.split()) >= min_columns:
            agree += 1
    if nonempty == 0:
        return False
    return agree / nonempty >= agree_level


def is_probably_delimited(
    lines: Sequence[str],
    candidates: Sequence[str],
    *,
    detect_nonempty_limit: int = 10,
    detect_max_lines: int = 200,
    probe_lines: int = 200,
    min_columns: int = 2,
    agree_level: float = 0.7,
    nonempty_limit: int = 20,
) -> tuple[bool, str | None]:
    """Decide whether ``lines`` look like delimited text and with which separator.

    A buffer qualifies when a separator is detected and at least
    ``agree_level`` of the sampled non-blank lines split into
    ``min_columns`` or more fields on it.
    """
    sep = detect_separator(lines, candidates, detect_nonempty_limit, detect_max_lines)
    if sep is None:
        return False, None

    nonempty = 0
    agree = 0
    for line in lines[:probe_lines]:
        if is_blank(line):
            continue
        nonempty += 1
        occurrences = count_occurrences(line, sep)
        fields = occurrences + 1 if occurrences > 0 else 1
        if fields >= min_columns:
            agree += 1
        if nonempty >= nonempty_limit:
            break

    if nonempty == 0:
        return False, None
    return agree / nonempty >= agree_level, sep


def is_delimited_name(filetype: str, name: str, filetypes: Sequence[str], patterns: Sequence[str]) -> bool:
    """Fast path: declared filetype or a file name matching one of ``patterns``."""
    if filetype and filetype in filetypes:
        return True
    basename = PurePath(name).name.lower() if name else ""
    if not basename:
        return False
    return any(fnmatch.fnmatchcase(basename, pattern.lower()) for pattern in patterns)


def classify_buffer(buffer: Buffer, state: BufferState, config: Config) -> bool:
    """Return whether ``buffer`` should be treated as delimited text.

    The content heuristic only runs for buffers outside the fast path and
    its verdict is cached on ``state`` until detection is reset.
    """
    if is_delimited_name(buffer.filetype or "", buffer.name, config.filetypes, config.patterns):
        return True
    if not config.auto_enable_any_buffer:
        return False
    if state.auto_delimited is not None:
        return state.auto_delimited
    if not looks_columnar(buffer.lines, config.auto_enable_num_columns, config.auto_enable_agree_level):
        return False

    delimited, sep = is_probably_delimited(
        buffer.lines,
        config.detect_candidates,
        detect_nonempty_limit=config.detect_nonempty_limit,
        detect_max_lines=config.detect_max_lines,
        probe_lines=config.auto_enable_probe_lines,
        min_columns=config.auto_enable_min_columns,
        agree_level=config.auto_enable_min_agree,
        nonempty_limit=config.auto_enable_nonempty,
    )
    state.auto_delimited = delimited
    state.auto_separator = sep if delimited else None
    logger.debug("buffer %s auto-classified delimited=%s sep=%r", buffer.id, delimited, sep)
    return delimited


def resolve_separator(buffer: Buffer, state: BufferState, config: Config) -> str:
    """Pick the separator for ``buffer``.

    Precedence: explicit user choice, heuristic result, TSV filetype or name,
    content detection (when enabled), then ``,``.
    """
    if state.separator:
        return state.separator
    if state.auto_separator:
        return state.auto_separator
    if buffer.filetype == "tsv" or buffer.name.lower().endswith(".tsv"):
        return TAB
    if config.auto_detect_separator:
        guessed = detect_separator(
            buffer.lines,
            config.detect_candidates,
            config.detect_nonempty_limit,
            config.detect_max_lines,
        )
        if guessed is not None:
            return guessed
    return DEFAULT_SEPARATOR
