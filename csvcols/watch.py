"""File stat signatures for poll-based reloads of the viewed file."""

from __future__ import annotations

from pathlib import Path


def path_signature(path: Path) -> tuple[str, int, int]:
    """Return a stable stat tuple describing ``path`` existence and metadata."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0)
    except OSError:
        return ("error", 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size)


class FileWatch:
    """Remembers the last seen signature and reports changes once."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._signature = path_signature(path)

    def changed(self) -> bool:
        current = path_signature(self.path)
        if current == self._signature:
            return False
        self._signature = current
        return current[0] == "ok"

    def mark_seen(self) -> None:
        self._signature = path_signature(self.path)
