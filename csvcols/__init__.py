"""Public package surface for csvcols.

Exports ``main`` for programmatic CLI invocation; the parsing and overlay
machinery lives in submodules.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
