"""Secondary rendering surfaces (sticky header, clean view) and their host.

The host plays the role of an editor's floating-window API: it places
surfaces relative to a window and rejects geometry that does not fit, raising
``SurfaceError``. Surfaces with a higher ``zindex`` are drawn in front.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import NamedTuple

from .errors import SurfaceError
from .viewport import Highlight

HEADER_ZINDEX = 50
CLEAN_ZINDEX = 40

_SURFACE_IDS = itertools.count(1)


class Geometry(NamedTuple):
    row: int
    col: int
    width: int
    height: int
    zindex: int


@dataclass
class Surface:
    window_id: int
    kind: str
    geometry: Geometry
    lines: list[str] = field(default_factory=list)
    highlights: list[Highlight] = field(default_factory=list)
    cursor: tuple[int, int] | None = None
    id: int = field(default_factory=lambda: next(_SURFACE_IDS))


class SurfaceHost:
    """In-process compositor bookkeeping for all open surfaces."""

    def __init__(self) -> None:
        self._surfaces: dict[int, Surface] = {}
        self._window_sizes: dict[int, tuple[int, int]] = {}

    def attach_window(self, window_id: int, width: int, height: int) -> None:
        """Record the current size of ``window_id`` for geometry validation."""
        self._window_sizes[window_id] = (width, height)

    def detach_window(self, window_id: int) -> None:
        self._window_sizes.pop(window_id, None)
        for surface in self.surfaces_for(window_id):
            self.close(surface)

    def _validate(self, window_id: int, geometry: Geometry) -> None:
        size = self._window_sizes.get(window_id)
        if size is None:
            raise SurfaceError(f"window {window_id} is not attached")
        width, height = size
        if geometry.width < 1 or geometry.height < 1:
            raise SurfaceError(f"surface size must be positive: {geometry}")
        if geometry.row < 0 or geometry.col < 0:
            raise SurfaceError(f"surface position must be non-negative: {geometry}")
        if geometry.col + geometry.width > width or geometry.row + geometry.height > height:
            raise SurfaceError(f"surface does not fit window {width}x{height}: {geometry}")

    def open(self, window_id: int, kind: str, geometry: Geometry) -> Surface:
        self._validate(window_id, geometry)
        surface = Surface(window_id=window_id, kind=kind, geometry=geometry)
        self._surfaces[surface.id] = surface
        return surface

    def configure(self, surface: Surface, geometry: Geometry) -> Surface:
        if not self.is_valid(surface):
            raise SurfaceError(f"surface {surface.id} is closed")
        self._validate(surface.window_id, geometry)
        surface.geometry = geometry
        return surface

    def set_content(self, surface: Surface, lines: list[str], highlights: list[Highlight]) -> None:
        if not self.is_valid(surface):
            raise SurfaceError(f"surface {surface.id} is closed")
        surface.lines = list(lines)
        surface.highlights = list(highlights)

    def set_cursor(self, surface: Surface, row: int, col: int) -> None:
        if not 0 <= row < max(1, len(surface.lines)):
            raise SurfaceError(f"cursor row {row} outside surface {surface.id}")
        surface.cursor = (row, max(0, col))

    def close(self, surface: Surface) -> None:
        self._surfaces.pop(surface.id, None)

    def is_valid(self, surface: Surface | None) -> bool:
        return surface is not None and surface.id in self._surfaces

    def surfaces_for(self, window_id: int) -> list[Surface]:
        """Return open surfaces for a window, back to front."""
        found = [surface for surface in self._surfaces.values() if surface.window_id == window_id]
        return sorted(found, key=lambda surface: surface.geometry.zindex)
