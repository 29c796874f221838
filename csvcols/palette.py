"""Column color palette as terminal SGR sequences.

Each configured ``#rrggbb`` color becomes a truecolor background or
foreground sequence depending on the coloring mode. Color classes index the
palette directly; separators get a dim gray.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import Config
from .viewport import SEPARATOR_GROUP

RESET = "\033[0m"
SEPARATOR_SGR = "\033[2;38;5;245m"
STATUS_SGR = "\033[7m"
CURSOR_SGR = "\033[7m"
WARNING_SGR = "\033[1;38;5;214m"


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def color_sgr(color: str, mode: str) -> str:
    red, green, blue = hex_to_rgb(color)
    layer = 48 if mode == "bg" else 38
    return f"\033[{layer};2;{red};{green};{blue}m"


@dataclass(frozen=True)
class Palette:
    column_sgrs: tuple[str, ...]
    separator: str = SEPARATOR_SGR
    reset: str = RESET

    @classmethod
    def from_config(cls, config: Config, no_color: bool = False) -> Palette:
        if no_color:
            return cls(column_sgrs=("",) * len(config.colors), separator="", reset="")
        return cls(column_sgrs=tuple(color_sgr(color, config.mode) for color in config.colors))

    @property
    def size(self) -> int:
        return len(self.column_sgrs)

    @property
    def enabled(self) -> bool:
        return bool(self.reset)

    def sgr(self, group: int | str) -> str:
        if group == SEPARATOR_GROUP:
            return self.separator
        return self.column_sgrs[int(group) % max(1, self.size)]
