"""Accent color for prompt rendering."""

from __future__ import annotations

from enum import Enum


class Color(str, Enum):
    """Foreground colors as SGR parameter strings."""

    BLACK = "30"
    RED = "31"
    GREEN = "32"
    YELLOW = "33"
    BLUE = "34"
    MAGENTA = "35"
    CYAN = "36"
    WHITE = "37"
    GREY = "90"

    @property
    def sgr(self) -> str:
        return f"\x1b[{self.value}m"


DEFAULT_COLOR = Color.YELLOW
