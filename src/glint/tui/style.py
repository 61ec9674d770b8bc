"""Colour strategies for terminal text.

A ``Style`` is a pure function that wraps text in ANSI SGR sequences.
Styles are passed explicitly to whoever renders text (the banner font,
the checklist rows) so there is no shared styling state.
"""

from __future__ import annotations

from typing import Callable

Style = Callable[[str], str]

RESET = "\x1b[0m"

_FG_DEFAULT = "\x1b[39m"


def fg(code: int) -> Style:
    """Foreground colour from the basic 8/16 colour palette (30-37, 90-97)."""
    prefix = f"\x1b[{code}m"

    def _apply(text: str) -> str:
        return f"{prefix}{text}{_FG_DEFAULT}"

    return _apply


def rgb(r: int, g: int, b: int) -> Style:
    """24-bit foreground colour."""
    prefix = f"\x1b[38;2;{r};{g};{b}m"

    def _apply(text: str) -> str:
        return f"{prefix}{text}{_FG_DEFAULT}"

    return _apply


BLUE = fg(34)
MAGENTA = fg(35)
WHITE = fg(37)