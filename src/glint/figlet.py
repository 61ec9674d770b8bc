"""FIGlet fonts for the glint banner.

Parses ``flf2a`` font files (https://github.com/cmatsuoka/figlet/blob/master/figfont.txt)
and renders text with them in full-width layout: glyph rows are placed side
by side without smushing.  The rendered block always has exactly
``font.height`` rows, which callers rely on to compute cursor offsets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from glint.tui.style import Style

logger = logging.getLogger(__name__)

_SIGNATURE = "flf2a"

# Codes 32..126 followed by the seven "Deutsch" characters, in file order
_REQUIRED_CODES: list[int] = list(range(32, 127))
_DEUTSCH_CODES: list[int] = [196, 214, 220, 228, 246, 252, 223]


class FontError(ValueError):
    """Raised for a malformed FIGlet font."""


@dataclass
class Font:
    height: int
    glyphs: dict[str, list[str]] = field(default_factory=dict)
    baseline: int = 0
    comment: str = ""

    @classmethod
    def from_file(cls, path: str | Path) -> Font:
        """Load a font from an ``.flf`` file.

        Raises ``OSError`` if the file cannot be read and :class:`FontError`
        if it is not a valid font.
        """
        text = Path(path).read_text(encoding="utf-8", errors="replace")
        font = parse_font(text.splitlines())
        logger.debug("loaded font %s (height %d)", path, font.height)
        return font

    def create_block(self) -> list[str]:
        """Return an empty block of ``height`` rows to write glyphs into."""
        return [""] * self.height

    def write(self, block: list[str], text: str, style: Style | None = None) -> None:
        """Append the glyphs for *text* to *block*, styling each glyph row."""
        if len(block) != self.height:
            raise ValueError(
                f"block has {len(block)} rows, font height is {self.height}"
            )
        for ch in text:
            for i, row in enumerate(self._glyph(ch)):
                block[i] += style(row) if style is not None else row

    def render(self, text: str, style: Style | None = None) -> list[str]:
        block = self.create_block()
        self.write(block, text, style)
        return block

    def _glyph(self, ch: str) -> list[str]:
        glyph = self.glyphs.get(ch)
        if glyph is not None:
            return glyph
        # Unknown character: show it as-is on the middle row
        rows = [" "] * self.height
        rows[self.height // 2] = ch
        return rows


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _parse_code(token: str) -> int:
    negative = token.startswith("-")
    digits = token[1:] if negative else token
    if digits.lower().startswith("0x"):
        value = int(digits[2:], 16)
    elif digits.startswith("0") and len(digits) > 1:
        value = int(digits[1:], 8)
    else:
        value = int(digits)
    return -value if negative else value


def _read_glyph(
    lines: Iterator[str], height: int, hardblank: str, code: int
) -> list[str]:
    rows: list[str] = []
    for _ in range(height):
        try:
            line = next(lines)
        except StopIteration:
            raise FontError(f"truncated glyph for character code {code}") from None
        line = line.rstrip("\r\n")
        if line:
            line = line.rstrip(line[-1])
        rows.append(line.replace(hardblank, " "))

    width = max((len(r) for r in rows), default=0)
    return [r.ljust(width) for r in rows]


def parse_font(lines: Iterable[str]) -> Font:
    """Parse the lines of an ``flf2a`` font file."""
    it = iter(lines)
    try:
        header = next(it)
    except StopIteration:
        raise FontError("empty font file") from None

    if not header.startswith(_SIGNATURE) or len(header) <= len(_SIGNATURE):
        raise FontError("missing flf2a signature")

    hardblank = header[len(_SIGNATURE)]
    params = header[len(_SIGNATURE) + 1 :].split()
    if len(params) < 5:
        raise FontError(f"incomplete font header: {header!r}")
    try:
        height, baseline, _max_length, _old_layout, comment_lines = (
            int(p) for p in params[:5]
        )
    except ValueError:
        raise FontError(f"non-numeric font header: {header!r}") from None
    if height < 1:
        raise FontError(f"invalid font height {height}")

    comment: list[str] = []
    for _ in range(comment_lines):
        try:
            comment.append(next(it))
        except StopIteration:
            raise FontError("truncated comment section") from None

    font = Font(height=height, baseline=baseline, comment="\n".join(comment))

    for code in _REQUIRED_CODES:
        font.glyphs[chr(code)] = _read_glyph(it, height, hardblank, code)

    # The Deutsch glyphs are optional in practice; stop quietly if absent
    for code in _DEUTSCH_CODES:
        try:
            font.glyphs[chr(code)] = _read_glyph(it, height, hardblank, code)
        except FontError:
            return font

    for line in it:
        tokens = line.split()
        if not tokens:
            continue
        try:
            code = _parse_code(tokens[0])
        except ValueError:
            raise FontError(f"bad code tag: {line!r}") from None
        glyph = _read_glyph(it, height, hardblank, code)
        if code >= 0:
            font.glyphs[chr(code)] = glyph

    return font


# ---------------------------------------------------------------------------
# Built-in font
# ---------------------------------------------------------------------------

_BUILTIN_GLYPHS: dict[str, list[str]] = {
    " ": ["  ", "  ", "  "],
    "a": ["   ", " _ ", "(_|"],
    "b": ["|  ", "|_ ", "|_)"],
    "c": ["   ", " _ ", "(_ "],
    "d": ["  |", " _|", "(_|"],
    "e": ["   ", " _ ", "(/_"],
    "f": [" _", "|_", "| "],
    "g": ["   ", " _ ", "(_]"],
    "h": ["|  ", "|_ ", "| |"],
    "i": [" ", "o", "|"],
    "j": ["  ", " o", "_|"],
    "k": ["|  ", "|/ ", "|\\ "],
    "l": ["|", "|", "|"],
    "m": ["     ", " _ _ ", "| | |"],
    "n": ["   ", " _ ", "| |"],
    "o": ["   ", " _ ", "(_)"],
    "p": ["   ", " _ ", "|-'"],
    "q": ["    ", " _  ", "(_|_"],
    "r": ["  ", " _", "| "],
    "s": ["  ", " _", "_)"],
    "t": ["   ", "_|_", " | "],
    "u": ["   ", "   ", "|_|"],
    "v": ["  ", "  ", "\\/"],
    "w": ["    ", "    ", "\\/\\/"],
    "x": ["  ", "  ", "><"],
    "y": ["   ", "\\ /", " / "],
    "z": ["  ", "_ ", "/_"],
    "0": [" _ ", "| |", "|_|"],
    "1": ["  ", "/|", " |"],
    "2": [" _ ", " _)", "/__"],
    "3": ["_ ", "_)", "_)"],
    "4": ["   ", "|_|", "  |"],
    "5": [" __", "|_ ", "__)"],
    "6": [" _ ", "|_ ", "|_)"],
    "7": ["__ ", " / ", "/  "],
    "8": [" _ ", "(_)", "(_)"],
    "9": [" _ ", "(_|", "  |"],
    "<": ["  ", " /", " \\"],
    ">": ["  ", "\\ ", "/ "],
    "(": [" /", "| ", " \\"],
    ")": ["\\ ", " |", "/ "],
    "-": ["  ", "__", "  "],
    "_": ["  ", "  ", "__"],
    ".": [" ", " ", "o"],
    ":": [" ", "o", "o"],
    "!": ["|", "|", "o"],
    "/": ["  ", " /", "/ "],
}


def default_font() -> Font:
    """Return the small three-row font used when no font file is configured."""
    glyphs: dict[str, list[str]] = {}
    for ch, rows in _BUILTIN_GLYPHS.items():
        # One column of spacing after every glyph
        padded = [r + " " for r in rows]
        glyphs[ch] = padded
        if ch.isalpha():
            glyphs[ch.upper()] = padded
    return Font(height=3, glyphs=glyphs, baseline=2, comment="glint built-in")
