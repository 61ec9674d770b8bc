"""Terminal text measurement for styled lines.

Every line handed to the frame buffer must occupy exactly one terminal row,
so lines are measured (and clipped) by their *visible* width: SGR escape
sequences count as zero columns and wide graphemes count as two.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# SGR / erase sequences emitted by glint.tui.style and the frame buffer
_STRIP_RE = re.compile(r"\x1b\[[0-9;]*[mGKHJ]")

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Return the display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # VS16, ZWJ sequences, skin tones and flags are all drawn double-width
    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first)[0] == "M" or unicodedata.category(first) == "Cf":
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def visible_width(text: str) -> int:
    """Calculate the number of terminal columns *text* occupies.

    ANSI sequences are ignored; ASCII text takes a fast path and other
    strings are measured per grapheme cluster and cached.
    """
    if not text:
        return 0

    stripped = _STRIP_RE.sub("", text)
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


def extract_ansi_code(text: str, pos: int) -> tuple[str, int] | None:
    """Return ``(code, length)`` for a CSI sequence starting at *pos*, else ``None``."""
    if pos + 1 >= len(text) or text[pos] != "\x1b" or text[pos + 1] != "[":
        return None

    i = pos + 2
    while i < len(text):
        ch = text[i]
        if ch in "mGKHJ":
            code = text[pos : i + 1]
            return (code, len(code))
        if not (ch.isdigit() or ch == ";"):
            break
        i += 1
    return None


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Clip *text* to at most *max_width* visible columns.

    When clipping happens *ellipsis* is appended and counts towards the
    width.  Escape sequences before the cut point are preserved.
    """
    if max_width <= 0:
        return ""

    if visible_width(text) <= max_width:
        return text

    target_width = max_width - visible_width(ellipsis)
    if target_width <= 0:
        return _take_columns(ellipsis, max_width)

    return _take_columns(text, target_width) + ellipsis


def _take_columns(text: str, max_cols: int) -> str:
    result: list[str] = []
    cols = 0
    i = 0

    while i < len(text):
        extracted = extract_ansi_code(text, i)
        if extracted is not None:
            code, length = extracted
            result.append(code)
            i += length
            continue

        ch = text[i]
        w = _grapheme_width(ch)
        if cols + w > max_cols:
            break
        result.append(ch)
        cols += w
        i += 1

    return "".join(result)
