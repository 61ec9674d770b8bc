"""Tests for glint.tui.utils -- terminal text utilities."""

from __future__ import annotations

from glint.tui.utils import extract_ansi_code, truncate_to_width, visible_width


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


class TestVisibleWidth:
    """Measure the visible terminal width of text."""

    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_ansi_codes_do_not_count(self) -> None:
        assert visible_width("\x1b[34mhi\x1b[39m") == 2

    def test_truecolor_codes_do_not_count(self) -> None:
        assert visible_width("\x1b[38;2;96;218;177m+\x1b[0m") == 1

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert visible_width("世界") == 4

    def test_combining_mark_is_zero_width(self) -> None:
        assert visible_width("é") == 1

    def test_checkbox_glyphs(self) -> None:
        assert visible_width("☑ □ •") == 5


# ---------------------------------------------------------------------------
# extract_ansi_code
# ---------------------------------------------------------------------------


class TestExtractAnsiCode:
    def test_sgr(self) -> None:
        assert extract_ansi_code("a\x1b[31mb", 1) == ("\x1b[31m", 5)

    def test_not_an_escape(self) -> None:
        assert extract_ansi_code("abc", 0) is None


# ---------------------------------------------------------------------------
# truncate_to_width
# ---------------------------------------------------------------------------


class TestTruncateToWidth:
    def test_short_text_unchanged(self) -> None:
        assert truncate_to_width("abc", 10) == "abc"

    def test_truncates_with_ellipsis(self) -> None:
        assert truncate_to_width("abcdefghij", 6) == "abc..."

    def test_truncates_without_ellipsis(self) -> None:
        assert truncate_to_width("abcdefghij", 4, "") == "abcd"

    def test_keeps_escape_codes(self) -> None:
        result = truncate_to_width("\x1b[34mabcdef\x1b[39m", 3, "")
        assert result == "\x1b[34mabc"
        assert visible_width(result) == 3

    def test_wide_char_not_split(self) -> None:
        assert truncate_to_width("a世b", 2, "") == "a"

    def test_zero_width(self) -> None:
        assert truncate_to_width("abc", 0) == ""
