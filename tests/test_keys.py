"""Tests for glint.tui.keys -- keyboard input parsing and matching."""

from __future__ import annotations

import pytest

from glint.tui.keys import (
    LEGACY_KEY_SEQUENCES,
    matches_key,
    normalize_key_id,
    parse_key,
)


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


class TestParseKey:
    @pytest.mark.parametrize("seq, expected", sorted(LEGACY_KEY_SEQUENCES.items()))
    def test_legacy_sequences(self, seq: str, expected: str) -> None:
        assert parse_key(seq) == expected

    @pytest.mark.parametrize(
        "data, expected",
        [
            ("\x1b", "escape"),
            ("\r", "enter"),
            ("\n", "enter"),
            ("\t", "tab"),
            (" ", "space"),
            ("\x7f", "backspace"),
            ("\x1b[Z", "shift+tab"),
            ("\x03", "ctrl+c"),
            ("d", "d"),
            ("D", "D"),
            ("é", "é"),
        ],
    )
    def test_single_keys(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_modified_arrows(self) -> None:
        assert parse_key("\x1b[1;5A") == "ctrl+up"
        assert parse_key("\x1b[1;2B") == "shift+down"
        assert parse_key("\x1b[1;3C") == "alt+right"

    def test_alt_prefix(self) -> None:
        assert parse_key("\x1bd") == "alt+d"
        assert parse_key("\x1b\x03") == "ctrl+alt+c"

    def test_unknown_input(self) -> None:
        assert parse_key("") is None
        assert parse_key("\x1b[200~pasted\x1b[201~") is None
        assert parse_key("abc") is None


# ---------------------------------------------------------------------------
# normalize_key_id / matches_key
# ---------------------------------------------------------------------------


class TestMatchesKey:
    def test_normalize_aliases(self) -> None:
        assert normalize_key_id("esc") == "escape"
        assert normalize_key_id("Return") == "enter"
        assert normalize_key_id("UP") == "up"
        assert normalize_key_id("pageUp") == "pageUp"

    def test_normalize_modifier_order(self) -> None:
        assert normalize_key_id("alt+ctrl+x") == "ctrl+alt+x"
        assert normalize_key_id("Shift+Ctrl+up") == "ctrl+shift+up"

    def test_matches(self) -> None:
        assert matches_key("\x03", "ctrl+c")
        assert matches_key(" ", "space")
        assert matches_key("\x1b[A", "up")
        assert matches_key("\x1b", "esc")
        assert matches_key("\r", "enter")

    def test_letters_are_case_sensitive(self) -> None:
        assert matches_key("d", "d")
        assert not matches_key("D", "d")

    def test_no_match(self) -> None:
        assert not matches_key("x", "d")
        assert not matches_key("\x1b[B", "up")
