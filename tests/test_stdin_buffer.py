"""Tests for glint.tui.stdin_buffer.StdinBuffer."""

from __future__ import annotations

from glint.tui.stdin_buffer import (
    BRACKETED_PASTE_END,
    BRACKETED_PASTE_START,
    ESC,
    StdinBuffer,
    _extract_complete_sequences,
    _is_complete_sequence,
)


# ---------------------------------------------------------------------------
# Sequence classification
# ---------------------------------------------------------------------------


class TestIsCompleteSequence:
    def test_plain_text(self) -> None:
        assert _is_complete_sequence("a") == "not-escape"

    def test_lone_escape_is_incomplete(self) -> None:
        assert _is_complete_sequence(ESC) == "incomplete"

    def test_csi(self) -> None:
        assert _is_complete_sequence("\x1b[") == "incomplete"
        assert _is_complete_sequence("\x1b[1;5") == "incomplete"
        assert _is_complete_sequence("\x1b[A") == "complete"
        assert _is_complete_sequence("\x1b[1;5A") == "complete"

    def test_ss3(self) -> None:
        assert _is_complete_sequence("\x1bO") == "incomplete"
        assert _is_complete_sequence("\x1bOA") == "complete"

    def test_meta_key(self) -> None:
        assert _is_complete_sequence("\x1bd") == "complete"


class TestExtractCompleteSequences:
    def test_splits_mixed_input(self) -> None:
        seqs, rest = _extract_complete_sequences("a\x1b[Ab ")
        assert seqs == ["a", "\x1b[A", "b", " "]
        assert rest == ""

    def test_keeps_partial_tail(self) -> None:
        seqs, rest = _extract_complete_sequences("x\x1b[1;")
        assert seqs == ["x"]
        assert rest == "\x1b[1;"


# ---------------------------------------------------------------------------
# StdinBuffer
# ---------------------------------------------------------------------------


class TestStdinBuffer:
    def test_default_timeout(self) -> None:
        assert StdinBuffer().timeout == 0.01

    def test_several_keys_in_one_chunk(self) -> None:
        buf = StdinBuffer()
        assert buf.process(" \x1b[B\r") == [" ", "\x1b[B", "\r"]

    def test_split_escape_sequence(self) -> None:
        buf = StdinBuffer()
        assert buf.process("\x1b[") == []
        assert buf.has_pending()
        assert buf.process("A") == ["\x1b[A"]
        assert not buf.has_pending()

    def test_lone_escape_waits_for_flush(self) -> None:
        buf = StdinBuffer()
        assert buf.process(ESC) == []
        assert buf.get_buffer() == ESC
        assert buf.flush() == [ESC]
        assert buf.flush() == []

    def test_bracketed_paste_is_one_sequence(self) -> None:
        buf = StdinBuffer()
        pasted = BRACKETED_PASTE_START + "d d\r" + BRACKETED_PASTE_END
        assert buf.process("x" + pasted + "y") == ["x", pasted, "y"]

    def test_paste_across_chunks(self) -> None:
        buf = StdinBuffer()
        assert buf.process(BRACKETED_PASTE_START + "ab") == []
        assert buf.process("c" + BRACKETED_PASTE_END) == [
            BRACKETED_PASTE_START + "abc" + BRACKETED_PASTE_END
        ]

    def test_clear(self) -> None:
        buf = StdinBuffer()
        buf.process(BRACKETED_PASTE_START + "partial")
        buf.clear()
        assert buf.process("a") == ["a"]
