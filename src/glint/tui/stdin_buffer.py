"""StdinBuffer splits raw stdin chunks into complete input sequences.

Reads from a raw-mode terminal can return several keypresses at once or
stop in the middle of an escape sequence.  Without buffering, a partial
``ESC [ A`` would be misread as an Escape keypress followed by ``[`` and
``A``.  The buffer is synchronous: callers feed it whatever ``os.read``
returned and receive the sequences that are complete so far.  A lone
trailing ESC stays pending until the caller decides (after ``timeout``
seconds without further input) to :meth:`StdinBuffer.flush` it.
"""

from __future__ import annotations

import re

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> str:
    """Check if a string is a complete escape sequence or needs more data.

    Returns 'complete', 'incomplete', or 'not-escape'.
    """
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI sequences: ESC [
    if after_esc.startswith("["):
        if after_esc.startswith("[M"):
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # OSC sequences: ESC ]
    if after_esc.startswith("]"):
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"

    # SS3 sequences: ESC O
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta key sequences: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> str:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    if not 0x40 <= ord(payload[-1]) <= 0x7E:
        return "incomplete"

    if payload.startswith("<"):
        if _SGR_MOUSE_RE.match(payload):
            return "complete"
        return "incomplete" if payload[-1] not in ("M", "m") else "complete"

    return "complete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split accumulated buffer into complete sequences.

    Returns (sequences, remainder).
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        for seq_end in range(1, len(remaining) + 1):
            candidate = remaining[:seq_end]
            if _is_complete_sequence(candidate) == "complete":
                sequences.append(candidate)
                pos += seq_end
                break
        else:
            return sequences, remaining

    return sequences, ""


class StdinBuffer:
    """Buffers stdin input and returns complete sequences.

    A bracketed paste is returned as one sequence, still wrapped in its
    start/end markers, so pasted text is never interpreted as keypresses.
    """

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._buffer: str = ""
        self._timeout: float = timeout
        self._paste_mode: bool = False
        self._paste_buffer: str = ""

    @property
    def timeout(self) -> float:
        """Seconds to wait for the rest of an incomplete escape sequence."""
        return self._timeout

    def process(self, data: str) -> list[str]:
        """Feed input data into the buffer and return completed sequences."""
        out: list[str] = []
        self._buffer += data

        while self._buffer:
            if self._paste_mode:
                self._paste_buffer += self._buffer
                self._buffer = ""
                end_index = self._paste_buffer.find(BRACKETED_PASTE_END)
                if end_index == -1:
                    break
                out.append(
                    BRACKETED_PASTE_START
                    + self._paste_buffer[:end_index]
                    + BRACKETED_PASTE_END
                )
                self._buffer = self._paste_buffer[
                    end_index + len(BRACKETED_PASTE_END) :
                ]
                self._paste_mode = False
                self._paste_buffer = ""
                continue

            start_index = self._buffer.find(BRACKETED_PASTE_START)
            if start_index != -1:
                sequences, _ = _extract_complete_sequences(
                    self._buffer[:start_index]
                )
                out.extend(sequences)
                self._buffer = self._buffer[
                    start_index + len(BRACKETED_PASTE_START) :
                ]
                self._paste_mode = True
                continue

            sequences, remainder = _extract_complete_sequences(self._buffer)
            out.extend(sequences)
            self._buffer = remainder
            break

        return out

    def has_pending(self) -> bool:
        """Return ``True`` if an incomplete sequence is waiting for more data."""
        return bool(self._buffer)

    def flush(self) -> list[str]:
        """Give up waiting and return the pending bytes as one sequence."""
        if not self._buffer:
            return []

        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""

    def get_buffer(self) -> str:
        return self._buffer
